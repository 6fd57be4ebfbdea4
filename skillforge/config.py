"""Runtime settings.

Values come from environment variables first, then from an optional
``config.json`` in the SkillForge home directory, then from defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

from skillforge.constants import (
    APP_NAME,
    CONFIG_FILENAME,
    DEFAULT_CAPTURE_COMMAND,
    DEFAULT_MAX_INLINE_BYTES,
    DEFAULT_MODEL,
    HISTORY_FILENAME,
)
from skillforge.errors import ConfigError
from skillforge.utils import read_json_safe


@dataclass(frozen=True)
class Settings:
    home: Path
    history_path: Path
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    max_inline_bytes: int = DEFAULT_MAX_INLINE_BYTES
    capture_command: tuple[str, ...] = field(default=DEFAULT_CAPTURE_COMMAND)

    @property
    def config_path(self) -> Path:
        return self.home / CONFIG_FILENAME


def default_home(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    explicit = env.get("SKILLFORGE_HOME")
    if explicit:
        return Path(explicit).expanduser()
    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base / APP_NAME


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        return int(env.get(key, str(default)))
    except ValueError:
        return default


def _load_file(path: Path) -> dict[str, Any]:
    payload, error = read_json_safe(path)
    if error is not None:
        raise ConfigError(path, error)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ConfigError(path, "expected a JSON object")
    return payload


def _capture_command(path: Path, raw: Any) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_CAPTURE_COMMAND
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise ConfigError(path, "capture_command must be a list of strings")
    if not any("{output}" in item for item in raw):
        raise ConfigError(path, "capture_command must contain an {output} placeholder")
    return tuple(raw)


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if environ is None else environ
    home = default_home(env)
    config_path = home / CONFIG_FILENAME
    file_values = _load_file(config_path)

    api_key = (
        env.get("GEMINI_API_KEY")
        or env.get("GOOGLE_API_KEY")
        or file_values.get("api_key")
        or None
    )
    model = env.get("SKILLFORGE_MODEL") or str(file_values.get("model", DEFAULT_MODEL))

    history_raw = env.get("SKILLFORGE_HISTORY") or file_values.get("history_path")
    history_path = (
        Path(str(history_raw)).expanduser() if history_raw else home / HISTORY_FILENAME
    )

    file_max = file_values.get("max_inline_bytes", DEFAULT_MAX_INLINE_BYTES)
    if not isinstance(file_max, int) or isinstance(file_max, bool):
        raise ConfigError(config_path, "max_inline_bytes must be an integer")
    max_inline_bytes = _env_int(env, "SKILLFORGE_MAX_INLINE_BYTES", file_max)

    return Settings(
        home=home,
        history_path=history_path,
        api_key=str(api_key) if api_key else None,
        model=model,
        max_inline_bytes=max_inline_bytes,
        capture_command=_capture_command(config_path, file_values.get("capture_command")),
    )
