from typing import Final


APP_NAME: Final[str] = "skillforge"

SKILL_FILENAME: Final[str] = "SKILL.md"
ARCHIVE_SUFFIX: Final[str] = ".zip"

SCRIPTS_DIRNAME: Final[str] = "scripts"
REFERENCES_DIRNAME: Final[str] = "references"
ASSETS_DIRNAME: Final[str] = "assets"

CONFIG_FILENAME: Final[str] = "config.json"
HISTORY_FILENAME: Final[str] = "history.json"
HISTORY_FORMAT_VERSION: Final[int] = 1

DEFAULT_MODEL: Final[str] = "gemini-2.5-flash"
DEFAULT_MAX_INLINE_BYTES: Final[int] = 20 * 1024 * 1024

ACCEPTED_MIME_PREFIXES: Final[tuple[str, ...]] = (
    "video/",
    "image/",
)
ACCEPTED_MIME_TYPES: Final[tuple[str, ...]] = ("application/pdf",)

DEFAULT_CAPTURE_MIME_TYPE: Final[str] = "video/webm"
DEFAULT_CAPTURE_COMMAND: Final[tuple[str, ...]] = (
    "ffmpeg",
    "-loglevel",
    "error",
    "-y",
    "-f",
    "x11grab",
    "-framerate",
    "10",
    "-i",
    ":0.0",
    "-c:v",
    "libvpx-vp9",
    "{output}",
)
