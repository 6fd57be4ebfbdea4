"""Persistence backends for the generated skill history."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from skillforge.constants import HISTORY_FORMAT_VERSION
from skillforge.errors import HistoryFormatError
from skillforge.skills.models import GeneratedSkill
from skillforge.utils import read_json_safe, write_json


class IHistoryBackend(ABC):
    @abstractmethod
    def load(self) -> list[GeneratedSkill]:
        raise NotImplementedError

    @abstractmethod
    def save(self, skills: list[GeneratedSkill]) -> None:
        raise NotImplementedError


class InMemoryHistoryBackend(IHistoryBackend):
    def __init__(self, skills: list[GeneratedSkill] | None = None) -> None:
        self.saved: list[GeneratedSkill] = list(skills or [])
        self.save_count = 0

    def load(self) -> list[GeneratedSkill]:
        return list(self.saved)

    def save(self, skills: list[GeneratedSkill]) -> None:
        self.saved = list(skills)
        self.save_count += 1


class JsonFileHistoryBackend(IHistoryBackend):
    """Whole-collection JSON file, rewritten on every save."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[GeneratedSkill]:
        payload, error = read_json_safe(self._path)
        if error is not None:
            raise HistoryFormatError(self._path, error)
        if payload is None:
            return []

        entries = self._entries(payload)
        skills: list[GeneratedSkill] = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise HistoryFormatError(
                    self._path, f"bad entry at index {index}: expected an object"
                )
            try:
                skills.append(GeneratedSkill.from_dict(entry))
            except (KeyError, TypeError, ValueError) as exc:
                raise HistoryFormatError(
                    self._path, f"bad entry at index {index}: {exc!r}"
                ) from exc
        return skills

    def save(self, skills: list[GeneratedSkill]) -> None:
        write_json(
            self._path,
            {
                "version": HISTORY_FORMAT_VERSION,
                "skills": [skill.to_dict() for skill in skills],
            },
        )

    def _entries(self, payload: Any) -> list[Any]:
        # A bare list is the shape written by the browser version.
        if isinstance(payload, list):
            return payload
        if isinstance(payload, dict) and isinstance(payload.get("skills"), list):
            version = payload.get("version", HISTORY_FORMAT_VERSION)
            if version != HISTORY_FORMAT_VERSION:
                raise HistoryFormatError(self._path, f"unsupported version {version}")
            return payload["skills"]
        raise HistoryFormatError(self._path, "expected a list of skills")
