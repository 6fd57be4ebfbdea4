"""Ordered, write-through history of generated skills (newest first)."""

from __future__ import annotations

import logging
from typing import Iterator

from skillforge.errors import SkillNotFoundError
from skillforge.history.repository import IHistoryBackend
from skillforge.skills.models import GeneratedSkill

logger = logging.getLogger(__name__)


class HistoryStore:
    def __init__(self, backend: IHistoryBackend) -> None:
        self._backend = backend
        self._items: list[GeneratedSkill] = list(backend.load())
        logger.debug("[history] loaded %d skills", len(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[GeneratedSkill]:
        return iter(list(self._items))

    @property
    def items(self) -> tuple[GeneratedSkill, ...]:
        return tuple(self._items)

    def find(self, skill_id: str) -> GeneratedSkill | None:
        for item in self._items:
            if item.id == skill_id:
                return item
        return None

    def get(self, skill_id: str) -> GeneratedSkill:
        skill = self.find(skill_id)
        if skill is None:
            raise SkillNotFoundError(skill_id)
        return skill

    def resolve(self, key: str) -> GeneratedSkill:
        """Look up by full id, unique id prefix, or unique slug."""
        if not key:
            raise SkillNotFoundError(key)
        exact = self.find(key)
        if exact is not None:
            return exact
        matches = [item for item in self._items if item.id.startswith(key)]
        if not matches:
            matches = [item for item in self._items if item.package.slug == key]
        if len(matches) != 1:
            raise SkillNotFoundError(key)
        return matches[0]

    def prepend(self, skill: GeneratedSkill) -> None:
        self._commit([skill, *self._items])

    def remove(self, skill_id: str) -> bool:
        remaining = [item for item in self._items if item.id != skill_id]
        if len(remaining) == len(self._items):
            return False
        self._commit(remaining)
        return True

    def replace(self, skill: GeneratedSkill) -> bool:
        for index, item in enumerate(self._items):
            if item.id == skill.id:
                updated = list(self._items)
                updated[index] = skill
                self._commit(updated)
                return True
        return False

    def _commit(self, items: list[GeneratedSkill]) -> None:
        # memory follows disk only after the write succeeds
        self._backend.save(list(items))
        self._items = items
