"""Editable working copy of the displayed skill package."""

from __future__ import annotations

import logging
from dataclasses import replace

from skillforge.constants import SKILL_FILENAME
from skillforge.errors import SkillForgeError, UnknownFileError
from skillforge.skills.document import render_skill_document
from skillforge.skills.models import GeneratedSkill, SkillPackage
from skillforge.workflow.controller import WorkflowController

logger = logging.getLogger(__name__)


class PackageEditor:
    """Follows the controller's displayed skill.

    Files are addressed by their path inside the package: ``SKILL.md`` for the
    document, ``scripts/sort.py`` and so on for resources. A bare resource
    filename is accepted when exactly one resource carries it.
    """

    def __init__(self, controller: WorkflowController) -> None:
        self._controller = controller
        self._skill: GeneratedSkill | None = None
        self._committed: SkillPackage | None = None
        self._working: SkillPackage | None = None
        self._active = SKILL_FILENAME
        controller.add_display_listener(self.seed)
        self.seed(controller.current)

    def close(self) -> None:
        self._controller.remove_display_listener(self.seed)

    def seed(self, skill: GeneratedSkill | None) -> None:
        if self.is_dirty and self._skill is not None:
            logger.info("[editor] dropping unsaved edits to %s", self._skill.id)
        self._skill = skill
        self._committed = skill.package if skill is not None else None
        self._working = self._committed
        self._active = SKILL_FILENAME

    @property
    def skill_id(self) -> str | None:
        return self._skill.id if self._skill is not None else None

    @property
    def package(self) -> SkillPackage:
        if self._working is None:
            raise SkillForgeError("No skill package is open")
        return self._working

    @property
    def is_dirty(self) -> bool:
        return self._working != self._committed

    @property
    def active_file(self) -> str:
        return self._active

    def file_names(self) -> list[str]:
        return [SKILL_FILENAME] + [item.path for item in self.package.resources]

    def _resource_index(self, name: str) -> int:
        resources = self.package.resources
        for index, item in enumerate(resources):
            if item.path == name:
                return index
        matches = [index for index, item in enumerate(resources) if item.filename == name]
        if len(matches) == 1:
            return matches[0]
        raise UnknownFileError(name)

    def resolve(self, name: str) -> str:
        """Canonical path of ``name``."""
        if name == SKILL_FILENAME:
            return SKILL_FILENAME
        return self.package.resources[self._resource_index(name)].path

    def set_active_file(self, name: str) -> None:
        self._active = self.resolve(name)

    def content_of(self, name: str) -> str:
        """Editable text: the body for the document, the content for resources."""
        if name == SKILL_FILENAME:
            return self.package.body
        return self.package.resources[self._resource_index(name)].content

    def rendered(self, name: str) -> str:
        """Text as it will appear in the exported archive."""
        if name == SKILL_FILENAME:
            return render_skill_document(self.package)
        return self.content_of(name)

    def edit_content(self, name: str, text: str) -> None:
        package = self.package
        if name == SKILL_FILENAME:
            self._working = replace(package, body=text)
            return
        index = self._resource_index(name)
        resources = list(package.resources)
        resources[index] = replace(resources[index], content=text)
        self._working = replace(package, resources=tuple(resources))

    def revert(self) -> None:
        self._working = self._committed

    def commit(self) -> GeneratedSkill:
        if self._skill is None or self._working is None:
            raise SkillForgeError("No skill package is open")
        if not self.is_dirty:
            return self._skill
        updated = self._controller.commit_edit(self._skill.id, self._working)
        self._skill = updated
        self._committed = updated.package
        self._working = updated.package
        logger.debug("[editor] committed %s", updated.id)
        return updated
