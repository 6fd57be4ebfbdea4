"""Skill package data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from skillforge.constants import (
    ASSETS_DIRNAME,
    REFERENCES_DIRNAME,
    SCRIPTS_DIRNAME,
)


class ResourceType(str, Enum):
    SCRIPT = "script"
    REFERENCE = "reference"
    ASSET = "asset"

    @property
    def dirname(self) -> str:
        return RESOURCE_DIRNAMES[self]


RESOURCE_DIRNAMES: dict[ResourceType, str] = {
    ResourceType.SCRIPT: SCRIPTS_DIRNAME,
    ResourceType.REFERENCE: REFERENCES_DIRNAME,
    ResourceType.ASSET: ASSETS_DIRNAME,
}


@dataclass(frozen=True)
class SkillFile:
    filename: str
    content: str
    type: ResourceType
    language: str | None = None

    @property
    def path(self) -> str:
        """Path relative to the package root, e.g. ``scripts/sort.py``."""
        return f"{self.type.dirname}/{self.filename}"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "filename": self.filename,
            "type": self.type.value,
            "content": self.content,
        }
        if self.language:
            payload["language"] = self.language
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SkillFile":
        language = payload.get("language")
        return cls(
            filename=str(payload["filename"]),
            content=str(payload["content"]),
            type=ResourceType(payload["type"]),
            language=str(language) if language else None,
        )


@dataclass(frozen=True)
class SkillFrontmatter:
    name: str
    description: str


@dataclass(frozen=True)
class SkillPackage:
    slug: str
    frontmatter: SkillFrontmatter
    body: str
    resources: tuple[SkillFile, ...] = field(default_factory=tuple)

    @property
    def file_count(self) -> int:
        """Resources plus the SKILL.md document."""
        return len(self.resources) + 1

    def resources_of(self, resource_type: ResourceType) -> list[SkillFile]:
        return [item for item in self.resources if item.type == resource_type]

    def to_dict(self) -> dict[str, Any]:
        return {
            "slug": self.slug,
            "frontmatter": {
                "name": self.frontmatter.name,
                "description": self.frontmatter.description,
            },
            "body": self.body,
            "resources": [item.to_dict() for item in self.resources],
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SkillPackage":
        frontmatter = payload["frontmatter"]
        return cls(
            slug=str(payload["slug"]),
            frontmatter=SkillFrontmatter(
                name=str(frontmatter["name"]),
                description=str(frontmatter["description"]),
            ),
            body=str(payload["body"]),
            resources=tuple(
                SkillFile.from_dict(item) for item in payload.get("resources", [])
            ),
        )


@dataclass(frozen=True)
class GeneratedSkill:
    id: str
    created_at: int
    package: SkillPackage
    raw_response: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "skillPackage": self.package.to_dict(),
            "rawResponse": self.raw_response,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "GeneratedSkill":
        raw_response = payload.get("rawResponse")
        return cls(
            id=str(payload["id"]),
            created_at=int(payload.get("createdAt", 0)),
            package=SkillPackage.from_dict(payload["skillPackage"]),
            raw_response=str(raw_response) if raw_response is not None else None,
        )
