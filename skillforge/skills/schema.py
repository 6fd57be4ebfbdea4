"""Structural validation of skill packages."""

from __future__ import annotations

from collections import Counter
from typing import Any

from jsonschema import Draft202012Validator

from skillforge.errors import SchemaViolationError
from skillforge.skills.models import ResourceType, SkillPackage

_NON_BLANK = {"type": "string", "minLength": 1, "pattern": r"\S"}

PACKAGE_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["slug", "frontmatter", "body"],
    "properties": {
        "slug": _NON_BLANK,
        "frontmatter": {
            "type": "object",
            "required": ["name", "description"],
            "properties": {
                "name": _NON_BLANK,
                "description": _NON_BLANK,
            },
        },
        "body": {"type": "string"},
        "resources": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["filename", "type", "content"],
                "properties": {
                    "filename": _NON_BLANK,
                    "type": {"enum": [item.value for item in ResourceType]},
                    "content": {"type": "string"},
                    "language": {"type": ["string", "null"]},
                },
            },
        },
    },
}

_VALIDATOR = Draft202012Validator(PACKAGE_SCHEMA)


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def _unsafe_path(value: str) -> bool:
    normalized = value.replace("\\", "/")
    if normalized.startswith("/"):
        return True
    return any(part in ("", ".", "..") for part in normalized.split("/"))


def _check_paths(package: SkillPackage) -> None:
    if "/" in package.slug or "\\" in package.slug or _unsafe_path(package.slug):
        raise SchemaViolationError(f"slug is not a safe directory name: {package.slug!r}")

    for index, item in enumerate(package.resources):
        if _unsafe_path(item.filename):
            raise SchemaViolationError(
                f"unsafe filename {item.filename!r} at resources.{index}"
            )

    counts = Counter((item.type, item.filename) for item in package.resources)
    duplicates = sorted(
        f"{resource_type.dirname}/{filename}"
        for (resource_type, filename), count in counts.items()
        if count > 1
    )
    if duplicates:
        raise SchemaViolationError(f"duplicate resource files: {', '.join(duplicates)}")


def _check_encodable(package: SkillPackage) -> None:
    fields = [
        ("slug", package.slug),
        ("frontmatter.name", package.frontmatter.name),
        ("frontmatter.description", package.frontmatter.description),
        ("body", package.body),
    ]
    for index, item in enumerate(package.resources):
        fields.append((f"resources.{index}.filename", item.filename))
        fields.append((f"resources.{index}.content", item.content))
    for where, value in fields:
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise SchemaViolationError(f"text is not valid UTF-8 at {where}") from exc


def parse_package(payload: Any) -> SkillPackage:
    """Validate a wire payload and build a package from it."""
    error = next(iter(_VALIDATOR.iter_errors(payload)), None)
    if error is not None:
        raise SchemaViolationError(format_schema_error(error))
    package = SkillPackage.from_dict(payload)
    _check_paths(package)
    _check_encodable(package)
    return package


def validate_package(package: SkillPackage) -> None:
    parse_package(package.to_dict())


def is_well_formed(package: SkillPackage) -> bool:
    try:
        validate_package(package)
    except SchemaViolationError:
        return False
    return True
