"""Render and parse the SKILL.md document with YAML frontmatter."""

from __future__ import annotations

import re

import yaml

from skillforge.errors import SchemaViolationError
from skillforge.skills.models import SkillFrontmatter, SkillPackage

# One optional blank line after the closing fence belongs to the header.
_FRONTMATTER_RE = re.compile(r"^---[ \t]*\n(.*?)\n---[ \t]*\n\n?", re.DOTALL)


def render_frontmatter(frontmatter: SkillFrontmatter) -> str:
    fm = {"name": frontmatter.name, "description": frontmatter.description}
    dumped = yaml.dump(
        fm,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=float("inf"),
    ).rstrip()
    return "\n".join(["---", dumped, "---", ""])


def render_skill_document(package: SkillPackage) -> str:
    """Header block regenerated from frontmatter, then the body verbatim."""
    return f"{render_frontmatter(package.frontmatter)}\n{package.body}"


def parse_skill_document(text: str) -> tuple[SkillFrontmatter, str]:
    match = _FRONTMATTER_RE.match(text)
    if not match:
        raise SchemaViolationError("SKILL.md has no frontmatter block")

    raw = yaml.safe_load(match.group(1)) or {}
    if not isinstance(raw, dict):
        raise SchemaViolationError("SKILL.md frontmatter is not a mapping")

    frontmatter = SkillFrontmatter(
        name=str(raw.get("name", "")),
        description=str(raw.get("description", "")),
    )
    return frontmatter, text[match.end() :]
