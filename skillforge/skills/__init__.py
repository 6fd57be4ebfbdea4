from skillforge.skills.document import parse_skill_document, render_skill_document
from skillforge.skills.models import (
    GeneratedSkill,
    ResourceType,
    SkillFile,
    SkillFrontmatter,
    SkillPackage,
)
from skillforge.skills.schema import is_well_formed, parse_package, validate_package

__all__ = [
    "GeneratedSkill",
    "ResourceType",
    "SkillFile",
    "SkillFrontmatter",
    "SkillPackage",
    "is_well_formed",
    "parse_package",
    "parse_skill_document",
    "render_skill_document",
    "validate_package",
]
