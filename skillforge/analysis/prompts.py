"""Instruction prompt for skill package generation."""


def get_skill_generation_prompt(notes: str) -> str:
    """Prompt sent after the media part.

    Args:
        notes: Free-text notes from the user, may be empty

    Returns:
        Prompt string
    """
    notes_text = notes.strip() or "(none)"
    return f"""You turn evidence of a manual task into a reusable agent skill.
The attached media is a screen recording, a screenshot or a PDF document.

RULES:
1. Be concise. The skill is loaded into a limited context window.
2. A skill is a SKILL.md document plus optional files under scripts/, references/ and assets/.
3. SKILL.md frontmatter has a name and a description. The description states WHEN to use the skill (its triggers).
4. The body is Markdown instructions (overview, workflow, edge cases). Start it with "# <Title>". Do NOT repeat the frontmatter in the body.
5. Move long tables, schemas and boilerplate code into references/ or scripts/ files.
6. Filenames are plain names such as "parse_invoice.py" or "api_schema.md", unique within their type.

TASK:
Identify the workflow, logic or knowledge shown in the media and return ONE JSON object:
- slug: hyphen-case folder name (e.g. "invoice-processor")
- frontmatter: {{"name": display name, "description": trigger-focused description}}
- body: Markdown body of SKILL.md
- resources: list of {{"filename", "type" ("script" | "reference" | "asset"), "content", "language"}}

USER NOTES:
{notes_text}
"""
