"""Skill directory format (``<tool>/skills/<name>/SKILL.md``)."""

from .common import parse_front_matter, render_front_matter, resolve_description, split_markdown_name

SKILL_FILENAME = "SKILL.md"


def to_skill_path(filename: str) -> str:
    """Map ``name.md`` to ``name/SKILL.md``.

    Examples:
        >>> to_skill_path("commit-message.md")
        'commit-message/SKILL.md'
    """
    stem, _ = split_markdown_name(filename)
    return f"{stem}/{SKILL_FILENAME}"


def to_skill_content(content: str, name: str) -> str:
    """Rewrite leading front matter as the ``name``/``description`` pair skills require."""
    fields, body = parse_front_matter(content)
    front = render_front_matter(
        {
            "name": str(fields.get("name") or name),
            "description": resolve_description(fields, body),
        }
    )
    return f"{front}\n{body.strip()}\n"
