"""Cursor project rule format (``.cursor/rules/*.mdc``)."""

from .common import parse_front_matter, render_front_matter, resolve_description, split_markdown_name

RULE_SUFFIX = ".mdc"


def to_rule_filename(filename: str) -> str:
    """Replace the ``.md`` extension with ``.mdc``.

    Examples:
        >>> to_rule_filename("project-overview.md")
        'project-overview.mdc'
    """
    stem, _ = split_markdown_name(filename)
    return f"{stem}{RULE_SUFFIX}"


def to_rule_content(content: str) -> str:
    """Replace leading front matter with the rule header Cursor expects.

    The rule is agent-requested (``alwaysApply: false``) so Cursor pulls
    it in based on its description.
    """
    fields, body = parse_front_matter(content)
    front = render_front_matter(
        {
            "description": resolve_description(fields, body),
            "alwaysApply": bool(fields.get("alwaysApply", False)),
        }
    )
    return f"{front}\n{body.strip()}\n"
