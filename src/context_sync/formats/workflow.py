"""Agent workflow format (Antigravity ``.agent/workflows``).

Workflows are markdown files with:

- YAML front matter carrying a ``description`` (max 250 characters).
- Lowercase, underscore-separated filenames (``init_mcp_only.md``); the
  workflow is invoked as ``/init_mcp_only``.
- A body made of numbered steps.
"""

import re

from .common import parse_front_matter, render_front_matter, resolve_description, split_markdown_name

_NUMBERED_ITEM_RE = re.compile(r"^\d+\. ", re.MULTILINE)
_STEP_INDENT = "   "


def to_workflow_filename(filename: str) -> str:
    """Convert a kebab-case filename to the workflow naming convention.

    Examples:
        >>> to_workflow_filename("init-mcp-only.md")
        'init_mcp_only.md'
        >>> to_workflow_filename("Review-PR.md")
        'review_pr.md'
    """
    stem, _ = split_markdown_name(filename)
    return f"{stem.replace('-', '_').lower()}.md"


def has_numbered_steps(body: str) -> bool:
    """Return ``True`` if any line of *body* starts a numbered list item."""
    return bool(_NUMBERED_ITEM_RE.search(body))


def ensure_steps(body: str) -> str:
    """Wrap plain prose as a single numbered step.

    Bodies that already contain a numbered list are returned trimmed but
    otherwise verbatim.  Continuation lines are indented by three spaces
    so the step stays contiguous; blank lines stay blank.
    """
    trimmed = body.strip()
    if not trimmed or has_numbered_steps(trimmed):
        return trimmed
    lines = trimmed.split("\n")
    continuation = [
        f"{_STEP_INDENT}{line}" if line.strip() else ""
        for line in lines[1:]
    ]
    return "\n".join([f"1. {lines[0]}", *continuation])


def to_workflow_content(content: str, normalize_steps: bool = True) -> str:
    """Transform command markdown into workflow markdown.

    Any leading front matter is replaced, so applying the transform to
    its own output returns the same text.

    Args:
        content: Source markdown, with or without front matter.
        normalize_steps: Wrap prose bodies as a numbered step.

    Returns:
        Front matter with ``description`` only, a blank line, the body
        and a trailing newline.
    """
    fields, body = parse_front_matter(content)
    description = resolve_description(fields, body)
    body = ensure_steps(body) if normalize_steps else body.strip()
    front = render_front_matter({"description": description})
    return f"{front}\n{body}\n"
