"""Common helpers for target format transformation.

Front-matter handling only ever looks at a *leading* block: a first line
of exactly ``---``, any content, then a line of exactly ``---``.  Front
matter anywhere else in a document is treated as body text.
"""

import logging
import re
from pathlib import PurePosixPath

import yaml

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
DESCRIPTION_MAX_LENGTH = 250
ELLIPSIS = "..."
DEFAULT_DESCRIPTION = "Workflow"

_HEADING_RE = re.compile(r"^#\s+(.+?)\s*$", re.MULTILINE)
_WHITESPACE_RE = re.compile(r"\s+")

# Wide enough that PyYAML never folds a description onto a second line
_YAML_WIDTH = 10_000


# =============================================================================
# Front matter
# =============================================================================


def split_front_matter(content: str) -> tuple[str | None, str]:
    """Split a leading front-matter block from *content*.

    Args:
        content: Markdown text, possibly starting with a BOM.

    Returns:
        Tuple of ``(front_matter_text, body)``.  ``front_matter_text`` is
        ``None`` when the text does not start with a complete block, in
        which case *body* is the input with any BOM removed.
    """
    text = content.lstrip("\ufeff").replace("\r\n", "\n")
    lines = text.split("\n")
    if not lines or lines[0].rstrip() != FRONT_MATTER_DELIMITER:
        return None, text

    for index in range(1, len(lines)):
        if lines[index].rstrip() == FRONT_MATTER_DELIMITER:
            front = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            return front, body

    # Opening delimiter without a closing one is plain body text
    return None, text


def strip_front_matter(content: str) -> str:
    """Return *content* without its leading front-matter block."""
    _, body = split_front_matter(content)
    return body


def parse_front_matter(content: str) -> tuple[dict, str]:
    """Parse the leading front-matter block as YAML.

    Malformed YAML or a non-mapping root yields an empty dict; the block
    is still removed from the returned body.

    Returns:
        Tuple of ``(fields, body)``.
    """
    front, body = split_front_matter(content)
    if front is None:
        return {}, body
    try:
        data = yaml.safe_load(front)
    except yaml.YAMLError as exc:
        logger.debug("Ignoring malformed front matter: %s", exc)
        return {}, body
    if not isinstance(data, dict):
        return {}, body
    return data, body


def render_front_matter(fields: dict) -> str:
    """Render *fields* as a front-matter block, keys in insertion order.

    Values are emitted as single-line YAML scalars, quoted only when
    plain YAML would misread them.
    """
    dumped = yaml.safe_dump(
        fields,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        width=_YAML_WIDTH,
    )
    return f"{FRONT_MATTER_DELIMITER}\n{dumped}{FRONT_MATTER_DELIMITER}\n"


# =============================================================================
# Descriptions
# =============================================================================


def clean_description(text: str) -> str:
    """Collapse all runs of whitespace (including newlines) to one space."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def truncate_description(
    text: str, max_length: int = DESCRIPTION_MAX_LENGTH
) -> str:
    """Hard-truncate *text* to *max_length* characters including the ellipsis.

    Examples:
        >>> truncate_description("short")
        'short'
        >>> len(truncate_description("x" * 300))
        250
    """
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def derive_description(body: str) -> str:
    """Derive a one-line description from a markdown body.

    Uses the first level-one heading anywhere in the body, else the first
    non-empty line, else ``DEFAULT_DESCRIPTION``.  The result is cleaned
    and truncated to ``DESCRIPTION_MAX_LENGTH``.
    """
    trimmed = body.strip()
    match = _HEADING_RE.search(trimmed)
    if match:
        candidate = match.group(1)
    else:
        candidate = next(
            (line for line in trimmed.split("\n") if line.strip()),
            DEFAULT_DESCRIPTION,
        )
    cleaned = clean_description(candidate) or DEFAULT_DESCRIPTION
    return truncate_description(cleaned)


def resolve_description(fields: dict, body: str) -> str:
    """Prefer a declared ``description`` field, else derive one from *body*.

    Reusing the declared field keeps transforms stable when they are
    applied to their own output.
    """
    declared = fields.get("description")
    if isinstance(declared, str) and clean_description(declared):
        return truncate_description(clean_description(declared))
    return derive_description(body)


# =============================================================================
# Filenames
# =============================================================================


def split_markdown_name(filename: str) -> tuple[str, str]:
    """Split *filename* into ``(stem, suffix)`` treating ``.md`` case-insensitively."""
    path = PurePosixPath(filename)
    if path.suffix.lower() == ".md":
        return path.stem, ".md"
    return path.name, ""
