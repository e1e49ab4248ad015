"""Format transformers for sync targets.

One transformer per ``FormatFamily``.  ``transform_filename`` and
``transform_content`` dispatch with an exhaustive ``match`` so adding a
family without a transformer fails type checking.
"""

from typing import assert_never

from .families import FormatFamily

from .common import (
    DESCRIPTION_MAX_LENGTH,
    derive_description,
    parse_front_matter,
    render_front_matter,
    split_front_matter,
    split_markdown_name,
    strip_front_matter,
    truncate_description,
)
from .rule import to_rule_content, to_rule_filename
from .skill import to_skill_content, to_skill_path
from .workflow import ensure_steps, to_workflow_content, to_workflow_filename


def transform_filename(family: FormatFamily, filename: str) -> str:
    """Return the destination path, relative to the target directory, for *filename*."""
    match family:
        case FormatFamily.MIRROR:
            return filename
        case FormatFamily.WORKFLOW:
            return to_workflow_filename(filename)
        case FormatFamily.RULE:
            return to_rule_filename(filename)
        case FormatFamily.SKILL:
            return to_skill_path(filename)
        case _:
            assert_never(family)


def transform_content(family: FormatFamily, content: str, filename: str = "") -> str:
    """Return *content* reshaped for *family*.

    Args:
        family: Target format family.
        content: Source markdown.
        filename: Source filename; skills use its stem as the skill name.

    Raises:
        ValueError: If *family* is ``SKILL`` and *filename* has no stem.
    """
    match family:
        case FormatFamily.MIRROR:
            return content
        case FormatFamily.WORKFLOW:
            return to_workflow_content(content)
        case FormatFamily.RULE:
            return to_rule_content(content)
        case FormatFamily.SKILL:
            stem, _ = split_markdown_name(filename.rsplit("/", 1)[-1])
            if not stem:
                raise ValueError("Skill content needs a source filename to name the skill")
            return to_skill_content(content, stem)
        case _:
            assert_never(family)


def is_verbatim(family: FormatFamily) -> bool:
    """Return ``True`` if *family* copies source bytes unchanged."""
    return family is FormatFamily.MIRROR


__all__ = [
    "DESCRIPTION_MAX_LENGTH",
    "FormatFamily",
    "derive_description",
    "ensure_steps",
    "is_verbatim",
    "parse_front_matter",
    "render_front_matter",
    "split_front_matter",
    "strip_front_matter",
    "to_rule_content",
    "to_rule_filename",
    "to_skill_content",
    "to_skill_path",
    "to_workflow_content",
    "to_workflow_filename",
    "transform_content",
    "transform_filename",
    "truncate_description",
]
