"""Format families understood by the transformers."""

from enum import Enum


class FormatFamily(str, Enum):
    """How a target expects files to be named and shaped."""

    MIRROR = "mirror"
    WORKFLOW = "workflow"
    RULE = "rule"
    SKILL = "skill"
