"""Generators that create content under the context root."""

from .commands import generate_commands
from .scaffold import (
    SCAFFOLD_TYPES,
    ContentGenerator,
    InitService,
    resolve_scaffold_type,
)
from .templates import PREDEFINED_COMMANDS, CommandTemplate

__all__ = [
    "PREDEFINED_COMMANDS",
    "SCAFFOLD_TYPES",
    "CommandTemplate",
    "ContentGenerator",
    "InitService",
    "generate_commands",
    "resolve_scaffold_type",
]
