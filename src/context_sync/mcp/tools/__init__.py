"""MCP tool handlers for context sync operations.

This package contains MCP tool implementations that wrap the sync core
with async handlers, text and structured output, and structured error
responses.
"""

from .context import CONTEXT_SPECS, CONTEXT_TOOLS
from .errors import build_error_response, translate_validation_error
from .registry import ServerContext, ToolRegistry, ToolSpec

ALL_SPECS: list[ToolSpec] = list(CONTEXT_SPECS)

__all__ = [
    "build_error_response",
    "translate_validation_error",
    # Registry
    "ServerContext",
    "ToolSpec",
    "ToolRegistry",
    # Spec lists
    "ALL_SPECS",
    "CONTEXT_SPECS",
    "CONTEXT_TOOLS",
]
