"""Error response builders for MCP tool handlers.

Structured error responses carry a corrective action so an agent can
recover without human intervention.
"""

import mcp.types as types

from ...errors import InvalidScaffoldTypeError, UnknownTargetError


def build_error_response(
    error_type: str, message: str, corrective_action: str
) -> types.CallToolResult:
    """Build a structured error response with corrective action.

    Args:
        error_type: Error category (validation_error, unknown_target,
            not_found, server_error, unknown_tool)
        message: Human-readable error description
        corrective_action: Specific action the agent can take to resolve the error

    Returns:
        CallToolResult with isError=True

    Examples:
        >>> build_error_response("not_found", "No .context directory", "Run context_init first.")
        CallToolResult(content=[TextContent(...)], isError=True)
    """
    error_text = f"Error ({error_type}): {message}\n\nAction: {corrective_action}"

    return types.CallToolResult(
        content=[types.TextContent(type="text", text=error_text)],
        isError=True,
    )


def translate_validation_error(error: ValueError) -> types.CallToolResult:
    """Map a validation failure to an error response with a targeted hint."""
    match error:
        case UnknownTargetError(category=category):
            return build_error_response(
                "unknown_target",
                str(error),
                f"Use context_list_targets to see valid {category} targets and presets.",
            )
        case InvalidScaffoldTypeError(allowed=allowed):
            return build_error_response(
                "validation_error",
                str(error),
                f"Use one of: {', '.join(allowed)}.",
            )
        case _:
            return build_error_response(
                "validation_error",
                str(error),
                "Check parameter values and retry.",
            )
