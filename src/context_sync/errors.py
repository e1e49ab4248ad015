"""Exception types raised by context_sync.

Only failures that make an operation impossible to attempt are raised.
Per-file write failures are recorded in sync reports instead.
"""


class ContextSyncError(ValueError):
    """Base class for errors surfaced to callers of context_sync."""


class UnknownTargetError(ContextSyncError):
    """A preset or target key is not present in the registry.

    Attributes:
        key: The offending preset or target key.
        category: The content category that was being resolved.
    """

    def __init__(self, key: str, category: str, known: list[str] | None = None) -> None:
        self.key = key
        self.category = category
        message = f"Unknown {category} target: '{key}'"
        if known:
            message += f". Valid targets: {sorted(known)}"
        super().__init__(message)


class InvalidScaffoldTypeError(ContextSyncError):
    """Scaffold type is not one of the allowed values."""

    def __init__(self, value: str, allowed: list[str]) -> None:
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid scaffold type '{value}'. Allowed: {', '.join(allowed)}"
        )
