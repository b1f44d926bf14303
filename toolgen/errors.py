"""Exception hierarchy for the tool generator and its runtime dispatcher.

Spec-level errors abort a generation run. Validation errors are raised by
compiled validators at runtime. Dispatch errors come from the remote API.
"""

from __future__ import annotations


class ToolgenError(Exception):
    """Base exception for all generator and dispatcher errors."""


class SpecError(ToolgenError):
    """Raised when the OpenAPI document cannot be compiled."""


class UnresolvableReferenceError(SpecError):
    """Raised when a $ref pointer does not resolve inside the document."""

    def __init__(self, ref: str, reason: str = "Unresolvable $ref") -> None:
        self.ref = ref
        super().__init__(f"{reason}: {ref}")


class ValidationError(ToolgenError):
    """Raised when a value does not match a compiled validator."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class ToolInputError(ToolgenError):
    """Raised when tool arguments are rejected by the input validator."""

    def __init__(self, tool_name: str, error: ValidationError) -> None:
        self.tool_name = tool_name
        self.error = error
        super().__init__(f"Invalid arguments for {tool_name}: {error}")


class ToolOutputError(ToolgenError):
    """Raised when an API response is rejected by the output validator."""

    def __init__(self, tool_name: str, error: ValidationError) -> None:
        self.tool_name = tool_name
        self.error = error
        super().__init__(f"Unexpected response shape from {tool_name}: {error}")


class DispatchError(ToolgenError):
    """Raised when a tool call cannot be forwarded to the remote API."""


class OutlineAPIError(DispatchError):
    """Raised when the Outline API answers with a non-success status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(message)
