"""Exception hierarchy for the chip router.

Unroutable wires are not exceptions: they are reported by their absence from
a layout. These types cover bad chip descriptions and failed tool calls, and
serialize to the ``{"error": ...}`` payloads the MCP tools return.
"""

from __future__ import annotations

from typing import Any


class ChipRouterError(Exception):
    """Base exception for all chip router errors."""

    error_code: str = ""

    def __init__(self, message: str, error_code: str | None = None, **kwargs: Any):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.error_code or self.__class__.__name__
        self.details: dict[str, Any] = kwargs

    def __getattr__(self, name: str) -> Any:
        # Expose details (field, source, line, ...) as attributes
        try:
            return self.__dict__["details"][name]
        except KeyError:
            raise AttributeError(name) from None

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a tool response payload."""
        return {
            "error": self.message,
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            **self.details,
        }


class ValidationError(ChipRouterError):
    """A chip description is well-formed but geometrically invalid."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None, **kwargs: Any):
        super().__init__(message, field=field, **kwargs)


class ChipLoadingError(ChipRouterError):
    """A chip description cannot be read or parsed.

    The message is prefixed with ``source:line:`` when those are known.
    """

    error_code = "CHIP_LOADING_ERROR"

    def __init__(
        self,
        message: str,
        source: str | None = None,
        line: int | None = None,
        **kwargs: Any,
    ):
        if source and line:
            message = f"{source}:{line}: {message}"
        elif source:
            message = f"{source}: {message}"
        super().__init__(message, source=source, line=line, **kwargs)


class ToolExecutionError(ChipRouterError):
    """A tool was asked for something the current chip cannot provide."""

    error_code = "TOOL_EXECUTION_ERROR"

    def __init__(self, message: str, tool_name: str | None = None, **kwargs: Any):
        super().__init__(message, tool_name=tool_name, **kwargs)


__all__ = [
    "ChipRouterError",
    "ValidationError",
    "ChipLoadingError",
    "ToolExecutionError",
]
