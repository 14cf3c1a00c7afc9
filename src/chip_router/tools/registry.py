"""Tool registry — the tool modules register here at import time, the server reads it."""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..exceptions import ToolExecutionError

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(frozen=True)
class ToolSpec:
    """One MCP tool: name, JSON parameter schema and the handler behind it."""

    name: str
    description: str
    parameters: dict[str, Any]
    handler: Callable[..., dict[str, Any]]
    category: str = "chip"


TOOL_REGISTRY: dict[str, ToolSpec] = {}


def register_tool(
    name: str,
    description: str,
    parameters: dict[str, Any],
    handler: Callable[..., dict[str, Any]],
    *,
    category: str = "chip",
) -> ToolSpec:
    """Register a tool.

    Raises:
        ValueError: The name is taken, or ``parameters`` documents an argument
            the handler does not accept.
    """
    if name in TOOL_REGISTRY:
        raise ValueError(f"Tool {name!r} is already registered")
    accepted = set(inspect.signature(handler).parameters)
    unknown = sorted(set(parameters) - accepted)
    if unknown:
        raise ValueError(f"Tool {name!r} documents parameters its handler does not take: {unknown}")

    spec = ToolSpec(
        name=name,
        description=description,
        parameters=parameters,
        handler=handler,
        category=category,
    )
    TOOL_REGISTRY[name] = spec
    return spec


def get_tool(name: str) -> ToolSpec:
    """Look up a registered tool by name."""
    try:
        return TOOL_REGISTRY[name]
    except KeyError:
        raise ToolExecutionError(f"Unknown tool {name!r}", tool_name=name) from None


def get_categories() -> dict[str, list[str]]:
    """Return tool names grouped by category."""
    categories: dict[str, list[str]] = {}
    for tool in TOOL_REGISTRY.values():
        categories.setdefault(tool.category, []).append(tool.name)
    return categories
