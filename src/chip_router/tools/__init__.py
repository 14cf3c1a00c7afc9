"""Chip router MCP tools."""

# Import modules to trigger tool registration via register_tool() calls
from . import chip, routing  # noqa: F401
from .registry import TOOL_REGISTRY, ToolSpec, get_categories, get_tool, register_tool

__all__ = [
    "TOOL_REGISTRY",
    "ToolSpec",
    "get_categories",
    "get_tool",
    "register_tool",
]
