"""Chip tools — load a chip description and inspect it."""

from __future__ import annotations

from typing import Any

from .. import state
from ..algorithms.grid import Chip
from ..constants import MAX_RENDER_CELLS
from ..exceptions import ChipRouterError
from .registry import register_tool


def _summary(chip: Chip) -> dict[str, Any]:
    return {
        "name": chip.name,
        "width": chip.width,
        "height": chip.height,
        "obstacle_count": len(chip.obstacles),
        "wire_count": len(chip.wires),
    }


def _open_chip_handler(chip_path: str) -> dict[str, Any]:
    """Load a chip description file and make it the current chip.

    Args:
        chip_path: Path to a chip description file.
    """
    try:
        chip = state.open_chip(chip_path)
    except ChipRouterError as e:
        return e.to_dict()
    return {"status": "ok", "message": f"Loaded chip {chip.name!r}", "chip": _summary(chip)}


def _load_chip_text_handler(description: str, name: str = "") -> dict[str, Any]:
    """Parse a chip description given inline and make it the current chip.

    Args:
        description: Chip description text (grid/obstacle/wire lines).
        name: Optional chip name.
    """
    try:
        chip = state.set_chip_text(description, name=name)
    except ChipRouterError as e:
        return e.to_dict()
    return {"status": "ok", "chip": _summary(chip)}


def _get_chip_info_handler() -> dict[str, Any]:
    """Summarize the current chip: size, obstacles, wires and occupancy stats."""
    try:
        chip = state.get_chip()
    except RuntimeError as e:
        return {"error": str(e)}
    return {
        **chip.get_stats(),
        "obstacles": [obs.to_dict() for obs in chip.obstacles],
        "wires": [w.to_dict() for w in chip.wires],
    }


def _render_chip_handler() -> dict[str, Any]:
    """Draw the current chip's occupancy as text."""
    try:
        chip = state.get_chip()
    except RuntimeError as e:
        return {"error": str(e)}
    if chip.width * chip.height > MAX_RENDER_CELLS:
        return {
            "error": f"Chip is {chip.width}x{chip.height}; rendering is limited to "
            f"{MAX_RENDER_CELLS} cells"
        }
    return {"name": chip.name, "grid": chip.render().splitlines()}


# ── Registration ────────────────────────────────────────────────────

register_tool(
    name="open_chip",
    description="Open a chip description file and make it the current chip.",
    parameters={"chip_path": {"type": "string", "description": "Path to the chip file."}},
    handler=_open_chip_handler,
    category="chip",
)

register_tool(
    name="load_chip_text",
    description=(
        "Load a chip from inline text: 'grid W H', 'obstacle X1 Y1 X2 Y2' and "
        "'wire ID X1 Y1 X2 Y2' lines."
    ),
    parameters={
        "description": {"type": "string", "description": "Chip description text."},
        "name": {"type": "string", "description": "Optional chip name."},
    },
    handler=_load_chip_text_handler,
    category="chip",
)

register_tool(
    name="get_chip_info",
    description="Get grid size, obstacles, wires and occupancy statistics of the current chip.",
    parameters={},
    handler=_get_chip_info_handler,
    category="chip",
)

register_tool(
    name="render_chip",
    description="Render the current chip as text ('X' obstacle, '.' free, digits are wire ids).",
    parameters={},
    handler=_render_chip_handler,
    category="chip",
)
