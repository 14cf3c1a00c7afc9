"""Routing tools — route the current chip, preview a single wire, validate a layout."""

from __future__ import annotations

from typing import Any

from .. import state
from ..algorithms.types import RouterConfig
from ..exceptions import ToolExecutionError
from .registry import register_tool


def _config(rip_up: bool | None, edge_penalty: int | None) -> RouterConfig:
    config = RouterConfig.from_env()
    if rip_up is not None:
        config.rip_up = rip_up
    if edge_penalty is not None:
        config.edge_penalty = edge_penalty
    return config


# ── Handlers ────────────────────────────────────────────────────────


def _route_chip_handler(
    rip_up: bool | None = None,
    edge_penalty: int | None = None,
) -> dict[str, Any]:
    """Route every wire of the current chip, with one rip-up-and-retry pass.

    Args:
        rip_up: Allow the rip-up pass. Default: CHIP_ROUTER_RIP_UP or true.
        edge_penalty: Score penalty for unavailable neighbours. Default: 1.
    """
    from ..algorithms.pathfinder import route_chip

    try:
        chip = state.get_chip()
        config = _config(rip_up, edge_penalty)
    except (RuntimeError, ValueError) as e:
        return {"error": str(e)}

    result = route_chip(chip, config)
    state.set_result(result)
    return {"status": "complete", "chip": chip.name, "result": result.to_dict()}


def _route_wire_handler(wire_id: int, edge_penalty: int | None = None) -> dict[str, Any]:
    """Search one wire on the current occupancy without committing it.

    Args:
        wire_id: Id of the wire to search.
        edge_penalty: Score penalty for unavailable neighbours. Default: 1.
    """
    from ..algorithms.pathfinder import find_path

    try:
        chip = state.get_chip()
        wire = chip.wire(wire_id)
        config = _config(None, edge_penalty)
    except (RuntimeError, ValueError) as e:
        return {"error": str(e)}
    except KeyError as e:
        return ToolExecutionError(e.args[0], tool_name="route_wire").to_dict()

    path = find_path(chip, wire, config)
    if path is None:
        return {"status": "preview", "wire": wire.to_dict(), "routable": False}
    return {
        "status": "preview",
        "wire": wire.to_dict(),
        "routable": True,
        "separation": wire.separation(),
        "path": path.to_dict(),
    }


def _validate_layout_handler() -> dict[str, Any]:
    """Validate the last routed layout of the current chip."""
    from ..validation import validate_layout

    try:
        chip = state.get_chip()
        result = state.get_result()
    except RuntimeError as e:
        return {"error": str(e)}
    return validate_layout(chip, result.layout).to_dict()


# ── Registration ────────────────────────────────────────────────────

register_tool(
    name="route_chip",
    description="Route every wire on the current chip, ripping up and retrying on conflicts.",
    parameters={
        "rip_up": {"type": "boolean", "description": "Allow the rip-up pass. Default: true."},
        "edge_penalty": {
            "type": "integer",
            "description": "Score penalty for unavailable neighbours. Default: 1.",
        },
    },
    handler=_route_chip_handler,
    category="routing",
)

register_tool(
    name="route_wire",
    description="Preview the shortest path of one wire on the current occupancy (no commit).",
    parameters={
        "wire_id": {"type": "integer", "description": "Wire id."},
        "edge_penalty": {
            "type": "integer",
            "description": "Score penalty for unavailable neighbours. Default: 1.",
        },
    },
    handler=_route_wire_handler,
    category="routing",
)

register_tool(
    name="validate_layout",
    description="Check the last routed layout: endpoints, adjacency, bounds, obstacles, overlaps.",
    parameters={},
    handler=_validate_layout_handler,
    category="routing",
)
