"""Chip wire routing — grid model, single-wire search and rip-up-and-retry."""

from .grid import Chip
from .pathfinder import (
    all_connected,
    connect_all_wires,
    find_path,
    route_chip,
    total_wire_usage,
)
from .types import (
    Coord,
    Layout,
    Obstacle,
    Path,
    RouterConfig,
    RoutingResult,
    Wire,
)

__all__ = [
    "Chip",
    "Coord",
    "Layout",
    "Obstacle",
    "Path",
    "RouterConfig",
    "RoutingResult",
    "Wire",
    "all_connected",
    "connect_all_wires",
    "find_path",
    "route_chip",
    "total_wire_usage",
]
