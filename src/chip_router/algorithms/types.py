"""Shared dataclasses for chip routing: grid points, obstacles, wires and paths."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from ..constants import DEFAULT_EDGE_PENALTY, ENV_EDGE_PENALTY, ENV_RIP_UP

# Cardinal moves in search order: right, left, down, up
_CARDINAL_MOVES: list[tuple[int, int]] = [
    (1, 0),
    (-1, 0),
    (0, 1),
    (0, -1),
]


@dataclass(frozen=True)
class Coord:
    """A grid cell. x grows rightward, y grows downward."""

    x: int
    y: int

    def on_board(self, width: int, height: int) -> bool:
        """Check if this cell lies inside a ``width`` x ``height`` grid."""
        return 0 <= self.x < width and 0 <= self.y < height

    def neighbors(self, width: int, height: int) -> list[Coord]:
        """Return the in-bounds 4-neighbours, in right/left/down/up order."""
        result = []
        for dx, dy in _CARDINAL_MOVES:
            cell = Coord(self.x + dx, self.y + dy)
            if cell.on_board(width, height):
                result.append(cell)
        return result

    def is_adjacent(self, other: Coord) -> bool:
        return self.manhattan(other) == 1

    def manhattan(self, other: Coord) -> int:
        """L1 distance to ``other``."""
        return abs(self.x - other.x) + abs(self.y - other.y)

    def to_dict(self) -> dict[str, int]:
        return {"x": self.x, "y": self.y}

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


@dataclass(frozen=True)
class Obstacle:
    """Axis-aligned rectangle of blocked cells, inclusive of both corners.

    Corners may be given in any order; they are normalized so that
    ``corner1`` is the top-left and ``corner2`` the bottom-right cell.
    """

    corner1: Coord
    corner2: Coord

    def __post_init__(self) -> None:
        lo = Coord(min(self.corner1.x, self.corner2.x), min(self.corner1.y, self.corner2.y))
        hi = Coord(max(self.corner1.x, self.corner2.x), max(self.corner1.y, self.corner2.y))
        object.__setattr__(self, "corner1", lo)
        object.__setattr__(self, "corner2", hi)

    @classmethod
    def from_corners(cls, x1: int, y1: int, x2: int, y2: int) -> Obstacle:
        return cls(Coord(x1, y1), Coord(x2, y2))

    def contains(self, coord: Coord) -> bool:
        """Check if a cell lies inside this rectangle."""
        return (
            self.corner1.x <= coord.x <= self.corner2.x
            and self.corner1.y <= coord.y <= self.corner2.y
        )

    def cells(self) -> Iterator[Coord]:
        """Iterate over every covered cell, row by row."""
        for y in range(self.corner1.y, self.corner2.y + 1):
            for x in range(self.corner1.x, self.corner2.x + 1):
                yield Coord(x, y)

    def to_dict(self) -> dict[str, Any]:
        return {"from": self.corner1.to_dict(), "to": self.corner2.to_dict()}


@dataclass(frozen=True)
class Wire:
    """A numbered pair of terminals to connect."""

    wire_id: int
    from_: Coord
    to: Coord

    def __post_init__(self) -> None:
        if self.from_ == self.to:
            raise ValueError(f"{self} starts and ends on the same cell")

    @classmethod
    def from_coords(cls, wire_id: int, x1: int, y1: int, x2: int, y2: int) -> Wire:
        return cls(wire_id, Coord(x1, y1), Coord(x2, y2))

    @property
    def terminals(self) -> tuple[Coord, Coord]:
        return (self.from_, self.to)

    def separation(self) -> int:
        """Manhattan distance between the terminals.

        This is the number of steps in the shortest possible connection, so
        the shortest path holds ``separation() + 1`` cells.
        """
        return self.from_.manhattan(self.to)

    def to_dict(self) -> dict[str, Any]:
        return {"wire_id": self.wire_id, "from": self.from_.to_dict(), "to": self.to.to_dict()}

    def __str__(self) -> str:
        return f"Wire[{self.wire_id}:{self.from_},{self.to}]"


class Path:
    """Ordered, duplicate-free run of cells belonging to one wire.

    A path always starts at its wire's ``from`` terminal and is complete once
    its last cell is the wire's ``to`` terminal. Its length is its number of
    cells.
    """

    __slots__ = ("wire", "_cells", "_members")

    def __init__(self, wire: Wire, cells: list[Coord] | None = None) -> None:
        self.wire = wire
        self._cells: list[Coord] = [wire.from_]
        self._members: set[Coord] = {wire.from_}
        if cells:
            if cells[0] != wire.from_:
                raise ValueError(f"Path of {wire} must start at {wire.from_}, got {cells[0]}")
            for cell in cells[1:]:
                self.add(cell)

    def add(self, coord: Coord) -> None:
        """Append a cell. Cells already on the path are rejected."""
        if coord in self._members:
            raise ValueError(f"{coord} is already on the path of {self.wire}")
        self._cells.append(coord)
        self._members.add(coord)

    def pop(self) -> Coord:
        """Remove and return the last cell. The starting terminal stays."""
        if len(self._cells) == 1:
            raise IndexError("Cannot remove the starting terminal of a path")
        coord = self._cells.pop()
        self._members.discard(coord)
        return coord

    def copy(self) -> Path:
        clone = Path.__new__(Path)
        clone.wire = self.wire
        clone._cells = list(self._cells)
        clone._members = set(self._members)
        return clone

    @property
    def last(self) -> Coord:
        return self._cells[-1]

    @property
    def is_complete(self) -> bool:
        return self._cells[-1] == self.wire.to

    def cells(self) -> list[Coord]:
        return list(self._cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self._members

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Coord]:
        return iter(self._cells)

    def __getitem__(self, index: int) -> Coord:
        return self._cells[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.wire == other.wire and self._cells == other._cells

    def __repr__(self) -> str:
        return f"Path({self.wire}, {self})"

    def __str__(self) -> str:
        return "[" + ", ".join(str(c) for c in self._cells) + "]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "wire_id": self.wire.wire_id,
            "length": len(self),
            "cells": [[c.x, c.y] for c in self._cells],
        }


# Layout: wire id -> committed path. A missing key means the wire is unroutable.
Layout = dict[int, Path]


@dataclass
class RouterConfig:
    """Tunable knobs of the router."""

    rip_up: bool = True  # attempt the rip-up-and-retry pass on failure
    edge_penalty: int = DEFAULT_EDGE_PENALTY  # score penalty for unavailable neighbours

    @classmethod
    def from_env(cls) -> RouterConfig:
        """Build a config from ``CHIP_ROUTER_*`` environment variables."""
        config = cls()
        rip_up = os.environ.get(ENV_RIP_UP)
        if rip_up is not None:
            config.rip_up = rip_up.strip().lower() not in ("0", "false", "no", "off")
        penalty = os.environ.get(ENV_EDGE_PENALTY)
        if penalty is not None:
            try:
                config.edge_penalty = int(penalty)
            except ValueError:
                raise ValueError(f"{ENV_EDGE_PENALTY} must be an integer, got {penalty!r}") from None
        return config


@dataclass
class RoutingResult:
    """Outcome of routing every wire on a chip."""

    layout: Layout = field(default_factory=dict)
    routed_wires: list[int] = field(default_factory=list)
    failed_wires: list[int] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)
    rip_up_count: int = 0
    total_wire_usage: int = 0
    all_connected: bool = False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "routed_count": len(self.routed_wires),
            "failed_count": len(self.failed_wires),
            "routed_wires": self.routed_wires,
            "failed_wires": self.failed_wires,
            "rip_up_count": self.rip_up_count,
            "total_wire_usage": self.total_wire_usage,
            "all_connected": self.all_connected,
            "paths": [path.to_dict() for path in self.layout.values()],
        }
        if self.diagnostics:
            d["diagnostics"] = self.diagnostics
        return d
