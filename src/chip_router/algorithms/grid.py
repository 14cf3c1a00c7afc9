"""Chip grid — obstacles, wires and the per-cell occupancy map the router mutates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..constants import FREE, OBSTACLE
from .types import Coord, Obstacle, Wire

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


@dataclass
class Chip:
    """Rectangular routing grid.

    Occupancy is sparse: ``occupancy`` only holds cells that are not free,
    mapping them to ``OBSTACLE`` or to the id of the wire that owns them.
    Obstacle cells and wire terminals are filled in at construction; after
    that only the router changes occupancy, through :meth:`mark`.
    """

    width: int
    height: int
    obstacles: list[Obstacle] = field(default_factory=list)
    wires: list[Wire] = field(default_factory=list)
    name: str = ""
    occupancy: dict[Coord, int] = field(default_factory=dict, init=False, repr=False)
    _terminals: dict[int, tuple[Coord, Coord]] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._terminals = {w.wire_id: w.terminals for w in self.wires}
        self.reset_routing()

    # ── Queries ────────────────────────────────────────────────────

    def in_bounds(self, coord: Coord) -> bool:
        """Check if a cell is within the grid."""
        return coord.on_board(self.width, self.height)

    def is_obstacle(self, coord: Coord) -> bool:
        return self.occupancy.get(coord) == OBSTACLE

    def owner(self, coord: Coord) -> int:
        """Return ``FREE``, ``OBSTACLE`` or the owning wire id of a cell."""
        return self.occupancy.get(coord, FREE)

    def is_available(self, coord: Coord, wire_id: int) -> bool:
        """Check if ``wire_id`` may run through a cell.

        A cell is available when it is on the grid, not an obstacle, and
        either free, already owned by ``wire_id``, or one of its terminals.
        """
        if not self.in_bounds(coord):
            return False
        owner = self.occupancy.get(coord, FREE)
        if owner == OBSTACLE:
            return False
        if owner in (FREE, wire_id):
            return True
        return coord in self._terminals.get(wire_id, ())

    def wire(self, wire_id: int) -> Wire:
        """Look up a wire by id."""
        for w in self.wires:
            if w.wire_id == wire_id:
                return w
        raise KeyError(f"Wire {wire_id} is not on chip {self.name or '<unnamed>'}")

    def cells_owned_by(self, wire_id: int) -> list[Coord]:
        return [cell for cell, owner in self.occupancy.items() if owner == wire_id]

    # ── Mutation ───────────────────────────────────────────────────

    def mark(self, coord: Coord, owner: int) -> None:
        """Set a cell's occupancy to a wire id or to ``FREE``.

        Obstacle cells never change.
        """
        if not self.in_bounds(coord):
            raise ValueError(f"{coord} is outside the {self.width}x{self.height} grid")
        if owner == OBSTACLE:
            raise ValueError("Obstacles are fixed at construction and cannot be marked")
        if self.occupancy.get(coord) == OBSTACLE:
            return
        if owner == FREE:
            self.occupancy.pop(coord, None)
        else:
            self.occupancy[coord] = owner

    def release_wire(self, wire_id: int) -> None:
        """Free every cell of a wire except its two terminals."""
        terminals = self._terminals.get(wire_id, ())
        for cell in self.cells_owned_by(wire_id):
            if cell not in terminals:
                self.mark(cell, FREE)

    def reset_routing(self) -> None:
        """Return occupancy to its construction state: obstacles and terminals only."""
        self.occupancy = {}
        for obs in self.obstacles:
            for cell in obs.cells():
                if self.in_bounds(cell):
                    self.occupancy[cell] = OBSTACLE
        for w in self.wires:
            for cell in w.terminals:
                if self.occupancy.get(cell) != OBSTACLE:
                    self.occupancy[cell] = w.wire_id

    # ── Reporting ──────────────────────────────────────────────────

    def get_stats(self) -> dict[str, Any]:
        """Return grid statistics."""
        total_cells = self.width * self.height
        obstacle_cells = sum(1 for owner in self.occupancy.values() if owner == OBSTACLE)
        wire_cells = len(self.occupancy) - obstacle_cells
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "total_cells": total_cells,
            "obstacle_count": len(self.obstacles),
            "obstacle_cells": obstacle_cells,
            "wire_count": len(self.wires),
            "wire_cells": wire_cells,
            "free_cells": total_cells - len(self.occupancy),
            "blocked_pct": round(obstacle_cells / max(total_cells, 1) * 100, 2),
        }

    def render(self) -> str:
        """Draw the grid as text, one row per line.

        ``X`` is an obstacle, ``.`` a free cell, and owned cells show their
        wire id as a base-36 digit (ids of 36 and above wrap around).
        """
        rows = []
        for y in range(self.height):
            row = []
            for x in range(self.width):
                owner = self.occupancy.get(Coord(x, y), FREE)
                if owner == OBSTACLE:
                    row.append("X")
                elif owner == FREE:
                    row.append(".")
                else:
                    row.append(_BASE36[owner % 36])
            rows.append("".join(row))
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.render()
