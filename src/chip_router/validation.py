"""Layout validation.

Checks a routed layout against the chip it was produced for:

- every path belongs to a wire on the chip and joins that wire's terminals
- every cell is on the grid and off every obstacle
- consecutive cells are 4-adjacent and no cell repeats within a path
- no two wires share a cell
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .algorithms.grid import Chip
from .algorithms.types import Coord, Layout


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    valid: bool
    value: Any = None
    error: str | None = None
    errors: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, value: Any = None) -> ValidationResult:
        return cls(valid=True, value=value)

    @classmethod
    def failure(cls, error: str, errors: list[str] | None = None) -> ValidationResult:
        return cls(valid=False, error=error, errors=errors or [error])

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"valid": self.valid}
        if self.errors:
            d["errors"] = self.errors
        return d


def _check_path(chip: Chip, wire_id: int, cells: list[Coord]) -> list[str]:
    problems = []
    try:
        wire = chip.wire(wire_id)
    except KeyError:
        return [f"Layout has a path for unknown wire {wire_id}"]

    if not cells:
        return [f"Path of {wire} is empty"]
    if cells[0] != wire.from_:
        problems.append(f"Incorrect start of path for wire {wire_id}, found {cells[0]}, expected {wire.from_}")
    if cells[-1] != wire.to:
        problems.append(f"Incorrect end of path for wire {wire_id}, found {cells[-1]}, expected {wire.to}")

    seen: set[Coord] = set()
    for i, cell in enumerate(cells):
        if not chip.in_bounds(cell):
            problems.append(f"Wire {wire_id} leaves the grid at {cell}")
        if any(obs.contains(cell) for obs in chip.obstacles):
            problems.append(f"Wire {wire_id} crosses an obstacle at {cell}")
        if cell in seen:
            problems.append(f"Wire {wire_id} visits {cell} twice")
        if i > 0 and not cells[i - 1].is_adjacent(cell):
            problems.append(f"Wire {wire_id} jumps from {cells[i - 1]} to {cell}")
        seen.add(cell)
    return problems


def validate_layout(chip: Chip, layout: Layout) -> ValidationResult:
    """Check that a layout is legal on a chip.

    Args:
        chip: The chip the layout was routed on.
        layout: Mapping of wire id to path.

    Returns:
        ValidationResult listing every violation found, or success.
    """
    problems: list[str] = []
    claimed: dict[Coord, int] = {}

    for wire_id, path in layout.items():
        cells = list(path)
        problems.extend(_check_path(chip, wire_id, cells))
        for cell in cells:
            other = claimed.setdefault(cell, wire_id)
            if other != wire_id:
                problems.append(f"Wires {other} and {wire_id} both use {cell}")

    if problems:
        return ValidationResult.failure(problems[0], problems)
    return ValidationResult.success(len(layout))
