"""Chip description loader.

Text format, one directive per line, ``#`` starts a comment::

    grid 7 6
    obstacle 1 1 1 4
    wire 1 4 3 2 3

``grid`` must appear exactly once. Obstacles take two corners in any order;
wires take an id followed by their ``from`` and ``to`` terminals.
"""

from __future__ import annotations

import pathlib
from typing import Any

from .algorithms.grid import Chip
from .algorithms.types import Coord, Obstacle, Wire
from .exceptions import ChipLoadingError, ValidationError
from .logging_config import create_logger

logger = create_logger(__name__)

_ARITY = {"grid": 2, "obstacle": 4, "wire": 5}


def _parse_ints(fields: list[str], source: str, line_no: int) -> list[int]:
    try:
        return [int(f) for f in fields]
    except ValueError:
        raise ChipLoadingError(
            f"expected integers, got {' '.join(fields)!r}",
            source=source,
            line=line_no,
        ) from None


def _make_wire(values: list[int]) -> Wire:
    try:
        return Wire.from_coords(*values)
    except ValueError as e:
        raise ValidationError(str(e), field="wires") from None


def parse_chip(text: str, name: str = "", source: str = "<string>") -> Chip:
    """Parse a chip description.

    Args:
        text: Description in the line format above.
        name: Name given to the chip (used in logs and tool responses).
        source: Label for error messages, e.g. the file path.

    Raises:
        ChipLoadingError: Unknown directive, wrong field count, non-integer
            field, or a missing/repeated ``grid`` line.
        ValidationError: The parsed chip is geometrically invalid.
    """
    size: tuple[int, int] | None = None
    obstacles: list[Obstacle] = []
    wires: list[Wire] = []

    for line_no, raw in enumerate(text.splitlines(), start=1):
        line = raw.split("#", 1)[0].strip()
        if not line:
            continue
        keyword, *fields = line.split()
        keyword = keyword.lower()
        if keyword not in _ARITY:
            raise ChipLoadingError(f"unknown directive {keyword!r}", source=source, line=line_no)
        if len(fields) != _ARITY[keyword]:
            raise ChipLoadingError(
                f"{keyword!r} takes {_ARITY[keyword]} values, got {len(fields)}",
                source=source,
                line=line_no,
            )
        values = _parse_ints(fields, source, line_no)

        if keyword == "grid":
            if size is not None:
                raise ChipLoadingError("grid size given twice", source=source, line=line_no)
            size = (values[0], values[1])
        elif keyword == "obstacle":
            obstacles.append(Obstacle.from_corners(*values))
        else:
            wires.append(_make_wire(values))

    if size is None:
        raise ChipLoadingError("missing 'grid <width> <height>' line", source=source)

    return build_chip(size[0], size[1], obstacles, wires, name=name)


def load_chip(path: str | pathlib.Path) -> Chip:
    """Load a chip description file. The chip is named after the file stem."""
    file_path = pathlib.Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ChipLoadingError(
            f"Cannot read chip file ({e.strerror or e})", source=str(file_path)
        ) from e
    chip = parse_chip(text, name=file_path.stem, source=str(file_path))
    logger.info(f"Loaded {file_path.name}: {len(chip.wires)} wire(s), {len(chip.obstacles)} obstacle(s)")
    return chip


def chip_from_dict(data: dict[str, Any], name: str = "") -> Chip:
    """Build a chip from ``{"width", "height", "obstacles", "wires"}``.

    ``obstacles`` is a list of ``[x1, y1, x2, y2]`` and ``wires`` a list of
    ``[id, x1, y1, x2, y2]``.
    """
    try:
        width = int(data["width"])
        height = int(data["height"])
        obstacles = [Obstacle.from_corners(*map(int, o)) for o in data.get("obstacles", [])]
        wires = [_make_wire(list(map(int, w))) for w in data.get("wires", [])]
    except KeyError as e:
        raise ChipLoadingError(f"Chip description is missing {e.args[0]!r}") from None
    except (TypeError, ValueError) as e:
        raise ChipLoadingError(f"Malformed chip description: {e}") from None
    return build_chip(width, height, obstacles, wires, name=name or str(data.get("name", "")))


def build_chip(
    width: int,
    height: int,
    obstacles: list[Obstacle],
    wires: list[Wire],
    name: str = "",
) -> Chip:
    """Validate the pieces of a chip and assemble it.

    Raises:
        ValidationError: On the first problem found.
    """
    if width <= 0 or height <= 0:
        raise ValidationError(f"Grid size must be positive, got {width}x{height}", field="grid")

    for obs in obstacles:
        for corner in (obs.corner1, obs.corner2):
            if not corner.on_board(width, height):
                raise ValidationError(
                    f"Obstacle corner {corner} is outside the {width}x{height} grid",
                    field="obstacles",
                )

    seen_ids: set[int] = set()
    terminal_owner: dict[Coord, int] = {}
    for w in wires:
        if w.wire_id <= 0:
            raise ValidationError(f"Wire ids must be positive, got {w.wire_id}", field="wires")
        if w.wire_id in seen_ids:
            raise ValidationError(f"Duplicate wire id {w.wire_id}", field="wires")
        seen_ids.add(w.wire_id)
        for cell in w.terminals:
            if not cell.on_board(width, height):
                raise ValidationError(
                    f"Terminal {cell} of {w} is outside the {width}x{height} grid", field="wires"
                )
            if any(obs.contains(cell) for obs in obstacles):
                raise ValidationError(f"Terminal {cell} of {w} lies on an obstacle", field="wires")
            if cell in terminal_owner:
                raise ValidationError(
                    f"Terminal {cell} of {w} is shared with wire {terminal_owner[cell]}",
                    field="wires",
                )
            terminal_owner[cell] = w.wire_id

    return Chip(width, height, list(obstacles), list(wires), name=name)
