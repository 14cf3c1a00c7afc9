"""Wire routing engine — bounded depth-first search plus a single rip-up-and-retry pass.

Each wire is searched on the chip's current occupancy with a branch-and-bound
DFS: neighbours are tried closest-to-target first, and any branch that can no
longer beat the best complete path found so far is cut. Wires are committed in
input order. A wire that cannot be placed triggers one rip-up pass: every
earlier wire is lifted, the blocked wire is retried on the cleared grid, and
the lifted wires are then routed again in their original order.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from ..logging_config import chip_ctx, create_logger
from .grid import Chip
from .types import Coord, Layout, Path, RouterConfig, RoutingResult, Wire

logger = create_logger(__name__)


def _score(chip: Chip, wire: Wire, coord: Coord, edge_penalty: int) -> int:
    """Neighbour ordering key: distance to the target, plus a penalty if unavailable."""
    penalty = 0 if chip.is_available(coord, wire.wire_id) else edge_penalty
    return coord.manhattan(wire.to) + penalty


@dataclass
class _WireSearch:
    """State of one single-wire search: the chip it reads and the best path so far."""

    chip: Chip
    wire: Wire
    edge_penalty: int
    best: Path | None = None
    expanded: int = 0

    def _candidates(self, path: Path, cell: Coord) -> list[Coord]:
        wire_id = self.wire.wire_id
        usable = [
            n
            for n in cell.neighbors(self.chip.width, self.chip.height)
            if self.chip.is_available(n, wire_id) and n not in path
        ]
        # sort() is stable: equal scores keep right/left/down/up order
        usable.sort(key=lambda n: _score(self.chip, self.wire, n, self.edge_penalty))
        return usable

    def _may_improve(self, path: Path, cell: Coord) -> bool:
        if self.best is None:
            return True
        return len(path) + cell.manhattan(self.wire.to) < len(self.best)

    def _offer(self, path: Path) -> None:
        if self.best is None or len(path) < len(self.best):
            self.best = path.copy()

    def run(self) -> Path | None:
        target = self.wire.to
        path = Path(self.wire)
        frames: list[tuple[Coord, Iterator[Coord]]] = [
            (self.wire.from_, iter(self._candidates(path, self.wire.from_)))
        ]

        while frames:
            cell, pending = frames[-1]
            nxt = next(pending, None)
            if nxt is None or not self._may_improve(path, cell):
                frames.pop()
                if frames:
                    path.pop()
                continue

            path.add(nxt)
            self.expanded += 1
            if nxt == target:
                self._offer(path)
                path.pop()
            elif self.best is not None and len(path) >= len(self.best):
                path.pop()
            else:
                frames.append((nxt, iter(self._candidates(path, nxt))))

        return self.best


def find_path(chip: Chip, wire: Wire, config: RouterConfig | None = None) -> Path | None:
    """Search for the shortest path of one wire on the chip's current occupancy.

    The chip is only read. Among equally short paths the first one
    discovered wins, so the result is deterministic.

    Args:
        chip: Chip whose occupancy constrains the search.
        wire: Wire to connect.
        config: Router configuration. Defaults to ``RouterConfig()``.

    Returns:
        The best complete path found, or None if the terminals cannot be joined.
    """
    config = config or RouterConfig()
    search = _WireSearch(chip, wire, config.edge_penalty)
    path = search.run()
    logger.debug(
        f"{wire}: {'length ' + str(len(path)) if path else 'no path'} "
        f"after {search.expanded} expansions"
    )
    return path


def _commit(chip: Chip, layout: Layout, path: Path) -> None:
    wire_id = path.wire.wire_id
    for cell in path:
        chip.mark(cell, wire_id)
    layout[wire_id] = path


def _rip_up(chip: Chip, layout: Layout, current: Wire) -> list[Wire]:
    """Lift every committed wire other than ``current``, keeping their terminals."""
    lifted = []
    for w in chip.wires:
        if w.wire_id == current.wire_id or w.wire_id not in layout:
            continue
        chip.release_wire(w.wire_id)
        del layout[w.wire_id]
        lifted.append(w)
    return lifted


def _connect(chip: Chip, config: RouterConfig, result: RoutingResult) -> Layout:
    layout: Layout = {}
    chip.reset_routing()

    for wire in chip.wires:
        path = find_path(chip, wire, config)
        if path is not None:
            _commit(chip, layout, path)
            continue

        if not config.rip_up:
            result.diagnostics.append(f"Could not add {wire}")
            logger.warning(f"Could not add {wire}")
            continue

        lifted = _rip_up(chip, layout, wire)
        result.rip_up_count += 1
        logger.info(f"{wire} is blocked; ripped up {len(lifted)} wire(s) and retrying")

        path = find_path(chip, wire, config)
        if path is not None:
            _commit(chip, layout, path)

        for other in lifted:
            replacement = find_path(chip, other, config)
            if replacement is not None:
                _commit(chip, layout, replacement)
            else:
                result.diagnostics.append(f"Could not replace {other}")
                logger.warning(f"Could not replace {other}")

        if path is None:
            result.diagnostics.append(f"Could not add {wire}")
            logger.warning(f"Could not add {wire}")

    return {w.wire_id: layout[w.wire_id] for w in chip.wires if w.wire_id in layout}


def connect_all_wires(chip: Chip, config: RouterConfig | None = None) -> Layout:
    """Lay out a path for every wire on the chip.

    Occupancy is reset first, then wires are routed in input order. The
    chip's occupancy is left holding the returned layout.

    Args:
        chip: Chip to route (its occupancy is mutated).
        config: Router configuration. Defaults to ``RouterConfig()``.

    Returns:
        Mapping of wire id to path. Wires that could not be connected have
        no entry.
    """
    return route_chip(chip, config).layout


def route_chip(chip: Chip, config: RouterConfig | None = None) -> RoutingResult:
    """Route every wire and collect the layout together with its diagnostics.

    Args:
        chip: Chip to route (its occupancy is mutated).
        config: Router configuration. Defaults to ``RouterConfig()``.
    """
    config = config or RouterConfig()
    result = RoutingResult()
    token = chip_ctx.set(chip.name or None)
    try:
        logger.info(
            f"Routing {len(chip.wires)} wire(s) on a {chip.width}x{chip.height} grid "
            f"with {len(chip.obstacles)} obstacle(s)"
        )
        result.layout = _connect(chip, config, result)
        result.routed_wires = list(result.layout)
        result.failed_wires = [w.wire_id for w in chip.wires if w.wire_id not in result.layout]
        result.total_wire_usage = total_wire_usage(result.layout)
        result.all_connected = all_connected(chip, result.layout)
        logger.info(
            f"Routed {len(result.routed_wires)}/{len(chip.wires)} wire(s), "
            f"total usage {result.total_wire_usage}"
        )
    finally:
        chip_ctx.reset(token)
    return result


def total_wire_usage(layout: Layout) -> int:
    """Sum of the lengths (cell counts) of every path in a layout."""
    return sum(len(path) for path in layout.values())


def all_connected(chip: Chip, layout: Layout) -> bool:
    """True iff every wire on the chip has a path in the layout."""
    return all(w.wire_id in layout for w in chip.wires)
