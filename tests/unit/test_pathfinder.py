"""Tests for the wire search and rip-up-and-retry router (algorithms/pathfinder.py)."""

from __future__ import annotations

import pytest

from chip_router.algorithms.grid import Chip
from chip_router.algorithms.pathfinder import (
    all_connected,
    connect_all_wires,
    find_path,
    route_chip,
    total_wire_usage,
)
from chip_router.algorithms.types import Coord, Obstacle, Path, RouterConfig, Wire
from chip_router.constants import FREE
from chip_router.validation import validate_layout


def _make_chip(
    width: int,
    height: int,
    wires: list[tuple[int, int, int, int, int]],
    obstacles: list[tuple[int, int, int, int]] | None = None,
) -> Chip:
    """Build a chip from raw tuples."""
    return Chip(
        width,
        height,
        obstacles=[Obstacle.from_corners(*o) for o in obstacles or []],
        wires=[Wire.from_coords(*w) for w in wires],
    )


def _detour_chip() -> Chip:
    """7x6 chip whose single wire must go around the right and top edges."""
    return _make_chip(
        7,
        6,
        wires=[(1, 4, 3, 2, 3)],
        obstacles=[(1, 1, 1, 4), (1, 4, 3, 4), (3, 2, 3, 4), (3, 2, 5, 2)],
    )


def _crossing_chip(height: int = 5) -> Chip:
    """4-wide chip: one vertical wire down x=1, horizontal wires crossing it on every inner row."""
    wires = [(1, 1, 0, 1, height - 1)]
    for wire_id, y in enumerate(range(1, height - 1), start=2):
        wires.append((wire_id, 0, y, 2, y))
    return _make_chip(4, height, wires=wires)


def _walled_in_chip() -> Chip:
    """Wire 2 starts on a cell boxed in by obstacles on all four sides."""
    return _make_chip(
        5,
        5,
        wires=[(1, 0, 0, 4, 4), (2, 2, 2, 0, 4)],
        obstacles=[(1, 1, 3, 1), (1, 3, 3, 3), (1, 2, 1, 2), (3, 2, 3, 2)],
    )


def _cells(path: Path) -> list[tuple[int, int]]:
    return [(c.x, c.y) for c in path]


class TestFindPath:
    def test_adjacent_terminals(self) -> None:
        chip = _make_chip(3, 3, wires=[(1, 0, 0, 1, 0)])
        path = find_path(chip, chip.wire(1))
        assert path is not None
        assert _cells(path) == [(0, 0), (1, 0)]
        assert len(path) == 2

    def test_straight_line(self) -> None:
        chip = _make_chip(10, 3, wires=[(1, 0, 1, 9, 1)])
        path = find_path(chip, chip.wire(1))
        assert path is not None
        assert len(path) == chip.wire(1).separation() + 1
        assert all(c.y == 1 for c in path)

    def test_ties_follow_neighbor_order(self) -> None:
        chip = _make_chip(3, 3, wires=[(1, 0, 0, 2, 2)])
        path = find_path(chip, chip.wire(1))
        assert path is not None
        assert _cells(path) == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]

    def test_detour_around_obstacles(self) -> None:
        chip = _detour_chip()
        path = find_path(chip, chip.wire(1))
        assert path is not None
        assert len(path) == 11
        assert str(path) == (
            "[(4, 3), (5, 3), (6, 3), (6, 2), (6, 1), (5, 1), (4, 1), (3, 1), (2, 1), (2, 2), (2, 3)]"
        )

    def test_finds_shortest_not_first(self) -> None:
        # Heading straight for the target walks into a dead end; the shortest
        # path goes around the wall's lower end.
        chip = _make_chip(
            6,
            6,
            wires=[(1, 0, 2, 5, 2)],
            obstacles=[(3, 0, 3, 3)],
        )
        path = find_path(chip, chip.wire(1))
        assert path is not None
        # Manhattan 5, plus 2 down and 2 back up to clear the wall at y=4
        assert len(path) == 10
        assert Coord(3, 4) in path

    def test_avoids_other_wires(self) -> None:
        chip = _make_chip(5, 4, wires=[(1, 0, 1, 4, 1), (2, 2, 0, 2, 2)])
        chip.mark(Coord(2, 1), 2)
        path = find_path(chip, chip.wire(1))
        assert path is not None
        assert Coord(2, 1) not in path
        assert Coord(2, 0) not in path
        assert Coord(2, 2) not in path

    def test_blocked_returns_none(self) -> None:
        chip = _walled_in_chip()
        assert find_path(chip, chip.wire(2)) is None

    def test_does_not_mutate_chip(self) -> None:
        chip = _detour_chip()
        before = dict(chip.occupancy)
        find_path(chip, chip.wire(1))
        assert chip.occupancy == before

    def test_edge_penalty_does_not_change_result(self) -> None:
        chip = _detour_chip()
        default = find_path(chip, chip.wire(1))
        heavy = find_path(chip, chip.wire(1), RouterConfig(edge_penalty=10))
        assert default == heavy


class TestConnectAllWires:
    def test_single_detour(self) -> None:
        chip = _detour_chip()
        layout = connect_all_wires(chip)
        assert list(layout) == [1]
        assert len(layout[1]) == 11
        assert _cells(layout[1]) == [
            (4, 3),
            (5, 3),
            (6, 3),
            (6, 2),
            (6, 1),
            (5, 1),
            (4, 1),
            (3, 1),
            (2, 1),
            (2, 2),
            (2, 3),
        ]
        assert chip.render().splitlines() == [
            ".......",
            ".X11111",
            ".X1XXX1",
            ".X1X111",
            ".XXX...",
            ".......",
        ]

    def test_crossing_wires_all_routed(self) -> None:
        chip = _crossing_chip()
        layout = connect_all_wires(chip)
        assert all_connected(chip, layout)
        assert total_wire_usage(layout) == 18
        assert list(layout) == [1, 2, 3, 4]
        # The vertical wire was lifted and sent around the right-hand column
        assert _cells(layout[1]) == [
            (1, 0),
            (2, 0),
            (3, 0),
            (3, 1),
            (3, 2),
            (3, 3),
            (3, 4),
            (2, 4),
            (1, 4),
        ]
        assert _cells(layout[2]) == [(0, 1), (1, 1), (2, 1)]

    @pytest.mark.parametrize("height", [5, 6, 8])
    def test_crossing_wires_usage_grows_linearly(self, height: int) -> None:
        chip = _crossing_chip(height)
        layout = connect_all_wires(chip)
        assert all_connected(chip, layout)
        assert total_wire_usage(layout) == 4 * height - 2

    def test_occupancy_matches_layout(self) -> None:
        chip = _crossing_chip()
        layout = connect_all_wires(chip)
        for wire_id, path in layout.items():
            for cell in path:
                assert chip.owner(cell) == wire_id

    def test_layout_is_valid(self) -> None:
        for chip in (_detour_chip(), _crossing_chip(), _walled_in_chip()):
            layout = connect_all_wires(chip)
            result = validate_layout(chip, layout)
            assert result.valid, result.errors

    def test_routing_twice_is_identical(self) -> None:
        chip = _crossing_chip()
        first = route_chip(chip)
        second = route_chip(chip)
        assert first.layout == second.layout
        assert first.diagnostics == second.diagnostics

    def test_fresh_chips_route_identically(self) -> None:
        first = route_chip(_crossing_chip(7))
        second = route_chip(_crossing_chip(7))
        assert first.layout == second.layout
        assert first.diagnostics == second.diagnostics


class TestRipUp:
    def test_rip_up_counted(self) -> None:
        result = route_chip(_crossing_chip())
        assert result.rip_up_count == 1
        assert result.diagnostics == []

    def test_replacement_failure_reported(self) -> None:
        # Wire 2 cuts straight through wire 1's only route; after the rip-up
        # wire 2 takes the middle cell and wire 1 cannot get back in.
        chip = _make_chip(3, 3, wires=[(1, 0, 1, 2, 1), (2, 1, 0, 1, 2)])
        result = route_chip(chip)
        assert list(result.layout) == [2]
        assert _cells(result.layout[2]) == [(1, 0), (1, 1), (1, 2)]
        assert result.failed_wires == [1]
        assert result.diagnostics == ["Could not replace Wire[1:(0, 1),(2, 1)]"]
        assert result.all_connected is False

    def test_lifted_wire_cells_released(self) -> None:
        chip = _make_chip(3, 3, wires=[(1, 0, 1, 2, 1), (2, 1, 0, 1, 2)])
        route_chip(chip)
        # Wire 1 could not be replaced: only its terminals remain
        assert set(chip.cells_owned_by(1)) == {Coord(0, 1), Coord(2, 1)}
        assert set(chip.cells_owned_by(2)) == {Coord(1, 0), Coord(1, 1), Coord(1, 2)}
        assert chip.owner(Coord(0, 0)) == FREE

    def test_without_rip_up(self) -> None:
        chip = _make_chip(3, 3, wires=[(1, 0, 1, 2, 1), (2, 1, 0, 1, 2)])
        result = route_chip(chip, RouterConfig(rip_up=False))
        assert list(result.layout) == [1]
        assert result.rip_up_count == 0
        assert result.diagnostics == ["Could not add Wire[2:(1, 0),(1, 2)]"]

    def test_walled_in_wire_unroutable(self) -> None:
        chip = _walled_in_chip()
        result = route_chip(chip)
        assert 2 not in result.layout
        assert result.failed_wires == [2]
        assert result.all_connected is False
        assert result.diagnostics == ["Could not add Wire[2:(2, 2),(0, 4)]"]
        # Wire 1 was lifted and put back along the top and right edges
        assert len(result.layout[1]) == 9
        assert result.rip_up_count == 1

    def test_walled_in_wire_absent_without_rip_up(self) -> None:
        chip = _walled_in_chip()
        layout = connect_all_wires(chip, RouterConfig(rip_up=False))
        assert 2 not in layout
        assert not all_connected(chip, layout)

    def test_ripped_up_wire_keeps_terminals(self) -> None:
        chip = _walled_in_chip()
        connect_all_wires(chip)
        assert chip.owner(Coord(2, 2)) == 2
        assert chip.owner(Coord(0, 4)) == 2


class TestMultiWire:
    def test_ring_of_wires_around_block(self) -> None:
        chip = _make_chip(
            6,
            6,
            wires=[
                (1, 0, 0, 5, 0),
                (2, 0, 5, 5, 5),
                (3, 0, 1, 0, 4),
                (4, 5, 1, 5, 4),
                (5, 1, 1, 4, 4),
            ],
            obstacles=[(2, 2, 3, 3)],
        )
        result = route_chip(chip)
        assert result.all_connected
        assert result.total_wire_usage == 6 + 6 + 4 + 4 + 7
        assert result.rip_up_count == 0
        assert validate_layout(chip, result.layout).valid


class TestHelpers:
    def test_total_wire_usage_empty(self) -> None:
        assert total_wire_usage({}) == 0

    def test_all_connected_empty_chip(self) -> None:
        chip = _make_chip(2, 2, wires=[])
        assert all_connected(chip, {}) is True

    def test_all_connected_missing_wire(self) -> None:
        chip = _make_chip(3, 1, wires=[(1, 0, 0, 1, 0)])
        assert all_connected(chip, {}) is False
