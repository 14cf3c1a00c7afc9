"""Global chip state for the MCP server.

Holds the currently loaded chip and the result of its last routing run.
Thread-safe: all reads and writes go through a module-level lock.
"""

from __future__ import annotations

import threading

from .algorithms.grid import Chip
from .algorithms.types import RoutingResult
from .loader import load_chip, parse_chip

_lock = threading.Lock()
_current_chip: Chip | None = None
_last_result: RoutingResult | None = None


def _swap(chip: Chip) -> Chip:
    global _current_chip, _last_result
    with _lock:
        _current_chip = chip
        _last_result = None
    return chip


def open_chip(path: str) -> Chip:
    """Load a chip description file and make it current."""
    # Do I/O outside the lock
    return _swap(load_chip(path))


def set_chip_text(text: str, name: str = "") -> Chip:
    """Parse a chip description and make it current."""
    return _swap(parse_chip(text, name=name))


def get_chip() -> Chip:
    """Get the current chip, or raise."""
    with _lock:
        if _current_chip is None:
            raise RuntimeError("No chip loaded. Use open_chip or load_chip_text first.")
        return _current_chip


def set_result(result: RoutingResult) -> None:
    global _last_result
    with _lock:
        _last_result = result


def get_result() -> RoutingResult:
    """Get the last routing result for the current chip, or raise."""
    with _lock:
        if _last_result is None:
            raise RuntimeError("Current chip has not been routed. Use route_chip first.")
        return _last_result


def is_loaded() -> bool:
    """Check if a chip is currently loaded."""
    with _lock:
        return _current_chip is not None


def clear() -> None:
    """Forget the current chip."""
    global _current_chip, _last_result
    with _lock:
        _current_chip = None
        _last_result = None
