"""Global constants for the chip router."""

# Occupancy sentinels
FREE = 0
"""Occupancy value of a cell no wire owns."""

OBSTACLE = -1
"""Occupancy value of a cell covered by an obstacle."""

# Search defaults
DEFAULT_EDGE_PENALTY = 1
"""Score penalty added to a neighbour that is not currently available."""

# Environment variables
ENV_RIP_UP = "CHIP_ROUTER_RIP_UP"
ENV_EDGE_PENALTY = "CHIP_ROUTER_EDGE_PENALTY"

# Response Size Constants
MAX_RENDER_CELLS = 10_000
"""Largest grid (width * height) a tool response will render as text."""
