"""chip-router — grid wire router with rip-up-and-retry, served over MCP."""

__version__ = "0.1.0"
