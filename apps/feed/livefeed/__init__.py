"""LiveFeed: real-time event fan-out server."""

__version__ = "0.1.0"
