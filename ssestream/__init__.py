"""Client for streams of Server-Sent Events: connection, reconnection and event parsing."""

__version__ = "1.1.1"