"""Task placement, wiring and component models for edge and cloud stream processing."""

__version__ = "0.1.0"