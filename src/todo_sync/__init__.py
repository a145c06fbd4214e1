"""Client-side task synchronization engine for a REST to-do service."""

__version__ = "0.1.0"
