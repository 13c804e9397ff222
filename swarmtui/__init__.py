"""Terminal interface and helpers for browsing a Docker Swarm cluster."""

__version__ = "0.1.0"