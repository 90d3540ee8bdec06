"""Helper utilities for tools."""

from .geometry import compute_swipe_endpoints, parse_direction

__all__ = ["compute_swipe_endpoints", "parse_direction"]
