"""Gesture geometry: where a swipe starts and ends."""

from __future__ import annotations

import math
from typing import Optional, Tuple

from mobilerobot.models import ScreenSize, SwipeDirection
from mobilerobot.tools.driver.base import ActionableError

Endpoints = Tuple[int, int, int, int]

FAR_EDGE_RATIO = 0.8
NEAR_EDGE_RATIO = 0.2
DEFAULT_DISTANCE_RATIO = 0.3


def parse_direction(direction: SwipeDirection | str) -> SwipeDirection:
    try:
        return SwipeDirection(direction)
    except ValueError:
        raise ActionableError(f'Swipe direction "{direction}" is not supported')


def compute_swipe_endpoints(
    screen_size: ScreenSize,
    direction: SwipeDirection | str,
    origin: Optional[Tuple[int, int]] = None,
    distance: Optional[int] = None,
) -> Endpoints:
    """Return ``(x0, y0, x1, y1)`` for a swipe.

    Without *origin* the swipe sweeps 80% ↔ 20% of the screen through its
    centre. With *origin* it travels *distance* pixels (30% of the screen
    dimension when not given) and stops at the screen edge.
    """
    direction = parse_direction(direction)
    if origin is None:
        return _whole_screen(screen_size, direction)
    return _anchored(screen_size, direction, origin, distance)


def _whole_screen(size: ScreenSize, direction: SwipeDirection) -> Endpoints:
    center_x = size.width >> 1
    center_y = math.floor(size.height * 0.5)
    high_y = math.floor(size.height * FAR_EDGE_RATIO)
    low_y = math.floor(size.height * NEAR_EDGE_RATIO)
    high_x = math.floor(size.width * FAR_EDGE_RATIO)
    low_x = math.floor(size.width * NEAR_EDGE_RATIO)

    if direction is SwipeDirection.UP:
        return center_x, high_y, center_x, low_y
    if direction is SwipeDirection.DOWN:
        return center_x, low_y, center_x, high_y
    if direction is SwipeDirection.LEFT:
        return high_x, center_y, low_x, center_y
    return low_x, center_y, high_x, center_y


def _anchored(
    size: ScreenSize,
    direction: SwipeDirection,
    origin: Tuple[int, int],
    distance: Optional[int],
) -> Endpoints:
    x, y = origin
    # a distance of 0 means "use the default" as well
    distance_x = distance or math.floor(size.width * DEFAULT_DISTANCE_RATIO)
    distance_y = distance or math.floor(size.height * DEFAULT_DISTANCE_RATIO)

    if direction is SwipeDirection.UP:
        return x, y, x, max(0, y - distance_y)
    if direction is SwipeDirection.DOWN:
        return x, y, x, min(size.height, y + distance_y)
    if direction is SwipeDirection.LEFT:
        return x, y, max(0, x - distance_x), y
    return x, y, min(size.width, x + distance_x), y
