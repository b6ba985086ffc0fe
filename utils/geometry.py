"""
Pure geometric utility functions.
No imports from the rest of the project apart from domain value types.
"""
from __future__ import annotations
import math
from typing import Optional, Tuple, Union

from domain.models import Landmark, Point2D

PointLike = Union[Point2D, Landmark, Tuple[float, float]]


def _xy(p: PointLike) -> Tuple[float, float]:
    if isinstance(p, tuple):
        return p[0], p[1]
    return p.x, p.y


def dist(a: PointLike, b: PointLike) -> float:
    """Euclidean distance between two 2D points (z is ignored)."""
    ax, ay = _xy(a)
    bx, by = _xy(b)
    return math.hypot(ax - bx, ay - by)


def midpoint(a: Point2D, b: Point2D) -> Point2D:
    return Point2D((a.x + b.x) / 2, (a.y + b.y) / 2)


def clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


def segment_angle(a: Point2D, b: Point2D) -> Optional[float]:
    """
    Direction of the segment a→b in degrees (atan2, y grows downwards).
    Returns None for a zero-length segment.
    """
    dx = b.x - a.x
    dy = b.y - a.y
    if dx == 0 and dy == 0:
        return None
    return math.degrees(math.atan2(dy, dx))


def to_container(lm: Landmark, width: float, height: float,
                 mirror: bool = False) -> Point2D:
    """
    Convert a normalised landmark to container pixels.
    With ``mirror`` the x axis is flipped (``width - x * width``).
    """
    x = lm.x * width
    if mirror:
        x = width - x
    return Point2D(x, lm.y * height)


def is_finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)
