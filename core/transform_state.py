"""
TransformState — the single mutable record of the overlay's transform.

Only the mapper and the body calibrator write to it; the rendering layer
reads immutable snapshots. Scale is clamped on every write.
"""
from __future__ import annotations
from typing import Optional

from domain.models import Point2D, Transform
from utils.constants import MAX_SCALE, MIN_SCALE
from utils.geometry import clamp, is_finite


class TransformState:
    """
    Parameters
    ----------
    initial : Transform
        Value restored by reset().
    min_scale, max_scale : float
        Hard clamp bounds applied at write time.
    """

    def __init__(
        self,
        initial: Optional[Transform] = None,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
    ) -> None:
        self._min = min_scale
        self._max = max_scale
        self._initial = self._clamped(initial or Transform())
        self._current = self._initial

    # ------------------------------------------------------------------
    def set(self, transform: Transform) -> Transform:
        """
        Store ``transform`` (scale clamped). Non-finite fields are ignored
        and keep their previous value.
        """
        cur = self._current
        pos = transform.position
        if not is_finite(pos.x, pos.y):
            pos = cur.position
        rotation = transform.rotation if is_finite(transform.rotation) else cur.rotation
        scale = transform.scale if is_finite(transform.scale) else cur.scale
        self._current = self._clamped(Transform(pos, rotation, scale))
        return self._current

    def reset(self) -> Transform:
        self._current = self._initial
        return self._current

    def snapshot(self) -> Transform:
        return self._current

    # ---- convenience accessors ----------------------------------------
    @property
    def position(self) -> Point2D:
        return self._current.position

    @property
    def rotation(self) -> float:
        return self._current.rotation

    @property
    def scale(self) -> float:
        return self._current.scale

    # ------------------------------------------------------------------
    def _clamped(self, t: Transform) -> Transform:
        return Transform(t.position, t.rotation, clamp(t.scale, self._min, self._max))
