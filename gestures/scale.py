"""
Scale gestures.

DragScaleGesture   — horizontal drag of the pinching hand (default).
TwoHandScaleGesture — ratio between the current distance of both index
                      fingertips and the distance when the pinch began.

Both latch on the first pinching frame and clamp the result to
[min_scale, max_scale].
"""
from __future__ import annotations
from dataclasses import replace

from domain.enums import ManipulationEvent, Tool
from domain.models import GestureFrame, LatchState, Transform
from gestures.base import GestureResult, ToolGesture
from utils.constants import MAX_SCALE, MIN_SCALE, SCALE_SPEED
from utils.geometry import clamp, dist, is_finite


class DragScaleGesture(ToolGesture):
    TOOL = Tool.SCALE

    def __init__(
        self,
        speed: float = SCALE_SPEED,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
    ) -> None:
        self._speed = speed
        self._min = min_scale
        self._max = max_scale

    def apply(self, frame: GestureFrame, transform: Transform,
              latch: LatchState) -> GestureResult:
        x = frame.fingertip.x

        if latch.anchor_x is None or latch.scale_base is None:
            latched = replace(latch, anchor_x=x, scale_base=transform.scale)
            return transform, latched, [ManipulationEvent.GESTURE_LATCHED]

        scale = latch.scale_base + (x - latch.anchor_x) * self._speed
        if not is_finite(scale):
            return transform, latch, []
        return replace(transform, scale=clamp(scale, self._min, self._max)), latch, []


class TwoHandScaleGesture(ToolGesture):
    TOOL = Tool.SCALE

    def __init__(
        self,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
    ) -> None:
        self._min = min_scale
        self._max = max_scale

    def apply(self, frame: GestureFrame, transform: Transform,
              latch: LatchState) -> GestureResult:
        if frame.second_fingertip is None:
            return transform, latch, []

        span = dist(frame.fingertip, frame.second_fingertip)

        if latch.span_base is None or latch.scale_base is None:
            # A zero span can't serve as a ratio denominator; wait for a real one.
            if span <= 0.0:
                return transform, latch, []
            latched = replace(latch, span_base=span, scale_base=transform.scale)
            return transform, latched, [ManipulationEvent.GESTURE_LATCHED]

        scale = latch.scale_base * (span / latch.span_base)
        if not is_finite(scale):
            return transform, latch, []
        return replace(transform, scale=clamp(scale, self._min, self._max)), latch, []
