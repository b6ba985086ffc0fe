"""
RotateGesture — vertical drag while pinching rotates the overlay.

The first pinching frame only latches the fingertip y and the current
rotation; later frames rotate relative to that baseline, so the overlay
never jumps when the pinch starts.
"""
from __future__ import annotations
from dataclasses import replace

from domain.enums import ManipulationEvent, Tool
from domain.models import GestureFrame, LatchState, Transform
from gestures.base import GestureResult, ToolGesture
from utils.constants import ROTATION_SPEED
from utils.geometry import is_finite


class RotateGesture(ToolGesture):
    TOOL = Tool.ROTATE

    def __init__(self, speed: float = ROTATION_SPEED) -> None:
        self._speed = speed

    def apply(self, frame: GestureFrame, transform: Transform,
              latch: LatchState) -> GestureResult:
        y = frame.fingertip.y

        if latch.anchor_y is None or latch.rotation_base is None:
            latched = replace(latch, anchor_y=y, rotation_base=transform.rotation)
            return transform, latched, [ManipulationEvent.GESTURE_LATCHED]

        rotation = latch.rotation_base + (y - latch.anchor_y) * self._speed
        if not is_finite(rotation):
            return transform, latch, []
        return replace(transform, rotation=rotation), latch, []
