"""
MoveGesture — the overlay follows the pinching fingertip 1:1.
"""
from __future__ import annotations
from dataclasses import replace

from domain.enums import Tool
from domain.models import GestureFrame, LatchState, Transform
from gestures.base import GestureResult, ToolGesture


class MoveGesture(ToolGesture):
    TOOL = Tool.MOVE

    def apply(self, frame: GestureFrame, transform: Transform,
              latch: LatchState) -> GestureResult:
        # Absolute assignment, no latch.
        return replace(transform, position=frame.fingertip), latch, []
