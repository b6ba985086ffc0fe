"""
Abstract base class for the pinch-driven manipulation gestures.

Every gesture must:
  - implement apply(frame, transform, latch) → (transform, latch, events)
  - declare its TOOL class attribute

Gestures are stateless: the latch lives in TransformMapper and is passed in
and returned explicitly, so the mapper alone decides when it is cleared.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Tuple

from domain.enums import ManipulationEvent, Tool
from domain.models import GestureFrame, LatchState, Transform

GestureResult = Tuple[Transform, LatchState, List[ManipulationEvent]]


class ToolGesture(ABC):
    """Base class for all tool gestures."""

    TOOL: Tool = Tool.NONE

    @abstractmethod
    def apply(
        self,
        frame: GestureFrame,
        transform: Transform,
        latch: LatchState,
    ) -> GestureResult:
        """
        Apply one pinching frame.

        Parameters
        ----------
        frame : GestureFrame
            Current fingertip / pinch data (pinching is guaranteed).
        transform : Transform
            Current overlay transform.
        latch : LatchState
            Baselines captured earlier in this pinch (empty on its first frame).

        Returns
        -------
        (transform, latch, events)
            The transform is returned unchanged when nothing should move.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} tool={self.TOOL.value!r}>"
