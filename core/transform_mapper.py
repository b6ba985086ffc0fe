"""
TransformMapper — turns pinch-held motion into transform updates for the
active tool.

Owns the LatchState. The latch is cleared on the frame the pinch is
released (or when the hand is lost), so every new pinch-and-hold starts
from its own baseline instead of a stale anchor.

Switching tools inside a held pinch cannot happen through dwell selection
(hovering is disabled while pinching) and is not handled here.
"""
from __future__ import annotations
import logging
from typing import Dict, List, Optional

from domain.enums import ManipulationEvent, ScaleStrategy, Tool
from domain.models import GestureFrame, LatchState
from core.transform_state import TransformState
from gestures.base import ToolGesture
from gestures.move import MoveGesture
from gestures.rotate import RotateGesture
from gestures.scale import DragScaleGesture, TwoHandScaleGesture
from utils.constants import MAX_SCALE, MIN_SCALE, ROTATION_SPEED, SCALE_SPEED

log = logging.getLogger(__name__)


class TransformMapper:
    """
    Usage
    -----
    mapper = TransformMapper(transform_state)
    events = mapper.update(frame, active_tool)

    Parameters
    ----------
    transform : TransformState
        Shared transform record written by this mapper.
    scale_strategy : ScaleStrategy
        DRAG (single-hand horizontal drag) or TWO_HAND (fingertip span).
    """

    def __init__(
        self,
        transform: TransformState,
        rotation_speed: float = ROTATION_SPEED,
        scale_speed: float = SCALE_SPEED,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
        scale_strategy: ScaleStrategy = ScaleStrategy.DRAG,
    ) -> None:
        self._transform = transform
        self._latch = LatchState()
        self._was_pinching = False

        if scale_strategy == ScaleStrategy.TWO_HAND:
            scale: ToolGesture = TwoHandScaleGesture(min_scale, max_scale)
        else:
            scale = DragScaleGesture(scale_speed, min_scale, max_scale)

        self._gestures: Dict[Tool, ToolGesture] = {
            Tool.MOVE:   MoveGesture(),
            Tool.ROTATE: RotateGesture(rotation_speed),
            Tool.SCALE:  scale,
        }

    # ------------------------------------------------------------------
    def update(
        self,
        frame: GestureFrame,
        tool: Tool,
        target: Optional[TransformState] = None,
    ) -> List[ManipulationEvent]:
        """
        Process one hand frame.

        ``target`` redirects the writes to another transform record (the
        design being edited); the shared one is used when omitted. Callers
        switching targets must reset() first so no latch leaks across.

        Ordering:
        1. Release edge (pinching true → false) clears the latch.
        2. Nothing happens unless pinching with an active tool.
        3. The tool's gesture computes the new transform / latch.
        """
        events: List[ManipulationEvent] = []
        state = target if target is not None else self._transform

        # 1. Release edge
        if self._was_pinching and not frame.is_pinching:
            if not self._latch.is_empty:
                log.debug("Latch released: %s", self._latch)
                events.append(ManipulationEvent.GESTURE_RELEASED)
            self._latch = LatchState()
        self._was_pinching = frame.is_pinching

        # 2. Gate
        if not frame.is_pinching:
            return events
        gesture = self._gestures.get(tool)
        if gesture is None:
            return events

        # 3. Apply
        new_transform, self._latch, gesture_events = gesture.apply(
            frame, state.snapshot(), self._latch
        )
        if new_transform != state.snapshot():
            state.set(new_transform)
        if ManipulationEvent.GESTURE_LATCHED in gesture_events:
            log.debug("%s latched: %s", tool.value, self._latch)
        events.extend(gesture_events)
        return events

    def reset(self) -> None:
        """Hand lost: forget the latch and the pinch edge."""
        self._latch = LatchState()
        self._was_pinching = False

    # ------------------------------------------------------------------
    @property
    def latch(self) -> LatchState:
        return self._latch
