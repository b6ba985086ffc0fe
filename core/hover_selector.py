"""
HoverSelector — dwell-time tool selection.

Holding the (non-pinching) fingertip over a toolbar button for longer than
the dwell time toggles that tool exactly once. Moving off the button, onto
another button or starting a pinch re-arms the timer.

The transition logic lives in ``advance_hover`` as a pure function; the class
only keeps the current HoverState and active tool between frames.
"""
from __future__ import annotations
import logging
from typing import List, Mapping, Tuple

from domain.enums import ManipulationEvent, Tool
from domain.models import ButtonRect, GestureFrame, HoverState, Point2D
from utils.constants import DWELL_TIME

log = logging.getLogger(__name__)

# Hit-test order when rects overlap.
TOOL_ORDER = (Tool.MOVE, Tool.ROTATE, Tool.SCALE)

Buttons = Mapping[Tool, ButtonRect]


def hovered_tool(point: Point2D, buttons: Buttons, is_pinching: bool) -> Tool:
    """Which toolbar button is under ``point`` (NONE while pinching)."""
    if is_pinching:
        return Tool.NONE
    for tool in TOOL_ORDER:
        rect = buttons.get(tool)
        if rect is not None and rect.contains(point):
            return tool
    return Tool.NONE


def advance_hover(
    state: HoverState,
    hovered: Tool,
    active: Tool,
    now: float,
    dwell_time: float = DWELL_TIME,
) -> Tuple[HoverState, Tool, List[ManipulationEvent]]:
    """
    One step of the dwell state machine.

    Returns ``(new_state, new_active_tool, events)``.
    """
    if hovered == Tool.NONE:
        return HoverState(), active, []

    if hovered != state.hovered_tool:
        return HoverState(hovered_tool=hovered, hover_start=now), active, []

    if (
        not state.consumed
        and state.hover_start is not None
        and now - state.hover_start > dwell_time
    ):
        if active == hovered:
            return (HoverState(hovered, state.hover_start, True),
                    Tool.NONE, [ManipulationEvent.TOOL_CLEARED])
        return (HoverState(hovered, state.hover_start, True),
                hovered, [ManipulationEvent.TOOL_SELECTED])

    return state, active, []


class HoverSelector:
    """
    Parameters
    ----------
    dwell_time : float
        Seconds a button must be hovered before it toggles.
    """

    def __init__(self, dwell_time: float = DWELL_TIME) -> None:
        self._dwell = dwell_time
        self._state = HoverState()
        self._active = Tool.NONE

    # ------------------------------------------------------------------
    def update(self, frame: GestureFrame, buttons: Buttons) -> List[ManipulationEvent]:
        hovered = hovered_tool(frame.fingertip, buttons, frame.is_pinching)
        self._state, new_active, events = advance_hover(
            self._state, hovered, self._active, frame.timestamp, self._dwell
        )
        if new_active != self._active:
            log.info("Tool %s -> %s", self._active.value, new_active.value)
            self._active = new_active
        return events

    def progress(self, now: float) -> float:
        """Fraction of the dwell time elapsed on the current button, 0..1."""
        st = self._state
        if st.hovered_tool == Tool.NONE or st.hover_start is None or st.consumed:
            return 0.0
        if self._dwell <= 0:
            return 1.0
        return max(0.0, min(1.0, (now - st.hover_start) / self._dwell))

    def select(self, tool: Tool) -> None:
        """Explicit selection by the host (mouse click, keyboard)."""
        self._active = tool

    def reset(self) -> None:
        """Drop the dwell working state; the active tool is kept."""
        self._state = HoverState()

    # ------------------------------------------------------------------
    @property
    def active_tool(self) -> Tool:
        return self._active

    @property
    def state(self) -> HoverState:
        return self._state

    @property
    def hovered(self) -> Tool:
        return self._state.hovered_tool
