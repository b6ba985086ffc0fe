import pytest

from core.hover_selector import HoverSelector, advance_hover, hovered_tool
from domain.enums import ManipulationEvent, Tool
from domain.models import HoverState, Point2D
from helpers import FPS_STEP, gesture_frame

INSIDE_MOVE = (150, 120)
INSIDE_ROTATE = (270, 120)
OUTSIDE = (600, 600)


def hover_for(selector, buttons, point, start, duration, pinching=False):
    """Feed frames at ~30 fps over ``point`` and return every event seen."""
    events = []
    t = start
    while t <= start + duration + 1e-9:
        events.extend(selector.update(gesture_frame(*point, t, pinching), buttons))
        t += FPS_STEP
    return events, t


# ---- hit testing -----------------------------------------------------------
def test_hovered_tool_inside_and_outside(buttons):
    assert hovered_tool(Point2D(150, 120), buttons, False) == Tool.MOVE
    assert hovered_tool(Point2D(300, 149), buttons, False) == Tool.ROTATE
    assert hovered_tool(Point2D(600, 600), buttons, False) == Tool.NONE


def test_hitbox_edges_are_inclusive(buttons):
    assert hovered_tool(Point2D(100, 100), buttons, False) == Tool.MOVE
    assert hovered_tool(Point2D(200, 150), buttons, False) == Tool.MOVE


def test_pinching_never_hovers(buttons):
    assert hovered_tool(Point2D(150, 120), buttons, True) == Tool.NONE


# ---- reducer ---------------------------------------------------------------
def test_advance_starts_hovering_on_new_tool():
    state, active, events = advance_hover(HoverState(), Tool.MOVE, Tool.NONE, 10.0)
    assert state == HoverState(Tool.MOVE, 10.0, False)
    assert active == Tool.NONE
    assert events == []


def test_advance_toggles_off_when_already_active():
    state = HoverState(Tool.SCALE, 0.0, False)
    state, active, events = advance_hover(state, Tool.SCALE, Tool.SCALE, 0.6)
    assert active == Tool.NONE
    assert state.consumed
    assert events == [ManipulationEvent.TOOL_CLEARED]


def test_advance_none_resets_to_idle():
    state = HoverState(Tool.MOVE, 0.0, True)
    state, active, _ = advance_hover(state, Tool.NONE, Tool.MOVE, 1.0)
    assert state == HoverState()
    assert active == Tool.MOVE


# ---- dwell properties ------------------------------------------------------
def test_short_hover_never_toggles(buttons):
    sel = HoverSelector(dwell_time=0.5)
    events, _ = hover_for(sel, buttons, INSIDE_MOVE, 0.0, 0.45)
    assert events == []
    assert sel.active_tool == Tool.NONE


def test_scenario_move_selected_after_dwell(buttons):
    # 18 frames at 30 fps over the MOVE button.
    sel = HoverSelector(dwell_time=0.5)
    toggled_at = None
    for i in range(18):
        t = i * FPS_STEP
        if sel.update(gesture_frame(150, 120, t), buttons):
            toggled_at = t
    assert sel.active_tool == Tool.MOVE
    assert toggled_at is not None and toggled_at > 0.5
    assert toggled_at - FPS_STEP <= 0.5


def test_long_hover_toggles_exactly_once(buttons):
    sel = HoverSelector(dwell_time=0.5)
    events, _ = hover_for(sel, buttons, INSIDE_MOVE, 0.0, 3.0)
    assert events == [ManipulationEvent.TOOL_SELECTED]
    assert sel.active_tool == Tool.MOVE


def test_interruption_rearms_dwell_clock(buttons):
    sel = HoverSelector(dwell_time=0.5)
    _, t = hover_for(sel, buttons, INSIDE_MOVE, 0.0, 0.3)
    sel.update(gesture_frame(*INSIDE_ROTATE, t), buttons)
    t += FPS_STEP
    back = t
    # Past 500 ms from the original start, but not from the return.
    events, _ = hover_for(sel, buttons, INSIDE_MOVE, back, 0.4)
    assert events == []
    assert sel.active_tool == Tool.NONE
    events, _ = hover_for(sel, buttons, INSIDE_MOVE, back + 0.4 + FPS_STEP, 0.2)
    assert events == [ManipulationEvent.TOOL_SELECTED]


def test_pinch_breaks_hover(buttons):
    sel = HoverSelector(dwell_time=0.5)
    _, t = hover_for(sel, buttons, INSIDE_MOVE, 0.0, 0.4)
    sel.update(gesture_frame(*INSIDE_MOVE, t, pinching=True), buttons)
    assert sel.state == HoverState()
    events, _ = hover_for(sel, buttons, INSIDE_MOVE, t + FPS_STEP, 0.3)
    assert events == []


def test_active_button_needs_rehover_to_toggle_off(buttons):
    sel = HoverSelector(dwell_time=0.5)
    _, t = hover_for(sel, buttons, INSIDE_MOVE, 0.0, 2.0)
    assert sel.active_tool == Tool.MOVE

    sel.update(gesture_frame(*OUTSIDE, t), buttons)
    events, _ = hover_for(sel, buttons, INSIDE_MOVE, t + FPS_STEP, 1.0)
    assert events == [ManipulationEvent.TOOL_CLEARED]
    assert sel.active_tool == Tool.NONE


def test_switching_buttons_selects_the_new_tool(buttons):
    sel = HoverSelector(dwell_time=0.5)
    _, t = hover_for(sel, buttons, INSIDE_MOVE, 0.0, 1.0)
    hover_for(sel, buttons, INSIDE_ROTATE, t, 1.0)
    assert sel.active_tool == Tool.ROTATE


def test_reset_keeps_active_tool(buttons):
    sel = HoverSelector(dwell_time=0.5)
    hover_for(sel, buttons, INSIDE_MOVE, 0.0, 1.0)
    sel.reset()
    assert sel.state == HoverState()
    assert sel.active_tool == Tool.MOVE


def test_progress(buttons):
    sel = HoverSelector(dwell_time=0.5)
    sel.update(gesture_frame(*INSIDE_MOVE, 1.0), buttons)
    assert sel.progress(1.25) == pytest.approx(0.5)
    assert sel.progress(5.0) == 1.0
    sel.update(gesture_frame(*INSIDE_MOVE, 1.6), buttons)
    assert sel.progress(1.6) == 0.0
