import threading

import pytest

from core.session import ManipulationSession, build_gesture_frame
from domain.enums import ManipulationEvent, Mode, Tool
from domain.models import Point2D, Transform
from helpers import FPS_STEP, hand_landmarks, pose_landmarks

W, H = 1000, 500


@pytest.fixture
def session():
    return ManipulationSession(initial=Transform(Point2D(400, 300), 0.0, 1.0))


def dwell_select(session, buttons, x_norm, y_norm, start=0.0, frames=20):
    t = start
    for _ in range(frames):
        session.on_hands([hand_landmarks(x_norm, y_norm)], buttons, W, H, t)
        t += FPS_STEP
    return t


# ---- frame building --------------------------------------------------------
def test_build_gesture_frame_converts_to_pixels():
    frame = build_gesture_frame([hand_landmarks(0.15, 0.24)], W, H, 1.0)
    assert tuple(frame.fingertip) == pytest.approx((150, 120))
    assert not frame.is_pinching
    assert frame.hands_present == 1
    assert frame.second_fingertip is None


def test_build_gesture_frame_mirrored_and_two_hands():
    hands = [hand_landmarks(0.25, 0.5, pinching=True), hand_landmarks(0.75, 0.5)]
    frame = build_gesture_frame(hands, W, H, 1.0, mirror=True)
    assert tuple(frame.fingertip) == pytest.approx((750, 250))
    assert frame.is_pinching
    assert frame.hands_present == 2
    assert tuple(frame.second_fingertip) == pytest.approx((250, 250))


def test_build_gesture_frame_without_hands():
    assert build_gesture_frame([], W, H, 1.0) is None


# ---- hand pipeline ---------------------------------------------------------
def test_dwell_then_pinch_moves_overlay(session, buttons):
    t = dwell_select(session, buttons, 0.15, 0.24)
    assert session.active_tool == Tool.MOVE

    session.on_hands([hand_landmarks(0.6, 0.7, pinching=True)], buttons, W, H, t)
    assert tuple(session.transform.position) == pytest.approx((600, 350))

    view = session.snapshot()
    assert view.pinching
    assert view.active_tool == Tool.MOVE


def test_pinching_over_button_does_not_select(session, buttons):
    t = 0.0
    for _ in range(30):
        session.on_hands([hand_landmarks(0.15, 0.24, pinching=True)], buttons, W, H, t)
        t += FPS_STEP
    assert session.active_tool == Tool.NONE


def test_no_hand_resets_working_state_but_keeps_tool(session, buttons):
    t = dwell_select(session, buttons, 0.27, 0.24)      # ROTATE button
    assert session.active_tool == Tool.ROTATE

    session.on_hands([hand_landmarks(0.5, 0.2, pinching=True)], buttons, W, H, t)
    session.on_hands([hand_landmarks(0.5, 0.4, pinching=True)], buttons, W, H, t + FPS_STEP)
    rotation = session.transform.rotation
    assert rotation == pytest.approx(1.0)

    events = session.on_hands([], buttons, W, H, t + 2 * FPS_STEP)
    assert events == [ManipulationEvent.HAND_LOST]
    assert session.active_tool == Tool.ROTATE
    assert session.snapshot().fingertip is None

    # New pinch re-latches instead of resuming from the old anchor.
    session.on_hands([hand_landmarks(0.5, 0.9, pinching=True)], buttons, W, H, t + 3 * FPS_STEP)
    assert session.transform.rotation == rotation


def test_hand_lost_reported_once_per_loss(session, buttons):
    assert session.on_no_hand() == []       # never seen yet

    session.on_hands([hand_landmarks(0.5, 0.5)], buttons, W, H, 0.0)
    assert session.on_no_hand() == [ManipulationEvent.HAND_LOST]
    assert session.on_no_hand() == []
    assert session.on_hands([], buttons, W, H, 0.1) == []

    session.on_hands([hand_landmarks(0.5, 0.5)], buttons, W, H, 0.2)
    assert session.on_hands([], buttons, W, H, 0.3) == [ManipulationEvent.HAND_LOST]


def test_repeated_empty_frames_still_reset_latch(session, buttons):
    t = dwell_select(session, buttons, 0.27, 0.24)      # ROTATE button
    session.on_hands([hand_landmarks(0.5, 0.2, pinching=True)], buttons, W, H, t)
    session.on_no_hand()
    session.on_no_hand()
    rotation = session.transform.rotation
    # The first pinch after the gap only latches.
    session.on_hands([hand_landmarks(0.5, 0.8, pinching=True)], buttons, W, H, t + 1.0)
    assert session.transform.rotation == rotation


def test_hand_frames_ignored_in_body_mode(session, buttons):
    session.set_mode(Mode.BODY)
    dwell_select(session, buttons, 0.15, 0.24)
    assert session.active_tool == Tool.NONE


# ---- body pipeline ---------------------------------------------------------
def test_body_mode_places_overlay_on_chest(session):
    session.set_mode(Mode.BODY)
    events = session.on_pose(pose_landmarks(), W, H)
    assert ManipulationEvent.CALIBRATED in events

    view = session.snapshot()
    assert view.calibrated
    assert tuple(view.transform.position) == pytest.approx((500, 300))
    assert view.body.shoulder_width == pytest.approx(200)


def test_pose_frames_ignored_in_hand_mode(session):
    session.on_pose(pose_landmarks(), W, H)
    assert session.transform == Transform(Point2D(400, 300), 0.0, 1.0)


def test_no_body_keeps_transform_and_baseline(session):
    session.set_mode(Mode.BODY)
    session.on_pose(pose_landmarks(), W, H)
    before = session.transform
    assert session.on_pose(None, W, H) == [ManipulationEvent.BODY_LOST]
    assert session.on_no_body() == []
    assert session.transform == before
    assert session.snapshot().calibrated


def test_leaving_body_mode_discards_calibration(session):
    session.set_mode(Mode.BODY)
    session.on_pose(pose_landmarks(), W, H)
    session.set_mode(Mode.HAND)
    session.set_mode(Mode.BODY)
    assert not session.snapshot().calibrated


def test_transform_persists_across_modes(session):
    session.set_mode(Mode.BODY)
    session.on_pose(pose_landmarks(), W, H)
    placed = session.transform
    session.set_mode(Mode.HAND)
    assert session.transform == placed


# ---- host commands ---------------------------------------------------------
def test_set_same_mode_is_noop(session):
    assert session.set_mode(Mode.HAND) == []
    assert session.set_mode(Mode.BODY) == [ManipulationEvent.MODE_CHANGED]


def test_reset_transform(session, buttons):
    t = dwell_select(session, buttons, 0.15, 0.24)
    session.on_hands([hand_landmarks(0.9, 0.9, pinching=True)], buttons, W, H, t)
    assert session.reset_transform() == [ManipulationEvent.TRANSFORM_RESET]
    assert session.transform == Transform(Point2D(400, 300), 0.0, 1.0)


def test_failure_is_terminal(session, buttons):
    session.fail("camera not found")
    session.fail("second message")
    dwell_select(session, buttons, 0.15, 0.24)
    view = session.snapshot()
    assert view.error == "camera not found"
    assert view.active_tool == Tool.NONE


def test_select_tool_explicitly(session):
    session.select_tool(Tool.SCALE)
    assert session.snapshot().active_tool == Tool.SCALE


def test_mode_switch_from_another_thread(session, buttons):
    def switch():
        for i in range(200):
            session.set_mode(Mode.BODY if i % 2 == 0 else Mode.HAND)

    worker = threading.Thread(target=switch)
    worker.start()
    t = 0.0
    for _ in range(200):
        session.on_hands([hand_landmarks(0.5, 0.5)], buttons, W, H, t)
        session.on_pose(pose_landmarks(), W, H)
        t += FPS_STEP
    worker.join()
    assert session.mode == Mode.HAND


# ---- design mode -----------------------------------------------------------
def test_design_mode_edits_design_not_overlay(session, buttons):
    session.set_mode(Mode.DESIGN)
    t = dwell_select(session, buttons, 0.15, 0.24)
    assert session.active_tool == Tool.MOVE

    session.on_hands([hand_landmarks(0.6, 0.7, pinching=True)], buttons, W, H, t)
    assert tuple(session.design.position) == pytest.approx((600, 350))
    assert session.transform == Transform(Point2D(400, 300), 0.0, 1.0)
    assert session.snapshot().design == session.design


def test_design_starts_at_design_position():
    session = ManipulationSession()
    assert session.design == Transform(Point2D(1000, 300), 0.0, 1.0)


def test_commit_design_switches_to_hand_mode(session, buttons):
    session.set_mode(Mode.DESIGN)
    t = dwell_select(session, buttons, 0.15, 0.24)
    session.on_hands([hand_landmarks(0.2, 0.6, pinching=True)], buttons, W, H, t)
    placed = session.design

    events = session.commit_design()
    assert events == [ManipulationEvent.DESIGN_COMMITTED, ManipulationEvent.MODE_CHANGED]
    assert session.mode == Mode.HAND
    assert session.design == placed
    assert session.transform == Transform(Point2D(400, 300), 0.0, 1.0)


def test_commit_design_outside_design_mode_is_noop(session):
    assert session.commit_design() == []
    assert session.mode == Mode.HAND


def test_reset_in_design_mode_only_resets_design(session, buttons):
    session.set_mode(Mode.DESIGN)
    t = dwell_select(session, buttons, 0.15, 0.24)
    session.on_hands([hand_landmarks(0.9, 0.9, pinching=True)], buttons, W, H, t)
    assert session.reset_transform() == [ManipulationEvent.TRANSFORM_RESET]
    assert session.design == Transform(Point2D(1000, 300), 0.0, 1.0)
