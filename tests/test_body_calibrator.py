import pytest

from core.body_calibrator import BodyCalibrator, key_body_points, measure_body
from core.transform_state import TransformState
from domain.enums import ManipulationEvent
from domain.models import BodyMeasurement, Point2D, Transform
from helpers import pose_landmarks

W, H = 1000, 500


def measurement(width: float, center=(500.0, 200.0), angle: float = 0.0) -> BodyMeasurement:
    return BodyMeasurement(
        shoulder_width=width,
        chest_center=Point2D(*center),
        shoulder_angle=angle,
        torso_height=200.0,
    )


@pytest.fixture
def state():
    return TransformState(Transform(Point2D(400, 300), 0.0, 1.2))


@pytest.fixture
def calibrator(state):
    cal = BodyCalibrator(state, smoothing=0.2, factor_min=0.5,
                         factor_max=3.0, vertical_offset=100.0)
    cal.enter()
    return cal


# ---- measurement -----------------------------------------------------------
def test_key_points_are_mirrored():
    pts = key_body_points(pose_landmarks(), W, H, mirror=True)
    assert tuple(pts.left_shoulder) == pytest.approx((400, 200))
    assert tuple(pts.right_shoulder) == pytest.approx((600, 200))


def test_key_points_need_full_pose():
    assert key_body_points(pose_landmarks()[:20], W, H) is None


def test_measure_body():
    m = measure_body(key_body_points(pose_landmarks(), W, H, mirror=True))
    assert m.shoulder_width == pytest.approx(200)
    assert tuple(m.chest_center) == pytest.approx((500, 200))
    assert m.shoulder_angle == pytest.approx(0.0)
    assert m.torso_height == pytest.approx(200)
    assert m.is_valid


def test_tilted_shoulders_give_angle():
    lms = pose_landmarks(left_shoulder=(0.6, 0.4), right_shoulder=(0.4, 0.6))
    m = measure_body(key_body_points(lms, W, W, mirror=True))
    assert m.shoulder_angle == pytest.approx(45.0)


def test_coincident_shoulders_are_invalid():
    lms = pose_landmarks(left_shoulder=(0.5, 0.4), right_shoulder=(0.5, 0.4))
    m = measure_body(key_body_points(lms, W, H))
    assert not m.is_valid
    assert m.shoulder_angle == 0.0


# ---- calibration -----------------------------------------------------------
def test_first_frame_captures_baseline(calibrator, state):
    events = calibrator.update(measurement(200))
    assert events == [ManipulationEvent.CALIBRATED]
    assert calibrator.baseline.shoulder_width0 == 200
    assert calibrator.baseline.scale0 == 1.2
    t = state.snapshot()
    assert t.scale == pytest.approx(1.2)
    assert t.position == Point2D(500, 300)
    assert t.rotation == 0.0


def test_scale_is_smoothed_toward_target(calibrator, state):
    calibrator.update(measurement(200))
    calibrator.update(measurement(400, angle=5.0))
    # target = 1.2 * 2 = 2.4; one EMA step from 1.2
    assert state.scale == pytest.approx(1.2 + (2.4 - 1.2) * 0.2)
    assert state.rotation == 5.0
    assert calibrator.smoothed_scale == state.scale

    for _ in range(60):
        calibrator.update(measurement(400))
    assert state.scale == pytest.approx(2.4, rel=1e-3)


def test_scale_factor_is_clamped(calibrator, state):
    calibrator.update(measurement(200))
    for _ in range(100):
        calibrator.update(measurement(10))
    # factor clamped to 0.5
    assert state.scale == pytest.approx(0.6, rel=1e-3)


def test_invalid_measurement_keeps_transform(calibrator, state):
    calibrator.update(measurement(200))
    before = state.snapshot()
    assert calibrator.update(measurement(0.0)) == []
    assert state.snapshot() == before


def test_invalid_first_frame_does_not_calibrate(calibrator):
    calibrator.update(measurement(0.0))
    assert calibrator.baseline is None


def test_reentry_recalibrates_from_current_width(calibrator, state):
    calibrator.update(measurement(200))
    calibrator.update(measurement(300))
    calibrator.exit()
    assert calibrator.baseline is None

    calibrator.enter()
    scale_now = state.scale
    calibrator.update(measurement(300))
    assert calibrator.baseline.shoulder_width0 == 300
    assert calibrator.baseline.scale0 == scale_now
    assert state.scale == pytest.approx(scale_now)


def test_smoothed_scale_stays_within_transform_bounds():
    state = TransformState(Transform(Point2D(400, 300), 0.0, 2.0),
                           min_scale=0.005, max_scale=2.5)
    cal = BodyCalibrator(state, smoothing=0.2, factor_min=0.5, factor_max=4.0)
    cal.enter()
    cal.update(measurement(100))
    for _ in range(60):
        cal.update(measurement(300))
    assert state.scale == 2.5
    assert cal.smoothed_scale == 2.5

    # Stepping back moves the visible scale on the very next frame.
    cal.update(measurement(100))
    assert state.scale == pytest.approx(2.5 + (2.0 - 2.5) * 0.2)
    assert state.scale < 2.5
