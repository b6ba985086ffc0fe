"""
BodyCalibrator — keeps the overlay on the user's torso in BODY mode.

On the first valid measurement after ``enter()`` the current shoulder width
and overlay scale are captured as the baseline. From then on every frame:

    factor   = clamp(width / width0, factor_min, factor_max)
    smoothed = smoothed + (scale0 * factor - smoothed) * alpha
    position = chest_center + (0, vertical_offset)
    rotation = shoulder_angle

``exit()`` discards the baseline so re-entering recalibrates.
"""
from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from domain.enums import ManipulationEvent
from domain.models import (
    BodyMeasurement, BodyPoints, CalibrationBaseline, Landmark, Point2D, Transform,
)
from core.transform_state import TransformState
from utils.constants import (
    BODY_SCALE_MAX, BODY_SCALE_MIN, BODY_SMOOTHING, BODY_VERTICAL_OFFSET,
    LEFT_HIP, LEFT_SHOULDER, NOSE, POSE_LANDMARK_COUNT, RIGHT_HIP, RIGHT_SHOULDER,
)
from utils.geometry import clamp, dist, is_finite, midpoint, segment_angle, to_container

log = logging.getLogger(__name__)


# ---- measurement ---------------------------------------------------------
def key_body_points(
    landmarks: Sequence[Landmark],
    width: float,
    height: float,
    mirror: bool = True,
) -> Optional[BodyPoints]:
    """Nose, shoulders and hips in container pixels; None if the pose is incomplete."""
    if len(landmarks) < POSE_LANDMARK_COUNT:
        return None

    def px(i: int) -> Point2D:
        return to_container(landmarks[i], width, height, mirror)

    return BodyPoints(
        nose=px(NOSE),
        left_shoulder=px(LEFT_SHOULDER),
        right_shoulder=px(RIGHT_SHOULDER),
        left_hip=px(LEFT_HIP),
        right_hip=px(RIGHT_HIP),
    )


def measure_body(points: BodyPoints) -> BodyMeasurement:
    """
    Shoulder width, chest center (shoulder midpoint), shoulder angle in
    degrees and torso height (chest center to hip midpoint).
    Coincident shoulders give a zero width and a 0° angle; such a
    measurement reports ``is_valid == False``.
    """
    ls, rs = points.left_shoulder, points.right_shoulder
    chest = midpoint(ls, rs)
    hips = midpoint(points.left_hip, points.right_hip)
    angle = segment_angle(ls, rs)
    return BodyMeasurement(
        shoulder_width=dist(ls, rs),
        chest_center=chest,
        shoulder_angle=angle if angle is not None else 0.0,
        torso_height=dist(chest, hips),
        points=points,
    )


# ---- calibrator ----------------------------------------------------------
class BodyCalibrator:
    """
    Parameters
    ----------
    transform : TransformState
        Shared transform record written every valid frame.
    smoothing : float
        EMA alpha applied to the scale.
    vertical_offset : float
        Pixels below the chest center where the overlay is anchored.
    """

    def __init__(
        self,
        transform: TransformState,
        smoothing: float = BODY_SMOOTHING,
        factor_min: float = BODY_SCALE_MIN,
        factor_max: float = BODY_SCALE_MAX,
        vertical_offset: float = BODY_VERTICAL_OFFSET,
    ) -> None:
        self._transform = transform
        self._alpha = smoothing
        self._factor_min = factor_min
        self._factor_max = factor_max
        self._offset = vertical_offset
        self._baseline: Optional[CalibrationBaseline] = None
        self._smoothed = 0.0

    # ------------------------------------------------------------------
    def enter(self) -> None:
        self._baseline = None

    def exit(self) -> None:
        if self._baseline is not None:
            log.info("Body calibration discarded")
        self._baseline = None

    def update(self, measurement: BodyMeasurement) -> List[ManipulationEvent]:
        """Apply one body frame. Invalid geometry leaves the transform untouched."""
        if not measurement.is_valid or not is_finite(
            measurement.shoulder_width, measurement.shoulder_angle,
            measurement.chest_center.x, measurement.chest_center.y,
        ):
            return []

        events: List[ManipulationEvent] = []

        if self._baseline is None:
            scale0 = self._transform.scale
            self._baseline = CalibrationBaseline(measurement.shoulder_width, scale0)
            self._smoothed = scale0
            events.append(ManipulationEvent.CALIBRATED)
            log.info("Body calibrated: shoulder_width0=%.1f scale0=%.3f",
                     measurement.shoulder_width, scale0)

        base = self._baseline
        factor = clamp(measurement.shoulder_width / base.shoulder_width0,
                       self._factor_min, self._factor_max)
        target = base.scale0 * factor
        self._smoothed = self._smoothed + (target - self._smoothed) * self._alpha

        chest = measurement.chest_center
        self._transform.set(Transform(
            position=Point2D(chest.x, chest.y + self._offset),
            rotation=measurement.shoulder_angle,
            scale=self._smoothed,
        ))
        # Follow the clamped value so the EMA never runs past the scale bounds.
        self._smoothed = self._transform.scale
        return events

    # ------------------------------------------------------------------
    @property
    def baseline(self) -> Optional[CalibrationBaseline]:
        return self._baseline

    @property
    def smoothed_scale(self) -> float:
        return self._smoothed
