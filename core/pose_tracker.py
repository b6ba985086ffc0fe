"""
PoseTracker — MediaPipe Pose wrapper producing the 33 body landmarks.
"""
from __future__ import annotations
from typing import Any, Optional

import cv2
import mediapipe as mp

from domain.errors import PerceptionInitError
from domain.models import LandmarkList, Landmark


class PoseTracker:
    """
    Parameters
    ----------
    smooth_landmarks : bool
        Let MediaPipe filter landmarks across frames.
    """

    def __init__(
        self,
        model_complexity: int = 1,
        smooth_landmarks: bool = True,
        min_detection_confidence: float = 0.5,
        min_tracking_confidence: float = 0.5,
    ) -> None:
        try:
            self._mp_pose = mp.solutions.pose
            self._pose = self._mp_pose.Pose(
                static_image_mode=False,
                model_complexity=model_complexity,
                smooth_landmarks=smooth_landmarks,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        except Exception as exc:
            raise PerceptionInitError(f"Cannot start pose tracker: {exc}") from exc

    # ------------------------------------------------------------------
    def process(self, frame: Any) -> Optional[LandmarkList]:
        """
        Returns the normalised landmarks in camera (non-mirrored) space,
        or None when no body is visible.
        """
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        results = self._pose.process(rgb)
        if not results.pose_landmarks:
            return None
        return [Landmark(lm.x, lm.y, lm.z) for lm in results.pose_landmarks.landmark]

    def release(self) -> None:
        self._pose.close()
