"""
HandTracker — encapsulates all MediaPipe Hands logic.
The rest of the application never imports mediapipe directly.
"""
from __future__ import annotations
from typing import Any

import cv2
import mediapipe as mp

from domain.errors import PerceptionInitError
from domain.models import HandsList, Landmark


class HandTracker:
    """
    Processes a BGR frame and returns the normalised landmarks of every
    detected hand (21 per hand, x/y in [0, 1] of the frame).

    Parameters
    ----------
    max_num_hands : int
        2 enables the two-hand scale strategy; 1 is enough otherwise.
    selfie_mode : bool
        Flip the frame horizontally before detection so landmarks come out
        in mirrored (selfie) space.
    """

    def __init__(
        self,
        max_num_hands: int = 2,
        model_complexity: int = 1,
        min_detection_confidence: float = 0.7,
        min_tracking_confidence: float = 0.7,
        selfie_mode: bool = True,
    ) -> None:
        self._selfie = selfie_mode
        try:
            self._mp_hands = mp.solutions.hands
            self._mp_draw  = mp.solutions.drawing_utils
            self._hands = self._mp_hands.Hands(
                static_image_mode=False,
                max_num_hands=max_num_hands,
                model_complexity=model_complexity,
                min_detection_confidence=min_detection_confidence,
                min_tracking_confidence=min_tracking_confidence,
            )
        except Exception as exc:
            raise PerceptionInitError(f"Cannot start hand tracker: {exc}") from exc

    # ------------------------------------------------------------------
    def process(self, frame: Any, draw: bool = False) -> HandsList:
        """
        Parameters
        ----------
        frame : np.ndarray
            BGR frame from OpenCV. When ``draw`` is set, landmarks are
            drawn onto it in place (in the same orientation as the input).

        Returns
        -------
        list of landmark lists, one per detected hand (empty if none).
        """
        source = cv2.flip(frame, 1) if self._selfie else frame
        rgb = cv2.cvtColor(source, cv2.COLOR_BGR2RGB)
        results = self._hands.process(rgb)

        hands: HandsList = []
        if not results.multi_hand_landmarks:
            return hands

        for hand_landmarks in results.multi_hand_landmarks:
            hands.append([
                Landmark(lm.x, lm.y, lm.z) for lm in hand_landmarks.landmark
            ])
            if draw:
                self._mp_draw.draw_landmarks(
                    source, hand_landmarks, self._mp_hands.HAND_CONNECTIONS
                )

        if draw and self._selfie:
            # Landmarks were drawn on the flipped copy; bring them back.
            frame[:] = cv2.flip(source, 1)
        return hands

    def release(self) -> None:
        self._hands.close()
