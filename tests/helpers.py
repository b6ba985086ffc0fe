"""Synthetic frames and landmarks for the tests."""
from __future__ import annotations
from typing import List, Optional

from domain.models import GestureFrame, Landmark, Point2D

FPS_STEP = 0.033


def gesture_frame(x: float, y: float, t: float, pinching: bool = False,
                  second: Optional[Point2D] = None) -> GestureFrame:
    return GestureFrame(
        fingertip=Point2D(x, y),
        is_pinching=pinching,
        hands_present=2 if second is not None else 1,
        timestamp=t,
        second_fingertip=second,
    )


def hand_landmarks(index_x: float, index_y: float, pinching: bool = False) -> List[Landmark]:
    """21 landmarks with the index tip at (index_x, index_y) and the thumb
    tip either touching it or far away."""
    hand = [Landmark(0.5, 0.8) for _ in range(21)]
    hand[8] = Landmark(index_x, index_y)
    hand[4] = Landmark(index_x + 0.01, index_y) if pinching else Landmark(index_x + 0.2, index_y)
    return hand


def pose_landmarks(left_shoulder=(0.6, 0.4), right_shoulder=(0.4, 0.4),
                   left_hip=(0.58, 0.8), right_hip=(0.42, 0.8)) -> List[Landmark]:
    pose = [Landmark(0.5, 0.5) for _ in range(33)]
    pose[0] = Landmark(0.5, 0.2)
    pose[11] = Landmark(*left_shoulder)
    pose[12] = Landmark(*right_shoulder)
    pose[23] = Landmark(*left_hip)
    pose[24] = Landmark(*right_hip)
    return pose
