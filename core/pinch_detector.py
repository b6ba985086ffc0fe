"""
Pinch detection — thumb tip vs. index tip distance in normalised space.
"""
from __future__ import annotations
from typing import Sequence

from domain.models import Landmark
from utils.constants import INDEX_TIP, PINCH_THRESHOLD, THUMB_TIP
from utils.geometry import dist


def is_pinching(thumb_tip: Landmark, index_tip: Landmark,
                threshold: float = PINCH_THRESHOLD) -> bool:
    """True when the two tips are closer than ``threshold`` (normalised units)."""
    return dist(thumb_tip, index_tip) < threshold


def hand_is_pinching(hand: Sequence[Landmark],
                     threshold: float = PINCH_THRESHOLD) -> bool:
    return is_pinching(hand[THUMB_TIP], hand[INDEX_TIP], threshold)
