"""
Gestos de manipulación por herramienta
"""

from .base import ToolGesture
from .move import MoveGesture
from .rotate import RotateGesture
from .scale import DragScaleGesture, TwoHandScaleGesture

__all__ = [
    'ToolGesture',
    'MoveGesture',
    'RotateGesture',
    'DragScaleGesture',
    'TwoHandScaleGesture',
]
