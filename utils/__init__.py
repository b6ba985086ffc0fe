"""
Utilidades geométricas y constantes por defecto
"""

from .constants import *
from .geometry import clamp, dist, midpoint, segment_angle, to_container

__all__ = [
    'clamp',
    'dist',
    'midpoint',
    'segment_angle',
    'to_container',
    'DWELL_TIME',
    'PINCH_THRESHOLD',
    'ROTATION_SPEED',
    'SCALE_SPEED',
    'MIN_SCALE',
    'MAX_SCALE',
    'BODY_SMOOTHING',
    'BODY_SCALE_MIN',
    'BODY_SCALE_MAX',
    'BODY_VERTICAL_OFFSET',
]
