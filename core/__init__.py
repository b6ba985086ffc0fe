from core.pinch_detector import is_pinching
from core.hover_selector import HoverSelector, advance_hover, hovered_tool
from core.transform_state import TransformState
from core.transform_mapper import TransformMapper
from core.body_calibrator import BodyCalibrator, key_body_points, measure_body
from core.session import ManipulationSession, build_gesture_frame

__all__ = [
    "is_pinching",
    "HoverSelector",
    "advance_hover",
    "hovered_tool",
    "TransformState",
    "TransformMapper",
    "BodyCalibrator",
    "key_body_points",
    "measure_body",
    "ManipulationSession",
    "build_gesture_frame",
]
