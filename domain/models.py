from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from domain.enums import ManipulationEvent, Mode, Tool


@dataclass(frozen=True)
class Point2D:
    """Pixel coordinates relative to the container's top-left corner."""
    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))


@dataclass(frozen=True)
class Landmark:
    """Normalised [0, 1] keypoint as produced by the perception module."""
    x: float
    y: float
    z: float = 0.0


# Type aliases
LandmarkList = List[Landmark]
HandsList = List[LandmarkList]


@dataclass(frozen=True)
class ButtonRect:
    """Toolbar button hitbox in container-relative pixels."""
    left: float
    top: float
    right: float
    bottom: float

    def contains(self, point: Point2D) -> bool:
        return (self.left <= point.x <= self.right
                and self.top <= point.y <= self.bottom)


@dataclass(frozen=True)
class GestureFrame:
    """
    Everything the core needs from one hand observation.
    Built fresh per callback and never retained.
    """
    fingertip: Point2D
    is_pinching: bool
    hands_present: int
    timestamp: float
    # Index fingertip of the second hand, when two hands are visible.
    second_fingertip: Optional[Point2D] = None


@dataclass(frozen=True)
class HoverState:
    """
    Dwell-selection working state.

    ``consumed`` is only true while ``hovered_tool`` has not changed since
    the toggle fired.
    """
    hovered_tool: Tool = Tool.NONE
    hover_start: Optional[float] = None
    consumed: bool = False


@dataclass(frozen=True)
class LatchState:
    """
    Gesture-start baselines, captured once per pinch-and-hold.
    All fields are None unless a ROTATE/SCALE gesture is in progress.
    """
    rotation_base: Optional[float] = None
    scale_base: Optional[float] = None
    anchor_y: Optional[float] = None
    anchor_x: Optional[float] = None
    span_base: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return (self.rotation_base is None and self.scale_base is None
                and self.anchor_y is None and self.anchor_x is None
                and self.span_base is None)


@dataclass(frozen=True)
class Transform:
    """Position / rotation (degrees) / scale of the manipulated overlay."""
    position: Point2D = Point2D(0.0, 0.0)
    rotation: float = 0.0
    scale: float = 1.0


@dataclass(frozen=True)
class BodyPoints:
    """Key body joints converted to container pixels."""
    nose: Point2D
    left_shoulder: Point2D
    right_shoulder: Point2D
    left_hip: Point2D
    right_hip: Point2D


@dataclass(frozen=True)
class BodyMeasurement:
    """Per-frame body geometry used for garment placement."""
    shoulder_width: float
    chest_center: Point2D
    shoulder_angle: float
    torso_height: float
    points: Optional[BodyPoints] = None

    @property
    def is_valid(self) -> bool:
        return self.shoulder_width > 0.0


@dataclass(frozen=True)
class CalibrationBaseline:
    shoulder_width0: float
    scale0: float


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to the rendering layer each frame."""
    mode: Mode
    active_tool: Tool
    transform: Transform
    pinching: bool = False
    fingertip: Optional[Point2D] = None
    hover_tool: Tool = Tool.NONE
    hover_progress: float = 0.0
    body: Optional[BodyMeasurement] = None
    calibrated: bool = False
    error: Optional[str] = None
    events: Tuple[ManipulationEvent, ...] = ()
    design: Optional[Transform] = None
