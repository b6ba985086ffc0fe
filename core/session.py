"""
ManipulationSession — orchestrates the per-frame manipulation pipeline.

    hand frame → pinch → hover/dwell selection → mapper → TransformState
    pose frame → body measurement → calibrator       → TransformState

Design decisions:
  - One explicit, injectable state container instead of scattered globals.
  - Hand frames act in HAND and DESIGN mode, pose frames only in BODY mode.
  - DESIGN mode edits a second TransformState (the design over the garment
    template) with the same tools; commit_design() hands over to HAND mode
    with the overlay transform back at its initial value.
  - A "no hand" / "no body" frame is a cancellation signal: it resets the
    dwell and latch working state but keeps the active tool and transform.
    HAND_LOST / BODY_LOST are reported once per loss, not once per frame.
  - Calls are serialised with a lock so a UI thread can switch mode or read
    snapshots while the capture thread feeds frames.
"""
from __future__ import annotations
import logging
import threading
from typing import List, Mapping, Optional, Sequence

from domain.enums import ManipulationEvent, Mode, ScaleStrategy, Tool
from domain.models import (
    BodyMeasurement, ButtonRect, GestureFrame, HandsList, Landmark, Point2D,
    SessionSnapshot, Transform,
)
from core.body_calibrator import BodyCalibrator, key_body_points, measure_body
from core.hover_selector import HoverSelector
from core.pinch_detector import hand_is_pinching
from core.transform_mapper import TransformMapper
from core.transform_state import TransformState
from utils.constants import (
    BODY_SCALE_MAX, BODY_SCALE_MIN, BODY_SMOOTHING, BODY_VERTICAL_OFFSET,
    DESIGN_POSITION, DWELL_TIME, INDEX_TIP, MAX_SCALE, MIN_SCALE, PINCH_THRESHOLD,
    ROTATION_SPEED, SCALE_SPEED,
)
from utils.geometry import to_container

log = logging.getLogger(__name__)

_HAND_MODES = (Mode.HAND, Mode.DESIGN)


def build_gesture_frame(
    hands: HandsList,
    width: float,
    height: float,
    timestamp: float,
    mirror: bool = False,
    pinch_threshold: float = PINCH_THRESHOLD,
) -> Optional[GestureFrame]:
    """
    Derive the GestureFrame from raw hand landmarks.
    The first hand drives the cursor and pinch; a second hand only
    contributes its index fingertip. Returns None when no hand is present.
    """
    if not hands:
        return None
    main = hands[0]
    second = hands[1] if len(hands) > 1 else None
    return GestureFrame(
        fingertip=to_container(main[INDEX_TIP], width, height, mirror),
        is_pinching=hand_is_pinching(main, pinch_threshold),
        hands_present=min(len(hands), 2),
        timestamp=timestamp,
        second_fingertip=(
            to_container(second[INDEX_TIP], width, height, mirror)
            if second is not None else None
        ),
    )


class ManipulationSession:
    """
    The single entry point for frame processing.

    Usage
    -----
    session = ManipulationSession()
    session.on_hands(hands, buttons, width, height, timestamp)
    view    = session.snapshot()
    """

    def __init__(
        self,
        initial: Optional[Transform] = None,
        mode: Mode = Mode.HAND,
        dwell_time: float = DWELL_TIME,
        pinch_threshold: float = PINCH_THRESHOLD,
        rotation_speed: float = ROTATION_SPEED,
        scale_speed: float = SCALE_SPEED,
        min_scale: float = MIN_SCALE,
        max_scale: float = MAX_SCALE,
        scale_strategy: ScaleStrategy = ScaleStrategy.DRAG,
        body_smoothing: float = BODY_SMOOTHING,
        body_factor_min: float = BODY_SCALE_MIN,
        body_factor_max: float = BODY_SCALE_MAX,
        body_vertical_offset: float = BODY_VERTICAL_OFFSET,
        mirror_hands: bool = False,
        mirror_pose: bool = True,
        design_initial: Optional[Transform] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._pinch_threshold = pinch_threshold
        self._mirror_hands = mirror_hands
        self._mirror_pose = mirror_pose

        self._transform = TransformState(initial, min_scale, max_scale)
        self._design = TransformState(
            design_initial or Transform(Point2D(*DESIGN_POSITION)),
            min_scale, max_scale,
        )
        self._hover = HoverSelector(dwell_time)
        self._mapper = TransformMapper(
            self._transform,
            rotation_speed=rotation_speed,
            scale_speed=scale_speed,
            min_scale=min_scale,
            max_scale=max_scale,
            scale_strategy=scale_strategy,
        )
        self._calibrator = BodyCalibrator(
            self._transform,
            smoothing=body_smoothing,
            factor_min=body_factor_min,
            factor_max=body_factor_max,
            vertical_offset=body_vertical_offset,
        )

        self._mode = mode
        self._frame: Optional[GestureFrame] = None
        self._body: Optional[BodyMeasurement] = None
        self._error: Optional[str] = None
        self._events: List[ManipulationEvent] = []
        self._hand_seen = False
        self._body_seen = False

        if mode == Mode.BODY:
            self._calibrator.enter()

    @classmethod
    def from_config(cls, config) -> "ManipulationSession":
        """Build a session from an ``AppConfig``."""
        return cls(**config.session_kwargs())

    # ------------------------------------------------------------------
    # Hand stream
    # ------------------------------------------------------------------
    def on_hands(
        self,
        hands: HandsList,
        buttons: Mapping[Tool, ButtonRect],
        width: float,
        height: float,
        timestamp: float,
    ) -> List[ManipulationEvent]:
        """
        Process one hand observation.

        Ordering:
        1. Zero hands is handled as on_no_hand().
        2. Dwell selection (ignored by the selector while pinching).
        3. Mapper (acts only while pinching).
        """
        with self._lock:
            frame = build_gesture_frame(
                hands, width, height, timestamp,
                self._mirror_hands, self._pinch_threshold,
            )
            if frame is None:
                return self.on_no_hand()
            return self.on_frame(frame, buttons)

    def on_frame(
        self,
        frame: GestureFrame,
        buttons: Mapping[Tool, ButtonRect],
    ) -> List[ManipulationEvent]:
        """Process an already-derived GestureFrame (hosts with their own conversion)."""
        with self._lock:
            if self._error is not None or self._mode not in _HAND_MODES:
                return self._publish([])
            self._frame = frame
            self._hand_seen = True
            target = self._design if self._mode == Mode.DESIGN else self._transform
            events = self._hover.update(frame, buttons)
            events.extend(self._mapper.update(frame, self._hover.active_tool, target))
            return self._publish(events)

    def on_no_hand(self) -> List[ManipulationEvent]:
        with self._lock:
            if self._error is not None or self._mode not in _HAND_MODES:
                return self._publish([])
            return self._publish(self._lose_hand())

    # ------------------------------------------------------------------
    # Body stream
    # ------------------------------------------------------------------
    def on_pose(
        self,
        landmarks: Optional[Sequence[Landmark]],
        width: float,
        height: float,
    ) -> List[ManipulationEvent]:
        with self._lock:
            if self._error is not None or self._mode != Mode.BODY:
                return self._publish([])
            points = key_body_points(landmarks or [], width, height, self._mirror_pose)
            if points is None:
                return self._publish(self._lose_body())
            measurement = measure_body(points)
            self._body = measurement
            self._body_seen = True
            return self._publish(self._calibrator.update(measurement))

    def on_no_body(self) -> List[ManipulationEvent]:
        with self._lock:
            if self._error is not None or self._mode != Mode.BODY:
                return self._publish([])
            return self._publish(self._lose_body())

    # ------------------------------------------------------------------
    # Host commands
    # ------------------------------------------------------------------
    def set_mode(self, mode: Mode) -> List[ManipulationEvent]:
        with self._lock:
            if mode == self._mode:
                return []
            log.info("Mode %s -> %s", self._mode.value, mode.value)
            if self._mode == Mode.BODY:
                self._calibrator.exit()
            self._hover.reset()
            self._mapper.reset()
            self._frame = None
            self._body = None
            self._hand_seen = False
            self._body_seen = False
            self._mode = mode
            if mode == Mode.BODY:
                self._calibrator.enter()
            return self._publish([ManipulationEvent.MODE_CHANGED])

    def select_tool(self, tool: Tool) -> None:
        with self._lock:
            self._hover.select(tool)

    def reset_transform(self) -> List[ManipulationEvent]:
        """Restore the transform being edited (the design in DESIGN mode)."""
        with self._lock:
            self._mapper.reset()
            if self._mode == Mode.DESIGN:
                self._design.reset()
                return self._publish([ManipulationEvent.TRANSFORM_RESET])
            self._transform.reset()
            if self._mode == Mode.BODY:
                # Recalibrate from the restored scale.
                self._calibrator.enter()
            return self._publish([ManipulationEvent.TRANSFORM_RESET])

    def commit_design(self) -> List[ManipulationEvent]:
        """
        Finish editing the design and switch to HAND mode.

        The host rasterises the design onto the template from ``design``
        (read before calling this); the resulting overlay starts from the
        initial overlay transform. Outside DESIGN mode this does nothing.
        """
        with self._lock:
            if self._error is not None or self._mode != Mode.DESIGN:
                return []
            log.info("Design committed: %s", self._design.snapshot())
            self._transform.reset()
            events = [ManipulationEvent.DESIGN_COMMITTED]
            events.extend(self.set_mode(Mode.HAND))
            return self._publish(events)

    def fail(self, message: str) -> None:
        """Enter the terminal error state; later frames are ignored."""
        with self._lock:
            if self._error is None:
                log.error("Perception pipeline failed: %s", message)
                self._error = message

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    def snapshot(self, now: Optional[float] = None) -> SessionSnapshot:
        with self._lock:
            frame = self._frame
            if now is None:
                now = frame.timestamp if frame is not None else 0.0
            return SessionSnapshot(
                mode=self._mode,
                active_tool=self._hover.active_tool,
                transform=self._transform.snapshot(),
                pinching=frame.is_pinching if frame is not None else False,
                fingertip=frame.fingertip if frame is not None else None,
                hover_tool=self._hover.hovered,
                hover_progress=self._hover.progress(now),
                body=self._body,
                calibrated=self._calibrator.baseline is not None,
                error=self._error,
                events=tuple(self._events),
                design=self._design.snapshot(),
            )

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def active_tool(self) -> Tool:
        return self._hover.active_tool

    @property
    def transform(self) -> Transform:
        return self._transform.snapshot()

    @property
    def design(self) -> Transform:
        return self._design.snapshot()

    @property
    def error(self) -> Optional[str]:
        return self._error

    # ------------------------------------------------------------------
    def _lose_hand(self) -> List[ManipulationEvent]:
        self._frame = None
        self._hover.reset()
        self._mapper.reset()
        if not self._hand_seen:
            return []
        self._hand_seen = False
        return [ManipulationEvent.HAND_LOST]

    def _lose_body(self) -> List[ManipulationEvent]:
        # The baseline survives a dropped pose; only leaving BODY mode clears it.
        self._body = None
        self._hover.reset()
        self._mapper.reset()
        if not self._body_seen:
            return []
        self._body_seen = False
        return [ManipulationEvent.BODY_LOST]

    def _publish(self, events: List[ManipulationEvent]) -> List[ManipulationEvent]:
        self._events = list(events)
        for event in events:
            log.debug("[EVENT] %s", event.value)
        return events
