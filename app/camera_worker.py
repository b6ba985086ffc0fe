"""
CameraWorker — runs the whole capture → tracking → session pipeline in a
QThread and emits signals carrying what the UI needs.

The session is shared with the UI thread (mode switches, reset); it
serialises those calls internally.
"""
from __future__ import annotations
import time
from typing import List, Optional, Tuple

import numpy as np
from PyQt6.QtCore import QThread, pyqtSignal

from app.composer import save_composite
from app.config import AppConfig
from app.ui import OpenCVUI
from core.camera import Camera
from core.hand_tracker import HandTracker
from core.pose_tracker import PoseTracker
from core.session import ManipulationSession
from domain.enums import ManipulationEvent, Mode
from domain.errors import PerceptionInitError, TryOnError


class CameraWorker(QThread):
    """
    Signals emitted each frame:
        frame_ready    — composed BGR frame (np.ndarray) for display
        snapshot_ready — SessionSnapshot
        event_fired    — ManipulationEvent
        status_msg     — log line for the UI console
    Emitted once:
        error          — perception could not start; the worker stops
    """

    frame_ready    = pyqtSignal(np.ndarray)
    snapshot_ready = pyqtSignal(object)     # SessionSnapshot
    event_fired    = pyqtSignal(object)     # ManipulationEvent
    status_msg     = pyqtSignal(str)
    error          = pyqtSignal(str)

    def __init__(self, config: AppConfig, session: ManipulationSession,
                 parent=None) -> None:
        super().__init__(parent)
        self._config  = config
        self._session = session
        self._running = False
        self._save_requested = False
        self._painter = OpenCVUI(config)

        # Created in run() so they live in the worker thread.
        self._camera: Optional[Camera]      = None
        self._hands:  Optional[HandTracker] = None
        self._pose:   Optional[PoseTracker] = None

    # ------------------------------------------------------------------
    def run(self) -> None:
        cfg = self._config

        try:
            self._camera = Camera(cfg.camera_device, cfg.fps_limit,
                                  cfg.frame_width, cfg.frame_height)
            self._hands = HandTracker(
                max_num_hands=cfg.max_num_hands,
                model_complexity=cfg.model_complexity,
                min_detection_confidence=cfg.hand_detection_confidence,
                min_tracking_confidence=cfg.hand_tracking_confidence,
            )
            self._pose = PoseTracker(
                model_complexity=cfg.model_complexity,
                min_detection_confidence=cfg.pose_detection_confidence,
                min_tracking_confidence=cfg.pose_tracking_confidence,
            )
        except PerceptionInitError as exc:
            self._session.fail(str(exc))
            self.status_msg.emit(f"[ERROR] {exc}")
            self.error.emit(str(exc))
            self._cleanup()
            return

        self._running = True
        self.status_msg.emit("Pipeline started")

        while self._running:
            frame = self._camera.read()
            if frame is None:
                self.status_msg.emit("[WARN] Empty frame, retrying")
                time.sleep(0.05)
                continue

            h, w = frame.shape[:2]
            now = time.time()
            if self._session.mode != Mode.BODY:
                events = self._session.on_hands(
                    self._hands.process(frame, draw=cfg.draw_landmarks),
                    self._painter.buttons, w, h, now,
                )
            else:
                events = self._session.on_pose(self._pose.process(frame), w, h)

            if self._save_requested:
                self._save_requested = False
                events = events + self._save_design((w, h))

            for event in events:
                self.status_msg.emit(f"[EVENT] {event.value}")
                self.event_fired.emit(event)

            view = self._session.snapshot(now)
            self.snapshot_ready.emit(view)
            self.frame_ready.emit(self._painter.compose(frame, view))

        self._cleanup()

    # ------------------------------------------------------------------
    def set_mode(self, mode: Mode) -> None:
        if self._session.set_mode(mode):
            self.status_msg.emit(f"[MODE] {mode.value}")

    def reset_transform(self) -> None:
        self._session.reset_transform()
        self.status_msg.emit("[MODE] transform reset")

    def save_design(self) -> None:
        """Ask the capture loop to flatten and save the design on its next frame."""
        self._save_requested = True

    def stop(self) -> None:
        self._running = False
        self.wait(3000)

    def _save_design(self, size: Tuple[int, int]) -> List[ManipulationEvent]:
        if self._session.mode != Mode.DESIGN:
            self.status_msg.emit("[WARN] Switch to Design Mode to save a design")
            return []
        composite = self._painter.commit_design(self._session.design, size)
        if composite is None:
            self.status_msg.emit("[WARN] No design image loaded, nothing to save")
            return []
        try:
            path = save_composite(composite, self._config.composite_path)
            self.status_msg.emit(f"[SAVE] {path}")
        except TryOnError as exc:
            self.status_msg.emit(f"[ERROR] {exc}")
        return self._session.commit_design()

    def _cleanup(self) -> None:
        if self._camera:
            self._camera.release()
        if self._hands:
            self._hands.release()
        if self._pose:
            self._pose.release()
        self.status_msg.emit("Pipeline stopped")
