"""
Qt front end — wires CameraWorker (thread) ↔ CameraWindow (UI) via signals.
"""
from __future__ import annotations
import sys

from PyQt6.QtWidgets import QApplication

from app.camera_window import CameraWindow
from app.camera_worker import CameraWorker
from app.config import AppConfig, default_config
from core.session import ManipulationSession


class TryOnApp:
    """Owns the session, the worker thread and the window."""

    def __init__(self, config: AppConfig = default_config) -> None:
        self._config  = config
        self._session = ManipulationSession.from_config(config)
        self._window  = CameraWindow()
        self._worker  = CameraWorker(config, self._session)
        self._connect()

    def _connect(self) -> None:
        w, win = self._worker, self._window
        w.frame_ready.connect(win.on_frame)
        w.snapshot_ready.connect(win.on_snapshot)
        w.event_fired.connect(win.on_event)
        w.status_msg.connect(win.on_status)
        w.error.connect(win.on_error)
        win.mode_requested.connect(w.set_mode)
        win.reset_requested.connect(w.reset_transform)
        win.save_requested.connect(w.save_design)

    def start(self) -> None:
        self._window.show()
        self._worker.start()

    def stop(self) -> None:
        self._worker.stop()


def run_qt(config: AppConfig = default_config) -> int:
    qt = QApplication.instance() or QApplication(sys.argv)
    app = TryOnApp(config)
    qt.aboutToQuit.connect(app.stop)
    app.start()
    return qt.exec()
