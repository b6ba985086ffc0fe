"""
CameraWindow — shows the composed camera feed with the try-on overlay,
the active tool, mode toggle buttons and an event log.
"""
from __future__ import annotations

import cv2
import numpy as np
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QImage, QPixmap
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel,
    QPushButton, QTextEdit, QSizePolicy,
)

from domain.enums import ManipulationEvent, Mode, Tool
from domain.models import SessionSnapshot

_TOOL_COLORS: dict[Tool, str] = {
    Tool.NONE:   "#888888",
    Tool.MOVE:   "#50dc50",
    Tool.ROTATE: "#28c8dc",
    Tool.SCALE:  "#dc8c28",
}


class CameraWindow(QWidget):
    """
    Main view.

    - Camera feed already composed by the worker (overlay, toolbar, cursor).
    - Side panel: active tool, transform readout, mode buttons, log.
    """

    mode_requested  = pyqtSignal(object)    # Mode
    reset_requested = pyqtSignal()
    save_requested  = pyqtSignal()

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._setup_ui()

    # ------------------------------------------------------------------
    def _setup_ui(self) -> None:
        self.setWindowTitle("Gesture Try-On")
        self.setMinimumSize(980, 560)
        self.setStyleSheet("""
            QWidget {
                background-color: #000000;
                color: #e0e0e0;
                font-family: 'Segoe UI', Consolas, monospace;
            }
            QLabel#tool_label {
                font-size: 22px;
                font-weight: bold;
                padding: 6px 12px;
                border-radius: 6px;
                background: #181924;
            }
            QTextEdit#log {
                background-color: #101010;
                color: #7ec8a0;
                font-size: 11px;
                border: 1px solid #333;
                border-radius: 4px;
            }
            QPushButton {
                background-color: #3F3737;
                color: #a0c4ff;
                border: 1px solid #334;
                border-radius: 5px;
                padding: 6px 14px;
                font-size: 12px;
            }
            QPushButton:checked { background-color: #2f6f3f; color: #ffffff; }
        """)

        root = QHBoxLayout(self)
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(10)

        # ---- LEFT: camera --------------------------------------------
        self._camera_label = QLabel("Initializing camera...")
        self._camera_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._camera_label.setMinimumSize(640, 360)
        self._camera_label.setSizePolicy(
            QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding
        )
        self._camera_label.setStyleSheet(
            "background:#000; border-radius:6px; border:1px solid #334;"
        )
        root.addWidget(self._camera_label, stretch=3)

        # ---- RIGHT: status + controls --------------------------------
        right = QVBoxLayout()
        right.setSpacing(8)

        right.addWidget(QLabel("Active tool"))
        self._tool_label = QLabel(Tool.NONE.value)
        self._tool_label.setObjectName("tool_label")
        self._tool_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        right.addWidget(self._tool_label)

        self._transform_label = QLabel("—")
        self._transform_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        right.addWidget(self._transform_label)

        modes = QHBoxLayout()
        self._design_btn = QPushButton("Design Mode")
        self._hand_btn   = QPushButton("Hand Mode")
        self._body_btn   = QPushButton("Body Mode")
        for btn, mode in ((self._design_btn, Mode.DESIGN),
                          (self._hand_btn, Mode.HAND),
                          (self._body_btn, Mode.BODY)):
            btn.setCheckable(True)
            btn.clicked.connect(lambda _=False, m=mode: self.mode_requested.emit(m))
            modes.addWidget(btn)
        self._hand_btn.setChecked(True)
        right.addLayout(modes)

        actions = QHBoxLayout()
        save_btn = QPushButton("Save Design")
        save_btn.clicked.connect(self.save_requested.emit)
        reset_btn = QPushButton("Reset")
        reset_btn.clicked.connect(self.reset_requested.emit)
        actions.addWidget(save_btn)
        actions.addWidget(reset_btn)
        right.addLayout(actions)

        right.addWidget(QLabel("Console log"))
        self._log = QTextEdit()
        self._log.setObjectName("log")
        self._log.setReadOnly(True)
        right.addWidget(self._log, stretch=1)

        root.addLayout(right, stretch=1)

    # ------------------------------------------------------------------
    # Slots connected to CameraWorker signals
    # ------------------------------------------------------------------
    def on_frame(self, frame: np.ndarray) -> None:
        """Show a composed BGR frame."""
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        h, w, ch = rgb.shape
        img = QImage(rgb.data, w, h, ch * w, QImage.Format.Format_RGB888)
        pix = QPixmap.fromImage(img).scaled(
            self._camera_label.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self._camera_label.setPixmap(pix)

    def on_snapshot(self, view: SessionSnapshot) -> None:
        tool = view.active_tool
        self._tool_label.setText(tool.value)
        self._tool_label.setStyleSheet(
            "font-size:22px; font-weight:bold; padding:6px 12px; border-radius:6px;"
            f"background:#2C2C33; color:{_TOOL_COLORS[tool]};"
        )
        t = view.design if view.mode == Mode.DESIGN and view.design is not None else view.transform
        self._transform_label.setText(
            f"pos ({t.position.x:.0f}, {t.position.y:.0f})  "
            f"rot {t.rotation:.1f}°  scale {t.scale:.3f}"
        )
        self._design_btn.setChecked(view.mode == Mode.DESIGN)
        self._hand_btn.setChecked(view.mode == Mode.HAND)
        self._body_btn.setChecked(view.mode == Mode.BODY)

    def on_event(self, event: ManipulationEvent) -> None:
        self._log.append(f"▸ {event.value}")
        sb = self._log.verticalScrollBar()
        sb.setValue(sb.maximum())

    def on_status(self, msg: str) -> None:
        if msg.startswith("[EVENT]") or msg.startswith("[MODE]"):
            self._log.append(f"<span style='color:#6699cc'>{msg}</span>")
        elif msg.startswith("[ERROR]"):
            self._log.append(f"<span style='color:#ff6b6b'>{msg}</span>")
        else:
            self._log.append(f"<span style='color:#555'>{msg}</span>")

    def on_error(self, message: str) -> None:
        self._camera_label.setPixmap(QPixmap())
        self._camera_label.setText(f"Camera Error\n\n{message}")
        self._camera_label.setStyleSheet(
            "background:#000; color:#ff4444; font-size:18px;"
            "border-radius:6px; border:1px solid #334;"
        )
