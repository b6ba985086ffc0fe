"""
OpenCVUI — all rendering logic isolated from gesture and transform logic.

The session never calls cv2 directly — the UI reads SessionSnapshot values
and paints them. It also owns the toolbar layout, so the button hitboxes
handed to the session each frame come from here.
"""
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple

import cv2
import numpy as np

from app.composer import (
    blend_onto, compose_design, fit_center, load_bgra, shrink_to_width, trim_transparent,
    warp_layer,
)
from app.config import AppConfig
from domain.enums import Mode, Tool
from domain.models import ButtonRect, SessionSnapshot, Transform

# BGR
_LIME   = (0, 255, 0)
_RED    = (0, 0, 255)
_YELLOW = (0, 255, 255)
_CYAN   = (255, 255, 0)
_WHITE  = (255, 255, 255)
_GREY   = (60, 60, 60)
_ACCENT = (255, 160, 60)

_TOOLS = (Tool.MOVE, Tool.ROTATE, Tool.SCALE)
_CURSOR_SIZE = 14

KEY_ESC = 27


def toolbar_buttons(config: AppConfig) -> Dict[Tool, ButtonRect]:
    """Toolbar hitboxes, laid out left to right from ``toolbar_origin``."""
    x0, y0 = config.toolbar_origin
    bw, bh = config.button_size
    buttons: Dict[Tool, ButtonRect] = {}
    for i, tool in enumerate(_TOOLS):
        left = x0 + i * (bw + config.button_gap)
        buttons[tool] = ButtonRect(left, y0, left + bw, y0 + bh)
    return buttons


class OpenCVUI:
    """Renders the overlay, toolbar and debug HUD and shows the window."""

    def __init__(self, config: AppConfig, window_name: str = "Gesture Try-On") -> None:
        self._cfg  = config
        self._name = window_name
        self._overlay  = load_bgra(config.overlay_path, config.overlay_max_width)
        self._template = load_bgra(config.template_path, config.frame_width)
        self._design   = load_bgra(config.design_path, config.design_max_width)
        self._buttons = toolbar_buttons(config)

    @property
    def buttons(self) -> Dict[Tool, ButtonRect]:
        return self._buttons

    @property
    def overlay(self) -> Optional[np.ndarray]:
        return self._overlay

    # ------------------------------------------------------------------
    def compose(self, frame: Any, view: SessionSnapshot) -> np.ndarray:
        """Draw everything onto (a mirrored copy of) ``frame`` and return it."""
        frame = cv2.flip(frame, 1)

        if view.error is not None:
            self._draw_error(frame, view.error)
            return frame

        if view.mode == Mode.DESIGN:
            self._draw_design(frame, view.design if view.design is not None else Transform())
        else:
            self._draw_overlay(frame, view.transform)

        if view.mode == Mode.BODY:
            self._draw_body(frame, view)
        else:
            self._draw_toolbar(frame, view)
            self._draw_cursor(frame, view)

        h, w = frame.shape[:2]
        cv2.putText(frame, f"Mode: {view.mode.value}  [d]esign [h]and [b]ody [s]ave [r]eset  ESC quit",
                    (20, h - 20), cv2.FONT_HERSHEY_SIMPLEX, 0.55, _WHITE, 1)
        return frame

    def commit_design(self, design: Transform, size: Tuple[int, int]) -> Optional[np.ndarray]:
        """
        Flatten the design onto the template and use the result as the
        try-on overlay. Returns the composite, or None without a design image.
        """
        if self._design is None:
            return None
        flat = compose_design(self._template, self._design, design, size)
        self._overlay = shrink_to_width(trim_transparent(flat), self._cfg.overlay_max_width)
        return flat

    def render(self, frame: Any, view: SessionSnapshot) -> None:
        cv2.imshow(self._name, self.compose(frame, view))

    def poll_key(self) -> int:
        """Key pressed during the last frame, or -1."""
        key = cv2.waitKey(1)
        return key & 0xFF if key != -1 else -1

    def close(self) -> None:
        cv2.destroyAllWindows()

    # ------------------------------------------------------------------
    # Layers
    # ------------------------------------------------------------------
    def _draw_overlay(self, frame: np.ndarray, t: Transform) -> None:
        if self._overlay is None:
            self._draw_placeholder(frame, t, self._cfg.overlay_max_width * 0.5)
            return
        h, w = frame.shape[:2]
        blend_onto(frame, warp_layer(self._overlay, t, (w, h)))

    def _draw_design(self, frame: np.ndarray, t: Transform) -> None:
        h, w = frame.shape[:2]
        frame[:] = (frame * 0.4).astype(np.uint8)
        if self._design is not None:
            blend_onto(frame, compose_design(self._template, self._design, t, (w, h)))
            return
        if self._template is not None:
            blend_onto(frame, fit_center(self._template, (w, h)))
        self._draw_placeholder(frame, t, self._cfg.design_max_width * 0.5)

    def _draw_placeholder(self, frame: np.ndarray, t: Transform, side: float) -> None:
        # Box with the layer's nominal footprint.
        box = cv2.boxPoints(((t.position.x, t.position.y), (side * t.scale, side * t.scale), t.rotation))
        cv2.polylines(frame, [np.intp(box)], True, _ACCENT, 2)

    def _draw_toolbar(self, frame: np.ndarray, view: SessionSnapshot) -> None:
        for tool, r in self._buttons.items():
            p1 = (int(r.left), int(r.top))
            p2 = (int(r.right), int(r.bottom))
            active = tool == view.active_tool
            cv2.rectangle(frame, p1, p2, _LIME if active else _GREY, -1)
            cv2.rectangle(frame, p1, p2, _WHITE, 1)

            if tool == view.hover_tool and view.hover_progress > 0:
                fill = int((r.right - r.left) * view.hover_progress)
                cv2.rectangle(frame, (p1[0], p2[1] - 6), (p1[0] + fill, p2[1]), _YELLOW, -1)

            color = (0, 0, 0) if active else _WHITE
            cv2.putText(frame, tool.value, (p1[0] + 12, p2[1] - 18),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, color, 2)

    def _draw_cursor(self, frame: np.ndarray, view: SessionSnapshot) -> None:
        if view.fingertip is None:
            return
        center = (int(view.fingertip.x), int(view.fingertip.y))
        cv2.circle(frame, center, _CURSOR_SIZE // 2, _LIME if view.pinching else _RED, -1)

    def _draw_body(self, frame: np.ndarray, view: SessionSnapshot) -> None:
        body = view.body
        if body is None or body.points is None:
            cv2.putText(frame, "No body detected", (20, 40),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.8, _RED, 2)
            return
        pts = body.points
        ls = (int(pts.left_shoulder.x), int(pts.left_shoulder.y))
        rs = (int(pts.right_shoulder.x), int(pts.right_shoulder.y))
        chest = (int(body.chest_center.x), int(body.chest_center.y))

        cv2.line(frame, ls, rs, _LIME, 3)
        for p in (ls, rs):
            cv2.circle(frame, p, 6, _LIME, -1)
            cv2.circle(frame, p, 7, _WHITE, 2)
        cv2.circle(frame, chest, 8, _YELLOW, -1)
        cv2.circle(frame, chest, 9, _WHITE, 3)
        cv2.circle(frame, (int(pts.nose.x), int(pts.nose.y)), 4, _CYAN, -1)

        lines = [
            f"Shoulder Width: {body.shoulder_width:.0f}px",
            f"Shoulder Angle: {body.shoulder_angle:.0f} deg",
            f"Torso Height: {body.torso_height:.0f}px",
            f"Chest Center: ({body.chest_center.x:.0f}, {body.chest_center.y:.0f})",
            "Calibrated" if view.calibrated else "Calibrating...",
        ]
        cv2.rectangle(frame, (10, 10), (330, 20 + 22 * len(lines)), (0, 0, 0), -1)
        for i, text in enumerate(lines):
            cv2.putText(frame, text, (18, 32 + 22 * i),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, _WHITE, 1)

    def _draw_error(self, frame: np.ndarray, message: str) -> None:
        frame[:] = (frame * 0.25).astype(np.uint8)
        h, w = frame.shape[:2]
        cv2.putText(frame, "Camera Error", (w // 2 - 120, h // 2 - 10),
                    cv2.FONT_HERSHEY_SIMPLEX, 1.0, (68, 68, 255), 2)
        cv2.putText(frame, message[:80], (40, h // 2 + 30),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.55, _WHITE, 1)
