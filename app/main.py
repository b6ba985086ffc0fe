"""
main.py — OpenCV entry point.

    Camera → HandTracker / PoseTracker → ManipulationSession → OpenCVUI

Hand frames drive the toolbar and the manipulation tools in DESIGN mode
(the design over the garment template) and HAND mode (the try-on
overlay); pose frames drive the body calibration in BODY mode.
"""
from __future__ import annotations
import argparse
import logging
import time
from typing import List, Optional, Sequence, Tuple

import numpy as np

from app.composer import save_composite
from app.config import AppConfig, default_config
from app.ui import KEY_ESC, OpenCVUI
from core.camera import Camera
from core.hand_tracker import HandTracker
from core.pose_tracker import PoseTracker
from core.session import ManipulationSession
from domain.enums import ManipulationEvent, Mode
from domain.errors import PerceptionInitError, TryOnError

_MODE_KEYS = {ord("h"): Mode.HAND, ord("b"): Mode.BODY, ord("d"): Mode.DESIGN}


def save_design(
    session: ManipulationSession,
    ui: OpenCVUI,
    config: AppConfig,
    size: Tuple[int, int],
) -> List[ManipulationEvent]:
    """Flatten the design onto the template, write it out and switch to HAND mode."""
    if session.mode != Mode.DESIGN:
        return []
    composite = ui.commit_design(session.design, size)
    if composite is None:
        print("[WARN] No design image loaded, nothing to save")
        return []
    try:
        save_composite(composite, config.composite_path)
    except TryOnError as exc:
        print(f"[ERROR] {exc}")
    return session.commit_design()


def run(config: AppConfig = default_config) -> None:
    print("="*55)
    print("  GESTURE TRY-ON — overlay manipulation")
    print("="*55)
    print(f"  Overlay : {config.overlay_path}")
    print(f"  Design  : {config.design_path} on {config.template_path}")
    print(f"  FPS cap : {config.fps_limit}")
    print(f"  Dwell   : {config.dwell_time * 1000:.0f} ms")
    print(f"  Scale   : {config.scale_strategy.value}")
    print("  d/h/b switch mode, s saves the design, r resets, ESC quits")
    print("="*55 + "\n")

    session = ManipulationSession.from_config(config)
    ui      = OpenCVUI(config)

    camera:  Optional[Camera]      = None
    hands:   Optional[HandTracker] = None
    pose:    Optional[PoseTracker] = None
    try:
        camera = Camera(config.camera_device, config.fps_limit,
                        config.frame_width, config.frame_height)
        hands = HandTracker(
            max_num_hands=config.max_num_hands,
            model_complexity=config.model_complexity,
            min_detection_confidence=config.hand_detection_confidence,
            min_tracking_confidence=config.hand_tracking_confidence,
        )
        pose = PoseTracker(
            model_complexity=config.model_complexity,
            min_detection_confidence=config.pose_detection_confidence,
            min_tracking_confidence=config.pose_tracking_confidence,
        )
    except PerceptionInitError as exc:
        print(f"[ERROR] {exc}")
        session.fail(str(exc))

    try:
        while True:
            if session.error is not None:
                # Terminal: keep the error screen up until the user quits.
                blank = np.zeros((config.frame_height, config.frame_width, 3), np.uint8)
                ui.render(blank, session.snapshot())
                if ui.poll_key() == KEY_ESC:
                    break
                time.sleep(0.05)
                continue

            # 1. Capture
            frame = camera.read()
            if frame is None:
                break
            h, w = frame.shape[:2]
            now = time.time()

            # 2. Track + feed the session for the current mode
            if session.mode != Mode.BODY:
                hand_list = hands.process(frame, draw=config.draw_landmarks)
                events = session.on_hands(hand_list, ui.buttons, w, h, now)
            else:
                events = session.on_pose(pose.process(frame), w, h)

            for event in events:
                print(f"[EVENT] {event.value}")

            # 3. Render
            view = session.snapshot(now)
            ui.render(frame, view)

            key = ui.poll_key()
            if key == KEY_ESC:
                break
            if key in _MODE_KEYS:
                session.set_mode(_MODE_KEYS[key])
            elif key == ord("s"):
                for event in save_design(session, ui, config, (w, h)):
                    print(f"[EVENT] {event.value}")
            elif key == ord("r"):
                session.reset_transform()

    finally:
        if camera:
            camera.release()
        if hands:
            hands.release()
        if pose:
            pose.release()
        ui.close()
        print("\n✓ Application closed cleanly")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Gesture-driven overlay try-on")
    parser.add_argument("--config", help="JSON file overriding AppConfig defaults")
    parser.add_argument("--qt", action="store_true", help="use the PyQt6 window")
    args = parser.parse_args(argv)

    config = AppConfig.from_json(args.config) if args.config else default_config
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.qt:
        from app.qt_app import run_qt
        run_qt(config)
    else:
        run(config)


if __name__ == "__main__":
    main()
