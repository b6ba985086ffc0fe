"""
Camera — OpenCV VideoCapture with FPS limiting.
No landmarks, no gestures.
"""
from __future__ import annotations
import time
from typing import Optional

import cv2
import numpy as np

from domain.errors import PerceptionInitError


class Camera:
    """
    Parameters
    ----------
    device : int
        Camera index (0 = default webcam).
    fps_limit : int
        Maximum frames per second handed to the pipeline.
    width, height : int
        Requested capture size (the driver may pick the nearest supported).
    """

    def __init__(self, device: int = 0, fps_limit: int = 30,
                 width: int = 1280, height: int = 720) -> None:
        self._cap = cv2.VideoCapture(device)
        self._frame_time = 1.0 / fps_limit
        self._prev_time: float = 0.0

        if not self._cap.isOpened():
            raise PerceptionInitError(f"Cannot open camera device {device}")
        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)

    # ------------------------------------------------------------------
    def read(self) -> Optional[np.ndarray]:
        """
        Wait until the next frame is due, then return it.
        Returns None on read failure.
        """
        wait = self._frame_time - (time.time() - self._prev_time)
        if wait > 0:
            time.sleep(wait)
        self._prev_time = time.time()

        ret, frame = self._cap.read()
        return frame if ret else None

    def release(self) -> None:
        self._cap.release()

    def __enter__(self) -> "Camera":
        return self

    def __exit__(self, *_) -> None:
        self.release()
