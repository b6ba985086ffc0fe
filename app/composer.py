"""
Raster helpers for the design workflow.

The design is placed on the garment template with its own Transform
(position = design center in canvas pixels, rotation clockwise in degrees,
uniform scale). Flattening both gives the BGRA image that becomes the
try-on overlay.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Optional, Tuple

import cv2
import numpy as np

from domain.errors import TryOnError
from domain.models import Transform

log = logging.getLogger(__name__)

Size = Tuple[int, int]      # (width, height)


# ---- loading -------------------------------------------------------------
def to_bgra(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGRA)
    if img.shape[2] == 3:
        return cv2.cvtColor(img, cv2.COLOR_BGR2BGRA)
    return img


def shrink_to_width(img: np.ndarray, max_width: int) -> np.ndarray:
    h, w = img.shape[:2]
    if w <= max_width:
        return img
    return cv2.resize(img, (max_width, int(h * max_width / w)),
                      interpolation=cv2.INTER_AREA)


def load_bgra(path: Path, max_width: int) -> Optional[np.ndarray]:
    """Read an image as BGRA, shrunk to ``max_width``; None if missing."""
    img = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if img is None:
        log.warning("Image not found: %s", path)
        return None
    return shrink_to_width(to_bgra(img), max_width)


# ---- layers --------------------------------------------------------------
def warp_layer(image: np.ndarray, t: Transform, size: Size) -> np.ndarray:
    """Render ``image`` centered on ``t.position`` into a transparent canvas."""
    cx, cy = t.position
    ih, iw = image.shape[:2]
    # cv2 angles are counter-clockwise; the transform rotates clockwise on screen.
    m = cv2.getRotationMatrix2D((iw / 2, ih / 2), -t.rotation, t.scale)
    m[0, 2] += cx - iw / 2
    m[1, 2] += cy - ih / 2
    return cv2.warpAffine(image, m, size, flags=cv2.INTER_LINEAR,
                          borderMode=cv2.BORDER_CONSTANT, borderValue=(0, 0, 0, 0))


def blend_onto(frame: np.ndarray, layer: np.ndarray) -> None:
    """Alpha-blend a BGRA layer onto a BGR frame of the same size, in place."""
    alpha = layer[:, :, 3:4].astype(np.float32) / 255.0
    frame[:] = (layer[:, :, :3] * alpha + frame * (1.0 - alpha)).astype(np.uint8)


def over(top: np.ndarray, bottom: np.ndarray) -> np.ndarray:
    """Porter-Duff "over" of two BGRA images of the same size."""
    ta = top[:, :, 3:4].astype(np.float32) / 255.0
    ba = bottom[:, :, 3:4].astype(np.float32) / 255.0
    out_a = ta + ba * (1.0 - ta)
    safe = np.where(out_a > 0, out_a, 1.0)
    rgb = (top[:, :, :3] * ta + bottom[:, :, :3] * ba * (1.0 - ta)) / safe
    out = np.empty_like(top)
    out[:, :, :3] = np.clip(rgb, 0, 255).astype(np.uint8)
    out[:, :, 3] = np.clip(out_a[:, :, 0] * 255.0, 0, 255).astype(np.uint8)
    return out


def fit_center(image: np.ndarray, size: Size) -> np.ndarray:
    """Scale ``image`` to fit ``size`` keeping its aspect, centered on a transparent canvas."""
    w, h = size
    ih, iw = image.shape[:2]
    k = min(w / iw, h / ih)
    nw, nh = max(1, int(iw * k)), max(1, int(ih * k))
    canvas = np.zeros((h, w, 4), np.uint8)
    x0, y0 = (w - nw) // 2, (h - nh) // 2
    canvas[y0:y0 + nh, x0:x0 + nw] = cv2.resize(image, (nw, nh), interpolation=cv2.INTER_AREA)
    return canvas


# ---- design --------------------------------------------------------------
def compose_design(
    template: Optional[np.ndarray],
    design: np.ndarray,
    t: Transform,
    size: Size,
) -> np.ndarray:
    """
    Flatten ``design`` (placed by ``t``) over ``template`` fitted into a
    canvas of ``size``. Without a template the design is composed over a
    transparent canvas.
    """
    w, h = size
    base = fit_center(template, size) if template is not None else np.zeros((h, w, 4), np.uint8)
    return over(warp_layer(design, t, size), base)


def trim_transparent(image: np.ndarray) -> np.ndarray:
    """Crop to the bounding box of non-transparent pixels."""
    points = cv2.findNonZero(image[:, :, 3])
    if points is None:
        return image
    x, y, w, h = cv2.boundingRect(points)
    return image[y:y + h, x:x + w].copy()


def save_composite(image: np.ndarray, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if not cv2.imwrite(str(path), image):
        raise TryOnError(f"Cannot write composite to {path}")
    log.info("Composite saved to %s", path)
    return path
