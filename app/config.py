from __future__ import annotations
import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Tuple, Union

from domain.enums import Mode, ScaleStrategy
from domain.errors import ConfigError
from domain.models import Point2D, Transform
from utils import constants as C


@dataclass
class AppConfig:
    """
    Central configuration injected into all components.
    Defaults come from utils.constants.
    """
    # ---- camera --------------------------------------------------------
    camera_device: int = 0
    fps_limit: int = 30
    frame_width: int = 1280
    frame_height: int = 720

    # ---- perception ----------------------------------------------------
    max_num_hands: int = 2
    model_complexity: int = 1
    hand_detection_confidence: float = 0.7
    hand_tracking_confidence: float = 0.7
    pose_detection_confidence: float = 0.5
    pose_tracking_confidence: float = 0.5
    # Hand landmarks already come out mirrored (selfie mode); pose ones don't.
    mirror_hands: bool = False
    mirror_pose: bool = True
    draw_landmarks: bool = False

    # ---- tool selection ------------------------------------------------
    dwell_time: float = C.DWELL_TIME
    pinch_threshold: float = C.PINCH_THRESHOLD

    # ---- manipulation --------------------------------------------------
    rotation_speed: float = C.ROTATION_SPEED
    scale_speed: float = C.SCALE_SPEED
    min_scale: float = C.MIN_SCALE
    max_scale: float = C.MAX_SCALE
    scale_strategy: ScaleStrategy = ScaleStrategy.DRAG

    # ---- body calibration ----------------------------------------------
    body_smoothing: float = C.BODY_SMOOTHING
    body_factor_min: float = C.BODY_SCALE_MIN
    body_factor_max: float = C.BODY_SCALE_MAX
    body_vertical_offset: float = C.BODY_VERTICAL_OFFSET

    # ---- overlay -------------------------------------------------------
    initial_mode: Mode = Mode.HAND
    initial_position: Tuple[float, float] = C.INITIAL_POSITION
    initial_rotation: float = C.INITIAL_ROTATION
    initial_scale: float = C.INITIAL_SCALE
    overlay_path: Path = Path("assets/overlay.png")
    overlay_max_width: int = 500

    # ---- design (garment template + uploaded design) ------------------
    template_path: Path = Path("assets/template.png")
    design_path: Path = Path("assets/design.png")
    composite_path: Path = Path("composite.png")
    design_position: Tuple[float, float] = C.DESIGN_POSITION
    design_max_width: int = 400

    # ---- toolbar (px, container-relative) ------------------------------
    toolbar_origin: Tuple[int, int] = (20, 20)
    button_size: Tuple[int, int] = (140, 56)
    button_gap: int = 12

    # ---- misc ----------------------------------------------------------
    log_level: str = "INFO"

    # ------------------------------------------------------------------
    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if self.dwell_time < 0:
            raise ConfigError("dwell_time must be >= 0")
        if self.pinch_threshold <= 0:
            raise ConfigError("pinch_threshold must be > 0")
        if not 0 < self.min_scale <= self.max_scale:
            raise ConfigError("need 0 < min_scale <= max_scale")
        if not 0 < self.body_smoothing <= 1:
            raise ConfigError("body_smoothing must be in (0, 1]")
        if not 0 < self.body_factor_min <= self.body_factor_max:
            raise ConfigError("need 0 < body_factor_min <= body_factor_max")
        if self.fps_limit <= 0:
            raise ConfigError("fps_limit must be > 0")
        if self.overlay_max_width <= 0 or self.design_max_width <= 0:
            raise ConfigError("overlay_max_width and design_max_width must be > 0")

    @property
    def initial_transform(self) -> Transform:
        x, y = self.initial_position
        return Transform(Point2D(x, y), self.initial_rotation, self.initial_scale)

    @property
    def design_transform(self) -> Transform:
        x, y = self.design_position
        return Transform(Point2D(x, y))

    def session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ManipulationSession."""
        return dict(
            initial=self.initial_transform,
            mode=self.initial_mode,
            dwell_time=self.dwell_time,
            pinch_threshold=self.pinch_threshold,
            rotation_speed=self.rotation_speed,
            scale_speed=self.scale_speed,
            min_scale=self.min_scale,
            max_scale=self.max_scale,
            scale_strategy=self.scale_strategy,
            body_smoothing=self.body_smoothing,
            body_factor_min=self.body_factor_min,
            body_factor_max=self.body_factor_max,
            body_vertical_offset=self.body_vertical_offset,
            mirror_hands=self.mirror_hands,
            mirror_pose=self.mirror_pose,
            design_initial=self.design_transform,
        )

    # ------------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

        values = dict(data)
        try:
            if "scale_strategy" in values:
                values["scale_strategy"] = ScaleStrategy(values["scale_strategy"])
            if "initial_mode" in values:
                values["initial_mode"] = Mode(values["initial_mode"])
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        for key in ("overlay_path", "template_path", "design_path", "composite_path"):
            if key in values:
                values[key] = Path(values[key])
        for key in ("initial_position", "design_position", "toolbar_origin", "button_size"):
            if key in values:
                values[key] = tuple(values[key])
        return cls(**values)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "AppConfig":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read config {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a JSON object")
        return cls.from_dict(data)


# Default singleton — import and use directly, or override in tests.
default_config = AppConfig()
