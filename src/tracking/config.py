"""
Config loader for HandRunner.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    mirror: bool = True  # Flip frames so moving right reads as screen-right


@dataclass
class MediaPipeConfig:
    model_path: Optional[str] = None  # Defaults to models/hand_landmarker.task
    num_hands: int = 1
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class GestureConfig:
    smoothing_alpha: float = 0.3
    history_size: int = 10
    cooldown_ms: float = 350.0

    # Swipe (lane change)
    swipe_min_distance: float = 0.12         # 12% of frame width
    swipe_min_speed: float = 0.0006          # Normalized units per ms
    swipe_dominant_axis_factor: float = 2.0  # |dx| must exceed factor * |dy|
    swipe_max_vertical_drift: float = 0.10
    swipe_time_limit_ms: float = 300.0
    swipe_min_samples: int = 4

    # Zones (jump / slide)
    jump_zone_y: float = 0.25    # Top 25%
    slide_zone_y: float = 0.75   # Bottom 25%
    zone_hold_ms: float = 120.0
    zone_max_drift: float = 0.08

    mirror_x: bool = False  # Set when the landmark source does not mirror frames

    def __post_init__(self):
        if not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}")
        if self.swipe_min_samples < 2:
            raise ValueError("swipe_min_samples must be at least 2")
        if self.history_size < self.swipe_min_samples:
            raise ValueError(
                f"history_size ({self.history_size}) is smaller than "
                f"swipe_min_samples ({self.swipe_min_samples})"
            )
        if not 0.0 <= self.jump_zone_y < self.slide_zone_y <= 1.0:
            raise ValueError(
                f"Zones overlap: jump_zone_y={self.jump_zone_y}, "
                f"slide_zone_y={self.slide_zone_y}"
            )
        for name in ("cooldown_ms", "swipe_time_limit_ms", "zone_hold_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")


@dataclass
class LoopConfig:
    render_fps: int = 60
    detection_interval_ms: int = 40  # ~25 FPS landmark detection


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ValueError: If gesture thresholds are inconsistent.
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        loop=_dict_to_dataclass(LoopConfig, data.get('loop')),
    )
