"""
Configuration management for the gesture classification engine.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass, field, fields


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class TrackerConfig:
    """MediaPipe Hand Landmarker settings."""
    model_path: str = "hand_landmarker.task"
    model_url: str = (
        "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
        "hand_landmarker/float16/1/hand_landmarker.task"
    )
    num_hands: int = 1
    min_detection_confidence: float = 0.3
    min_presence_confidence: float = 0.3
    min_tracking_confidence: float = 0.3
    swap_handedness: bool = True  # MediaPipe labels assume a mirrored input image


@dataclass
class EngineConfig:
    """Engine-wide settings."""
    mirror: bool = True  # display is mirrored (selfie view)
    max_frame_gap_ms: int = 500  # longer gaps between hand frames reset velocity history


@dataclass
class GuardConfig:
    """Gating of discrete gesture classification."""
    cooldown_ms: int = 400
    facing_threshold_deg: float = 55.0
    min_extended_fingers: int = 2


@dataclass
class TiltConfig:
    """Palm rotation gesture configuration."""
    change_threshold: float = 0.15


@dataclass
class FlickConfig:
    """Finger flick gesture configuration."""
    velocity_threshold: float = 1.2  # normalized units per second
    palm_stability_max: float = 0.5  # anchor speed above which flicks are ignored


@dataclass
class SwipeConfig:
    """Palm swipe gesture configuration."""
    min_distance: float = 0.05
    min_speed: float = 0.2


@dataclass
class PinchConfig:
    """Thumb/index pinch configuration."""
    threshold: float = 0.4


@dataclass
class PinkyConfig:
    """Pinky snap click configuration."""
    click_threshold: float = 0.5
    snap_speed: float = 0.08  # per frame
    rearm_margin: float = 0.1


@dataclass
class LeverConfig:
    """Thumb/middle pinch lever configuration."""
    threshold: float = 0.35
    release: float = 0.45


@dataclass
class GesturesConfig:
    """Gesture recognition configuration."""
    tilt: TiltConfig = field(default_factory=TiltConfig)
    flick: FlickConfig = field(default_factory=FlickConfig)
    swipe: SwipeConfig = field(default_factory=SwipeConfig)
    pinch: PinchConfig = field(default_factory=PinchConfig)
    pinky: PinkyConfig = field(default_factory=PinkyConfig)
    lever: LeverConfig = field(default_factory=LeverConfig)


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_preview: bool = True
    window_name: str = "PalmSense"


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    tracker: TrackerConfig = field(default_factory=TrackerConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    guard: GuardConfig = field(default_factory=GuardConfig)
    gestures: GesturesConfig = field(default_factory=GesturesConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.default.yaml"


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the packaged config.default.yaml

    Returns:
        Configuration object with all settings
    """
    config_path = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    cfg = _dict_to_config(data)
    validate_config(cfg)
    return cfg


def _section(cls, data: Optional[Dict[str, Any]], name: str):
    """Build one dataclass section, rejecting keys it does not know."""
    data = data or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = set(data) - known
    if unknown:
        raise ValueError(f"Unknown keys in config section '{name}': {sorted(unknown)}")
    return cls(**data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    gestures_data = data.get('gestures') or {}
    gestures = GesturesConfig(
        tilt=_section(TiltConfig, gestures_data.get('tilt'), 'gestures.tilt'),
        flick=_section(FlickConfig, gestures_data.get('flick'), 'gestures.flick'),
        swipe=_section(SwipeConfig, gestures_data.get('swipe'), 'gestures.swipe'),
        pinch=_section(PinchConfig, gestures_data.get('pinch'), 'gestures.pinch'),
        pinky=_section(PinkyConfig, gestures_data.get('pinky'), 'gestures.pinky'),
        lever=_section(LeverConfig, gestures_data.get('lever'), 'gestures.lever'),
    )

    return Cfg(
        camera=_section(CameraConfig, data.get('camera'), 'camera'),
        tracker=_section(TrackerConfig, data.get('tracker'), 'tracker'),
        engine=_section(EngineConfig, data.get('engine'), 'engine'),
        guard=_section(GuardConfig, data.get('guard'), 'guard'),
        gestures=gestures,
        display=_section(DisplayConfig, data.get('display'), 'display'),
        logging=_section(LoggingConfig, data.get('logging'), 'logging'),
    )


def validate_config(cfg: Cfg) -> None:
    """Raise ValueError if any tunable is outside its usable range."""
    if cfg.tracker.num_hands != 1:
        raise ValueError("Only single-hand tracking is supported (tracker.num_hands must be 1)")
    if cfg.engine.max_frame_gap_ms <= 0:
        raise ValueError("engine.max_frame_gap_ms must be positive")
    if cfg.guard.cooldown_ms < 0:
        raise ValueError("guard.cooldown_ms must not be negative")
    if not 0 < cfg.guard.facing_threshold_deg <= 180:
        raise ValueError("guard.facing_threshold_deg must be in (0, 180]")
    if not 1 <= cfg.guard.min_extended_fingers <= 3:
        raise ValueError("guard.min_extended_fingers must be between 1 and 3")

    g = cfg.gestures
    positive = {
        'gestures.tilt.change_threshold': g.tilt.change_threshold,
        'gestures.flick.velocity_threshold': g.flick.velocity_threshold,
        'gestures.flick.palm_stability_max': g.flick.palm_stability_max,
        'gestures.swipe.min_distance': g.swipe.min_distance,
        'gestures.swipe.min_speed': g.swipe.min_speed,
        'gestures.pinch.threshold': g.pinch.threshold,
        'gestures.pinky.click_threshold': g.pinky.click_threshold,
        'gestures.pinky.snap_speed': g.pinky.snap_speed,
        'gestures.lever.threshold': g.lever.threshold,
    }
    for name, value in positive.items():
        if value <= 0:
            raise ValueError(f"{name} must be positive, got {value}")
    if g.pinky.rearm_margin < 0:
        raise ValueError("gestures.pinky.rearm_margin must not be negative")
    if g.lever.release < g.lever.threshold:
        raise ValueError("gestures.lever.release must be >= gestures.lever.threshold")
