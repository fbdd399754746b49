"""
Hand Gesture Classification Engine

Turns per-frame 3D hand landmarks from a pose estimator into smoothed
telemetry and debounced gesture events (tilts, swipes, finger flicks,
pinch start/end and pinky click).
"""

__version__ = "0.1.0"

from .types import (
    Point3, LandmarkFrame, Metrics, Orientation, GuardState,
    GestureEvent, FrameTelemetry, StatusEvent, GestureListener, GESTURE_TAGS,
)
from .config import load_config, Cfg
from .controller_mock import MockController
from .engine import GestureEngine
from .events import EventBus, ListenerHandle, ListenerRegistry
from .landmarks import compute_metrics, palm_center, fingers_extended, is_open_hand
from .orientation import resolve_orientation
from .pump import FramePump
from .state import EngineState

__all__ = [
    "Point3",
    "LandmarkFrame",
    "Metrics",
    "Orientation",
    "GuardState",
    "GestureEvent",
    "FrameTelemetry",
    "StatusEvent",
    "GestureListener",
    "GESTURE_TAGS",
    "load_config",
    "Cfg",
    "MockController",
    "GestureEngine",
    "EventBus",
    "ListenerHandle",
    "ListenerRegistry",
    "compute_metrics",
    "palm_center",
    "fingers_extended",
    "is_open_hand",
    "resolve_orientation",
    "FramePump",
    "EngineState",
]
