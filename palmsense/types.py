"""
Type definitions for the gesture classification engine.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Protocol, Sequence, Tuple, runtime_checkable


NUM_LANDMARKS = 21

# Gesture tags
TILT_UP = "tilt-up"
TILT_DOWN = "tilt-down"
TILT_LEFT = "tilt-left"
TILT_RIGHT = "tilt-right"
SWIPE_UP = "swipe-up"
SWIPE_DOWN = "swipe-down"
SWIPE_LEFT = "swipe-left"
SWIPE_RIGHT = "swipe-right"
FINGER_FLICK_UP = "finger-flick-up"
FINGER_FLICK_DOWN = "finger-flick-down"
FINGER_FLICK_LEFT = "finger-flick-left"
FINGER_FLICK_RIGHT = "finger-flick-right"
PINCH_START = "pinch-start"
PINCH_END = "pinch-end"
PINKY_CLICK = "pinky-click"

GESTURE_TAGS = frozenset({
    TILT_UP, TILT_DOWN, TILT_LEFT, TILT_RIGHT,
    SWIPE_UP, SWIPE_DOWN, SWIPE_LEFT, SWIPE_RIGHT,
    FINGER_FLICK_UP, FINGER_FLICK_DOWN, FINGER_FLICK_LEFT, FINGER_FLICK_RIGHT,
    PINCH_START, PINCH_END, PINKY_CLICK,
})


class Point3(NamedTuple):
    """A landmark position. Image-space x/y are normalized to [0..1]."""
    x: float
    y: float
    z: float = 0.0


@dataclass(frozen=True)
class LandmarkFrame:
    """One hand detected by the pose estimator in a single video frame."""
    landmarks: Sequence[Point3]
    world_landmarks: Optional[Sequence[Point3]] = None
    handedness: Optional[str] = None  # "Left", "Right" or None

    def __post_init__(self):
        if len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} image-space landmarks, got {len(self.landmarks)}"
            )
        if self.world_landmarks is not None and len(self.world_landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} world-space landmarks, got {len(self.world_landmarks)}"
            )


@dataclass(frozen=True)
class Metrics:
    """Scale-normalized measurements of the current frame."""
    hand_scale: float
    pinch_distance: float  # thumb tip to index tip
    pinky_distance: float  # pinky tip to pinky MCP
    middle_distance: float  # thumb tip to middle tip
    palm_center: Tuple[float, float]


@dataclass(frozen=True)
class Orientation:
    """Hand gimbal derived from world-space landmarks."""
    pitch_deg: float
    yaw_deg: float
    is_facing_camera: bool
    handedness: Optional[str]


class GuardState(Enum):
    """Whether discrete gesture classification may run this frame."""
    IDLE = "idle"  # no hand
    CLOSED = "closed"  # hand present, not open
    OPEN_BLOCKED = "open_blocked"  # open, but not facing camera or cooling down
    OPEN_ACTIVE = "open_active"  # classification permitted


@dataclass(frozen=True)
class GestureEvent:
    """A discrete gesture fired by the engine."""
    gesture: str
    data: Optional[Dict[str, float]] = None
    timestamp: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"gesture": self.gesture, "data": dict(self.data) if self.data else None}


@dataclass(frozen=True)
class FrameTelemetry:
    """Continuous per-frame snapshot, emitted whenever a hand is present."""
    landmarks: List[Point3]
    cursor: Tuple[float, float]
    palm_center: Optional[Tuple[float, float]]
    pinch_distance: float
    tilt_angle: float  # radians, in-plane
    pitch: float
    yaw: float
    is_facing_camera: bool
    handedness: str
    hand_scale: float
    is_middle_pinch_lever: bool
    is_pinching: bool
    hand_open: bool
    timestamp: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "landmarks": [{"x": p.x, "y": p.y, "z": p.z} for p in self.landmarks],
            "cursorProjection": {"x": self.cursor[0], "y": self.cursor[1]},
            "palmCenterProjection": (
                {"x": self.palm_center[0], "y": self.palm_center[1]}
                if self.palm_center is not None else None
            ),
            "pinchDistance": self.pinch_distance,
            "tiltAngle": self.tilt_angle,
            "pitch": self.pitch,
            "yaw": self.yaw,
            "isFacingCamera": self.is_facing_camera,
            "handedness": self.handedness,
            "handScale": self.hand_scale,
            "isMiddlePinchLever": self.is_middle_pinch_lever,
            "isPinching": self.is_pinching,
            "handOpen": self.hand_open,
        }


@dataclass(frozen=True)
class StatusEvent:
    """Detector status change (hand acquired/lost, upstream error)."""
    type: str
    data: Any = None


@runtime_checkable
class GestureListener(Protocol):
    """Anything that wants to receive engine output."""

    def on_gesture(self, event: GestureEvent) -> None:
        ...

    def on_frame(self, telemetry: FrameTelemetry) -> None:
        ...
