"""
Mutable history owned by a single engine instance.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from .types import GuardState


Vec2 = Tuple[float, float]


@dataclass
class FingerSample:
    """Index and middle fingertip offsets from the wrist at a point in time."""
    index: Vec2
    middle: Vec2
    timestamp: float


@dataclass
class EngineState:
    """
    Everything the engine remembers between frames.

    Passed explicitly to every classifier; nothing else mutates it.
    """
    guard: GuardState = GuardState.IDLE

    # Swipe anchor
    prev_wrist: Optional[Vec2] = None
    prev_wrist_time: Optional[float] = None

    # Tilt baseline
    prev_palm_vector: Optional[Vec2] = None

    # Flick baseline
    prev_fingers: Optional[FingerSample] = None

    # Binary contact detectors
    prev_pinky_distance: Optional[float] = None
    is_pinching: bool = False
    pinky_latched: bool = False  # click fired, waiting for the pinky to reopen
    middle_lever: bool = False

    last_gesture_time: Optional[float] = None

    def clear_motion_history(self) -> None:
        """Drop rotation and flick baselines; the swipe anchor is kept."""
        self.prev_palm_vector = None
        self.prev_fingers = None

    def clear_velocity_history(self) -> None:
        """Drop every baseline used to compute a frame-to-frame delta."""
        self.prev_wrist = None
        self.prev_wrist_time = None
        self.clear_motion_history()
        self.prev_pinky_distance = None

    def clear(self) -> None:
        """Forget the hand entirely. The cooldown timestamp survives."""
        self.guard = GuardState.IDLE
        self.clear_velocity_history()
        self.is_pinching = False
        self.pinky_latched = False
        self.middle_lever = False
