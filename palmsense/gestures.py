"""
Gesture classifiers that turn frame-to-frame hand changes into gesture events.

Tilt, flick and swipe only read the engine history; the engine decides which
one wins and records the new baselines afterwards. Pinch, pinky click and the
middle-pinch lever track binary contact state and update it themselves.
"""
import math
from typing import Optional

from .config import Cfg
from .landmarks import SENTINEL_DISTANCE
from .state import EngineState, FingerSample, Vec2
from .types import (
    GestureEvent, Metrics,
    TILT_UP, TILT_DOWN, TILT_LEFT, TILT_RIGHT,
    SWIPE_UP, SWIPE_DOWN, SWIPE_LEFT, SWIPE_RIGHT,
    FINGER_FLICK_UP, FINGER_FLICK_DOWN, FINGER_FLICK_LEFT, FINGER_FLICK_RIGHT,
    PINCH_START, PINCH_END, PINKY_CLICK,
)


MIN_DT_S = 0.001


def horizontal_direction(dx: float, mirror: bool) -> str:
    """
    Screen direction of a horizontal image-space movement.

    A mirrored display shows the camera image flipped, so movement towards
    larger image x appears as movement to the left.
    """
    moving_right = dx > 0
    if mirror:
        moving_right = not moving_right
    return "right" if moving_right else "left"


class TiltGesture:
    """
    Detects palm rotation from the change of the wrist -> middle MCP vector.

    Features:
    - Vertical rotation wins when it dominates the horizontal change
    - Change threshold in image units
    - Mirror-corrected left/right
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def update(self, state: EngineState, vector: Vec2, t_now: float) -> Optional[GestureEvent]:
        """
        Compare the current palm vector with the previous frame's.

        Args:
            state: Engine history (read only)
            vector: Current image-space palm vector
            t_now: Current timestamp in seconds

        Returns:
            Tilt GestureEvent with the palm angle in degrees, or None
        """
        if state.prev_palm_vector is None:
            return None

        threshold = self.cfg.gestures.tilt.change_threshold
        change_x = vector[0] - state.prev_palm_vector[0]
        change_y = vector[1] - state.prev_palm_vector[1]

        gesture = None
        if abs(change_y) > abs(change_x) and abs(change_y) > threshold:
            # Negative y change: fingers moving up
            gesture = TILT_UP if change_y < 0 else TILT_DOWN
        elif abs(change_x) > threshold:
            direction = horizontal_direction(change_x, self.cfg.engine.mirror)
            gesture = TILT_RIGHT if direction == "right" else TILT_LEFT

        if gesture is None:
            return None

        dx = -vector[0] if self.cfg.engine.mirror else vector[0]
        angle = math.degrees(math.atan2(dx, -vector[1]))
        return GestureEvent(gesture=gesture, data={"angle": angle}, timestamp=t_now)


class FingerFlickGesture:
    """
    Detects fast index/middle fingertip movement relative to the wrist.

    Features:
    - Per-axis fingertip velocity in normalized units per second
    - Palm stability shield: ignored while the whole hand is translating
    - Payload carries the peak velocity on the dominant axis
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def palm_speed(self, state: EngineState, wrist: Vec2, t_now: float) -> float:
        """Anchor speed since the previous frame (0 without a baseline)."""
        if state.prev_wrist is None or state.prev_wrist_time is None:
            return 0.0
        dt = t_now - state.prev_wrist_time
        if dt <= 0:
            return 0.0
        return math.hypot(wrist[0] - state.prev_wrist[0], wrist[1] - state.prev_wrist[1]) / dt

    def update(self, state: EngineState, fingers: FingerSample, wrist: Vec2) -> Optional[GestureEvent]:
        """
        Classify a flick from the change in fingertip offsets.

        Args:
            state: Engine history (read only)
            fingers: Current fingertip offsets from the wrist
            wrist: Current wrist position, for the stability shield

        Returns:
            Flick GestureEvent with peak velocity, or None
        """
        prev = state.prev_fingers
        if prev is None:
            return None

        dt = fingers.timestamp - prev.timestamp
        if dt <= 0:
            return None

        if self.palm_speed(state, wrist, fingers.timestamp) > self.cfg.gestures.flick.palm_stability_max:
            return None

        index_vx = (fingers.index[0] - prev.index[0]) / dt
        index_vy = (fingers.index[1] - prev.index[1]) / dt
        middle_vx = (fingers.middle[0] - prev.middle[0]) / dt
        middle_vy = (fingers.middle[1] - prev.middle[1]) / dt

        threshold = self.cfg.gestures.flick.velocity_threshold
        max_vy = max(abs(index_vy), abs(middle_vy))
        max_vx = max(abs(index_vx), abs(middle_vx))

        gesture = None
        velocity = 0.0
        if max_vy > max_vx and max_vy > threshold:
            # Take the sign of the faster finger
            vy = index_vy if abs(index_vy) >= abs(middle_vy) else middle_vy
            gesture = FINGER_FLICK_UP if vy < 0 else FINGER_FLICK_DOWN
            velocity = max_vy
        elif max_vx > threshold:
            vx = index_vx if abs(index_vx) >= abs(middle_vx) else middle_vx
            direction = horizontal_direction(vx, self.cfg.engine.mirror)
            gesture = FINGER_FLICK_RIGHT if direction == "right" else FINGER_FLICK_LEFT
            velocity = max_vx

        if gesture is None:
            return None
        return GestureEvent(gesture=gesture, data={"velocity": velocity}, timestamp=fingers.timestamp)


class SwipeGesture:
    """
    Detects whole-hand swipes from the wrist displacement between frames.

    Features:
    - Minimum displacement and minimum speed
    - Dominant axis decides the direction
    - Mirror-corrected left/right
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def update(self, state: EngineState, wrist: Vec2, t_now: float) -> Optional[GestureEvent]:
        """
        Process the wrist position and return a swipe if one is detected.

        Args:
            state: Engine history (read only)
            wrist: Current image-space wrist position
            t_now: Current timestamp in seconds

        Returns:
            Swipe GestureEvent, or None
        """
        if state.prev_wrist is None or state.prev_wrist_time is None:
            return None

        delta_x = wrist[0] - state.prev_wrist[0]
        delta_y = wrist[1] - state.prev_wrist[1]
        dt = max(t_now - state.prev_wrist_time, MIN_DT_S)

        magnitude = math.hypot(delta_x, delta_y)
        speed = magnitude / dt

        threshold = self.cfg.gestures.swipe.min_distance
        if magnitude <= threshold or speed <= self.cfg.gestures.swipe.min_speed:
            return None

        gesture = None
        if abs(delta_y) > abs(delta_x):
            if abs(delta_y) > threshold:
                gesture = SWIPE_UP if delta_y < 0 else SWIPE_DOWN
        elif abs(delta_x) > threshold:
            direction = horizontal_direction(delta_x, self.cfg.engine.mirror)
            gesture = SWIPE_RIGHT if direction == "right" else SWIPE_LEFT

        if gesture is None:
            return None
        return GestureEvent(gesture=gesture, data=None, timestamp=t_now)


class PinchGesture:
    """Thumb/index contact with a single normalized threshold."""

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def update(self, state: EngineState, metrics: Metrics, t_now: float) -> Optional[GestureEvent]:
        pinching = metrics.pinch_distance < self.cfg.gestures.pinch.threshold
        if pinching == state.is_pinching:
            return None
        state.is_pinching = pinching
        return GestureEvent(gesture=PINCH_START if pinching else PINCH_END, timestamp=t_now)


class PinkyClickGesture:
    """
    Detects a deliberate pinky snap towards the palm.

    Fires once when the pinky crosses from above to below the click threshold
    while closing faster than the snap speed. Stays latched until the pinky
    reopens past threshold + margin.
    """

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def update(self, state: EngineState, metrics: Metrics, t_now: float) -> Optional[GestureEvent]:
        """
        Args:
            state: Engine history; pinky distance and latch are updated
            metrics: Current frame metrics
            t_now: Current timestamp in seconds

        Returns:
            pinky-click GestureEvent, or None
        """
        pinky = self.cfg.gestures.pinky
        distance = metrics.pinky_distance
        prev = state.prev_pinky_distance
        state.prev_pinky_distance = distance

        if state.pinky_latched:
            if distance >= pinky.click_threshold + pinky.rearm_margin:
                state.pinky_latched = False
            return None

        # Must cross the threshold from above; a degenerate previous frame is no baseline
        if prev is None or prev >= SENTINEL_DISTANCE:
            return None
        if prev < pinky.click_threshold or distance >= pinky.click_threshold:
            return None

        closing_velocity = prev - distance  # per frame
        if closing_velocity <= pinky.snap_speed:
            return None

        state.pinky_latched = True
        return GestureEvent(gesture=PINKY_CLICK, data={"velocity": closing_velocity}, timestamp=t_now)


class MiddleLever:
    """Thumb/middle contact reported in telemetry, with release hysteresis."""

    def __init__(self, cfg: Cfg):
        self.cfg = cfg

    def update(self, state: EngineState, metrics: Metrics) -> bool:
        lever = self.cfg.gestures.lever
        if state.middle_lever:
            if metrics.middle_distance > lever.release:
                state.middle_lever = False
        elif metrics.middle_distance < lever.threshold:
            state.middle_lever = True
        return state.middle_lever
