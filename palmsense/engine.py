"""
Gesture classification engine: one landmark frame in, telemetry and gesture events out.
"""
import logging
from typing import Callable, List, Optional, Tuple

from .config import Cfg
from .events import EventBus, ListenerHandle, ListenerRegistry, GESTURE_CHANNEL, FRAME_CHANNEL, STATUS_CHANNEL
from .gestures import (
    TiltGesture, FingerFlickGesture, SwipeGesture,
    PinchGesture, PinkyClickGesture, MiddleLever,
)
from .guard import GuardEvaluator
from .landmarks import WRIST, INDEX_TIP, compute_metrics, finger_offsets, is_open_hand, project_point
from .orientation import palm_vector, resolve_orientation, tilt_angle
from .state import EngineState, FingerSample
from .types import FrameTelemetry, GestureEvent, GuardState, LandmarkFrame, StatusEvent, PINCH_END


logger = logging.getLogger(__name__)


class GestureEngine:
    """
    Main engine that coordinates metric extraction, guards and classifiers.

    Per frame:
    1. Metrics and orientation from the current landmarks
    2. Pinch, pinky click and middle lever (no guard, no cooldown)
    3. Telemetry, emitted unconditionally
    4. Guard evaluation
    5. Tilt > flick > swipe cascade, at most one winner

    The engine is driven by the host; it owns no scheduler and no threads.
    """

    def __init__(self, cfg: Cfg, bus: Optional[EventBus] = None):
        """Initialize the engine with configuration and an optional broadcast bus."""
        self.cfg = cfg
        self.bus = bus
        self.state = EngineState()
        self.listeners = ListenerRegistry()
        self.active = True

        self.guard = GuardEvaluator(cfg)
        self.tilt_gesture = TiltGesture(cfg)
        self.flick_gesture = FingerFlickGesture(cfg)
        self.swipe_gesture = SwipeGesture(cfg)
        self.pinch_gesture = PinchGesture(cfg)
        self.pinky_gesture = PinkyClickGesture(cfg)
        self.middle_lever = MiddleLever(cfg)

    def on_gesture(self, callback: Callable[[GestureEvent], None]) -> ListenerHandle:
        """Register a callback for gesture events."""
        return self.listeners.subscribe(callback)

    def remove_listener(self, handle: ListenerHandle) -> bool:
        return self.listeners.unsubscribe(handle)

    def stop(self) -> None:
        """Mark the engine inactive; later frames are ignored."""
        self.active = False

    def reset(self) -> None:
        """Forget all history, including the cooldown timer."""
        self.state = EngineState()

    def process_frame(self, frame: Optional[LandmarkFrame],
                      t_now: float) -> Tuple[Optional[FrameTelemetry], List[GestureEvent]]:
        """
        Process one video frame.

        Args:
            frame: Detected hand, or None if no hand is present
            t_now: Current timestamp in seconds

        Returns:
            Tuple of (telemetry, gesture_events); telemetry is None without a hand
        """
        if not self.active:
            return None, []

        if frame is None:
            events = self._hand_lost(t_now)
            for event in events:
                self._emit_gesture(event)
            return None, events

        state = self.state
        if state.guard == GuardState.IDLE:
            logger.info("Hand detected (%s)", frame.handedness or "unknown")
            self._publish(STATUS_CHANNEL, StatusEvent(type="hand-detected", data=True))
        elif (state.prev_wrist_time is not None and
              (t_now - state.prev_wrist_time) * 1000.0 > self.cfg.engine.max_frame_gap_ms):
            # Upstream stalled without reporting a lost hand
            logger.debug("Frame gap of %.0f ms, resetting velocity history",
                         (t_now - state.prev_wrist_time) * 1000.0)
            state.clear_velocity_history()

        landmarks = frame.landmarks
        metrics = compute_metrics(landmarks)
        orientation = resolve_orientation(
            frame.world_landmarks, frame.handedness, self.cfg.guard.facing_threshold_deg
        )
        hand_open = is_open_hand(landmarks, self.cfg.guard.min_extended_fingers)

        # Binary contact detectors run regardless of guard and cooldown
        contact_events = []
        pinch = self.pinch_gesture.update(state, metrics, t_now)
        if pinch is not None:
            contact_events.append(pinch)
        pinky = self.pinky_gesture.update(state, metrics, t_now)
        if pinky is not None:
            contact_events.append(pinky)
        lever = self.middle_lever.update(state, metrics)

        mirror = self.cfg.engine.mirror
        telemetry = FrameTelemetry(
            landmarks=list(landmarks),
            cursor=project_point(landmarks[INDEX_TIP], mirror),
            palm_center=project_point(metrics.palm_center, mirror),
            pinch_distance=metrics.pinch_distance,
            tilt_angle=tilt_angle(landmarks, mirror),
            pitch=orientation.pitch_deg,
            yaw=orientation.yaw_deg,
            is_facing_camera=orientation.is_facing_camera,
            handedness=orientation.handedness or "Unknown",
            hand_scale=metrics.hand_scale,
            is_middle_pinch_lever=lever,
            is_pinching=state.is_pinching,
            hand_open=hand_open,
            timestamp=t_now,
        )
        self._publish(FRAME_CHANNEL, telemetry)

        guard = self.guard.update(state, True, hand_open, orientation.is_facing_camera, t_now)

        wrist = (landmarks[WRIST][0], landmarks[WRIST][1])
        events: List[GestureEvent] = []
        if guard == GuardState.OPEN_ACTIVE:
            index, middle = finger_offsets(landmarks)
            fingers = FingerSample(index=index, middle=middle, timestamp=t_now)
            vector = palm_vector(landmarks)

            gesture = self.tilt_gesture.update(state, vector, t_now)
            if gesture is None:
                gesture = self.flick_gesture.update(state, fingers, wrist)
            if gesture is None:
                gesture = self.swipe_gesture.update(state, wrist, t_now)

            if gesture is not None:
                logger.debug("Gesture detected: %s %s", gesture.gesture, gesture.data)
                state.last_gesture_time = t_now
                events.append(gesture)

            state.prev_palm_vector = vector
            state.prev_fingers = fingers

        # Swipe anchor persists across guard blocks
        state.prev_wrist = wrist
        state.prev_wrist_time = t_now

        events.extend(contact_events)
        for event in events:
            self._emit_gesture(event)

        return telemetry, events

    def _hand_lost(self, t_now: float) -> List[GestureEvent]:
        """Clear history so the next acquisition starts without stale baselines."""
        if self.state.guard == GuardState.IDLE:
            return []

        events = []
        if self.state.is_pinching:
            events.append(GestureEvent(gesture=PINCH_END, timestamp=t_now))

        logger.info("Hand lost")
        self.state.clear()
        self._publish(STATUS_CHANNEL, StatusEvent(type="hand-detected", data=False))
        return events

    def _emit_gesture(self, event: GestureEvent) -> None:
        self.listeners.notify(event)
        self._publish(GESTURE_CHANNEL, event)

    def _publish(self, channel: str, payload) -> None:
        if self.bus is not None:
            self.bus.publish(channel, payload)
