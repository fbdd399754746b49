"""
Mock controller that logs engine output instead of acting on it.
"""
import logging
import math
from collections import deque
from typing import Deque, Dict, List, Optional, Tuple

from .events import EventBus, ListenerHandle, GESTURE_CHANNEL, FRAME_CHANNEL, STATUS_CHANNEL
from .types import FrameTelemetry, GestureEvent, StatusEvent


logger = logging.getLogger(__name__)

MAX_LOG_ENTRIES = 50


class MockController:
    """Logs gestures and tracks basic hand statistics for testing."""

    def __init__(self):
        """Initialize the mock controller."""
        self.gesture_counts: Dict[str, int] = {}
        self.frame_count = 0
        self.hand_detected = False
        self.last_error: Optional[str] = None
        self.wrist_speed = 0.0  # normalized units per second
        self.log: Deque[str] = deque(maxlen=MAX_LOG_ENTRIES)
        self._last_wrist: Optional[Tuple[float, float, float]] = None

    def attach(self, bus: EventBus) -> List[ListenerHandle]:
        """Subscribe to every channel of the bus."""
        return [
            bus.subscribe(GESTURE_CHANNEL, self.on_gesture),
            bus.subscribe(FRAME_CHANNEL, self.on_frame),
            bus.subscribe(STATUS_CHANNEL, self.on_status),
        ]

    def on_gesture(self, event: GestureEvent) -> None:
        """Log a gesture with its payload."""
        self.gesture_counts[event.gesture] = self.gesture_counts.get(event.gesture, 0) + 1

        detail = ""
        if event.data:
            if "velocity" in event.data:
                detail = f" (Vel: {event.data['velocity']:.2f})"
            if "angle" in event.data:
                detail = f" (Ang: {event.data['angle']:.1f}°)"

        entry = f"{event.gesture}{detail}"
        self.log.appendleft(entry)
        logger.info("[MockController] Gesture: %s (count #%d)", entry, self.gesture_counts[event.gesture])

    def on_frame(self, telemetry: FrameTelemetry) -> None:
        """Track wrist speed from consecutive telemetry frames."""
        self.frame_count += 1
        wrist = telemetry.landmarks[0]
        if self._last_wrist is not None:
            dt = telemetry.timestamp - self._last_wrist[2]
            if dt > 0:
                self.wrist_speed = math.hypot(wrist.x - self._last_wrist[0],
                                              wrist.y - self._last_wrist[1]) / dt
        self._last_wrist = (wrist.x, wrist.y, telemetry.timestamp)

    def on_status(self, status: StatusEvent) -> None:
        if status.type == "hand-detected":
            self.hand_detected = bool(status.data)
            if not self.hand_detected:
                self._last_wrist = None
                self.wrist_speed = 0.0
        elif status.type == "error":
            self.last_error = str(status.data)
            logger.warning("[MockController] Detector error: %s", status.data)

    def reset_counters(self) -> None:
        """Reset counters for testing."""
        self.gesture_counts.clear()
        self.frame_count = 0
        self.log.clear()
