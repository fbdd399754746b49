"""
Host-owned frame pump: reads images, runs the pose estimator and feeds the engine.
"""
import asyncio
import logging
import time
from typing import Any, Callable, List, Optional

from .engine import GestureEngine
from .events import EventBus, STATUS_CHANNEL
from .types import FrameTelemetry, GestureEvent, LandmarkFrame, StatusEvent


logger = logging.getLogger(__name__)

TickCallback = Callable[[Any, Optional[FrameTelemetry], List[GestureEvent]], None]


class FramePump:
    """
    Drives one engine from an image source, one frame at a time.

    A failing detector call skips that frame and the pump carries on with the
    next one. ``stop()`` turns any later tick into a no-op.
    """

    def __init__(self, read_frame: Callable[[], Optional[Any]],
                 detect: Callable[[Any, int], Optional[LandmarkFrame]],
                 engine: GestureEngine,
                 bus: Optional[EventBus] = None,
                 clock: Callable[[], float] = time.monotonic,
                 on_tick: Optional[TickCallback] = None):
        """
        Args:
            read_frame: Returns the next image, or None when the source is exhausted
            detect: Pose estimator; (image, timestamp_ms) -> LandmarkFrame or None
            engine: Engine to feed
            bus: Where upstream errors are reported
            clock: Monotonic time source in seconds
            on_tick: Called after every processed frame with (image, telemetry, events)
        """
        self.read_frame = read_frame
        self.detect = detect
        self.engine = engine
        self.bus = bus
        self.clock = clock
        self.on_tick = on_tick
        self.running = True
        self.frame_count = 0
        self.error_count = 0

    def tick(self) -> bool:
        """
        Pump a single frame.

        Returns:
            False once the pump is stopped or the source has no more frames
        """
        if not self.running:
            return False

        image = self.read_frame()
        if image is None:
            logger.warning("Failed to read frame from source")
            return False

        t_now = self.clock()
        try:
            hand = self.detect(image, int(t_now * 1000))
        except Exception as e:
            self.error_count += 1
            logger.exception("Hand detection failed on frame %d", self.frame_count)
            if self.bus is not None:
                self.bus.publish(STATUS_CHANNEL, StatusEvent(type="error", data=str(e)))
            return True

        telemetry, events = self.engine.process_frame(hand, t_now)
        self.frame_count += 1
        if self.on_tick is not None:
            self.on_tick(image, telemetry, events)
        return True

    async def run(self, max_frames: Optional[int] = None) -> None:
        """Pump until stopped, exhausted or ``max_frames`` ticks have run."""
        ticks = 0
        while self.running and (max_frames is None or ticks < max_frames):
            if not self.tick():
                break
            ticks += 1
            # Let other tasks run between frames
            await asyncio.sleep(0)

    def stop(self) -> None:
        self.running = False
        self.engine.stop()
