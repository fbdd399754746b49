"""
Main application for camera-driven gesture recognition.
"""
import asyncio
import logging
import sys
from typing import List, Optional

import cv2
import numpy as np

from .config import load_config
from .controller_mock import MockController
from .engine import GestureEngine
from .events import EventBus
from .pump import FramePump
from .tracker import HandsTracker
from .types import FrameTelemetry, GestureEvent


logger = logging.getLogger(__name__)


class GestureRecognitionApp:
    """Main application class for hand gesture recognition."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the application with configuration."""
        self.config = load_config(config_path)
        logging.basicConfig(level=self.config.logging.level)

        self.bus = EventBus()
        self.engine = GestureEngine(self.config, bus=self.bus)
        self.controller = MockController()
        self.controller.attach(self.bus)
        self.tracker = HandsTracker(self.config.tracker)

        # Mirror state shown in the preview; engine picks it up in apply_orientation_change()
        self.mirror = self.config.engine.mirror

        # Initialize camera
        self.cap = cv2.VideoCapture(self.config.camera.index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.config.camera.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.config.camera.height)
        self.cap.set(cv2.CAP_PROP_FPS, self.config.camera.fps)

        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open camera {self.config.camera.index}")

        self.pump = FramePump(
            read_frame=self._read_frame,
            detect=self.tracker.process,
            engine=self.engine,
            bus=self.bus,
            on_tick=self._show_preview,
        )

    def _read_frame(self) -> Optional[np.ndarray]:
        ret, frame = self.cap.read()
        return frame if ret else None

    def apply_orientation_change(self) -> None:
        """Push the current mirror setting into the engine."""
        self.config.engine.mirror = self.mirror
        logger.info("Mirror %s", "on" if self.mirror else "off")

    def _show_preview(self, frame: np.ndarray, telemetry: Optional[FrameTelemetry],
                      events: List[GestureEvent]) -> None:
        if not self.config.display.show_preview:
            return

        if self.mirror:
            frame = cv2.flip(frame, 1)
        cv2.imshow(self.config.display.window_name, frame)

        key = cv2.waitKey(1) & 0xFF
        if key == ord('q'):
            self.stop()
        elif key == ord('m'):
            self.mirror = not self.mirror
            self.apply_orientation_change()

    async def run(self):
        """Run the main application loop."""
        logger.info(f"Starting {self.config.display.window_name}")
        logger.info("🎯 Tilt, swipe, finger flick, pinch and pinky click are active")
        if self.config.display.show_preview:
            logger.info("Press 'q' to quit, 'm' to toggle mirroring")

        try:
            await self.pump.run()
        finally:
            self.close()

    def stop(self) -> None:
        self.pump.stop()

    def close(self) -> None:
        """Cleanup resources."""
        self.pump.stop()
        self.tracker.close()
        if self.cap.isOpened():
            self.cap.release()
        cv2.destroyAllWindows()


async def main():
    """Entry point for the application."""
    config_path = sys.argv[1] if len(sys.argv) > 1 else None

    app = GestureRecognitionApp(config_path=config_path)
    try:
        await app.run()
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        app.stop()


def cli():
    asyncio.run(main())


if __name__ == "__main__":
    cli()
