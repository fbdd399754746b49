"""
Hand landmark detection using the MediaPipe Hand Landmarker task.
"""
import logging
import os
import urllib.request
from typing import Optional

import cv2
import mediapipe as mp
import numpy as np
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from .config import TrackerConfig
from .types import LandmarkFrame, Point3


logger = logging.getLogger(__name__)


class HandsTracker:
    """Hand landmark tracker producing LandmarkFrame objects."""

    def __init__(self, cfg: TrackerConfig):
        """
        Initialize the hands tracker, downloading the model on first use.

        Args:
            cfg: Tracker configuration
        """
        self.cfg = cfg
        if not os.path.exists(cfg.model_path):
            logger.info("📥 Downloading hand landmarker model to %s", cfg.model_path)
            urllib.request.urlretrieve(cfg.model_url, cfg.model_path)

        self.detector = vision.HandLandmarker.create_from_options(
            vision.HandLandmarkerOptions(
                base_options=python.BaseOptions(model_asset_path=cfg.model_path),
                running_mode=vision.RunningMode.VIDEO,
                num_hands=cfg.num_hands,
                min_hand_detection_confidence=cfg.min_detection_confidence,
                min_hand_presence_confidence=cfg.min_presence_confidence,
                min_tracking_confidence=cfg.min_tracking_confidence,
            )
        )
        self._last_timestamp_ms = -1

    def process(self, frame_bgr: np.ndarray, timestamp_ms: int) -> Optional[LandmarkFrame]:
        """
        Process a frame and return the detected hand.

        Args:
            frame_bgr: Input frame in BGR format
            timestamp_ms: Monotonically increasing frame timestamp

        Returns:
            LandmarkFrame for the first detected hand, or None if no hand detected
        """
        # VIDEO mode rejects non-increasing timestamps
        timestamp_ms = max(timestamp_ms, self._last_timestamp_ms + 1)
        self._last_timestamp_ms = timestamp_ms

        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=frame_rgb)
        results = self.detector.detect_for_video(mp_image, timestamp_ms)

        if not results.hand_landmarks:
            return None

        landmarks = [Point3(lm.x, lm.y, lm.z) for lm in results.hand_landmarks[0]]

        world = None
        if results.hand_world_landmarks:
            world = [Point3(lm.x, lm.y, lm.z) for lm in results.hand_world_landmarks[0]]

        handedness = None
        if results.handedness:
            handedness = results.handedness[0][0].category_name
            if self.cfg.swap_handedness:
                handedness = "Right" if handedness == "Left" else "Left"

        return LandmarkFrame(landmarks=landmarks, world_landmarks=world, handedness=handedness)

    def close(self) -> None:
        self.detector.close()
