"""
Integration test to verify the engine, bus and mock controller work together.
"""
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))
sys.path.insert(0, str(Path(__file__).parent / "tests"))

from palmsense import GestureEngine, EventBus, MockController, GestureListener, StatusEvent, load_config
from synthetic import make_frame


class TestIntegration(unittest.TestCase):
    """Drive a full swipe through the engine and check what the controller saw."""

    def setUp(self):
        self.cfg = load_config()
        self.bus = EventBus()
        self.engine = GestureEngine(self.cfg, bus=self.bus)
        self.controller = MockController()
        self.controller.attach(self.bus)

    def test_controller_implements_listener(self):
        self.assertIsInstance(self.controller, GestureListener)

    def test_swipe_reaches_controller(self):
        self.engine.process_frame(make_frame(wrist=(0.5, 0.5)), 0.0)
        self.assertTrue(self.controller.hand_detected)

        self.engine.process_frame(make_frame(wrist=(0.3, 0.5)), 0.1)
        self.assertEqual(self.controller.gesture_counts, {"swipe-right": 1})
        self.assertEqual(self.controller.log[0], "swipe-right")
        self.assertEqual(self.controller.frame_count, 2)
        self.assertAlmostEqual(self.controller.wrist_speed, 2.0)

        self.engine.process_frame(None, 0.2)
        self.assertFalse(self.controller.hand_detected)
        self.assertEqual(self.controller.wrist_speed, 0.0)

    def test_payload_in_log(self):
        self.engine.process_frame(make_frame(), 0.0)
        self.engine.process_frame(make_frame(index_shift=(0.0, -0.1)), 0.05)
        self.assertEqual(self.controller.log[0], "finger-flick-up (Vel: 2.00)")

    def test_detector_error_reaches_controller(self):
        with self.assertLogs("palmsense.controller_mock", level="WARNING") as logs:
            self.bus.publish("status", StatusEvent(type="error", data="estimator failure"))
        self.assertEqual(self.controller.last_error, "estimator failure")
        self.assertIn("Detector error: estimator failure", logs.output[0])

    def test_gesture_logged_with_count(self):
        with self.assertLogs("palmsense.controller_mock", level="INFO") as logs:
            self.engine.process_frame(make_frame(wrist=(0.5, 0.5)), 0.0)
            self.engine.process_frame(make_frame(wrist=(0.3, 0.5)), 0.1)
        self.assertTrue(any("Gesture: swipe-right (count #1)" in line for line in logs.output))

    def test_reset_counters(self):
        self.engine.process_frame(make_frame(wrist=(0.5, 0.5)), 0.0)
        self.engine.process_frame(make_frame(wrist=(0.3, 0.5)), 0.1)
        self.controller.reset_counters()
        self.assertEqual(self.controller.gesture_counts, {})
        self.assertEqual(len(self.controller.log), 0)


if __name__ == '__main__':
    unittest.main()
