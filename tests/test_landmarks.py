"""
Test cases for metric extraction and orientation resolution.
"""
import math
import unittest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from palmsense.landmarks import (
    SENTINEL_DISTANCE, compute_metrics, hand_scale, palm_center,
    fingers_extended, is_open_hand, project_point, finger_offsets,
)
from palmsense.orientation import resolve_orientation, palm_vector, tilt_angle
from palmsense.types import LandmarkFrame, Point3
from synthetic import make_landmarks, make_world


class TestMetrics(unittest.TestCase):
    """Test scale-normalized metrics."""

    def test_hand_scale_positive(self):
        landmarks = make_landmarks()
        self.assertAlmostEqual(hand_scale(landmarks), 0.1)
        self.assertGreater(hand_scale(landmarks), 0)

    def test_pinch_distance_scale_invariant(self):
        landmarks = make_landmarks(pinch=0.3)
        k = 2.5
        scaled = [Point3(p.x * k, p.y * k, p.z * k) for p in landmarks]

        original = compute_metrics(landmarks)
        rescaled = compute_metrics(scaled)

        self.assertAlmostEqual(original.pinch_distance, 0.3)
        self.assertAlmostEqual(rescaled.pinch_distance, original.pinch_distance)
        self.assertAlmostEqual(rescaled.hand_scale, original.hand_scale * k)

    def test_pinky_and_middle_distances(self):
        m = compute_metrics(make_landmarks(pinky=0.45))
        self.assertAlmostEqual(m.pinky_distance, 0.45)
        self.assertGreater(m.middle_distance, 1.0)

    def test_degenerate_scale_returns_sentinel(self):
        landmarks = [Point3(0.5, 0.5, 0.0)] * 21
        m = compute_metrics(landmarks)
        self.assertEqual(m.hand_scale, 0.0)
        self.assertEqual(m.pinch_distance, SENTINEL_DISTANCE)
        self.assertEqual(m.pinky_distance, SENTINEL_DISTANCE)
        self.assertEqual(m.middle_distance, SENTINEL_DISTANCE)

    def test_palm_center_is_wrist_middle_mcp_midpoint(self):
        cx, cy = palm_center(make_landmarks(wrist=(0.4, 0.7)))
        self.assertAlmostEqual(cx, 0.4)
        self.assertAlmostEqual(cy, 0.65)

    def test_finger_offsets_relative_to_wrist(self):
        index, middle = finger_offsets(make_landmarks(wrist=(0.2, 0.8)))
        self.assertAlmostEqual(index[0], -0.04)
        self.assertAlmostEqual(index[1], -0.2)
        self.assertAlmostEqual(middle[1], -0.21)


class TestHandOpen(unittest.TestCase):
    """Test the two-of-three open-hand rule."""

    def test_open_hand(self):
        landmarks = make_landmarks()
        self.assertEqual(fingers_extended(landmarks), 3)
        self.assertTrue(is_open_hand(landmarks))

    def test_closed_hand(self):
        landmarks = make_landmarks(open_hand=False)
        self.assertEqual(fingers_extended(landmarks), 0)
        self.assertFalse(is_open_hand(landmarks))

    def test_two_of_three_is_open(self):
        landmarks = make_landmarks()
        # Curl the ring finger only
        landmarks[16] = Point3(landmarks[14].x, landmarks[14].y + 0.02, 0.0)
        self.assertEqual(fingers_extended(landmarks), 2)
        self.assertTrue(is_open_hand(landmarks))
        self.assertFalse(is_open_hand(landmarks, min_extended=3))


class TestProjection(unittest.TestCase):

    def test_mirror_flips_x(self):
        self.assertEqual(project_point((0.25, 0.4), mirror=True), (0.75, 0.4))
        self.assertEqual(project_point((0.25, 0.4), mirror=False), (0.25, 0.4))


class TestOrientation(unittest.TestCase):
    """Test gimbal resolution from world landmarks."""

    def test_missing_world_landmarks(self):
        o = resolve_orientation(None, "Right", 55.0)
        self.assertEqual((o.pitch_deg, o.yaw_deg), (0.0, 0.0))
        self.assertTrue(o.is_facing_camera)
        self.assertEqual(o.handedness, "Right")

    def test_pitch(self):
        o = resolve_orientation(make_world(pitch_deg=30.0), "Right", 55.0)
        self.assertAlmostEqual(o.pitch_deg, 30.0)
        self.assertAlmostEqual(o.yaw_deg, 0.0)
        self.assertTrue(o.is_facing_camera)

    def test_not_facing_when_pitched_away(self):
        o = resolve_orientation(make_world(pitch_deg=80.0), "Right", 55.0)
        self.assertFalse(o.is_facing_camera)

    def test_not_facing_when_yawed(self):
        o = resolve_orientation(make_world(yaw_deg=70.0), "Right", 55.0)
        self.assertAlmostEqual(o.yaw_deg, 70.0)
        self.assertFalse(o.is_facing_camera)

    def test_left_hand_yaw_negated(self):
        right = resolve_orientation(make_world(yaw_deg=30.0), "Right", 55.0)
        left = resolve_orientation(make_world(yaw_deg=30.0, left=True), "Left", 55.0)
        self.assertAlmostEqual(right.yaw_deg, 30.0)
        self.assertAlmostEqual(left.yaw_deg, -30.0)

    def test_palm_vector_and_tilt_angle(self):
        landmarks = make_landmarks(palm_dx=0.1)
        vx, vy = palm_vector(landmarks)
        self.assertAlmostEqual(vx, 0.1)
        self.assertAlmostEqual(vy, -0.1)
        self.assertAlmostEqual(tilt_angle(landmarks), math.pi / 4)
        self.assertAlmostEqual(tilt_angle(landmarks, mirror=True), -math.pi / 4)


class TestLandmarkFrame(unittest.TestCase):

    def test_requires_21_points(self):
        with self.assertRaises(ValueError):
            LandmarkFrame(landmarks=make_landmarks()[:20])

    def test_world_points_must_match(self):
        with self.assertRaises(ValueError):
            LandmarkFrame(landmarks=make_landmarks(), world_landmarks=make_world()[:5])


if __name__ == '__main__':
    unittest.main()
