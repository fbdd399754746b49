"""
Synthetic hand landmark frames for tests.
"""
import math
from typing import Optional, Tuple

from palmsense.types import LandmarkFrame, Point3


# Offsets from the wrist in hand-scale units (y grows downward)
_OPEN_OFFSETS = {
    0: (0.0, 0.0),
    1: (-0.3, -0.2), 2: (-0.5, -0.4), 3: (-0.6, -0.55), 4: (-0.7, -0.6),
    5: (-0.3, -1.0), 6: (-0.35, -1.5), 7: (-0.37, -1.75), 8: (-0.4, -2.0),
    9: (0.0, -1.0), 10: (0.0, -1.55), 11: (0.0, -1.8), 12: (0.0, -2.1),
    13: (0.25, -0.95), 14: (0.3, -1.45), 15: (0.32, -1.7), 16: (0.35, -1.9),
    17: (0.45, -0.85), 18: (0.5, -1.2), 19: (0.52, -1.45), 20: (0.55, -1.65),
}

# Curled fingertips sit below their PIP joints
_CLOSED_TIPS = {8: (-0.35, -1.1), 12: (0.0, -1.15), 16: (0.3, -1.1)}


def make_landmarks(wrist: Tuple[float, float] = (0.5, 0.6),
                   scale: float = 0.1,
                   open_hand: bool = True,
                   palm_dx: float = 0.0,
                   index_shift: Tuple[float, float] = (0.0, 0.0),
                   pinch: Optional[float] = None,
                   pinky: Optional[float] = None):
    """
    Build 21 image-space landmarks.

    Args:
        wrist: Wrist position in [0..1] image coordinates
        scale: Wrist to middle MCP distance when palm_dx is 0
        open_hand: Whether index/middle/ring are extended
        palm_dx: Horizontal shift of the middle MCP (image units), tilts the palm vector
        index_shift: Extra offset applied to the index fingertip (image units)
        pinch: Thumb-to-index distance in hand-scale units
        pinky: Pinky tip to pinky MCP distance in hand-scale units
    """
    offsets = dict(_OPEN_OFFSETS)
    if not open_hand:
        offsets.update(_CLOSED_TIPS)

    wx, wy = wrist
    points = {i: (wx + ox * scale, wy + oy * scale) for i, (ox, oy) in offsets.items()}

    points[9] = (points[9][0] + palm_dx, points[9][1])
    points[8] = (points[8][0] + index_shift[0], points[8][1] + index_shift[1])
    if pinch is not None:
        points[4] = (points[8][0] + pinch * scale, points[8][1])
    if pinky is not None:
        points[20] = (points[17][0], points[17][1] - pinky * scale)

    return [Point3(points[i][0], points[i][1], 0.0) for i in range(21)]


def make_world(pitch_deg: float = 0.0, yaw_deg: float = 0.0, left: bool = False):
    """World-space landmarks with a chosen palm pitch and yaw (metres, wrist at origin)."""
    world = [Point3(0.0, 0.0, 0.0) for _ in range(21)]
    p = math.radians(pitch_deg)
    y = math.radians(yaw_deg)
    world[9] = Point3(0.0, -0.09 * math.cos(p), 0.09 * math.sin(p))
    world[5] = Point3(-0.02, -0.085, 0.0)
    dx = 0.05 * math.cos(y)
    world[17] = Point3(-0.02 + (-dx if left else dx), -0.075, 0.05 * math.sin(y))
    return world


def make_frame(pitch_deg: Optional[float] = None, handedness: Optional[str] = "Right", **kwargs) -> LandmarkFrame:
    """LandmarkFrame; world landmarks are included only when pitch_deg is given."""
    world = make_world(pitch_deg) if pitch_deg is not None else None
    return LandmarkFrame(landmarks=make_landmarks(**kwargs), world_landmarks=world, handedness=handedness)
