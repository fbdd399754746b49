"""
Hand orientation (gimbal) resolution.

Pitch comes from the wrist -> middle MCP vector, yaw from the index MCP ->
pinky MCP vector, both measured against the depth axis of the world-space
landmarks. Yaw is negated for left hands so the same physical rotation reads
with the same sign on either hand.
"""
import math
import numpy as np
from typing import Optional, Sequence, Tuple

from .landmarks import WRIST, INDEX_MCP, MIDDLE_MCP, PINKY_MCP
from .types import Orientation, Point3


def _vector(points: Sequence[Point3], a: int, b: int) -> np.ndarray:
    return np.asarray(points[b], dtype=float) - np.asarray(points[a], dtype=float)


def pitch_degrees(world_landmarks: Sequence[Point3]) -> float:
    """Forward/backward tilt; 0 when the fingers point straight up."""
    v = _vector(world_landmarks, WRIST, MIDDLE_MCP)
    # y grows downward, so an upright hand has negative dy
    return math.degrees(math.atan2(v[2], -v[1]))


def yaw_degrees(world_landmarks: Sequence[Point3], handedness: Optional[str]) -> float:
    """Side-to-side turn; 0 when the knuckle line is parallel to the image plane."""
    v = _vector(world_landmarks, INDEX_MCP, PINKY_MCP)
    yaw = math.degrees(math.atan2(v[2], abs(v[0])))
    if handedness == "Left":
        yaw = -yaw
    return yaw


def resolve_orientation(world_landmarks: Optional[Sequence[Point3]],
                        handedness: Optional[str],
                        facing_threshold_deg: float) -> Orientation:
    """
    Compute the hand gimbal for one frame.

    Args:
        world_landmarks: 21 world-space landmarks, or None if the estimator gave none
        handedness: "Left", "Right" or None
        facing_threshold_deg: Maximum |pitch| and |yaw| for the palm to count as facing the camera

    Returns:
        Orientation; without world landmarks pitch/yaw are 0 and the hand is treated as facing
    """
    if world_landmarks is None:
        return Orientation(pitch_deg=0.0, yaw_deg=0.0, is_facing_camera=True, handedness=handedness)

    pitch = pitch_degrees(world_landmarks)
    yaw = yaw_degrees(world_landmarks, handedness)
    facing = abs(pitch) < facing_threshold_deg and abs(yaw) < facing_threshold_deg
    return Orientation(pitch_deg=pitch, yaw_deg=yaw, is_facing_camera=facing, handedness=handedness)


def palm_vector(landmarks: Sequence[Point3]) -> Tuple[float, float]:
    """Image-space wrist -> middle MCP vector, the baseline for tilt detection."""
    return (landmarks[MIDDLE_MCP][0] - landmarks[WRIST][0],
            landmarks[MIDDLE_MCP][1] - landmarks[WRIST][1])


def tilt_angle(landmarks: Sequence[Point3], mirror: bool = False) -> float:
    """In-plane palm angle in radians; 0 with fingers up, positive leaning right on screen."""
    dx, dy = palm_vector(landmarks)
    if mirror:
        dx = -dx
    return math.atan2(dx, -dy)
