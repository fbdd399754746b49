"""
Scale-normalized hand metrics computed from a single landmark frame.
"""
import numpy as np
from typing import Sequence, Tuple

from .types import Metrics, Point3


# Landmark indices
WRIST = 0
THUMB_TIP = 4
INDEX_MCP = 5
INDEX_PIP = 6
INDEX_TIP = 8
MIDDLE_MCP = 9
MIDDLE_PIP = 10
MIDDLE_TIP = 12
RING_MCP = 13
RING_PIP = 14
RING_TIP = 16
PINKY_MCP = 17
PINKY_TIP = 20

# Distance reported when the hand scale collapses to zero ("fully open")
SENTINEL_DISTANCE = 10.0
MIN_HAND_SCALE = 1e-6


def _xy(landmarks: Sequence[Point3], idx: int) -> np.ndarray:
    return np.array([landmarks[idx][0], landmarks[idx][1]], dtype=float)


def distance(landmarks: Sequence[Point3], a: int, b: int) -> float:
    """Image-space (x, y) distance between two landmarks."""
    return float(np.linalg.norm(_xy(landmarks, b) - _xy(landmarks, a)))


def hand_scale(landmarks: Sequence[Point3]) -> float:
    """
    Size of the hand in the image, used as the unit for every other distance.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        Distance from wrist to middle finger MCP
    """
    return distance(landmarks, WRIST, MIDDLE_MCP)


def normalized_distance(landmarks: Sequence[Point3], a: int, b: int, scale: float) -> float:
    """Distance between two landmarks in hand-scale units."""
    if scale < MIN_HAND_SCALE:
        return SENTINEL_DISTANCE
    return distance(landmarks, a, b) / scale


def palm_center(landmarks: Sequence[Point3]) -> Tuple[float, float]:
    """
    Calculate the center of the palm.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        (x, y) midpoint of wrist and middle finger MCP in [0..1] range
    """
    center = (_xy(landmarks, WRIST) + _xy(landmarks, MIDDLE_MCP)) / 2.0
    return (float(center[0]), float(center[1]))


def fingers_extended(landmarks: Sequence[Point3]) -> int:
    """
    Count extended fingers among index, middle and ring.

    Args:
        landmarks: List of 21 hand landmarks

    Returns:
        Number of extended fingers (0-3)
    """
    finger_tips = [INDEX_TIP, MIDDLE_TIP, RING_TIP]
    finger_pips = [INDEX_PIP, MIDDLE_PIP, RING_PIP]

    extended_count = 0
    for tip_idx, pip_idx in zip(finger_tips, finger_pips):
        if landmarks[tip_idx][1] < landmarks[pip_idx][1]:  # tip y < pip y (inverted y-axis)
            extended_count += 1

    return extended_count


def is_open_hand(landmarks: Sequence[Point3], min_extended: int = 2) -> bool:
    """
    Check if the hand is open.

    Args:
        landmarks: List of 21 hand landmarks
        min_extended: How many of index/middle/ring must be extended

    Returns:
        True if at least ``min_extended`` fingers are extended
    """
    return fingers_extended(landmarks) >= min_extended


def compute_metrics(landmarks: Sequence[Point3]) -> Metrics:
    """Derive every per-frame metric; no history is involved."""
    scale = hand_scale(landmarks)
    return Metrics(
        hand_scale=scale,
        pinch_distance=normalized_distance(landmarks, THUMB_TIP, INDEX_TIP, scale),
        pinky_distance=normalized_distance(landmarks, PINKY_TIP, PINKY_MCP, scale),
        middle_distance=normalized_distance(landmarks, THUMB_TIP, MIDDLE_TIP, scale),
        palm_center=palm_center(landmarks),
    )


def project_point(point: Tuple[float, float], mirror: bool) -> Tuple[float, float]:
    """Map an image-space point to display space, flipping x for a mirrored view."""
    x, y = point[0], point[1]
    return ((1.0 - x) if mirror else x, y)


def finger_offsets(landmarks: Sequence[Point3]) -> Tuple[Tuple[float, float], Tuple[float, float]]:
    """Index and middle fingertip positions relative to the wrist."""
    wrist = _xy(landmarks, WRIST)
    index = _xy(landmarks, INDEX_TIP) - wrist
    middle = _xy(landmarks, MIDDLE_TIP) - wrist
    return ((float(index[0]), float(index[1])), (float(middle[0]), float(middle[1])))
