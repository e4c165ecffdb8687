"""
Gesture value extraction from hand landmarks.

Every function takes a 21x3 landmark array (x, y normalized to the frame,
z relative depth) and returns one scalar. Angles and distances use the
image plane only unless noted otherwise.
"""

from typing import Callable, Dict, Optional

import numpy as np
from numpy.typing import NDArray

from handmap.core.mapping import GestureInput, GestureType
from handmap.types import FINGER_JOINTS, FINGERTIPS, HandLandmark
from handmap.utils.math_utils import angle_between_vectors

LandmarkArray = NDArray[np.float64]

_PALM_INDICES = [
    HandLandmark.WRIST,
    HandLandmark.INDEX_FINGER_MCP,
    HandLandmark.MIDDLE_FINGER_MCP,
    HandLandmark.RING_FINGER_MCP,
    HandLandmark.PINKY_MCP,
]

_TIP_TO_FINGER = {joints[3]: name for name, joints in FINGER_JOINTS.items()}


def distance_2d(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance ignoring depth."""
    return float(np.linalg.norm(a[:2] - b[:2]))


def distance_3d(a: np.ndarray, b: np.ndarray) -> float:
    """Euclidean distance including depth."""
    return float(np.linalg.norm(a[:3] - b[:3]))


def palm_center(landmarks: LandmarkArray) -> np.ndarray:
    """Centroid of the wrist and the four base knuckles."""
    return landmarks[_PALM_INDICES].mean(axis=0)


def hand_center(landmarks: LandmarkArray) -> np.ndarray:
    """Centroid of all landmarks."""
    return landmarks.mean(axis=0)


def hand_bounding_box(landmarks: LandmarkArray) -> Dict[str, float]:
    """Image-plane bounding box of the hand."""
    min_x, min_y = landmarks[:, :2].min(axis=0)
    max_x, max_y = landmarks[:, :2].max(axis=0)
    return {
        "min_x": float(min_x),
        "min_y": float(min_y),
        "max_x": float(max_x),
        "max_y": float(max_y),
        "width": float(max_x - min_x),
        "height": float(max_y - min_y),
    }


def landmark_velocity(
    current: np.ndarray, previous: np.ndarray, dt: float
) -> Dict[str, float]:
    """Per-axis velocity and speed of one landmark."""
    if dt <= 0:
        return {"x": 0.0, "y": 0.0, "z": 0.0, "magnitude": 0.0}

    velocity = (current[:3] - previous[:3]) / dt
    return {
        "x": float(velocity[0]),
        "y": float(velocity[1]),
        "z": float(velocity[2]),
        "magnitude": float(np.linalg.norm(velocity)),
    }


def pinch_distance(
    landmarks: LandmarkArray, finger_tip: int = HandLandmark.INDEX_FINGER_TIP
) -> float:
    """Distance between the thumb tip and another fingertip."""
    return distance_2d(landmarks[HandLandmark.THUMB_TIP], landmarks[finger_tip])


def hand_openness(landmarks: LandmarkArray) -> float:
    """
    Average distance of the fingertips from the palm center.

    Typically ranges from about 0.1 (fist) to 0.5 (open hand).
    """
    center = palm_center(landmarks)
    return float(np.mean([distance_2d(landmarks[tip], center) for tip in FINGERTIPS]))


def finger_curl(landmarks: LandmarkArray, finger: str = "index") -> float:
    """
    Bend of one finger as 1 - angle / pi.

    The angle is taken between the base-knuckle -> middle-joint segment and
    the middle-joint -> tip segment.
    """
    mcp, pip, _, tip = (landmarks[i, :2] for i in FINGER_JOINTS[finger])

    v1 = pip - mcp
    v2 = tip - pip

    if np.linalg.norm(v1) == 0 or np.linalg.norm(v2) == 0:
        return 0.0

    return 1.0 - angle_between_vectors(v1, v2) / np.pi


def hand_rotation(landmarks: LandmarkArray) -> float:
    """Angle of the wrist -> middle knuckle vector in radians."""
    wrist = landmarks[HandLandmark.WRIST]
    middle_mcp = landmarks[HandLandmark.MIDDLE_FINGER_MCP]
    return float(np.arctan2(middle_mcp[1] - wrist[1], middle_mcp[0] - wrist[0]))


def finger_spread(landmarks: LandmarkArray) -> float:
    """Average angle between adjacent finger directions (index to pinky)."""
    fingers = ("index", "middle", "ring", "pinky")
    directions = [
        landmarks[FINGER_JOINTS[f][3], :2] - landmarks[FINGER_JOINTS[f][0], :2]
        for f in fingers
    ]

    angles = []
    for v1, v2 in zip(directions[:-1], directions[1:]):
        if np.linalg.norm(v1) > 0 and np.linalg.norm(v2) > 0:
            angles.append(angle_between_vectors(v1, v2))

    if not angles:
        return 0.0
    return float(np.mean(angles))


def palm_facing(landmarks: LandmarkArray) -> float:
    """1.0 when the palm faces the camera, 0.0 when it faces away."""
    wrist = landmarks[HandLandmark.WRIST]
    v1 = landmarks[HandLandmark.MIDDLE_FINGER_MCP] - wrist
    v2 = landmarks[HandLandmark.INDEX_FINGER_MCP] - wrist

    # Z component of the palm normal
    normal_z = v1[0] * v2[1] - v1[1] * v2[0]
    return float((np.sign(normal_z) + 1) / 2)


def wrist_velocity(
    landmarks: LandmarkArray,
    previous: Optional[LandmarkArray],
    dt: float,
    axis: int,
) -> float:
    """Absolute wrist speed along one axis, 0.0 without usable history."""
    if previous is None or dt <= 0:
        return 0.0
    current = landmarks[HandLandmark.WRIST, axis]
    prior = previous[HandLandmark.WRIST, axis]
    return float(abs((current - prior) / dt))


def finger_for_tip(tip_index: int) -> str:
    """Finger name for a fingertip index, index finger otherwise."""
    return _TIP_TO_FINGER.get(tip_index, "index")


Extractor = Callable[[LandmarkArray, GestureInput, Optional[LandmarkArray], float], float]

_EXTRACTORS: Dict[GestureType, Extractor] = {
    GestureType.PINCH_DISTANCE: lambda lm, gi, prev, dt: pinch_distance(lm, gi.finger),
    GestureType.HAND_OPENNESS: lambda lm, gi, prev, dt: hand_openness(lm),
    GestureType.FINGER_CURL: lambda lm, gi, prev, dt: finger_curl(lm, finger_for_tip(gi.finger)),
    GestureType.HAND_ROTATION: lambda lm, gi, prev, dt: hand_rotation(lm),
    GestureType.WRIST_POSITION_X: lambda lm, gi, prev, dt: float(lm[HandLandmark.WRIST, 0]),
    GestureType.WRIST_POSITION_Y: lambda lm, gi, prev, dt: float(lm[HandLandmark.WRIST, 1]),
    GestureType.WRIST_DEPTH: lambda lm, gi, prev, dt: float(lm[HandLandmark.WRIST, 2]),
    GestureType.FINGER_SPREAD: lambda lm, gi, prev, dt: finger_spread(lm),
    GestureType.PALM_FACING: lambda lm, gi, prev, dt: palm_facing(lm),
    GestureType.VELOCITY_X: lambda lm, gi, prev, dt: wrist_velocity(lm, prev, dt, 0),
    GestureType.VELOCITY_Y: lambda lm, gi, prev, dt: wrist_velocity(lm, prev, dt, 1),
}

_missing = [t.value for t in GestureType if t.needs_hand and t not in _EXTRACTORS]
if _missing:
    raise RuntimeError(f"No extractor registered for gesture types: {_missing}")


def extract_gesture_value(
    landmarks: LandmarkArray,
    gesture_input: GestureInput,
    previous: Optional[LandmarkArray] = None,
    dt: float = 0.0,
) -> float:
    """
    Extract a scalar gesture value from one hand.

    Args:
        landmarks: Current 21x3 landmarks
        gesture_input: Gesture selection (type and finger)
        previous: Previous-frame landmarks of the same hand, if cached
        dt: Time since the previous frame

    Returns:
        Gesture value
    """
    extractor = _EXTRACTORS.get(gesture_input.type)
    if extractor is None:
        raise ValueError(f"Gesture type is not derived from landmarks: {gesture_input.type.value}")
    return extractor(landmarks, gesture_input, previous, dt)
