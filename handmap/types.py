"""
Hand observation data types.

Mirrors the 21-point hand landmark layout produced by MediaPipe-style
hand trackers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Union

import numpy as np
from numpy.typing import NDArray

NUM_HAND_LANDMARKS = 21


class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float
    y: float
    z: float = 0.0


class HandLandmark:
    """Hand landmark indices matching MediaPipe's specification."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_FINGER_MCP = 5
    INDEX_FINGER_PIP = 6
    INDEX_FINGER_DIP = 7
    INDEX_FINGER_TIP = 8
    MIDDLE_FINGER_MCP = 9
    MIDDLE_FINGER_PIP = 10
    MIDDLE_FINGER_DIP = 11
    MIDDLE_FINGER_TIP = 12
    RING_FINGER_MCP = 13
    RING_FINGER_PIP = 14
    RING_FINGER_DIP = 15
    RING_FINGER_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


FINGERTIPS = (
    HandLandmark.THUMB_TIP,
    HandLandmark.INDEX_FINGER_TIP,
    HandLandmark.MIDDLE_FINGER_TIP,
    HandLandmark.RING_FINGER_TIP,
    HandLandmark.PINKY_TIP,
)

# Base knuckle -> tip, per finger
FINGER_JOINTS = {
    "thumb": (
        HandLandmark.THUMB_CMC,
        HandLandmark.THUMB_MCP,
        HandLandmark.THUMB_IP,
        HandLandmark.THUMB_TIP,
    ),
    "index": (
        HandLandmark.INDEX_FINGER_MCP,
        HandLandmark.INDEX_FINGER_PIP,
        HandLandmark.INDEX_FINGER_DIP,
        HandLandmark.INDEX_FINGER_TIP,
    ),
    "middle": (
        HandLandmark.MIDDLE_FINGER_MCP,
        HandLandmark.MIDDLE_FINGER_PIP,
        HandLandmark.MIDDLE_FINGER_DIP,
        HandLandmark.MIDDLE_FINGER_TIP,
    ),
    "ring": (
        HandLandmark.RING_FINGER_MCP,
        HandLandmark.RING_FINGER_PIP,
        HandLandmark.RING_FINGER_DIP,
        HandLandmark.RING_FINGER_TIP,
    ),
    "pinky": (
        HandLandmark.PINKY_MCP,
        HandLandmark.PINKY_PIP,
        HandLandmark.PINKY_DIP,
        HandLandmark.PINKY_TIP,
    ),
}


class Handedness(str, Enum):
    """Which physical hand a landmark set belongs to."""
    LEFT = "Left"
    RIGHT = "Right"


# Hand selector meaning "first observed hand this frame"
ANY_HAND = "any"

HandSelector = Union[Handedness, str]


@dataclass
class HandObservation:
    """One tracked hand in one frame."""

    landmarks: List[Landmark]
    handedness: Handedness
    confidence: float = 1.0

    def __post_init__(self):
        if len(self.landmarks) != NUM_HAND_LANDMARKS:
            raise ValueError(
                f"Hand must have {NUM_HAND_LANDMARKS} landmarks, got {len(self.landmarks)}"
            )
        self.landmarks = [Landmark(*lm) for lm in self.landmarks]
        self.handedness = Handedness(self.handedness)

    def as_array(self) -> NDArray[np.float64]:
        """Get landmarks as 21x3 numpy array."""
        return np.array([[lm.x, lm.y, lm.z] for lm in self.landmarks], dtype=np.float64)

    @classmethod
    def from_dict(cls, data: dict) -> "HandObservation":
        """Create from dictionary."""
        return cls(
            landmarks=[Landmark(*point) for point in data["landmarks"]],
            handedness=Handedness(data["handedness"]),
            confidence=float(data.get("confidence", 1.0)),
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "landmarks": [list(lm) for lm in self.landmarks],
            "handedness": self.handedness.value,
            "confidence": float(self.confidence),
        }


@dataclass
class FrameObservation:
    """All hands observed in a single frame."""

    hands: List[HandObservation] = field(default_factory=list)
    timestamp: float = 0.0
    frame_width: int = 0
    frame_height: int = 0

    # Externally computed scalars, keyed by GestureInput.external_key
    external_values: Dict[str, float] = field(default_factory=dict)

    @property
    def has_hands(self) -> bool:
        """Check if any hand was observed."""
        return len(self.hands) > 0

    @classmethod
    def from_dict(cls, data: dict) -> "FrameObservation":
        """Create from dictionary."""
        return cls(
            hands=[HandObservation.from_dict(h) for h in data.get("hands", [])],
            timestamp=float(data.get("timestamp", 0.0)),
            frame_width=int(data.get("frame_width", 0)),
            frame_height=int(data.get("frame_height", 0)),
            external_values={
                str(k): float(v) for k, v in data.get("external_values", {}).items()
            },
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "hands": [h.to_dict() for h in self.hands],
            "timestamp": float(self.timestamp),
            "frame_width": self.frame_width,
            "frame_height": self.frame_height,
            "external_values": dict(self.external_values),
        }
