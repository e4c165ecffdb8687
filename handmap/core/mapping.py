"""
Gesture mapping definitions.

A mapping describes one pipeline from a gesture measurement to one named
output parameter, with its own smoothing and curve settings.
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from handmap.types import ANY_HAND, NUM_HAND_LANDMARKS, Handedness, HandLandmark, HandSelector


class GestureType(str, Enum):
    """Supported gesture measurements."""
    PINCH_DISTANCE = "pinch_distance"    # Thumb tip to a selected fingertip
    FINGER_CURL = "finger_curl"
    HAND_OPENNESS = "hand_openness"
    HAND_ROTATION = "hand_rotation"
    WRIST_POSITION_X = "wrist_position_x"
    WRIST_POSITION_Y = "wrist_position_y"
    WRIST_DEPTH = "wrist_depth"
    FINGER_SPREAD = "finger_spread"
    PALM_FACING = "palm_facing"
    VELOCITY_X = "velocity_x"
    VELOCITY_Y = "velocity_y"
    EXTERNAL = "external"                # Scalar supplied by the caller each frame

    @property
    def needs_hand(self) -> bool:
        return self is not GestureType.EXTERNAL

    @property
    def is_velocity(self) -> bool:
        return self in (GestureType.VELOCITY_X, GestureType.VELOCITY_Y)


class MappingCurve(str, Enum):
    """Curves for non-linear transformation of the normalized input."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    LOGARITHMIC = "logarithmic"
    EASE_IN = "ease-in"
    EASE_OUT = "ease-out"
    EASE_IN_OUT = "ease-in-out"
    SMOOTH_STEP = "smooth-step"


class FilterType(str, Enum):
    """Available smoothing filter types."""
    NONE = "none"
    LOW_PASS = "low-pass"
    EXPONENTIAL = "exponential"
    MOVING_AVERAGE = "moving-average"
    ONE_EURO = "one-euro"


def _coerce_hand(hand: HandSelector) -> HandSelector:
    if isinstance(hand, Handedness) or hand == ANY_HAND:
        return hand
    return Handedness(hand)


@dataclass
class GestureInput:
    """Which gesture to measure and how to normalize it."""

    type: GestureType
    hand: HandSelector = ANY_HAND
    finger: int = HandLandmark.INDEX_FINGER_TIP  # Fingertip for pinch / curl
    input_range: Tuple[float, float] = (0.0, 1.0)
    curve: MappingCurve = MappingCurve.LINEAR
    external_key: Optional[str] = None

    def __post_init__(self):
        self.type = GestureType(self.type)
        self.curve = MappingCurve(self.curve)
        self.hand = _coerce_hand(self.hand)
        self.finger = int(self.finger)
        if not 0 <= self.finger < NUM_HAND_LANDMARKS:
            raise ValueError(f"Landmark index out of range: {self.finger}")
        self.input_range = (float(self.input_range[0]), float(self.input_range[1]))
        if self.type is GestureType.EXTERNAL and not self.external_key:
            raise ValueError("External gesture input requires an external_key")


@dataclass
class ParameterOutput:
    """Where the mapped value goes."""

    target_id: str
    parameter_name: str
    output_range: Tuple[float, float] = (0.0, 1.0)
    invert: bool = False

    def __post_init__(self):
        self.output_range = (float(self.output_range[0]), float(self.output_range[1]))


@dataclass
class SmoothingConfig:
    """
    Smoothing filter selection.

    Unset parameters fall back to the filter's own defaults.
    """

    type: FilterType = FilterType.ONE_EURO

    # Low-pass: higher = more smoothing
    factor: Optional[float] = None
    # Exponential: lower = more smoothing
    alpha: Optional[float] = None

    # One-Euro
    min_cutoff: Optional[float] = None
    beta: Optional[float] = None
    d_cutoff: Optional[float] = None

    # Moving average
    window_size: Optional[int] = None

    def __post_init__(self):
        self.type = FilterType(self.type)


DEFAULT_SMOOTHING = SmoothingConfig(
    type=FilterType.ONE_EURO,
    min_cutoff=1.0,
    beta=0.007,
    d_cutoff=1.0,
)


@dataclass
class GestureMapping:
    """Complete gesture-to-parameter mapping definition."""

    id: str
    name: str
    input: GestureInput
    output: ParameterOutput
    smoothing: SmoothingConfig = field(default_factory=lambda: copy.copy(DEFAULT_SMOOTHING))
    enabled: bool = True


@dataclass
class MappingState:
    """Runtime values of a mapping."""

    raw_value: float = 0.0
    smoothed_value: float = 0.0
    output_value: float = 0.0
    last_update: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "raw_value": float(self.raw_value),
            "smoothed_value": float(self.smoothed_value),
            "output_value": float(self.output_value),
            "last_update": float(self.last_update),
        }


def create_mapping(
    mapping_id: str,
    name: str,
    input: GestureInput,
    output: ParameterOutput,
    smoothing: Optional[SmoothingConfig] = None,
) -> GestureMapping:
    """
    Create an enabled mapping.

    Args:
        mapping_id: Unique identifier
        name: Human-readable name
        input: Gesture input configuration
        output: Parameter output configuration
        smoothing: Smoothing configuration (defaults to One-Euro)

    Returns:
        New GestureMapping
    """
    return GestureMapping(
        id=mapping_id,
        name=name,
        input=input,
        output=output,
        smoothing=copy.copy(smoothing) if smoothing is not None else copy.copy(DEFAULT_SMOOTHING),
        enabled=True,
    )


def clone_mapping(
    mapping: GestureMapping, new_id: str, new_name: Optional[str] = None
) -> GestureMapping:
    """Copy a mapping under a new id."""
    clone = copy.deepcopy(mapping)
    clone.id = new_id
    clone.name = new_name if new_name is not None else f"{mapping.name} (Copy)"
    return clone
