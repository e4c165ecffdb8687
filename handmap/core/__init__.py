"""
Core gesture mapping components.

Contains the per-frame processing chain:
- Gesture value extraction from landmarks
- Curve shaping and range remapping
- Mapping registry and orchestration
"""

from handmap.core.mapping import (
    GestureType,
    MappingCurve,
    FilterType,
    GestureInput,
    ParameterOutput,
    SmoothingConfig,
    GestureMapping,
    MappingState,
    create_mapping,
    clone_mapping,
)
from handmap.core.geometry import extract_gesture_value
from handmap.core.curves import apply_curve, apply_mapping, normalize
from handmap.core.mapper import GestureMapper

__all__ = [
    "GestureType",
    "MappingCurve",
    "FilterType",
    "GestureInput",
    "ParameterOutput",
    "SmoothingConfig",
    "GestureMapping",
    "MappingState",
    "create_mapping",
    "clone_mapping",
    "extract_gesture_value",
    "apply_curve",
    "apply_mapping",
    "normalize",
    "GestureMapper",
]
