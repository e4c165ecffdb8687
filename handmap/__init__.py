"""
Gesture-to-Signal Mapping Engine

Turns noisy per-frame hand landmark observations into smoothed,
curve-shaped control values for named target parameters.

Features:
- Scalar gesture extraction from 21-point hand landmarks
- Adaptive One-Euro smoothing plus low-pass, exponential and moving-average filters
- Non-linear curve shaping and output range remapping
- Per-frame orchestration of independent mapping definitions
- Built-in mapping presets

License: MIT
"""

__version__ = "1.0.0"
__author__ = "handmap Contributors"
__license__ = "MIT"

from handmap.config import MapperConfig
from handmap.core.mapper import GestureMapper
from handmap.core.mapping import (
    GestureMapping,
    GestureInput,
    ParameterOutput,
    SmoothingConfig,
    MappingState,
    create_mapping,
)
from handmap.types import FrameObservation, HandObservation, Landmark

__all__ = [
    "__version__",
    "MapperConfig",
    "GestureMapper",
    "GestureMapping",
    "GestureInput",
    "ParameterOutput",
    "SmoothingConfig",
    "MappingState",
    "create_mapping",
    "FrameObservation",
    "HandObservation",
    "Landmark",
]
