"""
Gesture mapping presets.

Pre-configured mappings for common controls. Every accessor returns fresh
copies, so callers may customize them freely.
"""

import copy
from typing import Dict, List

import numpy as np

from handmap.core.mapping import (
    FilterType,
    GestureInput,
    GestureMapping,
    GestureType,
    MappingCurve,
    ParameterOutput,
    SmoothingConfig,
    create_mapping,
)
from handmap.types import ANY_HAND, Handedness, HandLandmark


def _one_euro(min_cutoff: float, beta: float) -> SmoothingConfig:
    return SmoothingConfig(type=FilterType.ONE_EURO, min_cutoff=min_cutoff, beta=beta, d_cutoff=1.0)


# Pinching closes the filter (darker), opening brightens it
PINCH_TO_FILTER_CUTOFF = create_mapping(
    "pinch-filter-cutoff",
    "Pinch → Filter Cutoff",
    GestureInput(
        type=GestureType.PINCH_DISTANCE,
        hand=Handedness.RIGHT,
        finger=HandLandmark.INDEX_FINGER_TIP,
        input_range=(0.02, 0.15),
        curve=MappingCurve.SMOOTH_STEP,
    ),
    ParameterOutput(target_id="filter", parameter_name="cutoff", output_range=(0.1, 1.0)),
    _one_euro(1.5, 0.01),
)

# Image y grows downward, so a raised hand means a smaller y
WRIST_Y_TO_VOLUME = create_mapping(
    "wrist-y-volume",
    "Hand Height → Volume",
    GestureInput(
        type=GestureType.WRIST_POSITION_Y,
        hand=ANY_HAND,
        input_range=(0.2, 0.8),
        curve=MappingCurve.LINEAR,
    ),
    ParameterOutput(target_id="master", parameter_name="gain", output_range=(0.0, 1.0), invert=True),
    _one_euro(0.5, 0.005),
)

DEPTH_TO_DELAY = create_mapping(
    "depth-delay-mix",
    "Hand Depth → Delay Mix",
    GestureInput(
        type=GestureType.WRIST_DEPTH,
        hand=Handedness.RIGHT,
        input_range=(-0.1, 0.1),
        curve=MappingCurve.SMOOTH_STEP,
    ),
    ParameterOutput(target_id="delay", parameter_name="mix", output_range=(0.0, 0.8)),
    _one_euro(1.0, 0.008),
)

# ±60 degrees of roll
ROTATION_TO_PAN = create_mapping(
    "rotation-pan",
    "Hand Rotation → Pan",
    GestureInput(
        type=GestureType.HAND_ROTATION,
        hand=Handedness.RIGHT,
        input_range=(-np.pi / 3, np.pi / 3),
        curve=MappingCurve.LINEAR,
    ),
    ParameterOutput(target_id="synth", parameter_name="pan", output_range=(0.0, 1.0)),
    _one_euro(2.0, 0.015),
)

OPENNESS_TO_RESONANCE = create_mapping(
    "openness-resonance",
    "Hand Open → Resonance",
    GestureInput(
        type=GestureType.HAND_OPENNESS,
        hand=Handedness.LEFT,
        input_range=(0.1, 0.4),
        curve=MappingCurve.EXPONENTIAL,
    ),
    ParameterOutput(target_id="filter", parameter_name="resonance", output_range=(0.0, 0.9)),
    _one_euro(1.0, 0.01),
)

FINGER_CURL_TO_ATTACK = create_mapping(
    "curl-attack",
    "Index Curl → Attack",
    GestureInput(
        type=GestureType.FINGER_CURL,
        hand=Handedness.LEFT,
        finger=HandLandmark.INDEX_FINGER_TIP,
        input_range=(0.2, 0.8),
        curve=MappingCurve.SMOOTH_STEP,
    ),
    ParameterOutput(target_id="synth", parameter_name="attack", output_range=(0.01, 0.5)),
    _one_euro(0.8, 0.005),
)

WRIST_X_TO_DETUNE = create_mapping(
    "wrist-x-detune",
    "Hand X → Detune",
    GestureInput(
        type=GestureType.WRIST_POSITION_X,
        hand=Handedness.RIGHT,
        input_range=(0.2, 0.8),
        curve=MappingCurve.LINEAR,
    ),
    ParameterOutput(target_id="synth", parameter_name="detune", output_range=(-50.0, 50.0)),
    _one_euro(2.0, 0.02),
)

PINKY_PINCH_TO_FEEDBACK = create_mapping(
    "pinky-pinch-feedback",
    "Thumb-Pinky → Delay Feedback",
    GestureInput(
        type=GestureType.PINCH_DISTANCE,
        hand=Handedness.LEFT,
        finger=HandLandmark.PINKY_TIP,
        input_range=(0.03, 0.2),
        curve=MappingCurve.SMOOTH_STEP,
    ),
    ParameterOutput(target_id="delay", parameter_name="feedback", output_range=(0.1, 0.85)),
    _one_euro(1.0, 0.008),
)

_ALL_PRESETS = [
    PINCH_TO_FILTER_CUTOFF,
    WRIST_Y_TO_VOLUME,
    DEPTH_TO_DELAY,
    ROTATION_TO_PAN,
    OPENNESS_TO_RESONANCE,
    FINGER_CURL_TO_ATTACK,
    WRIST_X_TO_DETUNE,
    PINKY_PINCH_TO_FEEDBACK,
]

_PRESETS_BY_ID: Dict[str, GestureMapping] = {p.id: p for p in _ALL_PRESETS}

PRESET_IDS = tuple(_PRESETS_BY_ID)


def get_all_presets() -> List[GestureMapping]:
    """Get copies of every preset mapping."""
    return [copy.deepcopy(p) for p in _ALL_PRESETS]


def get_starter_presets() -> List[GestureMapping]:
    """Get the most intuitive presets."""
    return [
        copy.deepcopy(p)
        for p in (PINCH_TO_FILTER_CUTOFF, WRIST_Y_TO_VOLUME, DEPTH_TO_DELAY)
    ]


def get_preset(preset_id: str) -> GestureMapping:
    """Get a copy of one preset by id."""
    if preset_id not in _PRESETS_BY_ID:
        raise KeyError(f"Unknown preset: {preset_id}")
    return copy.deepcopy(_PRESETS_BY_ID[preset_id])
