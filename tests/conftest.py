"""
Shared fixtures: synthetic hands and frames.
"""

import pytest

from handmap.types import FrameObservation, HandObservation, Handedness, Landmark

# Upright open hand, fingers straight and parallel, palm facing away
BASE_HAND = [
    (0.50, 0.80, 0.0),   # wrist
    (0.44, 0.76, 0.0),   # thumb
    (0.40, 0.72, 0.0),
    (0.37, 0.68, 0.0),
    (0.35, 0.64, 0.0),
    (0.45, 0.60, 0.0),   # index
    (0.45, 0.52, 0.0),
    (0.45, 0.47, 0.0),
    (0.45, 0.42, 0.0),
    (0.50, 0.59, 0.0),   # middle
    (0.50, 0.51, 0.0),
    (0.50, 0.46, 0.0),
    (0.50, 0.40, 0.0),
    (0.55, 0.60, 0.0),   # ring
    (0.55, 0.52, 0.0),
    (0.55, 0.47, 0.0),
    (0.55, 0.42, 0.0),
    (0.60, 0.62, 0.0),   # pinky
    (0.60, 0.56, 0.0),
    (0.60, 0.52, 0.0),
    (0.60, 0.48, 0.0),
]


def build_hand(handedness=Handedness.RIGHT, overrides=None, shift=(0.0, 0.0, 0.0), confidence=0.9):
    points = [list(p) for p in BASE_HAND]
    for index, point in (overrides or {}).items():
        points[index] = list(point)
    landmarks = [
        Landmark(p[0] + shift[0], p[1] + shift[1], p[2] + shift[2]) for p in points
    ]
    return HandObservation(landmarks=landmarks, handedness=handedness, confidence=confidence)


@pytest.fixture
def make_hand():
    """Factory for HandObservation built from BASE_HAND."""
    return build_hand


@pytest.fixture
def make_frame():
    """Factory for FrameObservation."""

    def _make(timestamp, *hands, external_values=None):
        return FrameObservation(
            hands=list(hands),
            timestamp=timestamp,
            frame_width=640,
            frame_height=480,
            external_values=external_values or {},
        )

    return _make


@pytest.fixture
def landmarks(make_hand):
    """21x3 array of the base hand."""
    return make_hand().as_array()
