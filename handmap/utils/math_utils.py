"""
Mathematical utilities for gesture values.

Provides functions for:
- Clamping and interpolation
- Range remapping
- Vector angles
- Easing steps
"""

import numpy as np


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp a value between min and max."""
    return float(max(min_value, min(max_value, value)))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between two values."""
    return a + (b - a) * t


def map_range(
    value: float,
    in_min: float,
    in_max: float,
    out_min: float,
    out_max: float,
) -> float:
    """
    Map a value from one range to another without clamping.

    Args:
        value: Input value
        in_min: Input range start
        in_max: Input range end
        out_min: Output range start
        out_max: Output range end

    Returns:
        Remapped value (0-width input ranges map to out_min)
    """
    span = in_max - in_min
    if span == 0:
        return out_min
    return out_min + (value - in_min) / span * (out_max - out_min)


def angle_between_vectors(v1: np.ndarray, v2: np.ndarray) -> float:
    """
    Calculate angle between two vectors in radians.

    Args:
        v1: First vector
        v2: Second vector

    Returns:
        Angle in radians, or 0.0 if either vector has zero length
    """
    norm1 = np.linalg.norm(v1)
    norm2 = np.linalg.norm(v2)
    if norm1 == 0 or norm2 == 0:
        return 0.0

    cos_angle = np.clip(np.dot(v1, v2) / (norm1 * norm2), -1.0, 1.0)
    return float(np.arccos(cos_angle))


def smooth_step(edge0: float, edge1: float, x: float) -> float:
    """Hermite smooth step between two edges."""
    t = clamp(map_range(x, edge0, edge1, 0.0, 1.0), 0.0, 1.0)
    return t * t * (3 - 2 * t)
