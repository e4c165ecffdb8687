"""Utility modules for handmap."""

from handmap.utils.math_utils import (
    clamp,
    lerp,
    map_range,
    angle_between_vectors,
    smooth_step,
)

__all__ = [
    "clamp",
    "lerp",
    "map_range",
    "angle_between_vectors",
    "smooth_step",
]
