"""Temporal filtering modules."""

from handmap.filters.base import TemporalFilter
from handmap.filters.one_euro import OneEuroFilter
from handmap.filters.smoothing import (
    PassthroughFilter,
    LowPassFilter,
    ExponentialFilter,
    MovingAverageFilter,
    create_filter,
)

__all__ = [
    "TemporalFilter",
    "OneEuroFilter",
    "PassthroughFilter",
    "LowPassFilter",
    "ExponentialFilter",
    "MovingAverageFilter",
    "create_filter",
]
