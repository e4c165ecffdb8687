"""
Basic smoothing filters and the filter factory.

Provides:
- Pass-through (no smoothing)
- Low-pass filter
- Exponential smoothing
- Moving average
"""

from collections import deque
from typing import Optional

import numpy as np

from handmap.core.mapping import FilterType, SmoothingConfig
from handmap.filters.base import TemporalFilter
from handmap.filters.one_euro import BOOTSTRAP_FPS, OneEuroFilter


class PassthroughFilter(TemporalFilter):
    """Returns every input unchanged."""

    def filter(self, value: float, timestamp: Optional[float] = None) -> float:
        return value

    def reset(self):
        pass


class LowPassFilter(TemporalFilter):
    """
    Simple low-pass filter.

    Attributes:
        factor: Smoothing factor (0-1, higher = more smoothing and more lag)
    """

    def __init__(self, factor: float = 0.5):
        self.factor = float(np.clip(factor, 0.0, 1.0))
        self._value: Optional[float] = None

    def filter(self, value: float, timestamp: Optional[float] = None) -> float:
        """Apply low-pass smoothing."""
        if self._value is None:
            self._value = value
        else:
            self._value = self._value * self.factor + value * (1 - self.factor)
        return self._value

    def reset(self):
        """Reset filter state."""
        self._value = None

    def set_factor(self, factor: float):
        self.factor = float(np.clip(factor, 0.0, 1.0))

    @property
    def current_value(self) -> Optional[float]:
        return self._value


class ExponentialFilter(TemporalFilter):
    """
    Simple exponential smoothing filter.

    Attributes:
        alpha: Smoothing factor (0.01-1, lower = more smoothing)
    """

    def __init__(self, alpha: float = 0.3):
        self.alpha = float(np.clip(alpha, 0.01, 1.0))
        self._x_prev: Optional[float] = None

    def filter(self, value: float, timestamp: Optional[float] = None) -> float:
        """Apply exponential smoothing."""
        if self._x_prev is None:
            self._x_prev = value
            return value

        result = self.alpha * value + (1 - self.alpha) * self._x_prev
        self._x_prev = result
        return result

    def reset(self):
        """Reset filter state."""
        self._x_prev = None

    def set_alpha(self, alpha: float):
        self.alpha = float(np.clip(alpha, 0.01, 1.0))


class MovingAverageFilter(TemporalFilter):
    """Arithmetic mean of the last window_size inputs."""

    def __init__(self, window_size: int = 5):
        self.window_size = max(1, int(window_size))
        self._window: deque = deque()
        self._sum = 0.0

    def filter(self, value: float, timestamp: Optional[float] = None) -> float:
        self._window.append(value)
        self._sum += value

        if len(self._window) > self.window_size:
            self._sum -= self._window.popleft()

        return self._sum / len(self._window)

    def reset(self):
        self._window.clear()
        self._sum = 0.0

    def set_window_size(self, window_size: int):
        self.window_size = max(1, int(window_size))
        while len(self._window) > self.window_size:
            self._sum -= self._window.popleft()


def create_filter(
    config: SmoothingConfig, bootstrap_fps: float = BOOTSTRAP_FPS
) -> TemporalFilter:
    """
    Factory function to create a temporal filter.

    Args:
        config: Smoothing configuration; unset parameters use filter defaults
        bootstrap_fps: Frame rate the One-Euro filter assumes before its second sample

    Returns:
        Configured temporal filter instance
    """
    filter_type = FilterType(config.type)

    if filter_type is FilterType.LOW_PASS:
        return LowPassFilter(config.factor if config.factor is not None else 0.5)

    if filter_type is FilterType.EXPONENTIAL:
        return ExponentialFilter(config.alpha if config.alpha is not None else 0.3)

    if filter_type is FilterType.MOVING_AVERAGE:
        return MovingAverageFilter(config.window_size if config.window_size is not None else 5)

    if filter_type is FilterType.ONE_EURO:
        return OneEuroFilter(
            min_cutoff=config.min_cutoff if config.min_cutoff is not None else 1.0,
            beta=config.beta if config.beta is not None else 0.007,
            d_cutoff=config.d_cutoff if config.d_cutoff is not None else 1.0,
            bootstrap_fps=bootstrap_fps,
        )

    return PassthroughFilter()
