"""
One-Euro filter for responsive low-latency smoothing.

Paper: "1€ Filter: A Simple Speed-based Low-pass Filter for Noisy Input
in Interactive Systems" (Casiez, Roussel, Vogel, CHI '12)
"""

from typing import Optional

import numpy as np

from handmap.filters.base import TemporalFilter

# Frame interval assumed before a second sample arrives
BOOTSTRAP_FPS = 60.0

MIN_DT = 1e-6

# Lowest accepted bootstrap frame rate
MIN_BOOTSTRAP_FPS = 1.0


def smoothing_factor(cutoff: float, dt: float) -> float:
    """Compute smoothing factor alpha from a cutoff frequency."""
    tau = 1.0 / (2 * np.pi * cutoff)
    return 1.0 / (1.0 + tau / dt)


class _LowPass:
    """Exponential smoother with externally set alpha."""

    def __init__(self, alpha: float):
        self.alpha = alpha
        self.y: Optional[float] = None

    def filter(self, x: float) -> float:
        if self.y is None:
            self.y = x
        else:
            self.y = self.alpha * x + (1 - self.alpha) * self.y
        return self.y

    def reset(self):
        self.y = None


class OneEuroFilter(TemporalFilter):
    """
    One-Euro filter adapts smoothing based on signal velocity.

    More smoothing when static, less when moving fast for responsiveness.

    Attributes:
        min_cutoff: Minimum cutoff frequency (lower = more smoothing at rest)
        beta: Speed coefficient (higher = less lag during fast movement)
        d_cutoff: Cutoff frequency for derivative smoothing
    """

    def __init__(
        self,
        min_cutoff: float = 1.0,
        beta: float = 0.007,
        d_cutoff: float = 1.0,
        bootstrap_fps: float = BOOTSTRAP_FPS,
    ):
        self.min_cutoff = max(min_cutoff, MIN_DT)
        self.beta = max(beta, 0.0)
        self.d_cutoff = max(d_cutoff, MIN_DT)
        self.bootstrap_dt = 1.0 / max(bootstrap_fps, MIN_BOOTSTRAP_FPS)

        self._x_filter = _LowPass(smoothing_factor(self.min_cutoff, self.bootstrap_dt))
        self._dx_filter = _LowPass(smoothing_factor(self.d_cutoff, self.bootstrap_dt))
        self._last_time: Optional[float] = None
        self._last_value: Optional[float] = None

    def filter(self, value: float, timestamp: Optional[float] = None) -> float:
        """Apply One-Euro filter to a value."""
        if self._last_time is None or self._last_value is None:
            # First call - no filtering
            self._last_time = timestamp if timestamp is not None else 0.0
            self._last_value = value
            self._x_filter.alpha = smoothing_factor(self.min_cutoff, self.bootstrap_dt)
            return self._x_filter.filter(value)

        now = timestamp if timestamp is not None else self._last_time + self.bootstrap_dt
        dt = max(now - self._last_time, MIN_DT)
        self._last_time = now

        # Derivative of the raw signal
        dx = (value - self._last_value) / dt
        self._last_value = value

        self._dx_filter.alpha = smoothing_factor(self.d_cutoff, dt)
        dx_smoothed = self._dx_filter.filter(dx)

        # Cutoff rises with speed
        cutoff = self.min_cutoff + self.beta * abs(dx_smoothed)

        self._x_filter.alpha = smoothing_factor(cutoff, dt)
        return self._x_filter.filter(value)

    def reset(self):
        """Reset filter state."""
        self._x_filter.reset()
        self._dx_filter.reset()
        self._last_time = None
        self._last_value = None

    def update_params(
        self,
        min_cutoff: Optional[float] = None,
        beta: Optional[float] = None,
        d_cutoff: Optional[float] = None,
    ):
        """Change tuning without discarding filter state."""
        if min_cutoff is not None:
            self.min_cutoff = max(min_cutoff, MIN_DT)
        if beta is not None:
            self.beta = max(beta, 0.0)
        if d_cutoff is not None:
            self.d_cutoff = max(d_cutoff, MIN_DT)
