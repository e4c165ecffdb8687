"""
Base class for single-channel temporal filters.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence


class TemporalFilter(ABC):
    """Abstract base class for scalar temporal filters."""

    @abstractmethod
    def filter(self, value: float, timestamp: Optional[float] = None) -> float:
        """
        Apply filter to a single value.

        Args:
            value: Input value
            timestamp: Optional timestamp in seconds for time-aware filtering

        Returns:
            Filtered value
        """
        pass

    @abstractmethod
    def reset(self):
        """Reset the filter state."""
        pass

    def filter_batch(
        self,
        values: Sequence[float],
        timestamps: Optional[Sequence[float]] = None,
    ) -> List[float]:
        """Reset, then filter a sequence of values in order."""
        self.reset()
        result = []

        for i, value in enumerate(values):
            t = timestamps[i] if timestamps is not None else None
            result.append(self.filter(value, t))

        return result
