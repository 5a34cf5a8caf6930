"""
Temporal filtering of the tracked hand point.
"""
from collections import deque
from typing import Iterator, NamedTuple, Optional, Tuple


class ExponentialSmoother:
    def __init__(self, alpha: float = 0.3, x0: float = 0.5, y0: float = 0.5):
        """
        Initialize the exponential smoother.

        Args:
            alpha: Weight of the new sample (0-1). Higher = less lag, more jitter.
            x0: Initial x, defaults to screen centre
            y0: Initial y, defaults to screen centre
        """
        self.alpha = alpha
        self.x_prev = float(x0)
        self.y_prev = float(y0)

    @property
    def value(self) -> Tuple[float, float]:
        return (self.x_prev, self.y_prev)

    def reset(self, x: float, y: float) -> Tuple[float, float]:
        """Snap the filter to a raw sample (no lag on (re)acquisition)."""
        self.x_prev = float(x)
        self.y_prev = float(y)
        return self.value

    def __call__(self, x: float, y: float) -> Tuple[float, float]:
        """
        Filter the signal.

        Args:
            x: Raw x
            y: Raw y

        Returns:
            Filtered (x, y)
        """
        a = self.alpha
        self.x_prev = self.x_prev * (1 - a) + x * a
        self.y_prev = self.y_prev * (1 - a) + y * a
        return self.value


class MotionSample(NamedTuple):
    x: float
    y: float
    timestamp: float  # ms


class MotionHistory:
    """
    Sliding window of the most recent smoothed samples, oldest evicted first.
    Timestamps never decrease inside the window.
    """

    def __init__(self, maxlen: int = 10):
        self._samples = deque(maxlen=maxlen)

    def append(self, x: float, y: float, timestamp: float) -> MotionSample:
        if self._samples and timestamp < self._samples[-1].timestamp:
            timestamp = self._samples[-1].timestamp
        sample = MotionSample(x, y, timestamp)
        self._samples.append(sample)
        return sample

    def clear(self) -> None:
        self._samples.clear()

    @property
    def oldest(self) -> Optional[MotionSample]:
        return self._samples[0] if self._samples else None

    @property
    def newest(self) -> Optional[MotionSample]:
        return self._samples[-1] if self._samples else None

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[MotionSample]:
        return iter(self._samples)
