"""Regularly sampled time series with optional empty samples."""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np


class Contour:
    """
    Values on the grid ``start + i * step``.

    Any sample may be empty (e.g. an unvoiced frame). Iteration yields
    ``(time, value)`` pairs for the non-empty samples only.
    """

    __slots__ = ("start", "step", "_values", "_empty")

    def __init__(
        self,
        start: float,
        step: float,
        values: np.ndarray | list[float] | None = None,
        size: int = 0,
    ) -> None:
        if step <= 0:
            raise ValueError(f"Contour step must be positive, got {step}")
        self.start = float(start)
        self.step = float(step)
        if values is None:
            self._values = np.zeros(size, dtype=np.float64)
            self._empty = np.ones(size, dtype=bool)
        else:
            self._values = np.array(values, dtype=np.float64)
            self._empty = np.isnan(self._values)

    def __len__(self) -> int:
        return self._values.size

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for i in np.flatnonzero(~self._empty):
            yield self.time_from_index(int(i)), float(self._values[i])

    def __repr__(self) -> str:
        return (
            f"Contour(start={self.start}, step={self.step}, "
            f"size={len(self)}, content_size={self.content_size})"
        )

    @property
    def content_size(self) -> int:
        """Number of non-empty samples."""
        return int(np.count_nonzero(~self._empty))

    @property
    def duration(self) -> float:
        return len(self) * self.step

    def index_from_time(self, time: float) -> int:
        return int(round((time - self.start) / self.step))

    def time_from_index(self, index: int) -> float:
        return self.start + index * self.step

    def get(self, index: int) -> float:
        """Value at ``index``; NaN when the sample is empty or out of range."""
        if not 0 <= index < len(self) or self._empty[index]:
            return float("nan")
        return float(self._values[index])

    def set(self, index: int, value: float) -> None:
        self._values[index] = value
        self._empty[index] = bool(np.isnan(value))

    def set_empty(self, index: int) -> None:
        self._empty[index] = True

    def is_empty(self, index: int) -> bool:
        return bool(self._empty[index])

    def times(self) -> np.ndarray:
        """Times of the non-empty samples."""
        return self.start + np.flatnonzero(~self._empty) * self.step

    def values(self) -> np.ndarray:
        """Values of the non-empty samples."""
        return self._values[~self._empty].copy()
