"""Time regions produced by the segmenters, plus helpers to build and filter them."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from pysyllabifier.analysis.constants import DEFAULT_MAX_DB_DROP

if TYPE_CHECKING:
    from pysyllabifier.analysis.contour import Contour


@dataclass(slots=True, frozen=True)
class Region:
    """Half-open interval ``[start, end)`` in seconds."""

    start: float
    end: float

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(f"Region end ({self.end}) precedes its start ({self.start})")

    @property
    def duration(self) -> float:
        return self.end - self.start


def regions_from_points(points: Sequence[float]) -> list[Region]:
    """Consecutive boundary points become regions: [p0, p1), [p1, p2), ..."""
    return [Region(float(a), float(b)) for a, b in zip(points[:-1], points[1:])]


def filter_regions_by_intensity(
    regions: list[Region],
    intensity: Contour,
    max_db_drop: float = DEFAULT_MAX_DB_DROP,
) -> list[Region]:
    """
    Keep regions whose peak intensity is within ``max_db_drop`` dB of the
    loudest region's peak.

    Regions that contain no intensity samples are dropped.
    """
    times = intensity.times()
    values = intensity.values()

    peaks = []
    for region in regions:
        mask = (times >= region.start) & (times < region.end)
        peaks.append(values[mask].max() if mask.any() else -np.inf)

    if not regions or np.all(np.isneginf(peaks)):
        return []

    threshold = max(peaks) - max_db_drop
    kept = [region for region, peak in zip(regions, peaks) if peak >= threshold and np.isfinite(peak)]
    logging.debug(f"Intensity filter kept {len(kept)}/{len(regions)} regions (threshold {threshold:.1f} dB)")
    return kept
