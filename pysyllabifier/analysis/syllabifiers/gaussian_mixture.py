"""
Gaussian mixture (EM) syllabifier.

Fits a mixture of Gaussians over time to the energy of an intensity contour,
then cuts the timeline where neighbouring components cross.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np

from pysyllabifier.analysis.constants import (
    GMM_CONVERGENCE_TOLERANCE,
    GMM_MAX_ITERATIONS,
    GMM_OVERLAP_RATIO,
    GMM_SEED_STD,
    GMM_SEED_STEP,
    GMM_SILENCE_RATIO,
)
from pysyllabifier.analysis.gmm import (
    energy_from_intensity,
    fit_components,
    initialize_components,
    mark_silence,
    prune_overlapping,
    regions_from_components,
)
from pysyllabifier.analysis.intensity import IntensityExtractor
from pysyllabifier.analysis.syllabifiers.base import Syllabifier

if TYPE_CHECKING:
    from pysyllabifier.analysis.contour import Contour
    from pysyllabifier.analysis.regions import Region
    from pysyllabifier.audio import Waveform


class GaussianMixtureSyllabifier(Syllabifier):
    """
    Energy-weighted EM segmentation.

    Args:
        intensity_extractor: Callable returning an intensity contour (dB) for a
            waveform. Defaults to :class:`IntensityExtractor`.
        step: Spacing of the seed components in seconds
        seed_std: Initial standard deviation of every seed
        tolerance: Log-likelihood change that counts as converged
        max_iterations: Upper bound on EM iterations
        overlap_ratio: Fraction of a standard deviation within which an
            intersection makes two neighbours overlap
        silence_ratio: Fraction of the largest mass at or below which a
            component is considered silence
    """

    name = "em"

    def __init__(
        self,
        intensity_extractor: Callable[[Waveform], Contour] | None = None,
        step: float = GMM_SEED_STEP,
        seed_std: float = GMM_SEED_STD,
        tolerance: float = GMM_CONVERGENCE_TOLERANCE,
        max_iterations: int = GMM_MAX_ITERATIONS,
        overlap_ratio: float = GMM_OVERLAP_RATIO,
        silence_ratio: float = GMM_SILENCE_RATIO,
    ) -> None:
        self.intensity_extractor = intensity_extractor or IntensityExtractor()
        self.step = step
        self.seed_std = seed_std
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.overlap_ratio = overlap_ratio
        self.silence_ratio = silence_ratio

    def generate(self, waveform: Waveform) -> list[Region]:
        start_time = time.perf_counter()
        duration = waveform.duration

        contour = self.intensity_extractor(waveform.select_channel(0))
        regions = self.segment_contour(contour, duration)

        logging.info(
            f"EM segmentation found {len(regions)} regions in {time.perf_counter() - start_time:.3f}s"
        )
        return regions

    def segment_contour(self, contour: Contour, duration: float) -> list[Region]:
        """Segment an intensity contour spanning ``[0, duration]`` seconds."""
        times = contour.times()
        energy = energy_from_intensity(contour.values())

        components = initialize_components(duration, step=self.step, std=self.seed_std)
        if not components or times.size == 0 or np.sum(energy) <= 0:
            logging.debug("Not enough audio or energy to fit a mixture")
            return []

        iterations = fit_components(
            components,
            times,
            energy,
            tolerance=self.tolerance,
            max_iterations=self.max_iterations,
        )
        seeded = len(components)

        components = prune_overlapping(components, ratio=self.overlap_ratio)
        mark_silence(components, ratio=self.silence_ratio)
        logging.debug(
            f"EM: {iterations} iterations, {seeded} seeds, {len(components)} after pruning, "
            f"{sum(c.is_silence for c in components)} silent"
        )

        return regions_from_components(components, duration)
