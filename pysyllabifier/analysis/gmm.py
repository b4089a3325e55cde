"""
One-dimensional Gaussian mixture over time, fitted by Expectation-Maximization.

The data are the sample times of an energy contour; each time point is weighted
by its energy, so components settle on energy bumps (syllable nuclei).

Pipeline used by the EM segmenter:
1. initialize_components  - one seed per fixed time step
2. fit_components         - EM until the log-likelihood stabilises
3. prune_overlapping      - drop the lighter of any two overlapping neighbours
4. mark_silence           - flag components carrying negligible mass
5. regions_from_components - cut the timeline at neighbour intersections
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from itertools import pairwise

import numpy as np

from pysyllabifier.analysis.constants import (
    ENERGY_DB_FLOOR,
    ENERGY_DB_SCALE,
    ENERGY_EXPONENT,
    GMM_CONVERGENCE_TOLERANCE,
    GMM_MAX_ITERATIONS,
    GMM_OVERLAP_RATIO,
    GMM_SEED_STD,
    GMM_SEED_STEP,
    GMM_SILENCE_RATIO,
)
from pysyllabifier.analysis.regions import Region

_TINY = np.finfo(np.float64).tiny


@dataclass(slots=True)
class GMMComponent:
    """A single weighted Gaussian; ``n`` is its total (energy-weighted) responsibility."""

    mean: float
    variance: float
    weight: float
    n: float = 0.0
    is_silence: bool = False

    @property
    def std(self) -> float:
        return math.sqrt(self.variance)

    @property
    def mass(self) -> float:
        """Absolute mass: weight times total responsibility."""
        return self.weight * self.n

    def likelihood(self, x: float | np.ndarray) -> float | np.ndarray:
        """Gaussian pdf at ``x``; a zero-variance component explains nothing."""
        x = np.asarray(x, dtype=np.float64)
        if self.variance <= 0:
            result = np.zeros_like(x)
        else:
            result = np.exp(-((x - self.mean) ** 2) / (2 * self.variance)) / math.sqrt(
                2 * math.pi * self.variance
            )
        return float(result) if result.ndim == 0 else result


def energy_from_intensity(intensity_db: np.ndarray) -> np.ndarray:
    """(dB / 10) ** 10, with intensities below the floor treated as silence."""
    db = np.maximum(np.asarray(intensity_db, dtype=np.float64), ENERGY_DB_FLOOR)
    return (db / ENERGY_DB_SCALE) ** ENERGY_EXPONENT


def intersection(m1: GMMComponent, m2: GMMComponent, use_mass: bool = False) -> float:
    """
    Point between the two means where the weighted densities are equal.

    Weights are the mixture weights, or the absolute masses when ``use_mass``
    is set. Returns NaN when no such point exists strictly between the means.
    """
    w1, w2 = (m1.mass, m2.mass) if use_mass else (m1.weight, m2.weight)
    u1, v1, u2, v2 = m1.mean, m1.variance, m2.mean, m2.variance

    if w1 <= 0 or w2 <= 0 or v1 <= 0 or v2 <= 0:
        return math.nan

    if v1 == v2:
        if w1 == w2:
            return 0.5 * (u1 + u2)
        if u1 == u2:
            return math.nan
        return (2 * v1 * (math.log(w2) - math.log(w1)) + u1**2 - u2**2) / (2 * (u1 - u2))

    if u1 > u2:
        u1, v1, w1, u2, v2, w2 = u2, v2, w2, u1, v1, w1

    denom = v1 - v2
    a = (v2 * u1 - v1 * u2) / denom
    b = (
        2 * v1 * v2 * (math.log(w2 * math.sqrt(v1)) - math.log(w1 * math.sqrt(v2)))
        + v2 * u1**2
        - v1 * u2**2
    ) / denom

    discriminant = b + a * a
    if discriminant < 0:
        return math.nan

    root = math.sqrt(discriminant)
    for x in (root - a, -root - a):
        if u1 < x < u2:
            return x
    return math.nan


def is_overlapping(left: GMMComponent, right: GMMComponent, ratio: float = GMM_OVERLAP_RATIO) -> bool:
    """Neighbours overlap when their mass intersection is undefined or hugs a mean."""
    x = intersection(left, right, use_mass=True)
    return (
        math.isnan(x)
        or x < left.mean + ratio * left.std
        or x > right.mean - ratio * right.std
    )


def initialize_components(
    duration: float,
    step: float = GMM_SEED_STEP,
    std: float = GMM_SEED_STD,
) -> list[GMMComponent]:
    """One equally weighted seed centred in every full ``step`` of the timeline."""
    # Epsilon keeps e.g. 0.3 / 0.1 from flooring to 2
    count = int(math.floor(duration / step + 1e-9))
    if count < 1:
        return []
    return [
        GMMComponent(mean=(k + 0.5) * step, variance=std**2, weight=1.0 / count)
        for k in range(count)
    ]


def mixture_density(components: list[GMMComponent], times: np.ndarray) -> np.ndarray:
    density = np.zeros_like(times, dtype=np.float64)
    for component in components:
        density += component.likelihood(times) * component.weight
    return density


def log_likelihood(components: list[GMMComponent], times: np.ndarray, energy: np.ndarray) -> float:
    """Energy-weighted average log mixture density."""
    density = mixture_density(components, times)
    return float(np.sum(energy * np.log(np.maximum(density, _TINY))) / np.sum(energy))


def responsibilities(
    components: list[GMMComponent], times: np.ndarray, energy: np.ndarray
) -> np.ndarray:
    """E-step: (components x times) posterior share of each time, scaled by its energy."""
    weighted = np.array([c.likelihood(times) * c.weight for c in components])
    totals = weighted.sum(axis=0)
    tau = np.divide(weighted, totals, out=np.zeros_like(weighted), where=totals > 0)
    return tau * energy


def update_components(components: list[GMMComponent], times: np.ndarray, tau: np.ndarray) -> None:
    """M-step, in place. Weights sum to 1 afterwards."""
    n = tau.sum(axis=1)
    total = n.sum()
    for component, tau_k, n_k in zip(components, tau, n):
        if n_k > 0:
            mean = float(tau_k @ times / n_k)
            variance = float(tau_k @ (times - mean) ** 2 / n_k)
        else:
            mean = 0.0
            variance = 0.0
        component.mean = mean
        component.variance = variance
        component.n = float(n_k)
        component.weight = float(n_k / total) if total > 0 else 1.0 / len(components)


def fit_components(
    components: list[GMMComponent],
    times: np.ndarray,
    energy: np.ndarray,
    tolerance: float = GMM_CONVERGENCE_TOLERANCE,
    max_iterations: int = GMM_MAX_ITERATIONS,
) -> int:
    """Run EM in place; returns the number of iterations performed."""
    previous = log_likelihood(components, times, energy)
    for iteration in range(1, max_iterations + 1):
        tau = responsibilities(components, times, energy)
        update_components(components, times, tau)
        current = log_likelihood(components, times, energy)
        if abs(current - previous) < tolerance:
            logging.debug(f"EM converged after {iteration} iterations (log-likelihood {current:.5f})")
            return iteration
        previous = current

    logging.warning(f"EM did not converge within {max_iterations} iterations; using the last estimate")
    return max_iterations


def prune_overlapping(
    components: list[GMMComponent], ratio: float = GMM_OVERLAP_RATIO
) -> list[GMMComponent]:
    """
    Mean-ordered components with no overlapping neighbours.

    Whenever two neighbours overlap the lighter one (by mass; the left one on
    ties) is dropped and the survivor is compared with its new neighbour.
    """
    kept: list[GMMComponent] = []
    for component in sorted(components, key=lambda c: c.mean):
        while kept and is_overlapping(kept[-1], component, ratio):
            if kept[-1].mass > component.mass:
                break
            kept.pop()
        else:
            kept.append(component)
    return kept


def mark_silence(components: list[GMMComponent], ratio: float = GMM_SILENCE_RATIO) -> None:
    """Flag components whose mass is at or below ``ratio`` times the largest mass."""
    if not components:
        return
    threshold = ratio * max(c.mass for c in components)
    for component in components:
        component.is_silence = component.mass <= threshold


def regions_from_components(components: list[GMMComponent], duration: float) -> list[Region]:
    """
    Non-silent components become regions bounded by neighbour intersections.

    An undefined intersection falls back to the midpoint of the two means.
    """
    boundaries = [0.0]
    for left, right in pairwise(components):
        x = intersection(left, right)
        if math.isnan(x):
            x = 0.5 * (left.mean + right.mean)
            logging.debug(f"No intersection between {left.mean:.3f}s and {right.mean:.3f}s; using midpoint")
        boundaries.append(min(max(x, boundaries[-1]), duration))
    boundaries.append(max(duration, boundaries[-1]))

    return [
        Region(start, end)
        for component, start, end in zip(components, boundaries[:-1], boundaries[1:])
        if not component.is_silence and end > start
    ]
