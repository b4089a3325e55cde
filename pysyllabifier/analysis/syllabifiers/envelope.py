"""
Envelope-based blind syllabifier (Villing, Timoney, Ward and Costello, 2004).

Architecture:
1. Band envelopes   - pre-emphasis + 150 Hz high-pass (mid band) and a further
                      1 kHz low-pass (narrow band), rectified and smoothed
                      with a zero-phase 12 Hz filter
2. Frame rate       - both envelopes decimated to 100 Hz and compressed
3. Onset runs       - maximal runs of positive mid-band velocity
4. Scoring          - boundary, strength and velocity scores per run,
                      with nearby weaker runs suppressed
5. Regions          - run starts become boundaries; quiet regions are dropped
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import numpy as np
from numba import njit

from pysyllabifier.analysis.constants import (
    BOUNDARY_SCORE_RANGE,
    ENVELOPE_COMPRESSION,
    ENVELOPE_FRAME_RATE,
    ENVELOPE_SILENCE_RATIO,
    STRENGTH_SCORE_RANGE,
    SUPPRESSION_INTERCEPT,
    SUPPRESSION_SLOPE,
    SUPPRESSION_WINDOW,
    VELOCITY_SCORE_RANGE,
)
from pysyllabifier.analysis.dsp import (
    apply_filter,
    compress,
    downsample,
    first_difference,
    half_wave_rectify,
    rectify,
    safe_divide,
    score_range,
    zero_phase_filter,
)
from pysyllabifier.analysis.filters import get_filter_bank
from pysyllabifier.analysis.regions import Region, regions_from_points
from pysyllabifier.analysis.syllabifiers.base import Syllabifier

if TYPE_CHECKING:
    from pysyllabifier.audio import Waveform


# ============================================================================
# NUMBA KERNELS
# ============================================================================


@njit(cache=True)
def identify_onsets(velocity: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Maximal runs of non-zero velocity as (starts, peaks, ends) index arrays.

    A run starts at the first non-zero sample and ends at the next zero sample.
    The peak is the largest sample after the start, up to and including the
    end. A run still open at the end of the array closes at its last index.
    """
    n = velocity.shape[0]
    starts = np.empty(n, dtype=np.int64)
    peaks = np.empty(n, dtype=np.int64)
    ends = np.empty(n, dtype=np.int64)
    count = 0

    in_run = False
    peak_value = -np.inf
    peak_idx = -1
    for i in range(n):
        if not in_run:
            if velocity[i] != 0.0:
                starts[count] = i
                in_run = True
        else:
            if velocity[i] > peak_value:
                peak_value = velocity[i]
                peak_idx = i
            if velocity[i] == 0.0:
                peaks[count] = peak_idx
                ends[count] = i
                count += 1
                in_run = False
                peak_value = -np.inf
                peak_idx = -1

    if in_run:
        peaks[count] = peak_idx if peak_idx != -1 else n - 1
        ends[count] = n - 1
        count += 1

    return starts[:count].copy(), peaks[:count].copy(), ends[:count].copy()


@njit(cache=True)
def suppress_nearby_peaks(
    scores: np.ndarray,
    peaks: np.ndarray,
    window: int,
    slope: float,
    intercept: float,
) -> np.ndarray:
    """
    Add ``score[j] * (slope * distance + intercept)`` for every run ``j`` whose
    peak is closer than ``window`` frames.

    Runs are visited in order and updated in place, so the backward neighbours
    of run ``i`` contribute their already suppressed scores.
    """
    vs = scores.copy()
    n = vs.shape[0]
    for i in range(n):
        score = vs[i]
        j = i + 1
        while j < n and peaks[j] - peaks[i] < window:
            score += vs[j] * (slope * (peaks[j] - peaks[i]) + intercept)
            j += 1
        j = i - 1
        while j >= 0 and peaks[i] - peaks[j] < window:
            score += vs[j] * (slope * (peaks[i] - peaks[j]) + intercept)
            j -= 1
        vs[i] = score
    return vs


# ============================================================================
# SYLLABIFIER
# ============================================================================


class EnvelopeSyllabifier(Syllabifier):
    """
    Blind segmentation from band-limited amplitude envelopes.

    The filter bank is designed for 16 kHz audio; other rates are processed
    with the same coefficients after a warning.
    """

    name = "envelope"

    def __init__(
        self,
        frame_rate: int = ENVELOPE_FRAME_RATE,
        compression: float = ENVELOPE_COMPRESSION,
        suppression_window: int = SUPPRESSION_WINDOW,
        silence_ratio: float = ENVELOPE_SILENCE_RATIO,
    ) -> None:
        self.frame_rate = frame_rate
        self.compression = compression
        self.suppression_window = suppression_window
        self.silence_ratio = silence_ratio

    def generate(self, waveform: Waveform) -> list[Region]:
        start_time = time.perf_counter()

        bank = get_filter_bank(waveform.rate)
        signal = waveform.channel(0)
        duration = waveform.duration
        factor = int(waveform.rate / self.frame_rate)
        if signal.size <= bank.max_order or duration <= 0 or factor < 1:
            logging.debug("Not enough audio to compute band envelopes")
            return []

        mid_band = apply_filter(bank.high_pass, apply_filter(bank.yule_walker, signal))
        narrow_band = apply_filter(bank.low_pass, mid_band)

        mid_env = self._envelope(mid_band, bank.smoothing, factor)
        narrow_env = self._envelope(narrow_band, bank.smoothing, factor)
        normalized_env = safe_divide(narrow_env, mid_env)

        velocity = half_wave_rectify(first_difference(mid_env))
        starts, peaks, ends = identify_onsets(velocity)
        logging.debug(f"Found {starts.size} onset runs")

        boundary_scores = score_range(velocity[peaks], *BOUNDARY_SCORE_RANGE)
        strength_scores = score_range(normalized_env[ends], *STRENGTH_SCORE_RANGE)
        velocity_scores = score_range(velocity[peaks], *VELOCITY_SCORE_RANGE)
        combined = suppress_nearby_peaks(
            strength_scores * velocity_scores,
            peaks,
            self.suppression_window,
            SUPPRESSION_SLOPE,
            SUPPRESSION_INTERCEPT,
        )

        # Integer decimation gives rate / factor frames per second, not frame_rate
        frame_period = factor / waveform.rate
        selected = (boundary_scores > 0) & (combined > 0)
        boundaries = [float(s) * frame_period for s in starts[selected] if s * frame_period < duration]
        boundaries.append(duration)
        logging.debug(f"Selected {len(boundaries) - 1} boundaries")

        regions = self._drop_silence(regions_from_points(boundaries), mid_env, frame_period)

        logging.info(
            f"Envelope segmentation found {len(regions)} regions in {time.perf_counter() - start_time:.3f}s"
        )
        return regions

    def _envelope(self, band: np.ndarray, smoothing, factor: int) -> np.ndarray:
        smoothed = zero_phase_filter(smoothing, rectify(band))
        # Fractional powers of negative rounding residue are NaN
        smoothed = np.maximum(smoothed, 0.0)
        return compress(downsample(smoothed, factor), self.compression)

    def _drop_silence(
        self, regions: list[Region], envelope: np.ndarray, frame_period: float
    ) -> list[Region]:
        """Keep regions whose mean envelope exceeds a fraction of the loudest region's."""
        means = np.zeros(len(regions))
        for i, region in enumerate(regions):
            first = int(round(region.start / frame_period))
            last = min(int(round(region.end / frame_period)), envelope.size)
            if last > first:
                means[i] = envelope[first:last].mean()

        if not regions:
            return []
        threshold = self.silence_ratio * means.max()
        return [region for region, mean in zip(regions, means) if mean > threshold]
