"""
Intensity contour extraction.

Short-term intensity in dB (re 2e-5 Pa) computed over Kaiser-like windows whose
length is tied to the lowest pitch of interest, following Praat's
"To Intensity..." analysis.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import numpy as np
from scipy.special import i0

from pysyllabifier.analysis.constants import (
    INTENSITY_MIN_PITCH,
    INTENSITY_POWER_FLOOR,
    INTENSITY_REFERENCE_POWER,
    INTENSITY_SILENCE_DB,
    INTENSITY_TIME_STEP,
    INTENSITY_WINDOW_PERIODS,
)
from pysyllabifier.analysis.contour import Contour

if TYPE_CHECKING:
    from pysyllabifier.audio import Waveform


def kaiser_window(half_window_samples: int, half_window_duration: float, rate: int) -> np.ndarray:
    """Window of length 2 * half + 1, evaluated at sample offsets from the centre."""
    offsets = np.arange(-half_window_samples, half_window_samples + 1) / rate
    x = offsets / half_window_duration
    root = np.sqrt(np.clip(1.0 - x * x, 0.0, None))
    return i0((2 * math.pi**2 + 0.5) * root)


class IntensityExtractor:
    """Callable collaborator mapping a waveform to an intensity contour."""

    def __init__(
        self,
        min_pitch: float = INTENSITY_MIN_PITCH,
        time_step: float = INTENSITY_TIME_STEP,
        subtract_mean: bool = True,
    ) -> None:
        if min_pitch <= 0 or time_step <= 0:
            raise ValueError("min_pitch and time_step must be positive")
        self.min_pitch = min_pitch
        self.time_step = time_step
        self.subtract_mean = subtract_mean

    def __call__(self, waveform: Waveform) -> Contour:
        return self.extract(waveform)

    def extract(self, waveform: Waveform) -> Contour:
        rate = waveform.rate
        samples = waveform.samples
        n_samples = samples.shape[1]
        duration = n_samples / rate

        window_duration = INTENSITY_WINDOW_PERIODS / self.min_pitch
        if n_samples == 0 or window_duration > duration:
            logging.debug(
                f"Audio ({duration:.3f}s) shorter than the intensity window ({window_duration:.3f}s)"
            )
            return Contour(0.0, self.time_step, size=0)

        n_frames = int(math.floor((duration - window_duration) / self.time_step)) + 1
        first_time = 0.5 * duration - 0.5 / rate - 0.5 * (n_frames - 1) * self.time_step

        half_window_duration = 0.5 * window_duration
        half = int(half_window_duration * rate)
        window = kaiser_window(half, half_window_duration, rate)

        values = np.empty(n_frames, dtype=np.float64)
        for frame in range(n_frames):
            centre = int(round((first_time + frame * self.time_step) * rate))
            left = max(centre - half, 0)
            right = min(centre + half, n_samples - 1)
            w = window[left - (centre - half) : right - (centre - half) + 1]

            segment = samples[:, left : right + 1]
            if self.subtract_mean:
                segment = segment - segment.mean(axis=1, keepdims=True)

            sum_xw = float(np.sum(segment**2 * w))
            sum_w = float(w.sum()) * samples.shape[0]
            power = sum_xw / sum_w / INTENSITY_REFERENCE_POWER
            values[frame] = 10.0 * math.log10(power) if power >= INTENSITY_POWER_FLOOR else INTENSITY_SILENCE_DB

        return Contour(first_time, self.time_step, values)
