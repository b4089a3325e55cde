"""
Signal primitives shared by the segmenters.

All functions are pure: they take 1-D numpy arrays and return new arrays.
IIR filtering is delegated to scipy.signal.lfilter.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from scipy import signal

if TYPE_CHECKING:
    from pysyllabifier.analysis.filters import FilterCoefficients


def apply_filter(coefficients: FilterCoefficients, x: np.ndarray) -> np.ndarray:
    """Direct-form IIR filter with zero initial state."""
    return signal.lfilter(coefficients.numerator, coefficients.denominator, x)


def _steady_state_pass(coefficients: FilterCoefficients, x: np.ndarray) -> np.ndarray:
    b, a = coefficients.numerator, coefficients.denominator
    if len(a) < 2 or len(x) == 0:
        return signal.lfilter(b, a, x)
    zi = signal.lfilter_zi(b, a) * x[0]
    y, _ = signal.lfilter(b, a, x, zi=zi)
    return y


def zero_phase_filter(coefficients: FilterCoefficients, x: np.ndarray) -> np.ndarray:
    """
    Forward-backward filtering: filter, reverse, filter, reverse.

    Each pass starts from the filter's steady state for the first input sample,
    so a constant input through a unity-DC-gain filter comes out unchanged.
    """
    y = _steady_state_pass(coefficients, np.asarray(x, dtype=np.float64))
    y = _steady_state_pass(coefficients, y[::-1])
    return y[::-1].copy()


def rectify(x: np.ndarray) -> np.ndarray:
    """Full-wave rectification."""
    return np.abs(x)


def half_wave_rectify(x: np.ndarray) -> np.ndarray:
    """Clamp negative values to zero."""
    return np.maximum(x, 0.0)


def downsample(x: np.ndarray, factor: int) -> np.ndarray:
    """Keep every ``factor``-th sample; output length is ceil(len(x) / factor)."""
    if factor < 1:
        raise ValueError(f"Downsampling factor must be >= 1, got {factor}")
    return np.asarray(x)[::factor].copy()


def compress(x: np.ndarray, exponent: float) -> np.ndarray:
    return np.power(x, exponent)


def safe_divide(numerator: np.ndarray, denominator: np.ndarray) -> np.ndarray:
    """Element-wise division yielding 0 where the denominator is 0."""
    numerator = np.asarray(numerator, dtype=np.float64)
    denominator = np.asarray(denominator, dtype=np.float64)
    out = np.zeros_like(numerator)
    np.divide(numerator, denominator, out=out, where=denominator != 0)
    return out


def first_difference(x: np.ndarray) -> np.ndarray:
    """x[i + 1] - x[i]; one sample shorter than the input."""
    return np.diff(x)


def score_range(values: np.ndarray, low: float, high: float) -> np.ndarray:
    """Linear ramp clamp((v - low) / (high - low), 0, 1)."""
    return np.clip((np.asarray(values, dtype=np.float64) - low) / (high - low), 0.0, 1.0)
