"""
Fixed IIR filter tables used by the envelope segmenter.

The tables are keyed by sample rate. Only a 16 kHz design exists; other rates
fall back to it with a warning since the coefficients then no longer describe
the intended cut-off frequencies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from pysyllabifier.analysis.constants import ENVELOPE_DESIGN_RATE


@dataclass(slots=True, frozen=True, eq=False)
class FilterCoefficients:
    """Numerator (b) and denominator (a) of a direct-form IIR filter."""

    numerator: np.ndarray
    denominator: np.ndarray

    def __post_init__(self):
        b = np.asarray(self.numerator, dtype=np.float64)
        a = np.asarray(self.denominator, dtype=np.float64)
        if b.ndim != 1 or a.ndim != 1 or b.size == 0 or a.size == 0:
            raise ValueError("Filter coefficients must be non-empty 1-D sequences")
        if a[0] == 0:
            raise ValueError("Leading denominator coefficient must be non-zero")
        object.__setattr__(self, "numerator", b)
        object.__setattr__(self, "denominator", a)

    @property
    def order(self) -> int:
        return max(self.numerator.size, self.denominator.size) - 1


@dataclass(slots=True, frozen=True)
class FilterBank:
    yule_walker: FilterCoefficients  # Equal-loudness pre-emphasis, 8th order
    high_pass: FilterCoefficients  # 150 Hz
    low_pass: FilterCoefficients  # 1 kHz
    smoothing: FilterCoefficients  # 12 Hz envelope smoother

    @property
    def max_order(self) -> int:
        return max(
            self.yule_walker.order,
            self.high_pass.order,
            self.low_pass.order,
            self.smoothing.order,
        )


FILTER_BANKS: dict[int, FilterBank] = {
    16000: FilterBank(
        yule_walker=FilterCoefficients(
            numerator=[0.5265, -0.0254, -0.2860, -0.1221, -0.0060, 0.1186, 0.0975, -0.0884, -0.0849],
            denominator=[1.0, -0.4667, 0.0691, -0.2148, -0.0706, 0.1136, 0.0974, -0.1088, 0.0437],
        ),
        high_pass=FilterCoefficients(
            numerator=[0.9592, -1.9184, 0.9592],
            denominator=[1.0, -1.9167, 0.9201],
        ),
        low_pass=FilterCoefficients(
            numerator=[0.0300, 0.0599, 0.0300],
            denominator=[1.0, -1.4542, 0.5741],
        ),
        # First-order Butterworth at 12 Hz, unity gain at DC
        smoothing=FilterCoefficients(
            numerator=[0.0023506603, 0.0023506603],
            denominator=[1.0, -0.9952986794],
        ),
    ),
}


def get_filter_bank(rate: int) -> FilterBank:
    """Return the filter bank designed for ``rate``, or the 16 kHz one with a warning."""
    bank = FILTER_BANKS.get(int(rate))
    if bank is None:
        logging.warning(
            f"No filter bank designed for {rate} Hz; using the {ENVELOPE_DESIGN_RATE} Hz "
            "coefficients. Segmentation quality will be degraded."
        )
        bank = FILTER_BANKS[ENVELOPE_DESIGN_RATE]
    return bank
