"""
pysyllabifier Analysis Module - Pseudosyllable Segmentation.

Architecture:
├── constants.py         - All thresholds and parameters
├── dsp.py               - Filtering, rectification, decimation, scoring ramps
├── filters.py           - Fixed IIR filter tables keyed by sample rate
├── contour.py           - Regularly sampled time series with empty samples
├── intensity.py         - Short-term intensity contour (dB)
├── regions.py           - Region type, boundary-to-region conversion, filtering
├── gmm.py               - Gaussian mixture over time, fitted by EM
└── syllabifiers/        - Segmentation methods
    ├── base.py          - Abstract syllabifier interface
    ├── envelope.py      - Band-envelope onset segmentation
    └── gaussian_mixture.py - EM segmentation over intensity energy
"""

from pysyllabifier.analysis.contour import Contour
from pysyllabifier.analysis.filters import FILTER_BANKS, FilterBank, FilterCoefficients, get_filter_bank
from pysyllabifier.analysis.gmm import GMMComponent, intersection
from pysyllabifier.analysis.intensity import IntensityExtractor
from pysyllabifier.analysis.regions import Region, filter_regions_by_intensity, regions_from_points
from pysyllabifier.analysis.syllabifiers import (
    DEFAULT_METHOD,
    SYLLABIFIERS,
    EnvelopeSyllabifier,
    GaussianMixtureSyllabifier,
    Syllabifier,
    get_syllabifier,
)

__all__ = [
    "Contour",
    "FILTER_BANKS",
    "FilterBank",
    "FilterCoefficients",
    "get_filter_bank",
    "GMMComponent",
    "intersection",
    "IntensityExtractor",
    "Region",
    "filter_regions_by_intensity",
    "regions_from_points",
    "DEFAULT_METHOD",
    "SYLLABIFIERS",
    "EnvelopeSyllabifier",
    "GaussianMixtureSyllabifier",
    "Syllabifier",
    "get_syllabifier",
]
