"""
Pseudosyllable segmentation methods.

Methods are selected by name through :func:`get_syllabifier`:
- ``envelope`` - band-envelope onset scoring (default)
- ``em``       - Gaussian mixture fitted to intensity energy
"""

from __future__ import annotations

from pysyllabifier.analysis.syllabifiers.base import Syllabifier
from pysyllabifier.analysis.syllabifiers.envelope import (
    EnvelopeSyllabifier,
    identify_onsets,
    suppress_nearby_peaks,
)
from pysyllabifier.analysis.syllabifiers.gaussian_mixture import GaussianMixtureSyllabifier
from pysyllabifier.exceptions import UnknownSyllabifierError

SYLLABIFIERS: dict[str, type[Syllabifier]] = {
    EnvelopeSyllabifier.name: EnvelopeSyllabifier,
    GaussianMixtureSyllabifier.name: GaussianMixtureSyllabifier,
}

DEFAULT_METHOD = EnvelopeSyllabifier.name


def get_syllabifier(name: str = DEFAULT_METHOD, **kwargs) -> Syllabifier:
    """Instantiate the segmentation method registered as ``name``."""
    try:
        cls = SYLLABIFIERS[name.lower()]
    except KeyError:
        raise UnknownSyllabifierError(
            f'Unknown segmentation method "{name}". Available: {", ".join(SYLLABIFIERS)}'
        ) from None
    return cls(**kwargs)


__all__ = [
    "Syllabifier",
    "EnvelopeSyllabifier",
    "GaussianMixtureSyllabifier",
    "SYLLABIFIERS",
    "DEFAULT_METHOD",
    "get_syllabifier",
    "identify_onsets",
    "suppress_nearby_peaks",
]
