"""
Base Syllabifier Interface.

Every segmentation method maps a waveform to an ordered list of
non-overlapping pseudosyllable regions with silence excluded.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pysyllabifier.analysis.regions import Region
    from pysyllabifier.audio import Waveform


class Syllabifier(ABC):
    """
    Abstract base class for pseudosyllable segmenters.

    Implementations are stateless between calls, so one instance may segment
    any number of waveforms, including concurrently.
    """

    name: str = "base"

    @abstractmethod
    def generate(self, waveform: Waveform) -> list[Region]:
        """
        Segment ``waveform`` into pseudosyllable regions.

        Args:
            waveform: Audio to segment; only channel 0 is analysed

        Returns:
            Time-ordered, non-overlapping regions. Empty when the audio is too
            short to analyse.
        """
        ...

    def segment(self, waveform: Waveform) -> list[Region]:
        return self.generate(waveform)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
