import logging
import os
from pathlib import Path

from pysyllabifier.analysis import (
    DEFAULT_METHOD,
    IntensityExtractor,
    Region,
    filter_regions_by_intensity,
    get_syllabifier,
)
from pysyllabifier.audio import Waveform, format_time


class SyllableSegmenter:
    """High-level API access to pysyllabifier's main functions."""

    def __init__(self, source: str | Path | Waveform, method: str = DEFAULT_METHOD, **options):
        """Initializes the segmenter with the provided audio.

        Args:
            source: path to an audio file, or an already loaded Waveform.
            method: name of the segmentation method ("envelope" or "em").
            **options: keyword overrides passed to the segmentation method.
        """
        self.waveform = source if isinstance(source, Waveform) else Waveform.from_file(source)
        self.syllabifier = get_syllabifier(method, **options)

    @property
    def filename(self) -> str | None:
        return self.waveform.filename

    @property
    def filepath(self) -> str | None:
        return self.waveform.filepath

    @property
    def duration(self) -> float:
        return self.waveform.duration

    def find_regions(self, max_db_drop: float | None = None) -> list[Region]:
        """Segment the audio into pseudosyllable regions.

        Args:
            max_db_drop: if set, also drop regions whose peak intensity is more
                than this many dB below the loudest region's peak.
        """
        regions = self.syllabifier.generate(self.waveform)
        if max_db_drop is not None and regions:
            contour = IntensityExtractor()(self.waveform.select_channel(0))
            regions = filter_regions_by_intensity(regions, contour, max_db_drop=max_db_drop)
        return regions

    def format_seconds(self, seconds: float, fmt: str = "seconds") -> str:
        if fmt.lower() == "time":
            return format_time(seconds)
        return f"{seconds:.3f}"

    def export_txt(
        self,
        regions: list[Region],
        txt_name: str = "syllables",
        output_dir: str | None = None,
        fmt: str = "seconds",
    ) -> str:
        if output_dir is not None:
            out_path = os.path.join(output_dir, f"{txt_name}.txt")
        elif self.filepath is not None:
            out_path = os.path.join(os.path.dirname(self.filepath), f"{txt_name}.txt")
        else:
            out_path = f"{txt_name}.txt"

        with open(out_path, "a") as file:
            for region in regions:
                file.write(
                    f"{self.format_seconds(region.start, fmt)} "
                    f"{self.format_seconds(region.end, fmt)} {self.filename}\n"
                )
        logging.info(f'Wrote {len(regions)} regions to "{out_path}"')
        return out_path
