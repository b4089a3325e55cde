from pathlib import Path

import librosa
import numpy as np

from pysyllabifier.exceptions import AudioLoadError


class Waveform:
    """Immutable multi-channel sample buffer, shaped (channels, samples)."""

    __slots__ = (
        "filepath",
        "filename",
        "rate",
        "samples",
    )

    def __init__(self, samples: np.ndarray, rate: int, filepath: str | Path | None = None) -> None:
        if rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {rate}")
        data = np.atleast_2d(np.asarray(samples, dtype=np.float64)).copy()
        if data.ndim != 2:
            raise ValueError(f"Expected (channels, samples) audio, got shape {data.shape}")
        data.flags.writeable = False

        self.samples = data
        self.rate = int(rate)
        self.filepath = str(filepath) if filepath is not None else None
        self.filename = Path(filepath).name if filepath is not None else None

    @classmethod
    def from_file(cls, filepath: str | Path) -> "Waveform":
        """Load audio at its native rate and channel layout."""
        path = Path(filepath)

        try:
            raw_audio, sr = librosa.load(path, sr=None, mono=False)
        except Exception as e:
            raise AudioLoadError(
                f"{path.name} could not be loaded. Invalid audio data or unsupported format."
            ) from e

        if raw_audio.size == 0:
            raise AudioLoadError(f'No audio data could be loaded from "{path}".')

        return cls(raw_audio, sr, filepath=path)

    @property
    def n_channels(self) -> int:
        return self.samples.shape[0]

    @property
    def n_samples(self) -> int:
        return self.samples.shape[1]

    @property
    def duration(self) -> float:
        return self.n_samples / self.rate

    def channel(self, index: int) -> np.ndarray:
        """A writable copy of one channel's samples."""
        return np.array(self.samples[index], dtype=np.float64)

    def select_channel(self, index: int) -> "Waveform":
        if self.n_channels == 1 and index == 0:
            return self
        return Waveform(self.samples[index], self.rate, filepath=self.filepath)

    def seconds_to_samples(self, seconds: float) -> int:
        return librosa.time_to_samples(seconds, sr=self.rate)

    def samples_to_seconds(self, samples: int) -> float:
        return librosa.samples_to_time(samples, sr=self.rate)


def format_time(seconds: float) -> str:
    """mm:ss.sss"""
    return f"{int(seconds // 60):02d}:{seconds % 60:06.3f}"
