"""
pysyllabifier Test Configuration

Provides deterministic synthetic speech-like signals and WAV files.
"""

import subprocess
import sys
from pathlib import Path

import numpy as np
import pytest
import soundfile

from pysyllabifier.audio import Waveform

RATE = 16000
BURSTS = ((0.2, 0.5), (1.0, 1.3))
BURST_DURATION = 1.5


def run_cli(*args: str) -> subprocess.CompletedProcess:
    """Run pysyllabifier CLI as subprocess."""
    return subprocess.run(
        [sys.executable, "-m", "pysyllabifier", *args],
        capture_output=True,
        text=True,
    )


def tone_bursts(
    bursts=BURSTS,
    duration: float = BURST_DURATION,
    rate: int = RATE,
    frequency: float = 500.0,
    amplitude: float = 0.5,
) -> np.ndarray:
    """Silence with constant-amplitude sine bursts at the given (start, end) times."""
    samples = np.zeros(int(round(duration * rate)), dtype=np.float64)
    for start, end in bursts:
        first, last = int(round(start * rate)), int(round(end * rate))
        t = np.arange(last - first) / rate
        samples[first:last] = amplitude * np.sin(2 * np.pi * frequency * t)
    return samples


def write_wav(path: Path, samples: np.ndarray, rate: int = RATE) -> Path:
    """Write float samples (samples,) or (channels, samples) as a 16-bit WAV."""
    data = np.asarray(samples)
    if data.ndim == 2:
        data = data.T
    soundfile.write(str(path), data, rate, subtype="PCM_16")
    return path


@pytest.fixture
def burst_waveform() -> Waveform:
    """Two 300 ms tone bursts separated by 500 ms of silence, at 16 kHz."""
    return Waveform(tone_bursts(), RATE)


@pytest.fixture
def burst_wav_path(tmp_path) -> Path:
    """The two-burst signal written to a WAV file."""
    return write_wav(tmp_path / "bursts.wav", tone_bursts())


def overlap_fraction(region, interval) -> float:
    """Fraction of ``interval`` covered by ``region``."""
    start, end = interval
    covered = max(0.0, min(region.end, end) - max(region.start, start))
    return covered / (end - start)
