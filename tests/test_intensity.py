"""
Intensity contour tests.

Verifies:
- Frame grid (count and centring) for a given duration
- Absolute level of a known sine
- Silence and too-short audio
"""

import numpy as np
import pytest

from conftest import RATE
from pysyllabifier.analysis.intensity import IntensityExtractor, kaiser_window
from pysyllabifier.audio import Waveform


def sine(amplitude: float, duration: float = 1.0, frequency: float = 500.0) -> np.ndarray:
    t = np.arange(int(round(duration * RATE))) / RATE
    return amplitude * np.sin(2 * np.pi * frequency * t)


class TestFrameGrid:
    """Frames are centred within the signal."""

    def test_one_second_at_16k(self):
        contour = IntensityExtractor()(Waveform(sine(0.5), RATE))
        assert len(contour) == 92
        assert contour.start == pytest.approx(0.04496875)
        assert contour.step == 0.01

    def test_frames_are_symmetric(self):
        contour = IntensityExtractor()(Waveform(sine(0.5), RATE))
        last = contour.time_from_index(len(contour) - 1)
        assert contour.start + last == pytest.approx(1.0 - 1.0 / RATE)

    def test_shorter_than_window_is_empty(self):
        contour = IntensityExtractor()(Waveform(sine(0.5, duration=0.05), RATE))
        assert len(contour) == 0
        assert contour.content_size == 0

    def test_invalid_parameters(self):
        with pytest.raises(ValueError):
            IntensityExtractor(min_pitch=0)
        with pytest.raises(ValueError):
            IntensityExtractor(time_step=-0.01)


class TestLevels:
    """Absolute intensity values in dB re 2e-5."""

    def test_half_amplitude_sine(self):
        """Mean power 0.125 relative to 4e-10 is about 84.95 dB."""
        contour = IntensityExtractor()(Waveform(sine(0.5), RATE))
        middle = contour.values()[10:-10]
        np.testing.assert_allclose(middle, 84.949, atol=0.5)

    def test_silence_is_floor_value(self):
        contour = IntensityExtractor()(Waveform(np.zeros(RATE), RATE))
        np.testing.assert_array_equal(contour.values(), -300.0)

    def test_louder_is_higher(self):
        quiet = IntensityExtractor()(Waveform(sine(0.05), RATE)).values()
        loud = IntensityExtractor()(Waveform(sine(0.5), RATE)).values()
        assert np.all(loud > quiet)
        assert np.median(loud - quiet) == pytest.approx(20.0, abs=0.5)

    def test_dc_offset_is_removed(self):
        offset = IntensityExtractor()(Waveform(sine(0.5) + 0.3, RATE)).values()
        plain = IntensityExtractor()(Waveform(sine(0.5), RATE)).values()
        np.testing.assert_allclose(offset[10:-10], plain[10:-10], atol=0.1)


class TestKaiserWindow:
    def test_symmetric_and_peaked(self):
        window = kaiser_window(100, 100 / RATE, RATE)
        assert window.size == 201
        np.testing.assert_allclose(window, window[::-1])
        assert window.argmax() == 100
