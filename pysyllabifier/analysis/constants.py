"""
Analysis Constants - All thresholds and parameters.

Centralized configuration for both segmentation methods and the intensity
extractor. Segmenter constructors accept keyword overrides for their own knobs.
"""

from __future__ import annotations

# ============================================================================
# GAUSSIAN MIXTURE (EM) SEGMENTATION
# ============================================================================

GMM_SEED_STEP = 0.1  # One seed component per 100 ms of audio (seconds)
GMM_SEED_STD = 0.05  # Initial standard deviation of every seed (seconds)
GMM_CONVERGENCE_TOLERANCE = 1e-4  # Stop when |delta log-likelihood| < this
GMM_MAX_ITERATIONS = 500  # Best-effort stop if EM has not converged
GMM_OVERLAP_RATIO = 0.1  # Intersection within 0.1 sd of a mean => overlapping
GMM_SILENCE_RATIO = 0.01  # Mass at or below 1% of the heaviest component => silence

# Energy transform applied to the intensity contour: (dB / 10) ** 10
ENERGY_DB_SCALE = 10.0
ENERGY_EXPONENT = 10
ENERGY_DB_FLOOR = 0.0  # Intensities below this are treated as silence

# ============================================================================
# ENVELOPE (VILLING) SEGMENTATION
# ============================================================================

ENVELOPE_DESIGN_RATE = 16000  # Filter bank is designed for 16 kHz input
ENVELOPE_FRAME_RATE = 100  # Envelopes are decimated to 100 Hz
ENVELOPE_COMPRESSION = 0.3  # Power-law compression exponent

# Score ranges (low, high) for clamp((v - low) / (high - low), 0, 1)
BOUNDARY_SCORE_RANGE = (0.01, 0.1)  # Onset velocity at the run peak
STRENGTH_SCORE_RANGE = (0.3, 0.7)  # Normalized envelope at the run end
VELOCITY_SCORE_RANGE = (0.001, 0.1)  # Onset velocity at the run peak

# Neighbouring-peak suppression
SUPPRESSION_WINDOW = 10  # Frames at 100 Hz
SUPPRESSION_SLOPE = 0.055555
SUPPRESSION_INTERCEPT = -1.055555

ENVELOPE_SILENCE_RATIO = 0.3  # Keep regions above 30% of the loudest mean

# ============================================================================
# INTENSITY CONTOUR
# ============================================================================

INTENSITY_MIN_PITCH = 75.0  # Hz; sets the analysis window length
INTENSITY_TIME_STEP = 0.01  # Seconds between frames
INTENSITY_WINDOW_PERIODS = 6.4  # Window duration = periods / min_pitch
INTENSITY_REFERENCE_POWER = 4e-10  # (2e-5 Pa) ** 2
INTENSITY_SILENCE_DB = -300.0  # Reported when power underflows
INTENSITY_POWER_FLOOR = 1e-30

# ============================================================================
# REGION FILTERING
# ============================================================================

DEFAULT_MAX_DB_DROP = 25.0  # Regions quieter than loudest - 25 dB are dropped
