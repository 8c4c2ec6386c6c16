"""
Centralized configuration for MKF-ECG.

This module contains the constants used throughout the pipeline.
All rhythm thresholds are heuristic values, not clinically validated
cut-offs, and can be overridden by passing a custom RhythmThresholds
instance to the classifier.

Usage:
    from mkf_ecg.config import ECG, THRESHOLDS, COLORS

    fs = ECG.SAMPLING_RATE
    pause_limit = THRESHOLDS.LONG_PAUSE_S
"""

from dataclasses import dataclass
from typing import Final


# =============================================================================
# ECG Signal & Pipeline Configuration
# =============================================================================

@dataclass(frozen=True)
class ECGConfig:
    """ECG signal processing constants."""

    # Acquisition
    SAMPLING_RATE: float = 250.0  # Hz
    WINDOW_SECONDS: float = 30.0  # Analysis window cropped from the recording
    MIN_SAMPLES: int = 50         # Shorter recordings are rejected

    # Baseline removal
    BASELINE_WINDOW_SECONDS: float = 0.6

    # Band-pass FIR (QRS energy band)
    BANDPASS_LOW: float = 5.0    # Hz
    BANDPASS_HIGH: float = 15.0  # Hz
    MIN_TAPS: int = 101
    TAP_SECONDS: float = 0.2     # ~0.2 s worth of taps

    # QRS feature transform
    INTEGRATION_WINDOW_SECONDS: float = 0.15

    # Adaptive beat detector
    SEED_SECONDS: float = 2.0          # Initial segment used to seed SPKI
    SEED_FALLBACK_RATIO: float = 0.3   # SPKI = ratio * max(envelope) when no seed peaks
    NOISE_SEED_RATIO: float = 0.02     # NPKI = ratio * SPKI
    THRESHOLD_RATIO: float = 0.25      # threshold = NPKI + ratio * (SPKI - NPKI)
    LEVEL_LEARNING_RATE: float = 0.125
    REFRACTORY_SECONDS: float = 0.25
    SEARCH_HALF_SECONDS: float = 0.05  # R-peak refinement half window
    DEDUP_SECONDS: float = 0.2


ECG: Final[ECGConfig] = ECGConfig()


# =============================================================================
# Rhythm Thresholds (heuristic)
# =============================================================================

@dataclass(frozen=True)
class RhythmThresholds:
    """Rule thresholds for the rhythm classifier."""

    # Heart rate categories (bpm)
    BRADY_SIGNIFICANT_BPM: int = 50  # < 50 = clinically significant bradycardia
    NORMAL_MIN_BPM: int = 60         # [50, 60) = mild bradycardia
    NORMAL_MAX_BPM: int = 100        # [60, 100] = normal
    TACHY_MAX_BPM: int = 150         # (100, 150] = tachycardia, above = high rate

    # AFib heuristic (seconds / fraction)
    AF_SDNN_S: float = 0.12
    AF_RMSSD_S: float = 0.10
    AF_PNN50: float = 0.20
    AF_LIKELY_MIN_RULES: int = 2

    # Premature beat: curr < ratio * prev and next > ratio * prev
    PVC_PREMATURE_RATIO: float = 0.8
    PVC_COMPENSATORY_RATIO: float = 1.15

    # Long pause (seconds)
    LONG_PAUSE_S: float = 3.0

    # pNN50 successive-difference limit (seconds)
    PNN50_DIFF_S: float = 0.05


THRESHOLDS: Final[RhythmThresholds] = RhythmThresholds()


# =============================================================================
# UI Colors
# =============================================================================

@dataclass(frozen=True)
class UIColors:
    """Color scheme for UI components."""

    ECG: str = '#00ffd1'
    R_PEAK: str = '#ff3b6b'
    RR_BAR: str = '#00aaff'
    ENVELOPE: str = '#FF8C00'
    GRID: str = '#E5E5E5'
    BACKGROUND: str = '#FAFAFA'

    # Heart-rate category badges
    NORMAL: str = '#28a745'
    WARNING: str = '#fd7e14'
    CRITICAL: str = '#dc3545'
    UNKNOWN: str = '#6c757d'


COLORS: Final[UIColors] = UIColors()


__all__ = [
    'ECG',
    'THRESHOLDS',
    'COLORS',
    'ECGConfig',
    'RhythmThresholds',
    'UIColors',
]
