"""
Utility functions for MKF-ECG.

This package contains reusable helpers organized by domain:
- signal_utils: Numeric helpers (moving average, guarded statistics, rounding)
- synthetic: Deterministic synthetic ECG-like test signals

Usage:
    from mkf_ecg.utils import moving_average, population_std
"""

from mkf_ecg.utils.signal_utils import (
    seconds_to_samples,
    validate_sampling_rate,
    moving_average,
    heart_rate_bpm,
    safe_mean,
    population_std,
    root_mean_square,
)
from mkf_ecg.utils.synthetic import generate_pulse_train, generate_synthetic_ecg

__all__ = [
    'seconds_to_samples',
    'validate_sampling_rate',
    'moving_average',
    'heart_rate_bpm',
    'safe_mean',
    'population_std',
    'root_mean_square',
    'generate_pulse_train',
    'generate_synthetic_ecg',
]
