"""
Signal conditioning stages for MKF-ECG.

Modules:
    baseline: Baseline wander removal (long moving-average subtraction)
    filters: Windowed-sinc band-pass FIR design and direct convolution
    qrs_transform: Derivative -> squaring -> moving-window integration

Usage:
    >>> from mkf_ecg.dsp import remove_baseline, bandpass_filter, compute_qrs_features
    >>> detrended = remove_baseline(raw, fs=250)
    >>> filtered, kernel = bandpass_filter(detrended, fs=250)
    >>> envelope = compute_qrs_features(filtered, fs=250).envelope
"""

from .baseline import estimate_baseline, remove_baseline
from .filters import (
    default_tap_count,
    validate_band,
    design_bandpass_fir,
    convolve_same,
    bandpass_filter,
    frequency_response,
)
from .qrs_transform import (
    QRSFeatures,
    compute_qrs_features,
    five_point_derivative,
    integrate,
    square,
)

__all__ = [
    # Baseline
    "estimate_baseline",
    "remove_baseline",
    # Band-pass
    "default_tap_count",
    "validate_band",
    "design_bandpass_fir",
    "convolve_same",
    "bandpass_filter",
    "frequency_response",
    # QRS transform
    "QRSFeatures",
    "compute_qrs_features",
    "five_point_derivative",
    "integrate",
    "square",
]
