"""
Signal processing utility functions.

This module provides the small numeric building blocks shared by the
pipeline stages. Every helper returns a new array and guards the empty
case so that degenerate inputs resolve to 0.0 instead of NaN.

Functions:
    seconds_to_samples: Convert a duration to a sample count (round half up)
    validate_sampling_rate: Reject non-positive sampling rates
    moving_average: Causal moving average with a growing start window
    heart_rate_bpm: Heart rate from a mean RR interval
    safe_mean: Mean with fallback for empty arrays
    population_std: Standard deviation dividing by N
    root_mean_square: RMS with fallback for empty arrays

Example:
    >>> from mkf_ecg.utils.signal_utils import moving_average, seconds_to_samples
    >>> window = seconds_to_samples(0.6, fs=250)
    >>> print(window)  # 150
    >>> moving_average(np.array([1.0, 3.0, 5.0]), window=2)
    array([1., 2., 4.])
"""

from __future__ import annotations

import math

import numpy as np

from mkf_ecg.errors import InvalidParameterError


def seconds_to_samples(seconds: float, fs: float, minimum: int = 0) -> int:
    """
    Convert a duration in seconds to a whole number of samples.

    Halves are rounded up (12.5 -> 13), not to even as the builtin
    round() would do.

    Args:
        seconds: Duration in seconds.
        fs: Sampling frequency in Hz.
        minimum: Lower bound for the result.

    Returns:
        Sample count, at least `minimum`.

    Example:
        >>> seconds_to_samples(0.05, 250)
        13
    """
    return max(minimum, int(math.floor(seconds * fs + 0.5)))


def validate_sampling_rate(fs: float) -> float:
    """
    Check that a sampling rate is a finite positive number.

    Raises:
        InvalidParameterError: If fs is not positive or not finite.
    """
    if fs is None or not np.isfinite(fs) or fs <= 0:
        raise InvalidParameterError(f"sampling rate must be positive, got {fs}")
    return float(fs)


def moving_average(signal: np.ndarray, window: int) -> np.ndarray:
    """
    Causal moving average (boxcar) with a growing start window.

    The divisor at position i is min(i + 1, window), so the first
    samples are averaged over what is available instead of being
    padded with zeros.

    Args:
        signal: Input signal array.
        window: Window length in samples (>= 1).

    Returns:
        Averaged signal, same length as the input.

    Raises:
        InvalidParameterError: If window < 1.

    Example:
        >>> moving_average(np.array([2.0, 4.0, 6.0, 8.0]), window=2)
        array([2., 3., 5., 7.])
    """
    if window < 1:
        raise InvalidParameterError(f"moving average window must be >= 1, got {window}")

    x = np.asarray(signal, dtype=float)
    if len(x) == 0:
        return x.copy()

    cumsum = np.cumsum(x)
    sums = cumsum.copy()
    sums[window:] = cumsum[window:] - cumsum[:-window]

    divisors = np.minimum(np.arange(1, len(x) + 1), window)
    return sums / divisors


def heart_rate_bpm(mean_rr: float) -> int:
    """
    Heart rate in bpm, round(60 / mean_rr) with halves rounded up.

    Returns 0 when mean_rr is not positive (no reliable heartbeats).

    Example:
        >>> heart_rate_bpm(0.8)
        75
    """
    if not mean_rr or mean_rr <= 0 or not np.isfinite(mean_rr):
        return 0
    return int(math.floor(60.0 / mean_rr + 0.5))


def safe_mean(values: np.ndarray, default: float = 0.0) -> float:
    """
    Calculate the mean, with fallback for empty arrays.

    Example:
        >>> safe_mean(np.array([]))
        0.0
    """
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return default
    return float(np.mean(values))


def population_std(values: np.ndarray, default: float = 0.0) -> float:
    """
    Standard deviation dividing by N (not N - 1).

    Args:
        values: Input values.
        default: Value returned for an empty array.

    Returns:
        Population standard deviation.

    Example:
        >>> population_std(np.array([1.0, 3.0]))
        1.0
    """
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return default
    return float(np.std(values, ddof=0))


def root_mean_square(values: np.ndarray, default: float = 0.0) -> float:
    """Root mean square of the values, or `default` when empty."""
    values = np.asarray(values, dtype=float)
    if len(values) == 0:
        return default
    return float(np.sqrt(np.mean(values * values)))


__all__ = [
    'seconds_to_samples',
    'validate_sampling_rate',
    'moving_average',
    'heart_rate_bpm',
    'safe_mean',
    'population_std',
    'root_mean_square',
]
