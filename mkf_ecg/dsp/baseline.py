"""
Baseline Wander Remover.

Removes slow drift (respiration, electrode motion) by subtracting a long
causal moving average from the raw ECG.

Definition:
    baseline[i] = mean(x[max(0, i - W + 1) .. i])   with W = round(0.6 * fs)
    detrended[i] = x[i] - baseline[i]

The window grows from 1 sample at the start of the buffer up to W, so
the first samples are never padded with zeros.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from mkf_ecg.config import ECG
from mkf_ecg.errors import InsufficientDataError
from mkf_ecg.utils.signal_utils import (
    moving_average,
    seconds_to_samples,
    validate_sampling_rate,
)

# Configure module logger
logger = logging.getLogger(__name__)


def estimate_baseline(
    samples: np.ndarray,
    fs: float,
    window_seconds: Optional[float] = None,
) -> np.ndarray:
    """
    Estimate the baseline with a causal moving average.

    Args:
        samples: Raw ECG samples.
        fs: Sampling frequency in Hz.
        window_seconds: Averaging window (default: ECG.BASELINE_WINDOW_SECONDS).

    Returns:
        Baseline estimate, same length as the input.

    Raises:
        InsufficientDataError: If the buffer is empty.
        InvalidParameterError: If fs is not positive.
    """
    fs = validate_sampling_rate(fs)
    x = np.asarray(samples, dtype=float)
    if x.size == 0:
        raise InsufficientDataError("Cannot remove baseline from an empty buffer")

    if window_seconds is None:
        window_seconds = ECG.BASELINE_WINDOW_SECONDS

    window = seconds_to_samples(window_seconds, fs, minimum=1)
    logger.debug(f"Baseline window: {window} samples ({window_seconds}s @ {fs}Hz)")

    return moving_average(x, window)


def remove_baseline(
    samples: np.ndarray,
    fs: float,
    window_seconds: Optional[float] = None,
) -> np.ndarray:
    """
    Subtract the moving-average baseline from the signal.

    Args:
        samples: Raw ECG samples.
        fs: Sampling frequency in Hz.
        window_seconds: Averaging window (default: 0.6 s).

    Returns:
        Detrended signal, same length as the input.

    Example:
        >>> detrended = remove_baseline(raw_ecg, fs=250)
        >>> len(detrended) == len(raw_ecg)
        True
    """
    x = np.asarray(samples, dtype=float)
    baseline = estimate_baseline(x, fs, window_seconds)
    return x - baseline
