"""
QRS Feature Transform.

Turns the band-passed ECG into an envelope that peaks once per QRS
complex, in three steps:

    1. 5-point derivative  d[i] = (2f[i+2] + f[i+1] - f[i-1] - 2f[i-2]) / 8
    2. Squaring            s[i] = d[i]^2
    3. Integration         causal moving average over round(0.15 * fs) samples

The two samples at each end of the derivative are left at zero: they
are undefined and are not extrapolated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
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


@dataclass
class QRSFeatures:
    """
    Intermediate buffers of the QRS feature transform.

    Attributes:
        derivative: 5-point derivative of the filtered signal.
        squared: Pointwise square of the derivative.
        envelope: Moving-window integration of the squared derivative.
        integration_window: Integration window in samples.
    """

    derivative: np.ndarray
    squared: np.ndarray
    envelope: np.ndarray
    integration_window: int


def five_point_derivative(filtered: np.ndarray) -> np.ndarray:
    """
    5-point derivative approximation; ends stay at zero.

    Example:
        >>> five_point_derivative(np.arange(6, dtype=float))
        array([0.  , 0.  , 1.25, 1.25, 0.  , 0.  ])
    """
    f = np.asarray(filtered, dtype=float)
    deriv = np.zeros_like(f)
    if f.size < 5:
        return deriv

    deriv[2:-2] = (2 * f[4:] + f[3:-1] - f[1:-3] - 2 * f[:-4]) / 8.0
    return deriv


def square(signal: np.ndarray) -> np.ndarray:
    """Pointwise square."""
    x = np.asarray(signal, dtype=float)
    return x * x


def integrate(
    squared: np.ndarray,
    fs: float,
    window_seconds: Optional[float] = None,
) -> np.ndarray:
    """
    Moving-window integration with the growing-window rule.

    Args:
        squared: Squared derivative.
        fs: Sampling frequency in Hz.
        window_seconds: Integration window (default: 0.15 s).

    Returns:
        Envelope, same length as the input.
    """
    fs = validate_sampling_rate(fs)
    if window_seconds is None:
        window_seconds = ECG.INTEGRATION_WINDOW_SECONDS
    window = seconds_to_samples(window_seconds, fs, minimum=1)
    return moving_average(squared, window)


def compute_qrs_features(
    filtered: np.ndarray,
    fs: float,
    window_seconds: Optional[float] = None,
) -> QRSFeatures:
    """
    Run derivative, squaring and integration on the filtered signal.

    Args:
        filtered: Band-passed ECG.
        fs: Sampling frequency in Hz.
        window_seconds: Integration window (default: 0.15 s).

    Returns:
        QRSFeatures with every intermediate buffer.

    Raises:
        InsufficientDataError: If the buffer is empty.

    Example:
        >>> features = compute_qrs_features(filtered, fs=250)
        >>> envelope = features.envelope
    """
    fs = validate_sampling_rate(fs)
    f = np.asarray(filtered, dtype=float)
    if f.size == 0:
        raise InsufficientDataError("Cannot transform an empty buffer")

    if window_seconds is None:
        window_seconds = ECG.INTEGRATION_WINDOW_SECONDS
    window = seconds_to_samples(window_seconds, fs, minimum=1)

    derivative = five_point_derivative(f)
    squared = square(derivative)
    envelope = integrate(squared, fs, window_seconds)

    logger.debug(
        f"QRS transform: {f.size} samples, integration window {window} samples, "
        f"envelope max {float(np.max(envelope)):.3g}"
    )

    return QRSFeatures(
        derivative=derivative,
        squared=squared,
        envelope=envelope,
        integration_window=window,
    )
