"""
Band-pass FIR Filter.

Designs a linear-phase band-pass kernel with the windowed-sinc method and
applies it by direct convolution.

Design:
    fc1 = low_cut / fs, fc2 = high_cut / fs, M = (N - 1) / 2
    h[n] = 2 * (fc2 - fc1)                                   for k = n - M = 0
    h[n] = (sin(2*pi*fc2*k) - sin(2*pi*fc1*k)) / (pi * k)    otherwise
    h[n] *= 0.54 - 0.46 * cos(2*pi*n / (N - 1))              (Hamming)

The tap count N is forced odd so the kernel has a centre tap and is
symmetric. Convolution is direct (O(N * taps)); the buffer is bounded by
the analysis window so FFT convolution is not needed.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np
from scipy.signal import freqz

from mkf_ecg.config import ECG
from mkf_ecg.errors import InsufficientDataError, InvalidParameterError
from mkf_ecg.utils.signal_utils import seconds_to_samples, validate_sampling_rate

# Configure module logger
logger = logging.getLogger(__name__)


def default_tap_count(fs: float) -> int:
    """
    Default kernel length: about 0.2 s of taps, odd, at least 101.

    Example:
        >>> default_tap_count(250)
        101
        >>> default_tap_count(1000)
        201
    """
    fs = validate_sampling_rate(fs)
    taps = seconds_to_samples(ECG.TAP_SECONDS, fs) | 1
    return max(ECG.MIN_TAPS, taps)


def validate_band(low_cut: float, high_cut: float, fs: float) -> None:
    """
    Check that 0 < low_cut < high_cut < fs / 2.

    Raises:
        InvalidParameterError: If the band is empty or outside (0, fs/2).
    """
    fs = validate_sampling_rate(fs)
    nyquist = fs / 2.0

    if not (np.isfinite(low_cut) and np.isfinite(high_cut)):
        raise InvalidParameterError(
            f"cut-off frequencies must be finite, got low={low_cut}, high={high_cut}"
        )
    if low_cut >= high_cut:
        raise InvalidParameterError(
            f"low_cut ({low_cut} Hz) must be less than high_cut ({high_cut} Hz)"
        )
    if low_cut <= 0 or high_cut >= nyquist:
        raise InvalidParameterError(
            f"cut-offs must lie inside (0, {nyquist} Hz), "
            f"got low={low_cut}, high={high_cut}"
        )


def design_bandpass_fir(
    low_cut: float,
    high_cut: float,
    fs: float,
    n_taps: Optional[int] = None,
) -> np.ndarray:
    """
    Design a Hamming-windowed sinc band-pass kernel.

    Args:
        low_cut: Lower cut-off in Hz.
        high_cut: Upper cut-off in Hz.
        fs: Sampling frequency in Hz.
        n_taps: Kernel length; incremented by one if even.
            Defaults to default_tap_count(fs).

    Returns:
        Symmetric kernel of odd length.

    Raises:
        InvalidParameterError: If the band or tap count is invalid.

    Example:
        >>> kernel = design_bandpass_fir(5, 15, fs=250)
        >>> len(kernel)
        101
    """
    validate_band(low_cut, high_cut, fs)

    if n_taps is None:
        n_taps = default_tap_count(fs)
    n_taps = int(n_taps)
    if n_taps < 1:
        raise InvalidParameterError(f"n_taps must be >= 1, got {n_taps}")
    if n_taps % 2 == 0:
        n_taps += 1

    fc1 = low_cut / fs
    fc2 = high_cut / fs
    center = (n_taps - 1) // 2

    # Both terms are even in k, so evaluating on |k| makes the kernel
    # exactly symmetric.
    k = np.abs(np.arange(n_taps) - center).astype(float)

    kernel = np.empty(n_taps)
    nonzero = k != 0
    kernel[~nonzero] = 2.0 * (fc2 - fc1)
    kernel[nonzero] = (
        np.sin(2 * np.pi * fc2 * k[nonzero]) - np.sin(2 * np.pi * fc1 * k[nonzero])
    ) / (np.pi * k[nonzero])

    if n_taps > 1:
        # 0.54 - 0.46 * cos(2*pi*n / (N - 1)) rewritten around the centre tap
        kernel *= 0.54 + 0.46 * np.cos(2 * np.pi * k / (n_taps - 1))

    logger.debug(
        f"Designed band-pass FIR: {low_cut}-{high_cut} Hz @ {fs} Hz, {n_taps} taps"
    )
    return kernel


def convolve_same(signal: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Direct convolution, zero-padded, aligned to the kernel centre.

    out[i] = sum_j signal[i - j + m // 2] * kernel[j], where indices
    outside [0, N) contribute nothing. The output has the length of the
    signal even when the kernel is longer.

    Args:
        signal: Input signal.
        kernel: Filter kernel (odd length for zero delay).

    Returns:
        Filtered signal, same length as `signal`.

    Example:
        >>> identity = np.array([0.0, 1.0, 0.0])
        >>> convolve_same(np.array([1.0, 2.0, 3.0]), identity)
        array([1., 2., 3.])
    """
    x = np.asarray(signal, dtype=float)
    h = np.asarray(kernel, dtype=float)
    if x.size == 0:
        raise InsufficientDataError("Cannot filter an empty buffer")
    if h.size == 0:
        raise InvalidParameterError("Kernel must contain at least one tap")

    # np.convolve is a direct (non-FFT) convolution
    full = np.convolve(x, h, mode='full')
    start = h.size // 2
    return full[start:start + x.size]


def bandpass_filter(
    samples: np.ndarray,
    fs: float,
    low_cut: Optional[float] = None,
    high_cut: Optional[float] = None,
    n_taps: Optional[int] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Design the band-pass kernel and apply it to a signal.

    Args:
        samples: Detrended ECG samples.
        fs: Sampling frequency in Hz.
        low_cut: Lower cut-off (default: ECG.BANDPASS_LOW).
        high_cut: Upper cut-off (default: ECG.BANDPASS_HIGH).
        n_taps: Kernel length hint (default: default_tap_count(fs)).

    Returns:
        Tuple of (filtered signal, kernel).
    """
    low_cut = ECG.BANDPASS_LOW if low_cut is None else low_cut
    high_cut = ECG.BANDPASS_HIGH if high_cut is None else high_cut

    kernel = design_bandpass_fir(low_cut, high_cut, fs, n_taps)
    filtered = convolve_same(samples, kernel)
    return filtered, kernel


def frequency_response(
    kernel: np.ndarray,
    fs: float,
    n_points: int = 512,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Magnitude response of an FIR kernel.

    Args:
        kernel: Filter kernel.
        fs: Sampling frequency in Hz.
        n_points: Number of frequency points between 0 and fs/2.

    Returns:
        Tuple of (frequencies in Hz, magnitude |H(f)|).
    """
    fs = validate_sampling_rate(fs)
    freqs, response = freqz(np.asarray(kernel, dtype=float), worN=n_points, fs=fs)
    return freqs, np.abs(response)


__all__ = [
    'default_tap_count',
    'validate_band',
    'design_bandpass_fir',
    'convolve_same',
    'bandpass_filter',
    'frequency_response',
]
