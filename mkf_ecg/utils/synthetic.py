"""
Synthetic ECG-like test signals.

Deterministic generators used by the tests, the demo mode of the
dashboard and the visualisation script. A "beat" is a narrow Gaussian
pulse standing in for the QRS complex; an optional slow sinusoid adds
baseline wander.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np


def generate_pulse_train(
    fs: float = 250.0,
    duration_seconds: float = 10.0,
    rate_hz: float = 1.0,
    first_beat_seconds: float = 0.5,
    pulse_width_seconds: float = 0.01,
    amplitude: float = 1.0,
) -> np.ndarray:
    """
    Generate a regular train of narrow Gaussian pulses.

    Args:
        fs: Sampling frequency in Hz.
        duration_seconds: Signal length in seconds.
        rate_hz: Pulse rate in Hz (1.0 = 60 bpm).
        first_beat_seconds: Time of the first pulse.
        pulse_width_seconds: Gaussian standard deviation.
        amplitude: Pulse height.

    Returns:
        Signal array of round(duration * fs) samples.

    Example:
        >>> ecg = generate_pulse_train(fs=250, duration_seconds=10)
        >>> len(ecg)
        2500
    """
    n_samples = int(round(duration_seconds * fs))
    period = 1.0 / rate_hz
    beat_times = np.arange(first_beat_seconds, n_samples / fs, period)
    return _render_pulses(beat_times, n_samples, fs, pulse_width_seconds, amplitude)


def generate_synthetic_ecg(
    rr_intervals: Sequence[float],
    fs: float = 250.0,
    first_beat_seconds: float = 0.5,
    tail_seconds: float = 0.5,
    pulse_width_seconds: float = 0.01,
    amplitude: float = 1.0,
    wander_amplitude: float = 0.0,
    wander_hz: float = 0.3,
    noise_std: float = 0.0,
    seed: Optional[int] = 42,
) -> np.ndarray:
    """
    Generate a pulse train whose beats follow a given RR sequence.

    Args:
        rr_intervals: Successive RR intervals in seconds.
        fs: Sampling frequency in Hz.
        first_beat_seconds: Time of the first beat.
        tail_seconds: Signal kept after the last beat.
        pulse_width_seconds: Gaussian standard deviation of each beat.
        amplitude: Beat height.
        wander_amplitude: Amplitude of the sinusoidal baseline wander.
        wander_hz: Frequency of the baseline wander.
        noise_std: Standard deviation of additive Gaussian noise.
        seed: Seed for the noise generator (fixed for reproducibility).

    Returns:
        Signal array.

    Example:
        >>> ecg = generate_synthetic_ecg([0.8, 0.8, 0.5, 1.0, 0.8], fs=250)
    """
    rr = np.asarray(rr_intervals, dtype=float)
    beat_times = first_beat_seconds + np.concatenate([[0.0], np.cumsum(rr)])
    n_samples = int(round((beat_times[-1] + tail_seconds) * fs))

    ecg = _render_pulses(beat_times, n_samples, fs, pulse_width_seconds, amplitude)

    if wander_amplitude:
        t = np.arange(n_samples) / fs
        ecg = ecg + wander_amplitude * np.sin(2 * np.pi * wander_hz * t)

    if noise_std:
        rng = np.random.default_rng(seed)
        ecg = ecg + rng.normal(0.0, noise_std, n_samples)

    return ecg


def _render_pulses(
    beat_times: np.ndarray,
    n_samples: int,
    fs: float,
    width_seconds: float,
    amplitude: float,
) -> np.ndarray:
    """Sum one Gaussian pulse per beat time onto a zero signal."""
    t = np.arange(n_samples) / fs
    signal = np.zeros(n_samples)
    for beat in beat_times:
        signal += amplitude * np.exp(-0.5 * ((t - beat) / width_seconds) ** 2)
    return signal


__all__ = [
    'generate_pulse_train',
    'generate_synthetic_ecg',
]
