"""
RR Interval and HRV (Heart Rate Variability) analysis.

Provides:
- RR interval derivation from R-peak indices
- Time-domain HRV metrics (mean RR, SDNN, RMSSD, pNN50)
- Heart rate from mean RR
- RR histogram for display

Every division is guarded: with fewer than 2 peaks mean RR and SDNN are
0.0, with fewer than 3 peaks RMSSD and pNN50 are 0.0. SDNN is a
population standard deviation (divide by N).
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Dict

import numpy as np
import pandas as pd

from mkf_ecg.config import THRESHOLDS
from mkf_ecg.utils.signal_utils import (
    heart_rate_bpm,
    population_std,
    root_mean_square,
    safe_mean,
    validate_sampling_rate,
)

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class HRVMetrics:
    """
    Time-domain HRV metrics (all durations in seconds).

    Attributes:
        mean_rr: Mean RR interval.
        sdnn: Population standard deviation of the RR intervals.
        rmssd: Root mean square of successive RR differences.
        pnn50: Fraction of successive differences larger than 50 ms.
        n_intervals: Number of RR intervals the metrics were computed from.
    """

    mean_rr: float
    sdnn: float
    rmssd: float
    pnn50: float
    n_intervals: int = 0

    @property
    def heart_rate_bpm(self) -> int:
        """Heart rate from mean RR (0 when no reliable beats)."""
        return heart_rate_bpm(self.mean_rr)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def __repr__(self) -> str:
        return (
            f"HRVMetrics(meanRR={self.mean_rr:.3f}s, SDNN={self.sdnn:.3f}s, "
            f"RMSSD={self.rmssd:.3f}s, pNN50={self.pnn50:.0%})"
        )


def compute_rr_intervals(peak_indices: np.ndarray, fs: float) -> np.ndarray:
    """
    RR intervals in seconds: rr[i] = (peak[i+1] - peak[i]) / fs.

    Example:
        >>> compute_rr_intervals(np.array([0, 250, 500]), fs=250)
        array([1., 1.])
    """
    fs = validate_sampling_rate(fs)
    peaks = np.asarray(peak_indices)
    if len(peaks) < 2:
        return np.array([], dtype=float)
    return np.diff(peaks).astype(float) / fs


def successive_differences(rr_intervals: np.ndarray) -> np.ndarray:
    """Absolute differences between consecutive RR intervals."""
    rr = np.asarray(rr_intervals, dtype=float)
    if len(rr) < 2:
        return np.array([], dtype=float)
    return np.abs(np.diff(rr))


def compute_hrv_metrics(
    rr_intervals: np.ndarray,
    pnn50_threshold: float = THRESHOLDS.PNN50_DIFF_S,
) -> HRVMetrics:
    """
    Compute time-domain HRV metrics from RR intervals.

    Args:
        rr_intervals: RR intervals in seconds.
        pnn50_threshold: Successive-difference limit for pNN50 (default: 0.05 s).

    Returns:
        HRVMetrics; degenerate inputs give zeros, never NaN.

    Example:
        >>> metrics = compute_hrv_metrics(np.array([0.8, 0.9, 0.8]))
        >>> round(metrics.mean_rr, 3)
        0.833
    """
    rr = np.asarray(rr_intervals, dtype=float)
    diffs = successive_differences(rr)

    mean_rr = safe_mean(rr)
    sdnn = population_std(rr)
    rmssd = root_mean_square(diffs)
    pnn50 = float(np.sum(diffs > pnn50_threshold)) / len(diffs) if len(diffs) else 0.0

    if len(rr) == 0:
        logger.debug("No RR intervals; HRV metrics resolved to zero")

    return HRVMetrics(
        mean_rr=mean_rr,
        sdnn=sdnn,
        rmssd=rmssd,
        pnn50=pnn50,
        n_intervals=len(rr),
    )


def compute_hrv_from_peaks(peak_indices: np.ndarray, fs: float) -> HRVMetrics:
    """Convenience wrapper: peaks -> RR intervals -> HRV metrics."""
    return compute_hrv_metrics(compute_rr_intervals(peak_indices, fs))


def rr_histogram(rr_intervals: np.ndarray, bin_width: float = 0.2) -> pd.Series:
    """
    Count RR intervals per bin, each interval rounded to the nearest bin.

    Args:
        rr_intervals: RR intervals in seconds.
        bin_width: Bin width in seconds (default: 0.2 s).

    Returns:
        Series of counts indexed by bin centre (seconds), ascending.

    Example:
        >>> rr_histogram(np.array([0.79, 0.81, 1.02])).to_dict()
        {0.8: 2, 1.0: 1}
    """
    rr = np.asarray(rr_intervals, dtype=float)
    if len(rr) == 0:
        return pd.Series(dtype='int64', name='count').rename_axis('rr_seconds')

    bins = np.round(np.floor(rr / bin_width + 0.5) * bin_width, 6)
    counts = pd.Series(bins).value_counts().sort_index()
    counts.index.name = 'rr_seconds'
    counts.name = 'count'
    return counts


__all__ = [
    'HRVMetrics',
    'compute_rr_intervals',
    'successive_differences',
    'compute_hrv_metrics',
    'compute_hrv_from_peaks',
    'heart_rate_bpm',
    'rr_histogram',
]
