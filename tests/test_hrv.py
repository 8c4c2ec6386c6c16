"""
Unit tests for RR interval and HRV analysis.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkf_ecg.analysis import (
    HRVMetrics,
    compute_hrv_from_peaks,
    compute_hrv_metrics,
    compute_rr_intervals,
    heart_rate_bpm,
    rr_histogram,
    successive_differences,
)
from mkf_ecg.errors import InvalidParameterError


class TestRRIntervals:
    """Tests for RR interval derivation."""

    def test_regular_peaks(self):
        rr = compute_rr_intervals(np.array([0, 250, 500]), fs=250)
        np.testing.assert_allclose(rr, [1.0, 1.0])

    def test_round_trip_to_heart_rate(self):
        """Peaks every 200 samples at 250 Hz are 0.8 s apart, 75 bpm."""
        peaks = np.arange(0, 2000, 200)
        metrics = compute_hrv_from_peaks(peaks, fs=250)
        assert metrics.mean_rr == pytest.approx(0.8)
        assert metrics.heart_rate_bpm == 75

    @pytest.mark.parametrize("peaks", [[], [120]])
    def test_fewer_than_two_peaks(self, peaks):
        assert len(compute_rr_intervals(np.array(peaks, dtype=int), fs=250)) == 0

    def test_invalid_sampling_rate(self):
        with pytest.raises(InvalidParameterError):
            compute_rr_intervals(np.array([0, 250]), fs=0)


class TestHRVMetrics:
    """Tests for time-domain HRV metrics."""

    def test_constant_rr_has_no_variability(self):
        metrics = compute_hrv_metrics(np.array([1.0, 1.0, 1.0, 1.0]))
        assert metrics.mean_rr == pytest.approx(1.0)
        assert metrics.sdnn == pytest.approx(0.0)
        assert metrics.rmssd == pytest.approx(0.0)
        assert metrics.pnn50 == 0.0
        assert metrics.heart_rate_bpm == 60

    def test_known_values(self):
        metrics = compute_hrv_metrics(np.array([0.8, 0.9, 0.8]))
        assert metrics.mean_rr == pytest.approx(0.8333333, rel=1e-6)
        assert metrics.sdnn == pytest.approx(np.sqrt(0.02 / 9), rel=1e-6)
        assert metrics.rmssd == pytest.approx(0.1)
        assert metrics.pnn50 == pytest.approx(1.0)
        assert metrics.n_intervals == 3

    def test_pnn50_fraction(self):
        metrics = compute_hrv_metrics(np.array([1.0, 1.04, 1.1]))
        assert metrics.pnn50 == pytest.approx(0.5)

    def test_successive_differences_are_absolute(self):
        np.testing.assert_allclose(
            successive_differences(np.array([1.0, 0.7, 0.9])), [0.3, 0.2]
        )

    def test_empty_sequence_resolves_to_zero(self):
        metrics = compute_hrv_metrics(np.array([]))
        assert metrics == HRVMetrics(0.0, 0.0, 0.0, 0.0, 0)
        assert metrics.heart_rate_bpm == 0

    def test_single_interval(self):
        """One RR interval: mean defined, no successive differences."""
        metrics = compute_hrv_metrics(np.array([0.9]))
        assert metrics.mean_rr == pytest.approx(0.9)
        assert metrics.sdnn == 0.0
        assert metrics.rmssd == 0.0
        assert metrics.pnn50 == 0.0

    def test_no_nan_for_degenerate_inputs(self):
        for rr in ([], [1.0], [1.0, 1.0]):
            values = compute_hrv_metrics(np.array(rr)).to_dict().values()
            assert not any(np.isnan(v) for v in values)

    def test_to_dict(self):
        metrics = compute_hrv_metrics(np.array([0.8, 0.8]))
        assert set(metrics.to_dict()) == {'mean_rr', 'sdnn', 'rmssd', 'pnn50', 'n_intervals'}


class TestHeartRate:
    """Tests for heart rate from mean RR."""

    def test_rounding(self):
        assert heart_rate_bpm(1.0) == 60
        assert heart_rate_bpm(0.8) == 75
        assert heart_rate_bpm(0.7) == 86

    @pytest.mark.parametrize("mean_rr", [0.0, -1.0, float('nan')])
    def test_no_beats(self, mean_rr):
        assert heart_rate_bpm(mean_rr) == 0


class TestRRHistogram:
    """Tests for the RR histogram."""

    def test_nearest_bin(self):
        counts = rr_histogram(np.array([0.79, 0.81, 1.02]))
        assert counts.to_dict() == {0.8: 2, 1.0: 1}

    def test_bins_sorted(self):
        counts = rr_histogram(np.array([1.2, 0.6, 0.8, 0.6]))
        assert list(counts.index) == [0.6, 0.8, 1.2]

    def test_empty(self):
        counts = rr_histogram(np.array([]))
        assert len(counts) == 0
        assert counts.name == 'count'
