"""
Unit tests for the adaptive beat detector.

Hand-built envelopes check the individual rules (threshold, refractory
gating, refinement, de-duplication); synthetic pulse trains check the
detector end to end through the conditioning stages.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkf_ecg.detection import (
    DetectorParams,
    DetectorState,
    compute_threshold,
    deduplicate_peaks,
    detect_beats,
    detector_step,
    find_local_maxima,
    refine_peak,
    seed_detector_state,
)
from mkf_ecg.dsp import bandpass_filter, compute_qrs_features, remove_baseline
from mkf_ecg.errors import InsufficientDataError, InvalidParameterError
from mkf_ecg.utils import generate_pulse_train, generate_synthetic_ecg


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def fs() -> float:
    return 250.0


@pytest.fixture
def params(fs) -> DetectorParams:
    return DetectorParams.for_sampling_rate(fs, n_samples=1000)


def condition(samples: np.ndarray, fs: float):
    """Baseline removal, band-pass and QRS transform."""
    filtered, _ = bandpass_filter(remove_baseline(samples, fs), fs)
    return compute_qrs_features(filtered, fs).envelope, filtered


def spike_envelope(n: int, positions, height: float = 1.0) -> np.ndarray:
    x = np.zeros(n)
    x[list(positions)] = height
    return x


# =============================================================================
# Building blocks
# =============================================================================

class TestLocalMaxima:
    """Tests for strict local maxima."""

    def test_single_peak(self):
        x = np.array([0, 0, 1, 3, 1, 0, 0], dtype=float)
        np.testing.assert_array_equal(find_local_maxima(x), [3])

    def test_plateau_is_not_a_maximum(self):
        x = np.array([0, 0, 2, 2, 0, 0, 0], dtype=float)
        assert len(find_local_maxima(x)) == 0

    def test_edges_are_not_scanned(self):
        """Indices 0, 1, N-2 and N-1 are never maxima."""
        x = np.array([0, 5, 0, 0, 0, 5, 0], dtype=float)
        assert len(find_local_maxima(x)) == 0

    def test_short_input(self):
        assert len(find_local_maxima(np.array([0.0, 1.0, 0.0]))) == 0


class TestDetectorParams:
    """Tests for the time-to-sample conversion."""

    def test_defaults_at_250_hz(self, params):
        assert params.refractory == 63
        assert params.search_half == 13
        assert params.dedup_distance == 50
        assert params.seed_length == 500

    def test_seed_length_capped_by_signal(self, fs):
        assert DetectorParams.for_sampling_rate(fs, n_samples=200).seed_length == 200

    def test_negative_duration_raises(self, fs):
        with pytest.raises(InvalidParameterError):
            DetectorParams.for_sampling_rate(fs, 1000, refractory_seconds=-0.1)


class TestDetectorState:
    """Tests for seeding and single steps."""

    def test_threshold_formula(self):
        assert compute_threshold(1.0, 0.02) == pytest.approx(0.265)

    def test_seed_from_initial_maxima(self, params):
        x = spike_envelope(1000, [100, 300], height=2.0)
        state = seed_detector_state(x, find_local_maxima(x), params)
        assert state.spki == pytest.approx(2.0)
        assert state.npki == pytest.approx(0.04)
        assert state.last_qrs is None

    def test_seed_fallback_without_initial_maxima(self, params):
        x = spike_envelope(1000, [700], height=10.0)
        state = seed_detector_state(x, find_local_maxima(x), params)
        assert state.spki == pytest.approx(3.0)

    def test_accepted_step_updates_signal_level(self, params):
        x = spike_envelope(1000, [100])
        state = DetectorState(spki=1.0, npki=0.0, threshold=0.25)
        new = detector_step(state, 100, x, x, params)

        assert new.spki == pytest.approx(1.0)
        assert new.npki == 0.0
        assert new.last_qrs == 100
        assert new.raw_candidates == (100,)
        assert new.refined_candidates == (100,)

    def test_step_does_not_mutate_state(self, params):
        x = spike_envelope(1000, [100])
        state = DetectorState(spki=1.0, npki=0.0, threshold=0.25)
        detector_step(state, 100, x, x, params)
        assert state.raw_candidates == ()
        assert state.last_qrs is None

    def test_sub_threshold_step_updates_noise_level(self, params):
        x = spike_envelope(1000, [100], height=0.1)
        state = DetectorState(spki=1.0, npki=0.0, threshold=0.25)
        new = detector_step(state, 100, x, x, params)

        assert new.raw_candidates == ()
        assert new.npki == pytest.approx(0.0125)
        assert new.threshold == pytest.approx(compute_threshold(1.0, 0.0125))

    def test_refractory_step_updates_noise_level(self, params):
        x = spike_envelope(1000, [130])
        state = DetectorState(spki=1.0, npki=0.0, threshold=0.25, last_qrs=100)
        new = detector_step(state, 130, x, x, params)

        assert new.raw_candidates == ()
        assert new.npki == pytest.approx(0.125)


class TestRefinement:
    """Tests for peak refinement and de-duplication."""

    def test_refine_moves_to_filtered_maximum(self):
        filtered = np.zeros(200)
        filtered[105] = 2.0
        assert refine_peak(filtered, 100, search_half=13) == 105

    def test_refine_window_clipped_at_edges(self):
        filtered = np.zeros(20)
        filtered[0] = 1.0
        assert refine_peak(filtered, 3, search_half=13) == 0

    def test_refine_ties_keep_earliest(self):
        filtered = np.zeros(50)
        filtered[[20, 25]] = 1.0
        assert refine_peak(filtered, 22, search_half=5) == 20

    def test_deduplicate(self):
        np.testing.assert_array_equal(
            deduplicate_peaks(np.array([100, 120, 400]), min_distance=50), [100, 400]
        )

    def test_deduplicate_requires_strictly_more_than_distance(self):
        np.testing.assert_array_equal(
            deduplicate_peaks(np.array([100, 150, 201]), min_distance=50), [100, 201]
        )


# =============================================================================
# detect_beats
# =============================================================================

class TestDetectBeats:
    """Tests for the full detector on hand-built envelopes."""

    def test_refractory_blocks_close_maximum(self, fs):
        x = spike_envelope(1000, [100, 130, 400])
        result = detect_beats(x, x, fs)

        np.testing.assert_array_equal(result.raw_candidates, [100, 400])
        np.testing.assert_array_equal(result.peak_indices, [100, 400])

    def test_refinement_uses_filtered_signal(self, fs):
        x = spike_envelope(1000, [100, 400])
        filtered = np.zeros(1000)
        filtered[[95, 410]] = 1.0
        result = detect_beats(x, filtered, fs)

        np.testing.assert_array_equal(result.peak_indices, [95, 410])

    def test_candidates_refined_onto_same_beat_are_merged(self, fs):
        x = spike_envelope(1000, [100, 120])
        filtered = np.zeros(1000)
        filtered[110] = 1.0
        result = detect_beats(x, filtered, fs, refractory_seconds=0.05)

        np.testing.assert_array_equal(result.refined_candidates, [110, 110])
        np.testing.assert_array_equal(result.peak_indices, [110])

    def test_flat_envelope_has_no_beats(self, fs):
        result = detect_beats(np.zeros(500), np.zeros(500), fs)
        assert result.n_beats == 0
        assert result.final_state is None

    def test_empty_envelope_raises(self, fs):
        with pytest.raises(InsufficientDataError):
            detect_beats(np.array([]), np.array([]), fs)

    def test_length_mismatch_raises(self, fs):
        with pytest.raises(InvalidParameterError):
            detect_beats(np.zeros(100), np.zeros(99), fs)

    def test_invalid_sampling_rate_raises(self):
        with pytest.raises(InvalidParameterError):
            detect_beats(np.zeros(100), np.zeros(100), fs=0)


class TestDetectionOnSyntheticECG:
    """End-to-end detection through the conditioning stages."""

    def test_one_hertz_pulse_train(self, fs):
        samples = generate_pulse_train(fs=fs, duration_seconds=10.0, rate_hz=1.0)
        envelope, filtered = condition(samples, fs)
        result = detect_beats(envelope, filtered, fs)

        assert 9 <= result.n_beats <= 11
        rr_samples = np.diff(result.peak_indices)
        assert np.all(np.abs(rr_samples - 250) <= 15)

    def test_peaks_increasing_and_spaced(self, fs):
        rr = [0.8, 0.6, 1.1, 0.7, 0.9, 0.8, 0.65, 1.0, 0.75]
        samples = generate_synthetic_ecg(rr, fs=fs, wander_amplitude=0.3, noise_std=0.02)
        envelope, filtered = condition(samples, fs)
        peaks = detect_beats(envelope, filtered, fs).peak_indices

        assert len(peaks) > 0
        assert np.all(np.diff(peaks) > 50)
        assert np.all((peaks >= 0) & (peaks < len(samples)))

    def test_detection_is_deterministic(self, fs):
        samples = generate_synthetic_ecg([0.8] * 12, fs=fs, noise_std=0.05, seed=7)
        envelope, filtered = condition(samples, fs)
        first = detect_beats(envelope, filtered, fs)
        second = detect_beats(envelope, filtered, fs)

        np.testing.assert_array_equal(first.peak_indices, second.peak_indices)
        assert first.final_state == second.final_state
