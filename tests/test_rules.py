"""
Unit Tests for Rule Engine Module.

Tests the rhythm rules on hand-built RR sequences and HRV values.

Test Strategy:
    - Construct RR sequences with known characteristics
    - Verify that the rules report those characteristics
    - Use boundary conditions to test edge cases
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkf_ecg.config import RhythmThresholds
from mkf_ecg.rules import (
    AFibLikelihood,
    HeartRateCategory,
    assess_afib,
    classify_heart_rate,
    detect_long_pauses,
    detect_pvc_candidates,
)


# =============================================================================
# Heart Rate Tests
# =============================================================================

class TestHeartRate:
    """Tests for heart rate categories."""

    @pytest.mark.parametrize("bpm,expected", [
        (0, HeartRateCategory.NO_BEATS),
        (30, HeartRateCategory.BRADYCARDIA),
        (49, HeartRateCategory.BRADYCARDIA),
        (50, HeartRateCategory.MILD_BRADYCARDIA),
        (59, HeartRateCategory.MILD_BRADYCARDIA),
        (60, HeartRateCategory.NORMAL),
        (100, HeartRateCategory.NORMAL),
        (101, HeartRateCategory.TACHYCARDIA),
        (150, HeartRateCategory.TACHYCARDIA),
        (151, HeartRateCategory.HIGH_RATE),
    ])
    def test_category_boundaries(self, bpm, expected):
        assert HeartRateCategory.from_bpm(bpm) == expected

    def test_normal_label(self):
        result = classify_heart_rate(1.0)
        assert result.bpm == 60
        assert result.is_normal
        assert result.label == "Normal heart rate (HR=60 bpm)"

    def test_bradycardia_label(self):
        result = classify_heart_rate(1.5)
        assert result.label == "Bradycardia (HR=40 bpm) — clinically significant"

    def test_mild_bradycardia_label(self):
        assert classify_heart_rate(1.09).label == "Mild bradycardia (HR=55 bpm)"

    def test_tachycardia_label(self):
        assert classify_heart_rate(0.5).label == "Tachycardia (HR=120 bpm)"

    def test_high_rate_label(self):
        result = classify_heart_rate(0.35)
        assert result.category == HeartRateCategory.HIGH_RATE
        assert result.label == "High rate (HR=171 bpm) — consider urgent evaluation"

    def test_no_beats(self):
        result = classify_heart_rate(0.0)
        assert not result.has_beats
        assert result.label == "No reliable heartbeats detected"

    def test_custom_thresholds(self):
        strict = RhythmThresholds(NORMAL_MAX_BPM=90)
        assert classify_heart_rate(0.6, strict).category == HeartRateCategory.TACHYCARDIA
        assert classify_heart_rate(0.6).category == HeartRateCategory.NORMAL


# =============================================================================
# AFib Tests
# =============================================================================

class TestAFib:
    """Tests for the AFib rule count."""

    def test_no_rules(self):
        result = assess_afib(sdnn=0.03, rmssd=0.02, pnn50=0.05)
        assert result.likelihood == AFibLikelihood.UNLIKELY
        assert result.rules_met == 0
        assert not result.detected
        assert result.label == "Rhythm: No strong AFib signature detected"

    def test_one_rule_is_possible(self):
        result = assess_afib(sdnn=0.15, rmssd=0.02, pnn50=0.05)
        assert result.likelihood == AFibLikelihood.POSSIBLE
        assert result.rules == {'sdnn': True, 'rmssd': False, 'pnn50': False}
        assert result.label == "Rhythm: Possible AFib — correlate clinically"

    @pytest.mark.parametrize("sdnn,rmssd,pnn50", [
        (0.15, 0.12, 0.0),
        (0.15, 0.0, 0.3),
        (0.0, 0.12, 0.3),
        (0.2, 0.2, 0.5),
    ])
    def test_two_or_more_rules_is_likely(self, sdnn, rmssd, pnn50):
        result = assess_afib(sdnn, rmssd, pnn50)
        assert result.likelihood == AFibLikelihood.LIKELY
        assert result.label == "Rhythm: Likely AFib (irregularly irregular)"

    def test_thresholds_are_strict(self):
        """Values equal to the limits do not fire."""
        result = assess_afib(sdnn=0.12, rmssd=0.10, pnn50=0.20)
        assert result.rules_met == 0


# =============================================================================
# PVC Tests
# =============================================================================

class TestPVC:
    """Tests for premature beat candidates."""

    def test_premature_with_compensatory_pause(self):
        result = detect_pvc_candidates(np.array([0.8, 0.8, 0.5, 1.0, 0.8]))
        assert result.indices == [2]
        assert result.count == 1
        assert result.label == "PVCs detected: 1 candidate(s)"

    def test_premature_without_compensatory_pause(self):
        result = detect_pvc_candidates(np.array([0.8, 0.8, 0.5, 0.8, 0.8]))
        assert not result.detected
        assert result.label == ""

    def test_regular_rhythm(self):
        assert detect_pvc_candidates(np.full(20, 0.8)).count == 0

    @pytest.mark.parametrize("rr", [[], [0.8], [0.8, 0.5]])
    def test_needs_three_intervals(self, rr):
        assert detect_pvc_candidates(np.array(rr)).count == 0

    def test_multiple_candidates(self):
        rr = np.array([0.8, 0.5, 1.0, 0.8, 0.8, 0.5, 1.0, 0.8])
        assert detect_pvc_candidates(rr).indices == [1, 5]


# =============================================================================
# Pause Tests
# =============================================================================

class TestPauses:
    """Tests for long pause detection."""

    def test_single_pause(self):
        result = detect_long_pauses(np.array([0.8, 0.8, 3.5, 0.8]))
        assert result.count == 1
        assert result.indices == [2]
        assert result.durations == [3.5]
        assert result.label == "Long pause(s) detected (>3s) : 1"

    def test_exactly_three_seconds_is_not_a_pause(self):
        assert detect_long_pauses(np.array([3.0, 0.8])).count == 0

    def test_no_intervals(self):
        result = detect_long_pauses(np.array([]))
        assert not result.detected
        assert result.label == ""
