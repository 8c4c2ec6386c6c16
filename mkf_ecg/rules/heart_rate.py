"""
Heart Rate Category Rule.

Categories (bpm = round(60 / meanRR)):
    < 50         Bradycardia, clinically significant
    [50, 60)     Mild bradycardia
    [60, 100]    Normal
    (100, 150]   Tachycardia
    > 150        High rate, consider urgent evaluation

meanRR = 0 (fewer than two beats) means no reliable heartbeats.
Thresholds are heuristic and come from RhythmThresholds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from mkf_ecg.config import THRESHOLDS, RhythmThresholds
from mkf_ecg.utils.signal_utils import heart_rate_bpm

# Configure module logger
logger = logging.getLogger(__name__)


class HeartRateCategory(Enum):
    """
    Heart rate categories.

    Clinical interpretation:
        BRADYCARDIA:      < 50 bpm, clinically significant
        MILD_BRADYCARDIA: 50-59 bpm
        NORMAL:           60-100 bpm
        TACHYCARDIA:      101-150 bpm
        HIGH_RATE:        > 150 bpm, urgent evaluation
        NO_BEATS:         No reliable heartbeats detected
    """
    BRADYCARDIA = "Bradycardia"
    MILD_BRADYCARDIA = "Mild bradycardia"
    NORMAL = "Normal"
    TACHYCARDIA = "Tachycardia"
    HIGH_RATE = "High rate"
    NO_BEATS = "No reliable heartbeats"

    @classmethod
    def from_bpm(
        cls,
        bpm: int,
        thresholds: RhythmThresholds = THRESHOLDS,
    ) -> HeartRateCategory:
        """
        Determine category from heart rate.

        Args:
            bpm: Heart rate in bpm (0 = no reliable beats).
            thresholds: Rule thresholds.

        Returns:
            Corresponding HeartRateCategory.
        """
        if bpm <= 0:
            return cls.NO_BEATS
        if bpm < thresholds.BRADY_SIGNIFICANT_BPM:
            return cls.BRADYCARDIA
        elif bpm < thresholds.NORMAL_MIN_BPM:
            return cls.MILD_BRADYCARDIA
        elif bpm <= thresholds.NORMAL_MAX_BPM:
            return cls.NORMAL
        elif bpm <= thresholds.TACHY_MAX_BPM:
            return cls.TACHYCARDIA
        else:
            return cls.HIGH_RATE


_FINDING_TEMPLATES = {
    HeartRateCategory.BRADYCARDIA: "Bradycardia (HR={bpm} bpm) — clinically significant",
    HeartRateCategory.MILD_BRADYCARDIA: "Mild bradycardia (HR={bpm} bpm)",
    HeartRateCategory.NORMAL: "Normal heart rate (HR={bpm} bpm)",
    HeartRateCategory.TACHYCARDIA: "Tachycardia (HR={bpm} bpm)",
    HeartRateCategory.HIGH_RATE: "High rate (HR={bpm} bpm) — consider urgent evaluation",
    HeartRateCategory.NO_BEATS: "No reliable heartbeats detected",
}


@dataclass
class HeartRateResult:
    """
    Result of heart rate classification.

    Attributes:
        bpm: Heart rate in bpm (0 when no reliable beats).
        category: Heart rate category.
        label: Human-readable finding.
    """

    bpm: int
    category: HeartRateCategory
    label: str

    @property
    def is_normal(self) -> bool:
        return self.category == HeartRateCategory.NORMAL

    @property
    def has_beats(self) -> bool:
        return self.category != HeartRateCategory.NO_BEATS

    def __repr__(self) -> str:
        return f"HeartRateResult(bpm={self.bpm}, category={self.category.name})"


def classify_heart_rate(
    mean_rr: float,
    thresholds: RhythmThresholds = THRESHOLDS,
) -> HeartRateResult:
    """
    Classify the heart rate derived from the mean RR interval.

    Args:
        mean_rr: Mean RR interval in seconds (0 when fewer than two beats).
        thresholds: Rule thresholds.

    Returns:
        HeartRateResult with bpm, category and finding text.

    Example:
        >>> classify_heart_rate(1.0).label
        'Normal heart rate (HR=60 bpm)'
    """
    bpm = heart_rate_bpm(mean_rr)
    category = HeartRateCategory.from_bpm(bpm, thresholds)
    label = _FINDING_TEMPLATES[category].format(bpm=bpm)

    logger.debug(f"Heart rate: {bpm} bpm -> {category.name}")

    return HeartRateResult(bpm=bpm, category=category, label=label)
