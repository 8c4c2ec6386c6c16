"""
Finding Engine for MKF-ECG.

Combines the rule outcomes into a Finding Record: a heart rate finding,
the AFib heuristic, premature beat candidates, long pauses and an HRV
summary line. The record is recomputed from scratch for every analysis
and carries no state between runs.

The wording is informational; none of these findings is a diagnosis.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import numpy as np

from mkf_ecg.config import THRESHOLDS, RhythmThresholds
from mkf_ecg.rules.afib import AFibResult, assess_afib
from mkf_ecg.rules.ectopy import PVCResult, detect_pvc_candidates
from mkf_ecg.rules.heart_rate import HeartRateResult, classify_heart_rate
from mkf_ecg.rules.pauses import PauseResult, detect_long_pauses
from mkf_ecg.utils.signal_utils import validate_sampling_rate

logger = logging.getLogger(__name__)

FINDING_SEPARATOR = " · "


@dataclass
class FindingRecord:
    """
    Structured rhythm findings for one analysis.

    Attributes:
        heart_rate: Heart rate category result.
        afib: AFib heuristic result.
        pvc: Premature beat candidates.
        pauses: Long pauses.
        hrv_summary: Formatted HRV summary line.
        findings: Finding lines in display order.
        n_beats: Number of detected beats the findings are based on.
        sdnn, rmssd, pnn50: HRV values the findings were derived from.
    """

    heart_rate: HeartRateResult
    afib: AFibResult
    pvc: PVCResult
    pauses: PauseResult
    hrv_summary: str
    findings: List[str] = field(default_factory=list)
    n_beats: int = 0
    sdnn: float = 0.0
    rmssd: float = 0.0
    pnn50: float = 0.0

    @property
    def text(self) -> str:
        """All findings on one line."""
        return FINDING_SEPARATOR.join(self.findings)

    @property
    def heart_rate_label(self) -> str:
        return self.heart_rate.label

    @property
    def rhythm_labels(self) -> List[str]:
        """AFib, PVC and pause findings that apply."""
        labels = [self.afib.label]
        if self.pvc.detected:
            labels.append(self.pvc.label)
        if self.pauses.detected:
            labels.append(self.pauses.label)
        return labels

    @property
    def details(self) -> Dict[str, Any]:
        return {
            'bpm': self.heart_rate.bpm,
            'sdnn': self.sdnn,
            'rmssd': self.rmssd,
            'pnn50': self.pnn50,
            'pvc_count': self.pvc.count,
            'long_pauses': self.pauses.count,
        }


def format_hrv_summary(sdnn: float, rmssd: float, pnn50: float) -> str:
    """
    HRV summary line.

    Example:
        >>> format_hrv_summary(0.0123, 0.0201, 0.25)
        'HRV: SDNN=0.012s, RMSSD=0.020s, pNN50=25%'
    """
    percent = int(math.floor((pnn50 or 0.0) * 100 + 0.5))
    return f"HRV: SDNN={(sdnn or 0.0):.3f}s, RMSSD={(rmssd or 0.0):.3f}s, pNN50={percent}%"


def interpret_findings(
    rr_intervals: np.ndarray,
    mean_rr: float,
    sdnn: float,
    rmssd: float,
    pnn50: float,
    peak_indices: Optional[np.ndarray] = None,
    fs: Optional[float] = None,
    thresholds: RhythmThresholds = THRESHOLDS,
) -> FindingRecord:
    """
    Evaluate every rhythm rule and build the Finding Record.

    Args:
        rr_intervals: RR intervals in seconds.
        mean_rr: Mean RR interval in seconds (0 when fewer than two beats).
        sdnn: SDNN in seconds.
        rmssd: RMSSD in seconds.
        pnn50: pNN50 as a fraction.
        peak_indices: Detected R-peaks (used for the beat count).
        fs: Sampling frequency in Hz (validated when given).
        thresholds: Rule thresholds.

    Returns:
        FindingRecord.

    Example:
        >>> record = interpret_findings(rr, hrv.mean_rr, hrv.sdnn, hrv.rmssd, hrv.pnn50, peaks, 250)
        >>> print(record.text)
        Normal heart rate (HR=60 bpm) · Rhythm: No strong AFib signature detected · HRV: ...
    """
    if fs is not None:
        validate_sampling_rate(fs)

    rr = np.asarray(rr_intervals, dtype=float)
    findings: List[str] = []

    heart_rate = classify_heart_rate(mean_rr, thresholds)
    findings.append(heart_rate.label)

    afib = assess_afib(sdnn, rmssd, pnn50, thresholds)
    findings.append(afib.label)

    pvc = detect_pvc_candidates(rr, thresholds)
    if pvc.detected:
        findings.append(pvc.label)

    pauses = detect_long_pauses(rr, thresholds)
    if pauses.detected:
        findings.append(pauses.label)

    hrv_summary = format_hrv_summary(sdnn, rmssd, pnn50)
    findings.append(hrv_summary)

    n_beats = len(peak_indices) if peak_indices is not None else (len(rr) + 1 if len(rr) else 0)

    logger.info(f"Findings: {FINDING_SEPARATOR.join(findings)}")

    return FindingRecord(
        heart_rate=heart_rate,
        afib=afib,
        pvc=pvc,
        pauses=pauses,
        hrv_summary=hrv_summary,
        findings=findings,
        n_beats=n_beats,
        sdnn=float(sdnn or 0.0),
        rmssd=float(rmssd or 0.0),
        pnn50=float(pnn50 or 0.0),
    )


__all__ = [
    'FINDING_SEPARATOR',
    'FindingRecord',
    'format_hrv_summary',
    'interpret_findings',
]
