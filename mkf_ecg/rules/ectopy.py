"""
Premature Beat (PVC) Candidate Detection.

A premature ventricular contraction arrives early and is followed by a
compensatory pause. For each interior RR index i:

    rr[i]   < 0.8  * rr[i-1]    (premature)
    rr[i+1] > 1.15 * rr[i-1]    (compensatory pause)

marks index i as a candidate. Needs at least three RR intervals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from mkf_ecg.config import THRESHOLDS, RhythmThresholds

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class PVCResult:
    """
    Result of premature beat detection.

    Attributes:
        indices: RR indices flagged as premature.
        label: Finding text ("" when no candidates).
    """

    indices: List[int] = field(default_factory=list)
    label: str = ""

    @property
    def count(self) -> int:
        return len(self.indices)

    @property
    def detected(self) -> bool:
        return self.count > 0

    def __repr__(self) -> str:
        return f"PVCResult(count={self.count}, indices={self.indices})"


def detect_pvc_candidates(
    rr_intervals: np.ndarray,
    thresholds: RhythmThresholds = THRESHOLDS,
) -> PVCResult:
    """
    Flag premature beats followed by a compensatory pause.

    Args:
        rr_intervals: RR intervals in seconds.
        thresholds: Rule thresholds.

    Returns:
        PVCResult with the flagged RR indices.

    Example:
        >>> detect_pvc_candidates(np.array([0.8, 0.8, 0.5, 1.0, 0.8])).indices
        [2]
    """
    rr = np.asarray(rr_intervals, dtype=float)
    if len(rr) < 3:
        return PVCResult()

    prev = rr[:-2]
    curr = rr[1:-1]
    nxt = rr[2:]

    premature = curr < thresholds.PVC_PREMATURE_RATIO * prev
    compensatory = nxt > thresholds.PVC_COMPENSATORY_RATIO * prev
    indices = (np.flatnonzero(premature & compensatory) + 1).tolist()

    label = f"PVCs detected: {len(indices)} candidate(s)" if indices else ""
    if indices:
        logger.info(f"Premature beat candidates at RR indices {indices}")

    return PVCResult(indices=indices, label=label)
