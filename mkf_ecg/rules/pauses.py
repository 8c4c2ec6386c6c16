"""
Long Pause Detection.

Any RR interval longer than 3.0 s is reported as a long pause.
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
class PauseResult:
    """
    Result of long pause detection.

    Attributes:
        indices: RR indices of the pauses.
        durations: Pause durations in seconds.
        label: Finding text ("" when no pauses).
    """

    indices: List[int] = field(default_factory=list)
    durations: List[float] = field(default_factory=list)
    label: str = ""

    @property
    def count(self) -> int:
        return len(self.indices)

    @property
    def detected(self) -> bool:
        return self.count > 0

    def __repr__(self) -> str:
        return f"PauseResult(count={self.count}, durations={self.durations})"


def detect_long_pauses(
    rr_intervals: np.ndarray,
    thresholds: RhythmThresholds = THRESHOLDS,
) -> PauseResult:
    """
    Report RR intervals above the pause limit.

    Example:
        >>> detect_long_pauses(np.array([0.8, 3.5, 0.8])).count
        1
    """
    rr = np.asarray(rr_intervals, dtype=float)
    mask = rr > thresholds.LONG_PAUSE_S
    indices = np.flatnonzero(mask).tolist()
    durations = [float(d) for d in rr[mask]]

    label = ""
    if indices:
        label = f"Long pause(s) detected (>{thresholds.LONG_PAUSE_S:g}s) : {len(indices)}"
        logger.warning(f"{len(indices)} long pause(s): {durations}")

    return PauseResult(indices=indices, durations=durations, label=label)
