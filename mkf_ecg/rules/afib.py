"""
Atrial Fibrillation Heuristic.

Three boolean rules over the HRV metrics:
    - SDNN  > 0.12 s
    - RMSSD > 0.10 s
    - pNN50 > 0.20

Two or more rules met -> likely AFib (irregularly irregular rhythm).
Exactly one -> possible AFib. None -> no strong AFib signature.

This is a screening heuristic, not a validated AFib detector.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from mkf_ecg.config import THRESHOLDS, RhythmThresholds

# Configure module logger
logger = logging.getLogger(__name__)


class AFibLikelihood(Enum):
    """Outcome of the AFib rule count."""
    LIKELY = "Likely AFib"
    POSSIBLE = "Possible AFib"
    UNLIKELY = "No strong AFib signature"


_FINDING_TEMPLATES = {
    AFibLikelihood.LIKELY: "Rhythm: Likely AFib (irregularly irregular)",
    AFibLikelihood.POSSIBLE: "Rhythm: Possible AFib — correlate clinically",
    AFibLikelihood.UNLIKELY: "Rhythm: No strong AFib signature detected",
}


@dataclass
class AFibResult:
    """
    Result of the AFib heuristic.

    Attributes:
        likelihood: LIKELY / POSSIBLE / UNLIKELY.
        rules_met: Number of rules that fired (0-3).
        rules: Outcome of each rule by name.
        label: Human-readable finding.
    """

    likelihood: AFibLikelihood
    rules_met: int
    rules: Dict[str, bool] = field(default_factory=dict)
    label: str = ""

    @property
    def detected(self) -> bool:
        """True for likely or possible AFib."""
        return self.likelihood != AFibLikelihood.UNLIKELY

    def __repr__(self) -> str:
        return f"AFibResult({self.likelihood.name}, rules_met={self.rules_met}/3)"


def assess_afib(
    sdnn: float,
    rmssd: float,
    pnn50: float,
    thresholds: RhythmThresholds = THRESHOLDS,
) -> AFibResult:
    """
    Evaluate the AFib rules and count how many fire.

    Args:
        sdnn: SDNN in seconds.
        rmssd: RMSSD in seconds.
        pnn50: pNN50 as a fraction (0-1).
        thresholds: Rule thresholds.

    Returns:
        AFibResult.

    Example:
        >>> assess_afib(sdnn=0.15, rmssd=0.12, pnn50=0.1).likelihood
        <AFibLikelihood.LIKELY: 'Likely AFib'>
    """
    rules = {
        'sdnn': sdnn > thresholds.AF_SDNN_S,
        'rmssd': rmssd > thresholds.AF_RMSSD_S,
        'pnn50': pnn50 > thresholds.AF_PNN50,
    }
    rules_met = sum(rules.values())

    if rules_met >= thresholds.AF_LIKELY_MIN_RULES:
        likelihood = AFibLikelihood.LIKELY
    elif rules_met >= 1:
        likelihood = AFibLikelihood.POSSIBLE
    else:
        likelihood = AFibLikelihood.UNLIKELY

    if likelihood != AFibLikelihood.UNLIKELY:
        logger.info(f"AFib heuristic: {rules_met}/3 rules met ({likelihood.value})")

    return AFibResult(
        likelihood=likelihood,
        rules_met=rules_met,
        rules=rules,
        label=_FINDING_TEMPLATES[likelihood],
    )
