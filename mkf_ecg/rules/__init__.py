"""
Rule Engine Module for MKF-ECG.

Stateless heuristic rules evaluated over heart rate and HRV statistics.

Modules:
    - heart_rate: Heart rate category (bradycardia / normal / tachycardia)
    - afib: Atrial fibrillation heuristic (SDNN, RMSSD, pNN50 rule count)
    - ectopy: Premature beat (PVC) candidates with compensatory pause
    - pauses: Long pauses (RR > 3 s)

The thresholds are heuristic approximations, not clinically validated.

Example:
    >>> from mkf_ecg.rules import classify_heart_rate, assess_afib
    >>> hr = classify_heart_rate(mean_rr=0.8)
    >>> af = assess_afib(sdnn=0.05, rmssd=0.03, pnn50=0.1)
"""

from .heart_rate import classify_heart_rate, HeartRateCategory, HeartRateResult
from .afib import assess_afib, AFibLikelihood, AFibResult
from .ectopy import detect_pvc_candidates, PVCResult
from .pauses import detect_long_pauses, PauseResult

__all__ = [
    # Heart rate
    "classify_heart_rate",
    "HeartRateCategory",
    "HeartRateResult",
    # AFib
    "assess_afib",
    "AFibLikelihood",
    "AFibResult",
    # Ectopy
    "detect_pvc_candidates",
    "PVCResult",
    # Pauses
    "detect_long_pauses",
    "PauseResult",
]
