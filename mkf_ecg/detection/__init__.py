"""
Beat detection for MKF-ECG.

Modules:
    beats: Adaptive dual-level (SPKI/NPKI) R-peak detector with refractory
        gating, refinement on the filtered signal and de-duplication

Usage:
    >>> from mkf_ecg.detection import detect_beats
    >>> result = detect_beats(envelope, filtered, fs=250)
    >>> peaks = result.peak_indices
"""

from .beats import (
    BeatDetectionResult,
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

__all__ = [
    "BeatDetectionResult",
    "DetectorParams",
    "DetectorState",
    "compute_threshold",
    "deduplicate_peaks",
    "detect_beats",
    "detector_step",
    "find_local_maxima",
    "refine_peak",
    "seed_detector_state",
]
