"""
Adaptive Beat (R-peak) Detector.

Scans the QRS envelope's local maxima left to right with two running
levels, in the style of Pan-Tompkins:

    SPKI  running estimate of the QRS peak level
    NPKI  running estimate of the noise peak level
    THR   NPKI + 0.25 * (SPKI - NPKI)

A maximum above THR that is more than the refractory period (0.25 s)
after the last accepted candidate is a QRS. Its position is refined to the
largest filtered sample within +/-50 ms and SPKI learns from it; any other
maximum updates NPKI. THR is recomputed after every maximum.

The levels live in an immutable DetectorState folded over the maxima, so
detection is a pure function of (envelope, filtered, fs).

A final pass drops refined peaks closer than 0.2 s to the previously kept
one, collapsing candidates that refined onto the same beat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from functools import partial, reduce
from typing import List, Optional, Tuple

import numpy as np

from mkf_ecg.config import ECG
from mkf_ecg.errors import InsufficientDataError, InvalidParameterError
from mkf_ecg.utils.signal_utils import seconds_to_samples, validate_sampling_rate

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorParams:
    """
    Sample-domain parameters of the detector for one sampling rate.

    Attributes:
        refractory: Minimum spacing between raw candidates (samples).
        search_half: Half width of the refinement window (samples).
        dedup_distance: Minimum spacing between final peaks (samples).
        seed_length: Length of the initial segment used for seeding (samples).
        learning_rate: Weight of a new maximum in the SPKI/NPKI update.
        threshold_ratio: Position of the threshold between NPKI and SPKI.
        seed_fallback_ratio: SPKI seed as a fraction of max(envelope).
        noise_seed_ratio: NPKI seed as a fraction of SPKI.
    """

    refractory: int
    search_half: int
    dedup_distance: int
    seed_length: int
    learning_rate: float = ECG.LEVEL_LEARNING_RATE
    threshold_ratio: float = ECG.THRESHOLD_RATIO
    seed_fallback_ratio: float = ECG.SEED_FALLBACK_RATIO
    noise_seed_ratio: float = ECG.NOISE_SEED_RATIO

    @classmethod
    def for_sampling_rate(
        cls,
        fs: float,
        n_samples: int,
        refractory_seconds: float = ECG.REFRACTORY_SECONDS,
        search_half_seconds: float = ECG.SEARCH_HALF_SECONDS,
        dedup_seconds: float = ECG.DEDUP_SECONDS,
        seed_seconds: float = ECG.SEED_SECONDS,
    ) -> "DetectorParams":
        """Convert the time-domain settings to samples at `fs`."""
        fs = validate_sampling_rate(fs)
        for name, value in (
            ('refractory_seconds', refractory_seconds),
            ('search_half_seconds', search_half_seconds),
            ('dedup_seconds', dedup_seconds),
            ('seed_seconds', seed_seconds),
        ):
            if value < 0:
                raise InvalidParameterError(f"{name} must be non-negative, got {value}")

        return cls(
            refractory=seconds_to_samples(refractory_seconds, fs),
            search_half=seconds_to_samples(search_half_seconds, fs),
            dedup_distance=seconds_to_samples(dedup_seconds, fs),
            seed_length=min(n_samples, seconds_to_samples(seed_seconds, fs)),
        )


@dataclass(frozen=True)
class DetectorState:
    """
    Accumulator carried through the scan.

    Attributes:
        spki: Signal peak level.
        npki: Noise peak level.
        threshold: Current detection threshold.
        last_qrs: Raw index of the last accepted candidate (None before the first).
        raw_candidates: Accepted envelope maxima, in scan order.
        refined_candidates: Refined R-peak index of each accepted maximum.
    """

    spki: float
    npki: float
    threshold: float
    last_qrs: Optional[int] = None
    raw_candidates: Tuple[int, ...] = ()
    refined_candidates: Tuple[int, ...] = ()


@dataclass
class BeatDetectionResult:
    """
    Result of adaptive beat detection.

    Attributes:
        peak_indices: Final R-peak indices into the filtered signal (strictly increasing).
        raw_candidates: Accepted envelope maxima before refinement.
        refined_candidates: Refined positions before de-duplication.
        local_maxima: Every strict local maximum of the envelope that was scanned.
        initial_state: Seeded detector state.
        final_state: Detector state after the last maximum.
    """

    peak_indices: np.ndarray
    raw_candidates: np.ndarray
    refined_candidates: np.ndarray
    local_maxima: np.ndarray
    initial_state: Optional[DetectorState] = None
    final_state: Optional[DetectorState] = None

    @property
    def n_beats(self) -> int:
        """Number of detected beats."""
        return len(self.peak_indices)

    def __repr__(self) -> str:
        return (
            f"BeatDetectionResult(n_beats={self.n_beats}, "
            f"candidates={len(self.raw_candidates)}, maxima={len(self.local_maxima)})"
        )


def find_local_maxima(envelope: np.ndarray) -> np.ndarray:
    """
    Strict local maxima of the envelope.

    x[i] > x[i-1] and x[i] > x[i+1], scanned over 2 <= i <= N-3 so the
    zeroed ends of the derivative never produce a maximum.

    Example:
        >>> find_local_maxima(np.array([0, 0, 1, 3, 1, 0, 0], dtype=float))
        array([3])
    """
    x = np.asarray(envelope, dtype=float)
    if x.size < 5:
        return np.array([], dtype=int)

    core = x[2:-2]
    is_peak = (core > x[1:-3]) & (core > x[3:-1])
    return np.flatnonzero(is_peak) + 2


def compute_threshold(spki: float, npki: float, ratio: float = ECG.THRESHOLD_RATIO) -> float:
    """Detection threshold between the noise and signal levels."""
    return npki + ratio * (spki - npki)


def seed_detector_state(
    envelope: np.ndarray,
    local_maxima: np.ndarray,
    params: DetectorParams,
) -> DetectorState:
    """
    Seed SPKI/NPKI from the first seconds of the envelope.

    SPKI is the mean envelope value at the maxima inside the seed segment,
    or a fraction of the global maximum when the segment has none.
    """
    x = np.asarray(envelope, dtype=float)
    seed_peaks = local_maxima[local_maxima < params.seed_length]

    if len(seed_peaks) > 0:
        spki = float(np.mean(x[seed_peaks]))
    else:
        spki = float(np.max(x)) * params.seed_fallback_ratio
        logger.warning(
            f"No envelope maxima in the first {params.seed_length} samples; "
            f"seeding SPKI from the global maximum ({spki:.3g})"
        )

    npki = params.noise_seed_ratio * spki
    return DetectorState(
        spki=spki,
        npki=npki,
        threshold=compute_threshold(spki, npki, params.threshold_ratio),
    )


def refine_peak(filtered: np.ndarray, index: int, search_half: int) -> int:
    """
    Position of the largest filtered sample within index +/- search_half.

    The window is clipped to the buffer; ties keep the earliest sample.
    """
    start = max(0, index - search_half)
    end = min(len(filtered) - 1, index + search_half)
    return start + int(np.argmax(filtered[start:end + 1]))


def detector_step(
    state: DetectorState,
    index: int,
    envelope: np.ndarray,
    filtered: np.ndarray,
    params: DetectorParams,
) -> DetectorState:
    """
    Process one local maximum and return the next state.

    Args:
        state: Current accumulator.
        index: Index of the local maximum in the envelope.
        envelope: QRS envelope.
        filtered: Band-passed ECG used for refinement.
        params: Detector parameters.

    Returns:
        New DetectorState; `state` is left unchanged.
    """
    value = float(envelope[index])
    rate = params.learning_rate

    outside_refractory = state.last_qrs is None or (index - state.last_qrs) > params.refractory

    if value > state.threshold and outside_refractory:
        refined = refine_peak(filtered, index, params.search_half)
        spki = rate * value + (1 - rate) * state.spki
        return replace(
            state,
            spki=spki,
            threshold=compute_threshold(spki, state.npki, params.threshold_ratio),
            last_qrs=index,
            raw_candidates=state.raw_candidates + (index,),
            refined_candidates=state.refined_candidates + (refined,),
        )

    npki = rate * value + (1 - rate) * state.npki
    return replace(
        state,
        npki=npki,
        threshold=compute_threshold(state.spki, npki, params.threshold_ratio),
    )


def deduplicate_peaks(candidates: np.ndarray, min_distance: int) -> np.ndarray:
    """
    Keep a candidate only if it is more than `min_distance` samples after
    the previously kept one.

    Example:
        >>> deduplicate_peaks(np.array([100, 120, 400]), min_distance=50)
        array([100, 400])
    """
    kept: List[int] = []
    for peak in candidates:
        peak = int(peak)
        if not kept or (peak - kept[-1]) > min_distance:
            kept.append(peak)
    return np.asarray(kept, dtype=int)


def detect_beats(
    envelope: np.ndarray,
    filtered: np.ndarray,
    fs: float,
    refractory_seconds: float = ECG.REFRACTORY_SECONDS,
    search_half_seconds: float = ECG.SEARCH_HALF_SECONDS,
    dedup_seconds: float = ECG.DEDUP_SECONDS,
    seed_seconds: float = ECG.SEED_SECONDS,
) -> BeatDetectionResult:
    """
    Detect R-peaks with adaptive dual-level thresholding.

    Algorithm:
        1. Find strict local maxima of the envelope
        2. Seed SPKI/NPKI from the maxima in the first `seed_seconds`
        3. Fold detector_step over the maxima in index order
        4. De-duplicate refined positions closer than `dedup_seconds`

    Args:
        envelope: QRS envelope (integrated squared derivative).
        filtered: Band-passed ECG, same length as the envelope.
        fs: Sampling frequency in Hz.
        refractory_seconds: Minimum spacing of raw candidates (default: 0.25 s).
        search_half_seconds: Refinement half window (default: 0.05 s).
        dedup_seconds: Minimum spacing of final peaks (default: 0.2 s).
        seed_seconds: Seed segment length (default: 2.0 s).

    Returns:
        BeatDetectionResult; an envelope without maxima gives an empty result.

    Raises:
        InsufficientDataError: If the envelope is empty.
        InvalidParameterError: If the buffers differ in length or fs is invalid.

    Example:
        >>> result = detect_beats(features.envelope, filtered, fs=250)
        >>> print(f"{result.n_beats} beats")
    """
    x = np.asarray(envelope, dtype=float)
    f = np.asarray(filtered, dtype=float)

    if x.size == 0:
        raise InsufficientDataError("Cannot detect beats in an empty envelope")
    if x.size != f.size:
        raise InvalidParameterError(
            f"envelope ({x.size}) and filtered ({f.size}) lengths differ"
        )

    params = DetectorParams.for_sampling_rate(
        fs,
        x.size,
        refractory_seconds=refractory_seconds,
        search_half_seconds=search_half_seconds,
        dedup_seconds=dedup_seconds,
        seed_seconds=seed_seconds,
    )

    local_maxima = find_local_maxima(x)
    empty = np.array([], dtype=int)

    if len(local_maxima) == 0:
        logger.warning("Envelope has no local maxima; no beats detected")
        return BeatDetectionResult(
            peak_indices=empty,
            raw_candidates=empty,
            refined_candidates=empty,
            local_maxima=local_maxima,
        )

    initial = seed_detector_state(x, local_maxima, params)
    step = partial(detector_step, envelope=x, filtered=f, params=params)
    final = reduce(step, (int(i) for i in local_maxima), initial)

    refined = np.asarray(final.refined_candidates, dtype=int)
    peaks = deduplicate_peaks(refined, params.dedup_distance)

    logger.info(
        f"Beat detection: {len(local_maxima)} maxima, {len(refined)} candidates, "
        f"{len(peaks)} beats (SPKI={final.spki:.3g}, NPKI={final.npki:.3g})"
    )

    return BeatDetectionResult(
        peak_indices=peaks,
        raw_candidates=np.asarray(final.raw_candidates, dtype=int),
        refined_candidates=refined,
        local_maxima=local_maxima,
        initial_state=initial,
        final_state=final,
    )

