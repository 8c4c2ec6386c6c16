"""
ECG Analysis Pipeline.

Composes the stages left to right:
    raw samples
        -> baseline removal (moving-average subtraction)
        -> band-pass FIR (windowed sinc, 5-15 Hz by default)
        -> derivative -> squaring -> moving-window integration
        -> adaptive SPKI/NPKI beat detection
        -> RR intervals and HRV metrics
        -> rhythm findings

Every stage returns a new array; running the pipeline twice on the same
input gives identical results.

Example:
    >>> from mkf_ecg.pipeline import run_pipeline
    >>> result = run_pipeline(samples, fs=250)
    >>> print(result.n_beats, result.hrv.heart_rate_bpm)
    >>> print(result.findings.text)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from mkf_ecg.analysis.findings import FindingRecord, interpret_findings
from mkf_ecg.analysis.hrv import HRVMetrics, compute_hrv_metrics, compute_rr_intervals
from mkf_ecg.config import ECG, THRESHOLDS, RhythmThresholds
from mkf_ecg.data.loader import crop_to_window
from mkf_ecg.detection.beats import BeatDetectionResult, detect_beats
from mkf_ecg.dsp.baseline import remove_baseline
from mkf_ecg.dsp.filters import bandpass_filter, validate_band
from mkf_ecg.dsp.qrs_transform import compute_qrs_features
from mkf_ecg.errors import InsufficientDataError, InvalidParameterError

# Configure module logger
logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """
    Per-run pipeline parameters.

    Attributes:
        sampling_rate: Sampling frequency in Hz (default: 250.0).
        low_cut: Band-pass lower cut-off in Hz (default: 5.0).
        high_cut: Band-pass upper cut-off in Hz (default: 15.0).
        tap_count_hint: FIR length; None selects max(101, ~0.2 s of taps).
        thresholds: Rhythm classifier thresholds.
    """

    sampling_rate: float = ECG.SAMPLING_RATE
    low_cut: float = ECG.BANDPASS_LOW
    high_cut: float = ECG.BANDPASS_HIGH
    tap_count_hint: Optional[int] = None
    thresholds: RhythmThresholds = field(default_factory=lambda: THRESHOLDS)

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not math.isfinite(self.sampling_rate) or self.sampling_rate <= 0:
            raise InvalidParameterError(
                f"sampling_rate must be positive, got {self.sampling_rate}"
            )
        validate_band(self.low_cut, self.high_cut, self.sampling_rate)
        if self.tap_count_hint is not None and self.tap_count_hint < 1:
            raise InvalidParameterError(
                f"tap_count_hint must be at least 1, got {self.tap_count_hint}"
            )


@dataclass
class PipelineResult:
    """
    Every intermediate and final output of one pipeline run.

    Attributes:
        raw: Input samples as float64.
        detrended: Samples after baseline removal.
        kernel: Band-pass FIR kernel that was applied.
        filtered: Band-passed signal (R-peak indices point into this).
        derivative: 5-point derivative of the filtered signal.
        squared: Squared derivative.
        envelope: Integrated QRS envelope.
        peak_indices: Detected R-peaks, strictly increasing.
        rr_intervals: RR intervals in seconds.
        hrv: Time-domain HRV metrics.
        findings: Rhythm findings.
        sampling_rate: Sampling frequency in Hz.
        low_cut: Lower band-pass cut-off used for the run, in Hz.
        high_cut: Upper band-pass cut-off used for the run, in Hz.
        detection: Full detector output (candidates and detector levels).
    """

    raw: np.ndarray
    detrended: np.ndarray
    kernel: np.ndarray
    filtered: np.ndarray
    derivative: np.ndarray
    squared: np.ndarray
    envelope: np.ndarray
    peak_indices: np.ndarray
    rr_intervals: np.ndarray
    hrv: HRVMetrics
    findings: FindingRecord
    sampling_rate: float
    low_cut: float = ECG.BANDPASS_LOW
    high_cut: float = ECG.BANDPASS_HIGH
    detection: Optional[BeatDetectionResult] = None

    @property
    def n_beats(self) -> int:
        return len(self.peak_indices)

    @property
    def duration_seconds(self) -> float:
        return len(self.raw) / self.sampling_rate

    @property
    def time_axis(self) -> np.ndarray:
        """Sample times in seconds."""
        return np.arange(len(self.raw)) / self.sampling_rate

    def __repr__(self) -> str:
        return (
            f"PipelineResult(n_samples={len(self.raw)}, fs={self.sampling_rate:g}, "
            f"n_beats={self.n_beats}, bpm={self.hrv.heart_rate_bpm})"
        )


class ECGPipeline:
    """
    Runs the detection pipeline with a fixed configuration.

    Attributes:
        config: PipelineConfig instance with parameters.

    Example:
        >>> pipeline = ECGPipeline(PipelineConfig(sampling_rate=360.0))
        >>> result = pipeline.process(samples)
        >>> peaks = result.peak_indices
    """

    def __init__(self, config: Optional[PipelineConfig] = None) -> None:
        self.config = config or PipelineConfig()
        logger.debug(f"Initialized ECGPipeline with config: {self.config}")

    def process(self, samples: np.ndarray) -> PipelineResult:
        """
        Run every stage on a sample buffer.

        Args:
            samples: Raw ECG samples (1-D).

        Returns:
            PipelineResult with intermediate signals, peaks, HRV and findings.

        Raises:
            InsufficientDataError: If the buffer is empty.
            InvalidParameterError: If the buffer is not one-dimensional.
        """
        if samples is None:
            raise InsufficientDataError("Input ECG signal is empty or None")
        raw = np.array(samples, dtype=float)
        if raw.ndim != 1:
            raise InvalidParameterError(f"Expected a 1-D sample buffer, got shape {raw.shape}")
        if raw.size == 0:
            raise InsufficientDataError("Input ECG signal is empty or None")

        fs = self.config.sampling_rate

        # Step 1: Baseline removal
        detrended = remove_baseline(raw, fs)

        # Step 2: Band-pass filter
        filtered, kernel = bandpass_filter(
            detrended,
            fs,
            low_cut=self.config.low_cut,
            high_cut=self.config.high_cut,
            n_taps=self.config.tap_count_hint,
        )

        # Step 3: QRS feature transform
        features = compute_qrs_features(filtered, fs)

        # Step 4: Beat detection
        detection = detect_beats(features.envelope, filtered, fs)
        peaks = detection.peak_indices

        # Step 5: RR intervals and HRV
        rr = compute_rr_intervals(peaks, fs)
        hrv = compute_hrv_metrics(rr, pnn50_threshold=self.config.thresholds.PNN50_DIFF_S)

        # Step 6: Rhythm findings
        findings = interpret_findings(
            rr,
            hrv.mean_rr,
            hrv.sdnn,
            hrv.rmssd,
            hrv.pnn50,
            peaks,
            fs,
            thresholds=self.config.thresholds,
        )

        logger.info(
            f"Pipeline complete: {len(raw)} samples @ {fs:g} Hz, "
            f"{len(peaks)} beats, HR={hrv.heart_rate_bpm} bpm"
        )

        return PipelineResult(
            raw=raw,
            detrended=detrended,
            kernel=kernel,
            filtered=filtered,
            derivative=features.derivative,
            squared=features.squared,
            envelope=features.envelope,
            peak_indices=peaks,
            rr_intervals=rr,
            hrv=hrv,
            findings=findings,
            sampling_rate=fs,
            low_cut=self.config.low_cut,
            high_cut=self.config.high_cut,
            detection=detection,
        )


def run_pipeline(
    samples: np.ndarray,
    fs: float = ECG.SAMPLING_RATE,
    low_cut: float = ECG.BANDPASS_LOW,
    high_cut: float = ECG.BANDPASS_HIGH,
    tap_count_hint: Optional[int] = None,
    thresholds: RhythmThresholds = THRESHOLDS,
) -> PipelineResult:
    """
    Convenience function to analyze a sample buffer.

    Args:
        samples: Raw ECG samples.
        fs: Sampling frequency in Hz.
        low_cut: Band-pass lower cut-off in Hz.
        high_cut: Band-pass upper cut-off in Hz.
        tap_count_hint: FIR length override.
        thresholds: Rhythm classifier thresholds.

    Returns:
        PipelineResult.

    Raises:
        InvalidParameterError: On a bad sampling rate, band or tap count.
        InsufficientDataError: On an empty buffer.
    """
    config = PipelineConfig(
        sampling_rate=fs,
        low_cut=low_cut,
        high_cut=high_cut,
        tap_count_hint=tap_count_hint,
        thresholds=thresholds,
    )
    return ECGPipeline(config).process(samples)


def analyze_recording(
    samples: np.ndarray,
    fs: float = ECG.SAMPLING_RATE,
    window_seconds: float = ECG.WINDOW_SECONDS,
    **kwargs,
) -> PipelineResult:
    """
    Analyze a loaded recording: minimum-length check, crop, run the pipeline.

    The recording must hold at least ECG.MIN_SAMPLES samples; only the
    first round(window_seconds * fs) samples are analyzed.

    Args:
        samples: Parsed ECG samples.
        fs: Sampling frequency in Hz.
        window_seconds: Analysis window in seconds.
        **kwargs: Forwarded to run_pipeline (low_cut, high_cut, ...).

    Returns:
        PipelineResult for the cropped window.

    Raises:
        InsufficientDataError: If the recording is shorter than ECG.MIN_SAMPLES.
    """
    values = np.asarray(samples, dtype=float)
    if len(values) < ECG.MIN_SAMPLES:
        raise InsufficientDataError(
            f"ECG too short: {len(values)} samples (need at least {ECG.MIN_SAMPLES})"
        )

    cropped = crop_to_window(values, fs, window_seconds)
    if len(cropped) < len(values):
        logger.info(f"Cropped recording to {len(cropped)} of {len(values)} samples")

    return run_pipeline(cropped, fs, **kwargs)


__all__ = [
    'PipelineConfig',
    'PipelineResult',
    'ECGPipeline',
    'run_pipeline',
    'analyze_recording',
]
