"""
MKF-ECG - Single-lead ECG beat detection and rhythm screening.

A deterministic signal pipeline combining:
- Baseline wander removal and a windowed-sinc band-pass FIR
- Pan-Tompkins style QRS envelope (derivative, squaring, integration)
- Adaptive SPKI/NPKI R-peak detection
- Time-domain HRV metrics (mean RR, SDNN, RMSSD, pNN50)
- Rule-based rhythm findings (rate, AFib heuristic, PVCs, pauses)

Findings are heuristic screening aids, not a diagnosis.

Modules:
    config: Centralized configuration constants
    errors: Exception hierarchy
    data: Sample parsing and WFDB record loading
    dsp: Baseline removal, band-pass filter, QRS transform
    detection: Adaptive beat detector
    analysis: RR/HRV metrics and finding records
    rules: Rhythm rule implementations
    pipeline: End-to-end composition
    ui: Streamlit dashboard and Plotly charts
    utils: Reusable utility functions

Quick Start:
    >>> from mkf_ecg.data import load_samples
    >>> from mkf_ecg.pipeline import analyze_recording

    >>> samples = load_samples("recording.csv")
    >>> result = analyze_recording(samples, fs=250)
    >>> print(result.findings.text)
"""

__version__ = "1.0.0"

# Expose main configuration
from mkf_ecg.config import ECG, THRESHOLDS, COLORS
from mkf_ecg.errors import ECGAnalysisError, InvalidParameterError, InsufficientDataError

__all__ = [
    '__version__',
    'ECG',
    'THRESHOLDS',
    'COLORS',
    'ECGAnalysisError',
    'InvalidParameterError',
    'InsufficientDataError',
]
