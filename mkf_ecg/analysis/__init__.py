"""
Analysis Module for MKF-ECG.

Turns detected R-peaks into RR intervals, HRV metrics and a Finding Record.

Modules:
    - hrv: RR intervals, time-domain HRV metrics, RR histogram
    - findings: Combines the rhythm rules into a Finding Record
"""

from .hrv import (
    HRVMetrics,
    compute_rr_intervals,
    successive_differences,
    compute_hrv_metrics,
    compute_hrv_from_peaks,
    heart_rate_bpm,
    rr_histogram,
)
from .findings import (
    FINDING_SEPARATOR,
    FindingRecord,
    format_hrv_summary,
    interpret_findings,
)

__all__ = [
    # HRV
    "HRVMetrics",
    "compute_rr_intervals",
    "successive_differences",
    "compute_hrv_metrics",
    "compute_hrv_from_peaks",
    "heart_rate_bpm",
    "rr_histogram",
    # Findings
    "FINDING_SEPARATOR",
    "FindingRecord",
    "format_hrv_summary",
    "interpret_findings",
]
