"""
Exception hierarchy for MKF-ECG.

Parameter problems fail the whole run immediately. Degenerate statistics
(empty RR sequence, no successive differences) are not errors: they
resolve to 0.0 inside the analyzer and the run completes.
"""


class ECGAnalysisError(Exception):
    """Base exception for ECG analysis errors."""
    pass


class InvalidParameterError(ECGAnalysisError, ValueError):
    """Raised when a sampling rate, cut-off or window length is invalid."""
    pass


class InsufficientDataError(ECGAnalysisError):
    """Raised when a sample buffer is empty or too short to analyze."""
    pass


__all__ = [
    'ECGAnalysisError',
    'InvalidParameterError',
    'InsufficientDataError',
]
