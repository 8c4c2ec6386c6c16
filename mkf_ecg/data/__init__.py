"""
Data loading modules for MKF-ECG.

Modules:
    loader: Text/CSV sample parsing, window cropping, WFDB records (ECGRecord)

Usage:
    >>> from mkf_ecg.data import load_samples, crop_to_window
    >>> samples = load_samples("recording.csv")
    >>> window = crop_to_window(samples, fs=250, window_seconds=30)
"""

from .loader import (
    DataLoaderError,
    RecordNotFoundError,
    InvalidRecordError,
    SampleParseError,
    ECGRecord,
    parse_samples,
    load_samples,
    crop_to_window,
    load_samples_as_dataframe,
    load_wfdb_record,
)

__all__ = [
    "DataLoaderError",
    "RecordNotFoundError",
    "InvalidRecordError",
    "SampleParseError",
    "ECGRecord",
    "parse_samples",
    "load_samples",
    "crop_to_window",
    "load_samples_as_dataframe",
    "load_wfdb_record",
]
