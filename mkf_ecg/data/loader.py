"""
ECG Sample Loader.

Loads single-lead ECG recordings from plain text/CSV exports or from
PhysioNet WFDB records (e.g. the MIT-BIH Arrhythmia Database).

This module provides:
    - parse_samples: Parse uploaded text into a sample buffer
    - load_samples: Read a text/CSV file from disk
    - crop_to_window: Keep the first N seconds of a recording
    - ECGRecord / load_wfdb_record: One channel of a WFDB record

Text parsing rules:
    - Lines are split on LF or CRLF, trimmed, and empty lines dropped.
    - Each line is split on commas; the first field that starts with a
      number contributes one sample ("12.5mV" reads as 12.5).
    - Lines without any numeric field are skipped.

Example:
    >>> samples = load_samples("recording.csv")
    >>> window = crop_to_window(samples, fs=250, window_seconds=30)
    >>> record = load_wfdb_record("data/mitdb/100")
    >>> print(f"Duration: {record.duration_seconds:.1f} seconds")
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import numpy as np
import pandas as pd
import wfdb

from mkf_ecg.errors import InvalidParameterError
from mkf_ecg.utils.signal_utils import seconds_to_samples, validate_sampling_rate

# Configure module logger
logger = logging.getLogger(__name__)

# Leading decimal number of a field, after optional whitespace
_LEADING_NUMBER = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)
_LINE_BREAK = re.compile(r"\r?\n")


class DataLoaderError(Exception):
    """Base exception for data loader errors."""
    pass


class RecordNotFoundError(DataLoaderError):
    """Raised when a requested file or record cannot be found."""
    pass


class InvalidRecordError(DataLoaderError):
    """Raised when a record has invalid or missing data."""
    pass


class SampleParseError(DataLoaderError):
    """Raised when text input contains no numeric samples."""
    pass


@dataclass
class ECGRecord:
    """
    Container for one ECG channel.

    Attributes:
        record_id: Record identifier (e.g., '100').
        signal: ECG samples as numpy array.
        sampling_rate: Sampling frequency in Hz.
        channel_name: Name of the loaded channel (e.g., 'MLII').
        units: Physical units of the signal (e.g., 'mV').
        metadata: Additional record information (channel names, comments).

    Example:
        >>> record = load_wfdb_record("data/mitdb/100")
        >>> result = analyze_recording(record.signal, record.sampling_rate)
    """

    record_id: str
    signal: np.ndarray
    sampling_rate: float
    channel_name: str = ""
    units: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def timestamps(self) -> np.ndarray:
        """Sample times in seconds."""
        return np.arange(self.n_samples) / self.sampling_rate

    @property
    def n_samples(self) -> int:
        return len(self.signal)

    @property
    def duration_seconds(self) -> float:
        return self.n_samples / self.sampling_rate

    def __repr__(self) -> str:
        return (
            f"ECGRecord(id={self.record_id}, channel={self.channel_name}, "
            f"fs={self.sampling_rate:g}Hz, duration={self.duration_seconds:.1f}s)"
        )


def _first_numeric_field(line: str) -> Optional[float]:
    for column in line.split(","):
        match = _LEADING_NUMBER.match(column)
        if match:
            return float(match.group(1).replace("Infinity", "inf"))
    return None


def parse_samples(text: Union[str, bytes]) -> np.ndarray:
    """
    Parse text into a sample buffer, one sample per line.

    Args:
        text: File contents (bytes are decoded as UTF-8).

    Returns:
        Samples as a float64 array.

    Raises:
        SampleParseError: If no line contains a numeric field.

    Example:
        >>> parse_samples("time,mv\\n0.000,0.12\\n0.004,0.15\\n")
        array([0.   , 0.004])
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8", errors="replace")

    lines = [line.strip() for line in _LINE_BREAK.split(text)]
    lines = [line for line in lines if line != ""]

    values = []
    skipped = 0
    for line in lines:
        value = _first_numeric_field(line)
        if value is None:
            skipped += 1
            continue
        values.append(value)

    if not values:
        raise SampleParseError(
            f"No numeric samples found in {len(lines)} non-empty line(s)"
        )
    if skipped:
        logger.warning(f"Skipped {skipped} line(s) without a numeric field")

    logger.debug(f"Parsed {len(values)} samples")
    return np.array(values, dtype=float)


def load_samples(path: Union[str, Path]) -> np.ndarray:
    """
    Read a text/CSV recording from disk.

    Raises:
        RecordNotFoundError: If the file does not exist.
        SampleParseError: If the file contains no numeric samples.
    """
    path = Path(path)
    if not path.is_file():
        raise RecordNotFoundError(f"Recording not found: {path}")

    samples = parse_samples(path.read_text(encoding="utf-8", errors="replace"))
    logger.info(f"Loaded {len(samples)} samples from {path.name}")
    return samples


def crop_to_window(
    samples: np.ndarray,
    fs: float,
    window_seconds: float,
) -> np.ndarray:
    """
    Keep the first round(window_seconds * fs) samples.

    Args:
        samples: Sample buffer.
        fs: Sampling frequency in Hz.
        window_seconds: Window length in seconds.

    Returns:
        Cropped copy of the samples (unchanged length if already shorter).

    Raises:
        InvalidParameterError: If fs or window_seconds is not positive.

    Example:
        >>> len(crop_to_window(np.zeros(10000), fs=250, window_seconds=30))
        7500
    """
    fs = validate_sampling_rate(fs)
    if not np.isfinite(window_seconds) or window_seconds <= 0:
        raise InvalidParameterError(f"window_seconds must be positive, got {window_seconds}")

    max_samples = seconds_to_samples(window_seconds, fs)
    return np.array(samples[:max_samples], dtype=float)


def load_samples_as_dataframe(samples: np.ndarray, fs: float) -> pd.DataFrame:
    """
    Wrap a sample buffer in a DataFrame.

    Returns:
        DataFrame with columns: timestamp (seconds), ecg.

    Example:
        >>> df = load_samples_as_dataframe(samples, fs=250)
        >>> print(df.head())
    """
    fs = validate_sampling_rate(fs)
    values = np.asarray(samples, dtype=float)
    return pd.DataFrame({
        'timestamp': np.arange(len(values)) / fs,
        'ecg': values,
    })


def load_wfdb_record(record_path: Union[str, Path], channel: int = 0) -> ECGRecord:
    """
    Load one channel of a WFDB record.

    Args:
        record_path: Path to the record without extension (e.g., 'data/mitdb/100').
        channel: Channel index to load (default: 0).

    Returns:
        ECGRecord with the physical signal of that channel.

    Raises:
        RecordNotFoundError: If the .hea header does not exist.
        InvalidRecordError: If the record cannot be read or has no such channel.

    Example:
        >>> record = load_wfdb_record("data/mitdb/100")
        >>> print(record)
    """
    record_path = Path(record_path)
    header = record_path.with_name(record_path.name + ".hea")
    if not header.exists():
        raise RecordNotFoundError(f"Record '{record_path.name}' not found in {record_path.parent}")

    try:
        record = wfdb.rdrecord(str(record_path))
    except Exception as e:
        raise InvalidRecordError(
            f"Failed to load record '{record_path.name}': {e}"
        ) from e

    if record.p_signal is None or not 0 <= channel < record.n_sig:
        raise InvalidRecordError(
            f"Channel {channel} not available in record '{record_path.name}'. "
            f"Available signals: {record.sig_name}"
        )

    signal = record.p_signal[:, channel].astype(float)
    metadata: dict[str, Any] = {
        'n_signals': record.n_sig,
        'signal_names': record.sig_name,
        'units': record.units,
        'comments': getattr(record, 'comments', []),
    }

    logger.debug(
        f"Loaded record {record_path.name} channel {record.sig_name[channel]}: "
        f"{len(signal) / record.fs:.1f} s @ {record.fs:g} Hz"
    )

    return ECGRecord(
        record_id=record_path.name,
        signal=signal,
        sampling_rate=float(record.fs),
        channel_name=record.sig_name[channel],
        units=record.units[channel] if record.units else "",
        metadata=metadata,
    )


__all__ = [
    'DataLoaderError',
    'RecordNotFoundError',
    'InvalidRecordError',
    'SampleParseError',
    'ECGRecord',
    'parse_samples',
    'load_samples',
    'crop_to_window',
    'load_samples_as_dataframe',
    'load_wfdb_record',
]
