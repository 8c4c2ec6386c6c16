"""
Unit tests for the sample loader.

Tests the text parsing rules, window cropping and WFDB record loading.
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import wfdb

from mkf_ecg.data import (
    DataLoaderError,
    ECGRecord,
    InvalidRecordError,
    RecordNotFoundError,
    SampleParseError,
    crop_to_window,
    load_samples,
    load_samples_as_dataframe,
    load_wfdb_record,
    parse_samples,
)
from mkf_ecg.errors import InvalidParameterError


class TestParseSamples:
    """Tests for text parsing."""

    def test_single_column(self):
        samples = parse_samples("1.5\n2.5\r\n\n  3.5  \n")
        np.testing.assert_array_equal(samples, [1.5, 2.5, 3.5])

    def test_first_numeric_column_wins(self):
        samples = parse_samples("0.004,0.12\n0.008,0.15\n")
        np.testing.assert_array_equal(samples, [0.004, 0.008])

    def test_non_numeric_fields_skipped(self):
        samples = parse_samples("id,12.5mV\nlead,-0.3\n")
        np.testing.assert_array_equal(samples, [12.5, -0.3])

    def test_header_line_skipped(self):
        samples = parse_samples("time,value\n1\n2\n")
        np.testing.assert_array_equal(samples, [1.0, 2.0])

    @pytest.mark.parametrize("text,expected", [
        ("-.5", -0.5),
        ("+2", 2.0),
        ("1e3", 1000.0),
        ("1e", 1.0),
        ("  7", 7.0),
        ("3.25abc", 3.25),
    ])
    def test_leading_number(self, text, expected):
        assert parse_samples(text)[0] == pytest.approx(expected)

    def test_infinity(self):
        assert np.isposinf(parse_samples("Infinity")[0])

    def test_bytes_input(self):
        np.testing.assert_array_equal(parse_samples(b"1\n2\n"), [1.0, 2.0])

    @pytest.mark.parametrize("text", ["", "\n\n", "x,y\nfoo\n"])
    def test_no_samples_raises(self, text):
        with pytest.raises(SampleParseError):
            parse_samples(text)

    def test_parse_error_is_loader_error(self):
        with pytest.raises(DataLoaderError):
            parse_samples("none")


class TestLoadSamples:
    """Tests for reading recordings from disk."""

    def test_load_csv(self, tmp_path):
        path = tmp_path / "recording.csv"
        path.write_text("0.1\n0.2\n0.3\n")
        np.testing.assert_allclose(load_samples(path), [0.1, 0.2, 0.3])

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordNotFoundError):
            load_samples(tmp_path / "missing.csv")

    def test_dataframe(self):
        df = load_samples_as_dataframe(np.array([1.0, 2.0, 3.0]), fs=250)
        assert list(df.columns) == ['timestamp', 'ecg']
        assert df['timestamp'].iloc[1] == pytest.approx(0.004)


class TestCropToWindow:
    """Tests for analysis window cropping."""

    def test_crop(self):
        assert len(crop_to_window(np.zeros(10000), fs=250, window_seconds=30)) == 7500

    def test_shorter_recording_unchanged(self):
        samples = np.arange(100, dtype=float)
        np.testing.assert_array_equal(crop_to_window(samples, fs=250, window_seconds=30), samples)

    def test_rounds_half_up(self):
        assert len(crop_to_window(np.zeros(10), fs=250, window_seconds=0.002)) == 1

    def test_returns_copy(self):
        samples = np.ones(100)
        cropped = crop_to_window(samples, fs=10, window_seconds=5)
        cropped[0] = 5.0
        assert samples[0] == 1.0

    @pytest.mark.parametrize("fs,window", [(0.0, 30.0), (250.0, 0.0), (250.0, -1.0)])
    def test_invalid_parameters(self, fs, window):
        with pytest.raises(InvalidParameterError):
            crop_to_window(np.zeros(100), fs=fs, window_seconds=window)


class TestWFDBRecord:
    """Tests for WFDB record loading."""

    @pytest.fixture
    def record_path(self, tmp_path) -> Path:
        t = np.arange(720) / 360.0
        signals = np.column_stack([np.sin(2 * np.pi * t), 0.5 * np.cos(2 * np.pi * t)])
        wfdb.wrsamp(
            'rec',
            fs=360,
            units=['mV', 'mV'],
            sig_name=['MLII', 'V5'],
            p_signal=signals,
            fmt=['16', '16'],
            write_dir=str(tmp_path),
        )
        return tmp_path / 'rec'

    def test_load_channel(self, record_path):
        record = load_wfdb_record(record_path, channel=1)

        assert isinstance(record, ECGRecord)
        assert record.record_id == 'rec'
        assert record.channel_name == 'V5'
        assert record.sampling_rate == 360.0
        assert record.n_samples == 720
        assert record.duration_seconds == pytest.approx(2.0)
        t = np.arange(720) / 360.0
        np.testing.assert_allclose(record.signal, 0.5 * np.cos(2 * np.pi * t), atol=1e-3)

    def test_missing_channel(self, record_path):
        with pytest.raises(InvalidRecordError):
            load_wfdb_record(record_path, channel=5)

    def test_missing_record(self, tmp_path):
        with pytest.raises(RecordNotFoundError):
            load_wfdb_record(tmp_path / "100")
