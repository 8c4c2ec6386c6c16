"""
MKF-ECG Dashboard - Streamlit Application.

Upload a single-column CSV/text export of ECG samples, set the sampling
rate and analysis window, and view detected beats, HRV metrics, rhythm
findings and charts. Without an upload a synthetic recording is analyzed.

Usage:
    streamlit run mkf_ecg/ui/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Dict, Optional
import logging

import numpy as np
import streamlit as st

# Add repository root to path
root_path = Path(__file__).parent.parent.parent
sys.path.insert(0, str(root_path))

from mkf_ecg.config import ECG
from mkf_ecg.data.loader import DataLoaderError, parse_samples
from mkf_ecg.errors import ECGAnalysisError
from mkf_ecg.pipeline import PipelineResult, analyze_recording
from mkf_ecg.ui.plots import (
    create_ecg_plot,
    create_filter_response_plot,
    create_pipeline_stages_plot,
    create_rr_histogram,
    heart_rate_color,
)
from mkf_ecg.utils.synthetic import generate_synthetic_ecg

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================

MISSING = "--"

# Regular rhythm with one premature beat and its compensatory pause
DEMO_RR_INTERVALS = [0.8] * 12 + [0.55, 1.05] + [0.8] * 20


# ============================================================================
# Pipeline Functions
# ============================================================================

def format_metrics(result: PipelineResult) -> Dict[str, str]:
    """
    Display strings for the metric tiles.

    Zero values (no beats, no RR intervals) are shown as "--".
    """
    hrv = result.hrv
    return {
        'Beats': str(result.n_beats),
        'Heart rate (bpm)': str(hrv.heart_rate_bpm) if hrv.mean_rr else MISSING,
        'SDNN (s)': f"{hrv.sdnn:.3f}" if hrv.sdnn else MISSING,
        'RMSSD (s)': f"{hrv.rmssd:.3f}" if hrv.rmssd else MISSING,
        'pNN50': f"{int(np.floor(hrv.pnn50 * 100 + 0.5))}%" if hrv.pnn50 else MISSING,
        'Mean RR (s)': f"{hrv.mean_rr:.3f}" if hrv.mean_rr else MISSING,
    }


@st.cache_data
def load_demo_samples(fs: float) -> np.ndarray:
    """Synthetic recording used when nothing is uploaded."""
    return generate_synthetic_ecg(
        DEMO_RR_INTERVALS,
        fs=fs,
        wander_amplitude=0.3,
        noise_std=0.02,
    )


# ============================================================================
# UI Components
# ============================================================================

def render_sidebar():
    """Render the sidebar with upload and settings."""
    st.sidebar.title("🫀 Recording")
    uploaded = st.sidebar.file_uploader(
        "Single-column CSV of ECG samples",
        type=["csv", "txt"],
    )

    st.sidebar.markdown("---")
    st.sidebar.subheader("⚙️ Settings")
    fs = st.sidebar.number_input(
        "Sampling rate (Hz)", min_value=1.0, value=float(ECG.SAMPLING_RATE), step=1.0
    )
    window_seconds = st.sidebar.number_input(
        "Window length (s)", min_value=1.0, value=float(ECG.WINDOW_SECONDS), step=1.0
    )

    st.sidebar.markdown("---")
    st.sidebar.caption("Heuristic screening aid, not a diagnosis.")

    return uploaded, fs, window_seconds


def render_results(result: PipelineResult, source: str):
    """Render metrics, findings and charts."""
    findings = result.findings
    color = heart_rate_color(findings.heart_rate.category)

    st.markdown(
        f"""
        <div style="background-color: {color}; padding: 15px; border-radius: 10px; margin-bottom: 20px;">
            <h3 style="color: white; margin: 0;">{findings.heart_rate_label}</h3>
            <p style="color: white; margin: 5px 0 0 0;">{source} | {result.duration_seconds:.1f} s @ {result.sampling_rate:g} Hz</p>
        </div>
        """,
        unsafe_allow_html=True
    )

    columns = st.columns(6)
    for column, (label, value) in zip(columns, format_metrics(result).items()):
        column.metric(label, value)

    st.subheader("🔍 Findings")
    st.write(findings.text)

    col1, col2 = st.columns([2, 1])
    with col1:
        st.plotly_chart(
            create_ecg_plot(result.filtered, result.peak_indices, result.sampling_rate),
            use_container_width=True,
        )
    with col2:
        st.plotly_chart(create_rr_histogram(result.rr_intervals), use_container_width=True)

    with st.expander("🔧 Pipeline stages"):
        st.plotly_chart(create_pipeline_stages_plot(result), use_container_width=True)
        st.plotly_chart(
            create_filter_response_plot(
                result.kernel, result.sampling_rate, result.low_cut, result.high_cut
            ),
            use_container_width=True,
        )


# ============================================================================
# Main Application
# ============================================================================

def main():
    """Main Streamlit application."""
    st.set_page_config(
        page_title="MKF-ECG",
        page_icon="🫀",
        layout="wide",
        initial_sidebar_state="expanded"
    )

    st.title("🫀 MKF-ECG - Beat detection and rhythm screening")
    st.markdown("---")

    uploaded, fs, window_seconds = render_sidebar()

    samples: Optional[np.ndarray] = None
    try:
        if uploaded is not None:
            samples = parse_samples(uploaded.getvalue())
            source = uploaded.name
        else:
            st.info("No file uploaded, analyzing a synthetic demo recording")
            samples = load_demo_samples(fs)
            source = "Synthetic demo"

        with st.spinner("Analyzing..."):
            result = analyze_recording(samples, fs=fs, window_seconds=window_seconds)
        render_results(result, source)

    except (DataLoaderError, ECGAnalysisError) as e:
        st.error(str(e))
        logger.warning(f"Analysis rejected: {e}")
    except Exception as e:
        st.error(f"Analysis failed: {e}")
        logger.exception("Pipeline error")


if __name__ == "__main__":
    main()
