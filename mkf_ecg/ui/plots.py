"""
ECG Visualization Utilities for MKF-ECG.

This module provides Plotly-based visualizations for the dashboard:
- Filtered ECG with R-peak markers
- RR interval histogram (0.2 s bins)
- Band-pass kernel frequency response
- Stage-by-stage view of one pipeline run
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from mkf_ecg.analysis.hrv import rr_histogram
from mkf_ecg.config import COLORS, ECG
from mkf_ecg.dsp.filters import frequency_response
from mkf_ecg.pipeline import PipelineResult
from mkf_ecg.rules.heart_rate import HeartRateCategory


_CATEGORY_COLORS = {
    HeartRateCategory.NORMAL: COLORS.NORMAL,
    HeartRateCategory.MILD_BRADYCARDIA: COLORS.WARNING,
    HeartRateCategory.TACHYCARDIA: COLORS.WARNING,
    HeartRateCategory.BRADYCARDIA: COLORS.CRITICAL,
    HeartRateCategory.HIGH_RATE: COLORS.CRITICAL,
    HeartRateCategory.NO_BEATS: COLORS.UNKNOWN,
}


def heart_rate_color(category: HeartRateCategory) -> str:
    """Badge colour for a heart rate category."""
    return _CATEGORY_COLORS[category]


def create_ecg_plot(
    signal: np.ndarray,
    peak_indices: Optional[np.ndarray] = None,
    sampling_rate: float = ECG.SAMPLING_RATE,
    title: str = "Filtered ECG",
    height: int = 350,
) -> go.Figure:
    """
    Create an interactive ECG trace with R-peak markers.

    Args:
        signal: Signal to draw (normally the band-passed ECG).
        peak_indices: Detected R-peaks (indices into `signal`).
        sampling_rate: Sampling rate in Hz.
        title: Plot title.
        height: Plot height in pixels.

    Returns:
        Plotly Figure object.

    Example:
        >>> fig = create_ecg_plot(result.filtered, result.peak_indices, 250)
        >>> st.plotly_chart(fig)
    """
    y = np.asarray(signal, dtype=float)
    time_seconds = np.arange(len(y)) / sampling_rate

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=time_seconds,
        y=y,
        mode='lines',
        name='ECG',
        line=dict(color=COLORS.ECG, width=1.2),
        hovertemplate='t=%{x:.3f}s<br>%{y:.3f}<extra></extra>',
    ))

    if peak_indices is not None and len(peak_indices) > 0:
        peaks = np.asarray(peak_indices, dtype=int)
        fig.add_trace(go.Scatter(
            x=peaks / sampling_rate,
            y=y[peaks],
            mode='markers',
            name='R-peaks',
            marker=dict(color=COLORS.R_PEAK, size=7),
            hovertemplate='R @ %{x:.3f}s<extra></extra>',
        ))

    fig.update_layout(
        title=dict(text=title, font=dict(size=16), x=0.5),
        height=height,
        showlegend=True,
        legend=dict(orientation='h', yanchor='bottom', y=1.02, xanchor='right', x=1),
        hovermode='closest',
        paper_bgcolor=COLORS.BACKGROUND,
        plot_bgcolor='white',
    )
    fig.update_xaxes(title_text='Time (s)', gridcolor=COLORS.GRID)
    fig.update_yaxes(title_text='Amplitude', gridcolor=COLORS.GRID)

    return fig


def create_rr_histogram(
    rr_intervals: np.ndarray,
    bin_width: float = 0.2,
    height: int = 250,
) -> go.Figure:
    """
    Create a bar chart of RR intervals rounded to the nearest bin.

    Args:
        rr_intervals: RR intervals in seconds.
        bin_width: Bin width in seconds (default: 0.2 s).
        height: Plot height in pixels.

    Returns:
        Plotly Figure object (empty axes when there are no intervals).
    """
    counts = rr_histogram(rr_intervals, bin_width=bin_width)

    fig = go.Figure(go.Bar(
        x=[f"{value:.1f}s" for value in counts.index],
        y=counts.values,
        marker_color=COLORS.RR_BAR,
        hovertemplate='%{x}: %{y} interval(s)<extra></extra>',
    ))
    fig.update_layout(
        title='RR interval histogram',
        showlegend=False,
        height=height,
        paper_bgcolor=COLORS.BACKGROUND,
        plot_bgcolor='white',
    )
    fig.update_xaxes(title_text='RR (s)', type='category')
    fig.update_yaxes(title_text='Count', gridcolor=COLORS.GRID)

    return fig


def create_filter_response_plot(
    kernel: np.ndarray,
    sampling_rate: float = ECG.SAMPLING_RATE,
    low_cut: Optional[float] = None,
    high_cut: Optional[float] = None,
    height: int = 250,
) -> go.Figure:
    """
    Plot the magnitude response of a band-pass kernel.

    Args:
        kernel: FIR kernel.
        sampling_rate: Sampling rate in Hz.
        low_cut: Lower cut-off to mark (optional).
        high_cut: Upper cut-off to mark (optional).
        height: Plot height in pixels.

    Returns:
        Plotly Figure object.
    """
    freqs, magnitude = frequency_response(kernel, sampling_rate)

    fig = go.Figure(go.Scatter(
        x=freqs,
        y=magnitude,
        mode='lines',
        name='|H(f)|',
        line=dict(color=COLORS.ENVELOPE, width=1.5),
    ))
    for cut in (low_cut, high_cut):
        if cut is not None:
            fig.add_vline(x=cut, line_dash='dash', line_color=COLORS.UNKNOWN)

    fig.update_layout(
        title=f'Band-pass response ({len(kernel)} taps)',
        showlegend=False,
        height=height,
        paper_bgcolor=COLORS.BACKGROUND,
        plot_bgcolor='white',
    )
    fig.update_xaxes(title_text='Frequency (Hz)', gridcolor=COLORS.GRID)
    fig.update_yaxes(title_text='Gain', gridcolor=COLORS.GRID)

    return fig


def create_pipeline_stages_plot(result: PipelineResult, height: int = 700) -> go.Figure:
    """
    Stack raw, detrended, filtered and envelope signals on a shared time axis.

    Args:
        result: Output of run_pipeline.
        height: Plot height in pixels.

    Returns:
        Plotly Figure object with four rows.
    """
    t = result.time_axis
    stages = [
        ('Raw', result.raw, COLORS.UNKNOWN),
        ('Baseline removed', result.detrended, COLORS.RR_BAR),
        ('Band-passed', result.filtered, COLORS.ECG),
        ('QRS envelope', result.envelope, COLORS.ENVELOPE),
    ]

    fig = make_subplots(
        rows=len(stages), cols=1,
        shared_xaxes=True,
        vertical_spacing=0.05,
        subplot_titles=[name for name, _, _ in stages],
    )

    for row, (name, values, color) in enumerate(stages, start=1):
        fig.add_trace(
            go.Scatter(x=t, y=values, mode='lines', name=name, line=dict(color=color, width=1)),
            row=row, col=1,
        )

    peaks = result.peak_indices
    if len(peaks) > 0:
        fig.add_trace(
            go.Scatter(
                x=peaks / result.sampling_rate,
                y=result.filtered[peaks],
                mode='markers',
                name='R-peaks',
                marker=dict(color=COLORS.R_PEAK, size=6),
            ),
            row=3, col=1,
        )

    fig.update_layout(
        height=height,
        showlegend=False,
        paper_bgcolor=COLORS.BACKGROUND,
        plot_bgcolor='white',
    )
    fig.update_xaxes(title_text='Time (s)', row=len(stages), col=1)

    return fig
