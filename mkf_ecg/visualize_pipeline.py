"""
Visual Validation of the ECG Pipeline

Runs the pipeline on a recording (a CSV path given on the command line,
or a synthetic recording) and displays every stage with the detected
R-peaks.

Usage:
    python mkf_ecg/visualize_pipeline.py [recording.csv] [sampling_rate]
"""

import logging
import sys
from pathlib import Path
import numpy as np
import matplotlib.pyplot as plt

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkf_ecg.config import ECG
from mkf_ecg.data.loader import DataLoaderError, load_samples
from mkf_ecg.pipeline import PipelineResult, analyze_recording
from mkf_ecg.utils.synthetic import generate_synthetic_ecg

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_synthetic_demo_data(fs: float = ECG.SAMPLING_RATE) -> np.ndarray:
    """
    Create a synthetic recording for demonstration.

    About 25 seconds at 75 bpm with one premature beat, a 3.5 s pause,
    baseline wander and a little noise.
    """
    rr = [0.8] * 10 + [0.55, 1.05] + [0.8] * 6 + [3.5] + [0.8] * 8
    return generate_synthetic_ecg(
        rr,
        fs=fs,
        wander_amplitude=0.4,
        wander_hz=0.25,
        noise_std=0.03,
        seed=42,
    )


def visualize_pipeline(result: PipelineResult, save_path: str = None):
    """
    Create a stage-by-stage figure of one pipeline run.

    Args:
        result: Output of the pipeline.
        save_path: Optional path to save the figure.
    """
    fig, axes = plt.subplots(5, 1, figsize=(14, 12), sharex=True)
    fig.suptitle('ECG Pipeline Validation', fontsize=14, fontweight='bold')

    t = result.time_axis
    peaks = result.peak_indices
    peak_times = peaks / result.sampling_rate

    # --- Plot 1: Raw vs detrended ---
    ax1 = axes[0]
    ax1.plot(t, result.raw, color='gray', linewidth=0.8, alpha=0.8, label='Raw')
    ax1.plot(t, result.raw - result.detrended, 'r--', linewidth=0.8, alpha=0.6, label='Baseline estimate')
    ax1.set_ylabel('Amplitude')
    ax1.set_title('Raw signal')
    ax1.legend(loc='upper right')
    ax1.grid(True, alpha=0.3)

    # --- Plot 2: Detrended ---
    ax2 = axes[1]
    ax2.plot(t, result.detrended, 'b-', linewidth=0.8)
    ax2.set_ylabel('Amplitude')
    ax2.set_title('Baseline removed')
    ax2.grid(True, alpha=0.3)

    # --- Plot 3: Band-passed with R-peaks ---
    ax3 = axes[2]
    ax3.plot(t, result.filtered, 'g-', linewidth=0.8, label='Band-passed')
    ax3.plot(peak_times, result.filtered[peaks], 'ro', markersize=4, label='R-peaks')
    ax3.set_ylabel('Amplitude')
    ax3.set_title(f'Band-pass FIR ({len(result.kernel)} taps)')
    ax3.legend(loc='upper right')
    ax3.grid(True, alpha=0.3)

    # --- Plot 4: Squared derivative ---
    ax4 = axes[3]
    ax4.plot(t, result.squared, color='purple', linewidth=0.8)
    ax4.set_ylabel('Energy')
    ax4.set_title('Squared derivative')
    ax4.grid(True, alpha=0.3)

    # --- Plot 5: Envelope with detector threshold ---
    ax5 = axes[4]
    ax5.plot(t, result.envelope, color='darkorange', linewidth=0.8, label='Envelope')
    if result.detection is not None:
        ax5.axhline(
            y=result.detection.final_state.threshold, color='r', linestyle='--',
            alpha=0.6, label='Final threshold'
        )
    ax5.set_xlabel('Time (s)')
    ax5.set_ylabel('Energy')
    ax5.set_title('Integrated QRS envelope')
    ax5.legend(loc='upper right')
    ax5.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"Figure saved to: {save_path}")

    plt.show()


def print_pipeline_stats(result: PipelineResult):
    """Print pipeline statistics."""
    hrv = result.hrv
    print("\n" + "="*50)
    print("PIPELINE STATISTICS")
    print("="*50)
    print(f"Total samples:        {len(result.raw):,}")
    print(f"Duration:             {result.duration_seconds:.1f} seconds")
    print(f"Beats detected:       {result.n_beats}")
    print(f"Heart rate:           {hrv.heart_rate_bpm} bpm")
    print(f"Mean RR:              {hrv.mean_rr:.3f} s")
    print(f"SDNN:                 {hrv.sdnn:.3f} s")
    print(f"RMSSD:                {hrv.rmssd:.3f} s")
    print(f"pNN50:                {hrv.pnn50:.0%}")
    print("="*50)
    print("\nFindings:")
    for finding in result.findings.findings:
        print(f"  • {finding}")


def main():
    """Main function to run the visualization."""
    print("="*60)
    print("MKF-ECG - Pipeline Visualization")
    print("="*60)

    fs = float(sys.argv[2]) if len(sys.argv) > 2 else ECG.SAMPLING_RATE
    samples = None

    if len(sys.argv) > 1:
        try:
            samples = load_samples(sys.argv[1])
            print(f"\nLoaded {len(samples):,} samples from {sys.argv[1]}")
        except DataLoaderError as e:
            print(f"Could not load recording: {e}")

    if samples is None:
        print("\nUsing synthetic demo data for visualization...")
        samples = create_synthetic_demo_data(fs)

    print("\nRunning pipeline...")
    result = analyze_recording(samples, fs=fs)

    print_pipeline_stats(result)

    print("\nGenerating visualization...")
    output_path = Path(__file__).parent.parent / "pipeline_validation.png"
    visualize_pipeline(result, save_path=str(output_path))

    print("\n✅ Visualization complete!")


if __name__ == "__main__":
    main()
