"""
ECG trace rendering.

Writes a PNG of the amplitude series against time. The analysis never
reads the artifact back.
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

logger = logging.getLogger(__name__)


def visualize_ecg(
    amplitudes: Sequence[float],
    timestamps: Sequence[float],
    save_path: Union[str, Path] = "ecg.png",
    peak_flags: Optional[Sequence[int]] = None,
    baseline: Optional[float] = None,
    title: str = "ECG Signal",
) -> Path:
    """
    Plot the trace and save it to disk.

    Args:
        amplitudes: Amplitude series
        timestamps: Sample times in seconds (same length)
        save_path: Output image path
        peak_flags: If provided, R-peaks (flag == 1) are marked
        baseline: If provided, drawn as a horizontal reference line
        title: Plot title

    Returns:
        Path of the written image
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    amplitudes = np.asarray(amplitudes, dtype=float)
    timestamps = np.asarray(timestamps, dtype=float)
    save_path = Path(save_path)

    fig, ax = plt.subplots(1, 1, figsize=(12, 4))

    ax.plot(timestamps, amplitudes, 'b-', linewidth=0.8, label='ECG')

    if peak_flags is not None:
        mask = np.asarray(peak_flags) == 1
        ax.plot(timestamps[mask], amplitudes[mask], 'rv', markersize=6, label='R-peak')

    if baseline is not None:
        ax.axhline(baseline, color='gray', linestyle='--', linewidth=0.8, label='Baseline')

    ax.set_xlabel('Time (s)')
    ax.set_ylabel('Amplitude (mV)')
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    ax.legend(loc='upper right')

    fig.tight_layout()
    fig.savefig(save_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    logger.info(f"ECG plot saved to {save_path}")
    return save_path
