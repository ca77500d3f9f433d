"""
Rhythm Feature Extraction
Derives the four features the shock decision is made on:

1. Baseline        - median amplitude (isoelectric reference)
2. Avg amplitude   - mean |peak - baseline| over flagged R-peaks
3. BPM             - 60 / mean inter-peak interval
4. Uniformity      - population std of baseline crossings per beat

Each feature falls back to 0.0 when the trace has too few peaks for it to
be defined.
"""

import logging
from typing import Sequence

import numpy as np

from ..data.contracts import ECGTrace, FeatureSet

logger = logging.getLogger(__name__)

PEAK_VALUE = 1


def _peak_mask(peak_flags: Sequence[int]) -> np.ndarray:
    return np.asarray(peak_flags) == PEAK_VALUE


def compute_baseline(amplitudes: Sequence[float]) -> float:
    """
    Median amplitude of the whole series.

    Even-length series average the two central order statistics. The
    caller's series is not modified.

    Raises:
        ValueError: If the series is empty
    """
    values = np.sort(np.asarray(amplitudes, dtype=float))
    n = len(values)
    if n == 0:
        raise ValueError("Cannot compute baseline of an empty series")

    mid = n // 2
    if n % 2 == 1:
        return float(values[mid])
    return float((values[mid - 1] + values[mid]) / 2.0)


def compute_average_amplitude(
    amplitudes: Sequence[float],
    peak_flags: Sequence[int],
    baseline: float,
) -> float:
    """Mean absolute excursion of the R-peaks from the baseline (0.0 if no peaks)."""
    mask = _peak_mask(peak_flags)
    if not mask.any():
        return 0.0

    peaks = np.asarray(amplitudes, dtype=float)[mask]
    return float(np.mean(np.abs(peaks - baseline)))


def compute_bpm(timestamps: Sequence[float], peak_flags: Sequence[int]) -> float:
    """
    Heart rate from the mean interval between successive R-peaks.

    Timestamps are in seconds. Fewer than two intervals leave the rate
    undefined and return 0.0.
    """
    peak_times = np.asarray(timestamps, dtype=float)[_peak_mask(peak_flags)]
    intervals = np.diff(peak_times)

    if len(intervals) < 2:
        return 0.0

    mean_interval = np.sum(intervals) / len(intervals)
    return float(60.0 / mean_interval)


def count_baseline_crossings(
    amplitudes: Sequence[float],
    peak_flags: Sequence[int],
    baseline: float,
) -> np.ndarray:
    """
    Baseline crossings within each inter-peak interval.

    For consecutive peaks p < q, a crossing is counted at every j in [p, q)
    where samples j and j+1 lie on opposite sides of the baseline, with a
    sample equal to the baseline counting as "below".

    Returns:
        Integer array with one count per consecutive peak pair
    """
    values = np.asarray(amplitudes, dtype=float)
    peaks = np.flatnonzero(_peak_mask(peak_flags))
    if len(peaks) < 2:
        return np.zeros(0, dtype=int)

    above = values > baseline
    # flips[j] is 1 when samples j and j+1 sit on opposite sides
    flips = (above[:-1] != above[1:]).astype(int)
    cumulative = np.concatenate(([0], np.cumsum(flips)))

    return cumulative[peaks[1:]] - cumulative[peaks[:-1]]


def compute_uniformity(
    amplitudes: Sequence[float],
    peak_flags: Sequence[int],
    baseline: float,
) -> float:
    """
    Rhythm uniformity: population standard deviation of the per-beat
    baseline-crossing counts. Lower is more regular. 0.0 with fewer than
    two peaks.
    """
    counts = count_baseline_crossings(amplitudes, peak_flags, baseline)
    if len(counts) == 0:
        return 0.0
    return float(np.std(counts, ddof=0))


class RhythmFeatureExtractor:
    """
    Extracts the rhythm feature set from a trace.

    The baseline is computed once and handed to the amplitude and
    uniformity scorers by value.
    """

    def extract(self, trace: ECGTrace) -> FeatureSet:
        """
        Compute all four features.

        Args:
            trace: Non-empty ECG trace

        Returns:
            FeatureSet for the trace
        """
        baseline = compute_baseline(trace.amplitudes)
        avg_amplitude = compute_average_amplitude(trace.amplitudes, trace.peak_flags, baseline)
        bpm = compute_bpm(trace.timestamps, trace.peak_flags)
        uniformity = compute_uniformity(trace.amplitudes, trace.peak_flags, baseline)

        features = FeatureSet(
            baseline=baseline,
            avg_amplitude=avg_amplitude,
            bpm=bpm,
            uniformity=uniformity,
            n_peaks=trace.n_peaks,
        )

        logger.debug(f"Features for {trace.record_id or 'trace'}: {features.to_dict()}")
        if not features.rate_defined:
            logger.info(f"Only {features.n_peaks} R-peaks; heart rate undefined, reported as 0.0")
        return features
