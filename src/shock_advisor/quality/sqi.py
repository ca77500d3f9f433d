"""
Signal Quality Index (SQI) Suite.

Decides whether a recorded trace is clean enough to run the shock analysis
on. Each component produces a score in [0, 1]; a weighted sum gives the
overall score, and a small set of hard gates gives the usable verdict.

Components:
1. Finiteness (NaN / inf samples)
2. Flatline detection (lead-off, electrode disconnect)
3. Saturation / clipping detection
4. Kurtosis check
5. Baseline wander magnitude

Usage:
    if not is_signal_clean(trace.amplitudes, fs=trace.estimated_fs):
        # Do not shock
        pass
"""

import logging
from typing import Dict, List, Tuple, Optional, Union

import numpy as np
from scipy import stats as scipy_stats
from scipy import ndimage as scipy_ndimage

from ..data.contracts import SQIResult

logger = logging.getLogger(__name__)


class SQISuite:
    """
    Multi-component signal quality assessment.

    Attributes:
        min_duration_sec: Minimum trace length when the sampling rate is known
        min_samples: Minimum trace length when it is not
        baseline_wander_max: Maximum acceptable baseline drift (normalized units)
        saturation_threshold: Fraction of max range indicating saturation
        min_kurtosis: Minimum acceptable kurtosis (too low = clipped)
        max_kurtosis: Maximum acceptable kurtosis (too high = spikes)
        flatline_threshold: Maximum acceptable flatline ratio
    """

    def __init__(
        self,
        min_duration_sec: float = 1.0,
        min_samples: int = 10,
        baseline_wander_max: float = 0.5,
        saturation_threshold: float = 0.95,
        min_kurtosis: float = -1.8,
        max_kurtosis: float = 20.0,
        flatline_threshold: float = 0.1,
    ):
        self.min_duration_sec = min_duration_sec
        self.min_samples = min_samples
        self.baseline_wander_max = baseline_wander_max
        self.saturation_threshold = saturation_threshold
        self.min_kurtosis = min_kurtosis
        self.max_kurtosis = max_kurtosis
        self.flatline_threshold = flatline_threshold

        # Component weights for overall score
        self.weights = {
            'finite': 0.25,
            'flatline': 0.30,
            'saturation': 0.20,
            'kurtosis': 0.10,
            'baseline_wander': 0.15,
        }

    def required_samples(self, fs: Optional[float]) -> int:
        if fs:
            return max(self.min_samples, int(np.ceil(self.min_duration_sec * fs)))
        return self.min_samples

    def compute_sqi(self, signal: np.ndarray, fs: Optional[float] = None) -> SQIResult:
        """
        Compute the Signal Quality Index.

        Args:
            signal: Amplitude series (1D)
            fs: Sampling frequency in Hz, if known

        Returns:
            SQIResult with overall score, usability flag, components, and recommendations
        """
        signal = np.asarray(signal, dtype=float)
        required = self.required_samples(fs)

        if len(signal) < required:
            return SQIResult(
                overall_score=0.0,
                is_usable=False,
                components={},
                recommendations=[
                    f"Signal too short for quality assessment ({len(signal)} < {required} samples)"
                ]
            )

        components: Dict[str, float] = {}
        recommendations: List[str] = []

        finite_score, finite_rec = self._assess_finite(signal)
        components['finite'] = finite_score
        if finite_rec:
            recommendations.append(finite_rec)
            # Remaining components are meaningless on non-finite data
            return SQIResult(
                overall_score=finite_score * self.weights['finite'],
                is_usable=False,
                components=components,
                recommendations=recommendations,
            )

        window = self._window_size(fs, len(signal))

        flatline_score, flatline_rec = self._assess_flatline(signal, window)
        components['flatline'] = flatline_score
        if flatline_rec:
            recommendations.append(flatline_rec)

        saturation_score, saturation_rec = self._assess_saturation(signal)
        components['saturation'] = saturation_score
        if saturation_rec:
            recommendations.append(saturation_rec)

        signal_normalized = self._normalize_signal(signal)

        kurtosis_score, kurtosis_rec = self._assess_kurtosis(signal_normalized)
        components['kurtosis'] = kurtosis_score
        if kurtosis_rec:
            recommendations.append(kurtosis_rec)

        wander_score, wander_rec = self._assess_baseline_wander(signal_normalized, window)
        components['baseline_wander'] = wander_score
        if wander_rec:
            recommendations.append(wander_rec)

        # Compute overall score (weighted combination)
        overall_score = sum(
            components.get(k, 0.5) * self.weights[k]
            for k in self.weights
        )

        # Hard gate: flat or disconnected traces are unusable
        is_usable = components['flatline'] > 0.5

        return SQIResult(
            overall_score=overall_score,
            is_usable=is_usable,
            components=components,
            recommendations=recommendations,
        )

    def _window_size(self, fs: Optional[float], n_samples: int) -> int:
        """Analysis window: 500ms when fs is known, else 1/20 of the trace."""
        if fs:
            window = int(0.5 * fs)
        else:
            window = n_samples // 20
        return max(window, 10)

    def _normalize_signal(self, signal: np.ndarray) -> np.ndarray:
        """Normalize signal to zero mean and unit variance."""
        mean = np.mean(signal)
        std = np.std(signal)
        if std < 1e-10:
            return signal - mean
        return (signal - mean) / std

    def _assess_finite(self, signal: np.ndarray) -> Tuple[float, Optional[str]]:
        """Any NaN or infinite sample makes the trace unusable."""
        n_bad = int(np.sum(~np.isfinite(signal)))
        if n_bad:
            return 0.0, f"Non-finite samples detected ({n_bad} of {len(signal)})"
        return 1.0, None

    def _assess_flatline(
        self,
        signal: np.ndarray,
        window: int
    ) -> Tuple[float, Optional[str]]:
        """
        Detect flatline segments (electrode disconnect, lead-off).

        Flatline = very low variance over a window.
        """
        n_windows = len(signal) // window
        if n_windows == 0:
            return 1.0, None

        global_std = np.std(signal)
        if global_std < 1e-10:
            return 0.0, "Signal is completely flat"

        threshold = 0.01 * global_std
        segments = signal[:n_windows * window].reshape(n_windows, window)
        flatline_ratio = float(np.mean(np.std(segments, axis=1) < threshold))

        score = max(0.0, 1.0 - flatline_ratio)

        recommendation = None
        if flatline_ratio > self.flatline_threshold:
            recommendation = f"Flatline segments detected ({flatline_ratio*100:.1f}% of signal)"

        return score, recommendation

    def _assess_saturation(self, signal: np.ndarray) -> Tuple[float, Optional[str]]:
        """
        Detect signal saturation/clipping.

        Saturation occurs when the signal hits the ADC limits.
        """
        signal_range = np.ptp(signal)
        if signal_range < 1e-10:
            return 0.0, "Signal has no amplitude variation (flat)"

        max_val = np.max(np.abs(signal))
        near_max = np.sum(np.abs(signal) > self.saturation_threshold * max_val)
        saturation_ratio = near_max / len(signal)

        # Even 5% of samples at the rail is concerning
        score = max(0.0, 1.0 - min(saturation_ratio * 10, 1.0))

        recommendation = None
        if saturation_ratio > 0.05:
            recommendation = f"Signal saturation detected ({saturation_ratio*100:.1f}% samples)"

        return score, recommendation

    def _assess_kurtosis(self, signal: np.ndarray) -> Tuple[float, Optional[str]]:
        """
        Assess excess kurtosis.

        - Low kurtosis: signal may be clipped/compressed
        - High kurtosis: signal may have spike artifacts
        """
        if np.std(signal) < 1e-10:
            return 0.0, None

        kurtosis = scipy_stats.kurtosis(signal)

        if kurtosis < self.min_kurtosis:
            return 0.3, f"Abnormally low kurtosis ({kurtosis:.1f}) - possible clipping"
        if kurtosis > self.max_kurtosis:
            return 0.5, f"High kurtosis ({kurtosis:.1f}) - possible spike artifacts"

        optimal = 6.0
        deviation = abs(kurtosis - optimal) / optimal
        return max(0.5, 1.0 - deviation * 0.5), None

    def _assess_baseline_wander(
        self,
        signal: np.ndarray,
        window: int
    ) -> Tuple[float, Optional[str]]:
        """Assess baseline wander using median filter extraction."""
        size = window if window % 2 == 1 else window + 1
        baseline = scipy_ndimage.median_filter(signal, size=size)

        wander_magnitude = np.std(baseline)
        score = max(0.0, 1.0 - min(wander_magnitude / self.baseline_wander_max, 1.0))

        recommendation = None
        if score < 0.5:
            recommendation = f"High baseline wander detected (std={wander_magnitude:.3f})"

        return score, recommendation


def is_signal_clean(
    amplitudes: np.ndarray,
    fs: Optional[float] = None,
    suite: Optional[SQISuite] = None,
    return_details: bool = False,
) -> Union[bool, SQIResult]:
    """
    Quality gate: is the trace clean enough to analyze?

    Args:
        amplitudes: Amplitude series
        fs: Sampling frequency in Hz, if known
        suite: SQISuite to use (default thresholds if None)
        return_details: If True, return the full SQIResult instead of the verdict

    Returns:
        Usable verdict, or the SQIResult if return_details=True
    """
    if suite is None:
        suite = SQISuite()
    result = suite.compute_sqi(amplitudes, fs)

    if not result.is_usable:
        logger.info(f"Signal rejected by quality gate: {result.recommendations}")
    if return_details:
        return result
    return result.is_usable
