"""
Core data contracts for the AED Shock Advisor.

Every stage of the analysis consumes or produces one of these types, so the
loader, quality gate, feature extractor and decision policy agree on shapes
and units.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Iterable, Iterator, List, Optional, Union
import numpy as np


class ShockAction(Enum):
    """Binary verdict of the shock advisor."""
    SHOCK = "shock"
    NO_SHOCK = "no_shock"


@dataclass(frozen=True)
class Sample:
    """One recorded instant of the trace."""
    timestamp: float                # Seconds
    amplitude: float                # mV
    peak_flag: Union[int, float] = 0    # 1 = R-peak, anything else = not a peak

    @property
    def is_peak(self) -> bool:
        return self.peak_flag == 1


class ECGTrace:
    """
    Canonical single-lead ECG trace - the atomic unit for analysis.

    Holds three index-aligned projections of the same ordered sample
    sequence. The arrays are copied on construction and made read-only so
    downstream scorers can share them safely.

    Attributes:
        timestamps: Sample times in seconds, chronological
        amplitudes: Sample amplitudes
        peak_flags: R-peak markers (1 = peak)
        record_id: Source identifier (usually the file name)
    """

    PEAK_VALUE = 1

    def __init__(
        self,
        timestamps: Iterable[float],
        amplitudes: Iterable[float],
        peak_flags: Iterable[Union[int, float]],
        record_id: str = "",
    ):
        self.timestamps = np.array(timestamps, dtype=float)
        self.amplitudes = np.array(amplitudes, dtype=float)
        # Flags keep their recorded values; only an exact 1 marks a peak
        self.peak_flags = np.array(peak_flags)
        if self.peak_flags.dtype.kind not in "iuf":
            self.peak_flags = self.peak_flags.astype(float)
        self.record_id = record_id

        lengths = {len(self.timestamps), len(self.amplitudes), len(self.peak_flags)}
        if len(lengths) != 1:
            raise ValueError(
                f"Trace projections must have equal length, got "
                f"timestamps={len(self.timestamps)}, amplitudes={len(self.amplitudes)}, "
                f"peak_flags={len(self.peak_flags)}"
            )

        for arr in (self.timestamps, self.amplitudes, self.peak_flags):
            arr.setflags(write=False)

    @classmethod
    def from_samples(cls, samples: Iterable[Sample], record_id: str = "") -> 'ECGTrace':
        """Build a trace from an ordered sequence of sample records."""
        samples = list(samples)
        return cls(
            timestamps=[s.timestamp for s in samples],
            amplitudes=[s.amplitude for s in samples],
            peak_flags=[s.peak_flag for s in samples],
            record_id=record_id,
        )

    def samples(self) -> Iterator[Sample]:
        """Iterate the trace as sample records."""
        for t, a, p in zip(self.timestamps, self.amplitudes, self.peak_flags):
            yield Sample(float(t), float(a), p.item())

    def __len__(self) -> int:
        return len(self.amplitudes)

    @property
    def n_samples(self) -> int:
        """Number of samples in the trace."""
        return len(self.amplitudes)

    @property
    def peak_indices(self) -> np.ndarray:
        """Chronological indices of samples flagged as R-peaks."""
        return np.flatnonzero(self.peak_flags == self.PEAK_VALUE)

    @property
    def n_peaks(self) -> int:
        return len(self.peak_indices)

    @property
    def duration_sec(self) -> float:
        if self.n_samples < 2:
            return 0.0
        return float(self.timestamps[-1] - self.timestamps[0])

    @property
    def estimated_fs(self) -> Optional[float]:
        """Sampling rate from the median timestamp step, or None."""
        if self.n_samples < 2:
            return None
        step = float(np.median(np.diff(self.timestamps)))
        if step <= 0:
            return None
        return 1.0 / step

    def __repr__(self) -> str:
        return (f"ECGTrace({self.record_id or 'unnamed'}, "
                f"n_samples={self.n_samples}, n_peaks={self.n_peaks})")


@dataclass(frozen=True)
class FeatureSet:
    """
    The four rhythm features used by the shock decision.

    Degenerate inputs yield 0.0 for the affected feature. ``n_peaks`` is kept
    alongside so callers can tell an undefined feature from a low one.
    """
    baseline: float
    avg_amplitude: float
    bpm: float
    uniformity: float
    n_peaks: int = 0

    # Peak counts below which a feature falls back to 0.0
    MIN_PEAKS_FOR_AMPLITUDE = 1
    MIN_PEAKS_FOR_RATE = 3
    MIN_PEAKS_FOR_UNIFORMITY = 2

    @property
    def amplitude_defined(self) -> bool:
        return self.n_peaks >= self.MIN_PEAKS_FOR_AMPLITUDE

    @property
    def rate_defined(self) -> bool:
        return self.n_peaks >= self.MIN_PEAKS_FOR_RATE

    @property
    def uniformity_defined(self) -> bool:
        return self.n_peaks >= self.MIN_PEAKS_FOR_UNIFORMITY

    def is_organized(self, threshold: float = 1.0) -> bool:
        """Low crossing-count variability means an organized rhythm."""
        return self.uniformity < threshold

    def to_dict(self) -> Dict[str, Any]:
        return {
            'baseline': self.baseline,
            'avg_amplitude': self.avg_amplitude,
            'bpm': self.bpm,
            'uniformity': self.uniformity,
            'n_peaks': self.n_peaks,
            'rate_defined': self.rate_defined,
            'uniformity_defined': self.uniformity_defined,
        }


@dataclass
class SQIResult:
    """
    Signal Quality Index assessment result.

    Attributes:
        overall_score: Weighted combination of components (0.0 to 1.0)
        is_usable: Hard gate - is the trace clean enough to analyze?
        components: Individual quality component scores
        recommendations: List of quality issues detected
    """
    overall_score: float            # 0.0 (unusable) to 1.0 (excellent)
    is_usable: bool                 # Hard gate
    components: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)

    # Thresholds
    USABLE_THRESHOLD = 0.5
    GOOD_THRESHOLD = 0.7
    EXCELLENT_THRESHOLD = 0.9

    def get_quality_level(self) -> str:
        """Get human-readable quality level."""
        if not self.is_usable:
            return "unusable"
        if self.overall_score >= self.EXCELLENT_THRESHOLD:
            return "excellent"
        if self.overall_score >= self.GOOD_THRESHOLD:
            return "good"
        if self.overall_score >= self.USABLE_THRESHOLD:
            return "acceptable"
        return "poor"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overall_score': self.overall_score,
            'is_usable': self.is_usable,
            'components': self.components,
            'recommendations': self.recommendations,
            'quality_level': self.get_quality_level(),
        }
