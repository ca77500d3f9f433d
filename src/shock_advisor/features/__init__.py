# Rhythm feature extraction

from .rhythm_features import (
    RhythmFeatureExtractor,
    compute_baseline,
    compute_average_amplitude,
    compute_bpm,
    compute_uniformity,
    count_baseline_crossings,
)

__all__ = [
    'RhythmFeatureExtractor',
    'compute_baseline',
    'compute_average_amplitude',
    'compute_bpm',
    'compute_uniformity',
    'count_baseline_crossings',
]
