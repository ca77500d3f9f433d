"""
Unit tests for rhythm feature extraction.

Tests for:
- Baseline (median) estimation
- Average peak amplitude
- BPM from inter-peak intervals
- Uniformity (crossing-count variability)
- RhythmFeatureExtractor on full traces
"""

import pytest
import numpy as np
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shock_advisor.data.contracts import ECGTrace
from shock_advisor.features.rhythm_features import (
    RhythmFeatureExtractor,
    compute_baseline,
    compute_average_amplitude,
    compute_bpm,
    compute_uniformity,
    count_baseline_crossings,
)


# =============================================================================
# BASELINE TESTS
# =============================================================================

class TestBaseline:
    """Tests for the median baseline."""

    def test_odd_count_takes_middle(self):
        assert compute_baseline([1, 2, 3]) == 2.0

    def test_even_count_averages_middle_pair(self):
        assert compute_baseline([1, 2, 3, 4]) == 2.5

    def test_permutation_invariant(self):
        values = [0.3, -1.2, 4.0, 0.0, 2.2, -0.7]
        rng = np.random.default_rng(0)
        expected = compute_baseline(values)

        for _ in range(5):
            assert compute_baseline(list(rng.permutation(values))) == expected

    def test_input_not_mutated(self):
        values = np.array([3.0, 1.0, 2.0])
        compute_baseline(values)
        np.testing.assert_array_equal(values, [3.0, 1.0, 2.0])

    def test_robust_to_outlier_peaks(self):
        assert compute_baseline([0.0, 0.1, -0.1, 0.0, 50.0]) == 0.0

    def test_empty_series_raises(self):
        with pytest.raises(ValueError):
            compute_baseline([])


# =============================================================================
# AMPLITUDE TESTS
# =============================================================================

class TestAverageAmplitude:
    """Tests for mean absolute peak excursion."""

    def test_no_peaks_returns_zero(self):
        assert compute_average_amplitude([1.0, 2.0, 3.0], [0, 0, 0], 0.0) == 0.0

    def test_mean_absolute_deviation(self):
        assert compute_average_amplitude([2.0, 4.0], [1, 1], 1.0) == pytest.approx(1.5)

    def test_only_flagged_samples_count(self):
        amplitudes = [5.0, 2.0, 5.0, -2.0]
        flags = [0, 1, 0, 1]
        assert compute_average_amplitude(amplitudes, flags, 0.0) == pytest.approx(2.0)

    def test_non_binary_flags_are_not_peaks(self):
        assert compute_average_amplitude([2.0, 9.0], [1, 2], 0.0) == pytest.approx(2.0)

    def test_result_non_negative(self):
        assert compute_average_amplitude([-3.0, -1.0], [1, 1], 0.0) == pytest.approx(2.0)


# =============================================================================
# BPM TESTS
# =============================================================================

class TestBPM:
    """Tests for the rate estimator."""

    def test_single_peak_returns_zero(self):
        assert compute_bpm([0.0, 1.0, 2.0], [0, 1, 0]) == 0.0

    def test_single_interval_is_undefined(self):
        assert compute_bpm([0.0, 0.5, 1.0], [1, 0, 1]) == 0.0

    def test_one_second_intervals_give_60(self):
        assert compute_bpm([0.0, 1.0, 2.0], [1, 1, 1]) == pytest.approx(60.0)

    def test_mean_interval_used(self):
        # Intervals 0.25 and 0.35 -> mean 0.3 s -> 200 bpm
        timestamps = [0.0, 0.1, 0.25, 0.4, 0.6]
        flags = [1, 0, 1, 0, 1]
        assert compute_bpm(timestamps, flags) == pytest.approx(200.0)

    def test_no_peaks_returns_zero(self):
        assert compute_bpm([0.0, 1.0], [0, 0]) == 0.0


# =============================================================================
# UNIFORMITY TESTS
# =============================================================================

class TestUniformity:
    """Tests for crossing-count variability."""

    def test_fewer_than_two_peaks_returns_zero(self):
        assert compute_uniformity([1.0, -1.0, 1.0], [0, 1, 0], 0.0) == 0.0

    def test_crossing_counts_per_interval(self):
        amplitudes = [1.0, 1.0, 1.0, -1.0, 1.0]
        flags = [1, 0, 1, 0, 1]
        counts = count_baseline_crossings(amplitudes, flags, 0.0)
        np.testing.assert_array_equal(counts, [0, 2])

    def test_population_std_of_counts(self):
        amplitudes = [1.0, 1.0, 1.0, -1.0, 1.0]
        flags = [1, 0, 1, 0, 1]
        assert compute_uniformity(amplitudes, flags, 0.0) == pytest.approx(1.0)

    def test_sample_equal_to_baseline_counts_as_below(self):
        # 1 -> 0 is a crossing (0 <= baseline), 0 -> 0 is not, 0 -> 1 is
        counts = count_baseline_crossings([1.0, 0.0, 0.0, 1.0], [1, 0, 0, 1], 0.0)
        np.testing.assert_array_equal(counts, [2])

    def test_crossing_at_last_index_of_interval_included(self):
        # j runs over [p, q): the step from q-1 to q is counted
        counts = count_baseline_crossings([1.0, 1.0, -1.0], [1, 0, 1], 0.0)
        np.testing.assert_array_equal(counts, [1])

    def test_regular_rhythm_is_uniform(self, slow_organized_trace):
        trace = slow_organized_trace
        baseline = compute_baseline(trace.amplitudes)
        counts = count_baseline_crossings(trace.amplitudes, trace.peak_flags, baseline)

        assert len(counts) == trace.n_peaks - 1
        assert np.all(counts == 2)
        assert compute_uniformity(trace.amplitudes, trace.peak_flags, baseline) == 0.0


# =============================================================================
# EXTRACTOR TESTS
# =============================================================================

class TestRhythmFeatureExtractor:
    """Tests for the full feature set."""

    def test_slow_organized_trace(self, slow_organized_trace):
        features = RhythmFeatureExtractor().extract(slow_organized_trace)

        assert slow_organized_trace.n_peaks == 5
        assert features.bpm == pytest.approx(60.0)
        assert features.uniformity == 0.0
        assert features.is_organized()
        assert abs(features.baseline) < 1e-6
        assert features.avg_amplitude == pytest.approx(1.0, abs=0.01)

    def test_degenerate_trace_flags_undefined(self):
        trace = ECGTrace([0.0, 0.1, 0.2], [0.0, 1.0, 0.0], [0, 1, 0])
        features = RhythmFeatureExtractor().extract(trace)

        assert features.bpm == 0.0
        assert features.uniformity == 0.0
        assert not features.rate_defined
        assert not features.uniformity_defined
        assert features.amplitude_defined

    def test_idempotent(self, fast_organized_trace):
        extractor = RhythmFeatureExtractor()
        first = extractor.extract(fast_organized_trace)
        second = extractor.extract(fast_organized_trace)

        assert first == second

    def test_trace_arrays_untouched(self, fast_organized_trace):
        before = fast_organized_trace.amplitudes.copy()
        RhythmFeatureExtractor().extract(fast_organized_trace)
        np.testing.assert_array_equal(fast_organized_trace.amplitudes, before)
