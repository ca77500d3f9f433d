"""
pytest configuration and shared fixtures.

This module provides shared fixtures and configuration for all tests.
"""

import pytest
import numpy as np
import sys
import os

# Add src to path for all tests
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from shock_advisor.data.contracts import ECGTrace


# =============================================================================
# CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


# =============================================================================
# SIGNAL HELPERS
# =============================================================================

def make_sine_trace(rate_hz: float, duration_sec: float = 5.0, fs: int = 100,
                    amplitude: float = 1.0, offset: float = 0.0,
                    record_id: str = "synthetic") -> ECGTrace:
    """
    Sinusoidal trace with one R-peak flagged at the crest of each cycle.

    Samples sit at half-step times so no sample lands exactly on the
    zero crossing.
    """
    n = int(duration_sec * fs)
    t = (np.arange(n) + 0.5) / fs
    signal = offset + amplitude * np.sin(2 * np.pi * rate_hz * t)

    period = int(round(fs / rate_hz))
    first = int(np.argmax(signal[:period]))
    flags = np.zeros(n, dtype=int)
    flags[first::period] = 1

    return ECGTrace(t, signal, flags, record_id=record_id)


# =============================================================================
# SHARED FIXTURES
# =============================================================================

@pytest.fixture
def sine_trace_factory():
    """Factory for custom sinusoidal traces."""
    return make_sine_trace


@pytest.fixture
def slow_organized_trace():
    """Organized rhythm, 5 peaks at 1-second intervals (60 bpm)."""
    return make_sine_trace(1.0)


@pytest.fixture
def fast_organized_trace():
    """Organized rhythm at 240 bpm - shockable."""
    return make_sine_trace(4.0)


@pytest.fixture
def flat_trace():
    """Lead-off trace: constant amplitude, no peaks."""
    n = 500
    return ECGTrace(np.arange(n) / 100.0, np.zeros(n), np.zeros(n, dtype=int),
                    record_id="flat")


@pytest.fixture
def ecg_dat_file(tmp_path, fast_organized_trace):
    """Trace written in the recorder's line format."""
    path = tmp_path / "ecg.dat"
    with open(path, 'w') as f:
        for s in fast_organized_trace.samples():
            f.write(f"{s.timestamp:.6f} {s.amplitude:.6f} {s.peak_flag}\n")
    return path


@pytest.fixture
def alternating_peak_trace():
    """
    Five peaks one second apart with exactly one baseline crossing between
    each pair: a 0.5 Hz wave flagged at its crests and troughs.
    """
    fs = 10
    t = np.arange(50) / fs
    # Phase shift keeps every sample off the zero crossing
    signal = np.cos(np.pi * (t + 0.05))
    flags = np.zeros(50, dtype=int)
    flags[::fs] = 1
    return ECGTrace(t, signal, flags, record_id="alternating")
