"""
End-to-End Demo Script for the AED Shock Advisor

Runs the complete pipeline on synthetic traces:
1. Organized rhythm at 60 bpm       (not shockable: rate too low)
2. Fast organized rhythm at 240 bpm (shockable)
3. Flat trace                       (rejected by the quality gate)

Run this script to verify all modules are working correctly.
"""

import os
import sys
import numpy as np

# Add src to path
script_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(script_dir, 'src'))

from shock_advisor import AnalysisConfig, ECGTrace, ShockAnalysisPipeline


def print_section(title: str):
    """Print a section header."""
    print("\n" + "=" * 60)
    print(f" {title}")
    print("=" * 60)


def synthetic_trace(rate_hz: float, duration_sec: float = 5.0, fs: int = 100,
                    record_id: str = "") -> ECGTrace:
    """Sinusoidal trace with one R-peak flagged at the crest of each cycle."""
    n = int(duration_sec * fs)
    t = (np.arange(n) + 0.5) / fs
    amplitude = np.sin(2 * np.pi * rate_hz * t)

    period = int(round(fs / rate_hz))
    first = int(np.argmax(amplitude[:period]))
    flags = np.zeros(n, dtype=int)
    flags[first::period] = 1

    return ECGTrace(t, amplitude, flags, record_id=record_id)


def run_demo(title: str, trace: ECGTrace, pipeline: ShockAnalysisPipeline) -> bool:
    print_section(title)
    try:
        report = pipeline.run(trace)
    except Exception as e:
        print(f"✗ Failed: {e}")
        return False

    for line in report.format_lines():
        print(line)
    print(f"Explanation: {report.decision.explanation}")
    return True


def run_all_demos() -> bool:
    config = AnalysisConfig(enable_plot=False)
    pipeline = ShockAnalysisPipeline(config)

    demos = [
        ("1. ORGANIZED RHYTHM, 60 BPM", synthetic_trace(1.0, record_id="slow")),
        ("2. FAST ORGANIZED RHYTHM, 240 BPM", synthetic_trace(4.0, record_id="fast")),
        ("3. FLAT TRACE", ECGTrace(np.arange(500) / 100.0, np.zeros(500),
                                    np.zeros(500, dtype=int), record_id="flat")),
    ]

    results = [run_demo(title, trace, pipeline) for title, trace in demos]

    print_section("SUMMARY")
    print(f"{sum(results)}/{len(results)} demos completed")
    return all(results)


if __name__ == '__main__':
    success = run_all_demos()
    sys.exit(0 if success else 1)
