"""
ECG trace loader.

Reads the line-oriented numeric format written by the recorder:

    <timestamp> <amplitude> <peak_flag>

one sample per line, whitespace separated. Ingestion stops at the first
line that cannot be parsed; everything read up to that point is kept.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union
import logging

from .contracts import ECGTrace, Sample

# Set up logging
logger = logging.getLogger(__name__)


DEFAULT_INPUT_FILE = "ecg.dat"


def _parse_line(line: str) -> Optional[Sample]:
    """Parse one line, or return None if it is short or malformed."""
    fields = line.split()
    if len(fields) < 3:
        return None
    try:
        timestamp = float(fields[0])
        amplitude = float(fields[1])
        flag = float(fields[2])
    except ValueError:
        return None
    # Writers often emit "1.0"; integral flags are kept as ints
    peak_flag = int(flag) if flag.is_integer() else flag
    return Sample(timestamp, amplitude, peak_flag)


def parse_ecg_lines(lines: Iterable[str], record_id: str = "") -> ECGTrace:
    """
    Parse an iterable of text lines into a trace.

    Blank lines are skipped. The first short or malformed line ends
    ingestion without raising.

    Args:
        lines: Text lines (e.g. an open file)
        record_id: Identifier attached to the trace

    Returns:
        ECGTrace with every sample read before the first bad line
    """
    samples: List[Sample] = []

    for line_no, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        sample = _parse_line(line)
        if sample is None:
            log = logger.error if not samples else logger.warning
            log(
                f"Stopped reading {record_id or 'input'} at line {line_no}: "
                f"{line.strip()[:40]!r}; keeping {len(samples)} samples"
            )
            break
        samples.append(sample)

    logger.debug(f"Parsed {len(samples)} samples from {record_id or 'input'}")
    return ECGTrace.from_samples(samples, record_id=record_id)


def load_ecg_file(path: Union[str, Path] = DEFAULT_INPUT_FILE) -> ECGTrace:
    """
    Load a trace from disk.

    Raises:
        FileNotFoundError: If the input file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"ECG input file not found: {path}")

    with open(path, 'r') as f:
        trace = parse_ecg_lines(f, record_id=path.name)

    logger.info(f"Loaded {trace.n_samples} samples ({trace.n_peaks} R-peaks) from {path}")
    return trace
