# Data contracts and trace loading

from .contracts import (
    ShockAction,
    Sample,
    ECGTrace,
    FeatureSet,
    SQIResult,
)
from .loader import (
    DEFAULT_INPUT_FILE,
    parse_ecg_lines,
    load_ecg_file,
)

__all__ = [
    # Contracts
    'ShockAction',
    'Sample',
    'ECGTrace',
    'FeatureSet',
    'SQIResult',

    # Loader
    'DEFAULT_INPUT_FILE',
    'parse_ecg_lines',
    'load_ecg_file',
]
