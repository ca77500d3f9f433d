# Signal Quality module

from .sqi import SQISuite, is_signal_clean

__all__ = [
    'SQISuite',
    'is_signal_clean',
]
