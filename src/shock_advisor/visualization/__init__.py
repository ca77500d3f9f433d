# Trace rendering

from .ecg_plot import visualize_ecg

__all__ = [
    'visualize_ecg',
]
