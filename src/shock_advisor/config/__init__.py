"""
Configuration module for the AED Shock Advisor.
"""

from .analysis_config import (
    AnalysisConfig,
    load_config,
    get_default_config,
)

__all__ = [
    'AnalysisConfig',
    'load_config',
    'get_default_config',
]
