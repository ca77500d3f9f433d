"""
AED Shock Advisor.

Decides from a recorded ECG trace with marked R-peaks whether an automated
external defibrillator should deliver a shock.
"""

from .data import ECGTrace, Sample, FeatureSet, ShockAction, SQIResult, load_ecg_file
from .features import RhythmFeatureExtractor
from .quality import SQISuite, is_signal_clean
from .detection import ShockDecisionPolicy, ShockPolicyConfig, DecisionOutput
from .config import AnalysisConfig
from .pipeline import ShockAnalysisPipeline, AnalysisReport

__version__ = "1.0.0"

__all__ = [
    'ECGTrace',
    'Sample',
    'FeatureSet',
    'ShockAction',
    'SQIResult',
    'load_ecg_file',
    'RhythmFeatureExtractor',
    'SQISuite',
    'is_signal_clean',
    'ShockDecisionPolicy',
    'ShockPolicyConfig',
    'DecisionOutput',
    'AnalysisConfig',
    'ShockAnalysisPipeline',
    'AnalysisReport',
]
