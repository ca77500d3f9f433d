"""
Shock analysis pipeline.

Runs one recorded trace through the full decision chain:

1. Quality gate (SQI)          - unclean traces stop here with NO_SHOCK
2. Render the trace            - side effect only
3. Extract rhythm features     - baseline, amplitude, BPM, uniformity
4. Shock decision              - fixed threshold rule
5. Report
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np

from .config.analysis_config import AnalysisConfig
from .data.contracts import ECGTrace, FeatureSet, SQIResult
from .data.loader import load_ecg_file
from .detection.decision_machine import DecisionOutput, ShockDecisionPolicy
from .features.rhythm_features import RhythmFeatureExtractor
from .quality.sqi import SQISuite, is_signal_clean
from .visualization.ecg_plot import visualize_ecg

logger = logging.getLogger(__name__)

QualityGate = Callable[[np.ndarray], bool]
Renderer = Callable[[np.ndarray, np.ndarray], Any]


@dataclass
class AnalysisReport:
    """Everything a single analysis run produced."""
    record_id: str
    n_samples: int
    is_clean: bool
    decision: DecisionOutput
    features: Optional[FeatureSet] = None
    sqi: Optional[SQIResult] = None

    @property
    def should_shock(self) -> bool:
        return self.decision.should_shock

    def format_lines(self) -> List[str]:
        """Console report, one line per field."""
        lines = [f"Samples loaded: {self.n_samples}"]

        if not self.is_clean:
            lines.append("Is signal clean? NO, DO NOT SHOCK")
            return lines

        lines.append("Is signal clean? YES")

        f = self.features
        organized = "YES" if self.decision.is_organized else "NO"
        verdict = "YES, SHOCK!" if self.should_shock else "NO, DO NOT SHOCK"
        lines.extend([
            f"Baseline? {f.baseline:g}",
            f"Average amplitude? {f.avg_amplitude:g}",
            f"BPM? {f.bpm:g}",
            f"Organized? {organized} ({f.uniformity:g})",
            f"Shock patient? {verdict}",
        ])
        return lines

    def to_dict(self) -> Dict[str, Any]:
        return {
            'record_id': self.record_id,
            'n_samples': self.n_samples,
            'is_clean': self.is_clean,
            'features': self.features.to_dict() if self.features else None,
            'sqi': self.sqi.to_dict() if self.sqi else None,
            'decision': self.decision.to_dict(),
        }


class ShockAnalysisPipeline:
    """
    Single-pass batch analysis of one ECG trace.

    The quality gate and renderer are collaborators: by default the SQI
    suite and the matplotlib renderer, but any callables with the same
    shape can be supplied.
    """

    def __init__(
        self,
        config: AnalysisConfig = None,
        quality_gate: Optional[QualityGate] = None,
        renderer: Optional[Renderer] = None,
    ):
        if config is None:
            config = AnalysisConfig()
        config.validate()
        self.config = config

        self.sqi_suite = SQISuite(
            min_duration_sec=config.min_duration_sec,
            min_samples=config.min_samples,
        )
        self.quality_gate = quality_gate
        self.renderer = renderer
        self.feature_extractor = RhythmFeatureExtractor()
        self.policy = ShockDecisionPolicy(config.policy)

    def _check_quality(self, trace: ECGTrace) -> SQIResult:
        if self.quality_gate is not None:
            is_clean = bool(self.quality_gate(trace.amplitudes))
            return SQIResult(
                overall_score=1.0 if is_clean else 0.0,
                is_usable=is_clean,
                recommendations=[] if is_clean else ["Rejected by quality gate"],
            )
        return is_signal_clean(trace.amplitudes, fs=trace.estimated_fs,
                               suite=self.sqi_suite, return_details=True)

    def _render(self, trace: ECGTrace):
        if self.renderer is not None:
            self.renderer(trace.amplitudes, trace.timestamps)
        elif self.config.enable_plot:
            visualize_ecg(
                trace.amplitudes,
                trace.timestamps,
                save_path=self.config.plot_path,
                peak_flags=trace.peak_flags,
            )

    def run(self, trace: ECGTrace) -> AnalysisReport:
        """
        Analyze one trace.

        Args:
            trace: Fully loaded ECG trace

        Returns:
            AnalysisReport with the verdict
        """
        if trace.n_samples == 0:
            sqi = SQIResult(overall_score=0.0, is_usable=False,
                            recommendations=["Trace has no samples"])
        else:
            sqi = self._check_quality(trace)

        if not sqi.is_usable:
            logger.info(f"{trace.record_id or 'trace'}: signal unusable, skipping analysis")
            return AnalysisReport(
                record_id=trace.record_id,
                n_samples=trace.n_samples,
                is_clean=False,
                decision=self.policy.decide_unusable_signal(sqi),
                sqi=sqi,
            )

        logger.info(f"{trace.record_id or 'trace'}: signal quality "
                    f"{sqi.get_quality_level()} (score {sqi.overall_score:.2f})")

        self._render(trace)

        features = self.feature_extractor.extract(trace)
        decision = self.policy.decide(features)

        logger.info(f"{trace.record_id or 'trace'}: {decision.explanation}")

        return AnalysisReport(
            record_id=trace.record_id,
            n_samples=trace.n_samples,
            is_clean=True,
            decision=decision,
            features=features,
            sqi=sqi,
        )

    def run_file(self, path: str = None) -> AnalysisReport:
        """
        Load and analyze a trace file.

        Raises:
            FileNotFoundError: If the input file does not exist
        """
        trace = load_ecg_file(path or self.config.input_path)
        return self.run(trace)
