"""
Decision Machine for the shock advisor.

ShockDecisionPolicy is the single decision authority: it maps a FeatureSet
to SHOCK / NO_SHOCK under a fixed threshold rule. The quality gate and the
feature extractor only supply inputs.

Rule:
    NO_SHOCK if any of
        avg_amplitude < 0.1
        baseline > 1.0
        uniformity >= 1.0 and bpm < 200.0   (disorganized, not fast enough)
        bpm <= 150.0
    otherwise SHOCK.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any

from ..data.contracts import FeatureSet, ShockAction, SQIResult

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class ShockPolicyConfig:
    """Thresholds of the shock rule."""

    # Minimum mean R-peak excursion from baseline (mV)
    min_avg_amplitude: float = 0.1

    # Maximum baseline offset (mV)
    max_baseline: float = 1.0

    # Crossing-count std below which the rhythm is organized
    organized_uniformity_threshold: float = 1.0

    # Disorganized rhythms need at least this rate
    disorganized_min_bpm: float = 200.0

    # Any rhythm at or below this rate is never shocked
    min_shockable_bpm: float = 150.0

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if self.min_avg_amplitude < 0:
            raise ValueError("min_avg_amplitude must be non-negative")
        if self.organized_uniformity_threshold <= 0:
            raise ValueError("organized_uniformity_threshold must be positive")
        if self.min_shockable_bpm <= 0:
            raise ValueError("min_shockable_bpm must be positive")
        if self.disorganized_min_bpm < self.min_shockable_bpm:
            raise ValueError("disorganized_min_bpm must not be below min_shockable_bpm")
        return True


# =============================================================================
# DECISION OUTPUT
# =============================================================================

@dataclass
class DecisionOutput:
    """Decision policy output with full explanation."""
    action: ShockAction
    is_organized: bool
    explanation: str                # Human-readable reason

    # Audit trail
    contributing_factors: Dict[str, Any] = field(default_factory=dict)
    overriding_factors: List[str] = field(default_factory=list)

    suppress_reason: Optional[str] = None

    @property
    def should_shock(self) -> bool:
        return self.action == ShockAction.SHOCK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action.value,
            "is_organized": self.is_organized,
            "explanation": self.explanation,
            "contributing_factors": self.contributing_factors,
            "overriding_factors": self.overriding_factors,
            "suppress_reason": self.suppress_reason,
        }


# =============================================================================
# DECISION POLICY
# =============================================================================

class ShockDecisionPolicy:
    """
    Fixed-threshold shock rule.

    Shock only traces with adequate peak amplitude, near-zero baseline and a
    high rate; disorganized rhythms additionally need a very high rate.
    Stateless: the same features always give the same decision.
    """

    def __init__(self, config: ShockPolicyConfig = None):
        if config is None:
            config = ShockPolicyConfig()
        config.validate()
        self.config = config

    def is_organized(self, uniformity: float) -> bool:
        return uniformity < self.config.organized_uniformity_threshold

    def do_not_shock_reasons(self, features: FeatureSet) -> List[str]:
        """Every do-not-shock condition that holds for these features."""
        cfg = self.config
        reasons = []

        if features.avg_amplitude < cfg.min_avg_amplitude:
            reasons.append(
                f"low_amplitude: {features.avg_amplitude:.3f} < {cfg.min_avg_amplitude}"
            )
        if features.baseline > cfg.max_baseline:
            reasons.append(
                f"baseline_offset: {features.baseline:.3f} > {cfg.max_baseline}"
            )
        if not self.is_organized(features.uniformity) and features.bpm < cfg.disorganized_min_bpm:
            reasons.append(
                f"disorganized_slow: uniformity {features.uniformity:.3f}, "
                f"bpm {features.bpm:.1f} < {cfg.disorganized_min_bpm}"
            )
        if features.bpm <= cfg.min_shockable_bpm:
            reasons.append(f"rate_too_low: bpm {features.bpm:.1f} <= {cfg.min_shockable_bpm}")

        return reasons

    def decide(self, features: FeatureSet) -> DecisionOutput:
        """
        Classify the rhythm.

        Args:
            features: Feature set for the trace

        Returns:
            DecisionOutput with the verdict and the conditions that drove it
        """
        organized = self.is_organized(features.uniformity)
        reasons = self.do_not_shock_reasons(features)

        if reasons:
            action = ShockAction.NO_SHOCK
            explanation = "Do not shock: " + "; ".join(reasons)
        else:
            action = ShockAction.SHOCK
            rhythm = "organized" if organized else "disorganized"
            explanation = f"Shockable {rhythm} rhythm at {features.bpm:.1f} bpm"

        logger.debug(f"Decision {action.value}: {explanation}")

        return DecisionOutput(
            action=action,
            is_organized=organized,
            explanation=explanation,
            contributing_factors=features.to_dict(),
            overriding_factors=reasons,
        )

    def decide_unusable_signal(self, sqi: SQIResult) -> DecisionOutput:
        """NO_SHOCK output for a trace that failed the quality gate."""
        return DecisionOutput(
            action=ShockAction.NO_SHOCK,
            is_organized=False,
            explanation="Do not shock: signal quality unusable",
            contributing_factors={"sqi": sqi.to_dict()},
            overriding_factors=list(sqi.recommendations),
            suppress_reason="signal_quality_unusable",
        )
