"""
Analysis configuration for the AED Shock Advisor.

One dataclass holds every tunable of a run: where the trace comes from,
where the plot goes, the quality-gate limits and the shock thresholds.
Defaults reproduce the reference device behavior.
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Union

from ..detection.decision_machine import ShockPolicyConfig


@dataclass
class AnalysisConfig:
    """Complete configuration for one analysis run."""

    # === Input / output ===
    input_path: str = "ecg.dat"
    plot_path: str = "ecg.png"
    enable_plot: bool = True

    # === Quality gate ===
    min_duration_sec: float = 1.0   # Used when the sampling rate is known
    min_samples: int = 10           # Used when it is not

    # === Shock rule ===
    policy: ShockPolicyConfig = field(default_factory=ShockPolicyConfig)

    def validate(self) -> bool:
        """Validate configuration consistency."""
        if not self.input_path:
            raise ValueError("input_path must not be empty")
        if self.enable_plot and not self.plot_path:
            raise ValueError("plot_path is required when plotting is enabled")
        if self.min_duration_sec < 0:
            raise ValueError("min_duration_sec must be non-negative")
        if self.min_samples < 1:
            raise ValueError("min_samples must be at least 1")
        self.policy.validate()
        return True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AnalysisConfig':
        """Create from a plain mapping; a nested 'policy' mapping is allowed."""
        data = dict(data)
        policy = data.pop('policy', None)
        if isinstance(policy, dict):
            data['policy'] = ShockPolicyConfig(**policy)
        elif policy is not None:
            data['policy'] = policy
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(path: Union[str, Path]) -> AnalysisConfig:
    """Read an AnalysisConfig from a JSON file and validate it."""
    with open(path, 'r') as f:
        config = AnalysisConfig.from_dict(json.load(f))
    config.validate()
    return config


def get_default_config() -> AnalysisConfig:
    return AnalysisConfig()
