# Shock decision module

from .decision_machine import (
    ShockPolicyConfig,
    DecisionOutput,
    ShockDecisionPolicy,
)

__all__ = [
    'ShockPolicyConfig',
    'DecisionOutput',
    'ShockDecisionPolicy',
]
