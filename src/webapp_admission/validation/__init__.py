"""
Validation core for Deployment admission.

- rules: independent field checks
- validator: runs every rule and collects violations
- aggregator: turns violations into an admission decision
"""

from .aggregator import DecisionAggregator
from .rules import (
    DEFAULT_RULES,
    INTERVAL_DURATION_RULE,
    MIN_REPLICAS_RULE,
    Enforcement,
    Rule,
)
from .validator import DeploymentValidator, ValidationReport

__all__ = [
    "DEFAULT_RULES",
    "INTERVAL_DURATION_RULE",
    "MIN_REPLICAS_RULE",
    "DecisionAggregator",
    "DeploymentValidator",
    "Enforcement",
    "Rule",
    "ValidationReport",
]
