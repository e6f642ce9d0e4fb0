"""
Field rules for Deployment resources.

Each rule inspects the spec and returns at most one violation. Rules are
independent of each other: the validator runs all of them, so adding a rule
never hides the result of another.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Any, TypeAlias

from webapp_admission.constants import MIN_REPLICAS
from webapp_admission.models.admission import FieldViolation
from webapp_admission.models.deployment import DeploymentSpec
from webapp_admission.utils.duration import DurationParseError, parse_duration
from webapp_admission.utils.field_path import FieldPath

RuleCheck: TypeAlias = Callable[[DeploymentSpec, FieldPath], FieldViolation | None]
RejectedValue: TypeAlias = Callable[[DeploymentSpec], Any]


class Enforcement(StrEnum):
    """What a failing rule does to the request."""

    DENY = "deny"
    WARN = "warn"


@dataclass(frozen=True)
class Rule:
    """
    A named check with its enforcement level.

    ``rejected_value`` overrides the value the check attaches to its
    violation, for callers that want a different field surfaced in the error.
    """

    name: str
    check: RuleCheck
    enforcement: Enforcement = Enforcement.DENY
    rejected_value: RejectedValue | None = None

    def evaluate(self, spec: DeploymentSpec, path: FieldPath) -> FieldViolation | None:
        violation = self.check(spec, path)
        if violation is None or self.rejected_value is None:
            return violation
        return violation.model_copy(update={"rejected_value": self.rejected_value(spec)})

    def with_enforcement(self, enforcement: Enforcement) -> "Rule":
        return replace(self, enforcement=enforcement)


def check_min_replicas(
    spec: DeploymentSpec, path: FieldPath, minimum: int = MIN_REPLICAS
) -> FieldViolation | None:
    """
    Require enough replicas to survive the loss of a node.

    Args:
        spec: Deployment spec under admission
        path: Path of the spec within the object
        minimum: Inclusive lower bound for replicas

    Returns:
        Violation on ``spec.replicas`` if there are too few replicas
    """
    if spec.replicas >= minimum:
        return None
    return FieldViolation.invalid(
        path.child("replicas"),
        spec.replicas,
        f"replica count {spec.replicas} is below the minimum of {minimum}; "
        f"set spec.replicas to {minimum} or more so the deployment tolerates node loss",
    )


def check_interval_duration(
    spec: DeploymentSpec, path: FieldPath
) -> FieldViolation | None:
    """
    Require the observation interval, when set, to be a positive duration.

    Args:
        spec: Deployment spec under admission
        path: Path of the spec within the object

    Returns:
        Violation on ``spec.range.interval`` if it cannot be parsed or is not positive
    """
    interval = spec.interval
    if interval is None:
        return None

    interval_path = path.child("range", "interval")
    try:
        nanoseconds = parse_duration(interval)
    except DurationParseError:
        return FieldViolation.invalid(
            interval_path,
            interval,
            "the time interval cannot be parsed; use a duration such as 30s, 5m or 1h30m",
        )

    if nanoseconds <= 0:
        return FieldViolation.invalid(
            interval_path, interval, "the time interval must be greater than zero"
        )
    return None


MIN_REPLICAS_RULE = Rule(name="min-replicas", check=check_min_replicas)

# Warn by default: the interval does not affect availability
INTERVAL_DURATION_RULE = Rule(
    name="interval-duration",
    check=check_interval_duration,
    enforcement=Enforcement.WARN,
)

DEFAULT_RULES: tuple[Rule, ...] = (MIN_REPLICAS_RULE, INTERVAL_DURATION_RULE)
