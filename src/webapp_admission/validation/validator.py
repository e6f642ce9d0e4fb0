"""
Deployment validator.

Runs every configured rule against a candidate and collects the results in
order. Nothing short-circuits: a candidate with several problems gets a
violation (or warning) for each of them.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from webapp_admission.errors import MalformedResourceError
from webapp_admission.models.admission import FieldViolation
from webapp_admission.models.deployment import Deployment, load_deployment
from webapp_admission.utils.field_path import FieldPath
from webapp_admission.validation.rules import DEFAULT_RULES, Enforcement, Rule

SPEC_PATH = FieldPath("spec")


@dataclass
class ValidationReport:
    """Violations that deny the request and warnings that only annotate it."""

    violations: list[FieldViolation] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.violations


class DeploymentValidator:
    """Evaluates Deployment candidates against a fixed, ordered rule set."""

    def __init__(
        self,
        rules: Sequence[Rule] = DEFAULT_RULES,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize validator.

        Args:
            rules: Rules to run, in reporting order
            logger: Logger for per-rule diagnostics (module logger by default)
        """
        names = [rule.name for rule in rules]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate rule names: {', '.join(duplicates)}")

        self.rules = tuple(rules)
        self.logger = logger or logging.getLogger(__name__)

    def evaluate(self, candidate: Deployment | Mapping[str, Any]) -> ValidationReport:
        """
        Run all rules against a candidate.

        A candidate that cannot be interpreted yields the violations describing
        why, and no rule runs.

        Args:
            candidate: Deployment model or raw object from the admission request

        Returns:
            Report with deny-level violations and warn-level warnings
        """
        try:
            deployment = load_deployment(candidate)
        except MalformedResourceError as e:
            self.logger.debug(f"Candidate could not be interpreted: {e.message}")
            return ValidationReport(violations=list(e.violations))

        report = ValidationReport()
        for rule in self.rules:
            violation = rule.evaluate(deployment.spec, SPEC_PATH)
            if violation is None:
                continue

            self.logger.debug(
                f"Rule {rule.name} ({rule.enforcement}) failed for "
                f"{deployment.name}: {violation}"
            )
            if rule.enforcement == Enforcement.DENY:
                report.violations.append(violation)
            else:
                report.warnings.append(str(violation))

        return report

    def validate(self, candidate: Deployment | Mapping[str, Any]) -> list[FieldViolation]:
        """Return the violations for a candidate; an empty list means valid."""
        return self.evaluate(candidate).violations
