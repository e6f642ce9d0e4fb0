"""
Unit tests for the decision aggregator.

Decisions must be denied exactly when violations exist, and denials must
carry every violation in order.
"""

import logging
from unittest.mock import MagicMock

import pytest

from webapp_admission.errors import InvalidResourceError
from webapp_admission.models.admission import FieldViolation
from webapp_admission.validation.aggregator import DecisionAggregator


def _violations(count: int) -> list[FieldViolation]:
    return [
        FieldViolation.invalid(f"spec.field{i}", i, f"problem {i}") for i in range(count)
    ]


class TestDecisionAggregator:
    """Test cases for DecisionAggregator.decide and to_error."""

    def test_no_violations_is_allowed(self):
        decision = DecisionAggregator().decide([], "web")

        assert decision.allowed
        assert decision.warnings == []
        assert decision.identity.qualified_kind == "Deployment.webapp"
        assert decision.identity.name == "web"

    @pytest.mark.parametrize("count", [1, 2, 5])
    def test_violations_are_denied(self, count):
        violations = _violations(count)

        decision = DecisionAggregator().decide(violations, "web", namespace="apps")

        assert decision.denied
        assert decision.violations == violations
        assert decision.identity.namespace == "apps"

    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_denied_iff_violations(self, count):
        decision = DecisionAggregator().decide(_violations(count), "web")
        assert decision.denied == (count > 0)

    def test_warnings_are_carried(self):
        decision = DecisionAggregator().decide([], "web", warnings=["heads up"])

        assert decision.allowed
        assert decision.warnings == ["heads up"]

    def test_allowed_decision_has_no_error(self):
        aggregator = DecisionAggregator()
        assert aggregator.to_error(aggregator.decide([], "web")) is None

    def test_denied_decision_error_keeps_all_violations(self):
        aggregator = DecisionAggregator()
        violations = _violations(3)

        error = aggregator.to_error(aggregator.decide(violations, "web"))

        assert isinstance(error, InvalidResourceError)
        assert error.violations == violations
        assert error.identity.name == "web"
        assert error.identity.group == "webapp"
        assert error.identity.kind == "Deployment"

    def test_custom_group_kind(self):
        aggregator = DecisionAggregator(group="apps", kind="StatefulSet")
        decision = aggregator.decide(_violations(1), "db")

        assert decision.identity.qualified_kind == "StatefulSet.apps"

    def test_injected_logger(self):
        logger = MagicMock(spec=logging.Logger)

        DecisionAggregator(logger=logger).decide(_violations(2), "web")

        logger.debug.assert_called_once()
        assert "2 violation(s)" in logger.debug.call_args.args[0]
