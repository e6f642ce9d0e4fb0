"""
Decision aggregator.

Folds the violations found for one request into an ``AdmissionDecision`` and,
for denials, into a single ``InvalidResourceError`` naming the resource and
every violated field.
"""

import logging
from collections.abc import Sequence

from webapp_admission.constants import ERROR_GROUP, RESOURCE_KIND
from webapp_admission.errors import InvalidResourceError
from webapp_admission.models.admission import (
    AdmissionDecision,
    FieldViolation,
    ResourceIdentity,
)


class DecisionAggregator:
    """Turns violation lists into admission decisions for one resource kind."""

    def __init__(
        self,
        group: str = ERROR_GROUP,
        kind: str = RESOURCE_KIND,
        logger: logging.Logger | None = None,
    ):
        self.group = group
        self.kind = kind
        self.logger = logger or logging.getLogger(__name__)

    def identity(self, name: str, namespace: str | None = None) -> ResourceIdentity:
        return ResourceIdentity(
            group=self.group, kind=self.kind, name=name, namespace=namespace
        )

    def decide(
        self,
        violations: Sequence[FieldViolation],
        name: str,
        namespace: str | None = None,
        warnings: Sequence[str] = (),
    ) -> AdmissionDecision:
        """
        Decide on a request from the violations found for it.

        Args:
            violations: Ordered violations produced by the validator
            name: Name of the resource instance
            namespace: Namespace of the resource instance
            warnings: Non-fatal findings to pass back to the client

        Returns:
            Allowed decision when there are no violations, denied otherwise
        """
        identity = self.identity(name, namespace)
        if not violations:
            return AdmissionDecision.allow(identity=identity, warnings=list(warnings))

        self.logger.debug(
            f"Denying {identity.qualified_kind} {name}: {len(violations)} violation(s)"
        )
        return AdmissionDecision.deny(
            list(violations), identity=identity, warnings=list(warnings)
        )

    def to_error(self, decision: AdmissionDecision) -> InvalidResourceError | None:
        """Return the structured rejection for a denied decision, None if allowed."""
        if decision.allowed:
            return None
        identity = decision.identity or self.identity("")
        return InvalidResourceError(identity, decision.violations)
