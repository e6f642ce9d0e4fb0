"""
Validating admission webhook for webapp Deployment resources.

This webhook validates Deployment configurations before they are accepted
by Kubernetes, enforcing:
- A minimum replica count, so deployments tolerate node loss
- A parseable observation interval (reported as a warning by default)

Create and update requests are validated against the proposed object only;
deletes are always allowed.
"""

import logging
import time
from collections.abc import Mapping
from typing import Any, TypeAlias

import kopf

from webapp_admission.constants import (
    API_GROUP,
    API_PLURAL,
    API_VERSION,
    OPERATION_CREATE,
    OPERATION_DELETE,
    OPERATION_UPDATE,
    WEBHOOK_HANDLER_ID,
)
from webapp_admission.errors import InvalidResourceError
from webapp_admission.models.admission import AdmissionDecision
from webapp_admission.models.deployment import Deployment
from webapp_admission.observability.logging import AdmissionLogger
from webapp_admission.observability.metrics import MetricsCollector
from webapp_admission.validation.aggregator import DecisionAggregator
from webapp_admission.validation.validator import DeploymentValidator

Candidate: TypeAlias = Deployment | Mapping[str, Any]
AdmissionResult: TypeAlias = tuple[list[str], InvalidResourceError | None]


def _identity_of(candidate: Any) -> tuple[str, str | None]:
    """Best-effort name and namespace, also for objects that fail to parse."""
    if isinstance(candidate, Deployment):
        return candidate.name, candidate.namespace
    if isinstance(candidate, Mapping):
        metadata = candidate.get("metadata")
        if isinstance(metadata, Mapping):
            name = metadata.get("name")
            namespace = metadata.get("namespace")
            return (
                name if isinstance(name, str) else "",
                namespace if isinstance(namespace, str) else None,
            )
    return "", None


def _as_plain(value: Any) -> Any:
    """Copy Kopf's body views into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {key: _as_plain(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [_as_plain(item) for item in value]
    return value


class DeploymentAdmission:
    """
    Create/update/delete admission hooks for Deployment resources.

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        validator: DeploymentValidator | None = None,
        aggregator: DecisionAggregator | None = None,
        logger: AdmissionLogger | logging.Logger | None = None,
        metrics: MetricsCollector | None = None,
    ):
        """
        Initialize admission hooks.

        Args:
            validator: Validator to run (default rules if omitted)
            aggregator: Aggregator producing decisions (Deployment.webapp if omitted)
            logger: Logger for request and decision logs
            metrics: Collector recording decisions; metrics are skipped if omitted
        """
        if logger is None or isinstance(logger, logging.Logger):
            logger = AdmissionLogger(logger or logging.getLogger(__name__))

        self.logger = logger
        self.validator = validator or DeploymentValidator(logger=logger.logger)
        self.aggregator = aggregator or DecisionAggregator(logger=logger.logger)
        self.metrics = metrics

    def validate_create(
        self, candidate: Candidate, *, dryrun: bool = False
    ) -> AdmissionResult:
        """Validate a Deployment about to be created."""
        return self._admit(OPERATION_CREATE, candidate, dryrun=dryrun)

    def validate_update(
        self,
        candidate: Candidate,
        previous: Candidate | None = None,
        *,
        dryrun: bool = False,
    ) -> AdmissionResult:
        """
        Validate the proposed state of an updated Deployment.

        The previous state is accepted for completeness; no current rule
        compares old and new objects.
        """
        return self._admit(OPERATION_UPDATE, candidate, dryrun=dryrun)

    def validate_delete(
        self, candidate: Candidate, *, dryrun: bool = False
    ) -> AdmissionResult:
        """Allow a delete; no invariants apply to removal."""
        name, namespace = _identity_of(candidate)
        self.logger.log_request(OPERATION_DELETE, name, namespace, dryrun=dryrun)
        decision = AdmissionDecision.allow(
            identity=self.aggregator.identity(name, namespace)
        )
        self._record(OPERATION_DELETE, decision)
        return list(decision.warnings), None

    def decide(self, candidate: Candidate) -> AdmissionDecision:
        """
        Run the validator and aggregator for a create or update.

        Args:
            candidate: Proposed object

        Returns:
            Decision for the request
        """
        name, namespace = _identity_of(candidate)
        report = self.validator.evaluate(candidate)
        return self.aggregator.decide(
            report.violations, name, namespace=namespace, warnings=report.warnings
        )

    def _admit(
        self, operation: str, candidate: Candidate, dryrun: bool = False
    ) -> AdmissionResult:
        name, namespace = _identity_of(candidate)
        self.logger.log_request(operation, name, namespace, dryrun=dryrun)

        start_time = time.perf_counter()
        decision = self.decide(candidate)
        self._record(operation, decision, time.perf_counter() - start_time)

        return list(decision.warnings), self.aggregator.to_error(decision)

    def _record(
        self, operation: str, decision: AdmissionDecision, duration: float | None = None
    ) -> None:
        self.logger.log_decision(operation, decision, duration=duration)
        if self.metrics is not None:
            self.metrics.record_decision(operation, decision)

    async def handle_admission(
        self,
        body: Mapping[str, Any] | None = None,
        old: Mapping[str, Any] | None = None,
        operation: str = "",
        dryrun: bool = False,
        warnings: list[str] | None = None,
        **kwargs,
    ) -> dict:
        """
        Kopf validating handler dispatching on the admission operation.

        Args:
            body: Object under admission (the proposed state)
            old: Previous object state for UPDATE and DELETE
            operation: CREATE, UPDATE, DELETE or CONNECT
            dryrun: Whether this is a dry-run request
            warnings: Kopf's list of warnings returned to the client

        Returns:
            Empty dict (allowed)

        Raises:
            kopf.AdmissionError: If the request is denied
        """
        candidate = _as_plain(body or old or {})
        previous = _as_plain(old) if old else None

        if self.metrics is not None:
            with self.metrics.track_admission(operation):
                result = self._dispatch(operation, candidate, previous, dryrun)
        else:
            result = self._dispatch(operation, candidate, previous, dryrun)

        found_warnings, error = result
        if warnings is not None:
            warnings.extend(found_warnings)

        if error is not None:
            if dryrun:
                self.logger.logger.info(f"Dry-run request denied: {error.message}")
            raise error.as_admission_error() from error

        return {}

    def _dispatch(
        self,
        operation: str,
        candidate: Candidate,
        previous: Candidate | None,
        dryrun: bool = False,
    ) -> AdmissionResult:
        match operation.upper():
            case "CREATE":
                return self.validate_create(candidate, dryrun=dryrun)
            case "UPDATE":
                return self.validate_update(candidate, previous, dryrun=dryrun)
            case "DELETE":
                return self.validate_delete(previous or candidate, dryrun=dryrun)
            case _:
                self.logger.logger.debug(f"No admission rules for operation {operation}")
                return [], None


def register_deployment_webhook(
    admission: DeploymentAdmission,
    registry: kopf.OperatorRegistry | None = None,
):
    """
    Register the Deployment admission handler with Kopf.

    Kopf serves each admission handler under its id, so the webhook is
    reachable at ``/validate-webapp-my-domain-v1-deployment``.

    Args:
        admission: Hooks to dispatch requests to
        registry: Kopf registry to register with (Kopf's default if omitted)

    Returns:
        The registered handler
    """
    return kopf.on.validate(
        API_GROUP,
        API_VERSION,
        API_PLURAL,
        id=WEBHOOK_HANDLER_ID,
        registry=registry,
    )(admission.handle_admission)
