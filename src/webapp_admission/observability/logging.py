"""
Structured logging utilities for the webapp admission webhook.

This module provides correlation ID tracking, structured log formatting,
and decision logging for admission requests.
"""

import json
import logging
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

from webapp_admission.constants import RESOURCE_TYPE
from webapp_admission.models.admission import AdmissionDecision

# Context variable for tracking correlation IDs across async operations
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Paths that should be filtered from access logs (health probes)
HEALTH_PROBE_PATHS = frozenset({"/healthz", "/metrics"})

# Record attributes copied into JSON output when present
STRUCTURED_FIELDS = (
    "resource_type",
    "resource_name",
    "namespace",
    "operation",
    "allowed",
    "dryrun",
    "violation_count",
    "violations",
    "warning_count",
    "duration",
    "error_type",
)


class HealthProbeFilter(logging.Filter):
    """
    Logging filter that suppresses health probe and metrics endpoint logs.

    These endpoints are hit frequently by Kubernetes probes and monitoring
    systems, generating excessive noise in logs during debugging.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        return all(path not in message for path in HEALTH_PROBE_PATHS)


class CorrelationIDFilter(logging.Filter):
    """Logging filter that adds correlation ID to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """
        Add correlation ID to the log record.

        Args:
            record: The log record to process

        Returns:
            True to allow the record to be processed
        """
        current_correlation_id = correlation_id.get()
        if not current_correlation_id:
            current_correlation_id = generate_correlation_id()
            correlation_id.set(current_correlation_id)

        record.correlation_id = current_correlation_id
        return True


class StructuredFormatter(logging.Formatter):
    """
    Structured JSON formatter for logs with correlation ID support.

    Formats log records as structured JSON for better parsing and analysis
    in production monitoring systems.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON-formatted log message
        """
        log_data = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", ""),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for field in STRUCTURED_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        return json.dumps(log_data, default=str)


def generate_correlation_id() -> str:
    """
    Generate a new correlation ID.

    Returns:
        Unique correlation ID string
    """
    return str(uuid.uuid4())[:8]  # Short 8-character ID for readability


def set_correlation_id(corr_id: str) -> str:
    """
    Set the correlation ID for the current context.

    Args:
        corr_id: Correlation ID to set

    Returns:
        The correlation ID that was set
    """
    correlation_id.set(corr_id)
    return corr_id


def get_correlation_id() -> str:
    """Get the current correlation ID, or empty string if none set."""
    return correlation_id.get("")


def setup_structured_logging(
    log_level: str = "INFO",
    enable_json_formatting: bool = True,
    correlation_id_enabled: bool = True,
    log_health_probes: bool = False,
    webhook_log_level: str = "INFO",
) -> None:
    """
    Set up structured logging for the webhook process.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_json_formatting: Whether to use JSON formatting
        correlation_id_enabled: Whether to enable correlation ID tracking
        log_health_probes: Whether to log health probe requests (default: False)
        webhook_log_level: Log level for admission webhook loggers
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()

    if enable_json_formatting:
        formatter: logging.Formatter = StructuredFormatter()
    elif correlation_id_enabled:
        formatter = logging.Formatter(
            "%(asctime)s - %(correlation_id)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    handler.setFormatter(formatter)

    if correlation_id_enabled:
        handler.addFilter(CorrelationIDFilter())

    if not log_health_probes:
        handler.addFilter(HealthProbeFilter())

    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # Set specific logger levels for third-party libraries
    logging.getLogger("kopf").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.server").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.web").setLevel(logging.WARNING)

    webhook_level = getattr(logging, webhook_log_level.upper(), logging.INFO)
    logging.getLogger("webapp_admission.webhooks").setLevel(webhook_level)
    logging.getLogger("webapp_admission.validation").setLevel(webhook_level)


class AdmissionLogger:
    """
    Logger for admission requests with structured logging support.

    Wraps a standard logger so callers can inject their own (tests pass a
    capturing logger) while decisions are logged with consistent fields.
    """

    def __init__(self, logger: logging.Logger | str = "webapp_admission.webhooks"):
        """
        Initialize admission logger.

        Args:
            logger: Logger instance, or the name of the logger to use
        """
        if isinstance(logger, str):
            logger = logging.getLogger(logger)
        self.logger = logger

    def log_request(
        self, operation: str, name: str, namespace: str | None, dryrun: bool = False
    ) -> None:
        """Log the start of an admission check."""
        self.logger.info(
            f"validate {operation.lower()}",
            extra={
                "resource_type": RESOURCE_TYPE,
                "resource_name": name,
                "namespace": namespace,
                "operation": operation,
                "dryrun": dryrun,
            },
        )

    def log_decision(
        self, operation: str, decision: AdmissionDecision, duration: float | None = None
    ) -> None:
        """
        Log the outcome of an admission check.

        Allowed requests are logged at INFO, denied ones at WARNING with
        every violation rendered.

        Args:
            operation: Admission operation (CREATE, UPDATE, DELETE)
            decision: Decision reached for the request
            duration: Time spent deciding, in seconds
        """
        identity = decision.identity
        name = identity.name if identity else ""
        extra = {
            "resource_type": RESOURCE_TYPE,
            "resource_name": name,
            "namespace": identity.namespace if identity else None,
            "operation": operation,
            "allowed": decision.allowed,
            "violation_count": len(decision.violations),
            "warning_count": len(decision.warnings),
        }
        if duration is not None:
            extra["duration"] = duration

        if decision.allowed:
            self.logger.info(f"{operation} of {name} allowed", extra=extra)
            return

        extra["violations"] = [str(violation) for violation in decision.violations]
        self.logger.warning(
            f"{operation} of {name} denied: {len(decision.violations)} violation(s)",
            extra=extra,
        )
