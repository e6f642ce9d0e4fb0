#!/usr/bin/env python3
"""
Webapp Admission - Main entry point for the Kopf-based admission webhook.

Runs Kopf with only the Deployment validating webhook registered. Kopf's
webhook server terminates TLS and answers AdmissionReview requests; this
module wires it to the validation core.

Usage:
    python -m webapp_admission.operator

Environment Variables:
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    JSON_LOGS: Set to 'false' for plain text logs
    WEBHOOK_PORT: Port of the admission webhook server
    WEBHOOK_CERT_DIR: Directory containing tls.crt and tls.key
    METRICS_PORT: Port of the Prometheus metrics endpoint
"""

import logging
import sys

import kopf

from webapp_admission.observability.logging import setup_structured_logging
from webapp_admission.observability.metrics import MetricsServer, metrics_collector
from webapp_admission.settings import settings as webhook_settings
from webapp_admission.webhooks.deployment import (
    DeploymentAdmission,
    register_deployment_webhook,
)

logger = logging.getLogger(__name__)

# Global reference to metrics server for cleanup
_global_metrics_server: MetricsServer | None = None


def configure_logging() -> None:
    """Configure structured logging based on webhook_settings."""
    setup_structured_logging(
        log_level=webhook_settings.log_level.upper(),
        enable_json_formatting=webhook_settings.json_logs,
        correlation_id_enabled=webhook_settings.correlation_ids,
        webhook_log_level=webhook_settings.webhook_log_level,
    )


def build_admission() -> DeploymentAdmission:
    """Create the admission hooks with the default rule set and metrics."""
    return DeploymentAdmission(
        logger=logging.getLogger("webapp_admission.webhooks.deployment"),
        metrics=metrics_collector,
    )


def build_operator_settings() -> kopf.OperatorSettings:
    """
    Build Kopf settings for the admission server.

    Webhook configurations are rendered by ``webapp_admission.manifests`` and
    applied alongside the certificates, so Kopf does not manage them.

    Returns:
        Settings object to pass to ``kopf.run``
    """
    settings_obj = kopf.OperatorSettings()
    settings_obj.admission.managed = None

    if webhook_settings.enable_webhooks:
        settings_obj.admission.server = kopf.WebhookServer(
            port=webhook_settings.webhook_port,
            addr=webhook_settings.webhook_host,
            certfile=webhook_settings.webhook_certfile,
            pkeyfile=webhook_settings.webhook_pkeyfile,
        )
        logger.info(
            f"Admission webhooks ENABLED on port {webhook_settings.webhook_port} "
            f"using certificates from {webhook_settings.webhook_cert_dir}"
        )
    else:
        settings_obj.admission.server = None
        logger.info("Admission webhooks DISABLED")

    return settings_obj


@kopf.on.startup()
async def startup_handler(**_) -> None:
    """Start the metrics server once Kopf is running."""
    global _global_metrics_server

    logger.info("Starting webapp admission webhook...")
    try:
        metrics_server = MetricsServer(
            port=webhook_settings.metrics_port, host=webhook_settings.metrics_host
        )
        await metrics_server.start()
        _global_metrics_server = metrics_server
    except OSError as e:
        logger.error(
            f"Failed to start metrics server: {e}",
            extra={"error_type": type(e).__name__},
        )
        logger.warning("Continuing without metrics server")


@kopf.on.cleanup()
async def cleanup_handler(**_) -> None:
    """Stop the metrics server on shutdown."""
    global _global_metrics_server

    logger.info("Shutting down webapp admission webhook...")
    if _global_metrics_server:
        await _global_metrics_server.stop()
        _global_metrics_server = None


def main() -> None:
    """
    Main entry point for the webhook process.

    This function:
    1. Configures logging
    2. Registers the Deployment admission handler
    3. Configures the admission server (must be before kopf.run())
    4. Runs Kopf
    """
    configure_logging()

    if webhook_settings.enable_webhooks:
        register_deployment_webhook(build_admission())

    settings_obj = build_operator_settings()

    try:
        kopf.run(clusterwide=True, settings=settings_obj)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
        sys.exit(0)
    except Exception as e:
        logger.error(
            f"Webhook failed with error: {e}", extra={"error_type": type(e).__name__}
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
