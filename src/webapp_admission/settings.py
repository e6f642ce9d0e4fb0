"""Centralized webhook settings using pydantic-settings.

This module provides a single source of truth for all webhook configuration
loaded from environment variables. Uses pydantic for automatic validation,
type coercion, and documentation.

Validation thresholds are deliberately not part of the settings: the minimum
replica count is a constant in ``webapp_admission.constants``.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Webhook configuration loaded from environment variables.

    All settings have sensible defaults for in-cluster use. Override via
    environment variables as documented per field.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging configuration
    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    json_logs: bool = Field(
        default=True,
        validation_alias="JSON_LOGS",
        description="Enable JSON formatted logging for structured log aggregation",
    )
    correlation_ids: bool = Field(
        default=True,
        validation_alias="CORRELATION_IDS",
        description="Enable correlation IDs in logs for request tracing",
    )
    webhook_log_level: str = Field(
        default="INFO",
        validation_alias="WEBHOOK_LOG_LEVEL",
        description="Log level for the admission webhook loggers",
    )

    # Admission webhook server
    enable_webhooks: bool = Field(
        default=True,
        validation_alias="ENABLE_WEBHOOKS",
        description="Enable admission webhooks for validation",
    )
    webhook_host: str = Field(
        default="0.0.0.0",
        validation_alias="WEBHOOK_HOST",
        description="Host address to bind the admission webhook server",
    )
    webhook_port: int = Field(
        default=9443,
        validation_alias="WEBHOOK_PORT",
        description="Port for admission webhook server",
        ge=1,
        le=65535,
    )
    webhook_cert_dir: str = Field(
        default="/tmp/k8s-webhook-server/serving-certs",
        validation_alias="WEBHOOK_CERT_DIR",
        description="Directory containing tls.crt and tls.key for the webhook server",
    )

    # Metrics and observability
    metrics_port: int = Field(
        default=8081,
        validation_alias="METRICS_PORT",
        description="Port for Prometheus metrics endpoint",
    )
    metrics_host: str = Field(
        default="0.0.0.0",
        validation_alias="METRICS_HOST",
        description="Host address to bind metrics server",
    )

    # Service fronting the webhook (used when rendering webhook manifests)
    webhook_service_name: str = Field(
        default="webapp-webhook-service",
        validation_alias="WEBHOOK_SERVICE_NAME",
        description="Name of the Service routing to the webhook server",
    )
    webhook_service_namespace: str = Field(
        default="webapp-system",
        validation_alias="WEBHOOK_SERVICE_NAMESPACE",
        description="Namespace of the Service routing to the webhook server",
    )

    @property
    def webhook_certfile(self) -> str:
        """Path to the serving certificate."""
        return f"{self.webhook_cert_dir.rstrip('/')}/tls.crt"

    @property
    def webhook_pkeyfile(self) -> str:
        """Path to the serving certificate's private key."""
        return f"{self.webhook_cert_dir.rstrip('/')}/tls.key"


# Global settings instance - initialized once at module import
settings = Settings()
