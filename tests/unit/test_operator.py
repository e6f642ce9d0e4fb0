"""Unit tests for the webhook entry point wiring."""

from unittest.mock import patch

import kopf
import pytest

from webapp_admission import operator
from webapp_admission.observability.metrics import metrics_collector
from webapp_admission.webhooks.deployment import DeploymentAdmission


class TestOperatorWiring:
    """Test cases for building the admission server configuration."""

    def test_webhook_server_configured_from_settings(self):
        with patch.object(operator.webhook_settings, "enable_webhooks", True):
            settings_obj = operator.build_operator_settings()

        server = settings_obj.admission.server
        assert isinstance(server, kopf.WebhookServer)
        assert server.port == operator.webhook_settings.webhook_port
        assert server.certfile == operator.webhook_settings.webhook_certfile
        assert server.pkeyfile == operator.webhook_settings.webhook_pkeyfile
        assert settings_obj.admission.managed is None

    def test_webhooks_disabled(self):
        with patch.object(operator.webhook_settings, "enable_webhooks", False):
            settings_obj = operator.build_operator_settings()

        assert settings_obj.admission.server is None

    def test_build_admission(self):
        admission = operator.build_admission()

        assert isinstance(admission, DeploymentAdmission)
        assert admission.metrics is metrics_collector
        _, error = admission.validate_create({"spec": {"replicas": 3}})
        assert error is None


class TestOperatorLifecycle:
    """Test cases for startup and failure handling."""

    @pytest.mark.asyncio
    async def test_metrics_bind_failure_is_logged_with_error_type(self):
        with (
            patch.object(
                operator.MetricsServer, "start", side_effect=OSError("in use")
            ),
            patch.object(operator, "logger") as logger,
        ):
            await operator.startup_handler()

        extra = logger.error.call_args.kwargs["extra"]
        assert extra["error_type"] == "OSError"
        assert operator._global_metrics_server is None

    def test_run_failure_exits_with_error_type_logged(self):
        with (
            patch.object(operator.webhook_settings, "enable_webhooks", False),
            patch.object(operator, "configure_logging"),
            patch.object(operator.kopf, "run", side_effect=RuntimeError("boom")),
            patch.object(operator, "logger") as logger,
            pytest.raises(SystemExit) as exc_info,
        ):
            operator.main()

        assert exc_info.value.code == 1
        assert logger.error.call_args.kwargs["extra"]["error_type"] == "RuntimeError"
