"""Unit tests for webhook manifest rendering."""

import yaml

from webapp_admission.manifests import (
    build_client_config,
    build_validating_webhook_configuration,
    main,
    render_manifest,
)


class TestClientConfig:
    """Test cases for build_client_config."""

    def test_service_reference(self):
        config = build_client_config(
            service_name="webhook", service_namespace="webapp-system", service_port=8443
        )

        assert config == {
            "service": {
                "name": "webhook",
                "namespace": "webapp-system",
                "path": "/validate-webapp-my-domain-v1-deployment",
                "port": 8443,
            }
        }

    def test_service_defaults_come_from_settings(self):
        config = build_client_config()

        assert config["service"]["name"] == "webapp-webhook-service"
        assert config["service"]["namespace"] == "webapp-system"
        assert config["service"]["port"] == 443

    def test_url_takes_precedence(self):
        config = build_client_config(
            url="https://webhook.example.com/validate", service_name="ignored"
        )
        assert config == {"url": "https://webhook.example.com/validate"}

    def test_ca_bundle(self):
        config = build_client_config(url="https://x", ca_bundle="Q0E=")
        assert config["caBundle"] == "Q0E="


class TestValidatingWebhookConfiguration:
    """Test cases for the ValidatingWebhookConfiguration manifest."""

    def test_manifest_matches_webhook_registration(self):
        manifest = build_validating_webhook_configuration(
            build_client_config(url="https://x")
        )

        assert manifest["kind"] == "ValidatingWebhookConfiguration"
        webhook = manifest["webhooks"][0]
        assert webhook["name"] == "vdeployment.kb.io"
        assert webhook["failurePolicy"] == "Fail"
        assert webhook["sideEffects"] == "None"
        assert webhook["admissionReviewVersions"] == ["v1"]
        assert webhook["rules"] == [
            {
                "apiGroups": ["webapp.my.domain"],
                "apiVersions": ["v1"],
                "operations": ["CREATE", "UPDATE"],
                "resources": ["deployments"],
            }
        ]

    def test_render_round_trips_through_yaml(self):
        manifest = build_validating_webhook_configuration(
            build_client_config(url="https://x"), name="custom"
        )

        assert yaml.safe_load(render_manifest(manifest)) == manifest


class TestCli:
    """Test cases for the manifest CLI."""

    def test_main_prints_yaml(self, capsys):
        assert main(["--url", "https://webhook.example.com", "--include-delete"]) == 0

        manifest = yaml.safe_load(capsys.readouterr().out)
        assert manifest["webhooks"][0]["clientConfig"]["url"] == (
            "https://webhook.example.com"
        )
        assert manifest["webhooks"][0]["rules"][0]["operations"] == [
            "CREATE",
            "UPDATE",
            "DELETE",
        ]

    def test_main_with_service(self, capsys):
        main(["--service-name", "hook", "--service-namespace", "ns", "--name", "vwc"])

        manifest = yaml.safe_load(capsys.readouterr().out)
        assert manifest["metadata"]["name"] == "vwc"
        assert manifest["webhooks"][0]["clientConfig"]["service"]["name"] == "hook"
