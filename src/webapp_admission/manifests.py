"""
ValidatingWebhookConfiguration rendering.

Kopf does not manage the webhook configuration (see ``operator.py``), so it
is rendered here and applied together with the serving certificate. The
webhook points either at the in-cluster Service fronting the webhook server
or at an explicit URL.
"""

import argparse
from typing import Any

import yaml

from webapp_admission.constants import (
    API_GROUP,
    API_PLURAL,
    API_VERSION,
    OPERATION_DELETE,
    WEBHOOK_ADMISSION_REVIEW_VERSIONS,
    WEBHOOK_CONFIGURATION_NAME,
    WEBHOOK_FAILURE_POLICY,
    WEBHOOK_NAME,
    WEBHOOK_OPERATIONS,
    WEBHOOK_PATH,
    WEBHOOK_SIDE_EFFECTS,
    WEBHOOK_TIMEOUT_SECONDS,
)
from webapp_admission.settings import settings as webhook_settings


def build_client_config(
    url: str | None = None,
    service_name: str | None = None,
    service_namespace: str | None = None,
    service_port: int = 443,
    ca_bundle: str | None = None,
) -> dict[str, Any]:
    """
    Build the ``clientConfig`` telling the API server how to reach the webhook.

    Args:
        url: Explicit webhook URL; takes precedence over the service reference
        service_name: Name of the Service fronting the webhook server
        service_namespace: Namespace of that Service
        service_port: Service port forwarding to the webhook server
        ca_bundle: Base64-encoded CA bundle used to verify the serving certificate

    Returns:
        clientConfig dict
    """
    if url:
        client_config: dict[str, Any] = {"url": url}
    else:
        client_config = {
            "service": {
                "name": service_name or webhook_settings.webhook_service_name,
                "namespace": service_namespace
                or webhook_settings.webhook_service_namespace,
                "path": WEBHOOK_PATH,
                "port": service_port,
            }
        }

    if ca_bundle:
        client_config["caBundle"] = ca_bundle
    return client_config


def build_validating_webhook_configuration(
    client_config: dict[str, Any],
    name: str = WEBHOOK_CONFIGURATION_NAME,
    operations: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build the ValidatingWebhookConfiguration for Deployment resources.

    Args:
        client_config: Output of ``build_client_config``
        name: metadata.name of the configuration
        operations: Operations routed to the webhook (CREATE and UPDATE by default)

    Returns:
        ValidatingWebhookConfiguration manifest as a dict
    """
    return {
        "apiVersion": "admissionregistration.k8s.io/v1",
        "kind": "ValidatingWebhookConfiguration",
        "metadata": {"name": name},
        "webhooks": [
            {
                "name": WEBHOOK_NAME,
                "admissionReviewVersions": list(WEBHOOK_ADMISSION_REVIEW_VERSIONS),
                "clientConfig": client_config,
                "failurePolicy": WEBHOOK_FAILURE_POLICY,
                "sideEffects": WEBHOOK_SIDE_EFFECTS,
                "timeoutSeconds": WEBHOOK_TIMEOUT_SECONDS,
                "rules": [
                    {
                        "apiGroups": [API_GROUP],
                        "apiVersions": [API_VERSION],
                        "operations": list(operations or WEBHOOK_OPERATIONS),
                        "resources": [API_PLURAL],
                    }
                ],
            }
        ],
    }


def render_manifest(manifest: dict[str, Any]) -> str:
    return yaml.safe_dump(manifest, sort_keys=False, default_flow_style=False)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webapp-admission-manifests",
        description="Render the ValidatingWebhookConfiguration for Deployments.",
    )
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--url", help="Webhook URL reachable by the API server.")
    target.add_argument("--service-name", help="Service fronting the webhook.")
    parser.add_argument("--service-namespace", help="Namespace of the Service.")
    parser.add_argument(
        "--service-port", type=int, default=443, help="Service port (default 443)."
    )
    parser.add_argument("--ca-bundle", help="Base64-encoded CA bundle.")
    parser.add_argument(
        "--name",
        default=WEBHOOK_CONFIGURATION_NAME,
        help="metadata.name of the generated configuration.",
    )
    parser.add_argument(
        "--include-delete",
        action="store_true",
        help="Also route DELETE requests to the webhook.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    operations = list(WEBHOOK_OPERATIONS)
    if args.include_delete:
        operations.append(OPERATION_DELETE)

    client_config = build_client_config(
        url=args.url,
        service_name=args.service_name,
        service_namespace=args.service_namespace,
        service_port=args.service_port,
        ca_bundle=args.ca_bundle,
    )
    manifest = build_validating_webhook_configuration(
        client_config, name=args.name, operations=operations
    )
    print(render_manifest(manifest), end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
