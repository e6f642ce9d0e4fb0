"""
Admission webhooks for webapp resources.

This module provides the validating admission webhook for Deployment custom
resources. The webhook validates resources before they are accepted by
Kubernetes, providing immediate feedback and preventing invalid
configurations from being stored.

Webhooks are served by Kopf's built-in HTTPS server; handlers are registered
explicitly with ``register_deployment_webhook``.
"""

from .deployment import DeploymentAdmission, register_deployment_webhook

__all__ = ["DeploymentAdmission", "register_deployment_webhook"]
