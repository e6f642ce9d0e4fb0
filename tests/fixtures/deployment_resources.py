"""
Test fixtures for Deployment resources.

This module provides sample Deployment custom resources for testing
purposes, including valid and invalid configurations.
"""

import copy
from typing import Any

# Smallest Deployment the webhook accepts
MINIMAL_DEPLOYMENT = {
    "apiVersion": "webapp.my.domain/v1",
    "kind": "Deployment",
    "metadata": {"name": "test-deployment", "namespace": "default"},
    "spec": {"replicas": 3},
}

# Deployment with every field set
COMPLETE_DEPLOYMENT = {
    "apiVersion": "webapp.my.domain/v1",
    "kind": "Deployment",
    "metadata": {
        "name": "production-deployment",
        "namespace": "webapp-system",
        "labels": {"app": "webapp", "environment": "production"},
    },
    "spec": {"replicas": 5, "range": {"interval": "5m"}},
}

# Too few replicas to survive node loss
UNDER_REPLICATED_DEPLOYMENT = {
    "apiVersion": "webapp.my.domain/v1",
    "kind": "Deployment",
    "metadata": {"name": "small-deployment", "namespace": "default"},
    "spec": {"replicas": 2, "range": {"interval": "5m"}},
}

# replicas is not an integer
MALFORMED_DEPLOYMENT = {
    "apiVersion": "webapp.my.domain/v1",
    "kind": "Deployment",
    "metadata": {"name": "broken-deployment", "namespace": "default"},
    "spec": {"replicas": "three"},
}


def make_deployment(
    replicas: Any = 3,
    interval: str | None = None,
    name: str = "test-deployment",
    namespace: str = "default",
) -> dict[str, Any]:
    """Build a Deployment object with the given spec values."""
    deployment = copy.deepcopy(MINIMAL_DEPLOYMENT)
    deployment["metadata"]["name"] = name
    deployment["metadata"]["namespace"] = namespace
    deployment["spec"]["replicas"] = replicas
    if interval is not None:
        deployment["spec"]["range"] = {"interval": interval}
    return deployment
