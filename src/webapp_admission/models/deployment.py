"""
Pydantic models for webapp Deployment resources.

This module defines the candidate object seen by the admission webhook.
Models are frozen: validation reads a candidate, it never changes one.
Defaulting happens upstream, so no spec field carries a default that would
hide a missing value from the validator.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from webapp_admission.constants import API_GROUP, API_VERSION, RESOURCE_KIND
from webapp_admission.errors import MalformedResourceError
from webapp_admission.models.admission import FieldViolation
from webapp_admission.utils.field_path import violations_from_pydantic


class DeploymentRange(BaseModel):
    """Observation window of a Deployment."""

    model_config = {"populate_by_name": True, "frozen": True}

    interval: str | None = Field(
        None,
        description="Duration of the observation window, e.g. '5m' or '1h30m'",
    )


class DeploymentSpec(BaseModel):
    """Desired state of a Deployment."""

    model_config = {"populate_by_name": True, "frozen": True}

    replicas: int = Field(
        ..., strict=True, description="Number of desired running copies"
    )
    range: DeploymentRange | None = Field(
        None, description="Scheduling/observation window"
    )

    @property
    def interval(self) -> str | None:
        """Configured observation interval, if any."""
        return self.range.interval if self.range else None


class DeploymentMetadata(BaseModel):
    """Subset of ObjectMeta the webhook cares about."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str = Field("", description="Name of the Deployment")
    namespace: str | None = Field(None, description="Namespace of the Deployment")
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class Deployment(BaseModel):
    """Complete Deployment custom resource."""

    model_config = {"populate_by_name": True, "frozen": True}

    api_version: str = Field(f"{API_GROUP}/{API_VERSION}", alias="apiVersion")
    kind: str = Field(RESOURCE_KIND)
    metadata: DeploymentMetadata = Field(default_factory=DeploymentMetadata)
    spec: DeploymentSpec

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str | None:
        return self.metadata.namespace


def load_deployment(candidate: "Deployment | Mapping[str, Any]") -> Deployment:
    """
    Interpret an admission candidate as a Deployment.

    Args:
        candidate: Deployment model or raw object from the admission request

    Returns:
        Parsed Deployment

    Raises:
        MalformedResourceError: If the object cannot be interpreted; the error
            carries one field violation per problem found
    """
    if isinstance(candidate, Deployment):
        return candidate

    if not isinstance(candidate, Mapping):
        raise MalformedResourceError(
            f"expected a {RESOURCE_KIND} object, got {type(candidate).__name__}",
            violations=[
                FieldViolation.type_invalid(
                    "<root>",
                    type(candidate).__name__,
                    f"expected a {RESOURCE_KIND} object",
                )
            ],
        )

    try:
        return Deployment.model_validate(dict(candidate))
    except PydanticValidationError as e:
        raise MalformedResourceError(
            f"{RESOURCE_KIND} could not be interpreted ({e.error_count()} errors)",
            violations=violations_from_pydantic(e),
        ) from e
