"""
Models describing the outcome of an admission check.

A ``FieldViolation`` mirrors the Kubernetes ``field.Error`` type: it names the
offending field, the value that was rejected and why. An ``AdmissionDecision``
collects the violations produced for one request; it is allowed if and only
if there are none.
"""

import json
from typing import Any, Self

from pydantic import BaseModel, Field, model_validator

from webapp_admission.constants import (
    FIELD_ERROR_DETAILS,
    FIELD_VALUE_INVALID,
    FIELD_VALUE_REQUIRED,
    FIELD_VALUE_TYPE_INVALID,
)


def render_value(value: Any) -> str:
    """Render a rejected value the way Kubernetes prints it in field errors."""
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return str(value)


class FieldViolation(BaseModel):
    """A single invariant failure tied to a field of the resource."""

    model_config = {"frozen": True}

    path: str = Field(..., description="Dotted locator of the field, e.g. spec.replicas")
    rejected_value: Any = Field(None, description="Value that failed validation")
    message: str = Field("", description="Why the value was rejected")
    type: str = Field(FIELD_VALUE_INVALID, description="Kubernetes field error type")

    @classmethod
    def invalid(cls, path: Any, value: Any, message: str) -> Self:
        return cls(path=str(path), rejected_value=value, message=message)

    @classmethod
    def required(cls, path: Any, message: str = "") -> Self:
        return cls(path=str(path), message=message, type=FIELD_VALUE_REQUIRED)

    @classmethod
    def type_invalid(cls, path: Any, value: Any, message: str) -> Self:
        return cls(
            path=str(path),
            rejected_value=value,
            message=message,
            type=FIELD_VALUE_TYPE_INVALID,
        )

    def error_body(self) -> str:
        """
        Render the violation without its field path.

        Required values carry no rejected value; every other type prints the
        value JSON-encoded, followed by the message when there is one.
        """
        body = FIELD_ERROR_DETAILS.get(self.type, FIELD_ERROR_DETAILS[FIELD_VALUE_INVALID])
        if self.type != FIELD_VALUE_REQUIRED:
            body = f"{body}: {render_value(self.rejected_value)}"
        if self.message:
            body = f"{body}: {self.message}"
        return body

    def __str__(self) -> str:
        return f"{self.path}: {self.error_body()}"


class ResourceIdentity(BaseModel):
    """Group, kind and instance name of the resource under admission."""

    model_config = {"frozen": True}

    group: str
    kind: str
    name: str = ""
    namespace: str | None = None

    @property
    def qualified_kind(self) -> str:
        """Kind qualified by group, e.g. ``Deployment.webapp``."""
        if not self.group:
            return self.kind
        return f"{self.kind}.{self.group}"


class AdmissionDecision(BaseModel):
    """Outcome of one admission check."""

    model_config = {"frozen": True}

    allowed: bool
    violations: list[FieldViolation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    identity: ResourceIdentity | None = None

    @model_validator(mode="after")
    def check_allowed_matches_violations(self) -> Self:
        if self.allowed == bool(self.violations):
            raise ValueError(
                "a decision is denied if and only if it carries violations "
                f"(allowed={self.allowed}, violations={len(self.violations)})"
            )
        return self

    @classmethod
    def allow(
        cls,
        identity: ResourceIdentity | None = None,
        warnings: list[str] | None = None,
    ) -> Self:
        return cls(allowed=True, identity=identity, warnings=list(warnings or []))

    @classmethod
    def deny(
        cls,
        violations: list[FieldViolation],
        identity: ResourceIdentity | None = None,
        warnings: list[str] | None = None,
    ) -> Self:
        return cls(
            allowed=False,
            violations=list(violations),
            identity=identity,
            warnings=list(warnings or []),
        )

    @property
    def denied(self) -> bool:
        return not self.allowed
