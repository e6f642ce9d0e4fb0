"""
Admission error hierarchy.

``InvalidResourceError`` is the structured rejection handed to the admission
framework: it names the resource's group, kind and instance and lists every
violated field, following ``k8s.io/apimachinery/pkg/api/errors.NewInvalid``.
"""

from collections.abc import Sequence
from typing import Any

import kopf

from webapp_admission.constants import STATUS_CODE_INVALID, STATUS_REASON_INVALID
from webapp_admission.models.admission import FieldViolation, ResourceIdentity


class AdmissionControlError(Exception):
    """
    Base error class for all admission-related exceptions.

    Provides categorization and user guidance for resolution.
    """

    def __init__(
        self,
        message: str,
        category: str,
        user_action: str | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize admission error.

        Args:
            message: Human-readable error description
            category: Error category (validation, malformed)
            user_action: What user should do to resolve the issue
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.category = category
        self.user_action = user_action
        self.cause = cause

    def __str__(self) -> str:
        """Enhanced string representation with user guidance."""
        base_msg = super().__str__()
        if self.user_action:
            return f"{base_msg}\nAction required: {self.user_action}"
        return base_msg


class MalformedResourceError(AdmissionControlError):
    """The candidate object could not be interpreted as the expected resource."""

    def __init__(self, message: str, violations: Sequence[FieldViolation]):
        super().__init__(
            message=message,
            category="malformed",
            user_action="Check the object against the resource schema",
        )
        self.violations = list(violations)


def _aggregate_messages(violations: Sequence[FieldViolation]) -> str:
    # Identical messages are printed once; single errors are not bracketed
    seen: set[str] = set()
    messages = []
    for violation in violations:
        rendered = str(violation)
        if rendered not in seen:
            seen.add(rendered)
            messages.append(rendered)
    if len(messages) == 1:
        return messages[0]
    return f"[{', '.join(messages)}]"


class InvalidResourceError(AdmissionControlError):
    """A resource failed validation on one or more fields."""

    def __init__(
        self, identity: ResourceIdentity, violations: Sequence[FieldViolation]
    ):
        self.identity = identity
        self.violations = list(violations)

        message = f'{identity.qualified_kind} "{identity.name}" is invalid'
        if self.violations:
            message = f"{message}: {_aggregate_messages(self.violations)}"

        super().__init__(message=message, category="validation")

    def to_status(self) -> dict[str, Any]:
        """
        Render the error as a Kubernetes ``Status`` object.

        Returns:
            Status dict with reason Invalid, code 422 and one cause per violation
        """
        return {
            "apiVersion": "v1",
            "kind": "Status",
            "status": "Failure",
            "message": self.message,
            "reason": STATUS_REASON_INVALID,
            "code": STATUS_CODE_INVALID,
            "details": {
                "name": self.identity.name,
                "group": self.identity.group,
                "kind": self.identity.kind,
                "causes": [
                    {
                        "reason": violation.type,
                        "message": violation.error_body(),
                        "field": violation.path,
                    }
                    for violation in self.violations
                ],
            },
        }

    def as_admission_error(self) -> kopf.AdmissionError:
        """Convert to the exception Kopf turns into a denied AdmissionReview."""
        return kopf.AdmissionError(self.message, code=STATUS_CODE_INVALID)
