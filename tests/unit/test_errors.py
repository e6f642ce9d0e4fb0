"""
Unit tests for admission errors.

The Invalid error must read like the one the Kubernetes API server returns
for rejected objects, and convert into a Kopf admission denial.
"""

import kopf

from webapp_admission.constants import FIELD_VALUE_INVALID, FIELD_VALUE_REQUIRED
from webapp_admission.errors import AdmissionControlError, InvalidResourceError
from webapp_admission.models.admission import FieldViolation, ResourceIdentity

IDENTITY = ResourceIdentity(group="webapp", kind="Deployment", name="web")


class TestInvalidResourceError:
    """Test cases for InvalidResourceError."""

    def test_single_violation_message(self):
        error = InvalidResourceError(
            IDENTITY, [FieldViolation.invalid("spec.replicas", 2, "too few")]
        )

        assert str(error) == (
            'Deployment.webapp "web" is invalid: '
            "spec.replicas: Invalid value: 2: too few"
        )
        assert error.category == "validation"

    def test_multiple_violations_are_bracketed(self):
        error = InvalidResourceError(
            IDENTITY,
            [
                FieldViolation.invalid("spec.replicas", 0, "too few"),
                FieldViolation.required("spec.range.interval"),
            ],
        )

        assert str(error) == (
            'Deployment.webapp "web" is invalid: ['
            "spec.replicas: Invalid value: 0: too few, "
            "spec.range.interval: Required value]"
        )

    def test_duplicate_messages_printed_once_but_kept(self):
        violation = FieldViolation.invalid("spec.replicas", 0, "too few")

        error = InvalidResourceError(IDENTITY, [violation, violation])

        assert str(error).endswith("spec.replicas: Invalid value: 0: too few")
        assert len(error.violations) == 2

    def test_is_admission_control_error(self):
        error = InvalidResourceError(IDENTITY, [FieldViolation.required("spec")])
        assert isinstance(error, AdmissionControlError)

    def test_to_status(self):
        error = InvalidResourceError(
            IDENTITY,
            [
                FieldViolation.invalid("spec.replicas", 1, "too few"),
                FieldViolation.required("spec.range"),
            ],
        )

        status = error.to_status()

        assert status["kind"] == "Status"
        assert status["status"] == "Failure"
        assert status["reason"] == "Invalid"
        assert status["code"] == 422
        assert status["message"] == error.message
        assert status["details"]["name"] == "web"
        assert status["details"]["group"] == "webapp"
        assert status["details"]["kind"] == "Deployment"
        assert status["details"]["causes"] == [
            {
                "reason": FIELD_VALUE_INVALID,
                "message": "Invalid value: 1: too few",
                "field": "spec.replicas",
            },
            {
                "reason": FIELD_VALUE_REQUIRED,
                "message": "Required value",
                "field": "spec.range",
            },
        ]

    def test_as_admission_error(self):
        error = InvalidResourceError(
            IDENTITY, [FieldViolation.invalid("spec.replicas", 1, "too few")]
        )

        admission_error = error.as_admission_error()

        assert isinstance(admission_error, kopf.AdmissionError)
        assert admission_error.code == 422
        assert str(admission_error) == error.message
