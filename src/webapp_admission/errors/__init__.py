"""
Error handling module for the webapp admission webhook.

This module provides the error hierarchy raised at the seam between the
validation core and Kopf's admission server.
"""

from .admission_errors import (
    AdmissionControlError,
    InvalidResourceError,
    MalformedResourceError,
)

__all__ = [
    "AdmissionControlError",
    "InvalidResourceError",
    "MalformedResourceError",
]
