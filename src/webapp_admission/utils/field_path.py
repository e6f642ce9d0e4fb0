"""
Field paths for addressing values inside a resource.

``FieldPath`` follows the conventions of the Kubernetes ``field.Path`` helper:
named children are joined with dots and list positions are written in
brackets (``spec.containers[0].name``).
"""

from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from webapp_admission.models.admission import FieldViolation

ROOT_PATH = "<root>"


class FieldPath:
    """Immutable path to a field within an object."""

    __slots__ = ("_segments",)

    def __init__(self, name: str, *more: str) -> None:
        self._segments: tuple[str, ...] = tuple(
            segment for segment in (name, *more) if segment
        )

    @classmethod
    def _from_segments(cls, segments: tuple[str, ...]) -> "FieldPath":
        path = cls.__new__(cls)
        path._segments = segments
        return path

    @classmethod
    def from_location(cls, location: Iterable[Any]) -> "FieldPath":
        """Build a path from a pydantic error location such as ``("spec", "replicas")``."""
        path = cls._from_segments(())
        for part in location:
            path = path.index(part) if isinstance(part, int) else path.child(str(part))
        return path

    def child(self, name: str, *more: str) -> "FieldPath":
        return self._from_segments(
            self._segments + tuple(segment for segment in (name, *more) if segment)
        )

    def index(self, position: int) -> "FieldPath":
        return self._from_segments(self._segments + (f"[{position}]",))

    def __str__(self) -> str:
        if not self._segments:
            return ROOT_PATH
        rendered = ""
        for segment in self._segments:
            if segment.startswith("[") or not rendered:
                rendered += segment
            else:
                rendered += f".{segment}"
        return rendered

    def __repr__(self) -> str:
        return f"FieldPath({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldPath):
            return self._segments == other._segments
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)


def violations_from_pydantic(error: PydanticValidationError) -> list[FieldViolation]:
    """
    Translate a pydantic validation error into field violations.

    Missing fields become Required violations, wrong JSON types become
    TypeInvalid violations and everything else is reported as Invalid.
    Order follows the order pydantic reports the errors in.

    Args:
        error: Error raised while parsing a candidate object

    Returns:
        One field violation per pydantic error
    """
    violations = []
    for item in error.errors(include_url=False):
        path = FieldPath.from_location(item.get("loc", ()))
        error_type = item.get("type", "")
        message = item.get("msg", "")
        if error_type == "missing":
            violations.append(FieldViolation.required(path, message))
        elif error_type.endswith("_type"):
            violations.append(
                FieldViolation.type_invalid(path, item.get("input"), message)
            )
        else:
            violations.append(FieldViolation.invalid(path, item.get("input"), message))
    return violations
