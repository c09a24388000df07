"""Exceptions raised by the Moovover domain core."""

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldError(BaseModel):
    """A single failed rule on one field."""

    model_config = ConfigDict(frozen=True)

    code: str = Field(description="Machine-readable error code, e.g. 'blank'")
    message: str = Field(description="Human-readable message, e.g. \"can't be blank\"")
    leads_with_value: bool = Field(
        default=False,
        description="Message starts with the offending value, e.g. 'XYZ is not a valid rating'",
    )


class MoovoverError(Exception):
    """Base exception for domain errors."""


class ValidationError(MoovoverError):
    """Raised when an entity fails validation.

    Carries an ordered mapping from field name to the errors found on it.
    """

    def __init__(self, errors: Mapping[str, Iterable[FieldError]]) -> None:
        self.errors: dict[str, list[FieldError]] = {
            field: list(field_errors) for field, field_errors in errors.items()
        }
        super().__init__("; ".join(self.full_messages) or "Validation failed")

    def messages(self) -> dict[str, list[str]]:
        """Return field -> list of messages."""
        return {field: [e.message for e in errs] for field, errs in self.errors.items()}

    def codes(self) -> dict[str, list[str]]:
        """Return field -> list of error codes."""
        return {field: [e.code for e in errs] for field, errs in self.errors.items()}

    @property
    def full_messages(self) -> list[str]:
        """Messages prefixed with the humanized field name.

        Messages that lead with the offending value
        (e.g. "XYZ is not a valid rating") are kept as-is.
        """
        result = []
        for field, errs in self.errors.items():
            label = field.removesuffix("_id").replace("_", " ").capitalize()
            for e in errs:
                if e.leads_with_value:
                    result.append(e.message)
                else:
                    result.append(f"{label} {e.message}")
        return result


class NotFoundError(MoovoverError):
    """Raised when a requested entity does not exist."""

    def __init__(self, kind: str, identifier: Any) -> None:
        super().__init__(f"{kind} {identifier} not found")
        self.kind = kind
        self.identifier = identifier


class ConflictError(MoovoverError):
    """Raised by persistence when a uniqueness constraint is violated."""

    def __init__(self, kind: str, message: str = "Uniqueness constraint violated") -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind


class ArgumentError(MoovoverError, ValueError):
    """Raised when an operation is called with an invalid argument."""


class PersistenceError(MoovoverError):
    """Raised when storage rejects a write for a reason other than uniqueness.

    For example a missing required column or a reference to a row that
    does not exist.
    """

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind
