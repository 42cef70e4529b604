"""Custom exceptions for the HPP request/response adapter."""

from dataclasses import dataclass
from enum import Enum


class HppError(Exception):
    """Base exception for all HPP conversion errors."""

    pass


class ViolationKind(str, Enum):
    """Kind of field-level rule violation."""

    REQUIRED = "required"
    MAX_LENGTH = "max_length"
    PATTERN = "pattern"


@dataclass(frozen=True)
class FieldViolation:
    """A single failed rule for one field.

    Attributes:
        field: Wire name of the field (e.g. "MERCHANT_ID")
        kind: Which rule failed
        message: Human readable description
    """

    field: str
    kind: ViolationKind
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(HppError):
    """
    Raised when one or more fields break their validation rules.

    All violations for the object are collected before this is raised,
    so a single error lists every offending field.
    """

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        details = "; ".join(str(v) for v in self.violations)
        super().__init__(f"{len(self.violations)} validation error(s): {details}")

    @property
    def fields(self) -> list[str]:
        """Wire names of the fields that failed, in reporting order."""
        return [v.field for v in self.violations]


class HashMismatchError(HppError):
    """Raised when a response's security hash does not match the recomputed hash."""

    pass


class EncodingError(HppError):
    """Raised when field values cannot be encoded with the configured charset."""

    pass


class DecodingError(HppError):
    """
    Raised when a field value is not valid Base64 or does not decode
    under the configured charset.
    """

    pass


class ParseError(HppError):
    """Raised when a wire payload is not well-formed JSON of the expected shape."""

    pass
