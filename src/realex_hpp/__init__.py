"""Request/response adapter for the Realex hosted payment page (HPP)."""

from realex_hpp.config import HppSettings, SupplementaryDataLayout
from realex_hpp.domain import (
    DecodingError,
    EncodingError,
    FieldViolation,
    HashMismatchError,
    HppError,
    HppRequest,
    HppResponse,
    ParseError,
    ValidationError,
    ViolationKind,
)
from realex_hpp.hpp import RealexHpp

__version__ = "0.1.0"

__all__ = [
    "RealexHpp",
    "HppRequest",
    "HppResponse",
    "HppSettings",
    "SupplementaryDataLayout",
    "HppError",
    "ValidationError",
    "HashMismatchError",
    "EncodingError",
    "DecodingError",
    "ParseError",
    "FieldViolation",
    "ViolationKind",
]
