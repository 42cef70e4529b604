"""HPP domain layer.

This package contains the request/response records, the security hash,
the Base64 field codec, default generation and validation rules.
"""

from realex_hpp.domain.exceptions import (
    DecodingError,
    EncodingError,
    FieldViolation,
    HashMismatchError,
    HppError,
    ParseError,
    ValidationError,
    ViolationKind,
)
from realex_hpp.domain.hashing import generate_hash
from realex_hpp.domain.request import HppRequest
from realex_hpp.domain.response import HppResponse
from realex_hpp.domain.validation import validate_request, validate_response, validate_response_mappings

__all__ = [
    # Records
    "HppRequest",
    "HppResponse",
    # Exceptions
    "HppError",
    "ValidationError",
    "HashMismatchError",
    "EncodingError",
    "DecodingError",
    "ParseError",
    "FieldViolation",
    "ViolationKind",
    # Operations
    "generate_hash",
    "validate_request",
    "validate_response",
    "validate_response_mappings",
]
