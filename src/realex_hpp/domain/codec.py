"""Base64 field codec.

Every encodable field is converted to the Base64 form of its bytes under a
fixed character set. Helpers here work on single values and on
string-to-string mappings; the record types decide which fields to pass in.
"""

import base64
import binascii
import codecs
from typing import Mapping, Optional

import structlog

from realex_hpp.domain.exceptions import DecodingError, EncodingError

logger = structlog.get_logger(__name__)

DEFAULT_CHARSET = "utf-8"


def check_charset(charset: str, error_cls: type[Exception] = EncodingError) -> str:
    """Return the canonical codec name for charset.

    Raises:
        EncodingError (or error_cls): If the runtime has no codec for charset
    """
    try:
        return codecs.lookup(charset).name
    except LookupError as e:
        logger.error("unsupported_charset", charset=charset)
        raise error_cls(f"Unsupported character set: {charset}") from e


def encode_value(value: Optional[str], charset: str = DEFAULT_CHARSET) -> Optional[str]:
    """Base64 encode a single value. None passes through unchanged."""
    if value is None:
        return None
    try:
        raw = value.encode(charset)
    except (UnicodeError, LookupError) as e:
        raise EncodingError(f"Cannot encode value using {charset}: {e}") from e
    return base64.b64encode(raw).decode("ascii")


def decode_value(value: Optional[str], charset: str = DEFAULT_CHARSET) -> Optional[str]:
    """Decode a single Base64 value. None passes through unchanged.

    Raises:
        DecodingError: If value is not strict Base64 or the bytes are not
            valid in charset
    """
    if value is None:
        return None
    try:
        raw = base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise DecodingError(f"Value is not valid Base64: {e}") from e
    try:
        return raw.decode(charset)
    except (UnicodeError, LookupError) as e:
        raise DecodingError(f"Cannot decode value using {charset}: {e}") from e


def encode_mapping(
    mapping: Mapping[str, Optional[str]], charset: str = DEFAULT_CHARSET
) -> dict[str, Optional[str]]:
    """Encode every value of mapping, keys unchanged."""
    return {key: encode_value(value, charset) for key, value in mapping.items()}


def decode_mapping(
    mapping: Mapping[str, Optional[str]], charset: str = DEFAULT_CHARSET
) -> dict[str, Optional[str]]:
    """Decode every value of mapping, keys unchanged."""
    result = {}
    for key, value in mapping.items():
        try:
            result[key] = decode_value(value, charset)
        except DecodingError as e:
            raise DecodingError(f"Value for key {key!r}: {e}") from e
    return result
