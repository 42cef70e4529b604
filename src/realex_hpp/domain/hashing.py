"""Security hash generation for HPP requests and responses.

The gateway signs every message with a double SHA-1 digest:

    first = sha1_hex("<field>.<field>...")
    hash  = sha1_hex(first + "." + secret)

Field order is part of the gateway contract and must not change. The
digest algorithm is fixed to SHA-1 for compatibility with the gateway,
even though stronger digests exist.
"""

import hmac
from typing import Iterable, Optional

from cryptography.hazmat.primitives import hashes

HASH_SEPARATOR = "."
HASH_LENGTH = 40


def sha1_hex(data: str) -> str:
    """Return the lowercase hex SHA-1 digest of data encoded as UTF-8."""
    digest = hashes.Hash(hashes.SHA1())
    digest.update(data.encode("utf-8"))
    return digest.finalize().hex()


def build_canonical_string(fields: Iterable[Optional[str]]) -> str:
    """Join hash fields with the separator, treating None as empty.

    Example:
        >>> build_canonical_string(["20240101120000", "merch1", None, "100", "EUR"])
        '20240101120000.merch1..100.EUR'
    """
    return HASH_SEPARATOR.join("" if value is None else str(value) for value in fields)


def generate_hash(to_hash: str, secret: str) -> str:
    """Generate the security hash for a canonical string.

    Args:
        to_hash: Canonical string built from the message fields
        secret: Shared secret issued by the gateway

    Returns:
        40 character lowercase hex string
    """
    first_pass = sha1_hex(to_hash)
    return sha1_hex(f"{first_pass}{HASH_SEPARATOR}{secret}")


def hashes_match(expected: Optional[str], received: Optional[str]) -> bool:
    """Constant-time comparison of two hex hashes."""
    if not expected or not received:
        return False
    return hmac.compare_digest(expected.encode("ascii", "replace"), received.encode("ascii", "replace"))
