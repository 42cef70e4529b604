"""HPP response domain model.

The response is produced by the hosted payment page once the customer has
completed (or abandoned) checkout. Its hash is received from the gateway
and only ever verified here, never defaulted.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Optional

from realex_hpp.domain import codec
from realex_hpp.domain.exceptions import DecodingError
from realex_hpp.domain.hashing import build_canonical_string, generate_hash, hashes_match

RESPONSE_WIRE_NAMES: dict[str, str] = {
    "merchant_id": "MERCHANT_ID",
    "account": "ACCOUNT",
    "order_id": "ORDER_ID",
    "amount": "AMOUNT",
    "auth_code": "AUTHCODE",
    "timestamp": "TIMESTAMP",
    "sha1hash": "SHA1HASH",
    "result": "RESULT",
    "message": "MESSAGE",
    "cvn_result": "CVNRESULT",
    "pas_ref": "PASREF",
    "batch_id": "BATCHID",
    "eci": "ECI",
    "cavv": "CAVV",
    "xid": "XID",
    "comment1": "COMMENT1",
    "comment2": "COMMENT2",
}

TSS_WIRE_NAME = "TSS"

RESPONSE_ENCODABLE_FIELDS: tuple[str, ...] = tuple(name for name in RESPONSE_WIRE_NAMES if name != "sha1hash")


@dataclass
class HppResponse:
    """
    Payment result returned from the hosted payment page.

    Attributes:
        result: Gateway result code ("00" for success)
        tss: Transaction suitability score results, check name -> score
        supplementary_data: Merchant pass-through values echoed back
    """

    merchant_id: Optional[str] = None
    account: Optional[str] = None
    order_id: Optional[str] = None
    amount: Optional[str] = None
    auth_code: Optional[str] = None
    timestamp: Optional[str] = None
    sha1hash: Optional[str] = None
    result: Optional[str] = None
    message: Optional[str] = None
    cvn_result: Optional[str] = None
    pas_ref: Optional[str] = None
    batch_id: Optional[str] = None
    eci: Optional[str] = None
    cavv: Optional[str] = None
    xid: Optional[str] = None
    comment1: Optional[str] = None
    comment2: Optional[str] = None
    tss: dict[str, str] = field(default_factory=dict)
    supplementary_data: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.amount, int) and not isinstance(self.amount, bool):
            self.amount = str(self.amount)
        if self.tss is None:
            self.tss = {}
        if self.supplementary_data is None:
            self.supplementary_data = {}

    def canonical_string(self) -> str:
        """TIMESTAMP.MERCHANT_ID.ORDER_ID.RESULT.MESSAGE.PASREF.AUTHCODE"""
        return build_canonical_string(
            [
                self.timestamp,
                self.merchant_id,
                self.order_id,
                self.result,
                self.message,
                self.pas_ref,
                self.auth_code,
            ]
        )

    def expected_hash(self, secret: str) -> str:
        return generate_hash(self.canonical_string(), secret)

    def hash(self, secret: str) -> "HppResponse":
        """Compute the security hash and store it on the response."""
        self.sha1hash = self.expected_hash(secret)
        return self

    def is_hash_valid(self, secret: str) -> bool:
        """Check the received hash against one recomputed with secret."""
        return hashes_match(self.expected_hash(secret), self.sha1hash)

    def encode(self, charset: str = codec.DEFAULT_CHARSET) -> "HppResponse":
        """Return a copy with every encodable field, TSS and supplementary value Base64 encoded."""
        charset = codec.check_charset(charset)
        changes = {name: codec.encode_value(getattr(self, name), charset) for name in RESPONSE_ENCODABLE_FIELDS}
        changes["tss"] = codec.encode_mapping(self.tss, charset)
        changes["supplementary_data"] = codec.encode_mapping(self.supplementary_data, charset)
        return replace(self, **changes)

    def decode(self, charset: str = codec.DEFAULT_CHARSET) -> "HppResponse":
        """Return a decoded copy; the inverse of encode().

        Raises:
            DecodingError: If charset is unknown or a value is not valid Base64
        """
        charset = codec.check_charset(charset, DecodingError)
        changes = {}
        for name in RESPONSE_ENCODABLE_FIELDS:
            try:
                changes[name] = codec.decode_value(getattr(self, name), charset)
            except DecodingError as e:
                raise DecodingError(f"{RESPONSE_WIRE_NAMES[name]}: {e}") from e
        changes["tss"] = codec.decode_mapping(self.tss, charset)
        changes["supplementary_data"] = codec.decode_mapping(self.supplementary_data, charset)
        return replace(self, **changes)

    def field_values(self) -> dict[str, Optional[str]]:
        """Return attribute name -> value for every scalar wire field."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name in RESPONSE_WIRE_NAMES}
