"""HPP request domain model.

The request carries everything the hosted payment page needs to render a
checkout for one order. Values are held as strings exactly as they go on
the wire; numeric amounts and boolean flags are normalised on construction.
"""

from dataclasses import dataclass, field, fields, replace
from typing import Optional, Union

import structlog

from realex_hpp.domain import codec
from realex_hpp.domain.defaults import DEFAULT_TIMEZONE, generate_order_id, generate_timestamp
from realex_hpp.domain.exceptions import DecodingError
from realex_hpp.domain.hashing import build_canonical_string, generate_hash

logger = structlog.get_logger(__name__)

FLAG_TRUE = "1"
FLAG_FALSE = "0"

# Attribute name -> gateway JSON key
REQUEST_WIRE_NAMES: dict[str, str] = {
    "merchant_id": "MERCHANT_ID",
    "account": "ACCOUNT",
    "order_id": "ORDER_ID",
    "amount": "AMOUNT",
    "currency": "CURRENCY",
    "timestamp": "TIMESTAMP",
    "sha1hash": "SHA1HASH",
    "auto_settle_flag": "AUTO_SETTLE_FLAG",
    "comment1": "COMMENT1",
    "comment2": "COMMENT2",
    "return_tss": "RETURN_TSS",
    "shipping_code": "SHIPPING_CODE",
    "shipping_country": "SHIPPING_CO",
    "billing_code": "BILLING_CODE",
    "billing_country": "BILLING_CO",
    "customer_number": "CUST_NUM",
    "variable_reference": "VAR_REF",
    "product_id": "PROD_ID",
    "language": "HPP_LANG",
    "card_payment_button_text": "CARD_PAYMENT_BUTTON",
    "card_storage_enable": "CARD_STORAGE_ENABLE",
    "offer_save_card": "OFFER_SAVE_CARD",
    "payer_reference": "PAYER_REF",
    "payment_reference": "PMT_REF",
    "payer_exists": "PAYER_EXIST",
    "validate_card_only": "VALIDATE_CARD_ONLY",
    "dcc_enable": "DCC_ENABLE",
    "hpp_version": "HPP_VERSION",
    "hpp_select_stored_card": "HPP_SELECT_STORED_CARD",
    "post_dimensions": "HPP_POST_DIMENSIONS",
    "post_response": "HPP_POST_RESPONSE",
    "fraud_filter_mode": "HPP_FRAUDFILTER_MODE",
}

# Raw 0/1 switches, sent as-is
REQUEST_FLAG_FIELDS: tuple[str, ...] = (
    "auto_settle_flag",
    "return_tss",
    "card_storage_enable",
    "offer_save_card",
    "payer_exists",
    "validate_card_only",
    "dcc_enable",
    "hpp_version",
)

# Everything except the hash and the flags is Base64 encoded on the wire
REQUEST_ENCODABLE_FIELDS: tuple[str, ...] = tuple(
    name for name in REQUEST_WIRE_NAMES if name != "sha1hash" and name not in REQUEST_FLAG_FIELDS
)


def _flag(value: Union[bool, str, None]) -> Optional[str]:
    if isinstance(value, bool):
        return FLAG_TRUE if value else FLAG_FALSE
    return value


@dataclass
class HppRequest:
    """
    Payment request sent to the hosted payment page.

    Amount is in the currency's minor unit (e.g. 1001 = EUR 10.01) and may
    be given as an int. Flag fields accept bools and are stored as "1"/"0".

    Example:
        >>> request = HppRequest(merchant_id="merch1", amount=100, currency="EUR")
        >>> request.amount
        '100'
    """

    merchant_id: Optional[str] = None
    account: Optional[str] = None
    order_id: Optional[str] = None
    amount: Union[str, int, None] = None
    currency: Optional[str] = None
    timestamp: Optional[str] = None
    sha1hash: Optional[str] = None
    auto_settle_flag: Union[str, bool, None] = None
    comment1: Optional[str] = None
    comment2: Optional[str] = None
    return_tss: Union[str, bool, None] = None
    shipping_code: Optional[str] = None
    shipping_country: Optional[str] = None
    billing_code: Optional[str] = None
    billing_country: Optional[str] = None
    customer_number: Optional[str] = None
    variable_reference: Optional[str] = None
    product_id: Optional[str] = None
    language: Optional[str] = None
    card_payment_button_text: Optional[str] = None
    card_storage_enable: Union[str, bool, None] = None
    offer_save_card: Union[str, bool, None] = None
    payer_reference: Optional[str] = None
    payment_reference: Optional[str] = None
    payer_exists: Union[str, bool, None] = None
    validate_card_only: Union[str, bool, None] = None
    dcc_enable: Union[str, bool, None] = None
    hpp_version: Optional[str] = None
    hpp_select_stored_card: Optional[str] = None
    post_dimensions: Optional[str] = None
    post_response: Optional[str] = None
    fraud_filter_mode: Optional[str] = None
    supplementary_data: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Normalise numeric amount and boolean flags to wire strings."""
        if isinstance(self.amount, bool):
            raise TypeError("amount must be an int or a string, not bool")
        if isinstance(self.amount, int):
            self.amount = str(self.amount)
        for name in REQUEST_FLAG_FIELDS:
            setattr(self, name, _flag(getattr(self, name)))
        if self.supplementary_data is None:
            self.supplementary_data = {}

    def add_supplementary_data(self, key: str, value: str) -> "HppRequest":
        """Add a supplementary data entry and return self for chaining."""
        self.supplementary_data[key] = value
        return self

    def canonical_string(self) -> str:
        """Build the dot-joined string the request hash is computed over.

        TIMESTAMP.MERCHANT_ID.ORDER_ID.AMOUNT.CURRENCY, followed by
        .PAYER_REF.PMT_REF when card storage or stored card selection is on
        (HPP_SELECT_STORED_CARD takes the payer slot when set), followed by
        .HPP_FRAUDFILTER_MODE when a fraud filter mode is given.
        """
        parts = [self.timestamp, self.merchant_id, self.order_id, self.amount, self.currency]

        if self.card_storage_enable == FLAG_TRUE or self.hpp_select_stored_card:
            payer = self.hpp_select_stored_card or self.payer_reference
            parts.extend([payer, self.payment_reference])

        if self.fraud_filter_mode:
            parts.append(self.fraud_filter_mode)

        return build_canonical_string(parts)

    def hash(self, secret: str) -> "HppRequest":
        """Compute the security hash and store it on the request."""
        self.sha1hash = generate_hash(self.canonical_string(), secret)
        return self

    def generate_defaults(self, secret: str, tz: str = DEFAULT_TIMEZONE) -> "HppRequest":
        """
        Fill in timestamp and order ID when absent, then (re)compute the hash.

        Args:
            secret: Shared secret used for the hash
            tz: IANA timezone the timestamp is rendered in

        Returns:
            self
        """
        if not self.timestamp:
            self.timestamp = generate_timestamp(tz)
            logger.debug("generated_timestamp", timestamp=self.timestamp)

        if not self.order_id:
            self.order_id = generate_order_id()
            logger.debug("generated_order_id", order_id=self.order_id)

        return self.hash(secret)

    def encode(self, charset: str = codec.DEFAULT_CHARSET) -> "HppRequest":
        """
        Return a copy with every encodable field Base64 encoded.

        The original request is left untouched. Either all fields are
        encoded or, on error, no copy is produced.

        Raises:
            EncodingError: If charset is unknown or a value cannot be encoded
        """
        charset = codec.check_charset(charset)
        changes = {name: codec.encode_value(getattr(self, name), charset) for name in REQUEST_ENCODABLE_FIELDS}
        changes["supplementary_data"] = codec.encode_mapping(self.supplementary_data, charset)
        return replace(self, **changes)

    def decode(self, charset: str = codec.DEFAULT_CHARSET) -> "HppRequest":
        """
        Return a copy with every encodable field Base64 decoded.

        Raises:
            DecodingError: If charset is unknown or a value is not valid Base64
        """
        charset = codec.check_charset(charset, DecodingError)
        changes = {}
        for name in REQUEST_ENCODABLE_FIELDS:
            try:
                changes[name] = codec.decode_value(getattr(self, name), charset)
            except DecodingError as e:
                raise DecodingError(f"{REQUEST_WIRE_NAMES[name]}: {e}") from e
        changes["supplementary_data"] = codec.decode_mapping(self.supplementary_data, charset)
        return replace(self, **changes)

    def field_values(self) -> dict[str, Optional[str]]:
        """Return attribute name -> value for every wire field (supplementary data excluded)."""
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name in REQUEST_WIRE_NAMES}
