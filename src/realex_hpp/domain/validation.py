"""Field validation for HPP requests and responses.

Rules are declared in tables mapping an attribute name to an ordered list
of rules. Every rule of every field is evaluated, and all failures are
reported together in one ValidationError.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional

import structlog

from realex_hpp.domain.exceptions import FieldViolation, HashMismatchError, ValidationError, ViolationKind
from realex_hpp.domain.request import REQUEST_WIRE_NAMES, HppRequest
from realex_hpp.domain.response import RESPONSE_WIRE_NAMES, TSS_WIRE_NAME, HppResponse

logger = structlog.get_logger(__name__)

SUPPLEMENTARY_KEY_MAX_LENGTH = 100
SUPPLEMENTARY_VALUE_MAX_LENGTH = 1024


@dataclass(frozen=True)
class Rule:
    """One predicate plus the violation it reports when the predicate fails."""

    kind: ViolationKind
    predicate: Callable[[Optional[str]], bool]
    message: str

    def check(self, value: Optional[str]) -> bool:
        return self.predicate(value)


def _present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def required() -> Rule:
    return Rule(ViolationKind.REQUIRED, _present, "is required")


def max_length(limit: int) -> Rule:
    return Rule(
        ViolationKind.MAX_LENGTH,
        lambda value: len(value) <= limit,
        f"must be at most {limit} characters",
    )


def pattern(regex: str, description: str) -> Rule:
    compiled = re.compile(regex)
    return Rule(
        ViolationKind.PATTERN,
        lambda value: compiled.fullmatch(value) is not None,
        f"must be {description}",
    )


# Shared patterns
_MERCHANT_ID = pattern(r"[a-zA-Z0-9.]*", "alphanumeric or '.'")
_ORDER_ID = pattern(r"[a-zA-Z0-9_\-]*", "alphanumeric, '_' or '-'")
_DIGITS = pattern(r"[0-9]*", "numeric")
_TIMESTAMP = pattern(r"[0-9]{14}", "a 14 digit yyyyMMddHHmmss timestamp")
_SHA1_HASH = pattern(r"[a-f0-9]{40}", "a 40 character lowercase hex string")
_FLAG = pattern(r"[01]", "'0' or '1'")
_FREE_TEXT = pattern(r"[^<>\x00-\x08\x0b\x0c\x0e-\x1f\x7f]*", "free text without '<', '>' or control characters")
_POSTAL_CODE = pattern(r"[A-Za-z0-9,.\-/| ]*", "a postal code")
_COUNTRY = pattern(r"[A-Za-z0-9,.\- ]*", "a country code")
_REFERENCE = pattern(r"[a-zA-Z0-9._\-,+@ ]*", "alphanumeric or one of . _ - , + @ space")
_PAYER_REF = pattern(r"[A-Za-z0-9_\-\\ ]*", "alphanumeric or one of _ - \\ space")

REQUEST_RULES: dict[str, list[Rule]] = {
    "merchant_id": [required(), max_length(50), _MERCHANT_ID],
    "account": [max_length(30), pattern(r"[a-zA-Z0-9\s]*", "alphanumeric")],
    "order_id": [max_length(50), _ORDER_ID],
    "amount": [required(), max_length(11), _DIGITS],
    "currency": [required(), max_length(3), pattern(r"[a-zA-Z]{3}", "a 3 letter currency code")],
    "timestamp": [required(), max_length(14), _TIMESTAMP],
    "sha1hash": [required(), max_length(40), _SHA1_HASH],
    "auto_settle_flag": [max_length(5), pattern(r"[01]|(?i:multi)", "'0', '1' or 'MULTI'")],
    "comment1": [max_length(255), _FREE_TEXT],
    "comment2": [max_length(255), _FREE_TEXT],
    "return_tss": [max_length(1), _FLAG],
    "shipping_code": [max_length(30), _POSTAL_CODE],
    "shipping_country": [max_length(50), _COUNTRY],
    "billing_code": [max_length(60), _POSTAL_CODE],
    "billing_country": [max_length(50), _COUNTRY],
    "customer_number": [max_length(50), _REFERENCE],
    "variable_reference": [max_length(50), _REFERENCE],
    "product_id": [max_length(50), _REFERENCE],
    "language": [max_length(5), pattern(r"[a-zA-Z]{2}(_[a-zA-Z]{2})?", "a language code such as 'EN' or 'en_GB'")],
    "card_payment_button_text": [max_length(25), _FREE_TEXT],
    "card_storage_enable": [max_length(1), _FLAG],
    "offer_save_card": [max_length(1), _FLAG],
    "payer_reference": [max_length(50), _PAYER_REF],
    "payment_reference": [max_length(50), _ORDER_ID],
    "payer_exists": [max_length(1), _FLAG],
    "validate_card_only": [max_length(1), _FLAG],
    "dcc_enable": [max_length(1), _FLAG],
    "hpp_version": [max_length(1), pattern(r"[12]", "'1' or '2'")],
    "hpp_select_stored_card": [max_length(50), _PAYER_REF],
    "post_dimensions": [max_length(255)],
    "post_response": [max_length(255)],
    "fraud_filter_mode": [max_length(7), pattern(r"ACTIVE|PASSIVE|OFF", "'ACTIVE', 'PASSIVE' or 'OFF'")],
}

RESPONSE_RULES: dict[str, list[Rule]] = {
    "merchant_id": [required(), max_length(50), _MERCHANT_ID],
    "account": [max_length(30)],
    "order_id": [required(), max_length(50), _ORDER_ID],
    "amount": [max_length(11), _DIGITS],
    "auth_code": [max_length(10)],
    "timestamp": [required(), max_length(14), _TIMESTAMP],
    "sha1hash": [required(), max_length(40), _SHA1_HASH],
    "result": [required(), max_length(3), _DIGITS],
    "message": [max_length(255), _FREE_TEXT],
    "cvn_result": [max_length(1)],
    "pas_ref": [max_length(50)],
    "batch_id": [max_length(20), pattern(r"-?[0-9]*", "numeric")],
    "eci": [max_length(2), _DIGITS],
    "cavv": [max_length(50)],
    "xid": [max_length(50)],
    "comment1": [max_length(255), _FREE_TEXT],
    "comment2": [max_length(255), _FREE_TEXT],
}


def check_fields(
    values: Mapping[str, Optional[str]],
    rules: Mapping[str, list[Rule]],
    wire_names: Mapping[str, str],
) -> list[FieldViolation]:
    """Evaluate every rule for every field and collect the failures.

    An absent value only fails REQUIRED; length and pattern rules are not
    applied to it.
    """
    violations: list[FieldViolation] = []
    for name, field_rules in rules.items():
        value = values.get(name)
        wire_name = wire_names[name]
        for rule in field_rules:
            if rule.kind is ViolationKind.REQUIRED:
                if not rule.check(value):
                    violations.append(FieldViolation(wire_name, rule.kind, rule.message))
                continue
            if not _present(value):
                continue
            if not rule.check(value):
                violations.append(FieldViolation(wire_name, rule.kind, rule.message))
    return violations


def check_mapping(
    mapping: Mapping[str, Optional[str]],
    label: str,
    reserved_keys: Iterable[str] = (),
) -> list[FieldViolation]:
    """Looser checks for open-ended key/value data (supplementary data, TSS)."""
    reserved = set(reserved_keys)
    violations: list[FieldViolation] = []
    for key, value in mapping.items():
        where = f"{label}[{key!r}]"
        if key is None or key == "":
            violations.append(FieldViolation(label, ViolationKind.REQUIRED, "keys must not be empty"))
            continue
        if len(key) > SUPPLEMENTARY_KEY_MAX_LENGTH:
            violations.append(
                FieldViolation(where, ViolationKind.MAX_LENGTH, f"key must be at most {SUPPLEMENTARY_KEY_MAX_LENGTH} characters")
            )
        if key in reserved:
            violations.append(FieldViolation(where, ViolationKind.PATTERN, "key clashes with a reserved field name"))
        if value is None:
            violations.append(FieldViolation(where, ViolationKind.REQUIRED, "value is required"))
        elif len(value) > SUPPLEMENTARY_VALUE_MAX_LENGTH:
            violations.append(
                FieldViolation(
                    where, ViolationKind.MAX_LENGTH, f"value must be at most {SUPPLEMENTARY_VALUE_MAX_LENGTH} characters"
                )
            )
    return violations


def validate_request(request: HppRequest, reserved_keys: Iterable[str] = ()) -> None:
    """
    Validate every request field and the supplementary data.

    Args:
        request: Request to validate (after defaults have been generated)
        reserved_keys: Wire keys supplementary data keys must not reuse

    Raises:
        ValidationError: Listing every violation found
    """
    violations = check_fields(request.field_values(), REQUEST_RULES, REQUEST_WIRE_NAMES)
    violations.extend(check_mapping(request.supplementary_data, "SUPPLEMENTARY_DATA", reserved_keys))

    if violations:
        logger.warning("request_validation_failed", fields=[v.field for v in violations])
        raise ValidationError(violations)


def validate_response(response: HppResponse, secret: str, reserved_keys: Iterable[str] = ()) -> None:
    """
    Verify the response hash, then validate every response field.

    The integrity check runs first: a tampered response is reported as
    HashMismatchError whatever else is wrong with it.

    Raises:
        HashMismatchError: If the received hash does not match
        ValidationError: Listing every field violation found
    """
    if not response.is_hash_valid(secret):
        logger.warning("response_hash_mismatch", order_id=response.order_id)
        raise HashMismatchError("HPP response contains an invalid security hash")

    violations = check_fields(response.field_values(), RESPONSE_RULES, RESPONSE_WIRE_NAMES)
    violations.extend(check_mapping(response.tss, TSS_WIRE_NAME))
    violations.extend(check_mapping(response.supplementary_data, "SUPPLEMENTARY_DATA", reserved_keys))

    if violations:
        logger.warning("response_validation_failed", fields=[v.field for v in violations])
        raise ValidationError(violations)


def validate_response_mappings(response: HppResponse, reserved_keys: Iterable[str] = ()) -> None:
    """
    Validate the TSS and supplementary data of an outgoing response.

    Raises:
        ValidationError: Listing every violation found
    """
    violations = check_mapping(response.tss, TSS_WIRE_NAME)
    violations.extend(check_mapping(response.supplementary_data, "SUPPLEMENTARY_DATA", reserved_keys))

    if violations:
        logger.warning("response_validation_failed", fields=[v.field for v in violations])
        raise ValidationError(violations)
