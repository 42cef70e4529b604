"""JSON serialisation of HPP requests and responses.

Domain records are mapped onto the pydantic wire models by gateway key
name. Supplementary data is laid out according to SupplementaryDataLayout.
"""

from typing import Any, Mapping, Optional, Union

import pydantic
import structlog

from realex_hpp.api.models import SUPPLEMENTARY_DATA_KEY, HppRequestJSON, HppResponseJSON
from realex_hpp.config import SupplementaryDataLayout
from realex_hpp.domain.exceptions import EncodingError, ParseError
from realex_hpp.domain.request import REQUEST_WIRE_NAMES, HppRequest
from realex_hpp.domain.response import RESPONSE_WIRE_NAMES, TSS_WIRE_NAME, HppResponse

logger = structlog.get_logger(__name__)

Payload = Union[str, bytes, bytearray]

# Gateway keys and model attribute names; the wire models accept either on input.
REQUEST_RESERVED_KEYS = (
    frozenset(REQUEST_WIRE_NAMES.values()) | frozenset(HppRequestJSON.model_fields) | {SUPPLEMENTARY_DATA_KEY}
)
RESPONSE_RESERVED_KEYS = (
    frozenset(RESPONSE_WIRE_NAMES.values())
    | frozenset(HppResponseJSON.model_fields)
    | {TSS_WIRE_NAME, SUPPLEMENTARY_DATA_KEY}
)


def reserved_keys(layout: SupplementaryDataLayout, wire_keys: frozenset[str]) -> frozenset[str]:
    """Keys supplementary data may not use. Only the flat layout shares the top level."""
    return wire_keys if layout is SupplementaryDataLayout.FLAT else frozenset()


def _supplementary_to_wire(
    data: Mapping[str, str], layout: SupplementaryDataLayout, reserved: frozenset[str]
) -> dict[str, Any]:
    if not data:
        return {}
    if layout is SupplementaryDataLayout.FLAT:
        clashes = sorted(reserved.intersection(data))
        if clashes:
            raise EncodingError(f"Supplementary data keys clash with payload fields: {clashes}")
        return dict(data)
    if layout is SupplementaryDataLayout.NESTED:
        return {SUPPLEMENTARY_DATA_KEY: dict(data)}
    return {SUPPLEMENTARY_DATA_KEY: [{"key": key, "value": value} for key, value in data.items()]}


def _as_string(key: str, value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    raise ParseError(f"Supplementary value for {key!r} must be a string, got {type(value).__name__}")


def _supplementary_from_wire(
    model: Union[HppRequestJSON, HppResponseJSON], layout: SupplementaryDataLayout
) -> dict[str, str]:
    extras = model.model_extra or {}
    wire_value = model.supplementary_data

    if layout is SupplementaryDataLayout.FLAT:
        if wire_value is not None:
            logger.warning("ignoring_supplementary_data_key", layout=layout.value)
        return {key: _as_string(key, value) for key, value in extras.items()}

    if extras:
        logger.warning("ignoring_unknown_keys", keys=sorted(extras), layout=layout.value)

    if wire_value is None:
        return {}

    if layout is SupplementaryDataLayout.NESTED:
        if not isinstance(wire_value, dict):
            raise ParseError(f"{SUPPLEMENTARY_DATA_KEY} must be a JSON object")
        return dict(wire_value)

    if not isinstance(wire_value, list):
        raise ParseError(f"{SUPPLEMENTARY_DATA_KEY} must be a JSON array of key/value pairs")
    return {entry.key: entry.value for entry in wire_value}


def _load(model_cls: type[pydantic.BaseModel], payload: Payload) -> Any:
    if not isinstance(payload, (str, bytes, bytearray)):
        raise ParseError(f"JSON payload must be str or bytes, got {type(payload).__name__}")
    try:
        return model_cls.model_validate_json(payload)
    except pydantic.ValidationError as e:
        errors = [f"{'.'.join(str(loc) for loc in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()]
        logger.error("json_parse_failed", model=model_cls.__name__, errors=errors)
        raise ParseError(f"Malformed {model_cls.__name__} payload: {'; '.join(errors)}") from e


def _dump(model_cls: type[pydantic.BaseModel], values: dict[str, Any]) -> str:
    try:
        model = model_cls.model_validate(values)
    except pydantic.ValidationError as e:
        raise EncodingError(f"Cannot serialise {model_cls.__name__}: {e}") from e
    return model.model_dump_json(by_alias=True, exclude_none=True)


def _wire_values(values: Mapping[str, Optional[str]], wire_names: Mapping[str, str]) -> dict[str, Any]:
    return {wire_names[name]: value for name, value in values.items() if value is not None}


def request_to_json(
    request: HppRequest, layout: SupplementaryDataLayout = SupplementaryDataLayout.FLAT
) -> str:
    """Serialise a request to the gateway JSON shape."""
    values = _wire_values(request.field_values(), REQUEST_WIRE_NAMES)
    values.update(_supplementary_to_wire(request.supplementary_data, layout, REQUEST_RESERVED_KEYS))
    return _dump(HppRequestJSON, values)


def request_from_json(
    payload: Payload, layout: SupplementaryDataLayout = SupplementaryDataLayout.FLAT
) -> HppRequest:
    """Parse gateway JSON into a request.

    Raises:
        ParseError: If the payload is not a JSON object of string values
    """
    model: HppRequestJSON = _load(HppRequestJSON, payload)
    values = {name: getattr(model, name) for name in REQUEST_WIRE_NAMES}
    return HppRequest(**values, supplementary_data=_supplementary_from_wire(model, layout))


def response_to_json(
    response: HppResponse, layout: SupplementaryDataLayout = SupplementaryDataLayout.FLAT
) -> str:
    """Serialise a response to the gateway JSON shape."""
    values = _wire_values(response.field_values(), RESPONSE_WIRE_NAMES)
    if response.tss:
        values[TSS_WIRE_NAME] = dict(response.tss)
    values.update(_supplementary_to_wire(response.supplementary_data, layout, RESPONSE_RESERVED_KEYS))
    return _dump(HppResponseJSON, values)


def response_from_json(
    payload: Payload, layout: SupplementaryDataLayout = SupplementaryDataLayout.FLAT
) -> HppResponse:
    """Parse gateway JSON into a response.

    Raises:
        ParseError: If the payload is not a JSON object of string values
    """
    model: HppResponseJSON = _load(HppResponseJSON, payload)
    values = {name: getattr(model, name) for name in RESPONSE_WIRE_NAMES}
    return HppResponse(
        **values,
        tss=dict(model.tss or {}),
        supplementary_data=_supplementary_from_wire(model, layout),
    )
