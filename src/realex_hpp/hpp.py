"""RealexHpp facade for converting HPP requests and responses to and from JSON.

Creating request JSON for the HPP JS library::

    request = HppRequest(merchant_id="merchantId", amount=100, currency="EUR", auto_settle_flag=True)
    realex_hpp = RealexHpp("mySecret")
    json = realex_hpp.request_to_json(request)

Consuming response JSON posted back from the HPP::

    realex_hpp = RealexHpp("mySecret")
    response = realex_hpp.response_from_json(response_json)
"""

from typing import Optional

import structlog

from realex_hpp import serialization
from realex_hpp.config import HppSettings
from realex_hpp.domain.exceptions import HppError
from realex_hpp.domain.request import HppRequest
from realex_hpp.domain.response import HppResponse
from realex_hpp.domain.validation import validate_request, validate_response, validate_response_mappings

logger = structlog.get_logger(__name__)


class RealexHpp:
    """
    Converts HPP requests and responses to and from JSON.

    Also responsible for generating defaults, validating inputs and
    Base64 encoding parameter values. Holds no mutable state beyond the
    shared secret and settings, so one instance can serve concurrent calls
    as long as each call works on its own request/response object.

    Args:
        secret: Shared secret issued by the gateway, used for every hash
        settings: Optional settings (charset, timezone, supplementary data layout)
    """

    def __init__(self, secret: str, settings: Optional[HppSettings] = None) -> None:
        self._secret = secret
        self.settings = settings or HppSettings()

    @classmethod
    def from_settings(cls, settings: Optional[HppSettings] = None) -> "RealexHpp":
        """Build an instance whose secret comes from HPP_SECRET / settings."""
        settings = settings or HppSettings()
        return cls(settings.secret.get_secret_value(), settings)

    @property
    def charset(self) -> str:
        return self.settings.charset

    def request_to_json(self, request: HppRequest, encoded: bool = True) -> str:
        """
        Produce JSON from an HppRequest.

        Steps:
        1. Generate defaults for timestamp, order ID and security hash
        2. Validate every field
        3. Base64 encode values (if encoded)
        4. Serialise to JSON

        Args:
            request: Request to convert; defaults are written back onto it
            encoded: True if the JSON values should be Base64 encoded

        Raises:
            ValidationError: If any field breaks its rules
            EncodingError: If values cannot be encoded with the configured charset
        """
        log = logger.bind(order_id=request.order_id, encoded=encoded)
        log.info("converting_request_to_json")

        try:
            log.debug("generating_defaults")
            request.generate_defaults(self._secret, self.settings.timezone)

            log.debug("validating_request")
            validate_request(request, self._reserved(serialization.REQUEST_RESERVED_KEYS))

            if encoded:
                log.debug("encoding_request")
                request = request.encode(self.charset)

            log.debug("serialising_request")
            return serialization.request_to_json(request, self.settings.supplementary_data_layout)
        except HppError as e:
            log.error("request_to_json_failed", error_type=type(e).__name__, error=str(e))
            raise

    def request_from_json(self, json: str, encoded: bool = True) -> HppRequest:
        """
        Produce an HppRequest from JSON.

        Steps:
        1. Deserialise JSON to a request
        2. Decode Base64 values (if encoded)
        3. Validate every field

        Raises:
            ParseError: If the JSON is malformed
            DecodingError: If a value is not valid Base64
            ValidationError: If any field breaks its rules
        """
        logger.info("converting_json_to_request", encoded=encoded)

        try:
            request = serialization.request_from_json(json, self.settings.supplementary_data_layout)

            if encoded:
                logger.debug("decoding_request")
                request = request.decode(self.charset)

            logger.debug("validating_request", order_id=request.order_id)
            validate_request(request, self._reserved(serialization.REQUEST_RESERVED_KEYS))
            return request
        except HppError as e:
            logger.error("request_from_json_failed", error_type=type(e).__name__, error=str(e))
            raise

    def response_to_json(self, response: HppResponse) -> str:
        """
        Produce JSON from an HppResponse.

        Steps:
        1. Validate the TSS and supplementary data
        2. Generate the security hash
        3. Base64 encode values
        4. Serialise to JSON

        Raises:
            ValidationError: If a TSS or supplementary data entry breaks its rules
            EncodingError: If values cannot be encoded with the configured charset
        """
        log = logger.bind(order_id=response.order_id)
        log.info("converting_response_to_json")

        try:
            log.debug("validating_response")
            validate_response_mappings(response, self._reserved(serialization.RESPONSE_RESERVED_KEYS))

            log.debug("generating_hash")
            response.hash(self._secret)

            log.debug("encoding_response")
            encoded_response = response.encode(self.charset)

            log.debug("serialising_response")
            return serialization.response_to_json(encoded_response, self.settings.supplementary_data_layout)
        except HppError as e:
            log.error("response_to_json_failed", error_type=type(e).__name__, error=str(e))
            raise

    def response_from_json(self, json: str, encoded: bool = True) -> HppResponse:
        """
        Produce an HppResponse from JSON.

        Steps:
        1. Deserialise JSON to a response
        2. Decode Base64 values (if encoded)
        3. Verify the security hash, then validate every field

        Raises:
            ParseError: If the JSON is malformed
            DecodingError: If a value is not valid Base64
            HashMismatchError: If the security hash does not match
            ValidationError: If any field breaks its rules
        """
        logger.info("converting_json_to_response", encoded=encoded)

        try:
            response = serialization.response_from_json(json, self.settings.supplementary_data_layout)

            if encoded:
                logger.debug("decoding_response")
                response = response.decode(self.charset)

            logger.debug("validating_response", order_id=response.order_id)
            validate_response(response, self._secret, self._reserved(serialization.RESPONSE_RESERVED_KEYS))
            return response
        except HppError as e:
            logger.error("response_from_json_failed", error_type=type(e).__name__, error=str(e))
            raise

    def _reserved(self, wire_keys: frozenset[str]) -> frozenset[str]:
        return serialization.reserved_keys(self.settings.supplementary_data_layout, wire_keys)
