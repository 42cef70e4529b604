"""End-to-end scenarios for the HPP adapter.

Covers the full merchant flow: build a request for the payment page,
receive the page's posted result, and verify it.
"""

import base64
import json
import re

import pytest

from realex_hpp import (
    HashMismatchError,
    HppRequest,
    HppResponse,
    HppSettings,
    RealexHpp,
    SupplementaryDataLayout,
    ValidationError,
)
from realex_hpp.domain.hashing import build_canonical_string, generate_hash


@pytest.fixture
def merchant_hpp():
    return RealexHpp("mysecret", HppSettings(_env_file=None))


class TestRequestScenario:
    """A minimal request gets defaults, a hash and encoded values."""

    def test_minimal_request_to_json(self, merchant_hpp) -> None:
        """Test the minimal request scenario."""
        request = HppRequest(merchant_id="merch1", amount=100, currency="EUR")

        data = json.loads(merchant_hpp.request_to_json(request, encoded=True))

        order_id = base64.b64decode(data["ORDER_ID"]).decode("utf-8")
        timestamp = base64.b64decode(data["TIMESTAMP"]).decode("utf-8")

        assert data["MERCHANT_ID"] == base64.b64encode(b"merch1").decode("ascii")
        assert data["MERCHANT_ID"] == "bWVyY2gx"
        assert re.fullmatch(r"[a-zA-Z0-9]+", order_id)
        assert re.fullmatch(r"[0-9]{14}", timestamp)
        assert re.fullmatch(r"[a-f0-9]{40}", data["SHA1HASH"])

        expected = generate_hash(build_canonical_string([timestamp, "merch1", order_id, "100", "EUR"]), "mysecret")
        assert data["SHA1HASH"] == expected

    def test_two_requests_get_different_order_ids(self, merchant_hpp) -> None:
        """Test that each request gets its own order ID."""
        first = json.loads(merchant_hpp.request_to_json(HppRequest(merchant_id="merch1", amount=100, currency="EUR")))
        second = json.loads(merchant_hpp.request_to_json(HppRequest(merchant_id="merch1", amount=100, currency="EUR")))

        assert first["ORDER_ID"] != second["ORDER_ID"]

    def test_invalid_request_reports_every_problem(self, merchant_hpp) -> None:
        """Test that every problem is reported together."""
        request = HppRequest(amount=100, comment1="x" * 300)

        with pytest.raises(ValidationError) as exc_info:
            merchant_hpp.request_to_json(request)

        assert exc_info.value.fields == ["MERCHANT_ID", "CURRENCY", "COMMENT1"]


class TestResponseScenario:
    """The posted result is decoded and its integrity checked."""

    def _signed_payload(self, secret: str) -> str:
        response = HppResponse(
            merchant_id="merch1",
            order_id="abc123",
            timestamp="20240101120000",
            result="00",
            message="[ test system ] Authorised",
            pas_ref="14610544313177922",
            auth_code="12345",
            supplementary_data={"basket": "3 items"},
        )
        return RealexHpp(secret, HppSettings(_env_file=None)).response_to_json(response)

    def test_signed_response_accepted(self, merchant_hpp) -> None:
        """Test that a correctly signed response is accepted."""
        response = merchant_hpp.response_from_json(self._signed_payload("mysecret"))

        assert response.result == "00"
        assert response.message == "[ test system ] Authorised"
        assert response.supplementary_data == {"basket": "3 items"}

    def test_tampered_response_raises_hash_mismatch(self, merchant_hpp) -> None:
        """Test that a changed result fails the hash check."""
        data = json.loads(self._signed_payload("mysecret"))
        data["RESULT"] = base64.b64encode(b"101").decode("ascii")

        with pytest.raises(HashMismatchError):
            merchant_hpp.response_from_json(json.dumps(data))

    def test_plain_payload_with_wrong_hash_is_hash_mismatch_not_validation(self, merchant_hpp) -> None:
        """Test that a wrong hash is reported as HashMismatchError."""
        payload = json.dumps(
            {
                "MERCHANT_ID": "merch1",
                "ORDER_ID": "abc123",
                "RESULT": "00",
                "MESSAGE": "Successful",
                "TIMESTAMP": "20240101120000",
                "SHA1HASH": "f" * 40,
            }
        )

        with pytest.raises(HashMismatchError):
            merchant_hpp.response_from_json(payload, encoded=False)

    def test_response_signed_with_other_secret_rejected(self, merchant_hpp) -> None:
        """Test that a response signed with another secret is rejected."""
        with pytest.raises(HashMismatchError):
            merchant_hpp.response_from_json(self._signed_payload("notmysecret"))


@pytest.mark.parametrize("layout", list(SupplementaryDataLayout))
def test_full_round_trip_per_layout(layout) -> None:
    """Request and response survive the trip through every supplementary data layout."""
    realex_hpp = RealexHpp("mysecret", HppSettings(_env_file=None, supplementary_data_layout=layout))
    request = HppRequest(
        merchant_id="merch1",
        amount=1999,
        currency="GBP",
        card_storage_enable=True,
        payer_reference="payer_01",
        payment_reference="card_01",
        supplementary_data={"UDF1": "one", "UDF2": "twö"},
    )

    parsed_request = realex_hpp.request_from_json(realex_hpp.request_to_json(request))

    assert parsed_request == request

    response = HppResponse(
        merchant_id="merch1",
        order_id=parsed_request.order_id,
        timestamp=parsed_request.timestamp,
        result="00",
        message="Successful",
        supplementary_data=dict(parsed_request.supplementary_data),
    )

    parsed_response = realex_hpp.response_from_json(realex_hpp.response_to_json(response))

    assert parsed_response == response
