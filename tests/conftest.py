"""Pytest configuration and shared fixtures for all tests.

Provides sample requests and responses built from the gateway's documented
hash example (merchant "thestore", order "ORD453-11", secret "mysecret").
"""

import json

import pytest

from realex_hpp import HppRequest, HppResponse, HppSettings, RealexHpp

SECRET = "mysecret"

# Documented gateway example: TIMESTAMP.MERCHANT_ID.ORDER_ID.AMOUNT.CURRENCY
EXAMPLE_REQUEST_HASH = "cc72c08e529b3bc153481eda9533b815cef29de3"

# TIMESTAMP.MERCHANT_ID.ORDER_ID.RESULT.MESSAGE.PASREF.AUTHCODE
EXAMPLE_RESPONSE_HASH = "f093a0b233daa15f2bf44888f4fe75cb652e7bf0"


@pytest.fixture
def secret():
    """Shared secret used across tests."""
    return SECRET


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return HppSettings(_env_file=None)


@pytest.fixture
def realex_hpp(settings):
    """Adapter instance with the test secret."""
    return RealexHpp(SECRET, settings)


@pytest.fixture
def sample_request():
    """A fully populated request with a fixed timestamp and order ID."""
    return HppRequest(
        merchant_id="thestore",
        account="internet",
        order_id="ORD453-11",
        amount=29900,
        currency="EUR",
        timestamp="20130814122239",
        auto_settle_flag=True,
        comment1="Mobile Channel",
        return_tss=True,
        shipping_code="E77|4QJ",
        shipping_country="United Kingdom",
        billing_code="R90|ZQ7",
        billing_country="United Kingdom",
        customer_number="123456",
        variable_reference="VariableRef",
        product_id="ProductID",
        language="GB",
        card_payment_button_text="Submit Payment",
        supplementary_data={"UDF1": "value1", "notes": "héllo €"},
    )


@pytest.fixture
def sample_response():
    """A successful response without a hash."""
    return HppResponse(
        merchant_id="thestore",
        account="internet",
        order_id="ORD453-11",
        amount="29900",
        auth_code="79347",
        timestamp="20130814122239",
        result="00",
        message="Successful",
        cvn_result="M",
        pas_ref="3737468273643",
        batch_id="654321",
        eci="1",
        cavv="123",
        xid="654564564",
        comment1="Mobile Channel",
        tss={"TSS": "99", "TSS_3401": "0"},
        supplementary_data={"UDF1": "value1"},
    )


@pytest.fixture
def response_payload():
    """Plain (not Base64 encoded) response JSON with a valid hash."""

    def _build(**overrides):
        data = {
            "MERCHANT_ID": "thestore",
            "ACCOUNT": "internet",
            "ORDER_ID": "ORD453-11",
            "AMOUNT": "29900",
            "AUTHCODE": "79347",
            "TIMESTAMP": "20130814122239",
            "SHA1HASH": EXAMPLE_RESPONSE_HASH,
            "RESULT": "00",
            "MESSAGE": "Successful",
            "PASREF": "3737468273643",
        }
        data.update(overrides)
        return json.dumps({k: v for k, v in data.items() if v is not None})

    return _build
