"""Pydantic models for the HPP JSON payloads.

Field aliases are the gateway's key names. Numbers sent for string fields
are coerced to strings; unknown top-level keys are kept as extras so they
can be read back as supplementary data.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

SUPPLEMENTARY_DATA_KEY = "SUPPLEMENTARY_DATA"


class SupplementaryEntry(BaseModel):
    """One supplementary data pair in the list layout."""

    key: str = Field(..., description="Supplementary data key")
    value: str = Field(..., description="Supplementary data value")


SupplementaryPayload = Optional[Union[dict[str, str], list[SupplementaryEntry]]]


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class HppRequestJSON(_WireModel):
    """JSON model of a payment request as consumed by the HPP JS library."""

    merchant_id: Optional[str] = Field(None, alias="MERCHANT_ID", description="Merchant ID issued by the gateway")
    account: Optional[str] = Field(None, alias="ACCOUNT", description="Sub-account")
    order_id: Optional[str] = Field(None, alias="ORDER_ID", description="Unique order reference")
    amount: Optional[str] = Field(None, alias="AMOUNT", description="Amount in minor units")
    currency: Optional[str] = Field(None, alias="CURRENCY", description="ISO 4217 currency code")
    timestamp: Optional[str] = Field(None, alias="TIMESTAMP", description="yyyyMMddHHmmss")
    sha1hash: Optional[str] = Field(None, alias="SHA1HASH", description="Security hash")
    auto_settle_flag: Optional[str] = Field(None, alias="AUTO_SETTLE_FLAG")
    comment1: Optional[str] = Field(None, alias="COMMENT1")
    comment2: Optional[str] = Field(None, alias="COMMENT2")
    return_tss: Optional[str] = Field(None, alias="RETURN_TSS")
    shipping_code: Optional[str] = Field(None, alias="SHIPPING_CODE")
    shipping_country: Optional[str] = Field(None, alias="SHIPPING_CO")
    billing_code: Optional[str] = Field(None, alias="BILLING_CODE")
    billing_country: Optional[str] = Field(None, alias="BILLING_CO")
    customer_number: Optional[str] = Field(None, alias="CUST_NUM")
    variable_reference: Optional[str] = Field(None, alias="VAR_REF")
    product_id: Optional[str] = Field(None, alias="PROD_ID")
    language: Optional[str] = Field(None, alias="HPP_LANG")
    card_payment_button_text: Optional[str] = Field(None, alias="CARD_PAYMENT_BUTTON")
    card_storage_enable: Optional[str] = Field(None, alias="CARD_STORAGE_ENABLE")
    offer_save_card: Optional[str] = Field(None, alias="OFFER_SAVE_CARD")
    payer_reference: Optional[str] = Field(None, alias="PAYER_REF")
    payment_reference: Optional[str] = Field(None, alias="PMT_REF")
    payer_exists: Optional[str] = Field(None, alias="PAYER_EXIST")
    validate_card_only: Optional[str] = Field(None, alias="VALIDATE_CARD_ONLY")
    dcc_enable: Optional[str] = Field(None, alias="DCC_ENABLE")
    hpp_version: Optional[str] = Field(None, alias="HPP_VERSION")
    hpp_select_stored_card: Optional[str] = Field(None, alias="HPP_SELECT_STORED_CARD")
    post_dimensions: Optional[str] = Field(None, alias="HPP_POST_DIMENSIONS")
    post_response: Optional[str] = Field(None, alias="HPP_POST_RESPONSE")
    fraud_filter_mode: Optional[str] = Field(None, alias="HPP_FRAUDFILTER_MODE")
    supplementary_data: SupplementaryPayload = Field(None, alias=SUPPLEMENTARY_DATA_KEY)


class HppResponseJSON(_WireModel):
    """JSON model of a payment result posted back by the HPP."""

    merchant_id: Optional[str] = Field(None, alias="MERCHANT_ID")
    account: Optional[str] = Field(None, alias="ACCOUNT")
    order_id: Optional[str] = Field(None, alias="ORDER_ID")
    amount: Optional[str] = Field(None, alias="AMOUNT")
    auth_code: Optional[str] = Field(None, alias="AUTHCODE", description="Authorisation code from the issuer")
    timestamp: Optional[str] = Field(None, alias="TIMESTAMP")
    sha1hash: Optional[str] = Field(None, alias="SHA1HASH")
    result: Optional[str] = Field(None, alias="RESULT", description="Result code, '00' on success")
    message: Optional[str] = Field(None, alias="MESSAGE")
    cvn_result: Optional[str] = Field(None, alias="CVNRESULT")
    pas_ref: Optional[str] = Field(None, alias="PASREF", description="Gateway transaction reference")
    batch_id: Optional[str] = Field(None, alias="BATCHID")
    eci: Optional[str] = Field(None, alias="ECI")
    cavv: Optional[str] = Field(None, alias="CAVV")
    xid: Optional[str] = Field(None, alias="XID")
    comment1: Optional[str] = Field(None, alias="COMMENT1")
    comment2: Optional[str] = Field(None, alias="COMMENT2")
    tss: Optional[dict[str, str]] = Field(None, alias="TSS", description="Transaction suitability scores")
    supplementary_data: SupplementaryPayload = Field(None, alias=SUPPLEMENTARY_DATA_KEY)
