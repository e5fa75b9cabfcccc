import base64
from datetime import datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from jncrafts_checkout.exceptions import PaymentError
from jncrafts_checkout.mpesa_client import (
    PRODUCTION_URL,
    SANDBOX_URL,
    MpesaClient,
    normalize_phone,
    stk_password,
    timestamp,
)
from jncrafts_checkout.paystack_client import PaystackClient, to_minor_units

pytestmark = pytest.mark.unit


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


@pytest.mark.parametrize(
    "raw, msisdn",
    [
        ("0712345678", "254712345678"),
        ("+254712345678", "254712345678"),
        ("254712345678", "254712345678"),
        ("0712 345 678", "254712345678"),
    ],
)
def test_normalize_phone(raw, msisdn):
    assert normalize_phone(raw) == msisdn


def test_timestamp_format():
    assert timestamp(datetime(2025, 3, 1, 9, 5, 7)) == "20250301090507"


def test_stk_password():
    expected = base64.b64encode(b"174379passkey20250301090507").decode()
    assert stk_password("174379", "passkey", "20250301090507") == expected


@pytest.fixture()
def mpesa():
    client = MpesaClient(
        consumer_key="key",
        consumer_secret="secret",
        shortcode="174379",
        passkey="passkey",
        callback_url="https://shop.test/mpesa/callback",
    )
    client.session = MagicMock()
    return client


def test_mpesa_environment_selects_base_url(mpesa):
    assert mpesa.base_url == SANDBOX_URL
    production = MpesaClient("k", "s", "1", "p", "https://cb", environment="production")
    assert production.base_url == PRODUCTION_URL


def test_mpesa_requires_credentials(monkeypatch):
    for name in ("MPESA_CONSUMER_KEY", "MPESA_CONSUMER_SECRET", "MPESA_SHORTCODE",
                 "MPESA_PASSKEY", "MPESA_CALLBACK_URL"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValueError):
        MpesaClient()


def test_stk_push(mpesa):
    mpesa.session.get.return_value = _response({"access_token": "tok"})
    mpesa.session.post.return_value = _response(
        {"CheckoutRequestID": "ws_CO_1", "ResponseCode": "0"}
    )

    data = mpesa.stk_push("0712345678", Decimal("2199.50"), "JNC-1")

    assert data["CheckoutRequestID"] == "ws_CO_1"
    args, kwargs = mpesa.session.post.call_args
    assert args[0] == f"{SANDBOX_URL}/mpesa/stkpush/v1/processrequest"
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    body = kwargs["json"]
    assert body["Amount"] == 2200
    assert body["PartyA"] == body["PhoneNumber"] == "254712345678"
    assert body["PartyB"] == body["BusinessShortCode"] == "174379"
    assert body["AccountReference"] == "JNC-1"
    assert body["TransactionType"] == "CustomerPayBillOnline"
    assert body["Password"] == stk_password("174379", "passkey", body["Timestamp"])


def test_stk_push_rejects_zero_amount(mpesa):
    with pytest.raises(PaymentError):
        mpesa.stk_push("0712345678", Decimal("0"), "JNC-1")
    mpesa.session.get.assert_not_called()


def test_stk_push_token_failure(mpesa):
    mpesa.session.get.side_effect = requests.ConnectionError("down")
    with pytest.raises(PaymentError):
        mpesa.stk_push("0712345678", Decimal("100"), "JNC-1")


def test_to_minor_units():
    assert to_minor_units(Decimal("2200")) == 220000
    assert to_minor_units(Decimal("10.55")) == 1055


@pytest.fixture()
def paystack():
    client = PaystackClient(secret_key="sk_test_x")
    client.session = MagicMock()
    return client


def test_paystack_initialize(paystack):
    paystack.session.request.return_value = _response(
        {
            "status": True,
            "message": "Authorization URL created",
            "data": {"authorization_url": "https://checkout.paystack.com/abc", "reference": "JNC-1"},
        }
    )

    data = paystack.initialize_transaction("a@b.c", Decimal("2200"), "JNC-1")

    assert data["authorization_url"] == "https://checkout.paystack.com/abc"
    args, kwargs = paystack.session.request.call_args
    assert args == ("POST", "https://api.paystack.co/transaction/initialize")
    assert kwargs["json"]["amount"] == 220000
    assert kwargs["json"]["currency"] == "KES"


def test_paystack_verify(paystack):
    paystack.session.request.return_value = _response(
        {"status": True, "data": {"status": "success", "reference": "JNC-1"}}
    )
    assert paystack.verify_transaction("JNC-1")["status"] == "success"
    args, _ = paystack.session.request.call_args
    assert args == ("GET", "https://api.paystack.co/transaction/verify/JNC-1")


def test_paystack_unsuccessful_status(paystack):
    paystack.session.request.return_value = _response({"status": False, "message": "Invalid key"})
    with pytest.raises(PaymentError, match="Invalid key"):
        paystack.verify_transaction("JNC-1")


def test_paystack_http_error(paystack):
    resp = _response({})
    resp.raise_for_status.side_effect = requests.HTTPError("401")
    paystack.session.request.return_value = resp
    with pytest.raises(PaymentError):
        paystack.initialize_transaction("a@b.c", Decimal("1"), "JNC-2")


def test_paystack_requires_secret(monkeypatch):
    monkeypatch.delenv("PAYSTACK_SECRET_KEY", raising=False)
    with pytest.raises(ValueError):
        PaystackClient()
