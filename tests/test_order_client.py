from unittest.mock import MagicMock

import pytest
import requests

from jncrafts_checkout.exceptions import SubmissionError
from jncrafts_checkout.order_client import HttpOrderClient

pytestmark = pytest.mark.unit

PAYLOAD = {"customerInfo": {}, "items": [], "total": 2200.0}


def _response(payload, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload
    return resp


@pytest.fixture()
def client():
    client = HttpOrderClient(url="https://shop.test/api/orders/create")
    client.session = MagicMock()
    return client


def test_returns_order_number(client):
    client.session.post.return_value = _response({"success": True, "orderNumber": "JNC-1"})

    assert client.create_order(PAYLOAD) == "JNC-1"

    args, kwargs = client.session.post.call_args
    assert args == ("https://shop.test/api/orders/create",)
    assert kwargs["json"] == PAYLOAD


@pytest.mark.parametrize("status_code", [400, 500, 503])
def test_non_2xx_is_submission_error(client, status_code):
    client.session.post.return_value = _response({"error": "nope"}, status_code)

    with pytest.raises(SubmissionError) as excinfo:
        client.create_order(PAYLOAD)

    assert excinfo.value.status_code == status_code
    assert excinfo.value.retryable


@pytest.mark.parametrize(
    "body", [{"success": False, "error": "Missing required fields"}, {"success": True}, []]
)
def test_unconfirmed_order_is_submission_error(client, body):
    client.session.post.return_value = _response(body)
    with pytest.raises(SubmissionError):
        client.create_order(PAYLOAD)


def test_invalid_json_is_submission_error(client):
    resp = _response(None)
    resp.json.side_effect = ValueError("not json")
    client.session.post.return_value = resp
    with pytest.raises(SubmissionError):
        client.create_order(PAYLOAD)


def test_network_error_is_retryable(client):
    client.session.post.side_effect = requests.ConnectionError("unreachable")
    with pytest.raises(SubmissionError) as excinfo:
        client.create_order(PAYLOAD)
    assert excinfo.value.retryable
    assert excinfo.value.status_code is None


def test_requires_url(monkeypatch):
    monkeypatch.delenv("ORDER_API_URL", raising=False)
    with pytest.raises(ValueError):
        HttpOrderClient()


def test_api_key_header():
    client = HttpOrderClient(url="https://shop.test/orders", api_key="secret")
    assert client.session.headers["Authorization"] == "Bearer secret"
