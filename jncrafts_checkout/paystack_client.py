"""Paystack client for card and mobile money checkout."""

import logging
import os
from decimal import Decimal

import requests
from dotenv import load_dotenv

from jncrafts_checkout.exceptions import PaymentError

load_dotenv()

logger = logging.getLogger(__name__)

BASE_URL = "https://api.paystack.co"


def to_minor_units(amount: Decimal) -> int:
    """Paystack amounts are in the currency's minor unit (cents)."""
    return int(Decimal(amount) * 100)


class PaystackClient:
    """Client for the Paystack transaction API."""

    def __init__(self, secret_key: str | None = None, currency: str = "KES"):
        self.secret_key = secret_key or os.getenv("PAYSTACK_SECRET_KEY", "")
        self.currency = currency
        if not self.secret_key:
            raise ValueError(
                "PAYSTACK_SECRET_KEY must be set either as an argument or in a .env file."
            )

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {self.secret_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, **kwargs) -> dict:
        try:
            resp = self.session.request(method, f"{BASE_URL}{path}", timeout=30, **kwargs)
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Paystack API error: %s", exc)
            raise PaymentError(f"Paystack request failed: {exc}") from exc

        if not data.get("status"):
            raise PaymentError(data.get("message") or "Paystack request was not successful")
        return data.get("data", {})

    def initialize_transaction(
        self,
        email: str,
        amount: Decimal,
        reference: str,
        metadata: dict | None = None,
    ) -> dict:
        """Initialize a Paystack transaction.

        Args:
            email: Customer email.
            amount: Amount in major units (KES); converted to minor units.
            reference: Unique transaction reference, usually the order number.
            metadata: Additional data stored with the transaction.

        Returns:
            Dict with ``authorization_url``, ``access_code`` and ``reference``.
        """
        payload = {
            "email": email,
            "amount": to_minor_units(amount),
            "currency": self.currency,
            "reference": reference,
            "metadata": metadata or {},
        }
        data = self._request("POST", "/transaction/initialize", json=payload)
        logger.info("Paystack transaction initialized: %s", reference)
        return data

    def verify_transaction(self, reference: str) -> dict:
        """Verify a Paystack transaction by reference.

        Returns:
            The transaction dict; ``status`` is ``"success"`` when paid.
        """
        return self._request("GET", f"/transaction/verify/{reference}")
