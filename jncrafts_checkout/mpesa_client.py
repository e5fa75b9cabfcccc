"""M-Pesa Daraja client for STK push payment requests."""

import base64
import logging
import os
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

import requests
from dotenv import load_dotenv

from jncrafts_checkout.exceptions import PaymentError

load_dotenv()

logger = logging.getLogger(__name__)

SANDBOX_URL = "https://sandbox.safaricom.co.ke"
PRODUCTION_URL = "https://api.safaricom.co.ke"


def normalize_phone(number: str) -> str:
    """Convert a Kenyan phone number to the 2547XXXXXXXX MSISDN form."""
    number = number.strip().replace(" ", "")
    if number.startswith("0"):
        return f"254{number[1:]}"
    if number.startswith("+"):
        return number[1:]
    return number


def timestamp(now: datetime | None = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d%H%M%S")


def stk_password(shortcode: str, passkey: str, ts: str) -> str:
    return base64.b64encode(f"{shortcode}{passkey}{ts}".encode("utf-8")).decode("ascii")


class MpesaClient:
    """Client for the Safaricom Daraja STK push API."""

    def __init__(
        self,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        shortcode: str | None = None,
        passkey: str | None = None,
        callback_url: str | None = None,
        environment: str | None = None,
    ):
        self.consumer_key = consumer_key or os.getenv("MPESA_CONSUMER_KEY", "")
        self.consumer_secret = consumer_secret or os.getenv("MPESA_CONSUMER_SECRET", "")
        self.shortcode = shortcode or os.getenv("MPESA_SHORTCODE", "")
        self.passkey = passkey or os.getenv("MPESA_PASSKEY", "")
        self.callback_url = callback_url or os.getenv("MPESA_CALLBACK_URL", "")
        environment = environment or os.getenv("MPESA_ENVIRONMENT", "sandbox")

        if not all([
            self.consumer_key,
            self.consumer_secret,
            self.shortcode,
            self.passkey,
            self.callback_url,
        ]):
            raise ValueError(
                "MPESA_CONSUMER_KEY, MPESA_CONSUMER_SECRET, MPESA_SHORTCODE, "
                "MPESA_PASSKEY, and MPESA_CALLBACK_URL must be set either as "
                "arguments or in a .env file."
            )

        self.base_url = PRODUCTION_URL if environment == "production" else SANDBOX_URL
        self.session = requests.Session()

    def get_access_token(self) -> str:
        """Fetch an OAuth access token using client credentials."""
        try:
            resp = self.session.get(
                f"{self.base_url}/oauth/v1/generate",
                params={"grant_type": "client_credentials"},
                auth=(self.consumer_key, self.consumer_secret),
                timeout=30,
            )
            resp.raise_for_status()
            return resp.json()["access_token"]
        except (requests.RequestException, KeyError, ValueError) as exc:
            logger.error("M-Pesa token request failed: %s", exc)
            raise PaymentError(f"Failed to get M-Pesa access token: {exc}") from exc

    def stk_push(
        self,
        phone: str,
        amount: Decimal,
        account_reference: str,
        description: str = "Order payment",
    ) -> dict:
        """Prompt the customer's phone to pay *amount*.

        Args:
            phone: Customer phone number in any common Kenyan format.
            amount: Amount in KES; rounded to whole shillings.
            account_reference: Shown to the customer, usually the order number.
            description: Transaction description.

        Returns:
            Parsed JSON response, including ``CheckoutRequestID``.

        Raises:
            PaymentError: If the token or push request fails.
        """
        whole_amount = int(Decimal(amount).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        if whole_amount <= 0:
            raise PaymentError("M-Pesa amount must be at least 1 KES")

        token = self.get_access_token()
        ts = timestamp()
        msisdn = normalize_phone(phone)
        body = {
            "BusinessShortCode": self.shortcode,
            "Password": stk_password(self.shortcode, self.passkey, ts),
            "Timestamp": ts,
            "TransactionType": "CustomerPayBillOnline",
            "Amount": whole_amount,
            "PartyA": msisdn,
            "PartyB": self.shortcode,
            "PhoneNumber": msisdn,
            "CallBackURL": self.callback_url,
            "AccountReference": account_reference,
            "TransactionDesc": description,
        }

        try:
            resp = self.session.post(
                f"{self.base_url}/mpesa/stkpush/v1/processrequest",
                json=body,
                headers={"Authorization": f"Bearer {token}"},
                timeout=30,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("M-Pesa STK push failed: %s", exc)
            raise PaymentError(f"M-Pesa STK push failed: {exc}") from exc

        logger.info("STK push sent for %s", account_reference)
        return data
