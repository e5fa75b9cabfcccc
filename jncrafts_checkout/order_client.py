"""HTTP client for the order-creation endpoint."""

import logging
import os

import requests
from dotenv import load_dotenv

from jncrafts_checkout.base_client import OrderClient
from jncrafts_checkout.exceptions import SubmissionError

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class HttpOrderClient(OrderClient):
    """Posts assembled orders as JSON to the order-creation endpoint."""

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.url = url or os.getenv("ORDER_API_URL", "")
        self.api_key = api_key or os.getenv("ORDER_API_KEY", "")
        self.timeout = timeout
        if not self.url:
            raise ValueError(
                "ORDER_API_URL must be set either as an argument or in a .env file."
            )

        self.session = requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if self.api_key:
            self.session.headers.update({"Authorization": f"Bearer {self.api_key}"})

    def create_order(self, payload: dict) -> str:
        """POST the order payload and return the order number.

        Args:
            payload: JSON-serializable order body.

        Returns:
            The ``orderNumber`` from the response.

        Raises:
            SubmissionError: On a network error, a non-2xx status, or a
                response without ``success: true`` and an order number.
        """
        try:
            resp = self.session.post(self.url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Order submission failed: %s", exc)
            raise SubmissionError(f"Could not reach order service: {exc}") from exc

        if not resp.ok:
            logger.error("Order service returned HTTP %s", resp.status_code)
            raise SubmissionError(
                f"Order service returned HTTP {resp.status_code}",
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except ValueError as exc:
            raise SubmissionError(
                "Order service returned an invalid response",
                status_code=resp.status_code,
            ) from exc

        if not isinstance(data, dict):
            data = {}
        order_number = data.get("orderNumber")
        if not data.get("success") or not order_number:
            raise SubmissionError(
                data.get("error") or "Order service did not confirm the order",
                status_code=resp.status_code,
            )

        logger.info("Order %s created", order_number)
        return order_number
