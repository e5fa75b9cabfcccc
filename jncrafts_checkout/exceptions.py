"""Checkout exceptions.

Geocoding errors are absorbed by the delivery method selector and turned
into fallback pricing. Validation, submission and payment errors are
raised to the caller unchanged.
"""


class CheckoutError(Exception):
    """Base class for all checkout errors."""


class GeocodeError(CheckoutError):
    """The shipping address could not be resolved to coordinates."""


class GeocodeNotFound(GeocodeError):
    """The geocoding service returned no candidates for the address."""


class GeocodeUnavailable(GeocodeError):
    """The geocoding service failed, timed out or returned garbage."""


class OrderValidationError(CheckoutError):
    """One or more required order fields are missing.

    Attributes:
        errors: Mapping of field name to a human readable message.
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Order is missing required fields: {fields}")


class SubmissionError(CheckoutError):
    """The order-creation endpoint rejected the order or was unreachable."""

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.retryable = retryable
        self.status_code = status_code


class PaymentError(CheckoutError):
    """A payment gateway request failed."""
