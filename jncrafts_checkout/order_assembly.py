"""Order validation, total computation and one-shot submission."""

import logging
from decimal import Decimal
from typing import Iterable

from jncrafts_checkout.base_client import OrderClient
from jncrafts_checkout.exceptions import OrderValidationError
from jncrafts_checkout.models import (
    CartLineItem,
    CustomerInfo,
    DeliveryDetails,
    OrderRequest,
    ShippingAddress,
)

logger = logging.getLogger(__name__)


def subtotal(items: Iterable[CartLineItem]) -> Decimal:
    """Return the sum of price x quantity over the cart."""
    return sum((item.line_total for item in items), Decimal("0"))


def compute_total(
    items: Iterable[CartLineItem],
    discount_amount: Decimal,
    delivery_cost: Decimal,
) -> Decimal:
    """Return subtotal - discount + delivery.

    The discount is already resolved and capped upstream; it is not
    recomputed here.
    """
    return subtotal(items) - Decimal(discount_amount) + Decimal(delivery_cost)


def validate_order(
    items: list[CartLineItem] | None,
    delivery_details: DeliveryDetails | None,
    customer_info: CustomerInfo | None,
    shipping_address: ShippingAddress | None,
) -> dict[str, str]:
    """Collect field-level errors for an order.

    Returns:
        Mapping of field name to message; empty when the order is complete.
    """
    errors: dict[str, str] = {}

    if not items:
        errors["items"] = "Your cart is empty."
    else:
        for index, item in enumerate(items):
            if item.quantity <= 0:
                errors[f"items[{index}].quantity"] = "Quantity must be at least 1."
            if Decimal(item.price) < 0:
                errors[f"items[{index}].price"] = "Price must not be negative."

    if delivery_details is None:
        errors["deliveryDetails"] = "Please select a delivery method."

    if customer_info is None:
        errors["customerInfo"] = "Please fill in all customer information fields."
    else:
        for name in ("name", "email", "phone"):
            if not (getattr(customer_info, name) or "").strip():
                errors[f"customerInfo.{name}"] = f"Customer {name} is required."

    if shipping_address is None:
        errors["shippingAddress"] = "Please provide a complete shipping address."
    else:
        for name, label in (
            ("address", "address"),
            ("city", "city"),
            ("postal_code", "postalCode"),
        ):
            if not (getattr(shipping_address, name) or "").strip():
                errors[f"shippingAddress.{label}"] = f"Shipping {label} is required."

    return errors


def assemble_order(
    items: list[CartLineItem] | None,
    delivery_details: DeliveryDetails | None,
    customer_info: CustomerInfo | None,
    shipping_address: ShippingAddress | None,
    discount_amount: Decimal = Decimal("0"),
    discount_code: str | None = None,
) -> OrderRequest:
    """Validate the checkout data and build an OrderRequest.

    Args:
        items: Cart line items.
        delivery_details: The settled delivery decision.
        customer_info: Customer name, email and phone.
        shipping_address: Where the order goes.
        discount_amount: Resolved discount, already capped at the subtotal.
        discount_code: The promo code that produced the discount, if any.

    Returns:
        An immutable OrderRequest with the total computed.

    Raises:
        OrderValidationError: If any required field is missing.
    """
    errors = validate_order(items, delivery_details, customer_info, shipping_address)
    if errors:
        raise OrderValidationError(errors)

    discount_amount = Decimal(discount_amount or 0)
    total = compute_total(items, discount_amount, delivery_details.cost)
    return OrderRequest(
        customer_info=customer_info,
        shipping_address=shipping_address,
        delivery_details=delivery_details,
        items=tuple(items),
        total=total,
        discount_amount=discount_amount,
        discount_code=discount_code if discount_amount else None,
    )


class OrderAssembler:
    """Assembles orders and submits each one exactly once."""

    def __init__(self, order_client: OrderClient):
        self.order_client = order_client

    def submit(self, order: OrderRequest) -> str:
        """Submit an assembled order.

        SubmissionError from the client propagates unchanged; retrying is
        up to the caller, with a freshly assembled request.
        """
        order_number = self.order_client.create_order(order.to_payload())
        logger.info(
            "Submitted order %s for %s (total %s)",
            order_number,
            order.customer_info.email,
            order.total,
        )
        return order_number

    def assemble_and_submit(
        self,
        items: list[CartLineItem] | None,
        delivery_details: DeliveryDetails | None,
        customer_info: CustomerInfo | None,
        shipping_address: ShippingAddress | None,
        discount_amount: Decimal = Decimal("0"),
        discount_code: str | None = None,
    ) -> tuple[OrderRequest, str]:
        order = assemble_order(
            items,
            delivery_details,
            customer_info,
            shipping_address,
            discount_amount=discount_amount,
            discount_code=discount_code,
        )
        return order, self.submit(order)
