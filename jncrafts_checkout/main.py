#!/usr/bin/env python3
"""CLI entry point for quoting delivery and placing jnCrafts orders."""

import argparse
import asyncio
import json
import math
import os
import sys
from decimal import Decimal, InvalidOperation

from jncrafts_checkout.exceptions import (
    OrderValidationError,
    PaymentError,
    SubmissionError,
)
from jncrafts_checkout.logging_config import setup_logging
from jncrafts_checkout.models import (
    CartLineItem,
    CourierDetails,
    CustomerInfo,
    DeliveryMethod,
    Discount,
    ShippingAddress,
)
from jncrafts_checkout.order_assembly import assemble_order, subtotal
from jncrafts_checkout.pickup_agents import find_pickup_agents, get_pickup_agent
from jncrafts_checkout.selector import DeliveryMethodSelector, Error


def _coordinate(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid coordinate {value!r}") from None
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"coordinate must be finite, got {value!r}")
    return number


def _parse_item(value: str) -> CartLineItem:
    """Parse an ``NAME:PRICE:QTY`` item argument."""
    try:
        name, price, quantity = value.rsplit(":", 2)
        return CartLineItem(product_name=name, price=Decimal(price), quantity=int(quantity))
    except (ValueError, InvalidOperation):
        raise argparse.ArgumentTypeError(
            f"invalid item {value!r}, expected NAME:PRICE:QTY"
        ) from None


def _print_agents(zone):
    agents = find_pickup_agents(zone)
    print(f"\nPickup Mtaani agents in {zone} ({len(agents)}):\n")
    for agent in agents:
        print(f"  {agent.code:<7} {agent.name} - {agent.road}, {agent.estate}")
    print()


def _print_delivery(details, state):
    print(f"\n{'=' * 70}")
    print("  DELIVERY QUOTE")
    print(f"{'=' * 70}\n")
    print(f"  Method:   {details.method.value}")
    print(f"  Location: {details.location}")
    if details.distance_from_cbd > 0:
        print(f"  Distance: {details.distance_from_cbd:.1f} km from CBD ({details.zone.value})")
    if details.courier_details:
        print(f"  Courier:  {details.courier_details.name} ({details.courier_details.phone})")
    print(f"  Cost:     KES {details.cost:,.2f}")
    if isinstance(state, Error):
        print(f"\n  Note: {state.message}")
    print()


def _print_order(order, order_number=None):
    print(f"{'=' * 70}")
    print("  ORDER SUMMARY")
    print(f"{'=' * 70}\n")
    for item in order.items:
        print(f"  {item.quantity} x {item.product_name:<40} KES {item.line_total:,.2f}")
    print(f"\n  Subtotal: KES {subtotal(order.items):,.2f}")
    if order.discount_amount:
        print(f"  Discount: -KES {order.discount_amount:,.2f} ({order.discount_code})")
    print(f"  Delivery: KES {order.delivery_details.cost:,.2f}")
    print(f"  Total:    KES {order.total:,.2f}")
    if order_number:
        print(f"\n  Order number: {order_number}")
    print()


def _export_json(order, path):
    with open(path, "w") as f:
        json.dump(order.to_payload(), f, indent=2)
    print(f"Order payload exported to {path}")


def _build_courier(args) -> CourierDetails | None:
    if not (args.courier_name or args.courier_phone):
        return None
    return CourierDetails(
        name=args.courier_name or "",
        phone=args.courier_phone or "",
        company=args.courier_company,
        pickup_window=args.pickup_window,
    )


def _resolve_pickup_agent(value: str | None) -> str | None:
    if not value:
        return None
    agent = get_pickup_agent(value)
    return agent.label if agent else value


def _build_discount(args, items) -> tuple[Decimal, str | None]:
    if not args.discount_code:
        return Decimal("0"), None
    discount = Discount(
        code=args.discount_code.upper(),
        discount_type=args.discount_type,
        value=args.discount_value,
    )
    return discount.amount_for(subtotal(items)), discount.code


def _pay(args, order, order_number):
    if args.pay == "mpesa":
        from jncrafts_checkout.mpesa_client import MpesaClient

        response = MpesaClient().stk_push(
            phone=order.customer_info.phone,
            amount=order.total,
            account_reference=order_number,
        )
        print(f"M-Pesa prompt sent: {response.get('CustomerMessage', 'check your phone')}")
        return

    from jncrafts_checkout.paystack_client import PaystackClient

    data = PaystackClient().initialize_transaction(
        email=order.customer_info.email,
        amount=order.total,
        reference=order_number,
        metadata={"order_number": order_number},
    )
    print(f"Complete payment at: {data.get('authorization_url')}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Quote delivery for a jnCrafts order and optionally place it.",
    )
    parser.add_argument(
        "--method",
        choices=[m.value for m in DeliveryMethod],
        help="Delivery method to price.",
    )
    parser.add_argument(
        "--list-agents",
        metavar="ZONE",
        choices=["CBD", "Mtaani"],
        help="List Pickup Mtaani agents in a zone and exit.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help='Logging level (default: LOG_LEVEL env var or "INFO").',
    )

    address_group = parser.add_argument_group("Shipping address")
    address_group.add_argument("--address", default="", help="Street address or landmark.")
    address_group.add_argument("--city", default="Nairobi", help='City (default: "Nairobi").')
    address_group.add_argument("--postal-code", default="", help="Postal code.")
    address_group.add_argument("--lat", type=_coordinate, help="Device latitude; skips geocoding.")
    address_group.add_argument("--lon", type=_coordinate, help="Device longitude; skips geocoding.")

    pickup_group = parser.add_argument_group("Pickup Mtaani / customer logistics options")
    pickup_group.add_argument(
        "--pickup-agent",
        help="Pickup Mtaani agent id, code, or free-text location.",
    )
    pickup_group.add_argument("--courier-name", help="Courier or rider name.")
    pickup_group.add_argument("--courier-phone", help="Courier phone number.")
    pickup_group.add_argument("--courier-company", help="Logistics company (optional).")
    pickup_group.add_argument("--pickup-window", help='e.g. "9 AM - 5 PM" (optional).')

    order_group = parser.add_argument_group("Order options")
    order_group.add_argument(
        "--item",
        action="append",
        type=_parse_item,
        default=[],
        metavar="NAME:PRICE:QTY",
        help="Cart line item; repeat for multiple items.",
    )
    order_group.add_argument("--name", default="", help="Customer full name.")
    order_group.add_argument("--email", default="", help="Customer email.")
    order_group.add_argument("--phone", default="", help="Customer phone number.")
    order_group.add_argument("--discount-code", help="Promo code that was applied.")
    order_group.add_argument(
        "--discount-type",
        default="fixed",
        choices=["fixed", "percentage"],
        help='Discount type (default: "fixed").',
    )
    order_group.add_argument(
        "--discount-value",
        type=Decimal,
        default=Decimal("0"),
        help="Discount amount or percentage.",
    )
    order_group.add_argument(
        "--json",
        metavar="FILE",
        help="Export the assembled order payload to a JSON file.",
    )
    order_group.add_argument(
        "--submit",
        action="store_true",
        help="Submit the order to ORDER_API_URL.",
    )
    order_group.add_argument(
        "--pay",
        choices=["mpesa", "paystack"],
        help="Start payment after the order is submitted.",
    )
    return parser


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.list_agents:
        _print_agents(args.list_agents)
        return

    if not args.method:
        parser.error("--method is required unless --list-agents is given")

    from jncrafts_checkout.nominatim_client import NominatimClient

    shipping_address = ShippingAddress(
        address=args.address,
        city=args.city,
        postal_code=args.postal_code,
        lat=args.lat,
        lon=args.lon,
    )
    selector = DeliveryMethodSelector(NominatimClient())
    try:
        details = asyncio.run(
            selector.select(
                DeliveryMethod(args.method),
                shipping_address,
                pickup_agent=_resolve_pickup_agent(args.pickup_agent),
                courier=_build_courier(args),
            )
        )
    except ValueError as exc:
        print(f"Error: could not calculate delivery: {exc}", file=sys.stderr)
        sys.exit(1)
    _print_delivery(details, selector.state)

    if not (args.item or args.submit or args.json):
        return

    discount_amount, discount_code = _build_discount(args, args.item)
    customer = CustomerInfo(name=args.name, email=args.email, phone=args.phone)
    try:
        order = assemble_order(
            args.item,
            selector.delivery_details,
            customer,
            shipping_address,
            discount_amount=discount_amount,
            discount_code=discount_code,
        )
    except OrderValidationError as exc:
        print("Error: the order is incomplete:", file=sys.stderr)
        for field, message in sorted(exc.errors.items()):
            print(f"  - {field}: {message}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        _export_json(order, args.json)

    if not args.submit:
        _print_order(order)
        return

    from jncrafts_checkout.order_assembly import OrderAssembler
    from jncrafts_checkout.order_client import HttpOrderClient

    try:
        order_number = OrderAssembler(HttpOrderClient()).submit(order)
    except (ValueError, SubmissionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if getattr(exc, "retryable", False):
            print("The order was not placed. Please try again.", file=sys.stderr)
        sys.exit(1)

    _print_order(order, order_number)

    if args.pay:
        try:
            _pay(args, order, order_number)
        except (ValueError, PaymentError) as exc:
            print(f"Error: payment could not be started: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
