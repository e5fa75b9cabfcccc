"""Delivery pricing for each checkout delivery method."""

from decimal import Decimal
from math import ceil, isfinite

from jncrafts_checkout.models import CourierDetails, DeliveryDetails, DeliveryMethod

BASE_COST = Decimal("200")
COST_PER_BAND = Decimal("200")
BAND_KM = 5

# Assumed distance when the shipping address cannot be geocoded.
FALLBACK_DISTANCE_KM = 10.0

# Average distance from the CBD to a Pickup Mtaani agent.
PICKUP_MTAANI_DISTANCE_KM = 15.0

IN_TOWN_PICKUP_LOCATION = "Nairobi Archives"
CUSTOMER_LOGISTICS_LOCATION = "Customer arranged pickup"


def distance_cost(distance_km: float) -> Decimal:
    """Return the delivery cost for a distance from the CBD.

    The base cost covers the CBD itself; every started 5 km band adds
    another 200. So 0 km costs 200, 4.9 and 5.0 km cost 400, 5.1 km
    costs 600.

    Args:
        distance_km: Distance from the CBD in kilometres.

    Returns:
        The cost as a Decimal.

    Raises:
        ValueError: If *distance_km* is negative, NaN or infinite.
    """
    if not isfinite(distance_km):
        raise ValueError(f"distance_km must be a finite number, got {distance_km}")
    if distance_km < 0:
        raise ValueError(f"distance_km must not be negative, got {distance_km}")
    bands = ceil(distance_km / BAND_KM)
    return BASE_COST + COST_PER_BAND * bands


def price_home_delivery(distance_km: float, location: str) -> DeliveryDetails:
    return DeliveryDetails(
        method=DeliveryMethod.HOME_DELIVERY,
        cost=distance_cost(distance_km),
        location=location,
        distance_from_cbd=distance_km,
    )


def price_pickup_mtaani(agent_location: str) -> DeliveryDetails:
    """Price a Pickup Mtaani delivery; the agent's address is not geocoded."""
    return DeliveryDetails(
        method=DeliveryMethod.PICKUP_MTAANI,
        cost=distance_cost(PICKUP_MTAANI_DISTANCE_KM),
        location=agent_location,
        distance_from_cbd=PICKUP_MTAANI_DISTANCE_KM,
    )


def price_pickup_in_town() -> DeliveryDetails:
    return DeliveryDetails(
        method=DeliveryMethod.PICKUP_IN_TOWN,
        cost=Decimal("0"),
        location=IN_TOWN_PICKUP_LOCATION,
        distance_from_cbd=0.0,
    )


def price_customer_logistics(courier: CourierDetails | None = None) -> DeliveryDetails:
    """Price a customer-arranged courier; the customer pays the courier directly."""
    return DeliveryDetails(
        method=DeliveryMethod.CUSTOMER_LOGISTICS,
        cost=Decimal("0"),
        location=CUSTOMER_LOGISTICS_LOCATION,
        distance_from_cbd=0.0,
        courier_details=courier,
    )


def price_delivery(
    method: DeliveryMethod,
    distance_km: float | None = None,
    location: str = "",
    courier: CourierDetails | None = None,
) -> DeliveryDetails:
    """Price a delivery method.

    Args:
        method: The selected delivery method.
        distance_km: Distance from the CBD, used by home delivery only.
            Falls back to FALLBACK_DISTANCE_KM when omitted.
        location: Shipping address label for home delivery, or the
            agent label for Pickup Mtaani.
        courier: Courier contact details for customer logistics.

    Returns:
        DeliveryDetails with cost, location and distance populated.
    """
    method = DeliveryMethod(method)

    if method is DeliveryMethod.HOME_DELIVERY:
        if distance_km is None:
            distance_km = FALLBACK_DISTANCE_KM
        return price_home_delivery(distance_km, location)

    if method is DeliveryMethod.PICKUP_MTAANI:
        return price_pickup_mtaani(location)

    if method is DeliveryMethod.PICKUP_IN_TOWN:
        return price_pickup_in_town()

    return price_customer_logistics(courier)
