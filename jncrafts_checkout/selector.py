"""Delivery method selection state machine.

The selector drives geocoding, distance and pricing for the method the
customer picks and publishes the resulting DeliveryDetails. Geocoding
failures never block checkout: home delivery falls back to an assumed
distance and the selector settles into ``Error`` with a usable quote.

Selecting a method while a previous computation is still in flight
restarts the pipeline. In-flight geocoding calls are not cancelled, so
whichever computation finishes last determines the final state.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Union

from jncrafts_checkout import pricing
from jncrafts_checkout.base_client import GeocoderClient
from jncrafts_checkout.distance import distance_from_cbd
from jncrafts_checkout.exceptions import GeocodeError, GeocodeNotFound
from jncrafts_checkout.models import (
    CourierDetails,
    DeliveryDetails,
    DeliveryMethod,
    ShippingAddress,
)

logger = logging.getLogger(__name__)

ESTIMATED_DISTANCE_NOTICE = "Using estimated distance. Actual delivery cost may vary."


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Calculating:
    method: DeliveryMethod


@dataclass(frozen=True)
class Ready:
    details: DeliveryDetails


@dataclass(frozen=True)
class Error:
    """A recoverable failure that still produced a best-effort quote."""

    details: DeliveryDetails
    reason: str
    message: str = ESTIMATED_DISTANCE_NOTICE


SelectorState = Union[Idle, Calculating, Ready, Error]


class DeliveryMethodSelector:
    """Computes and publishes delivery details for one checkout session.

    Args:
        geocoder: Client used to resolve home delivery addresses.
        on_change: Called with the new DeliveryDetails (or None on
            deselect) whenever a computation settles.
    """

    def __init__(
        self,
        geocoder: GeocoderClient,
        on_change: Callable[[DeliveryDetails | None], None] | None = None,
    ):
        self.geocoder = geocoder
        self.on_change = on_change
        self.state: SelectorState = Idle()
        self.method: DeliveryMethod | None = None
        self.pickup_agent: str | None = None
        self.courier: CourierDetails | None = None
        self._shipping_address: ShippingAddress | None = None

    @property
    def delivery_details(self) -> DeliveryDetails | None:
        if isinstance(self.state, (Ready, Error)):
            return self.state.details
        return None

    @property
    def is_calculating(self) -> bool:
        return isinstance(self.state, Calculating)

    async def select(
        self,
        method: DeliveryMethod,
        shipping_address: ShippingAddress,
        pickup_agent: str | None = None,
        courier: CourierDetails | None = None,
    ) -> DeliveryDetails:
        """Select a delivery method and price it.

        Args:
            method: The delivery method chosen by the customer.
            shipping_address: Current shipping address.
            pickup_agent: Agent label, required for Pickup Mtaani.
            courier: Courier contact details for customer logistics.

        Returns:
            The DeliveryDetails computed by this call. If another call
            finished later, ``delivery_details`` reflects that one instead.
        """
        method = DeliveryMethod(method)
        self.method = method
        self.pickup_agent = pickup_agent
        self.courier = courier
        self._shipping_address = shipping_address
        return await self._compute(method, shipping_address, pickup_agent, courier)

    async def update_address(self, shipping_address: ShippingAddress) -> DeliveryDetails | None:
        """Re-price the active method for a changed shipping address."""
        self._shipping_address = shipping_address
        if self.method is None:
            return None
        return await self._compute(
            self.method, shipping_address, self.pickup_agent, self.courier
        )

    async def retry(self) -> DeliveryDetails | None:
        if self.method is None or self._shipping_address is None:
            return None
        return await self._compute(
            self.method, self._shipping_address, self.pickup_agent, self.courier
        )

    def deselect(self) -> None:
        self.method = None
        self.pickup_agent = None
        self.courier = None
        self._transition(Idle())
        self._publish(None)

    async def _compute(
        self,
        method: DeliveryMethod,
        shipping_address: ShippingAddress,
        pickup_agent: str | None,
        courier: CourierDetails | None,
    ) -> DeliveryDetails:
        self._transition(Calculating(method))

        try:
            if method is DeliveryMethod.HOME_DELIVERY:
                state = await self._price_home_delivery(shipping_address)
            elif method is DeliveryMethod.PICKUP_MTAANI:
                state = Ready(pricing.price_pickup_mtaani(pickup_agent or ""))
            elif method is DeliveryMethod.PICKUP_IN_TOWN:
                state = Ready(pricing.price_pickup_in_town())
            else:
                state = Ready(pricing.price_customer_logistics(courier))
        except Exception:
            logger.exception("Could not calculate %s delivery", method.value)
            self._transition(Idle())
            self._publish(None)
            raise

        self._transition(state)
        self._publish(state.details)
        return state.details

    async def _price_home_delivery(self, shipping_address: ShippingAddress) -> Ready | Error:
        location = shipping_address.label
        coordinate = shipping_address.coordinate
        try:
            if coordinate is None:
                if not shipping_address.address.strip():
                    raise GeocodeNotFound("No shipping address to geocode")
                coordinate = await asyncio.to_thread(
                    self.geocoder.geocode,
                    shipping_address.address,
                    shipping_address.city or None,
                )
        except GeocodeError as exc:
            logger.warning(
                "Geocoding failed for %r, assuming %.0f km: %s",
                location,
                pricing.FALLBACK_DISTANCE_KM,
                exc,
            )
            details = pricing.price_home_delivery(pricing.FALLBACK_DISTANCE_KM, location)
            return Error(details=details, reason=type(exc).__name__)

        distance_km = distance_from_cbd(coordinate)
        return Ready(pricing.price_home_delivery(distance_km, location))

    def _transition(self, state: SelectorState) -> None:
        logger.debug("Delivery selector %s -> %s", type(self.state).__name__, type(state).__name__)
        self.state = state

    def _publish(self, details: DeliveryDetails | None) -> None:
        if self.on_change is not None:
            self.on_change(details)
