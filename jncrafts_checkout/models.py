"""Shared data models for delivery pricing and order assembly."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class DeliveryMethod(str, Enum):
    """The delivery methods offered at checkout."""

    HOME_DELIVERY = "home_delivery"
    PICKUP_MTAANI = "pickup_mtaani"
    PICKUP_IN_TOWN = "pickup_in_town"
    CUSTOMER_LOGISTICS = "customer_logistics"


class DeliveryZone(str, Enum):
    """Delivery zone derived from the distance to the CBD."""

    CBD = "CBD"
    MTAANI = "Mtaani"
    MASHINANI = "Mashinani"


_CBD_RADIUS_KM = 5.0
_MTAANI_RADIUS_KM = 20.0
COUNTRY = "Kenya"


def zone_for_distance(distance_km: float) -> DeliveryZone:
    """Classify a distance from the CBD into a delivery zone.

    Args:
        distance_km: Distance from the CBD in kilometres.

    Returns:
        ``CBD`` up to 5 km, ``Mtaani`` up to 20 km, ``Mashinani`` beyond.
    """
    if distance_km <= _CBD_RADIUS_KM:
        return DeliveryZone.CBD
    if distance_km <= _MTAANI_RADIUS_KM:
        return DeliveryZone.MTAANI
    return DeliveryZone.MASHINANI


def geocode_query(address: str, city: str | None = None) -> str:
    """Build the free-text search string sent to the geocoder."""
    parts = [(address or "").strip(), (city or "").strip(), COUNTRY]
    return ", ".join(p for p in parts if p)


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in degrees."""

    latitude: float
    longitude: float


@dataclass
class CourierDetails:
    """Contact details for a courier arranged by the customer."""

    name: str
    phone: str
    company: str | None = None
    pickup_window: str | None = None

    def to_dict(self) -> dict:
        data = {"name": self.name, "phone": self.phone}
        if self.company:
            data["company"] = self.company
        if self.pickup_window:
            data["pickupWindow"] = self.pickup_window
        return data


@dataclass(frozen=True)
class DeliveryDetails:
    """A priced delivery decision for the active checkout."""

    method: DeliveryMethod
    cost: Decimal
    location: str
    distance_from_cbd: float
    courier_details: CourierDetails | None = None

    @property
    def zone(self) -> DeliveryZone:
        return zone_for_distance(self.distance_from_cbd)

    def to_dict(self) -> dict:
        data = {
            "method": self.method.value,
            "cost": float(self.cost),
            "location": self.location,
            "distanceFromCBD": self.distance_from_cbd,
        }
        if self.courier_details is not None:
            data["courierDetails"] = self.courier_details.to_dict()
        return data


@dataclass
class ShippingAddress:
    """A shipping address supplied by the customer."""

    address: str
    city: str
    postal_code: str
    lat: float | None = None
    lon: float | None = None

    @property
    def query(self) -> str:
        return geocode_query(self.address, self.city)

    @property
    def label(self) -> str:
        return ", ".join(p for p in [self.address, self.city] if p)

    @property
    def coordinate(self) -> Coordinate | None:
        """Device-supplied coordinates, if both are known."""
        if self.lat is None or self.lon is None:
            return None
        return Coordinate(self.lat, self.lon)

    def to_dict(self) -> dict:
        data = {
            "address": self.address,
            "city": self.city,
            "postalCode": self.postal_code,
        }
        if self.coordinate is not None:
            data["lat"] = self.lat
            data["lon"] = self.lon
        return data


@dataclass
class CustomerInfo:
    name: str
    email: str
    phone: str

    def to_dict(self) -> dict:
        return {"fullName": self.name, "email": self.email, "phone": self.phone}


@dataclass
class CartLineItem:
    """A single product line in the cart."""

    product_name: str
    price: Decimal
    quantity: int
    size: str | None = None
    color: str | None = None

    @property
    def line_total(self) -> Decimal:
        return Decimal(self.price) * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_name": self.product_name,
            "price": float(self.price),
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }


@dataclass
class Discount:
    """A promo code discount resolved against a cart subtotal.

    ``discount_type`` is either ``"percentage"`` or ``"fixed"``.
    """

    code: str
    discount_type: str
    value: Decimal

    def __post_init__(self):
        if self.discount_type not in ("percentage", "fixed"):
            raise ValueError(
                f"discount_type must be 'percentage' or 'fixed', got {self.discount_type!r}"
            )
        if Decimal(self.value) < 0:
            raise ValueError("discount value must not be negative")

    def amount_for(self, subtotal: Decimal) -> Decimal:
        """Return the amount taken off *subtotal*, never more than the subtotal."""
        subtotal = Decimal(subtotal)
        if self.discount_type == "percentage":
            amount = subtotal * Decimal(self.value) / 100
        else:
            amount = Decimal(self.value)
        return min(amount, subtotal)


@dataclass(frozen=True)
class OrderRequest:
    """A fully assembled order, ready to submit once."""

    customer_info: CustomerInfo
    shipping_address: ShippingAddress
    delivery_details: DeliveryDetails
    items: tuple[CartLineItem, ...]
    total: Decimal
    discount_amount: Decimal = Decimal("0")
    discount_code: str | None = None

    def to_payload(self) -> dict:
        discount = None
        if self.discount_amount:
            discount = {
                "code": self.discount_code,
                "amount": float(self.discount_amount),
            }
        return {
            "customerInfo": self.customer_info.to_dict(),
            "shippingAddress": self.shipping_address.to_dict(),
            "deliveryDetails": self.delivery_details.to_dict(),
            "items": [item.to_dict() for item in self.items],
            "total": float(self.total),
            "discount": discount,
        }
