from decimal import Decimal

import pytest

from jncrafts_checkout.base_client import GeocoderClient, OrderClient
from jncrafts_checkout.models import (
    CartLineItem,
    Coordinate,
    CustomerInfo,
    ShippingAddress,
)


class FakeGeocoder(GeocoderClient):
    """Returns a fixed coordinate or raises a fixed error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def geocode(self, address, city=None):
        self.calls.append((address, city))
        if self.error is not None:
            raise self.error
        return self.result


class FakeOrderClient(OrderClient):
    def __init__(self, order_number="JNC-20250101-0000000001", error=None):
        self.order_number = order_number
        self.error = error
        self.payloads = []

    def create_order(self, payload):
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return self.order_number


# Westlands, roughly 3 km north-west of the CBD.
WESTLANDS = Coordinate(latitude=-1.2676, longitude=36.8108)


@pytest.fixture()
def shipping_address():
    return ShippingAddress(address="Waiyaki Way", city="Nairobi", postal_code="00100")


@pytest.fixture()
def customer():
    return CustomerInfo(name="Wanjiru Kamau", email="wanjiru@example.com", phone="0712345678")


@pytest.fixture()
def items():
    return [CartLineItem(product_name="Beaded Tote", price=Decimal("1000"), quantity=2)]
