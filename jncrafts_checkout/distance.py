"""Great-circle distance from the Nairobi CBD."""

from math import atan2, cos, radians, sin, sqrt

from jncrafts_checkout.models import Coordinate

# Mean radius of Earth in kilometres.
_EARTH_RADIUS_KM = 6371.0

# City Hall / Uhuru Park area.
NAIROBI_CBD = Coordinate(latitude=-1.2921, longitude=36.8219)


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in km between two lat/lon points."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return _EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


def distance_between(origin: Coordinate, destination: Coordinate) -> float:
    """Return the distance in km between two coordinates."""
    return haversine(
        origin.latitude,
        origin.longitude,
        destination.latitude,
        destination.longitude,
    )


def distance_from_cbd(destination: Coordinate) -> float:
    return distance_between(NAIROBI_CBD, destination)

