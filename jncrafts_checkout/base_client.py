"""Abstract base classes for the external services checkout talks to."""

from abc import ABC, abstractmethod

from jncrafts_checkout.models import Coordinate


class GeocoderClient(ABC):
    """Base class that all geocoding clients must implement."""

    @abstractmethod
    def geocode(self, address: str, city: str | None = None) -> Coordinate:
        """Resolve a free-text address to coordinates.

        Args:
            address: Street address or landmark. Must not be blank.
            city: Optional city used to narrow the search.

        Returns:
            The coordinates of the best matching candidate.

        Raises:
            GeocodeNotFound: The service returned no candidates.
            GeocodeUnavailable: The service could not be reached or
                returned an unusable response.
        """


class OrderClient(ABC):
    """Base class that all order-creation clients must implement."""

    @abstractmethod
    def create_order(self, payload: dict) -> str:
        """Submit an order payload.

        Args:
            payload: The JSON body built by OrderRequest.to_payload().

        Returns:
            The order number assigned by the service.

        Raises:
            SubmissionError: The service rejected the order or could not
                be reached.
        """
