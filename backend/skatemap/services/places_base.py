"""
SkateMap Backend: Abstract Nearby-Places Provider
===================================================

What:  Abstract base class for services that find skate shops and parks
       around a coordinate.
How:   Concrete implementations inherit from PlacesProvider and implement
       find_nearby() and health_check().
Who:   Called by the /api/places routes and the health check.

Implementations:
    - OverpassService: public Overpass (OpenStreetMap) API
"""

from abc import ABC, abstractmethod
from typing import List

from skatemap.schemas.place import Place


class PlacesProvider(ABC):
    """
    Contract:
        - find_nearby() returns normalized places; elements without usable
          coordinates are already dropped
        - Implementations handle their own retries and wrap provider
          failures in PlacesServiceError
    """

    @abstractmethod
    async def find_nearby(self, lat: float, lng: float, radius_m: int) -> List[Place]:
        """
        Find skate shops and skate parks within `radius_m` meters of (lat, lng).

        Raises:
            PlacesServiceError: Provider failed (after retries)
            CircuitBreakerOpenError: Too many recent failures
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight reachability test.

        Returns: True if the provider answers, False otherwise. Never raises.
        """
        ...
