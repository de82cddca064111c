"""
Device location for the map screen.

The screen asks for foreground permission, then reads one position with
balanced accuracy. Providers wrap whatever the host platform offers; the
fixed provider serves the configured default center and is what tests and
desktop runs use.
"""

from abc import ABC, abstractmethod
from typing import Tuple

from skatemap.config import settings

PERMISSION_GRANTED = "granted"
PERMISSION_DENIED = "denied"


class LocationError(Exception):
    """The platform could not produce a position."""

    def __init__(self, message: str = "Could not determine your location."):
        self.message = message
        super().__init__(message)


class LocationProvider(ABC):

    @abstractmethod
    async def request_permission(self) -> str:
        """Returns PERMISSION_GRANTED or PERMISSION_DENIED."""
        ...

    @abstractmethod
    async def current_position(self) -> Tuple[float, float]:
        """
        One (lat, lng) reading at balanced accuracy.

        Raises:
            LocationError: No fix could be obtained
        """
        ...


class FixedLocationProvider(LocationProvider):
    """Always reports the same position. `granted=False` simulates a refusal."""

    def __init__(self, lat: float = None, lng: float = None, granted: bool = True):
        self.lat = settings.default_lat if lat is None else lat
        self.lng = settings.default_lng if lng is None else lng
        self.granted = granted
        self.permission_requests = 0

    async def request_permission(self) -> str:
        self.permission_requests += 1
        return PERMISSION_GRANTED if self.granted else PERMISSION_DENIED

    async def current_position(self) -> Tuple[float, float]:
        if not self.granted:
            raise LocationError("Location permission denied.")
        return self.lat, self.lng
