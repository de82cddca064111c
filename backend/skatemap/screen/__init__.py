"""
SkateMap Screen: headless map screen.

MapScreen holds the screen state and its event handlers; render() returns
a ScreenView snapshot. The backend is reached only through SkateMapClient.
"""

from skatemap.screen.location import FixedLocationProvider, LocationError, LocationProvider
from skatemap.screen.map_screen import MapScreen
from skatemap.screen.view import ScreenView

__all__ = [
    "FixedLocationProvider",
    "LocationError",
    "LocationProvider",
    "MapScreen",
    "ScreenView",
]
