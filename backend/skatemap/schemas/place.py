"""
SkateMap Backend: Place Schemas
=================================

What:  Normalized nearby places (skate shops, skate parks) built from
       Overpass `elements`. Places are never persisted.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class Place(BaseModel):
    """
    One normalized Overpass element.

    id is "<osm type>-<osm id>" (e.g. "node-123", "way-456"), which keeps
    nodes, ways and relations that share a numeric id apart.
    """
    id: str = Field(description="Synthesized identifier: '<type>-<id>'")
    name: str
    lat: float
    lng: float
    tags: Dict[str, str] = Field(default_factory=dict, description="Raw OSM tags")


class PlaceListResponse(BaseModel):
    """Response of GET /api/places/nearby."""
    places: List[Place]
    count: int
    lat: float = Field(description="Search center latitude")
    lng: float = Field(description="Search center longitude")
    radius_m: int = Field(description="Search radius in meters")
