"""
SkateMap Backend: Spot Schemas
================================

What:  Pydantic models for the /api/spots endpoints.
Who:   Route handlers (validation + serialization), SpotService (building
       responses) and SkateMapClient (parsing responses on the screen side).
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SpotCreate(BaseModel):
    """
    What:  Body of POST /api/spots.

    Blank names are rejected by SpotService ("Name is required"),
    not by this model.

    initial_rating:
        0 means "no rating chosen". 1-5 creates a first review alongside
        the spot. Range is checked by SpotService.
    """
    name: str = Field(max_length=200, description="Spot name (trimmed; must not be blank)")
    description: Optional[str] = Field(
        default=None,
        max_length=5000,
        description="Optional description; blank is stored as null",
    )
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False, description="Latitude (degrees)")
    lng: float = Field(ge=-180, le=180, allow_inf_nan=False, description="Longitude (degrees)")
    initial_rating: int = Field(
        default=0,
        description="Optional first review rating (0 = none, otherwise 1-5)",
    )


class SpotResponse(BaseModel):
    """Full representation of a stored spot."""
    id: uuid.UUID = Field(description="Unique spot identifier (UUID)")
    name: str
    description: Optional[str] = None
    lat: float
    lng: float
    created_at: datetime = Field(description="When the spot was created (UTC ISO 8601)")

    model_config = {"from_attributes": True}


class SpotListResponse(BaseModel):
    """
    What:  Response of GET /api/spots.

    No cursor: the list is a single page of the newest `limit` spots,
    which is all the map ever shows.
    """
    spots: List[SpotResponse] = Field(description="Spots, newest first")
    count: int = Field(description="Number of spots returned")


class SpotCreateResponse(BaseModel):
    """
    What:  Response of POST /api/spots (HTTP 201).

    review_error:
        Set when the spot was stored but its initial review could not be.
        The spot is kept; the message is meant for the error banner.
    """
    message: str = Field(default="Spot created")
    spot: SpotResponse
    review_error: Optional[str] = Field(
        default=None,
        description="Why the initial review failed (null when none was requested or it succeeded)",
    )
