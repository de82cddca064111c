"""
SkateMap Backend: Nearby Places Route
=======================================

What:  GET /api/places/nearby: skate shops and skate parks around a point.
How:   The caller supplies its last known device coordinates; the request
       is forwarded to the places provider (Overpass).

Places are ephemeral: nothing is stored and nothing is cached.
"""

import logging

from fastapi import APIRouter, Query

from skatemap.config import settings
from skatemap.schemas.common import ErrorResponse
from skatemap.schemas.place import PlaceListResponse
from skatemap.services.overpass_service import overpass_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/places", tags=["Places"])


@router.get(
    "/nearby",
    response_model=PlaceListResponse,
    responses={
        503: {"description": "Overpass unavailable or circuit open", "model": ErrorResponse},
    },
    summary="Find skate shops and skate parks near a coordinate",
)
async def nearby_places(
    lat: float = Query(ge=-90, le=90, description="Latitude of the search center"),
    lng: float = Query(ge=-180, le=180, description="Longitude of the search center"),
    radius: int = Query(
        default=settings.nearby_radius_m,
        ge=100,
        le=50_000,
        description="Search radius in meters",
    ),
) -> PlaceListResponse:
    places = await overpass_service.find_nearby(lat=lat, lng=lng, radius_m=radius)
    return PlaceListResponse(
        places=places,
        count=len(places),
        lat=lat,
        lng=lng,
        radius_m=radius,
    )
