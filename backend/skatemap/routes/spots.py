"""
SkateMap Backend: Spot Route Handlers
=======================================

What:  GET/POST /api/spots, GET/DELETE /api/spots/{spot_id}.
How:   Extracts parameters, delegates to SpotService, sets status codes
       and headers. Errors are formatted by the global exception handlers.
Who:   Called by SkateMapClient (map screen) and any other API consumer.

Caching:
    None of these responses are cacheable: spots can be created or deleted
    from any device at any time (last writer wins).
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from skatemap.config import settings
from skatemap.database import get_db_session
from skatemap.schemas.common import ErrorResponse
from skatemap.schemas.spot import (
    SpotCreate,
    SpotCreateResponse,
    SpotListResponse,
    SpotResponse,
)
from skatemap.services.spot_service import spot_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Spots"])


@router.get(
    "/spots",
    response_model=SpotListResponse,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List spots, newest first",
)
async def list_spots(
    response: Response,
    limit: int = Query(
        default=settings.spot_list_limit,
        ge=1,
        le=settings.spot_list_limit,
        description="Maximum number of spots to return",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> SpotListResponse:
    """
    Returns up to `limit` spots ordered by created_at DESC.

    X-Total-Count carries the number of spots in this response.
    """
    result = await spot_service.list_spots(db=db, limit=limit)
    response.headers["X-Total-Count"] = str(result.count)
    response.headers["Cache-Control"] = "no-store"
    return result


@router.post(
    "/spots",
    status_code=201,
    response_model=SpotCreateResponse,
    responses={
        400: {"description": "Blank name or invalid rating", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a spot",
    description=(
        "Creates a spot at the given coordinates. When `initial_rating` is 1-5 a "
        "first review is stored with it; if only that review fails, the spot is "
        "still created and `review_error` explains what went wrong."
    ),
)
async def create_spot(
    payload: SpotCreate,
    db: AsyncSession = Depends(get_db_session),
) -> SpotCreateResponse:
    return await spot_service.create_spot(db=db, payload=payload)


@router.get(
    "/spots/{spot_id}",
    response_model=SpotResponse,
    responses={404: {"description": "Spot not found", "model": ErrorResponse}},
    summary="Get a single spot",
)
async def get_spot(
    spot_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> SpotResponse:
    return await spot_service.get_spot(db=db, spot_id=spot_id)


@router.delete(
    "/spots/{spot_id}",
    status_code=204,
    responses={
        404: {"description": "Spot not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a spot and its reviews",
)
async def delete_spot(
    spot_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    """
    No confirmation happens here; asking the user is the screen's job.
    """
    await spot_service.delete_spot(db=db, spot_id=spot_id)
    return Response(status_code=204)
