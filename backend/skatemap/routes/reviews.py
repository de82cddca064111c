"""
SkateMap Backend: Review Route Handlers
=========================================

What:  GET/POST /api/spots/{spot_id}/reviews.

The list response carries every review of the spot plus its average;
the detail view fetches it again on every open.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from skatemap.database import get_db_session
from skatemap.schemas.common import ErrorResponse
from skatemap.schemas.review import ReviewCreate, ReviewListResponse, ReviewResponse
from skatemap.services.review_service import review_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/spots/{spot_id}", tags=["Reviews"])


@router.get(
    "/reviews",
    response_model=ReviewListResponse,
    responses={404: {"description": "Spot not found", "model": ErrorResponse}},
    summary="List all reviews of a spot with the average rating",
)
async def list_reviews(
    spot_id: UUID,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> ReviewListResponse:
    result = await review_service.list_reviews(db=db, spot_id=spot_id)
    response.headers["X-Total-Count"] = str(result.count)
    return result


@router.post(
    "/reviews",
    status_code=201,
    response_model=ReviewResponse,
    responses={
        400: {"description": "Rating missing or out of range", "model": ErrorResponse},
        404: {"description": "Spot not found", "model": ErrorResponse},
    },
    summary="Rate a spot (1-5)",
)
async def create_review(
    spot_id: UUID,
    payload: ReviewCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ReviewResponse:
    return await review_service.create_review(db=db, spot_id=spot_id, payload=payload)
