"""
SkateMap Backend: Spot Service
================================

What:  List, fetch, create and delete spots against the `spots` table.
How:   One SQLAlchemy round-trip per operation on the request's session;
       the session dependency commits or rolls back.
Who:   Called by the /api/spots route handlers.

Create Flow (POST /api/spots):
    ┌──────────┐    ┌─────────────┐    ┌──────────────┐    ┌──────────────┐
    │  Route   │───▶│  Validate   │───▶│ INSERT spot  │───▶│ SAVEPOINT    │
    │          │    │ name/rating │    │ (flush)      │    │ INSERT review│
    └──────────┘    └─────────────┘    └──────────────┘    └──────────────┘

    The initial review runs inside a nested transaction. If it fails only
    the savepoint is rolled back: the spot stays and the failure comes back
    as `review_error`.

SpotService is stateless; every call receives its session.
"""

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skatemap.exceptions import NotFoundError, DatabaseError
from skatemap.models.review import Review
from skatemap.models.spot import Spot
from skatemap.schemas.spot import (
    SpotCreate,
    SpotCreateResponse,
    SpotListResponse,
    SpotResponse,
)
from skatemap.utils.validators import (
    clean_description,
    clean_spot_name,
    validate_initial_rating,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 100


def to_spot_response(spot: Spot) -> SpotResponse:
    return SpotResponse(
        id=spot.id,
        name=spot.name,
        description=spot.description,
        lat=spot.lat,
        lng=spot.lng,
        created_at=spot.created_at,
    )


class SpotService:
    """
    Business logic layer for spot operations.

    Responsibilities:
        - list_spots(): newest spots first, capped at `limit`
        - get_spot(): single spot with not-found handling
        - create_spot(): validated insert, optional first review
        - delete_spot(): delete by id (reviews cascade in the database)

    Error Handling Strategy:
        Rule violations raise ValidationError before anything is written.
        SQLAlchemy failures are wrapped in DatabaseError (generic message,
        details logged). Our own exceptions propagate unchanged.
    """

    async def list_spots(self, db: AsyncSession, limit: int = DEFAULT_LIST_LIMIT) -> SpotListResponse:
        """
        Query plan:
            SELECT * FROM spots ORDER BY created_at DESC LIMIT :limit
            → idx_spots_created_at
        """
        try:
            result = await db.execute(
                select(Spot).order_by(desc(Spot.created_at)).limit(limit)
            )
            spots = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing spots: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load spots. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.debug("Listed %d spots (limit=%d)", len(spots), limit)
        return SpotListResponse(
            spots=[to_spot_response(spot) for spot in spots],
            count=len(spots),
        )

    async def get_spot(self, db: AsyncSession, spot_id: UUID) -> SpotResponse:
        spot = await self._load_spot(db, spot_id)
        return to_spot_response(spot)

    async def create_spot(self, db: AsyncSession, payload: SpotCreate) -> SpotCreateResponse:
        """
        Insert a spot and, when requested, its first review.

        Args:
            db: Async database session
            payload: Validated request body (name not yet checked for blankness)

        Returns:
            SpotCreateResponse with the stored spot. `review_error` is set when
            the spot was stored but the initial review was not.

        Raises:
            ValidationError: Blank name or initial rating outside 0-5
            DatabaseError: The spot insert itself failed
        """
        # Both checks run before any write
        name = clean_spot_name(payload.name)
        initial_rating = validate_initial_rating(payload.initial_rating)

        try:
            spot = Spot(
                name=name,
                description=clean_description(payload.description),
                lat=payload.lat,
                lng=payload.lng,
            )
            db.add(spot)
            await db.flush()  # Assigns id/created_at without committing
            logger.info("Spot created: %s (%r at %.5f, %.5f)", spot.id, name, spot.lat, spot.lng)
        except SQLAlchemyError as e:
            logger.error("Database error creating spot: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the spot. Please try again.",
                context={"error_type": type(e).__name__},
            )

        review_error = None
        if initial_rating > 0:
            review_error = await self._add_initial_review(db, spot, initial_rating)

        return SpotCreateResponse(
            spot=to_spot_response(spot),
            review_error=review_error,
        )

    async def delete_spot(self, db: AsyncSession, spot_id: UUID) -> None:
        """
        Delete a spot by id. Its reviews are removed by ON DELETE CASCADE.

        Raises:
            NotFoundError: No spot with this id (→ 404)
            DatabaseError: Delete failed (→ 500)
        """
        spot = await self._load_spot(db, spot_id)
        try:
            await db.delete(spot)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting spot %s: %s", spot_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the spot. Please try again.",
                context={"spot_id": str(spot_id)},
            )
        logger.info("Spot deleted: %s", spot_id)

    async def _add_initial_review(self, db: AsyncSession, spot: Spot, rating: int) -> Optional[str]:
        """Returns None on success, otherwise the message to report."""
        try:
            async with db.begin_nested():
                db.add(Review(spot_id=spot.id, rating=rating))
                await db.flush()
        except SQLAlchemyError as e:
            logger.warning(
                "Spot %s kept but its initial review failed: %s", spot.id, str(e)
            )
            return "Spot was created, but its rating could not be saved."
        logger.info("Initial review (%d stars) stored for spot %s", rating, spot.id)
        return None

    async def _load_spot(self, db: AsyncSession, spot_id: UUID) -> Spot:
        try:
            spot = await db.get(Spot, spot_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching spot %s: %s", spot_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the spot. Please try again.",
                context={"spot_id": str(spot_id)},
            )
        if spot is None:
            raise NotFoundError(resource="spot", resource_id=str(spot_id))
        return spot


# ── Singleton Instance ────────────────────────────────────────────────────
spot_service = SpotService()
