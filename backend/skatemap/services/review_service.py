"""
SkateMap Backend: Review Service
==================================

What:  Lists and creates reviews for a spot and aggregates their ratings.
How:   Every listing reloads the full review set of the spot and averages
       it in memory. No server-side aggregate, no caching, no pagination.
Who:   Called by the /api/spots/{spot_id}/reviews route handlers.
"""

import logging
from uuid import UUID

from sqlalchemy import select, desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skatemap.exceptions import NotFoundError, DatabaseError
from skatemap.models.review import Review
from skatemap.models.spot import Spot
from skatemap.schemas.review import ReviewCreate, ReviewListResponse, ReviewResponse
from skatemap.utils.ratings import average_rating
from skatemap.utils.validators import validate_rating

logger = logging.getLogger(__name__)


def to_review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        spot_id=review.spot_id,
        rating=review.rating,
        created_at=review.created_at,
    )


class ReviewService:
    """
    Business logic for reviews.

    Both operations first check that the spot exists, so a review can never
    reference a missing spot and an unknown id answers 404 instead of an
    empty list.
    """

    async def list_reviews(self, db: AsyncSession, spot_id: UUID) -> ReviewListResponse:
        """
        Query plan:
            SELECT * FROM reviews WHERE spot_id = :id ORDER BY created_at DESC
            → idx_reviews_spot_created_at
        """
        await self._ensure_spot_exists(db, spot_id)
        try:
            result = await db.execute(
                select(Review)
                .where(Review.spot_id == spot_id)
                .order_by(desc(Review.created_at))
            )
            reviews = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing reviews for %s: %s", spot_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not load reviews. Please try again.",
                context={"spot_id": str(spot_id)},
            )

        return ReviewListResponse(
            spot_id=spot_id,
            reviews=[to_review_response(r) for r in reviews],
            count=len(reviews),
            average_rating=average_rating(r.rating for r in reviews),
        )

    async def create_review(
        self, db: AsyncSession, spot_id: UUID, payload: ReviewCreate
    ) -> ReviewResponse:
        """
        Raises:
            ValidationError: Rating not chosen (<= 0) or above 5
            NotFoundError: Unknown spot
            DatabaseError: Insert failed
        """
        rating = validate_rating(payload.rating)
        await self._ensure_spot_exists(db, spot_id)

        try:
            review = Review(spot_id=spot_id, rating=rating)
            db.add(review)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating review for %s: %s", spot_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save your review. Please try again.",
                context={"spot_id": str(spot_id)},
            )

        logger.info("Review %s stored: %d stars for spot %s", review.id, rating, spot_id)
        return to_review_response(review)

    async def _ensure_spot_exists(self, db: AsyncSession, spot_id: UUID) -> None:
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


review_service = ReviewService()
