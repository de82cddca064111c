"""
SkateMap Backend: Review SQLAlchemy Model
===========================================

What:  ORM model for the `reviews` table: one 1-5 star rating of a spot.

The `comment` column exists in the schema but the application never
writes it; review submission only carries a rating.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP

from skatemap.database import Base

if TYPE_CHECKING:
    from skatemap.models.spot import Spot


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    spot_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("spots.id", ondelete="CASCADE"),
        nullable=False,
    )

    rating: Mapped[int] = mapped_column(Integer, nullable=False)

    comment: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    spot: Mapped["Spot"] = relationship(back_populates="reviews")

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        # Detail view: all reviews of one spot, newest first
        Index("idx_reviews_spot_created_at", spot_id, created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, spot_id={self.spot_id}, rating={self.rating})>"
