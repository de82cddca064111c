"""
SkateMap Backend: Spot SQLAlchemy Model
=========================================

What:  ORM model representing the `spots` table in PostgreSQL.
Who:   Used by SpotService / ReviewService and by Alembic.

Table Design:
    - UUID primary key generated server-side (gen_random_uuid())
    - name: trimmed, non-empty (enforced in SpotService)
    - description: optional free text; blank input is stored as NULL
    - lat / lng: double precision degrees, stored exactly as submitted
    - created_at: UTC with timezone; the list view orders by it DESC

    Index on created_at DESC serves "newest spots first" with a LIMIT.
"""

import uuid
from datetime import datetime, timezone
from typing import List, TYPE_CHECKING

from sqlalchemy import Double, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID, TIMESTAMP

from skatemap.database import Base

if TYPE_CHECKING:
    from skatemap.models.review import Review


class Spot(Base):
    """
    A user-submitted skate spot.

    Lifecycle:
        1. Created from the map's long-press form (optionally with a first review)
        2. Read by the list, marker and detail views
        3. Deleted after user confirmation; its reviews go with it (ON DELETE CASCADE)
        There is no edit path.
    """

    __tablename__ = "spots"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=text("gen_random_uuid()"),
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Display name of the spot (trimmed, non-empty)",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Optional notes: surface, obstacles, best time to skate",
    )

    lat: Mapped[float] = mapped_column(Double, nullable=False, comment="Latitude in degrees")
    lng: Mapped[float] = mapped_column(Double, nullable=False, comment="Longitude in degrees")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # passive_deletes: the database cascade removes reviews, so the ORM
    # does not load them just to delete them
    reviews: Mapped[List["Review"]] = relationship(
        back_populates="spot",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_spots_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Spot(id={self.id}, name='{self.name}', lat={self.lat}, lng={self.lng})>"
