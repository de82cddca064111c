"""
SkateMap Backend: Review Schemas
==================================

What:  Pydantic models for /api/spots/{spot_id}/reviews.
"""

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """
    Body of POST /api/spots/{spot_id}/reviews.

    Only the rating is accepted; the reviews table has a comment column
    but submissions never fill it.
    """
    rating: int = Field(description="Star rating, 1-5")


class ReviewResponse(BaseModel):
    id: uuid.UUID
    spot_id: uuid.UUID
    rating: int = Field(description="Star rating, 1-5")
    created_at: datetime

    model_config = {"from_attributes": True}


class ReviewListResponse(BaseModel):
    """
    What:  Every review of one spot, plus the aggregate shown in the detail view.

    average_rating is computed in memory from `reviews` (0.0 when empty);
    there is no server-side aggregate and no pagination.
    """
    spot_id: uuid.UUID
    reviews: List[ReviewResponse] = Field(description="Reviews, newest first")
    count: int
    average_rating: float = Field(description="Mean rating, 0.0 when there are no reviews")
