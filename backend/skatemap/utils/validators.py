"""
Input rules shared by SpotService/ReviewService and the map screen.

Each validator returns the cleaned value or raises ValidationError whose
message is what the user sees in the error banner.
"""

from typing import Optional

from skatemap.exceptions import ValidationError

MIN_RATING = 1
MAX_RATING = 5


def clean_spot_name(name: Optional[str]) -> str:
    """Trim a spot name; blank names are rejected."""
    trimmed = (name or "").strip()
    if not trimmed:
        raise ValidationError(message="Name is required", field="name")
    return trimmed


def clean_description(description: Optional[str]) -> Optional[str]:
    """Trim a description; blank becomes None."""
    return (description or "").strip() or None


def validate_rating(rating: int) -> int:
    """A review rating must be chosen (>0) and at most MAX_RATING."""
    if rating is None or rating < MIN_RATING:
        raise ValidationError(message="Please choose a rating.", field="rating")
    if rating > MAX_RATING:
        raise ValidationError(
            message=f"Rating must be between {MIN_RATING} and {MAX_RATING}.",
            field="rating",
        )
    return rating


def validate_initial_rating(rating: Optional[int]) -> int:
    """Initial rating at spot creation: 0 (or None) means no review."""
    if not rating:
        return 0
    if rating < 0:
        raise ValidationError(
            message=f"Rating must be between {MIN_RATING} and {MAX_RATING}.",
            field="initial_rating",
        )
    return validate_rating(rating)
