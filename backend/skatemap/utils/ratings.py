"""Rating aggregation and display helpers."""

from typing import Iterable

from skatemap.utils.validators import MAX_RATING


def average_rating(ratings: Iterable[int]) -> float:
    """Mean of the given ratings; 0.0 when there are none."""
    values = list(ratings)
    if not values:
        return 0.0
    return sum(values) / len(values)


def star_string(value: int, scale: int = MAX_RATING) -> str:
    """Render a rating as filled/empty stars, e.g. 3 -> '★★★☆☆'."""
    filled = max(0, min(scale, value))
    return "★" * filled + "☆" * (scale - filled)
