# Models package init
"""
SkateMap Backend: ORM Models
==============================

    - spot.py:    `spots` table (user-submitted skate spots)
    - review.py:  `reviews` table (1-5 ratings attached to a spot)

Both modules are imported here so that `Base.metadata` knows every table
as soon as any model is imported (Alembic autogenerate relies on this).
"""

from skatemap.models.spot import Spot
from skatemap.models.review import Review

__all__ = ["Spot", "Review"]
