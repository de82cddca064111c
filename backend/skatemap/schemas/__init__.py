# Schemas package init
"""
SkateMap Backend: Pydantic Request/Response Schemas
=====================================================

    - spot.py:    spot create/list/detail contracts
    - review.py:  review create/list contracts (with in-memory average)
    - place.py:   normalized Overpass places
    - common.py:  error envelope and health check

Schemas are separate from the SQLAlchemy models: the API contract (for
example `initial_rating`, `average_rating`, `review_error`) is not the
table layout.
"""
