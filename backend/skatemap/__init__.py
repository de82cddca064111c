"""
SkateMap Backend: Application Package Initializer
===================================================

What: Marks the `skatemap` directory as a Python package.
Who:  Imported by uvicorn (`skatemap.main:app`), Alembic, pytest and the
      map screen client.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │    Services (spots, reviews,        │  ← Validation, orchestration,
    │    Overpass places)                 │    third-party calls
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    On top of the API sits the presentation side:

    ┌─────────────────────────────────────┐
    │   MapScreen (state + handlers)      │  ← skatemap.screen
    ├─────────────────────────────────────┤
    │   SkateMapClient (httpx)            │  ← skatemap.client
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
