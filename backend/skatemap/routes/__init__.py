# Routes package init
"""
SkateMap Backend: API Routes Package
======================================

Route Inventory:
    - spots.py:    GET    /api/spots                      (list, newest first)
                   POST   /api/spots                      (create, optional first rating)
                   GET    /api/spots/{id}                 (detail)
                   DELETE /api/spots/{id}                 (delete with reviews)
    - reviews.py:  GET    /api/spots/{id}/reviews         (all reviews + average)
                   POST   /api/spots/{id}/reviews         (rate 1-5)
    - places.py:   GET    /api/places/nearby              (Overpass skate shops/parks)
    - health.py:   GET    /health                         (service health check)

Routes are thin: they read the request, call a service, and shape the
response. Business rules live in services.
"""
