# Services package init
"""
SkateMap Backend: Services Layer
==================================

What:  Business logic sitting between routes (HTTP) and the database.
How:   Services take a session plus validated input, apply the rules, and
       return response schemas. They raise application exceptions.

Service Inventory:
    - SpotService: list / get / create (with optional first review) / delete
    - ReviewService: list with in-memory average, create
    - PlacesProvider (abstract): interface for nearby skate shop/park lookups
    - OverpassService: PlacesProvider backed by the public Overpass API
"""
