# Utils package init
"""
SkateMap Backend: Shared Helpers
==================================

Pure functions with no database or HTTP imports, shared by the services
(server side) and the map screen (client side):

    - validators.py:  spot/review input rules and their user-facing messages
    - ratings.py:     in-memory rating average and star strings
    - geo.py:         plain-decimal coordinate text
"""
