# Middleware package init
"""
SkateMap Backend: Middleware Package
======================================

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    - rate_limit.py:  per-IP sliding window, 429 + Retry-After
    - request_id.py:  X-Request-ID in, X-Request-ID out, ContextVar for loggers
    - logging.py:     one access line per request on "skatemap.access"

Responses travel the chain in reverse, so the request ID header and the
access log line both see the final status code.
"""
