"""
SkateMap Backend: Overpass Nearby-Places Service
==================================================

What:  Finds skate shops and skate parks around a coordinate through the
       public Overpass (OpenStreetMap) API.
How:   Builds one Overpass QL query, POSTs it form-encoded, and normalizes
       the heterogeneous node/way/relation `elements` into Place records.
Who:   Singleton used by GET /api/places/nearby and GET /health.

Query Shape:
    [out:json][timeout:25];
    (
      node|way|relation(around:R,LAT,LNG)["shop"="skate"];
      node|way|relation(around:R,LAT,LNG)["sport"="skateboarding"]["shop"];
      node|way|relation(around:R,LAT,LNG)["leisure"="skate_park"];
    );
    out center tags;

    `out center` makes ways and relations carry a `center` point, which is
    where their coordinates come from during normalization.

Resilience:
    1. Single-shot by default. With OVERPASS_RETRY_MAX_ATTEMPTS > 1, tenacity
       retries transport errors and HTTP 429/5xx with backoff + jitter
    2. Circuit breaker: after N failed calls, reject immediately for a while
    3. Other non-2xx answers fail at once with "Overpass error: HTTP <status>"

Results are not cached and an in-flight request is not cancelled.
"""

import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential_jitter,
    retry_if_exception_type,
    before_sleep_log,
)

from skatemap.config import settings
from skatemap.exceptions import PlacesServiceError, CircuitBreakerOpenError
from skatemap.schemas.place import Place
from skatemap.services.places_base import PlacesProvider
from skatemap.utils.geo import format_coordinate

logger = logging.getLogger(__name__)


# Tag filters for the three place categories, in query order
PLACE_FILTERS = (
    '["shop"="skate"]',
    '["sport"="skateboarding"]["shop"]',
    '["leisure"="skate_park"]',
)
ELEMENT_TYPES = ("node", "way", "relation")

# Overpass answers these when it is overloaded; worth another attempt
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded;charset=UTF-8"


# ══════════════════════════════════════════════════════════════════════════
# Query building and normalization
# ══════════════════════════════════════════════════════════════════════════

def build_overpass_query(
    lat: float,
    lng: float,
    radius_m: int,
    timeout_s: int = 25,
) -> str:
    """Overpass QL for skate shops and skate parks within radius_m of (lat, lng)."""
    around = f"(around:{radius_m},{format_coordinate(lat)},{format_coordinate(lng)})"
    selectors = [
        f"  {element_type}{around}{tag_filter};"
        for tag_filter in PLACE_FILTERS
        for element_type in ELEMENT_TYPES
    ]
    return "\n".join(
        [f"[out:json][timeout:{timeout_s}];", "("] + selectors + [");", "out center tags;"]
    )


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are not coordinates
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _fallback_name(tags: Dict[str, str]) -> str:
    return "Skate park" if tags.get("leisure") == "skate_park" else "Skate shop"


def normalize_element(element: Dict[str, Any]) -> Optional[Place]:
    """
    Map one Overpass element to a Place.

    Coordinates come from `lat`/`lon` (nodes) or `center.lat`/`center.lon`
    (ways and relations). Returns None when neither gives two numbers.
    """
    center = element.get("center")
    if not isinstance(center, dict):
        center = {}
    lat = element.get("lat")
    if lat is None:
        lat = center.get("lat")
    lng = element.get("lon")
    if lng is None:
        lng = center.get("lon")
    if not (_is_number(lat) and _is_number(lng)):
        return None

    raw_tags = element.get("tags")
    if not isinstance(raw_tags, dict):
        raw_tags = {}
    tags = {str(k): str(v) for k, v in raw_tags.items()}

    return Place(
        id=f"{element.get('type')}-{element.get('id')}",
        name=tags.get("name") or _fallback_name(tags),
        lat=float(lat),
        lng=float(lng),
        tags=tags,
    )


def normalize_elements(elements: Optional[Iterable[Dict[str, Any]]]) -> List[Place]:
    """Normalize an `elements` array, dropping elements without coordinates."""
    places = []
    for element in elements or []:
        if not isinstance(element, dict):
            continue
        place = normalize_element(element)
        if place is not None:
            places.append(place)
    return places


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    Stops calling Overpass after repeated failures.

    State Machine:
        CLOSED     → failures counted; at failure_threshold → OPEN
        OPEN       → every call raises CircuitBreakerOpenError until
                     recovery_timeout seconds passed → HALF_OPEN
        HALF_OPEN  → one call goes through; success → CLOSED,
                     failure → OPEN (timer restarts)

    Single-process only: state lives in this object, shared by the
    requests of one uvicorn worker.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.opened_at: Optional[float] = None

    def before_call(self) -> None:
        """
        Gate a call.

        Raises:
            CircuitBreakerOpenError while OPEN and the recovery window has not passed.
        """
        if self.state != self.OPEN:
            return

        elapsed = time.monotonic() - (self.opened_at or 0.0)
        if elapsed >= self.recovery_timeout:
            logger.info("Overpass circuit HALF_OPEN after %.1fs", elapsed)
            self.state = self.HALF_OPEN
            return

        raise CircuitBreakerOpenError(recovery_time=max(1, int(self.recovery_timeout - elapsed)))

    def record_success(self) -> None:
        if self.state != self.CLOSED:
            logger.info("Overpass circuit CLOSED (service recovered)")
        self.failure_count = 0
        self.state = self.CLOSED
        self.opened_at = None

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != self.OPEN:
                logger.warning(
                    "Overpass circuit OPEN after %d consecutive failures",
                    self.failure_count,
                )
            self.state = self.OPEN
            self.opened_at = time.monotonic()


# ══════════════════════════════════════════════════════════════════════════
# Overpass Service
# ══════════════════════════════════════════════════════════════════════════

class _TransientOverpassError(Exception):
    """Overpass answered with a status worth retrying."""

    def __init__(self, status_code: int):
        self.status_code = status_code
        super().__init__(f"Overpass error: HTTP {status_code}")


class OverpassService(PlacesProvider):
    """
    Overpass implementation of PlacesProvider.

    Args:
        url: Interpreter endpoint (defaults to settings.overpass_url)
        transport: Optional httpx transport; tests pass httpx.MockTransport
    """

    def __init__(
        self,
        url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url or settings.overpass_url
        self._transport = transport
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )
        logger.info(
            "OverpassService initialized with url=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds)",
            self.url,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.overpass_timeout,
            transport=self._transport,
            headers={"User-Agent": settings.overpass_user_agent},
        )

    async def find_nearby(self, lat: float, lng: float, radius_m: int) -> List[Place]:
        """
        Flow:
            1. Check circuit breaker → may raise CircuitBreakerOpenError
            2. POST the query (retried on transient failures)
            3. Record success/failure in the circuit breaker
            4. Normalize `elements`

        Raises:
            CircuitBreakerOpenError: Circuit is open
            PlacesServiceError: Non-2xx answer, unreadable body, or transport
                failure after all attempts
        """
        request_id = str(uuid.uuid4())[:8]
        self.circuit_breaker.before_call()

        query = build_overpass_query(lat, lng, radius_m, settings.overpass_query_timeout)
        logger.info(
            "[%s] Overpass search around (%.5f, %.5f) radius=%dm",
            request_id, lat, lng, radius_m,
        )

        try:
            payload = await self._post_query_with_retry(query, request_id)
        except PlacesServiceError:
            self.circuit_breaker.record_failure()
            raise
        except _TransientOverpassError as e:
            self.circuit_breaker.record_failure()
            raise PlacesServiceError(
                message=str(e),
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"request_id": request_id, "status": e.status_code},
            )
        except httpx.HTTPError as e:
            self.circuit_breaker.record_failure()
            logger.error("[%s] Overpass unreachable: %s", request_id, str(e))
            raise PlacesServiceError(
                message="Could not reach the map data service. Please try again later.",
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"request_id": request_id, "error_type": type(e).__name__},
            )

        self.circuit_breaker.record_success()

        elements = payload.get("elements") if isinstance(payload, dict) else None
        places = normalize_elements(elements)
        logger.info(
            "[%s] Overpass returned %d elements, %d usable places",
            request_id,
            len(elements or []),
            len(places),
        )
        return places

    @retry(
        retry=retry_if_exception_type((httpx.TransportError, _TransientOverpassError)),
        stop=stop_after_attempt(settings.overpass_retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.overpass_retry_min_wait,
            max=settings.overpass_retry_max_wait,
            jitter=settings.overpass_retry_jitter,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _post_query_with_retry(self, query: str, request_id: str) -> Any:
        """
        One POST to the interpreter. Tenacity re-runs this method only, so
        the circuit breaker check in find_nearby is not repeated.
        """
        start_time = time.perf_counter()
        async with self._client() as client:
            response = await client.post(
                self.url,
                content=urlencode({"data": query}),
                headers={"Content-Type": FORM_CONTENT_TYPE},
            )
        duration_ms = (time.perf_counter() - start_time) * 1000

        if response.status_code in RETRYABLE_STATUS_CODES:
            logger.warning(
                "[%s] Overpass HTTP %d after %.0fms",
                request_id, response.status_code, duration_ms,
            )
            raise _TransientOverpassError(response.status_code)

        if not response.is_success:
            raise PlacesServiceError(
                message=f"Overpass error: HTTP {response.status_code}",
                context={"request_id": request_id, "status": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError:
            raise PlacesServiceError(
                message="The map data service returned an unreadable response.",
                context={"request_id": request_id},
            )

        logger.debug("[%s] Overpass answered in %.0fms", request_id, duration_ms)
        return payload

    @property
    def status_url(self) -> str:
        base = self.url.rsplit("/", 1)[0] if self.url.endswith("/interpreter") else self.url.rstrip("/")
        return f"{base}/status"

    async def health_check(self) -> bool:
        """GET <api>/status; any answer below 500 counts as reachable."""
        try:
            async with self._client() as client:
                response = await client.get(self.status_url)
            return response.status_code < 500
        except httpx.HTTPError as e:
            logger.warning("Overpass health check failed: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the circuit breaker state shared by all requests
overpass_service = OverpassService()
