"""
SkateMap Backend: HTTP Client
===============================

What:  Async client for the SkateMap API, used by the map screen.
How:   One httpx.AsyncClient per call; responses are parsed into the same
       pydantic schemas the API serializes with.
Who:   skatemap.screen.MapScreen, scripts, and tests (with httpx.MockTransport).

Error contract:
    Every failure surfaces as BackendError. Its message is what the screen
    shows in the banner:
        - API error body      → body["message"]
        - FastAPI 422 body    → first entry of body["detail"]
        - anything else       → "HTTP {status}"
        - transport failure   → the transport's own message
"""

import logging
import uuid
from typing import Any, Dict, List, Optional
from uuid import UUID

import httpx

from skatemap.config import settings
from skatemap.schemas.place import Place, PlaceListResponse
from skatemap.schemas.review import ReviewListResponse, ReviewResponse
from skatemap.schemas.spot import SpotCreateResponse, SpotListResponse, SpotResponse

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """
    A failed API call.

    Attributes:
        message: Human-readable text, safe for the error banner
        status_code: HTTP status, or None when no response was received
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def error_message_from_response(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        if isinstance(body.get("message"), str) and body["message"]:
            return body["message"]
        detail = body.get("detail")
        if isinstance(detail, str) and detail:
            return detail
        if isinstance(detail, list) and detail:
            first = detail[0]
            if isinstance(first, dict) and first.get("msg"):
                return str(first["msg"])
    return f"HTTP {response.status_code}"


class SkateMapClient:
    """
    Args:
        base_url: API root (defaults to settings.api_base_url)
        transport: Optional httpx transport; tests pass httpx.MockTransport
            or httpx.ASGITransport(app=...)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self._transport = transport
        self._timeout = timeout or settings.api_timeout

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self._timeout,
            transport=self._transport,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        request_id = uuid.uuid4().hex[:8]
        try:
            async with self._client() as client:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers={"X-Request-ID": request_id},
                )
        except httpx.HTTPError as e:
            logger.warning("[%s] %s %s failed: %s", request_id, method, path, str(e))
            raise BackendError(str(e) or type(e).__name__)

        if not response.is_success:
            message = error_message_from_response(response)
            logger.info(
                "[%s] %s %s -> HTTP %d: %s",
                request_id, method, path, response.status_code, message,
            )
            raise BackendError(message, status_code=response.status_code)

        return response

    # ── Spots ─────────────────────────────────────────────────────────────

    async def list_spots(self, limit: int = 500) -> List[SpotResponse]:
        response = await self._request("GET", "/api/spots", params={"limit": limit})
        return SpotListResponse.model_validate(response.json()).spots

    async def create_spot(
        self,
        name: str,
        lat: float,
        lng: float,
        description: Optional[str] = None,
        initial_rating: int = 0,
    ) -> SpotCreateResponse:
        payload = {
            "name": name,
            "description": description,
            "lat": lat,
            "lng": lng,
            "initial_rating": initial_rating,
        }
        response = await self._request("POST", "/api/spots", json=payload)
        return SpotCreateResponse.model_validate(response.json())

    async def delete_spot(self, spot_id: UUID) -> None:
        await self._request("DELETE", f"/api/spots/{spot_id}")

    # ── Reviews ───────────────────────────────────────────────────────────

    async def list_reviews(self, spot_id: UUID) -> ReviewListResponse:
        response = await self._request("GET", f"/api/spots/{spot_id}/reviews")
        return ReviewListResponse.model_validate(response.json())

    async def create_review(self, spot_id: UUID, rating: int) -> ReviewResponse:
        response = await self._request(
            "POST", f"/api/spots/{spot_id}/reviews", json={"rating": rating}
        )
        return ReviewResponse.model_validate(response.json())

    # ── Places ────────────────────────────────────────────────────────────

    async def nearby_places(self, lat: float, lng: float, radius: int = 8000) -> List[Place]:
        response = await self._request(
            "GET",
            "/api/places/nearby",
            params={"lat": lat, "lng": lng, "radius": radius},
        )
        return PlaceListResponse.model_validate(response.json()).places
