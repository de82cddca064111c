"""
SkateMap Backend: API Client Tests
====================================

What:  SkateMapClient request shapes and error mapping, using
       httpx.MockTransport in place of the API.
"""

import json
from datetime import datetime, timezone
from uuid import uuid4

import httpx
import pytest

from skatemap.client import BackendError, SkateMapClient, error_message_from_response


def _spot_json(name="Ledges", **overrides):
    body = {
        "id": str(uuid4()),
        "name": name,
        "description": None,
        "lat": 42.96,
        "lng": -85.67,
        "created_at": datetime(2026, 1, 15, tzinfo=timezone.utc).isoformat(),
    }
    body.update(overrides)
    return body


class TestSkateMapClientRequests:

    @pytest.mark.asyncio
    async def test_list_spots(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"spots": [_spot_json("A"), _spot_json("B")], "count": 2})

        client = SkateMapClient(transport=httpx.MockTransport(handler))
        spots = await client.list_spots(limit=500)

        assert [s.name for s in spots] == ["A", "B"]
        assert seen[0].url.path == "/api/spots"
        assert seen[0].url.params["limit"] == "500"
        assert seen[0].url.host == "skatemap.test"
        assert "X-Request-ID" in seen[0].headers

    @pytest.mark.asyncio
    async def test_create_spot_sends_body(self):
        seen = []

        def handler(request):
            seen.append(json.loads(request.content))
            return httpx.Response(
                201,
                json={"message": "Spot created", "spot": _spot_json("Bowl"), "review_error": None},
            )

        client = SkateMapClient(transport=httpx.MockTransport(handler))
        result = await client.create_spot(name="Bowl", lat=1.0, lng=2.0, initial_rating=3)

        assert result.spot.name == "Bowl"
        assert seen[0] == {
            "name": "Bowl",
            "description": None,
            "lat": 1.0,
            "lng": 2.0,
            "initial_rating": 3,
        }

    @pytest.mark.asyncio
    async def test_delete_spot(self):
        spot_id = uuid4()
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        await SkateMapClient(transport=httpx.MockTransport(handler)).delete_spot(spot_id)

        assert seen[0].method == "DELETE"
        assert seen[0].url.path == f"/api/spots/{spot_id}"

    @pytest.mark.asyncio
    async def test_reviews_round_trip(self):
        spot_id = uuid4()
        review = {
            "id": str(uuid4()),
            "spot_id": str(spot_id),
            "rating": 5,
            "created_at": "2026-01-15T12:00:00+00:00",
        }

        def handler(request):
            if request.method == "POST":
                assert json.loads(request.content) == {"rating": 5}
                return httpx.Response(201, json=review)
            return httpx.Response(
                200,
                json={"spot_id": str(spot_id), "reviews": [review], "count": 1, "average_rating": 5.0},
            )

        client = SkateMapClient(transport=httpx.MockTransport(handler))
        created = await client.create_review(spot_id, 5)
        listing = await client.list_reviews(spot_id)

        assert created.rating == 5
        assert listing.count == 1
        assert listing.average_rating == 5.0

    @pytest.mark.asyncio
    async def test_nearby_places(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "places": [{"id": "node-1", "name": "Shop", "lat": 1.0, "lng": 2.0, "tags": {}}],
                    "count": 1,
                    "lat": 1.0,
                    "lng": 2.0,
                    "radius_m": 8000,
                },
            )

        places = await SkateMapClient(transport=httpx.MockTransport(handler)).nearby_places(1.0, 2.0)

        assert places[0].id == "node-1"
        assert seen[0].url.params["radius"] == "8000"


class TestSkateMapClientErrors:

    @pytest.mark.asyncio
    async def test_error_body_message_is_used(self):
        def handler(request):
            return httpx.Response(
                400, json={"error": "validation_error", "message": "Name is required"}
            )

        with pytest.raises(BackendError) as exc_info:
            await SkateMapClient(transport=httpx.MockTransport(handler)).list_spots()

        assert exc_info.value.message == "Name is required"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_transport_error_becomes_backend_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(BackendError) as exc_info:
            await SkateMapClient(transport=httpx.MockTransport(handler)).list_spots()

        assert exc_info.value.message == "Connection refused"
        assert exc_info.value.status_code is None

    def test_message_from_validation_detail(self):
        response = httpx.Response(
            422, json={"detail": [{"loc": ["body", "lat"], "msg": "Input should be a valid number"}]}
        )
        assert error_message_from_response(response) == "Input should be a valid number"

    def test_message_falls_back_to_status(self):
        assert error_message_from_response(httpx.Response(502, text="Bad gateway")) == "HTTP 502"
