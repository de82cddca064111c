"""
SkateMap Screen: MapScreen Tests
==================================

What:  Screen handlers and render() against an in-memory fake client.

What we test:
    ✅ Blank spot name rejected without a backend call
    ✅ A created spot is prepended; review_error shows but the spot stays
    ✅ Deleting the spot shown in the detail view closes it
    ✅ Review gate and reload after a successful review
    ✅ Nearby search: web notice, permission denied, failures in the banner
    ✅ render(): web list fallback, native markers, modal snapshots
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest

from skatemap.client import BackendError
from skatemap.schemas.place import Place
from skatemap.schemas.review import ReviewListResponse, ReviewResponse
from skatemap.schemas.spot import SpotCreateResponse, SpotResponse
from skatemap.screen import FixedLocationProvider, MapScreen
from skatemap.screen.location import LocationError


def _spot(name="Ledges", description=None, lat=42.96, lng=-85.67) -> SpotResponse:
    return SpotResponse(
        id=uuid4(),
        name=name,
        description=description,
        lat=lat,
        lng=lng,
        created_at=datetime.now(timezone.utc),
    )


class FakeClient:
    """Implements the SkateMapClient coroutines over plain lists."""

    def __init__(self, spots=None):
        self.spots = list(spots or [])
        self.reviews = {}
        self.places = []
        self.calls = []
        self.fail = {}
        self.review_error = None

    def _maybe_fail(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    async def list_spots(self, limit=500):
        self._maybe_fail("list_spots")
        return self.spots[:limit]

    async def create_spot(self, name, lat, lng, description=None, initial_rating=0):
        self._maybe_fail("create_spot")
        spot = _spot(name=name, description=description, lat=lat, lng=lng)
        self.spots.insert(0, spot)
        if initial_rating and not self.review_error:
            self.reviews.setdefault(spot.id, []).append(initial_rating)
        return SpotCreateResponse(spot=spot, review_error=self.review_error)

    async def delete_spot(self, spot_id):
        self._maybe_fail("delete_spot")
        self.spots = [s for s in self.spots if s.id != spot_id]

    async def list_reviews(self, spot_id):
        self._maybe_fail("list_reviews")
        ratings = self.reviews.get(spot_id, [])
        reviews = [
            ReviewResponse(
                id=uuid4(), spot_id=spot_id, rating=r, created_at=datetime.now(timezone.utc)
            )
            for r in ratings
        ]
        return ReviewListResponse(
            spot_id=spot_id,
            reviews=reviews,
            count=len(reviews),
            average_rating=(sum(ratings) / len(ratings)) if ratings else 0.0,
        )

    async def create_review(self, spot_id, rating):
        self._maybe_fail("create_review")
        self.reviews.setdefault(spot_id, []).append(rating)

    async def nearby_places(self, lat, lng, radius=8000):
        self._maybe_fail("nearby_places")
        self.last_nearby = (lat, lng, radius)
        return list(self.places)


@pytest.fixture
def client():
    return FakeClient(spots=[_spot("Existing")])


@pytest.fixture
def screen(client):
    return MapScreen(client=client, location=FixedLocationProvider(lat=42.0, lng=-85.0))


class TestMountAndReload:

    @pytest.mark.asyncio
    async def test_mount_loads_spots_and_centers(self, screen):
        await screen.mount()

        assert [s.name for s in screen.spots] == ["Existing"]
        assert (screen.region.lat, screen.region.lng) == (42.0, -85.0)
        assert screen.region.lat_delta == 0.08
        assert screen.loading is False
        assert screen.error is None

    @pytest.mark.asyncio
    async def test_initial_region_is_default_center(self, screen):
        assert (screen.region.lat, screen.region.lng) == (42.9634, -85.6681)
        assert screen.region.lat_delta == 0.15

    @pytest.mark.asyncio
    async def test_permission_denied_keeps_region(self, client):
        screen = MapScreen(client=client, location=FixedLocationProvider(granted=False))

        await screen.mount()

        assert screen.error == "Location permission denied."
        assert screen.region.lat_delta == 0.15
        assert len(screen.spots) == 1

    @pytest.mark.asyncio
    async def test_web_mount_skips_location(self, client):
        location = FixedLocationProvider()
        screen = MapScreen(client=client, location=location, platform="web")

        await screen.mount()

        assert location.permission_requests == 0
        assert len(screen.spots) == 1

    @pytest.mark.asyncio
    async def test_native_mount_keeps_spot_load_error(self, screen, client):
        client.fail["list_spots"] = BackendError("Could not load spots. Please try again.", 500)

        await screen.mount()

        assert screen.error == "Could not load spots. Please try again."
        assert (screen.region.lat, screen.region.lng) == (42.0, -85.0)
        assert screen.spots == []

    @pytest.mark.asyncio
    async def test_mount_uses_configured_list_limit(self, screen, client, monkeypatch):
        from skatemap.config import settings

        requested = {}

        async def list_spots(limit=500):
            requested["limit"] = limit
            return []

        monkeypatch.setattr(settings, "spot_list_limit", 25)
        client.list_spots = list_spots

        await screen.mount()

        assert requested["limit"] == 25

    @pytest.mark.asyncio
    async def test_reload_failure_sets_banner(self, screen, client):
        client.fail["list_spots"] = BackendError("HTTP 500", status_code=500)

        await screen.reload()

        assert screen.error == "HTTP 500"
        assert screen.loading is False


class TestCreateSpot:

    @pytest.mark.asyncio
    async def test_blank_name_rejected_without_backend_call(self, screen, client):
        result = await screen.create_spot_at(1.0, 2.0, "   ")

        assert result is None
        assert screen.error == "Name is required"
        assert "create_spot" not in client.calls
        assert screen.spots == []

    @pytest.mark.asyncio
    async def test_valid_create_prepends_spot(self, screen):
        await screen.reload()

        spot = await screen.create_spot_at(1.0, 2.0, "  New Gap ", "  stairs ")

        assert spot.name == "New Gap"
        assert spot.description == "stairs"
        assert [s.name for s in screen.spots] == ["New Gap", "Existing"]
        assert screen.error is None

    @pytest.mark.asyncio
    async def test_review_failure_keeps_spot(self, screen, client):
        client.review_error = "Spot was created, but its rating could not be saved."

        await screen.create_spot_at(1.0, 2.0, "Bowl", initial_rating=4)

        assert screen.spots[0].name == "Bowl"
        assert screen.error == client.review_error

    @pytest.mark.asyncio
    async def test_backend_failure_adds_nothing(self, screen, client):
        client.fail["create_spot"] = BackendError("Could not create the spot. Please try again.", 500)

        assert await screen.create_spot_at(1.0, 2.0, "Bowl") is None
        assert screen.error == "Could not create the spot. Please try again."
        assert screen.spots == []

    @pytest.mark.asyncio
    async def test_long_press_then_submit(self, screen):
        screen.on_long_press(42.123456, -85.654321)
        assert screen.create_open is True
        assert screen.spot_rating == 0

        screen.spot_name = "Pressed"
        screen.spot_rating = 3
        view = screen.render()
        assert view.create_modal.coordinates == "42.12346, -85.65432"
        assert view.create_modal.rating_stars == "★★★☆☆"

        await screen.submit_create()

        assert screen.create_open is False
        assert screen.spots[0].name == "Pressed"
        assert (screen.spots[0].lat, screen.spots[0].lng) == (42.123456, -85.654321)

    @pytest.mark.asyncio
    async def test_long_press_clears_previous_form(self, screen):
        screen.on_long_press(1.0, 1.0)
        screen.spot_name, screen.spot_desc, screen.spot_rating = "old", "old", 5
        screen.close_create()

        screen.on_long_press(2.0, 2.0)

        assert (screen.spot_name, screen.spot_desc, screen.spot_rating) == ("", "", 0)
        assert screen.pending_coord == (2.0, 2.0)


class TestDetailsAndReviews:

    @pytest.mark.asyncio
    async def test_open_details_loads_reviews_and_average(self, screen, client):
        spot = client.spots[0]
        client.reviews[spot.id] = [3, 5]

        await screen.open_spot_details(spot)

        assert screen.details_open is True
        assert screen.average_rating == 4.0
        details = screen.render().details_modal
        assert details.review_count == 2
        assert details.average_label == "4.0 / 5"
        assert details.average_stars == "★★★★☆"

    @pytest.mark.asyncio
    async def test_no_reviews_label(self, screen, client):
        await screen.open_spot_details(client.spots[0])

        details = screen.render().details_modal
        assert details.average_label == "No reviews yet"
        assert details.average_stars == "☆☆☆☆☆"

    @pytest.mark.asyncio
    async def test_average_stars_round_half_up(self, screen, client):
        spot = client.spots[0]
        client.reviews[spot.id] = [2, 3]

        await screen.open_spot_details(spot)

        assert screen.render().details_modal.average_stars == "★★★☆☆"

    @pytest.mark.asyncio
    async def test_review_requires_rating(self, screen, client):
        await screen.open_spot_details(client.spots[0])

        await screen.add_review_for_selected_spot()

        assert screen.error == "Please choose a rating."
        assert "create_review" not in client.calls

    @pytest.mark.asyncio
    async def test_review_submission_resets_and_reloads(self, screen, client):
        spot = client.spots[0]
        await screen.open_spot_details(spot)
        screen.new_review_rating = 5

        await screen.add_review_for_selected_spot()

        assert screen.new_review_rating == 0
        assert [r.rating for r in screen.spot_reviews] == [5]
        assert client.calls.count("list_reviews") == 2

    @pytest.mark.asyncio
    async def test_add_review_without_selection_is_noop(self, screen, client):
        await screen.add_review_for_selected_spot()
        assert client.calls == []


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_spot_and_closes_details(self, screen, client):
        await screen.reload()
        spot = screen.spots[0]
        await screen.open_spot_details(spot)

        screen.request_delete(spot)
        assert screen.render().delete_prompt.spot_name == "Existing"
        await screen.confirm_delete()

        assert screen.spots == []
        assert screen.details_open is False
        assert screen.selected_spot is None
        assert screen.spot_reviews == []

    @pytest.mark.asyncio
    async def test_delete_other_spot_keeps_details_open(self, screen, client):
        other = _spot("Other")
        client.spots.append(other)
        await screen.reload()
        await screen.open_spot_details(screen.spots[0])

        await screen.delete_spot_by_id(other.id)

        assert screen.details_open is True
        assert [s.name for s in screen.spots] == ["Existing"]

    @pytest.mark.asyncio
    async def test_cancel_delete(self, screen, client):
        await screen.reload()
        screen.request_delete(screen.spots[0])

        screen.cancel_delete()
        await screen.confirm_delete()

        assert "delete_spot" not in client.calls
        assert len(screen.spots) == 1

    @pytest.mark.asyncio
    async def test_failed_delete_keeps_spot(self, screen, client):
        await screen.reload()
        client.fail["delete_spot"] = BackendError("Spot with ID 'x' was not found", 404)

        await screen.delete_spot_by_id(screen.spots[0].id)

        assert len(screen.spots) == 1
        assert screen.error == "Spot with ID 'x' was not found"


class TestNearbyPlaces:

    @pytest.mark.asyncio
    async def test_web_is_native_only(self, client):
        screen = MapScreen(client=client, platform="web")

        await screen.load_nearby_places()

        assert screen.error == "Nearby search is native-only for now."
        assert "nearby_places" not in client.calls

    @pytest.mark.asyncio
    async def test_loads_places_around_device(self, screen, client):
        client.places = [Place(id="node-1", name="Shop", lat=42.0, lng=-85.0, tags={})]

        await screen.load_nearby_places()

        assert [p.id for p in screen.places] == ["node-1"]
        assert client.last_nearby == (42.0, -85.0, 8000)
        assert screen.places_loading is False

    @pytest.mark.asyncio
    async def test_default_radius_comes_from_settings(self, screen, client, monkeypatch):
        from skatemap.config import settings

        monkeypatch.setattr(settings, "nearby_radius_m", 2500)

        await screen.load_nearby_places()

        assert client.last_nearby == (42.0, -85.0, 2500)

    @pytest.mark.asyncio
    async def test_permission_denied(self, client):
        screen = MapScreen(client=client, location=FixedLocationProvider(granted=False))

        await screen.load_nearby_places()

        assert screen.error == "Location permission denied."
        assert screen.places_loading is False
        assert "nearby_places" not in client.calls

    @pytest.mark.asyncio
    async def test_failure_goes_to_banner_and_keeps_old_places(self, screen, client):
        screen.places = [Place(id="way-2", name="Park", lat=0, lng=0)]
        client.fail["nearby_places"] = BackendError("Overpass error: HTTP 504", 503)

        await screen.load_nearby_places(radius=500)

        assert screen.error == "Overpass error: HTTP 504"
        assert [p.id for p in screen.places] == ["way-2"]
        assert screen.places_loading is False

    @pytest.mark.asyncio
    async def test_location_error_goes_to_banner(self, screen):
        async def broken():
            raise LocationError("GPS unavailable")

        screen.location.current_position = broken

        await screen.load_nearby_places()

        assert screen.error == "GPS unavailable"


class TestRender:

    @pytest.mark.asyncio
    async def test_web_renders_list_fallback(self, client):
        client.spots = [_spot("Plaza", description="Marble", lat=1.5, lng=-2.25)]
        screen = MapScreen(client=client, platform="web")
        await screen.mount()

        view = screen.render()

        assert view.mode == "list"
        assert view.notice == "Map is native-only for now. Web shows a list fallback."
        assert view.markers == []
        assert view.rows[0].name == "Plaza"
        assert view.rows[0].description == "Marble"
        assert view.rows[0].coordinates == "1.5, -2.25"

    @pytest.mark.asyncio
    async def test_web_rows_print_whole_and_tiny_degrees_plainly(self, client):
        client.spots = [_spot("Greenwich", lat=51.0, lng=-0.00005)]
        screen = MapScreen(client=client, platform="web")
        await screen.mount()

        assert screen.render().rows[0].coordinates == "51, -0.00005"

    @pytest.mark.asyncio
    async def test_native_renders_spot_and_place_markers(self, screen):
        await screen.reload()
        screen.places = [
            Place(id="node-1", name="Shop", lat=1, lng=2, tags={"addr:city": "Grand Rapids"}),
            Place(id="node-2", name="Park", lat=3, lng=4, tags={"website": "https://park.test"}),
        ]

        view = screen.render()

        assert view.mode == "map"
        assert [(m.kind, m.title) for m in view.markers] == [
            ("spot", "Existing"),
            ("place", "Shop"),
            ("place", "Park"),
        ]
        assert view.markers[1].description == "Grand Rapids"
        assert view.markers[2].description == "https://park.test"
        assert view.create_modal is None
        assert view.details_modal is None

    def test_unknown_platform_rejected(self, client):
        with pytest.raises(ValueError):
            MapScreen(client=client, platform="desktop")
