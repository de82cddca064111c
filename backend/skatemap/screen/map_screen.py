"""
SkateMap Screen: Map Screen Presentation Model
================================================

What:  State and event handlers of the single SkateMap screen.
How:   A plain class; each handler awaits its backend call and updates the
       attributes it owns. render() turns the state into a ScreenView.
Who:   A UI layer binds gestures and buttons to the handlers below.

Event → handler:
    screen shown           → mount()
    long-press on map      → on_long_press(lat, lng)
    "Create" in form       → submit_create()
    marker tapped          → open_spot_details(spot)
    "Add review"           → add_review_for_selected_spot()
    "Delete" → "Delete"    → request_delete(spot) → confirm_delete()
    "Find nearby"          → load_nearby_places()

Error handling:
    Every failure is caught where it happens and becomes the single
    `error` banner string. No handler raises to the UI.
"""

import logging
import math
from typing import List, Optional, Tuple
from uuid import UUID

from skatemap.client import BackendError, SkateMapClient
from skatemap.config import settings
from skatemap.exceptions import ValidationError
from skatemap.schemas.place import Place
from skatemap.schemas.review import ReviewResponse
from skatemap.schemas.spot import SpotResponse
from skatemap.screen.location import (
    PERMISSION_GRANTED,
    FixedLocationProvider,
    LocationError,
    LocationProvider,
)
from skatemap.screen.view import (
    CreateModalView,
    DeletePromptView,
    DetailsModalView,
    Marker,
    Region,
    ScreenView,
    SpotRow,
)
from skatemap.utils.geo import format_coordinate
from skatemap.utils.ratings import average_rating, star_string
from skatemap.utils.validators import clean_description, clean_spot_name

logger = logging.getLogger(__name__)

PLATFORM_NATIVE = "native"
PLATFORM_WEB = "web"

INITIAL_DELTA = 0.15
DEVICE_DELTA = 0.08

PERMISSION_DENIED_MESSAGE = "Location permission denied."
NEARBY_WEB_MESSAGE = "Nearby search is native-only for now."
NEARBY_FAILED_MESSAGE = "Failed to load nearby places."
WEB_NOTICE = "Map is native-only for now. Web shows a list fallback."


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class MapScreen:
    """
    Args:
        client: SkateMapClient (or anything with the same coroutine methods)
        location: Device location source; defaults to the configured center
        platform: "native" or "web"
    """

    def __init__(
        self,
        client: Optional[SkateMapClient] = None,
        location: Optional[LocationProvider] = None,
        platform: str = PLATFORM_NATIVE,
    ):
        if platform not in (PLATFORM_NATIVE, PLATFORM_WEB):
            raise ValueError(f"Unknown platform '{platform}'")

        self.client = client or SkateMapClient()
        self.location = location or FixedLocationProvider()
        self.platform = platform

        self.spots: List[SpotResponse] = []
        self.places: List[Place] = []
        self.places_loading = False
        self.loading = False
        self.error: Optional[str] = None
        self.region = Region(
            lat=settings.default_lat,
            lng=settings.default_lng,
            lat_delta=INITIAL_DELTA,
            lng_delta=INITIAL_DELTA,
        )

        # Create form
        self.create_open = False
        self.pending_coord: Optional[Tuple[float, float]] = None
        self.spot_name = ""
        self.spot_desc = ""
        self.spot_rating = 0

        # Detail view
        self.details_open = False
        self.selected_spot: Optional[SpotResponse] = None
        self.spot_reviews: List[ReviewResponse] = []
        self.new_review_rating = 0
        self.new_review_comment = ""

        self.pending_delete: Optional[SpotResponse] = None

    @property
    def is_web(self) -> bool:
        return self.platform == PLATFORM_WEB

    # ══════════════════════════════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════════════════════════════

    async def mount(self) -> None:
        await self.reload()
        if not self.is_web:
            await self.center_on_device()

    async def reload(self) -> None:
        self.error = None
        self.loading = True
        try:
            self.spots = await self.client.list_spots(limit=settings.spot_list_limit)
        except BackendError as e:
            self.error = e.message
        finally:
            self.loading = False

    async def _device_position(self) -> Optional[Tuple[float, float]]:
        """Permission gate plus one position read; None when refused."""
        status = await self.location.request_permission()
        if status != PERMISSION_GRANTED:
            self.error = PERMISSION_DENIED_MESSAGE
            return None
        return await self.location.current_position()

    async def center_on_device(self) -> None:
        """Only writes `error` when locating fails."""
        if self.is_web:
            return
        try:
            position = await self._device_position()
        except LocationError as e:
            self.error = e.message
            return
        if position is None:
            return

        lat, lng = position
        self.region = Region(lat=lat, lng=lng, lat_delta=DEVICE_DELTA, lng_delta=DEVICE_DELTA)
        logger.debug("Map centered on device at (%.5f, %.5f)", lat, lng)

    # ══════════════════════════════════════════════════════════════════════
    # Create
    # ══════════════════════════════════════════════════════════════════════

    def on_long_press(self, lat: float, lng: float) -> None:
        self.pending_coord = (lat, lng)
        self.spot_name = ""
        self.spot_desc = ""
        self.spot_rating = 0
        self.create_open = True

    async def submit_create(self) -> None:
        """The "Create" button: create at the pending coordinate, then close the form."""
        if self.pending_coord is None:
            return
        lat, lng = self.pending_coord
        await self.create_spot_at(lat, lng, self.spot_name, self.spot_desc, self.spot_rating)
        self.create_open = False

    async def create_spot_at(
        self,
        lat: float,
        lng: float,
        name: str,
        description: Optional[str] = None,
        initial_rating: int = 0,
    ) -> Optional[SpotResponse]:
        """
        Returns the created spot, or None when nothing was created.

        A blank name never reaches the backend. When only the initial
        review fails, the spot is still added and the banner says why.
        """
        self.error = None
        try:
            trimmed = clean_spot_name(name)
        except ValidationError as e:
            self.error = e.message
            return None

        try:
            result = await self.client.create_spot(
                name=trimmed,
                description=clean_description(description),
                lat=lat,
                lng=lng,
                initial_rating=initial_rating or 0,
            )
        except BackendError as e:
            self.error = e.message
            return None

        if result.review_error:
            self.error = result.review_error

        self.spots = [result.spot] + self.spots
        return result.spot

    def close_create(self) -> None:
        self.create_open = False

    # ══════════════════════════════════════════════════════════════════════
    # Details & Reviews
    # ══════════════════════════════════════════════════════════════════════

    async def open_spot_details(self, spot: SpotResponse) -> None:
        self.selected_spot = spot
        self.details_open = True
        self.spot_reviews = []
        self.new_review_rating = 0
        self.new_review_comment = ""
        await self.load_reviews(spot.id)

    async def load_reviews(self, spot_id: UUID) -> None:
        try:
            result = await self.client.list_reviews(spot_id)
        except BackendError as e:
            self.error = e.message
            return
        self.spot_reviews = list(result.reviews)

    @property
    def average_rating(self) -> float:
        return average_rating(review.rating for review in self.spot_reviews)

    async def add_review_for_selected_spot(self) -> None:
        if self.selected_spot is None:
            return

        self.error = None
        if self.new_review_rating <= 0:
            self.error = "Please choose a rating."
            return

        try:
            await self.client.create_review(self.selected_spot.id, self.new_review_rating)
        except BackendError as e:
            self.error = e.message
            return

        self.new_review_rating = 0
        self.new_review_comment = ""
        await self.load_reviews(self.selected_spot.id)

    def close_details(self) -> None:
        self.details_open = False

    # ══════════════════════════════════════════════════════════════════════
    # Delete
    # ══════════════════════════════════════════════════════════════════════

    def request_delete(self, spot: SpotResponse) -> None:
        self.pending_delete = spot

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> None:
        spot, self.pending_delete = self.pending_delete, None
        if spot is not None:
            await self.delete_spot_by_id(spot.id)

    async def delete_spot_by_id(self, spot_id: UUID) -> None:
        self.error = None
        try:
            await self.client.delete_spot(spot_id)
        except BackendError as e:
            self.error = e.message
            return

        self.spots = [s for s in self.spots if s.id != spot_id]

        if self.selected_spot is not None and self.selected_spot.id == spot_id:
            self.details_open = False
            self.selected_spot = None
            self.spot_reviews = []

    # ══════════════════════════════════════════════════════════════════════
    # Nearby places
    # ══════════════════════════════════════════════════════════════════════

    async def load_nearby_places(self, radius: Optional[int] = None) -> None:
        if self.is_web:
            self.error = NEARBY_WEB_MESSAGE
            return

        self.error = None
        self.places_loading = True
        try:
            position = await self._device_position()
            if position is None:
                return
            lat, lng = position
            self.places = await self.client.nearby_places(
                lat=lat, lng=lng, radius=radius or settings.nearby_radius_m
            )
        except (BackendError, LocationError) as e:
            self.error = e.message or NEARBY_FAILED_MESSAGE
        finally:
            self.places_loading = False

    # ══════════════════════════════════════════════════════════════════════
    # Render
    # ══════════════════════════════════════════════════════════════════════

    def render(self) -> ScreenView:
        view = ScreenView(
            platform=self.platform,
            mode="list" if self.is_web else "map",
            region=self.region,
            error=self.error,
            loading=self.loading,
            places_loading=self.places_loading,
            delete_prompt=(
                DeletePromptView(spot_name=self.pending_delete.name)
                if self.pending_delete is not None
                else None
            ),
        )

        if self.is_web:
            view.notice = WEB_NOTICE
            view.rows = [
                SpotRow(
                    id=str(s.id),
                    name=s.name,
                    description=s.description or None,
                    coordinates=f"{format_coordinate(s.lat)}, {format_coordinate(s.lng)}",
                )
                for s in self.spots
            ]
            return view

        view.markers = [
            Marker(
                id=str(s.id),
                kind="spot",
                title=s.name,
                description=s.description or None,
                lat=s.lat,
                lng=s.lng,
            )
            for s in self.spots
        ] + [
            Marker(
                id=p.id,
                kind="place",
                title=p.name,
                description=p.tags.get("addr:city") or p.tags.get("website"),
                lat=p.lat,
                lng=p.lng,
            )
            for p in self.places
        ]

        if self.create_open:
            view.create_modal = CreateModalView(
                coordinates=(
                    f"{self.pending_coord[0]:.5f}, {self.pending_coord[1]:.5f}"
                    if self.pending_coord is not None
                    else None
                ),
                name=self.spot_name,
                description=self.spot_desc,
                rating_stars=star_string(self.spot_rating),
            )

        if self.details_open:
            avg = self.average_rating
            view.details_modal = DetailsModalView(
                title=self.selected_spot.name if self.selected_spot else "Spot",
                description=(self.selected_spot.description or None) if self.selected_spot else None,
                review_count=len(self.spot_reviews),
                average_stars=star_string(_round_half_up(avg)),
                average_label="No reviews yet" if not self.spot_reviews else f"{avg:.1f} / 5",
                reviews=[star_string(r.rating) for r in self.spot_reviews],
                new_review_stars=star_string(self.new_review_rating),
            )

        return view
