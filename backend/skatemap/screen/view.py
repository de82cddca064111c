"""
SkateMap Screen: Render Snapshot Models
=========================================

What:  Pydantic models describing what the map screen shows at one moment.
How:   MapScreen.render() builds a ScreenView from its state; a UI layer
       (or a test) reads it without touching screen internals.

Layout by platform:
    native → map with markers, modals drawn over it
    web    → plain list of spot rows plus a notice; no map, no nearby search
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class Region(BaseModel):
    """Visible map area: center plus the span in degrees."""

    lat: float
    lng: float
    lat_delta: float = 0.15
    lng_delta: float = 0.15


class Marker(BaseModel):
    id: str
    kind: str = Field(description="'spot' or 'place'")
    title: str
    description: Optional[str] = None
    lat: float
    lng: float


class SpotRow(BaseModel):
    """One entry of the web list fallback."""

    id: str
    name: str
    description: Optional[str] = None
    coordinates: str = Field(description="'lat, lng' as stored")


class CreateModalView(BaseModel):
    title: str = "Create spot"
    coordinates: Optional[str] = Field(default=None, description="Pending coordinate, 5 decimals")
    name: str = ""
    description: str = ""
    rating_stars: str


class DetailsModalView(BaseModel):
    title: str
    description: Optional[str] = None
    review_count: int
    average_stars: str = Field(description="Average rounded to whole stars")
    average_label: str = Field(description="'No reviews yet' or 'x.x / 5'")
    reviews: List[str] = Field(default_factory=list, description="Each review as a star string")
    new_review_stars: str


class DeletePromptView(BaseModel):
    title: str = "Delete spot?"
    spot_name: str


class ScreenView(BaseModel):
    platform: str
    mode: str = Field(description="'map' on native, 'list' on web")
    region: Region
    error: Optional[str] = None
    notice: Optional[str] = None
    loading: bool = False
    places_loading: bool = False
    markers: List[Marker] = Field(default_factory=list)
    rows: List[SpotRow] = Field(default_factory=list)
    create_modal: Optional[CreateModalView] = None
    details_modal: Optional[DetailsModalView] = None
    delete_prompt: Optional[DeletePromptView] = None
