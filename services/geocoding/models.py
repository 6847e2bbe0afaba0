"""Pydantic models for location resolution"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class Coordinates(BaseModel):
    """Geographic coordinates"""

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in decimal degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in decimal degrees")

    @field_validator("lat", "lng")
    @classmethod
    def round_precision(cls, v: float) -> float:
        """Round to 6 decimal places (~11cm precision)"""
        return round(v, 6)

    def label(self) -> str:
        return f"{self.lat:.6f}, {self.lng:.6f}"


class ResolvedAddress(BaseModel):
    """Structured address produced by reverse geocoding"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: str = ""
    city: str = ""
    postal_code: str = Field("", alias="postalCode")

    @field_validator("address", "city", "postal_code", mode="before")
    @classmethod
    def blank_if_missing(cls, v):
        return "" if v is None else str(v)


class SearchResult(BaseModel):
    """
    A place search match.

    coordinate is None when the search service only returned descriptive text;
    the description then has to be forward geocoded.
    """

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinates | None = None
    title: str = ""
    description: str = ""

    @classmethod
    def from_wire(cls, item: dict[str, Any]) -> "SearchResult":
        """Build from the `{lat?, lng?, title, description}` wire shape"""
        coordinate = None
        lat, lng = item.get("lat"), item.get("lng")
        if lat is not None and lng is not None:
            try:
                coordinate = Coordinates(lat=float(lat), lng=float(lng))
            except (TypeError, ValueError, ValidationError):
                coordinate = None

        description = str(item.get("description") or "")
        title = str(item.get("title") or description.split(",")[0].strip())
        return cls(coordinate=coordinate, title=title, description=description)


class SelectedLocation(BaseModel):
    """The session's current answer; coordinate and address change together"""

    model_config = ConfigDict(frozen=True)

    coordinate: Coordinates
    resolved: ResolvedAddress


class SessionState(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    LOCKED = "locked"


class PlacementOutcome(str, Enum):
    """What happened to a placement request"""

    PLACED = "placed"
    LOCKED = "locked"  # rejected, interaction lock on
    BUSY = "busy"  # rejected, another placement in flight
    FAILED = "failed"  # geocoding or GPS failed, nothing changed
    DISCARDED = "discarded"  # resolved, but lock/ticket changed before commit
