"""Geocoding service package"""

from .client import GeocodeClient
from .errors import Denied, LocationError, NotFound, PositionError, ServiceError, Timeout, Unavailable
from .models import (
    Coordinates,
    PlacementOutcome,
    ResolvedAddress,
    SearchResult,
    SelectedLocation,
    SessionState,
)
from .service import GeocodingService

__all__ = [
    "Coordinates",
    "Denied",
    "GeocodeClient",
    "GeocodingService",
    "LocationError",
    "NotFound",
    "PlacementOutcome",
    "PositionError",
    "ResolvedAddress",
    "SearchResult",
    "SelectedLocation",
    "ServiceError",
    "SessionState",
    "Timeout",
    "Unavailable",
]
