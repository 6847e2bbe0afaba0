"""Interactive location resolution for the address-picking map"""

from .debouncer import PendingSearch, SearchDebouncer
from .gps import GPSLocator, PositionProvider
from .markers import MapSurface, MarkerController
from .session import LocationSession
from .simplifier import simplify

__all__ = [
    "GPSLocator",
    "LocationSession",
    "MapSurface",
    "MarkerController",
    "PendingSearch",
    "PositionProvider",
    "SearchDebouncer",
    "simplify",
]
