"""Selected-location marker bookkeeping on top of the host's map surface"""

import logging
from typing import Any, Optional, Protocol

from services.geocoding.models import Coordinates

logger = logging.getLogger(__name__)

Marker = Any  # opaque handle owned by the map surface


class MapSurface(Protocol):
    """Rendering capabilities the host map provides"""

    def add_marker(self, coordinate: Coordinates, popup: Optional[str] = None) -> Marker: ...

    def remove_marker(self, marker: Marker) -> None: ...

    def set_view(self, coordinate: Coordinates, zoom: int) -> None: ...

    def set_interactive(self, enabled: bool) -> None: ...


class MarkerController:
    """
    Owns the single "selected location" marker.

    At most one marker exists at any time: placing a new one always removes
    the previous one first.
    """

    def __init__(self, surface: MapSurface):
        self.surface = surface
        self.accepting = True
        self._marker: Optional[Marker] = None
        self._coordinate: Optional[Coordinates] = None

    @property
    def marker(self) -> Optional[Marker]:
        return self._marker

    @property
    def coordinate(self) -> Optional[Coordinates]:
        return self._coordinate

    def place(
        self,
        coordinate: Coordinates,
        popup: Optional[str] = None,
        force: bool = False,
    ) -> Optional[Marker]:
        """
        Replace the active marker with one at coordinate.

        While not accepting (interaction lock on) the current marker is
        returned untouched unless force is set.
        """
        if not self.accepting and not force:
            logger.debug(f"Marker placement at {coordinate.label()} refused, controller locked")
            return self._marker

        self.clear()
        self._marker = self.surface.add_marker(coordinate, popup)
        self._coordinate = coordinate
        return self._marker

    def clear(self) -> None:
        """Remove the active marker if there is one"""
        if self._marker is None:
            return
        self.surface.remove_marker(self._marker)
        self._marker = None
        self._coordinate = None


def popup_text(address: str, coordinate: Coordinates) -> str:
    """Marker popup body: the address, then the coordinate"""
    return f"{address}\n{coordinate.label()}" if address else coordinate.label()
