"""
Location session: the address-picking map's state machine.

Combines the geocode client, the marker controller, the debounced search
and the device locator to answer "where is the user pointing / searching /
standing", and reports each committed answer to the consumer exactly once.

State is derived rather than stored, so every transition is visible in one
place (see `state`):

    locked     interaction lock on; selection frozen
    resolving  a placement pipeline holds the ticket
    resolved   a SelectedLocation exists
    idle       nothing selected yet

Only one placement pipeline may hold the ticket at a time. A placement
requested while another is in flight is dropped (outcome BUSY). A pipeline
commits only if it still holds the ticket and the lock is off at commit time.
"""

import logging
from typing import Callable, List, Optional

from core.config import settings
from services.geocoding.client import GeocodeClient
from services.geocoding.errors import LocationError, PositionError, Unavailable
from services.geocoding.models import (
    Coordinates,
    PlacementOutcome,
    ResolvedAddress,
    SearchResult,
    SelectedLocation,
    SessionState,
)

from .debouncer import SearchDebouncer
from .gps import GPSLocator
from .markers import MarkerController, popup_text
from .simplifier import simplify

logger = logging.getLogger(__name__)

# onSelectLocation(lat, lng, address, city, postal_code)
SelectCallback = Callable[[float, float, str, str, str], None]

REVERSE_FAILED_MESSAGE = "Couldn't look up the address for that spot. Please try again."
SEARCH_SELECT_FAILED_MESSAGE = "Couldn't find that place on the map. Try a nearby landmark."


class _Ticket:
    """Identity token for one placement pipeline"""

    def __init__(self, action: str):
        self.action = action


class LocationSession:
    def __init__(
        self,
        client: GeocodeClient,
        markers: MarkerController,
        on_select_location: SelectCallback,
        gps: Optional[GPSLocator] = None,
        on_error: Optional[Callable[[str], None]] = None,
        on_search_results: Optional[Callable[[List[SearchResult]], None]] = None,
        on_search_cleared: Optional[Callable[[], None]] = None,
        debounce_delay: Optional[float] = None,
        is_locked: bool = False,
    ):
        self.client = client
        self.markers = markers
        self.gps = gps
        self.on_select_location = on_select_location
        self.on_error = on_error
        self.on_search_results = on_search_results
        self.on_search_cleared = on_search_cleared

        self.search_results: List[SearchResult] = []
        self.detecting = False

        self._selection: Optional[SelectedLocation] = None
        self._ticket: Optional[_Ticket] = None
        self._locked = False

        self.debouncer = SearchDebouncer(
            client.search_places,
            self._deliver_results,
            delay=debounce_delay,
            on_error=self._report,
        )
        self.set_locked(is_locked)
        self.markers.surface.set_view(
            Coordinates(lat=settings.DEFAULT_CENTER_LAT, lng=settings.DEFAULT_CENTER_LNG),
            settings.DEFAULT_ZOOM,
        )

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> SessionState:
        if self._locked:
            return SessionState.LOCKED
        if self._ticket is not None:
            return SessionState.RESOLVING
        if self._selection is not None:
            return SessionState.RESOLVED
        return SessionState.IDLE

    @property
    def selection(self) -> Optional[SelectedLocation]:
        return self._selection

    @property
    def locked(self) -> bool:
        return self._locked

    @property
    def search_query(self) -> str:
        return self.debouncer.query

    def set_locked(self, locked: bool) -> None:
        """Apply the interaction lock. Never touches the current selection."""
        locked = bool(locked)
        self._locked = locked
        self.markers.accepting = not locked
        self.markers.surface.set_interactive(not locked)
        if locked:
            self.debouncer.cancel()
            self.search_results = []
        logger.debug(f"Interaction lock {'on' if locked else 'off'}, state={self.state.value}")

    # ------------------------------------------------------------- placements

    async def click(self, coordinate: Coordinates) -> PlacementOutcome:
        """Map click: reverse geocode the spot and place the marker there"""
        ticket = self._acquire("click")
        if not isinstance(ticket, _Ticket):
            return ticket
        try:
            return await self._resolve_and_commit(ticket, coordinate, zoom=None)
        finally:
            self._release(ticket)

    async def select_result(self, result: SearchResult) -> PlacementOutcome:
        """
        Search-result selection.

        The description is forward geocoded, falling back once to its
        simplified form, then placed through the click pipeline. The search
        box is cleared when the placement commits.
        """
        ticket = self._acquire("search")
        if not isinstance(ticket, _Ticket):
            return ticket
        try:
            text = (result.description or result.title).strip()
            coordinate = await self._forward_with_fallback(text) if text else None
            if not self._holds(ticket):
                return PlacementOutcome.DISCARDED
            if coordinate is None:
                self._report(SEARCH_SELECT_FAILED_MESSAGE)
                return PlacementOutcome.FAILED

            outcome = await self._resolve_and_commit(
                ticket, coordinate, zoom=settings.SEARCH_SELECT_ZOOM
            )
            if outcome is PlacementOutcome.PLACED:
                self.clear_search()
            return outcome
        finally:
            self._release(ticket)

    async def detect_location(self) -> PlacementOutcome:
        """GPS button: place the marker at the device's current position"""
        ticket = self._acquire("gps")
        if not isinstance(ticket, _Ticket):
            return ticket
        self.detecting = True
        try:
            try:
                if self.gps is None:
                    raise Unavailable()
                coordinate = await self.gps.locate()
            except PositionError as e:
                logger.warning(f"GPS placement failed: {type(e).__name__}")
                if not self._holds(ticket):
                    return PlacementOutcome.DISCARDED
                self._report(e.message)
                return PlacementOutcome.FAILED
            if not self._holds(ticket):
                return PlacementOutcome.DISCARDED

            return await self._resolve_and_commit(ticket, coordinate, zoom=settings.GPS_ZOOM)
        finally:
            self.detecting = False
            self._release(ticket)

    async def push_location(
        self,
        coordinate: Coordinates,
        resolved: Optional[ResolvedAddress] = None,
    ) -> PlacementOutcome:
        """
        Externally driven location (e.g. the address of an order already placed).

        Accepted while locked, and supersedes any in-flight user placement.
        The consumer is not called back: it is the source of this location.
        """
        ticket = _Ticket("push")
        self._ticket = ticket
        try:
            if resolved is None:
                try:
                    resolved = await self.client.reverse_geocode(coordinate)
                except LocationError as e:
                    logger.warning(f"Reverse geocode for pushed location {coordinate.label()} failed: {e}")
                    return PlacementOutcome.FAILED
            if self._ticket is not ticket:
                return PlacementOutcome.DISCARDED

            self.markers.place(coordinate, popup_text(resolved.address, coordinate), force=True)
            self.markers.surface.set_view(coordinate, settings.SEARCH_SELECT_ZOOM)
            self._selection = SelectedLocation(coordinate=coordinate, resolved=resolved)
            return PlacementOutcome.PLACED
        finally:
            self._release(ticket)

    # ----------------------------------------------------------------- search

    def search(self, text: str) -> None:
        """Search-box edit; ignored while locked"""
        if self._locked:
            logger.debug("Search ignored, interaction locked")
            return
        self.debouncer.submit(text)

    def clear_search(self) -> None:
        self.debouncer.cancel()
        self.debouncer.query = ""
        self.search_results = []
        if self.on_search_cleared is not None:
            self.on_search_cleared()

    def close(self) -> None:
        """End the session: drop pending work and the marker"""
        self.debouncer.cancel()
        self._ticket = None
        self.markers.clear()

    # -------------------------------------------------------------- internals

    def _acquire(self, action: str):
        """Start a user placement; returns a ticket or the rejection outcome"""
        if self._locked:
            logger.debug(f"{action} placement rejected, interaction locked")
            return PlacementOutcome.LOCKED
        if self._ticket is not None:
            logger.debug(f"{action} placement dropped, {self._ticket.action} placement in flight")
            return PlacementOutcome.BUSY
        ticket = _Ticket(action)
        self._ticket = ticket
        return ticket

    def _release(self, ticket: _Ticket) -> None:
        if self._ticket is ticket:
            self._ticket = None

    def _holds(self, ticket: _Ticket) -> bool:
        if self._ticket is not ticket:
            logger.info(f"{ticket.action} placement superseded, discarding result")
            return False
        if self._locked:
            logger.info(f"Interaction locked during {ticket.action} placement, discarding result")
            return False
        return True

    async def _forward_with_fallback(self, text: str) -> Optional[Coordinates]:
        try:
            return await self.client.forward_geocode(text)
        except LocationError as e:
            logger.info(f"Forward geocode failed for {text!r} ({e}), trying simplified address")

        simplified = simplify(text)
        if not simplified:
            return None
        try:
            return await self.client.forward_geocode(simplified)
        except LocationError as e:
            logger.warning(f"Simplified forward geocode failed for {simplified!r}: {e}")
            return None

    async def _resolve_and_commit(
        self,
        ticket: _Ticket,
        coordinate: Coordinates,
        zoom: Optional[int],
    ) -> PlacementOutcome:
        try:
            resolved = await self.client.reverse_geocode(coordinate)
        except LocationError as e:
            logger.warning(f"Reverse geocode at {coordinate.label()} failed: {e}")
            if not self._holds(ticket):
                return PlacementOutcome.DISCARDED
            self._report(REVERSE_FAILED_MESSAGE)
            return PlacementOutcome.FAILED

        if not self._holds(ticket):
            return PlacementOutcome.DISCARDED

        self.markers.place(coordinate, popup_text(resolved.address, coordinate))
        if zoom is not None:
            self.markers.surface.set_view(coordinate, zoom)
        self._selection = SelectedLocation(coordinate=coordinate, resolved=resolved)
        logger.info(f"Location selected via {ticket.action}: {coordinate.label()} {resolved.address!r}")

        self.on_select_location(
            coordinate.lat,
            coordinate.lng,
            resolved.address,
            resolved.city,
            resolved.postal_code,
        )
        return PlacementOutcome.PLACED

    def _deliver_results(self, results: List[SearchResult]) -> None:
        self.search_results = list(results)
        if self.on_search_results is not None:
            self.on_search_results(self.search_results)

    def _report(self, message: str) -> None:
        if self.on_error is not None:
            self.on_error(message)
