"""Shared fakes for the location engine tests"""

import asyncio
import itertools

import pytest

from services.geocoding.errors import NotFound, ServiceError
from services.geocoding.models import Coordinates, ResolvedAddress
from services.location.markers import MarkerController


class FakeMapSurface:
    """In-memory stand-in for the host map"""

    def __init__(self):
        self._ids = itertools.count(1)
        self.markers = {}  # marker id -> (coordinate, popup)
        self.removed = []
        self.views = []
        self.interactive = True

    def add_marker(self, coordinate, popup=None):
        marker = next(self._ids)
        self.markers[marker] = (coordinate, popup)
        return marker

    def remove_marker(self, marker):
        del self.markers[marker]
        self.removed.append(marker)

    def set_view(self, coordinate, zoom):
        self.views.append((coordinate, zoom))

    def set_interactive(self, enabled):
        self.interactive = enabled


class ScriptedGeocodeClient:
    """
    GeocodeClient double.

    reverse: dict of Coordinates -> ResolvedAddress | Exception, or a default
    forward: dict of text -> Coordinates | Exception; unknown text -> NotFound
    search:  dict of query -> list[SearchResult] | Exception; unknown -> []
    Setting `gate` to an asyncio.Event makes reverse_geocode wait on it;
    `forward_gate` does the same for forward_geocode.
    """

    def __init__(self, reverse=None, forward=None, search=None, default_address=None):
        self.reverse = reverse or {}
        self.forward = forward or {}
        self.search = search or {}
        self.default_address = default_address or ResolvedAddress(
            address="MG Road", city="Bangalore", postal_code="560001"
        )
        self.gate = None
        self.forward_gate = None
        self.reverse_calls = []
        self.forward_calls = []
        self.search_calls = []

    async def reverse_geocode(self, coordinate):
        self.reverse_calls.append(coordinate)
        if self.gate is not None:
            await self.gate.wait()
        result = self.reverse.get(coordinate, self.default_address)
        if isinstance(result, Exception):
            raise result
        return result

    async def forward_geocode(self, address_text):
        self.forward_calls.append(address_text)
        if self.forward_gate is not None:
            await self.forward_gate.wait()
        result = self.forward.get(address_text, NotFound(address_text))
        if isinstance(result, Exception):
            raise result
        return result

    async def search_places(self, query_text):
        self.search_calls.append(query_text)
        result = self.search.get(query_text, [])
        if isinstance(result, Exception):
            raise result
        return result


class FakePositionProvider:
    def __init__(self, position=None, error=None, delay=0.0):
        self.position = position
        self.error = error
        self.delay = delay
        self.calls = []

    async def get_current_position(self, high_accuracy, maximum_age):
        self.calls.append((high_accuracy, maximum_age))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.position


class Recorder:
    """Collects callback invocations"""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)


@pytest.fixture
def surface():
    return FakeMapSurface()


@pytest.fixture
def markers(surface):
    return MarkerController(surface)


@pytest.fixture
def client():
    return ScriptedGeocodeClient()


@pytest.fixture
def bangalore():
    return Coordinates(lat=12.97, lng=77.59)


@pytest.fixture
def service_error():
    return ServiceError("upstream down")
