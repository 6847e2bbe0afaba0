"""Tests for the location data model"""

import pytest
from pydantic import ValidationError

from services.geocoding.models import Coordinates, ResolvedAddress, SearchResult, SelectedLocation


def test_coordinates_round_to_six_places():
    coords = Coordinates(lat=25.79074321, lng=-80.13004567)

    assert coords.lat == 25.790743
    assert coords.lng == -80.130046


@pytest.mark.parametrize("lat, lng", [(90.5, 0), (-91, 0), (0, 180.1), (0, -181), ("north", 0)])
def test_coordinates_out_of_range_rejected(lat, lng):
    with pytest.raises(ValidationError):
        Coordinates(lat=lat, lng=lng)


def test_coordinates_are_immutable_values():
    a = Coordinates(lat=12.97, lng=77.59)

    with pytest.raises(ValidationError):
        a.lat = 13.0
    assert a == Coordinates(lat=12.97, lng=77.59)
    assert hash(a) == hash(Coordinates(lat=12.97, lng=77.59))


def test_resolved_address_accepts_wire_names():
    resolved = ResolvedAddress.model_validate(
        {"address": "MG Road", "city": "Bangalore", "postalCode": 560001}
    )

    assert resolved.postal_code == "560001"
    assert ResolvedAddress(address="x", city=None).city == ""


def test_search_result_from_wire_with_coordinates():
    result = SearchResult.from_wire(
        {"lat": "12.9756", "lng": 77.6050, "title": "MG Road", "description": "MG Road, Bangalore"}
    )

    assert result.coordinate == Coordinates(lat=12.9756, lng=77.605)
    assert result.title == "MG Road"


@pytest.mark.parametrize(
    "item",
    [
        {"description": "Indiranagar, Bangalore"},
        {"lat": 12.9, "description": "Indiranagar, Bangalore"},
        {"lat": "abc", "lng": 77.6, "description": "Indiranagar, Bangalore"},
        {"lat": 120, "lng": 77.6, "description": "Indiranagar, Bangalore"},
    ],
)
def test_search_result_without_usable_coordinates(item):
    result = SearchResult.from_wire(item)

    assert result.coordinate is None
    assert result.title == "Indiranagar"
    assert result.description == "Indiranagar, Bangalore"


def test_selected_location_is_frozen():
    selection = SelectedLocation(
        coordinate=Coordinates(lat=12.97, lng=77.59),
        resolved=ResolvedAddress(address="MG Road", city="Bangalore", postal_code="560001"),
    )

    with pytest.raises(ValidationError):
        selection.coordinate = Coordinates(lat=0, lng=0)
