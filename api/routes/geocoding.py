"""Location endpoints used by the address-picking map"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from services.geocoding import GeocodingService, ServiceError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["geocoding"])

# Global geocoding service (created on first request)
_geocoding_service = None


def get_geocoding_service() -> GeocodingService:
    """Get geocoding service instance"""
    global _geocoding_service
    if _geocoding_service is None:
        _geocoding_service = GeocodingService()
    return _geocoding_service


class ReverseGeocodeResponse(BaseModel):
    address: str
    city: str
    postalCode: str


class GeocodeResponse(BaseModel):
    lat: float
    lng: float


class SearchLocationItem(BaseModel):
    lat: Optional[float] = None
    lng: Optional[float] = None
    title: str
    description: str


def _upstream_error(e: ServiceError) -> HTTPException:
    return HTTPException(status_code=502, detail=f"Geocoding provider error: {e}")


# geopy is blocking, so these are plain `def` routes and run in the threadpool.

@router.get("/reverse-geocode", response_model=ReverseGeocodeResponse)
def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90, description="Latitude in decimal degrees"),
    lng: float = Query(..., ge=-180, le=180, description="Longitude in decimal degrees"),
    service: GeocodingService = Depends(get_geocoding_service),
):
    """
    Reverse geocoding: coordinates -> address line, city, postal code

    Example: /api/reverse-geocode?lat=12.97&lng=77.59
    """
    try:
        result = service.reverse_geocode(lat, lng)
    except ServiceError as e:
        raise _upstream_error(e)

    if not result:
        raise HTTPException(status_code=404, detail="Location not found")

    return ReverseGeocodeResponse(
        address=result.address, city=result.city, postalCode=result.postal_code
    )


@router.get("/search-location", response_model=List[SearchLocationItem])
def search_location(
    q: str = Query(..., min_length=1, description="Free-text place query"),
    service: GeocodingService = Depends(get_geocoding_service),
):
    """
    Place search biased toward the delivery area

    Example: /api/search-location?q=indiranagar
    """
    try:
        results = service.search(q)
    except ServiceError as e:
        raise _upstream_error(e)

    return [
        SearchLocationItem(
            lat=r.coordinate.lat if r.coordinate else None,
            lng=r.coordinate.lng if r.coordinate else None,
            title=r.title,
            description=r.description,
        )
        for r in results
    ]


@router.get("/geocode-address", response_model=GeocodeResponse)
def geocode_address(
    address: str = Query(..., min_length=1, description="Address to geocode"),
    service: GeocodingService = Depends(get_geocoding_service),
):
    """
    Forward geocoding: address -> coordinates

    Example: /api/geocode-address?address=MG%20Road%2C%20Bangalore
    """
    try:
        result = service.geocode(address)
    except ServiceError as e:
        raise _upstream_error(e)

    if not result:
        raise HTTPException(status_code=404, detail="Address not found")

    return GeocodeResponse(lat=result.lat, lng=result.lng)
