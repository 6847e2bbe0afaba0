"""Geocoding service backing the storefront location endpoints"""

import logging

from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import GoogleV3, Nominatim

from core.config import settings

from .errors import ServiceError
from .models import Coordinates, ResolvedAddress, SearchResult

logger = logging.getLogger(__name__)

# Nominatim address keys, most specific first
_CITY_KEYS = ("city", "town", "village", "municipality", "county", "state_district")
_LOCALITY_KEYS = ("neighbourhood", "suburb", "quarter", "city_district")


class GeocodingService:
    """
    Production geocoding service.

    Uses Nominatim (OpenStreetMap) by default and Google Maps when an API key
    is configured.
    """

    def __init__(
        self,
        google_api_key: str | None = None,
        timeout: int | None = None,
        user_agent: str | None = None,
        city_suffix: str | None = None,
        viewbox: str | None = None,
        result_limit: int | None = None,
        geocoder=None,
    ):
        """
        Initialize geocoding service

        Args:
            google_api_key: Google Maps API key (defaults to settings.GOOGLE_MAPS_API_KEY)
            timeout: Request timeout in seconds
            user_agent: Nominatim user agent
            city_suffix: Appended to free-text searches to keep them in the service area
            viewbox: "west,north,east,south" box searches are bounded to
            result_limit: Maximum number of search matches
            geocoder: Preconfigured geopy geocoder (tests)
        """
        self.timeout = timeout or settings.GEOCODER_TIMEOUT
        self.city_suffix = settings.SEARCH_CITY_SUFFIX if city_suffix is None else city_suffix
        self.viewbox = self._parse_viewbox(settings.SEARCH_VIEWBOX if viewbox is None else viewbox)
        self.result_limit = result_limit or settings.SEARCH_RESULT_LIMIT

        api_key = google_api_key if google_api_key is not None else settings.GOOGLE_MAPS_API_KEY
        if geocoder is not None:
            self.geocoder = geocoder
            self.provider = "google" if isinstance(geocoder, GoogleV3) else "nominatim"
        elif api_key:
            self.geocoder = GoogleV3(api_key=api_key, timeout=self.timeout)
            self.provider = "google"
        else:
            self.geocoder = Nominatim(
                user_agent=user_agent or settings.GEOCODER_USER_AGENT,
                timeout=self.timeout,
            )
            self.provider = "nominatim"

    def geocode(self, address: str) -> Coordinates | None:
        """
        Convert address to coordinates (forward geocoding)

        Returns:
            Coordinates of the best match, or None if nothing matched
        """
        try:
            location = self.geocoder.geocode(address, exactly_one=True, timeout=self.timeout)
        except (GeocoderTimedOut, GeocoderServiceError) as e:
            logger.error(f"Geocoding error for {address!r}: {e}")
            raise ServiceError(str(e)) from e

        if not location:
            return None

        return Coordinates(lat=location.latitude, lng=location.longitude)

    def reverse_geocode(self, lat: float, lng: float) -> ResolvedAddress | None:
        """
        Convert coordinates to address (reverse geocoding)

        Returns:
            ResolvedAddress with address line, city and postal code, or None
        """
        coords = Coordinates(lat=lat, lng=lng)
        kwargs = {"exactly_one": True, "timeout": self.timeout}
        if self.provider == "nominatim":
            # Street-level detail
            kwargs.update(zoom=18, addressdetails=True)

        try:
            location = self.geocoder.reverse(f"{coords.lat}, {coords.lng}", **kwargs)
        except (GeocoderTimedOut, GeocoderServiceError) as e:
            logger.error(f"Reverse geocoding error at {coords.label()}: {e}")
            raise ServiceError(str(e)) from e

        if not location:
            return None

        if self.provider == "google":
            return self._parse_google_address(location)
        return self._parse_nominatim_address(location)

    def search(self, query: str) -> list[SearchResult]:
        """
        Free-text place search biased toward the service area

        Returns:
            Matches in provider order; empty when nothing matched
        """
        text = f"{query}, {self.city_suffix}" if self.city_suffix else query
        kwargs = {"exactly_one": False, "timeout": self.timeout}
        if self.provider == "nominatim":
            kwargs.update(limit=self.result_limit, addressdetails=True)
            if self.viewbox:
                kwargs.update(viewbox=self.viewbox, bounded=True)
        elif self.viewbox:
            kwargs["bounds"] = self.viewbox

        try:
            locations = self.geocoder.geocode(text, **kwargs)
        except (GeocoderTimedOut, GeocoderServiceError) as e:
            logger.error(f"Place search error for {query!r}: {e}")
            raise ServiceError(str(e)) from e

        results = []
        for location in (locations or [])[: self.result_limit]:
            description = location.address or ""
            results.append(
                SearchResult(
                    coordinate=Coordinates(lat=location.latitude, lng=location.longitude),
                    title=description.split(",")[0].strip(),
                    description=description,
                )
            )
        return results

    @staticmethod
    def _parse_viewbox(raw: str) -> list[tuple[float, float]] | None:
        """'west,north,east,south' -> [(north, west), (south, east)] as geopy expects"""
        if not raw:
            return None
        try:
            west, north, east, south = (float(part) for part in raw.split(","))
        except ValueError:
            logger.warning(f"Ignoring malformed viewbox {raw!r}")
            return None
        return [(north, west), (south, east)]

    def _parse_nominatim_address(self, location) -> ResolvedAddress:
        """Parse Nominatim response into ResolvedAddress"""
        raw = location.raw or {}
        parts = raw.get("address", {})

        street = " ".join(p for p in (parts.get("house_number"), parts.get("road")) if p)
        locality = next((parts[k] for k in _LOCALITY_KEYS if parts.get(k)), "")
        line = ", ".join(p for p in (street, locality) if p)

        return ResolvedAddress(
            address=line or raw.get("display_name", location.address) or "",
            city=next((parts[k] for k in _CITY_KEYS if parts.get(k)), ""),
            postal_code=parts.get("postcode", ""),
        )

    def _parse_google_address(self, location) -> ResolvedAddress:
        """Parse Google Maps API response into ResolvedAddress"""
        raw = location.raw or {}
        components = {}

        for component in raw.get("address_components", []):
            types = component.get("types", [])
            if "street_number" in types:
                components["street_number"] = component["long_name"]
            elif "route" in types:
                components["street_name"] = component["long_name"]
            elif "sublocality" in types or "neighborhood" in types:
                components.setdefault("locality", component["long_name"])
            elif "locality" in types:
                components["city"] = component["long_name"]
            elif "postal_code" in types:
                components["postal_code"] = component["long_name"]

        street = " ".join(
            p for p in (components.get("street_number"), components.get("street_name")) if p
        )
        line = ", ".join(p for p in (street, components.get("locality")) if p)

        return ResolvedAddress(
            address=line or raw.get("formatted_address", location.address) or "",
            city=components.get("city", ""),
            postal_code=components.get("postal_code", ""),
        )
