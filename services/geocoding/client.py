"""
Async client for the storefront location endpoints.

Talks to the backend's reverse-geocode / geocode-address / search-location
routes. It performs no retries: fallback policy belongs to the caller.
"""

import asyncio
import logging
import ssl
from typing import Any, Optional

import aiohttp
import certifi
from pydantic import ValidationError

from core.config import settings

from .errors import NotFound, ServiceError
from .models import Coordinates, ResolvedAddress, SearchResult

logger = logging.getLogger(__name__)


def get_ssl_context():
    """Get SSL context for aiohttp requests"""
    return ssl.create_default_context(cafile=certifi.where())


class GeocodeClient:
    """Thin async interface to the address-resolution service"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token: Optional[str] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = (base_url or settings.LOCATION_API_BASE_URL).rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.LOCATION_API_TIMEOUT)
        self.token = token if token is not None else settings.LOCATION_API_TOKEN
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "GeocodeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            connector = None
            if self.base_url.startswith("https://"):
                connector = aiohttp.TCPConnector(ssl=get_ssl_context())
            self._session = aiohttp.ClientSession(
                headers=headers, timeout=self.timeout, connector=connector
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the underlying HTTP session if this client created it"""
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _get(self, path: str, params: dict[str, Any]) -> tuple[int, Any]:
        """GET a JSON endpoint. Returns (status, body); body is None for error statuses."""
        url = f"{self.base_url}/{path}"
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status >= 400:
                    logger.warning(f"Location API {path} returned {response.status}")
                    return response.status, None
                return response.status, await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"Location API {path} request failed: {e}")
            raise ServiceError(f"{path} request failed: {e}") from e

    async def reverse_geocode(self, coordinate: Coordinates) -> ResolvedAddress:
        """
        Resolve a coordinate to a structured address.

        Raises:
            ServiceError: on any failure; there is no sensible fallback query
        """
        status, data = await self._get(
            "reverse-geocode", {"lat": str(coordinate.lat), "lng": str(coordinate.lng)}
        )
        if data is None:
            raise ServiceError(f"reverse-geocode failed with status {status}")
        if not isinstance(data, dict):
            raise ServiceError("reverse-geocode returned an unexpected payload")

        try:
            return ResolvedAddress.model_validate(data)
        except ValidationError as e:
            raise ServiceError(f"reverse-geocode returned an invalid address: {e}") from e

    async def forward_geocode(self, address_text: str) -> Coordinates:
        """
        Resolve address text to a coordinate.

        Raises:
            NotFound: the service could not produce a usable coordinate
            ServiceError: transport or service failure
        """
        status, data = await self._get("geocode-address", {"address": address_text})
        if status == 404:
            raise NotFound(f"No coordinates for {address_text!r}")
        if data is None:
            raise ServiceError(f"geocode-address failed with status {status}")
        if not isinstance(data, dict):
            raise NotFound(f"No coordinates for {address_text!r}")

        try:
            return Coordinates(lat=float(data["lat"]), lng=float(data["lng"]))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            raise NotFound(f"Unusable coordinates for {address_text!r}: {data}") from e

    async def search_places(self, query_text: str) -> list[SearchResult]:
        """
        Free-text place search.

        Returns an empty list when there are simply no matches.

        Raises:
            ServiceError: transport or service failure
        """
        status, data = await self._get("search-location", {"q": query_text})
        if status == 404:
            return []
        if data is None:
            raise ServiceError(f"search-location failed with status {status}")
        if not isinstance(data, list):
            raise ServiceError("search-location returned an unexpected payload")

        return [SearchResult.from_wire(item) for item in data if isinstance(item, dict)]
