"""Tests for GeocodeClient against a local aiohttp server"""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp import test_utils

from services.geocoding.client import GeocodeClient
from services.geocoding.errors import NotFound, ServiceError
from services.geocoding.models import Coordinates, ResolvedAddress


def build_app(seen):
    async def reverse(request):
        seen.append(("reverse", dict(request.query), request.headers.get("Authorization")))
        if request.query["lat"] == "0.0":
            return web.json_response({"error": "boom"}, status=500)
        return web.json_response({"address": "MG Road", "city": "Bangalore", "postalCode": "560001"})

    async def geocode(request):
        address = request.query["address"]
        seen.append(("geocode", address))
        if address == "nowhere":
            return web.json_response({"error": "Address not found"}, status=404)
        if address == "garbled":
            return web.json_response({"lat": "abc", "lng": 77.6})
        if address == "broken":
            return web.Response(status=503)
        return web.json_response({"lat": 13.0, "lng": 77.6})

    async def search(request):
        q = request.query["q"]
        seen.append(("search", q))
        if q == "empty":
            return web.json_response([])
        if q == "broken":
            return web.Response(status=500)
        return web.json_response(
            [
                {"lat": 12.9719, "lng": 77.6412, "title": "Indiranagar", "description": "Indiranagar, Bangalore"},
                {"title": "100 Feet Road", "description": "100 Feet Road, Indiranagar, Bangalore"},
                "junk",
            ]
        )

    app = web.Application()
    app.router.add_get("/api/reverse-geocode", reverse)
    app.router.add_get("/api/geocode-address", geocode)
    app.router.add_get("/api/search-location", search)
    return app


@pytest_asyncio.fixture
async def api():
    seen = []
    server = test_utils.TestServer(build_app(seen))
    await server.start_server()
    client = GeocodeClient(base_url=str(server.make_url("/api")), timeout=5, token="secret")
    yield client, seen
    await client.close()
    await server.close()


@pytest.mark.asyncio
async def test_reverse_geocode(api):
    client, seen = api

    resolved = await client.reverse_geocode(Coordinates(lat=12.97, lng=77.59))

    assert resolved == ResolvedAddress(address="MG Road", city="Bangalore", postal_code="560001")
    assert seen == [("reverse", {"lat": "12.97", "lng": "77.59"}, "Bearer secret")]


@pytest.mark.asyncio
async def test_reverse_geocode_server_error(api):
    client, _ = api

    with pytest.raises(ServiceError):
        await client.reverse_geocode(Coordinates(lat=0, lng=0))


@pytest.mark.asyncio
async def test_forward_geocode(api):
    client, _ = api

    assert await client.forward_geocode("MG Road, Bangalore") == Coordinates(lat=13.0, lng=77.6)


@pytest.mark.asyncio
@pytest.mark.parametrize("address", ["nowhere", "garbled"])
async def test_forward_geocode_not_found(api, address):
    client, _ = api

    with pytest.raises(NotFound):
        await client.forward_geocode(address)


@pytest.mark.asyncio
async def test_forward_geocode_service_error(api):
    client, _ = api

    with pytest.raises(ServiceError):
        await client.forward_geocode("broken")


@pytest.mark.asyncio
async def test_search_places(api):
    client, _ = api

    results = await client.search_places("indira")

    assert len(results) == 2
    assert results[0].coordinate == Coordinates(lat=12.9719, lng=77.6412)
    assert results[1].coordinate is None
    assert results[1].title == "100 Feet Road"


@pytest.mark.asyncio
async def test_search_places_empty_is_not_an_error(api):
    client, _ = api

    assert await client.search_places("empty") == []


@pytest.mark.asyncio
async def test_search_places_service_error(api):
    client, _ = api

    with pytest.raises(ServiceError):
        await client.search_places("broken")


@pytest.mark.asyncio
async def test_unreachable_service_raises_service_error():
    server = test_utils.TestServer(build_app([]))
    await server.start_server()
    base_url = str(server.make_url("/api"))
    await server.close()

    async with GeocodeClient(base_url=base_url, timeout=2) as client:
        with pytest.raises(ServiceError):
            await client.search_places("indiranagar")
