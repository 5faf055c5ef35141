"""Tests del cliente HTTP del backend de propiedades."""

import asyncio
import json

import pytest
from aiohttp import test_utils, web
from tenacity import wait_none

from househunter.exceptions import DataSourceError
from househunter.models import Tier
from househunter.session import TriageSession
from househunter.sources import BackendDataSource, FallbackDataSource

PROPERTIES = [
    {"id": "a", "price": 210_000, "address": "1 Oak St", "gis_tier": "gold"},
    {"id": "b", "price": 260_000, "address": "2 Elm St", "gis_tier": "bronze"},
    {"id": "bad", "price": None},
]

SQUARE = [[-78.5, 38.0], [-78.4, 38.0], [-78.4, 38.1], [-78.5, 38.1]]

ZONES = {
    "type": "FeatureCollection",
    "features": [
        {"type": "Feature", "properties": {"contour": 35}, "geometry": {"type": "Polygon", "coordinates": [SQUARE]}},
        {"type": "Feature", "properties": {"contour": 50}, "geometry": None},
    ],
}


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(BackendDataSource._get_json.retry, "wait", wait_none())


def _app(properties=None, zones=None, **routes) -> web.Application:
    """App con /properties y /zones; `routes` reemplaza handlers por path."""

    async def properties_handler(request):
        return web.json_response(PROPERTIES if properties is None else properties)

    async def zones_handler(request):
        return web.json_response(ZONES if zones is None else zones)

    handlers = {"/properties": properties_handler, "/zones": zones_handler}
    handlers.update(routes)

    app = web.Application()
    for path, handler in handlers.items():
        if handler is not None:
            app.router.add_get(path, handler)
    return app


async def _fetch(app, settings, **overrides):
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        update = {"api_base_url": str(server.make_url("/")), **overrides}
        source = BackendDataSource(settings.model_copy(update=update))
        return await source.fetch_listings_and_zones()
    finally:
        await server.close()


def _run(app, settings, **overrides):
    return asyncio.run(_fetch(app, settings, **overrides))


class TestFetch:
    def test_listings_and_zones(self, settings):
        bundle = _run(_app(), settings)
        assert [listing.id for listing in bundle.listings] == ["a", "b"]
        assert [listing.zone_tier for listing in bundle.listings] == [Tier.GOLD, Tier.BRONZE]
        assert [zone.tier for zone in bundle.zones] == [Tier.GOLD]

    def test_local_geojson_skips_zones_endpoint(self, settings, tmp_path):
        path = tmp_path / "zones.geojson"
        local = dict(ZONES, features=[dict(ZONES["features"][0], properties={"contour": 55})])
        path.write_text(json.dumps(local), encoding="utf-8")

        bundle = _run(_app(**{"/zones": None}), settings, zones_geojson_path=path)
        assert [zone.tier for zone in bundle.zones] == [Tier.SILVER]

    def test_unreadable_local_geojson_gives_no_zones(self, settings, tmp_path):
        path = tmp_path / "zones.geojson"
        path.write_text("{broken", encoding="utf-8")

        bundle = _run(_app(**{"/zones": None}), settings, zones_geojson_path=path)
        assert bundle.zones == []
        assert len(bundle.listings) == 2


class TestFailures:
    def test_error_status(self, settings):
        async def failing(request):
            return web.json_response({"detail": "boom"}, status=500)

        with pytest.raises(DataSourceError):
            _run(_app(**{"/properties": failing}), settings)

    def test_missing_zones_endpoint(self, settings):
        with pytest.raises(DataSourceError):
            _run(_app(**{"/zones": None}), settings)

    def test_body_is_not_json(self, settings):
        async def html(request):
            return web.Response(text="<html>maintenance</html>", content_type="text/html")

        with pytest.raises(DataSourceError):
            _run(_app(**{"/properties": html}), settings)

    def test_properties_must_be_a_list(self, settings):
        with pytest.raises(DataSourceError):
            _run(_app(properties={"items": PROPERTIES}), settings)

    def test_zones_must_be_an_object(self, settings):
        with pytest.raises(DataSourceError):
            _run(_app(zones=[ZONES]), settings)

    def test_timeouts_are_retried_three_times(self, settings):
        calls = []

        async def slow(request):
            calls.append(request.path)
            await asyncio.sleep(0.5)
            return web.json_response(PROPERTIES)

        with pytest.raises(DataSourceError):
            _run(_app(**{"/properties": slow}), settings, request_timeout_seconds=0.1)
        assert calls == ["/properties"] * 3

    def test_connection_refused(self, settings):
        async def closed_port():
            server = test_utils.TestServer(web.Application())
            await server.start_server()
            url = str(server.make_url("/"))
            await server.close()
            source = BackendDataSource(settings.model_copy(update={"api_base_url": url}))
            return await source.fetch_listings_and_zones()

        with pytest.raises(DataSourceError):
            asyncio.run(closed_port())


class TestSessionIntegration:
    def test_backend_error_falls_back_offline(self, settings, persistence):
        async def failing(request):
            return web.Response(status=503)

        async def load():
            server = test_utils.TestServer(_app(**{"/properties": failing}))
            await server.start_server()
            try:
                session_settings = settings.model_copy(update={"api_base_url": str(server.make_url("/"))})
                session = TriageSession(
                    settings=session_settings,
                    fallback=FallbackDataSource(settings),
                    persistence=persistence,
                )
                await session.load_data()
                return session
            finally:
                await server.close()

        session = asyncio.run(load())
        assert session.offline is True
        assert len(session.listings) == settings.fallback_listing_count
