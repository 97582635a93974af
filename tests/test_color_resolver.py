"""
Tests for theme resolution: source URL rules, title/icon handling,
color fallbacks and the theme cache.
"""

import json

import httpx
import pytest

from conftest import mock_http_client
from scrapers import themes
from scrapers.themes import ColorResolver, determine_title, find_theme_source, resolve_icon_url
from utils import const

RAW = "https://raw.githubusercontent.com/pietervdvn/MapComplete"


class FetchCounter:
    """httpx mock handler serving theme files and counting requests."""

    def __init__(self, files: dict[str, object] | None = None, status_code: int = 200):
        self.files = files or {}
        self.status_code = status_code
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if self.status_code != 200:
            return httpx.Response(self.status_code)
        if url not in self.files:
            return httpx.Response(404)
        body = self.files[url]
        if isinstance(body, str):
            return httpx.Response(200, text=body)
        return httpx.Response(200, content=json.dumps(body).encode())


@pytest.fixture
def sampled_icons(monkeypatch):
    """Replace icon downloads, returning a fixed color and recording the URLs."""
    calls = []

    async def fake_sample_icon_color(url: str) -> str:
        calls.append(url)
        return "#3366cc"

    monkeypatch.setattr(themes, "sample_icon_color", fake_sample_icon_color)
    return calls


# ---------------------------------------------------------------------------
# Theme source rules
# ---------------------------------------------------------------------------


class TestFindThemeSource:
    def test_external_theme_url(self):
        source = find_theme_source(
            "https://example.com/themes/bikes.json", "https://mapcomplete.org/theme.html"
        )
        assert source.url == "https://example.com/themes/bikes.json"
        assert source.base_url == "https://example.com/themes"

    @pytest.mark.parametrize(
        "host",
        [
            "https://mapcomplete.org/benches.html?z=14",
            "https://mapcomplete.osm.be/benches",
        ],
    )
    def test_official_hosts(self, host):
        source = find_theme_source("benches", host)
        assert source.base_url == f"{RAW}/master"
        assert source.url == f"{RAW}/master/assets/themes/benches/benches.json"

    def test_development_branch(self):
        source = find_theme_source(
            "benches", "https://pietervdvn.github.io/mc/feature/maplibre/index.html"
        )
        assert source.base_url == f"{RAW}/feature/maplibre"
        assert source.url == f"{RAW}/feature/maplibre/assets/themes/benches/benches.json"

    def test_unknown_host(self):
        assert find_theme_source("benches", "http://localhost:1234/") is None


class TestThemeDetails:
    def test_plain_title(self):
        assert determine_title("Benches", "benches") == "Benches"

    def test_english_title_preferred(self):
        assert determine_title({"nl": "Banken", "en": "Benches"}, "benches") == "Benches"

    def test_first_title_without_english(self):
        assert determine_title({"nl": "Banken", "de": "Bänke"}, "benches") == "Banken"

    def test_missing_title(self):
        assert determine_title(None, "benches") == "benches"

    def test_relative_icon(self):
        assert resolve_icon_url("./assets/themes/benches/bench.svg", f"{RAW}/master") == (
            f"{RAW}/master/assets/themes/benches/bench.svg"
        )

    def test_absolute_icon(self):
        icon = "https://example.com/icon.png"
        assert resolve_icon_url(icon, f"{RAW}/master") == icon


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class TestColorResolver:
    @pytest.mark.asyncio
    async def test_second_resolve_is_served_from_cache(self, sampled_icons):
        handler = FetchCounter(
            {
                f"{RAW}/master/assets/themes/toilets/toilets.json": {
                    "icon": "./assets/themes/toilets/toilets.png",
                    "title": {"en": "Public toilets"},
                }
            }
        )
        cache = {}
        resolver = ColorResolver(cache, client=mock_http_client(handler))

        first = await resolver.resolve("toilets", "https://mapcomplete.org/toilets")
        second = await resolver.resolve("toilets", "https://mapcomplete.org/toilets")

        assert len(handler.requests) == 1
        assert len(sampled_icons) == 1
        assert second is first
        assert cache["toilets"] is first
        assert first.title == "Public toilets"
        assert first.icon_url == f"{RAW}/master/assets/themes/toilets/toilets.png"
        assert first.color == "#3366cc"
        assert first.published is False

    @pytest.mark.asyncio
    async def test_static_color_skips_image_sampling(self, sampled_icons):
        handler = FetchCounter(
            {
                f"{RAW}/master/assets/themes/cyclofix/cyclofix.json": {
                    "icon": "./assets/themes/cyclofix/logo.svg",
                    "title": "Cyclofix",
                }
            }
        )
        resolver = ColorResolver({}, client=mock_http_client(handler))

        theme = await resolver.resolve("cyclofix", "https://mapcomplete.org/cyclofix")

        assert theme.color == "#e2783d"
        assert theme.title == "Cyclofix"
        assert sampled_icons == []

    @pytest.mark.asyncio
    async def test_unknown_host_uses_defaults_without_network(self, sampled_icons):
        handler = FetchCounter()
        cache = {}
        resolver = ColorResolver(cache, client=mock_http_client(handler))

        theme = await resolver.resolve("benches", "http://localhost:1234/")
        await resolver.resolve("benches", "http://localhost:1234/")

        assert handler.requests == []
        assert sampled_icons == []
        assert theme.color == const.DEFAULT_COLOR
        assert theme.icon_url == const.DEFAULT_ICON_URL
        assert theme.title == "benches"
        assert "benches" in cache

    @pytest.mark.asyncio
    async def test_missing_theme_file_falls_back(self, sampled_icons):
        handler = FetchCounter(status_code=500)
        resolver = ColorResolver({}, client=mock_http_client(handler))

        theme = await resolver.resolve("playgrounds", "https://mapcomplete.org/x")

        assert theme.color == const.DEFAULT_COLOR
        assert theme.icon_url == const.DEFAULT_ICON_URL
        assert theme.title == "playgrounds"
        assert sampled_icons == []

    @pytest.mark.asyncio
    async def test_invalid_theme_file_falls_back(self, sampled_icons):
        url = f"{RAW}/master/assets/themes/broken/broken.json"
        handler = FetchCounter({url: "this is not json"})
        resolver = ColorResolver({}, client=mock_http_client(handler))

        theme = await resolver.resolve("broken", "https://mapcomplete.org/broken")

        assert theme.color == const.DEFAULT_COLOR
        assert theme.title == "broken"

    @pytest.mark.asyncio
    async def test_theme_file_without_icon_falls_back(self, sampled_icons):
        url = f"{RAW}/master/assets/themes/noicon/noicon.json"
        handler = FetchCounter({url: {"title": "No icon"}})
        resolver = ColorResolver({}, client=mock_http_client(handler))

        theme = await resolver.resolve("noicon", "https://mapcomplete.org/noicon")

        assert theme.icon_url == const.DEFAULT_ICON_URL
        assert theme.title == "noicon"

    @pytest.mark.asyncio
    async def test_icon_failure_keeps_title_and_icon(self, monkeypatch):
        async def failing_sample(url: str) -> str:
            raise httpx.ConnectError("unreachable")

        monkeypatch.setattr(themes, "sample_icon_color", failing_sample)
        url = "https://example.com/themes/shops.json"
        handler = FetchCounter({url: {"icon": "./shop.png", "title": "Shops"}})
        resolver = ColorResolver({}, client=mock_http_client(handler))

        theme = await resolver.resolve(url, "https://mapcomplete.org/theme.html")

        assert theme.color == const.DEFAULT_COLOR
        assert theme.title == "Shops"
        assert theme.icon_url == "https://example.com/themes/shop.png"
