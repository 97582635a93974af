"""
Pytest configuration and shared fixtures for the MapComplete MQTT tests.
"""

from datetime import datetime
from typing import Optional

import httpx
import pytest
import pytz

from aggregation.daily_state import DailyState
from publishers.fake_client import FakeClient
from publishers.topic_publisher import TopicPublisher
from schemas import Changeset, ThemeInfo
from utils import const


def make_changeset(
    id: int,
    user: str = "user1",
    theme: str = "cyclofix",
    *,
    user_id: Optional[str] = None,
    host: str = "https://mapcomplete.org/cyclofix.html",
    date: Optional[datetime] = None,
    **metadata: str,
) -> Changeset:
    """Create a changeset; extra keyword arguments become metadata tags (use _ for -)."""
    return Changeset(
        id=id,
        user=user,
        user_id=user_id or f"uid-{user}",
        theme=theme,
        host=host,
        date=date,
        metadata={key.replace("_", "-"): value for key, value in metadata.items()},
    )


class StubResolver:
    """Resolves themes from the static color table without any network access."""

    def __init__(
        self,
        cache: Optional[dict[str, ThemeInfo]] = None,
        failing: tuple[str, ...] = (),
    ):
        self.cache = {} if cache is None else cache
        self.failing = failing
        self.calls: list[str] = []

    async def resolve(self, theme: str, host: str) -> ThemeInfo:
        self.calls.append(theme)
        if theme in self.failing:
            raise RuntimeError(f"cannot resolve {theme}")
        if theme not in self.cache:
            self.cache[theme] = ThemeInfo(
                id=theme,
                title=theme.title(),
                icon_url=f"https://example.com/{theme}.svg",
                color=const.THEME_COLORS.get(theme, const.DEFAULT_COLOR),
            )
        return self.cache[theme]


@pytest.fixture
def now():
    return datetime(2024, 5, 17, 12, 30, tzinfo=pytz.UTC)


@pytest.fixture
def state(now):
    return DailyState(now)


@pytest.fixture
def stub_resolver():
    return StubResolver()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def publisher(fake_client):
    return TopicPublisher(
        fake_client,
        root="mapcomplete/statistics",
        discovery_prefix="homeassistant",
        version="1.0.0",
    )


@pytest.fixture
def sample_changesets():
    """The changesets from the end-to-end example."""
    return [
        make_changeset(1231, "user1", "etymology"),
        make_changeset(1233, "user2", "cyclofix"),
        make_changeset(1234, "user2", "advertising"),
    ]


def mock_http_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))
