import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import urljoin

import httpx

from core.config import settings
from schemas import ThemeInfo
from scrapers.exceptions import ThemeFileError
from utils import const
from utils.colors import sample_icon_color

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThemeSource:
    """Where to download a theme file, and what relative icons resolve against."""

    url: str
    base_url: str


def repository_theme_source(base_url: str, theme: str) -> ThemeSource:
    return ThemeSource(
        url=f"{base_url}/assets/themes/{theme}/{theme}.json", base_url=base_url
    )


def external_theme_source(theme: str, host: str) -> ThemeSource:
    # External themes are loaded from their own URL
    return ThemeSource(url=theme, base_url=theme.rsplit("/", 1)[0])


def official_theme_source(theme: str, host: str) -> ThemeSource:
    return repository_theme_source(f"{const.MAPCOMPLETE_RAW_BASE_URL}/master", theme)


def development_theme_source(theme: str, host: str) -> ThemeSource:
    # https://pietervdvn.github.io/mc/feature/maplibre/index.html -> feature/maplibre
    branch = "/".join(host.split("/")[4:-1])
    return repository_theme_source(f"{const.MAPCOMPLETE_RAW_BASE_URL}/{branch}", theme)


ThemeRule = tuple[Callable[[str, str], bool], Callable[[str, str], ThemeSource]]

# Evaluated in order, the first matching rule wins
THEME_SOURCE_RULES: list[ThemeRule] = [
    (lambda theme, host: theme.startswith("https://"), external_theme_source),
    (lambda theme, host: host.startswith(const.OFFICIAL_HOSTS), official_theme_source),
    (
        lambda theme, host: host.startswith(const.DEVELOPMENT_HOST),
        development_theme_source,
    ),
]


def find_theme_source(theme: str, host: str) -> Optional[ThemeSource]:
    for matches, build_source in THEME_SOURCE_RULES:
        if matches(theme, host):
            return build_source(theme, host)
    return None


def determine_title(title: Any, default: str) -> str:
    """A theme title is either a string or a mapping of language to string."""
    if isinstance(title, dict):
        if title.get("en"):
            return str(title["en"])
        for value in title.values():
            return str(value)
        return default
    if title:
        return str(title)
    return default


def resolve_icon_url(icon: str, base_url: str) -> str:
    if icon.startswith("."):
        return urljoin(base_url.rstrip("/") + "/", icon)
    return icon


def default_theme_info(theme: str) -> ThemeInfo:
    return ThemeInfo(
        id=theme,
        title=theme,
        icon_url=const.DEFAULT_ICON_URL,
        color=const.DEFAULT_COLOR,
    )


class ColorResolver:
    """
    Resolves the color, icon and title of MapComplete themes.

    Results are stored in the given cache, so every theme is downloaded
    at most once per process. Resolution never raises, the worst case is
    the default color and icon with the theme id as title.
    """

    def __init__(
        self,
        cache: dict[str, ThemeInfo],
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.cache = cache
        self.client = client or httpx.AsyncClient(
            timeout=settings.request_timeout,
            headers=const.UA_HEADER,
            follow_redirects=True,
        )

    async def close(self):
        await self.client.aclose()

    async def resolve(self, theme: str, host: str) -> ThemeInfo:
        if theme in self.cache:
            return self.cache[theme]

        logger.debug(f"Getting theme details for {theme} on {host}")
        theme_info = await self._resolve_uncached(theme, host)
        self.cache[theme] = theme_info
        return theme_info

    async def _resolve_uncached(self, theme: str, host: str) -> ThemeInfo:
        source = find_theme_source(theme, host)
        if source is None:
            logger.info(
                f"No theme file found for {theme} on {host}, returning default information"
            )
            return default_theme_info(theme)

        try:
            definition = await self.fetch_theme_file(source.url)
            icon_url = resolve_icon_url(definition["icon"], source.base_url)
            title = determine_title(definition.get("title"), theme)
        except ThemeFileError as e:
            logger.error(
                f"Failed to get theme file for {theme} from {e.url}, using defaults: {e.message}"
            )
            return default_theme_info(theme)

        color = await self.determine_color(theme, icon_url)
        logger.debug(f"Theme details: {theme}, {color}, {icon_url}, {title}")
        return ThemeInfo(id=theme, title=title, icon_url=icon_url, color=color)

    async def fetch_theme_file(self, url: str) -> dict:
        try:
            response = await self.client.get(url, headers=const.JSON_HEADERS)
            response.raise_for_status()
            definition = response.json()
        except httpx.HTTPError as e:
            raise ThemeFileError(f"HTTP error: {e}", url)
        except ValueError as e:
            raise ThemeFileError(f"Invalid JSON: {e}", url)

        if not isinstance(definition, dict) or not isinstance(
            definition.get("icon"), str
        ):
            raise ThemeFileError("Theme file has no icon", url)
        return definition

    async def determine_color(self, theme: str, icon_url: str) -> str:
        if theme in const.THEME_COLORS:
            return const.THEME_COLORS[theme]

        logger.info(f"Downloading theme image for {theme} from {icon_url}")
        try:
            return await sample_icon_color(icon_url)
        except Exception as e:
            logger.error(
                f"Failed to get color for {theme} from {icon_url}, using default: {e}"
            )
            return const.DEFAULT_COLOR
