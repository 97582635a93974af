import logging
from datetime import datetime
from typing import Optional

import httpx
import pytz
from pydantic import ValidationError

from core.config import settings
from schemas import Changeset
from utils import const

# set httpx logging level
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


class OsmChaScraper:
    """Fetches MapComplete changesets from the OSMCha API."""

    def __init__(
        self,
        token: str,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = settings.osmcha_url,
        editor: str = settings.osmcha_editor,
    ):
        self.token = token
        self.base_url = base_url
        self.editor = editor
        self.client = client or httpx.AsyncClient(timeout=settings.request_timeout)
        self.last_error: Optional[str] = None

    async def close(self):
        await self.client.aclose()

    @staticmethod
    def format_date(moment: datetime) -> str:
        return moment.astimezone(pytz.UTC).strftime(const.OSMCHA_DATE_FORMAT)

    async def get_changesets(
        self, since: datetime, page_size: int = settings.osmcha_page_size
    ) -> list[Changeset]:
        """
        Get a single page of changesets created since `since`.
        Returns an empty list when OSMCha can't be reached or answers garbage.
        """
        params = {
            "page_size": page_size,
            "date__gte": self.format_date(since),
            "editor": self.editor,
        }
        headers = {**const.JSON_HEADERS, "Authorization": self.token}

        try:
            response = await self.client.get(
                self.base_url, params=params, headers=headers
            )
            response.raise_for_status()
            features = response.json()["features"]
            if not isinstance(features, list):
                raise TypeError(f"expected a list of features, got {type(features).__name__}")
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            self.last_error = str(e) or e.__class__.__name__
            logger.error(f"Error fetching changesets from OSMCha: {self.last_error}")
            return []

        self.last_error = None
        changesets = []
        for feature in features:
            try:
                changesets.append(Changeset.from_feature(feature))
            except (ValidationError, KeyError, TypeError, AttributeError) as e:
                logger.error(f"Skipping unparsable changeset {feature!r:.100}: {e}")

        logger.info(f"Found {len(changesets)} new changesets")
        return changesets
