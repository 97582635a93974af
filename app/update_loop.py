import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

import pytz

from aggregation.aggregator import Aggregator
from aggregation.daily_state import DailyState
from core.config import settings
from publishers.topic_publisher import TopicPublisher
from scrapers.osmcha import OsmChaScraper
from scrapers.themes import ColorResolver

logger = logging.getLogger(__name__)


@dataclass
class UpdateContext:
    """Everything an update cycle reads and mutates."""

    source: OsmChaScraper
    publisher: TopicPublisher
    state: DailyState = field(default_factory=DailyState)
    resolver: Optional[ColorResolver] = None

    def __post_init__(self):
        if self.resolver is None:
            self.resolver = ColorResolver(self.state.theme_cache)


class UpdateLoop:
    def __init__(
        self,
        context: UpdateContext,
        page_size: int = settings.osmcha_page_size,
        fetch_overlap: int = settings.fetch_overlap,
    ):
        self.context = context
        self.aggregator = Aggregator(context.state)
        self.page_size = page_size
        self.fetch_overlap = timedelta(seconds=fetch_overlap)

    async def start(self):
        """Publish the configuration of the sensors that don't depend on themes."""
        await self.context.publisher.publish_sensor_config()

    async def run_cycle(self, now: Optional[datetime] = None) -> bool:
        """
        Run a single update, errors are logged and left for the next cycle.
        Returns True when the cycle completed with fresh changesets.
        """
        try:
            return await self.update(now)
        except Exception as e:
            logger.exception(f"Error during update: {e}")
            return False

    async def update(self, now: Optional[datetime] = None) -> bool:
        """
        Fetch, aggregate and publish. The fetch window only moves forward when
        OSMCha answered, so a failed fetch is retried from the same point.
        """
        logger.info("Performing update")
        now = now or datetime.now(pytz.UTC)
        state = self.context.state
        publisher = self.context.publisher

        state.check_rollover(now)

        source = self.context.source
        changesets = await source.get_changesets(
            state.since(self.fetch_overlap), self.page_size
        )
        fetched = source.last_error is None
        self.aggregator.ingest(changesets)

        statistics = await self.aggregator.compute_statistics(self.context.resolver)
        logger.info(
            f"Total changesets for today: {statistics.changesets.total} by {statistics.users.total} users, "
            f"using {statistics.themes.total} different themes"
        )

        await publisher.publish_statistics(statistics)
        await publisher.publish_theme_discovery(state.theme_cache.values())
        await publisher.publish_theme_statistics(
            self.aggregator.compute_theme_statistics(), state.theme_cache
        )
        if state.cleanup_pending:
            await publisher.cleanup_removed_themes(
                self.aggregator.present_themes(), state.theme_cache
            )
            state.cleanup_pending = False

        if not fetched:
            logger.warning(
                f"Fetching changesets failed, retrying from {state.last_update} next cycle"
            )
            return False
        state.mark_updated(now)
        return True
