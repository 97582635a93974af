import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytz

from schemas import Changeset, ThemeInfo

logger = logging.getLogger(__name__)


def start_of_day(moment: datetime) -> datetime:
    """Midnight (UTC) of the calendar day `moment` falls on."""
    moment = moment.astimezone(pytz.UTC)
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class DailyState:
    """
    The changesets of the current day and the theme cache.

    Changesets are kept sorted ascending by id and are unique by id.
    The theme cache outlives day rollovers, theme colors don't change.
    """

    def __init__(self, now: Optional[datetime] = None):
        now = now or datetime.now(pytz.UTC)
        self.day_start: datetime = start_of_day(now)
        self.last_update: datetime = self.day_start
        self.changesets: list[Changeset] = []
        self.theme_cache: dict[str, ThemeInfo] = {}
        # Set on rollover, cleared once yesterday's themes have been reset
        self.cleanup_pending = False
        self._ids: set[int] = set()

    def check_rollover(self, now: Optional[datetime] = None) -> bool:
        """
        Reset the changesets when `now` is on a later day than `day_start`.

        The full UTC date is compared, a changed month with the same
        day-of-month is a new day as well.
        Returns True when a rollover happened.
        """
        now = now or datetime.now(pytz.UTC)
        if start_of_day(now).date() == self.day_start.date():
            return False

        logger.info("New day, resetting changesets")
        self.changesets = []
        self._ids = set()
        self.day_start = start_of_day(now)
        self.last_update = self.day_start
        self.cleanup_pending = True
        return True

    def add(self, changesets: Iterable[Changeset]) -> int:
        """
        Add changesets not seen before and re-sort by id.
        Changesets dated before the start of the day are ignored.
        Returns the number of changesets added.
        """
        added = 0
        for changeset in changesets:
            if changeset.id in self._ids:
                continue
            if changeset.date is not None and changeset.date < self.day_start:
                logger.debug(
                    f"Skipping changeset {changeset.id} from {changeset.date}, before {self.day_start}"
                )
                continue
            self._ids.add(changeset.id)
            self.changesets.append(changeset)
            added += 1

        self.changesets.sort(key=lambda c: c.id)
        return added

    def since(self, overlap: timedelta) -> datetime:
        """Timestamp to fetch new changesets from."""
        return self.last_update - overlap

    def mark_updated(self, now: Optional[datetime] = None):
        self.last_update = now or datetime.now(pytz.UTC)
