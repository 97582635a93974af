import logging
from typing import Iterable, Optional

from aggregation.daily_state import DailyState
from schemas import (
    Changeset,
    ChangesetEntry,
    ChangesetStatistics,
    Statistics,
    ThemeChangesetStatistics,
    ThemeCountStatistics,
    ThemeStatistics,
    UserStatistics,
)
from scrapers.themes import ColorResolver
from utils import const
from utils.helpers import count_sorted, find_top, hex_to_rgb, parse_counter

logger = logging.getLogger(__name__)


def sum_counter(changesets: Iterable[Changeset], key: str) -> int:
    return sum(parse_counter(changeset.counter(key)) for changeset in changesets)


def changeset_url(changeset_id: Optional[int]) -> Optional[str]:
    if changeset_id is None:
        return None
    return const.OSM_CHANGESET_URL.format(changeset_id)


def user_statistics(changesets: list[Changeset]) -> UserStatistics:
    users = count_sorted(c.user for c in changesets)
    return UserStatistics(
        total=len({c.user_id for c in changesets}),
        top=find_top(users),
        last=changesets[-1].user if changesets else None,
        users=users,
    )


class Aggregator:
    """Ingests changesets into the daily state and derives the statistics."""

    def __init__(self, state: DailyState):
        self.state = state

    @property
    def changesets(self) -> list[Changeset]:
        return self.state.changesets

    def ingest(self, new_changesets: Iterable[Changeset]) -> int:
        added = self.state.add(new_changesets)
        logger.info(
            f"Added {added} new changesets, {len(self.changesets)} changesets today"
        )
        return added

    def present_themes(self) -> set[str]:
        return {c.theme for c in self.changesets}

    async def resolve_colors(self, resolver: ColorResolver) -> list[Optional[str]]:
        """
        Resolve the color of every changeset, in order.
        A changeset whose theme can't be resolved gets None.
        """
        colors: list[Optional[str]] = []
        for changeset in self.changesets:
            try:
                theme = await resolver.resolve(changeset.theme, changeset.host)
                colors.append(theme.color)
            except Exception as e:
                logger.error(
                    f"Error while getting theme details for changeset {changeset.id}: {e}"
                )
                colors.append(None)
        return colors

    async def compute_statistics(self, resolver: ColorResolver) -> Statistics:
        changesets = self.changesets
        colors = await self.resolve_colors(resolver)

        entries = [
            ChangesetEntry(
                id=changeset.id,
                user=changeset.user,
                theme=changeset.theme,
                color=color,
                color_rgb=hex_to_rgb(color) if color else None,
                url=changeset_url(changeset.id),
            )
            for changeset, color in zip(changesets, colors)
        ]
        resolved_colors = [color for color in colors if color]
        colors_rgb = [hex_to_rgb(color) for color in resolved_colors]

        last = changesets[-1] if changesets else None
        last_color = None
        if last is not None:
            # Keep the last fields complete even if the last theme failed
            last_color = colors[-1] or const.DEFAULT_COLOR

        themes = count_sorted(c.theme for c in changesets)

        return Statistics(
            changesets=ChangesetStatistics(
                total=len(changesets),
                last=last.id if last else None,
                last_url=changeset_url(last.id if last else None),
                last_color=last_color,
                last_color_rgb=hex_to_rgb(last_color) if last_color else None,
                colors=resolved_colors,
                colors_str=",".join(resolved_colors),
                colors_rgb=colors_rgb,
                colors_rgb_str=",".join(
                    str(channel) for rgb in colors_rgb for channel in rgb
                ),
                changesets=entries,
            ),
            users=user_statistics(changesets),
            themes=ThemeCountStatistics(
                total=len(themes),
                top=find_top(themes),
                last=last.theme if last else None,
                themes=themes,
            ),
            **{
                name: sum_counter(changesets, key)
                for name, key in const.METADATA_COUNTERS.items()
            },
        )

    def compute_theme_statistics(self) -> dict[str, ThemeStatistics]:
        """Statistics for each theme used today, keyed by theme id."""
        by_theme: dict[str, list[Changeset]] = {}
        for changeset in self.changesets:
            by_theme.setdefault(changeset.theme, []).append(changeset)

        theme_statistics = {}
        for theme, changesets in by_theme.items():
            last = changesets[-1]
            theme_statistics[theme] = ThemeStatistics(
                changesets=ThemeChangesetStatistics(
                    total=len(changesets),
                    last=last.id,
                    last_url=changeset_url(last.id),
                ),
                users=user_statistics(changesets),
                **{
                    name: sum_counter(changesets, key)
                    for name, key in const.METADATA_COUNTERS.items()
                },
            )
        return theme_statistics
