"""
Schemas package.

Re-exports the pydantic schemas for easy importing:
    from schemas import Changeset, Statistics, ...
"""

from schemas.changeset import Changeset, ThemeInfo
from schemas.statistics import (
    ChangesetEntry,
    ChangesetStatistics,
    Statistics,
    ThemeChangesetStatistics,
    ThemeCountStatistics,
    ThemeStatistics,
    UserStatistics,
)

__all__ = [
    "Changeset",
    "ChangesetEntry",
    "ChangesetStatistics",
    "Statistics",
    "ThemeChangesetStatistics",
    "ThemeCountStatistics",
    "ThemeInfo",
    "ThemeStatistics",
    "UserStatistics",
]
