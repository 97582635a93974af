"""
Statistics schemas published to MQTT.

Field aliases are the wire names, Home Assistant value templates
(e.g. `{{ value_json.changesets.lastColor }}`) depend on them.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

RGB = tuple[int, int, int]


class StatisticsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class ChangesetEntry(StatisticsModel):
    id: int
    user: str
    theme: str
    color: Optional[str] = None
    color_rgb: Optional[RGB] = Field(default=None, alias="colorRgb")
    url: str


class ChangesetStatistics(StatisticsModel):
    total: int = 0
    last: Optional[int] = None
    last_url: Optional[str] = Field(default=None, alias="lastUrl")
    last_color: Optional[str] = Field(default=None, alias="lastColor")
    last_color_rgb: Optional[RGB] = Field(default=None, alias="lastColorRgb")
    colors: list[str] = Field(default_factory=list)
    colors_str: str = Field(default="", alias="colorsStr")
    colors_rgb: list[RGB] = Field(default_factory=list, alias="colorsRgb")
    colors_rgb_str: str = Field(default="", alias="colorsRgbStr")
    changesets: list[ChangesetEntry] = Field(default_factory=list)


class UserStatistics(StatisticsModel):
    total: int = 0
    top: Optional[str] = None
    last: Optional[str] = None
    users: dict[str, int] = Field(default_factory=dict)


class ThemeCountStatistics(StatisticsModel):
    total: int = 0
    top: Optional[str] = None
    last: Optional[str] = None
    themes: dict[str, int] = Field(default_factory=dict)


class Statistics(StatisticsModel):
    """Statistics over all changesets of the day."""

    changesets: ChangesetStatistics = Field(default_factory=ChangesetStatistics)
    users: UserStatistics = Field(default_factory=UserStatistics)
    themes: ThemeCountStatistics = Field(default_factory=ThemeCountStatistics)
    questions: int = 0
    images: int = 0
    points: int = 0


class ThemeChangesetStatistics(StatisticsModel):
    total: int = 0
    last: Optional[int] = None
    last_url: Optional[str] = Field(default=None, alias="lastUrl")


class ThemeStatistics(StatisticsModel):
    """Statistics over the changesets of a single theme."""

    changesets: ThemeChangesetStatistics = Field(
        default_factory=ThemeChangesetStatistics
    )
    users: UserStatistics = Field(default_factory=UserStatistics)
    questions: int = 0
    images: int = 0
    points: int = 0
