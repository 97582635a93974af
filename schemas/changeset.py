"""Changeset and theme schemas."""

from datetime import datetime
from typing import Any, Optional

import pytz
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Changeset(BaseModel):
    """A single MapComplete changeset as reported by OSMCha."""

    model_config = ConfigDict(frozen=True)

    id: int
    user: str
    user_id: str
    theme: str = "unknown"
    host: str = ""
    date: Optional[datetime] = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("metadata", mode="before")
    @classmethod
    def stringify_metadata(cls, value: Any) -> dict[str, str]:
        if not value:
            return {}
        return {str(key): str(item) for key, item in value.items() if item is not None}

    @field_validator("date")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=pytz.UTC)
        return value

    @classmethod
    def from_feature(cls, feature: dict) -> "Changeset":
        """Build a changeset from an OSMCha GeoJSON feature."""
        properties = feature.get("properties") or {}
        metadata = properties.get("metadata") or {}
        return cls(
            id=feature["id"],
            user=properties["user"],
            user_id=str(properties.get("uid", properties["user"])),
            theme=metadata.get("theme") or "unknown",
            host=metadata.get("host") or "",
            date=properties.get("date"),
            metadata=metadata,
        )

    def counter(self, key: str) -> Optional[str]:
        return self.metadata.get(key)


class ThemeInfo(BaseModel):
    """Resolved display details of a theme, cached for the process lifetime."""

    id: str
    title: str
    icon_url: str
    color: str
    # Whether the Home Assistant discovery payloads have been published
    published: bool = False
