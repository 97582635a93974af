import json
import logging
from typing import Any, Iterable, Protocol

from aiomqtt import MqttError

from core.config import settings
from publishers import home_assistant
from schemas import Statistics, ThemeInfo, ThemeStatistics
from utils.helpers import clean_theme_name

logger = logging.getLogger(__name__)


class PublishClient(Protocol):
    async def publish(
        self, topic: str, payload: Any = None, qos: int = 0, retain: bool = False
    ) -> None: ...


def encode_payload(value: Any) -> str:
    """Numbers and strings are published as plain text, everything else as JSON."""
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return str(value)
    return json.dumps(value)


def flatten_topics(root: str, payload: dict) -> list[tuple[str, str]]:
    """
    Flatten a statistics payload into (topic, message) pairs.

    The whole payload goes to `root`, every first-level value to
    `root/key` and, for mappings, every second-level value to
    `root/key/subkey`. Deeper values are only published as part of
    their parent's JSON.
    """
    messages = [(root, json.dumps(payload))]
    for key, value in payload.items():
        messages.append((f"{root}/{key}", encode_payload(value)))
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                messages.append((f"{root}/{key}/{sub_key}", encode_payload(sub_value)))
    return messages


class TopicPublisher:
    """Publishes statistics and Home Assistant discovery payloads as retained messages."""

    def __init__(
        self,
        client: PublishClient,
        root: str = settings.mqtt_topic_root,
        discovery_prefix: str = settings.discovery_prefix,
        version: str = settings.version,
    ):
        self.client = client
        self.root = root
        self.discovery_prefix = discovery_prefix
        self.version = version
        self.failed_publishes = 0

    async def publish(self, topic: str, message: str) -> bool:
        try:
            await self.client.publish(topic, message, qos=0, retain=True)
            return True
        except MqttError as e:
            self.failed_publishes += 1
            logger.warning(f"Failed to publish to {topic}: {e}")
            return False

    async def publish_tree(self, root: str, payload: dict):
        for topic, message in flatten_topics(root, payload):
            await self.publish(topic, message)

    def theme_topic(self, theme_id: str) -> str:
        return f"{self.root}/theme/{clean_theme_name(theme_id)}"

    async def publish_statistics(self, statistics: Statistics):
        await self.publish_tree(self.root, statistics.to_payload())

    async def publish_sensor_config(self):
        logger.info("Publishing sensor configuration to MQTT")
        configs = home_assistant.sensor_configs(
            self.root, self.discovery_prefix, self.version
        )
        for topic, payload in configs.items():
            await self.publish(topic, json.dumps(payload))

    async def publish_theme_discovery(self, themes: Iterable[ThemeInfo]):
        """Publish the discovery payloads of every theme not published before."""
        for theme in themes:
            if theme.published:
                continue

            logger.info(f"Publishing sensor configuration for {theme.title}")
            configs = home_assistant.theme_sensor_configs(
                theme, self.root, self.discovery_prefix, self.version
            )
            for topic, payload in configs.items():
                await self.publish(topic, json.dumps(payload))
            theme.published = True

    async def publish_theme_statistics(
        self,
        theme_statistics: dict[str, ThemeStatistics],
        themes: dict[str, ThemeInfo],
    ):
        for theme_id, statistics in theme_statistics.items():
            topic = self.theme_topic(theme_id)
            await self.publish_tree(topic, statistics.to_payload())
            if theme_id in themes:
                await self.publish(f"{topic}/icon", themes[theme_id].icon_url)

    async def cleanup_removed_themes(
        self, present_theme_ids: Iterable[str], themes: dict[str, ThemeInfo]
    ):
        """
        Publish empty statistics for cached themes without changesets today.
        The discovery payloads are kept, only the sensor values are reset.
        """
        present = set(present_theme_ids)
        empty = ThemeStatistics().to_payload()
        for theme_id in themes:
            if theme_id in present:
                continue
            logger.info(f"Resetting statistics for theme {theme_id}")
            await self.publish_tree(self.theme_topic(theme_id), empty)
