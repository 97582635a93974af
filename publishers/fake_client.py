import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class FakeClient:
    """
    Stand-in for the MQTT client in dry-run mode and tests.

    Published messages are kept by topic; retained messages overwrite
    the previous value just like on a broker.
    """

    def __init__(self):
        self.messages: dict[str, str] = {}
        self.publish_count = 0

    async def publish(
        self,
        topic: str,
        payload: Optional[str | bytes] = None,
        qos: int = 0,
        retain: bool = False,
        **kwargs,
    ) -> None:
        logger.debug(f"FakeClient.publish({topic}, {payload}, retain={retain})")
        if isinstance(payload, bytes):
            payload = payload.decode()
        self.messages[topic] = "" if payload is None else str(payload)
        self.publish_count += 1

    def to_tree(self) -> dict:
        """The published messages as a nested topic tree."""
        tree = {"topic": "", "children": []}
        for topic, message in self.messages.items():
            current = tree
            for part in topic.split("/"):
                child = next(
                    (c for c in current["children"] if c["topic"] == part), None
                )
                if child is None:
                    child = {"topic": part, "children": []}
                    current["children"].append(child)
                current = child
            current["message"] = message
        return tree

    def dump(self, path: str | Path):
        path = Path(path)
        with path.open("w") as f:
            json.dump(self.to_tree(), f, indent=2)
        logger.info(f"Saved {len(self.messages)} topics to {path}")
