import asyncio
import logging
import sys

import aiomqtt
from apscheduler.schedulers.asyncio import AsyncIOScheduler

from aggregation.daily_state import DailyState
from app.scheduler import setup_scheduler
from app.update_loop import UpdateContext, UpdateLoop
from core.config import settings
from publishers.fake_client import FakeClient
from publishers.topic_publisher import TopicPublisher
from scrapers.osmcha import OsmChaScraper
from scrapers.themes import ColorResolver

logging.basicConfig(
    format="%(levelname)s::%(asctime)s::%(pathname)s::%(lineno)d - %(message)s",
    datefmt="%d-%b-%y %H:%M:%S",
    level=settings.logging_level,
    handlers=[logging.StreamHandler(), logging.FileHandler(settings.log_file)],
)

logger = logging.getLogger(__name__)

reconnect_delay = 5  # seconds


async def dry_run(source: OsmChaScraper, state: DailyState, resolver: ColorResolver) -> bool:
    """Run a single cycle against a fake broker and save what would be published."""
    client = FakeClient()
    context = UpdateContext(
        source=source, publisher=TopicPublisher(client), state=state, resolver=resolver
    )
    update_loop = UpdateLoop(context)
    await update_loop.start()
    completed = await update_loop.run_cycle()
    client.dump(settings.dry_run_output)
    return completed


async def serve(source: OsmChaScraper, state: DailyState, resolver: ColorResolver):
    """Keep a broker connection open and update on an interval, reconnecting on errors."""
    while True:
        scheduler = None
        try:
            logger.info(
                "Connecting to MQTT broker %s:%s", settings.mqtt_host, settings.mqtt_port
            )
            async with aiomqtt.Client(
                settings.mqtt_host,
                port=settings.mqtt_port,
                username=settings.mqtt_username,
                password=settings.mqtt_password,
            ) as client:
                context = UpdateContext(
                    source=source,
                    publisher=TopicPublisher(client),
                    state=state,
                    resolver=resolver,
                )
                update_loop = UpdateLoop(context)
                await update_loop.start()

                scheduler = AsyncIOScheduler()
                setup_scheduler(scheduler, update_loop)
                scheduler.start()

                # Nothing is subscribed, this only returns when the connection drops
                async for _ in client.messages:
                    pass
        except aiomqtt.MqttError as e:
            logger.warning("MQTT error %s; reconnecting in %ss", e, reconnect_delay)
        finally:
            if scheduler:
                scheduler.shutdown(wait=False)
        await asyncio.sleep(reconnect_delay)


async def main() -> int:
    if not settings.osmcha_token:
        logger.error("OSMCHA_TOKEN is not set")
        return 1

    state = DailyState()
    source = OsmChaScraper(settings.osmcha_token)
    resolver = ColorResolver(state.theme_cache)
    try:
        if settings.dry_run:
            logger.info("Dry run, publishing to a fake client")
            return 0 if await dry_run(source, state, resolver) else 1
        await serve(source, state, resolver)
    finally:
        await source.close()
        await resolver.close()
    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
