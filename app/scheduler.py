from datetime import datetime

import pytz
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from app.update_loop import UpdateLoop
from core.config import settings


def setup_scheduler(scheduler: AsyncIOScheduler, update_loop: UpdateLoop):
    """
    Set up the scheduler with the update job, starting right away.
    A cycle never overlaps the previous one, missed runs are merged.
    """
    scheduler.add_job(
        update_loop.run_cycle,
        IntervalTrigger(seconds=settings.update_interval),
        name="update_statistics",
        next_run_time=datetime.now(pytz.UTC),
        max_instances=1,
        coalesce=True,
    )
