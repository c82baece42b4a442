from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from snow_forecast.config import SchedulerConfig
from snow_forecast.logging import get_logger

logger = get_logger(__name__)

REFRESH_JOB_ID = "refresh-forecasts"


def build_scheduler(job: Callable[[], object], config: SchedulerConfig) -> Optional[AsyncIOScheduler]:
    """Schedule forecast refreshes on ``config.cron``.

    Nothing is persisted between runs, so with ``run_on_start`` the first
    refresh fires as soon as the scheduler starts instead of waiting for the
    next cron tick.
    """

    if not config.enabled:
        logger.info("scheduler.disabled")
        return None

    scheduler = AsyncIOScheduler()
    trigger = CronTrigger.from_crontab(config.cron)
    options = {"next_run_time": datetime.now()} if config.run_on_start else {}
    scheduler.add_job(
        job,
        trigger=trigger,
        id=REFRESH_JOB_ID,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=config.misfire_grace_time,
        **options,
    )
    logger.info("scheduler.configured", cron=config.cron, run_on_start=config.run_on_start)
    return scheduler
