"""
Cron scheduling for the job handlers.

One worker thread runs every job, so handlers never overlap and each
runs to completion before the next starts.
"""

import logging

from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from foxtagger.core.config import Config
from foxtagger.handlers.cronjob import CronjobDispatcher

logger = logging.getLogger(__name__)


def run_job(dispatcher: CronjobDispatcher, method: str) -> None:
    """Run a job, logging failures instead of killing the scheduler."""
    try:
        dispatcher.handle(method)
    except Exception as e:
        logger.error(f"Cron job {method} failed: {e}", exc_info=True)


def build_scheduler(config: Config, dispatcher: CronjobDispatcher) -> BlockingScheduler:
    """
    Create a scheduler with walletSummary, checkLimits and updateAmount registered.

    Schedules come from the config as crontab expressions.
    """
    scheduler = BlockingScheduler(
        executors={"default": ThreadPoolExecutor(max_workers=1)},
        job_defaults={"coalesce": True, "max_instances": 1},
        timezone=config.timezone,
    )

    schedules = {
        "walletSummary": config.wallet_summary_cron,
        "checkLimits": config.check_limits_cron,
        "updateAmount": config.update_amount_cron,
    }

    for method, expression in schedules.items():
        scheduler.add_job(
            run_job,
            CronTrigger.from_crontab(expression, timezone=config.timezone),
            args=[dispatcher, method],
            id=method,
            name=method,
        )
        logger.info(f"Registered {method} job ({expression} {config.timezone})")

    return scheduler
