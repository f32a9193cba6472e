from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from apscheduler.schedulers.background import BackgroundScheduler

if TYPE_CHECKING:
    from ..container import Container

logger = logging.getLogger(__name__)


def _guarded(name: str, job):
    def run():
        try:
            job()
        except Exception:
            logger.exception("Scheduled job %s crashed", name)

    run.__name__ = name
    return run


def register_jobs(scheduler: BackgroundScheduler, container: "Container") -> None:
    """Wall-clock triggers, organization time zone."""
    scheduler.add_job(
        _guarded("expire_permissions", lambda: container.permission_gate.expire_due(container.clock.now())),
        "cron",
        hour=0,
        minute=0,
        id="expire_permissions",
        replace_existing=True,
    )
    scheduler.add_job(
        _guarded("monthly_compliance", lambda: container.compliance.run(container.clock.now())),
        "cron",
        hour=12,
        minute=5,
        id="monthly_compliance",
        replace_existing=True,
    )
    scheduler.add_job(
        _guarded("end_of_day_sweep", lambda: container.end_of_day_sweeper.run(container.clock.now())),
        "cron",
        hour=17,
        minute=5,
        id="end_of_day_sweep",
        replace_existing=True,
    )
    scheduler.add_job(
        _guarded("daily_report", lambda: container.daily_report.run(container.clock.now())),
        "cron",
        hour=18,
        minute=0,
        id="daily_report",
        replace_existing=True,
    )


def build_scheduler(container: "Container") -> BackgroundScheduler:
    scheduler = BackgroundScheduler(
        timezone=container.clock.tz,
        job_defaults={
            "coalesce": True,
            "misfire_grace_time": 3600,
        },
    )
    register_jobs(scheduler, container)
    return scheduler
