"""Cron based scheduling of background jobs on top of APScheduler."""

from __future__ import annotations

import logging
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)


def parse_cron_expression(cron_expr: str, *, timezone: str = "UTC") -> CronTrigger:
    """Return a trigger for a standard 5-field crontab expression.

    Raises ``ValueError`` when the expression cannot be parsed.
    """

    if not cron_expr or not cron_expr.strip():
        raise ValueError("Cron expression must not be empty")
    try:
        return CronTrigger.from_crontab(cron_expr.strip(), timezone=timezone)
    except ValueError as exc:
        raise ValueError(f"Invalid cron expression '{cron_expr}': {exc}") from exc


class EventScheduler:
    """Run callbacks on cron expressions in a background thread."""

    def __init__(self, *, timezone: str = "UTC") -> None:
        self._timezone = timezone
        self._scheduler = BackgroundScheduler(
            timezone=timezone,
            job_defaults={"coalesce": True, "max_instances": 1},
        )

    @property
    def is_running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if not self._scheduler.running:
            self._scheduler.start()
            logger.info("Event scheduler started")

    def stop(self, *, wait: bool = True) -> None:
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
            logger.info("Event scheduler stopped")

    def add_job(self, job_id: str, cron_expr: str, func: Callable[[], None]) -> None:
        """Schedule ``func`` under ``job_id``, replacing a job with the same id."""

        trigger = parse_cron_expression(cron_expr, timezone=self._timezone)
        self._scheduler.add_job(func, trigger=trigger, id=job_id, replace_existing=True)
        logger.debug("Scheduled job %s with '%s'", job_id, cron_expr)

    def remove_job(self, job_id: str) -> bool:
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            return False
        return True

    def has_job(self, job_id: str) -> bool:
        return self._scheduler.get_job(job_id) is not None


__all__ = ["EventScheduler", "parse_cron_expression"]
