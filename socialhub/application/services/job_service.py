"""Management and execution of cron scheduled jobs."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace
from typing import Callable
from uuid import UUID

from socialhub.domain.entities import Job
from socialhub.domain.errors import JobNotFoundError
from socialhub.infrastructure.repositories import JobRepository
from socialhub.infrastructure.scheduler import EventScheduler, parse_cron_expression
from socialhub.utils import utcnow

logger = logging.getLogger(__name__)

JobHandler = Callable[[], object]


class JobService:
    """Persist jobs and keep the scheduler in sync with them."""

    def __init__(self, jobs: JobRepository, scheduler: EventScheduler) -> None:
        self._jobs = jobs
        self._scheduler = scheduler
        self._handlers: dict[str, JobHandler] = {}

    def register_handler(self, name: str, handler: JobHandler) -> None:
        self._handlers[name] = handler

    @property
    def handler_names(self) -> list[str]:
        return sorted(self._handlers)

    def create_job(self, name: str, cron_expr: str, handler: str, *, is_active: bool = True) -> Job:
        if handler not in self._handlers:
            raise ValueError(f"Unknown job handler '{handler}'")
        parse_cron_expression(cron_expr)
        job = self._jobs.create(
            Job(id=None, name=name, cron_expr=cron_expr.strip(), handler=handler, is_active=is_active)
        )
        if job.is_active:
            self._schedule(job)
        return job

    def get_job(self, job_id: UUID) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def list_jobs(self, *, offset: int = 0, limit: int = 100) -> tuple[Sequence[Job], int]:
        return self._jobs.list(offset=offset, limit=limit), self._jobs.count()

    def set_active(self, job_id: UUID, is_active: bool) -> Job:
        job = self._jobs.update(replace(self.get_job(job_id), is_active=is_active))
        if is_active:
            self._schedule(job)
        else:
            self._scheduler.remove_job(str(job.id))
        return job

    def delete_job(self, job_id: UUID) -> None:
        if not self._jobs.delete(job_id):
            raise JobNotFoundError(job_id)
        self._scheduler.remove_job(str(job_id))

    def execute_job(self, job: Job) -> Job:
        """Run the handler of ``job`` and record the outcome.

        Handler failures are stored on the job and logged, never raised, since
        this runs on scheduler threads.
        """

        handler = self._handlers.get(job.handler)
        error: str | None = None
        if handler is None:
            error = f"Unknown job handler '{job.handler}'"
            logger.error("Job %s references %s", job.name, error)
        else:
            logger.info("Executing job %s", job.name)
            try:
                handler()
            except Exception as exc:
                logger.exception("Job %s failed", job.name)
                error = str(exc) or exc.__class__.__name__

        finished = replace(job, last_run_at=utcnow(), last_error=error)
        try:
            return self._jobs.update(finished)
        except ValueError as exc:
            logger.warning("Could not record the run of job %s: %s", job.name, exc)
            return finished

    def schedule_active_jobs(self, *, limit: int = 1000) -> int:
        """Schedule every stored active job; returns how many were scheduled."""

        scheduled = 0
        for job in self._jobs.list(offset=0, limit=limit):
            if not job.is_active:
                continue
            try:
                self._schedule(job)
            except ValueError as exc:
                logger.warning("Failed to schedule job %s: %s", job.name, exc)
            else:
                scheduled += 1
        return scheduled

    def _schedule(self, job: Job) -> None:
        job_id = job.id
        self._scheduler.add_job(str(job_id), job.cron_expr, lambda: self._run_scheduled(job_id))

    def _run_scheduled(self, job_id: UUID) -> None:
        job = self._jobs.get(job_id)
        if job is None or not job.is_active:
            logger.info("Skipping job %s; it was removed or deactivated", job_id)
            return
        self.execute_job(job)


__all__ = ["JobHandler", "JobService"]
