"""Persistence helpers for scheduled jobs."""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID, uuid4

from socialhub.domain.entities import Job
from socialhub.infrastructure.database import SessionFactory
from socialhub.infrastructure.models import JobModel
from socialhub.utils import ensure_utc, to_storage_datetime, utcnow


class JobRepository:
    """Provide CRUD operations for :class:`Job` objects."""

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def list(self, *, offset: int = 0, limit: int = 100) -> Sequence[Job]:
        with self._session_factory() as session:
            models = (
                session.query(JobModel)
                .order_by(JobModel.created_at.asc(), JobModel.name.asc())
                .offset(offset)
                .limit(limit)
                .all()
            )
            return [self._to_entity(model) for model in models]

    def count(self) -> int:
        with self._session_factory() as session:
            return session.query(JobModel).count()

    def get(self, job_id: UUID) -> Job | None:
        with self._session_factory() as session:
            model = session.get(JobModel, job_id)
            return self._to_entity(model) if model else None

    def create(self, job: Job) -> Job:
        model = JobModel(id=job.id or uuid4())
        self._apply_entity_to_model(model, job)
        model.created_at = to_storage_datetime(job.created_at or utcnow())
        with self._session_factory() as session:
            session.add(model)
            session.commit()
            return self._to_entity(model)

    def update(self, job: Job) -> Job:
        if job.id is None:
            raise ValueError("Job id is required for updates")
        with self._session_factory() as session:
            model = session.get(JobModel, job.id)
            if model is None:
                msg = f"Job with id {job.id} not found"
                raise ValueError(msg)
            self._apply_entity_to_model(model, job)
            session.commit()
            return self._to_entity(model)

    def delete(self, job_id: UUID) -> bool:
        with self._session_factory() as session:
            deleted = (
                session.query(JobModel)
                .filter(JobModel.id == job_id)
                .delete(synchronize_session=False)
            )
            session.commit()
            return deleted > 0

    @staticmethod
    def _apply_entity_to_model(model: JobModel, job: Job) -> None:
        model.name = job.name
        model.cron_expr = job.cron_expr
        model.handler = job.handler
        model.is_active = job.is_active
        model.last_run_at = to_storage_datetime(job.last_run_at)
        model.last_error = job.last_error

    @staticmethod
    def _to_entity(model: JobModel) -> Job:
        return Job(
            id=model.id,
            name=model.name,
            cron_expr=model.cron_expr,
            handler=model.handler,
            is_active=bool(model.is_active),
            last_run_at=ensure_utc(model.last_run_at),
            last_error=model.last_error,
            created_at=ensure_utc(model.created_at),
        )


__all__ = ["JobRepository"]
