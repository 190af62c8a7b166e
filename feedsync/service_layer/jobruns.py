# feedsync/service_layer/jobruns.py
from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import JobRun, JobRunStatus


def _dumps(payload: dict[str, Any] | None) -> str:
    # default=str: summaries may carry dates / Decimals
    return json.dumps(payload or {}, sort_keys=True, default=str)


async def start_job(session: AsyncSession, job_name: str, meta: dict[str, Any] | None = None) -> JobRun:
    """Insert a running JobRun and flush so it has an id. Caller commits."""
    jr = JobRun(
        job_name=job_name,
        status=JobRunStatus.running,
        started_at=datetime.utcnow(),
        meta_json=_dumps(meta),
    )
    session.add(jr)
    await session.flush()
    return jr


async def _finish(session: AsyncSession, jr: JobRun, status: JobRunStatus, *, summary=None, error=None) -> None:
    jr.status = status
    jr.finished_at = datetime.utcnow()
    jr.summary_json = _dumps(summary) if summary is not None else jr.summary_json
    jr.error = error
    await session.flush()


async def finish_job_success(session: AsyncSession, jr: JobRun, summary: dict[str, Any]) -> None:
    await _finish(session, jr, JobRunStatus.success, summary=summary)


async def finish_job_fail(session: AsyncSession, jr: JobRun, err: BaseException) -> None:
    # feed errors are already token-redacted by the client
    await _finish(session, jr, JobRunStatus.failed, error=f"{type(err).__name__}: {err}")


async def list_recent_jobs(session: AsyncSession, limit: int = 20, job_name: str | None = None) -> list[JobRun]:
    q = select(JobRun)
    if job_name:
        q = q.where(JobRun.job_name == job_name)
    q = q.order_by(JobRun.started_at.desc(), JobRun.id.desc()).limit(limit)
    return list((await session.execute(q)).scalars().all())
