# feedsync/entrypoints/api/routers/jobs.py
from __future__ import annotations

from typing import Any, Callable

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import require_api_key
from ....db import AsyncSessionLocal, get_session
from ....errors import FeedConfigError, FeedFetchError, FeedProtocolError, OwnerAccountNotFound
from ....schemas import ImportResult, JobRunOut
from ....service_layer.jobruns import list_recent_jobs
from ....service_layer.use_cases.import_listings import run_recorded_import

router = APIRouter(tags=["jobs"])


def get_session_factory() -> Callable[[], Any]:
    return AsyncSessionLocal


@router.post("/jobs/import", response_model=ImportResult, dependencies=[Depends(require_api_key)])
async def jobs_import(
    max_listings: int | None = Query(None, ge=1, description="Stop after importing this many new listings"),
    session_factory: Callable[[], Any] = Depends(get_session_factory),
) -> ImportResult:
    try:
        summary = await run_recorded_import(session_factory, job_name="feed_import_api", max_listings=max_listings)
    except OwnerAccountNotFound as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (FeedFetchError, FeedProtocolError) as e:
        raise HTTPException(status_code=502, detail=str(e))
    except FeedConfigError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return ImportResult(**summary.as_dict())


@router.get("/jobs/runs", response_model=list[JobRunOut], dependencies=[Depends(require_api_key)])
async def jobs_runs(
    limit: int = Query(20, ge=1, le=200),
    job_name: str | None = Query(None, description="e.g. feed_import_scheduled or feed_import_api"),
    session: AsyncSession = Depends(get_session),
) -> list[JobRunOut]:
    rows = await list_recent_jobs(session, limit=limit, job_name=job_name)
    return [JobRunOut.model_validate(r) for r in rows]
