# feedsync/entrypoints/fastapi_app.py
from __future__ import annotations

from fastapi import FastAPI

from ..db import engine
from ..models import Base
from .api.routers import health, jobs


def create_app() -> FastAPI:
    app = FastAPI(title="feedsync - listing feed import")

    @app.on_event("startup")
    async def _startup() -> None:
        # Single place where DB tables are created in dev.
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    app.include_router(health.router)
    app.include_router(jobs.router)

    return app


app = create_app()
