# feedsync/schemas.py
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ImportResult(BaseModel):
    imported: int = Field(..., ge=0)
    skipped: int = Field(..., ge=0)
    errored: int = Field(..., ge=0)
    pages: int = Field(..., ge=0)
    total_available: int | None = None
    stop_reason: Literal["exhausted", "budget", "failed", "cancelled", "running"]


class JobRunOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_name: str
    status: str
    started_at: datetime
    finished_at: datetime | None = None
    error: str | None = None
    meta_json: str | None = None
    summary_json: str | None = None
