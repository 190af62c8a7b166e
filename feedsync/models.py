# feedsync/models.py
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum,
    Float,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from .domain.types import ListingKind, ListingStatus


class Base(DeclarativeBase):
    pass


class JobRunStatus(str, enum.Enum):
    running = "running"
    success = "success"
    failed = "failed"


def _uuid() -> str:
    return str(uuid.uuid4())


# -----------------------------
# Models
# -----------------------------
class User(Base):
    """Account the imported listings are attributed to. Owned by the accounts service."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_user_email"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    full_name: Mapped[str] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class Listing(Base):
    __tablename__ = "listings"
    __table_args__ = (
        # authoritative dedup guard; the in-process existence check is only an optimisation
        UniqueConstraint("external_id", name="uq_listing_external_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    external_id: Mapped[str] = mapped_column(String(64), index=True)
    owner_id: Mapped[str] = mapped_column(String(36), index=True)

    status: Mapped[ListingStatus] = mapped_column(Enum(ListingStatus), default=ListingStatus.published, index=True)
    listing_kind: Mapped[ListingKind] = mapped_column(Enum(ListingKind), default=ListingKind.sale)
    price: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))
    list_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    also_for_lease: Mapped[bool] = mapped_column(Boolean, default=False)
    lot_value: Mapped[Decimal] = mapped_column(Numeric(15, 2), default=Decimal("0"))

    # Address
    street_number: Mapped[str] = mapped_column(String(32))
    street_name: Mapped[str] = mapped_column(String(255))
    direction: Mapped[str | None] = mapped_column(String(16), nullable=True)
    suffix: Mapped[str | None] = mapped_column(String(32), nullable=True)
    unit: Mapped[str | None] = mapped_column(String(32), nullable=True)
    city: Mapped[str] = mapped_column(String(120), index=True)
    state: Mapped[str] = mapped_column(String(32))
    postal_code: Mapped[str] = mapped_column(String(16), index=True)
    postal_ext: Mapped[str | None] = mapped_column(String(8), nullable=True)
    county: Mapped[str | None] = mapped_column(String(120), nullable=True)
    subdivision: Mapped[str | None] = mapped_column(String(255), nullable=True)

    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    legal_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    tax_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    census_tract: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # Building
    building_area_sqft: Mapped[int | None] = mapped_column(Integer, nullable=True)
    sqft_source: Mapped[str | None] = mapped_column(String(80), nullable=True)
    year_built: Mapped[str | None] = mapped_column(String(8), nullable=True)
    year_built_source: Mapped[str | None] = mapped_column(String(80), nullable=True)
    stories: Mapped[str | None] = mapped_column(String(16), nullable=True)
    new_construction: Mapped[bool] = mapped_column(Boolean, default=False)
    builder_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Lot
    lot_size_sqft: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    lot_size_source: Mapped[str | None] = mapped_column(String(80), nullable=True)
    acres: Mapped[str | None] = mapped_column(String(32), nullable=True)
    lot_dimensions: Mapped[str | None] = mapped_column(String(120), nullable=True)

    # Rooms
    bedrooms_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    baths_full_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    baths_half_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Garage
    garage_spaces: Mapped[str | None] = mapped_column(String(16), nullable=True)
    garage_dimensions: Mapped[str | None] = mapped_column(String(80), nullable=True)
    carport_spaces: Mapped[str | None] = mapped_column(String(16), nullable=True)

    # Schools
    elementary_school: Mapped[str | None] = mapped_column(String(255), nullable=True)
    middle_school: Mapped[str | None] = mapped_column(String(255), nullable=True)
    high_school: Mapped[str | None] = mapped_column(String(255), nullable=True)
    school_district: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Tax
    tax_year: Mapped[str | None] = mapped_column(String(8), nullable=True)
    tax_annual_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    tax_rate: Mapped[str | None] = mapped_column(String(32), nullable=True)
    tax_exemptions: Mapped[str | None] = mapped_column(Text, nullable=True)

    # HOA
    hoa_mandatory: Mapped[bool] = mapped_column(Boolean, default=False)
    maintenance_fee: Mapped[bool] = mapped_column(Boolean, default=False)
    maintenance_fee_amount: Mapped[Decimal | None] = mapped_column(Numeric(15, 2), nullable=True)
    maintenance_fee_schedule: Mapped[str | None] = mapped_column(String(80), nullable=True)

    has_microwave: Mapped[bool] = mapped_column(Boolean, default=False)
    has_dishwasher: Mapped[bool] = mapped_column(Boolean, default=False)
    has_disposal: Mapped[bool] = mapped_column(Boolean, default=False)
    fireplaces: Mapped[str | None] = mapped_column(String(16), nullable=True)

    remarks: Mapped[str | None] = mapped_column(Text, nullable=True)
    directions: Mapped[str | None] = mapped_column(Text, nullable=True)
    list_agent: Mapped[str | None] = mapped_column(String(255), nullable=True)
    appointment_phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    agent_alternate_phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    virtual_tour_url_unbranded: Mapped[str | None] = mapped_column(Text, nullable=True)
    virtual_tour_url_branded: Mapped[str | None] = mapped_column(Text, nullable=True)

    master_planned_community: Mapped[bool] = mapped_column(Boolean, default=False)
    master_planned_community_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    market_area: Mapped[str | None] = mapped_column(String(120), nullable=True)
    mls_area: Mapped[str | None] = mapped_column(String(120), nullable=True)
    private_pool: Mapped[bool] = mapped_column(Boolean, default=False)
    pool_area: Mapped[bool] = mapped_column(Boolean, default=False)
    golf_course_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    utility_district: Mapped[bool] = mapped_column(Boolean, default=False)

    # Tag lists (JSON arrays of strings)
    property_types: Mapped[list[str]] = mapped_column(JSON, default=list)
    architectural_style: Mapped[list[str]] = mapped_column(JSON, default=list)
    interior_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    exterior_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    construction_materials: Mapped[list[str]] = mapped_column(JSON, default=list)
    roof: Mapped[list[str]] = mapped_column(JSON, default=list)
    foundation: Mapped[list[str]] = mapped_column(JSON, default=list)
    heating: Mapped[list[str]] = mapped_column(JSON, default=list)
    cooling: Mapped[list[str]] = mapped_column(JSON, default=list)
    flooring: Mapped[list[str]] = mapped_column(JSON, default=list)
    water_sewer: Mapped[list[str]] = mapped_column(JSON, default=list)
    lot_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    waterfront_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    street_surface: Mapped[list[str]] = mapped_column(JSON, default=list)
    fireplace_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    kitchen_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    room_types: Mapped[list[str]] = mapped_column(JSON, default=list)
    restrictions: Mapped[list[str]] = mapped_column(JSON, default=list)
    disclosures: Mapped[list[str]] = mapped_column(JSON, default=list)
    exclusions: Mapped[list[str]] = mapped_column(JSON, default=list)
    financing_terms: Mapped[list[str]] = mapped_column(JSON, default=list)
    maintenance_fee_includes: Mapped[list[str]] = mapped_column(JSON, default=list)
    energy_features: Mapped[list[str]] = mapped_column(JSON, default=list)
    green_certifications: Mapped[list[str]] = mapped_column(JSON, default=list)

    # [{"url": "..."}] in display order
    images: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class JobRun(Base):
    """
    Tracks job executions (scheduled imports, API-triggered imports).
    """
    __tablename__ = "job_runs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    job_name: Mapped[str] = mapped_column(String(80), index=True)

    status: Mapped[JobRunStatus] = mapped_column(Enum(JobRunStatus), default=JobRunStatus.running, index=True)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    finished_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # store error message
    error: Mapped[str | None] = mapped_column(Text, nullable=True)

    # {"max_listings": ...}
    meta_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    # {"imported": ..., "skipped": ..., "errored": ...}
    summary_json: Mapped[str | None] = mapped_column(Text, nullable=True)
