# feedsync/domain/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum


class ListingKind(str, Enum):
    sale = "sale"
    lease = "lease"
    both = "both"


class ListingStatus(str, Enum):
    draft = "draft"
    published = "published"


@dataclass(frozen=True)
class Address:
    # required parts: empty string allowed, None is not
    street_number: str
    street_name: str
    city: str
    state: str
    postal_code: str

    direction: str | None = None
    suffix: str | None = None
    unit: str | None = None
    postal_ext: str | None = None
    county: str | None = None
    subdivision: str | None = None


@dataclass(frozen=True)
class ImageRef:
    url: str


@dataclass(frozen=True)
class NormalizedListing:
    external_id: str
    owner_id: str
    listing_kind: ListingKind
    price: Decimal
    address: Address

    status: ListingStatus = ListingStatus.published
    list_date: date | None = None
    also_for_lease: bool = False
    lot_value: Decimal = Decimal("0")

    latitude: float | None = None
    longitude: float | None = None
    legal_description: str | None = None
    tax_id: str | None = None
    census_tract: str | None = None

    # Building
    building_area_sqft: int | None = None
    sqft_source: str | None = None
    year_built: str | None = None
    year_built_source: str | None = None
    stories: str | None = None
    new_construction: bool = False
    builder_name: str | None = None

    # Lot
    lot_size_sqft: Decimal | None = None
    lot_size_source: str | None = None
    acres: str | None = None
    lot_dimensions: str | None = None

    # Rooms
    bedrooms_count: int | None = None
    baths_full_count: int | None = None
    baths_half_count: int | None = None

    # Garage
    garage_spaces: str | None = None
    garage_dimensions: str | None = None
    carport_spaces: str | None = None

    # Schools
    elementary_school: str | None = None
    middle_school: str | None = None
    high_school: str | None = None
    school_district: str | None = None

    # Tax
    tax_year: str | None = None
    tax_annual_amount: Decimal | None = None
    tax_rate: str | None = None
    tax_exemptions: str | None = None

    # HOA
    hoa_mandatory: bool = False
    maintenance_fee: bool = False
    maintenance_fee_amount: Decimal | None = None
    maintenance_fee_schedule: str | None = None

    # Appliances / fireplace
    has_microwave: bool = False
    has_dishwasher: bool = False
    has_disposal: bool = False
    fireplaces: str | None = None

    # Remarks / agent
    remarks: str | None = None
    directions: str | None = None
    list_agent: str | None = None
    appointment_phone: str | None = None
    agent_alternate_phone: str | None = None
    virtual_tour_url_unbranded: str | None = None
    virtual_tour_url_branded: str | None = None

    # Area / amenities
    master_planned_community: bool = False
    master_planned_community_name: str | None = None
    market_area: str | None = None
    mls_area: str | None = None
    private_pool: bool = False
    pool_area: bool = False
    golf_course_name: str | None = None
    utility_district: bool = False

    # Tag lists: [] when the feed has nothing, never None
    property_types: list[str] = field(default_factory=list)
    architectural_style: list[str] = field(default_factory=list)
    interior_features: list[str] = field(default_factory=list)
    exterior_features: list[str] = field(default_factory=list)
    construction_materials: list[str] = field(default_factory=list)
    roof: list[str] = field(default_factory=list)
    foundation: list[str] = field(default_factory=list)
    heating: list[str] = field(default_factory=list)
    cooling: list[str] = field(default_factory=list)
    flooring: list[str] = field(default_factory=list)
    water_sewer: list[str] = field(default_factory=list)
    lot_features: list[str] = field(default_factory=list)
    waterfront_features: list[str] = field(default_factory=list)
    street_surface: list[str] = field(default_factory=list)
    fireplace_features: list[str] = field(default_factory=list)
    kitchen_features: list[str] = field(default_factory=list)
    room_types: list[str] = field(default_factory=list)
    restrictions: list[str] = field(default_factory=list)
    disclosures: list[str] = field(default_factory=list)
    exclusions: list[str] = field(default_factory=list)
    financing_terms: list[str] = field(default_factory=list)
    maintenance_fee_includes: list[str] = field(default_factory=list)
    energy_features: list[str] = field(default_factory=list)
    green_certifications: list[str] = field(default_factory=list)

    images: list[ImageRef] = field(default_factory=list)
