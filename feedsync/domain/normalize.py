# feedsync/domain/normalize.py
from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from ..errors import MissingIdentityError
from .envelope import ExternalListing, MediaItem
from .types import Address, ImageRef, ListingKind, NormalizedListing

# RESO PropertyType values that can only be leased
LEASE_PROPERTY_TYPES: set[str] = {
    "residential lease",
    "commercial lease",
}

PHOTO_CATEGORY = "photo"

_ZERO = Decimal("0")


def infer_listing_kind(env: ExternalListing) -> ListingKind:
    """
    Priority-ordered, first signal wins:
      lease-only property type  -> lease
      LeaseConsideredYN         -> both (still for sale)
      otherwise                 -> sale
    """
    if (env.property_type or "").strip().lower() in LEASE_PROPERTY_TYPES:
        return ListingKind.lease
    if env.lease_considered:
        return ListingKind.both
    return ListingKind.sale


def concat_tags(env: ExternalListing, *fields: str) -> list[str]:
    """
    Union of several tag sources, in argument order. Values are not
    de-duplicated; naming the same source field twice only reads it once.
    """
    out: list[str] = []
    for name in dict.fromkeys(fields):
        v = getattr(env, name)
        if v is None:
            continue
        if isinstance(v, list):
            out.extend(v)
        else:
            out.append(v)
    return out


def property_type_tags(env: ExternalListing) -> list[str]:
    return concat_tags(env, "property_type", "property_sub_type", "current_use")


def water_sewer_tags(env: ExternalListing) -> list[str]:
    return concat_tags(env, "water_source", "sewer")


def extract_images(media: list[MediaItem]) -> list[ImageRef]:
    photos = [m for m in media if (m.category or "").lower() == PHOTO_CATEGORY and m.url]
    # sorted() is stable; missing Order sorts as 0
    photos = sorted(photos, key=lambda m: m.order or 0)
    return [ImageRef(url=m.url) for m in photos]


def _non_negative(d: Decimal | None) -> Decimal:
    if d is None or d < 0:
        return _ZERO
    return d


def normalize_listing(
    record: ExternalListing | Mapping[str, Any],
    owner_id: str,
    *,
    default_state: str = "",
) -> NormalizedListing:
    """
    Map one raw feed record into the internal listing shape.

    Pure: no I/O. Sparse records get defaults; the only hard failure is a
    record with neither ListingId nor ListingKey (it could never be
    deduplicated). Non-mapping input raises pydantic's ValidationError.
    """
    env = ExternalListing.from_record(record)

    external_id = env.external_id
    if not external_id:
        raise MissingIdentityError("record has neither ListingId nor ListingKey")

    address = Address(
        street_number=env.street_number or "",
        street_name=env.street_name or "",
        city=env.city or "",
        state=env.state_or_province or default_state,
        postal_code=env.postal_code or "",
        direction=env.street_dir_prefix,
        suffix=env.street_suffix,
        unit=env.unit_number,
        postal_ext=env.postal_code_plus4,
        county=env.county_or_parish,
        subdivision=env.subdivision_name,
    )

    building_area = int(env.living_area) if env.living_area is not None else None

    return NormalizedListing(
        external_id=external_id,
        owner_id=owner_id,
        listing_kind=infer_listing_kind(env),
        price=_non_negative(env.list_price),
        address=address,
        list_date=env.list_date,
        also_for_lease=bool(env.lease_considered),
        lot_value=_non_negative(env.lot_value),
        latitude=env.latitude,
        longitude=env.longitude,
        legal_description=env.tax_legal_description,
        tax_id=env.parcel_number,
        census_tract=env.census_tract,
        building_area_sqft=building_area,
        sqft_source=env.living_area_source,
        year_built=env.year_built,
        year_built_source=env.year_built_source,
        stories=env.stories_total,
        new_construction=bool(env.new_construction),
        builder_name=env.builder_name,
        lot_size_sqft=env.lot_size_square_feet,
        lot_size_source=env.lot_size_source,
        acres=env.lot_size_acres,
        lot_dimensions=env.lot_size_dimensions,
        bedrooms_count=env.bedrooms_total,
        baths_full_count=env.bathrooms_full,
        baths_half_count=env.bathrooms_half,
        garage_spaces=env.garage_spaces,
        garage_dimensions=env.garage_dimension,
        carport_spaces=env.carport_spaces,
        elementary_school=env.elementary_school,
        middle_school=env.middle_school,
        high_school=env.high_school,
        school_district=env.high_school_district,
        tax_year=env.tax_year,
        tax_annual_amount=env.tax_annual_amount,
        tax_rate=env.tax_rate,
        tax_exemptions=", ".join(env.tax_exemptions) or None,
        hoa_mandatory=bool(env.association),
        maintenance_fee=bool(env.association_fee),
        maintenance_fee_amount=env.association_fee,
        maintenance_fee_schedule=env.association_fee_frequency,
        has_microwave="Microwave" in env.appliances,
        has_dishwasher="Dishwasher" in env.appliances,
        has_disposal="Disposal" in env.appliances,
        fireplaces=env.fireplaces_total,
        remarks=env.public_remarks,
        directions=env.directions,
        list_agent=env.list_agent_full_name,
        appointment_phone=env.list_agent_preferred_phone,
        agent_alternate_phone=env.phone_alt,
        virtual_tour_url_unbranded=env.virtual_tour_url_unbranded,
        virtual_tour_url_branded=env.virtual_tour_url_branded,
        master_planned_community=env.master_planned_community,
        master_planned_community_name=env.master_planned_community_name,
        market_area=env.geo_market_area,
        mls_area=env.mls_area_major,
        private_pool=bool(env.pool_private),
        pool_area=env.pool_area,
        golf_course_name=env.golf_course,
        utility_district=env.utility_district,
        property_types=property_type_tags(env),
        architectural_style=list(env.architectural_style),
        interior_features=list(env.interior_features),
        exterior_features=concat_tags(env, "exterior_features", "patio_and_porch_features"),
        construction_materials=list(env.construction_materials),
        roof=list(env.roof),
        foundation=list(env.foundation_details),
        heating=list(env.heating),
        cooling=list(env.cooling),
        flooring=list(env.flooring),
        water_sewer=water_sewer_tags(env),
        lot_features=list(env.lot_features),
        waterfront_features=list(env.waterfront_features),
        street_surface=list(env.road_surface_type),
        fireplace_features=list(env.fireplace_features),
        kitchen_features=list(env.room_kitchen_features),
        room_types=list(env.room_type),
        restrictions=list(env.restrictions),
        disclosures=list(env.disclosures),
        exclusions=list(env.exclusions),
        financing_terms=list(env.listing_terms),
        maintenance_fee_includes=list(env.association_fee_includes),
        energy_features=list(env.green_energy_efficient),
        green_certifications=list(env.green_building_verification_type),
        images=extract_images(env.media),
    )
