# feedsync/domain/envelope.py
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Mapping

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from .parsing import to_bool, to_date, to_decimal, to_float, to_int, to_str, to_str_list


def _present(x: Any) -> bool:
    """HAR_* indicator fields: sometimes a Y/N flag, sometimes a descriptive value."""
    b = to_bool(x)
    if b is not None:
        return b
    return bool(to_str(x) or to_str_list(x))


def _media_list(x: Any) -> list[dict[str, Any]]:
    if not isinstance(x, (list, tuple)):
        return []
    return [m for m in x if isinstance(m, Mapping)]


# Lenient field types: every coercion lands here, none of them raise.
Num = Annotated[float | None, BeforeValidator(to_float)]
Money = Annotated[Decimal | None, BeforeValidator(to_decimal)]
Int = Annotated[int | None, BeforeValidator(to_int)]
Text = Annotated[str | None, BeforeValidator(to_str)]
Flag = Annotated[bool | None, BeforeValidator(to_bool)]
Present = Annotated[bool, BeforeValidator(_present)]
Tags = Annotated[list[str], BeforeValidator(to_str_list)]
Day = Annotated[date | None, BeforeValidator(to_date)]


def _tags(alias: str) -> Any:
    return Field(default_factory=list, alias=alias)


class MediaItem(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    url: Text = Field(None, alias="MediaURL")
    category: Text = Field(None, alias="MediaCategory")
    order: Num = Field(None, alias="Order")


class ExternalListing(BaseModel):
    """
    Typed envelope over one raw OData Property record.

    Field names follow the RESO Data Dictionary (plus HAR_* local fields).
    Anything not declared here stays available through ``model_extra``.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    # Identity / listing
    listing_key: Text = Field(None, alias="ListingKey")
    listing_id: Text = Field(None, alias="ListingId")
    list_price: Money = Field(None, alias="ListPrice")
    list_date: Day = Field(None, alias="ListingContractDate")
    property_type: Text = Field(None, alias="PropertyType")
    property_sub_type: Text = Field(None, alias="PropertySubType")
    current_use: Tags = _tags("CurrentUse")
    standard_status: Text = Field(None, alias="StandardStatus")
    mls_status: Text = Field(None, alias="MlsStatus")
    lease_considered: Flag = Field(None, alias="LeaseConsideredYN")

    # Address
    street_number: Text = Field(None, alias="StreetNumber")
    street_dir_prefix: Text = Field(None, alias="StreetDirPrefix")
    street_name: Text = Field(None, alias="StreetName")
    street_suffix: Text = Field(None, alias="StreetSuffix")
    street_dir_suffix: Text = Field(None, alias="StreetDirSuffix")
    unit_number: Text = Field(None, alias="UnitNumber")
    city: Text = Field(None, alias="City")
    state_or_province: Text = Field(None, alias="StateOrProvince")
    postal_code: Text = Field(None, alias="PostalCode")
    postal_code_plus4: Text = Field(None, alias="PostalCodePlus4")
    county_or_parish: Text = Field(None, alias="CountyOrParish")
    subdivision_name: Text = Field(None, alias="SubdivisionName")
    latitude: Num = Field(None, alias="Latitude")
    longitude: Num = Field(None, alias="Longitude")

    # Legal / tax
    tax_legal_description: Text = Field(None, alias="TaxLegalDescription")
    parcel_number: Text = Field(None, alias="ParcelNumber")
    census_tract: Text = Field(None, alias="HAR_CensusTract")
    tax_year: Text = Field(None, alias="TaxYear")
    tax_annual_amount: Money = Field(None, alias="TaxAnnualAmount")
    tax_rate: Text = Field(None, alias="HAR_TaxRate")
    tax_exemptions: Tags = _tags("TaxExemptions")

    # Building
    living_area: Num = Field(None, alias="LivingArea")
    living_area_source: Text = Field(None, alias="LivingAreaSource")
    year_built: Text = Field(None, alias="YearBuilt")
    year_built_source: Text = Field(None, alias="YearBuiltSource")
    stories_total: Text = Field(None, alias="StoriesTotal")
    new_construction: Flag = Field(None, alias="NewConstructionYN")
    builder_name: Text = Field(None, alias="BuilderName")

    # Lot
    lot_size_square_feet: Money = Field(None, alias="LotSizeSquareFeet")
    lot_size_source: Text = Field(None, alias="LotSizeSource")
    lot_size_acres: Text = Field(None, alias="LotSizeAcres")
    lot_size_dimensions: Text = Field(None, alias="LotSizeDimensions")

    # Rooms
    bedrooms_total: Int = Field(None, alias="BedroomsTotal")
    bathrooms_full: Int = Field(None, alias="BathroomsFull")
    bathrooms_half: Int = Field(None, alias="BathroomsHalf")
    bathrooms_total_decimal: Num = Field(None, alias="BathroomsTotalDecimal")

    # Garage
    garage_spaces: Text = Field(None, alias="GarageSpaces")
    garage_dimension: Text = Field(None, alias="HAR_GarageDimension")
    carport_spaces: Text = Field(None, alias="CarportSpaces")

    # Schools
    elementary_school: Text = Field(None, alias="ElementarySchool")
    middle_school: Text = Field(None, alias="MiddleOrJuniorSchool")
    high_school: Text = Field(None, alias="HighSchool")
    high_school_district: Text = Field(None, alias="HighSchoolDistrict")

    # HOA
    association: Flag = Field(None, alias="AssociationYN")
    association_fee: Money = Field(None, alias="AssociationFee")
    association_fee_frequency: Text = Field(None, alias="AssociationFeeFrequency")
    association_fee_includes: Tags = _tags("AssociationFeeIncludes")

    # Feature lists
    restrictions: Tags = _tags("HAR_Restrictions")
    waterfront_features: Tags = _tags("WaterfrontFeatures")
    lot_features: Tags = _tags("LotFeatures")
    interior_features: Tags = _tags("InteriorFeatures")
    exterior_features: Tags = _tags("ExteriorFeatures")
    patio_and_porch_features: Tags = _tags("PatioAndPorchFeatures")
    flooring: Tags = _tags("Flooring")
    construction_materials: Tags = _tags("ConstructionMaterials")
    roof: Tags = _tags("Roof")
    foundation_details: Tags = _tags("FoundationDetails")
    heating: Tags = _tags("Heating")
    cooling: Tags = _tags("Cooling")
    water_source: Tags = _tags("WaterSource")
    sewer: Tags = _tags("Sewer")
    road_surface_type: Tags = _tags("RoadSurfaceType")
    appliances: Tags = _tags("Appliances")
    fireplaces_total: Text = Field(None, alias="FireplacesTotal")
    fireplace_features: Tags = _tags("FireplaceFeatures")
    room_kitchen_features: Tags = _tags("RoomKitchenFeatures")
    room_type: Tags = _tags("RoomType")
    disclosures: Tags = _tags("Disclosures")
    exclusions: Tags = _tags("Exclusions")
    listing_terms: Tags = _tags("ListingTerms")
    architectural_style: Tags = _tags("ArchitecturalStyle")
    green_energy_efficient: Tags = _tags("GreenEnergyEfficient")
    green_building_verification_type: Tags = _tags("GreenBuildingVerificationType")

    # Remarks / agent
    public_remarks: Text = Field(None, alias="PublicRemarks")
    directions: Text = Field(None, alias="Directions")
    list_agent_full_name: Text = Field(None, alias="ListAgentFullName")
    list_agent_email: Text = Field(None, alias="ListAgentEmail")
    list_agent_preferred_phone: Text = Field(None, alias="ListAgentPreferredPhone")
    list_office_name: Text = Field(None, alias="ListOfficeName")
    list_office_phone: Text = Field(None, alias="ListOfficePhone")
    phone_alt: Text = Field(None, alias="HAR_PhoneAlt")
    virtual_tour_url_unbranded: Text = Field(None, alias="VirtualTourURLUnbranded")
    virtual_tour_url_branded: Text = Field(None, alias="VirtualTourURLBranded")

    media: Annotated[list[MediaItem], BeforeValidator(_media_list)] = Field(default_factory=list, alias="Media")

    # Area / amenities (HAR local)
    master_planned_community: Present = Field(False, alias="HAR_MasterPlannedCommunityYN")
    master_planned_community_name: Text = Field(None, alias="HAR_MasterPlannedCommunity")
    geo_market_area: Text = Field(None, alias="HAR_GeoMarketArea")
    mls_area_major: Text = Field(None, alias="MLSAreaMajor")
    pool_private: Flag = Field(None, alias="PoolPrivateYN")
    pool_area: Present = Field(False, alias="HAR_PoolArea")
    golf_course: Text = Field(None, alias="HAR_GolfCourse")
    utility_district: Present = Field(False, alias="HAR_UtilityDistrict")
    lot_value: Money = Field(None, alias="HAR_LotValue")

    @classmethod
    def from_record(cls, record: "ExternalListing | Mapping[str, Any]") -> "ExternalListing":
        if isinstance(record, ExternalListing):
            return record
        return cls.model_validate(record)

    @property
    def external_id(self) -> str | None:
        return self.listing_id or self.listing_key
