"""Pydantic v2 schemas for campaign geo target reconciliation and listing."""

from pydantic import BaseModel, Field


class GeoTargetUpdateRequest(BaseModel):
    """Desired locations and removals for one campaign.

    ``campaign_id`` is optional here so the endpoint can answer with its own
    validation message when it is missing.
    """

    campaign_id: str | int | None = None
    customer_id: str | None = None
    locations: str | list[str] | None = Field(
        default=None,
        description="Location names and/or geoTargetConstants identifiers, as a list or comma-separated string",
    )
    locations_to_remove: list[str] | str | None = Field(
        default=None,
        description="Campaign criterion resource names to remove",
    )
    country_code: str | None = Field(default=None, description="Defaults to the configured country")
    selected_states: list[str] | str | None = Field(
        default=None,
        description="Override the session whitelist for name resolution",
    )


class GeoTargetUpdateResponse(BaseModel):
    """Outcome of a reconciliation. ``total_count`` is computed locally and may be stale."""

    applied_geo_targets: list[str] = Field(default_factory=list)
    added_count: int = 0
    removed_count: int = 0
    total_count: int = 0
    total_is_estimate: bool = True


class CampaignLocationResponse(BaseModel):
    """A campaign's existing location target with a display name."""

    model_config = {"from_attributes": True}

    resource_name: str
    geo_target_constant: str | None = None
    criteria_id: str | None = None
    name: str
    state: str | None = None


class CampaignLocationsResponse(BaseModel):
    """All location targets currently applied to a campaign."""

    campaign_id: str
    locations: list[CampaignLocationResponse] = Field(default_factory=list)
    count: int = 0
