"""Targeting library — desired-location input and reconciliation result types."""

from geotarget_api.lib.targeting.desired import (
    DesiredLocation,
    LocationName,
    ResolvedTarget,
    classify_location,
    parse_desired_locations,
)
from geotarget_api.lib.targeting.results import CampaignLocation, ReconciliationResult

__all__ = [
    "CampaignLocation",
    "DesiredLocation",
    "LocationName",
    "ReconciliationResult",
    "ResolvedTarget",
    "classify_location",
    "parse_desired_locations",
]
