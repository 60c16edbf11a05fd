"""Campaign geo target endpoints — reconcile desired locations and list current targets."""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger

from geotarget_api.core.config import Settings, get_settings
from geotarget_api.core.dependencies import (
    PlatformClientFactory,
    get_address_index,
    get_platform_client_factory,
    get_selected_states,
)
from geotarget_api.lib.jurisdictions import Whitelist, to_whitelist
from geotarget_api.lib.platform import PlatformClient, PlatformError
from geotarget_api.lib.targeting import parse_desired_locations
from geotarget_api.schemas.common import ErrorResponse
from geotarget_api.schemas.geo_target import (
    CampaignLocationResponse,
    CampaignLocationsResponse,
    GeoTargetUpdateRequest,
    GeoTargetUpdateResponse,
)
from geotarget_api.services.address_index import AddressIndex
from geotarget_api.services.geo_target_service import GeoTargetReconciler

geo_targets_router = APIRouter(prefix="/geo-targets", tags=["geo-targets"])


def _split(value: list[str] | str | None) -> list[str]:
    if value is None:
        return []
    items = [value] if isinstance(value, str) else value
    return [part.strip() for item in items for part in str(item).split(",") if part.strip()]


def _build_client(factory: PlatformClientFactory, customer_id: str | None) -> PlatformClient:
    try:
        return factory(customer_id)
    except PlatformError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=e.message,
        ) from e


_PLATFORM_ERRORS: dict[int | str, dict] = {
    502: {"model": ErrorResponse, "description": "The ad platform rejected the request"},
    503: {"model": ErrorResponse, "description": "The ad platform client is not configured"},
}


@geo_targets_router.post(
    "/update",
    response_model=GeoTargetUpdateResponse,
    responses={422: {"model": ErrorResponse}, **_PLATFORM_ERRORS},
)
async def update_geo_targets(
    request: GeoTargetUpdateRequest,
    selected_states: Whitelist = Depends(get_selected_states),  # noqa: B008
    index: AddressIndex = Depends(get_address_index),  # noqa: B008
    client_factory: PlatformClientFactory = Depends(get_platform_client_factory),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> GeoTargetUpdateResponse:
    """Add the desired locations to a campaign and remove the listed criteria.

    Location names resolve within the request's ``selected_states`` when
    given, otherwise within the session whitelist.
    """
    campaign_id = str(request.campaign_id).strip() if request.campaign_id is not None else ""
    if not campaign_id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="campaign_id is required",
        )

    desired = parse_desired_locations(request.locations)
    to_remove = _split(request.locations_to_remove)
    if not desired and not to_remove:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="locations or locations_to_remove is required",
        )

    whitelist = to_whitelist(request.selected_states) or selected_states
    logger.info(
        f"Updating geo targets for campaign {campaign_id}: {len(desired)} desired, "
        f"{len(to_remove)} to remove, states={sorted(whitelist)}"
    )

    client = _build_client(client_factory, request.customer_id)
    try:
        result = await GeoTargetReconciler(index, client).apply(
            campaign_id,
            desired,
            country_code=(request.country_code or settings.default_country_code).strip().upper(),
            whitelist=whitelist,
            to_remove=to_remove,
        )
    except PlatformError as e:
        logger.error(f"Geo target update failed for campaign {campaign_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        ) from e
    finally:
        await client.close()

    return GeoTargetUpdateResponse(
        applied_geo_targets=result.applied_geo_targets,
        added_count=result.added_count,
        removed_count=result.removed_count,
        total_count=result.total_count,
        total_is_estimate=result.total_is_estimate,
    )


@geo_targets_router.get(
    "/campaigns/{campaign_id}/locations",
    response_model=CampaignLocationsResponse,
    responses=_PLATFORM_ERRORS,
)
async def list_campaign_locations(
    campaign_id: str,
    customer_id: str | None = Query(default=None, description="Override the configured customer ID"),
    index: AddressIndex = Depends(get_address_index),  # noqa: B008
    client_factory: PlatformClientFactory = Depends(get_platform_client_factory),  # noqa: B008
) -> CampaignLocationsResponse:
    """List a campaign's current location targets with display names."""
    client = _build_client(client_factory, customer_id)
    try:
        locations = await GeoTargetReconciler(index, client).list_campaign_locations(campaign_id)
    except PlatformError as e:
        logger.error(f"Failed to list locations for campaign {campaign_id}: {e.message}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message,
        ) from e
    finally:
        await client.close()

    return CampaignLocationsResponse(
        campaign_id=campaign_id,
        locations=[CampaignLocationResponse.model_validate(location) for location in locations],
        count=len(locations),
    )
