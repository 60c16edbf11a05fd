"""Location search endpoints — typeahead over the session whitelist and batch search."""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from geotarget_api.core.config import Settings, get_settings
from geotarget_api.core.dependencies import get_address_index, get_selected_states
from geotarget_api.lib.jurisdictions import Whitelist, to_whitelist
from geotarget_api.lib.search import split_terms
from geotarget_api.schemas.common import ErrorResponse
from geotarget_api.schemas.location import (
    BatchSearchRequest,
    BatchSearchResponse,
    LocationOption,
    LocationResult,
    LocationSearchResponse,
)
from geotarget_api.services.address_index import AddressIndex
from geotarget_api.services.location_search_service import LocationSearchEngine

locations_router = APIRouter(prefix="/locations", tags=["locations"])


@locations_router.get("/search", response_model=LocationSearchResponse)
async def search_locations(
    q: str = Query(default="", max_length=200, description="Free-text location query"),
    country_code: str | None = Query(default=None, min_length=2, max_length=2),
    limit: int | None = Query(default=None, ge=1, description="Maximum number of results"),
    selected_states: Whitelist = Depends(get_selected_states),  # noqa: B008
    index: AddressIndex = Depends(get_address_index),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> LocationSearchResponse:
    """Typeahead search restricted to the session's selected states.

    ``country_code`` is accepted for client compatibility; results are
    scoped by the whitelist alone.
    """
    effective_limit = min(limit or settings.search_default_limit, settings.search_max_limit)
    engine = LocationSearchEngine(index)
    candidates = await engine.search(q, selected_states, limit=effective_limit)
    return LocationSearchResponse(
        results=[LocationOption(id=c.geo_target or c.display_name, name=c.display_name) for c in candidates]
    )


@locations_router.post(
    "/batch-search",
    response_model=BatchSearchResponse,
    responses={422: {"model": ErrorResponse}},
)
async def batch_search_locations(
    request: BatchSearchRequest,
    index: AddressIndex = Depends(get_address_index),  # noqa: B008
) -> BatchSearchResponse:
    """Search several comma-separated terms at once within explicitly supplied states."""
    raw_terms = request.search_terms if isinstance(request.search_terms, list) else [request.search_terms or ""]
    terms = [term for raw in raw_terms for term in split_terms(raw or "")]
    if not terms:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Search terms cannot be empty",
        )

    states = to_whitelist(request.selected_states)
    if not states:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="No states selected for search",
        )

    engine = LocationSearchEngine(index)
    result = await engine.batch_search(terms, states)
    return BatchSearchResponse(
        results=[
            LocationResult(city=c.city, state=c.state, zip_code=c.zip_code, county=c.county) for c in result.results
        ],
        unmatched=result.unmatched,
        count=result.count,
        unmatched_count=result.unmatched_count,
    )
