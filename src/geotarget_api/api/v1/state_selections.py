"""State selection endpoints — read, replace, and clear the session whitelist."""

from fastapi import APIRouter, Depends, HTTPException, status

from geotarget_api.core.dependencies import get_state_whitelist
from geotarget_api.lib.jurisdictions import InvalidRegionCodesError, StateWhitelist
from geotarget_api.schemas.common import ErrorResponse
from geotarget_api.schemas.state_selection import (
    StateSelectionsResponse,
    StateSelectionsUpdateRequest,
    StateSelectionsUpdateResponse,
)

state_selections_router = APIRouter(prefix="/state-selections", tags=["state-selections"])


@state_selections_router.get("", response_model=StateSelectionsResponse)
async def get_state_selections(
    whitelist: StateWhitelist = Depends(get_state_whitelist),  # noqa: B008
) -> StateSelectionsResponse:
    """Return the states currently selected for this session."""
    return StateSelectionsResponse(
        selected_states=whitelist.selected_states(),
        any_selected=whitelist.any_selected(),
    )


@state_selections_router.post(
    "",
    response_model=StateSelectionsUpdateResponse,
    responses={422: {"model": ErrorResponse, "description": "Unknown state code"}},
)
async def update_state_selections(
    request: StateSelectionsUpdateRequest,
    whitelist: StateWhitelist = Depends(get_state_whitelist),  # noqa: B008
) -> StateSelectionsUpdateResponse:
    """Replace the session's selected states. Any invalid code rejects the whole update."""
    try:
        selected = whitelist.replace(request.codes)
    except InvalidRegionCodesError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e

    return StateSelectionsUpdateResponse(
        selected_states=sorted(selected),
        message="State selections updated successfully",
    )


@state_selections_router.delete("", response_model=StateSelectionsUpdateResponse)
async def clear_state_selections(
    whitelist: StateWhitelist = Depends(get_state_whitelist),  # noqa: B008
) -> StateSelectionsUpdateResponse:
    """Clear the session's selected states."""
    whitelist.clear()
    return StateSelectionsUpdateResponse(
        selected_states=[],
        message="State selections cleared successfully",
    )
