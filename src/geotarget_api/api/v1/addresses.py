"""Address coverage validation endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status

from geotarget_api.core.dependencies import get_address_index, get_selected_states
from geotarget_api.lib.coverage import AddressRecord, ClassificationSummary
from geotarget_api.lib.jurisdictions import Whitelist
from geotarget_api.schemas.address import (
    AddressValidationRequest,
    AddressValidationResponse,
    AddressValidationResult,
)
from geotarget_api.schemas.common import ErrorResponse
from geotarget_api.services.address_index import AddressIndex
from geotarget_api.services.address_validator import AddressValidator

addresses_router = APIRouter(prefix="/addresses", tags=["addresses"])


@addresses_router.post(
    "/validate",
    response_model=AddressValidationResponse,
    responses={422: {"model": ErrorResponse, "description": "No states selected"}},
)
async def validate_addresses(
    request: AddressValidationRequest,
    selected_states: Whitelist = Depends(get_selected_states),  # noqa: B008
    index: AddressIndex = Depends(get_address_index),  # noqa: B008
) -> AddressValidationResponse:
    """Classify each address as in or out of the session's selected states.

    Refuses to validate until at least one state is selected.
    """
    validator = AddressValidator(selected_states, index)
    blocking = validator.blocking_reason()
    if blocking is not None:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=blocking,
        )

    records = [
        AddressRecord(zip_code=item.zip_code, city=item.city, county=item.county, original_data=item)
        for item in request.records
    ]
    results = await validator.validate_batch(records)
    summary = ClassificationSummary.from_results(results)

    return AddressValidationResponse(
        selected_states=sorted(selected_states),
        results=[
            AddressValidationResult(
                address=r.address_record.original_data,
                classification=r.classification,
                state=r.state,
                in_coverage=r.in_coverage,
                error=r.error,
            )
            for r in results
        ],
        summary=summary.to_dict(),
        total=summary.total,
    )
