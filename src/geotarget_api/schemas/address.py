"""Pydantic v2 schemas for batch address coverage validation."""

from pydantic import BaseModel, Field

from geotarget_api.lib.coverage import Classification


class AddressInput(BaseModel):
    """One address to classify; any subset of components may be blank."""

    zip_code: str | None = None
    city: str | None = None
    county: str | None = None


class AddressValidationRequest(BaseModel):
    """Addresses to classify against the session whitelist."""

    records: list[AddressInput] = Field(default_factory=list)


class AddressValidationResult(BaseModel):
    """Classification of one submitted address."""

    address: AddressInput
    classification: Classification
    state: str | None = None
    in_coverage: bool = False
    error: str | None = None


class AddressValidationResponse(BaseModel):
    """Per-record results in input order plus per-classification counts."""

    selected_states: list[str] = Field(default_factory=list)
    results: list[AddressValidationResult] = Field(default_factory=list)
    summary: dict[str, int] = Field(default_factory=dict)
    total: int = 0
