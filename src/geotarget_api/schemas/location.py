"""Pydantic v2 schemas for location search."""

from pydantic import BaseModel, Field


class LocationOption(BaseModel):
    """One typeahead option."""

    id: str = Field(description="Geo target identifier when known, otherwise the display name")
    name: str = Field(description="Display name, e.g. 'Duluth, GA 30097'")


class LocationSearchResponse(BaseModel):
    """Typeahead search response."""

    results: list[LocationOption] = Field(default_factory=list)


class BatchSearchRequest(BaseModel):
    """Batch search over explicitly supplied states."""

    search_terms: str | list[str] | None = Field(
        default=None,
        description="Comma-separated terms (or a list of them); each term is searched independently",
    )
    selected_states: list[str] | str | None = Field(default=None, description="State codes to search within")


class LocationResult(BaseModel):
    """A matched location in a batch search."""

    model_config = {"from_attributes": True}

    city: str
    state: str
    zip_code: str
    county: str


class BatchSearchResponse(BaseModel):
    """Batch search response: union of matches plus unmatched terms."""

    success: bool = True
    results: list[LocationResult] = Field(default_factory=list)
    unmatched: list[str] = Field(default_factory=list)
    count: int = 0
    unmatched_count: int = 0
