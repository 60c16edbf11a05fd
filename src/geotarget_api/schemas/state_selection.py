"""Pydantic v2 schemas for the session state whitelist."""

from pydantic import BaseModel, Field


class StateSelectionsResponse(BaseModel):
    """Current whitelist for the session."""

    selected_states: list[str] = Field(default_factory=list)
    any_selected: bool = False


class StateSelectionsUpdateRequest(BaseModel):
    """Replace the whitelist. ``states`` is accepted as an alias of ``state_codes``."""

    state_codes: list[str] | str | None = None
    states: list[str] | str | None = None

    @property
    def codes(self) -> list[str] | str:
        if self.state_codes is not None:
            return self.state_codes
        return self.states or []


class StateSelectionsUpdateResponse(BaseModel):
    """Result of replacing or clearing the whitelist."""

    success: bool = True
    selected_states: list[str] = Field(default_factory=list)
    message: str
