"""Jurisdiction library — region code enumeration and the session state whitelist."""

from geotarget_api.lib.jurisdictions.regions import VALID_STATE_CODES, is_valid_state_code, normalize_state_code
from geotarget_api.lib.jurisdictions.whitelist import (
    SESSION_KEY,
    InvalidRegionCodesError,
    StateWhitelist,
    Whitelist,
    normalize_state_codes,
    to_whitelist,
)

__all__ = [
    "SESSION_KEY",
    "VALID_STATE_CODES",
    "InvalidRegionCodesError",
    "StateWhitelist",
    "Whitelist",
    "is_valid_state_code",
    "normalize_state_code",
    "normalize_state_codes",
    "to_whitelist",
]
