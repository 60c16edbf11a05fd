"""Fixed enumeration of region codes that may appear in a state whitelist."""

VALID_STATE_CODES: frozenset[str] = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
        "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
        "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
        "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
        "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
    }
)  # fmt: skip


def normalize_state_code(code: object) -> str:
    """Uppercase and trim a single region code."""
    return str(code).strip().upper()


def is_valid_state_code(code: str) -> bool:
    return normalize_state_code(code) in VALID_STATE_CODES
