"""Session-scoped state whitelist.

The whitelist is stored in a caller-provided mutable mapping (the signed
session dict in the API) under ``selected_states``. Reads hand back an
immutable ``frozenset`` that is then passed explicitly into search,
validation, and reconciliation calls.
"""

from collections.abc import Iterable, MutableMapping
from typing import Any

from loguru import logger

from geotarget_api.lib.jurisdictions.regions import VALID_STATE_CODES, normalize_state_code

SESSION_KEY = "selected_states"

Whitelist = frozenset[str]


class InvalidRegionCodesError(ValueError):
    """Raised when a whitelist update contains codes outside the fixed enumeration.

    Args:
        invalid_codes: The rejected codes, in input order.
    """

    def __init__(self, invalid_codes: list[str]) -> None:
        self.invalid_codes = invalid_codes
        super().__init__(f"Invalid state codes: {', '.join(invalid_codes)}")


def normalize_state_codes(codes: Iterable[Any] | str | None) -> list[str]:
    """Uppercase, trim, and deduplicate codes preserving first-seen order; blanks are dropped."""
    if codes is None:
        return []
    if isinstance(codes, str):
        codes = [codes]
    seen: dict[str, None] = {}
    for code in codes:
        if code is None:
            continue
        normalized = normalize_state_code(code)
        if normalized:
            seen.setdefault(normalized, None)
    return list(seen)


def to_whitelist(codes: Iterable[Any] | str | None) -> Whitelist:
    """Build a whitelist value from loosely formatted codes without validating them."""
    return frozenset(normalize_state_codes(codes))


class StateWhitelist:
    """Approved region codes for one session.

    Args:
        store: Mutable mapping that persists for the session's lifetime.
    """

    def __init__(self, store: MutableMapping[str, Any]) -> None:
        self._store = store

    def get(self) -> Whitelist:
        """Return the currently approved region codes."""
        return frozenset(self._store.get(SESSION_KEY) or [])

    def selected_states(self) -> list[str]:
        """Return the approved codes sorted for display."""
        return sorted(self.get())

    def replace(self, codes: Iterable[Any] | str | None) -> Whitelist:
        """Replace the whitelist wholesale.

        All-or-nothing: if any code is invalid the stored set is left unchanged.

        Raises:
            InvalidRegionCodesError: If any code is not a valid region code.
        """
        normalized = normalize_state_codes(codes)
        invalid = [code for code in normalized if code not in VALID_STATE_CODES]
        if invalid:
            logger.warning(f"Rejected whitelist update with invalid codes: {invalid}")
            raise InvalidRegionCodesError(invalid)

        # Sorted list so the session payload is JSON-serializable and stable
        self._store[SESSION_KEY] = sorted(normalized)
        logger.info(f"State whitelist replaced: {sorted(normalized)}")
        return frozenset(normalized)

    def clear(self) -> Whitelist:
        """Empty the whitelist. Always succeeds."""
        self._store[SESSION_KEY] = []
        return frozenset()

    def any_selected(self) -> bool:
        return bool(self.get())
