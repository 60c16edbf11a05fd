"""Address index service — read-only lookups over the address geographic mapping table."""

import re
from collections.abc import Iterable

from sqlalchemy import ColumnElement, String, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from geotarget_api.lib.jurisdictions import Whitelist
from geotarget_api.lib.search import ParsedQuery, parse_query
from geotarget_api.models.address_mapping import AddressMapping

# "Duluth (GA)", the display form used when listing campaign locations
_NAME_WITH_STATE = re.compile(r"^(?P<name>.+?)\s*\((?P<state>[A-Za-z]{2})\)$")
_CRITERIA_ID = re.compile(r"^\d+$")
_ZIP_CODE = re.compile(r"^\d{5}$")


def _substring(column: ColumnElement[str], value: str) -> ColumnElement[bool]:
    return func.lower(column, type_=String).contains(value.strip().lower(), autoescape=True)


def _equals_ci(column: ColumnElement[str], value: str) -> ColumnElement[bool]:
    return func.lower(column) == value.strip().lower()


class AddressIndex:
    """Query helper for ``address_geographic_mappings``.

    Never writes. Every whitelist-scoped method returns nothing for an empty
    whitelist without touching the database.

    Args:
        session: Database session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_state(
        self,
        *,
        zip_code: str | None = None,
        city: str | None = None,
        county: str | None = None,
    ) -> str | None:
        """Find the state for an address, trying zip code, then city, then county.

        Matching is exact and case-insensitive. The first component that
        matches any row decides; ties within a component resolve to the
        alphabetically first state.

        Returns:
            Two-letter state code, or None if no component matches.
        """
        lookups: list[tuple[ColumnElement[str], str | None]] = [
            (AddressMapping.zip_code, zip_code),
            (AddressMapping.city, city),
            (AddressMapping.county, county),
        ]
        for column, value in lookups:
            if value is None or not value.strip():
                continue
            result = await self._session.execute(
                select(AddressMapping.state)
                .where(_equals_ci(column, value))
                .order_by(AddressMapping.state)
                .limit(1)
            )
            state = result.scalar_one_or_none()
            if state:
                return state
        return None

    async def find_matches(
        self,
        parsed: ParsedQuery,
        states: Whitelist,
        *,
        limit: int | None = None,
        include_zip: bool = True,
        include_city: bool = True,
        include_county: bool = True,
    ) -> list[AddressMapping]:
        """Find rows matching all requested filters within the whitelisted states.

        Zip code matches exactly; city and county are case-insensitive
        substring matches. The ``include_*`` flags let callers drop a filter
        for a particular search stage.

        Args:
            parsed: Parsed query terms.
            states: Whitelisted state codes.
            limit: Maximum rows to return.

        Returns:
            Rows ordered by state, city, then zip code.
        """
        if not states or parsed.is_empty:
            return []

        stmt = select(AddressMapping).where(AddressMapping.state.in_(sorted(states)))
        if include_zip and parsed.zip_code:
            stmt = stmt.where(AddressMapping.zip_code == parsed.zip_code)
        if include_city and parsed.city:
            stmt = stmt.where(_substring(AddressMapping.city, parsed.city))
        if include_county and parsed.county:
            stmt = stmt.where(_substring(AddressMapping.county, parsed.county))
        stmt = stmt.order_by(AddressMapping.state, AddressMapping.city, AddressMapping.zip_code)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_name(
        self,
        name: str,
        states: Whitelist,
        *,
        country_code: str | None = None,
    ) -> list[AddressMapping]:
        """Resolve a location name to every row that carries a criteria ID.

        An all-digit name other than a five-digit postal code is taken as a
        criteria ID. Anything else is parsed like a search query but matched
        exactly (case-insensitive); a county hint matches the county with or
        without its trailing "County". A trailing ``(ST)`` narrows the lookup
        to that state when it is whitelisted. Rows from every whitelisted
        state are returned, so a city name shared across states stays
        ambiguous.
        """
        scoped = set(states)
        name = name.strip()
        match = _NAME_WITH_STATE.match(name)
        if match:
            name = match.group("name")
            scoped &= {match.group("state").upper()}
        if not scoped:
            return []

        stmt = select(AddressMapping).where(
            AddressMapping.state.in_(sorted(scoped)),
            AddressMapping.criteria_id.is_not(None),
        )
        if country_code:
            stmt = stmt.where(AddressMapping.country_code == country_code.strip().upper())

        if _CRITERIA_ID.match(name) and not _ZIP_CODE.match(name):
            stmt = stmt.where(AddressMapping.criteria_id == name)
        else:
            parsed = parse_query(name)
            if parsed.is_empty:
                return []
            if parsed.zip_code:
                stmt = stmt.where(AddressMapping.zip_code == parsed.zip_code)
            if parsed.city:
                stmt = stmt.where(_equals_ci(AddressMapping.city, parsed.city))
            if parsed.county:
                hint = parsed.county.strip().lower()
                stmt = stmt.where(func.lower(AddressMapping.county).in_([hint, f"{hint} county"]))
        stmt = stmt.order_by(AddressMapping.state, AddressMapping.city, AddressMapping.zip_code)

        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def find_by_criteria_ids(self, criteria_ids: Iterable[str]) -> dict[str, AddressMapping]:
        """Map criteria IDs to their index rows; unknown IDs are absent from the result."""
        ids = sorted({cid for cid in criteria_ids if cid})
        if not ids:
            return {}
        result = await self._session.execute(select(AddressMapping).where(AddressMapping.criteria_id.in_(ids)))
        return {row.criteria_id: row for row in result.scalars().all() if row.criteria_id}

    async def count_by_state(self) -> dict[str, int]:
        """Row counts per state, for index statistics."""
        result = await self._session.execute(
            select(AddressMapping.state, func.count()).group_by(AddressMapping.state).order_by(AddressMapping.state)
        )
        return {state: count for state, count in result.all()}
