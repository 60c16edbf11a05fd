"""Location search service — whitelist-scoped typeahead and batch search over the address index."""

from collections.abc import Iterable

from loguru import logger

from geotarget_api.lib.jurisdictions import Whitelist
from geotarget_api.lib.search import (
    MIN_QUERY_LENGTH,
    BatchSearchResult,
    LocationCandidate,
    ParsedQuery,
    dedupe_candidates,
    parse_query,
    split_terms,
)
from geotarget_api.models.address_mapping import AddressMapping
from geotarget_api.services.address_index import AddressIndex

DEFAULT_LIMIT = 20

# Rows fetched per typeahead stage relative to the limit; duplicates collapse afterwards
_OVERFETCH_FACTOR = 5


def _to_candidates(rows: list[AddressMapping]) -> list[LocationCandidate]:
    return dedupe_candidates([LocationCandidate.from_row(row) for row in rows])


class LocationSearchEngine:
    """Answers location queries restricted to the states a session has approved.

    Args:
        index: Address index to query.
    """

    def __init__(self, index: AddressIndex) -> None:
        self._index = index

    async def search(self, query: str, whitelist: Whitelist, limit: int = DEFAULT_LIMIT) -> list[LocationCandidate]:
        """Typeahead search.

        Stages are tried in order and the first that matches anything wins:
        postal code (with any city/county hint), city (with any county hint),
        then county (the county hint, or the bare name read as a county).

        Args:
            query: Free-text query, possibly comma-separated.
            whitelist: Approved state codes.
            limit: Maximum candidates to return.

        Returns:
            Candidates ordered by state, city, zip code; empty when the
            whitelist is empty or the query is too short.
        """
        text = (query or "").strip()
        if not whitelist or len(text) < MIN_QUERY_LENGTH or limit <= 0:
            return []

        parsed = parse_query(text)
        if parsed.is_empty:
            return []

        fetch_limit = limit * _OVERFETCH_FACTOR
        rows: list[AddressMapping] = []

        if parsed.zip_code:
            rows = await self._index.find_matches(parsed, whitelist, limit=fetch_limit)

        if not rows and parsed.city:
            rows = await self._index.find_matches(parsed, whitelist, limit=fetch_limit, include_zip=False)

        # With both a city and a county hint the city stage already applied the county
        if not rows and not (parsed.city and parsed.county):
            county = parsed.county or parsed.city
            if county:
                rows = await self._index.find_matches(ParsedQuery(county=county), whitelist, limit=fetch_limit)

        candidates = _to_candidates(rows)[:limit]
        logger.debug(f"Typeahead {text!r} matched {len(candidates)} locations in {sorted(whitelist)}")
        return candidates

    async def batch_search(self, search_terms: str | Iterable[str], whitelist: Whitelist) -> BatchSearchResult:
        """Search each comma-separated term independently and union the matches.

        Each term is one conjoined query (a term like ``"30097 Duluth"`` needs
        both the postal code and the city to match). Results keep first-seen
        order across terms and are deduplicated by (city, state, zip code).
        Terms that match nothing are reported in ``unmatched``.
        """
        if isinstance(search_terms, str):
            terms = split_terms(search_terms)
        else:
            terms = [term for raw in search_terms for term in split_terms(raw or "")]

        result = BatchSearchResult()
        if not whitelist or not terms:
            return result

        matched: list[LocationCandidate] = []
        for term in terms:
            parsed = parse_query(term)
            rows = await self._index.find_matches(parsed, whitelist) if not parsed.is_empty else []
            if rows:
                matched.extend(LocationCandidate.from_row(row) for row in rows)
            else:
                result.unmatched.append(term)

        result.results = dedupe_candidates(matched)
        logger.info(
            f"Batch search of {len(terms)} terms in {sorted(whitelist)}: "
            f"{result.count} locations, {result.unmatched_count} unmatched"
        )
        return result
