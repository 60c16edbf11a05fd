"""Location search library — query parsing and result types.

Public API:
    - parse_query / split_terms / ParsedQuery: free-text query parsing
    - LocationCandidate / BatchSearchResult: search result types
    - dedupe_candidates: first-seen deduplication by (city, state, zip_code)
"""

from geotarget_api.lib.search.candidates import BatchSearchResult, LocationCandidate, dedupe_candidates
from geotarget_api.lib.search.query import MIN_QUERY_LENGTH, ParsedQuery, parse_query, split_terms

__all__ = [
    "MIN_QUERY_LENGTH",
    "BatchSearchResult",
    "LocationCandidate",
    "ParsedQuery",
    "dedupe_candidates",
    "parse_query",
    "split_terms",
]
