"""Free-text location query parsing.

A query is split on commas into sub-terms. Each sub-term contributes at most
one postal code (five consecutive digits), a county hint (any text containing
the word "county", with that word removed), or a city name. Bare two-letter
state codes are dropped because the whitelist decides which states apply.
"""

import re
from dataclasses import dataclass

from geotarget_api.lib.jurisdictions.regions import VALID_STATE_CODES

MIN_QUERY_LENGTH = 2

_ZIP_PATTERN = re.compile(r"(?<!\d)(\d{5})(?!\d)")
_COUNTY_TOKEN = re.compile(r"\bcounty\b", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ParsedQuery:
    """Structured search terms extracted from free text. All filters are ANDed."""

    zip_code: str | None = None
    city: str | None = None
    county: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.zip_code or self.city or self.county)


def _clean(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip(" ,")


def split_terms(query: str) -> list[str]:
    """Split a comma-separated query into trimmed, non-blank terms."""
    return [part.strip() for part in query.split(",") if part.strip()]


def parse_query(query: str) -> ParsedQuery:
    """Parse a query into a conjunction of postal code, city, and county filters.

    The first plain name becomes the city; a second plain name is taken as
    the county when no explicit county hint was given (``"Duluth, Gwinnett"``).

    Args:
        query: Raw query text, possibly comma-separated.

    Returns:
        ParsedQuery; empty when nothing usable was found.
    """
    zip_code: str | None = None
    city: str | None = None
    county: str | None = None
    extra_names: list[str] = []

    for part in split_terms(query):
        remainder = part
        zip_match = _ZIP_PATTERN.search(remainder)
        if zip_match:
            if zip_code is None:
                zip_code = zip_match.group(1)
            remainder = _clean(remainder[: zip_match.start()] + " " + remainder[zip_match.end() :])
        if not remainder:
            continue

        if _COUNTY_TOKEN.search(remainder):
            hint = _clean(_COUNTY_TOKEN.sub(" ", remainder))
            if hint and county is None:
                county = hint
            continue

        if len(remainder) == 2 and remainder.upper() in VALID_STATE_CODES:
            continue

        if city is None:
            city = remainder
        else:
            extra_names.append(remainder)

    if county is None and extra_names:
        county = extra_names[0]

    return ParsedQuery(zip_code=zip_code, city=city, county=county)
