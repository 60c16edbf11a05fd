"""Search result types."""

from dataclasses import dataclass, field
from typing import Any, Protocol


class _MappingRow(Protocol):
    zip_code: str
    city: str
    county: str
    state: str
    country_code: str

    @property
    def geo_target(self) -> str | None: ...


@dataclass(frozen=True)
class LocationCandidate:
    """A display-ready location. Identity is (city, state, zip_code)."""

    city: str
    state: str
    zip_code: str
    county: str = field(default="", compare=False)
    country_code: str = field(default="US", compare=False)
    geo_target: str | None = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.city, self.state, self.zip_code)

    @property
    def display_name(self) -> str:
        return f"{self.city}, {self.state} {self.zip_code}"

    @classmethod
    def from_row(cls, row: _MappingRow) -> "LocationCandidate":
        return cls(
            city=row.city,
            state=row.state,
            zip_code=row.zip_code,
            county=row.county,
            country_code=row.country_code,
            geo_target=row.geo_target,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "city": self.city,
            "county": self.county,
            "state": self.state,
            "zip_code": self.zip_code,
            "country_code": self.country_code,
            "display_name": self.display_name,
            "geo_target": self.geo_target,
        }


def dedupe_candidates(candidates: list[LocationCandidate]) -> list[LocationCandidate]:
    """Drop repeated (city, state, zip_code) entries, keeping the first occurrence."""
    seen: set[tuple[str, str, str]] = set()
    unique: list[LocationCandidate] = []
    for candidate in candidates:
        if candidate.key in seen:
            continue
        seen.add(candidate.key)
        unique.append(candidate)
    return unique


@dataclass
class BatchSearchResult:
    """Union of per-term matches plus the terms that matched nothing."""

    results: list[LocationCandidate] = field(default_factory=list)
    unmatched: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.results)

    @property
    def unmatched_count(self) -> int:
        return len(self.unmatched)
