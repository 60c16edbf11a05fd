"""Desired-location input: a location name to resolve, or an already-resolved geo target."""

from collections.abc import Iterable
from dataclasses import dataclass

from geotarget_api.lib.platform.base import is_geo_target


@dataclass(frozen=True)
class LocationName:
    """Human-readable location that must be resolved through the address index."""

    name: str


@dataclass(frozen=True)
class ResolvedTarget:
    """Platform identifier supplied directly by the caller (``geoTargetConstants/<id>``)."""

    identifier: str


DesiredLocation = LocationName | ResolvedTarget


def classify_location(value: str) -> DesiredLocation:
    """Tag a single trimmed, non-blank entry."""
    if is_geo_target(value):
        return ResolvedTarget(value)
    return LocationName(value)


def parse_desired_locations(raw: str | Iterable[object] | None) -> list[DesiredLocation]:
    """Normalize loosely shaped location input into tagged entries.

    Accepts a comma-separated string, a list of names, a list of identifiers,
    or any mix. Comma-joined list items are split, whitespace is trimmed, and
    blanks are dropped. Order is preserved; duplicates are kept for the
    reconciler to collapse after resolution.
    """
    if raw is None:
        return []
    items: Iterable[object] = [raw] if isinstance(raw, str) else raw

    locations: list[DesiredLocation] = []
    for item in items:
        if item is None:
            continue
        for part in str(item).split(","):
            value = part.strip()
            if value:
                locations.append(classify_location(value))
    return locations
