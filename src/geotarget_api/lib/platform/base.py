"""Abstract advertising-platform interface and geo target identifier helpers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass

GEO_TARGET_PREFIX = "geoTargetConstants/"


def to_geo_target(criteria_id: str | int) -> str:
    """Build the platform identifier for a numeric criteria ID."""
    return f"{GEO_TARGET_PREFIX}{criteria_id}"


def is_geo_target(value: str) -> bool:
    """Whether ``value`` is already a platform identifier rather than a location name."""
    return value.startswith(GEO_TARGET_PREFIX)


def criteria_id_of(identifier: str) -> str:
    """Extract the numeric criteria ID from an identifier.

    Works for ``geoTargetConstants/1014221`` as well as other namespaced
    forms ending in ``/<id>`` and for bare IDs.
    """
    return identifier.rstrip("/").rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ExistingTarget:
    """A location criterion currently applied to a campaign.

    ``resource_name`` is the campaign criterion handle used for removal;
    ``geo_target_constant`` is the location identifier it targets, when known.
    """

    resource_name: str
    geo_target_constant: str | None = None

    @property
    def criteria_id(self) -> str | None:
        if not self.geo_target_constant:
            return None
        return criteria_id_of(self.geo_target_constant)


class PlatformError(Exception):
    """Raised when the advertising platform rejects a call or cannot be reached.

    Args:
        provider_name: Name of the failing platform client.
        message: Human-readable error description.
        status_code: Optional HTTP status code from the platform.
    """

    def __init__(self, provider_name: str, message: str, status_code: int | None = None) -> None:
        self.provider_name = provider_name
        self.message = message
        self.status_code = status_code
        super().__init__(f"{provider_name}: {message}")


class PlatformClient(ABC):
    """Abstract interface to the platform that holds a campaign's location targets.

    Implementations may use any transport internally; callers only see these
    three operations and ``PlatformError``.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Unique short name for this platform client (e.g. 'google_ads')."""

    @abstractmethod
    async def fetch_existing_targets(self, campaign_id: str) -> list[ExistingTarget]:
        """Return the location criteria currently applied to a campaign."""

    @abstractmethod
    async def add_location_targets(self, campaign_id: str, identifiers: list[str]) -> list[str]:
        """Add location criteria to a campaign.

        Args:
            campaign_id: Campaign to modify.
            identifiers: Geo target identifiers to add.

        Returns:
            Resource names of the criteria actually created.
        """

    @abstractmethod
    async def remove_targets(self, resource_names: list[str]) -> list[str]:
        """Remove campaign criteria by resource name.

        Returns:
            Resource names actually removed.
        """

    async def close(self) -> None:  # noqa: B027
        """Release transport resources. No-op by default."""
