"""Reconciliation and campaign listing result types."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ReconciliationResult:
    """Outcome of one reconciliation call.

    ``total_count`` is ``existing_count + added_count - removed_count`` computed
    locally from the pre-mutation fetch; it is not re-read from the platform,
    so ``total_is_estimate`` is always true.
    """

    applied_geo_targets: list[str] = field(default_factory=list)
    added_count: int = 0
    removed_count: int = 0
    total_count: int = 0
    existing_count: int = 0
    total_is_estimate: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "applied_geo_targets": list(self.applied_geo_targets),
            "added_count": self.added_count,
            "removed_count": self.removed_count,
            "total_count": self.total_count,
            "existing_count": self.existing_count,
            "total_is_estimate": self.total_is_estimate,
        }


@dataclass(frozen=True)
class CampaignLocation:
    """An existing campaign target annotated with a display name from the address index."""

    resource_name: str
    geo_target_constant: str | None
    criteria_id: str | None
    name: str
    state: str | None = None
