"""Geo target reconciliation — apply desired campaign locations with minimal platform mutations.

The reconciler removes first, then resolves location names through the
address index, diffs against the campaign's existing criteria by numeric
criteria ID, and adds only what is missing. Platform errors propagate.
"""

from collections.abc import Iterable

from loguru import logger

from geotarget_api.lib.jurisdictions import Whitelist
from geotarget_api.lib.platform import ExistingTarget, PlatformClient, criteria_id_of, to_geo_target
from geotarget_api.lib.targeting import (
    CampaignLocation,
    DesiredLocation,
    LocationName,
    ReconciliationResult,
    ResolvedTarget,
    parse_desired_locations,
)
from geotarget_api.services.address_index import AddressIndex

UNKNOWN_LOCATION = "Unknown"


class GeoTargetReconciler:
    """Reconcile one campaign's location targets with a desired set.

    Not transactional: a failure after the remove phase leaves the removals
    in place. Callers serialize reconciliations per campaign.

    Args:
        index: Address index used to resolve location names.
        platform: Client for the platform that holds the campaign.
    """

    def __init__(self, index: AddressIndex, platform: PlatformClient) -> None:
        self._index = index
        self._platform = platform

    async def apply(
        self,
        campaign_id: str,
        desired: Iterable[DesiredLocation] | str | None,
        *,
        country_code: str = "US",
        whitelist: Whitelist,
        to_remove: Iterable[str] | None = None,
    ) -> ReconciliationResult:
        """Apply desired locations to a campaign.

        Args:
            campaign_id: Campaign to modify.
            desired: Tagged locations, or loosely shaped raw input
                (comma-separated string or list of names/identifiers).
            country_code: Country used when resolving names.
            whitelist: States names may resolve into.
            to_remove: Campaign criterion resource names to remove.

        Returns:
            ReconciliationResult. ``total_count`` is an estimate.

        Raises:
            PlatformError: If any platform call fails.
        """
        locations = self._coerce_desired(desired)
        removals = [name.strip() for name in to_remove or [] if name and name.strip()]

        if not locations and not removals:
            return ReconciliationResult()

        removed_count = 0
        if removals:
            removed = await self._platform.remove_targets(removals)
            removed_count = len(removed)
            logger.info(f"Removed {removed_count} of {len(removals)} targets from campaign {campaign_id}")

        targets = await self._resolve(locations, whitelist=whitelist, country_code=country_code)
        unique_targets = list(dict.fromkeys(targets))
        if not unique_targets:
            if locations:
                logger.warning(f"No geo targets resolved for campaign {campaign_id}; nothing to add")
            return ReconciliationResult(removed_count=removed_count)

        existing = await self._platform.fetch_existing_targets(campaign_id)
        existing_ids = {target.criteria_id for target in existing if target.criteria_id}
        targets_to_add = [target for target in unique_targets if criteria_id_of(target) not in existing_ids]
        logger.info(
            f"Campaign {campaign_id}: {len(existing)} existing, "
            f"{len(unique_targets)} desired, {len(targets_to_add)} to add"
        )

        added_count = 0
        if targets_to_add:
            added = await self._platform.add_location_targets(campaign_id, targets_to_add)
            added_count = len(added)

        # existing was read after the remove phase
        existing_before = len(existing) + removed_count
        return ReconciliationResult(
            applied_geo_targets=unique_targets,
            added_count=added_count,
            removed_count=removed_count,
            total_count=max(0, existing_before + added_count - removed_count),
            existing_count=existing_before,
        )

    async def describe_targets(self, existing: list[ExistingTarget]) -> list[CampaignLocation]:
        """Name a campaign's current targets using the address index.

        Targets found in the index are named ``"{city} ({state})"``; others
        keep their raw identifier; targets without one are ``Unknown``.
        """
        rows = await self._index.find_by_criteria_ids(t.criteria_id for t in existing if t.criteria_id)

        locations: list[CampaignLocation] = []
        for target in existing:
            criteria_id = target.criteria_id
            row = rows.get(criteria_id) if criteria_id else None
            if row is not None:
                name, state = f"{row.city} ({row.state})", row.state
            else:
                name, state = target.geo_target_constant or UNKNOWN_LOCATION, None
            locations.append(
                CampaignLocation(
                    resource_name=target.resource_name,
                    geo_target_constant=target.geo_target_constant,
                    criteria_id=criteria_id,
                    name=name,
                    state=state,
                )
            )
        return locations

    async def list_campaign_locations(self, campaign_id: str) -> list[CampaignLocation]:
        """Fetch a campaign's targets from the platform and describe them."""
        existing = await self._platform.fetch_existing_targets(campaign_id)
        return await self.describe_targets(existing)

    @staticmethod
    def _coerce_desired(desired: Iterable[DesiredLocation] | str | None) -> list[DesiredLocation]:
        if desired is None or isinstance(desired, str):
            return parse_desired_locations(desired)
        items = list(desired)
        if all(isinstance(item, LocationName | ResolvedTarget) for item in items):
            return items
        return parse_desired_locations(items)

    async def _resolve(
        self,
        locations: list[DesiredLocation],
        *,
        whitelist: Whitelist,
        country_code: str,
    ) -> list[str]:
        """Turn tagged locations into geo target identifiers, dropping unresolvable names."""
        targets: list[str] = []
        for location in locations:
            if isinstance(location, ResolvedTarget):
                targets.append(location.identifier)
                continue

            rows = await self._index.find_by_name(location.name, whitelist, country_code=country_code)
            if not rows:
                logger.warning(f"Could not resolve location {location.name!r} in {sorted(whitelist)}")
                continue
            targets.extend(to_geo_target(row.criteria_id) for row in rows if row.criteria_id)
        return targets
