"""Google Ads REST implementation of the platform client.

Reads go through ``googleAds:search`` and fall back to ``googleAds:searchStream``
when the paged endpoint fails; writes go through ``campaignCriteria:mutate``
with partial failure enabled so the platform may accept a subset of a batch.
"""

from __future__ import annotations

import json
import time
from typing import Any

import httpx
from loguru import logger

from geotarget_api.lib.platform.base import ExistingTarget, PlatformClient, PlatformError

# Refresh the access token this many seconds before Google says it expires
_TOKEN_EXPIRY_MARGIN = 60.0

_LOCATION_CRITERIA_QUERY = """
SELECT
  campaign_criterion.resource_name,
  campaign_criterion.location.geo_target_constant
FROM campaign_criterion
WHERE
  campaign_criterion.campaign = 'customers/{customer_id}/campaigns/{campaign_id}'
  AND campaign_criterion.type = LOCATION
""".strip()


def extract_error_message(response: httpx.Response) -> str:
    """Pull the most specific error message out of a Google Ads error body.

    Prefers ``error.details[0].errors[0].message`` and falls back to
    ``error.message``, then to the raw body.
    """
    try:
        body = response.json()
    except json.JSONDecodeError:
        return response.text[:200] or response.reason_phrase

    error = body.get("error", {}) if isinstance(body, dict) else {}
    for detail in error.get("details") or []:
        for item in detail.get("errors") or []:
            if item.get("message"):
                return str(item["message"])
    if error.get("message"):
        return str(error["message"])
    return response.text[:200] or response.reason_phrase


def _parse_criterion_rows(rows: list[dict[str, Any]]) -> list[ExistingTarget]:
    """Map search result rows to ExistingTarget, skipping non-location rows."""
    targets: list[ExistingTarget] = []
    for row in rows:
        criterion = row.get("campaignCriterion") or row.get("campaign_criterion")
        if not criterion:
            continue
        location = criterion.get("location") or {}
        constant = location.get("geoTargetConstant") or location.get("geo_target_constant")
        if not constant:
            continue
        targets.append(
            ExistingTarget(
                resource_name=criterion.get("resourceName") or criterion.get("resource_name") or "",
                geo_target_constant=constant,
            )
        )
    return targets


class GoogleAdsClient(PlatformClient):
    """Google Ads REST client bound to one customer account.

    Args:
        customer_id: Customer account that owns the campaigns.
        developer_token: Google Ads developer token.
        client_id: OAuth client ID.
        client_secret: OAuth client secret.
        refresh_token: OAuth refresh token for the connected account.
        login_customer_id: Manager account ID for mutate calls, if any.
        base_url: REST API base URL.
        api_version: REST API version segment (e.g. "v22").
        token_url: OAuth token endpoint.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        *,
        customer_id: str,
        developer_token: str,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        login_customer_id: str | None = None,
        base_url: str = "https://googleads.googleapis.com",
        api_version: str = "v22",
        token_url: str = "https://oauth2.googleapis.com/token",
        timeout: float = 30.0,
    ) -> None:
        self._customer_id = customer_id.replace("-", "")
        self._developer_token = developer_token
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._login_customer_id = login_customer_id
        self._token_url = token_url
        self._access_token: str | None = None
        self._token_expires_at = 0.0
        self._client = httpx.AsyncClient(
            base_url=f"{base_url.rstrip('/')}/{api_version}",
            timeout=timeout,
        )

    @property
    def provider_name(self) -> str:
        return "google_ads"

    @property
    def customer_id(self) -> str:
        return self._customer_id

    async def fetch_existing_targets(self, campaign_id: str) -> list[ExistingTarget]:
        """Fetch location criteria for a campaign, trying paged search then search-stream."""
        query = _LOCATION_CRITERIA_QUERY.format(customer_id=self._customer_id, campaign_id=campaign_id)
        logger.info(f"Fetching existing geo targets for campaign {campaign_id}")

        try:
            rows = await self._search(query)
        except PlatformError as exc:
            logger.warning(f"googleAds:search failed, retrying via searchStream: {exc.message}")
            rows = await self._search_stream(query)

        targets = _parse_criterion_rows(rows)
        logger.info(f"Found {len(targets)} existing geo targets for campaign {campaign_id}")
        return targets

    async def add_location_targets(self, campaign_id: str, identifiers: list[str]) -> list[str]:
        """Create one location criterion per identifier on the campaign."""
        if not identifiers:
            return []
        campaign = f"customers/{self._customer_id}/campaigns/{campaign_id}"
        operations = [
            {"create": {"campaign": campaign, "location": {"geoTargetConstant": identifier}}}
            for identifier in identifiers
        ]
        logger.info(f"Adding {len(operations)} location targets to campaign {campaign_id}")
        created = await self._mutate_criteria(operations)
        logger.info(f"Created {len(created)} of {len(operations)} location targets")
        return created

    async def remove_targets(self, resource_names: list[str]) -> list[str]:
        """Remove campaign criteria by resource name."""
        if not resource_names:
            return []
        operations = [{"remove": resource_name} for resource_name in resource_names]
        logger.info(f"Removing {len(operations)} location targets")
        removed = await self._mutate_criteria(operations)
        logger.info(f"Removed {len(removed)} of {len(operations)} location targets")
        return removed

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _search(self, query: str) -> list[dict[str, Any]]:
        """Run a GAQL query through the paged search endpoint."""
        rows: list[dict[str, Any]] = []
        payload: dict[str, Any] = {"query": query}
        while True:
            data = await self._post(f"/customers/{self._customer_id}/googleAds:search", payload)
            rows.extend(data.get("results") or [])
            page_token = data.get("nextPageToken")
            if not page_token:
                return rows
            payload = {"query": query, "pageToken": page_token}

    async def _search_stream(self, query: str) -> list[dict[str, Any]]:
        """Run a GAQL query through the search-stream endpoint (a JSON array of batches)."""
        data = await self._post(f"/customers/{self._customer_id}/googleAds:searchStream", {"query": query})
        if isinstance(data, list):
            rows: list[dict[str, Any]] = []
            for batch in data:
                rows.extend(batch.get("results") or [])
            return rows
        logger.warning("searchStream returned a non-list response")
        return data.get("results") or []

    async def _mutate_criteria(self, operations: list[dict[str, Any]]) -> list[str]:
        """Send campaign criterion operations and return the resource names that succeeded."""
        data = await self._post(
            f"/customers/{self._customer_id}/campaignCriteria:mutate",
            {"operations": operations, "partialFailure": True},
            login_customer_id=self._login_customer_id,
        )
        if data.get("partialFailureError"):
            logger.warning(f"Partial failure on criteria mutate: {data['partialFailureError'].get('message')}")
        # Failed operations come back as empty result objects
        return [r["resourceName"] for r in data.get("results") or [] if r.get("resourceName")]

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        login_customer_id: str | None = None,
    ) -> Any:
        """POST an authenticated JSON request and decode the response."""
        headers = {
            "Authorization": f"Bearer {await self._get_access_token()}",
            "developer-token": self._developer_token,
            "login-customer-id": login_customer_id or self._customer_id,
        }
        try:
            response = await self._client.post(path, json=payload, headers=headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            message = extract_error_message(exc.response)
            logger.error(f"Google Ads API error {exc.response.status_code} for {path}: {message}")
            raise PlatformError(self.provider_name, message, status_code=exc.response.status_code) from exc
        except httpx.RequestError as exc:
            logger.error(f"Google Ads request failed for {path}: {exc}")
            raise PlatformError(self.provider_name, f"Request failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            logger.error(f"Google Ads returned non-JSON response for {path}")
            raise PlatformError(self.provider_name, f"Invalid JSON response for {path}") from exc

    async def _get_access_token(self) -> str:
        """Exchange the refresh token for an access token, reusing it until shortly before expiry."""
        if self._access_token and time.monotonic() < self._token_expires_at:
            return self._access_token

        try:
            response = await self._client.post(
                self._token_url,
                data={
                    "grant_type": "refresh_token",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._refresh_token,
                },
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            logger.error(f"OAuth token refresh failed: HTTP {exc.response.status_code}")
            raise PlatformError(
                self.provider_name,
                "Failed to obtain access token",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise PlatformError(self.provider_name, f"Token request failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            logger.error("OAuth token endpoint returned a non-JSON response")
            raise PlatformError(self.provider_name, "Invalid JSON response from token endpoint") from exc

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise PlatformError(self.provider_name, "Failed to obtain access token")
        self._access_token = token
        self._token_expires_at = time.monotonic() + float(body.get("expires_in", 3600)) - _TOKEN_EXPIRY_MARGIN
        return token
