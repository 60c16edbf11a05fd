"""Advertising platform library — the boundary the geo target reconciler talks to.

Public API:
    - PlatformClient: Abstract platform interface (fetch / add / remove location targets)
    - PlatformError: Transport or service error raised by any client
    - ExistingTarget: A location criterion currently applied to a campaign
    - GoogleAdsClient: Google Ads REST implementation
    - build_platform_client: Build a configured client from settings
    - GEO_TARGET_PREFIX / to_geo_target / is_geo_target / criteria_id_of: identifier helpers
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from geotarget_api.lib.platform.base import (
    GEO_TARGET_PREFIX,
    ExistingTarget,
    PlatformClient,
    PlatformError,
    criteria_id_of,
    is_geo_target,
    to_geo_target,
)
from geotarget_api.lib.platform.google_ads import GoogleAdsClient

if TYPE_CHECKING:
    from geotarget_api.core.config import Settings


def build_platform_client(settings: Settings, customer_id: str | None = None) -> PlatformClient:
    """Create a Google Ads client for ``customer_id`` (or the configured default).

    Raises:
        PlatformError: If credentials or a customer ID are missing.
    """
    resolved_customer = (customer_id or settings.google_ads_customer_id or "").replace("-", "").strip()
    if not resolved_customer:
        raise PlatformError("google_ads", "No customer_id supplied and GOOGLE_ADS_CUSTOMER_ID is not set")
    if not settings.google_ads_configured:
        raise PlatformError("google_ads", "Google Ads credentials are not configured")

    return GoogleAdsClient(
        customer_id=resolved_customer,
        developer_token=settings.google_ads_developer_token or "",
        client_id=settings.google_ads_client_id or "",
        client_secret=settings.google_ads_client_secret or "",
        refresh_token=settings.google_ads_refresh_token or "",
        login_customer_id=settings.google_ads_login_customer_id,
        base_url=settings.google_ads_api_base_url,
        api_version=settings.google_ads_api_version,
        token_url=settings.google_ads_token_url,
        timeout=settings.google_ads_timeout,
    )


__all__ = [
    "GEO_TARGET_PREFIX",
    "ExistingTarget",
    "GoogleAdsClient",
    "PlatformClient",
    "PlatformError",
    "build_platform_client",
    "criteria_id_of",
    "is_geo_target",
    "to_geo_target",
]
