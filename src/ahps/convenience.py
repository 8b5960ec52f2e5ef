"""
High-level convenience functions for AHPS river gauge data.
"""

from typing import Any, Dict, Optional

from .client import AHPSClient
from .exceptions import EmptyForecastError, EmptyObservationError
from .models import RiverPoint, SiteRecord
from .utils import add_sync_version


async def _fetch_site(gauge: str, client: Optional[AHPSClient]) -> SiteRecord:
    if client is not None:
        return await client.get_site(gauge)
    async with AHPSClient() as temp_client:
        return await temp_client.get_site(gauge)


def _point_dict(point: RiverPoint) -> Dict[str, Any]:
    return {
        "value": point.value,
        "unit": point.unit,
        "timestamp": point.timestamp.isoformat(),
    }


@add_sync_version
async def get_site(gauge: str, client: Optional[AHPSClient] = None) -> SiteRecord:
    """
    Retrieve the full report for a gauge.

    Args:
        gauge: Gauge identifier (e.g., 'btrl1')
        client: Optional client; a temporary one is used when omitted

    Returns:
        SiteRecord for the gauge
    """
    return await _fetch_site(gauge, client)


@add_sync_version
async def get_current_stage(gauge: str, client: Optional[AHPSClient] = None) -> str:
    """Get the current flood stage name for a gauge ('unknown' below all stages)."""
    site = await _fetch_site(gauge, client)
    return site.get_current_stage()


@add_sync_version
async def get_current_level(
    gauge: str, client: Optional[AHPSClient] = None
) -> RiverPoint:
    """Get the most recent observed level for a gauge."""
    site = await _fetch_site(gauge, client)
    return site.get_current_level()


@add_sync_version
async def get_projected_crest(
    gauge: str, client: Optional[AHPSClient] = None
) -> RiverPoint:
    """Get the highest forecast level for a gauge."""
    site = await _fetch_site(gauge, client)
    return site.get_projected_crest()


def summarize_site(site: SiteRecord) -> Dict[str, Any]:
    """
    Build a plain dictionary describing the current state of a site.

    Missing observations or forecasts are reported as None instead of raising.
    """
    summary: Dict[str, Any] = {
        "site_id": site.id,
        "name": site.name,
        "generation_time": site.generation_time,
        "stage": None,
        "level": None,
        "crest": None,
        "forecast_issued": site.forecast.issued or None,
        "significant_stages": {
            name: {"value": t.value, "units": t.units}
            for name, t in site.significant_stages.items()
        },
        "metadata": {
            "n_observed": len(site.observed),
            "n_forecast": len(site.forecast),
        },
    }

    try:
        summary["stage"] = site.get_current_stage()
        summary["level"] = _point_dict(site.get_current_level())
    except EmptyObservationError:
        pass

    try:
        summary["crest"] = _point_dict(site.get_projected_crest())
    except EmptyForecastError:
        pass

    return summary


@add_sync_version
async def get_river_summary(
    gauge: str, client: Optional[AHPSClient] = None
) -> Dict[str, Any]:
    """
    Get stage, level and crest for a gauge in one call.

    Args:
        gauge: Gauge identifier (e.g., 'btrl1')
        client: Optional client; a temporary one is used when omitted

    Returns:
        Dictionary from :func:`summarize_site`
    """
    site = await _fetch_site(gauge, client)
    return summarize_site(site)
