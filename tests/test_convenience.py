"""
Tests for convenience functions and their sync versions.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest

from ahps.convenience import (
    get_current_level,
    get_current_stage,
    get_projected_crest,
    get_river_summary,
    get_site,
    summarize_site,
)
from ahps.models import SiteRecord
from ahps.sync import AsyncSyncBridge, get_current_stage_sync, get_site_sync
from ahps.client import AHPSClient


@pytest.fixture
def mock_client(btrl1_site):
    """A client whose get_site returns the Baton Rouge fixture."""
    client = AsyncMock()
    client.get_site.return_value = btrl1_site
    return client


class TestConvenienceFunctions:
    """Test async convenience functions."""

    @patch("ahps.convenience.AHPSClient")
    @pytest.mark.asyncio
    async def test_get_site_temporary_client(self, mock_client_class, mock_client):
        """Test that a temporary client is opened when none is given."""
        mock_client_class.return_value.__aenter__.return_value = mock_client
        mock_client_class.return_value.__aexit__.return_value = None

        site = await get_site("btrl1")

        assert site.id == "BTRL1"
        mock_client.get_site.assert_awaited_once_with("btrl1")

    @pytest.mark.asyncio
    async def test_uses_given_client(self, mock_client):
        site = await get_site("btrl1", client=mock_client)
        assert isinstance(site, SiteRecord)
        mock_client.get_site.assert_awaited_once_with("btrl1")

    @pytest.mark.asyncio
    async def test_derived_readings(self, mock_client):
        assert await get_current_stage("btrl1", client=mock_client) == "unknown"
        level = await get_current_level("btrl1", client=mock_client)
        assert level.value == 7.67
        crest = await get_projected_crest("btrl1", client=mock_client)
        assert crest.value == 8.4

    @pytest.mark.asyncio
    async def test_get_river_summary(self, mock_client):
        summary = await get_river_summary("btrl1", client=mock_client)

        assert summary["site_id"] == "BTRL1"
        assert summary["stage"] == "unknown"
        assert summary["level"]["value"] == 7.67
        assert summary["level"]["timestamp"] == "2021-12-14T10:00:00-06:00"
        assert summary["crest"]["value"] == 8.4
        assert summary["significant_stages"]["flood"] == {"value": 35.0, "units": "ft"}
        assert summary["metadata"]["n_observed"] == 3
        assert summary["metadata"]["n_forecast"] == 4

    def test_summarize_empty_site(self):
        """Test that missing series are reported as None."""
        summary = summarize_site(SiteRecord(id="EMPTY1"))
        assert summary["stage"] is None
        assert summary["level"] is None
        assert summary["crest"] is None
        assert summary["forecast_issued"] is None


class TestSyncVersions:
    """Test synchronous wrappers."""

    def test_sync_attribute(self, mock_client):
        site = get_site.sync("btrl1", client=mock_client)
        assert site.id == "BTRL1"

    def test_sync_module_functions(self, mock_client):
        assert get_site_sync("btrl1", client=mock_client).id == "BTRL1"
        assert get_current_stage_sync("btrl1", client=mock_client) == "unknown"

    def test_sync_level(self, mock_client):
        level = get_current_level.sync("btrl1", client=mock_client)
        assert level.timestamp == datetime(
            2021, 12, 14, 10, 0, 0, tzinfo=timezone(timedelta(hours=-6))
        )

    @pytest.mark.asyncio
    async def test_sync_inside_event_loop(self, mock_client):
        with pytest.raises(RuntimeError, match="existing asyncio event loop"):
            get_site.sync("btrl1", client=mock_client)

    def test_extract_client_class(self):
        from typing import Optional

        assert AsyncSyncBridge.extract_client_class(Optional[AHPSClient]) is AHPSClient
        assert AsyncSyncBridge.extract_client_class(AHPSClient) is AHPSClient
        assert AsyncSyncBridge.extract_client_class(None) is None

    def test_temporary_client_is_closed(self, btrl1_site):
        """Test that a client created for a sync call is closed afterwards."""
        instance = AsyncMock()
        instance.get_site.return_value = btrl1_site
        client_class = lambda: instance  # noqa: E731

        async def fetch(gauge, client=None):
            return await client.get_site(gauge)

        site = AsyncSyncBridge.run_async(
            fetch, args=("btrl1",), client_class=client_class
        )

        assert site.id == "BTRL1"
        instance.close.assert_awaited_once()

    def test_sync_with_positional_client(self, mock_client):
        """Test that a client passed positionally is used as-is."""
        site = get_site.sync("btrl1", mock_client)

        assert site.id == "BTRL1"
        mock_client.get_site.assert_awaited_once_with("btrl1")

    def test_positional_none_gets_temporary_client(self, btrl1_site):
        instance = AsyncMock()
        instance.get_site.return_value = btrl1_site

        async def fetch(gauge, client=None):
            return await client.get_site(gauge)

        site = AsyncSyncBridge.run_async(
            fetch, args=("btrl1", None), client_class=lambda: instance
        )

        assert site.id == "BTRL1"
        instance.close.assert_awaited_once()

    def test_has_client(self, mock_client):
        assert AsyncSyncBridge.has_client(get_site, ("btrl1", mock_client), {})
        assert AsyncSyncBridge.has_client(get_site, ("btrl1",), {"client": mock_client})
        assert not AsyncSyncBridge.has_client(get_site, ("btrl1",), {})
        assert not AsyncSyncBridge.has_client(get_site, ("btrl1",), {"client": None})

    def test_client_class_for(self):
        assert AsyncSyncBridge.client_class_for(get_site) is AHPSClient
