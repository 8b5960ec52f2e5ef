"""
AHPS hydrograph client for pyahps.
"""

import logging
from typing import Any, Optional

import httpx

from .config import ClientConfig
from .exceptions import AHPSConnectionError, AHPSQueryError
from .models import SiteRecord
from .parser import parse

logger = logging.getLogger(__name__)


class AHPSClient:
    """
    Client for river gauge reports from the NWS AHPS hydrograph service.

    Each report is requested as XML with the gauge identifier in the ``gage``
    query parameter and parsed into a :class:`~ahps.models.SiteRecord`.
    """

    def __init__(
        self, timeout: Optional[float] = None, config: Optional[ClientConfig] = None
    ):
        self.config = config or ClientConfig.from_env()
        self.timeout = timeout if timeout is not None else self.config.timeout
        self.base_url = self.config.base_url
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "application/xml",
            },
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AHPSClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def fetch_raw(self, gauge: str) -> bytes:
        """
        Fetch the raw XML report for a gauge.

        Args:
            gauge: Gauge identifier (e.g., 'btrl1')

        Returns:
            Response body bytes

        Raises:
            AHPSQueryError: If the gauge is unknown to the service
            AHPSConnectionError: On timeouts, network errors or other HTTP errors
        """
        params = {"output": "xml", "gage": gauge}
        logger.debug(f"Requesting AHPS report for gauge '{gauge}' from {self.base_url}")

        try:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
            return response.content

        except httpx.TimeoutException as e:
            raise AHPSConnectionError(f"Request timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise AHPSQueryError(f"Gauge '{gauge}' not found") from e
            elif e.response.status_code == 429:
                raise AHPSConnectionError("Rate limit exceeded") from e
            elif e.response.status_code >= 500:
                raise AHPSConnectionError("AHPS service temporarily unavailable") from e
            else:
                raise AHPSConnectionError(
                    f"HTTP error {e.response.status_code}: {e}"
                ) from e
        except httpx.RequestError as e:
            raise AHPSConnectionError(f"Network error: {e}") from e

    async def get_site(self, gauge: str) -> SiteRecord:
        """
        Retrieve and parse the report for a gauge.

        Args:
            gauge: Gauge identifier (e.g., 'btrl1')

        Returns:
            SiteRecord for the gauge

        Raises:
            AHPSQueryError: If the gauge is unknown to the service
            AHPSConnectionError: If the report could not be retrieved
            ParseError: If the report could not be parsed
        """
        raw = await self.fetch_raw(gauge)
        return parse(raw, sort_series=self.config.sort_series)
