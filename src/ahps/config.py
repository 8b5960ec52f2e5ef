"""
Configuration for the AHPS client.
"""

import os
from dataclasses import dataclass

DEFAULT_BASE_URL = "https://water.weather.gov/ahps2/hydrograph_to_xml.php"
DEFAULT_TIMEOUT = 5.0


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Settings for fetching and parsing hydrograph reports."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT  # seconds
    user_agent: str = "pyahps-client/0.1.0"
    sort_series: bool = False  # sort observed/forecast instead of trusting the feed

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Load configuration from AHPS_* environment variables."""
        return cls(
            base_url=os.getenv("AHPS_BASE_URL", DEFAULT_BASE_URL),
            timeout=float(os.getenv("AHPS_TIMEOUT", str(DEFAULT_TIMEOUT))),
            sort_series=_env_flag("AHPS_SORT_SERIES"),
        )
