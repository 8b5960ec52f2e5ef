"""
Python client for NWS AHPS river gauge hydrograph reports.

Parse a gauge's XML report and read its current stage, level and projected crest.
"""

try:
    from importlib import metadata

    __version__ = metadata.version("pyahps")
except Exception:
    __version__ = "unknown"

from .client import AHPSClient
from .config import ClientConfig
from .convenience import (
    get_current_level,
    get_current_stage,
    get_projected_crest,
    get_river_summary,
    get_site,
    summarize_site,
)
from .exceptions import (
    AHPSConnectionError,
    AHPSError,
    AHPSQueryError,
    EmptyForecastError,
    EmptyObservationError,
    EmptySeriesError,
    MalformedXMLError,
    NumericFieldError,
    ParseError,
    TimestampFieldError,
)
from .models import (
    STAGE_NAMES,
    UNKNOWN_STAGE,
    Disclaimers,
    Forecast,
    Quantity,
    RatingPoint,
    RiverPoint,
    SiteRecord,
    Threshold,
    TimePoint,
)
from .parser import parse, parse_timestamp
from .sync import (
    AsyncSyncBridge,
    get_current_level_sync,
    get_current_stage_sync,
    get_projected_crest_sync,
    get_site_sync,
)

__all__ = [
    # Core classes
    "AHPSClient",
    "ClientConfig",
    # Parsing
    "parse",
    "parse_timestamp",
    # Models
    "STAGE_NAMES",
    "UNKNOWN_STAGE",
    "Disclaimers",
    "Forecast",
    "Quantity",
    "RatingPoint",
    "RiverPoint",
    "SiteRecord",
    "Threshold",
    "TimePoint",
    # Exceptions
    "AHPSError",
    "AHPSConnectionError",
    "AHPSQueryError",
    "ParseError",
    "MalformedXMLError",
    "NumericFieldError",
    "TimestampFieldError",
    "EmptySeriesError",
    "EmptyObservationError",
    "EmptyForecastError",
    # Async convenience functions
    "get_site",
    "get_current_stage",
    "get_current_level",
    "get_projected_crest",
    "get_river_summary",
    "summarize_site",
    # Sync convenience functions
    "AsyncSyncBridge",
    "get_site_sync",
    "get_current_stage_sync",
    "get_current_level_sync",
    "get_projected_crest_sync",
]
