"""
Data models for AHPS river gauge reports.

Records are built once by :func:`ahps.parser.parse` and never mutated. The
query methods on :class:`SiteRecord` trust the document's ordering: index 0
of ``observed`` is the most recent observation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import EmptyForecastError, EmptyObservationError, NumericFieldError

# Flood severity stages in ascending order of severity
STAGE_NAMES = ("low", "action", "bankfull", "flood", "moderate", "major", "record")

UNKNOWN_STAGE = "unknown"


def _readonly(mapping: Optional[Mapping[str, "Threshold"]]) -> Mapping[str, "Threshold"]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class Threshold:
    """A significant stage or flow level."""

    value: float
    units: str


@dataclass(frozen=True)
class RatingPoint:
    """One row of a stage/flow rating table."""

    stage_value: float
    stage_units: str
    flow_value: float
    flow_units: str


@dataclass(frozen=True)
class Quantity:
    """A measured or forecast quantity attached to a time point."""

    value: Optional[float]
    name: str
    units: str
    text: str = ""


@dataclass(frozen=True)
class TimePoint:
    """A single observed or forecast sample."""

    timestamp: datetime
    primary: Quantity
    secondary: Optional[Quantity] = None
    pedts: str = ""
    zone: str = ""  # label from valid@timezone, e.g. CST


@dataclass(frozen=True)
class Forecast:
    """A batch of forecast points issued together."""

    issued: str = ""
    timezone: str = ""
    points: Tuple[TimePoint, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple(self.points))

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index: int) -> TimePoint:
        return self.points[index]


@dataclass(frozen=True)
class Disclaimers:
    """Free-text disclaimers published with the report."""

    ahps_xml_version: str = ""
    status: str = ""
    quality: str = ""
    observed: str = ""
    general: str = ""
    standing: str = ""


@dataclass(frozen=True)
class RiverPoint:
    """A river reading for a given time, as returned by SiteRecord queries."""

    value: float
    unit: str
    timestamp: datetime


@dataclass(frozen=True)
class SiteRecord:
    """Everything published about one gauge in a single report."""

    name: str = ""
    id: str = ""
    timezone: str = ""
    originator: str = ""
    generation_time: str = ""
    significant_stages: Mapping[str, Threshold] = field(default_factory=dict)
    significant_flows: Mapping[str, Threshold] = field(default_factory=dict)
    zero_datum: Optional[Threshold] = None
    rating_curve: Tuple[RatingPoint, ...] = ()
    alternate_rating_curve: Tuple[RatingPoint, ...] = ()
    observed: Tuple[TimePoint, ...] = ()
    forecast: Forecast = field(default_factory=Forecast)
    disclaimers: Disclaimers = field(default_factory=Disclaimers)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "significant_stages", _readonly(self.significant_stages)
        )
        object.__setattr__(self, "significant_flows", _readonly(self.significant_flows))
        object.__setattr__(self, "rating_curve", tuple(self.rating_curve))
        object.__setattr__(
            self, "alternate_rating_curve", tuple(self.alternate_rating_curve)
        )
        object.__setattr__(self, "observed", tuple(self.observed))

    def _most_recent(self) -> TimePoint:
        if not self.observed:
            raise EmptyObservationError(f"Site '{self.id}' has no observed readings")
        point = self.observed[0]
        _require_value(point, "observed/datum[0]/primary")
        return point

    def get_current_stage(self) -> str:
        """
        Classify the most recent observation against the significant stages.

        Returns the stage whose threshold is the greatest one not above the
        current reading, or ``"unknown"`` when the reading is below every
        threshold. Stages sharing a threshold value resolve to the more
        severe one.

        Raises:
            EmptyObservationError: If the record has no observations
            NumericFieldError: If the latest reading has no numeric value
        """
        current = self._most_recent().primary.value
        stage = UNKNOWN_STAGE
        best: Optional[float] = None

        ordered = [name for name in STAGE_NAMES if name in self.significant_stages]
        ordered += sorted(
            name for name in self.significant_stages if name not in STAGE_NAMES
        )
        for name in ordered:
            threshold = self.significant_stages[name].value
            if current >= threshold and (best is None or threshold >= best):
                best = threshold
                stage = name

        return stage

    def get_current_level(self) -> RiverPoint:
        """
        Get the most recent observed level.

        Raises:
            EmptyObservationError: If the record has no observations
            NumericFieldError: If the latest reading has no numeric value
        """
        point = self._most_recent()
        return RiverPoint(
            value=point.primary.value,
            unit=point.primary.units,
            timestamp=point.timestamp,
        )

    def get_projected_crest(self) -> RiverPoint:
        """
        Get the highest forecast level and when it is expected.

        The first occurrence wins when several points share the maximum.

        Raises:
            EmptyForecastError: If the record has no forecast points
            NumericFieldError: If a forecast reading has no numeric value
        """
        if not self.forecast.points:
            raise EmptyForecastError(f"Site '{self.id}' has no forecast readings")

        crest = _require_value(self.forecast.points[0], "forecast/datum[0]/primary")
        for i, point in enumerate(self.forecast.points[1:], start=1):
            _require_value(point, f"forecast/datum[{i}]/primary")
            if point.primary.value > crest.primary.value:
                crest = point

        return RiverPoint(
            value=crest.primary.value,
            unit=crest.primary.units,
            timestamp=crest.timestamp,
        )

    def observed_to_pandas(self) -> Any:
        """Convert observed readings to a pandas DataFrame."""
        return _series_to_pandas(self.observed)

    def forecast_to_pandas(self) -> Any:
        """Convert forecast readings to a pandas DataFrame."""
        return _series_to_pandas(self.forecast.points)

    def rating_to_pandas(self, alternate: bool = False) -> Any:
        """Convert the rating curve (or the alternate one) to a pandas DataFrame."""
        pd = _import_pandas()
        curve = self.alternate_rating_curve if alternate else self.rating_curve
        columns = ["stage", "stage_units", "flow", "flow_units"]
        return pd.DataFrame(
            [
                (p.stage_value, p.stage_units, p.flow_value, p.flow_units)
                for p in curve
            ],
            columns=columns,
        )


def _require_value(point: TimePoint, field: str) -> TimePoint:
    if point.primary.value is None:
        raise NumericFieldError(
            f"Expected a number for {field}, got '{point.primary.text}'", field=field
        )
    return point


def _import_pandas() -> Any:
    try:
        import pandas as pd
    except ImportError:
        raise ImportError(
            "pandas is required for DataFrame conversion. Install with: pip install pandas"
        ) from None
    return pd


def _series_to_pandas(points: Tuple[TimePoint, ...]) -> Any:
    pd = _import_pandas()
    columns = [
        "timestamp",
        "value",
        "name",
        "units",
        "secondary_value",
        "secondary_name",
        "secondary_units",
        "pedts",
        "zone",
    ]
    rows: List[Dict[str, Any]] = []
    for point in points:
        secondary = point.secondary
        rows.append(
            {
                "timestamp": point.timestamp,
                "value": point.primary.value,
                "name": point.primary.name,
                "units": point.primary.units,
                "secondary_value": secondary.value if secondary else None,
                "secondary_name": secondary.name if secondary else None,
                "secondary_units": secondary.units if secondary else None,
                "pedts": point.pedts,
                "zone": point.zone,
            }
        )
    return pd.DataFrame(rows, columns=columns)
