"""
Parsing of AHPS ``hydrograph_to_xml.php`` documents into SiteRecord objects.

The document layout is::

    site
      disclaimers/{AHPSXMLversion,status,quality,observed,general,standing}
      sigstages/{low,action,bankfull,flood,moderate,major,record}
      sigflows/{low,action,bankfull,flood,moderate,major,record}
      zerodatum
      rating/datum[@stage,@stageUnits,@flow,@flowUnits]
      alt_rating/datum[...]
      observed/datum/{valid,primary,secondary,pedts}
      forecast/datum/{valid,primary,secondary,pedts}

Parsing is all-or-nothing: the first bad field raises and no record is built.
"""

import logging
import math
import re
import xml.etree.ElementTree as ET
from datetime import datetime
from typing import Dict, List, Optional, Tuple, Union

from .exceptions import MalformedXMLError, NumericFieldError, TimestampFieldError
from .models import (
    STAGE_NAMES,
    Disclaimers,
    Forecast,
    Quantity,
    RatingPoint,
    SiteRecord,
    Threshold,
    TimePoint,
)

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}[+-]\d{2}:\d{2}$", re.ASCII)
_NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$", re.ASCII)


def parse(raw: Union[bytes, str], sort_series: bool = False) -> SiteRecord:
    """
    Parse a hydrograph XML document.

    Args:
        raw: The response body as returned by the service
        sort_series: Sort ``observed`` newest-first and ``forecast``
            oldest-first instead of trusting the document's order

    Returns:
        SiteRecord for the gauge

    Raises:
        MalformedXMLError: If the document is not well-formed or is not a site report
        NumericFieldError: If a numeric field holds something else
        TimestampFieldError: If a ``valid`` timestamp has the wrong format
    """
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as e:
        raise MalformedXMLError(f"Invalid XML document: {e}") from e

    if root.tag != "site":
        raise MalformedXMLError(
            f"Expected root element 'site', got '{root.tag}'", field=root.tag
        )

    observed = _parse_series(root.find("observed"), "observed")
    forecast_el = root.find("forecast")
    forecast_points = _parse_series(forecast_el, "forecast")

    if sort_series:
        observed = sorted(observed, key=lambda p: p.timestamp, reverse=True)
        forecast_points = sorted(forecast_points, key=lambda p: p.timestamp)

    record = SiteRecord(
        name=root.get("name", ""),
        id=root.get("id", ""),
        timezone=root.get("timezone", ""),
        originator=root.get("originator", ""),
        generation_time=root.get("generationtime", ""),
        significant_stages=_parse_thresholds(root.find("sigstages"), "sigstages"),
        significant_flows=_parse_thresholds(root.find("sigflows"), "sigflows"),
        zero_datum=_parse_zero_datum(root.find("zerodatum")),
        rating_curve=_parse_rating(root.find("rating"), "rating"),
        alternate_rating_curve=_parse_rating(root.find("alt_rating"), "alt_rating"),
        observed=tuple(observed),
        forecast=Forecast(
            issued=forecast_el.get("issued", "") if forecast_el is not None else "",
            timezone=forecast_el.get("timezone", "") if forecast_el is not None else "",
            points=tuple(forecast_points),
        ),
        disclaimers=_parse_disclaimers(root.find("disclaimers")),
    )

    logger.debug(
        f"Parsed site '{record.id}': {len(record.observed)} observed, "
        f"{len(record.forecast)} forecast, {len(record.rating_curve)} rating points"
    )
    return record


def parse_timestamp(text: str, field: Optional[str] = None) -> datetime:
    """
    Parse a ``valid`` timestamp such as ``2021-12-14T10:00:00-06:00``.

    The offset is kept as a fixed ``datetime.timezone``; no conversion to
    local or UTC time takes place.
    """
    text = (text or "").strip()
    if not _TIMESTAMP_PATTERN.match(text):
        raise TimestampFieldError(
            f"Timestamp '{text}' does not match YYYY-MM-DDTHH:MM:SS+HH:MM", field=field
        )
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT)
    except ValueError as e:
        raise TimestampFieldError(f"Invalid timestamp '{text}': {e}", field=field) from e


def parse_number(text: Optional[str], field: Optional[str] = None) -> float:
    """Parse a finite float, raising NumericFieldError otherwise."""
    stripped = (text or "").strip()
    if not _NUMBER_PATTERN.match(stripped):
        raise NumericFieldError(
            f"Expected a number for {field or 'field'}, got '{text}'", field=field
        )
    value = float(stripped)
    if not math.isfinite(value):
        raise NumericFieldError(
            f"Expected a finite number for {field or 'field'}, got '{text}'",
            field=field,
        )
    return value


def _text(element: Optional[ET.Element]) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _parse_thresholds(
    section: Optional[ET.Element], path: str
) -> Dict[str, Threshold]:
    thresholds: Dict[str, Threshold] = {}
    if section is None:
        return thresholds

    for name in STAGE_NAMES:
        element = section.find(name)
        text = _text(element)
        if element is None or not text:
            continue
        thresholds[name] = Threshold(
            value=parse_number(text, f"{path}/{name}"),
            units=element.get("units", ""),
        )
    return thresholds


def _parse_zero_datum(element: Optional[ET.Element]) -> Optional[Threshold]:
    text = _text(element)
    if element is None or not text:
        return None
    return Threshold(value=parse_number(text, "zerodatum"), units=element.get("units", ""))


def _parse_rating(section: Optional[ET.Element], path: str) -> Tuple[RatingPoint, ...]:
    if section is None:
        return ()

    points: List[RatingPoint] = []
    for i, datum in enumerate(section.findall("datum")):
        where = f"{path}/datum[{i}]"
        for attr in ("stage", "flow"):
            if datum.get(attr) is None:
                raise MalformedXMLError(
                    f"Missing '{attr}' attribute in {where}", field=f"{where}/@{attr}"
                )
        points.append(
            RatingPoint(
                stage_value=parse_number(datum.get("stage"), f"{where}/@stage"),
                stage_units=datum.get("stageUnits", ""),
                flow_value=parse_number(datum.get("flow"), f"{where}/@flow"),
                flow_units=datum.get("flowUnits", ""),
            )
        )
    return tuple(points)


def _parse_series(section: Optional[ET.Element], path: str) -> List[TimePoint]:
    if section is None:
        return []
    return [
        _parse_datum(datum, f"{path}/datum[{i}]")
        for i, datum in enumerate(section.findall("datum"))
    ]


def _parse_datum(datum: ET.Element, where: str) -> TimePoint:
    valid = datum.find("valid")
    if valid is None:
        raise MalformedXMLError(f"Missing 'valid' element in {where}", field=f"{where}/valid")
    primary = datum.find("primary")
    if primary is None:
        raise MalformedXMLError(
            f"Missing 'primary' element in {where}", field=f"{where}/primary"
        )

    primary_text = _text(primary)
    return TimePoint(
        timestamp=parse_timestamp(_text(valid), f"{where}/valid"),
        primary=Quantity(
            value=parse_number(primary_text, f"{where}/primary"),
            name=primary.get("name", ""),
            units=primary.get("units", ""),
            text=primary_text,
        ),
        secondary=_parse_secondary(datum.find("secondary")),
        pedts=_text(datum.find("pedts")),
        zone=valid.get("timezone", ""),
    )


def _parse_secondary(element: Optional[ET.Element]) -> Optional[Quantity]:
    # Never consumed by the derivations, so bad values are kept as text only
    if element is None:
        return None
    text = _text(element)
    value: Optional[float] = None
    if _NUMBER_PATTERN.match(text) and math.isfinite(float(text)):
        value = float(text)
    return Quantity(
        value=value,
        name=element.get("name", ""),
        units=element.get("units", ""),
        text=text,
    )


def _parse_disclaimers(section: Optional[ET.Element]) -> Disclaimers:
    if section is None:
        return Disclaimers()
    return Disclaimers(
        ahps_xml_version=_text(section.find("AHPSXMLversion")),
        status=_text(section.find("status")),
        quality=_text(section.find("quality")),
        observed=_text(section.find("observed")),
        general=_text(section.find("general")),
        standing=_text(section.find("standing")),
    )
