"""
Exceptions for AHPS operations.
"""

from typing import Optional


class AHPSError(Exception):
    """Base exception for AHPS-related errors."""

    pass


class AHPSConnectionError(AHPSError):
    """Error connecting to the AHPS hydrograph service."""

    pass


class AHPSQueryError(AHPSError):
    """Error in an AHPS request, such as an unknown gauge."""

    pass


class ParseError(AHPSError):
    """Error converting a hydrograph XML document into a SiteRecord."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MalformedXMLError(ParseError):
    """Document is not well-formed XML or lacks a required element."""

    pass


class NumericFieldError(ParseError):
    """A field expected to hold a number could not be parsed."""

    pass


class TimestampFieldError(ParseError):
    """A ``valid`` timestamp does not match ``YYYY-MM-DDTHH:MM:SS+HH:MM``."""

    pass


class EmptySeriesError(AHPSError):
    """A derivation was attempted on an empty time series."""

    pass


class EmptyObservationError(EmptySeriesError):
    """The site record has no observed readings."""

    pass


class EmptyForecastError(EmptySeriesError):
    """The site record has no forecast readings."""

    pass
