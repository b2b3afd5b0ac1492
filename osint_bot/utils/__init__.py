"""
Utility modules for the OSINT assistant.
"""

from .logger import LoggerMixin, get_logger, setup_logging
from .errors import ErrorKind, InvalidInputError
from .validation import FlightDesignator, FlightLookupQuery, TrustedLink, ValidationUtils
from .links import generate_tracking_links

__all__ = [
    "ErrorKind",
    "FlightDesignator",
    "FlightLookupQuery",
    "InvalidInputError",
    "LoggerMixin",
    "TrustedLink",
    "ValidationUtils",
    "generate_tracking_links",
    "get_logger",
    "setup_logging",
]
