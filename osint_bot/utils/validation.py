"""
Validation Utilities
Validation gates that turn raw option strings into normalized queries
"""

import re
from dataclasses import dataclass
from typing import Optional

from osint_bot.utils.errors import InvalidInputError

# Airline code (2-3 letters) followed by a flight number (1-4 digits)
FLIGHT_DESIGNATOR_REGEX = re.compile(r"^([A-Z]{2,3})([0-9]{1,4})$")

# Looser free-form flight number accepted by the flight data API
FLIGHT_NUMBER_REGEX = re.compile(r"^[A-Z0-9]{2,8}$", re.IGNORECASE | re.ASCII)

AIRLINE_IATA_REGEX = re.compile(r"^[A-Z]{2,3}$", re.IGNORECASE | re.ASCII)
AIRPORT_IATA_REGEX = re.compile(r"^[A-Z]{3}$", re.IGNORECASE | re.ASCII)

WHITESPACE_REGEX = re.compile(r"\s+")

# Control characters and whitespace are never part of a tool argument
UNSAFE_ARGUMENT_REGEX = re.compile(r"[\s\x00-\x1F\x7F-\x9F]")

# Only links to Google resources are handed to xeuledoc
TRUSTED_LINK_PREFIX = "https://docs.google.com/"

MAX_LINK_LENGTH = 2048


@dataclass(frozen=True)
class FlightDesignator:
    """Airline code plus flight number, e.g. BA + 234."""

    airline_code: str
    number: str

    @property
    def designator(self) -> str:
        return f"{self.airline_code}{self.number}"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "FlightDesignator":
        """
        Normalize a flight number such as "ba 234" into its parts.

        Args:
            raw: Raw user input

        Returns:
            FlightDesignator

        Raises:
            InvalidInputError: If the input is not a flight number
        """
        if not isinstance(raw, str):
            raise InvalidInputError(
                "Please provide a valid flight number (e.g. BA234, DL1234, UA89).",
                field="flight",
            )

        # Checked before upper(), which folds some non-ASCII letters into A-Z
        clean = WHITESPACE_REGEX.sub("", raw)
        match = FLIGHT_DESIGNATOR_REGEX.match(clean.upper()) if clean.isascii() else None
        if not match:
            raise InvalidInputError(
                "Please provide a valid flight number (e.g. BA234, DL1234, UA89).",
                field="flight",
            )

        return cls(airline_code=match.group(1), number=match.group(2))

    def __str__(self) -> str:
        return self.designator


@dataclass(frozen=True)
class FlightLookupQuery:
    """Validated parameters for a flight data lookup."""

    flight_number: Optional[str] = None
    airline_iata: Optional[str] = None
    airport_iata: Optional[str] = None

    @classmethod
    def from_options(
        cls,
        flight_number: Optional[str] = None,
        airline: Optional[str] = None,
        airport: Optional[str] = None,
    ) -> "FlightLookupQuery":
        """
        Validate the three optional lookup fields.

        Raises:
            InvalidInputError: If no field is given or any given field is malformed
        """
        if not flight_number and not airline and not airport:
            raise InvalidInputError(
                "Please provide at least one parameter: flight number, airline code, or airport code."
            )

        return cls(
            flight_number=ValidationUtils.validate_flight_number(flight_number) if flight_number else None,
            airline_iata=ValidationUtils.validate_airline_code(airline) if airline else None,
            airport_iata=ValidationUtils.validate_airport_code(airport) if airport else None,
        )

    def to_params(self) -> dict:
        """API query parameters for the set fields (credentials excluded)."""
        params = {}
        if self.flight_number:
            params["flight_number"] = self.flight_number
        if self.airline_iata:
            params["airline_iata"] = self.airline_iata
        if self.airport_iata:
            params["dep_iata"] = self.airport_iata
        return params


@dataclass(frozen=True)
class TrustedLink:
    """A URL allowed to be passed to an external tool."""

    url: str

    @classmethod
    def parse(cls, raw: Optional[str], prefix: str = TRUSTED_LINK_PREFIX) -> "TrustedLink":
        """
        Check that a link belongs to the trusted domain.

        Args:
            raw: Raw user input
            prefix: Required scheme and host prefix

        Raises:
            InvalidInputError: If the link is outside the allow-list
        """
        message = "Please provide a valid Google resource link (e.g., from Google Docs or Sheets)."

        if not isinstance(raw, str):
            raise InvalidInputError(message, field="link")

        url = raw.strip()
        if not url.startswith(prefix) or len(url) > MAX_LINK_LENGTH:
            raise InvalidInputError(message, field="link")

        if UNSAFE_ARGUMENT_REGEX.search(url):
            raise InvalidInputError(message, field="link")

        return cls(url=url)

    def __str__(self) -> str:
        return self.url


class ValidationUtils:
    """Field-level validators. Each returns the normalized value or raises."""

    @staticmethod
    def validate_flight_number(value: str) -> str:
        """
        Validate a free-form flight number option.

        Args:
            value: Flight number as typed

        Returns:
            The flight number, unchanged

        Raises:
            InvalidInputError: If the format is wrong
        """
        if not isinstance(value, str) or not FLIGHT_NUMBER_REGEX.match(value):
            raise InvalidInputError(
                "Invalid flight number format. Please provide a valid flight number (e.g., BA123).",
                field="flight_number",
            )
        return value

    @staticmethod
    def validate_airline_code(value: str) -> str:
        """
        Validate an airline IATA code.

        Returns:
            Uppercased code
        """
        if not isinstance(value, str) or not AIRLINE_IATA_REGEX.match(value):
            raise InvalidInputError(
                "Invalid airline code format. Please provide a valid IATA code (2-3 characters, e.g., BA).",
                field="airline",
            )
        return value.upper()

    @staticmethod
    def validate_airport_code(value: str) -> str:
        """
        Validate an airport IATA code.

        Returns:
            Uppercased code
        """
        if not isinstance(value, str) or not AIRPORT_IATA_REGEX.match(value):
            raise InvalidInputError(
                "Invalid airport code format. Please provide a valid IATA code (3 characters, e.g., LHR).",
                field="airport",
            )
        return value.upper()


# Field name -> validator, for callers that validate by name
FIELD_VALIDATORS = {
    "flight": FlightDesignator.parse,
    "flight_number": ValidationUtils.validate_flight_number,
    "airline": ValidationUtils.validate_airline_code,
    "airport": ValidationUtils.validate_airport_code,
    "link": TrustedLink.parse,
}


def validate(field: str, raw_value: Optional[str]):
    """
    Validate a raw value for a named field.

    Args:
        field: One of FIELD_VALIDATORS
        raw_value: Raw user input

    Returns:
        Normalized value

    Raises:
        InvalidInputError: If the value is rejected or the field is unknown
    """
    validator = FIELD_VALIDATORS.get(field)
    if validator is None:
        raise InvalidInputError(f"Unknown field: {field}", field=field)
    return validator(raw_value)
