"""
Tests for input validation and normalization.
"""

import pytest

from osint_bot.utils.errors import InvalidInputError
from osint_bot.utils.validation import (
    FlightDesignator,
    FlightLookupQuery,
    TrustedLink,
    ValidationUtils,
    validate,
)


@pytest.mark.parametrize(
    "raw, airline, number",
    [
        ("BA234", "BA", "234"),
        ("BA 234", "BA", "234"),
        ("ba234", "BA", "234"),
        (" dl 12 34 ", "DL", "1234"),
        ("UA89", "UA", "89"),
        ("EZY1", "EZY", "1"),
        ("afr\t1000", "AFR", "1000"),
    ],
)
def test_flight_designator_decomposes(raw, airline, number):
    flight = FlightDesignator.parse(raw)

    assert flight.airline_code == airline
    assert flight.number == number
    assert 2 <= len(flight.airline_code) <= 3
    assert 1 <= len(flight.number) <= 4


@pytest.mark.parametrize(
    "raw",
    ["12", "", "   ", "B234", "ABCD12", "BA12345", "BA", "2B234", "BA-234", "BA23A", None, 234],
)
def test_flight_designator_rejects(raw):
    with pytest.raises(InvalidInputError) as excinfo:
        FlightDesignator.parse(raw)

    assert excinfo.value.field == "flight"


@pytest.mark.parametrize(
    "raw",
    [
        "BA２３４",  # full-width digits
        "BA٢٣٤",  # Arabic-Indic digits
        "B\u212a234",  # Kelvin sign
        "\u017fa234",  # long s, upper() gives "SA234"
        "\u0131b234",  # dotless i, upper() gives "IB234"
    ],
)
def test_flight_designator_rejects_non_ascii(raw):
    with pytest.raises(InvalidInputError):
        FlightDesignator.parse(raw)


@pytest.mark.parametrize("value", ["B\u212a", "\u017fa", "\u0131b", "BA１"])
def test_airline_code_rejects_non_ascii(value):
    with pytest.raises(InvalidInputError):
        ValidationUtils.validate_airline_code(value)


@pytest.mark.parametrize("value", ["LH\u212a", "\u017fFO", "CD\u0131"])
def test_airport_code_rejects_non_ascii(value):
    with pytest.raises(InvalidInputError):
        ValidationUtils.validate_airport_code(value)


@pytest.mark.parametrize("value", ["BA١٢", "B\u212a123", "BA１２"])
def test_free_form_flight_number_rejects_non_ascii(value):
    with pytest.raises(InvalidInputError):
        ValidationUtils.validate_flight_number(value)


def test_flight_designator_is_immutable():
    flight = FlightDesignator.parse("BA234")

    with pytest.raises(Exception):
        flight.number = "1"
    assert str(flight) == "BA234"


@pytest.mark.parametrize("value", ["BA123", "ba123", "12", "U2A4B6C8"])
def test_free_form_flight_number_accepted_unchanged(value):
    assert ValidationUtils.validate_flight_number(value) == value


@pytest.mark.parametrize("value", ["B", "BA 123", "BA123456X", "BA-12"])
def test_free_form_flight_number_rejected(value):
    with pytest.raises(InvalidInputError):
        ValidationUtils.validate_flight_number(value)


def test_airline_and_airport_codes_are_uppercased():
    assert ValidationUtils.validate_airline_code("ba") == "BA"
    assert ValidationUtils.validate_airline_code("ezy") == "EZY"
    assert ValidationUtils.validate_airport_code("lhr") == "LHR"


@pytest.mark.parametrize("value", ["B", "BAWX", "B1", ""])
def test_airline_code_rejected(value):
    with pytest.raises(InvalidInputError):
        ValidationUtils.validate_airline_code(value)


@pytest.mark.parametrize("value", ["LH", "LHRX", "L1R"])
def test_airport_code_rejected(value):
    with pytest.raises(InvalidInputError):
        ValidationUtils.validate_airport_code(value)


def test_lookup_query_requires_one_field():
    with pytest.raises(InvalidInputError) as excinfo:
        FlightLookupQuery.from_options()

    assert "at least one parameter" in str(excinfo.value)


def test_lookup_query_builds_params():
    query = FlightLookupQuery.from_options(flight_number="ba123", airline="ba", airport="lhr")

    assert query.to_params() == {
        "flight_number": "ba123",
        "airline_iata": "BA",
        "dep_iata": "LHR",
    }


def test_lookup_query_only_airport():
    query = FlightLookupQuery.from_options(airport="jfk")

    assert query.to_params() == {"dep_iata": "JFK"}


def test_lookup_query_rejects_bad_field_even_with_good_ones():
    with pytest.raises(InvalidInputError) as excinfo:
        FlightLookupQuery.from_options(flight_number="BA123", airport="LONDON")

    assert excinfo.value.field == "airport"


def test_trusted_link_accepts_google_docs():
    link = TrustedLink.parse("  https://docs.google.com/document/d/abc123/edit  ")

    assert link.url == "https://docs.google.com/document/d/abc123/edit"


@pytest.mark.parametrize(
    "raw",
    [
        "http://docs.google.com/document/d/abc",
        "https://docs.google.com.evil.example/x",
        "https://evil.example/https://docs.google.com/",
        "https://docs.google.com/d/abc some-arg",
        "https://docs.google.com/d/abc\n--help",
        "https://docs.google.com/" + "a" * 3000,
        "",
        None,
    ],
)
def test_trusted_link_rejects(raw):
    with pytest.raises(InvalidInputError):
        TrustedLink.parse(raw)


def test_validate_dispatches_by_field():
    assert validate("airport", "cdg") == "CDG"
    assert validate("flight", "BA 234") == FlightDesignator("BA", "234")

    with pytest.raises(InvalidInputError):
        validate("unknown", "x")
