"""
Tests for flight tracking link generation.
"""

import re

from osint_bot.utils.links import TRACKING_PROVIDERS, generate_tracking_links
from osint_bot.utils.validation import FlightDesignator


def test_links_for_ba234():
    links = generate_tracking_links(FlightDesignator.parse("BA 234"))

    assert list(links) == [
        "AirNavRadar",
        "FlightAware",
        "Flightera",
        "AirportInfo Live",
        "FlightRadar24",
    ]
    assert links["AirNavRadar"] == "https://www.airnavradar.com/data/flights/BA234"
    assert links["FlightAware"] == "https://fr.flightaware.com/live/flight/BA234"
    assert links["Flightera"] == "https://www.flightera.net/en/flight/BA234"
    assert links["AirportInfo Live"] == "https://airportinfo.live/flight/ba234"
    assert links["FlightRadar24"] == "https://www.flightradar24.com/data/flights/ba234"


def test_links_are_deterministic():
    flight = FlightDesignator.parse("dl1234")

    assert generate_tracking_links(flight) == generate_tracking_links(FlightDesignator.parse("DL 1234"))


def test_designator_recoverable_from_every_link():
    for raw in ("BA234", "UA89", "EZY1", "AFR1000"):
        flight = FlightDesignator.parse(raw)
        links = generate_tracking_links(flight)

        assert len(links) == len(TRACKING_PROVIDERS)
        for url in links.values():
            assert url.startswith("https://")
            tail = url.rsplit("/", 1)[-1]
            assert FlightDesignator.parse(tail) == flight
            assert re.match(r"^[A-Za-z]{2,3}\d{1,4}$", tail)
