"""
Flight tracking link templates
"""

from typing import Dict, Tuple

from osint_bot.utils.validation import FlightDesignator

# (provider, URL template, lowercase designator)
TRACKING_PROVIDERS: Tuple[Tuple[str, str, bool], ...] = (
    ("AirNavRadar", "https://www.airnavradar.com/data/flights/{designator}", False),
    ("FlightAware", "https://fr.flightaware.com/live/flight/{designator}", False),
    ("Flightera", "https://www.flightera.net/en/flight/{designator}", False),
    ("AirportInfo Live", "https://airportinfo.live/flight/{designator}", True),
    ("FlightRadar24", "https://www.flightradar24.com/data/flights/{designator}", True),
)


def generate_tracking_links(flight: FlightDesignator) -> Dict[str, str]:
    """
    Build tracking URLs for a flight, in provider order.

    Args:
        flight: Normalized flight designator

    Returns:
        Mapping of provider name to URL
    """
    designator = flight.designator
    links = {}
    for provider, template, lowercase in TRACKING_PROVIDERS:
        links[provider] = template.format(
            designator=designator.lower() if lowercase else designator
        )
    return links
