"""
Flight Commands
Tracking links and live flight lookups
"""

from typing import Any

from osint_bot.commands.command_registry import CommandSpec, OptionSpec
from osint_bot.utils.discord import DiscordUtils
from osint_bot.utils.links import generate_tracking_links
from osint_bot.utils.responses import ReplySequence, mapper
from osint_bot.utils.validation import FlightDesignator, FlightLookupQuery

def flight_number_spec() -> CommandSpec:
    return CommandSpec(
        name="bob-flight-number",
        description="Get flight tracking links for a flight number",
        options=(
            OptionSpec("flight", "The flight number (e.g. BA234, DL1234)", required=True),
        ),
    )


def flight_lookup_spec() -> CommandSpec:
    return CommandSpec(
        name="bob-flight",
        description="Get real-time flight information",
        options=(
            OptionSpec("flight_number", "Flight number (e.g., BA123)"),
            OptionSpec("airline", "Airline IATA code (e.g., BA for British Airways)"),
            OptionSpec("airport", "Airport IATA code (e.g., LHR for London Heathrow)"),
        ),
    )


async def flight_number_command(ctx: Any, client: Any) -> None:
    """
    Reply with tracking links for a flight number.

    Args:
        ctx: Interaction context
        client: Bot client (unused)
    """
    flight = FlightDesignator.parse(ctx.get_option("flight"))
    links = generate_tracking_links(flight)

    unit = mapper.tracking_links_unit(flight.designator, links)
    await DiscordUtils.deliver(ctx, ReplySequence(units=(unit,)))


async def flight_lookup_command(ctx: Any, client: Any) -> None:
    """
    Look up live flights by flight number, airline and/or departure airport.

    Args:
        ctx: Interaction context
        client: Bot client holding the flight data client
    """
    query = FlightLookupQuery.from_options(
        flight_number=ctx.get_option("flight_number"),
        airline=ctx.get_option("airline"),
        airport=ctx.get_option("airport"),
    )

    await ctx.defer_reply()

    result = await client.flight_client.fetch_flights(query)
    await DiscordUtils.deliver(ctx, mapper.flight_units(result))
