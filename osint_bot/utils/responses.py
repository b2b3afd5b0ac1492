"""
Response Mapper
Turns query results and errors into ordered reply units
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from osint_bot.managers.results import Empty, Failure, QueryResult, Success
from osint_bot.utils.errors import ERROR_MESSAGES, ErrorKind, describe_error

# Hard limit on units produced for one result
MAX_REPLY_UNITS = 5

# Discord embed limits
MAX_TITLE_LENGTH = 256
MAX_DESCRIPTION_LENGTH = 4096
MAX_FIELD_VALUE_LENGTH = 1024

# Preview length for tool output shown in a code block
MAX_OUTPUT_PREVIEW = 1000

PLACEHOLDER = "N/A"
UNKNOWN = "Unknown"


class Severity(Enum):
    """Reply severity, mapped to an embed color."""

    INFO = 0x0099FF
    SUCCESS = 0x00AE86
    WARNING = 0xFFA500
    ERROR = 0xFF0000

    @property
    def color(self) -> int:
        return self.value


@dataclass(frozen=True)
class ReplyField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class ReplyUnit:
    """One renderable message."""

    title: str
    description: str = ""
    fields: Tuple[ReplyField, ...] = ()
    severity: Severity = Severity.INFO
    footer: Optional[str] = None
    url: Optional[str] = None

    @property
    def color(self) -> int:
        return self.severity.color


@dataclass(frozen=True)
class ReplySequence:
    """Units for one reply: the first is primary, the rest are follow-ups."""

    units: Tuple[ReplyUnit, ...]
    preface: Optional[str] = None
    ephemeral: bool = False

    @property
    def primary(self) -> ReplyUnit:
        return self.units[0]

    @property
    def follow_ups(self) -> Tuple[ReplyUnit, ...]:
        return self.units[1:]

    def __len__(self) -> int:
        return len(self.units)


def truncate(text: str, limit: int) -> str:
    """Cut text to a limit, marking the cut with an ellipsis."""
    if len(text) <= limit:
        return text
    return text[: max(limit - 3, 0)] + "..."


def display(value: Any, placeholder: str = PLACEHOLDER) -> str:
    """Render a value, substituting the placeholder for missing data."""
    if value is None:
        return placeholder
    text = str(value).strip()
    return text if text else placeholder


def format_date(value: Any) -> str:
    """
    Format an ISO-8601 timestamp for display.

    Args:
        value: Timestamp string from the API

    Returns:
        Formatted date, "N/A" when absent, "Invalid Date" when unparseable
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return PLACEHOLDER
    if not isinstance(value, str):
        return "Invalid Date"

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return "Invalid Date"

    formatted = parsed.strftime("%Y-%m-%d %H:%M")
    zone = parsed.tzname()
    return f"{formatted} {zone}" if zone else formatted


def code_block(text: str, limit: int) -> str:
    """Fence text in a code block that fits within a length limit."""
    body = truncate(text.strip("\n"), max(limit - 8, 0))
    return f"```\n{body}\n```"


def _section(record: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = record.get(key)
    return value if isinstance(value, dict) else {}


class ResponseMapper:
    """Maps QueryResults to ReplySequences. Every field is always populated."""

    FLIGHT_FOOTER = "Data provided by Aviation Stack"
    LINKS_FOOTER = "Flight tracking data powered by multiple providers"

    def flight_unit(self, record: Any) -> ReplyUnit:
        """
        Build the reply unit for one flight record.

        Args:
            record: Raw flight record from the API

        Returns:
            ReplyUnit with placeholders for missing data
        """
        if not isinstance(record, dict):
            record = {}

        airline = _section(record, "airline")
        flight = _section(record, "flight")
        departure = _section(record, "departure")
        arrival = _section(record, "arrival")
        aircraft = _section(record, "aircraft")

        airline_name = display(airline.get("name"), "Unknown Airline")
        flight_code = display(flight.get("iata") or flight.get("icao"), UNKNOWN)

        fields = [
            ReplyField(
                "Departure",
                f"{display(departure.get('airport'))} ({display(departure.get('iata'))})",
                inline=True,
            ),
            ReplyField(
                "Arrival",
                f"{display(arrival.get('airport'))} ({display(arrival.get('iata'))})",
                inline=True,
            ),
            ReplyField("Aircraft", display(aircraft.get("registration")), inline=True),
            ReplyField("Scheduled Departure", format_date(departure.get("scheduled")), inline=True),
            ReplyField("Scheduled Arrival", format_date(arrival.get("scheduled")), inline=True),
        ]

        if departure.get("delay"):
            fields.append(ReplyField("Departure Delay", f"{departure['delay']} minutes", inline=True))
        if arrival.get("delay"):
            fields.append(ReplyField("Arrival Delay", f"{arrival['delay']} minutes", inline=True))

        return ReplyUnit(
            title=truncate(f"{airline_name} Flight {flight_code}", MAX_TITLE_LENGTH),
            description=f"Status: {display(record.get('flight_status'), UNKNOWN)}",
            fields=tuple(fields),
            severity=Severity.INFO,
            footer=self.FLIGHT_FOOTER,
        )

    def flight_units(self, result: QueryResult) -> ReplySequence:
        """
        Map a flight lookup result to replies.

        Args:
            result: Result of FlightDataClient.fetch_flights

        Returns:
            ReplySequence of 1..5 units
        """
        if isinstance(result, Success):
            units = tuple(self.flight_unit(record) for record in result.records[:MAX_REPLY_UNITS])
            if not units:
                return self.empty_sequence(Empty("No flights found matching your criteria."))
            preface = None
            if len(units) > 1:
                preface = f"Found {result.total} flights. Showing the first {len(units)}:"
            return ReplySequence(units=units, preface=preface)

        if isinstance(result, Empty):
            return self.empty_sequence(result, title="No Flights Found")

        return self.failure_sequence(result)

    def tracking_links_unit(self, designator: str, links: Dict[str, str]) -> ReplyUnit:
        """Build the reply unit listing tracking links for a flight."""
        return ReplyUnit(
            title=f"Flight Tracking: {designator}",
            description="Click on the links below to track this flight:",
            fields=tuple(ReplyField(provider, url) for provider, url in links.items()),
            severity=Severity.INFO,
            footer=self.LINKS_FOOTER,
        )

    def tool_units(self, result: QueryResult, tool_name: str = "xeuledoc") -> ReplySequence:
        """
        Map local tool output to replies.

        Args:
            result: Result of ToolRunner.run
            tool_name: Tool name used in titles

        Returns:
            ReplySequence with a single unit
        """
        if isinstance(result, Success):
            output = "\n".join(str(record) for record in result.records)
            if output.strip():
                description = code_block(output, MAX_DESCRIPTION_LENGTH)
            else:
                description = f"{tool_name} finished without output."
            unit = ReplyUnit(
                title=f"{tool_name} Output",
                description=description,
                severity=Severity.SUCCESS,
            )
            return ReplySequence(units=(unit,))

        if isinstance(result, Empty):
            return self.empty_sequence(result, title=f"{tool_name} Output")

        if result.kind is ErrorKind.PROCESS_ERROR:
            unit = ReplyUnit(
                title=ERROR_MESSAGES[result.kind][0],
                description=f"{tool_name} returned an error:\n"
                + code_block(display(result.message, UNKNOWN), MAX_OUTPUT_PREVIEW),
                severity=Severity.WARNING,
            )
            return ReplySequence(units=(unit,))

        return self.failure_sequence(result)

    def empty_sequence(self, result: Empty, title: str = "No Results") -> ReplySequence:
        unit = ReplyUnit(
            title=title,
            description=display(result.reason, "No results found."),
            severity=Severity.WARNING,
        )
        return ReplySequence(units=(unit,))

    def error_unit(self, kind: ErrorKind, detail: Optional[str] = None) -> ReplyUnit:
        """Build the reply unit for a failure kind."""
        title, _ = ERROR_MESSAGES[kind]
        return ReplyUnit(
            title=title,
            description=truncate(describe_error(kind, detail), MAX_DESCRIPTION_LENGTH),
            severity=Severity.ERROR,
        )

    def failure_sequence(self, result: Failure) -> ReplySequence:
        return ReplySequence(units=(self.error_unit(result.kind, result.message),))

    def invalid_input_sequence(self, message: str) -> ReplySequence:
        unit = ReplyUnit(
            title="Invalid Input",
            description=display(message, "Invalid input."),
            severity=Severity.ERROR,
        )
        return ReplySequence(units=(unit,))

    def info_sequence(
        self,
        title: str,
        lines: Iterable[str],
        severity: Severity = Severity.INFO,
        footer: Optional[str] = None,
    ) -> ReplySequence:
        description = "\n".join(lines)
        unit = ReplyUnit(
            title=title,
            description=truncate(description, MAX_DESCRIPTION_LENGTH),
            severity=severity,
            footer=footer,
        )
        return ReplySequence(units=(unit,))


mapper = ResponseMapper()
