"""
Shared fixtures: fake interaction contexts and fake backends.
"""

from typing import Any, Dict, List, Optional

import pytest

from osint_bot.managers.results import QueryResult, Success
from osint_bot.utils.error_handler import ErrorHandler


class FakeContext:
    """Records every reply call in order."""

    def __init__(self, command_name: str = "", options: Optional[Dict[str, Any]] = None):
        self.command_name = command_name
        self.options = options or {}
        self.deferred = False
        self.replied = False
        self.events: List[tuple] = []
        self.user_label = "tester#0001 (1)"
        self.guild_label = "Test Guild (2)"

    def get_option(self, name: str) -> Any:
        return self.options.get(name)

    async def reply(self, content=None, units=None, ephemeral=False):
        self.events.append(("reply", content, list(units or []), ephemeral))
        self.replied = True

    async def defer_reply(self):
        self.events.append(("defer", None, [], False))
        self.deferred = True

    async def edit_reply(self, content=None, units=None):
        self.events.append(("edit", content, list(units or []), False))
        self.replied = True

    async def follow_up(self, content=None, units=None, ephemeral=False):
        self.events.append(("follow_up", content, list(units or []), ephemeral))

    @property
    def kinds(self) -> List[str]:
        return [event[0] for event in self.events]

    @property
    def units(self) -> list:
        return [unit for event in self.events for unit in event[2]]


class FakeFlightClient:
    def __init__(self, result: Optional[QueryResult] = None):
        self.result = result or Success(records=({},))
        self.queries = []

    async def fetch_flights(self, query):
        self.queries.append(query)
        return self.result


class FakeToolRunner:
    tool_name = "xeuledoc"

    def __init__(self, result: Optional[QueryResult] = None):
        self.result = result or Success(records=("Document ID: abc\n",))
        self.links = []

    async def run(self, link):
        self.links.append(link)
        return self.result


class FakeClient:
    def __init__(self, flight_result=None, tool_result=None):
        self.flight_client = FakeFlightClient(flight_result)
        self.tool_runner = FakeToolRunner(tool_result)
        self.monitoring = None
        self.error_handler = ErrorHandler()
        self.user = "OSINT Bot#0000"


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def make_context():
    def _make(command_name: str = "", **options) -> FakeContext:
        return FakeContext(command_name, options)
    return _make


def flight_record(index: int = 0, **overrides) -> Dict[str, Any]:
    record = {
        "flight_status": "scheduled",
        "airline": {"name": "British Airways", "iata": "BA"},
        "flight": {"iata": f"BA{234 + index}", "icao": f"BAW{234 + index}"},
        "departure": {
            "airport": "Heathrow",
            "iata": "LHR",
            "scheduled": "2024-05-01T10:15:00+00:00",
            "delay": None,
        },
        "arrival": {
            "airport": "John F Kennedy International",
            "iata": "JFK",
            "scheduled": "2024-05-01T13:05:00+00:00",
            "delay": 12,
        },
        "aircraft": {"registration": "G-XWBA"},
    }
    record.update(overrides)
    return record
