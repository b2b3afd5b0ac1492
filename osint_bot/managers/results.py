"""
Query results
Uniform outcome of every external query
"""

from dataclasses import dataclass, field
from typing import Any, Tuple, Union

from osint_bot.utils.errors import ErrorKind


@dataclass(frozen=True)
class Success:
    """Backend returned records (flight dicts or tool output text)."""

    records: Tuple[Any, ...]
    total: int = 0

    def __post_init__(self):
        if not self.total:
            object.__setattr__(self, "total", len(self.records))

    ok = True


@dataclass(frozen=True)
class Empty:
    """Backend answered but had nothing to return."""

    reason: str = "No results found."

    ok = True


@dataclass(frozen=True)
class Failure:
    """Backend failed. The kind selects the user message."""

    kind: ErrorKind
    message: str = ""
    details: dict = field(default_factory=dict, compare=False)

    ok = False


QueryResult = Union[Success, Empty, Failure]
