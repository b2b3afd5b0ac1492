"""
Clients for external backends.
"""

from .base_manager import BaseManager
from .query_client import FlightDataClient, ToolRunner
from .results import Empty, Failure, QueryResult, Success

__all__ = [
    "BaseManager",
    "Empty",
    "Failure",
    "FlightDataClient",
    "QueryResult",
    "Success",
    "ToolRunner",
]
