"""
External Query Client
Flight data API and local OSINT tool, both normalized into QueryResult
"""

import asyncio
import contextlib
from typing import Any, Dict, Optional, Sequence, Union

import httpx

from osint_bot.managers.base_manager import BaseManager
from osint_bot.managers.results import Empty, Failure, QueryResult, Success
from osint_bot.utils.errors import ErrorKind
from osint_bot.utils.validation import FlightLookupQuery, TrustedLink

AVIATIONSTACK_URL = "http://api.aviationstack.com/v1/flights"

# Records requested from and accepted back from the API
MAX_RECORDS = 5


class FlightDataClient(BaseManager):
    """AviationStack flight lookups. Single attempt, fixed timeout."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = AVIATIONSTACK_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__("FlightData", timeout)
        self.api_key = api_key
        self.base_url = base_url
        self._transport = transport

    def build_params(self, query: FlightLookupQuery) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "access_key": self.api_key,
            "limit": MAX_RECORDS,
        }
        params.update(query.to_params())
        return params

    async def fetch_flights(self, query: FlightLookupQuery) -> QueryResult:
        """
        Look up flights matching a validated query.

        Args:
            query: Validated lookup query

        Returns:
            Success, Empty or Failure; never raises
        """
        if not self.api_key:
            self.error("Missing AVIATIONSTACK_API_KEY in environment variables")
            return Failure(ErrorKind.CONFIG_ERROR, "AVIATIONSTACK_API_KEY is not set")

        self.record_call()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=self.build_params(query))
            return self.map_response(response)
        except httpx.TimeoutException:
            self.warning(f"Flight data request timed out after {self.timeout}s")
            return Failure(ErrorKind.UNREACHABLE, f"No response within {self.timeout:g} seconds")
        except httpx.TransportError as e:
            self.warning(f"Flight data service unreachable: {e}")
            return Failure(ErrorKind.UNREACHABLE, str(e))
        except Exception as e:
            self.error(f"Error fetching flight data: {e}")
            return Failure(ErrorKind.UNKNOWN, str(e))

    def map_response(self, response: httpx.Response) -> QueryResult:
        """
        Map an HTTP response to a QueryResult.

        Args:
            response: Response from the flight data API

        Returns:
            QueryResult
        """
        status = response.status_code
        body = self._json_body(response)

        if 200 <= status < 300:
            if not isinstance(body, dict):
                return Failure(ErrorKind.UNKNOWN, "Malformed response from flight data service")

            error = body.get("error")
            if error:
                self.error(f"Aviation Stack API error: {error}")
                message = "Unknown error"
                if isinstance(error, dict):
                    message = error.get("message") or error.get("info") or message
                return Failure(ErrorKind.API_ERROR, str(message), details={"error": error})

            flights = body.get("data") or []
            if not isinstance(flights, list) or not flights:
                return Empty("No flights found matching your criteria.")

            return Success(records=tuple(flights[:MAX_RECORDS]), total=len(flights))

        self.error(f"API error response: {status} {response.text[:200]}")

        if status == 401:
            return Failure(ErrorKind.AUTH_ERROR, f"HTTP {status}")
        if status == 404:
            return Empty("No flights found matching your criteria.")
        if status == 429:
            return Failure(ErrorKind.RATE_LIMITED, f"HTTP {status}")

        info = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            info = body["error"].get("info") or body["error"].get("message")
        return Failure(
            ErrorKind.HTTP_ERROR,
            f"({status}) {info or 'Failed to fetch flight data'}",
            details={"status": status},
        )

    @staticmethod
    def _json_body(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return None


class ToolRunner(BaseManager):
    """Runs a trusted local tool with one link argument."""

    def __init__(
        self,
        command: Union[str, Sequence[str]] = "xeuledoc",
        timeout: Optional[float] = None,
        name: str = "xeuledoc",
    ):
        super().__init__(f"Tool:{name}", timeout)
        self.command = [command] if isinstance(command, str) else list(command)
        self.tool_name = name

    async def run(self, link: TrustedLink) -> QueryResult:
        """
        Execute the tool with the link as a discrete argument.

        Args:
            link: Link already checked against the allow-list

        Returns:
            Success with the stdout text (possibly empty) or Failure; never raises
        """
        if not isinstance(link, TrustedLink):
            raise TypeError("ToolRunner.run requires a TrustedLink")

        self.record_call()
        try:
            process = await asyncio.create_subprocess_exec(
                *self.command,
                link.url,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            self.error(f"{self.tool_name} executable not found: {self.command[0]}")
            return Failure(ErrorKind.PROCESS_ERROR, f"{self.tool_name} is not installed or not on PATH")
        except OSError as e:
            self.error(f"Error executing {self.tool_name}: {e}")
            return Failure(ErrorKind.PROCESS_ERROR, str(e))

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.warning(f"{self.tool_name} timed out after {self.timeout}s")
            return Failure(ErrorKind.TIMEOUT, f"{self.tool_name} did not finish within {self.timeout:g} seconds")
        except Exception as e:
            self.error(f"Error executing {self.tool_name}: {e}")
            return Failure(ErrorKind.UNKNOWN, str(e))
        finally:
            # Also reached on cancellation; never leave the child running
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()

        out = stdout.decode("utf-8", errors="replace")
        err = stderr.decode("utf-8", errors="replace").strip()

        if process.returncode != 0 or err:
            self.error(f"{self.tool_name} failed (exit {process.returncode}): {err}")
            return Failure(
                ErrorKind.PROCESS_ERROR,
                err or f"{self.tool_name} exited with status {process.returncode}",
                details={"returncode": process.returncode},
            )

        return Success(records=(out,))
