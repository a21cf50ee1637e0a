"""
Data source adapter contract and shared HTTP retry helper.

Every external provider (PPA Tour API, AllPickleballTournaments, paddle
trackers...) is wrapped in an adapter that satisfies DataSourceAdapter.
Adapters normalise provider payloads into the dataclasses below so the
sync layer never sees provider-specific shapes.

Adapters do not inherit from a base class. An adapter that talks HTTP
calls fetch_with_retry() explicitly for each request.

Retry discipline (fetch_with_retry):
- At most max_attempts requests per logical call, strictly sequential
- HTTP 429: wait Retry-After seconds if given, else attempt * 1s
- Other non-2xx or transport errors: wait attempt * 1s
- When attempts run out, raise AdapterError naming the source and the
  operation, chained to the last underlying error
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

import httpx

from paddlerank.config import settings
from paddlerank.db.models import TournamentTier

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


@dataclass
class TournamentData:
    """Tournament as reported by a data source."""

    external_id: str
    name: str
    start_date: datetime
    end_date: datetime
    tier: TournamentTier
    location: Optional[str] = None


@dataclass
class MatchResultData:
    """A player's placement in a tournament, as reported by a data source."""

    external_tournament_id: str
    external_player_id: str
    player_name: str
    placement: int
    points: int
    match_date: datetime
    event_type: Optional[str] = None


@dataclass
class EquipmentUsageData:
    """What a player was seen using, as reported by an equipment tracker."""

    player_name: str
    source: str
    paddle_brand: Optional[str] = None
    paddle_model: Optional[str] = None
    shoe_brand: Optional[str] = None
    shoe_model: Optional[str] = None
    verified_at: Optional[datetime] = None


@runtime_checkable
class DataSourceAdapter(Protocol):
    """
    Interface every data source adapter must implement.

    get_source_name() must return a key of
    paddlerank.sync.conflicts.SOURCE_PRIORITY for the adapter's data to
    rank correctly during conflict resolution.
    """

    async def fetch_tournaments(self, since: Optional[datetime] = None) -> list[TournamentData]:
        """Tournaments updated after `since`; everything when `since` is None."""
        ...

    async def fetch_results(self, tournament_id: str) -> list[MatchResultData]:
        """Results for one tournament, by this source's external ID."""
        ...

    async def fetch_player_equipment(self, player_id: str) -> list[EquipmentUsageData]:
        """Equipment sightings for one player, by external ID or name."""
        ...

    def get_source_name(self) -> str:
        ...

    def get_source_priority(self) -> int:
        ...


class AdapterError(RuntimeError):
    """An adapter call failed after exhausting its retries."""

    def __init__(self, source: str, context: str, error: BaseException):
        self.source = source
        self.context = context
        self.error = error
        super().__init__(f"[{source}] {context}: {error}")


def _retry_after_seconds(response: httpx.Response) -> Optional[float]:
    """Parse a Retry-After header given in seconds; None if absent or unusable."""
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return None


async def fetch_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    source: str,
    context: str,
    max_attempts: Optional[int] = None,
    sleep: Sleep = asyncio.sleep,
    **request_kwargs: Any,
) -> httpx.Response:
    """
    Perform an HTTP request with bounded, sequential retries.

    Args:
        client: httpx client the adapter owns
        method: HTTP method ("GET", "POST", ...)
        url: Request URL (absolute, or relative to client.base_url)
        source: Adapter source name, used in the final error
        context: What the call is doing, e.g. "fetch_results(t-42)"
        max_attempts: Attempt bound (default from settings)
        sleep: Awaitable sleep, replaceable in tests
        **request_kwargs: Passed through to client.request(); timeout
            defaults to settings.adapter_timeout_seconds

    Returns:
        The first 2xx response

    Raises:
        AdapterError: When every attempt failed
    """
    if max_attempts is None:
        max_attempts = settings.adapter_max_retries
    request_kwargs.setdefault("timeout", settings.adapter_timeout_seconds)

    last_error: Optional[BaseException] = None

    for attempt in range(max_attempts):
        try:
            response = await client.request(method, url, **request_kwargs)

            if response.status_code == 429:
                last_error = httpx.HTTPStatusError(
                    "HTTP 429: Too Many Requests",
                    request=response.request,
                    response=response,
                )
                wait = _retry_after_seconds(response)
                if wait is None:
                    wait = float(attempt + 1)
                logger.warning(
                    "[%s] %s rate limited (attempt %d/%d), waiting %.1fs",
                    source, context, attempt + 1, max_attempts, wait,
                )
                if attempt < max_attempts - 1:
                    await sleep(wait)
                continue

            response.raise_for_status()
            return response

        except httpx.HTTPError as e:
            last_error = e
            if attempt < max_attempts - 1:
                wait = float(attempt + 1)
                logger.warning(
                    "[%s] %s failed (attempt %d/%d): %s. Retrying in %.1fs",
                    source, context, attempt + 1, max_attempts, e, wait,
                )
                await sleep(wait)

    if last_error is None:
        last_error = RuntimeError("Max retries exceeded")
    raise AdapterError(source, context, last_error) from last_error
