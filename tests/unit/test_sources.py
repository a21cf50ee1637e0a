"""
Unit tests for the adapter contract and fetch_with_retry.

HTTP is served by httpx.MockTransport and sleeps are recorded instead of
awaited, so retries run instantly and their waits can be asserted.
"""

import asyncio
from datetime import datetime
from typing import Optional

import httpx
import pytest

from paddlerank.db.models import TournamentTier
from paddlerank.sources.base import (
    AdapterError,
    DataSourceAdapter,
    EquipmentUsageData,
    MatchResultData,
    TournamentData,
    fetch_with_retry,
)


class RecordingSleep:
    def __init__(self):
        self.waits = []

    async def __call__(self, seconds: float) -> None:
        self.waits.append(seconds)


def scripted(*responses):
    """Transport returning the given responses (or raising exceptions) in order."""
    calls = []
    queue = list(responses)

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return httpx.MockTransport(handler), calls


def run_fetch(transport, sleep, **kwargs):
    async def go():
        async with httpx.AsyncClient(transport=transport, base_url="https://api.test") as client:
            return await fetch_with_retry(
                client,
                "GET",
                "/tournaments",
                source=kwargs.pop("source", "ppa"),
                context=kwargs.pop("context", "fetch_tournaments"),
                sleep=sleep,
                **kwargs,
            )

    return asyncio.run(go())


class TestFetchWithRetry:

    def test_first_success_returns_without_waiting(self):
        transport, calls = scripted(httpx.Response(200, json={"ok": True}))
        sleep = RecordingSleep()

        response = run_fetch(transport, sleep, max_attempts=3)

        assert response.json() == {"ok": True}
        assert len(calls) == 1
        assert sleep.waits == []

    def test_server_errors_back_off_linearly(self):
        transport, calls = scripted(
            httpx.Response(500),
            httpx.Response(503),
            httpx.Response(200, json=[]),
        )
        sleep = RecordingSleep()

        response = run_fetch(transport, sleep, max_attempts=3)

        assert response.status_code == 200
        assert len(calls) == 3
        assert sleep.waits == [1.0, 2.0]

    def test_rate_limit_honours_retry_after(self):
        transport, calls = scripted(
            httpx.Response(429, headers={"Retry-After": "7"}),
            httpx.Response(200, json=[]),
        )
        sleep = RecordingSleep()

        run_fetch(transport, sleep, max_attempts=3)

        assert sleep.waits == [7.0]
        assert len(calls) == 2

    def test_rate_limit_without_header_uses_attempt_number(self):
        transport, _ = scripted(
            httpx.Response(429),
            httpx.Response(429),
            httpx.Response(200),
        )
        sleep = RecordingSleep()

        run_fetch(transport, sleep, max_attempts=3)

        assert sleep.waits == [1.0, 2.0]

    def test_unparseable_retry_after_falls_back_to_linear(self):
        transport, _ = scripted(
            httpx.Response(429, headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"}),
            httpx.Response(200),
        )
        sleep = RecordingSleep()

        run_fetch(transport, sleep, max_attempts=2)

        assert sleep.waits == [1.0]

    def test_exhaustion_raises_adapter_error_with_context(self):
        transport, calls = scripted(*[httpx.Response(500) for _ in range(3)])
        sleep = RecordingSleep()

        with pytest.raises(AdapterError) as exc_info:
            run_fetch(transport, sleep, max_attempts=3, source="apt",
                      context="fetch_results(t-42)")

        error = exc_info.value
        assert str(error).startswith("[apt] fetch_results(t-42): ")
        assert error.source == "apt"
        assert error.context == "fetch_results(t-42)"
        assert isinstance(error.error, httpx.HTTPStatusError)
        assert error.__cause__ is error.error
        assert len(calls) == 3
        # No wait after the final attempt
        assert sleep.waits == [1.0, 2.0]

    def test_exhausted_rate_limit_surfaces_429(self):
        transport, calls = scripted(*[httpx.Response(429) for _ in range(2)])
        sleep = RecordingSleep()

        with pytest.raises(AdapterError) as exc_info:
            run_fetch(transport, sleep, max_attempts=2)

        assert "429" in str(exc_info.value)
        assert exc_info.value.error.response.status_code == 429
        assert len(calls) == 2
        assert sleep.waits == [1.0]

    def test_transport_errors_are_retried(self):
        transport, calls = scripted(
            httpx.ConnectError("connection refused"),
            httpx.Response(200, json=[]),
        )
        sleep = RecordingSleep()

        response = run_fetch(transport, sleep, max_attempts=3)

        assert response.status_code == 200
        assert len(calls) == 2
        assert sleep.waits == [1.0]

    def test_transport_error_exhaustion_keeps_last_error(self):
        transport, _ = scripted(
            httpx.Response(500),
            httpx.ReadTimeout("timed out"),
        )

        with pytest.raises(AdapterError) as exc_info:
            run_fetch(transport, RecordingSleep(), max_attempts=2)

        assert isinstance(exc_info.value.error, httpx.ReadTimeout)
        assert "timed out" in str(exc_info.value)

    def test_attempt_bound_comes_from_settings(self, monkeypatch):
        from paddlerank.config import settings

        monkeypatch.setattr(settings, "adapter_max_retries", 2)
        transport, calls = scripted(*[httpx.Response(502) for _ in range(2)])

        with pytest.raises(AdapterError):
            run_fetch(transport, RecordingSleep())

        assert len(calls) == 2

    def test_timeout_defaults_to_settings(self, monkeypatch):
        from paddlerank.config import settings

        monkeypatch.setattr(settings, "adapter_timeout_seconds", 12.5)
        transport, calls = scripted(httpx.Response(200))

        run_fetch(transport, RecordingSleep(), max_attempts=1)

        assert calls[0].extensions["timeout"]["read"] == 12.5

    def test_explicit_timeout_wins(self):
        transport, calls = scripted(httpx.Response(200))

        run_fetch(transport, RecordingSleep(), max_attempts=1, timeout=2.0)

        assert calls[0].extensions["timeout"]["connect"] == 2.0


class FakeAdapter:
    """Structural implementation of DataSourceAdapter."""

    async def fetch_tournaments(self, since: Optional[datetime] = None) -> list[TournamentData]:
        return [
            TournamentData(
                external_id="t-1",
                name="Atlanta Open",
                start_date=datetime(2024, 3, 14),
                end_date=datetime(2024, 3, 17),
                tier=TournamentTier.PPA,
            )
        ]

    async def fetch_results(self, tournament_id: str) -> list[MatchResultData]:
        return []

    async def fetch_player_equipment(self, player_id: str) -> list[EquipmentUsageData]:
        return []

    def get_source_name(self) -> str:
        return "ppa"

    def get_source_priority(self) -> int:
        return 100


def test_adapters_satisfy_protocol_structurally():
    assert isinstance(FakeAdapter(), DataSourceAdapter)
    assert not isinstance(object(), DataSourceAdapter)
