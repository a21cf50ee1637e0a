"""
Concurrent collection of tournament feeds from several data sources.

Each adapter is queried at the same time (the sources are independent).
Results are grouped into logical tournaments and every group is
reconciled field by field with merge_records(), so the PPA feed's dates
and an APT feed's location can end up in the same canonical record.

A source that fails is logged and reported in CollectionResult.errors;
the other sources' data is still returned.

Usage:
    result = await collect_tournaments([ppa_adapter, apt_adapter], since=last_sync)
    for key, fields in result.tournaments.items():
        ...
"""

import asyncio
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence

from paddlerank.db.models import utcnow
from paddlerank.players.names import slugify
from paddlerank.sources.base import DataSourceAdapter, TournamentData
from paddlerank.sync.conflicts import SourcedRecord, merge_records

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """Reconciled tournaments keyed by tournament_key(), plus per-source errors."""

    tournaments: dict[str, dict[str, Any]] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    sources: list[str] = field(default_factory=list)


def tournament_key(data: TournamentData) -> str:
    """
    Source-independent identity for a tournament.

    External IDs differ per provider, so the key is the slugged name plus
    the start date, e.g. "ppa-atlanta-open-2024-03-14".
    """
    return f"{slugify(data.name)}-{data.start_date:%Y-%m-%d}"


async def _fetch_from(
    adapter: DataSourceAdapter,
    since: Optional[datetime],
) -> tuple[list[TournamentData], datetime]:
    tournaments = await adapter.fetch_tournaments(since)
    return tournaments, utcnow()


async def collect_tournaments(
    adapters: Sequence[DataSourceAdapter],
    since: Optional[datetime] = None,
) -> CollectionResult:
    """
    Fetch tournaments from every adapter concurrently and reconcile them.

    Args:
        adapters: Data sources to query
        since: Incremental cut-off passed to each adapter (None = full fetch)

    Returns:
        CollectionResult with one merged field dict per logical tournament.
        Merged dicts carry the TournamentData fields (external_id comes
        from the winning source).
    """
    result = CollectionResult(sources=[a.get_source_name() for a in adapters])

    outcomes = await asyncio.gather(
        *(_fetch_from(adapter, since) for adapter in adapters),
        return_exceptions=True,
    )

    grouped: dict[str, list[SourcedRecord[dict[str, Any]]]] = {}
    for adapter, outcome in zip(adapters, outcomes):
        source = adapter.get_source_name()
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.error("Tournament fetch from %s failed: %s", source, outcome)
            result.errors[source] = str(outcome)
            continue

        tournaments, fetched_at = outcome
        logger.info("Fetched %d tournaments from %s", len(tournaments), source)
        for tournament in tournaments:
            grouped.setdefault(tournament_key(tournament), []).append(
                SourcedRecord(source, asdict(tournament), fetched_at)
            )

    for key, records in grouped.items():
        result.tournaments[key] = merge_records(records)

    return result
