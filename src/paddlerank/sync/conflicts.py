"""
Conflict resolution for multi-source data.

Several providers report on the same players, tournaments and equipment,
and they disagree. Resolution is a strict total order, never a blend:

1. Source priority (higher wins)
2. Recency (more recent timestamp wins when priorities tie)

resolve_conflict() picks a winner among whole values; merge_records()
applies the same rule field by field, so one source can supply a
player's ranking while another supplies their country.

Usage:
    from paddlerank.sync.conflicts import SourcedRecord, merge_records

    merged = merge_records([
        SourcedRecord("ppa", {"ranking": 1}, fetched_at),
        SourcedRecord("manual", {"country": "USA"}, edited_at),
    ])
    # {'ranking': 1, 'country': 'USA'}
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Generic, Mapping, Optional, Sequence, TypeVar

T = TypeVar("T")

# Higher number = more authoritative
SOURCE_PRIORITY: dict[str, int] = {
    "manual": 200,  # Admin override - always wins
    "ppa": 100,  # Official PPA Tour API
    "apt": 80,  # AllPickleballTournaments API - paid, reliable
    "theslice": 60,  # The Slice - community-maintained paddle database
    "novolleys": 40,  # NoVolleys - fan-sourced equipment tracker
    "seed": 20,  # Seed/demo data
}


@dataclass(frozen=True)
class SourcedRecord(Generic[T]):
    """A value reported by a named source at a point in time."""

    source: str
    data: T
    timestamp: datetime


def get_source_priority(source: str) -> int:
    """Priority for a source name; unknown sources get 0."""
    return SOURCE_PRIORITY.get(source, 0)


def _rank_key(record: SourcedRecord) -> tuple[int, datetime]:
    return (get_source_priority(record.source), record.timestamp)


def resolve_conflict(records: Sequence[SourcedRecord[T]]) -> Optional[T]:
    """
    Pick the authoritative value among competing records.

    Returns None when there are no candidates (no authoritative value),
    the lone record's data when there is one, and otherwise the data of
    the highest-priority record, breaking ties by latest timestamp. On a
    full tie the earliest record in the input wins.
    """
    if not records:
        return None
    if len(records) == 1:
        return records[0].data

    # sorted() stays stable with reverse=True, so full ties keep input order
    ranked = sorted(records, key=_rank_key, reverse=True)
    return ranked[0].data


def merge_records(records: Sequence[SourcedRecord[Mapping[str, Any]]]) -> dict[str, Any]:
    """
    Merge partial records from several sources, resolving each field alone.

    None values are treated as "not supplied" and never win over a real
    value. Fields no source supplied are left out of the result rather
    than defaulted.
    """
    candidates: dict[str, list[SourcedRecord[Any]]] = {}

    for record in records:
        for field_name, value in record.data.items():
            if value is None:
                continue
            candidates.setdefault(field_name, []).append(
                SourcedRecord(record.source, value, record.timestamp)
            )

    merged: dict[str, Any] = {}
    for field_name, values in candidates.items():
        resolved = resolve_conflict(values)
        if resolved is not None:
            merged[field_name] = resolved
    return merged


def winning_sources(records: Sequence[SourcedRecord[Mapping[str, Any]]]) -> dict[str, str]:
    """Which source supplied each field of merge_records(records)."""
    candidates: dict[str, list[SourcedRecord[str]]] = {}
    for record in records:
        for field_name, value in record.data.items():
            if value is None:
                continue
            candidates.setdefault(field_name, []).append(
                SourcedRecord(record.source, record.source, record.timestamp)
            )
    return {name: resolve_conflict(values) for name, values in candidates.items()}


def should_override(new_source: str, existing_source: str) -> bool:
    """
    Whether data from new_source may replace data from existing_source.

    Equal priority counts as an override: newer same-priority data
    supersedes what is stored.
    """
    return get_source_priority(new_source) >= get_source_priority(existing_source)
