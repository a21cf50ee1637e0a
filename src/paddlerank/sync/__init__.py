"""Multi-source reconciliation: conflict resolution and feed collection."""

from paddlerank.sync.conflicts import (
    SOURCE_PRIORITY,
    SourcedRecord,
    get_source_priority,
    merge_records,
    resolve_conflict,
    should_override,
)

__all__ = [
    "SOURCE_PRIORITY",
    "SourcedRecord",
    "get_source_priority",
    "merge_records",
    "resolve_conflict",
    "should_override",
]
