"""
External data sources.

No concrete provider is wired up yet; adapters implement
DataSourceAdapter and use fetch_with_retry() for their HTTP calls.
"""

from paddlerank.sources.base import (
    AdapterError,
    DataSourceAdapter,
    EquipmentUsageData,
    MatchResultData,
    TournamentData,
    fetch_with_retry,
)

__all__ = [
    "AdapterError",
    "DataSourceAdapter",
    "EquipmentUsageData",
    "MatchResultData",
    "TournamentData",
    "fetch_with_retry",
]
