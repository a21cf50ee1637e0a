"""
Leaderboards: attributing tournament points to equipment and players.

Usage:
    from paddlerank.stats import get_equipment_leaderboard

    with get_session() as session:
        top_paddles = get_equipment_leaderboard(session, "PADDLE", limit=10)
"""

from paddlerank.stats.cache import CacheGroup, TTLCache
from paddlerank.stats.leaderboard import (
    EquipmentStats,
    EquipmentSummary,
    PlayerStats,
    compute_equipment_stats,
    compute_player_stats,
    get_equipment_leaderboard,
    get_leaderboards,
    get_player_leaderboard,
    rank_by_points,
    usage_covers,
)

__all__ = [
    "CacheGroup",
    "TTLCache",
    "EquipmentStats",
    "EquipmentSummary",
    "PlayerStats",
    "compute_equipment_stats",
    "compute_player_stats",
    "get_equipment_leaderboard",
    "get_leaderboards",
    "get_player_leaderboard",
    "rank_by_points",
    "usage_covers",
]
