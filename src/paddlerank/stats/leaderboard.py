"""
Equipment and player leaderboards.

This is where tournament points get attributed to gear. For every usage
row of an equipment item, each of the player's results whose match_date
falls inside the usage interval credits that item:

    usage.start_date <= result.match_date <= (usage.end_date or now)

Both ends are inclusive. Consequences worth knowing:
- A result can credit several items at once (paddle and shoes, or two
  overlapping paddle usages). Points are not split between them.
- A usage whose end_date is before its start_date never matches
  anything. Such rows are not rejected here.
- Points come from MatchResult.points as stored; they are never
  recomputed from the current scoring policy.

A player's own total is different: it is the plain sum over all of
their results, with or without any equipment on record.

The compute_* functions are pure over already-loaded rows. The get_*
functions load the live graph through paddlerank.db.queries first.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Optional, Sequence, TypeVar, Union

from sqlalchemy.orm import Session

from paddlerank.db import queries
from paddlerank.db.models import (
    Equipment,
    EquipmentType,
    EquipmentUsage,
    Player,
    utcnow,
)

logger = logging.getLogger(__name__)

S = TypeVar("S", "EquipmentStats", "PlayerStats")


@dataclass
class EquipmentStats:
    """Leaderboard row for one equipment item."""

    id: int
    name: str
    slug: str
    brand: str
    type: EquipmentType
    image_url: Optional[str] = None
    total_wins: int = 0
    total_points: int = 0
    active_pro_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["type"] = self.type.value
        return payload


@dataclass
class EquipmentSummary:
    """Just enough of an equipment item to link to it."""

    id: int
    name: str
    slug: str
    brand: str

    @classmethod
    def from_equipment(cls, equipment: Equipment) -> "EquipmentSummary":
        return cls(
            id=equipment.id,
            name=equipment.name,
            slug=equipment.slug,
            brand=equipment.brand,
        )


@dataclass
class PlayerStats:
    """Leaderboard row for one player."""

    id: int
    name: str
    slug: str
    ranking: Optional[int] = None
    country: Optional[str] = None
    image_url: Optional[str] = None
    current_paddle: Optional[EquipmentSummary] = None
    current_shoes: Optional[EquipmentSummary] = None
    total_points: int = 0
    total_wins: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# Pure computation
# =============================================================================

def usage_covers(usage: EquipmentUsage, match_date: datetime, now: datetime) -> bool:
    """Whether match_date falls inside the usage interval (both ends inclusive)."""
    effective_end = usage.end_date if usage.end_date is not None else now
    return usage.start_date <= match_date <= effective_end


def compute_equipment_stats(equipment: Equipment, now: datetime) -> EquipmentStats:
    """
    Attribute results to one equipment item across all its usages.

    Args:
        equipment: Equipment with usages -> player -> match_results loaded
        now: End of every open usage interval
    """
    stats = EquipmentStats(
        id=equipment.id,
        name=equipment.name,
        slug=equipment.slug,
        brand=equipment.brand,
        type=equipment.type,
        image_url=equipment.image_url,
    )

    for usage in equipment.usages:
        if usage.end_date is None:
            stats.active_pro_count += 1

        for result in usage.player.match_results:
            if usage_covers(usage, result.match_date, now):
                stats.total_points += result.points
                if result.placement == 1:
                    stats.total_wins += 1

    return stats


def _first_open_usage(
    usages: Iterable[EquipmentUsage],
    equipment_type: EquipmentType,
) -> Optional[Equipment]:
    for usage in usages:
        if usage.end_date is None and usage.equipment.type == equipment_type:
            return usage.equipment
    return None


def compute_player_stats(player: Player) -> PlayerStats:
    """
    Totals and current gear for one player.

    Current gear is the first open usage of each type in the order the
    usages were loaded.
    """
    paddle = _first_open_usage(player.equipment_usages, EquipmentType.PADDLE)
    shoes = _first_open_usage(player.equipment_usages, EquipmentType.SHOE)

    return PlayerStats(
        id=player.id,
        name=player.name,
        slug=player.slug,
        ranking=player.ranking,
        country=player.country,
        image_url=player.image_url,
        current_paddle=EquipmentSummary.from_equipment(paddle) if paddle else None,
        current_shoes=EquipmentSummary.from_equipment(shoes) if shoes else None,
        total_points=sum(result.points for result in player.match_results),
        total_wins=sum(1 for result in player.match_results if result.placement == 1),
    )


def rank_by_points(stats: Sequence[S], limit: int) -> list[S]:
    """Sort by total_points descending (stable on ties) and keep the top `limit`."""
    ranked = sorted(stats, key=lambda s: s.total_points, reverse=True)
    return ranked[:max(limit, 0)]


# =============================================================================
# Database-backed leaderboards
# =============================================================================

def get_equipment_leaderboard(
    session: Session,
    equipment_type: Union[EquipmentType, str],
    limit: int = 10,
    now: Optional[datetime] = None,
) -> list[EquipmentStats]:
    """
    Top equipment of one type by attributed points.

    Args:
        session: Database session
        equipment_type: PADDLE or SHOE
        limit: Maximum rows returned
        now: End of open usage intervals (default: current UTC time)
    """
    equipment_type = EquipmentType(equipment_type)
    if now is None:
        now = utcnow()

    equipment = queries.load_equipment_graph(session, equipment_type)
    stats = [compute_equipment_stats(item, now) for item in equipment]
    logger.debug("Computed %s leaderboard over %d items", equipment_type.value, len(stats))
    return rank_by_points(stats, limit)


def get_player_leaderboard(session: Session, limit: int = 10) -> list[PlayerStats]:
    """Top players by total points."""
    players = queries.load_player_graph(session)
    stats = [compute_player_stats(player) for player in players]
    logger.debug("Computed player leaderboard over %d players", len(stats))
    return rank_by_points(stats, limit)


async def get_leaderboards(
    session_factory: Callable[[], Session],
    limit: int = 10,
    now: Optional[datetime] = None,
) -> dict[str, list]:
    """
    Paddle, shoe and player leaderboards computed concurrently.

    Each leaderboard runs in a worker thread with its own session; the
    three share no state and are joined once all have finished.

    Returns:
        {"paddles": [...], "shoes": [...], "players": [...]}
    """
    if now is None:
        now = utcnow()

    def equipment_board(equipment_type: EquipmentType) -> list[EquipmentStats]:
        with session_factory() as session:
            return get_equipment_leaderboard(session, equipment_type, limit, now)

    def player_board() -> list[PlayerStats]:
        with session_factory() as session:
            return get_player_leaderboard(session, limit)

    paddles, shoes, players = await asyncio.gather(
        asyncio.to_thread(equipment_board, EquipmentType.PADDLE),
        asyncio.to_thread(equipment_board, EquipmentType.SHOE),
        asyncio.to_thread(player_board),
    )
    return {"paddles": paddles, "shoes": shoes, "players": players}
