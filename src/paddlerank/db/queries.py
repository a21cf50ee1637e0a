"""
Read queries for PaddleRank.

Every query here excludes soft-deleted players, equipment and tournaments
in SQL, including inside eager-loaded relationships: a match result from
a deleted tournament, or a usage row belonging to a deleted player, is
never loaded at all. Callers (the leaderboard engine, the web layer) can
therefore treat whatever they receive as the complete live graph.

Graph loaders use populate_existing() so that objects already sitting in
the session's identity map are refreshed with the filtered collections.
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from paddlerank.db.models import (
    Equipment,
    EquipmentType,
    EquipmentUsage,
    MatchResult,
    Player,
    Tournament,
)


# Loader criteria shared by several graphs
_LIVE_RESULTS = Player.match_results.and_(
    MatchResult.tournament.has(Tournament.deleted_at.is_(None))
)


def load_equipment_graph(session: Session, equipment_type: EquipmentType) -> list[Equipment]:
    """
    Load live equipment of one type with usage -> player -> results joined.

    Ordered by id so ties later in the pipeline keep a stable order.
    """
    return (
        session.query(Equipment)
        .filter(Equipment.type == equipment_type, Equipment.deleted_at.is_(None))
        .options(
            selectinload(
                Equipment.usages.and_(
                    EquipmentUsage.player.has(Player.deleted_at.is_(None))
                )
            )
            .selectinload(EquipmentUsage.player)
            .selectinload(_LIVE_RESULTS)
        )
        .populate_existing()
        .order_by(Equipment.id)
        .all()
    )


def load_player_graph(session: Session) -> list[Player]:
    """
    Load live players with their results and currently open usages.

    Only open usages (end_date IS NULL) of live equipment are loaded,
    which is all the player leaderboard needs.
    """
    return (
        session.query(Player)
        .filter(Player.deleted_at.is_(None))
        .options(
            selectinload(_LIVE_RESULTS),
            selectinload(
                Player.equipment_usages.and_(
                    EquipmentUsage.end_date.is_(None),
                    EquipmentUsage.equipment.has(Equipment.deleted_at.is_(None)),
                )
            ).selectinload(EquipmentUsage.equipment),
        )
        .populate_existing()
        .order_by(Player.id)
        .all()
    )


# =============================================================================
# Single-entity lookups (None means "not found")
# =============================================================================

def get_player_by_slug(session: Session, slug: str) -> Optional[Player]:
    """Player with results (and their tournaments) and full usage history."""
    return (
        session.query(Player)
        .filter(Player.slug == slug, Player.deleted_at.is_(None))
        .options(
            selectinload(_LIVE_RESULTS).selectinload(MatchResult.tournament),
            selectinload(
                Player.equipment_usages.and_(
                    EquipmentUsage.equipment.has(Equipment.deleted_at.is_(None))
                )
            ).selectinload(EquipmentUsage.equipment),
        )
        .populate_existing()
        .first()
    )


def get_equipment_by_slug(session: Session, slug: str) -> Optional[Equipment]:
    """Equipment with its active (open) usages, their players, and affiliate links."""
    return (
        session.query(Equipment)
        .filter(Equipment.slug == slug, Equipment.deleted_at.is_(None))
        .options(
            selectinload(
                Equipment.usages.and_(
                    EquipmentUsage.end_date.is_(None),
                    EquipmentUsage.player.has(Player.deleted_at.is_(None)),
                )
            ).selectinload(EquipmentUsage.player),
            selectinload(Equipment.affiliate_links),
        )
        .populate_existing()
        .first()
    )


def get_tournament_by_slug(session: Session, slug: str) -> Optional[Tournament]:
    """Tournament with results from live players."""
    return (
        session.query(Tournament)
        .filter(Tournament.slug == slug, Tournament.deleted_at.is_(None))
        .options(
            selectinload(
                Tournament.match_results.and_(
                    MatchResult.player.has(Player.deleted_at.is_(None))
                )
            ).selectinload(MatchResult.player),
        )
        .populate_existing()
        .first()
    )


# =============================================================================
# Listings
# =============================================================================

def list_players(session: Session) -> list[Player]:
    """Live players, ranked first (ascending), then by name."""
    return (
        session.query(Player)
        .filter(Player.deleted_at.is_(None))
        .order_by(Player.ranking.is_(None), Player.ranking, Player.name)
        .all()
    )


def list_equipment(
    session: Session,
    equipment_type: Optional[EquipmentType] = None,
) -> list[Equipment]:
    """Live equipment, optionally of one type, by name."""
    query = session.query(Equipment).filter(Equipment.deleted_at.is_(None))
    if equipment_type is not None:
        query = query.filter(Equipment.type == equipment_type)
    return query.order_by(Equipment.name).all()


def recent_tournaments(session: Session, limit: int = 10) -> list[tuple[Tournament, int]]:
    """Newest live tournaments with their result counts."""
    rows = (
        session.query(Tournament, func.count(MatchResult.id))
        .outerjoin(MatchResult, MatchResult.tournament_id == Tournament.id)
        .filter(Tournament.deleted_at.is_(None))
        .group_by(Tournament.id)
        .order_by(Tournament.start_date.desc())
        .limit(limit)
        .all()
    )
    return [(tournament, count) for tournament, count in rows]


def count_tournaments(session: Session) -> int:
    return (
        session.query(func.count(Tournament.id))
        .filter(Tournament.deleted_at.is_(None))
        .scalar()
    )
