"""
Database module for PaddleRank.

Provides SQLAlchemy ORM models, session management, and read queries.

Usage:
    from paddlerank.db import get_session, Player

    with get_session() as session:
        players = session.query(Player).all()
"""

from paddlerank.db.models import (
    AffiliateLink,
    Base,
    Equipment,
    EquipmentType,
    EquipmentUsage,
    MatchResult,
    Player,
    RetailerKey,
    Tournament,
    TournamentTier,
)
from paddlerank.db.session import SessionLocal, get_engine, get_session

__all__ = [
    # Base
    "Base",
    # Enums
    "EquipmentType",
    "TournamentTier",
    "RetailerKey",
    # Models
    "Player",
    "Equipment",
    "EquipmentUsage",
    "Tournament",
    "MatchResult",
    "AffiliateLink",
    # Session
    "get_session",
    "get_engine",
    "SessionLocal",
]
