"""
SQLAlchemy ORM models for PaddleRank.

This module defines all database tables and their relationships.
The schema is built around two timelines per player: the tournament
results they earned, and the equipment they were using over time.
Points are credited to equipment by overlapping those two timelines
(see stats/leaderboard.py).

Key design decisions:
- MatchResult.points is computed once at ingestion and stored, so a
  future change to the scoring policy never rewrites past standings
- EquipmentUsage is a closed interval [start_date, end_date]; a NULL
  end_date means the player is still using the item
- Nothing is physically deleted: players, equipment and tournaments
  carry a deleted_at timestamp and every read query filters on it
- Player.field_sources remembers which data source last wrote each
  field, so lower-priority sources cannot clobber curated values

Tables:
- players: Canonical player records
- equipment: Paddles and shoes
- equipment_usages: Who used what, and when
- tournaments: Tournament master data
- match_results: A player's placement in a tournament event
- affiliate_links: Retailer links per equipment item
"""

import enum
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (all columns store naive UTC)."""
    return datetime.utcnow()


# =============================================================================
# Enums
# =============================================================================

class EquipmentType(str, enum.Enum):
    """Kinds of tracked equipment. Add a variant to support a new kind."""

    PADDLE = "PADDLE"
    SHOE = "SHOE"


class TournamentTier(str, enum.Enum):
    """Tournament tiers, used by the scoring policy for its multiplier."""

    MAJOR = "MAJOR"
    PPA = "PPA"
    MLP = "MLP"
    APP = "APP"
    OTHER = "OTHER"


class RetailerKey(str, enum.Enum):
    """Retailers we hold affiliate agreements with."""

    SELKIRK = "selkirk"
    JUSTPADDLES = "justpaddles"
    PICKLEBALLSUPERSTORE = "pickleballsuperstore"
    AMAZON = "amazon"


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# =============================================================================
# Player Models
# =============================================================================

class Player(Base):
    """
    Canonical player record.

    Each professional has exactly one row here regardless of how many
    data sources report on them. Individual fields may come from
    different sources (e.g. ranking from the PPA feed, country from a
    manual edit); field_sources maps each field name to the source that
    last wrote it.
    """
    __tablename__ = "players"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    ranking: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # {"ranking": "ppa", "country": "manual", ...}
    field_sources: Mapped[dict[str, str]] = mapped_column(
        JSONType, nullable=False, default=dict
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    match_results: Mapped[list["MatchResult"]] = relationship(back_populates="player")
    equipment_usages: Mapped[list["EquipmentUsage"]] = relationship(back_populates="player")

    __table_args__ = (
        Index("idx_players_deleted_at", "deleted_at"),
    )

    def __repr__(self) -> str:
        return f"<Player(id={self.id}, slug='{self.slug}')>"


# =============================================================================
# Equipment Models
# =============================================================================

class Equipment(Base):
    """
    A paddle or shoe model.

    The specs column is free-form JSON whose shape depends on type; use
    paddlerank.equipment.specs.parse_specs() to read it as a typed model.
    """
    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    brand: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[EquipmentType] = mapped_column(
        Enum(EquipmentType, native_enum=False, length=10), nullable=False
    )

    specs: Mapped[Optional[dict[str, Any]]] = mapped_column(JSONType, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    usages: Mapped[list["EquipmentUsage"]] = relationship(back_populates="equipment")
    affiliate_links: Mapped[list["AffiliateLink"]] = relationship(back_populates="equipment")

    __table_args__ = (
        Index("idx_equipment_type_deleted", "type", "deleted_at"),
    )

    def __repr__(self) -> str:
        return f"<Equipment(id={self.id}, slug='{self.slug}', type={self.type.value})>"


class EquipmentUsage(Base):
    """
    A period during which a player used an equipment item.

    end_date is NULL while the player is still using it. Overlapping
    usages of the same equipment type are not prevented at this level;
    the leaderboard credits every usage that covers a match date.
    """
    __tablename__ = "equipment_usages"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    equipment_id: Mapped[int] = mapped_column(ForeignKey("equipment.id"))

    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # Free-text provenance (source name, article URL, photo credit...)
    source: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    player: Mapped["Player"] = relationship(back_populates="equipment_usages")
    equipment: Mapped["Equipment"] = relationship(back_populates="usages")

    __table_args__ = (
        Index("idx_usages_player_end", "player_id", "end_date"),
        Index("idx_usages_equipment", "equipment_id"),
    )

    @property
    def is_active(self) -> bool:
        return self.end_date is None

    def __repr__(self) -> str:
        return (
            f"<EquipmentUsage(player_id={self.player_id}, equipment_id={self.equipment_id}, "
            f"{self.start_date:%Y-%m-%d}..{self.end_date or 'now'})>"
        )


# =============================================================================
# Tournament Models
# =============================================================================

class Tournament(Base):
    """
    A tournament on one of the pro tours.

    Tiers:
    - MAJOR: Tour majors (highest multiplier)
    - PPA: PPA Tour events
    - MLP: Major League Pickleball events
    - APP: APP Tour events
    - OTHER: Everything else
    """
    __tablename__ = "tournaments"

    id: Mapped[int] = mapped_column(primary_key=True)

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    tier: Mapped[TournamentTier] = mapped_column(
        Enum(TournamentTier, native_enum=False, length=10), nullable=False
    )

    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    # Relationships
    match_results: Mapped[list["MatchResult"]] = relationship(back_populates="tournament")

    __table_args__ = (
        Index("idx_tournaments_start_date", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<Tournament(slug='{self.slug}', tier={self.tier.value})>"


class MatchResult(Base):
    """
    A player's final placement in a tournament event.

    points is written once by the ingestion service using the scoring
    policy in force at the time. Aggregation reads it as-is.
    """
    __tablename__ = "match_results"

    id: Mapped[int] = mapped_column(primary_key=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"))
    tournament_id: Mapped[int] = mapped_column(ForeignKey("tournaments.id"))

    placement: Mapped[int] = mapped_column(Integer, nullable=False)  # 1 = winner
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    match_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    event_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)  # "Men's Singles"

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    player: Mapped["Player"] = relationship(back_populates="match_results")
    tournament: Mapped["Tournament"] = relationship(back_populates="match_results")

    __table_args__ = (
        CheckConstraint("placement >= 1", name="ck_match_results_placement"),
        CheckConstraint("points >= 0", name="ck_match_results_points"),
        Index("idx_match_results_player_date", "player_id", "match_date"),
        Index("idx_match_results_tournament", "tournament_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<MatchResult(player_id={self.player_id}, tournament_id={self.tournament_id}, "
            f"placement={self.placement}, points={self.points})>"
        )


# =============================================================================
# Affiliate Models
# =============================================================================

class AffiliateLink(Base):
    """Retailer purchase link for an equipment item."""

    __tablename__ = "affiliate_links"

    id: Mapped[int] = mapped_column(primary_key=True)
    equipment_id: Mapped[int] = mapped_column(ForeignKey("equipment.id"))

    retailer: Mapped[RetailerKey] = mapped_column(
        Enum(RetailerKey, native_enum=False, length=30), nullable=False
    )
    url: Mapped[str] = mapped_column(String(1000), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    commission: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 4), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    # Relationships
    equipment: Mapped["Equipment"] = relationship(back_populates="affiliate_links")

    def __repr__(self) -> str:
        return f"<AffiliateLink(equipment_id={self.equipment_id}, retailer='{self.retailer.value}')>"
