"""
Ingestion service - the only code that writes canonical records.

Seed scripts and future sync jobs go through these functions so that:
- MatchResult.points is computed exactly once, here, from the scoring
  policy in force at ingestion time
- Multi-source player facts are merged field by field with the conflict
  resolver, and a stored field is only overwritten by a source at least
  as authoritative as the one that wrote it
- Starting a new paddle (or shoe) usage closes the player's previous
  open usage of the same type

Functions flush but never commit; the caller owns the transaction.

Usage:
    with get_session() as session:
        player = create_player(session, PlayerInput(name="Ben Johns", slug="ben-johns"))
        result = record_match_result(session, player, tournament, placement=1,
                                     match_date=datetime(2024, 3, 17))
"""

import logging
from datetime import datetime
from typing import Any, Optional, Sequence, Union

from sqlalchemy.orm import Session

from paddlerank.db.models import (
    Equipment,
    EquipmentType,
    EquipmentUsage,
    MatchResult,
    Player,
    Tournament,
    utcnow,
)
from paddlerank.players.identity import find_player
from paddlerank.players.names import normalize_name, slugify
from paddlerank.scoring.points import calculate_points
from paddlerank.sources.base import EquipmentUsageData
from paddlerank.sync.conflicts import SourcedRecord, merge_records, should_override, winning_sources
from paddlerank.validation import (
    EquipmentInput,
    EquipmentUsageInput,
    MatchResultInput,
    PlayerInput,
    TournamentInput,
)

logger = logging.getLogger(__name__)

# Player columns a data source may write
PLAYER_SOURCE_FIELDS = ("name", "ranking", "country", "image_url")


def _url(value: Any) -> Optional[str]:
    return str(value) if value is not None else None


# =============================================================================
# Entity creation
# =============================================================================

def create_player(session: Session, data: PlayerInput, source: str = "seed") -> Player:
    """Create a player; every supplied field is attributed to `source`."""
    player = Player(
        name=data.name,
        slug=data.slug,
        ranking=data.ranking,
        country=data.country,
        image_url=_url(data.image_url),
    )
    player.field_sources = {
        name: source for name in PLAYER_SOURCE_FIELDS if getattr(player, name) is not None
    }
    session.add(player)
    session.flush()
    return player


def create_equipment(session: Session, data: EquipmentInput) -> Equipment:
    equipment = Equipment(
        name=data.name,
        slug=data.slug,
        brand=data.brand,
        type=data.type,
        image_url=_url(data.image_url),
        description=data.description,
        specs=data.specs,
    )
    session.add(equipment)
    session.flush()
    return equipment


def create_tournament(session: Session, data: TournamentInput) -> Tournament:
    tournament = Tournament(
        name=data.name,
        slug=data.slug,
        tier=data.tier,
        start_date=data.start_date,
        end_date=data.end_date,
        location=data.location,
    )
    session.add(tournament)
    session.flush()
    return tournament


def record_match_result(
    session: Session,
    player: Player,
    tournament: Tournament,
    placement: int,
    match_date: datetime,
    event_type: Optional[str] = None,
) -> MatchResult:
    """
    Store a result with its points computed from the tournament tier.

    The stored points are final; later policy changes do not touch them.

    Raises:
        ValueError: Invalid result input, e.g. placement below 1
    """
    data = MatchResultInput(
        player_id=player.id,
        tournament_id=tournament.id,
        placement=placement,
        match_date=match_date,
        event_type=event_type,
    )
    points = calculate_points(data.placement, tournament.tier)
    result = MatchResult(
        player=player,
        tournament=tournament,
        placement=data.placement,
        points=points,
        match_date=data.match_date,
        event_type=data.event_type,
    )
    session.add(result)
    session.flush()
    logger.debug(
        "Recorded %s placement %d at %s (%d pts)",
        player.slug, placement, tournament.slug, points,
    )
    return result


def soft_delete(session: Session, entity: Union[Player, Equipment, Tournament]) -> None:
    """Mark a player, equipment item or tournament deleted. Rows are kept."""
    if entity.deleted_at is None:
        entity.deleted_at = utcnow()
        session.flush()


# =============================================================================
# Multi-source player facts
# =============================================================================

def apply_player_records(
    session: Session,
    slug: str,
    records: Sequence[SourcedRecord[dict[str, Any]]],
) -> Optional[Player]:
    """
    Merge player facts from several sources into the canonical player.

    Each field is resolved independently (priority, then recency). The
    winning value is written only if its source may override the source
    recorded for that field; fields nobody supplied are left untouched.

    A soft-deleted player stays deleted and keeps their slug: the records
    are logged and skipped, and None is returned.

    Raises:
        ValueError: The player does not exist and no source supplied a name
    """
    merged = merge_records(records)
    sources = winning_sources(records)

    # Slugs stay unique across deleted rows too
    player = session.query(Player).filter(Player.slug == slug).first()
    if player is not None and player.deleted_at is not None:
        logger.warning("Player %s is deleted; skipping %d records", slug, len(records))
        return None
    if player is None:
        if "name" not in merged:
            raise ValueError(f"Cannot create player '{slug}' without a name")
        player = Player(name=merged["name"], slug=slug, field_sources={})
        session.add(player)

    field_sources = dict(player.field_sources or {})
    updated = []
    for field_name in PLAYER_SOURCE_FIELDS:
        if field_name not in merged:
            continue
        new_source = sources[field_name]
        existing_source = field_sources.get(field_name)
        if existing_source is not None and not should_override(new_source, existing_source):
            logger.debug(
                "Keeping %s.%s from %s over %s",
                slug, field_name, existing_source, new_source,
            )
            continue
        setattr(player, field_name, merged[field_name])
        field_sources[field_name] = new_source
        updated.append(field_name)

    # Reassign so the JSON column is seen as changed
    player.field_sources = field_sources
    session.flush()
    if updated:
        logger.info("Updated %s fields: %s", slug, ", ".join(updated))
    return player


# =============================================================================
# Equipment usage
# =============================================================================

def start_equipment_usage(
    session: Session,
    player: Player,
    equipment: Equipment,
    start_date: datetime,
    source: Optional[str] = None,
    verified: bool = False,
    close_previous: bool = True,
    end_date: Optional[datetime] = None,
) -> EquipmentUsage:
    """
    Record a usage of `equipment` for `player` from start_date, open
    unless end_date is given.

    With close_previous, the player's open usages of the same equipment
    type that started on or before start_date are ended at start_date.
    Open usages that started later are left alone; the new usage is
    instead ended where the earliest of them begins, so a backdated
    report never produces an interval that ends before it starts.

    Raises:
        ValueError: Invalid usage input (pydantic ValidationError)
    """
    data = EquipmentUsageInput(
        player_id=player.id,
        equipment_id=equipment.id,
        start_date=start_date,
        end_date=end_date,
        verified=verified,
        source=source,
    )
    end_date = data.end_date
    later_start = None

    if close_previous:
        open_usages = (
            session.query(EquipmentUsage)
            .join(EquipmentUsage.equipment)
            .filter(
                EquipmentUsage.player_id == player.id,
                EquipmentUsage.end_date.is_(None),
                Equipment.type == equipment.type,
            )
            .all()
        )
        for usage in open_usages:
            if usage.start_date <= data.start_date:
                usage.end_date = data.start_date
                logger.info("Closed %r at %s", usage, f"{data.start_date:%Y-%m-%d}")
            elif later_start is None or usage.start_date < later_start:
                later_start = usage.start_date

        if later_start is not None and (end_date is None or later_start < end_date):
            end_date = later_start
            logger.info(
                "Backdated %s usage for %s ends at %s",
                equipment.slug, player.slug, f"{end_date:%Y-%m-%d}",
            )

    usage = EquipmentUsage(
        player=player,
        equipment=equipment,
        start_date=data.start_date,
        end_date=end_date,
        verified=data.verified,
        source=data.source,
    )
    session.add(usage)
    session.flush()
    return usage


def find_equipment(
    session: Session,
    brand: str,
    model: str,
    equipment_type: EquipmentType,
) -> Optional[Equipment]:
    """Live equipment of a type matching brand + model by slug or normalized name."""
    brand_model = f"{brand} {model}"
    candidates = (
        session.query(Equipment)
        .filter(Equipment.type == equipment_type, Equipment.deleted_at.is_(None))
        .all()
    )
    wanted_slug = slugify(brand_model)
    wanted_name = normalize_name(brand_model)
    for equipment in candidates:
        if equipment.slug == wanted_slug:
            return equipment
    for equipment in candidates:
        if normalize_name(equipment.name) in (wanted_name, normalize_name(model)):
            return equipment
    return None


def ingest_equipment_sighting(
    session: Session,
    data: EquipmentUsageData,
    seen_at: datetime,
) -> list[EquipmentUsage]:
    """
    Turn a tracker's report of a player's gear into usage rows.

    A usage starts at data.verified_at when present (and is then marked
    verified), otherwise at seen_at. Gear the player already has an open
    usage for is left alone. Unknown players or equipment are logged and
    skipped.

    Returns:
        Newly opened usages
    """
    player = find_player(session, data.player_name)
    if player is None:
        logger.warning("[%s] No player matches '%s'; skipping", data.source, data.player_name)
        return []

    reported = [
        (EquipmentType.PADDLE, data.paddle_brand, data.paddle_model),
        (EquipmentType.SHOE, data.shoe_brand, data.shoe_model),
    ]
    start_date = data.verified_at or seen_at
    opened = []

    for equipment_type, brand, model in reported:
        if not brand or not model:
            continue
        equipment = find_equipment(session, brand, model, equipment_type)
        if equipment is None:
            logger.warning(
                "[%s] Unknown %s '%s %s' for %s; skipping",
                data.source, equipment_type.value.lower(), brand, model, player.slug,
            )
            continue

        already_open = (
            session.query(EquipmentUsage)
            .filter(
                EquipmentUsage.player_id == player.id,
                EquipmentUsage.equipment_id == equipment.id,
                EquipmentUsage.end_date.is_(None),
            )
            .first()
        )
        if already_open is not None:
            continue

        opened.append(
            start_equipment_usage(
                session,
                player,
                equipment,
                start_date,
                source=data.source,
                verified=data.verified_at is not None,
            )
        )

    return opened
