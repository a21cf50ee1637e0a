"""
Player lookup for incoming source data.

Equipment trackers identify players by name only. The lookup order is:
1. Exact slug of the normalized name - reliable
2. Best fuzzy match above settings.player_match_threshold

Anything below the threshold is reported as not found; the caller logs
and skips it rather than guessing.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from paddlerank.config import settings
from paddlerank.db.models import Player
from paddlerank.players.names import compare_names, normalize_name, slugify

logger = logging.getLogger(__name__)


def find_player(
    session: Session,
    name: str,
    threshold: Optional[float] = None,
) -> Optional[Player]:
    """Find a live player by name; None when no confident match exists."""
    if threshold is None:
        threshold = settings.player_match_threshold

    slug = slugify(normalize_name(name))
    if not slug:
        return None

    player = (
        session.query(Player)
        .filter(Player.slug == slug, Player.deleted_at.is_(None))
        .first()
    )
    if player is not None:
        return player

    best: Optional[Player] = None
    best_score = 0.0
    for candidate in session.query(Player).filter(Player.deleted_at.is_(None)):
        score = compare_names(name, candidate.name)
        if score > best_score:
            best, best_score = candidate, score

    if best is not None and best_score >= threshold:
        logger.debug("Fuzzy matched '%s' to %r (%.2f)", name, best, best_score)
        return best
    return None
