"""
Tournament points calculation.

calculate_points() is called exactly once per MatchResult, by the
ingestion service, and the value is stored on the row. Nothing that
reads results should call it again: stored points are history.
"""

import logging
import math
from typing import Optional, Union

from paddlerank.db.models import TournamentTier
from paddlerank.scoring.constants import (
    BASE_POINTS,
    LAST_SCORING_PLACEMENT,
    ROUND_OF_16_BASE_POINTS,
    TIER_MULTIPLIERS,
)

logger = logging.getLogger(__name__)


def base_points(placement: int) -> int:
    """Base points for a placement, before the tier multiplier."""
    if placement in BASE_POINTS:
        return BASE_POINTS[placement]
    if 0 < placement <= LAST_SCORING_PLACEMENT:
        return ROUND_OF_16_BASE_POINTS
    return 0


def _coerce_tier(tier: Union[TournamentTier, str]) -> Optional[TournamentTier]:
    try:
        return TournamentTier(tier)
    except ValueError:
        logger.warning("Unknown tournament tier %r scores 0", tier)
        return None


def calculate_points(placement: int, tier: Union[TournamentTier, str]) -> int:
    """
    Points earned for finishing at `placement` in a tournament of `tier`.

    Never raises: placements outside 1..16 and tier names outside
    TournamentTier earn 0.

    Args:
        placement: Final placement (1 = winner)
        tier: Tournament tier (enum or its name, e.g. "MAJOR")

    Returns:
        Non-negative integer points (fractional part truncated)

    Examples:
        >>> calculate_points(1, TournamentTier.MAJOR)
        200
        >>> calculate_points(3, "MLP")
        75
    """
    multiplier = TIER_MULTIPLIERS.get(_coerce_tier(tier), 0.0)
    return math.floor(base_points(placement) * multiplier)


def get_placement_label(placement: int) -> str:
    """
    Ordinal label for display: 1st, 2nd, 3rd, then Nth.

    Only 1, 2 and 3 get special suffixes, so 21 renders as "21th" and
    22 as "22th". Existing pages rely on these labels as-is.
    """
    if placement == 1:
        return "1st"
    if placement == 2:
        return "2nd"
    if placement == 3:
        return "3rd"
    return f"{placement}th"
