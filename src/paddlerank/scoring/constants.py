"""
Points policy constants.

A result's points are base points for the placement multiplied by the
tournament tier multiplier, truncated to an integer.

Placements 1-8 have their own base values; 9-16 share a flat base; beyond
16 earns nothing. Semifinal losers (3rd and 4th) are worth the same, as
are the quarterfinal losers (5th-8th).
"""

from paddlerank.db.models import TournamentTier

BASE_POINTS: dict[int, int] = {
    1: 100,
    2: 75,
    3: 50,
    4: 50,
    5: 25,
    6: 25,
    7: 25,
    8: 25,
}

# Base for placements 9..16
ROUND_OF_16_BASE_POINTS = 10
LAST_SCORING_PLACEMENT = 16

TIER_MULTIPLIERS: dict[TournamentTier, float] = {
    TournamentTier.MAJOR: 2.0,
    TournamentTier.PPA: 1.5,
    TournamentTier.MLP: 1.5,
    TournamentTier.APP: 1.0,
    TournamentTier.OTHER: 0.5,
}
