"""
Scoring policy for tournament results.

Usage:
    from paddlerank.scoring import calculate_points

    points = calculate_points(placement=2, tier=TournamentTier.PPA)  # 112
"""

from paddlerank.scoring.constants import BASE_POINTS, TIER_MULTIPLIERS
from paddlerank.scoring.points import base_points, calculate_points, get_placement_label

__all__ = [
    "BASE_POINTS",
    "TIER_MULTIPLIERS",
    "base_points",
    "calculate_points",
    "get_placement_label",
]
