"""
Unit tests for the points policy.

Checks the placement table, tier multipliers, truncation, and that
out-of-range placements earn nothing instead of failing.
"""

import pytest

from paddlerank.db.models import TournamentTier
from paddlerank.scoring import base_points, calculate_points, get_placement_label


class TestCalculatePoints:
    """Tests for calculate_points()."""

    def test_documented_examples(self):
        assert calculate_points(1, TournamentTier.MAJOR) == 200
        assert calculate_points(3, TournamentTier.MLP) == 75
        assert calculate_points(9, TournamentTier.APP) == 10
        assert calculate_points(17, TournamentTier.OTHER) == 0

    def test_accepts_tier_names(self):
        assert calculate_points(1, "MAJOR") == 200
        assert calculate_points(2, "PPA") == calculate_points(2, TournamentTier.PPA)

    def test_fractional_points_are_truncated(self):
        # 75 * 1.5 = 112.5, 25 * 0.5 = 12.5
        assert calculate_points(2, TournamentTier.PPA) == 112
        assert calculate_points(5, TournamentTier.OTHER) == 12
        # 10 * 0.5 = 5 exactly
        assert calculate_points(12, TournamentTier.OTHER) == 5

    @pytest.mark.parametrize("placement", [9, 12, 16])
    def test_round_of_sixteen_flat_base(self, placement):
        assert base_points(placement) == 10
        assert calculate_points(placement, TournamentTier.MAJOR) == 20

    @pytest.mark.parametrize("placement", [17, 32, 10_000, 0, -3])
    def test_out_of_range_placements_score_zero(self, placement):
        for tier in TournamentTier:
            assert calculate_points(placement, tier) == 0

    def test_semifinal_and_quarterfinal_losers_tie(self):
        assert base_points(3) == base_points(4) == 50
        assert {base_points(p) for p in range(5, 9)} == {25}

    @pytest.mark.parametrize("tier", ["GRAND_SLAM", "super", ""])
    def test_unknown_tier_scores_zero(self, tier):
        assert calculate_points(1, tier) == 0

    def test_tier_name_accepted(self):
        assert calculate_points(1, "MAJOR") == 200

    def test_deterministic(self):
        results = {calculate_points(4, TournamentTier.PPA) for _ in range(5)}
        assert results == {75}


class TestPlacementLabel:
    """Tests for get_placement_label()."""

    def test_podium(self):
        assert get_placement_label(1) == "1st"
        assert get_placement_label(2) == "2nd"
        assert get_placement_label(3) == "3rd"

    def test_everything_else_is_th(self):
        assert get_placement_label(4) == "4th"
        assert get_placement_label(11) == "11th"
        assert get_placement_label(21) == "21th"
        assert get_placement_label(22) == "22th"
