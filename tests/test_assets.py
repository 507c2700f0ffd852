"""
Tests for the asset filters and value matching used by every archetype.
"""

from trade_finder.generation.finder.assets import (
    build_value_match,
    by_value_desc,
    find_closest_value,
    get_targetable_assets,
    get_tradable_assets,
    is_core_locked,
    within_fairness_window,
)
from trade_finder.generation.finder.types import TradeObjective


class TestTradableAssets:
    """What the requesting team is willing to send"""

    def test_core_locked_starter_never_tradable(self, make_asset):
        star = make_asset("star", 9000, "WR", "Tier1_Cornerstone", starter=True)
        assert is_core_locked(star)
        out = get_tradable_assets([star], TradeObjective.BALANCED, ["WR"], [])
        assert out == []

    def test_cornerstone_bench_player_is_not_core_locked(self, make_asset):
        a = make_asset("bench_star", 6000, "WR", "Tier1_Cornerstone", starter=False)
        assert not is_core_locked(a)
        assert get_tradable_assets([a], TradeObjective.BALANCED, [], []) == [a]

    def test_value_floor(self, make_asset):
        cheap = make_asset("cheap", 499, "WR", "Tier5_Filler")
        assert get_tradable_assets([cheap], TradeObjective.BALANCED, ["WR"], []) == []

    def test_rebuild_keeps_first_round_picks(self, make_asset):
        first = make_asset("p1", 2000, pick_round=1, pick_year=2027)
        second = make_asset("p2", 1200, pick_round=2, pick_year=2027)
        out = get_tradable_assets([first, second], TradeObjective.REBUILD, [], [])
        assert [a.asset_id for a in out] == ["p2"]

    def test_win_now_may_send_first_round_picks(self, make_asset):
        first = make_asset("p1", 2000, pick_round=1, pick_year=2027)
        out = get_tradable_assets([first], TradeObjective.WIN_NOW, [], [])
        assert out == [first]

    def test_surplus_position_is_tradable(self, make_asset):
        a = make_asset("wr", 800, "WR", "Tier4_Depth", starter=False)
        assert get_tradable_assets([a], TradeObjective.BALANCED, ["WR"], []) == [a]
        assert get_tradable_assets([a], TradeObjective.BALANCED, [], []) == []

    def test_bench_floor_for_non_surplus(self, make_asset):
        ok = make_asset("ok", 1000, "RB", "Tier4_Depth")
        low = make_asset("low", 999, "RB", "Tier4_Depth")
        out = get_tradable_assets([ok, low], TradeObjective.BALANCED, [], [])
        assert out == [ok]

    def test_high_end_starter_outside_surplus_is_kept(self, make_asset):
        a = make_asset("te", 5000, "TE", "Tier2_HighEnd", starter=True)
        b = make_asset("rb", 3000, "RB", "Tier3_Starter", starter=True)
        out = get_tradable_assets([a, b], TradeObjective.BALANCED, [], [])
        assert out == [b]


class TestTargetableAssets:
    """What the requesting team would ask a partner for"""

    def test_value_floor(self, make_asset):
        a = make_asset("a", 999, "RB", "Tier2_HighEnd")
        assert get_targetable_assets([a], ["RB"]) == []

    def test_picks_needs_and_high_tiers_qualify(self, make_asset):
        pick = make_asset("pk", 1500, pick_round=2, pick_year=2027, tier="Tier4_Depth")
        need = make_asset("rb", 1500, "RB", "Tier4_Depth")
        high = make_asset("wr", 4000, "WR", "Tier2_HighEnd")
        other = make_asset("te", 3000, "TE", "Tier3_Starter")
        out = get_targetable_assets([pick, need, high, other], ["RB"])
        assert [a.asset_id for a in out] == ["pk", "rb", "wr"]


class TestValueMatching:
    def test_sort_is_stable_on_equal_values(self, make_asset):
        a = make_asset("a", 1000)
        b = make_asset("b", 2000)
        c = make_asset("c", 1000)
        assert [x.asset_id for x in by_value_desc([a, b, c])] == ["b", "a", "c"]

    def test_closest_value_tie_goes_to_first(self, make_asset):
        lo = make_asset("lo", 900)
        hi = make_asset("hi", 1100)
        assert find_closest_value([lo, hi], 1000) is lo
        assert find_closest_value([hi, lo], 1000) is hi

    def test_closest_value_empty(self):
        assert find_closest_value([], 1000) is None

    def test_fairness_window_boundary(self):
        assert within_fairness_window(1250, 1000)
        assert within_fairness_window(750, 1000)
        assert not within_fairness_window(1260, 1000)
        assert within_fairness_window(5000, 0)

    def test_single_match_wins_over_tighter_bundle(self, make_asset):
        """A single in-window asset is returned even though A+B would be exact."""
        a = make_asset("a", 780)
        b = make_asset("b", 220)
        assert build_value_match([a, b], 1000) == [a]

    def test_bundle_when_no_single_fits(self, make_asset):
        a = make_asset("a", 500)
        b = make_asset("b", 400)
        c = make_asset("c", 300)
        assert build_value_match([c, b, a], 1000) == [a, b]

    def test_bundle_outside_band_rejected(self, make_asset):
        assert build_value_match([make_asset("a", 100)], 1000) is None

    def test_bundle_respects_piece_cap(self, make_asset):
        pool = [make_asset(f"x{i}", 200) for i in range(5)]
        # three pieces max: 600 < 750
        assert build_value_match(pool, 1000) is None

    def test_non_positive_target(self, make_asset):
        assert build_value_match([make_asset("a", 100)], 0) is None
        assert build_value_match([], 1000) is None
