"""
Tests for input parsing and shared helpers.
"""

import pytest

from trade_finder.errors import INVALID_INPUT, TradeFinderError
from trade_finder.models import (
    parse_league_decision_context,
    parse_priced_asset,
    parse_priced_assets,
    round_half_up,
    serialize_asset,
    tier_value,
)


def test_tier_weights():
    assert tier_value("Tier0_Untouchable") == 6
    assert tier_value("Tier5_Filler") == 1
    assert tier_value("Mystery") == 1
    assert tier_value(None) == 1


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(-3.33) == -3
    assert round_half_up(0.49) == 0


class TestPricedAsset:
    def test_camel_case(self):
        a = parse_priced_asset(
            {"assetId": "p1", "name": "Player", "value": "3100", "position": "wr", "tier": "Tier3_Starter", "isStarter": True, "age": 24}
        )
        assert a.asset_id == "p1"
        assert a.value == 3100.0
        assert a.position == "WR"
        assert a.is_starter
        assert a.age == 24.0

    def test_snake_case_pick(self):
        a = parse_priced_asset({"asset_id": "pk", "value": 2000, "is_pick": True, "pick_year": 2027, "pick_round": 1})
        assert a.is_pick
        assert a.position == "PICK"
        assert a.pick_round == 1
        assert a.tier == "Tier5_Filler"

    @pytest.mark.parametrize(
        "raw",
        [
            {"value": 100},
            {"assetId": "x", "value": "lots"},
            {"assetId": "x", "value": float("nan")},
            "not a mapping",
        ],
    )
    def test_malformed(self, raw):
        with pytest.raises(TradeFinderError) as exc:
            parse_priced_asset(raw)
        assert exc.value.code == INVALID_INPUT

    def test_team_lists_required(self):
        with pytest.raises(TradeFinderError):
            parse_priced_assets({"1": "nope"})

    def test_serialize_omits_empty_optionals(self):
        a = parse_priced_asset({"assetId": "p1", "name": "P", "value": 3000, "position": "WR", "tier": "Tier3_Starter"})
        assert serialize_asset(a) == {
            "assetId": "p1",
            "name": "P",
            "value": 3000,
            "position": "WR",
            "tier": "Tier3_Starter",
            "isStarter": False,
        }


class TestLeagueContext:
    def test_parse(self):
        ctx = parse_league_decision_context(
            {
                "teams": {
                    "1": {"needs": ["rb"], "surpluses": ["wr"], "competitiveWindow": "win_now"},
                    "2": {"teamId": "2", "starterQualityByPosition": {"qb": 80}},
                },
                "market": {"scarcityByPosition": {"rb": 1.4}, "pickInflationIndex": 1.25},
                "partnerFit": {"2": {"fitScore": 55, "reasons": ["needs WR"]}},
            }
        )
        assert list(ctx.teams) == ["1", "2"]
        assert ctx.teams["1"].needs == ("RB",)
        assert ctx.teams["1"].competitive_window == "WIN_NOW"
        assert ctx.teams["2"].starter_quality("QB") == 80.0
        assert ctx.teams["2"].starter_quality("RB") == 0.0
        assert ctx.market.scarcity("RB") == 1.4
        assert ctx.market.scarcity("TE") == 1.0
        assert ctx.market.pick_inflation_index == 1.25
        assert ctx.partner_fit["2"].fit_score == 55.0

    def test_missing_market_defaults(self):
        ctx = parse_league_decision_context({"teams": {}})
        assert ctx.market.pick_inflation_index == 1.0
        assert ctx.partner_fit == {}

    def test_needs_must_be_a_list(self):
        with pytest.raises(TradeFinderError):
            parse_league_decision_context({"teams": {"1": {"needs": "RB"}}})
