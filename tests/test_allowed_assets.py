"""
Tests for red-line-aware allow-lists.
"""

from dataclasses import replace

import pytest

from trade_finder.allowed_assets import (
    MAX_ALLOWED_PLAYERS,
    build_allowed_assets,
    compute_core_asset_ids,
    serialize_allowed_assets,
)
from trade_finder.errors import INVALID_OBJECTIVE, TradeFinderError

YEAR = 2026


@pytest.fixture
def rosters(make_asset, make_team):
    user = make_team("U", needs=["RB"], surpluses=["WR"])
    partner = make_team("P", needs=["TE"], surpluses=["RB"], window="WIN_NOW")
    user_assets = [
        make_asset("star", 9000, "QB", "Tier1_Cornerstone", starter=True),
        make_asset("wr1", 6000, "WR", "Tier2_HighEnd", starter=True),
        make_asset("wr3", 4000, "WR", "Tier2_HighEnd"),
        make_asset("wr2", 3000, "WR", "Tier3_Starter"),
        make_asset("rb", 2500, "RB", "Tier3_Starter", starter=True),
        make_asset("te", 1500, "TE", "Tier4_Depth"),
        make_asset("k", 700, "K", "Tier5_Filler"),
        make_asset("f26", 4000, pick_round=1, pick_year=2026),
        make_asset("f27", 3500, pick_round=1, pick_year=2027),
        make_asset("f29", 3000, pick_round=1, pick_year=2029),
        make_asset("s26", 1500, pick_round=2, pick_year=2026),
    ]
    partner_assets = [
        make_asset("p_qb", 9500, "QB", "Tier1_Cornerstone", starter=True),
        make_asset("p_rb1", 7000, "RB", "Tier2_HighEnd", starter=True),
        make_asset("p_rb2", 3000, "RB", "Tier3_Starter"),
        make_asset("p_te", 2500, "TE", "Tier3_Starter"),
        make_asset("p_wr", 2000, "WR", "Tier4_Depth"),
        make_asset("p1", 3500, pick_round=1, pick_year=2027),
        make_asset("p2", 1200, pick_round=2, pick_year=2026),
    ]
    return user, partner, user_assets, partner_assets


def _ids(items):
    return [a.asset_id for a in items]


def test_red_lines(rosters):
    _, _, user_assets, _ = rosters
    assert compute_core_asset_ids(user_assets, YEAR) == ["star", "wr1", "f26", "f27"]


def test_single_future_first_is_core(make_asset):
    assets = [make_asset("f30", 2000, pick_round=1, pick_year=2030)]
    assert compute_core_asset_ids(assets, YEAR) == ["f30"]


def test_past_firsts_are_ignored(make_asset):
    assets = [make_asset("old", 2000, pick_round=1, pick_year=2025)]
    assert compute_core_asset_ids(assets, YEAR) == []


def test_balanced_allow_lists(rosters):
    user, partner, user_assets, partner_assets = rosters
    res = build_allowed_assets("BALANCED", user, partner, user_assets, partner_assets, current_year=YEAR)

    assert _ids(res.user_assets_allowed) == ["wr3", "wr2", "te", "k"]
    assert _ids(res.user_picks_allowed) == ["s26"]
    assert _ids(res.partner_assets_allowed) == ["p_rb2"]
    assert _ids(res.partner_picks_allowed) == ["p2"]
    assert res.red_line_ids == ("star", "wr1", "f26", "f27")


def test_future_firsts_opt_in(rosters):
    user, partner, user_assets, partner_assets = rosters
    res = build_allowed_assets(
        "BALANCED", user, partner, user_assets, partner_assets, current_year=YEAR, allow_future_firsts=True
    )
    assert _ids(res.user_picks_allowed) == ["f29", "s26"]

    win_now = build_allowed_assets(
        "WIN_NOW", user, partner, user_assets, partner_assets, current_year=YEAR, allow_future_firsts=True
    )
    assert _ids(win_now.user_picks_allowed) == ["s26"]


def test_rebuilding_partner_keeps_second_rounders(rosters):
    user, partner, user_assets, partner_assets = rosters
    rebuilding = replace(partner, competitive_window="REBUILD")
    res = build_allowed_assets("BALANCED", user, rebuilding, user_assets, partner_assets, current_year=YEAR)
    assert _ids(res.partner_picks_allowed) == []


def test_player_cap(make_asset, make_team):
    user = make_team("U")
    assets = [make_asset(f"d{i}", 2000 - i, "WR", "Tier4_Depth") for i in range(25)]
    res = build_allowed_assets("BALANCED", user, make_team("P"), assets, [], current_year=YEAR)
    assert len(res.user_assets_allowed) == MAX_ALLOWED_PLAYERS


def test_invalid_objective(rosters):
    user, partner, user_assets, partner_assets = rosters
    with pytest.raises(TradeFinderError) as exc:
        build_allowed_assets("SELL", user, partner, user_assets, partner_assets, current_year=YEAR)
    assert exc.value.code == INVALID_OBJECTIVE


def test_serialized_keys(rosters):
    user, partner, user_assets, partner_assets = rosters
    payload = serialize_allowed_assets(
        build_allowed_assets("BALANCED", user, partner, user_assets, partner_assets, current_year=YEAR)
    )
    assert set(payload) == {
        "userAssetsAllowed",
        "partnerAssetsAllowed",
        "userPicksAllowed",
        "partnerPicksAllowed",
        "redLineIds",
    }
    assert payload["userAssetsAllowed"][0] == {"id": "wr3", "label": "wr3", "kind": "PLAYER"}
    assert payload["userPicksAllowed"] == [{"id": "s26", "label": "s26"}]
