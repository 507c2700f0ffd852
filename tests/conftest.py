from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pytest

from trade_finder.models import (
    LeagueDecisionContext,
    LeagueMarketContext,
    PartnerFitScore,
    PricedAsset,
    TeamDecisionProfile,
)


def asset(
    asset_id: str,
    value: float,
    position: str = "WR",
    tier: str = "Tier3_Starter",
    *,
    starter: bool = False,
    age: Optional[float] = None,
    pick_round: Optional[int] = None,
    pick_year: Optional[int] = None,
    injured: bool = False,
    name: Optional[str] = None,
) -> PricedAsset:
    is_pick = pick_round is not None
    return PricedAsset(
        asset_id=asset_id,
        name=name or asset_id,
        value=float(value),
        position="PICK" if is_pick else position,
        tier=tier,
        is_starter=starter,
        age=age,
        is_pick=is_pick,
        pick_year=pick_year,
        pick_round=pick_round,
        injury_flag=injured,
    )


def team(
    team_id: str,
    *,
    needs: Iterable[str] = (),
    surpluses: Iterable[str] = (),
    window: str = "MIDDLE",
    quality: Optional[Dict[str, float]] = None,
    flags: Iterable[str] = (),
) -> TeamDecisionProfile:
    return TeamDecisionProfile(
        team_id=team_id,
        needs=tuple(needs),
        surpluses=tuple(surpluses),
        competitive_window=window,
        starter_quality_by_position=dict(quality or {}),
        flags=tuple(flags),
    )


def league(
    teams: List[TeamDecisionProfile],
    fits: Optional[Dict[str, float]] = None,
    *,
    scarcity: Optional[Dict[str, float]] = None,
    pick_inflation: float = 1.0,
) -> LeagueDecisionContext:
    return LeagueDecisionContext(
        teams={t.team_id: t for t in teams},
        market=LeagueMarketContext(
            scarcity_by_position=dict(scarcity or {}),
            pick_inflation_index=pick_inflation,
        ),
        partner_fit={tid: PartnerFitScore(team_id=tid, fit_score=f) for tid, f in (fits or {}).items()},
    )


@pytest.fixture
def make_asset():
    return asset


@pytest.fixture
def make_team():
    return team


@pytest.fixture
def make_league():
    return league


@pytest.fixture
def swap_scenario():
    """BALANCED, user RB-needy with WR depth; partner the mirror image."""
    ctx = league(
        [
            team("U", needs=["RB"], surpluses=["WR"]),
            team("P", needs=["WR"], surpluses=["RB"]),
        ],
        {"P": 60.0},
    )
    priced = {
        "U": [asset("u_wr", 3000, "WR", "Tier3_Starter", starter=True)],
        "P": [asset("p_rb", 2900, "RB", "Tier3_Starter", starter=True)],
    }
    return ctx, priced


@pytest.fixture
def busy_league():
    """Several partners and windows, enough to exercise every archetype."""
    ctx = league(
        [
            team("U", needs=["RB", "TE"], surpluses=["WR"], window="WIN_NOW", quality={"RB": 40, "TE": 70}),
            team("A", needs=["WR"], surpluses=["RB"], window="REBUILD"),
            team("B", needs=["QB"], surpluses=["TE"], window="MIDDLE", flags=["ACTIVE_TRADER"]),
            team("C", needs=["WR", "QB"], surpluses=["RB", "TE"], window="WIN_NOW"),
        ],
        {"A": 80.0, "B": 65.0, "C": 45.0, "U": 99.0},
        scarcity={"RB": 1.5, "TE": 1.2},
        pick_inflation=1.3,
    )
    priced = {
        "U": [
            asset("u_qb", 9500, "QB", "Tier1_Cornerstone", starter=True, age=26),
            asset("u_wr1", 4200, "WR", "Tier3_Starter", starter=True, age=27),
            asset("u_wr2", 3100, "WR", "Tier3_Starter", age=23),
            asset("u_wr3", 2600, "WR", "Tier4_Depth", age=22),
            asset("u_rb", 1500, "RB", "Tier4_Depth", age=24),
            asset("u_pk1", 4800, pick_round=1, pick_year=2027, tier="Tier3_Starter"),
            asset("u_pk2", 1900, pick_round=2, pick_year=2027, tier="Tier4_Depth"),
        ],
        "A": [
            asset("a_rb1", 5200, "RB", "Tier2_HighEnd", starter=True, age=28),
            asset("a_rb2", 3000, "RB", "Tier3_Starter", age=27),
            asset("a_te", 4100, "TE", "Tier3_Starter", starter=True, age=29, injured=True),
            asset("a_pk1", 4500, pick_round=1, pick_year=2027, tier="Tier3_Starter"),
        ],
        "B": [
            asset("b_te1", 6200, "TE", "Tier2_HighEnd", starter=True, age=25),
            asset("b_te2", 2400, "TE", "Tier4_Depth", age=23),
            asset("b_rb", 4400, "RB", "Tier2_HighEnd", age=26, injured=True),
        ],
        "C": [
            asset("c_rb", 3300, "RB", "Tier3_Starter", starter=True, age=25),
            asset("c_te", 2200, "TE", "Tier4_Depth", age=30),
        ],
    }
    return ctx, priced
