from __future__ import annotations

"""trade_finder.allowed_assets

Red-line-aware allow-lists for one (user, partner) pair.

The lists bound what a downstream negotiation step may put into counters and
sweeteners: which user players/picks can be offered, which partner
players/picks can be requested, and which user asset ids are red lines.

Core assets (never offered, never requested):
  - players at Tier0/Tier1
  - the team's top-N players by value
  - future firsts: all of them when the team owns at most one, otherwise the
    ones inside the next two seasons

`current_year` is an explicit argument; nothing here reads the clock.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set

from .generation.finder.config import coerce_objective
from .generation.finder.types import TradeObjective
from .models import PricedAsset, TeamDecisionProfile

MAX_ALLOWED_PLAYERS = 18
MAX_ALLOWED_PICKS = 10

# age at which a position is considered on the back nine
_OLDER_AT: Dict[str, float] = {"RB": 28, "WR": 29, "TE": 30, "QB": 31}


@dataclass(frozen=True, slots=True)
class AllowedAsset:
    asset_id: str
    label: str
    kind: str  # PLAYER | PICK


@dataclass(frozen=True, slots=True)
class AllowedAssetsResult:
    user_assets_allowed: tuple
    partner_assets_allowed: tuple
    user_picks_allowed: tuple
    partner_picks_allowed: tuple
    red_line_ids: tuple


# =============================================================================
# Tier helpers
# =============================================================================


def _norm_tier(tier: Optional[str]) -> str:
    t = str(tier or "")
    if not t or t.startswith("Tier5"):
        return "Depth"
    if t.startswith("Tier0") or t == "Elite":
        return "Elite"
    for n in ("1", "2", "3", "4"):
        if t.startswith(f"Tier{n}"):
            return f"Tier{n}"
    return t


def _is_older_for_position(a: PricedAsset) -> bool:
    if not a.age or not a.position:
        return False
    limit = _OLDER_AT.get(a.position)
    return limit is not None and float(a.age) >= limit


def _pick_sort_key(a: PricedAsset):
    # newest season first, then later rounds first
    return (-(a.pick_year or 0), -(a.pick_round or 9))


# =============================================================================
# Core / red lines
# =============================================================================


def compute_core_asset_ids(assets: Sequence[PricedAsset], current_year: int, top_n: int = 2) -> List[str]:
    core: List[str] = []

    def _add(asset_id: str) -> None:
        if asset_id not in core:
            core.append(asset_id)

    players = [a for a in assets if not a.is_pick]
    picks = [a for a in assets if a.is_pick]

    for p in players:
        if _norm_tier(p.tier) in ("Elite", "Tier1"):
            _add(p.asset_id)
    for p in sorted(players, key=lambda a: -float(a.value))[: max(0, int(top_n))]:
        _add(p.asset_id)

    future_firsts = [p for p in picks if p.pick_round == 1 and (p.pick_year or 0) >= current_year]
    if len(future_firsts) <= 1:
        for p in future_firsts:
            _add(p.asset_id)
    else:
        for p in future_firsts:
            season = p.pick_year if p.pick_year is not None else current_year
            if season <= current_year + 2:
                _add(p.asset_id)
    return core


# =============================================================================
# Send / request rules
# =============================================================================


def _user_send_allowed(a: PricedAsset, user: TeamDecisionProfile, objective: TradeObjective) -> bool:
    tier = _norm_tier(a.tier)
    surplus_pos = a.position in user.surpluses
    need_pos = a.position in user.needs

    tier2_plus = tier in ("Tier2", "Tier1", "Elite")
    tier3_plus = tier == "Tier3" or tier2_plus
    lower = tier in ("Tier4", "Depth")

    # never open a hole at a need
    if need_pos and not surplus_pos and (a.is_starter or tier3_plus):
        return False

    if lower or tier == "Tier3":
        return True
    if tier != "Tier2":
        return False
    if objective == TradeObjective.WIN_NOW:
        return surplus_pos or _is_older_for_position(a)
    if objective == TradeObjective.REBUILD:
        return _is_older_for_position(a) or a.position == "RB"
    return surplus_pos


def _user_pick_send_allowed(a: PricedAsset, objective: TradeObjective, allow_future_firsts: bool) -> bool:
    rnd = a.pick_round
    if not rnd:
        return False
    if rnd == 1:
        return allow_future_firsts and objective != TradeObjective.WIN_NOW
    return 2 <= rnd <= 4


def _partner_request_allowed(a: PricedAsset, user: TeamDecisionProfile, partner: TeamDecisionProfile) -> bool:
    tier = _norm_tier(a.tier)
    user_need = a.position in user.needs
    partner_surplus = a.position in partner.surpluses
    partner_need = a.position in partner.needs

    if partner_need and (a.is_starter or tier != "Depth"):
        return False
    if partner_surplus and user_need:
        return True
    if partner_surplus and tier in ("Tier2", "Tier3", "Tier4"):
        return True
    return user_need and tier in ("Tier3", "Tier4", "Depth")


def _partner_pick_request_allowed(a: PricedAsset, partner: TeamDecisionProfile) -> bool:
    rnd = a.pick_round
    if not rnd:
        return False
    if partner.competitive_window == "WIN_NOW":
        return 2 <= rnd <= 4
    return 3 <= rnd <= 4


def _allowed(assets: Iterable[PricedAsset]) -> tuple:
    return tuple(AllowedAsset(a.asset_id, a.name, "PICK" if a.is_pick else "PLAYER") for a in assets)


# =============================================================================
# Public
# =============================================================================


def build_allowed_assets(
    objective: Any,
    user_team: TeamDecisionProfile,
    partner_team: TeamDecisionProfile,
    user_assets: Sequence[PricedAsset],
    partner_assets: Sequence[PricedAsset],
    *,
    current_year: int,
    allow_future_firsts: bool = False,
    core_top_n: int = 2,
) -> AllowedAssetsResult:
    obj = coerce_objective(objective)
    user_core_ids = compute_core_asset_ids(user_assets, current_year, core_top_n)
    user_core: Set[str] = set(user_core_ids)
    partner_core = set(compute_core_asset_ids(partner_assets, current_year, core_top_n))

    user_players = sorted(
        (a for a in user_assets if not a.is_pick and a.asset_id not in user_core and _user_send_allowed(a, user_team, obj)),
        key=lambda a: -float(a.value),
    )
    user_picks = sorted(
        (
            a
            for a in user_assets
            if a.is_pick and a.asset_id not in user_core and _user_pick_send_allowed(a, obj, allow_future_firsts)
        ),
        key=_pick_sort_key,
    )
    partner_players = sorted(
        (
            a
            for a in partner_assets
            if not a.is_pick and a.asset_id not in partner_core and _partner_request_allowed(a, user_team, partner_team)
        ),
        key=lambda a: -float(a.value),
    )
    partner_picks = sorted(
        (
            a
            for a in partner_assets
            if a.is_pick and a.asset_id not in partner_core and _partner_pick_request_allowed(a, partner_team)
        ),
        key=_pick_sort_key,
    )

    return AllowedAssetsResult(
        user_assets_allowed=_allowed(user_players[:MAX_ALLOWED_PLAYERS]),
        partner_assets_allowed=_allowed(partner_players[:MAX_ALLOWED_PLAYERS]),
        user_picks_allowed=_allowed(user_picks[:MAX_ALLOWED_PICKS]),
        partner_picks_allowed=_allowed(partner_picks[:MAX_ALLOWED_PICKS]),
        red_line_ids=tuple(user_core_ids),
    )


def serialize_allowed_assets(res: AllowedAssetsResult) -> Dict[str, Any]:
    def _players(items) -> List[Dict[str, Any]]:
        return [{"id": a.asset_id, "label": a.label, "kind": a.kind} for a in items]

    def _picks(items) -> List[Dict[str, Any]]:
        return [{"id": a.asset_id, "label": a.label} for a in items]

    return {
        "userAssetsAllowed": _players(res.user_assets_allowed),
        "partnerAssetsAllowed": _players(res.partner_assets_allowed),
        "userPicksAllowed": _picks(res.user_picks_allowed),
        "partnerPicksAllowed": _picks(res.partner_picks_allowed),
        "redLineIds": list(res.red_line_ids),
    }
