from __future__ import annotations

"""trade_finder.models

Input snapshots consumed by the finder and matchmaking engines.

Everything here is an immutable, request-scoped snapshot:
  - PricedAsset           : one tradable asset priced by the valuation feed
  - TeamDecisionProfile   : per-team needs/surpluses/window
  - LeagueMarketContext   : league-wide scarcity and pick inflation
  - PartnerFitScore       : precomputed compatibility with the requesting team
  - LeagueDecisionContext : the bundle of the above

Parsers accept the camelCase records produced by upstream collaborators
(snake_case keys are accepted too) and raise TradeFinderError on malformed
input. Serializers emit camelCase records for the presentation layer.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple

from .errors import INVALID_INPUT, TradeFinderError

# ---------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------
CompetitiveWindow = Literal["WIN_NOW", "REBUILD", "MIDDLE"]

SKILL_POSITIONS: Tuple[str, ...] = ("QB", "RB", "WR", "TE")


class Tier(str, Enum):
    UNTOUCHABLE = "Tier0_Untouchable"
    CORNERSTONE = "Tier1_Cornerstone"
    HIGH_END = "Tier2_HighEnd"
    STARTER = "Tier3_Starter"
    DEPTH = "Tier4_Depth"
    FILLER = "Tier5_Filler"


# Higher weight = better asset. Unknown tier strings weigh as filler.
TIER_WEIGHTS: Dict[str, int] = {
    Tier.UNTOUCHABLE.value: 6,
    Tier.CORNERSTONE.value: 5,
    Tier.HIGH_END.value: 4,
    Tier.STARTER.value: 3,
    Tier.DEPTH.value: 2,
    Tier.FILLER.value: 1,
}


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------
def tier_value(tier: Any) -> int:
    if isinstance(tier, Tier):
        tier = tier.value
    return TIER_WEIGHTS.get(str(tier or ""), 1)


def clamp(x: float, lo: float, hi: float) -> float:
    xf = float(x)
    return float(lo) if xf < lo else float(hi) if xf > hi else xf


def round_half_up(x: float) -> int:
    """Round half toward +inf (stable across platforms, unlike banker's rounding)."""
    return int(math.floor(float(x) + 0.5))


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in raw and raw[k] is not None:
            return raw[k]
    return default


def _to_float(raw: Any, *, what: str, fallback: Optional[float] = None) -> float:
    try:
        out = float(raw)
    except (TypeError, ValueError):
        if fallback is not None:
            return float(fallback)
        raise TradeFinderError(INVALID_INPUT, f"{what} must be numeric", {"value": raw})
    if math.isnan(out) or math.isinf(out):
        if fallback is not None:
            return float(fallback)
        raise TradeFinderError(INVALID_INPUT, f"{what} must be finite", {"value": raw})
    return out


def _opt_float(raw: Any, *, what: str) -> Optional[float]:
    if raw is None:
        return None
    return _to_float(raw, what=what)


def _opt_int(raw: Any, *, what: str) -> Optional[int]:
    if raw is None:
        return None
    return int(_to_float(raw, what=what))


def _str_list(raw: Any) -> Tuple[str, ...]:
    if raw is None:
        return tuple()
    if isinstance(raw, (str, bytes)) or not isinstance(raw, Sequence):
        raise TradeFinderError(INVALID_INPUT, "expected a list of strings", {"value": raw})
    return tuple(str(x).upper() for x in raw)


def _require_mapping(raw: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise TradeFinderError(INVALID_INPUT, f"{what} must be an object", {"type": type(raw).__name__})
    return raw


# ---------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class PricedAsset:
    asset_id: str
    name: str
    value: float
    position: str
    tier: str
    is_starter: bool = False
    age: Optional[float] = None
    is_pick: bool = False
    pick_year: Optional[int] = None
    pick_round: Optional[int] = None
    injury_flag: bool = False

    @property
    def tier_weight(self) -> int:
        return tier_value(self.tier)

    def age_or(self, default: float = 25.0) -> float:
        return float(self.age) if self.age is not None else float(default)


@dataclass(frozen=True, slots=True)
class TeamDecisionProfile:
    team_id: str
    needs: Tuple[str, ...] = tuple()
    surpluses: Tuple[str, ...] = tuple()
    competitive_window: str = "MIDDLE"
    starter_quality_by_position: Mapping[str, float] = field(default_factory=dict)
    flags: Tuple[str, ...] = tuple()

    def starter_quality(self, position: str) -> float:
        return float(self.starter_quality_by_position.get(str(position).upper(), 0.0) or 0.0)


@dataclass(frozen=True, slots=True)
class LeagueMarketContext:
    scarcity_by_position: Mapping[str, float] = field(default_factory=dict)
    pick_inflation_index: float = 1.0
    contender_team_ids: Tuple[str, ...] = tuple()
    rebuilding_team_ids: Tuple[str, ...] = tuple()

    def scarcity(self, position: str) -> float:
        return float(self.scarcity_by_position.get(str(position).upper(), 1.0))


@dataclass(frozen=True, slots=True)
class PartnerFitScore:
    team_id: str
    fit_score: float
    reasons: Tuple[str, ...] = tuple()


@dataclass(frozen=True, slots=True)
class LeagueDecisionContext:
    # dict order is significant: it drives fallback scan order and tie-breaks.
    teams: Mapping[str, TeamDecisionProfile]
    market: LeagueMarketContext = field(default_factory=LeagueMarketContext)
    partner_fit: Mapping[str, PartnerFitScore] = field(default_factory=dict)


PricedAssetsByTeam = Mapping[str, Sequence[PricedAsset]]


# ---------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------
def parse_priced_asset(raw: Any) -> PricedAsset:
    r = _require_mapping(raw, "priced asset")
    asset_id = _pick(r, "assetId", "asset_id", "id")
    if asset_id is None or str(asset_id).strip() == "":
        raise TradeFinderError(INVALID_INPUT, "priced asset is missing assetId", {"asset": dict(r)})
    is_pick = bool(_pick(r, "isPick", "is_pick", default=False))
    return PricedAsset(
        asset_id=str(asset_id),
        name=str(_pick(r, "name", "label", default=asset_id)),
        value=_to_float(_pick(r, "value", default=0), what="asset value"),
        position=str(_pick(r, "position", default="PICK" if is_pick else "")).upper(),
        tier=str(_pick(r, "tier", default=Tier.FILLER.value)),
        is_starter=bool(_pick(r, "isStarter", "is_starter", default=False)),
        age=_opt_float(_pick(r, "age"), what="asset age"),
        is_pick=is_pick,
        pick_year=_opt_int(_pick(r, "pickYear", "pick_year"), what="pickYear"),
        pick_round=_opt_int(_pick(r, "pickRound", "pick_round"), what="pickRound"),
        injury_flag=bool(_pick(r, "injuryFlag", "injury_flag", default=False)),
    )


def parse_priced_assets(raw: Any) -> Dict[str, List[PricedAsset]]:
    r = _require_mapping(raw, "pricedAssets")
    out: Dict[str, List[PricedAsset]] = {}
    for team_id, assets in r.items():
        if not isinstance(assets, Sequence) or isinstance(assets, (str, bytes)):
            raise TradeFinderError(INVALID_INPUT, "pricedAssets values must be lists", {"team_id": team_id})
        out[str(team_id)] = [parse_priced_asset(a) for a in assets]
    return out


def parse_team_profile(team_id: str, raw: Any) -> TeamDecisionProfile:
    r = _require_mapping(raw, "team profile")
    quality_raw = _pick(r, "starterQualityByPosition", "starter_quality_by_position", default={})
    quality = {
        str(pos).upper(): _to_float(v, what="starter quality", fallback=0.0)
        for pos, v in _require_mapping(quality_raw, "starterQualityByPosition").items()
    }
    return TeamDecisionProfile(
        team_id=str(_pick(r, "teamId", "team_id", default=team_id)),
        needs=_str_list(_pick(r, "needs")),
        surpluses=_str_list(_pick(r, "surpluses", "surplus")),
        competitive_window=str(_pick(r, "competitiveWindow", "competitive_window", default="MIDDLE")).upper(),
        starter_quality_by_position=quality,
        flags=_str_list(_pick(r, "flags")),
    )


def parse_market_context(raw: Any) -> LeagueMarketContext:
    if raw is None:
        return LeagueMarketContext()
    r = _require_mapping(raw, "market")
    scarcity_raw = _pick(r, "scarcityByPosition", "scarcity_by_position", default={})
    scarcity = {
        str(pos).upper(): _to_float(v, what="scarcity", fallback=1.0)
        for pos, v in _require_mapping(scarcity_raw, "scarcityByPosition").items()
    }
    return LeagueMarketContext(
        scarcity_by_position=scarcity,
        pick_inflation_index=_to_float(
            _pick(r, "pickInflationIndex", "pick_inflation_index", default=1.0),
            what="pickInflationIndex",
            fallback=1.0,
        ),
        contender_team_ids=tuple(str(x) for x in (_pick(r, "contenderTeamIds", "contender_team_ids", default=[]) or [])),
        rebuilding_team_ids=tuple(str(x) for x in (_pick(r, "rebuildingTeamIds", "rebuilding_team_ids", default=[]) or [])),
    )


def parse_league_decision_context(raw: Any) -> LeagueDecisionContext:
    r = _require_mapping(raw, "leagueDecisionContext")
    teams_raw = _require_mapping(_pick(r, "teams", default={}), "teams")
    teams = {str(tid): parse_team_profile(str(tid), prof) for tid, prof in teams_raw.items()}

    fit_raw = _require_mapping(_pick(r, "partnerFit", "partner_fit", default={}), "partnerFit")
    partner_fit: Dict[str, PartnerFitScore] = {}
    for key, fr in fit_raw.items():
        f = _require_mapping(fr, "partner fit")
        tid = str(_pick(f, "teamId", "team_id", default=key))
        partner_fit[str(key)] = PartnerFitScore(
            team_id=tid,
            fit_score=_to_float(_pick(f, "fitScore", "fit_score", default=0), what="fitScore", fallback=0.0),
            reasons=tuple(str(x) for x in (_pick(f, "reasons", default=[]) or [])),
        )

    return LeagueDecisionContext(
        teams=teams,
        market=parse_market_context(_pick(r, "market")),
        partner_fit=partner_fit,
    )


# ---------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------
def json_number(v: float) -> Any:
    # keep integral values integral in payloads (3000 rather than 3000.0)
    fv = float(v)
    return int(fv) if fv.is_integer() else fv


def serialize_asset(asset: PricedAsset) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "assetId": asset.asset_id,
        "name": asset.name,
        "value": json_number(asset.value),
        "position": asset.position,
        "tier": asset.tier,
        "isStarter": bool(asset.is_starter),
    }
    if asset.age is not None:
        out["age"] = json_number(asset.age)
    if asset.is_pick:
        out["isPick"] = True
        if asset.pick_year is not None:
            out["pickYear"] = int(asset.pick_year)
        if asset.pick_round is not None:
            out["pickRound"] = int(asset.pick_round)
    if asset.injury_flag:
        out["injuryFlag"] = True
    return out
