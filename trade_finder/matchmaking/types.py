from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import INVALID_GOAL, INVALID_INPUT, TradeFinderError
from ..models import SKILL_POSITIONS, _pick, _require_mapping, _str_list, _to_float, clamp, json_number

# =============================================================================
# Goals
# =============================================================================


class MatchmakingGoal(str, Enum):
    RB_DEPTH = "rb_depth"
    WR_DEPTH = "wr_depth"
    QB_UPGRADE = "qb_upgrade"
    TE_UPGRADE = "te_upgrade"
    GET_YOUNGER = "get_younger"
    ACQUIRE_PICKS = "acquire_picks"
    WIN_NOW = "win_now"
    REBUILD = "rebuild"
    TARGET_PLAYER = "target_player"


@dataclass(frozen=True, slots=True)
class GoalConfig:
    target_positions: Tuple[str, ...]
    pick_focus: bool
    prefer_starters: bool
    min_value: float
    description: str


GOAL_CONFIGS: Dict[MatchmakingGoal, GoalConfig] = {
    MatchmakingGoal.RB_DEPTH: GoalConfig(("RB",), False, False, 2000.0, "Find RB depth"),
    MatchmakingGoal.WR_DEPTH: GoalConfig(("WR",), False, False, 2000.0, "Find WR depth"),
    MatchmakingGoal.QB_UPGRADE: GoalConfig(("QB",), False, True, 4000.0, "Upgrade at QB"),
    MatchmakingGoal.TE_UPGRADE: GoalConfig(("TE",), False, True, 3000.0, "Upgrade at TE"),
    MatchmakingGoal.GET_YOUNGER: GoalConfig(SKILL_POSITIONS, False, False, 3000.0, "Get younger assets"),
    MatchmakingGoal.ACQUIRE_PICKS: GoalConfig(tuple(), True, False, 1500.0, "Acquire draft picks"),
    MatchmakingGoal.WIN_NOW: GoalConfig(SKILL_POSITIONS, False, True, 5000.0, "Win now, buy proven starters"),
    MatchmakingGoal.REBUILD: GoalConfig(SKILL_POSITIONS, True, False, 2000.0, "Rebuild, get young + picks"),
    MatchmakingGoal.TARGET_PLAYER: GoalConfig(tuple(), False, False, 0.0, "Acquire specific player"),
}


def coerce_goal(raw: Any) -> MatchmakingGoal:
    if isinstance(raw, MatchmakingGoal):
        return raw
    try:
        return MatchmakingGoal(str(raw or "").strip().lower())
    except ValueError:
        raise TradeFinderError(
            INVALID_GOAL,
            "goal must be one of " + ", ".join(g.value for g in MatchmakingGoal),
            {"goal": raw},
        ) from None


# =============================================================================
# Config
# =============================================================================


@dataclass(frozen=True, slots=True)
class MatchmakingConfig:
    """Tunables for partner ranking and offer skeletons."""

    # --- composite weights
    w_need_overlap: float = 0.30
    w_target_availability: float = 0.25
    w_bias_alignment: float = 0.20
    w_trade_frequency: float = 0.15
    w_overpay_willingness: float = 0.10

    # --- tendency gate
    min_tendency_sample: int = 3
    rich_tendency_sample: int = 8
    thin_tendency_sample: int = 2

    # --- target availability
    star_value: float = 5000.0

    # --- offer skeleton
    offer_value_floor: float = 500.0
    offer_untouchable_starter_value: float = 9000.0
    offer_bench_value_floor: float = 1000.0
    offer_single_window: float = 0.25
    offer_max_pieces: int = 3
    offer_stop_ratio: float = 0.80
    offer_min_ratio: float = 0.75
    offer_max_ratio: float = 1.30

    # --- acceptance
    accept_min: float = 0.05
    accept_max: float = 0.90

    max_reasons: int = 6
    default_max_results: int = 5


# =============================================================================
# Inputs
# =============================================================================


@dataclass(frozen=True, slots=True)
class ManagerProfile:
    team_id: str
    user_id: str = ""
    display_name: str = ""
    avatar: Optional[str] = None
    contender_tier: str = "middle"
    needs: Tuple[str, ...] = tuple()
    surplus: Tuple[str, ...] = tuple()
    trade_aggression: str = "low"


@dataclass(frozen=True, slots=True)
class ManagerTendencyProfile:
    """Historical trade behavior. Biases are signed fractions in [-1, 1]."""

    manager_id: str = ""
    manager_name: str = ""
    sample_size: int = 0
    starter_premium: float = 0.0
    position_bias: Mapping[str, float] = field(default_factory=dict)
    risk_tolerance: float = 0.0
    consolidation_bias: float = 0.0
    overpay_threshold: float = 0.0
    fairness_tolerance: float = 0.0

    def bias(self, position: str) -> float:
        return float(self.position_bias.get(str(position).upper(), 0.0))


@dataclass(frozen=True, slots=True)
class LeagueIntelligence:
    # dict order is significant: partner scan order and sort tie-breaks
    manager_profiles: Mapping[str, ManagerProfile]


# =============================================================================
# Outputs
# =============================================================================


@dataclass(frozen=True, slots=True)
class OfferAsset:
    asset_id: str
    name: str
    value: float
    position: str
    is_pick: bool


@dataclass(frozen=True, slots=True)
class OfferSkeleton:
    user_gives: Tuple[OfferAsset, ...]
    partner_gives: Tuple[OfferAsset, ...]
    fairness_pct: int


@dataclass(frozen=True, slots=True)
class MatchScoreBreakdown:
    need_overlap: int
    target_availability: int
    bias_alignment: int
    trade_frequency: int
    overpay_willingness: int


@dataclass(frozen=True, slots=True)
class PartnerMatch:
    team_id: str
    display_name: str
    contender_tier: str
    match_score: int
    score_breakdown: MatchScoreBreakdown
    reasons: Tuple[str, ...]
    accept_estimate: float
    accept_label: str
    suggested_offer: Optional[OfferSkeleton]
    tendency_insights: Tuple[str, ...]
    avatar: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MatchmakingStats:
    partners_evaluated: int = 0
    qualified_partners: int = 0


@dataclass(frozen=True, slots=True)
class MatchmakingOutput:
    goal: MatchmakingGoal
    goal_description: str
    partners: Tuple[PartnerMatch, ...] = tuple()
    stats: MatchmakingStats = field(default_factory=MatchmakingStats)
    target_player: Optional[str] = None


# =============================================================================
# Parsing
# =============================================================================


def _bounded(raw: Any, *, lo: float, hi: float, default: float = 0.0) -> float:
    # tendency feeds are noisy; bad numbers degrade to neutral instead of failing
    return clamp(_to_float(raw, what="tendency", fallback=default), lo, hi)


def parse_manager_profile(team_id: str, raw: Any) -> ManagerProfile:
    r = _require_mapping(raw, "manager profile")
    avatar = _pick(r, "avatar")
    return ManagerProfile(
        team_id=str(_pick(r, "teamId", "team_id", "rosterId", "roster_id", default=team_id)),
        user_id=str(_pick(r, "userId", "user_id", default="")),
        display_name=str(_pick(r, "displayName", "display_name", "username", default=team_id)),
        avatar=None if avatar is None else str(avatar),
        contender_tier=str(_pick(r, "contenderTier", "contender_tier", default="middle")),
        needs=_str_list(_pick(r, "needs")),
        surplus=_str_list(_pick(r, "surplus", "surpluses")),
        trade_aggression=str(_pick(r, "tradeAggression", "trade_aggression", default="low")).lower(),
    )


def parse_league_intelligence(raw: Any) -> LeagueIntelligence:
    r = _require_mapping(raw, "leagueIntelligence")
    profiles_raw = _require_mapping(_pick(r, "managerProfiles", "manager_profiles", default={}), "managerProfiles")
    return LeagueIntelligence(
        manager_profiles={str(k): parse_manager_profile(str(k), v) for k, v in profiles_raw.items()}
    )


def parse_tendency_profile(raw: Any) -> ManagerTendencyProfile:
    r = _require_mapping(raw, "tendency profile")
    bias_raw = _pick(r, "positionBias", "position_bias", default={})
    if not isinstance(bias_raw, Mapping):
        raise TradeFinderError(INVALID_INPUT, "positionBias must be an object", {"value": bias_raw})
    bias = {str(k).upper(): _bounded(v, lo=-1.0, hi=1.0) for k, v in bias_raw.items()}
    return ManagerTendencyProfile(
        manager_id=str(_pick(r, "managerId", "manager_id", default="")),
        manager_name=str(_pick(r, "managerName", "manager_name", default="")),
        sample_size=int(max(0.0, _to_float(_pick(r, "sampleSize", "sample_size", default=0), what="sampleSize", fallback=0.0))),
        starter_premium=_bounded(_pick(r, "starterPremium", "starter_premium"), lo=-1.0, hi=1.0),
        position_bias=bias,
        risk_tolerance=_bounded(_pick(r, "riskTolerance", "risk_tolerance"), lo=-1.0, hi=1.0),
        consolidation_bias=_bounded(_pick(r, "consolidationBias", "consolidation_bias"), lo=-1.0, hi=1.0),
        overpay_threshold=_bounded(_pick(r, "overpayThreshold", "overpay_threshold"), lo=-1.0, hi=1.0),
        fairness_tolerance=_bounded(_pick(r, "fairnessTolerance", "fairness_tolerance"), lo=0.0, hi=1.0),
    )


def parse_tendencies(raw: Any) -> Dict[str, ManagerTendencyProfile]:
    if raw is None:
        return {}
    r = _require_mapping(raw, "tendencies")
    return {str(k): parse_tendency_profile(v) for k, v in r.items()}


# =============================================================================
# Serialization
# =============================================================================


def _serialize_offer_asset(a: OfferAsset) -> Dict[str, Any]:
    return {
        "assetId": a.asset_id,
        "name": a.name,
        "value": json_number(a.value),
        "position": a.position,
        "isPick": bool(a.is_pick),
    }


def serialize_offer(o: Optional[OfferSkeleton]) -> Optional[Dict[str, Any]]:
    if o is None:
        return None
    return {
        "userGives": [_serialize_offer_asset(a) for a in o.user_gives],
        "partnerGives": [_serialize_offer_asset(a) for a in o.partner_gives],
        "fairnessPct": int(o.fairness_pct),
    }


def serialize_partner_match(m: PartnerMatch) -> Dict[str, Any]:
    b = m.score_breakdown
    out: Dict[str, Any] = {
        "teamId": m.team_id,
        "displayName": m.display_name,
        "contenderTier": m.contender_tier,
        "matchScore": int(m.match_score),
        "scoreBreakdown": {
            "needOverlap": b.need_overlap,
            "targetAvailability": b.target_availability,
            "biasAlignment": b.bias_alignment,
            "tradeFrequency": b.trade_frequency,
            "overpayWillingness": b.overpay_willingness,
        },
        "reasons": list(m.reasons),
        "acceptEstimate": float(m.accept_estimate),
        "acceptLabel": m.accept_label,
        "suggestedOffer": serialize_offer(m.suggested_offer),
        "tendencyInsights": list(m.tendency_insights),
    }
    if m.avatar is not None:
        out["avatar"] = m.avatar
    return out


def serialize_matchmaking_output(out: MatchmakingOutput) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "goal": out.goal.value,
        "goalDescription": out.goal_description,
        "partners": [serialize_partner_match(p) for p in out.partners],
        "stats": {
            "partnersEvaluated": int(out.stats.partners_evaluated),
            "qualifiedPartners": int(out.stats.qualified_partners),
        },
    }
    if out.target_player is not None:
        payload["targetPlayer"] = out.target_player
    return payload


__all__: List[str] = [
    "MatchmakingGoal",
    "GoalConfig",
    "GOAL_CONFIGS",
    "coerce_goal",
    "MatchmakingConfig",
    "ManagerProfile",
    "ManagerTendencyProfile",
    "LeagueIntelligence",
    "OfferAsset",
    "OfferSkeleton",
    "MatchScoreBreakdown",
    "PartnerMatch",
    "MatchmakingStats",
    "MatchmakingOutput",
    "parse_manager_profile",
    "parse_league_intelligence",
    "parse_tendency_profile",
    "parse_tendencies",
    "serialize_offer",
    "serialize_partner_match",
    "serialize_matchmaking_output",
]
