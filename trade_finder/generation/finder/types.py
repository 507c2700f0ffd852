from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ...models import PricedAsset, json_number, serialize_asset


# =============================================================================
# Enums
# =============================================================================


class TradeObjective(str, Enum):
    WIN_NOW = "WIN_NOW"
    REBUILD = "REBUILD"
    BALANCED = "BALANCED"


class FinderMode(str, Enum):
    FAST = "FAST"
    DEEP = "DEEP"


class TradeArchetype(str, Enum):
    POSITIONAL_SWAP = "POSITIONAL_SWAP"
    CONSOLIDATION = "CONSOLIDATION"
    PICK_FOR_PLAYER = "PICK_FOR_PLAYER"
    WINDOW_ARBITRAGE = "WINDOW_ARBITRAGE"
    INJURY_DISCOUNT = "INJURY_DISCOUNT"


class OpportunityType(str, Enum):
    NEED_FIT = "NEED_FIT"
    CONSOLIDATION = "CONSOLIDATION"
    VOLATILITY_SWAP = "VOLATILITY_SWAP"
    PICK_ARBITRAGE = "PICK_ARBITRAGE"
    MONITOR = "MONITOR"


class FinderPreset(str, Enum):
    NONE = "NONE"
    TARGET_POSITION = "TARGET_POSITION"
    ACQUIRE_PICKS = "ACQUIRE_PICKS"
    CONSOLIDATE = "CONSOLIDATE"


# =============================================================================
# Config
# =============================================================================


@dataclass(frozen=True, slots=True)
class FinderModeConfig:
    """Mode-dependent fan-out and result cap, resolved once per request."""

    max_partners: int
    max_results: int


@dataclass(frozen=True, slots=True)
class FinderConfig:
    """Hand-tuned thresholds for candidate generation and scoring.

    Every value here is a tunable; defaults are the production calibration.
    """

    # --- asset filter
    tradable_value_floor: float = 500.0
    bench_value_floor: float = 1000.0
    targetable_value_floor: float = 1000.0
    core_locked_min_tier: int = 5
    replaceable_starter_max_tier: int = 3
    targetable_min_tier: int = 4

    # --- partner fan-out
    min_partner_fit: float = 40.0
    fast: FinderModeConfig = FinderModeConfig(max_partners=5, max_results=8)
    deep: FinderModeConfig = FinderModeConfig(max_partners=12, max_results=15)

    # --- value matching
    fairness_window: float = 0.25
    bundle_max_pieces: int = 3
    bundle_stop_ratio: float = 0.80
    bundle_stop_ceiling_ratio: float = 1.20
    bundle_min_ratio: float = 0.75
    bundle_max_ratio: float = 1.25

    # --- archetypes
    consolidation_max_targets: int = 3
    consolidation_target_min_tier: int = 4
    consolidation_piece_max_tier: int = 3
    pick_for_player_min_pick_value: float = 1500.0
    pick_for_player_max_targets: int = 5
    pick_for_player_target_min_tier: int = 3
    vet_min_age: float = 26.0
    vet_min_value: float = 2000.0
    vet_max_count: int = 5
    arbitrage_max_producers: int = 3
    arbitrage_producer_min_tier: int = 3
    arbitrage_producer_min_age: float = 26.0
    young_max_age: float = 24.0
    injury_min_tier: int = 3
    injury_discount: float = 0.80
    default_age: float = 25.0

    # --- scoring weights
    w_starter_upgrade: float = 0.35
    w_objective_alignment: float = 0.25
    w_value_fairness: float = 0.20
    w_roster_fit: float = 0.10
    w_scarcity_bonus: float = 0.10

    # --- scoring thresholds
    producer_min_tier: int = 3
    weak_starter_quality: float = 60.0
    aging_vet_min_age: float = 27.0
    scarcity_high: float = 1.5
    scarcity_elevated: float = 1.2
    fairness_tiers: Tuple[Tuple[float, int], ...] = (
        (0.05, 100),
        (0.10, 85),
        (0.15, 70),
        (0.20, 55),
        (0.25, 40),
    )
    fairness_floor_score: int = 20

    # --- pruning
    score_threshold: int = 55

    # --- fallback opportunities
    need_fit_max_opportunities: int = 1
    need_fit_return_min_ratio: float = 0.60
    elite_min_value: float = 5000.0
    elite_per_partner: int = 2
    consolidation_hint_stop_ratio: float = 0.70
    consolidation_hint_min_ratio: float = 0.60
    volatility_min_fit: float = 25.0
    volatility_max_partners: int = 3
    volatility_min_value: float = 2000.0
    volatility_per_partner: int = 2
    pick_inflation_trigger: float = 1.2
    monitor_min_value: float = 2000.0
    max_relevant_players: int = 3


# =============================================================================
# Candidates
# =============================================================================


@dataclass(frozen=True, slots=True)
class TeamSide:
    team_id: str
    gives: Tuple[PricedAsset, ...]
    receives: Tuple[PricedAsset, ...]

    @property
    def gives_value(self) -> float:
        return float(sum(a.value for a in self.gives))

    @property
    def receives_value(self) -> float:
        return float(sum(a.value for a in self.receives))


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    starter_upgrade: int = 0
    objective_alignment: int = 0
    value_fairness: int = 0
    roster_fit: int = 0
    scarcity_bonus: int = 0


@dataclass(frozen=True, slots=True)
class RawCandidate:
    """Unscored two-sided proposal. team_a is always the requesting team."""

    trade_id: str
    team_a: TeamSide
    team_b: TeamSide
    archetype: TradeArchetype
    why_this_exists: Tuple[str, ...]
    value_delta_pct: int


@dataclass(frozen=True, slots=True)
class TradeCandidate:
    trade_id: str
    team_a: TeamSide
    team_b: TeamSide
    archetype: TradeArchetype
    finder_score: int
    value_delta_pct: int
    score_breakdown: ScoreBreakdown
    why_this_exists: Tuple[str, ...]


def make_raw_candidate(
    trade_id: str,
    *,
    user_team_id: str,
    partner_team_id: str,
    user_gives: List[PricedAsset],
    user_receives: List[PricedAsset],
    archetype: TradeArchetype,
    why: List[str],
    value_delta_pct: int,
) -> RawCandidate:
    """Build both sides from one asset split so the mirror can never drift."""

    gives = tuple(user_gives)
    receives = tuple(user_receives)
    return RawCandidate(
        trade_id=trade_id,
        team_a=TeamSide(team_id=user_team_id, gives=gives, receives=receives),
        team_b=TeamSide(team_id=partner_team_id, gives=receives, receives=gives),
        archetype=archetype,
        why_this_exists=tuple(why),
        value_delta_pct=int(value_delta_pct),
    )


# =============================================================================
# Opportunities / output
# =============================================================================


@dataclass(frozen=True, slots=True)
class RelevantPlayer:
    name: str
    position: str
    value: float
    reason: str


@dataclass(frozen=True, slots=True)
class TradeOpportunity:
    type: OpportunityType
    title: str
    description: str
    relevant_players: Tuple[RelevantPlayer, ...]
    confidence: float
    actionable: bool
    target_team_id: Optional[str] = None


@dataclass(slots=True)
class FinderStats:
    """Per-request counters, logged at DEBUG."""

    raw_by_archetype: Dict[str, int] = field(default_factory=dict)
    below_threshold: int = 0
    duplicates_dropped: int = 0
    malformed_dropped: int = 0
    partners_skipped: int = 0

    def bump_archetype(self, archetype: TradeArchetype, n: int) -> None:
        key = archetype.value
        self.raw_by_archetype[key] = int(self.raw_by_archetype.get(key, 0)) + int(n)


@dataclass(frozen=True, slots=True)
class CandidateGeneratorOutput:
    candidates: Tuple[TradeCandidate, ...]
    opportunities: Tuple[TradeOpportunity, ...]
    partners_evaluated: int
    raw_candidates_generated: int
    pruned_to: int
    stats: FinderStats = field(default_factory=FinderStats, compare=False)


def empty_output() -> CandidateGeneratorOutput:
    return CandidateGeneratorOutput(
        candidates=tuple(),
        opportunities=tuple(),
        partners_evaluated=0,
        raw_candidates_generated=0,
        pruned_to=0,
    )


# =============================================================================
# Serialization
# =============================================================================


def _serialize_side(side: TeamSide) -> Dict[str, Any]:
    return {
        "teamId": side.team_id,
        "gives": [serialize_asset(a) for a in side.gives],
        "receives": [serialize_asset(a) for a in side.receives],
    }


def serialize_candidate(c: TradeCandidate) -> Dict[str, Any]:
    b = c.score_breakdown
    return {
        "tradeId": c.trade_id,
        "teamA": _serialize_side(c.team_a),
        "teamB": _serialize_side(c.team_b),
        "archetype": c.archetype.value,
        "finderScore": int(c.finder_score),
        "valueDeltaPct": int(c.value_delta_pct),
        "scoreBreakdown": {
            "starterUpgrade": b.starter_upgrade,
            "objectiveAlignment": b.objective_alignment,
            "valueFairness": b.value_fairness,
            "rosterFit": b.roster_fit,
            "scarcityBonus": b.scarcity_bonus,
        },
        "whyThisExists": list(c.why_this_exists),
    }


def serialize_opportunity(o: TradeOpportunity) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "type": o.type.value,
        "title": o.title,
        "description": o.description,
        "relevantPlayers": [
            {"name": p.name, "position": p.position, "value": json_number(p.value), "reason": p.reason}
            for p in o.relevant_players
        ],
        "confidence": json_number(o.confidence),
        "actionable": bool(o.actionable),
    }
    if o.target_team_id is not None:
        out["targetTeamId"] = o.target_team_id
    return out


def serialize_finder_output(out: CandidateGeneratorOutput) -> Dict[str, Any]:
    return {
        "candidates": [serialize_candidate(c) for c in out.candidates],
        "opportunities": [serialize_opportunity(o) for o in out.opportunities],
        "partnersEvaluated": int(out.partners_evaluated),
        "rawCandidatesGenerated": int(out.raw_candidates_generated),
        "prunedTo": int(out.pruned_to),
    }
