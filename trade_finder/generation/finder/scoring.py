from __future__ import annotations

from typing import Sequence

from ...models import LeagueMarketContext, PricedAsset, TeamDecisionProfile, clamp, round_half_up
from .types import FinderConfig, RawCandidate, ScoreBreakdown, TradeCandidate, TradeObjective

# =============================================================================
# Sub-scores (each 0..100)
# =============================================================================


def _max_tier(assets: Sequence[PricedAsset]) -> int:
    return max([a.tier_weight for a in assets] + [0])


def score_starter_upgrade(
    gives: Sequence[PricedAsset],
    receives: Sequence[PricedAsset],
    user: TeamDecisionProfile,
    cfg: FinderConfig,
) -> int:
    s = 0
    if _max_tier(receives) > _max_tier(gives):
        s += 30
    if any(not a.is_pick and a.position in user.needs for a in receives):
        s += 40
    if any(
        not a.is_pick
        and a.tier_weight >= int(cfg.producer_min_tier)
        and user.starter_quality(a.position) < cfg.weak_starter_quality
        for a in receives
    ):
        s += 30
    return int(clamp(s, 0, 100))


def score_objective_alignment(
    gives: Sequence[PricedAsset],
    receives: Sequence[PricedAsset],
    objective: TradeObjective,
    cfg: FinderConfig,
) -> int:
    if objective == TradeObjective.WIN_NOW:
        s = 25 * sum(1 for a in receives if not a.is_pick and a.tier_weight >= int(cfg.producer_min_tier))
        s += 15 * sum(1 for a in gives if a.is_pick)
        s -= 10 * sum(1 for a in receives if a.is_pick)
    elif objective == TradeObjective.REBUILD:
        s = 25 * sum(1 for a in receives if a.is_pick)
        s += 20 * sum(1 for a in receives if not a.is_pick and a.age_or(cfg.default_age) <= cfg.young_max_age)
        s += 20 * sum(1 for a in gives if not a.is_pick and a.age_or(cfg.default_age) >= cfg.aging_vet_min_age)
    else:
        s = 50
    return int(clamp(s, 0, 100))


def score_value_fairness(given_value: float, received_value: float, cfg: FinderConfig) -> int:
    # nothing of value given -> no fairness credit
    if given_value <= 0:
        return 0
    delta = abs(float(received_value) - float(given_value)) / float(given_value)
    for limit, score in cfg.fairness_tiers:
        if delta <= limit:
            return int(score)
    return int(cfg.fairness_floor_score)


def score_roster_fit(
    gives: Sequence[PricedAsset],
    partner_receives: Sequence[PricedAsset],
    user: TeamDecisionProfile,
    partner: TeamDecisionProfile,
) -> int:
    s = 50
    creates_hole = any(
        not a.is_pick and a.is_starter and a.position not in user.surpluses and a.position in user.needs
        for a in gives
    )
    if creates_hole:
        s -= 40
    if any(not a.is_pick and a.position in partner.needs for a in partner_receives):
        s += 30
    return int(clamp(s, 0, 100))


def score_scarcity_bonus(receives: Sequence[PricedAsset], market: LeagueMarketContext, cfg: FinderConfig) -> int:
    s = 0
    for a in receives:
        if a.is_pick:
            continue
        scarcity = market.scarcity(a.position)
        if scarcity >= cfg.scarcity_high:
            s += 30
        elif scarcity >= cfg.scarcity_elevated:
            s += 15
    return int(clamp(s, 0, 100))


# =============================================================================
# Composite
# =============================================================================


def compute_finder_score(
    raw: RawCandidate,
    user: TeamDecisionProfile,
    partner: TeamDecisionProfile,
    objective: TradeObjective,
    market: LeagueMarketContext,
    cfg: FinderConfig,
) -> TradeCandidate:
    """Score a raw candidate from the requesting team's point of view."""

    gives = raw.team_a.gives
    receives = raw.team_a.receives

    breakdown = ScoreBreakdown(
        starter_upgrade=score_starter_upgrade(gives, receives, user, cfg),
        objective_alignment=score_objective_alignment(gives, receives, objective, cfg),
        value_fairness=score_value_fairness(raw.team_a.gives_value, raw.team_a.receives_value, cfg),
        roster_fit=score_roster_fit(gives, raw.team_b.receives, user, partner),
        scarcity_bonus=score_scarcity_bonus(receives, market, cfg),
    )
    weighted = (
        breakdown.starter_upgrade * cfg.w_starter_upgrade
        + breakdown.objective_alignment * cfg.w_objective_alignment
        + breakdown.value_fairness * cfg.w_value_fairness
        + breakdown.roster_fit * cfg.w_roster_fit
        + breakdown.scarcity_bonus * cfg.w_scarcity_bonus
    )
    return TradeCandidate(
        trade_id=raw.trade_id,
        team_a=raw.team_a,
        team_b=raw.team_b,
        archetype=raw.archetype,
        finder_score=int(clamp(round_half_up(weighted), 0, 100)),
        value_delta_pct=raw.value_delta_pct,
        score_breakdown=breakdown,
        why_this_exists=raw.why_this_exists,
    )
