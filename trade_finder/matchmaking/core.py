from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, List, Mapping, Optional, Sequence

from ..errors import TARGET_REQUIRED, TradeFinderError
from ..models import PricedAsset, clamp, round_half_up
from .offers import build_offer_skeleton, find_target_player
from .scoring import (
    NEUTRAL_BIAS_REASON,
    NO_OVERPAY_DATA_REASON,
    build_tendency_insights,
    estimate_accept_probability,
    score_bias_alignment,
    score_need_overlap,
    score_overpay_willingness,
    score_target_availability,
    score_trade_frequency,
)
from .types import (
    GOAL_CONFIGS,
    LeagueIntelligence,
    ManagerProfile,
    ManagerTendencyProfile,
    MatchmakingConfig,
    MatchmakingGoal,
    MatchmakingOutput,
    MatchmakingStats,
    MatchScoreBreakdown,
    PartnerMatch,
    coerce_goal,
)

logger = logging.getLogger(__name__)


def _tendency_for(
    team_id: str,
    profile: ManagerProfile,
    tendencies: Mapping[str, ManagerTendencyProfile],
) -> Optional[ManagerTendencyProfile]:
    t = tendencies.get(team_id)
    if t is None and profile.user_id:
        t = tendencies.get(profile.user_id)
    return t


def find_best_partners(
    user_team_id: str,
    goal: Any,
    league_intelligence: LeagueIntelligence,
    priced_assets: Mapping[str, Sequence[PricedAsset]],
    tendencies: Optional[Mapping[str, ManagerTendencyProfile]] = None,
    *,
    target_player_name: Optional[str] = None,
    target_player_id: Optional[str] = None,
    max_results: Optional[int] = None,
    config: Optional[MatchmakingConfig] = None,
) -> MatchmakingOutput:
    """Rank every other manager as a trading partner for `goal`.

    Each qualified partner gets a composite matchScore, up to six reasons, a
    suggested offer skeleton (or None) and an acceptance estimate. Partners
    are returned by matchScore desc; ties keep league order.
    """

    cfg = config or MatchmakingConfig()
    g = coerce_goal(goal)
    tendencies = tendencies or {}
    limit = cfg.default_max_results if max_results is None else max(0, int(max_results))

    if g == MatchmakingGoal.TARGET_PLAYER and not (target_player_name or target_player_id):
        raise TradeFinderError(
            TARGET_REQUIRED,
            "target_player goal needs targetPlayerName or targetPlayerId",
            {"goal": g.value},
        )

    goal_cfg = GOAL_CONFIGS[g]
    profiles = league_intelligence.manager_profiles
    user = profiles.get(user_team_id)
    if user is None:
        logger.warning("find_best_partners: unknown user team %s, returning empty result", user_team_id)
        return MatchmakingOutput(goal=g, goal_description=goal_cfg.description)

    found = None
    if target_player_name or target_player_id:
        found = find_target_player(priced_assets, target_player_name, target_player_id)
        if found is None:
            logger.warning(
                "find_best_partners: target not found (name=%s id=%s)", target_player_name, target_player_id
            )
    target_owner = found[0] if found else None
    target = found[1] if found else None

    effective = goal_cfg
    if target is not None:
        effective = replace(goal_cfg, target_positions=(target.position,), min_value=0.0)

    user_assets = list(priced_assets.get(user_team_id, ()))
    partners = [(tid, p) for tid, p in profiles.items() if tid != user_team_id]

    scored: List[PartnerMatch] = []
    for partner_id, partner in partners:
        if g == MatchmakingGoal.TARGET_PLAYER and target_owner != partner_id:
            continue

        partner_assets = list(priced_assets.get(partner_id, ()))
        tendency = _tendency_for(partner_id, partner, tendencies)

        need_s, need_r = score_need_overlap(user, partner)
        avail_s, avail_r = score_target_availability(partner_id, partner_assets, effective, cfg, target, target_owner)
        if avail_s == 0 and g != MatchmakingGoal.TARGET_PLAYER:
            continue
        bias_s, bias_r = score_bias_alignment(tendency, user.surplus, effective, cfg, target)
        freq_s, freq_r = score_trade_frequency(partner, tendency, cfg)
        over_s, over_r = score_overpay_willingness(tendency, cfg)

        match_score = int(
            clamp(
                round_half_up(
                    need_s * cfg.w_need_overlap
                    + avail_s * cfg.w_target_availability
                    + bias_s * cfg.w_bias_alignment
                    + freq_s * cfg.w_trade_frequency
                    + over_s * cfg.w_overpay_willingness
                ),
                0,
                100,
            )
        )

        offer = build_offer_skeleton(user_assets, partner_assets, partner, effective, cfg, target)
        prob, label = estimate_accept_probability(match_score, offer.fairness_pct if offer else 0, cfg)

        reasons = (
            need_r
            + avail_r
            + [r for r in bias_r if r != NEUTRAL_BIAS_REASON]
            + freq_r
            + [r for r in over_r if r != NO_OVERPAY_DATA_REASON]
        )

        scored.append(
            PartnerMatch(
                team_id=partner_id,
                display_name=partner.display_name,
                avatar=partner.avatar,
                contender_tier=partner.contender_tier,
                match_score=match_score,
                score_breakdown=MatchScoreBreakdown(
                    need_overlap=need_s,
                    target_availability=avail_s,
                    bias_alignment=bias_s,
                    trade_frequency=freq_s,
                    overpay_willingness=over_s,
                ),
                reasons=tuple(reasons[: int(cfg.max_reasons)]),
                accept_estimate=prob,
                accept_label=label,
                suggested_offer=offer,
                tendency_insights=tuple(build_tendency_insights(tendency, cfg)),
            )
        )

    ranked = sorted(scored, key=lambda m: -int(m.match_score))
    top = tuple(ranked[:limit])

    logger.debug(
        "find_best_partners: user=%s goal=%s target=%s evaluated=%d qualified=%d returned=%d",
        user_team_id,
        g.value,
        target.name if target else None,
        len(partners),
        len(scored),
        len(top),
    )

    return MatchmakingOutput(
        goal=g,
        goal_description=f"Acquire {target.name}" if target is not None else goal_cfg.description,
        partners=top,
        stats=MatchmakingStats(partners_evaluated=len(partners), qualified_partners=len(scored)),
        target_player=target.name if target is not None else None,
    )
