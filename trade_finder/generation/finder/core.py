from __future__ import annotations

import logging
from typing import Any, List, Optional

from ...models import LeagueDecisionContext, PartnerFitScore, PricedAssetsByTeam
from .assets import get_targetable_assets, get_tradable_assets
from .config import coerce_mode, coerce_objective, coerce_preset, resolve_mode_config
from .dedupe import prune_and_rank
from .opportunities import generate_fallback_opportunities
from .presets import apply_preset
from .scoring import compute_finder_score
from .skeletons import ARCHETYPE_GENERATORS, PartnerSkeletonContext
from .types import (
    CandidateGeneratorOutput,
    FinderConfig,
    FinderStats,
    RawCandidate,
    TradeCandidate,
    empty_output,
)

logger = logging.getLogger(__name__)

# =============================================================================
# Partner selection
# =============================================================================


def select_partners(
    user_team_id: str,
    ctx: LeagueDecisionContext,
    *,
    max_partners: int,
    cfg: FinderConfig,
) -> List[PartnerFitScore]:
    """Fit-ranked partner list (stable on ties), never including the user."""
    eligible = [
        f
        for f in ctx.partner_fit.values()
        if f.team_id != user_team_id and float(f.fit_score) >= cfg.min_partner_fit
    ]
    ranked = sorted(eligible, key=lambda f: -float(f.fit_score))
    return ranked[: max(0, int(max_partners))]


def _is_well_formed(raw: RawCandidate) -> bool:
    gives = {a.asset_id for a in raw.team_a.gives}
    receives = {a.asset_id for a in raw.team_a.receives}
    return bool(gives) and bool(receives) and not (gives & receives)


# =============================================================================
# Public API
# =============================================================================


def generate_trade_candidates(
    user_team_id: str,
    league_decision_context: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    objective: Any,
    mode: Any,
    *,
    preset: Any = None,
    target_position: Optional[str] = None,
    config: Optional[FinderConfig] = None,
) -> CandidateGeneratorOutput:
    """Ranked trade candidates plus fallback opportunities for one team.

    Pipeline:
      partners (fit >= min, mode cap) -> tradable/targetable filter
      -> five archetypes in registry order -> score -> threshold/dedupe/rank/cap
      -> optional preset -> fallback opportunities

    Deterministic: same input, same output, same order. An unknown
    `user_team_id` yields an empty result rather than an error.
    """

    cfg = config or FinderConfig()
    obj = coerce_objective(objective)
    mode_cfg = resolve_mode_config(cfg, coerce_mode(mode))
    pst = coerce_preset(preset)

    ctx = league_decision_context
    user = ctx.teams.get(user_team_id)
    if user is None:
        logger.warning("generate_trade_candidates: unknown user team %s, returning empty result", user_team_id)
        return empty_output()

    stats = FinderStats()
    partners = select_partners(user_team_id, ctx, max_partners=mode_cfg.max_partners, cfg=cfg)
    user_tradable = tuple(
        get_tradable_assets(priced_assets.get(user_team_id, ()), obj, user.surpluses, user.needs, cfg)
    )

    raw: List[RawCandidate] = []
    for fit in partners:
        partner = ctx.teams.get(fit.team_id)
        if partner is None:
            stats.partners_skipped += 1
            logger.debug("generate_trade_candidates: partner %s has no profile, skipped", fit.team_id)
            continue

        sk_ctx = PartnerSkeletonContext(
            user_team_id=user_team_id,
            partner_team_id=fit.team_id,
            user_profile=user,
            partner_profile=partner,
            user_tradable=user_tradable,
            partner_targetable=tuple(get_targetable_assets(priced_assets.get(fit.team_id, ()), user.needs, cfg)),
            objective=obj,
            config=cfg,
        )
        for archetype, build in ARCHETYPE_GENERATORS:
            produced = build(sk_ctx)
            stats.bump_archetype(archetype, len(produced))
            raw.extend(produced)

    scored: List[TradeCandidate] = []
    for r in raw:
        if not _is_well_formed(r):
            stats.malformed_dropped += 1
            continue
        partner = ctx.teams[r.team_b.team_id]
        scored.append(compute_finder_score(r, user, partner, obj, ctx.market, cfg))

    final = prune_and_rank(scored, max_results=mode_cfg.max_results, cfg=cfg, stats=stats)
    final = apply_preset(final, pst, target_position)

    opportunities = generate_fallback_opportunities(
        user_team_id, ctx, priced_assets, obj, len(final), cfg
    )

    logger.debug(
        "generate_trade_candidates: user=%s objective=%s mode=%s partners=%d raw=%d final=%d "
        "by_archetype=%s below_threshold=%d duplicates=%d malformed=%d",
        user_team_id,
        obj.value,
        mode_cfg,
        len(partners),
        len(raw),
        len(final),
        stats.raw_by_archetype,
        stats.below_threshold,
        stats.duplicates_dropped,
        stats.malformed_dropped,
    )

    return CandidateGeneratorOutput(
        candidates=tuple(final),
        opportunities=tuple(opportunities),
        partners_evaluated=len(partners),
        raw_candidates_generated=len(raw),
        pruned_to=len(final),
        stats=stats,
    )
