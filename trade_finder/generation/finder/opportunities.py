from __future__ import annotations

"""Fallback opportunities.

Softer, narrative-level hints that are emitted on every request, whether or
not concrete candidates survived pruning. Each check contributes at most one
opportunity, and checks run in a fixed order:

    NEED_FIT -> CONSOLIDATION -> VOLATILITY_SWAP -> PICK_ARBITRAGE -> MONITOR

MONITOR is always present: when no partner asset qualifies, a placeholder
built from the user's needs (or the league landscape) is emitted instead.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ...models import LeagueDecisionContext, PricedAsset, PricedAssetsByTeam, TeamDecisionProfile, round_half_up
from .assets import by_value_desc, is_core_locked
from .types import FinderConfig, OpportunityType, RelevantPlayer, TradeObjective, TradeOpportunity

logger = logging.getLogger(__name__)


def _partners(ctx: LeagueDecisionContext, user_team_id: str) -> List[Tuple[str, TeamDecisionProfile]]:
    return [(tid, prof) for tid, prof in ctx.teams.items() if tid != user_team_id]


def _fit(ctx: LeagueDecisionContext, team_id: str) -> Optional[float]:
    f = ctx.partner_fit.get(team_id)
    return None if f is None else float(f.fit_score)


# =============================================================================
# Checks
# =============================================================================


def _need_fit(
    user_team_id: str,
    user: TeamDecisionProfile,
    ctx: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    cfg: FinderConfig,
) -> List[TradeOpportunity]:
    user_assets = list(priced_assets.get(user_team_id, ()))
    out: List[TradeOpportunity] = []

    for partner_id, partner in _partners(ctx, user_team_id):
        if len(out) >= int(cfg.need_fit_max_opportunities):
            break
        matching = [p for p in partner.needs if p in user.surpluses]
        if not matching:
            continue

        partner_assets = list(priced_assets.get(partner_id, ()))
        players: List[RelevantPlayer] = []
        for pos in matching:
            sends = by_value_desc(
                a
                for a in user_assets
                if not a.is_pick
                and a.position == pos
                and not is_core_locked(a, cfg)
                and a.value >= cfg.bench_value_floor
            )
            if not sends:
                continue
            send = sends[0]
            players.append(
                RelevantPlayer(
                    name=send.name,
                    position=pos,
                    value=send.value,
                    reason=f"Their weakest slot is {pos}; your depth piece fills a real need",
                )
            )

            returns = by_value_desc(
                a
                for a in partner_assets
                if not a.is_pick
                and a.position in user.needs
                and a.value >= send.value * cfg.need_fit_return_min_ratio
            )
            if returns:
                back = returns[0]
                players.append(
                    RelevantPlayer(
                        name=back.name,
                        position=back.position,
                        value=back.value,
                        reason=f"They could send back {back.position} help you need",
                    )
                )

        if not players:
            continue

        confidence = min(75.0, 40 + 15 * len(matching) + (_fit(ctx, partner_id) or 0.0) / 5)
        out.append(
            TradeOpportunity(
                type=OpportunityType.NEED_FIT,
                title="Need-Fit Deal",
                description=(
                    f"They need {'/'.join(matching)} and you have surplus depth. Value may not perfectly "
                    "align today, but roster fit creates negotiation leverage."
                ),
                relevant_players=tuple(players[: int(cfg.max_relevant_players)]),
                confidence=confidence,
                actionable=True,
                target_team_id=partner_id,
            )
        )
    return out


def _consolidation(
    user_team_id: str,
    ctx: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    cfg: FinderConfig,
) -> List[TradeOpportunity]:
    user_assets = list(priced_assets.get(user_team_id, ()))
    elites_found: List[RelevantPlayer] = []

    for partner_id, _partner in _partners(ctx, user_team_id):
        elites = by_value_desc(
            a
            for a in priced_assets.get(partner_id, ())
            if not a.is_pick and a.tier_weight >= int(cfg.targetable_min_tier) and a.value >= cfg.elite_min_value
        )
        for elite in elites[: int(cfg.elite_per_partner)]:
            pieces = by_value_desc(
                a
                for a in user_assets
                if not a.is_pick
                and not is_core_locked(a, cfg)
                and a.value >= cfg.bench_value_floor
                and a.value < elite.value
            )
            if len(pieces) < 2:
                continue

            bundle: List[PricedAsset] = []
            total = 0.0
            for p in pieces:
                if len(bundle) >= int(cfg.bundle_max_pieces):
                    break
                bundle.append(p)
                total += float(p.value)
                if total >= elite.value * cfg.consolidation_hint_stop_ratio:
                    break

            if len(bundle) >= 2 and total >= elite.value * cfg.consolidation_hint_min_ratio:
                gap = round_half_up((1 - total / float(elite.value)) * 100)
                names = " + ".join(b.name for b in bundle)
                elites_found.append(
                    RelevantPlayer(
                        name=elite.name,
                        position=elite.position,
                        value=elite.value,
                        reason=f"Bundle {len(bundle)} pieces ({names}), value gap is {gap}%",
                    )
                )

    if not elites_found:
        return []
    return [
        TradeOpportunity(
            type=OpportunityType.CONSOLIDATION,
            title="Consolidation Offers",
            description=(
                "No clean 1-for-1 value matches, but you have depth pieces to bundle for a star upgrade. "
                "Consolidation trades often need sweeteners to close the gap."
            ),
            relevant_players=tuple(elites_found[: int(cfg.max_relevant_players)]),
            confidence=min(60.0, 30 + 10 * len(elites_found)),
            actionable=True,
        )
    ]


def _volatility_swap(
    user_team_id: str,
    ctx: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    cfg: FinderConfig,
) -> List[TradeOpportunity]:
    risk_on: List[Tuple[str, TeamDecisionProfile]] = []
    for partner_id, partner in _partners(ctx, user_team_id):
        fit = _fit(ctx, partner_id)
        if fit is None or fit < cfg.volatility_min_fit:
            continue
        if partner.competitive_window == "REBUILD" or "ACTIVE_TRADER" in partner.flags:
            risk_on.append((partner_id, partner))
    risk_on = risk_on[: int(cfg.volatility_max_partners)]

    players: List[RelevantPlayer] = []
    for partner_id, partner in risk_on:
        volatile = by_value_desc(
            a
            for a in priced_assets.get(partner_id, ())
            if not a.is_pick
            and (a.injury_flag or a.tier_weight >= int(cfg.producer_min_tier))
            and a.value >= cfg.volatility_min_value
        )
        for p in volatile[: int(cfg.volatility_per_partner)]:
            if p.injury_flag:
                kind = "a rebuilding" if partner.competitive_window == "REBUILD" else "an active trading"
                reason = f"Injured star on {kind} team, buy-low window"
            else:
                reason = "Volatile asset on a risk-tolerant team, they might sell for picks"
            players.append(RelevantPlayer(name=p.name, position=p.position, value=p.value, reason=reason))

    if not players:
        return []
    return [
        TradeOpportunity(
            type=OpportunityType.VOLATILITY_SWAP,
            title="Volatility Swaps",
            description=(
                "These managers are active traders or rebuilders who may accept riskier deals. "
                "Target their volatile or injured assets at a discount."
            ),
            relevant_players=tuple(players[: int(cfg.max_relevant_players)]),
            confidence=min(55.0, 25 + 10 * len(players)),
            actionable=True,
        )
    ]


def _pick_arbitrage(
    user_team_id: str,
    ctx: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    cfg: FinderConfig,
) -> List[TradeOpportunity]:
    index = float(ctx.market.pick_inflation_index)
    if index < cfg.pick_inflation_trigger:
        return []

    user_picks = [a for a in priced_assets.get(user_team_id, ()) if a.is_pick and a.value >= cfg.pick_for_player_min_pick_value]
    if not user_picks:
        return []

    inflation_pct = round_half_up(index * 100 - 100)
    players = tuple(
        RelevantPlayer(
            name=p.name,
            position="PICK",
            value=p.value,
            reason=f"Pick inflation is {inflation_pct}% above normal; sell high for proven producers",
        )
        for p in by_value_desc(user_picks)[: int(cfg.max_relevant_players)]
    )
    return [
        TradeOpportunity(
            type=OpportunityType.PICK_ARBITRAGE,
            title="Pick Arbitrage",
            description=(
                f"Rookie fever is running hot ({inflation_pct}% inflation). Your picks are worth more than "
                "usual, consider selling high for proven talent."
            ),
            relevant_players=players,
            confidence=min(70.0, 35 + round_half_up(index * 20)),
            actionable=len(user_picks) > 0,
        )
    ]


def _monitor(
    user_team_id: str,
    user: TeamDecisionProfile,
    ctx: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    cfg: FinderConfig,
    existing_candidate_count: int,
) -> List[TradeOpportunity]:
    watch: List[RelevantPlayer] = []
    for partner_id, _partner in _partners(ctx, user_team_id):
        for a in priced_assets.get(partner_id, ()):
            if a.is_pick or a.value < cfg.monitor_min_value:
                continue
            if a.injury_flag:
                watch.append(
                    RelevantPlayer(
                        name=a.name,
                        position=a.position,
                        value=a.value,
                        reason="Currently injured, value may drop further and open a buy window",
                    )
                )
            if a.position in user.needs and a.tier_weight >= int(cfg.targetable_min_tier):
                watch.append(
                    RelevantPlayer(
                        name=a.name,
                        position=a.position,
                        value=a.value,
                        reason=f"Elite {a.position} that fills your need; watch for their team to start selling",
                    )
                )

    seen = set()
    unique: List[RelevantPlayer] = []
    for p in watch:
        if p.name in seen:
            continue
        seen.add(p.name)
        unique.append(p)
    unique = sorted(unique, key=lambda p: -float(p.value))[: int(cfg.max_relevant_players)]

    if unique:
        if existing_candidate_count == 0:
            desc = "No clean market wins today, but keep these players on your radar. Their situations could shift any week."
        else:
            desc = "Keep these players on your radar for future opportunities."
        return [
            TradeOpportunity(
                type=OpportunityType.MONITOR,
                title="Watch & Wait",
                description=desc,
                relevant_players=tuple(unique),
                confidence=30.0,
                actionable=False,
            )
        ]

    placeholders: Sequence[RelevantPlayer] = [
        RelevantPlayer(
            name=f"Best available {pos}",
            position=pos,
            value=0.0,
            reason=f"You need {pos}; monitor the market for value shifts",
        )
        for pos in user.needs[: int(cfg.max_relevant_players)]
    ]
    if not placeholders:
        placeholders = [
            RelevantPlayer(
                name="League landscape",
                position="ALL",
                value=0.0,
                reason="Monitor for injured starters or bye-week fire sales",
            )
        ]
    return [
        TradeOpportunity(
            type=OpportunityType.MONITOR,
            title="Watch & Wait",
            description="No clear moves right now. Keep watching the market for value shifts.",
            relevant_players=tuple(placeholders),
            confidence=20.0,
            actionable=False,
        )
    ]


# =============================================================================
# Public
# =============================================================================


def generate_fallback_opportunities(
    user_team_id: str,
    ctx: LeagueDecisionContext,
    priced_assets: PricedAssetsByTeam,
    objective: TradeObjective,
    existing_candidate_count: int,
    cfg: Optional[FinderConfig] = None,
) -> List[TradeOpportunity]:
    """Run every fallback check in order. Unknown user -> []."""

    cfg = cfg or FinderConfig()
    user = ctx.teams.get(user_team_id)
    if user is None:
        return []

    out: List[TradeOpportunity] = []
    out.extend(_need_fit(user_team_id, user, ctx, priced_assets, cfg))
    out.extend(_consolidation(user_team_id, ctx, priced_assets, cfg))
    out.extend(_volatility_swap(user_team_id, ctx, priced_assets, cfg))
    out.extend(_pick_arbitrage(user_team_id, ctx, priced_assets, cfg))
    out.extend(_monitor(user_team_id, user, ctx, priced_assets, cfg, existing_candidate_count))

    logger.debug(
        "generate_fallback_opportunities: user=%s objective=%s types=%s",
        user_team_id,
        objective.value,
        [o.type.value for o in out],
    )
    return out
