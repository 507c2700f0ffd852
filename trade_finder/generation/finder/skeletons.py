from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from ...models import PricedAsset, TeamDecisionProfile, round_half_up
from .assets import (
    build_value_match,
    by_value_desc,
    find_closest_value,
    pct_delta,
    within_fairness_window,
)
from .types import FinderConfig, RawCandidate, TradeArchetype, TradeObjective, make_raw_candidate


# =============================================================================
# Per-partner context
# =============================================================================


@dataclass(frozen=True, slots=True)
class PartnerSkeletonContext:
    """Everything an archetype generator needs for one (user, partner) pair."""

    user_team_id: str
    partner_team_id: str
    user_profile: TeamDecisionProfile
    partner_profile: TeamDecisionProfile
    user_tradable: Tuple[PricedAsset, ...]
    partner_targetable: Tuple[PricedAsset, ...]
    objective: TradeObjective
    config: FinderConfig


def _age(a: PricedAsset, cfg: FinderConfig) -> float:
    return a.age_or(cfg.default_age)


def _is_future(a: PricedAsset, cfg: FinderConfig) -> bool:
    return a.is_pick or _age(a, cfg) <= cfg.young_max_age


# =============================================================================
# Archetypes
# =============================================================================


def build_positional_swaps(ctx: PartnerSkeletonContext) -> List[RawCandidate]:
    """1-for-1 where each side sends from a surplus into the other's need."""

    cfg = ctx.config
    user = ctx.user_profile
    partner = ctx.partner_profile
    out: List[RawCandidate] = []

    for user_need in user.needs:
        if user_need not in partner.surpluses:
            continue
        partner_at_need = by_value_desc(
            a for a in ctx.partner_targetable if not a.is_pick and a.position == user_need
        )
        if not partner_at_need:
            continue
        best_partner = partner_at_need[0]

        for partner_need in partner.needs:
            if partner_need not in user.surpluses:
                continue
            user_for_them = [a for a in ctx.user_tradable if not a.is_pick and a.position == partner_need]
            best_user = find_closest_value(user_for_them, best_partner.value)
            if best_user is None:
                continue
            if best_user.value > 0 and not within_fairness_window(best_partner.value, best_user.value, cfg):
                continue

            out.append(
                make_raw_candidate(
                    f"swap_{ctx.user_team_id}_{ctx.partner_team_id}_{user_need}_{partner_need}",
                    user_team_id=ctx.user_team_id,
                    partner_team_id=ctx.partner_team_id,
                    user_gives=[best_user],
                    user_receives=[best_partner],
                    archetype=TradeArchetype.POSITIONAL_SWAP,
                    why=["SURPLUS_MATCH", f"USER_NEEDS_{user_need}", f"PARTNER_NEEDS_{partner_need}"],
                    value_delta_pct=round_half_up(pct_delta(best_partner.value, best_user.value)),
                )
            )
    return out


def build_consolidations(ctx: PartnerSkeletonContext) -> List[RawCandidate]:
    """2-3 mid-tier user pieces for one of the partner's high-end assets."""

    cfg = ctx.config
    out: List[RawCandidate] = []

    targets = by_value_desc(
        a
        for a in ctx.partner_targetable
        if not a.is_pick and a.tier_weight >= int(cfg.consolidation_target_min_tier)
    )[: int(cfg.consolidation_max_targets)]

    for target in targets:
        t_val = float(target.value)
        pieces = by_value_desc(
            a
            for a in ctx.user_tradable
            if not a.is_pick and a.value < t_val and a.tier_weight <= int(cfg.consolidation_piece_max_tier)
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
            if t_val * cfg.bundle_stop_ratio <= total <= t_val * cfg.bundle_stop_ceiling_ratio:
                break

        if len(bundle) < 2:
            continue
        if total < t_val * cfg.bundle_min_ratio or total > t_val * cfg.bundle_max_ratio:
            continue
        # gap measured against what the user sends
        if not within_fairness_window(t_val, total, cfg):
            continue

        out.append(
            make_raw_candidate(
                f"consol_{ctx.user_team_id}_{ctx.partner_team_id}_{target.asset_id}",
                user_team_id=ctx.user_team_id,
                partner_team_id=ctx.partner_team_id,
                user_gives=bundle,
                user_receives=[target],
                archetype=TradeArchetype.CONSOLIDATION,
                why=["STARTER_UPGRADE", f"CONSOLIDATION_{len(bundle)}_FOR_1"],
                value_delta_pct=round_half_up(pct_delta(t_val, total)),
            )
        )
    return out


def build_pick_for_player(ctx: PartnerSkeletonContext) -> List[RawCandidate]:
    """Buy producers with picks (WIN_NOW/BALANCED), sell vets for picks (REBUILD/BALANCED)."""

    cfg = ctx.config
    obj = ctx.objective
    out: List[RawCandidate] = []

    if obj in (TradeObjective.WIN_NOW, TradeObjective.BALANCED):
        user_picks = [a for a in ctx.user_tradable if a.is_pick and a.value >= cfg.pick_for_player_min_pick_value]
        partner_players = by_value_desc(
            a
            for a in ctx.partner_targetable
            if not a.is_pick and a.tier_weight >= int(cfg.pick_for_player_target_min_tier)
        )[: int(cfg.pick_for_player_max_targets)]

        for player in partner_players:
            pick = find_closest_value(user_picks, player.value)
            if pick is None:
                continue
            if pick.value > 0 and not within_fairness_window(player.value, pick.value, cfg):
                continue
            out.append(
                make_raw_candidate(
                    f"p4p_buy_{ctx.user_team_id}_{ctx.partner_team_id}_{player.asset_id}",
                    user_team_id=ctx.user_team_id,
                    partner_team_id=ctx.partner_team_id,
                    user_gives=[pick],
                    user_receives=[player],
                    archetype=TradeArchetype.PICK_FOR_PLAYER,
                    why=["BUY_PRODUCER", f"PICK_{pick.pick_round}_FOR_{player.position}"],
                    value_delta_pct=round_half_up(pct_delta(player.value, pick.value)),
                )
            )

    if obj in (TradeObjective.REBUILD, TradeObjective.BALANCED):
        user_vets = by_value_desc(
            a
            for a in ctx.user_tradable
            if not a.is_pick and _age(a, cfg) >= cfg.vet_min_age and a.value >= cfg.vet_min_value
        )[: int(cfg.vet_max_count)]
        partner_picks = [
            a for a in ctx.partner_targetable if a.is_pick and a.value >= cfg.pick_for_player_min_pick_value
        ]

        for vet in user_vets:
            pick = find_closest_value(partner_picks, vet.value)
            if pick is None:
                continue
            if vet.value > 0 and not within_fairness_window(pick.value, vet.value, cfg):
                continue
            out.append(
                make_raw_candidate(
                    f"p4p_sell_{ctx.user_team_id}_{ctx.partner_team_id}_{vet.asset_id}",
                    user_team_id=ctx.user_team_id,
                    partner_team_id=ctx.partner_team_id,
                    user_gives=[vet],
                    user_receives=[pick],
                    archetype=TradeArchetype.PICK_FOR_PLAYER,
                    why=["SELL_AGING_PRODUCER", f"VET_{vet.position}_FOR_PICK"],
                    value_delta_pct=round_half_up(pct_delta(pick.value, vet.value)),
                )
            )

    return out


def build_window_arbitrage(ctx: PartnerSkeletonContext) -> List[RawCandidate]:
    """Contender buys the rebuilder's aging producers with future assets."""

    cfg = ctx.config
    user_window = ctx.user_profile.competitive_window
    partner_window = ctx.partner_profile.competitive_window
    if {user_window, partner_window} != {"WIN_NOW", "REBUILD"}:
        return []

    def _producers(pool: Sequence[PricedAsset]) -> List[PricedAsset]:
        return by_value_desc(
            a
            for a in pool
            if not a.is_pick
            and a.tier_weight >= int(cfg.arbitrage_producer_min_tier)
            and _age(a, cfg) >= cfg.arbitrage_producer_min_age
        )[: int(cfg.arbitrage_max_producers)]

    out: List[RawCandidate] = []
    if user_window == "WIN_NOW":
        future = by_value_desc(a for a in ctx.user_tradable if _is_future(a, cfg))
        for producer in _producers(ctx.partner_targetable):
            match = build_value_match(future, producer.value, cfg)
            if match is None:
                continue
            out.append(
                make_raw_candidate(
                    f"arb_wn_{ctx.user_team_id}_{ctx.partner_team_id}_{producer.asset_id}",
                    user_team_id=ctx.user_team_id,
                    partner_team_id=ctx.partner_team_id,
                    user_gives=match,
                    user_receives=[producer],
                    archetype=TradeArchetype.WINDOW_ARBITRAGE,
                    why=["WINDOW_MISMATCH", "CONTENDER_BUYS_PRODUCER", "REBUILDER_GETS_FUTURE"],
                    value_delta_pct=0,
                )
            )
    else:
        future = by_value_desc(a for a in ctx.partner_targetable if _is_future(a, cfg))
        for producer in _producers(ctx.user_tradable):
            match = build_value_match(future, producer.value, cfg)
            if match is None:
                continue
            out.append(
                make_raw_candidate(
                    f"arb_rb_{ctx.user_team_id}_{ctx.partner_team_id}_{producer.asset_id}",
                    user_team_id=ctx.user_team_id,
                    partner_team_id=ctx.partner_team_id,
                    user_gives=[producer],
                    user_receives=match,
                    archetype=TradeArchetype.WINDOW_ARBITRAGE,
                    why=["WINDOW_MISMATCH", "REBUILDER_SELLS_VET", "CONTENDER_GETS_PRODUCER"],
                    value_delta_pct=0,
                )
            )
    return out


def build_injury_discounts(ctx: PartnerSkeletonContext) -> List[RawCandidate]:
    """Buy injured producers at a discount to their listed value."""

    cfg = ctx.config
    out: List[RawCandidate] = []
    injured = [
        a
        for a in ctx.partner_targetable
        if not a.is_pick and a.injury_flag and a.tier_weight >= int(cfg.injury_min_tier)
    ]
    for inj in injured:
        offer = find_closest_value(ctx.user_tradable, float(inj.value) * cfg.injury_discount)
        if offer is None:
            continue
        out.append(
            make_raw_candidate(
                f"inj_{ctx.user_team_id}_{ctx.partner_team_id}_{inj.asset_id}",
                user_team_id=ctx.user_team_id,
                partner_team_id=ctx.partner_team_id,
                user_gives=[offer],
                user_receives=[inj],
                archetype=TradeArchetype.INJURY_DISCOUNT,
                why=["INJURY_BUY_LOW", f"{inj.position}_DISCOUNT"],
                value_delta_pct=round_half_up(pct_delta(inj.value, offer.value)),
            )
        )
    return out


# Fixed order: raw candidate order (and therefore dedupe winners) depends on it.
ARCHETYPE_GENERATORS: Tuple[Tuple[TradeArchetype, Callable[[PartnerSkeletonContext], List[RawCandidate]]], ...] = (
    (TradeArchetype.POSITIONAL_SWAP, build_positional_swaps),
    (TradeArchetype.CONSOLIDATION, build_consolidations),
    (TradeArchetype.PICK_FOR_PLAYER, build_pick_for_player),
    (TradeArchetype.WINDOW_ARBITRAGE, build_window_arbitrage),
    (TradeArchetype.INJURY_DISCOUNT, build_injury_discounts),
)
