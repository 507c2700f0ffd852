from __future__ import annotations

from typing import List, Mapping, Optional, Sequence, Tuple

from ..models import PricedAsset, round_half_up
from .types import GoalConfig, ManagerProfile, MatchmakingConfig, OfferAsset, OfferSkeleton

# =============================================================================
# Target lookup
# =============================================================================


def find_target_player(
    priced_assets: Mapping[str, Sequence[PricedAsset]],
    target_name: Optional[str] = None,
    target_id: Optional[str] = None,
) -> Optional[Tuple[str, PricedAsset]]:
    """(owner_team_id, asset) for a named target.

    Exact id or case-insensitive exact name wins in a single pass over every
    team; a case-insensitive substring match is only tried afterwards.
    """
    name = (target_name or "").strip().lower()
    tid = (target_id or "").strip()
    if not name and not tid:
        return None

    for owner_id, assets in priced_assets.items():
        for a in assets:
            if tid and a.asset_id == tid:
                return owner_id, a
            if name and a.name.lower() == name:
                return owner_id, a

    if name:
        for owner_id, assets in priced_assets.items():
            for a in assets:
                if name in a.name.lower():
                    return owner_id, a
    return None


# =============================================================================
# Offer skeleton
# =============================================================================


def _to_offer_asset(a: PricedAsset) -> OfferAsset:
    return OfferAsset(
        asset_id=a.asset_id,
        name=a.name,
        value=float(a.value),
        position=a.position,
        is_pick=bool(a.is_pick),
    )


def _partner_side(
    partner_assets: Sequence[PricedAsset],
    goal: GoalConfig,
    target: Optional[PricedAsset],
) -> Optional[PricedAsset]:
    if target is not None:
        for a in partner_assets:
            if a.asset_id == target.asset_id:
                return a

    if goal.pick_focus:
        pool = [a for a in partner_assets if a.is_pick and a.value >= goal.min_value]
    else:
        pool = [
            a
            for a in partner_assets
            if not a.is_pick and a.position in goal.target_positions and a.value >= goal.min_value
        ]
    pool = sorted(pool, key=lambda a: -float(a.value))
    return pool[0] if pool else None


def offer_pool(
    user_assets: Sequence[PricedAsset],
    partner: ManagerProfile,
    cfg: MatchmakingConfig,
) -> List[PricedAsset]:
    """User assets that can go into a suggested offer, highest value first."""
    out: List[PricedAsset] = []
    for a in user_assets:
        if a.value < cfg.offer_value_floor:
            continue
        if a.is_starter and a.value >= cfg.offer_untouchable_starter_value:
            continue
        if (not a.is_pick and a.position in partner.needs) or a.is_pick:
            out.append(a)
        elif not a.is_starter and a.value >= cfg.offer_bench_value_floor:
            out.append(a)
    return sorted(out, key=lambda a: -float(a.value))


def build_offer_skeleton(
    user_assets: Sequence[PricedAsset],
    partner_assets: Sequence[PricedAsset],
    partner: ManagerProfile,
    goal: GoalConfig,
    cfg: MatchmakingConfig,
    target: Optional[PricedAsset] = None,
) -> Optional[OfferSkeleton]:
    """One concrete opener per partner, or None when nothing lines up."""

    asked = _partner_side(partner_assets, goal, target)
    if asked is None or float(asked.value) <= 0:
        return None
    t_val = float(asked.value)
    pool = offer_pool(user_assets, partner, cfg)

    best: List[PricedAsset] = []
    best_delta = float("inf")
    for a in pool:
        delta = abs(float(a.value) - t_val)
        if delta < best_delta and delta / t_val <= cfg.offer_single_window:
            best = [a]
            best_delta = delta

    if not best:
        bundle: List[PricedAsset] = []
        total = 0.0
        for a in pool:
            if a.value >= t_val:
                continue
            if len(bundle) >= int(cfg.offer_max_pieces):
                break
            bundle.append(a)
            total += float(a.value)
            if total >= t_val * cfg.offer_stop_ratio:
                break
        if bundle and t_val * cfg.offer_min_ratio <= total <= t_val * cfg.offer_max_ratio:
            best = bundle

    if not best:
        return None

    user_total = sum(float(a.value) for a in best)
    fairness = round_half_up((t_val - user_total) / user_total * 100) if user_total > 0 else 0
    return OfferSkeleton(
        user_gives=tuple(_to_offer_asset(a) for a in best),
        partner_gives=(_to_offer_asset(asked),),
        fairness_pct=int(fairness),
    )
