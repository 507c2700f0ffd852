from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ...models import PricedAsset
from .types import FinderConfig, TradeObjective

# =============================================================================
# Asset filter
# =============================================================================


def is_core_locked(asset: PricedAsset, cfg: Optional[FinderConfig] = None) -> bool:
    """Starters at Cornerstone or better never leave the roster."""
    cfg = cfg or FinderConfig()
    return bool(asset.is_starter) and asset.tier_weight >= int(cfg.core_locked_min_tier)


def get_tradable_assets(
    assets: Sequence[PricedAsset],
    objective: TradeObjective,
    surpluses: Iterable[str],
    needs: Iterable[str],
    cfg: Optional[FinderConfig] = None,
) -> List[PricedAsset]:
    """Subset of the requesting team's assets it is willing to send.

    `needs` is accepted for symmetry with the targetable filter; tradability is
    driven by surpluses, starter status and tier only.
    """
    cfg = cfg or FinderConfig()
    surplus_set = {str(p).upper() for p in surpluses}
    out: List[PricedAsset] = []
    for a in assets:
        if is_core_locked(a, cfg):
            continue
        if a.value < cfg.tradable_value_floor:
            continue

        if a.is_pick:
            # Rebuilders keep their firsts.
            if objective == TradeObjective.REBUILD and a.pick_round == 1:
                continue
            out.append(a)
            continue

        if a.position in surplus_set:
            out.append(a)
        elif not a.is_starter and a.value >= cfg.bench_value_floor:
            out.append(a)
        elif a.is_starter and a.tier_weight <= int(cfg.replaceable_starter_max_tier):
            out.append(a)
    return out


def get_targetable_assets(
    assets: Sequence[PricedAsset],
    user_needs: Iterable[str],
    cfg: Optional[FinderConfig] = None,
) -> List[PricedAsset]:
    """Subset of a partner's assets worth asking for."""
    cfg = cfg or FinderConfig()
    need_set = {str(p).upper() for p in user_needs}
    out: List[PricedAsset] = []
    for a in assets:
        if a.value < cfg.targetable_value_floor:
            continue
        if a.is_pick or a.position in need_set or a.tier_weight >= int(cfg.targetable_min_tier):
            out.append(a)
    return out


# =============================================================================
# Value matching
# =============================================================================


def by_value_desc(assets: Iterable[PricedAsset]) -> List[PricedAsset]:
    # stable: equal values keep input order
    return sorted(assets, key=lambda a: -float(a.value))


def find_closest_value(assets: Sequence[PricedAsset], target_value: float) -> Optional[PricedAsset]:
    """Asset whose value is nearest to target; ties go to the earliest asset."""
    best: Optional[PricedAsset] = None
    best_delta = float("inf")
    for a in assets:
        delta = abs(float(a.value) - float(target_value))
        if delta < best_delta:
            best_delta = delta
            best = a
    return best


def within_fairness_window(value: float, reference: float, cfg: Optional[FinderConfig] = None) -> bool:
    """|value - reference| / reference <= fairness window (reference <= 0 passes)."""
    cfg = cfg or FinderConfig()
    ref = float(reference)
    if ref <= 0:
        return True
    return abs(float(value) - ref) / ref <= float(cfg.fairness_window)


def pct_delta(value: float, reference: float) -> float:
    ref = float(reference)
    if ref <= 0:
        return 0.0
    return (float(value) - ref) / ref * 100.0


def build_value_match(
    pool: Sequence[PricedAsset],
    target_value: float,
    cfg: Optional[FinderConfig] = None,
) -> Optional[List[PricedAsset]]:
    """Assets from `pool` roughly worth `target_value`.

    A single asset inside the fairness window always wins, even when a bundle
    would land closer. Otherwise the highest-value assets are stacked (up to
    bundle_max_pieces) until they reach bundle_stop_ratio of the target, and
    the bundle is accepted only inside [bundle_min_ratio, bundle_max_ratio].
    """
    cfg = cfg or FinderConfig()
    target = float(target_value)
    if target <= 0 or not pool:
        return None

    single = find_closest_value(pool, target)
    if single is not None and abs(float(single.value) - target) / target <= cfg.fairness_window:
        return [single]

    bundle: List[PricedAsset] = []
    total = 0.0
    for a in by_value_desc(pool):
        if len(bundle) >= int(cfg.bundle_max_pieces):
            break
        bundle.append(a)
        total += float(a.value)
        if total >= target * cfg.bundle_stop_ratio:
            break

    if bundle and target * cfg.bundle_min_ratio <= total <= target * cfg.bundle_max_ratio:
        return bundle
    return None
