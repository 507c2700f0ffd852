from __future__ import annotations

from typing import Iterable, List, Optional, Set

from .types import FinderConfig, FinderStats, TradeCandidate

# =============================================================================
# Dedupe / prune
# =============================================================================


def dedupe_key(candidate: TradeCandidate) -> str:
    """Structural identity: what the requesting team sends and gets, order-free.

    trade_id and archetype are ignored so the same asset swap reached by two
    archetypes only survives once.
    """
    gives = sorted(a.asset_id for a in candidate.team_a.gives)
    receives = sorted(a.asset_id for a in candidate.team_a.receives)
    return ",".join(gives) + "|" + ",".join(receives)


def deduplicate_candidates(
    candidates: Iterable[TradeCandidate],
    stats: Optional[FinderStats] = None,
) -> List[TradeCandidate]:
    """Keep the first candidate for each key (input order decides)."""
    seen: Set[str] = set()
    out: List[TradeCandidate] = []
    for c in candidates:
        key = dedupe_key(c)
        if key in seen:
            if stats is not None:
                stats.duplicates_dropped += 1
            continue
        seen.add(key)
        out.append(c)
    return out


def prune_and_rank(
    candidates: Iterable[TradeCandidate],
    *,
    max_results: int,
    cfg: FinderConfig,
    stats: Optional[FinderStats] = None,
) -> List[TradeCandidate]:
    """Threshold -> dedupe -> stable sort by finderScore desc -> cap."""
    qualified: List[TradeCandidate] = []
    for c in candidates:
        if c.finder_score < int(cfg.score_threshold):
            if stats is not None:
                stats.below_threshold += 1
            continue
        qualified.append(c)

    unique = deduplicate_candidates(qualified, stats)
    ranked = sorted(unique, key=lambda c: -int(c.finder_score))
    return ranked[: max(0, int(max_results))]
