from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .types import FinderPreset, TradeCandidate

logger = logging.getLogger(__name__)


def _non_picks(assets) -> int:
    return sum(1 for a in assets if not a.is_pick)


def _picks(assets) -> int:
    return sum(1 for a in assets if a.is_pick)


def apply_preset(
    candidates: Sequence[TradeCandidate],
    preset: FinderPreset,
    target_position: Optional[str] = None,
) -> List[TradeCandidate]:
    """Post-ranking filter + stable re-sort for a user-chosen focus.

    TARGET_POSITION without a target position leaves the list untouched.
    """
    out = list(candidates)
    if preset == FinderPreset.NONE or not out:
        return out

    if preset == FinderPreset.TARGET_POSITION:
        pos = str(target_position or "").strip().upper()
        if not pos:
            logger.warning("apply_preset: TARGET_POSITION without target_position, preset ignored")
            return out

        def _value_at(c: TradeCandidate) -> float:
            return sum(float(a.value) for a in c.team_a.receives if not a.is_pick and a.position == pos)

        out = [c for c in out if any(not a.is_pick and a.position == pos for a in c.team_a.receives)]
        return sorted(out, key=lambda c: -_value_at(c))

    if preset == FinderPreset.ACQUIRE_PICKS:
        out = [
            c
            for c in out
            if _picks(c.team_a.receives) > 0 and _picks(c.team_a.receives) >= _picks(c.team_a.gives)
        ]
        return sorted(out, key=lambda c: -_picks(c.team_a.receives))

    if preset == FinderPreset.CONSOLIDATE:

        def _spread(c: TradeCandidate) -> int:
            return _non_picks(c.team_a.gives) - _non_picks(c.team_a.receives)

        out = [c for c in out if _spread(c) > 0]
        return sorted(out, key=lambda c: -_spread(c))

    return out
