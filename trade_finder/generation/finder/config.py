from __future__ import annotations

from typing import Any, Union

from ...errors import INVALID_MODE, INVALID_OBJECTIVE, INVALID_PRESET, TradeFinderError
from .types import FinderConfig, FinderMode, FinderModeConfig, FinderPreset, TradeObjective

# =============================================================================
# Mode / enum resolution
# =============================================================================


def resolve_mode_config(cfg: FinderConfig, mode: Union[FinderMode, str]) -> FinderModeConfig:
    """FAST/DEEP -> partner fan-out and result cap, as one struct."""

    m = coerce_mode(mode)
    base = cfg.deep if m == FinderMode.DEEP else cfg.fast

    def _cap(val: int) -> int:
        return max(0, int(val))

    return FinderModeConfig(max_partners=_cap(base.max_partners), max_results=_cap(base.max_results))


def coerce_objective(raw: Any) -> TradeObjective:
    if isinstance(raw, TradeObjective):
        return raw
    try:
        return TradeObjective(str(raw or "").strip().upper())
    except ValueError:
        raise TradeFinderError(
            INVALID_OBJECTIVE,
            "objective must be one of WIN_NOW, REBUILD, BALANCED",
            {"objective": raw},
        ) from None


def coerce_mode(raw: Any) -> FinderMode:
    if isinstance(raw, FinderMode):
        return raw
    try:
        return FinderMode(str(raw or "").strip().upper())
    except ValueError:
        raise TradeFinderError(INVALID_MODE, "mode must be FAST or DEEP", {"mode": raw}) from None


def coerce_preset(raw: Any) -> FinderPreset:
    if raw is None:
        return FinderPreset.NONE
    if isinstance(raw, FinderPreset):
        return raw
    try:
        return FinderPreset(str(raw).strip().upper())
    except ValueError:
        raise TradeFinderError(
            INVALID_PRESET,
            "preset must be one of NONE, TARGET_POSITION, ACQUIRE_PICKS, CONSOLIDATE",
            {"preset": raw},
        ) from None
