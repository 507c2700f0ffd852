"""
Tests for config defaults and enum coercion.
"""

import pytest

from trade_finder.errors import INVALID_MODE, INVALID_PRESET, TradeFinderError
from trade_finder.generation.finder.config import coerce_mode, coerce_objective, coerce_preset, resolve_mode_config
from trade_finder.generation.finder.types import FinderConfig, FinderMode, FinderPreset, TradeObjective
from trade_finder.matchmaking import MatchmakingConfig


def test_finder_defaults():
    cfg = FinderConfig()
    assert cfg.min_partner_fit == 40.0
    assert cfg.fairness_window == 0.25
    assert cfg.score_threshold == 55
    assert (
        cfg.w_starter_upgrade,
        cfg.w_objective_alignment,
        cfg.w_value_fairness,
        cfg.w_roster_fit,
        cfg.w_scarcity_bonus,
    ) == (0.35, 0.25, 0.20, 0.10, 0.10)


def test_matchmaking_weights_sum_to_one():
    cfg = MatchmakingConfig()
    total = (
        cfg.w_need_overlap
        + cfg.w_target_availability
        + cfg.w_bias_alignment
        + cfg.w_trade_frequency
        + cfg.w_overpay_willingness
    )
    assert total == pytest.approx(1.0)


@pytest.mark.parametrize("mode, partners, results", [("FAST", 5, 8), ("DEEP", 12, 15), (FinderMode.DEEP, 12, 15)])
def test_mode_config(mode, partners, results):
    m = resolve_mode_config(FinderConfig(), mode)
    assert (m.max_partners, m.max_results) == (partners, results)


def test_coercion():
    assert coerce_objective(" win_now ") == TradeObjective.WIN_NOW
    assert coerce_mode("deep") == FinderMode.DEEP
    assert coerce_preset(None) == FinderPreset.NONE
    assert coerce_preset("consolidate") == FinderPreset.CONSOLIDATE


def test_coercion_errors():
    with pytest.raises(TradeFinderError) as exc:
        coerce_mode(None)
    assert exc.value.code == INVALID_MODE
    with pytest.raises(TradeFinderError) as exc:
        coerce_preset("ALL_IN")
    assert exc.value.code == INVALID_PRESET
