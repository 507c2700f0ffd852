"""
Tests for structural dedupe and threshold/rank/cap pruning.
"""

import pytest

from trade_finder.generation.finder.dedupe import dedupe_key, deduplicate_candidates, prune_and_rank
from trade_finder.generation.finder.types import (
    FinderConfig,
    FinderStats,
    ScoreBreakdown,
    TradeArchetype,
    TradeCandidate,
    make_raw_candidate,
)


@pytest.fixture
def cand(make_asset):
    def _cand(trade_id, score, gives, receives, archetype=TradeArchetype.POSITIONAL_SWAP):
        raw = make_raw_candidate(
            trade_id,
            user_team_id="U",
            partner_team_id="P",
            user_gives=[make_asset(g, 1000) for g in gives],
            user_receives=[make_asset(r, 1000) for r in receives],
            archetype=archetype,
            why=[],
            value_delta_pct=0,
        )
        return TradeCandidate(
            trade_id=raw.trade_id,
            team_a=raw.team_a,
            team_b=raw.team_b,
            archetype=raw.archetype,
            finder_score=score,
            value_delta_pct=0,
            score_breakdown=ScoreBreakdown(),
            why_this_exists=raw.why_this_exists,
        )

    return _cand


def test_key_is_order_insensitive(cand):
    a = cand("a", 60, ["x", "y"], ["z"])
    b = cand("b", 60, ["y", "x"], ["z"], TradeArchetype.CONSOLIDATION)
    assert dedupe_key(a) == dedupe_key(b) == "x,y|z"


def test_first_occurrence_wins(cand):
    stats = FinderStats()
    a = cand("a", 60, ["x"], ["z"])
    b = cand("b", 90, ["x"], ["z"])
    out = deduplicate_candidates([a, b], stats)
    assert [c.trade_id for c in out] == ["a"]
    assert stats.duplicates_dropped == 1


def test_direction_matters(cand):
    a = cand("a", 60, ["x"], ["z"])
    b = cand("b", 60, ["z"], ["x"])
    assert len(deduplicate_candidates([a, b])) == 2


def test_threshold_is_inclusive(cand):
    stats = FinderStats()
    keep = cand("keep", 55, ["a"], ["b"])
    drop = cand("drop", 54, ["c"], ["d"])
    out = prune_and_rank([keep, drop], max_results=8, cfg=FinderConfig(), stats=stats)
    assert [c.trade_id for c in out] == ["keep"]
    assert stats.below_threshold == 1


def test_rank_is_stable_and_capped(cand):
    cands = [
        cand("c1", 70, ["a1"], ["b1"]),
        cand("c2", 90, ["a2"], ["b2"]),
        cand("c3", 70, ["a3"], ["b3"]),
        cand("c4", 80, ["a4"], ["b4"]),
    ]
    out = prune_and_rank(cands, max_results=3, cfg=FinderConfig())
    assert [c.trade_id for c in out] == ["c2", "c4", "c1"]


def test_dedupe_runs_before_ranking(cand):
    low_first = cand("low", 60, ["x"], ["z"])
    high_dup = cand("high", 95, ["x"], ["z"])
    out = prune_and_rank([low_first, high_dup], max_results=8, cfg=FinderConfig())
    assert [c.trade_id for c in out] == ["low"]
