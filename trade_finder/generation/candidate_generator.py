from __future__ import annotations

"""trade_finder.generation.candidate_generator

Thin wrapper; implementation lives under trade_finder.generation.finder.
"""

from .finder.core import generate_trade_candidates, select_partners
from .finder.types import (
    CandidateGeneratorOutput,
    FinderConfig,
    FinderMode,
    FinderModeConfig,
    FinderPreset,
    FinderStats,
    TradeArchetype,
    TradeCandidate,
    TradeObjective,
    TradeOpportunity,
    serialize_candidate,
    serialize_finder_output,
    serialize_opportunity,
)

__all__ = [
    "generate_trade_candidates",
    "select_partners",
    "CandidateGeneratorOutput",
    "FinderConfig",
    "FinderMode",
    "FinderModeConfig",
    "FinderPreset",
    "FinderStats",
    "TradeArchetype",
    "TradeCandidate",
    "TradeObjective",
    "TradeOpportunity",
    "serialize_candidate",
    "serialize_finder_output",
    "serialize_opportunity",
]
