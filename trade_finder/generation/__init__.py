"""Trade candidate generation.

The finder engine lives under ``trade_finder.generation.finder``;
``candidate_generator`` re-exports its public surface.
"""

from .candidate_generator import (
    CandidateGeneratorOutput,
    FinderConfig,
    FinderMode,
    FinderModeConfig,
    FinderPreset,
    TradeArchetype,
    TradeCandidate,
    TradeObjective,
    TradeOpportunity,
    generate_trade_candidates,
)

__all__ = [
    "CandidateGeneratorOutput",
    "FinderConfig",
    "FinderMode",
    "FinderModeConfig",
    "FinderPreset",
    "TradeArchetype",
    "TradeCandidate",
    "TradeObjective",
    "TradeOpportunity",
    "generate_trade_candidates",
]
