"""Trade finder: candidate generation, scoring and partner matchmaking.

Pure, deterministic, request-scoped. Callers pass parsed snapshots (see
``trade_finder.models``) and get frozen dataclasses back; the ``serialize_*``
helpers turn those into camelCase payloads.
"""

from .allowed_assets import AllowedAssetsResult, build_allowed_assets, serialize_allowed_assets
from .errors import TradeFinderError
from .generation.candidate_generator import (
    CandidateGeneratorOutput,
    FinderConfig,
    FinderMode,
    FinderPreset,
    TradeArchetype,
    TradeCandidate,
    TradeObjective,
    TradeOpportunity,
    generate_trade_candidates,
    serialize_finder_output,
)
from .matchmaking import (
    MatchmakingConfig,
    MatchmakingGoal,
    MatchmakingOutput,
    find_best_partners,
    parse_league_intelligence,
    parse_tendencies,
    serialize_matchmaking_output,
)
from .models import (
    LeagueDecisionContext,
    PricedAsset,
    TeamDecisionProfile,
    parse_league_decision_context,
    parse_priced_assets,
)
from .negotiation import build_label_to_id_map, build_scarcity_notes, resolve_asset_id

__all__ = [
    "AllowedAssetsResult",
    "build_allowed_assets",
    "serialize_allowed_assets",
    "TradeFinderError",
    "CandidateGeneratorOutput",
    "FinderConfig",
    "FinderMode",
    "FinderPreset",
    "TradeArchetype",
    "TradeCandidate",
    "TradeObjective",
    "TradeOpportunity",
    "generate_trade_candidates",
    "serialize_finder_output",
    "MatchmakingConfig",
    "MatchmakingGoal",
    "MatchmakingOutput",
    "find_best_partners",
    "parse_league_intelligence",
    "parse_tendencies",
    "serialize_matchmaking_output",
    "LeagueDecisionContext",
    "PricedAsset",
    "TeamDecisionProfile",
    "parse_league_decision_context",
    "parse_priced_assets",
    "build_label_to_id_map",
    "build_scarcity_notes",
    "resolve_asset_id",
]
