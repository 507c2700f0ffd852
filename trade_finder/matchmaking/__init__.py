"""Goal-driven partner matchmaking."""

from .core import find_best_partners
from .offers import build_offer_skeleton, find_target_player
from .scoring import build_tendency_insights, estimate_accept_probability
from .types import (
    GOAL_CONFIGS,
    GoalConfig,
    LeagueIntelligence,
    ManagerProfile,
    ManagerTendencyProfile,
    MatchmakingConfig,
    MatchmakingGoal,
    MatchmakingOutput,
    OfferSkeleton,
    PartnerMatch,
    parse_league_intelligence,
    parse_tendencies,
    serialize_matchmaking_output,
)

__all__ = [
    "find_best_partners",
    "build_offer_skeleton",
    "find_target_player",
    "build_tendency_insights",
    "estimate_accept_probability",
    "GOAL_CONFIGS",
    "GoalConfig",
    "LeagueIntelligence",
    "ManagerProfile",
    "ManagerTendencyProfile",
    "MatchmakingConfig",
    "MatchmakingGoal",
    "MatchmakingOutput",
    "OfferSkeleton",
    "PartnerMatch",
    "parse_league_intelligence",
    "parse_tendencies",
    "serialize_matchmaking_output",
]
