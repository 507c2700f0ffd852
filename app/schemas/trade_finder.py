from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class _CamelRequest(BaseModel):
    # accept both camelCase (frontend) and snake_case field names
    model_config = ConfigDict(populate_by_name=True)


class TradeFinderRequest(_CamelRequest):
    user_team_id: str = Field(..., alias="userTeamId")
    league_decision_context: Dict[str, Any] = Field(..., alias="leagueDecisionContext")
    priced_assets: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict, alias="pricedAssets")
    objective: str = "BALANCED"
    mode: str = "FAST"
    preset: str = "NONE"
    target_position: Optional[str] = Field(None, alias="targetPosition")


class MatchmakingRequest(_CamelRequest):
    user_team_id: str = Field(..., alias="userTeamId")
    goal: str
    league_intelligence: Dict[str, Any] = Field(..., alias="leagueIntelligence")
    priced_assets: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict, alias="pricedAssets")
    tendencies: Optional[Dict[str, Dict[str, Any]]] = None
    target_player_name: Optional[str] = Field(None, alias="targetPlayerName")
    target_player_id: Optional[str] = Field(None, alias="targetPlayerId")
    max_results: int = Field(5, alias="maxResults", ge=0, le=50)


class AllowedAssetsRequest(_CamelRequest):
    user_team_id: str = Field(..., alias="userTeamId")
    partner_team_id: str = Field(..., alias="partnerTeamId")
    league_decision_context: Dict[str, Any] = Field(..., alias="leagueDecisionContext")
    priced_assets: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict, alias="pricedAssets")
    objective: str = "BALANCED"
    current_year: int = Field(..., alias="currentYear")
    allow_future_firsts: bool = Field(False, alias="allowFutureFirsts")
    core_top_n: int = Field(2, alias="coreTopN", ge=0)
