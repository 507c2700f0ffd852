from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import APIRouter

from trade_finder.allowed_assets import build_allowed_assets, serialize_allowed_assets
from trade_finder.errors import INVALID_INPUT, TradeFinderError
from trade_finder.generation.candidate_generator import generate_trade_candidates, serialize_finder_output
from trade_finder.matchmaking import (
    find_best_partners,
    parse_league_intelligence,
    parse_tendencies,
    serialize_matchmaking_output,
)
from trade_finder.models import parse_league_decision_context, parse_priced_assets
from trade_finder.negotiation import build_scarcity_notes
from app.schemas.trade_finder import AllowedAssetsRequest, MatchmakingRequest, TradeFinderRequest
from app.services.trade_finder_facade import _no_candidates_message, _trade_finder_error_response

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/trade-finder")
async def api_trade_finder(req: TradeFinderRequest):
    try:
        ctx = parse_league_decision_context(req.league_decision_context)
        priced = parse_priced_assets(req.priced_assets)
        out = generate_trade_candidates(
            req.user_team_id,
            ctx,
            priced,
            req.objective,
            req.mode,
            preset=req.preset,
            target_position=req.target_position,
        )
        payload: Dict[str, Any] = serialize_finder_output(out)
        meta: Dict[str, Any] = {
            "scarcityNotes": build_scarcity_notes(ctx.market.scarcity_by_position),
            "hasOpportunities": len(out.opportunities) > 0,
        }
        if not out.candidates:
            meta["message"] = _no_candidates_message(len(out.opportunities) > 0)
        return {"ok": True, **payload, "meta": meta}
    except TradeFinderError as exc:
        return _trade_finder_error_response(exc)


@router.post("/api/trade-finder/matchmaking")
async def api_trade_finder_matchmaking(req: MatchmakingRequest):
    try:
        out = find_best_partners(
            req.user_team_id,
            req.goal,
            parse_league_intelligence(req.league_intelligence),
            parse_priced_assets(req.priced_assets),
            parse_tendencies(req.tendencies),
            target_player_name=req.target_player_name,
            target_player_id=req.target_player_id,
            max_results=req.max_results,
        )
        return {"ok": True, **serialize_matchmaking_output(out)}
    except TradeFinderError as exc:
        return _trade_finder_error_response(exc)


@router.post("/api/trade-finder/allowed-assets")
async def api_trade_finder_allowed_assets(req: AllowedAssetsRequest):
    try:
        ctx = parse_league_decision_context(req.league_decision_context)
        priced = parse_priced_assets(req.priced_assets)
        user_team = ctx.teams.get(req.user_team_id)
        partner_team = ctx.teams.get(req.partner_team_id)
        if user_team is None or partner_team is None:
            raise TradeFinderError(
                INVALID_INPUT,
                "user and partner teams must both be present in leagueDecisionContext.teams",
                {"userTeamId": req.user_team_id, "partnerTeamId": req.partner_team_id},
            )
        res = build_allowed_assets(
            req.objective,
            user_team,
            partner_team,
            priced.get(req.user_team_id, []),
            priced.get(req.partner_team_id, []),
            current_year=req.current_year,
            allow_future_firsts=req.allow_future_firsts,
            core_top_n=req.core_top_n,
        )
        return {"ok": True, **serialize_allowed_assets(res)}
    except TradeFinderError as exc:
        return _trade_finder_error_response(exc)
