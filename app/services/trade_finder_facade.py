from __future__ import annotations

import logging

from fastapi.responses import JSONResponse

from trade_finder.errors import TradeFinderError

logger = logging.getLogger(__name__)

NO_CANDIDATES_WITH_OPPORTUNITIES = "No clean market wins today. Best options are below."
NO_CANDIDATES_NO_OPPORTUNITIES = "Your team is well-balanced, no urgent moves needed right now."


def _trade_finder_error_response(error: TradeFinderError) -> JSONResponse:
    logger.info("trade_finder error: code=%s message=%s", error.code, error.message)
    payload = {
        "ok": False,
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details,
        },
    }
    return JSONResponse(status_code=400, content=payload)


def _no_candidates_message(has_opportunities: bool) -> str:
    return NO_CANDIDATES_WITH_OPPORTUNITIES if has_opportunities else NO_CANDIDATES_NO_OPPORTUNITIES
