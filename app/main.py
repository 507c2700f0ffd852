from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.router import api_router

logger = logging.getLogger(__name__)

app = FastAPI(title="Trade Finder")


@app.on_event("startup")
def _startup_logging() -> None:
    # TRADE_FINDER_LOG_LEVEL=DEBUG surfaces per-request engine summaries
    level = (os.environ.get("TRADE_FINDER_LOG_LEVEL") or "").strip().upper()
    if level:
        logging.getLogger("trade_finder").setLevel(level)
        logger.info("trade_finder log level set to %s", level)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router)
