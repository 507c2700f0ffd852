from fastapi import APIRouter

from app.api.routes import trade_finder

api_router = APIRouter()
api_router.include_router(trade_finder.router)
