"""
lottocheck HTTP API
===================

Thin FastAPI surface over the core operations. Request bodies are bound
loosely and passed straight to the core, which owns all validation.
Failures come back as {"success": false, "error": ..., "error_kind": ...}
with 400 (input), 404 (no data) or 502 (upstream) status codes.
"""

from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from . import __version__
from .config import get_settings
from .errors import LotteryError
from .evaluator import check_ticket_for_date
from .fetchers import check_sources_health, fetch_drawing, fetch_prize_info
from .games import get_game
from .logging_config import configure_logging
from .prizes import prize_schedule


class DrawingRequest(BaseModel):
    date: str
    lottery_type: str


class TicketCheckRequest(BaseModel):
    white_ball_numbers: List[Any]
    bonus_number: Any
    multiplier: Optional[Any] = 0
    winning_numbers_date: str


def _respond(result) -> JSONResponse:
    """Serialize a result wrapper, choosing the status code from its error kind."""
    body = result.to_dict()
    if result.success:
        return JSONResponse(status_code=200, content=body)
    status_code = result.error_kind.http_status if result.error_kind else 500
    return JSONResponse(status_code=status_code, content=body)


def _error_response(error: LotteryError) -> JSONResponse:
    return JSONResponse(
        status_code=error.kind.http_status,
        content={
            "success": False,
            "error": error.message,
            "error_kind": error.kind.value,
            "error_category": error.category.value,
        },
    )


lottery_router = APIRouter(prefix="/api/v1/lottery", tags=["lottery"])


@lottery_router.get("/sources/health")
def sources_health():
    """Reachability of both upstream sources"""
    sources = check_sources_health()
    return {
        "status": "healthy" if all(sources.values()) else "degraded",
        "sources": sources,
        "timestamp": datetime.now().isoformat(),
    }


@lottery_router.post("/winning-numbers")
def winning_numbers(request: DrawingRequest):
    """Winning numbers for a date (MM/DD/YYYY) and lottery type"""
    logger.info(f"Winning numbers request: {request.lottery_type} {request.date}")
    return _respond(fetch_drawing(request.date, request.lottery_type))


@lottery_router.post("/prize-amounts")
def prize_amounts(request: DrawingRequest):
    """Estimated jackpot, cash value and prize tiers for a date and lottery type"""
    logger.info(f"Prize amounts request: {request.lottery_type} {request.date}")
    return _respond(fetch_prize_info(request.date, request.lottery_type))


@lottery_router.get("/{game}/prize-schedule")
def get_prize_schedule(game: str):
    """Static paytable with multiplied amounts"""
    try:
        definition = get_game(game)
    except LotteryError as e:
        return _error_response(e)

    return {
        "success": True,
        "game": definition.game.value,
        "bonus_name": definition.bonus_name,
        "multiplier_name": definition.multiplier_name,
        "legal_multipliers": list(definition.legal_multipliers),
        "tiers": prize_schedule(definition),
    }


@lottery_router.post("/{game}/check-ticket")
def check_ticket_endpoint(game: str, request: TicketCheckRequest):
    """Check a ticket against the drawing for a date"""
    logger.info(f"Ticket check request: {game} {request.winning_numbers_date}")
    result = check_ticket_for_date(
        request.winning_numbers_date,
        game,
        request.white_ball_numbers,
        request.bonus_number,
        request.multiplier,
    )
    return _respond(result)


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Initializing FastAPI application...")
    application = FastAPI(
        title="lottocheck",
        description="Lottery drawing lookup and ticket checking for Powerball and Mega Millions.",
        version=__version__,
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @application.get("/health")
    def health():
        """Simple health check"""
        return {"status": "ok", "version": __version__}

    application.include_router(lottery_router)
    return application


app = create_app()
