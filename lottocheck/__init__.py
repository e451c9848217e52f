"""
lottocheck - Lottery Drawing Retrieval and Ticket Checking
==========================================================

Fetches Powerball and Mega Millions drawings from their public sources,
normalizes them into a single Drawing record and checks tickets against
the compiled-in prize schedules.
"""

__version__ = "1.0.0"

from .games import Game, Tier, get_game
from .models import Drawing, TicketResult
from .fetchers import fetch_drawing, fetch_prize_info
from .evaluator import check_ticket, check_ticket_for_date
from .prizes import resolve_prize, apply_multiplier

__all__ = [
    "Game",
    "Tier",
    "get_game",
    "Drawing",
    "TicketResult",
    "fetch_drawing",
    "fetch_prize_info",
    "check_ticket",
    "check_ticket_for_date",
    "resolve_prize",
    "apply_multiplier",
]
