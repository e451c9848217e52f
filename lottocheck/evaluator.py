"""
Ticket Evaluator
================

Compares a player's ticket against a Drawing and resolves the prize through
the prize engine. check_ticket is pure and raises InvalidTicketError;
evaluate_ticket and check_ticket_for_date return TicketCheckResult values.
"""

from typing import Iterable, Optional, Union

from loguru import logger

from .config import get_settings
from .errors import InvalidTicketError, LotteryError
from .fetchers import fetch_drawing
from .games import Game, Tier, get_game
from .models import Drawing, Ticket, TicketCheckResult, TicketResult
from .prizes import apply_multiplier, effective_multiplier, normalize_multiplier, resolve_prize


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_ticket(numbers: Iterable[int], bonus: int, multiplier: Optional[int],
                    game: Union[str, Game]) -> Ticket:
    """
    Validate a ticket for a game. Malformed tickets are rejected, never repaired.

    Raises:
        InvalidTicketError: wrong count, duplicates, out of range values or
            an illegal multiplier
        UnsupportedGameError: unknown game tag
    """
    definition = get_game(game)

    if numbers is None or isinstance(numbers, (str, bytes)):
        raise InvalidTicketError(f"Ticket must have exactly {definition.primary_count} numbers")
    numbers = list(numbers)

    if len(numbers) != definition.primary_count:
        raise InvalidTicketError(
            f"Ticket must have exactly {definition.primary_count} numbers, got {len(numbers)}"
        )
    if not all(_is_int(n) for n in numbers):
        raise InvalidTicketError(f"Ticket numbers must be integers, got: {numbers}")
    if len(set(numbers)) != len(numbers):
        raise InvalidTicketError(f"Ticket numbers must be unique, got: {numbers}")

    out_of_range = [n for n in numbers if not 1 <= n <= definition.primary_max]
    if out_of_range:
        raise InvalidTicketError(
            f"Ticket numbers must be between 1 and {definition.primary_max}, got: {out_of_range}"
        )

    if not _is_int(bonus):
        raise InvalidTicketError(f"{definition.bonus_name} must be an integer, got: {bonus!r}")
    if not 1 <= bonus <= definition.bonus_max:
        raise InvalidTicketError(
            f"{definition.bonus_name} must be between 1 and {definition.bonus_max}, got: {bonus}"
        )

    return Ticket(
        game=definition.game,
        numbers=tuple(sorted(numbers)),
        bonus=bonus,
        multiplier=normalize_multiplier(multiplier, definition),
    )


def check_ticket(numbers: Iterable[int], bonus: int, drawing: Drawing, multiplier: Optional[int] = 0,
                 jackpot_display: Optional[str] = None) -> TicketResult:
    """
    Evaluate a ticket against a drawing.

    Args:
        numbers: The 5 primary numbers on the ticket
        bonus: The ticket's bonus number
        drawing: Drawing to compare against (its game decides the paytable)
        multiplier: Requested stake multiplier, 0 for none
        jackpot_display: Jackpot description for a jackpot hit; defaults to
            the drawing's jackpot, then "Jackpot"

    Returns:
        TicketResult

    Raises:
        InvalidTicketError: ticket fails validation for the drawing's game
    """
    ticket = validate_ticket(numbers, bonus, multiplier, drawing.game)
    definition = get_game(drawing.game)

    match_count = len(set(ticket.numbers) & set(drawing.numbers))
    bonus_match = ticket.bonus == drawing.bonus
    tier = Tier.lookup(match_count, bonus_match)

    description, base_cents = resolve_prize(
        match_count, bonus_match, definition, jackpot_display or drawing.jackpot
    )
    total_display, total_cents = apply_multiplier(base_cents, ticket.multiplier, definition)
    applied = effective_multiplier(base_cents, ticket.multiplier, definition) if ticket.multiplier else 0

    if tier is Tier.JACKPOT:
        total_display = description

    return TicketResult(
        game=definition.game,
        match_count=match_count,
        bonus_match=bonus_match,
        tier=tier,
        prize_description=description,
        base_amount_cents=base_cents,
        requested_multiplier=ticket.multiplier,
        multiplier=applied,
        total_amount_cents=total_cents,
        total_display=total_display,
        is_winner=base_cents > 0 or tier is Tier.JACKPOT,
    )


def evaluate_ticket(numbers: Iterable[int], bonus: int, drawing: Drawing, multiplier: Optional[int] = 0,
                    jackpot_display: Optional[str] = None) -> TicketCheckResult:
    """check_ticket with validation errors returned as a value."""
    try:
        result = check_ticket(numbers, bonus, drawing, multiplier, jackpot_display)
    except LotteryError as e:
        logger.warning(f"Ticket rejected: {e.message}")
        return TicketCheckResult.failure(e)
    return TicketCheckResult.ok(result, drawing)


def check_ticket_for_date(date_text: str, game: Union[str, Game], numbers: Iterable[int], bonus: int,
                          multiplier: Optional[int] = 0) -> TicketCheckResult:
    """
    Fetch the drawing for a date and check a ticket against it.

    The ticket is validated first so a malformed ticket never causes an
    upstream call.
    """
    try:
        ticket = validate_ticket(numbers, bonus, multiplier, game)
    except LotteryError as e:
        logger.warning(f"Ticket rejected before lookup: {e.message}")
        return TicketCheckResult.failure(e)

    fetched = fetch_drawing(date_text, game)
    if not fetched.success:
        return TicketCheckResult(success=False, error_kind=fetched.error_kind, error=fetched.error)

    drawing = fetched.drawing
    jackpot = drawing.jackpot or get_settings().default_jackpot_display
    outcome = evaluate_ticket(ticket.numbers, ticket.bonus, drawing, ticket.multiplier, jackpot)

    if outcome.success:
        result = outcome.result
        logger.info(
            f"🎟️ [{drawing.game.value}] {date_text}: {result.match_count} matched, "
            f"bonus {'hit' if result.bonus_match else 'miss'} -> {result.prize_description} ({result.total_display})"
        )
    return outcome
