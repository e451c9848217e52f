"""
Prize Engine
============

Pure functions mapping (match count, bonus match, multiplier) to a prize
tier and amount for each supported game. All amounts are integer cents.

Rules:
- The jackpot tier reports the externally supplied display value as its
  description and a base amount of 0 (the amount varies per draw).
- Powerball (Power Play): the 10x multiplier pays 2x on prizes of
  $1,000,000 and above. Every other multiplier is a straight product.
- Mega Millions (Megaplier): every multiplier scales every tier.
- Multiplier 0 / None means no multiplier was purchased.
"""

from typing import Dict, List, Optional, Tuple, Union

from .errors import InvalidTicketError
from .games import CANONICAL_TIERS, Game, GameDefinition, MultiplierRule, Tier, get_game

GameLike = Union[str, Game, GameDefinition]


def _definition(game: GameLike) -> GameDefinition:
    if isinstance(game, GameDefinition):
        return game
    return get_game(game)


def format_cents(cents: int) -> str:
    """Render integer cents as '$1,234.56'."""
    sign = "-" if cents < 0 else ""
    dollars, remainder = divmod(abs(int(cents)), 100)
    return f"{sign}${dollars:,}.{remainder:02d}"


def format_whole_dollars(cents: int) -> str:
    """Render integer cents as '$1,234' (paytable style, cents dropped)."""
    return f"${int(cents) // 100:,}"


def resolve_prize(match_count: int, bonus_match: bool, game: GameLike,
                  jackpot_display: Optional[str] = None) -> Tuple[str, int]:
    """
    Resolve the prize tier for a match combination.

    Args:
        match_count: Number of primary numbers matched (0-5)
        bonus_match: Whether the bonus number matched
        game: Game tag or definition
        jackpot_display: Display value used as the jackpot description

    Returns:
        Tuple of (prize_description, base_amount_cents)
    """
    definition = _definition(game)
    tier = Tier.lookup(match_count, bonus_match)
    spec = definition.prize_for(tier)

    if tier is Tier.JACKPOT:
        return (jackpot_display or spec.description, 0)
    return (spec.description, spec.amount_cents)


def normalize_multiplier(multiplier: Optional[int], game: GameLike) -> int:
    """Validate a requested multiplier; 0/None means none purchased."""
    definition = _definition(game)
    if multiplier is None:
        return 0
    if isinstance(multiplier, bool) or not isinstance(multiplier, int):
        raise InvalidTicketError(f"{definition.multiplier_name} multiplier must be an integer, got: {multiplier!r}")
    if multiplier not in definition.legal_multipliers:
        legal = ", ".join(str(m) for m in definition.legal_multipliers)
        raise InvalidTicketError(f"{definition.multiplier_name} multiplier must be one of {legal}, got: {multiplier}")
    return multiplier


def effective_multiplier(base_amount_cents: int, multiplier: Optional[int], game: GameLike) -> int:
    """The factor actually applied to the base amount (1 when none purchased)."""
    definition = _definition(game)
    requested = normalize_multiplier(multiplier, definition)
    if requested == 0:
        return 1

    if (definition.multiplier_rule is MultiplierRule.CAPPED_TOP
            and requested == definition.top_multiplier
            and base_amount_cents >= definition.cap_threshold_cents):
        return definition.cap_fallback_multiplier
    return requested


def apply_multiplier(base_amount_cents: int, multiplier: Optional[int], game: GameLike) -> Tuple[str, int]:
    """
    Apply a stake multiplier under the game's rule.

    Returns:
        Tuple of (formatted_amount, adjusted_amount_cents)
    """
    factor = effective_multiplier(base_amount_cents, multiplier, game)
    adjusted = base_amount_cents * factor
    return (format_cents(adjusted), adjusted)


def prize_schedule(game: GameLike) -> List[Dict]:
    """
    Static paytable with the multiplied amount for every legal multiplier.

    Returns:
        List of tier dictionaries in canonical order
    """
    definition = _definition(game)
    schedule = []
    for tier in CANONICAL_TIERS:
        spec = definition.prize_for(tier)
        entry = {
            "match": tier.code,
            "description": spec.description,
            "prize": "Jackpot (varies)" if tier is Tier.JACKPOT else format_whole_dollars(spec.amount_cents),
            "amount_cents": spec.amount_cents,
            "multiplied": {},
        }
        for multiplier in definition.legal_multipliers:
            if multiplier == 0:
                continue
            if tier is Tier.JACKPOT:
                entry["multiplied"][f"{multiplier}x"] = "Jackpot"
                continue
            factor = effective_multiplier(spec.amount_cents, multiplier, definition)
            entry["multiplied"][f"{multiplier}x"] = format_whole_dollars(spec.amount_cents * factor)
        schedule.append(entry)
    return schedule
