"""
Data model: drawings, tickets, results and upstream value types.

Every record is a frozen dataclass created once and never mutated.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Union

from .errors import ErrorKind, LotteryError, MalformedPayloadError
from .games import GAMES, Game, Tier
from .prizes import format_cents


# ============================================================================
# DRAWING
# ============================================================================

@dataclass(frozen=True)
class Drawing:
    """One normalized lottery result for a date and game."""
    game: Game
    draw_date: date
    numbers: Tuple[int, ...]
    bonus: int
    provenance: str
    retrieved_at: datetime = field(default_factory=datetime.now)
    multiplier: Optional[int] = None
    jackpot: Optional[str] = None

    def __post_init__(self):
        definition = GAMES[Game.parse(self.game)]
        object.__setattr__(self, "game", definition.game)

        try:
            numbers = tuple(sorted(int(n) for n in self.numbers))
            bonus = int(self.bonus)
        except (TypeError, ValueError) as e:
            raise MalformedPayloadError(f"Drawing numbers are not integers: {e}") from e

        if len(numbers) != definition.primary_count or len(set(numbers)) != len(numbers):
            raise MalformedPayloadError(
                f"Drawing must have {definition.primary_count} distinct numbers, got: {list(numbers)}"
            )
        out_of_range = [n for n in numbers if not 1 <= n <= definition.primary_max]
        if out_of_range:
            raise MalformedPayloadError(
                f"Drawing numbers must be between 1 and {definition.primary_max}, got: {out_of_range}"
            )
        if not 1 <= bonus <= definition.bonus_max:
            raise MalformedPayloadError(
                f"{definition.bonus_name} must be between 1 and {definition.bonus_max}, got: {bonus}"
            )

        multiplier = self.multiplier
        if multiplier is not None and int(multiplier) <= 0:
            multiplier = None

        object.__setattr__(self, "numbers", numbers)
        object.__setattr__(self, "bonus", bonus)
        object.__setattr__(self, "multiplier", int(multiplier) if multiplier is not None else None)

    def to_dict(self) -> Dict[str, Any]:
        definition = GAMES[self.game]
        return {
            "game": self.game.value,
            "draw_date": self.draw_date.isoformat(),
            "numbers": list(self.numbers),
            "bonus": self.bonus,
            "bonus_name": definition.bonus_name,
            "multiplier": self.multiplier,
            "multiplier_name": definition.multiplier_name,
            "jackpot": self.jackpot,
            "provenance": self.provenance,
            "retrieved_at": self.retrieved_at.isoformat(timespec="seconds"),
        }


# ============================================================================
# TICKETS
# ============================================================================

@dataclass(frozen=True)
class Ticket:
    game: Game
    numbers: Tuple[int, ...]
    bonus: int
    multiplier: int = 0


@dataclass(frozen=True)
class TicketResult:
    game: Game
    match_count: int
    bonus_match: bool
    tier: Tier
    prize_description: str
    base_amount_cents: int
    requested_multiplier: int
    multiplier: int
    total_amount_cents: int
    total_display: str
    is_winner: bool

    @property
    def is_jackpot(self) -> bool:
        return self.tier is Tier.JACKPOT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game": self.game.value,
            "match_count": self.match_count,
            "bonus_match": self.bonus_match,
            "tier": self.tier.code,
            "prize_description": self.prize_description,
            "base_amount_cents": self.base_amount_cents,
            "base_prize": format_cents(self.base_amount_cents),
            "requested_multiplier": self.requested_multiplier,
            "multiplier": self.multiplier,
            "total_amount_cents": self.total_amount_cents,
            "total_prize": self.total_display,
            "is_jackpot": self.is_jackpot,
            "is_winner": self.is_winner,
        }


# ============================================================================
# JACKPOT VALUE (upstream field of varying shape)
# ============================================================================

@dataclass(frozen=True)
class PrizePoolJackpot:
    prize_pool: float
    cash_value: Optional[float] = None


@dataclass(frozen=True)
class NumericJackpot:
    amount: float


@dataclass(frozen=True)
class PlainJackpot:
    text: str


@dataclass(frozen=True)
class UnknownJackpot:
    pass


JackpotValue = Union[PrizePoolJackpot, NumericJackpot, PlainJackpot, UnknownJackpot]


# ============================================================================
# PRIZE INFORMATION
# ============================================================================

@dataclass(frozen=True)
class PrizeTierRow:
    """One row of a prize table as published for a draw."""
    tier: Optional[Tier]
    winners: int = 0
    prize: str = ""
    multiplier_winners: int = 0
    multiplier_prize: str = ""
    position_mismatch: bool = False

    @property
    def match(self) -> str:
        if self.tier is None:
            return "Unknown Match"
        if self.tier is Tier.JACKPOT:
            return "5+1 (Jackpot)"
        return self.tier.code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match": self.match,
            "winners": self.winners,
            "prize": self.prize,
            "multiplier_winners": self.multiplier_winners,
            "multiplier_prize": self.multiplier_prize,
            "position_mismatch": self.position_mismatch,
        }


@dataclass(frozen=True)
class PrizeInfo:
    game: Game
    draw_date: date
    estimated_jackpot: str
    cash_value: str
    tiers: Tuple[PrizeTierRow, ...]
    provenance: str
    retrieved_at: datetime = field(default_factory=datetime.now)
    placeholder_tiers: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game": self.game.value,
            "draw_date": self.draw_date.isoformat(),
            "estimated_jackpot": self.estimated_jackpot,
            "cash_value": self.cash_value,
            "prize_tiers": [row.to_dict() for row in self.tiers],
            "placeholder_tiers": self.placeholder_tiers,
            "provenance": self.provenance,
            "retrieved_at": self.retrieved_at.isoformat(timespec="seconds"),
        }


# ============================================================================
# RESULT WRAPPERS (errors as values)
# ============================================================================

def _error_fields(kind: Optional[ErrorKind], message: Optional[str]) -> Dict[str, Any]:
    return {
        "error_kind": kind.value if kind else None,
        "error_category": kind.category.value if kind else None,
        "error": message,
    }


@dataclass(frozen=True)
class FetchResult:
    success: bool
    game: str
    date: str
    drawing: Optional[Drawing] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, game: str, date_text: str, drawing: Drawing) -> "FetchResult":
        return cls(success=True, game=game, date=date_text, drawing=drawing)

    @classmethod
    def failure(cls, game: str, date_text: str, error: LotteryError) -> "FetchResult":
        return cls(success=False, game=game, date=date_text, error_kind=error.kind, error=error.message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": self.success,
            "game": self.game,
            "date": self.date,
            "drawing": self.drawing.to_dict() if self.drawing else None,
        }
        result.update(_error_fields(self.error_kind, self.error))
        return result


@dataclass(frozen=True)
class PrizeInfoResult:
    success: bool
    game: str
    date: str
    prize_info: Optional[PrizeInfo] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, game: str, date_text: str, prize_info: PrizeInfo) -> "PrizeInfoResult":
        return cls(success=True, game=game, date=date_text, prize_info=prize_info)

    @classmethod
    def failure(cls, game: str, date_text: str, error: LotteryError) -> "PrizeInfoResult":
        return cls(success=False, game=game, date=date_text, error_kind=error.kind, error=error.message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": self.success,
            "game": self.game,
            "date": self.date,
            "prize_info": self.prize_info.to_dict() if self.prize_info else None,
        }
        result.update(_error_fields(self.error_kind, self.error))
        return result


@dataclass(frozen=True)
class TicketCheckResult:
    success: bool
    result: Optional[TicketResult] = None
    drawing: Optional[Drawing] = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, result: TicketResult, drawing: Optional[Drawing] = None) -> "TicketCheckResult":
        return cls(success=True, result=result, drawing=drawing)

    @classmethod
    def failure(cls, error: LotteryError) -> "TicketCheckResult":
        return cls(success=False, error_kind=error.kind, error=error.message)

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "success": self.success,
            "result": self.result.to_dict() if self.result else None,
            "drawing": self.drawing.to_dict() if self.drawing else None,
        }
        result.update(_error_fields(self.error_kind, self.error))
        return result
