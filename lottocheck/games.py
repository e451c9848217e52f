"""
Game Definitions
================

Static, compiled-in configuration for the supported lotteries: number
ranges, paytables and multiplier rules. Nothing here is mutated at
runtime.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, NamedTuple, Optional, Tuple, Union

from .errors import InvalidTicketError, UnsupportedGameError


class Game(str, Enum):
    POWERBALL = "powerball"
    MEGAMILLIONS = "megamillions"

    @classmethod
    def parse(cls, value: Union[str, "Game"]) -> "Game":
        """Case-insensitive lookup; raises UnsupportedGameError."""
        if isinstance(value, Game):
            return value
        key = str(value or "").strip().lower().replace(" ", "").replace("_", "")
        for game in cls:
            if game.value == key:
                return game
        supported = ", ".join(sorted(g.value for g in cls))
        raise UnsupportedGameError(
            f"Unsupported lottery type '{value}'. Currently supports: {supported}"
        )


class Tier(Enum):
    """The nine canonical prize tiers, in table order, plus NO_PRIZE."""
    JACKPOT = ("5+1", 5, True)
    MATCH_5 = ("5+0", 5, False)
    MATCH_4_BONUS = ("4+1", 4, True)
    MATCH_4 = ("4+0", 4, False)
    MATCH_3_BONUS = ("3+1", 3, True)
    MATCH_3 = ("3+0", 3, False)
    MATCH_2_BONUS = ("2+1", 2, True)
    MATCH_1_BONUS = ("1+1", 1, True)
    BONUS_ONLY = ("0+1", 0, True)
    NO_PRIZE = ("none", None, None)

    def __init__(self, code: str, match_count: Optional[int], bonus_match: Optional[bool]):
        self.code = code
        self.match_count = match_count
        self.bonus_match = bonus_match

    @classmethod
    def lookup(cls, match_count: int, bonus_match: bool) -> "Tier":
        """Map any of the 12 (match_count, bonus_match) keys to a tier."""
        if not isinstance(match_count, int) or isinstance(match_count, bool) or not 0 <= match_count <= 5:
            raise InvalidTicketError(f"Match count must be between 0 and 5, got: {match_count!r}")
        for tier in CANONICAL_TIERS:
            if tier.match_count == match_count and tier.bonus_match == bool(bonus_match):
                return tier
        return cls.NO_PRIZE

    @classmethod
    def from_code(cls, code: str) -> Optional["Tier"]:
        for tier in cls:
            if tier.code == code:
                return tier
        return None


CANONICAL_TIERS: Tuple[Tier, ...] = tuple(t for t in Tier if t is not Tier.NO_PRIZE)


class MultiplierRule(str, Enum):
    UNIFORM = "uniform"        # every multiplier scales every tier
    CAPPED_TOP = "capped_top"  # top multiplier drops to fallback at/above a threshold


class PrizeSpec(NamedTuple):
    description: str
    amount_cents: int


@dataclass(frozen=True)
class GameDefinition:
    game: Game
    display_name: str
    bonus_name: str
    multiplier_name: str
    primary_max: int
    bonus_max: int
    paytable: Mapping[Tier, PrizeSpec]
    legal_multipliers: Tuple[int, ...] = (0, 2, 3, 4, 5, 10)
    multiplier_rule: MultiplierRule = MultiplierRule.UNIFORM
    cap_threshold_cents: Optional[int] = None
    cap_fallback_multiplier: Optional[int] = None
    primary_count: int = 5

    @property
    def top_multiplier(self) -> int:
        return max(self.legal_multipliers)

    def prize_for(self, tier: Tier) -> PrizeSpec:
        return self.paytable[tier]


def _dollars(amount: int) -> int:
    return amount * 100


def _paytable(bonus_name: str, amounts: Dict[Tier, int]) -> Mapping[Tier, PrizeSpec]:
    descriptions = {
        Tier.JACKPOT: "Jackpot",
        Tier.MATCH_5: "Match 5",
        Tier.MATCH_4_BONUS: f"Match 4 + {bonus_name}",
        Tier.MATCH_4: "Match 4",
        Tier.MATCH_3_BONUS: f"Match 3 + {bonus_name}",
        Tier.MATCH_3: "Match 3",
        Tier.MATCH_2_BONUS: f"Match 2 + {bonus_name}",
        Tier.MATCH_1_BONUS: f"Match 1 + {bonus_name}",
        Tier.BONUS_ONLY: f"{bonus_name} Only",
        Tier.NO_PRIZE: "No Prize",
    }
    table = {tier: PrizeSpec(descriptions[tier], amounts.get(tier, 0)) for tier in Tier}
    return MappingProxyType(table)


# Power Play: 10x on the $1,000,000 Match 5 prize pays 2x
POWER_PLAY_CAP_THRESHOLD_CENTS = _dollars(1_000_000)

POWERBALL = GameDefinition(
    game=Game.POWERBALL,
    display_name="Powerball",
    bonus_name="Powerball",
    multiplier_name="Power Play",
    primary_max=69,
    bonus_max=26,
    paytable=_paytable("Powerball", {
        Tier.MATCH_5: _dollars(1_000_000),
        Tier.MATCH_4_BONUS: _dollars(50_000),
        Tier.MATCH_4: _dollars(100),
        Tier.MATCH_3_BONUS: _dollars(100),
        Tier.MATCH_3: _dollars(7),
        Tier.MATCH_2_BONUS: _dollars(7),
        Tier.MATCH_1_BONUS: _dollars(4),
        Tier.BONUS_ONLY: _dollars(4),
    }),
    multiplier_rule=MultiplierRule.CAPPED_TOP,
    cap_threshold_cents=POWER_PLAY_CAP_THRESHOLD_CENTS,
    cap_fallback_multiplier=2,
)

MEGAMILLIONS = GameDefinition(
    game=Game.MEGAMILLIONS,
    display_name="Mega Millions",
    bonus_name="Mega Ball",
    multiplier_name="Megaplier",
    primary_max=70,
    bonus_max=25,
    paytable=_paytable("Mega Ball", {
        Tier.MATCH_5: _dollars(1_000_000),
        Tier.MATCH_4_BONUS: _dollars(10_000),
        Tier.MATCH_4: _dollars(500),
        Tier.MATCH_3_BONUS: _dollars(200),
        Tier.MATCH_3: _dollars(10),
        Tier.MATCH_2_BONUS: _dollars(10),
        Tier.MATCH_1_BONUS: _dollars(4),
        Tier.BONUS_ONLY: _dollars(2),
    }),
    multiplier_rule=MultiplierRule.UNIFORM,
)

GAMES: Mapping[Game, GameDefinition] = MappingProxyType({
    Game.POWERBALL: POWERBALL,
    Game.MEGAMILLIONS: MEGAMILLIONS,
})


def get_game(game: Union[str, Game]) -> GameDefinition:
    """Resolve a game tag (enum or text) to its definition."""
    return GAMES[Game.parse(game)]
