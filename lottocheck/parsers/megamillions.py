"""
Mega Millions API payload parsing.

The ASMX endpoints wrap their result twice: the HTTP body is a JSON object
whose "d" member is itself a JSON-encoded string.

Paging payload (inner):
{
    "DrawingData": [
        {"PlayDate": "2025-08-19T00:00:00", "PlayDateTicks": 638911584000000000,
         "N1": 3, "N2": 13, "N3": 20, "N4": 32, "N5": 33, "MBall": 21,
         "Megaplier": 3, "UpdatedBy": "SERVICE", "UpdatedTime": "..."}
    ],
    "TotalResults": 1
}

Detail payload (inner):
{"Drawing": {...same fields...}, "Jackpot": <string | number | object>}
"""

import json
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Union

from loguru import logger

from ..errors import MalformedPayloadError
from ..games import CANONICAL_TIERS, MEGAMILLIONS, Tier
from ..models import (
    JackpotValue,
    NumericJackpot,
    PlainJackpot,
    PrizePoolJackpot,
    PrizeTierRow,
    UnknownJackpot,
)
from ..prizes import format_whole_dollars

ENVELOPE_KEY = "d"
PRIZE_POOL_KEY = "CurrentPrizePool"
CASH_VALUE_KEY = "CurrentCashValue"


@dataclass(frozen=True)
class DrawRecord:
    play_date: str
    play_date_ticks: Optional[int]
    numbers: Tuple[int, ...]
    mega_ball: int
    megaplier: Optional[int]
    updated_by: str = ""
    updated_time: str = ""


@dataclass(frozen=True)
class DetailRecord:
    drawing: DrawRecord
    jackpot: JackpotValue


# ============================================================================
# ENVELOPE
# ============================================================================

def unwrap_envelope(payload: Union[str, bytes, dict]) -> Any:
    """
    Unwrap the {"d": "<json string>"} envelope.

    Raises:
        MalformedPayloadError: body is not JSON, lacks "d", or "d" is not JSON
    """
    outer = payload
    if isinstance(payload, (str, bytes)):
        try:
            outer = json.loads(payload)
        except ValueError as e:
            raise MalformedPayloadError(f"Failed to unmarshal outer response: {e}") from e

    if not isinstance(outer, dict) or ENVELOPE_KEY not in outer:
        raise MalformedPayloadError("Outer response has no 'd' member")

    inner = outer[ENVELOPE_KEY]
    if isinstance(inner, str):
        try:
            return json.loads(inner)
        except ValueError as e:
            raise MalformedPayloadError(f"Failed to unmarshal inner response: {e}") from e
    if isinstance(inner, (dict, list)):
        # Some deployments return the object directly
        return inner
    raise MalformedPayloadError(f"Unexpected 'd' member type: {type(inner).__name__}")


# ============================================================================
# DRAW RECORDS
# ============================================================================

def _as_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise MalformedPayloadError(f"Field {field_name} is not a number: {value!r}")
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise MalformedPayloadError(f"Field {field_name} is not a number: {value!r}") from e
    if isinstance(value, float) and value != number:
        raise MalformedPayloadError(f"Field {field_name} is not a whole number: {value!r}")
    return number


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def parse_draw_item(item: Any) -> DrawRecord:
    """Parse one drawing object (paging entry or detail "Drawing")."""
    if not isinstance(item, dict):
        raise MalformedPayloadError(f"Drawing entry is not an object: {type(item).__name__}")

    numbers = tuple(_as_int(item.get(f"N{i}"), f"N{i}") for i in range(1, 6))
    ticks = item.get("PlayDateTicks")

    return DrawRecord(
        play_date=str(item.get("PlayDate") or ""),
        play_date_ticks=_as_int(ticks, "PlayDateTicks") if ticks is not None else None,
        numbers=numbers,
        mega_ball=_as_int(item.get("MBall"), "MBall"),
        megaplier=_optional_int(item.get("Megaplier")),
        updated_by=str(item.get("UpdatedBy") or ""),
        updated_time=str(item.get("UpdatedTime") or ""),
    )


def parse_paging_data(payload: Union[str, bytes, dict]) -> List[DrawRecord]:
    """Parse the date -> drawings response. An empty list means no drawing."""
    inner = unwrap_envelope(payload)
    if not isinstance(inner, dict):
        raise MalformedPayloadError("Drawing paging data is not an object")

    entries = inner.get("DrawingData") or []
    if not isinstance(entries, list):
        raise MalformedPayloadError("DrawingData is not a list")

    records = [parse_draw_item(entry) for entry in entries]
    logger.debug(f"[megamillions] Paging data contained {len(records)} drawing(s)")
    return records


def parse_detail_data(payload: Union[str, bytes, dict]) -> DetailRecord:
    """Parse the ticks -> detailed drawing response."""
    inner = unwrap_envelope(payload)
    if not isinstance(inner, dict):
        raise MalformedPayloadError("Detailed draw data is not an object")
    if "Drawing" not in inner:
        raise MalformedPayloadError("Detailed draw data has no Drawing member")

    return DetailRecord(
        drawing=parse_draw_item(inner["Drawing"]),
        jackpot=classify_jackpot(inner.get("Jackpot")),
    )


# ============================================================================
# JACKPOT
# ============================================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify_jackpot(raw: Any) -> JackpotValue:
    """
    Turn the loosely typed Jackpot field into a closed variant.

    Precedence: object carrying CurrentPrizePool -> number -> string -> unknown.
    """
    if isinstance(raw, dict):
        pool = raw.get(PRIZE_POOL_KEY)
        if _is_number(pool):
            cash = raw.get(CASH_VALUE_KEY)
            return PrizePoolJackpot(prize_pool=float(pool), cash_value=float(cash) if _is_number(cash) else None)
        if isinstance(pool, str) and pool.strip():
            return PlainJackpot(pool.strip())
        return UnknownJackpot()
    if _is_number(raw):
        return NumericJackpot(float(raw))
    if isinstance(raw, str) and raw.strip():
        return PlainJackpot(raw.strip())
    return UnknownJackpot()


def format_amount_bucket(amount: float, million_precision: int = 0) -> str:
    """'$N Million' / '$N Thousand' / '$N' depending on magnitude."""
    if amount >= 1_000_000:
        return f"${amount / 1_000_000:.{million_precision}f} Million"
    if amount >= 1_000:
        return f"${amount / 1_000:.0f} Thousand"
    return f"${amount:.0f}"


def jackpot_display(value: JackpotValue) -> str:
    if isinstance(value, PrizePoolJackpot):
        return format_amount_bucket(value.prize_pool)
    if isinstance(value, NumericJackpot):
        return format_amount_bucket(value.amount)
    if isinstance(value, PlainJackpot):
        return value.text
    return "Unknown"


def cash_value_display(value: JackpotValue) -> str:
    if isinstance(value, PrizePoolJackpot) and value.cash_value is not None:
        return format_amount_bucket(value.cash_value, million_precision=1)
    return ""


def build_prize_tiers(jackpot_text: str) -> Tuple[PrizeTierRow, ...]:
    """Prize table for a draw: the static paytable with the jackpot filled in."""
    rows = []
    for tier in CANONICAL_TIERS:
        if tier is Tier.JACKPOT:
            prize = jackpot_text
        else:
            prize = format_whole_dollars(MEGAMILLIONS.prize_for(tier).amount_cents)
        rows.append(PrizeTierRow(tier=tier, prize=prize))
    return tuple(rows)
