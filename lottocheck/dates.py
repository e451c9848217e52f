"""
Date handling for caller input and upstream formats.

Callers always supply MM/DD/YYYY. Mega Millions expects the same text;
Powerball expects YYYY-MM-DD in its URL.
"""

import re
from datetime import date, datetime
from typing import Optional

import pandas as pd
from loguru import logger

from .errors import InvalidDateError
from .games import Game

INPUT_DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
INPUT_DATE_FORMAT = "%m/%d/%Y"

UPSTREAM_DATE_FORMATS = {
    Game.MEGAMILLIONS: "%m/%d/%Y",
    Game.POWERBALL: "%Y-%m-%d",
}

# "Wed, Aug 27, 2025" as shown on powerball.com
DISPLAY_DATE_FORMAT = "%a, %b %d, %Y"


def parse_input_date(text: str) -> date:
    """
    Validate and parse a caller date.

    Args:
        text: Date in MM/DD/YYYY format

    Returns:
        date: the calendar date

    Raises:
        InvalidDateError: pattern mismatch or impossible date (e.g. 13/45/2025)
    """
    if not isinstance(text, str) or not INPUT_DATE_PATTERN.match(text.strip()):
        raise InvalidDateError(f"Invalid date format '{text}'. Please use MM/DD/YYYY format.")
    try:
        return datetime.strptime(text.strip(), INPUT_DATE_FORMAT).date()
    except ValueError as e:
        raise InvalidDateError(f"Invalid date '{text}'. Please use MM/DD/YYYY format. Error: {e}") from e


def to_upstream_date(draw_date: date, game: Game) -> str:
    """Render a date in the text format the game's upstream expects."""
    return draw_date.strftime(UPSTREAM_DATE_FORMATS[Game.parse(game)])


def parse_display_date(text: Optional[str]) -> Optional[date]:
    """Parse a human-readable draw date; None when it cannot be read."""
    if not text:
        return None
    text = " ".join(text.split())
    try:
        parsed = pd.to_datetime(text, format=DISPLAY_DATE_FORMAT)
    except (ValueError, TypeError):
        parsed = pd.to_datetime(text, errors='coerce')

    if pd.isna(parsed):
        logger.debug(f"Cannot parse display date '{text}'")
        return None
    return parsed.date()


def parse_upstream_timestamp(text: Optional[str]) -> Optional[date]:
    """Parse ISO-like upstream timestamps such as '2025-08-19T00:00:00'."""
    if not text:
        return None
    parsed = pd.to_datetime(str(text), errors='coerce')
    if pd.isna(parsed):
        return None
    return parsed.date()
