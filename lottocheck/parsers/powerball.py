"""
Powerball draw-result page parsing.

The page is scraped, so every extraction is tolerant of markup drift:
- winning numbers use the stable item-powerball classes, with a looser
  selector as fallback
- the prize table is read from data-label cells first, then from a
  positional regex over table rows, and finally replaced with the
  canonical nine-row table when nothing can be read
"""

import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from loguru import logger

from ..dates import parse_display_date
from ..errors import NoDrawingError
from ..games import CANONICAL_TIERS, POWERBALL, Tier
from ..models import PrizeTierRow
from ..prizes import apply_multiplier, format_whole_dollars

WHITE_BALL_SELECTORS = (
    "div.form-control.col.white-balls.item-powerball",
    "div.white-balls.item-powerball",
    "div.white-balls",
)
POWERBALL_SELECTORS = (
    "div.form-control.col.powerball.item-powerball",
    "div.powerball.item-powerball",
)

MULTIPLIER_PATTERN = re.compile(r"(\d+)\s*x", re.IGNORECASE)
MATCH_CLASS_PATTERN = re.compile(r"^m([0-5])(-pb)?$")

JACKPOT_PATTERNS = (
    re.compile(r'<span class="prize-label">\s*Estimated Jackpot:\s*</span>\s*<span>([^<]+)</span>'),
    re.compile(r'Estimated Jackpot[^<]*<[^>]*>([^<]+)</[^>]*>'),
    re.compile(r'Jackpot[^<]*<[^>]*>([^<]+)</[^>]*>'),
    re.compile(r'(\$[\d,]+(?:\.\d{2})?\s*[Mm]illion)'),
)
CASH_VALUE_PATTERNS = (
    re.compile(r'<span class="prize-label">\s*Cash Value:\s*</span>\s*<span>([^<]+)</span>'),
    re.compile(r'Cash Value[^<]*<[^>]*>([^<]+)</[^>]*>'),
    re.compile(r'Cash[^<]*<[^>]*>([^<]+)</[^>]*>'),
)

ROW_PATTERN = re.compile(r"<tr[^>]*>(.*?)</tr>", re.IGNORECASE | re.DOTALL)
TAG_PATTERN = re.compile(r"<[^>]+>")
TOKEN_PATTERN = re.compile(r"Grand Prize|\$[\d,]+(?:\.\d{2})?|\b\d[\d,]*\b")

LABEL_MATCH = "Match"
LABEL_WINNERS = "Powerball Winners"
LABEL_PRIZE = "Powerball Prize"
LABEL_PP_WINNERS = "Power Play Winners"
LABEL_PP_PRIZE = "Power Play Prize"

GRAND_PRIZE = "Grand Prize"

PLACEHOLDER_POWER_PLAY = 2


@dataclass(frozen=True)
class ScrapedDraw:
    numbers: Tuple[int, ...]
    powerball: int
    multiplier: Optional[int]
    draw_date: Optional[date]
    date_text: str = ""


@dataclass(frozen=True)
class RawTierRow:
    css_tier: Optional[Tier]
    winners: int
    prize: str
    multiplier_winners: int
    multiplier_prize: str


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def _int_text(text: Optional[str]) -> Optional[int]:
    text = (text or "").strip().replace(",", "")
    return int(text) if text.isdigit() else None


# ============================================================================
# WINNING NUMBERS
# ============================================================================

def _white_balls(soup: BeautifulSoup) -> List[int]:
    best: List[int] = []
    for selector in WHITE_BALL_SELECTORS:
        values = [_int_text(el.get_text(strip=True)) for el in soup.select(selector)]
        values = [v for v in values if v is not None]
        if len(values) >= 5:
            return values[:5]
        if len(values) > len(best):
            best = values
    return best


def _powerball(soup: BeautifulSoup) -> Optional[int]:
    for selector in POWERBALL_SELECTORS:
        element = soup.select_one(selector)
        if element is not None:
            value = _int_text(element.get_text(strip=True))
            if value is not None:
                return value
    return None


def parse_multiplier(soup: BeautifulSoup) -> Optional[int]:
    element = soup.select_one("span.multiplier")
    if element is None:
        return None
    match = MULTIPLIER_PATTERN.search(element.get_text(strip=True))
    return int(match.group(1)) if match else None


def _draw_date(soup: BeautifulSoup) -> Tuple[Optional[date], str]:
    date_elem = soup.select_one("h5.title-date")
    date_text = date_elem.get_text(strip=True) if date_elem else ""
    draw_date = parse_display_date(date_text)
    if draw_date is None:
        logger.warning(f"🌐 [powerball] Draw date missing or unreadable ('{date_text}')")
    return draw_date, date_text


def parse_draw_date(html: str) -> Optional[date]:
    """Draw date shown on the page ('Wed, Aug 27, 2025'), or None."""
    return _draw_date(_soup(html))[0]


def parse_winning_numbers(html: str) -> ScrapedDraw:
    """
    Extract the drawing from a draw-result page.

    White balls and the Powerball are mandatory; the Power Play multiplier
    and the draw date are optional and come back as None when absent.

    Raises:
        NoDrawingError: fewer than 5 white balls or no Powerball
    """
    soup = _soup(html)

    white_balls = _white_balls(soup)
    if len(white_balls) < 5:
        raise NoDrawingError(f"Could not find all 5 white ball numbers, found {len(white_balls)}")

    powerball = _powerball(soup)
    if powerball is None:
        raise NoDrawingError("Could not find Powerball number")

    multiplier = parse_multiplier(soup)
    if multiplier is None:
        logger.info("🌐 [powerball] Power Play multiplier not shown on page")

    draw_date, date_text = _draw_date(soup)

    return ScrapedDraw(
        numbers=tuple(white_balls),
        powerball=powerball,
        multiplier=multiplier,
        draw_date=draw_date,
        date_text=date_text,
    )


# ============================================================================
# JACKPOT TEXT
# ============================================================================

def _first_match(html: str, patterns) -> str:
    for pattern in patterns:
        match = pattern.search(html or "")
        if match:
            value = match.group(1).strip()
            if value:
                return value
    return ""


def parse_jackpot_text(html: str) -> Tuple[str, str]:
    """Returns (estimated_jackpot, cash_value); empty strings when absent."""
    return _first_match(html, JACKPOT_PATTERNS), _first_match(html, CASH_VALUE_PATTERNS)


# ============================================================================
# PRIZE TABLE
# ============================================================================

def _tier_from_classes(cell) -> Optional[Tier]:
    for element in [cell] + cell.find_all(True):
        for css_class in element.get("class") or []:
            match = MATCH_CLASS_PATTERN.match(css_class)
            if match:
                return Tier.lookup(int(match.group(1)), bool(match.group(2)))
    return None


def _structured_rows(soup: BeautifulSoup) -> List[RawTierRow]:
    """Strategy 1: rows whose cells carry data-label attributes."""
    rows = []
    for tr in soup.find_all("tr"):
        cells = {td.get("data-label", "").strip(): td for td in tr.find_all("td", attrs={"data-label": True})}
        if LABEL_MATCH not in cells or LABEL_PRIZE not in cells:
            continue

        def text(label: str) -> str:
            cell = cells.get(label)
            return cell.get_text(" ", strip=True) if cell is not None else ""

        rows.append(RawTierRow(
            css_tier=_tier_from_classes(cells[LABEL_MATCH]),
            winners=_int_text(text(LABEL_WINNERS)) or 0,
            prize=text(LABEL_PRIZE),
            multiplier_winners=_int_text(text(LABEL_PP_WINNERS)) or 0,
            multiplier_prize=text(LABEL_PP_PRIZE),
        ))
    return rows


def _is_prize_token(token: str) -> bool:
    return token.startswith("$") or token == GRAND_PRIZE


def _positional_rows(html: str) -> List[RawTierRow]:
    """Strategy 2: number/amount runs read positionally from each <tr>."""
    rows = []
    for row_html in ROW_PATTERN.findall(html or ""):
        text = " ".join(TAG_PATTERN.sub(" ", row_html).split())
        tokens = TOKEN_PATTERN.findall(text)
        if not any(_is_prize_token(t) for t in tokens):
            continue

        winners = multiplier_winners = 0
        prize = multiplier_prize = ""
        for token in tokens:
            if _is_prize_token(token):
                if not prize:
                    prize = token
                elif not multiplier_prize:
                    multiplier_prize = token
            elif not prize:
                winners = _int_text(token) or 0
            else:
                multiplier_winners = _int_text(token) or 0

        rows.append(RawTierRow(
            css_tier=None,
            winners=winners,
            prize=prize,
            multiplier_winners=multiplier_winners,
            multiplier_prize=multiplier_prize,
        ))
    return rows


def _prize_candidates() -> Dict[str, Tuple[Tier, ...]]:
    candidates = defaultdict(list)
    candidates[GRAND_PRIZE].append(Tier.JACKPOT)
    for tier in CANONICAL_TIERS:
        if tier is Tier.JACKPOT:
            continue
        candidates[format_whole_dollars(POWERBALL.prize_for(tier).amount_cents)].append(tier)
    return {prize: tuple(tiers) for prize, tiers in candidates.items()}


PRIZE_CANDIDATES = _prize_candidates()


def _normalize_prize(prize: str) -> str:
    prize = prize.strip()
    if prize.endswith(".00"):
        prize = prize[:-3]
    return prize


def assign_tiers(raw_rows: List[RawTierRow]) -> List[PrizeTierRow]:
    """
    Attach a canonical tier to each raw row.

    A CSS match class wins when present. Otherwise the tier is inferred from
    the displayed prize; amounts shared by two tiers ($100, $7, $4) are
    resolved by table position, falling back to the first candidate not
    already taken. Rows whose tier disagrees with the canonical order are
    flagged.
    """
    rows = []
    taken = set()

    for position, raw in enumerate(raw_rows):
        positional = CANONICAL_TIERS[position] if position < len(CANONICAL_TIERS) else None
        candidates = PRIZE_CANDIDATES.get(_normalize_prize(raw.prize), ())
        available = [t for t in candidates if t not in taken]

        if raw.css_tier is not None:
            tier = raw.css_tier
        elif positional is not None and positional in available:
            tier = positional
        elif available:
            tier = available[0]
        elif candidates:
            tier = candidates[-1]
        else:
            tier = positional
        taken.add(tier)

        if tier is Tier.NO_PRIZE:
            logger.debug(f"🌐 [powerball] Skipping non-paying row at position {position}")
            continue

        mismatch = positional is None or tier is not positional
        if mismatch:
            logger.warning(
                f"🌐 [powerball] Prize row {position} ('{raw.prize}') resolved to "
                f"{tier.code if tier else 'unknown'}, table order expects "
                f"{positional.code if positional else 'no row'}"
            )

        rows.append(PrizeTierRow(
            tier=tier,
            winners=raw.winners,
            prize=raw.prize,
            multiplier_winners=raw.multiplier_winners,
            multiplier_prize=raw.multiplier_prize,
            position_mismatch=mismatch,
        ))
    return rows


def placeholder_tiers() -> Tuple[PrizeTierRow, ...]:
    """Canonical nine-row table with zero winners, Power Play column at 2x."""
    rows = []
    for tier in CANONICAL_TIERS:
        if tier is Tier.JACKPOT:
            rows.append(PrizeTierRow(tier=tier, prize=GRAND_PRIZE))
            continue
        base = POWERBALL.prize_for(tier).amount_cents
        _, multiplied = apply_multiplier(base, PLACEHOLDER_POWER_PLAY, POWERBALL)
        rows.append(PrizeTierRow(
            tier=tier,
            prize=format_whole_dollars(base),
            multiplier_prize=format_whole_dollars(multiplied),
        ))
    return tuple(rows)


def parse_prize_tiers(html: str) -> Tuple[Tuple[PrizeTierRow, ...], bool]:
    """
    Read the prize table.

    Returns:
        Tuple of (rows, is_placeholder)
    """
    raw_rows = _structured_rows(_soup(html))
    if raw_rows:
        logger.debug(f"🌐 [powerball] Read {len(raw_rows)} prize rows from data-label cells")
    else:
        raw_rows = _positional_rows(html)
        if raw_rows:
            logger.info(f"🌐 [powerball] data-label cells missing, read {len(raw_rows)} rows positionally")

    rows = assign_tiers(raw_rows)
    if rows:
        return tuple(rows), False

    logger.warning("🌐 [powerball] Prize table not found, using canonical placeholder rows")
    return placeholder_tiers(), True
