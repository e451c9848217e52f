"""
Drawing Fetchers
================

One fetcher per game turns a calendar date into a normalized Drawing:

- Mega Millions: two sequential API calls. The paging call resolves the
  date to PlayDateTicks plus an inline copy of the drawing; the detail call
  returns the authoritative record with jackpot data. When the detail call
  fails the inline copy is returned instead.
- Powerball: one draw-result page, scraped.

Public entry points (fetch_drawing, fetch_prize_info) never raise for
input or upstream problems; they return FetchResult / PrizeInfoResult.
"""

from datetime import date
from typing import Dict, Optional, Union

from loguru import logger

from .config import get_settings
from .dates import parse_input_date, parse_upstream_timestamp, to_upstream_date
from .errors import (
    ErrorCategory,
    LotteryError,
    MalformedPayloadError,
    NoDrawingError,
)
from .games import Game
from .http_client import get_text, post_json
from .models import Drawing, FetchResult, PrizeInfo, PrizeInfoResult
from .parsers import megamillions as mm_parser
from .parsers import powerball as pb_parser

PROVENANCE_MM_DETAIL = "megamillions_detail"
PROVENANCE_MM_PAGING = "megamillions_paging"
PROVENANCE_PB_SCRAPER = "powerball_scraper"

HEALTH_CHECK_TIMEOUT = 5


class DrawingFetcher:
    """Retrieval strategy for one game."""

    game: Game
    source_name: str

    def fetch(self, draw_date: date) -> Drawing:
        raise NotImplementedError

    def fetch_prize_info(self, draw_date: date) -> PrizeInfo:
        raise NotImplementedError


# ============================================================================
# MEGA MILLIONS (two-step JSON API)
# ============================================================================

class MegaMillionsFetcher(DrawingFetcher):
    game = Game.MEGAMILLIONS
    source_name = "Mega Millions API"

    PAGING_ENDPOINT = "GetDrawingPagingData"
    DETAIL_ENDPOINT = "GetDrawDataByTickWithMatrix"

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or get_settings().megamillions_base_url).rstrip("/")

    def _paging(self, draw_date: date):
        formatted = to_upstream_date(draw_date, self.game)
        payload = {
            "endDate": formatted,
            "pageNumber": 1,
            "pageSize": 20,
            "startDate": formatted,
        }
        body = post_json(f"{self.base_url}/{self.PAGING_ENDPOINT}", payload, self.source_name)
        return mm_parser.parse_paging_data(body)

    def _detail(self, play_date_ticks: int) -> mm_parser.DetailRecord:
        body = post_json(
            f"{self.base_url}/{self.DETAIL_ENDPOINT}",
            {"PlayDateTicks": play_date_ticks},
            self.source_name,
        )
        return mm_parser.parse_detail_data(body)

    def _first_record(self, draw_date: date) -> mm_parser.DrawRecord:
        records = self._paging(draw_date)
        if not records:
            raise NoDrawingError(f"No drawing data found for {draw_date.strftime('%m/%d/%Y')}")
        return records[0]

    def _to_drawing(self, record: mm_parser.DrawRecord, requested: date, provenance: str,
                    jackpot: Optional[str] = None) -> Drawing:
        return Drawing(
            game=self.game,
            draw_date=parse_upstream_timestamp(record.play_date) or requested,
            numbers=record.numbers,
            bonus=record.mega_ball,
            multiplier=record.megaplier,
            provenance=provenance,
            jackpot=jackpot,
        )

    def fetch(self, draw_date: date) -> Drawing:
        logger.info(f"🎯 [megamillions] Fetching drawing for {draw_date.isoformat()}")
        record = self._first_record(draw_date)

        if record.play_date_ticks is None:
            logger.warning("🎯 [megamillions] Paging entry has no PlayDateTicks, using inline drawing")
            return self._to_drawing(record, draw_date, PROVENANCE_MM_PAGING)

        try:
            detail = self._detail(record.play_date_ticks)
            jackpot = mm_parser.jackpot_display(detail.jackpot)
            drawing = self._to_drawing(
                detail.drawing,
                draw_date,
                PROVENANCE_MM_DETAIL,
                jackpot=jackpot if jackpot != "Unknown" else None,
            )
        except LotteryError as e:
            logger.warning(f"🎯 [megamillions] Detail call failed ({e.kind.value}: {e.message}), using inline drawing")
            return self._to_drawing(record, draw_date, PROVENANCE_MM_PAGING)
        except Exception as e:
            logger.exception(f"🎯 [megamillions] Unexpected detail error ({type(e).__name__}), using inline drawing")
            return self._to_drawing(record, draw_date, PROVENANCE_MM_PAGING)

        logger.info(
            f"🎯 [megamillions] ✅ {drawing.draw_date.isoformat()}: {list(drawing.numbers)} "
            f"+ MB {drawing.bonus} (x{drawing.multiplier or '-'})"
        )
        return drawing

    def fetch_prize_info(self, draw_date: date) -> PrizeInfo:
        record = self._first_record(draw_date)
        if record.play_date_ticks is None:
            raise MalformedPayloadError("Paging entry has no PlayDateTicks")

        detail = self._detail(record.play_date_ticks)
        jackpot = mm_parser.jackpot_display(detail.jackpot)

        return PrizeInfo(
            game=self.game,
            draw_date=parse_upstream_timestamp(record.play_date) or draw_date,
            estimated_jackpot=jackpot,
            cash_value=mm_parser.cash_value_display(detail.jackpot),
            tiers=mm_parser.build_prize_tiers(jackpot),
            provenance=PROVENANCE_MM_DETAIL,
        )


# ============================================================================
# POWERBALL (scraped draw-result page)
# ============================================================================

class PowerballFetcher(DrawingFetcher):
    game = Game.POWERBALL
    source_name = "Powerball website"

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = (base_url or get_settings().powerball_base_url).rstrip("/")

    def _page(self, draw_date: date) -> str:
        params = {
            "gc": "powerball",
            "date": to_upstream_date(draw_date, self.game),
            "oc": "fl",
        }
        return get_text(f"{self.base_url}/draw-result", self.source_name, params=params)

    def fetch(self, draw_date: date) -> Drawing:
        logger.info(f"🌐 [powerball] Scraping draw result for {draw_date.isoformat()}")
        html = self._page(draw_date)
        scraped = pb_parser.parse_winning_numbers(html)

        page_date = scraped.draw_date
        if page_date is None:
            page_date = draw_date
        elif page_date != draw_date:
            raise NoDrawingError(
                f"Powerball page shows the drawing for {page_date.isoformat()}, "
                f"no drawing found for {draw_date.isoformat()}"
            )

        jackpot, _ = pb_parser.parse_jackpot_text(html)
        drawing = Drawing(
            game=self.game,
            draw_date=page_date,
            numbers=scraped.numbers,
            bonus=scraped.powerball,
            multiplier=scraped.multiplier,
            provenance=PROVENANCE_PB_SCRAPER,
            jackpot=jackpot or None,
        )
        logger.info(
            f"🌐 [powerball] ✅ {drawing.draw_date.isoformat()}: {list(drawing.numbers)} "
            f"+ PB {drawing.bonus} (x{drawing.multiplier or '-'})"
        )
        return drawing

    def fetch_prize_info(self, draw_date: date) -> PrizeInfo:
        html = self._page(draw_date)
        jackpot, cash_value = pb_parser.parse_jackpot_text(html)
        tiers, placeholder = pb_parser.parse_prize_tiers(html)

        return PrizeInfo(
            game=self.game,
            draw_date=pb_parser.parse_draw_date(html) or draw_date,
            estimated_jackpot=jackpot,
            cash_value=cash_value,
            tiers=tiers,
            provenance=PROVENANCE_PB_SCRAPER,
            placeholder_tiers=placeholder,
        )


FETCHERS = {
    Game.POWERBALL: PowerballFetcher,
    Game.MEGAMILLIONS: MegaMillionsFetcher,
}


def get_fetcher(game: Union[str, Game]) -> DrawingFetcher:
    return FETCHERS[Game.parse(game)]()


# ============================================================================
# PUBLIC OPERATIONS
# ============================================================================

def _log_failure(operation: str, game: str, date_text: str, error: LotteryError) -> None:
    message = f"{operation} failed for {game} {date_text}: [{error.kind.value}] {error.message}"
    if error.category is ErrorCategory.INPUT:
        logger.warning(message)
    else:
        logger.error(message)


def _game_label(game: Union[str, Game]) -> str:
    return game.value if isinstance(game, Game) else str(game)


def fetch_drawing(date_text: str, game: Union[str, Game]) -> FetchResult:
    """
    Retrieve the normalized drawing for a date and game.

    Args:
        date_text: Date in MM/DD/YYYY format
        game: 'powerball' or 'megamillions'

    Returns:
        FetchResult carrying a Drawing or a classified error
    """
    label = _game_label(game)
    try:
        game_tag = Game.parse(game)
        label = game_tag.value
        draw_date = parse_input_date(date_text)
        drawing = get_fetcher(game_tag).fetch(draw_date)
    except LotteryError as e:
        _log_failure("Drawing lookup", label, date_text, e)
        return FetchResult.failure(label, date_text, e)
    except Exception as e:
        logger.exception(f"Unexpected error fetching {label} drawing for {date_text}: {e}")
        return FetchResult.failure(label, date_text, MalformedPayloadError(f"Unexpected error: {type(e).__name__}"))

    return FetchResult.ok(label, date_text, drawing)


def fetch_prize_info(date_text: str, game: Union[str, Game]) -> PrizeInfoResult:
    """
    Retrieve jackpot and per-tier prize information for a date and game.

    Returns:
        PrizeInfoResult carrying PrizeInfo or a classified error
    """
    label = _game_label(game)
    try:
        game_tag = Game.parse(game)
        label = game_tag.value
        draw_date = parse_input_date(date_text)
        prize_info = get_fetcher(game_tag).fetch_prize_info(draw_date)
    except LotteryError as e:
        _log_failure("Prize lookup", label, date_text, e)
        return PrizeInfoResult.failure(label, date_text, e)
    except Exception as e:
        logger.exception(f"Unexpected error fetching {label} prizes for {date_text}: {e}")
        return PrizeInfoResult.failure(label, date_text, MalformedPayloadError(f"Unexpected error: {type(e).__name__}"))

    return PrizeInfoResult.ok(label, date_text, prize_info)


def check_sources_health() -> Dict[str, bool]:
    """
    Quick reachability check for both upstreams (5s timeout each).

    Returns:
        {'powerball': bool, 'megamillions': bool}
    """
    settings = get_settings()
    targets = {
        Game.POWERBALL.value: settings.powerball_base_url + "/",
        Game.MEGAMILLIONS.value: settings.megamillions_base_url,
    }
    health = {}

    logger.info(f"🏥 [health_check] Checking {len(targets)} sources ({HEALTH_CHECK_TIMEOUT}s timeout)...")
    for name, url in targets.items():
        try:
            get_text(url, name, timeout=HEALTH_CHECK_TIMEOUT)
            health[name] = True
            logger.info(f"   ✅ {name}: HEALTHY")
        except LotteryError as e:
            health[name] = False
            logger.warning(f"   ⚠️  {name}: UNAVAILABLE ({e.message[:50]})")

    logger.info(f"🏥 [health_check] Complete: {sum(health.values())}/{len(health)} sources healthy")
    return health
