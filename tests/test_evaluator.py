import random
from datetime import date

import pytest

from lottocheck.errors import ErrorKind, InvalidTicketError, MalformedPayloadError
from lottocheck.evaluator import check_ticket, check_ticket_for_date, evaluate_ticket, validate_ticket
from lottocheck.games import Game, Tier
from lottocheck.models import Drawing

from conftest import build_response, mm_detail_body, mm_paging_body


def _drawing(game="powerball", numbers=(10, 20, 30, 40, 50), bonus=25, jackpot=None):
    return Drawing(game=game, draw_date=date(2025, 8, 27), numbers=numbers, bonus=bonus, provenance="test", jackpot=jackpot)


def test_identical_ticket_hits_jackpot():
    drawing = _drawing()
    result = check_ticket([10, 20, 30, 40, 50], 25, drawing, 0)

    assert result.match_count == 5
    assert result.bonus_match is True
    assert result.tier is Tier.JACKPOT
    assert result.is_winner is True
    assert result.base_amount_cents == 0
    assert result.prize_description == "Jackpot"


def test_jackpot_uses_supplied_display_value():
    drawing = _drawing(game="megamillions", jackpot="$367 Million")
    assert check_ticket([10, 20, 30, 40, 50], 25, drawing).prize_description == "$367 Million"
    assert check_ticket([10, 20, 30, 40, 50], 25, drawing, 0, "$1 Billion").total_display == "$1 Billion"


def test_four_plus_bonus_with_power_play_four():
    result = check_ticket([10, 20, 30, 40, 60], 25, _drawing(), 4)

    assert (result.match_count, result.bonus_match) == (4, True)
    assert result.base_amount_cents == 5_000_000
    assert result.multiplier == 4
    assert result.total_amount_cents == 20_000_000
    assert result.total_display == "$200,000.00"
    assert result.is_winner


def test_match_five_power_play_ten_pays_double():
    result = check_ticket([10, 20, 30, 40, 50], 1, _drawing(), 10)

    assert result.tier is Tier.MATCH_5
    assert result.requested_multiplier == 10
    assert result.multiplier == 2
    assert result.total_amount_cents == 200_000_000


@pytest.mark.parametrize("game", ["powerball", "megamillions"])
def test_two_matches_without_bonus_is_not_a_winner(game):
    result = check_ticket([10, 20, 1, 2, 3], 5, _drawing(game=game), 2)

    assert result.match_count == 2
    assert result.bonus_match is False
    assert result.tier is Tier.NO_PRIZE
    assert result.base_amount_cents == 0
    assert result.total_amount_cents == 0
    assert result.is_winner is False


def test_match_count_is_symmetric_under_reordering():
    drawing = _drawing()
    ticket = [10, 21, 30, 41, 50]
    expected = check_ticket(ticket, 25, drawing, 3)

    rng = random.Random(7)
    for _ in range(10):
        shuffled_ticket = ticket[:]
        shuffled_draw = list(drawing.numbers)
        rng.shuffle(shuffled_ticket)
        rng.shuffle(shuffled_draw)
        reordered = _drawing(numbers=shuffled_draw)
        assert check_ticket(shuffled_ticket, 25, reordered, 3) == expected


def test_evaluation_is_idempotent():
    drawing = _drawing(game="megamillions")
    first = check_ticket([10, 20, 30, 1, 2], 25, drawing, 5)
    assert all(check_ticket([10, 20, 30, 1, 2], 25, drawing, 5) == first for _ in range(5))
    assert first.total_amount_cents == 20_000 * 5


def test_result_serializes_amounts():
    data = check_ticket([10, 20, 30, 40, 60], 25, _drawing(), 4).to_dict()
    assert data["tier"] == "4+1"
    assert data["base_prize"] == "$50,000.00"
    assert data["total_prize"] == "$200,000.00"
    assert data["is_jackpot"] is False


# ----------------------------------------------------------------------------
# Validation
# ----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "numbers, bonus, multiplier, message",
    [
        ([1, 2, 3, 4], 5, 0, "exactly 5 numbers"),
        ([1, 2, 3, 4, 5, 6], 5, 0, "exactly 5 numbers"),
        ([1, 2, 3, 4, 4], 5, 0, "unique"),
        ([1, 2, 3, 4, 70], 5, 0, "between 1 and 69"),
        ([0, 2, 3, 4, 5], 5, 0, "between 1 and 69"),
        ([1, 2, 3, 4, "5"], 5, 0, "integers"),
        ([1, 2, 3, 4, True], 5, 0, "integers"),
        ([1, 2, 3, 4, 5], 27, 0, "Powerball must be between 1 and 26"),
        ([1, 2, 3, 4, 5], None, 0, "Powerball must be an integer"),
        ([1, 2, 3, 4, 5], 5, 7, "Power Play multiplier must be one of"),
    ],
)
def test_invalid_powerball_tickets_are_rejected(numbers, bonus, multiplier, message):
    with pytest.raises(InvalidTicketError) as exc:
        validate_ticket(numbers, bonus, multiplier, "powerball")
    assert message in exc.value.message


def test_megamillions_ranges_differ_from_powerball():
    ticket = validate_ticket([70, 1, 2, 3, 4], 25, 10, Game.MEGAMILLIONS)
    assert ticket.numbers == (1, 2, 3, 4, 70)

    with pytest.raises(InvalidTicketError):
        validate_ticket([1, 2, 3, 4, 5], 26, 0, Game.MEGAMILLIONS)


def test_evaluate_ticket_returns_failure_value():
    outcome = evaluate_ticket([1, 2, 3], 5, _drawing())
    assert outcome.success is False
    assert outcome.error_kind is ErrorKind.INVALID_TICKET
    assert outcome.to_dict()["error_category"] == "input"


def test_drawing_rejects_invalid_numbers():
    with pytest.raises(MalformedPayloadError):
        _drawing(numbers=(1, 2, 3, 4, 4))
    with pytest.raises(MalformedPayloadError):
        _drawing(bonus=27)


# ----------------------------------------------------------------------------
# Fetch and check
# ----------------------------------------------------------------------------

def test_check_ticket_for_date_uses_fetched_drawing(mm_routes):
    outcome = check_ticket_for_date("08/19/2025", "megamillions", [3, 13, 20, 32, 33], 21, 0)

    assert outcome.success is True
    assert outcome.result.tier is Tier.JACKPOT
    assert outcome.result.prize_description == "$367 Million"
    assert outcome.drawing.provenance == "megamillions_detail"


def test_check_ticket_for_date_falls_back_to_configured_jackpot(transport, monkeypatch):
    monkeypatch.setenv("LOTTOCHECK_DEFAULT_JACKPOT", "$42 Million")
    transport.add("POST", "GetDrawingPagingData", build_response(mm_paging_body()))
    transport.add("POST", "GetDrawDataByTickWithMatrix", build_response(mm_detail_body(jackpot={})))

    outcome = check_ticket_for_date("08/19/2025", "megamillions", [3, 13, 20, 32, 33], 21)
    assert outcome.result.prize_description == "$42 Million"


def test_invalid_ticket_is_rejected_before_any_upstream_call(transport):
    outcome = check_ticket_for_date("08/19/2025", "megamillions", [3, 13, 20, 32], 21)

    assert outcome.success is False
    assert outcome.error_kind is ErrorKind.INVALID_TICKET
    assert transport.calls == []


def test_fetch_failure_is_passed_through(transport):
    transport.add("POST", "GetDrawingPagingData", build_response(mm_paging_body(items=[])))

    outcome = check_ticket_for_date("08/20/2025", "megamillions", [3, 13, 20, 32, 33], 21)
    assert outcome.success is False
    assert outcome.error_kind is ErrorKind.NO_DATA
