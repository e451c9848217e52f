import json

import pytest

from lottocheck.errors import MalformedPayloadError
from lottocheck.games import Tier
from lottocheck.models import NumericJackpot, PlainJackpot, PrizePoolJackpot, UnknownJackpot
from lottocheck.parsers import megamillions as mm

from conftest import MM_DRAW_ITEM, envelope, mm_detail_body, mm_paging_body


def test_unwrap_double_encoded_envelope():
    inner = {"DrawingData": [], "TotalResults": 0}
    assert mm.unwrap_envelope(envelope(inner)) == inner
    assert mm.unwrap_envelope(envelope(inner).encode("utf-8")) == inner


def test_unwrap_accepts_object_inside_envelope():
    assert mm.unwrap_envelope({"d": {"Drawing": {}}}) == {"Drawing": {}}


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps({"result": "{}"}),
        json.dumps({"d": "{broken"}),
        json.dumps({"d": 42}),
        json.dumps(["d"]),
    ],
)
def test_unwrap_rejects_malformed_payloads(payload):
    with pytest.raises(MalformedPayloadError):
        mm.unwrap_envelope(payload)


def test_parse_paging_data():
    records = mm.parse_paging_data(mm_paging_body())

    assert len(records) == 1
    record = records[0]
    assert record.play_date_ticks == 638911584000000000
    assert record.numbers == (33, 3, 20, 13, 32)
    assert record.mega_ball == 21
    assert record.megaplier == 3


def test_parse_paging_data_without_drawings():
    assert mm.parse_paging_data(mm_paging_body(items=[])) == []
    assert mm.parse_paging_data(envelope({"TotalResults": 0})) == []


def test_negative_megaplier_means_unknown():
    item = dict(MM_DRAW_ITEM, Megaplier=-1)
    assert mm.parse_draw_item(item).megaplier is None


def test_draw_item_with_non_numeric_ball_is_malformed():
    with pytest.raises(MalformedPayloadError):
        mm.parse_draw_item(dict(MM_DRAW_ITEM, N3="x"))
    with pytest.raises(MalformedPayloadError):
        mm.parse_draw_item(dict(MM_DRAW_ITEM, MBall=None))


@pytest.mark.parametrize("field, value", [("N1", 3.7), ("MBall", 21.5), ("N5", "33.0")])
def test_draw_item_with_fractional_ball_is_malformed(field, value):
    with pytest.raises(MalformedPayloadError):
        mm.parse_draw_item(dict(MM_DRAW_ITEM, **{field: value}))


def test_draw_item_accepts_whole_float_ball():
    assert mm.parse_draw_item(dict(MM_DRAW_ITEM, N1=33.0)).numbers[0] == 33


def test_parse_detail_data():
    detail = mm.parse_detail_data(mm_detail_body())

    assert detail.drawing.mega_ball == 21
    assert detail.jackpot == PrizePoolJackpot(prize_pool=367000000.0, cash_value=165500000.0)


def test_detail_without_drawing_is_malformed():
    with pytest.raises(MalformedPayloadError):
        mm.parse_detail_data(envelope({"Jackpot": 1000}))


# ----------------------------------------------------------------------------
# Jackpot precedence
# ----------------------------------------------------------------------------

@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"CurrentPrizePool": 367000000, "CurrentCashValue": 165500000}, PrizePoolJackpot(367000000.0, 165500000.0)),
        ({"CurrentPrizePool": 50000000}, PrizePoolJackpot(50000000.0, None)),
        ({"CurrentPrizePool": "$20 Million"}, PlainJackpot("$20 Million")),
        ({"NextPrizePool": 1}, UnknownJackpot()),
        (250000000, NumericJackpot(250000000.0)),
        (12.5, NumericJackpot(12.5)),
        ("$40 Million", PlainJackpot("$40 Million")),
        ("   ", UnknownJackpot()),
        (True, UnknownJackpot()),
        (None, UnknownJackpot()),
        ([1, 2], UnknownJackpot()),
    ],
)
def test_classify_jackpot(raw, expected):
    assert mm.classify_jackpot(raw) == expected


def test_jackpot_display_buckets():
    assert mm.jackpot_display(PrizePoolJackpot(367000000.0, 165500000.0)) == "$367 Million"
    assert mm.jackpot_display(NumericJackpot(45000.0)) == "$45 Thousand"
    assert mm.jackpot_display(NumericJackpot(950.0)) == "$950"
    assert mm.jackpot_display(PlainJackpot("$20 Million")) == "$20 Million"
    assert mm.jackpot_display(UnknownJackpot()) == "Unknown"


def test_cash_value_display():
    assert mm.cash_value_display(PrizePoolJackpot(367000000.0, 165500000.0)) == "$165.5 Million"
    assert mm.cash_value_display(PrizePoolJackpot(367000000.0)) == ""
    assert mm.cash_value_display(NumericJackpot(1.0)) == ""


def test_build_prize_tiers():
    rows = mm.build_prize_tiers("$367 Million")

    assert len(rows) == 9
    assert rows[0].match == "5+1 (Jackpot)"
    assert rows[0].prize == "$367 Million"
    assert rows[1].tier is Tier.MATCH_5
    assert rows[1].prize == "$1,000,000"
    assert rows[-1].prize == "$2"
    assert all(row.winners == 0 for row in rows)
