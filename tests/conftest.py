import gzip
import json
import os
import sys
from types import SimpleNamespace

import pytest
import requests

# Ensure repository root is on sys.path so `import lottocheck` works during tests
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from lottocheck import config, http_client  # noqa: E402

ENV_OVERRIDES = (
    "LOTTOCHECK_TIMEOUT",
    "LOTTOCHECK_USER_AGENT",
    "LOTTOCHECK_MEGAMILLIONS_URL",
    "LOTTOCHECK_POWERBALL_URL",
    "LOTTOCHECK_DEFAULT_JACKPOT",
    "LOTTOCHECK_CONFIG",
    "LOG_LEVEL",
)


# ----------------------------------------------------------------------------
# Fake upstream transport
# ----------------------------------------------------------------------------

def build_response(body, status_code: int = 200, headers=None, gzipped: bool = False) -> SimpleNamespace:
    content = body.encode("utf-8") if isinstance(body, str) else body
    if gzipped:
        content = gzip.compress(content)
    return SimpleNamespace(status_code=status_code, content=content, headers=headers or {})


class FakeTransport:
    """Stands in for requests.get / requests.post and records every call."""

    def __init__(self):
        self.calls = []
        self.routes = []

    def add(self, method: str, fragment: str, response=None, error=None):
        self.routes.append((method, fragment, response, error))

    def _handle(self, method, url, **kwargs):
        self.calls.append(SimpleNamespace(method=method, url=url, **kwargs))
        for route_method, fragment, response, error in self.routes:
            if route_method == method and fragment in url:
                if error is not None:
                    raise error
                return response
        raise requests.exceptions.ConnectionError(f"No fake route for {method} {url}")

    def get(self, url, **kwargs):
        return self._handle("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._handle("POST", url, **kwargs)

    def urls(self, method=None):
        return [c.url for c in self.calls if method is None or c.method == method]


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture(autouse=True)
def transport(monkeypatch):
    # No test ever reaches the network; unrouted calls fail as connection errors
    fake = FakeTransport()
    monkeypatch.setattr(http_client.requests, "get", fake.get, raising=True)
    monkeypatch.setattr(http_client.requests, "post", fake.post, raising=True)
    return fake


# ----------------------------------------------------------------------------
# Mega Millions payloads
# ----------------------------------------------------------------------------

MM_DRAW_ITEM = {
    "PlayDate": "2025-08-19T00:00:00",
    "PlayDateTicks": 638911584000000000,
    "N1": 33,
    "N2": 3,
    "N3": 20,
    "N4": 13,
    "N5": 32,
    "MBall": 21,
    "Megaplier": 3,
    "UpdatedBy": "SERVICE",
    "UpdatedTime": "2025-08-19T23:15:00",
}


def envelope(inner) -> str:
    """Double-encode a payload the way the ASMX service does."""
    return json.dumps({"d": json.dumps(inner)})


def mm_paging_body(items=None) -> str:
    items = [MM_DRAW_ITEM] if items is None else items
    return envelope({"DrawingData": items, "TotalResults": len(items)})


def mm_detail_body(jackpot=None, drawing=None) -> str:
    if jackpot is None:
        jackpot = {"CurrentPrizePool": 367000000, "CurrentCashValue": 165500000.0}
    return envelope({"Drawing": drawing or MM_DRAW_ITEM, "Jackpot": jackpot})


# ----------------------------------------------------------------------------
# Powerball pages
# ----------------------------------------------------------------------------

PB_PRIZE_ROWS = [
    # (css class, match text, winners, prize, power play winners, power play prize)
    ("m5-pb", "5 + PB", 0, "Grand Prize", 0, ""),
    ("m5", "5", 1, "$1,000,000", 0, "$2,000,000"),
    ("m4-pb", "4 + PB", 2, "$50,000", 1, "$100,000"),
    ("m4", "4", 31, "$100", 8, "$200"),
    ("m3-pb", "3 + PB", 122, "$100", 30, "$200"),
    ("m3", "3", 2510, "$7", 611, "$14"),
    ("m2-pb", "2 + PB", 2090, "$7", 515, "$14"),
    ("m1-pb", "1 + PB", 15320, "$4", 4021, "$8"),
    ("m0-pb", "PB", 40112, "$4", 9830, "$8"),
]


def pb_numbers_html(white_balls=(3, 16, 29, 61, 69), powerball=22, multiplier="2x",
                    date_text="Wed, Aug 27, 2025") -> str:
    balls = "".join(
        f'<div class="form-control col white-balls item-powerball">{n}</div>' for n in white_balls
    )
    parts = [f'<div class="game-ball-group">{balls}']
    if powerball is not None:
        parts.append(f'<div class="form-control col powerball item-powerball">{powerball}</div>')
    parts.append("</div>")
    if multiplier:
        parts.append(f'<span class="multiplier">{multiplier}</span>')
    if date_text:
        parts.append(f'<h5 class="title-date">{date_text}</h5>')
    parts.append(
        '<div class="estimated-jackpot"><span class="prize-label">Estimated Jackpot:</span> '
        '<span>$1.1 Billion</span></div>'
        '<div class="cash-value"><span class="prize-label">Cash Value:</span> '
        '<span>$498.5 Million</span></div>'
    )
    return "".join(parts)


def pb_structured_table(rows=None) -> str:
    rows = PB_PRIZE_ROWS if rows is None else rows
    body = "".join(
        "<tr>"
        f'<td data-label="Match"><div class="{css}">{match}</div></td>'
        f'<td data-label="Powerball Winners">{winners:,}</td>'
        f'<td data-label="Powerball Prize">{prize}</td>'
        f'<td data-label="Power Play Winners">{pp_winners:,}</td>'
        f'<td data-label="Power Play Prize">{pp_prize}</td>'
        "</tr>"
        for css, match, winners, prize, pp_winners, pp_prize in rows
    )
    return (
        "<table><thead><tr><th>Match</th><th>Powerball Winners</th><th>Powerball Prize</th>"
        "<th>Power Play Winners</th><th>Power Play Prize</th></tr></thead>"
        f"<tbody>{body}</tbody></table>"
    )


def pb_positional_table(rows=None) -> str:
    rows = PB_PRIZE_ROWS if rows is None else rows
    body = "".join(
        f"<tr><td><img alt='ball'/></td><td>{winners:,}</td><td>{prize}</td>"
        f"<td>{pp_winners:,}</td><td>{pp_prize}</td></tr>"
        for _, _, winners, prize, pp_winners, pp_prize in rows
    )
    return f"<table><tbody>{body}</tbody></table>"


def pb_page(table: str = "", **numbers) -> str:
    return f"<html><body>{pb_numbers_html(**numbers)}{table}</body></html>"


@pytest.fixture()
def mm_routes(transport):
    """Both Mega Millions calls succeed."""
    transport.add("POST", "GetDrawingPagingData", build_response(mm_paging_body()))
    transport.add("POST", "GetDrawDataByTickWithMatrix", build_response(mm_detail_body()))
    return transport


@pytest.fixture()
def pb_route(transport):
    """Powerball draw-result page with the structured prize table."""
    transport.add("GET", "draw-result", build_response(pb_page(pb_structured_table())))
    return transport
