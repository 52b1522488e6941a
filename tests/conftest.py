"""Shared fixtures: synthetic body-page markup and a fake live document."""

from datetime import datetime, timezone
from typing import List

import pytest

from core.models import ScrollMetrics

FIXED_NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def card_html(time_text="Start Time: 4/7 - 8:30 PM", status="", home="Arsenal", away="Chelsea",
              hdp="1+75", ou="2-45", hdp_on_away=False) -> str:
    hdp_span = f"<span class=\"odds\">{hdp}</span>" if hdp else ""
    ou_span = f"<span class=\"odds\">{ou}</span>" if ou else ""
    home_row = f"<div class=\"row\">{home} {'' if hdp_on_away else hdp_span}</div>"
    away_row = f"<div class=\"row\">{away} {hdp_span if hdp_on_away else ''}</div>"
    return (
        "<div class=\"card\">"
        f"<div class=\"head\"><span class=\"status\">{status}</span><time>{time_text}</time></div>"
        f"<div class=\"hdp\">{home_row}{away_row}</div>"
        f"<div class=\"ou\"><div class=\"line\">O/U {ou_span}</div></div>"
        "</div>"
    )


def league_html(name: str, cards: List[str]) -> str:
    return f"<section class=\"league\"><h3>{name}</h3>{''.join(cards)}</section>"


def page_html(*sections: str) -> str:
    return f"<html><body><main>{''.join(sections)}</main></body></html>"


THREE_CARD_PAGE = page_html(
    league_html("Spain La Liga", [
        card_html("Start Time: 5/3 - 2:00 AM", home="Real Madrid", away="Barcelona", hdp="=+15", ou="3+50"),
    ]),
    league_html("English Premier League", [
        card_html("Start Time: 4/3 - 8:30 PM", home="Arsenal", away="Chelsea", hdp="1+75", ou="2-45"),
        card_html("Start Time: 2/3 - 10:00 PM", status="Finished", home="Liverpool", away="Everton",
                  hdp="2-30", ou="3-10"),
    ]),
)


class FakeDocument:
    """
    Virtualized list: only cards near the viewport are in the DOM.

    Each card is ``card_px`` tall; the container scrolls over all of them.
    """

    def __init__(self, cards: List[str], card_px: int = 100, client_height: int = 300,
                 league: str = "Test League"):
        self.cards = cards
        self.card_px = card_px
        self.client_height = client_height
        self.league = league
        self.top = 0.0
        self.snapshots = 0
        self.scrolls: List[float] = []

    @property
    def scroll_height(self) -> float:
        return max(self.client_height, len(self.cards) * self.card_px)

    async def wait_ready(self) -> None:
        return None

    async def snapshot(self) -> str:
        self.snapshots += 1
        first = int(self.top // self.card_px)
        last = int((self.top + self.client_height) // self.card_px) + 1
        visible = self.cards[first:last]
        return page_html(league_html(self.league, visible))

    async def scroll_metrics(self) -> ScrollMetrics:
        return ScrollMetrics(top=self.top, client_height=self.client_height,
                             scroll_height=self.scroll_height)

    async def scroll_to(self, top: float) -> None:
        self.scrolls.append(top)
        self.top = max(0.0, min(top, self.scroll_height - self.client_height))


def numbered_cards(n: int) -> List[str]:
    return [
        card_html(f"Start Time: {1 + i % 28}/5 - 7:00 PM", home=f"Home {i}", away=f"Away {i}")
        for i in range(n)
    ]


@pytest.fixture
def fixed_now():
    return FIXED_NOW
