#!/usr/bin/env python3
"""
Match-card classifier for the sportsxzone body page.

The page has no semantic markup for matches. A card is recognised from a
``<time>`` element whose text holds the start-time sentinel, and the two odds
leaves inside it are told apart by the over/under marker text around them.
Everything here works on a single HTML snapshot; no waiting happens.
"""

import logging
import re
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Tag

from core.config import Markers
from core.models import RawMatchRecord
from core.odds import looks_like_odds
from core.utils import normalize_text

logger = logging.getLogger("sxz.classifier")

_LATIN_RE = re.compile(r"[A-Za-z]")
_NUMERIC_RE = re.compile(r"^[\d\s.,:/+=-]+$", re.ASCII)


def tag_text(el: Optional[Tag]) -> str:
    """Normalized text of a tag, with child text separated by spaces."""
    if el is None:
        return ""
    return normalize_text(el.get_text(" "))


def strip_odds_tokens(text: str) -> str:
    return " ".join(tok for tok in normalize_text(text).split(" ") if not looks_like_odds(tok))


def child_tags(el: Tag) -> List[Tag]:
    return [c for c in el.children if isinstance(c, Tag)]


class CardClassifier:
    """Extracts RawMatchRecords from one DOM snapshot."""

    def __init__(self, markers: Optional[Markers] = None):
        self.markers = markers or Markers()

    # ---------------------------------------------------------------------
    # marker tests
    # ---------------------------------------------------------------------
    def _has_ou_marker(self, text: str) -> bool:
        return any(m in text for m in self.markers.over_under)

    def _has_sentinel(self, text: str) -> bool:
        return self.markers.start_time in text or self._has_ou_marker(text)

    def looks_like_league(self, text: str) -> bool:
        if not text or len(text) > self.markers.league_max_chars:
            return False
        if self._has_sentinel(text):
            return False
        if looks_like_odds(text) or _NUMERIC_RE.match(text):
            return False
        return bool(_LATIN_RE.search(text))

    # ---------------------------------------------------------------------
    # structure
    # ---------------------------------------------------------------------
    def find_card_root(self, time_el: Tag) -> Optional[Tag]:
        """Nearest ancestor holding both the start-time sentinel and an O/U marker."""
        cur = time_el.parent
        depth = 0
        while isinstance(cur, Tag) and cur.name != "[document]" and depth < self.markers.card_max_depth:
            text = tag_text(cur)
            if self.markers.start_time in text and self._has_ou_marker(text):
                return cur
            cur = cur.parent
            depth += 1
        return None

    def find_league(self, card: Tag) -> str:
        """First league-looking preceding sibling, walking up from the card."""
        cur = card
        for _ in range(self.markers.league_max_depth):
            if not isinstance(cur, Tag) or cur.name == "[document]":
                break
            for sib in cur.previous_siblings:
                if not isinstance(sib, Tag):
                    continue
                text = tag_text(sib)
                if self.looks_like_league(text):
                    return text
            cur = cur.parent
        return ""

    def find_status(self, time_el: Tag) -> str:
        """Text of the nearest non-empty element before the time marker."""
        for sib in time_el.previous_siblings:
            if isinstance(sib, Tag):
                text = tag_text(sib)
                if text:
                    return text
        return ""

    def is_ou_leaf(self, leaf: Tag) -> bool:
        for anc in (leaf.parent, leaf.parent.parent if leaf.parent else None):
            if not isinstance(anc, Tag):
                continue
            text = tag_text(anc)
            if self._has_ou_marker(text) and self.markers.start_time not in text:
                return True
        return False

    @staticmethod
    def odds_leaves(card: Tag) -> Iterable[Tag]:
        for el in card.find_all(True):
            if el.find(True) is None and looks_like_odds(tag_text(el)):
                yield el

    @staticmethod
    def team_names(hdp_leaf: Optional[Tag]):
        """(home, away) from the handicap leaf's row and the row after it."""
        if hdp_leaf is None or not isinstance(hdp_leaf.parent, Tag):
            return "", ""
        container = hdp_leaf.parent
        home = strip_odds_tokens(tag_text(container))

        away = ""
        nxt = container.find_next_sibling()
        if nxt is not None:
            away = strip_odds_tokens(tag_text(nxt))
        if not away and isinstance(container.parent, Tag):
            for other in child_tags(container.parent):
                if other is not container:
                    away = strip_odds_tokens(tag_text(other))
                    break
        return home, away

    # ---------------------------------------------------------------------
    # entry points
    # ---------------------------------------------------------------------
    def classify_card(self, time_el: Tag) -> Optional[RawMatchRecord]:
        card = self.find_card_root(time_el)
        if card is None:
            return None

        hdp_leaf = ou_leaf = None
        for leaf in self.odds_leaves(card):
            if self.is_ou_leaf(leaf):
                ou_leaf = ou_leaf or leaf
            else:
                hdp_leaf = hdp_leaf or leaf
            if hdp_leaf is not None and ou_leaf is not None:
                break

        home, away = self.team_names(hdp_leaf)
        return RawMatchRecord(
            league_name=self.find_league(card),
            start_time_text=tag_text(time_el),
            status=self.find_status(time_el),
            home_name=home,
            away_name=away,
            handicap_text=tag_text(hdp_leaf),
            ou_text=tag_text(ou_leaf),
        )

    def classify(self, html: str) -> List[RawMatchRecord]:
        """Classify every match card in an HTML snapshot."""
        soup = BeautifulSoup(html, "html.parser")
        records: List[RawMatchRecord] = []
        skipped = 0
        for time_el in soup.find_all(self.markers.time_tag):
            if self.markers.start_time not in tag_text(time_el):
                continue
            try:
                record = self.classify_card(time_el)
            except Exception as e:
                logger.warning("Skipping malformed card: %s", e)
                record = None
            if record is None:
                skipped += 1
                continue
            records.append(record)
        logger.debug("Snapshot: %d cards, %d skipped", len(records), skipped)
        return records


def classify(html: str, markers: Optional[Markers] = None) -> List[RawMatchRecord]:
    return CardClassifier(markers).classify(html)
