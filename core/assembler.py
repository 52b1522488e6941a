#!/usr/bin/env python3
"""
Record assembler.

Turns deduplicated RawMatchRecords into the published API document:
- normalizes league and team names
- derives league/team/match ids from namespaced seeds
- parses handicap and over/under tokens (zero odds when missing)
- parses the start time (generation time when missing)
- sorts by (league, raw start-time text) and numbers the matches
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from .config import ScrapeConfig
from .hashing import league_id, stable_id, team_id
from .models import RawMatchRecord
from .odds import ZERO_ODDS, parse_odds
from .timeparse import parse_start_time
from .utils import iso_utc, normalize_text, utc_now

logger = logging.getLogger("sxz.assembler")

UNKNOWN_LEAGUE = "Unknown"

# Bookkeeping flags published with every match; finalization happens elsewhere.
MATCH_DEFAULT_FLAGS = {
    "calculating": False,
    "hdpFinished": False,
    "ouFinished": False,
    "canceled": False,
    "active": True,
    "status": 1,
    "singleBet": False,
    "highTax": False,
    "autoUpdate": True,
}


def sort_key(record: RawMatchRecord):
    league = normalize_text(record.league_name) or UNKNOWN_LEAGUE
    return (league, record.start_time_text, record.key)


def match_seed(league: str, record: RawMatchRecord, home: str, away: str) -> str:
    return "match:" + json.dumps([
        league,
        normalize_text(record.start_time_text),
        home,
        away,
        normalize_text(record.handicap_text),
        normalize_text(record.ou_text),
    ], ensure_ascii=False)


def _team(no: int, name: str, lid: int, league_no: int, league: str) -> Dict[str, Any]:
    return {
        "id": no,
        "teamId": team_id(lid, name),
        "name": name,
        "engName": name,
        "league": {"id": league_no, "leagueId": lid, "name": league},
    }


def build_match(record: RawMatchRecord, index: int, league_no: int, now: datetime,
                config: ScrapeConfig) -> Dict[str, Any]:
    """Build one published match. ``index`` is the 0-based position after sorting."""
    markers = config.markers
    league = normalize_text(record.league_name) or UNKNOWN_LEAGUE
    home = normalize_text(record.home_name)
    away = normalize_text(record.away_name)
    lid = league_id(league)

    hdp = parse_odds(record.handicap_text) or ZERO_ODDS
    ou = parse_odds(record.ou_text) or ZERO_ODDS

    start = parse_start_time(
        record.start_time_text,
        now=now,
        utc_offset_minutes=markers.utc_offset_minutes,
        year_window_days=markers.year_window_days,
    )
    if start is None:
        logger.debug("Unparseable start time %r, using generation time", record.start_time_text)
        start = now
    start_iso = iso_utc(start)

    home_no = 2 * index + 1
    away_no = 2 * index + 2
    match = {
        "id": stable_id(match_seed(league, record, home, away)),
        "no": index + 1,
        "homeNo": home_no,
        "awayNo": away_no,
        "home": _team(home_no, home, lid, league_no, league),
        "away": _team(away_no, away, lid, league_no, league),
        "odds": hdp.value,
        "price": hdp.gap,
        "goalTotal": ou.value,
        "goalTotalPrice": ou.gap,
        "startTime": start_iso,
        "closeTime": start_iso,
        "finished": normalize_text(record.status) == markers.finished,
    }
    match.update(MATCH_DEFAULT_FLAGS)
    return match


def assemble_response(records: Iterable[RawMatchRecord], config: Optional[ScrapeConfig] = None,
                      now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Assemble the API document from raw records.

    Args:
        records: Deduplicated records in any order
        config: Scrape configuration (markers and response metadata)
        now: Generation time; also the fallback start time

    Returns:
        Dictionary ready for JSON serialization
    """
    config = config or ScrapeConfig()
    now = now or utc_now()
    ordered: List[RawMatchRecord] = sorted(records, key=sort_key)

    league_numbers: Dict[str, int] = {}
    matches = []
    for index, record in enumerate(ordered):
        league = normalize_text(record.league_name) or UNKNOWN_LEAGUE
        league_no = league_numbers.setdefault(league, len(league_numbers) + 1)
        matches.append(build_match(record, index, league_no, now, config))

    meta = config.meta
    logger.info("Assembled %d matches across %d leagues", len(matches), len(league_numbers))
    return {
        "author": meta.author,
        "website": meta.website,
        "country": meta.country,
        "copyright": meta.copyright,
        "id": int(now.timestamp() * 1000),
        "date": iso_utc(now),
        "completed": False,
        "matches": matches,
    }
