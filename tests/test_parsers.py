from datetime import datetime, timezone

import pytest

from core.hashing import fnv1a_32, league_id, stable_id, team_id
from core.odds import ZERO_ODDS, looks_like_odds, parse_odds
from core.timeparse import parse_start_time, start_time_iso
from core.utils import iso_utc, normalize_text

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# text
# ---------------------------------------------------------------------------
def test_normalize_text_collapses_whitespace():
    assert normalize_text("  Real \n\t Madrid  ") == "Real Madrid"
    assert normalize_text(None) == ""
    assert normalize_text("") == ""
    assert normalize_text(12) == "12"


def test_iso_utc_uses_milliseconds_and_z():
    dt = datetime(2024, 7, 4, 14, 0, 0, 123456, tzinfo=timezone.utc)
    assert iso_utc(dt) == "2024-07-04T14:00:00.123Z"


# ---------------------------------------------------------------------------
# hashing
# ---------------------------------------------------------------------------
def test_fnv1a_known_vectors():
    assert fnv1a_32("") == 0x811C9DC5
    assert fnv1a_32("a") == 0xE40C292C
    assert fnv1a_32("foobar") == 0xBF9CF968


def test_stable_id_empty_and_none_are_offset_basis():
    assert stable_id("") == 2166136261
    assert stable_id(None) == 2166136261


def test_stable_id_is_deterministic_and_unsigned():
    assert stable_id("league:Premier League") == stable_id("league:Premier League")
    assert 0 <= stable_id("team:1:Arsenal") < 2 ** 32
    assert stable_id("Arsenal") != stable_id("Chelsea")


def test_stable_id_hashes_utf16_code_units():
    # U+1F600 is a surrogate pair, so two code units go into the hash
    h = 0x811C9DC5
    for unit in (0xD83D, 0xDE00):
        h = ((h ^ unit) * 0x01000193) & 0xFFFFFFFF
    assert stable_id("\U0001F600") == h


def test_namespaced_ids():
    lid = league_id("Premier League")
    assert lid == stable_id("league:Premier League")
    assert team_id(lid, "Arsenal") == stable_id(f"team:{lid}:Arsenal")
    assert team_id(lid, "Arsenal") != team_id(league_id("FA Cup"), "Arsenal")


# ---------------------------------------------------------------------------
# odds
# ---------------------------------------------------------------------------
def test_level_plus():
    odds = parse_odds("=+15")
    assert odds.base == 0
    assert odds.value == pytest.approx(0.15)
    assert odds.gap == pytest.approx(0.15)
    assert odds.sign == 1


def test_level_minus_is_negative_value():
    odds = parse_odds("=-30")
    assert odds.value == pytest.approx(-0.30)
    assert odds.gap == pytest.approx(-0.30)


def test_numeric_plus():
    odds = parse_odds("1+75")
    assert odds.base == 1
    assert odds.value == pytest.approx(1.75)
    assert odds.gap == pytest.approx(0.75)


def test_numeric_minus_only_flips_gap():
    odds = parse_odds("2-45")
    assert odds.value == pytest.approx(2.45)
    assert odds.gap == pytest.approx(-0.45)
    assert odds.sign == -1
    assert odds.fraction == pytest.approx(0.45)


def test_decimal_base_and_leading_zeros():
    assert parse_odds("1.5+20").value == pytest.approx(1.7)
    odds = parse_odds("05+08")
    assert odds.base == 5
    assert odds.fraction == pytest.approx(0.08)


def test_surrounding_whitespace_is_ignored():
    assert parse_odds("  1+75 \n").value == pytest.approx(1.75)


@pytest.mark.parametrize("raw", [
    "abc", "", "12", None, "1+1234", "+15", "1 + 75", "x1+75",
    "\u0661+\u0667\u0665", "=+\u0661\u0665", "\uff11+75",
])
def test_malformed_odds(raw):
    assert parse_odds(raw) is None


def test_looks_like_odds():
    assert looks_like_odds("=+15")
    assert not looks_like_odds("Arsenal")
    assert not looks_like_odds("\u0661+\u0667\u0665")
    assert ZERO_ODDS.value == 0 and ZERO_ODDS.gap == 0


# ---------------------------------------------------------------------------
# start time
# ---------------------------------------------------------------------------
def test_start_time_example():
    dt = parse_start_time("Start Time: 4/7 - 8:30 PM", now=NOW)
    assert dt == datetime(2024, 7, 4, 14, 0, tzinfo=timezone.utc)
    assert start_time_iso("Start Time: 4/7 - 8:30 PM", now=NOW) == "2024-07-04T14:00:00.000Z"


def test_midnight_and_noon():
    assert parse_start_time("1/3 - 12:00 AM", now=NOW) == datetime(2024, 2, 29, 17, 30, tzinfo=timezone.utc)
    assert parse_start_time("1/3 - 12:00 PM", now=NOW) == datetime(2024, 3, 1, 5, 30, tzinfo=timezone.utc)


def test_old_date_rolls_to_next_year():
    now = datetime(2024, 12, 20, tzinfo=timezone.utc)
    dt = parse_start_time("Start Time: 3/1 - 10:00 AM", now=now)
    assert dt == datetime(2025, 1, 3, 3, 30, tzinfo=timezone.utc)


def test_far_future_date_rolls_to_previous_year():
    now = datetime(2024, 1, 5, tzinfo=timezone.utc)
    dt = parse_start_time("Start Time: 28/12 - 9:00 PM", now=now)
    assert dt == datetime(2023, 12, 28, 14, 30, tzinfo=timezone.utc)


def test_exact_window_boundary_is_not_shifted():
    # NOW + 200 days is 2024-09-17T00:00Z, i.e. 06:30 local
    assert parse_start_time("17/9 - 6:30 AM", now=NOW) == datetime(2024, 9, 17, tzinfo=timezone.utc)
    # one minute past the window moves back a year
    assert parse_start_time("17/9 - 6:31 AM", now=NOW) == datetime(2023, 9, 17, 0, 1, tzinfo=timezone.utc)


def test_leap_day_resolves_to_nearest_leap_year():
    now = datetime(2023, 12, 1, tzinfo=timezone.utc)
    assert parse_start_time("29/2 - 1:00 PM", now=now) == datetime(2024, 2, 29, 6, 30, tzinfo=timezone.utc)


@pytest.mark.parametrize("text", [
    "", None, "Start Time: TBD", "32/1 - 8:30 PM", "0/1 - 8:30 PM", "4/13 - 8:30 PM",
    "4/7 - 13:00 PM", "4/7 - 0:30 AM", "4/7 - 8:60 PM", "31/4 - 8:00 PM",
    "Start Time: 123/4 - 8:30 PM", "\u0664/\u0667 - \u0668:\u0663\u0660 PM",
])
def test_invalid_start_time(text):
    assert parse_start_time(text, now=NOW) is None
