"""Core modules for the body-odds pipeline."""

from .assembler import (
    assemble_response,
    build_match,
    sort_key,
    UNKNOWN_LEAGUE,
    MATCH_DEFAULT_FLAGS,
)

from .config import (
    ScrapeConfig,
    ScrollSettings,
    Markers,
    ResponseMeta,
)

from .hashing import (
    fnv1a_32,
    stable_id,
    league_id,
    team_id,
)

from .models import (
    RawMatchRecord,
    ScrollMetrics,
)

from .odds import (
    NormalizedOdds,
    ZERO_ODDS,
    parse_odds,
    looks_like_odds,
)

from .timeparse import (
    parse_start_time,
    start_time_iso,
)

from .utils import (
    cprint,
    normalize_text,
    iso_utc,
    utc_now,
    logger,
    Fore,
    Style,
)

__all__ = [
    # Assembly
    'assemble_response',
    'build_match',
    'sort_key',
    'UNKNOWN_LEAGUE',
    'MATCH_DEFAULT_FLAGS',
    # Configuration
    'ScrapeConfig',
    'ScrollSettings',
    'Markers',
    'ResponseMeta',
    # Identifiers
    'fnv1a_32',
    'stable_id',
    'league_id',
    'team_id',
    # Records
    'RawMatchRecord',
    'ScrollMetrics',
    # Parsers
    'NormalizedOdds',
    'ZERO_ODDS',
    'parse_odds',
    'looks_like_odds',
    'parse_start_time',
    'start_time_iso',
    # Utilities
    'cprint',
    'normalize_text',
    'iso_utc',
    'utc_now',
    'logger',
    'Fore',
    'Style',
]
