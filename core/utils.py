#!/usr/bin/env python3
"""
Shared utilities for the body-odds scraper.
Includes logging, color printing, text normalization, and ISO formatting.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any

from colorama import init as _init_colorama, Fore, Style

_init_colorama(autoreset=True)

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logging.getLogger("playwright").setLevel(logging.WARNING)
logger = logging.getLogger("sxz")

_WS_RE = re.compile(r"\s+")


def cprint(text: str, color: str = '', style: str = ''):
    """Print colored text."""
    print(f"{style}{color}{text}{Style.RESET_ALL}")


def normalize_text(val: Any) -> str:
    """Collapse whitespace runs to a single space and trim. None becomes ''."""
    if val is None:
        return ""
    return _WS_RE.sub(" ", str(val)).strip()


def iso_utc(dt: datetime) -> str:
    """Format an aware datetime as 'YYYY-MM-DDTHH:MM:SS.mmmZ' in UTC."""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
