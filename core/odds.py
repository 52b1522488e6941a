"""
Odds-notation parsing.

Tokens look like ``1+75``, ``2-45`` or ``=+15``: a base (``=`` meaning level),
a sign and a 1-3 digit gap expressed in hundredths.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

from .utils import normalize_text

LEVEL_MARKER = "="

ODDS_TOKEN_RE = re.compile(r"^(=|\d+(?:\.\d+)?)([+-])(\d{1,3})$", re.ASCII)


@dataclass(frozen=True)
class NormalizedOdds:
    base: float
    sign: int
    fraction: float
    value: float
    gap: float

    def as_dict(self) -> dict:
        return {
            "base": self.base,
            "sign": self.sign,
            "fraction": self.fraction,
            "value": self.value,
            "gap": self.gap,
        }


ZERO_ODDS = NormalizedOdds(base=0.0, sign=1, fraction=0.0, value=0.0, gap=0.0)


def looks_like_odds(text: str) -> bool:
    return bool(ODDS_TOKEN_RE.match(normalize_text(text)))


def parse_odds(raw: Optional[str]) -> Optional[NormalizedOdds]:
    """
    Parse an odds token.

    The sign only applies to the gap, except for level tokens where the whole
    value is the signed gap: ``2-45`` is value 2.45 with gap -0.45, while
    ``=-30`` is value -0.30.

    Returns:
        NormalizedOdds, or None when the token does not match.
    """
    m = ODDS_TOKEN_RE.match((raw or "").strip())
    if not m:
        return None
    left, sign_tok, gap_digits = m.groups()

    # int() on a digit string is always base 10, so '05' is 5
    fraction = int(gap_digits, 10) / 100
    sign = -1 if sign_tok == "-" else 1
    is_level = left == LEVEL_MARKER
    base = 0.0 if is_level else float(left)
    if not math.isfinite(base) or not math.isfinite(fraction):
        return None

    gap = sign * fraction
    value = gap if is_level else base + fraction
    return NormalizedOdds(
        base=base,
        sign=sign,
        fraction=fraction,
        value=round(value, 6),
        gap=round(gap, 6),
    )
