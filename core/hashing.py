"""Deterministic 32-bit identifiers (FNV-1a over UTF-16 code units)."""

from typing import Any

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF


def _utf16_code_units(text: str):
    data = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def fnv1a_32(text: str) -> int:
    """FNV-1a hash of ``text`` iterated per UTF-16 code unit, as an unsigned int."""
    h = FNV_OFFSET_BASIS
    for unit in _utf16_code_units(text):
        h ^= unit
        h = (h * FNV_PRIME) & _MASK32
    return h


def stable_id(seed: Any) -> int:
    """Stable numeric id for ``seed``. None and '' hash as the empty string."""
    if seed is None:
        seed = ""
    return fnv1a_32(str(seed))


def league_id(name: str) -> int:
    return stable_id(f"league:{name}")


def team_id(league: int, name: str) -> int:
    return stable_id(f"team:{league}:{name}")
