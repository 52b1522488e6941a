"""Records passed between the classifier, collector and assembler."""

from dataclasses import dataclass, asdict
from typing import Tuple

from .utils import normalize_text


@dataclass(frozen=True)
class RawMatchRecord:
    """One match card as read from a single DOM snapshot. Fields may be empty."""

    league_name: str = ""
    start_time_text: str = ""
    status: str = ""
    home_name: str = ""
    away_name: str = ""
    handicap_text: str = ""
    ou_text: str = ""

    @property
    def key(self) -> Tuple[str, ...]:
        """Identity used to dedupe records across scroll passes."""
        return tuple(
            normalize_text(v)
            for v in (
                self.league_name,
                self.start_time_text,
                self.home_name,
                self.away_name,
                self.handicap_text,
                self.ou_text,
                self.status,
            )
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScrollMetrics:
    """Scroll position of the page's main scroll container."""

    top: float
    client_height: float
    scroll_height: float

    @property
    def max_top(self) -> float:
        return max(0.0, self.scroll_height - self.client_height)

    def at_bottom(self, tolerance: float = 2.0) -> bool:
        return self.top >= self.max_top - tolerance
