"""Configuration for the body-odds scraper."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Tuple

from dotenv import load_dotenv


@dataclass(frozen=True)
class ScrollSettings:
    min_step_px: int = 600              # smallest scroll advance per iteration
    step_ratio: float = 0.85            # advance as a share of the viewport height
    delay_seconds: float = 0.4          # pause between iterations for lazy content
    max_iterations: int = 80
    converge_streak: int = 2            # idle iterations needed at the bottom
    no_new_ceiling: int = 8
    no_scroll_ceiling: int = 6
    bottom_tolerance_px: float = 2.0


@dataclass(frozen=True)
class Markers:
    time_tag: str = "time"
    start_time: str = "Start Time"
    over_under: Tuple[str, str] = ("O/U", "Over/Under")
    finished: str = "Finished"
    utc_offset_minutes: int = 390       # Asia/Yangon, no DST
    year_window_days: int = 200
    card_max_depth: int = 12
    league_max_depth: int = 12
    league_max_chars: int = 80


@dataclass(frozen=True)
class ResponseMeta:
    author: str = "GGWP API"
    website: str = "https://ggwp-api.render.com"
    country: str = "Thailand"
    copyright: str = "GGWP API"


@dataclass(frozen=True)
class ScrapeConfig:
    base_url: str = "https://sportsxzone.com"
    sign_in_path: str = "/sign-in"
    body_path: str = "/body"
    username: str = ""
    password: str = ""
    timezone_id: str = "Asia/Yangon"
    headless: bool = True
    nav_timeout_ms: int = 60000
    output_path: Path = Path("output.json")
    excel: bool = False
    scroll: ScrollSettings = field(default_factory=ScrollSettings)
    markers: Markers = field(default_factory=Markers)
    meta: ResponseMeta = field(default_factory=ResponseMeta)

    @property
    def sign_in_url(self) -> str:
        return self.base_url.rstrip("/") + self.sign_in_path

    @property
    def body_url(self) -> str:
        return self.base_url.rstrip("/") + self.body_path

    def with_overrides(self, **kwargs) -> "ScrapeConfig":
        return replace(self, **{k: v for k, v in kwargs.items() if v is not None})

    @classmethod
    def from_env(cls) -> "ScrapeConfig":
        """
        Build a config from SXZ_* environment variables (a .env file is loaded first).

        Environment Variables:
            SXZ_BASE_URL, SXZ_USERCODE, SXZ_PASSWORD, SXZ_TIMEZONE,
            SXZ_HEADLESS (default: 1), SXZ_OUTPUT (default: output.json),
            SXZ_MAX_ITERATIONS (default: 80), SXZ_SCROLL_DELAY (default: 0.4)
        """
        load_dotenv()
        defaults = cls()
        scroll = replace(
            defaults.scroll,
            max_iterations=int(os.getenv("SXZ_MAX_ITERATIONS", defaults.scroll.max_iterations)),
            delay_seconds=float(os.getenv("SXZ_SCROLL_DELAY", defaults.scroll.delay_seconds)),
        )
        return cls(
            base_url=os.getenv("SXZ_BASE_URL", defaults.base_url),
            username=os.getenv("SXZ_USERCODE", ""),
            password=os.getenv("SXZ_PASSWORD", ""),
            timezone_id=os.getenv("SXZ_TIMEZONE", defaults.timezone_id),
            headless=os.getenv("SXZ_HEADLESS", "1").lower() not in {"0", "false", "no"},
            output_path=Path(os.getenv("SXZ_OUTPUT", str(defaults.output_path))),
            scroll=scroll,
        )
