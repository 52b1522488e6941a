#!/usr/bin/env python3
"""
sportsxzone.com body-odds scraper.

This module contains the browser side of the pipeline:
- PlaywrightDocument: DocumentDriver over a Playwright page
- SportsXZoneScraper: login, open /body, scroll-collect, assemble, save
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from playwright.async_api import async_playwright

from core.assembler import assemble_response
from core.config import ScrapeConfig
from core.models import ScrollMetrics
from core.utils import cprint, Fore
from scrapers.classifier import CardClassifier
from scrapers.collector import collect

logger = logging.getLogger("sxz.scraper")

SCROLLER_ATTR = "data-sxz-scroller"

# Picks the scrollable element with the largest scroll range and tags it so
# scroll_to() writes to the same element. Falls back to the root scroller.
_SCROLL_METRICS_JS = """(attr) => {
    const root = document.scrollingElement || document.documentElement;
    let best = root;
    let bestRange = root.scrollHeight - root.clientHeight;
    for (const el of document.querySelectorAll('body *')) {
        const oy = getComputedStyle(el).overflowY;
        if (oy !== 'auto' && oy !== 'scroll' && oy !== 'overlay') continue;
        const range = el.scrollHeight - el.clientHeight;
        if (range > bestRange) { best = el; bestRange = range; }
    }
    for (const el of document.querySelectorAll('[' + attr + ']')) el.removeAttribute(attr);
    best.setAttribute(attr, '1');
    return {top: best.scrollTop, clientHeight: best.clientHeight, scrollHeight: best.scrollHeight};
}"""

_SCROLL_TO_JS = """([attr, top]) => {
    const el = document.querySelector('[' + attr + ']') || document.scrollingElement || document.documentElement;
    el.scrollTop = top;
}"""


class ScrapeError(RuntimeError):
    """The scrape could not finish; nothing was written."""


class LoginError(ScrapeError):
    pass


class PlaywrightDocument:
    """DocumentDriver backed by a Playwright page."""

    def __init__(self, page, timeout_ms: int = 60000):
        self.page = page
        self.timeout_ms = timeout_ms

    async def wait_ready(self) -> None:
        await self.page.wait_for_load_state("domcontentloaded", timeout=self.timeout_ms)

    async def snapshot(self) -> str:
        return await self.page.content()

    async def scroll_metrics(self) -> ScrollMetrics:
        m = await self.page.evaluate(_SCROLL_METRICS_JS, SCROLLER_ATTR)
        return ScrollMetrics(
            top=float(m["top"]),
            client_height=float(m["clientHeight"]),
            scroll_height=float(m["scrollHeight"]),
        )

    async def scroll_to(self, top: float) -> None:
        await self.page.evaluate(_SCROLL_TO_JS, [SCROLLER_ATTR, top])


class SportsXZoneScraper:
    """
    Scraper for the sportsxzone body (handicap) page.

    Collects every match card on the page including:
    - League, teams and kick-off time
    - Handicap and over/under odds
    - Finished status
    """

    def __init__(self, config: Optional[ScrapeConfig] = None):
        self.config = config or ScrapeConfig()
        self.classifier = CardClassifier(self.config.markers)

    async def login(self, page) -> None:
        cfg = self.config
        if not cfg.username or not cfg.password:
            raise LoginError("Missing credentials (set SXZ_USERCODE and SXZ_PASSWORD)")
        logger.info("🔐 Logging in as %s", cfg.username)
        await page.goto(cfg.sign_in_url, wait_until="networkidle", timeout=cfg.nav_timeout_ms)
        await page.fill("#usercode", cfg.username)
        await page.fill("#password", cfg.password)
        async with page.expect_navigation(wait_until="networkidle", timeout=cfg.nav_timeout_ms):
            await page.click('button[type="submit"]')
        if cfg.sign_in_path in page.url:
            raise LoginError("Login failed")

    async def open_body(self, page) -> None:
        cfg = self.config
        logger.info("🌐 Opening %s", cfg.body_url)
        await page.goto(cfg.body_url, wait_until="networkidle", timeout=cfg.nav_timeout_ms)
        await page.wait_for_selector(cfg.markers.time_tag, timeout=cfg.nav_timeout_ms)

    async def scrape(self) -> Dict[str, Any]:
        """
        Run one complete scrape.

        Returns:
            The assembled API document

        Raises:
            ScrapeError: login, navigation or browser failure
        """
        cfg = self.config
        logger.info("Launching browser")
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(
                    headless=cfg.headless,
                    args=["--no-sandbox", "--disable-dev-shm-usage"],
                )
                context = await browser.new_context(timezone_id=cfg.timezone_id)
                try:
                    page = await context.new_page()
                    await self.login(page)
                    await self.open_body(page)
                    records = await collect(
                        PlaywrightDocument(page, cfg.nav_timeout_ms),
                        self.classifier.classify,
                        cfg.scroll,
                    )
                finally:
                    await context.close()
                    await browser.close()
        except ScrapeError:
            raise
        except Exception as e:
            logger.error("Scrape failed: %s", e)
            raise ScrapeError(str(e)) from e

        return assemble_response(records, cfg)

    async def run(self) -> Dict[str, Any]:
        """Scrape and persist the document (JSON, plus Excel when enabled)."""
        response = await self.scrape()
        self.save_to_json(response, self.config.output_path)
        if self.config.excel:
            self.save_to_excel(response, self.config.output_path.with_suffix(".xlsx"))
        return response

    @staticmethod
    def save_to_json(response: Dict[str, Any], path: Path) -> Path:
        """Write the document atomically; an interrupted write leaves the old file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=path.name, suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(response, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
        logger.info("💾 Saved %d matches to: %s", len(response.get("matches", [])), path)
        return path

    @staticmethod
    def match_rows(response: Dict[str, Any]) -> List[Dict[str, Any]]:
        rows = []
        for m in response.get("matches", []):
            rows.append({
                "no": m["no"],
                "league": m["home"]["league"]["name"],
                "start_time": m["startTime"],
                "home": m["home"]["name"],
                "away": m["away"]["name"],
                "odds": m["odds"],
                "price": m["price"],
                "goal_total": m["goalTotal"],
                "goal_total_price": m["goalTotalPrice"],
                "finished": m["finished"],
                "match_id": m["id"],
            })
        return rows

    def save_to_excel(self, response: Dict[str, Any], path: Path) -> Optional[Path]:
        rows = self.match_rows(response)
        if not rows:
            logger.warning("No matches to save to Excel")
            return None
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        df = pd.DataFrame(rows)
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="Body_Odds", index=False)
        cprint(f"   Saved body odds to {path.name}", Fore.GREEN)
        return path
