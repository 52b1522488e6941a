#!/usr/bin/env python3
"""
Main entry point for the body-odds scraper.

This orchestrates the entire workflow:
1. Log in to sportsxzone and open the body page
2. Scroll until every match card has been collected
3. Normalize odds and kick-off times, assign stable ids
4. Write the API document (and optionally an Excel sheet)

Usage:
    python main.py [--output PATH] [--excel] [--max-iterations N] [--headed]
    python main.py --serve [--port 3000]

Environment Variables:
    SXZ_USERCODE / SXZ_PASSWORD: site credentials (required)
    SXZ_BASE_URL: site root (default: https://sportsxzone.com)
    SXZ_OUTPUT: output JSON path (default: output.json)
    PORT: API port for --serve (default: 3000)
"""

import argparse
import asyncio
import os
import sys
from dataclasses import replace
from pathlib import Path

import uvicorn

from api.app import create_app
from core.config import ScrapeConfig
from core.utils import cprint, logger, Fore, Style
from scrapers.sportsxzone import ScrapeError, SportsXZoneScraper


def build_config(args: argparse.Namespace) -> ScrapeConfig:
    config = ScrapeConfig.from_env()
    scroll = config.scroll
    if args.max_iterations:
        scroll = replace(scroll, max_iterations=args.max_iterations)
    return config.with_overrides(
        output_path=Path(args.output) if args.output else None,
        excel=True if args.excel else None,
        headless=False if args.headed else None,
        scroll=scroll,
    )


def serve(config: ScrapeConfig, port: int) -> None:
    """Run the HTTP API with the same config a one-shot scrape would use."""
    logger.info("API running on port %d", port)
    uvicorn.run(create_app(config), host="0.0.0.0", port=port)


async def main(config: ScrapeConfig) -> int:
    """Main execution function."""
    cprint("=" * 80, Fore.WHITE, Style.BRIGHT)
    cprint("⚽ SPORTSXZONE BODY ODDS", Fore.WHITE, Style.BRIGHT)
    cprint("=" * 80, Fore.WHITE, Style.BRIGHT)

    cprint("📋 Configuration:", Fore.CYAN)
    cprint(f"   Site: {config.body_url}", Fore.CYAN)
    cprint(f"   Output: {config.output_path}", Fore.CYAN)
    cprint(f"   Max scroll iterations: {config.scroll.max_iterations}", Fore.CYAN)

    try:
        response = await SportsXZoneScraper(config).run()
    except ScrapeError as e:
        logger.error("Scrape aborted: %s", e)
        cprint(f"\n❌ Scrape aborted: {e}", Fore.RED, Style.BRIGHT)
        return 1
    except KeyboardInterrupt:
        cprint("\n⚠️ Process interrupted by user", Fore.YELLOW)
        return 1

    matches = response["matches"]
    leagues = {m["home"]["league"]["leagueId"] for m in matches}
    cprint("\n" + "=" * 80, Fore.WHITE)
    cprint("✅ SCRAPE COMPLETE!", Fore.GREEN, Style.BRIGHT)
    cprint(f"   Matches: {len(matches)}", Fore.GREEN)
    cprint(f"   Leagues: {len(leagues)}", Fore.GREEN)
    cprint(f"   Finished: {sum(1 for m in matches if m['finished'])}", Fore.CYAN)
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape sportsxzone body odds")
    parser.add_argument("--output", help="Output JSON path")
    parser.add_argument("--excel", action="store_true", help="Also write an Excel sheet")
    parser.add_argument("--max-iterations", type=int, help="Scroll iteration budget")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API instead")
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")))
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    if args.serve:
        serve(build_config(args), args.port)
        sys.exit(0)
    try:
        sys.exit(asyncio.run(main(build_config(args))))
    except Exception as e:
        logger.exception("Unhandled exception: %s", e)
        cprint(f"\n❌ Unhandled exception: {e}", Fore.RED, Style.BRIGHT)
        sys.exit(1)
