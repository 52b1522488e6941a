"""FastAPI application exposing the body-odds scraper.

Usage (dev):
  uvicorn api.app:app --host 0.0.0.0 --port 3000

Endpoints:
  GET /health        – service status and whether a scrape is running
  GET /body          – run a scrape now and return the document
  GET /body/latest   – last successful document without scraping
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.config import ScrapeConfig
from scrapers.sportsxzone import ScrapeError, SportsXZoneScraper

logger = logging.getLogger("sxz.api")


class SingleFlight:
    """
    Non-blocking guard allowing one scrape at a time.

    Only used from the event loop thread.
    """

    def __init__(self):
        self._running = False

    def try_acquire(self) -> bool:
        if self._running:
            return False
        self._running = True
        return True

    def release(self) -> None:
        self._running = False

    @property
    def running(self) -> bool:
        return self._running


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        t0 = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt = (time.perf_counter() - t0) * 1000
            logger.info("ACCESS %s %s -> %s in %.1fms", request.method, request.url.path, status, dt)


def create_app(config: Optional[ScrapeConfig] = None,
               scraper_factory: Optional[Callable[[ScrapeConfig], Any]] = None) -> FastAPI:
    config = config or ScrapeConfig.from_env()
    scraper_factory = scraper_factory or SportsXZoneScraper

    app = FastAPI(title="GGWP Body Odds API", version="1.0.0")
    app.add_middleware(AccessLogMiddleware)

    guard = SingleFlight()
    cache: Dict[str, Any] = {"data": None, "updated_at": None}
    app.state.config = config
    app.state.guard = guard
    app.state.cache = cache

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("UNHANDLED ERROR: %s %s", request.method, request.url)
        return JSONResponse(status_code=500, content={"error": "internal_error"})

    @app.get("/health")
    async def health():
        return {"status": "ok", "running": guard.running, "updated_at": cache["updated_at"]}

    @app.get("/body")
    async def body():
        if not guard.try_acquire():
            return JSONResponse(status_code=409, content={"status": "running"})
        try:
            data = await scraper_factory(config).run()
        except ScrapeError as e:
            logger.error("Scrape failed: %s", e)
            return JSONResponse(status_code=500, content={"error": str(e)})
        finally:
            guard.release()
        cache["data"] = data
        cache["updated_at"] = data.get("date")
        return data

    @app.get("/body/latest")
    async def latest():
        if cache["data"] is None:
            return JSONResponse(status_code=404, content={"error": "no scrape yet"})
        return cache["data"]

    return app


app = create_app()
