#!/usr/bin/env python3
"""
Incremental scroll collector.

The body page renders matches lazily while it is scrolled. ScrollCollector is a
plain state machine: feed it the records from one snapshot and the current
scroll metrics via ``step()``, and it answers with the next scroll offset.
``collect()`` drives it against any object implementing ``DocumentDriver``.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from core.config import ScrollSettings
from core.models import RawMatchRecord, ScrollMetrics

logger = logging.getLogger("sxz.collector")


class CollectorState(str, Enum):
    COLLECTING = "collecting"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


class DocumentDriver(Protocol):
    """What the collector needs from a live, rendered page."""

    async def wait_ready(self) -> None: ...

    async def snapshot(self) -> str: ...

    async def scroll_metrics(self) -> ScrollMetrics: ...

    async def scroll_to(self, top: float) -> None: ...


class ScrollCollector:
    def __init__(self, settings: Optional[ScrollSettings] = None):
        self.settings = settings or ScrollSettings()
        self.state = CollectorState.COLLECTING
        self.records: Dict[Tuple[str, ...], RawMatchRecord] = {}
        self.iterations = 0
        self.no_new_streak = 0
        self.no_scroll_streak = 0
        self.last_added = 0
        self._last_top: Optional[float] = None

    @property
    def is_converged(self) -> bool:
        return self.state is CollectorState.CONVERGED

    @property
    def is_exhausted(self) -> bool:
        return self.state is CollectorState.EXHAUSTED

    @property
    def is_terminal(self) -> bool:
        return self.state is not CollectorState.COLLECTING

    def merge(self, records: Iterable[RawMatchRecord]) -> int:
        """Add unseen records; returns how many were new."""
        added = 0
        for record in records:
            key = record.key
            if key not in self.records:
                self.records[key] = record
                added += 1
        return added

    def next_offset(self, metrics: ScrollMetrics) -> float:
        step = max(self.settings.min_step_px, metrics.client_height * self.settings.step_ratio)
        return min(metrics.max_top, metrics.top + step)

    def step(self, records: Iterable[RawMatchRecord], metrics: ScrollMetrics) -> Optional[float]:
        """
        Record one pass over the page.

        Args:
            records: Records classified from the current snapshot
            metrics: Scroll metrics of the main container, before scrolling

        Returns:
            The offset to scroll to next, or None when no scroll is needed
            (at the bottom, or the collector reached a terminal state).
        """
        if self.is_terminal:
            return None
        s = self.settings
        self.iterations += 1
        self.last_added = self.merge(records)

        self.no_new_streak = 0 if self.last_added else self.no_new_streak + 1
        moved = self._last_top is None or metrics.top != self._last_top
        self.no_scroll_streak = 0 if moved else self.no_scroll_streak + 1
        self._last_top = metrics.top

        at_bottom = metrics.at_bottom(s.bottom_tolerance_px)
        logger.debug(
            "Iteration %d: +%d (total %d), top=%.0f/%.0f, idle=%d, still=%d",
            self.iterations, self.last_added, len(self.records), metrics.top,
            metrics.max_top, self.no_new_streak, self.no_scroll_streak,
        )

        if at_bottom and self.no_new_streak >= s.converge_streak and self.no_scroll_streak >= s.converge_streak:
            self.state = CollectorState.CONVERGED
        elif (self.no_new_streak >= s.no_new_ceiling
              or self.no_scroll_streak >= s.no_scroll_ceiling
              or self.iterations >= s.max_iterations):
            self.state = CollectorState.EXHAUSTED

        if self.is_terminal or at_bottom:
            return None
        return self.next_offset(metrics)

    def results(self) -> List[RawMatchRecord]:
        """Accumulated records in first-seen order."""
        return list(self.records.values())


async def collect(driver: DocumentDriver, classify: Callable[[str], List[RawMatchRecord]],
                  settings: Optional[ScrollSettings] = None) -> List[RawMatchRecord]:
    """
    Scroll through the page until the collector converges or gives up.

    Args:
        driver: Live document
        classify: Snapshot HTML -> records
        settings: Scroll thresholds

    Returns:
        Deduplicated records in first-seen order
    """
    collector = ScrollCollector(settings)
    while not collector.is_terminal:
        await driver.wait_ready()
        records = classify(await driver.snapshot())
        metrics = await driver.scroll_metrics()
        target = collector.step(records, metrics)
        if target is not None:
            await driver.scroll_to(target)
        if not collector.is_terminal:
            await asyncio.sleep(collector.settings.delay_seconds)

    logger.info(
        "Scroll collection %s after %d iterations: %d unique matches",
        collector.state.value, collector.iterations, len(collector.records),
    )
    return collector.results()
