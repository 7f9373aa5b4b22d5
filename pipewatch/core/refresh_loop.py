"""RefreshLoop — one fetch -> aggregate -> publish cycle, repeated.

State machine
-------------
``IDLE`` -> ``FETCHING`` on every tick (and once at startup), back to
``IDLE`` when the cycle completes or fails.  A tick that arrives while a
cycle is still running is skipped, so slow fetches never pile up.

A cycle's results become visible only after every detail call in it has
settled.  A failed cycle leaves the previous snapshot set on screen; the
next tick is the only retry.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING

from pipewatch.core.errors import RenderFailure
from pipewatch.models.pipeline import AggregatedRow, CycleResult
from pipewatch.monitor.aggregator import DEFAULT_NAME_WIDTH, build_rows

if TYPE_CHECKING:
    from pipewatch.core.fetcher import PipelineFetcher
    from pipewatch.monitor.state import DashboardState

logger = logging.getLogger(__name__)

PublishCallback = Callable[[list[AggregatedRow], CycleResult], None]
ErrorCallback = Callable[[Exception], None]


class LoopState(str, Enum):
    """Refresh loop states."""

    IDLE = "idle"
    FETCHING = "fetching"


class RefreshLoop:
    """Drives periodic refresh cycles against a ``DashboardState``.

    Parameters
    ----------
    fetcher:
        Produces one ``CycleResult`` per cycle.
    state:
        The dashboard's snapshot cache.  Only this loop writes to it.
    interval:
        Seconds between cycle starts.
    on_publish:
        Called with the new summary rows after the state was replaced.
    on_error:
        Called with the exception of a failed cycle.
    name_width:
        Display width of pipeline names in summary rows.
    strict:
        Re-raise publish defects instead of logging them.
    """

    def __init__(
        self,
        fetcher: PipelineFetcher,
        state: DashboardState,
        *,
        interval: float = 60.0,
        on_publish: PublishCallback | None = None,
        on_error: ErrorCallback | None = None,
        name_width: int = DEFAULT_NAME_WIDTH,
        strict: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._state = state
        self._interval = interval
        self._on_publish = on_publish
        self._on_error = on_error
        self._name_width = name_width
        self._strict = strict

        self._loop_state = LoopState.IDLE
        self._stopped = asyncio.Event()
        self.cycles_completed = 0
        self.cycles_failed = 0
        self.ticks_skipped = 0
        self.last_error: Exception | None = None
        self.last_result: CycleResult | None = None

    @property
    def loop_state(self) -> LoopState:
        return self._loop_state

    @property
    def interval(self) -> float:
        return self._interval

    # ------------------------------------------------------------------
    # Cycles
    # ------------------------------------------------------------------

    async def tick(self) -> bool:
        """Run a cycle unless one is already in flight.

        Returns ``True`` if a cycle ran and published.
        """
        if self._loop_state is LoopState.FETCHING:
            self.ticks_skipped += 1
            logger.debug("Refresh still running; skipping tick")
            return False
        return await self.run_cycle()

    async def run_cycle(self) -> bool:
        """Fetch, aggregate and publish once.

        Returns ``True`` on success, ``False`` when the fetch failed.

        Raises
        ------
        RenderFailure
            In strict mode, when turning the snapshots into rows or
            notifying the view fails.
        """
        self._loop_state = LoopState.FETCHING
        try:
            try:
                result = await self._fetcher.fetch_cycle()
            except Exception as exc:
                self._record_failure(exc)
                return False
            self._publish(result)
            return True
        finally:
            self._loop_state = LoopState.IDLE

    def _publish(self, result: CycleResult) -> None:
        try:
            rows = build_rows(result.snapshots, self._name_width)
        except Exception as exc:
            self._render_defect(exc)
            return

        self._state.replace(result.snapshots)
        self.last_result = result
        self.last_error = None
        self.cycles_completed += 1
        logger.info(
            "Published %d pipelines (%d dropped)",
            len(result.snapshots),
            len(result.failures),
        )

        if self._on_publish is not None:
            try:
                self._on_publish(rows, result)
            except Exception as exc:
                self._render_defect(exc)

    def _record_failure(self, exc: Exception) -> None:
        self.cycles_failed += 1
        self.last_error = exc
        logger.error("Refresh cycle failed: %s", exc)
        if self._on_error is not None:
            self._on_error(exc)

    def _render_defect(self, exc: Exception) -> None:
        failure = RenderFailure(f"Could not render refreshed pipelines: {exc}")
        if self._strict:
            raise failure from exc
        logger.exception("Render failure (ignored outside strict mode)")
        self.last_error = failure
        if self._on_error is not None:
            self._on_error(failure)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def run_forever(self) -> None:
        """Run a cycle now, then one per interval until ``stop()``.

        Cycles start on a fixed-rate schedule measured from the first
        start.  Ticks that fall due while a cycle is still fetching are
        skipped and counted in ``ticks_skipped``.
        """
        self._stopped.clear()
        clock = asyncio.get_running_loop()
        next_start = clock.time()
        while not self._stopped.is_set():
            await self.tick()
            next_start += self._interval
            now = clock.time()
            if now > next_start:
                missed = int((now - next_start) // self._interval) + 1
                self.ticks_skipped += missed
                next_start += missed * self._interval
                logger.debug("Refresh overran its interval; skipped %d tick(s)", missed)
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=next_start - now)
            except asyncio.TimeoutError:
                continue

    def stop(self) -> None:
        """Ask ``run_forever`` to return after the current wait."""
        self._stopped.set()
