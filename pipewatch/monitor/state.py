"""DashboardState — the single-writer cache of the latest snapshot set.

The refresh loop is the only writer (``replace``); the detail view is the
only reader (``lookup``).  Both run on the same event loop, and ``replace``
swaps one immutable tuple, so a reader sees either the whole old set or
the whole new one.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timezone

from pipewatch.models.pipeline import PipelineSnapshot


class DashboardState:
    """Holds the most recent complete set of pipeline snapshots."""

    def __init__(self) -> None:
        self._snapshots: tuple[PipelineSnapshot, ...] = ()
        self._generation = 0
        self._updated_at: datetime | None = None

    # ------------------------------------------------------------------
    # Writer
    # ------------------------------------------------------------------

    def replace(self, snapshots: Iterable[PipelineSnapshot]) -> None:
        """Swap in a new snapshot set, discarding the previous one."""
        self._snapshots = tuple(snapshots)
        self._generation += 1
        self._updated_at = datetime.now(timezone.utc)

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def lookup(self, display_name: str) -> PipelineSnapshot | None:
        """Resolve a (possibly truncated) display name to its snapshot.

        An exact name match wins; otherwise the first stored pipeline, in
        stored order, whose name starts with *display_name*.
        """
        key = display_name.strip()
        if not key:
            return None
        snapshots = self._snapshots
        for snapshot in snapshots:
            if snapshot.pipeline_name == key:
                return snapshot
        for snapshot in snapshots:
            if snapshot.pipeline_name.startswith(key):
                return snapshot
        return None

    @property
    def snapshots(self) -> tuple[PipelineSnapshot, ...]:
        return self._snapshots

    @property
    def generation(self) -> int:
        """Number of completed ``replace`` calls."""
        return self._generation

    @property
    def updated_at(self) -> datetime | None:
        return self._updated_at

    def __len__(self) -> int:
        return len(self._snapshots)
