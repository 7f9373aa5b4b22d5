"""pipewatch dashboard — Textual full-screen view over ``DashboardState``.

The summary table is redrawn by the refresh loop after each published
cycle.  The detail list is pull-based: it is filled only when a row is
selected, by looking the row's display name up in the latest state.

Usage:
    pipewatch watch
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Footer, OptionList, Static

from pipewatch.core.refresh_loop import RefreshLoop
from pipewatch.monitor.renderer import SUMMARY_HEADERS, detail_lines, summary_cells

if TYPE_CHECKING:
    from pipewatch.core.fetcher import PipelineFetcher
    from pipewatch.models.pipeline import AggregatedRow, CycleResult
    from pipewatch.monitor.state import DashboardState

logger = logging.getLogger(__name__)


class PipelineDashboardApp(App):
    """Pipeline summary table on top, per-action details below."""

    TITLE = "pipewatch"

    CSS = """
    Screen {
        layout: vertical;
    }
    #pipelines {
        height: 1fr;
        border: solid white;
    }
    #details {
        height: 3fr;
        border: solid white;
    }
    #debug {
        height: auto;
        max-height: 6;
        border: solid red;
        display: none;
    }
    #debug.visible {
        display: block;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("r", "refresh_now", "Refresh"),
        Binding("d", "toggle_debug", "Debug"),
    ]

    def __init__(
        self,
        fetcher: PipelineFetcher,
        state: DashboardState,
        *,
        interval: float = 60.0,
        name_width: int = 30,
        strict: bool = True,
    ) -> None:
        super().__init__()
        self._dashboard_state = state
        self._refresh_loop = RefreshLoop(
            fetcher,
            state,
            interval=interval,
            on_publish=self._on_rows_published,
            on_error=self._on_cycle_failed,
            name_width=name_width,
            strict=strict,
        )

    @property
    def refresh_loop(self) -> RefreshLoop:
        return self._refresh_loop

    def compose(self) -> ComposeResult:
        yield DataTable(id="pipelines")
        yield OptionList(id="details")
        yield Static("", id="debug")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#pipelines", DataTable)
        table.add_columns(*SUMMARY_HEADERS)
        table.cursor_type = "row"
        table.border_title = "Pipelines"

        details = self.query_one("#details", OptionList)
        details.border_title = "Pipeline Details"
        details.can_focus = False

        table.focus()
        self.run_worker(
            self._refresh_loop.run_forever(),
            group="refresh",
            exclusive=True,
            description="pipeline refresh loop",
        )

    def on_unmount(self) -> None:
        self._refresh_loop.stop()

    # ------------------------------------------------------------------
    # Refresh loop callbacks
    # ------------------------------------------------------------------

    def _on_rows_published(self, rows: list[AggregatedRow], result: CycleResult) -> None:
        table = self.query_one("#pipelines", DataTable)
        cursor_row = table.cursor_row
        table.clear()
        for row in rows:
            table.add_row(*summary_cells(row))
        if rows:
            table.move_cursor(row=min(cursor_row, len(rows) - 1))

        stamp = datetime.now(timezone.utc).strftime("%H:%M:%S UTC")
        subtitle = f"updated {stamp}"
        if result.failures:
            subtitle += f" | {len(result.failures)} unavailable"
        table.border_subtitle = subtitle

    def _on_cycle_failed(self, exc: Exception) -> None:
        self.query_one("#debug", Static).update(f"Last refresh failed: {exc}")
        self.query_one("#pipelines", DataTable).border_subtitle = "refresh failed"

    # ------------------------------------------------------------------
    # Detail view
    # ------------------------------------------------------------------

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        display_name = str(event.data_table.get_row(event.row_key)[0])
        self.show_details(display_name)

    def show_details(self, display_name: str) -> int:
        """Fill the detail list for *display_name*; return the line count."""
        details = self.query_one("#details", OptionList)
        details.clear_options()
        snapshot = self._dashboard_state.lookup(display_name)
        if snapshot is None:
            details.border_title = "Pipeline Details"
            logger.debug("No snapshot for selected row %r", display_name)
            return 0
        lines = [line.expandtabs(4) or " " for line in detail_lines(snapshot)]
        details.add_options(lines)
        details.border_title = f"Pipeline Details: {snapshot.pipeline_name}"
        return len(lines)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_refresh_now(self) -> None:
        self.run_worker(self._refresh_loop.tick(), group="manual-refresh")

    def action_toggle_debug(self) -> None:
        self.query_one("#debug", Static).toggle_class("visible")
