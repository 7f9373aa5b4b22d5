"""View adapters for the summary table and the detail list.

Turns ``AggregatedRow`` lists and ``PipelineSnapshot`` objects into what
the views display: padded, colour-coded status labels, detail lines, and
Rich renderables for one-shot terminal output.

Color scheme
------------
- white on red   : Failed
- white on green : Succeeded
- white on blue  : anything else
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pipewatch.models.pipeline import AggregatedRow, PipelineSnapshot, PipelineStatus
from pipewatch.monitor.humanize import humanize_time

STATUS_WIDTH = 10

# ---------------------------------------------------------------------------
# Status -> Rich style mapping
# ---------------------------------------------------------------------------

_STATUS_STYLES: dict[str, str] = {
    PipelineStatus.FAILED: "bold white on red",
    PipelineStatus.SUCCEEDED: "bold white on green",
}
_DEFAULT_STYLE = "bold white on blue"

SUMMARY_HEADERS = ("Pipeline", "Status")


def status_style(status: str) -> str:
    """Rich style for an overall status label."""
    return _STATUS_STYLES.get(status, _DEFAULT_STYLE)


def status_label(status: str, width: int = STATUS_WIDTH) -> Text:
    """Padded, styled status label for the summary table."""
    return Text(status.ljust(width), style=status_style(status))


# ---------------------------------------------------------------------------
# Summary view
# ---------------------------------------------------------------------------


def summary_cells(row: AggregatedRow) -> tuple[str, Text]:
    """Cells of one summary row: display name and styled status."""
    return row.pipeline_name, status_label(row.overall_status)


def summary_table(rows: list[AggregatedRow], *, title: str = "Pipelines") -> Table:
    """Build a Rich table with one line per aggregated row."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold cyan",
        show_lines=False,
        pad_edge=True,
    )
    table.add_column(SUMMARY_HEADERS[0], min_width=30, no_wrap=True)
    table.add_column(SUMMARY_HEADERS[1], width=STATUS_WIDTH)

    for row in rows:
        table.add_row(*summary_cells(row))

    if not rows:
        table.add_row(Text("no watched pipelines", style="dim"), "")
    return table


# ---------------------------------------------------------------------------
# Detail view
# ---------------------------------------------------------------------------


class DetailBlock(BaseModel):
    """Everything the detail list shows for one action."""

    model_config = ConfigDict(frozen=True)

    stage_name: str
    action_name: str
    status: str
    last_ran: str
    link: str

    def lines(self) -> list[str]:
        """The block as list items, ending with a blank separator."""
        return [
            f"Stage: {self.stage_name}\tAction: {self.action_name}\tStatus: {self.status}",
            f"\tLast Ran: {self.last_ran}",
            f"\tLink: {self.link}",
            "",
        ]


def detail_blocks(
    snapshot: PipelineSnapshot, now: datetime | None = None
) -> list[DetailBlock]:
    """One block per action, in stage then action order."""
    blocks: list[DetailBlock] = []
    for stage, action in snapshot.actions():
        if action.last_status_change is not None:
            last_ran = humanize_time(action.last_status_change, now)
        else:
            last_ran = "never"
        blocks.append(
            DetailBlock(
                stage_name=stage.stage_name,
                action_name=action.action_name,
                status=action.status or PipelineStatus.UNKNOWN,
                last_ran=last_ran,
                link=action.link,
            )
        )
    return blocks


def detail_lines(snapshot: PipelineSnapshot, now: datetime | None = None) -> list[str]:
    """Flattened list items for the detail view."""
    lines: list[str] = []
    for block in detail_blocks(snapshot, now):
        lines.extend(block.lines())
    return lines


def detail_panel(snapshot: PipelineSnapshot, now: datetime | None = None) -> Panel:
    """Rich panel with the per-action breakdown of one pipeline."""
    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Stage", min_width=12)
    table.add_column("Action", min_width=12)
    table.add_column("Status", width=STATUS_WIDTH)
    table.add_column("Last Ran", min_width=14)
    table.add_column("Link", overflow="fold")

    for block in detail_blocks(snapshot, now):
        table.add_row(
            block.stage_name,
            block.action_name,
            status_label(block.status),
            block.last_ran,
            block.link or "[dim]-[/dim]",
        )

    subtitle = None
    if snapshot.pipeline_version is not None:
        subtitle = f"version {snapshot.pipeline_version}"

    return Panel(
        table,
        title=f"[bold]{snapshot.pipeline_name}[/bold]",
        subtitle=subtitle,
        border_style="blue",
        padding=(1, 2),
    )
