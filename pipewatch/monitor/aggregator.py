"""StatusAggregator — fold every action status into one pipeline label.

Precedence
----------
1. Any action ``Failed``                       -> ``Failed``
2. Every action ``Succeeded`` (or no actions)  -> ``Succeeded``
3. Otherwise the most severe remaining status:
   ``InProgress`` > ``Stopping`` > ``Stopped`` > ``Cancelled`` >
   ``Abandoned`` > ``Superseded`` > other statuses in lexical order >
   never-executed (``Unknown``).

The choice of label lives here.  Padding and colour belong to the renderer.
"""

from __future__ import annotations

from collections.abc import Iterable

from pipewatch.models.pipeline import AggregatedRow, PipelineSnapshot, PipelineStatus

DEFAULT_NAME_WIDTH = 30

# Most severe first.
_SEVERITY: tuple[str, ...] = (
    PipelineStatus.IN_PROGRESS,
    PipelineStatus.STOPPING,
    PipelineStatus.STOPPED,
    PipelineStatus.CANCELLED,
    PipelineStatus.ABANDONED,
    PipelineStatus.SUPERSEDED,
)
_RANK = {status: index for index, status in enumerate(_SEVERITY)}


def _severity_key(status: str | None) -> tuple[int, str]:
    if status is None:
        return (len(_SEVERITY) + 1, "")
    return (_RANK.get(status, len(_SEVERITY)), status)


def aggregate(snapshot: PipelineSnapshot) -> str:
    """Return the overall status label for *snapshot*."""
    statuses = {action.status for _, action in snapshot.actions()}

    if PipelineStatus.FAILED in statuses:
        return PipelineStatus.FAILED

    statuses.discard(PipelineStatus.SUCCEEDED)
    if not statuses:
        return PipelineStatus.SUCCEEDED

    chosen = min(statuses, key=_severity_key)
    return PipelineStatus.UNKNOWN if chosen is None else chosen


def truncate_name(name: str, width: int = DEFAULT_NAME_WIDTH) -> str:
    """Cut *name* to the summary table's display width."""
    return name[:width]


def build_rows(
    snapshots: Iterable[PipelineSnapshot],
    width: int = DEFAULT_NAME_WIDTH,
) -> list[AggregatedRow]:
    """One summary row per snapshot, in snapshot order."""
    return [
        AggregatedRow(
            pipeline_name=truncate_name(snapshot.pipeline_name, width),
            overall_status=aggregate(snapshot),
        )
        for snapshot in snapshots
    ]
