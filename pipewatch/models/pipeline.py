"""Pipeline snapshot models — one immutable view per poll cycle.

A ``PipelineSnapshot`` is built once per cycle from a ``GetPipelineState``
response and superseded wholesale by the next cycle's snapshot.  Stage and
action order is kept exactly as the service returned it.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PipelineStatus:
    """Status labels reported by the orchestration service."""

    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    IN_PROGRESS = "InProgress"
    STOPPING = "Stopping"
    STOPPED = "Stopped"
    CANCELLED = "Cancelled"
    ABANDONED = "Abandoned"
    SUPERSEDED = "Superseded"

    # Label used when an action has never executed.
    UNKNOWN = "Unknown"


class PipelineRef(BaseModel):
    """One entry of the pipeline listing."""

    model_config = ConfigDict(frozen=True)

    name: str
    version: int | None = None
    updated: datetime | None = None


class ActionSnapshot(BaseModel):
    """Latest execution of a single action inside a stage."""

    model_config = ConfigDict(frozen=True)

    action_name: str
    status: str | None = None
    last_status_change: datetime | None = None
    summary: str | None = None
    revision_url: str | None = None
    entity_url: str | None = None
    external_execution_url: str | None = None

    @property
    def link(self) -> str:
        """Best available link: revision, then entity, then empty."""
        return self.revision_url or self.entity_url or ""


class StageSnapshot(BaseModel):
    """An ordered phase of a pipeline and its actions."""

    model_config = ConfigDict(frozen=True)

    stage_name: str
    status: str | None = None
    actions: tuple[ActionSnapshot, ...] = ()


class PipelineSnapshot(BaseModel):
    """Full state of one watched pipeline as seen in one poll cycle."""

    model_config = ConfigDict(frozen=True)

    pipeline_name: str
    pipeline_version: int | None = None
    updated: datetime | None = None
    stages: tuple[StageSnapshot, ...] = ()
    fetched_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> PipelineSnapshot:
        """Build a snapshot from a ``GetPipelineState`` response.

        Missing ``latestExecution`` blocks (actions that never ran) map to
        an absent status and timestamp.
        """
        stages: list[StageSnapshot] = []
        for stage in payload.get("stageStates") or []:
            actions: list[ActionSnapshot] = []
            for action in stage.get("actionStates") or []:
                execution = action.get("latestExecution") or {}
                actions.append(
                    ActionSnapshot(
                        action_name=action.get("actionName", ""),
                        status=execution.get("status"),
                        last_status_change=execution.get("lastStatusChange"),
                        summary=execution.get("summary"),
                        revision_url=action.get("revisionUrl"),
                        entity_url=action.get("entityUrl"),
                        external_execution_url=execution.get("externalExecutionUrl"),
                    )
                )
            stage_execution = stage.get("latestExecution") or {}
            stages.append(
                StageSnapshot(
                    stage_name=stage.get("stageName", ""),
                    status=stage_execution.get("status"),
                    actions=tuple(actions),
                )
            )

        return cls(
            pipeline_name=payload["pipelineName"],
            pipeline_version=payload.get("pipelineVersion"),
            updated=payload.get("updated"),
            stages=tuple(stages),
        )

    def actions(self) -> Iterator[tuple[StageSnapshot, ActionSnapshot]]:
        """Yield ``(stage, action)`` pairs in received order."""
        for stage in self.stages:
            for action in stage.actions:
                yield stage, action

    @property
    def action_count(self) -> int:
        return sum(len(stage.actions) for stage in self.stages)


class AggregatedRow(BaseModel):
    """One summary table row, derived fresh every cycle."""

    model_config = ConfigDict(frozen=True)

    pipeline_name: str
    overall_status: str


class CycleResult(BaseModel):
    """Everything one fetch cycle produced.

    ``snapshots`` keeps the order of the watched pipeline list.
    ``failures`` maps pipeline names dropped from the cycle to the reason.
    """

    model_config = ConfigDict(frozen=True)

    snapshots: tuple[PipelineSnapshot, ...] = ()
    failures: dict[str, str] = {}
    started_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    finished_at: datetime | None = None

    @property
    def watched_count(self) -> int:
        return len(self.snapshots) + len(self.failures)
