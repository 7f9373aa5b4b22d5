"""Pydantic models shared across pipewatch."""

from pipewatch.models.pipeline import (
    ActionSnapshot,
    AggregatedRow,
    CycleResult,
    PipelineRef,
    PipelineSnapshot,
    PipelineStatus,
    StageSnapshot,
)

__all__ = [
    "ActionSnapshot",
    "AggregatedRow",
    "CycleResult",
    "PipelineRef",
    "PipelineSnapshot",
    "PipelineStatus",
    "StageSnapshot",
]
