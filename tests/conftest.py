"""Shared test fixtures for pipewatch."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

import pytest

from pipewatch.models.pipeline import PipelineSnapshot

# A stage layout is (stage_name, [(action_name, status), ...]).
StageLayout = tuple[str, list[tuple[str, "str | None"]]]

LAST_CHANGE = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakePipelineClient:
    """In-memory ``PipelineClient``.

    ``states`` maps pipeline names to a ``GetPipelineState`` payload or to
    an exception raised when that pipeline is fetched.
    """

    def __init__(
        self,
        states: dict[str, dict[str, Any] | Exception],
        *,
        names: list[str] | None = None,
        list_error: Exception | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self._states = states
        self._names = names if names is not None else list(states)
        self._list_error = list_error
        self._delays = delays or {}
        self.list_calls = 0
        self.detail_calls: list[str] = []

    async def list_pipelines(self) -> list[dict[str, Any]]:
        self.list_calls += 1
        if self._list_error is not None:
            raise self._list_error
        return [{"name": name, "version": 1} for name in self._names]

    async def get_pipeline_state(self, name: str) -> dict[str, Any]:
        self.detail_calls.append(name)
        delay = self._delays.get(name)
        if delay:
            await asyncio.sleep(delay)
        state = self._states[name]
        if isinstance(state, Exception):
            raise state
        return state


class FakeClock:
    """Manual monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += max(delay, 0.0)
        await asyncio.sleep(0)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_state_payload() -> Callable[..., dict[str, Any]]:
    """Factory fixture: build a ``GetPipelineState`` response."""

    def _factory(
        name: str = "integration-app",
        stages: list[StageLayout] | None = None,
        **overrides: Any,
    ) -> dict[str, Any]:
        layout = stages if stages is not None else [
            ("Source", [("Checkout", "Succeeded")]),
            ("Build", [("Compile", "Succeeded")]),
        ]
        stage_states = []
        for stage_name, actions in layout:
            action_states = []
            for action_name, status in actions:
                action: dict[str, Any] = {
                    "actionName": action_name,
                    "revisionUrl": f"https://example.com/{name}/{action_name}/rev",
                    "entityUrl": f"https://example.com/{name}/{action_name}",
                }
                if status is not None:
                    action["latestExecution"] = {
                        "status": status,
                        "lastStatusChange": LAST_CHANGE,
                    }
                action_states.append(action)
            stage_states.append({"stageName": stage_name, "actionStates": action_states})

        payload: dict[str, Any] = {
            "pipelineName": name,
            "pipelineVersion": 3,
            "stageStates": stage_states,
        }
        payload.update(overrides)
        return payload

    return _factory


@pytest.fixture
def make_snapshot(
    make_state_payload: Callable[..., dict[str, Any]],
) -> Callable[..., PipelineSnapshot]:
    """Factory fixture: build a ``PipelineSnapshot`` from a stage layout."""

    def _factory(
        name: str = "integration-app",
        stages: list[StageLayout] | None = None,
    ) -> PipelineSnapshot:
        return PipelineSnapshot.from_api(make_state_payload(name, stages))

    return _factory


@pytest.fixture
def make_client() -> Callable[..., FakePipelineClient]:
    """Factory fixture: build a ``FakePipelineClient``."""

    def _factory(
        states: dict[str, dict[str, Any] | Exception],
        **kwargs: Any,
    ) -> FakePipelineClient:
        return FakePipelineClient(states, **kwargs)

    return _factory


@pytest.fixture
def fake_clock() -> FakeClock:
    """Provide a manual clock starting at t=0."""
    return FakeClock()


@pytest.fixture
def last_change() -> datetime:
    """The lastStatusChange stamped on every executed action by the factories."""
    return LAST_CHANGE
