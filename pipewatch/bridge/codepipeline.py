"""CodePipeline bridge — the remote API behind a small async protocol.

Bridge boundary
---------------
The refresh engine depends only on ``PipelineClient``: an async
``list_pipelines()`` returning ``[{"name": ...}, ...]`` and an async
``get_pipeline_state(name)`` returning the raw ``GetPipelineState``
response.  ``CodePipelineClient`` implements it with boto3; the blocking
calls run in a worker thread so the event loop stays responsive.

Credentials come from boto3's default chain.  One region per client.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, runtime_checkable

import boto3
from botocore.config import Config

logger = logging.getLogger(__name__)


@runtime_checkable
class PipelineClient(Protocol):
    """What the fetcher needs from the orchestration service."""

    async def list_pipelines(self) -> list[dict[str, Any]]:
        ...

    async def get_pipeline_state(self, name: str) -> dict[str, Any]:
        ...


class CodePipelineClient:
    """``PipelineClient`` backed by the boto3 ``codepipeline`` client.

    Parameters
    ----------
    region:
        AWS region name.  ``None`` uses the environment's default.
    profile:
        Named profile from the shared credentials file.
    timeout:
        Connect and read timeout in seconds for every call.
    client:
        A pre-built boto3 client (or compatible object); skips session
        construction.  Used in tests.
    """

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        *,
        timeout: float = 10.0,
        client: Any = None,
    ) -> None:
        if client is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client(
                "codepipeline",
                config=Config(
                    connect_timeout=timeout,
                    read_timeout=timeout,
                    retries={"max_attempts": 2, "mode": "standard"},
                ),
            )
        self._client = client

    async def list_pipelines(self) -> list[dict[str, Any]]:
        """Return every pipeline summary, following pagination."""
        return await asyncio.to_thread(self._list_all)

    async def get_pipeline_state(self, name: str) -> dict[str, Any]:
        """Return the raw ``GetPipelineState`` response for *name*."""
        return await asyncio.to_thread(self._client.get_pipeline_state, name=name)

    def _list_all(self) -> list[dict[str, Any]]:
        pipelines: list[dict[str, Any]] = []
        kwargs: dict[str, Any] = {}
        while True:
            page = self._client.list_pipelines(**kwargs)
            pipelines.extend(page.get("pipelines", []))
            token = page.get("nextToken")
            if not token:
                break
            kwargs["nextToken"] = token
        logger.debug("Listed %d pipelines", len(pipelines))
        return pipelines
