"""PipelineFetcher — list, filter, then fetch watched pipelines' state.

Listing is unthrottled.  Every detail call takes one token from the shared
``RateLimiter`` first; once it holds a token it runs concurrently with the
other detail calls.  Pipelines outside the watched set never reach the
detail stage, so they cost no quota.

Failure policy
--------------
- The listing call fails: ``ListFailure``, the whole cycle aborts.
- One detail call fails or times out: that pipeline is dropped from the
  cycle and recorded in ``CycleResult.failures``; the rest are kept.
- The limiter fails: ``RateLimiterError`` propagates and aborts the cycle.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from pydantic import ValidationError

from pipewatch.core.errors import DetailFailure, ListFailure, RateLimiterError
from pipewatch.core.rate_limiter import RateLimiter
from pipewatch.models.pipeline import CycleResult, PipelineRef, PipelineSnapshot

if TYPE_CHECKING:
    from pipewatch.bridge.codepipeline import PipelineClient
    from pipewatch.config import WatchConfig

logger = logging.getLogger(__name__)

DEFAULT_NAME_PATTERN = "^integration"


def watched_names(names: list[str], pattern: str = DEFAULT_NAME_PATTERN) -> list[str]:
    """Return the names matching *pattern* case-insensitively, in input order."""
    regex = re.compile(pattern, re.IGNORECASE)
    return [name for name in names if regex.search(name)]


class PipelineFetcher:
    """Fetches the state of every watched pipeline for one cycle.

    Parameters
    ----------
    client:
        Remote API client (see ``pipewatch.bridge.codepipeline``).
    limiter:
        Global rate limiter gating detail calls.
    name_pattern:
        Regex matched case-insensitively against pipeline names.
    detail_timeout:
        Seconds allowed for one detail call once its token is held.
        ``None`` disables the bound.
    """

    def __init__(
        self,
        client: PipelineClient,
        limiter: RateLimiter,
        *,
        name_pattern: str = DEFAULT_NAME_PATTERN,
        detail_timeout: float | None = 10.0,
    ) -> None:
        self._client = client
        self._limiter = limiter
        self._pattern = re.compile(name_pattern, re.IGNORECASE)
        self._detail_timeout = detail_timeout

    @classmethod
    def from_config(cls, config: WatchConfig, client: PipelineClient) -> PipelineFetcher:
        """Build a fetcher with its own limiter from *config*."""
        limiter = RateLimiter(
            config.rate_limit.count,
            config.rate_limit.period_seconds,
        )
        return cls(
            client,
            limiter,
            name_pattern=config.name_pattern,
            detail_timeout=config.detail_timeout_seconds,
        )

    @property
    def name_pattern(self) -> str:
        return self._pattern.pattern

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    async def list_watched_pipelines(self) -> list[PipelineRef]:
        """List all pipelines and keep those matching the name pattern.

        Raises
        ------
        ListFailure
            If the listing call fails or returns malformed entries.
        """
        try:
            entries = await self._client.list_pipelines()
            refs = [PipelineRef.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise ListFailure(f"Malformed pipeline listing: {exc}") from exc
        except Exception as exc:
            raise ListFailure(f"Listing pipelines failed: {exc}") from exc

        keep = set(watched_names([ref.name for ref in refs], self._pattern.pattern))
        watched = [ref for ref in refs if ref.name in keep]
        logger.debug(
            "Watching %d of %d pipelines (pattern %r)",
            len(watched),
            len(refs),
            self._pattern.pattern,
        )
        return watched

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    async def get_details(self, ref: PipelineRef) -> PipelineSnapshot:
        """Fetch and parse one pipeline's full state.

        Takes one limiter token before calling out.

        Raises
        ------
        RateLimiterError
            Propagated unchanged from the limiter.
        DetailFailure
            If the call fails, times out, or returns an unparseable payload.
        """
        await self._limiter.acquire()
        try:
            if self._detail_timeout is None:
                payload = await self._client.get_pipeline_state(ref.name)
            else:
                payload = await asyncio.wait_for(
                    self._client.get_pipeline_state(ref.name),
                    timeout=self._detail_timeout,
                )
        except asyncio.TimeoutError:
            raise DetailFailure(
                ref.name, f"timed out after {self._detail_timeout}s"
            ) from None
        except Exception as exc:
            raise DetailFailure(ref.name, str(exc) or type(exc).__name__) from exc

        try:
            return PipelineSnapshot.from_api(payload)
        except (KeyError, TypeError, ValidationError) as exc:
            raise DetailFailure(ref.name, f"malformed state: {exc}") from exc

    # ------------------------------------------------------------------
    # Full cycle
    # ------------------------------------------------------------------

    async def fetch_cycle(self) -> CycleResult:
        """List, filter and fetch every watched pipeline.

        Returns only once every detail call has settled.  Snapshots keep
        the order of the listing, not completion order.

        Raises
        ------
        ListFailure
            If listing fails.
        RateLimiterError
            If the limiter fails for any detail call.
        """
        started_at = datetime.now(timezone.utc)
        refs = await self.list_watched_pipelines()

        outcomes = await asyncio.gather(
            *(self.get_details(ref) for ref in refs),
            return_exceptions=True,
        )

        snapshots: list[PipelineSnapshot] = []
        failures: dict[str, str] = {}
        for ref, outcome in zip(refs, outcomes):
            if isinstance(outcome, RateLimiterError):
                raise outcome
            if isinstance(outcome, DetailFailure):
                logger.warning("Dropping %s from this cycle: %s", ref.name, outcome.reason)
                failures[ref.name] = outcome.reason
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                snapshots.append(outcome)

        return CycleResult(
            snapshots=tuple(snapshots),
            failures=failures,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
        )
