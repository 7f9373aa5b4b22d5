"""Runtime configuration — env-driven via pydantic-settings.

Reads from a ``.env`` file and ``PIPEWATCH_*`` environment variables.
Nested fields use ``__`` as the delimiter.

Examples
--------
Override via environment::

    export PIPEWATCH_POLL_INTERVAL_MS=30000
    export PIPEWATCH_NAME_PATTERN='^release-'
    export PIPEWATCH_RATE_LIMIT__COUNT=2
    export PIPEWATCH_RATE_LIMIT__PER_UNIT=second
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Named periods accepted for ``rate_limit.per_unit``.
PERIOD_SECONDS: dict[str, float] = {
    "second": 1.0,
    "minute": 60.0,
    "hour": 3600.0,
    "day": 86400.0,
}


class RateLimitSettings(BaseModel):
    """Outbound detail-call quota: ``count`` requests per ``per_unit``."""

    model_config = ConfigDict(frozen=True)

    count: int = 5
    per_unit: str | float = "second"

    @field_validator("count")
    @classmethod
    def _positive_count(cls, value: int) -> int:
        if value < 1:
            raise ValueError("rate_limit.count must be at least 1")
        return value

    @field_validator("per_unit")
    @classmethod
    def _known_unit(cls, value: str | float) -> str | float:
        if isinstance(value, str):
            if value in PERIOD_SECONDS:
                return value
            try:
                value = float(value)
            except ValueError:
                raise ValueError(
                    f"rate_limit.per_unit must be one of {sorted(PERIOD_SECONDS)} "
                    "or a number of seconds"
                ) from None
        if value <= 0:
            raise ValueError("rate_limit.per_unit must be positive")
        return value

    @property
    def period_seconds(self) -> float:
        if isinstance(self.per_unit, str):
            return PERIOD_SECONDS[self.per_unit]
        return float(self.per_unit)


class WatchConfig(BaseSettings):
    """Dashboard configuration with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PIPEWATCH_",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    log_file: Path = Path(".pipewatch/pipewatch.log")
    debug: bool = False

    # Refresh engine
    poll_interval_ms: int = 60_000
    name_pattern: str = "^integration"
    rate_limit: RateLimitSettings = RateLimitSettings()
    detail_timeout_seconds: float = 10.0

    # Display
    name_width: int = 30

    # Remote service (single region, default credential chain)
    aws_region: str | None = None
    aws_profile: str | None = None

    @field_validator("name_pattern")
    @classmethod
    def _pattern_compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            raise ValueError(f"name_pattern is not a valid regex: {exc}") from exc
        return value

    @field_validator("poll_interval_ms")
    @classmethod
    def _positive_interval(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("poll_interval_ms must be positive")
        return value

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"

    @property
    def strict(self) -> bool:
        """Render defects are re-raised outside production."""
        return not self.is_production

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0
