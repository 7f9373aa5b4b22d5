"""Human-readable relative times ("5 minutes ago", "in about 2 hours")."""

from __future__ import annotations

from datetime import datetime, timezone

_MINUTES_IN_DAY = 1440
_MINUTES_IN_MONTH = 43200
_MINUTES_IN_TWO_MONTHS = 86400


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}" if count == 1 else f"{count} {unit}s"


def _distance(seconds: float) -> str:
    minutes = round(seconds / 60)

    if minutes < 1:
        return "less than a minute"
    if minutes < 45:
        return _plural(minutes, "minute")
    if minutes < 90:
        return "about 1 hour"
    if minutes < _MINUTES_IN_DAY:
        return f"about {_plural(round(minutes / 60), 'hour')}"
    if minutes < 2520:
        return "1 day"
    if minutes < _MINUTES_IN_MONTH:
        return _plural(round(minutes / _MINUTES_IN_DAY), "day")
    if minutes < _MINUTES_IN_TWO_MONTHS:
        return f"about {_plural(round(minutes / _MINUTES_IN_MONTH), 'month')}"

    months = int(seconds // (30.4375 * 86400))
    if months < 12:
        return _plural(round(minutes / _MINUTES_IN_MONTH), "month")

    years, remainder = divmod(months, 12)
    if remainder < 3:
        return f"about {_plural(years, 'year')}"
    if remainder < 9:
        return f"over {_plural(years, 'year')}"
    return f"almost {_plural(years + 1, 'year')}"


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def humanize_time(when: datetime, now: datetime | None = None) -> str:
    """Describe *when* relative to *now* (defaults to the current time).

    Naive datetimes are taken as UTC.
    """
    when = _aware(when)
    now = _aware(now) if now is not None else datetime.now(timezone.utc)
    delta = (now - when).total_seconds()
    if delta >= 0:
        return f"{_distance(delta)} ago"
    return f"in {_distance(-delta)}"
