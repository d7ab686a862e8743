"""Timestamp helpers shared by the collectors and the aggregator."""

import math
from datetime import datetime, timezone

from .constants import SECONDS_PER_DAY


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as emitted by git (%aI) or the GitHub API."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def format_timestamp(value: datetime) -> str:
    """Format a datetime for git's --after/--before and GitHub's since/until."""
    return ensure_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def utc_day_key(value: datetime) -> str:
    """Calendar day (YYYY-MM-DD) of ``value`` in UTC."""
    return ensure_utc(value).date().isoformat()


def days_in_window(start: datetime, end: datetime) -> int:
    """Whole days spanned by ``[start, end)``, never less than one."""
    seconds = (ensure_utc(end) - ensure_utc(start)).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
