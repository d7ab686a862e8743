"""Core constants and helpers."""

from .timeutils import ensure_utc, parse_timestamp, utc_day_key, days_in_window

__all__ = ["ensure_utc", "parse_timestamp", "utc_day_key", "days_in_window"]
