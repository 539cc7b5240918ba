"""Utility helpers for reusable functionality."""

from .datetime import from_utc_naive, get_app_timezone, to_utc_naive, utc_now_naive

__all__ = [
    "from_utc_naive",
    "get_app_timezone",
    "to_utc_naive",
    "utc_now_naive",
]
