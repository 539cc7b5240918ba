"""Timestamp helpers: the store keeps naive UTC, callers see the app timezone."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from notification_service.config import get_settings

_UTC_OFFSET = re.compile(r"^(?:UTC|GMT)([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Timezone named by ``APP_TIMEZONE`` (IANA name or ``UTC+3`` style offset).

    Blank or unknown values mean UTC.
    """

    name = (get_settings().app_timezone or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass
    match = _UTC_OFFSET.match(name)
    if match is None:
        return timezone.utc
    sign, hours, minutes = match.groups()
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    return timezone(-offset if sign == "-" else offset)


def utc_now_naive() -> datetime:
    """Current instant as naive UTC, the form written to ``DATETIME`` columns."""

    return datetime.now(tz=timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime | None) -> datetime | None:
    """Convert ``value`` to naive UTC; naive input is read as app-local time."""

    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_app_timezone())
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def from_utc_naive(value: datetime | None) -> datetime | None:
    """Read a stored naive UTC value back as an aware app-timezone datetime."""

    if value is None:
        return None
    return value.replace(tzinfo=timezone.utc).astimezone(get_app_timezone())
