from __future__ import annotations

from datetime import datetime, timezone

import pytz
from dateutil import tz

from app.core.config import settings


LOCAL_TZ = pytz.timezone(settings.tz)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """Normalise to an aware UTC datetime; naive values are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.UTC)
    return dt.astimezone(tz.UTC)


def to_local(dt: datetime) -> datetime:
    return to_utc(dt).astimezone(LOCAL_TZ)


def local_hour(dt: datetime) -> int:
    """Hour of day (0-23) of a stored timestamp in the configured time zone."""
    return to_local(dt).hour
