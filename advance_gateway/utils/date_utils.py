"""Date manipulation utilities"""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Timezone-aware current UTC time"""
    return datetime.now(timezone.utc)


def expires_at(hours: int, now: datetime | None = None) -> datetime:
    """Point in time `hours` after `now` (default: current time)"""
    return (now or utcnow()) + timedelta(hours=hours)
