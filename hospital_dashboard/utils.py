import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp"""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive value (SQLite drops the offset on read)"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def next_timestamp(now: datetime, previous: Optional[datetime]) -> datetime:
    """A timestamp strictly later than `previous`, even if the clock has not moved"""
    now = as_utc(now)
    if previous is not None:
        previous = as_utc(previous)
        if now <= previous:
            return previous + timedelta(microseconds=1)
    return now


def new_record_id() -> str:
    return str(uuid.uuid4())
