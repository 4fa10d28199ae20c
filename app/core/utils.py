import uuid
from datetime import datetime, timezone


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite hands DateTime(timezone=True) columns back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_iso(value: datetime) -> str:
    """Timestamp format used inside JSON columns (versions, feedback)."""
    return as_utc(value).isoformat().replace("+00:00", "Z")


def utcnow_iso() -> str:
    return to_iso(utcnow())
