# marketplace/core/clock.py
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching the stored timestamps"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
