"""
UTC timestamp helpers shared by the table models.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive values (SQLite drops the offset on read)."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def timestamp_column(nullable: bool = False, index: bool = False) -> Column:
    """A fresh timezone-aware DateTime column; each model field needs its own instance."""
    return Column(DateTime(timezone=True), nullable=nullable, index=index)
