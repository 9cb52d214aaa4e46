"""
Practice attempt model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional, Any, Dict
from datetime import datetime
from sqlalchemy import Column, JSON

from chalkboard.models.timestamps import timestamp_column, utc_now


class PracticeAttempt(SQLModel, table=True):
    """Practice attempts table - one immutable row per whiteboard submission."""
    __tablename__ = "practice_attempts"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, index=True)  # None for anonymous submissions
    question: str
    canvas: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
