"""
History model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional, Any
from datetime import datetime
from sqlalchemy import Column, JSON

from chalkboard.models.timestamps import timestamp_column, utc_now


class History(SQLModel, table=True):
    """History table - saved questions with their canvas and solve status."""
    __tablename__ = "history"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    question_data: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    canvas_data: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    status: Optional[str] = Field(default=None, index=True)  # Stored lowercase
    subject: Optional[str] = Field(default=None, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
