"""
Verification code model.
"""
from sqlmodel import SQLModel, Field
from datetime import datetime

from chalkboard.models.timestamps import as_utc, timestamp_column, utc_now


class VerificationCode(SQLModel, table=True):
    """One pending OTP code per email address."""
    __tablename__ = "verification_codes"

    email: str = Field(primary_key=True)
    code: str
    expires_at: datetime = Field(sa_column=timestamp_column(index=True))
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())

    def is_expired(self, now: datetime) -> bool:
        return as_utc(self.expires_at) <= as_utc(now)
