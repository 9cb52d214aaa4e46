"""
User model.
"""
from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
import bcrypt

from chalkboard.models.timestamps import timestamp_column, utc_now


class User(SQLModel, table=True):
    """User table - stores accounts created by password registration or OTP sign-in."""
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    password_hash: Optional[str] = Field(default=None)  # None for OTP-only accounts
    display_name: Optional[str] = Field(default=None)
    email_verified: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    last_active_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password with bcrypt (cost factor 12)."""
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=12)).decode("utf-8")

    def verify_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""
        if not self.password_hash:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), self.password_hash.encode("utf-8"))
