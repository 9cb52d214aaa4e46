from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class LoginRequest(BaseModel):
    """Login request schema."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=1, description="Password")


class RegisterRequest(BaseModel):
    """Registration request schema."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")
    display_name: Optional[str] = Field(None, alias="displayName", max_length=200)

    class Config:
        populate_by_name = True


class SendOtpRequest(BaseModel):
    """Request a one-time sign-in code by email."""
    email: EmailStr
    should_create_user: bool = Field(False, alias="shouldCreateUser", description="Allow sign-up for unknown emails")

    class Config:
        populate_by_name = True


class VerifyOtpRequest(BaseModel):
    """Exchange a one-time code for a token."""
    email: EmailStr
    token: str = Field(..., min_length=1, description="Code received by email")
    display_name: Optional[str] = Field(None, alias="displayName", max_length=200)

    class Config:
        populate_by_name = True


class UserResponse(BaseModel):
    """User response schema (without password)."""
    id: int
    email: str
    display_name: Optional[str] = Field(None, alias="displayName")
    last_active_at: Optional[datetime] = Field(None, alias="lastActiveAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class AuthResponse(BaseModel):
    """Authentication response schema."""
    token: str
    user: UserResponse
