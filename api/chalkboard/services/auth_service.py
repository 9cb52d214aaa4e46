"""
Authentication service: password accounts and one-time email codes.
"""
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from chalkboard.core.config import settings
from chalkboard.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from chalkboard.core.security import create_access_token
from chalkboard.models.timestamps import utc_now
from chalkboard.models.user import User
from chalkboard.models.verification_code import VerificationCode
from chalkboard.services.email_service import Mailer

logger = logging.getLogger(__name__)

OTP_LENGTH = 6


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(session: Session, email: str) -> Optional[User]:
    return session.exec(select(User).where(User.email == _normalize_email(email))).first()


def generate_otp_code(length: int = OTP_LENGTH) -> str:
    """Zero-padded numeric code from a cryptographic source."""
    return f"{secrets.randbelow(10 ** length):0{length}d}"


def _touch(session: Session, user: User) -> User:
    user.last_active_at = utc_now()
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as e:
        session.rollback()
        raise PersistenceError(f"User update failed: {e}") from e
    return user


def login(session: Session, email: str, password: str) -> Tuple[str, User]:
    """
    Check an email/password pair and issue a token.

    Raises:
        AuthenticationError: Unknown email or wrong password
    """
    user = find_user_by_email(session, email)
    if not user or not user.verify_password(password):
        logger.info(f"[Auth] Rejected login for {email}")
        raise AuthenticationError("Invalid email or password")

    user = _touch(session, user)
    logger.info(f"[Auth] User {user.id} logged in")
    return create_access_token(user.id, user.email), user


def register(session: Session, email: str, password: str, display_name: Optional[str] = None) -> User:
    """
    Create a password account.

    Raises:
        ValidationError: If an account already uses this email
    """
    email = _normalize_email(email)
    if find_user_by_email(session, email):
        raise ValidationError("Account already exists")

    user = User(
        email=email,
        password_hash=User.hash_password(password),
        display_name=display_name,
    )
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[Auth] Register error: {e}")
        raise PersistenceError(f"Registration failed: {e}") from e

    logger.info(f"[Auth] Registered user {user.id}")
    return user


def send_otp(
    session: Session,
    mailer: Mailer,
    email: str,
    should_create_user: bool = False,
    now: Optional[datetime] = None,
) -> str:
    """
    Store a fresh code for the email and mail it out.

    Expired codes of every address are purged first, then the row for this
    address is replaced. Returns the normalized email.

    Raises:
        NotFoundError: No account exists and should_create_user is False
    """
    email = _normalize_email(email)
    now = now or utc_now()

    if not should_create_user and not find_user_by_email(session, email):
        raise NotFoundError("No user found with this email")

    code = generate_otp_code()
    expiry_minutes = settings.otp_expiry_minutes
    try:
        expired_codes = session.exec(select(VerificationCode).where(VerificationCode.expires_at <= now)).all()
        for expired_code in expired_codes:
            session.delete(expired_code)
        session.flush()
        entry = session.get(VerificationCode, email)
        if entry:
            entry.code = code
            entry.expires_at = now + timedelta(minutes=expiry_minutes)
            entry.created_at = now
        else:
            entry = VerificationCode(
                email=email,
                code=code,
                expires_at=now + timedelta(minutes=expiry_minutes),
                created_at=now,
            )
        session.add(entry)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[Auth] OTP store error: {e}")
        raise PersistenceError(f"Could not store verification code: {e}") from e

    mailer.send_otp(email, code, expiry_minutes)
    logger.info(f"[Auth] Sent OTP to {email}")
    return email


def verify_otp(
    session: Session,
    email: str,
    token: str,
    display_name: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Tuple[str, User]:
    """
    Exchange a code for a token, creating the account on first sign-in.

    The stored code is consumed whether or not it matches.

    Raises:
        AuthenticationError: No code, wrong code, or expired code
    """
    email = _normalize_email(email)
    now = now or utc_now()

    entry = session.get(VerificationCode, email)
    if not entry:
        raise AuthenticationError("Invalid or expired code")

    matches = secrets.compare_digest(entry.code.encode("utf-8"), token.strip().encode("utf-8"))
    expired = entry.is_expired(now)
    try:
        session.delete(entry)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[Auth] OTP consume error: {e}")
        raise PersistenceError(f"Could not consume verification code: {e}") from e

    if not matches or expired:
        logger.info(f"[Auth] Rejected OTP for {email} (expired={expired})")
        raise AuthenticationError("Invalid or expired code")

    user = find_user_by_email(session, email)
    if not user:
        user = User(email=email, email_verified=True, display_name=display_name)
        logger.info(f"[Auth] Creating user on first OTP sign-in: {email}")
    else:
        user.email_verified = True
        if display_name and not user.display_name:
            user.display_name = display_name

    user = _touch(session, user)
    return create_access_token(user.id, user.email), user
