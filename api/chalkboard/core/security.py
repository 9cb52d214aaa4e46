"""
Token issuing and the authenticated-user dependency.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from chalkboard.core.config import settings
from chalkboard.core.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"

bearer_scheme = HTTPBearer(auto_error=False)


def _secret() -> str:
    if not settings.jwt_secret:
        raise ConfigurationError("JWT_SECRET is not configured")
    return settings.jwt_secret


def create_access_token(user_id: int, email: str, expires_hours: Optional[int] = None) -> str:
    """Issue a signed token carrying the user's id and email."""
    expires_at = datetime.now(timezone.utc) + timedelta(hours=expires_hours or settings.jwt_expires_hours)
    payload = {"id": user_id, "email": email, "exp": expires_at}
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a token and return its claims.

    Raises:
        AuthenticationError: If the token is malformed, tampered with or expired
    """
    try:
        return jwt.decode(token, _secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token has expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Dict[str, Any]:
    """Dependency returning the claims of the bearer token."""
    if credentials is None:
        raise AuthenticationError("Missing authorization header")
    claims = decode_access_token(credentials.credentials)
    if "id" not in claims:
        raise AuthenticationError("Invalid token")
    return claims
