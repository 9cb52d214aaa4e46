"""
User service for business logic related to user operations.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from chalkboard.core.exceptions import NotFoundError, PersistenceError
from chalkboard.models.timestamps import utc_now
from chalkboard.models.user import User

logger = logging.getLogger(__name__)


def get_user_profile(session: Session, user_id: int) -> User:
    """
    Load a user and record the visit in last_active_at.

    Args:
        session: Database session
        user_id: Id taken from the caller's token

    Returns:
        The refreshed User row

    Raises:
        NotFoundError: If the token refers to a deleted account
    """
    user = session.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")

    user.last_active_at = utc_now()
    try:
        session.add(user)
        session.commit()
        session.refresh(user)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[Users] Profile update error: {e}")
        raise PersistenceError(f"User update failed: {e}") from e
    return user
