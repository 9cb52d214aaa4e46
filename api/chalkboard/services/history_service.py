"""
History service - saved questions and their solve status.
"""
import logging
import math
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from chalkboard.core.exceptions import NotFoundError, PersistenceError
from chalkboard.models.history import History
from chalkboard.models.timestamps import utc_now
from chalkboard.schemas.history import HistoryPage, HistoryResponse, Pagination

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 30
ALL_STATUSES = "all"


def _normalize_status(status: Optional[str]) -> Optional[str]:
    return status.strip().lower() if status else status


def _commit(session: Session, entry: History, action: str) -> History:
    try:
        session.add(entry)
        session.commit()
        session.refresh(entry)
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[History] {action} error: {e}")
        raise PersistenceError(f"History {action.lower()} failed: {e}") from e
    return entry


def save_history(
    session: Session,
    user_id: int,
    question_data: Any,
    canvas_data: Any,
    status: Optional[str],
    subject: Optional[str],
) -> History:
    """Insert a new history entry."""
    logger.info(f"[History] Saving history for user: {user_id}")
    entry = History(
        user_id=user_id,
        question_data=question_data,
        canvas_data=canvas_data,
        status=_normalize_status(status),
        subject=subject,
    )
    entry = _commit(session, entry, "Save")
    logger.info(f"[History] Saved item: {entry.id}")
    return entry


def get_history_entry(session: Session, history_id: int) -> History:
    """
    Fetch one history entry.

    Raises:
        NotFoundError: If no entry has this id
    """
    entry = session.get(History, history_id)
    if not entry:
        raise NotFoundError("History item not found.")
    return entry


def update_history(
    session: Session,
    history_id: int,
    status: Optional[str] = None,
    canvas_data: Any = None,
) -> History:
    """
    Merge the given fields into an entry and refresh its updated_at timestamp.

    Fields left as None are not touched.

    Raises:
        NotFoundError: If no entry has this id
    """
    logger.info(f"[History] Updating history: {history_id} status={status}")
    entry = get_history_entry(session, history_id)

    if status:
        entry.status = _normalize_status(status)
    if canvas_data is not None:
        entry.canvas_data = canvas_data
    entry.updated_at = utc_now()

    entry = _commit(session, entry, "Update")
    logger.info(f"[History] Updated item: {entry.id}")
    return entry


def list_history(
    session: Session,
    user_id: int,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
    status: Optional[str] = None,
    subject: Optional[str] = None,
) -> HistoryPage:
    """
    List a user's history, newest first.

    Args:
        session: Database session
        user_id: Owner
        page: 1-based page number
        limit: Page size
        status: Optional status filter; "All" disables it. Compared lowercase
        subject: Optional exact subject filter

    Returns:
        HistoryPage with the entries and pagination totals
    """
    logger.info(f"[History] Fetching history for user: {user_id} Status: {status}")

    conditions = [History.user_id == user_id]
    normalized_status = _normalize_status(status)
    if normalized_status and normalized_status != ALL_STATUSES:
        conditions.append(History.status == normalized_status)
    if subject:
        conditions.append(History.subject == subject)

    offset = (page - 1) * limit
    try:
        total = session.exec(select(func.count()).select_from(History).where(*conditions)).one()
        entries = session.exec(
            select(History)
            .where(*conditions)
            .order_by(History.created_at.desc(), History.id.desc())  # type: ignore
            .offset(offset)
            .limit(limit)
        ).all()
    except SQLAlchemyError as e:
        logger.error(f"[History] Fetch error: {e}")
        raise PersistenceError(f"History fetch failed: {e}") from e

    logger.info(f"[History] Found {len(entries)} items")
    return HistoryPage(
        items=[HistoryResponse.model_validate(entry) for entry in entries],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
        ),
    )
