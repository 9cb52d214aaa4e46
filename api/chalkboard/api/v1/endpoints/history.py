"""
History endpoints.

Statuses are stored lowercase; the listing filter treats "All" as no filter.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from chalkboard.core.database import get_session
from chalkboard.core.exceptions import ValidationError
from chalkboard.schemas.history import SaveHistoryRequest, UpdateHistoryRequest, HistoryResponse
from chalkboard.services import history_service
from chalkboard.api.v1.endpoints.utils import success, to_payload

router = APIRouter(prefix="/history", tags=["history"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_history(
    request: SaveHistoryRequest,
    session: Session = Depends(get_session)
):
    """Save a question, its canvas and solve status."""
    if request.user_id is None:
        raise ValidationError("User ID is required.")

    entry = history_service.save_history(
        session,
        user_id=request.user_id,
        question_data=request.question_data,
        canvas_data=request.canvas_data,
        status=request.status,
        subject=request.subject,
    )
    return success(HistoryResponse.model_validate(entry))


@router.put("/{history_id}")
async def update_history(
    history_id: int,
    request: UpdateHistoryRequest,
    session: Session = Depends(get_session)
):
    """Update the status and/or canvas of an entry."""
    entry = history_service.update_history(
        session,
        history_id,
        status=request.status,
        canvas_data=request.canvas_data,
    )
    return success(HistoryResponse.model_validate(entry))


@router.get("")
async def list_history(
    user_id: Optional[int] = Query(None, alias="userId"),
    page: int = Query(1, ge=1),
    limit: int = Query(history_service.DEFAULT_PAGE_SIZE, ge=1, le=100),
    status: Optional[str] = Query(None),
    subject: Optional[str] = Query(None),
    session: Session = Depends(get_session)
):
    """
    List a user's history, newest first.

    Returns the entries under `data` and the totals under `pagination`.
    """
    if user_id is None:
        raise ValidationError("User ID is required.")

    result = history_service.list_history(
        session,
        user_id,
        page=page,
        limit=limit,
        status=status,
        subject=subject,
    )
    return {
        "success": True,
        "data": to_payload(result.items),
        "pagination": to_payload(result.pagination),
    }


@router.get("/{history_id}")
async def get_history_detail(
    history_id: int,
    session: Session = Depends(get_session)
):
    """Get one history entry."""
    entry = history_service.get_history_entry(session, history_id)
    return success(HistoryResponse.model_validate(entry))
