from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlmodel import Session

from chalkboard.core.database import get_session
from chalkboard.core.security import get_current_user
from chalkboard.schemas.auth import UserResponse
from chalkboard.services.user_service import get_user_profile
from chalkboard.api.v1.endpoints.utils import success

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me")
async def get_profile(
    current_user: Dict[str, Any] = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Profile of the authenticated user."""
    user = get_user_profile(session, current_user["id"])
    return success(UserResponse.model_validate(user))
