from fastapi import APIRouter, Depends, status
from sqlmodel import Session
from chalkboard.core.database import get_session
from chalkboard.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    SendOtpRequest,
    VerifyOtpRequest,
    AuthResponse,
    UserResponse,
)
from chalkboard.services import auth_service
from chalkboard.services.email_service import Mailer, get_mailer
from chalkboard.api.v1.endpoints.utils import success

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(
    login_data: LoginRequest,
    session: Session = Depends(get_session)
):
    """Login with email and password."""
    token, user = auth_service.login(session, login_data.email, login_data.password)
    return success(AuthResponse(token=token, user=UserResponse.model_validate(user)))


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    session: Session = Depends(get_session)
):
    """Register a new password account."""
    user = auth_service.register(
        session,
        register_data.email,
        register_data.password,
        display_name=register_data.display_name,
    )
    return success({"id": user.id, "email": user.email})


@router.post("/otp/send")
def send_otp(
    otp_data: SendOtpRequest,
    session: Session = Depends(get_session),
    mailer: Mailer = Depends(get_mailer)
):
    """
    Email a one-time sign-in code.

    With shouldCreateUser=false the email must already belong to an account.
    """
    email = auth_service.send_otp(
        session,
        mailer,
        otp_data.email,
        should_create_user=otp_data.should_create_user,
    )
    return success({"message": "OTP sent successfully", "email": email})


@router.post("/otp/verify")
async def verify_otp(
    verify_data: VerifyOtpRequest,
    session: Session = Depends(get_session)
):
    """Exchange an emailed code for a token. First sign-in creates the account."""
    token, user = auth_service.verify_otp(
        session,
        verify_data.email,
        verify_data.token,
        display_name=verify_data.display_name,
    )
    return success(AuthResponse(token=token, user=UserResponse.model_validate(user)))
