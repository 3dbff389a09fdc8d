"""
Authentication router - signup/login/logout/verify.
"""
from typing import Dict, Any
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.database import get_db
from app.core.dependencies import validate_session, get_current_token
from app.core.rate_limit import rate_limit
from app.service.auth_service import AuthService
from app.schema.auth import UserRegister, UserLogin, LoginResponse, MessageResponse, VerifyEmail
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/signup",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit("auth", settings.RATE_LIMIT_AUTH))],
)
async def signup(
    user_data: UserRegister,
    db: Session = Depends(get_db)
):
    """Register a new master or client."""
    AuthService(db).register_user(user_data)
    return MessageResponse(message="User registered successfully")


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(rate_limit("auth", settings.RATE_LIMIT_AUTH))],
)
async def login(
    login_data: UserLogin,
    db: Session = Depends(get_db)
):
    """Login and get the bearer token."""
    return AuthService(db).login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db)
):
    """Logout - invalidates token server-side and signs out from Cognito."""
    token = get_current_token(request)
    AuthService(db).logout(token, current_user)
    logger.info(f"User logged out: {current_user['email']}")
    return MessageResponse(message="Logged out successfully")


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    data: VerifyEmail,
    db: Session = Depends(get_db)
):
    """Verify email with confirmation code sent after signup."""
    AuthService(db).verify_email(data.email, data.code)
    return MessageResponse(message="Email verified successfully")
