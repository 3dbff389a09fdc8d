"""
User router - profile endpoints (protected).
"""
from typing import Dict, Any
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.core.dependencies import validate_session
from app.service.user_service import UserService
from app.schema.auth import UserProfile, UserUpdate
from app.schema.recommendation import MasterRecommendationListResponse
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/me", response_model=UserProfile)
async def get_me(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db)
):
    """Get current user profile."""
    return UserService(db).get_profile(current_user["user_id"])


@router.patch("/me", response_model=UserProfile)
async def update_me(
    body: UserUpdate,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db)
):
    """Update name and city."""
    return UserService(db).update_profile(current_user["user_id"], body)


@router.get("/masters/recommended", response_model=MasterRecommendationListResponse)
async def recommended_masters(
    page: int = 1,
    limit: int = 20,
    min_score: int = 0,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db)
):
    """Active masters ranked by distance from the caller's city and rating."""
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = 20
    min_score = max(0, min(min_score, 100))
    return UserService(db).recommended_masters(
        current_user["user_id"], page=page, limit=limit, min_score=min_score
    )


@router.patch("/me/avatar", response_model=UserProfile)
async def update_avatar(
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
    file: UploadFile = File(...),
):
    """Upload avatar to S3 and set it as the user's avatar_url. Requires S3_BUCKET_NAME."""
    content = await file.read()
    return UserService(db).update_avatar(current_user["user_id"], content, file.content_type)


@router.get("/session")
async def get_session_info(
    current_user: Dict[str, Any] = Depends(validate_session)
):
    """Return current session data. Proves session is working."""
    return {
        "user_id": current_user["user_id"],
        "email": current_user["email"],
        "role": current_user.get("role"),
        "is_active": current_user["is_active"],
        "session_active": True
    }
