"""
API Router - all endpoints.
"""
from fastapi import APIRouter
from app.router.api.v1 import auth, users, chat, notifications, tracking, reviews

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    users.router,
    prefix="/users",
    tags=["Users"],
)

api_router.include_router(
    chat.router,
    prefix="/chat",
    tags=["Chat"],
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["Notifications"],
)

api_router.include_router(
    tracking.router,
    prefix="/tracking",
    tags=["Tracking"],
)

api_router.include_router(
    reviews.router,
    prefix="/reviews",
    tags=["Reviews"],
)
