"""
Reviews API: clients review masters, masters respond.
"""
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import validate_session
from app.schema.review import (
    ReviewCreateBody,
    ReviewListResponse,
    ReviewRespondBody,
    ReviewResponse,
    ReviewStatsResponse,
)
from app.service.review_service import ReviewService

router = APIRouter()


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def create_review(
    body: ReviewCreateBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """Leave a review for the master of an order (clients only, once per order)."""
    return ReviewService(db).create(uuid.UUID(current_user["user_id"]), current_user.get("role"), body)


@router.get("/masters/{master_id}", response_model=ReviewListResponse)
async def list_master_reviews(
    master_id: uuid.UUID,
    db: Session = Depends(get_db),
    page: int = 1,
    limit: int = 20,
):
    if page < 1:
        page = 1
    if limit < 1 or limit > 100:
        limit = 20
    return ReviewService(db).list_for_master(master_id, page=page, limit=limit)


@router.get("/masters/{master_id}/stats", response_model=ReviewStatsResponse)
async def master_review_stats(
    master_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    return ReviewService(db).stats_for_master(master_id)


@router.post("/{review_id}/response", response_model=ReviewResponse)
async def respond_to_review(
    review_id: uuid.UUID,
    body: ReviewRespondBody,
    current_user: Dict[str, Any] = Depends(validate_session),
    db: Session = Depends(get_db),
):
    """The reviewed master answers a review, once."""
    return ReviewService(db).respond(review_id, uuid.UUID(current_user["user_id"]), body)
