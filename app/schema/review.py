"""
Review schemas.
"""
from datetime import datetime
from typing import Dict, List, Optional
import uuid
from pydantic import BaseModel, Field


class ReviewCreateBody(BaseModel):
    order_id: uuid.UUID
    master_id: uuid.UUID
    project_id: Optional[uuid.UUID] = None
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)
    is_anonymous: bool = False


class ReviewRespondBody(BaseModel):
    response: str = Field(..., min_length=1, max_length=2000)


class ReviewResponse(BaseModel):
    id: uuid.UUID
    order_id: uuid.UUID
    project_id: Optional[uuid.UUID] = None
    client_id: Optional[uuid.UUID] = None  # hidden for anonymous reviews
    master_id: uuid.UUID
    rating: int
    comment: Optional[str] = None
    is_anonymous: bool
    is_verified: bool
    response: Optional[str] = None
    response_at: Optional[datetime] = None
    created_at: datetime


class ReviewListResponse(BaseModel):
    items: List[ReviewResponse]
    page: int
    limit: int
    total: int
    total_pages: int


class ReviewStatsResponse(BaseModel):
    total_reviews: int
    average_rating: float
    rating_distribution: Dict[int, int]
    verified_reviews: int
    needs_response: int
