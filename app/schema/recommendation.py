"""
Master recommendation schemas.
"""
from typing import List, Optional
import uuid
from pydantic import BaseModel, Field


class MasterRecommendation(BaseModel):
    id: uuid.UUID
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    city: Optional[str] = None
    avatar_url: Optional[str] = None
    average_rating: float
    total_reviews: int
    match_score: int = Field(..., description="0-100, share of attainable location and quality points.")
    location_score: int
    quality_score: int
    reasons: List[str]


class MasterRecommendationListResponse(BaseModel):
    items: List[MasterRecommendation]
    page: int
    limit: int
    total: int
    total_pages: int
