"""
Reviews of masters left by clients.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import Conflict, Forbidden, NotFound, ValidationError
from app.crud import review_crud, user_crud
from app.model.review import Review
from app.model.user import ROLE_CLIENT, ROLE_MASTER
from app.schema.review import (
    ReviewCreateBody,
    ReviewListResponse,
    ReviewRespondBody,
    ReviewResponse,
    ReviewStatsResponse,
)
from app.service.notification_service import NotificationService
from app.utils.dates import utcnow
from app.utils.review_stats import compute_review_stats

logger = logging.getLogger(__name__)


def review_response(review: Review) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        order_id=review.order_id,
        project_id=review.project_id,
        client_id=None if review.is_anonymous else review.client_id,
        master_id=review.master_id,
        rating=review.rating,
        comment=review.comment,
        is_anonymous=review.is_anonymous,
        is_verified=review.is_verified,
        response=review.response,
        response_at=review.response_at,
        created_at=review.created_at,
    )


class ReviewService:
    def __init__(self, db: Session):
        self.db = db

    def _master(self, master_id: uuid.UUID):
        master = user_crud.get(self.db, master_id)
        if not master or master.role != ROLE_MASTER:
            raise NotFound("Master")
        return master

    def create(self, client_id: uuid.UUID, role: str, body: ReviewCreateBody) -> ReviewResponse:
        if role != ROLE_CLIENT:
            raise Forbidden("Only clients can leave reviews")
        if body.master_id == client_id:
            raise ValidationError("You cannot review yourself")
        self._master(body.master_id)
        if review_crud.get_by_order_and_client(self.db, order_id=body.order_id, client_id=client_id):
            raise Conflict("You have already reviewed this order")

        try:
            review = review_crud.create_from_dict(
                self.db,
                obj_in={**body.model_dump(), "client_id": client_id},
            )
        except IntegrityError:
            self.db.rollback()
            raise Conflict("You have already reviewed this order")

        logger.info("Review %s left for master %s", review.id, review.master_id)
        NotificationService(self.db).send(
            user_id=review.master_id,
            notification_type="REVIEW",
            title="New review",
            message=f"You received a {review.rating}-star review.",
            data={"review_id": str(review.id), "rating": review.rating},
            related_object_type="review",
            related_object_id=review.id,
        )
        return review_response(review)

    def list_for_master(self, master_id: uuid.UUID, page: int = 1, limit: int = 20) -> ReviewListResponse:
        self._master(master_id)
        items, total = review_crud.list_for_master(self.db, master_id=master_id, page=page, limit=limit)
        return ReviewListResponse(
            items=[review_response(r) for r in items],
            page=page,
            limit=limit,
            total=total,
            total_pages=(total + limit - 1) // limit if total else 0,
        )

    def stats_for_master(self, master_id: uuid.UUID) -> ReviewStatsResponse:
        self._master(master_id)
        reviews = review_crud.all_for_master(self.db, master_id=master_id)
        return ReviewStatsResponse(**compute_review_stats(reviews))

    def respond(self, review_id: uuid.UUID, user_id: uuid.UUID, body: ReviewRespondBody) -> ReviewResponse:
        """Only the reviewed master, and only once."""
        review = review_crud.get(self.db, review_id)
        if not review:
            raise NotFound("Review")
        if review.master_id != user_id:
            raise Forbidden("Only the reviewed master can respond")
        if review.response:
            raise Conflict("This review already has a response")
        review = review_crud.update(
            self.db,
            db_obj=review,
            obj_in={"response": body.response.strip(), "response_at": utcnow()},
        )
        logger.info("Master %s responded to review %s", user_id, review.id)
        return review_response(review)
