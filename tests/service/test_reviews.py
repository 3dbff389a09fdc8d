import uuid

import pytest

from app.core.exceptions import Conflict, Forbidden, NotFound, ValidationError
from app.crud import notification_crud
from app.schema.review import ReviewCreateBody, ReviewRespondBody
from app.service.review_service import ReviewService


@pytest.fixture
def master(make_user):
    return make_user(role="MASTER")


def _review(db, client, master, rating=5, **kwargs):
    return ReviewService(db).create(
        client.id,
        "CLIENT",
        ReviewCreateBody(order_id=uuid.uuid4(), master_id=master.id, rating=rating, **kwargs),
    )


def test_create_review_notifies_master(db, master, make_user):
    review = _review(db, make_user(), master, rating=4, comment="Good work")
    assert review.rating == 4
    assert review.is_verified is True
    items, total = notification_crud.list_for_user(db, user_id=master.id)
    assert total == 1
    assert items[0].notification_type == "REVIEW"


def test_anonymous_review_hides_client(db, master, make_user):
    review = _review(db, make_user(), master, is_anonymous=True)
    assert review.client_id is None


def test_only_clients_review_masters(db, master, make_user):
    other_master = make_user(role="MASTER")
    body = ReviewCreateBody(order_id=uuid.uuid4(), master_id=master.id, rating=5)
    with pytest.raises(Forbidden):
        ReviewService(db).create(other_master.id, "MASTER", body)

    client = make_user()
    not_a_master = make_user()
    with pytest.raises(NotFound):
        ReviewService(db).create(
            client.id, "CLIENT", ReviewCreateBody(order_id=uuid.uuid4(), master_id=not_a_master.id, rating=5)
        )
    with pytest.raises(ValidationError):
        ReviewService(db).create(
            client.id, "CLIENT", ReviewCreateBody(order_id=uuid.uuid4(), master_id=client.id, rating=5)
        )


def test_one_review_per_order(db, master, make_user):
    client = make_user()
    body = ReviewCreateBody(order_id=uuid.uuid4(), master_id=master.id, rating=5)
    ReviewService(db).create(client.id, "CLIENT", body)
    with pytest.raises(Conflict):
        ReviewService(db).create(client.id, "CLIENT", body)


def test_stats_and_listing(db, master, make_user):
    for rating in (5, 4, 4, 1):
        _review(db, make_user(), master, rating=rating)
    service = ReviewService(db)

    stats = service.stats_for_master(master.id)
    assert stats.total_reviews == 4
    assert stats.average_rating == 3.5
    assert stats.rating_distribution == {1: 1, 2: 0, 3: 0, 4: 2, 5: 1}
    assert stats.needs_response == 4

    page = service.list_for_master(master.id, page=1, limit=3)
    assert page.total == 4
    assert page.total_pages == 2
    assert len(page.items) == 3


def test_stats_for_master_without_reviews(db, master):
    stats = ReviewService(db).stats_for_master(master.id)
    assert stats.total_reviews == 0
    assert stats.average_rating == 0


def test_respond_once_by_reviewed_master(db, master, make_user):
    review = _review(db, make_user(), master)
    service = ReviewService(db)

    with pytest.raises(Forbidden):
        service.respond(review.id, make_user(role="MASTER").id, ReviewRespondBody(response="Thanks"))

    answered = service.respond(review.id, master.id, ReviewRespondBody(response="  Thanks!  "))
    assert answered.response == "Thanks!"
    assert answered.response_at is not None
    assert service.stats_for_master(master.id).needs_response == 0

    with pytest.raises(Conflict):
        service.respond(review.id, master.id, ReviewRespondBody(response="Again"))
    with pytest.raises(NotFound):
        service.respond(uuid.uuid4(), master.id, ReviewRespondBody(response="?"))
