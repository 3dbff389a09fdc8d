import uuid

import pytest

from app.crud import review_crud, user_crud
from app.service.user_service import UserService


def _add_reviews(db, master, client, count, rating=5):
    for _ in range(count):
        review_crud.create_from_dict(
            db,
            obj_in={
                "order_id": uuid.uuid4(),
                "client_id": client.id,
                "master_id": master.id,
                "rating": rating,
            },
        )


@pytest.fixture
def city_masters(db, make_user):
    client = make_user(city="Bishkek")
    reviewer = make_user()
    top = make_user(role="MASTER", city="Bishkek", first_name="Top")
    fresh = make_user(role="MASTER", city="bishkek", first_name="Fresh")
    far = make_user(role="MASTER", city="Osh", first_name="Far")
    _add_reviews(db, top, reviewer, 20)
    _add_reviews(db, far, reviewer, 5)
    return client, top, fresh, far


def test_masters_ranked_by_location_and_rating(db, city_masters):
    client, top, fresh, far = city_masters
    result = UserService(db).recommended_masters(client.id)

    assert result.total == 3
    assert [m.id for m in result.items] == [top.id, fresh.id, far.id]
    assert [m.match_score for m in result.items] == [100, 75, 35]

    best = result.items[0]
    assert best.location_score == 15
    assert best.quality_score == 5
    assert best.average_rating == 5.0
    assert best.total_reviews == 20
    assert best.reasons == ["Same city", "High-rated experienced master"]

    assert result.items[1].reasons == ["Same city"]
    assert result.items[2].location_score == 3
    assert result.items[2].reasons[0].endswith("km away")


def test_min_score_drops_weak_matches(db, city_masters):
    client, top, fresh, far = city_masters
    result = UserService(db).recommended_masters(client.id, min_score=50)
    assert [m.id for m in result.items] == [top.id, fresh.id]
    assert result.total == 2


def test_inactive_masters_and_caller_are_excluded(db, make_user):
    caller = make_user(role="MASTER", city="Bishkek")
    retired = make_user(role="MASTER", city="Bishkek")
    user_crud.update(db, db_obj=retired, obj_in={"is_active": False})
    make_user(city="Bishkek")  # clients are never recommended

    assert UserService(db).recommended_masters(caller.id).total == 0


def test_pagination(db, city_masters):
    client, _, _, far = city_masters
    result = UserService(db).recommended_masters(client.id, page=2, limit=2)
    assert [m.id for m in result.items] == [far.id]
    assert result.total_pages == 2


def test_rating_summary_skips_masters_without_reviews(db, city_masters):
    _, top, fresh, far = city_masters
    summary = review_crud.rating_summary(db, master_ids=[top.id, fresh.id, far.id])
    assert summary[top.id] == (5.0, 20)
    assert summary[far.id] == (5.0, 5)
    assert fresh.id not in summary
    assert review_crud.rating_summary(db, master_ids=[]) == {}
