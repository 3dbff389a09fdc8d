from types import SimpleNamespace

from app.utils.review_stats import compute_review_stats, empty_distribution


def _review(rating, is_verified=True, response=None):
    return SimpleNamespace(rating=rating, is_verified=is_verified, response=response)


def test_no_reviews_gives_exact_zero_stats():
    stats = compute_review_stats([])
    assert stats["total_reviews"] == 0
    assert stats["average_rating"] == 0
    assert stats["rating_distribution"] == {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    assert stats["verified_reviews"] == 0
    assert stats["needs_response"] == 0


def test_average_is_rounded_to_one_decimal():
    stats = compute_review_stats([_review(5), _review(5), _review(4)])
    assert stats["average_rating"] == 4.7
    assert stats["rating_distribution"] == {1: 0, 2: 0, 3: 0, 4: 1, 5: 2}
    assert stats["total_reviews"] == 3


def test_average_rounds_half_up():
    # 4.25 -> 4.3 (banker's rounding would give 4.2)
    stats = compute_review_stats([_review(5), _review(4), _review(4), _review(4)])
    assert stats["average_rating"] == 4.3
    # 4.45 -> 4.5
    reviews = [_review(5)] * 9 + [_review(4)] * 11
    assert compute_review_stats(reviews)["average_rating"] == 4.5


def test_verified_and_needs_response():
    stats = compute_review_stats([
        _review(5, is_verified=True, response="Thanks!"),
        _review(3, is_verified=False),
        _review(1, is_verified=True, response=""),
    ])
    assert stats["verified_reviews"] == 2
    assert stats["needs_response"] == 2


def test_distribution_is_fresh_each_call():
    first = empty_distribution()
    first[5] = 10
    assert empty_distribution()[5] == 0
