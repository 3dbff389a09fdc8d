"""
Review aggregation for a master's profile.
"""
from typing import Any, Dict, Iterable

from app.utils.rounding import round_half_up


def empty_distribution() -> Dict[int, int]:
    return {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


def compute_review_stats(reviews: Iterable[Any]) -> Dict[str, Any]:
    """
    Works on anything with `rating`, `is_verified` and `response` attributes.

    average_rating is rounded half-up to one decimal; no reviews gives 0.
    """
    reviews = list(reviews)
    distribution = empty_distribution()
    total = len(reviews)
    rating_sum = 0
    verified = 0
    needs_response = 0
    for review in reviews:
        rating_sum += review.rating
        if review.rating in distribution:
            distribution[review.rating] += 1
        if getattr(review, "is_verified", False):
            verified += 1
        if not getattr(review, "response", None):
            needs_response += 1

    average = round_half_up(rating_sum / total, 1) if total else 0
    return {
        "total_reviews": total,
        "average_rating": average,
        "rating_distribution": distribution,
        "verified_reviews": verified,
        "needs_response": needs_response,
    }
