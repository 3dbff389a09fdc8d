"""
Scoring used to rank masters for a client.

Each scorer returns (score, reason); reason is None when the factor adds nothing.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from app.utils.rounding import round_int

Score = Tuple[int, Optional[str]]


@dataclass(frozen=True)
class MasterWeights:
    location: int = 15
    quality: int = 5

    @property
    def total(self) -> int:
        return self.location + self.quality


DEFAULT_WEIGHTS = MasterWeights()


def quality_score(master_rating: Optional[float], completed_orders: int, max_score: int = 5) -> Score:
    rating = float(master_rating or 0)
    if rating >= 4.8 and completed_orders >= 50:
        return max_score, "Top-rated experienced master"
    if rating >= 4.5 and completed_orders >= 20:
        return round_int(max_score * 0.9), "High-rated experienced master"
    if rating >= 4.5:
        return round_int(max_score * 0.7), "High-rated master"
    if rating >= 4.0:
        return round_int(max_score * 0.5), "Good-rated master"
    if completed_orders >= 10:
        return round_int(max_score * 0.3), "Experienced master"
    return 0, None


def match_score(location: int, quality: int, weights: MasterWeights = DEFAULT_WEIGHTS) -> int:
    """Share of the attainable points, as a percentage capped at 100."""
    total = weights.total
    if total <= 0:
        return 0
    return min(round_int(100 * (location + quality) / total), 100)


def should_filter(score: int, min_score: int = 20) -> bool:
    return score < min_score
