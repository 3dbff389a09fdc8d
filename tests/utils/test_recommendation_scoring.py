from app.utils.recommendation_scoring import (
    DEFAULT_WEIGHTS,
    MasterWeights,
    match_score,
    quality_score,
    should_filter,
)


def test_default_weights_total():
    assert DEFAULT_WEIGHTS.total == 20


def test_quality_score_bands():
    assert quality_score(4.9, 60)[0] == 5
    assert quality_score(4.6, 25)[0] == 5  # 4.5 rounds up
    assert quality_score(4.6, 2, max_score=10)[0] == 7
    assert quality_score(4.1, 0)[0] == 3
    assert quality_score(3.0, 12)[0] == 2
    assert quality_score(None, 0) == (0, None)


def test_match_score_is_share_of_attainable_points():
    assert match_score(15, 5) == 100
    assert match_score(15, 0) == 75
    assert match_score(3, 4) == 35
    assert match_score(0, 0) == 0


def test_match_score_caps_and_handles_zero_weights():
    assert match_score(30, 5) == 100
    assert match_score(5, 5, MasterWeights(location=0, quality=0)) == 0


def test_should_filter():
    assert should_filter(19) is True
    assert should_filter(20) is False
    assert should_filter(60, min_score=75) is True
