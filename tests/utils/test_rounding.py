from app.utils.rounding import round_half_up, round_int


def test_round_int_is_half_up():
    assert round_int(2.5) == 3
    assert round_int(0.5) == 1
    assert round_int(1.49) == 1
    assert round_int(3.0) == 3


def test_round_half_up_decimals():
    assert round_half_up(4.25, 1) == 4.3
    assert round_half_up(4.666, 2) == 4.67
    assert round_half_up(0, 2) == 0
