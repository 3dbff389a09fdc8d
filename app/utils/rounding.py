"""
Half-up rounding. Python's round() is banker's rounding (round(2.5) == 2);
client apps compute the same figures with half-up, so we match them.
"""
import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(math.floor(value + 0.5))
