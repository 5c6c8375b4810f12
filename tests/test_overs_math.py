"""
Tests for overs/rate helpers.
"""

import pytest

from turf_api.overs_math import (
    balls_to_overs_str,
    batting_average,
    bowling_average,
    run_rate,
    strike_rate,
    to_balls,
)


def test_to_balls():
    assert to_balls(3, 2) == 20
    assert to_balls(0, 0) == 0
    with pytest.raises(ValueError):
        to_balls(-1, 0)


@pytest.mark.parametrize("balls,expected", [(0, "0.0"), (5, "0.5"), (6, "1.0"), (19, "3.1")])
def test_balls_to_overs_str(balls, expected):
    assert balls_to_overs_str(balls) == expected


def test_rates():
    assert run_rate(30, 18) == 10.0
    assert run_rate(5, 0) == 0.0
    assert strike_rate(7, 3) == 233.33
    assert strike_rate(7, 0) == 0.0


def test_averages():
    assert batting_average(30, 2) == 15.0
    assert batting_average(12, 0) == 12.0
    assert bowling_average(20, 0) is None
    assert bowling_average(20, 3) == 6.67

