# turf_api/overs_math.py
from __future__ import annotations

from typing import Optional

BALLS_PER_OVER = 6


def to_balls(overs: int, balls: int) -> int:
    """
    Completed overs + balls in the current over -> total legal balls.
    All rate maths goes through balls (not float overs) to avoid mistakes.
    """
    if overs < 0 or balls < 0:
        raise ValueError(f"Invalid overs/balls: {overs}.{balls}")
    return overs * BALLS_PER_OVER + balls


def balls_to_overs_str(balls: int) -> str:
    # balls=19 => "3.1"
    if balls <= 0:
        return "0.0"
    return f"{balls // BALLS_PER_OVER}.{balls % BALLS_PER_OVER}"


def balls_to_overs_float(balls: int) -> float:
    if balls <= 0:
        return 0.0
    return balls / float(BALLS_PER_OVER)


def run_rate(runs: int, balls: int) -> float:
    """Runs per over. Also used as bowling economy."""
    overs = balls_to_overs_float(balls)
    if overs == 0.0:
        return 0.0
    return round(runs / overs, 2)


def strike_rate(runs: int, balls: int) -> float:
    """Runs per 100 balls faced."""
    if balls <= 0:
        return 0.0
    return round(runs / balls * 100, 2)


def batting_average(runs: int, outs: int) -> float:
    """
    Runs per dismissal.
    Never dismissed: the total itself stands in (scorer convention, not a true average).
    """
    if outs <= 0:
        return round(float(runs), 2)
    return round(runs / outs, 2)


def bowling_average(runs: int, wickets: int) -> Optional[float]:
    if wickets <= 0:
        return None
    return round(runs / wickets, 2)
