"""
Pytest fixtures for the turf scorer.
Provides fresh matches, a ball-playing helper and an API client bound to an empty repository.
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

import main
from turf_api import cache
from turf_api.match_state import apply_ball, create_match
from turf_api.repository import MatchRepository
from turf_api.scoring import BallInput


def ball(runs=0, **kw):
    """Shorthand for a BallInput."""
    return BallInput(runs=runs, **kw)


def play(match, *balls):
    """Apply balls in order and return the final snapshot."""
    for b in balls:
        match = apply_ball(match, b)
    return match


def opening(runs=0, **kw):
    """First ball of an innings: names both batsmen and the bowler."""
    kw.setdefault("striker", "Opener A")
    kw.setdefault("non_striker", "Opener B")
    kw.setdefault("bowler", "Quick")
    return BallInput(runs=runs, **kw)


@pytest.fixture
def t20_match():
    """20 overs, 11 a side, Lions bat first."""
    return create_match(20, ["Lions", "Tigers"], 11, match_id="t20")


@pytest.fixture
def one_over_match():
    """1 over a side, 11 a side."""
    return create_match(1, ["Team A", "Team B"], 11, match_id="one-over")


@pytest.fixture
def stored_matches():
    """Two finished one-over games sharing some players."""
    base = datetime(2026, 3, 1, 18, 0, tzinfo=timezone.utc)

    first = create_match(1, ["Reds", "Blues"], 3, match_id="m1", created_at=base)
    first = play(
        first,
        ball(4, striker="Asha", non_striker="Bala", bowler="Chris"),
        ball(1),
        ball(6),
        ball(0, is_wicket=True, new_batsman="Dev"),
        ball(0),
        ball(2),
    )
    # Reds 13/1; Blues chase 14
    first = play(
        first,
        ball(0, striker="Esha", non_striker="Farid", bowler="Asha"),
        ball(0, is_wicket=True, new_batsman="Gita"),
        ball(1, is_wicket=True),
    )

    second = create_match(1, ["Reds", "Blues"], 3, match_id="m2", created_at=base + timedelta(days=1))
    second = play(
        second,
        ball(1, striker="Asha", non_striker="Bala", bowler="Esha"),
        ball(1),
        ball(0, is_wicket=True, new_batsman="Dev"),
        ball(0),
        ball(0),
        ball(0),
    )
    return [first, second]


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(main, "repo", MatchRepository())
    cache.clear()
    with TestClient(main.app) as c:
        yield c
    cache.clear()
