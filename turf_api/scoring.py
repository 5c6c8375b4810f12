# turf_api/scoring.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from turf_api.models import BallEvent, BattingFigures, BowlingFigures, Innings, utc_now
from turf_api.overs_math import BALLS_PER_OVER

logger = logging.getLogger(__name__)

MAX_RUNS_PER_BALL = 6


class ScoringError(Exception):
    """Base class for every scoring engine failure."""
    pass


class InvalidBallError(ScoringError):
    """Ball input violates field constraints. Reject the request as-is."""
    pass


class NothingToUndoError(ScoringError):
    """No ball left in the active (or previous) innings to reverse."""
    pass


class InningsCompleteError(ScoringError):
    """Ball recorded against a completed match."""
    pass


@dataclass(frozen=True)
class BallInput:
    """
    One delivery as reported by the scorer.

    striker / non_striker / bowler default to the innings' current slots when omitted.
    new_batsman is only read when is_wicket is set: the incoming batsman takes strike.
    """
    runs: int = 0
    is_wide: bool = False
    is_no_ball: bool = False
    is_wicket: bool = False
    striker: Optional[str] = None
    non_striker: Optional[str] = None
    bowler: Optional[str] = None
    new_batsman: Optional[str] = None


def _clean_name(name: Optional[str]) -> Optional[str]:
    if name is None:
        return None
    name = str(name).strip()
    return name or None


def validate_ball(ball: BallInput) -> None:
    # bool is an int subclass; True must not pass as 1 run
    if isinstance(ball.runs, bool) or not isinstance(ball.runs, int):
        raise InvalidBallError(f"runs must be an integer, got {ball.runs!r}")
    if ball.runs < 0 or ball.runs > MAX_RUNS_PER_BALL:
        raise InvalidBallError(f"runs must be between 0 and {MAX_RUNS_PER_BALL}, got {ball.runs}")
    if ball.is_wide and ball.is_no_ball:
        raise InvalidBallError("A delivery cannot be both a wide and a no-ball")


def _batter(innings: Innings, name: str) -> BattingFigures:
    row = innings.batting.get(name)
    if row is None:
        row = BattingFigures(name=name)
        innings.batting[name] = row
    return row


def _bowler(innings: Innings, name: str) -> BowlingFigures:
    row = innings.bowling.get(name)
    if row is None:
        row = BowlingFigures(name=name)
        innings.bowling[name] = row
    return row


def _credit_boundary(row: BattingFigures, runs: int, sign: int) -> None:
    if runs == 4:
        row.fours += sign
    elif runs == 6:
        row.sixes += sign


def record_ball(innings: Innings, ball: BallInput, *, timestamp: Optional[datetime] = None) -> BallEvent:
    """
    Apply one delivery to `innings` in place and return the logged event.

    Callers own `innings` exclusively (match_state hands in a private copy),
    so a failure here never leaks into a published snapshot.
    """
    validate_ball(ball)

    striker = _clean_name(ball.striker) or innings.striker
    bowler_name = _clean_name(ball.bowler) or innings.current_bowler
    non_striker = _clean_name(ball.non_striker)
    if non_striker is None:
        # scorer put the other batsman on strike: the pair changed ends
        non_striker = innings.striker if innings.non_striker == striker else innings.non_striker

    if not striker:
        raise InvalidBallError("No striker named and none at the crease")
    if not bowler_name:
        raise InvalidBallError("No bowler named and none carrying on from this over")
    if non_striker == striker:
        raise InvalidBallError(f"{striker} cannot be both striker and non-striker")

    incoming = _clean_name(ball.new_batsman) if ball.is_wicket else None

    event = BallEvent(
        ball_number=len(innings.ball_by_ball) + 1,
        runs=ball.runs,
        is_wide=bool(ball.is_wide),
        is_no_ball=bool(ball.is_no_ball),
        is_wicket=bool(ball.is_wicket),
        striker=striker,
        non_striker=non_striker,
        new_batsman=incoming,
        bowler=bowler_name,
        timestamp=timestamp or utc_now(),
    )
    innings.ball_by_ball.append(event)

    bat = _batter(innings, striker)
    if non_striker:
        _batter(innings, non_striker)
    bowl = _bowler(innings, bowler_name)

    # Runs
    innings.runs += event.total_runs
    bowl.runs += event.total_runs
    if event.is_wide:
        innings.extras.wides += 1
    elif event.is_no_ball:
        innings.extras.no_balls += 1
        # bat runs off a no-ball count to the striker, the penalty does not
        bat.runs += event.runs
        _credit_boundary(bat, event.runs, +1)
    else:
        bat.runs += event.runs
        bat.balls += 1
        _credit_boundary(bat, event.runs, +1)

    # Wicket (wides included, as recorded by the scorer)
    if event.is_wicket:
        innings.wickets += 1
        bat.is_out = True
        bowl.wickets += 1

    # Balls / overs
    over_complete = False
    if event.is_legal:
        innings.balls += 1
        if innings.balls == BALLS_PER_OVER:
            innings.overs += 1
            innings.balls = 0
            over_complete = True

        bowl.balls += 1
        if bowl.balls == BALLS_PER_OVER:
            bowl.overs += 1
            bowl.balls = 0

    # Crease
    innings.striker = striker
    innings.non_striker = non_striker
    innings.current_bowler = bowler_name

    if event.is_wicket:
        innings.striker = incoming
        if incoming:
            _batter(innings, incoming)

    # one swap at most, even when an odd run ends the over
    odd_runs = not event.is_wicket and event.runs % 2 == 1
    if event.is_legal and (over_complete or odd_runs):
        innings.striker, innings.non_striker = innings.non_striker, innings.striker

    if over_complete:
        # new over, new bowler
        innings.current_bowler = None
        logger.debug(
            "Innings %d: over %d complete (%d/%d)",
            innings.innings_number, innings.overs, innings.runs, innings.wickets,
        )

    return event


def remove_last_ball(innings: Innings) -> BallEvent:
    """
    Reverse the most recent delivery in place and return it.

    Strike order and the current-bowler slot are left as they are; the next
    ball's names overwrite them. Figure rows the ball created are removed.
    """
    if not innings.ball_by_ball:
        raise NothingToUndoError(f"Innings {innings.innings_number} has no balls to undo")

    event = innings.ball_by_ball.pop()

    # rows may be gone after an admin delete; skip rather than resurrect
    bat = innings.batting.get(event.striker)
    bowl = innings.bowling.get(event.bowler)

    # Runs
    innings.runs -= event.total_runs
    if bowl is not None:
        bowl.runs -= event.total_runs
    if event.is_wide:
        innings.extras.wides -= 1
    elif event.is_no_ball:
        innings.extras.no_balls -= 1
        if bat is not None:
            bat.runs -= event.runs
            _credit_boundary(bat, event.runs, -1)
    elif bat is not None:
        bat.runs -= event.runs
        bat.balls -= 1
        _credit_boundary(bat, event.runs, -1)

    # Wicket
    if event.is_wicket:
        innings.wickets -= 1
        if bat is not None:
            bat.is_out = False
        if bowl is not None:
            bowl.wickets -= 1

    # Balls / overs
    if event.is_legal:
        if innings.balls == 0:
            if innings.overs > 0:
                innings.overs -= 1
                innings.balls = BALLS_PER_OVER - 1
        else:
            innings.balls -= 1

        if bowl is not None:
            if bowl.balls == 0:
                if bowl.overs > 0:
                    bowl.overs -= 1
                    bowl.balls = BALLS_PER_OVER - 1
            else:
                bowl.balls -= 1

    _drop_created_rows(innings, event)
    return event


def _drop_created_rows(innings: Innings, event: BallEvent) -> None:
    # a row belongs to the ball that first named it; once no earlier ball
    # names the player and the row is back to zero, the row goes too
    batters = {b.striker for b in innings.ball_by_ball}
    batters |= {b.non_striker for b in innings.ball_by_ball}
    batters |= {b.new_batsman for b in innings.ball_by_ball}
    bowlers = {b.bowler for b in innings.ball_by_ball}

    for name in (event.striker, event.non_striker, event.new_batsman):
        row = innings.batting.get(name) if name else None
        if row is not None and name not in batters and row == BattingFigures(name=name):
            del innings.batting[name]

    row = innings.bowling.get(event.bowler)
    if row is not None and event.bowler not in bowlers and row == BowlingFigures(name=event.bowler):
        del innings.bowling[event.bowler]
