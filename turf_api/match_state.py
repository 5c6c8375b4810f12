# turf_api/match_state.py
from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from turf_api.config import MAX_PLAYERS_PER_TEAM, MIN_PLAYERS_PER_TEAM
from turf_api.models import Innings, Match, MatchResult
from turf_api.overs_math import to_balls
from turf_api.scoring import (
    BallInput,
    InningsCompleteError,
    NothingToUndoError,
    record_ball,
    remove_last_ball,
    validate_ball,
)

logger = logging.getLogger(__name__)


def create_match(
    overs_per_innings: int,
    teams: List[str],
    players_per_team: int,
    *,
    match_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Match:
    """
    New match, first innings open. teams[0] bats first.

    Matches go straight to in_progress; not_started is never produced here.
    """
    if isinstance(overs_per_innings, bool) or not isinstance(overs_per_innings, int) or overs_per_innings < 1:
        raise ValueError("overs_per_innings must be a positive integer")

    names = [str(t).strip() for t in (teams or [])]
    if len(names) != 2 or not all(names):
        raise ValueError("Must have exactly 2 named teams")
    if names[0].lower() == names[1].lower():
        raise ValueError("Team names must be different")

    if not (MIN_PLAYERS_PER_TEAM <= players_per_team <= MAX_PLAYERS_PER_TEAM):
        raise ValueError(
            f"players_per_team must be between {MIN_PLAYERS_PER_TEAM} and {MAX_PLAYERS_PER_TEAM}"
        )

    match = Match(
        match_id=match_id or uuid.uuid4().hex,
        overs_per_innings=overs_per_innings,
        teams=names,
        players_per_team=players_per_team,
        batting_team=names[0],
        bowling_team=names[1],
        current_innings=1,
        status="in_progress",
        innings=[Innings(innings_number=1, batting_team=names[0], bowling_team=names[1])],
    )
    if created_at is not None:
        match.created_at = created_at

    logger.info("Match %s created: %s vs %s, %d overs", match.match_id, names[0], names[1], overs_per_innings)
    return match


def target(match: Match) -> Optional[int]:
    """Runs the second innings needs to win, once it exists."""
    if len(match.innings) < 2:
        return None
    return match.innings[0].runs + 1


def _innings_over(match: Match, innings: Innings) -> bool:
    # target check comes first: a chase ends the moment it is won
    if innings.innings_number == 2 and innings.runs >= match.innings[0].runs + 1:
        return True
    if innings.legal_balls >= to_balls(match.overs_per_innings, 0):
        return True
    return innings.wickets >= match.max_wickets


def compute_result(match: Match) -> MatchResult:
    first, second = match.innings[0], match.innings[1]

    if first.runs > second.runs:
        return MatchResult(
            winner=first.batting_team,
            margin=f"{first.runs - second.runs} runs",
            is_draw=False,
        )
    if second.runs > first.runs:
        wickets_remaining = match.max_wickets - second.wickets
        return MatchResult(
            winner=second.batting_team,
            margin=f"{wickets_remaining} wickets",
            is_draw=False,
        )
    return MatchResult(winner=None, margin="Match Tied", is_draw=True)


def _start_second_innings(match: Match) -> None:
    first = match.innings[0]
    match.innings.append(
        Innings(innings_number=2, batting_team=first.bowling_team, bowling_team=first.batting_team)
    )
    match.current_innings = 2
    match.batting_team, match.bowling_team = first.bowling_team, first.batting_team
    logger.info(
        "Match %s: innings 1 closed at %d/%d, %s need %d",
        match.match_id, first.runs, first.wickets, match.batting_team, first.runs + 1,
    )


def _complete(match: Match) -> None:
    match.status = "completed"
    match.result = compute_result(match)
    logger.info(
        "Match %s completed: %s",
        match.match_id,
        "tied" if match.result.is_draw else f"{match.result.winner} won by {match.result.margin}",
    )


def apply_ball(match: Match, ball: BallInput, *, timestamp: Optional[datetime] = None) -> Match:
    """
    Record one delivery. Returns a new Match; `match` is left untouched.

    Raises InvalidBallError for bad input and InningsCompleteError once the
    match is over (undo reopens it).
    """
    if match.status == "completed":
        raise InningsCompleteError(f"Match {match.match_id} is already completed")
    validate_ball(ball)

    updated = copy.deepcopy(match)
    innings = updated.active_innings
    record_ball(innings, ball, timestamp=timestamp)

    if _innings_over(updated, innings):
        if updated.current_innings == 1:
            _start_second_innings(updated)
        else:
            _complete(updated)

    return updated


def undo_last_ball(match: Match) -> Match:
    """
    Reverse the most recent delivery. Returns a new Match; `match` is left untouched.

    Reopens a completed match and steps back into innings 1 when innings 2
    has not had a ball yet. Raises NothingToUndoError when there is nothing left.
    """
    updated = copy.deepcopy(match)

    if updated.status == "completed":
        updated.status = "in_progress"
        updated.result = None

    if updated.current_innings == 2 and not updated.active_innings.ball_by_ball:
        updated.innings.pop()
        updated.current_innings = 1
        first = updated.innings[0]
        updated.batting_team, updated.bowling_team = first.batting_team, first.bowling_team

    innings = updated.active_innings
    if not innings.ball_by_ball:
        raise NothingToUndoError(f"Match {match.match_id} has no balls to undo")

    event = remove_last_ball(innings)
    logger.info(
        "Match %s: undid innings %d ball %d (%s to %s)",
        updated.match_id, innings.innings_number, event.ball_number, event.bowler, event.striker,
    )
    return updated
