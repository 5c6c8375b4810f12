# turf_api/scorecard.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from turf_api.match_state import target
from turf_api.models import BallEvent, Innings, Match, MatchResult
from turf_api.overs_math import balls_to_overs_str, run_rate, strike_rate, to_balls


def _ball_to_dict(ball: BallEvent) -> Dict[str, Any]:
    return {
        "ball_number": ball.ball_number,
        "runs": ball.runs,
        "is_wide": ball.is_wide,
        "is_no_ball": ball.is_no_ball,
        "is_wicket": ball.is_wicket,
        "striker": ball.striker,
        "non_striker": ball.non_striker,
        "new_batsman": ball.new_batsman,
        "bowler": ball.bowler,
        "timestamp": ball.timestamp.isoformat(),
    }


def innings_to_dict(innings: Innings, target_runs: Optional[int] = None) -> Dict[str, Any]:
    balls = innings.legal_balls

    batting: List[dict] = []
    for row in innings.batting.values():
        batting.append({
            "name": row.name,
            "runs": row.runs,
            "balls": row.balls,
            "fours": row.fours,
            "sixes": row.sixes,
            "is_out": row.is_out,
            "strike_rate": strike_rate(row.runs, row.balls),
        })

    bowling: List[dict] = []
    for row in innings.bowling.values():
        bowled = to_balls(row.overs, row.balls)
        bowling.append({
            "name": row.name,
            "overs": row.overs,
            "balls": row.balls,
            "runs": row.runs,
            "wickets": row.wickets,
            "overs_display": balls_to_overs_str(bowled),
            "economy": run_rate(row.runs, bowled),
        })

    out: Dict[str, Any] = {
        "innings_number": innings.innings_number,
        "batting_team": innings.batting_team,
        "bowling_team": innings.bowling_team,
        "runs": innings.runs,
        "wickets": innings.wickets,
        "overs": innings.overs,
        "balls": innings.balls,
        "overs_display": balls_to_overs_str(balls),
        "run_rate": run_rate(innings.runs, balls),
        "extras": {
            "wides": innings.extras.wides,
            "no_balls": innings.extras.no_balls,
            "total": innings.extras.total,
        },
        "striker": innings.striker,
        "non_striker": innings.non_striker,
        "current_bowler": innings.current_bowler,
        "ball_by_ball": [_ball_to_dict(b) for b in innings.ball_by_ball],
        "batting": batting,
        "bowling": bowling,
    }

    if target_runs is not None:
        out["target"] = target_runs
        out["runs_required"] = max(0, target_runs - innings.runs)

    return out


def result_to_dict(result: Optional[MatchResult]) -> Optional[Dict[str, Any]]:
    if result is None:
        return None
    return {"winner": result.winner, "margin": result.margin, "is_draw": result.is_draw}


def match_to_dict(match: Match) -> Dict[str, Any]:
    """JSON-ready snapshot of a match with derived scoreboard fields."""
    chase = target(match)

    innings_out = []
    for inn in match.innings:
        innings_out.append(innings_to_dict(inn, chase if inn.innings_number == 2 else None))

    return {
        "id": match.match_id,
        "overs_per_innings": match.overs_per_innings,
        "teams": list(match.teams),
        "players_per_team": match.players_per_team,
        "current_innings": match.current_innings,
        "batting_team": match.batting_team,
        "bowling_team": match.bowling_team,
        "status": match.status,
        "innings": innings_out,
        "result": result_to_dict(match.result),
        "created_at": match.created_at.isoformat(),
    }
