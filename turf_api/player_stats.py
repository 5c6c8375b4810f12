# turf_api/player_stats.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import pandas as pd

from turf_api.models import Match
from turf_api.overs_math import (
    balls_to_overs_str,
    batting_average,
    bowling_average,
    run_rate,
    strike_rate,
    to_balls,
)
from turf_api.scorecard import result_to_dict

BATTING_COLUMNS = ["match_id", "name", "runs", "balls", "fours", "sixes", "is_out"]
BOWLING_COLUMNS = ["match_id", "name", "balls", "runs", "wickets"]


def _batting_frame(matches: List[Match]) -> pd.DataFrame:
    rows: List[dict] = []
    for m in matches:
        for inn in m.innings:
            for r in inn.batting.values():
                rows.append({
                    "match_id": m.match_id,
                    "name": r.name,
                    "runs": r.runs,
                    "balls": r.balls,
                    "fours": r.fours,
                    "sixes": r.sixes,
                    "is_out": bool(r.is_out),
                })
    return pd.DataFrame(rows, columns=BATTING_COLUMNS)


def _bowling_frame(matches: List[Match]) -> pd.DataFrame:
    rows: List[dict] = []
    for m in matches:
        for inn in m.innings:
            for r in inn.bowling.values():
                rows.append({
                    "match_id": m.match_id,
                    "name": r.name,
                    "balls": to_balls(r.overs, r.balls),
                    "runs": r.runs,
                    "wickets": r.wickets,
                })
    return pd.DataFrame(rows, columns=BOWLING_COLUMNS)


def _empty_batting() -> Dict[str, Any]:
    return {
        "matches": 0, "innings": 0, "runs": 0, "balls": 0, "fours": 0, "sixes": 0,
        "not_outs": 0, "outs": 0, "high_score": 0, "average": 0.0, "strike_rate": 0.0,
    }


def _empty_bowling() -> Dict[str, Any]:
    return {
        "matches": 0, "innings": 0, "balls": 0, "overs": "0.0", "runs": 0, "wickets": 0,
        "best_bowling": None, "average": None, "economy": 0.0,
    }


def _aggregate_batting(df: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
    if df.empty:
        return {}

    g = df.groupby("name").agg(
        matches=("match_id", "nunique"),
        innings=("match_id", "size"),
        runs=("runs", "sum"),
        balls=("balls", "sum"),
        fours=("fours", "sum"),
        sixes=("sixes", "sum"),
        outs=("is_out", "sum"),
        high_score=("runs", "max"),
    )

    out: Dict[str, Dict[str, Any]] = {}
    for name, row in g.iterrows():
        runs, balls, outs, innings = int(row["runs"]), int(row["balls"]), int(row["outs"]), int(row["innings"])
        out[str(name)] = {
            "matches": int(row["matches"]),
            "innings": innings,
            "runs": runs,
            "balls": balls,
            "fours": int(row["fours"]),
            "sixes": int(row["sixes"]),
            "not_outs": innings - outs,
            "outs": outs,
            "high_score": int(row["high_score"]),
            "average": batting_average(runs, outs),
            "strike_rate": strike_rate(runs, balls),
        }
    return out


def _aggregate_bowling(df: pd.DataFrame) -> Dict[str, Dict[str, Any]]:
    if df.empty:
        return {}

    g = df.groupby("name").agg(
        matches=("match_id", "nunique"),
        innings=("match_id", "size"),
        balls=("balls", "sum"),
        runs=("runs", "sum"),
        wickets=("wickets", "sum"),
    )

    # best figures: most wickets, then fewest runs
    best = (
        df.sort_values(["wickets", "runs"], ascending=[False, True], kind="mergesort")
        .groupby("name")
        .first()
    )

    out: Dict[str, Dict[str, Any]] = {}
    for name, row in g.iterrows():
        balls, runs, wickets = int(row["balls"]), int(row["runs"]), int(row["wickets"])
        b = best.loc[name]
        out[str(name)] = {
            "matches": int(row["matches"]),
            "innings": int(row["innings"]),
            "balls": balls,
            "overs": balls_to_overs_str(balls),
            "runs": runs,
            "wickets": wickets,
            "best_bowling": f"{int(b['wickets'])}/{int(b['runs'])}",
            "average": bowling_average(runs, wickets),
            "economy": run_rate(runs, balls),
        }
    return out


def _total_matches(batting_df: pd.DataFrame, bowling_df: pd.DataFrame) -> Dict[str, int]:
    # distinct matches where the player batted or bowled
    both = pd.concat([batting_df[["name", "match_id"]], bowling_df[["name", "match_id"]]], ignore_index=True)
    if both.empty:
        return {}
    counts = both.groupby("name")["match_id"].nunique()
    return {str(name): int(n) for name, n in counts.items()}


def _summaries(matches: List[Match]) -> Dict[str, Dict[str, Any]]:
    batting_df = _batting_frame(matches)
    bowling_df = _bowling_frame(matches)
    batting = _aggregate_batting(batting_df)
    bowling = _aggregate_bowling(bowling_df)
    total_matches = _total_matches(batting_df, bowling_df)

    out: Dict[str, Dict[str, Any]] = {}
    for name in set(batting) | set(bowling):
        out[name] = {
            "name": name,
            "total_matches": total_matches.get(name, 0),
            "batting": batting.get(name, _empty_batting()),
            "bowling": bowling.get(name, _empty_bowling()),
        }
    return out


def summarize_players(matches: List[Match]) -> List[dict]:
    """
    Career figures for every player seen in `matches`.
    Sorted by batting runs (desc), then name.
    """
    summaries = _summaries(matches)
    return sorted(summaries.values(), key=lambda p: (-p["batting"]["runs"], p["name"]))


def _match_batting(match: Match, name: str) -> Optional[Dict[str, Any]]:
    for inn in match.innings:
        row = inn.batting.get(name)
        if row is not None:
            return {"runs": row.runs, "balls": row.balls, "fours": row.fours, "sixes": row.sixes, "is_out": row.is_out}
    return None


def _match_bowling(match: Match, name: str) -> Optional[Dict[str, Any]]:
    for inn in match.innings:
        row = inn.bowling.get(name)
        if row is not None:
            return {"overs": row.overs, "balls": row.balls, "runs": row.runs, "wickets": row.wickets}
    return None


def player_profile(matches: List[Match], name: str) -> Dict[str, Any]:
    """
    One player's career summary plus per-match history (newest first).
    Raises KeyError if the player never appears.
    """
    key = (name or "").strip()
    summaries = _summaries(matches)
    if key not in summaries:
        raise KeyError(key)

    history: List[dict] = []
    for m in sorted(matches, key=lambda x: x.created_at, reverse=True):
        batting = _match_batting(m, key)
        bowling = _match_bowling(m, key)
        if batting is None and bowling is None:
            continue
        history.append({
            "match_id": m.match_id,
            "date": m.created_at.isoformat(),
            "teams": list(m.teams),
            "status": m.status,
            "result": result_to_dict(m.result),
            "batting": batting,
            "bowling": bowling,
        })

    profile = dict(summaries[key])
    profile["match_history"] = history
    return profile
