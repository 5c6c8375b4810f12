# turf_api/admin.py
from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, replace
from typing import Dict, List, Tuple, TypeVar

from turf_api.models import BattingFigures, BowlingFigures, Innings, Match
from turf_api.overs_math import BALLS_PER_OVER, to_balls

logger = logging.getLogger(__name__)

DELETED_PLAYER = "Deleted Player"

Row = TypeVar("Row", BattingFigures, BowlingFigures)


@dataclass
class RewriteSummary:
    matches_affected: int = 0
    records: int = 0


def _clean(name: str, field_name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValueError(f"{field_name} is required")
    return name


def _merge_batting(into: BattingFigures, other: BattingFigures) -> None:
    into.runs += other.runs
    into.balls += other.balls
    into.fours += other.fours
    into.sixes += other.sixes
    into.is_out = into.is_out or other.is_out


def _merge_bowling(into: BowlingFigures, other: BowlingFigures) -> None:
    balls = to_balls(into.overs, into.balls) + to_balls(other.overs, other.balls)
    into.overs, into.balls = divmod(balls, BALLS_PER_OVER)
    into.runs += other.runs
    into.wickets += other.wickets


def _rename_rows(rows: Dict[str, Row], old: str, new: str, merge) -> Tuple[Dict[str, Row], int]:
    """Rename key `old` -> `new`, keeping first-seen order. Merges into an existing `new` row."""
    if old not in rows:
        return rows, 0

    out: Dict[str, Row] = {}
    for name, row in rows.items():
        if name == old:
            if new in rows:
                continue  # folded into the existing row below
            out[new] = replace(row, name=new)
        else:
            out[name] = row

    if new in rows:
        merge(out[new], rows[old])
    return out, 1


def _rename_in_innings(innings: Innings, old: str, new: str) -> Tuple[bool, int]:
    touched = False

    for slot in ("striker", "non_striker", "current_bowler"):
        if getattr(innings, slot) == old:
            setattr(innings, slot, new)
            touched = True

    innings.batting, n_bat = _rename_rows(innings.batting, old, new, _merge_batting)
    innings.bowling, n_bowl = _rename_rows(innings.bowling, old, new, _merge_bowling)

    log = []
    for ball in innings.ball_by_ball:
        changes = {}
        if ball.striker == old:
            changes["striker"] = new
        if ball.non_striker == old:
            changes["non_striker"] = new
        if ball.new_batsman == old:
            changes["new_batsman"] = new
        if ball.bowler == old:
            changes["bowler"] = new
        log.append(replace(ball, **changes) if changes else ball)
        touched = touched or bool(changes)
    innings.ball_by_ball = log

    records = n_bat + n_bowl
    return touched or records > 0, records


def rename_player(matches: List[Match], old_name: str, new_name: str) -> Tuple[List[Match], RewriteSummary]:
    """
    Rename a player across every match: crease slots, figure rows and ball history.
    If the new name already has figures in an innings, the two rows are merged.
    Inputs are not mutated.
    """
    old = _clean(old_name, "old_name")
    new = _clean(new_name, "new_name")
    if old == new:
        raise ValueError("Old name and new name cannot be the same")

    summary = RewriteSummary()
    out: List[Match] = []
    for match in matches:
        updated = copy.deepcopy(match)
        modified = False
        for innings in updated.innings:
            touched, records = _rename_in_innings(innings, old, new)
            modified = modified or touched
            summary.records += records

        if modified:
            summary.matches_affected += 1
            out.append(updated)
        else:
            out.append(match)

    logger.info(
        "Renamed %r to %r: %d matches, %d figure records",
        old, new, summary.matches_affected, summary.records,
    )
    return out, summary


def _delete_in_innings(innings: Innings, name: str) -> Tuple[bool, int]:
    touched = False

    for slot in ("striker", "non_striker", "current_bowler"):
        if getattr(innings, slot) == name:
            setattr(innings, slot, None)
            touched = True

    records = 0
    if name in innings.batting:
        innings.batting = {k: v for k, v in innings.batting.items() if k != name}
        records += 1
    if name in innings.bowling:
        innings.bowling = {k: v for k, v in innings.bowling.items() if k != name}
        records += 1

    # history keeps its shape; only the name goes
    log = []
    for ball in innings.ball_by_ball:
        changes = {}
        if ball.striker == name:
            changes["striker"] = DELETED_PLAYER
        if ball.non_striker == name:
            changes["non_striker"] = DELETED_PLAYER
        if ball.new_batsman == name:
            changes["new_batsman"] = DELETED_PLAYER
        if ball.bowler == name:
            changes["bowler"] = DELETED_PLAYER
        log.append(replace(ball, **changes) if changes else ball)
        touched = touched or bool(changes)
    innings.ball_by_ball = log

    return touched or records > 0, records


def delete_player(matches: List[Match], player_name: str) -> Tuple[List[Match], RewriteSummary]:
    """
    Remove a player from every match. Figure rows go; ball history is relabelled
    to DELETED_PLAYER. Team totals are not touched.
    """
    name = _clean(player_name, "player_name")

    summary = RewriteSummary()
    out: List[Match] = []
    for match in matches:
        updated = copy.deepcopy(match)
        modified = False
        for innings in updated.innings:
            touched, records = _delete_in_innings(innings, name)
            modified = modified or touched
            summary.records += records

        if modified:
            summary.matches_affected += 1
            out.append(updated)
        else:
            out.append(match)

    logger.info("Deleted %r: %d matches, %d figure records", name, summary.matches_affected, summary.records)
    return out, summary


def list_player_names(matches: List[Match]) -> List[str]:
    names = set()
    for match in matches:
        for innings in match.innings:
            names.update(innings.batting.keys())
            names.update(innings.bowling.keys())
    return sorted(names)
