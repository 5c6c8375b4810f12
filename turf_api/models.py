from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Literal

from turf_api.overs_math import to_balls


# -----------------------------
# Match status semantics
# -----------------------------
MatchStatus = Literal["not_started", "in_progress", "completed"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# -----------------------------
# One delivery (append-only log entry)
# -----------------------------
@dataclass(frozen=True)
class BallEvent:
    ball_number: int  # 1-based, contiguous within an innings
    runs: int  # off the bat, 0..6
    is_wide: bool
    is_no_ball: bool
    is_wicket: bool
    striker: str
    bowler: str
    non_striker: Optional[str] = None
    new_batsman: Optional[str] = None  # set on wickets when the incoming batsman is named
    timestamp: datetime = field(default_factory=utc_now)

    @property
    def is_legal(self) -> bool:
        return not self.is_wide and not self.is_no_ball

    @property
    def is_extra(self) -> bool:
        return self.is_wide or self.is_no_ball

    @property
    def total_runs(self) -> int:
        """Runs added to the innings total, penalty run included."""
        return self.runs + 1 if self.is_extra else self.runs


# -----------------------------
# Per-player figures (one row per name per innings)
# -----------------------------
@dataclass
class BattingFigures:
    name: str
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False


@dataclass
class BowlingFigures:
    name: str
    overs: int = 0
    balls: int = 0  # 0..5 in the current over
    runs: int = 0
    wickets: int = 0


@dataclass
class Extras:
    wides: int = 0
    no_balls: int = 0

    @property
    def total(self) -> int:
        return self.wides + self.no_balls


# -----------------------------
# Innings ledger
# -----------------------------
@dataclass
class Innings:
    innings_number: int
    batting_team: str
    bowling_team: str

    runs: int = 0
    wickets: int = 0
    overs: int = 0
    balls: int = 0  # 0..5 in the current over
    extras: Extras = field(default_factory=Extras)

    ball_by_ball: List[BallEvent] = field(default_factory=list)

    striker: Optional[str] = None
    non_striker: Optional[str] = None
    current_bowler: Optional[str] = None

    # dicts keep first-seen order
    batting: Dict[str, BattingFigures] = field(default_factory=dict)
    bowling: Dict[str, BowlingFigures] = field(default_factory=dict)

    @property
    def legal_balls(self) -> int:
        return to_balls(self.overs, self.balls)


# -----------------------------
# Match
# -----------------------------
@dataclass
class MatchResult:
    winner: Optional[str]
    margin: str
    is_draw: bool = False


@dataclass
class Match:
    match_id: str
    overs_per_innings: int
    teams: List[str]
    players_per_team: int

    batting_team: str
    bowling_team: str
    current_innings: int = 1
    status: MatchStatus = "not_started"

    innings: List[Innings] = field(default_factory=list)
    result: Optional[MatchResult] = None
    created_at: datetime = field(default_factory=utc_now)

    @property
    def active_innings(self) -> Innings:
        return self.innings[self.current_innings - 1]

    @property
    def max_wickets(self) -> int:
        # last batsman cannot bat alone
        return self.players_per_team - 1
