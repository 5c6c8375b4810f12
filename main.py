# main.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from turf_api import cache
from turf_api.admin import delete_player, list_player_names, rename_player
from turf_api.config import CORS_ORIGINS, LOG_LEVEL, PLAYERS_CACHE_TTL_SECONDS, validate_config
from turf_api.match_state import apply_ball, create_match, undo_last_ball
from turf_api.player_stats import player_profile, summarize_players
from turf_api.repository import MatchNotFoundError, MatchRepository
from turf_api.scorecard import match_to_dict
from turf_api.scoring import BallInput, InningsCompleteError, InvalidBallError, NothingToUndoError

logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

PLAYERS_CACHE_NS = "players"

# -----------------------
# App
# -----------------------
app = FastAPI(
    title="Turf Cricket Scorer API",
    version="0.1.0",
    description="Ball-by-ball scoring for short-format turf cricket: live scorecards, undo, player records",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# single-instance, in-memory; writers are serialized per match inside the repository
repo = MatchRepository()


@app.on_event("startup")
def on_startup():
    validate_config()


@app.get("/health")
def health_check():
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}


# -----------------------
# Helpers
# -----------------------
def _not_found(match_id: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Match not found: {match_id}")


def _players_changed() -> None:
    cache.invalidate(PLAYERS_CACHE_NS)


# -----------------------
# Matches
# -----------------------
class CreateMatchRequest(BaseModel):
    overs_per_innings: int = Field(..., description="Overs per innings, e.g. 5")
    teams: List[str] = Field(..., description="Exactly two team names; teams[0] bats first")
    players_per_team: int = Field(..., description="Squad size; last man cannot bat alone")


@app.post("/api/matches", status_code=201)
def create_match_endpoint(req: CreateMatchRequest):
    try:
        match = create_match(req.overs_per_innings, req.teams, req.players_per_team)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    repo.add(match)
    return match_to_dict(match)


@app.get("/api/matches")
def list_matches():
    return [match_to_dict(m) for m in repo.list()]


@app.get("/api/matches/{match_id}")
def get_match(match_id: str):
    try:
        return match_to_dict(repo.get(match_id))
    except MatchNotFoundError:
        raise _not_found(match_id)


@app.delete("/api/matches/{match_id}")
def delete_match(match_id: str):
    try:
        repo.delete(match_id)
    except MatchNotFoundError:
        raise _not_found(match_id)

    _players_changed()
    logger.info("Match %s deleted", match_id)
    return {"message": "Match deleted successfully", "id": match_id}


# -----------------------
# Scoring
# -----------------------
class BallRequest(BaseModel):
    # range checks live in the scoring engine so every caller gets the same errors
    runs: int = Field(0, description="Runs off the bat, 0-6")
    is_wide: bool = False
    is_no_ball: bool = False
    is_wicket: bool = False
    striker: Optional[str] = Field(None, description="Defaults to the batsman on strike")
    non_striker: Optional[str] = Field(None, description="Defaults to the batsman at the other end")
    bowler: Optional[str] = Field(None, description="Required at the start of every over")
    new_batsman: Optional[str] = Field(None, description="Incoming batsman when is_wicket is set")


@app.post("/api/matches/{match_id}/ball")
def record_ball(match_id: str, req: BallRequest):
    ball = BallInput(**req.model_dump())

    try:
        match = repo.update(match_id, lambda m: apply_ball(m, ball))
    except MatchNotFoundError:
        raise _not_found(match_id)
    except InvalidBallError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InningsCompleteError as e:
        raise HTTPException(status_code=409, detail=str(e))

    _players_changed()
    return match_to_dict(match)


@app.post("/api/matches/{match_id}/undo")
def undo_ball(match_id: str):
    try:
        match = repo.update(match_id, undo_last_ball)
    except MatchNotFoundError:
        raise _not_found(match_id)
    except NothingToUndoError as e:
        raise HTTPException(status_code=409, detail=str(e))

    _players_changed()
    return match_to_dict(match)


# -----------------------
# Players (aggregated over every stored match, cached)
# -----------------------
@app.get("/api/players")
def list_players():
    key = cache.make_key(PLAYERS_CACHE_NS, "summary")
    cached = cache.get(key)
    if cached is not None:
        return {"source": "cache", "players": cached}

    players = summarize_players(repo.list())
    cache.set(key, players, ttl_seconds=PLAYERS_CACHE_TTL_SECONDS)
    return {"source": "live", "players": players}


@app.get("/api/players/{player_name}")
def get_player(player_name: str):
    key = cache.make_key(PLAYERS_CACHE_NS, f"profile:{player_name}")
    cached = cache.get(key)
    if cached is not None:
        return cached

    try:
        profile = player_profile(repo.list(), player_name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Player not found: {player_name}")

    cache.set(key, profile, ttl_seconds=PLAYERS_CACHE_TTL_SECONDS)
    return profile


# -----------------------
# Admin: player name corrections across stored history
# -----------------------
class RenamePlayerRequest(BaseModel):
    old_name: str
    new_name: str


class DeletePlayerRequest(BaseModel):
    player_name: str


@app.get("/api/admin/players")
def admin_list_players():
    names = list_player_names(repo.list())
    return {"players": names, "count": len(names)}


@app.post("/api/admin/rename-player")
def admin_rename_player(req: RenamePlayerRequest):
    result: Dict[str, Any] = {}

    def _rewrite(matches):
        out, summary = rename_player(matches, req.old_name, req.new_name)
        result["summary"] = summary
        return out

    try:
        repo.rewrite_all(_rewrite)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _players_changed()
    summary = result["summary"]
    return {
        "success": True,
        "message": f'Successfully renamed "{req.old_name.strip()}" to "{req.new_name.strip()}"',
        "matches_affected": summary.matches_affected,
        "records_updated": summary.records,
    }


@app.post("/api/admin/delete-player")
def admin_delete_player(req: DeletePlayerRequest):
    result: Dict[str, Any] = {}

    def _rewrite(matches):
        out, summary = delete_player(matches, req.player_name)
        result["summary"] = summary
        return out

    try:
        repo.rewrite_all(_rewrite)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _players_changed()
    summary = result["summary"]
    return {
        "success": True,
        "message": f'Successfully deleted "{req.player_name.strip()}" from all matches',
        "matches_affected": summary.matches_affected,
        "records_deleted": summary.records,
    }
