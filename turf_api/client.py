# turf_api/client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional
import requests

from turf_api.config import API_BASE_URL, API_TIMEOUT_SECONDS


class TurfApiError(Exception):
    """Raised when a call to the scoring service fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def _request(
    method: str,
    path: str,
    *,
    json: Optional[Dict[str, Any]] = None,
    base_url: Optional[str] = None,
) -> Any:
    url = f"{(base_url or API_BASE_URL).rstrip('/')}/{path.lstrip('/')}"

    try:
        resp = requests.request(method, url, json=json, timeout=API_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise TurfApiError(f"Network error: {e}") from e

    if resp.status_code >= 400:
        detail = resp.text
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and "detail" in payload:
            detail = payload["detail"]
        raise TurfApiError(f"HTTP {resp.status_code}: {detail}", status_code=resp.status_code)

    try:
        return resp.json()
    except ValueError as e:
        raise TurfApiError(f"Invalid JSON response: {e}") from e


def create_match(overs_per_innings: int, teams: List[str], players_per_team: int, **kw) -> Dict[str, Any]:
    body = {"overs_per_innings": overs_per_innings, "teams": list(teams), "players_per_team": players_per_team}
    return _request("POST", "matches", json=body, **kw)


def list_matches(**kw) -> List[Dict[str, Any]]:
    return _request("GET", "matches", **kw)


def get_match(match_id: str, **kw) -> Dict[str, Any]:
    return _request("GET", f"matches/{match_id}", **kw)


def record_ball(
    match_id: str,
    *,
    runs: int = 0,
    is_wide: bool = False,
    is_no_ball: bool = False,
    is_wicket: bool = False,
    striker: Optional[str] = None,
    non_striker: Optional[str] = None,
    bowler: Optional[str] = None,
    new_batsman: Optional[str] = None,
    **kw,
) -> Dict[str, Any]:
    body = {
        "runs": runs,
        "is_wide": is_wide,
        "is_no_ball": is_no_ball,
        "is_wicket": is_wicket,
        "striker": striker,
        "non_striker": non_striker,
        "bowler": bowler,
        "new_batsman": new_batsman,
    }
    return _request("POST", f"matches/{match_id}/ball", json=body, **kw)


def undo_ball(match_id: str, **kw) -> Dict[str, Any]:
    return _request("POST", f"matches/{match_id}/undo", **kw)


def delete_match(match_id: str, **kw) -> Dict[str, Any]:
    return _request("DELETE", f"matches/{match_id}", **kw)
