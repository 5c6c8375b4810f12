# turf_api/config.py
from __future__ import annotations

import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _get_env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, str(default))
    try:
        return int(raw)
    except ValueError:
        return default


# -------------------------
# Match setup bounds
# -------------------------
MIN_PLAYERS_PER_TEAM: int = _get_env_int("TURF_MIN_PLAYERS_PER_TEAM", 2)
MAX_PLAYERS_PER_TEAM: int = _get_env_int("TURF_MAX_PLAYERS_PER_TEAM", 11)


# -------------------------
# HTTP service
# -------------------------
# Comma separated; "*" allows any origin (scoring UI usually runs on another port)
CORS_ORIGINS: list[str] = [o.strip() for o in _get_env("TURF_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL: str = _get_env("TURF_LOG_LEVEL", "INFO").upper()

# Player summaries are aggregated over every stored match
PLAYERS_CACHE_TTL_SECONDS: int = _get_env_int("PLAYERS_CACHE_TTL_SECONDS", 30)


# -------------------------
# API client
# -------------------------
API_BASE_URL: str = _get_env("TURF_API_BASE_URL", "http://localhost:5000/api")
API_TIMEOUT_SECONDS: int = _get_env_int("TURF_API_TIMEOUT_SECONDS", 12)


def validate_config() -> None:
    if MIN_PLAYERS_PER_TEAM < 2:
        raise RuntimeError("TURF_MIN_PLAYERS_PER_TEAM must be at least 2")

    if MAX_PLAYERS_PER_TEAM < MIN_PLAYERS_PER_TEAM:
        raise RuntimeError("TURF_MAX_PLAYERS_PER_TEAM must be >= TURF_MIN_PLAYERS_PER_TEAM")

    if PLAYERS_CACHE_TTL_SECONDS < 0:
        raise RuntimeError("PLAYERS_CACHE_TTL_SECONDS must not be negative")

    if not API_BASE_URL.startswith("http"):
        raise RuntimeError("TURF_API_BASE_URL must start with http/https")

    if API_TIMEOUT_SECONDS <= 0:
        raise RuntimeError("TURF_API_TIMEOUT_SECONDS must be positive")

    if LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise RuntimeError(f"TURF_LOG_LEVEL is not a logging level: {LOG_LEVEL}")
