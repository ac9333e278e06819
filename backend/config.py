"""
Runtime settings for Snake Arcade.

Values come from the environment (a local .env file is loaded first) and
fall back to the defaults in domain.constants.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from domain.constants import (
    BASE_SPEED_MS,
    GRID_HEIGHT,
    GRID_WIDTH,
    MIN_SPEED_MS,
    SPEED_DECREMENT_MS,
)
from services.leaderboard_client import DEFAULT_API_URL


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _float_env(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


@dataclass
class GameSettings:
    grid_width: int = GRID_WIDTH
    grid_height: int = GRID_HEIGHT
    base_speed_ms: int = BASE_SPEED_MS
    speed_decrement_ms: int = SPEED_DECREMENT_MS
    min_speed_ms: int = MIN_SPEED_MS
    leaderboard_url: str = DEFAULT_API_URL
    leaderboard_timeout: Optional[float] = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "GameSettings":
        load_dotenv()
        return cls(
            grid_width=_int_env("SNAKE_GRID_WIDTH", GRID_WIDTH),
            grid_height=_int_env("SNAKE_GRID_HEIGHT", GRID_HEIGHT),
            base_speed_ms=_int_env("SNAKE_BASE_SPEED_MS", BASE_SPEED_MS),
            speed_decrement_ms=_int_env("SNAKE_SPEED_DECREMENT_MS", SPEED_DECREMENT_MS),
            min_speed_ms=_int_env("SNAKE_MIN_SPEED_MS", MIN_SPEED_MS),
            leaderboard_url=os.getenv("LEADERBOARD_API_URL") or DEFAULT_API_URL,
            leaderboard_timeout=_float_env("LEADERBOARD_TIMEOUT_SECONDS"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
