from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

SCREEN_WIDTH = 360
SCREEN_HEIGHT = 640
PIXEL_RATIO = 1.0
FPS = 60

# index into difficulty.PROFILES (0=easy, 1=normal, 2=hard)
DEFAULT_DIFFICULTY = 1

DEFAULT_PLAYER_ID = "player"
DEFAULT_LOG_LEVEL = "info"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixel_ratio: float = PIXEL_RATIO
    fps: int = FPS
    difficulty_index: int = DEFAULT_DIFFICULTY
    # None keeps the raw frame delta (no clamp)
    max_frame_dt: Optional[float] = None
    player_id: str = DEFAULT_PLAYER_ID
    nickname: str = DEFAULT_PLAYER_ID
    avatar_url: str = ""
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    """Build Settings from the defaults above and FLAPPY_* environment variables."""
    player_id = os.getenv("FLAPPY_PLAYER_ID", "").strip() or DEFAULT_PLAYER_ID
    return Settings(
        width=_env_int("FLAPPY_WIDTH", SCREEN_WIDTH),
        height=_env_int("FLAPPY_HEIGHT", SCREEN_HEIGHT),
        pixel_ratio=_env_float("FLAPPY_PIXEL_RATIO", PIXEL_RATIO) or PIXEL_RATIO,
        fps=_env_int("FLAPPY_FPS", FPS),
        difficulty_index=_env_int("FLAPPY_DIFFICULTY", DEFAULT_DIFFICULTY),
        max_frame_dt=_env_float("FLAPPY_MAX_FRAME_DT", None),
        player_id=player_id,
        nickname=os.getenv("FLAPPY_NICKNAME", "").strip() or player_id,
        avatar_url=os.getenv("FLAPPY_AVATAR_URL", "").strip(),
        log_level=os.getenv("FLAPPY_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip() or DEFAULT_LOG_LEVEL,
    )
