from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class DifficultyProfile:
    label: str
    gap_height: int
    speed: float  # px/s
    spawn_interval_ms: int
    gravity: float  # px/s^2
    flap_impulse: float  # px/s, negative is up


EASY = DifficultyProfile("Easy", gap_height=190, speed=150.0, spawn_interval_ms=1600, gravity=650.0, flap_impulse=-250.0)
NORMAL = DifficultyProfile("Normal", gap_height=160, speed=180.0, spawn_interval_ms=1400, gravity=720.0, flap_impulse=-260.0)
HARD = DifficultyProfile("Hard", gap_height=140, speed=220.0, spawn_interval_ms=1200, gravity=800.0, flap_impulse=-280.0)

PROFILES: Tuple[DifficultyProfile, ...] = (EASY, NORMAL, HARD)


def resolve_index(index: int, profiles: Sequence[DifficultyProfile] = PROFILES) -> int:
    """Out-of-range selections fall back to the first profile."""
    if 0 <= index < len(profiles):
        return index
    return 0


def labels(profiles: Sequence[DifficultyProfile] = PROFILES) -> Tuple[str, ...]:
    return tuple(p.label for p in profiles)
