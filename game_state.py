from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple

from bird import Actor
from difficulty import PROFILES, DifficultyProfile, labels, resolve_index
from geometry import hits_bounds, overlaps_obstacle
from obstacles import ObstacleStream

log = logging.getLogger("flappy.game")

GROUND_BAND = 80

HINT_READY = "Tap to start and help the bird fly!"
HINT_GAME_OVER = "Game over, tap to retry"

ScoreHook = Callable[[int], None]


class GameState(str, Enum):
    READY = "ready"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class FrameSnapshot:
    """Everything the renderer needs for one frame."""

    width: float
    height: float
    state: GameState
    score: int
    best: int
    actor: Tuple[float, float, float]  # x, y, radius
    obstacles: Tuple[Tuple[float, int], ...]  # x, gap_top
    obstacle_width: int
    gap_height: int
    ground_band: int
    hint: str
    difficulty_labels: Tuple[str, ...]
    difficulty_index: int
    ranking_visible: bool


class Session:
    """One game for the life of the process: actor, obstacles, score and state.

    Input handlers call :meth:`flap`, :meth:`select_difficulty` and
    :meth:`toggle_ranking`; the loop driver calls :meth:`update` once per frame.
    Side effects leave through the two optional hooks, both called with the
    current best score.
    """

    def __init__(
        self,
        width: float,
        height: float,
        *,
        profiles: Sequence[DifficultyProfile] = PROFILES,
        difficulty_index: int = 0,
        best: int = 0,
        rng: Optional[random.Random] = None,
        on_game_over: Optional[ScoreHook] = None,
        on_ranking_opened: Optional[ScoreHook] = None,
    ) -> None:
        self.width = width
        self.height = height
        self.profiles = tuple(profiles)
        self.on_game_over = on_game_over
        self.on_ranking_opened = on_ranking_opened

        self.state = GameState.READY
        self.score = 0
        self.best = max(0, int(best))
        self.spawn_timer = 0.0
        self.game_over_handled = False
        self.ranking_visible = False

        self.actor = Actor.spawn(width, height)
        self.obstacles = ObstacleStream(width, height, rng=rng)

        self.difficulty_index = 0
        self._apply_profile(resolve_index(difficulty_index, self.profiles))

    # -------------------
    # configuration
    # -------------------
    @property
    def profile(self) -> DifficultyProfile:
        return self.profiles[self.difficulty_index]

    def _apply_profile(self, index: int) -> None:
        self.difficulty_index = index
        profile = self.profiles[index]
        self.gap_height = profile.gap_height
        self.speed = profile.speed
        self.spawn_interval_ms = profile.spawn_interval_ms
        self.gravity = profile.gravity
        self.flap_strength = profile.flap_impulse

    def select_difficulty(self, index: int) -> bool:
        if self.state is not GameState.READY:
            return False
        self._apply_profile(resolve_index(index, self.profiles))
        log.info("difficulty set to %s", self.profile.label)
        return True

    def toggle_ranking(self) -> bool:
        if self.state is not GameState.READY:
            return False
        self.ranking_visible = not self.ranking_visible
        if self.ranking_visible and self.on_ranking_opened is not None:
            self.on_ranking_opened(self.best)
        return True

    # -------------------
    # transitions
    # -------------------
    def reset(self) -> None:
        self.actor = Actor.spawn(self.width, self.height)
        self.obstacles.clear()
        self.score = 0
        self.spawn_timer = 0.0
        self.game_over_handled = False
        self.ranking_visible = False
        self._apply_profile(self.difficulty_index)

    def start(self) -> None:
        self.reset()
        self.state = GameState.RUNNING
        log.info("run started (%s)", self.profile.label)

    def flap(self) -> None:
        if self.state is GameState.READY:
            self.start()
            self.actor.impulse(self.flap_strength)
        elif self.state is GameState.RUNNING:
            self.actor.impulse(self.flap_strength)
        else:
            self.start()

    def _enter_game_over(self) -> None:
        if self.state is GameState.GAME_OVER:
            return
        self.state = GameState.GAME_OVER
        if self.game_over_handled:
            return
        self.game_over_handled = True
        log.info("game over: score=%d best=%d", self.score, self.best)
        if self.on_game_over is not None:
            self.on_game_over(self.best)

    # -------------------
    # simulation
    # -------------------
    def update(self, dt: float) -> None:
        if self.state is not GameState.RUNNING:
            return

        actor = self.actor
        actor.integrate(dt, self.gravity)

        # at most one spawn per tick, leftover time is dropped
        self.spawn_timer += dt * 1000
        if self.spawn_timer >= self.spawn_interval_ms:
            self.spawn_timer = 0.0
            self.obstacles.spawn(self.gap_height)

        self.obstacles.advance(dt, self.speed)

        for _ in range(self.obstacles.score_crossings(actor.x)):
            self.score += 1
            self.best = max(self.best, self.score)

        self.obstacles.retire()

        if hits_bounds(actor.top, actor.bottom, self.height):
            self._enter_game_over()
            return

        for obstacle in self.obstacles:
            if overlaps_obstacle(actor.x, actor.y, actor.radius, obstacle.x, obstacle.width,
                                 obstacle.gap_top, self.gap_height):
                self._enter_game_over()
                break

    # -------------------
    # rendering view
    # -------------------
    def hint(self) -> str:
        if self.state is GameState.READY:
            return HINT_READY
        if self.state is GameState.GAME_OVER:
            return HINT_GAME_OVER
        return ""

    def snapshot(self) -> FrameSnapshot:
        return FrameSnapshot(
            width=self.width,
            height=self.height,
            state=self.state,
            score=self.score,
            best=self.best,
            actor=(self.actor.x, self.actor.y, self.actor.radius),
            obstacles=tuple((o.x, o.gap_top) for o in self.obstacles),
            obstacle_width=self.obstacles.obstacle_width,
            gap_height=self.gap_height,
            ground_band=GROUND_BAND,
            hint=self.hint(),
            difficulty_labels=labels(self.profiles),
            difficulty_index=self.difficulty_index,
            ranking_visible=self.ranking_visible,
        )
