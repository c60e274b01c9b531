from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional

log = logging.getLogger("flappy.obstacles")

OBSTACLE_WIDTH = 54
PADDING = 40
# gap_top never goes above PADDING + MIN_TOP_EXTRA
MIN_TOP_EXTRA = 40
# retired once the trailing edge is this far left of the screen
RETIRE_X = -10


@dataclass
class Obstacle:
    x: float
    gap_top: int
    width: int = OBSTACLE_WIDTH
    passed: bool = False

    @property
    def trailing_edge(self) -> float:
        return self.x + self.width

    def gap_bottom(self, gap_height: float) -> float:
        return self.gap_top + gap_height


class ObstacleStream:
    """Obstacles in arrival order, oldest first."""

    def __init__(self, width: float, height: float, *, rng: Optional[random.Random] = None,
                 obstacle_width: int = OBSTACLE_WIDTH) -> None:
        self.width = width
        self.height = height
        self.obstacle_width = obstacle_width
        self.rng = rng or random.Random()
        self.items: List[Obstacle] = []

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def clear(self) -> None:
        self.items = []

    def gap_top_range(self, gap_height: float) -> tuple[int, int]:
        min_top = PADDING + MIN_TOP_EXTRA
        max_top = int(self.height - gap_height - PADDING)
        if max_top < min_top:
            log.warning("gap %s does not fit a %s px playfield, pinning gap_top to %s", gap_height, self.height, min_top)
            max_top = min_top
        return min_top, max_top

    def spawn(self, gap_height: float) -> Obstacle:
        min_top, max_top = self.gap_top_range(gap_height)
        obstacle = Obstacle(
            x=float(self.width + self.obstacle_width),
            gap_top=self.rng.randint(min_top, max_top),
            width=self.obstacle_width,
        )
        self.items.append(obstacle)
        return obstacle

    def advance(self, dt: float, speed: float) -> None:
        for obstacle in self.items:
            obstacle.x -= speed * dt

    def retire(self) -> int:
        before = len(self.items)
        self.items = [o for o in self.items if not o.trailing_edge < RETIRE_X]
        return before - len(self.items)

    def score_crossings(self, actor_x: float) -> int:
        """Mark newly passed obstacles and return how many were passed this call."""
        events = 0
        for obstacle in self.items:
            if not obstacle.passed and obstacle.trailing_edge < actor_x:
                obstacle.passed = True
                events += 1
        return events
