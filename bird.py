from __future__ import annotations

from dataclasses import dataclass

# Bird
BIRD_RADIUS = 16
BIRD_X_RATIO = 0.25
BIRD_Y_RATIO = 0.5


@dataclass
class Actor:
    """The player's bird. x never changes after construction."""

    x: float
    y: float
    radius: float = BIRD_RADIUS
    velocity: float = 0.0

    @classmethod
    def spawn(cls, width: float, height: float) -> "Actor":
        return cls(x=width * BIRD_X_RATIO, y=height * BIRD_Y_RATIO)

    def integrate(self, dt: float, gravity: float) -> None:
        # semi-implicit Euler: velocity first, then position with the new velocity
        self.velocity += gravity * dt
        self.y += self.velocity * dt

    def impulse(self, strength: float) -> None:
        self.velocity = strength

    @property
    def top(self) -> float:
        return self.y - self.radius

    @property
    def bottom(self) -> float:
        return self.y + self.radius
