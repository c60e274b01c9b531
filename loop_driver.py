from __future__ import annotations

from typing import Callable, Optional

FrameCallback = Callable[[float], None]


class LoopDriver:
    """Turns host frame timestamps (ms) into a variable dt and drives one tick per frame.

    ``request_frame`` is the host's "call me on the next frame" hook. Every
    frame schedules the next one, so the loop only ends when the host stops
    calling back.
    """

    def __init__(
        self,
        update: Callable[[float], None],
        render: Callable[[], None],
        request_frame: Callable[[FrameCallback], None],
        *,
        max_dt: Optional[float] = None,
    ) -> None:
        self.update = update
        self.render = render
        self.request_frame = request_frame
        self.max_dt = max_dt
        self.last_timestamp: Optional[float] = None
        self.frames = 0

    def start(self) -> None:
        self.request_frame(self.frame)

    def delta(self, timestamp: float) -> float:
        if self.last_timestamp is None:
            self.last_timestamp = timestamp
        dt = (timestamp - self.last_timestamp) / 1000.0
        self.last_timestamp = timestamp
        if self.max_dt is not None:
            dt = min(dt, self.max_dt)
        return dt

    def frame(self, timestamp: float) -> None:
        dt = self.delta(timestamp)
        self.update(dt)
        self.render()
        self.frames += 1
        self.request_frame(self.frame)
