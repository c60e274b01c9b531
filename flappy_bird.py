from __future__ import annotations

import logging
from typing import Optional, Tuple

import pygame

from config import Settings, load_settings
from controls import Controls
from difficulty import labels
from game_state import Session
from host import Host
from leaderboard import CloudStorage, PlayerIdentity
from logger import setup_logging
from loop_driver import FrameCallback, LoopDriver
from ranking_panel import MessageChannel, RankingPanel
from renderer import Renderer

log = logging.getLogger("flappy.app")

CAPTION = "Flappy"


class FlappyBirdGame:
    """The playfield is drawn at settings size onto ``self.screen`` and scaled to fit the window."""

    def __init__(self, settings: Optional[Settings] = None, *, storage: Optional[CloudStorage] = None) -> None:
        self.settings = settings or load_settings()
        s = self.settings

        pygame.init()
        pygame.display.set_caption(CAPTION)
        self.window = pygame.display.set_mode((s.width, s.height), pygame.RESIZABLE)
        self.screen = pygame.Surface((s.width, s.height))
        self.scale = 1.0
        self.offset = (0, 0)
        self.clock = pygame.time.Clock()
        self.running = True

        if storage is None:
            storage = CloudStorage.from_env(PlayerIdentity(s.player_id, s.nickname, s.avatar_url))
        self.channel = MessageChannel()
        self.host = Host(storage=storage, channel=self.channel)
        self.panel = RankingPanel(self.channel, storage)

        self.session = Session(
            s.width,
            s.height,
            difficulty_index=s.difficulty_index,
            on_game_over=self.host.report_game_over,
            on_ranking_opened=self.host.request_ranking,
        )
        self.controls = Controls(s.width, s.height, labels(self.session.profiles))
        self.renderer = Renderer(self.screen, self.controls)

        self._next_frame: Optional[FrameCallback] = None
        self.driver = LoopDriver(self.session.update, self.render, self.request_frame, max_dt=s.max_frame_dt)

        self._send_viewport()

    def _send_viewport(self) -> None:
        # pixelRatio carries the window scale on top of the configured ratio
        rect = self.controls.panel_rect
        self.host.send_viewport(rect.width, rect.height, self.settings.pixel_ratio * self.scale)

    def resize(self, width: int, height: int) -> None:
        s = self.settings
        self.scale = max(min(width / s.width, height / s.height), 0.01)
        self.offset = ((width - int(s.width * self.scale)) // 2, (height - int(s.height * self.scale)) // 2)
        self.window = pygame.display.get_surface() or self.window
        log.debug("window resized to %dx%d (scale %.2f)", width, height, self.scale)
        self._send_viewport()

    def to_playfield(self, pos: Tuple[float, float]) -> Tuple[int, int]:
        return (int((pos[0] - self.offset[0]) / self.scale), int((pos[1] - self.offset[1]) / self.scale))

    # host side of requestAnimationFrame: keep only the latest callback
    def request_frame(self, callback: FrameCallback) -> None:
        self._next_frame = callback

    def render(self) -> None:
        self.renderer.draw(self.session.snapshot(), self.panel.surface)
        self.present()

    def present(self) -> None:
        if self.scale == 1.0 and self.offset == (0, 0):
            self.window.blit(self.screen, (0, 0))
            return
        size = (int(self.settings.width * self.scale), int(self.settings.height * self.scale))
        self.window.fill((0, 0, 0))
        self.window.blit(pygame.transform.scale(self.screen, size), self.offset)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key in (pygame.K_SPACE, pygame.K_UP):
                self.controls.pointer_down(self.session)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            # SDL also emits mouse events for touches; FINGERDOWN already handles those
            if getattr(event, "touch", False):
                return
            self.controls.pointer_down(self.session, self.to_playfield(event.pos))
        elif event.type == pygame.FINGERDOWN:
            width, height = self.window.get_size()
            self.controls.pointer_down(self.session, self.to_playfield((event.x * width, event.y * height)))
        elif event.type == pygame.VIDEORESIZE:
            self.resize(event.w, event.h)

    def run(self, quit_on_exit: bool = True) -> None:
        log.info("starting %dx%d @ %d fps", self.settings.width, self.settings.height, self.settings.fps)
        self.driver.start()
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            self.panel.pump()

            callback, self._next_frame = self._next_frame, None
            if callback is not None:
                callback(pygame.time.get_ticks())

            pygame.display.flip()
            self.clock.tick(self.settings.fps)

        log.info("stopped after %d frames", self.driver.frames)
        if quit_on_exit:
            pygame.quit()


def run_game(*, quit_on_exit: bool = True) -> None:
    settings = load_settings()
    setup_logging(settings.log_level)
    FlappyBirdGame(settings).run(quit_on_exit=quit_on_exit)


if __name__ == "__main__":
    run_game()
