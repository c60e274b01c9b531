from __future__ import annotations

from typing import Optional

import pygame

from controls import Controls
from game_state import FrameSnapshot, GameState
from geometry import gap_rects
from ui_common import draw_button, draw_text, draw_text_center, get_font, hex_color

SKY = hex_color("#88d8ff")
GROUND = hex_color("#6ac36a")
PIPE = hex_color("#4caf50")
BIRD = hex_color("#ffd200")
EYE = hex_color("#2a2a2a")
TEXT = (255, 255, 255)

EYE_OFFSET = (6, -4)
EYE_RADIUS = 3


class Renderer:
    """Draws one FrameSnapshot onto the window surface."""

    def __init__(self, screen: pygame.Surface, controls: Controls) -> None:
        self.screen = screen
        self.controls = controls
        self.font_score = get_font(24)
        self.font_best = get_font(16)
        self.font_hint = get_font(20)
        self.font_button = get_font(16)

    def draw(self, snap: FrameSnapshot, panel: Optional[pygame.Surface] = None) -> None:
        self.draw_background(snap)
        self.draw_pipes(snap)
        self.draw_bird(snap)
        self.draw_score(snap)
        self.draw_hint(snap)
        if snap.state is GameState.READY:
            self.draw_buttons(snap)
            if snap.ranking_visible and panel is not None:
                self.draw_panel(panel)

    def draw_background(self, snap: FrameSnapshot) -> None:
        w, h = int(snap.width), int(snap.height)
        self.screen.fill(SKY)
        pygame.draw.rect(self.screen, GROUND, pygame.Rect(0, h - snap.ground_band, w, snap.ground_band))

    def draw_pipes(self, snap: FrameSnapshot) -> None:
        floor_y = snap.height - snap.ground_band
        for x, gap_top in snap.obstacles:
            for rx, ry, rw, rh in gap_rects(x, snap.obstacle_width, gap_top, snap.gap_height, floor_y):
                if rh > 0:
                    pygame.draw.rect(self.screen, PIPE, pygame.Rect(int(rx), int(ry), int(rw), int(rh)))

    def draw_bird(self, snap: FrameSnapshot) -> None:
        x, y, r = snap.actor
        pygame.draw.circle(self.screen, BIRD, (int(x), int(y)), int(r))
        pygame.draw.circle(self.screen, EYE, (int(x + EYE_OFFSET[0]), int(y + EYE_OFFSET[1])), EYE_RADIUS)

    def draw_score(self, snap: FrameSnapshot) -> None:
        draw_text(self.screen, self.font_score, f"Score: {snap.score}", (16, 14), color=TEXT)
        draw_text(self.screen, self.font_best, f"Best: {snap.best}", (16, 46), color=TEXT)

    def draw_hint(self, snap: FrameSnapshot) -> None:
        if snap.hint:
            draw_text_center(self.screen, self.font_hint, snap.hint, int(snap.height // 2), color=TEXT)

    def draw_buttons(self, snap: FrameSnapshot) -> None:
        label = "Close" if snap.ranking_visible else "Ranking"
        draw_button(self.screen, self.controls.ranking_button, label, self.font_button, active=snap.ranking_visible)
        for idx, (rect, name) in enumerate(zip(self.controls.difficulty_buttons, snap.difficulty_labels)):
            draw_button(self.screen, rect, name, self.font_button, active=idx == snap.difficulty_index)

    def draw_panel(self, panel: pygame.Surface) -> None:
        rect = self.controls.panel_rect
        if panel.get_size() != rect.size:
            panel = pygame.transform.smoothscale(panel, rect.size)
        self.screen.blit(panel, rect.topleft)
