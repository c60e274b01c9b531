from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import pygame

from game_state import GROUND_BAND, GameState, Session

RANKING_BUTTON_SIZE = (96, 36)
DIFFICULTY_BUTTON_HEIGHT = 38
DIFFICULTY_BUTTON_GAP = 8
MARGIN = 12

# panel rect as fractions of the playfield
PANEL_BOX = (0.08, 0.16, 0.84, 0.56)


class Controls:
    """Screen layout for the READY-state buttons and pointer hit-testing."""

    def __init__(self, width: int, height: int, difficulty_labels: Sequence[str]) -> None:
        self.width = width
        self.height = height
        self.labels = tuple(difficulty_labels)

        bw, bh = RANKING_BUTTON_SIZE
        self.ranking_button = pygame.Rect(width - bw - MARGIN, MARGIN, bw, bh)
        self.difficulty_buttons = self._layout_difficulty(len(self.labels))

        px, py, pw, ph = PANEL_BOX
        self.panel_rect = pygame.Rect(int(width * px), int(height * py), int(width * pw), int(height * ph))

    def _layout_difficulty(self, count: int) -> List[pygame.Rect]:
        if count <= 0:
            return []
        usable = self.width - MARGIN * 2 - DIFFICULTY_BUTTON_GAP * (count - 1)
        bw = usable // count
        y = self.height - GROUND_BAND - DIFFICULTY_BUTTON_HEIGHT - MARGIN
        return [
            pygame.Rect(MARGIN + i * (bw + DIFFICULTY_BUTTON_GAP), y, bw, DIFFICULTY_BUTTON_HEIGHT)
            for i in range(count)
        ]

    def hit_test(self, pos: Tuple[int, int]) -> Optional[Tuple[str, int]]:
        if self.ranking_button.collidepoint(pos):
            return ("ranking", -1)
        for idx, rect in enumerate(self.difficulty_buttons):
            if rect.collidepoint(pos):
                return ("difficulty", idx)
        return None

    def pointer_down(self, session: Session, pos: Optional[Tuple[int, int]] = None) -> str:
        """Route one primary pointer press. Returns the action taken."""
        if pos is not None and session.state is GameState.READY:
            hit = self.hit_test(pos)
            if hit is not None:
                kind, idx = hit
                if kind == "ranking":
                    session.toggle_ranking()
                    return "ranking"
                session.select_difficulty(idx)
                return "difficulty"
        session.flap()
        return "flap"
