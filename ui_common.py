from __future__ import annotations

from typing import Dict, Tuple

import pygame

Color = Tuple[int, int, int]

FONT_CANDIDATES = [
    "Pretendard",
    "Helvetica Neue",
    "Arial",
    "DejaVu Sans",
    "Noto Sans",
]

_font_cache: Dict[Tuple[int, bool], pygame.font.Font] = {}


def hex_color(value: str) -> Color:
    value = value.lstrip("#")
    return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def get_font(size: int, bold: bool = False) -> pygame.font.Font:
    key = (size, bold)
    cached = _font_cache.get(key)
    if cached is not None:
        return cached
    if not pygame.font.get_init():
        pygame.font.init()
    font = None
    for name in FONT_CANDIDATES:
        font_path = pygame.font.match_font(name, bold=bold)
        if font_path:
            try:
                font = pygame.font.Font(font_path, size)
                break
            except OSError:
                continue
    if font is None:
        font = pygame.font.Font(None, size)
    _font_cache[key] = font
    return font


def draw_text(surface: pygame.Surface, font: pygame.font.Font, text: str, pos: Tuple[int, int], *,
              color: Color = (255, 255, 255)) -> pygame.Rect:
    rendered = font.render(text, True, color)
    return surface.blit(rendered, pos)


def draw_text_center(surface: pygame.Surface, font: pygame.font.Font, text: str, y: int, *,
                     color: Color = (255, 255, 255), center_x: int | None = None) -> None:
    rendered = font.render(text, True, color)
    cx = surface.get_width() // 2 if center_x is None else center_x
    surface.blit(rendered, rendered.get_rect(center=(cx, y)))


def draw_text_right(surface: pygame.Surface, font: pygame.font.Font, text: str, right: int, y: int, *,
                    color: Color = (255, 255, 255)) -> None:
    rendered = font.render(text, True, color)
    surface.blit(rendered, rendered.get_rect(topright=(right, y)))


def draw_button(surface: pygame.Surface, rect: pygame.Rect, label: str, font: pygame.font.Font, *,
                active: bool = False) -> None:
    """Rounded white card button; the active one is inverted."""
    fill = (40, 40, 40) if active else (255, 255, 255)
    text = (255, 255, 255) if active else (40, 40, 40)
    pygame.draw.rect(surface, fill, rect, border_radius=10)
    pygame.draw.rect(surface, (40, 40, 40), rect, width=2, border_radius=10)
    rendered = font.render(label, True, text)
    surface.blit(rendered, rendered.get_rect(center=rect.center))


def circle_clip(image: pygame.Surface, size: int) -> pygame.Surface:
    """Scale image to size x size and cut it to a circle."""
    # smoothscale needs 32-bit pixels; decoded avatars may be paletted
    rgba = pygame.Surface(image.get_size(), pygame.SRCALPHA)
    rgba.blit(image, (0, 0))
    scaled = pygame.transform.smoothscale(rgba, (size, size))
    mask = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(mask, (255, 255, 255, 255), (size // 2, size // 2), size // 2)
    out = pygame.Surface((size, size), pygame.SRCALPHA)
    out.blit(scaled, (0, 0))
    out.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
    return out
