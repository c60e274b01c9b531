"""Friends' ranking overlay.

The panel owns its own surface and only talks to the game through a
:class:`MessageChannel`: the game posts ``init`` and ``fetch`` messages and
never waits for an answer. Network work (ranking fetch, avatar downloads) runs
on daemon threads and is handed back through a queue, then applied on the
main thread by :meth:`RankingPanel.pump`.
"""

from __future__ import annotations

import io
import logging
import queue
import threading
import urllib.request
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple

import pygame

from leaderboard import BEST_SCORE_KEY, CloudStorage, RankingEntry, build_ranking
from ui_common import circle_clip, draw_text, draw_text_right, get_font, hex_color

log = logging.getLogger("flappy.ranking")

PANEL_BG = hex_color("#1a1a1a")
NAME_COLOR = (255, 255, 255)
SCORE_COLOR = hex_color("#ffd200")

TITLE = "Friends Ranking"
TITLE_Y = 24
ROW_START_Y = 40
ROW_HEIGHT = 32
AVATAR_SIZE = 22
LEFT = 12
NAME_X = LEFT + AVATAR_SIZE + 10
SCORE_RIGHT_MARGIN = 20
FONT_SIZE = 16

AVATAR_TIMEOUT_S = 6

Message = Dict[str, Any]


class MessageChannel:
    """One-way, fire-and-forget message queue. Safe to post from any thread."""

    def __init__(self) -> None:
        self._queue: "queue.SimpleQueue[Message]" = queue.SimpleQueue()

    def post(self, message: Message) -> None:
        self._queue.put(dict(message))

    def drain(self) -> Iterator[Message]:
        while True:
            try:
                yield self._queue.get_nowait()
            except queue.Empty:
                return

    def empty(self) -> bool:
        return self._queue.empty()


def fetch_url(url: str) -> bytes:
    with urllib.request.urlopen(url, timeout=AVATAR_TIMEOUT_S) as resp:
        return resp.read()


def _spawn(worker: Callable[[], None]) -> None:
    threading.Thread(target=worker, daemon=True).start()


class RankingPanel:
    def __init__(
        self,
        channel: MessageChannel,
        storage: Optional[CloudStorage] = None,
        *,
        fetch_bytes: Callable[[str], bytes] = fetch_url,
        spawn: Callable[[Callable[[], None]], None] = _spawn,
    ) -> None:
        self.channel = channel
        self.storage = storage
        self._fetch_bytes = fetch_bytes
        self._spawn = spawn
        self._results: "queue.SimpleQueue[Tuple[str, Any]]" = queue.SimpleQueue()

        self.surface: Optional[pygame.Surface] = None
        self.view_width = 0
        self.view_height = 0
        self.pixel_ratio = 1.0

        self.ranking: List[RankingEntry] = []
        # url -> image, or None once a load failed
        self.avatar_cache: Dict[str, Optional[pygame.Surface]] = {}
        self._loading: Set[str] = set()

    # -------------------
    # inbound
    # -------------------
    def pump(self) -> None:
        for message in self.channel.drain():
            self.handle_message(message)
        while True:
            try:
                kind, payload = self._results.get_nowait()
            except queue.Empty:
                break
            self._apply_result(kind, payload)

    def handle_message(self, message: Message) -> None:
        kind = message.get("type")
        if kind == "init":
            self.resize(int(message.get("width") or 0), int(message.get("height") or 0), message.get("pixelRatio"))
            self.draw()
        elif kind == "fetch":
            self.fetch()
        else:
            log.debug("ignoring message type %r", kind)

    def _apply_result(self, kind: str, payload: Any) -> None:
        if kind == "ranking":
            self.ranking = build_ranking(payload)
            for entry in self.ranking:
                self.load_avatar(entry.avatar_url)
            self.draw()
        elif kind == "ranking_failed":
            log.warning("ranking fetch failed: %s", payload)
            self.ranking = []
            self.draw()
        elif kind == "avatar":
            url, data = payload
            self._loading.discard(url)
            image = self._decode(data)
            self.avatar_cache[url] = image
            if image is not None:
                self.draw()
            else:
                log.debug("avatar unavailable: %s", url)

    # -------------------
    # surface
    # -------------------
    def _ensure_surface(self) -> pygame.Surface:
        if self.surface is None:
            self.surface = pygame.Surface((1, 1), pygame.SRCALPHA)
        return self.surface

    def resize(self, width: int, height: int, pixel_ratio: Optional[float] = None) -> None:
        self.pixel_ratio = float(pixel_ratio or 1)
        self.view_width = width
        self.view_height = height
        size = (max(1, int(width * self.pixel_ratio)), max(1, int(height * self.pixel_ratio)))
        self.surface = pygame.Surface(size, pygame.SRCALPHA)

    def _px(self, value: float) -> int:
        return int(round(value * self.pixel_ratio))

    # -------------------
    # data
    # -------------------
    def fetch(self) -> None:
        if self.storage is None:
            self.ranking = []
            self.draw()
            return
        self.storage.get_friend_cloud_storage_async(
            [BEST_SCORE_KEY],
            success=lambda data: self._results.put(("ranking", data)),
            fail=lambda err: self._results.put(("ranking_failed", err)),
        )

    def load_avatar(self, url: str) -> None:
        if not url or url in self.avatar_cache or url in self._loading:
            return
        self._loading.add(url)

        def _worker() -> None:
            try:
                data: Optional[bytes] = self._fetch_bytes(url)
            except Exception as e:
                log.debug("avatar download failed for %s: %s", url, e)
                data = None
            self._results.put(("avatar", (url, data)))

        self._spawn(_worker)

    @staticmethod
    def _decode(data: Optional[bytes]) -> Optional[pygame.Surface]:
        if not data:
            return None
        try:
            return pygame.image.load(io.BytesIO(data))
        except (pygame.error, ValueError):
            return None

    # -------------------
    # drawing
    # -------------------
    def _draw_avatar(self, url: str, x: int, y: int, size: int) -> None:
        if not url:
            return
        image = self.avatar_cache.get(url)
        if image is not None:
            self.surface.blit(circle_clip(image, self._px(size)), (self._px(x), self._px(y)))
        elif url not in self.avatar_cache:
            self.load_avatar(url)

    def draw(self) -> None:
        surface = self._ensure_surface()
        surface.fill(PANEL_BG)
        font = get_font(max(1, self._px(FONT_SIZE)))

        draw_text(surface, font, TITLE, (self._px(LEFT), self._px(TITLE_Y - FONT_SIZE)), color=NAME_COLOR)

        for index, item in enumerate(self.ranking):
            y = ROW_START_Y + index * ROW_HEIGHT
            self._draw_avatar(item.avatar_url, LEFT, y + 4, AVATAR_SIZE)
            text_y = self._px(y + 18 - FONT_SIZE)
            draw_text(surface, font, f"{index + 1}. {item.nickname}", (self._px(NAME_X), text_y), color=NAME_COLOR)
            draw_text_right(surface, font, str(item.score), self._px(self.view_width - SCORE_RIGHT_MARGIN), text_y,
                            color=SCORE_COLOR)
