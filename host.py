from __future__ import annotations

import logging
from typing import Optional

from leaderboard import BEST_SCORE_KEY, CloudStorage
from ranking_panel import MessageChannel

log = logging.getLogger("flappy.host")


class Host:
    """Optional platform capabilities the game reports to.

    Either capability may be missing; the matching side effect is then skipped
    and the game keeps running without it.
    """

    def __init__(self, storage: Optional[CloudStorage] = None, channel: Optional[MessageChannel] = None) -> None:
        self.storage = storage
        self.channel = channel

    def report_game_over(self, best: int) -> None:
        self.save_best(best)
        self.request_ranking(best)

    def save_best(self, best: int) -> None:
        if self.storage is None:
            return
        self.storage.set_user_cloud_storage_async(
            [{"key": BEST_SCORE_KEY, "value": str(best)}],
            callback=self._on_saved,
        )

    @staticmethod
    def _on_saved(err: Optional[str]) -> None:
        if err:
            log.warning("best score not saved: %s", err)
        else:
            log.debug("best score saved")

    def request_ranking(self, best: int) -> None:
        if self.channel is None:
            return
        self.channel.post({"type": "fetch", "score": best})

    def send_viewport(self, width: int, height: int, pixel_ratio: float) -> None:
        if self.channel is None:
            return
        self.channel.post({"type": "init", "width": width, "height": height, "pixelRatio": pixel_ratio})
