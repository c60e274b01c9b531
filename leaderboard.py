from __future__ import annotations

import json
import logging
import math
import os
import threading
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional

log = logging.getLogger("flappy.leaderboard")

DEFAULT_SUPABASE_URL = "http://localhost:54321"
TABLE = "user_cloud_storage"
BEST_SCORE_KEY = "bestScore"
RANKING_SIZE = 10
REQUEST_TIMEOUT_S = 6

KVList = List[Dict[str, str]]
FriendData = List[Dict[str, Any]]


def _get_supabase_url() -> str:
    return os.getenv("SUPABASE_URL", DEFAULT_SUPABASE_URL).rstrip("/")


def _get_anon_key() -> str:
    # only the publishable (anon) key belongs in a game client
    return (
        os.getenv("SUPABASE_ANON_KEY", "").strip()
        or os.getenv("SUPABASE_PUBLISHABLE_KEY", "").strip()
        or os.getenv("SUPABASE_KEY", "").strip()
    )


def is_configured() -> bool:
    return bool(_get_anon_key())


def _headers(extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    key = _get_anon_key()
    if not key:
        raise RuntimeError("SUPABASE_ANON_KEY is not set")
    headers = {
        "apikey": key,
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
    }
    if extra:
        headers.update(extra)
    return headers


def _request(
    method: str,
    path: str,
    *,
    query: str = "",
    body: Any = None,
    headers: Optional[Dict[str, str]] = None,
) -> bytes:
    url = f"{_get_supabase_url()}{path}"
    if query:
        url = f"{url}?{query}"
    data = None
    if body is not None:
        data = json.dumps(body).encode("utf-8")
    req = urllib.request.Request(url, data=data, method=method, headers=_headers(headers))
    try:
        with urllib.request.urlopen(req, timeout=REQUEST_TIMEOUT_S) as resp:
            return resp.read()
    except urllib.error.HTTPError as e:
        detail = e.read().decode("utf-8", errors="ignore")
        raise RuntimeError(f"Supabase HTTPError {e.code}: {detail}") from e
    except Exception as e:
        raise RuntimeError(f"Supabase request failed: {e}") from e


@dataclass(frozen=True)
class PlayerIdentity:
    player_id: str
    nickname: str
    avatar_url: str = ""


@dataclass
class RankingEntry:
    nickname: str
    avatar_url: str
    score: int


def set_user_cloud_storage(player: PlayerIdentity, kv_list: KVList) -> None:
    """Upsert the player's key/value pairs. Values are always stored as strings."""
    rows = [
        {
            "player_id": player.player_id,
            "nickname": player.nickname,
            "avatar_url": player.avatar_url,
            "key": str(kv["key"]),
            "value": str(kv["value"]),
        }
        for kv in kv_list
    ]
    if not rows:
        return
    _request(
        "POST",
        f"/rest/v1/{TABLE}",
        query=urllib.parse.urlencode({"on_conflict": "player_id,key"}),
        body=rows,
        headers={"Prefer": "resolution=merge-duplicates"},
    )


def group_rows(rows: Iterable[Dict[str, Any]]) -> FriendData:
    """Fold flat (player, key, value) rows into one record per player."""
    by_player: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        pid = str(row.get("player_id", ""))
        item = by_player.get(pid)
        if item is None:
            item = {
                "nickname": str(row.get("nickname") or ""),
                "avatarUrl": str(row.get("avatar_url") or ""),
                "KVDataList": [],
            }
            by_player[pid] = item
        item["KVDataList"].append({"key": row.get("key"), "value": row.get("value")})
    return list(by_player.values())


def get_friend_cloud_storage(key_list: Iterable[str]) -> FriendData:
    keys = ",".join(key_list)
    query = urllib.parse.urlencode(
        {
            "select": "player_id,nickname,avatar_url,key,value",
            "key": f"in.({keys})",
        }
    )
    raw = _request("GET", f"/rest/v1/{TABLE}", query=query)
    rows = json.loads(raw.decode("utf-8") or "[]")
    return group_rows(rows)


def parse_score(item: Optional[Dict[str, Any]]) -> int:
    """bestScore of one friend record; anything missing or non-numeric counts as 0."""
    if not item or not item.get("KVDataList"):
        return 0
    kv = next(
        (entry for entry in item["KVDataList"] if isinstance(entry, dict) and entry.get("key") == BEST_SCORE_KEY),
        None,
    )
    if kv is None:
        return 0
    raw = kv.get("value")
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return 0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0
    if math.isnan(value) or math.isinf(value):
        return 0
    # ranked as whole points; fractional values (never written by the game) are truncated
    return int(value)


def build_ranking(data: Optional[FriendData], *, limit: int = RANKING_SIZE) -> List[RankingEntry]:
    entries = [
        RankingEntry(
            nickname=str(item.get("nickname") or ""),
            avatar_url=str(item.get("avatarUrl") or ""),
            score=parse_score(item),
        )
        for item in (data or [])
    ]
    entries.sort(key=lambda e: e.score, reverse=True)
    return entries[:limit]


def _spawn(worker: Callable[[], None]) -> None:
    threading.Thread(target=worker, daemon=True).start()


class CloudStorage:
    """Remote per-player key/value store bound to one player identity.

    The ``*_async`` methods run on a daemon thread and report back through
    callbacks; they never raise into the caller.
    """

    def __init__(self, player: PlayerIdentity, *, spawn: Callable[[Callable[[], None]], None] = _spawn) -> None:
        self.player = player
        self._spawn = spawn

    @classmethod
    def from_env(cls, player: PlayerIdentity) -> Optional["CloudStorage"]:
        if not is_configured():
            log.info("no Supabase key configured, cloud storage disabled")
            return None
        return cls(player)

    def set_user_cloud_storage_async(
        self,
        kv_list: KVList,
        *,
        callback: Optional[Callable[[Optional[str]], None]] = None,
    ) -> None:
        def _worker() -> None:
            try:
                set_user_cloud_storage(self.player, kv_list)
            except Exception as e:
                if callback is not None:
                    callback(str(e))
                return
            if callback is not None:
                callback(None)

        self._spawn(_worker)

    def get_friend_cloud_storage_async(
        self,
        key_list: Iterable[str],
        *,
        success: Callable[[FriendData], None],
        fail: Callable[[str], None],
    ) -> None:
        keys = list(key_list)

        def _worker() -> None:
            try:
                data = get_friend_cloud_storage(keys)
            except Exception as e:
                fail(str(e))
                return
            success(data)

        self._spawn(_worker)
