# fantasy_exchange/common/stats_cache.py
"""
Per-player season stats memo for one browser session.

The trade calculator asks for stats every time a player is selected; the
cache makes sure each player id is fetched at most once per session.  It has
no Streamlit imports; pages keep an instance in ``st.session_state``.
"""

from typing import Any, Callable, Dict, Iterable, Optional

from fantasy_exchange.common.error_helpers import get_logger

_logger = get_logger("fantasy_exchange.stats_cache")

# Marks an id whose fetch has started but not finished
_PENDING = object()


class StatsCache:
    """
    Usage:
        cache = StatsCache()
        cache.get_or_fetch("4046", lambda pid: fetch_player_season_stats(directory.lookup_by_id(pid), strict=True))
        cache.snapshot()    # {"4046": SeasonStats(...)}

    A stored ``None`` means the player was looked up and has no stats; it is
    not fetched again.  A fetcher that raises leaves nothing stored.
    """

    def __init__(self):
        self._entries: Dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def has(self, player_id: str) -> bool:
        """True once the id has a result, including a None result."""
        return player_id in self._entries and self._entries[player_id] is not _PENDING

    def is_pending(self, player_id: str) -> bool:
        return self._entries.get(player_id) is _PENDING

    def get(self, player_id: str) -> Optional[Any]:
        value = self._entries.get(player_id)
        return None if value is _PENDING else value

    def resolve(self, player_id: str, result: Any) -> None:
        self._entries[player_id] = result

    def get_or_fetch(self, player_id: str, fetcher: Callable[[str], Any]) -> Optional[Any]:
        if player_id in self._entries:
            return self.get(player_id)

        self._entries[player_id] = _PENDING
        try:
            result = fetcher(player_id)
        except Exception as e:
            _logger.warning("Stats fetch failed for player %s: %s", player_id, e)
            # Release the id so a later selection retries it
            self._entries.pop(player_id, None)
            return None

        self.resolve(player_id, result)
        return result

    def prefetch(self, player_ids: Iterable[str], fetcher: Callable[[str], Any]) -> None:
        for pid in player_ids:
            self.get_or_fetch(pid, fetcher)

    def snapshot(self) -> Dict[str, Any]:
        """Resolved, non-empty results keyed by player id."""
        return {
            pid: value for pid, value in self._entries.items()
            if value is not _PENDING and value is not None
        }

    def clear(self) -> None:
        self._entries.clear()
