"""
Per-browser-session state shared by the league pages.

Everything fetched from upstream lives in ``st.session_state`` under an
``fx_`` key, so widget reruns reuse it and the Reload button (or a new league
id) replaces it.
"""

from typing import Any, Dict, List, Optional

import streamlit as st

import config
from fantasy_exchange.common.error_helpers import get_logger
from fantasy_exchange.common.player_matching import PlayerDirectory
from fantasy_exchange.common.schemas import Matchup, SeasonStats
from fantasy_exchange.common.session import SessionStore
from fantasy_exchange.common.sleeper_api import (
    LeagueBundle,
    get_nfl_state,
    get_season_matchups,
    load_league_bundle,
)
from fantasy_exchange.common.stats_api import fetch_player_season_stats, get_current_season
from fantasy_exchange.common.stats_cache import StatsCache

_logger = get_logger("fantasy_exchange.app_state")

_STATE_PREFIX = "fx_"
_STORE_KEY = "fx_session_store"
_BUNDLE_KEY = "fx_league_bundle"
_DIRECTORY_KEY = "fx_player_directory"
_MATCHUPS_KEY = "fx_season_matchups"
_NFL_STATE_KEY = "fx_nfl_state"
_STATS_CACHE_KEY = "fx_stats_cache"


def get_session_store() -> SessionStore:
    """The login session, read from disk on the first run of a browser session."""
    store = st.session_state.get(_STORE_KEY)
    if store is None:
        store = SessionStore(config.SESSION_FILE)
        store.load()
        st.session_state[_STORE_KEY] = store
    return store


def get_league_bundle(league_id: str, reload: bool = False) -> Optional[LeagueBundle]:
    """League, users, rosters and the player directory for ``league_id``."""
    if not league_id:
        return None
    cached = st.session_state.get(_BUNDLE_KEY)
    if cached and cached[0] == league_id and not reload:
        return cached[1]

    bundle = load_league_bundle(league_id, directory=st.session_state.get(_DIRECTORY_KEY))
    if bundle is None:
        st.session_state.pop(_BUNDLE_KEY, None)
        return None

    st.session_state[_BUNDLE_KEY] = (league_id, bundle)
    if len(bundle.directory):
        st.session_state[_DIRECTORY_KEY] = bundle.directory
    if reload:
        st.session_state.pop(_MATCHUPS_KEY, None)
        st.session_state.pop(_NFL_STATE_KEY, None)
    return bundle


def get_cached_nfl_state() -> Dict[str, Any]:
    state = st.session_state.get(_NFL_STATE_KEY)
    if not state:
        state = get_nfl_state()
        if state:
            st.session_state[_NFL_STATE_KEY] = state
    return state or {}


def get_cached_season_matchups(league_id: str, weeks: List[int]) -> Dict[int, List[Matchup]]:
    cached = st.session_state.get(_MATCHUPS_KEY)
    if cached and cached[0] == league_id and set(weeks) <= set(cached[1]):
        return cached[1]
    matchups = get_season_matchups(league_id, weeks)
    st.session_state[_MATCHUPS_KEY] = (league_id, matchups)
    return matchups


def get_stats_cache() -> StatsCache:
    cache = st.session_state.get(_STATS_CACHE_KEY)
    if cache is None:
        cache = StatsCache()
        st.session_state[_STATS_CACHE_KEY] = cache
    return cache


def load_trade_stats(player_ids: List[str], directory: PlayerDirectory) -> Dict[str, SeasonStats]:
    """
    Current-season stats for the players in a trade, fetched once per player.

    Without a stats API key nothing is fetched and players value on rank alone.
    A player whose fetch failed is tried again on the next call.
    """
    cache = get_stats_cache()
    if not config.STATS_API_KEY:
        return cache.snapshot()

    season = get_current_season()

    def _fetch(pid: str) -> Optional[SeasonStats]:
        return fetch_player_season_stats(directory.lookup_by_id(pid), season, strict=True)

    cache.prefetch(player_ids, _fetch)
    return cache.snapshot()


def clear_app_state() -> None:
    """Drop everything this app put in session state (used on logout)."""
    for key in [k for k in list(st.session_state.keys()) if str(k).startswith(_STATE_PREFIX)]:
        del st.session_state[key]
    _logger.debug("Cleared session state")
