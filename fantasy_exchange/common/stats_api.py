"""
Player Statistics API Functions (SportsData.io NFL v2 JSON).

Sleeper ids mean nothing to SportsData, so every Sleeper player is first
matched by name (and team, to break ties) against the ``/Players`` list; see
``player_matching.select_stats_player``.

Every function logs and returns "no data" when the API fails.  Pass
``strict=True`` to get a ``StatsApiError`` instead, so callers that memoize
results can tell an outage apart from a player with no stats.
"""

import datetime
from typing import Any, Dict, List, Optional

import requests

import config
from fantasy_exchange.common.error_helpers import get_logger
from fantasy_exchange.common.player_matching import MATCH_LIMIT, filter_by_name, select_stats_player
from fantasy_exchange.common.schemas import (
    GameLogEntry,
    PlayerInfo,
    SeasonStats,
    normalize_game_log,
    normalize_season_stats,
)

_logger = get_logger("fantasy_exchange.stats_api")

SEARCH_LIMIT = MATCH_LIMIT


class StatsApiError(Exception):
    """The statistics API could not be reached or sent back something unreadable."""


def _get_json(path: str) -> Any:
    url = f"{config.STATS_API_BASE_URL}/{path.lstrip('/')}"
    headers = {"Ocp-Apim-Subscription-Key": config.STATS_API_KEY}
    try:
        r = requests.get(url, headers=headers, timeout=config.REQUEST_TIMEOUT)
        r.raise_for_status()
        return r.json()
    except (requests.RequestException, ValueError) as e:
        raise StatsApiError(f"{path}: {e}") from e


def get_current_season(today: Optional[datetime.date] = None) -> int:
    """
    The most recent NFL season with data.

    The season starts in September, so January through August still belong to
    the previous year's season.
    """
    today = today or datetime.date.today()
    return today.year - 1 if today.month <= 8 else today.year


# =============================================================================
# RAW ENDPOINTS
# =============================================================================

def get_all_stats_players(strict: bool = False) -> List[Dict[str, Any]]:
    try:
        data = _get_json("Players")
    except StatsApiError as e:
        if strict:
            raise
        _logger.warning("Failed to fetch stats player list: %s", e)
        return []
    return data if isinstance(data, list) else []


def search_player(name: str, limit: int = SEARCH_LIMIT) -> List[Dict[str, Any]]:
    """
    Players whose "First Last" contains ``name`` (case-insensitive).

    Returns:
    - Up to ``limit`` SportsData player rows, [] on failure.
    """
    if not name:
        return []
    matches = filter_by_name(get_all_stats_players(), name)
    _logger.debug("Found %d stats player(s) matching %r", len(matches), name)
    return matches[:limit]


def get_player_details(stats_player_id: Any) -> Optional[Dict[str, Any]]:
    try:
        data = _get_json(f"Player/{stats_player_id}")
    except StatsApiError as e:
        _logger.warning("Failed to fetch details for stats player %s: %s", stats_player_id, e)
        return None
    return data if isinstance(data, dict) and data else None


def get_player_season_stats(stats_player_id: Any, season: int, strict: bool = False) -> Any:
    """Raw season stats payload, or None."""
    try:
        data = _get_json(f"PlayerSeasonStatsByPlayerID/{season}/{stats_player_id}")
    except StatsApiError as e:
        if strict:
            raise
        _logger.warning("Failed to fetch %s season stats for stats player %s: %s", season, stats_player_id, e)
        return None
    return data or None


def get_player_game_logs(stats_player_id: Any, season: int, strict: bool = False) -> List[Dict[str, Any]]:
    try:
        data = _get_json(f"PlayerGameStatsByPlayerID/{season}/{stats_player_id}")
    except StatsApiError as e:
        if strict:
            raise
        _logger.warning("Failed to fetch %s game logs for stats player %s: %s", season, stats_player_id, e)
        return []
    return data if isinstance(data, list) else []


# =============================================================================
# SLEEPER PLAYER -> STATS
# =============================================================================

def _search_name(info: Optional[PlayerInfo]) -> str:
    if info is None:
        return ""
    if info.full_name:
        return info.full_name
    if info.first_name and info.last_name:
        return f"{info.first_name} {info.last_name}"
    return ""


def find_stats_player(info: Optional[PlayerInfo], strict: bool = False) -> Optional[Dict[str, Any]]:
    """
    The SportsData player row for a Sleeper player, or None.

    Matches on name; when several players share it the Sleeper team breaks
    the tie.
    """
    name = _search_name(info)
    if not name:
        return None
    candidates = get_all_stats_players(strict=strict)
    if not candidates:
        return None
    return select_stats_player(candidates, name, team=info.team or None)


def fetch_player_season_stats(
    info: Optional[PlayerInfo], season: Optional[int] = None, strict: bool = False
) -> Optional[SeasonStats]:
    """Normalized season stats for a Sleeper player, or None when unmatched or empty."""
    match = find_stats_player(info, strict=strict)
    if not match or match.get("PlayerID") is None:
        return None
    season = season or get_current_season()
    return normalize_season_stats(get_player_season_stats(match["PlayerID"], season, strict=strict))


def fetch_player_game_logs(info: Optional[PlayerInfo], season: Optional[int] = None) -> List[GameLogEntry]:
    match = find_stats_player(info)
    if not match or match.get("PlayerID") is None:
        return []
    season = season or get_current_season()
    return normalize_game_log(get_player_game_logs(match["PlayerID"], season))
