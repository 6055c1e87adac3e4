"""
Sleeper League API Functions.

Read-only calls against the Sleeper API (api.sleeper.app/v1). Every function
logs failures and returns "no data" (None, [] or {}) so pages decide what the
user sees.
"""

from typing import Any, Dict, Iterable, List, NamedTuple, Optional

import requests

import config
from fantasy_exchange.common.error_helpers import get_logger
from fantasy_exchange.common.player_matching import PlayerDirectory
from fantasy_exchange.common.schemas import (
    LeagueUser,
    Matchup,
    Roster,
    normalize_matchups,
    normalize_rosters,
    normalize_users,
)

_logger = get_logger("fantasy_exchange.sleeper_api")


class LeagueBundle(NamedTuple):
    league: Dict[str, Any]
    users: List[LeagueUser]
    rosters: List[Roster]
    directory: PlayerDirectory


def _get_json(path: str, timeout: Optional[float] = None) -> Any:
    url = f"{config.SLEEPER_BASE_URL}/{path.lstrip('/')}"
    r = requests.get(url, timeout=timeout or config.REQUEST_TIMEOUT)
    r.raise_for_status()
    return r.json()


# =============================================================================
# LEAGUE
# =============================================================================

def get_league(league_id: str) -> Optional[Dict[str, Any]]:
    """
    Fetches league metadata (name, season, settings).

    Returns:
    - The league dict, or None when the league can't be loaded.
    """
    if not league_id:
        return None
    try:
        data = _get_json(f"league/{league_id}")
    except (requests.RequestException, ValueError) as e:
        _logger.warning("Failed to fetch league %s: %s", league_id, e)
        return None
    # Sleeper answers an unknown league id with a JSON null
    return data if isinstance(data, dict) else None


def get_league_users(league_id: str) -> List[LeagueUser]:
    try:
        data = _get_json(f"league/{league_id}/users")
    except (requests.RequestException, ValueError) as e:
        _logger.warning("Failed to fetch users for league %s: %s", league_id, e)
        return []
    return normalize_users(data)


def get_league_rosters(league_id: str) -> List[Roster]:
    try:
        data = _get_json(f"league/{league_id}/rosters")
    except (requests.RequestException, ValueError) as e:
        _logger.warning("Failed to fetch rosters for league %s: %s", league_id, e)
        return []
    return normalize_rosters(data)


def get_league_matchups(league_id: str, week: int) -> List[Matchup]:
    try:
        data = _get_json(f"league/{league_id}/matchups/{week}")
    except (requests.RequestException, ValueError) as e:
        _logger.warning("Failed to fetch week %s matchups for league %s: %s", week, league_id, e)
        return []
    return normalize_matchups(data)


def get_season_matchups(league_id: str, weeks: Iterable[int]) -> Dict[int, List[Matchup]]:
    """
    Fetches matchups for each week, one request per week.

    Returns:
    - {week: [Matchup, ...]}; a week that fails to load maps to [].
    """
    return {week: get_league_matchups(league_id, week) for week in weeks}


# =============================================================================
# PLAYERS & NFL STATE
# =============================================================================

def get_all_players() -> Dict[str, Any]:
    """
    Fetches the full NFL player mapping (player_id -> attributes).

    The payload is several megabytes, so callers should keep the resulting
    PlayerDirectory around instead of calling this on every rerun.
    """
    try:
        data = _get_json("players/nfl", timeout=max(config.REQUEST_TIMEOUT, 60))
    except (requests.RequestException, ValueError) as e:
        _logger.warning("Failed to fetch NFL player mapping: %s", e)
        return {}
    return data if isinstance(data, dict) else {}


def get_nfl_state() -> Dict[str, Any]:
    """Current season / week as reported by Sleeper."""
    try:
        data = _get_json("state/nfl")
    except (requests.RequestException, ValueError) as e:
        _logger.warning("Failed to fetch NFL state: %s", e)
        return {}
    return data if isinstance(data, dict) else {}


def player_image_url(player_id: str) -> str:
    return f"{config.SLEEPER_CDN_URL}/{player_id}.jpg"


# =============================================================================
# BUNDLE
# =============================================================================

def load_league_bundle(league_id: str, directory: Optional[PlayerDirectory] = None) -> Optional[LeagueBundle]:
    """
    Loads everything the league pages share: league, users, rosters, players.

    Parameters:
    - league_id: Sleeper league id.
    - directory: An already built PlayerDirectory to reuse; fetched when None.

    Returns:
    - LeagueBundle, or None when the league itself can't be loaded.
    """
    league = get_league(league_id)
    if league is None:
        return None

    users = get_league_users(league_id)
    rosters = get_league_rosters(league_id)
    if directory is None or len(directory) == 0:
        directory = PlayerDirectory.from_sleeper(get_all_players())

    _logger.info(
        "Loaded league %s: %d users, %d rosters, %d players",
        league_id, len(users), len(rosters), len(directory),
    )
    return LeagueBundle(league=league, users=users, rosters=rosters, directory=directory)
