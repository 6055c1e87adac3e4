"""
Shared test fixtures for Fantasy Exchange.

This module:
1. Sets environment variables so config.py never points at real credentials
2. Provides Sleeper and SportsData payload fixtures
3. Provides a mock_streamlit fixture that patches all st.* display calls
4. Provides a mock_league_state fixture for page smoke tests
"""

import os
import tempfile
from unittest.mock import MagicMock, patch

import pytest

# =====================================================================
# 1. Environment for config.py
# =====================================================================
os.environ["SLEEPER_BASE_URL"] = "https://sleeper.test/v1"
os.environ["STATS_API_BASE_URL"] = "https://stats.test/v2/json"
os.environ["STATS_API_KEY"] = "test-key"
os.environ["DEFAULT_LEAGUE_ID"] = "league-123"
os.environ["SESSION_FILE"] = os.path.join(tempfile.gettempdir(), "fx_test_session.json")
os.environ["LOG_LEVEL"] = "WARNING"


# =====================================================================
# 2. Payload fixtures
# =====================================================================

@pytest.fixture
def sleeper_players_raw():
    """Slice of Sleeper /players/nfl covering every tracked position plus K and DEF."""
    return {
        "100": {"full_name": "Josh Allen", "first_name": "Josh", "last_name": "Allen",
                "position": "QB", "team": "BUF", "rank_ecr": 20, "status": "Active",
                "age": 28, "years_exp": 7},
        "101": {"full_name": "Patrick Mahomes", "first_name": "Patrick", "last_name": "Mahomes",
                "position": "QB", "team": "KC", "rank_ecr": 30},
        "102": {"first_name": "Jared", "last_name": "Goff", "position": "QB", "team": "DET",
                "rank_ecr": 90},
        "200": {"full_name": "Christian McCaffrey", "first_name": "Christian",
                "last_name": "McCaffrey", "position": "RB", "team": "SF", "rank_ecr": 1},
        "201": {"full_name": "Bijan Robinson", "first_name": "Bijan", "last_name": "Robinson",
                "position": "RB", "team": "ATL", "rank_ecr": 3},
        "202": {"full_name": "Kenneth Walker III", "first_name": "Kenneth", "last_name": "Walker",
                "position": "RB", "team": "SEA", "rank_ecr": 40},
        "203": {"full_name": "Tony Pollard", "first_name": "Tony", "last_name": "Pollard",
                "position": "RB", "team": "TEN", "depth_chart_order": 2},
        "300": {"full_name": "Ja'Marr Chase", "first_name": "Ja'Marr", "last_name": "Chase",
                "position": "WR", "team": "CIN", "rank_ecr": 2},
        "301": {"full_name": "D.J. Moore", "first_name": "D.J.", "last_name": "Moore",
                "position": "WR", "team": "CHI", "rank_ecr": 25},
        "302": {"full_name": "Amon-Ra St. Brown", "first_name": "Amon-Ra", "last_name": "St. Brown",
                "position": "WR", "team": "DET", "rank_ecr": 5},
        "400": {"full_name": "Travis Kelce", "first_name": "Travis", "last_name": "Kelce",
                "position": "TE", "team": "KC", "rank_ecr": 35},
        "500": {"full_name": "Justin Tucker", "first_name": "Justin", "last_name": "Tucker",
                "position": "K", "team": "BAL"},
        "BUF": {"first_name": "Buffalo", "last_name": "Bills", "position": "DEF", "team": "BUF"},
    }


@pytest.fixture
def sleeper_users_raw():
    return [
        {"user_id": "u1", "display_name": "alice", "username": "alice",
         "metadata": {"team_name": "Alice Allstars"}},
        {"user_id": "u2", "display_name": "bob", "username": "bob",
         "metadata": {"team_name_update": "Bob's Bombers"}},
        {"user_id": "u3", "display_name": "carol", "username": "carol", "metadata": {}},
    ]


@pytest.fixture
def sleeper_rosters_raw():
    """Three rosters; roster 3 has no owner and an empty player list."""
    return [
        {
            "roster_id": 1, "owner_id": "u1",
            "players": ["100", "101", "102", "200", "300", "301", "400", "500"],
            "starters": ["100", "200", "300", "400"],
            "reserve": ["301"],
            "taxi": ["102"],
            "settings": {"wins": 8, "losses": 2, "ties": 0, "fpts": 1200, "fpts_decimal": 55},
        },
        {
            "roster_id": 2, "owner_id": "u2",
            "players": ["201", "202", "203", "302", "BUF"],
            "starters": ["201", "302"],
            "reserve": None,
            "taxi": None,
            "settings": {"wins": 8, "losses": 2, "ties": 0, "fpts": 1300},
        },
        {
            "roster_id": 3, "owner_id": None,
            "players": None,
            "starters": [],
            "settings": {"wins": 2, "losses": 8, "ties": 0, "fpts": 900, "fpts_decimal": 10},
        },
    ]


@pytest.fixture
def sleeper_matchups_raw():
    """Week 1: roster 1 beats roster 2, roster 3 alone in its matchup."""
    return [
        {"roster_id": 1, "matchup_id": 1, "points": 120.5},
        {"roster_id": 2, "matchup_id": 1, "points": 99.25},
        {"roster_id": 3, "matchup_id": 2, "points": 80.0},
    ]


@pytest.fixture
def directory(sleeper_players_raw):
    from fantasy_exchange.common.player_matching import PlayerDirectory
    return PlayerDirectory.from_sleeper(sleeper_players_raw)


@pytest.fixture
def users(sleeper_users_raw):
    from fantasy_exchange.common.schemas import normalize_users
    return normalize_users(sleeper_users_raw)


@pytest.fixture
def rosters(sleeper_rosters_raw):
    from fantasy_exchange.common.schemas import normalize_rosters
    return normalize_rosters(sleeper_rosters_raw)


@pytest.fixture
def league_bundle(users, rosters, directory):
    from fantasy_exchange.common.sleeper_api import LeagueBundle
    return LeagueBundle(
        league={"league_id": "league-123", "name": "Test League", "season": "2024"},
        users=users,
        rosters=rosters,
        directory=directory,
    )


@pytest.fixture
def stats_players_list():
    """SportsData /Players rows; two Josh Allens on different teams."""
    return [
        {"PlayerID": 19801, "FirstName": "Josh", "LastName": "Allen", "Team": "BUF", "Position": "QB"},
        {"PlayerID": 18082, "FirstName": "Josh", "LastName": "Allen", "Team": "JAX", "Position": "OLB"},
        {"PlayerID": 22564, "FirstName": "Ja'Marr", "LastName": "Chase", "Team": "CIN", "Position": "WR"},
        {"PlayerID": 18877, "FirstName": "DJ", "LastName": "Moore", "Team": "CHI", "Position": "WR"},
        {"PlayerID": 17959, "FirstName": "Christian", "LastName": "McCaffrey", "Team": "SF", "Position": "RB"},
    ]


@pytest.fixture
def qb_season_row():
    """Flat SportsData season row for a quarterback."""
    return {
        "PlayerID": 19801, "Season": 2024, "Team": "BUF", "Played": 17,
        "PassingYards": 1000, "PassingTouchdowns": 10, "PassingInterceptions": 5,
        "PassingCompletions": 60, "PassingAttempts": 100,
        "RushingYards": 100, "RushingTouchdowns": 0, "RushingAttempts": 20,
        "Receptions": 0, "ReceivingYards": 0, "ReceivingTouchdowns": 0, "ReceivingTargets": 0,
        "FumblesLost": 1, "FantasyPointsPPR": 310.4,
    }


@pytest.fixture
def game_log_rows():
    return [
        {"Week": 2, "Opponent": "MIA", "HomeOrAway": "HOME", "PassingYards": 232,
         "PassingTouchdowns": 3, "FantasyPointsPPR": 24.1},
        {"Week": 1, "Opponent": "ARI", "HomeOrAway": "AWAY", "PassingYards": 180,
         "RushingYards": 39, "RushingTouchdowns": 2, "FantasyPointsPPR": 30.3},
        {"Week": None, "Opponent": "BYE"},
    ]


# =====================================================================
# 3. Streamlit no-op fixture
# =====================================================================

class _SessionState(dict):
    """Dict subclass that supports attribute access (like Streamlit's session_state)."""
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name)


class _MockColumn:
    """Mock for st.columns() return values that support context manager."""
    def __enter__(self):
        return self
    def __exit__(self, *args):
        pass
    def __getattr__(self, name):
        return MagicMock()


@pytest.fixture
def mock_streamlit():
    """
    Patches all st.* display functions as no-ops.
    Buttons are never pressed; st.columns() and st.tabs() return
    context-manager mocks; st.session_state is a fresh dict per test.
    """
    patches = {}
    display_funcs = [
        "title", "header", "subheader", "markdown", "write", "text",
        "dataframe", "table", "json", "metric", "caption",
        "info", "warning", "error", "success", "exception",
        "image", "plotly_chart",
        "download_button", "form",
        "spinner", "progress", "toast",
        "set_page_config",
        "divider", "empty",
    ]

    active_patches = []

    for func_name in display_funcs:
        p = patch(f"streamlit.{func_name}", new_callable=MagicMock)
        active_patches.append(p)
        patches[func_name] = p.start()

    def mock_selectbox(label="", options=None, *args, **kwargs):
        opts = list(options or kwargs.get("options", []))
        idx = kwargs.get("index", 0)
        if opts and 0 <= idx < len(opts):
            return opts[idx]
        return opts[0] if opts else None

    def mock_radio(label="", options=None, *args, **kwargs):
        opts = list(options or kwargs.get("options", []))
        idx = kwargs.get("index", 0)
        if opts and 0 <= idx < len(opts):
            return opts[idx]
        return opts[0] if opts else None

    def mock_multiselect(label="", options=None, *args, **kwargs):
        return list(kwargs.get("default", []))

    for name, side_eff in [
        ("selectbox", mock_selectbox),
        ("radio", mock_radio),
        ("multiselect", mock_multiselect),
    ]:
        p = patch(f"streamlit.{name}", side_effect=side_eff)
        active_patches.append(p)
        patches[name] = p.start()

    for name, ret in [
        ("button", False),
        ("form_submit_button", False),
        ("checkbox", False),
        ("toggle", False),
        ("text_input", ""),
        ("number_input", 0),
        ("slider", 0),
    ]:
        p = patch(f"streamlit.{name}", return_value=ret)
        active_patches.append(p)
        patches[name] = p.start()

    # st.stop raises to halt page execution (matching real Streamlit behavior)
    class _StopException(Exception):
        pass

    def _mock_stop():
        raise _StopException("st.stop()")

    p = patch("streamlit.stop", side_effect=_mock_stop)
    active_patches.append(p)
    patches["stop"] = p.start()
    patches["_StopException"] = _StopException

    p = patch("streamlit.rerun", new_callable=MagicMock)
    active_patches.append(p)
    patches["rerun"] = p.start()

    def mock_columns(spec=None, *args, **kwargs):
        n = spec if isinstance(spec, int) else len(spec) if isinstance(spec, (list, tuple)) else 2
        return [_MockColumn() for _ in range(n)]

    patches["columns"] = patch("streamlit.columns", side_effect=mock_columns)
    active_patches.append(patches["columns"])
    patches["columns"].start()

    def mock_tabs(labels):
        return [_MockColumn() for _ in labels]

    patches["tabs"] = patch("streamlit.tabs", side_effect=mock_tabs)
    active_patches.append(patches["tabs"])
    patches["tabs"].start()

    patches["expander"] = patch("streamlit.expander", side_effect=lambda *a, **kw: _MockColumn())
    active_patches.append(patches["expander"])
    patches["expander"].start()

    patches["container"] = patch("streamlit.container", side_effect=lambda *a, **kw: _MockColumn())
    active_patches.append(patches["container"])
    patches["container"].start()

    sidebar_mock = MagicMock()
    sidebar_mock.__enter__ = MagicMock(return_value=sidebar_mock)
    sidebar_mock.__exit__ = MagicMock(return_value=False)
    sidebar_mock.button.return_value = False
    patches["sidebar"] = patch("streamlit.sidebar", sidebar_mock)
    active_patches.append(patches["sidebar"])
    patches["sidebar"].start()

    patches["session_state"] = patch("streamlit.session_state", _SessionState())
    active_patches.append(patches["session_state"])
    patches["session_state"].start()

    yield patches

    for p in active_patches:
        p.stop()


# =====================================================================
# 4. Page smoke-test fixture
# =====================================================================

@pytest.fixture
def session_store(tmp_path):
    """Logged-in session with league and roster 1 selected, backed by a temp file."""
    from fantasy_exchange.common.session import SessionStore
    store = SessionStore(tmp_path / "session.json")
    store.login("alice", "secret")
    store.save_league_id("league-123")
    store.save_my_roster_id(1)
    return store


@pytest.fixture
def mock_league_state(mock_streamlit, session_store, league_bundle):
    """
    Puts a loaded league into st.session_state and stubs every upstream call
    the pages can reach.  Individual tests can override specific mocks.
    """
    import streamlit as st_mod

    st_mod.session_state["fx_session_store"] = session_store
    st_mod.session_state["fx_league_bundle"] = ("league-123", league_bundle)

    upstream = {
        "fantasy_exchange.common.app_state.load_league_bundle": league_bundle,
        "fantasy_exchange.common.app_state.get_nfl_state": {"season": "2024", "week": 3},
        "fantasy_exchange.common.app_state.get_season_matchups": {},
        "fantasy_exchange.common.app_state.fetch_player_season_stats": None,
        "fantasy_exchange.league.player_stat_sheet.find_stats_player": None,
        "fantasy_exchange.league.player_stat_sheet.get_player_season_stats": None,
        "fantasy_exchange.league.player_stat_sheet.get_player_game_logs": [],
    }
    active = []
    mocks = {}
    for target, return_val in upstream.items():
        p = patch(target, return_value=return_val)
        active.append(p)
        mocks[target.rsplit(".", 1)[-1]] = p.start()

    yield mocks

    for p in active:
        p.stop()
