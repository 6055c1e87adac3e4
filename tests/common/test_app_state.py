"""Tests for fantasy_exchange/common/app_state.py."""

from unittest.mock import MagicMock, patch

import requests
import streamlit as st

from fantasy_exchange.common.app_state import (
    clear_app_state,
    get_cached_nfl_state,
    get_cached_season_matchups,
    get_league_bundle,
    get_session_store,
    get_stats_cache,
    load_trade_stats,
)
from fantasy_exchange.common.player_matching import PlayerDirectory
from fantasy_exchange.common.schemas import Matchup
from fantasy_exchange.common.session import SessionStore


class TestGetSessionStore:
    def test_created_once(self, mock_streamlit):
        store = get_session_store()
        assert isinstance(store, SessionStore)
        assert get_session_store() is store


class TestGetLeagueBundle:
    @patch("fantasy_exchange.common.app_state.load_league_bundle")
    def test_cached_per_league(self, mock_load, mock_streamlit, league_bundle):
        mock_load.return_value = league_bundle
        assert get_league_bundle("league-123") is league_bundle
        assert get_league_bundle("league-123") is league_bundle
        assert mock_load.call_count == 1

    @patch("fantasy_exchange.common.app_state.load_league_bundle")
    def test_new_league_reuses_directory(self, mock_load, mock_streamlit, league_bundle):
        mock_load.return_value = league_bundle
        get_league_bundle("league-123")
        get_league_bundle("league-456")
        assert mock_load.call_count == 2
        assert mock_load.call_args[1]["directory"] is league_bundle.directory

    @patch("fantasy_exchange.common.app_state.load_league_bundle")
    def test_reload_drops_dependent_state(self, mock_load, mock_streamlit, league_bundle):
        mock_load.return_value = league_bundle
        get_league_bundle("league-123")
        st.session_state["fx_season_matchups"] = ("league-123", {})
        st.session_state["fx_nfl_state"] = {"week": 3}
        get_league_bundle("league-123", reload=True)
        assert mock_load.call_count == 2
        assert "fx_season_matchups" not in st.session_state
        assert "fx_nfl_state" not in st.session_state

    @patch("fantasy_exchange.common.app_state.load_league_bundle", return_value=None)
    def test_failed_load(self, mock_load, mock_streamlit):
        assert get_league_bundle("bad") is None
        assert "fx_league_bundle" not in st.session_state

    @patch("fantasy_exchange.common.app_state.load_league_bundle")
    def test_empty_directory_not_kept(self, mock_load, mock_streamlit, league_bundle):
        mock_load.return_value = league_bundle._replace(directory=PlayerDirectory())
        get_league_bundle("league-123")
        assert "fx_player_directory" not in st.session_state

    def test_no_league_id(self, mock_streamlit):
        assert get_league_bundle("") is None


class TestCachedUpstream:
    @patch("fantasy_exchange.common.app_state.get_nfl_state", return_value={"week": 4})
    def test_nfl_state_fetched_once(self, mock_state, mock_streamlit):
        assert get_cached_nfl_state() == {"week": 4}
        assert get_cached_nfl_state() == {"week": 4}
        mock_state.assert_called_once()

    @patch("fantasy_exchange.common.app_state.get_nfl_state", return_value={})
    def test_nfl_state_failure_retried(self, mock_state, mock_streamlit):
        assert get_cached_nfl_state() == {}
        get_cached_nfl_state()
        assert mock_state.call_count == 2

    @patch("fantasy_exchange.common.app_state.get_season_matchups")
    def test_matchups_cached(self, mock_matchups, mock_streamlit):
        mock_matchups.return_value = {1: [Matchup(1, 1, 10.0)], 2: []}
        get_cached_season_matchups("league-123", [1, 2])
        get_cached_season_matchups("league-123", [1])
        assert mock_matchups.call_count == 1
        get_cached_season_matchups("league-123", [1, 2, 3])
        assert mock_matchups.call_count == 2
        get_cached_season_matchups("league-456", [1])
        assert mock_matchups.call_count == 3


class TestLoadTradeStats:
    @patch("fantasy_exchange.common.app_state.get_current_season", return_value=2024)
    @patch("fantasy_exchange.common.app_state.fetch_player_season_stats")
    def test_fetches_each_player_once(self, mock_fetch, _season, mock_streamlit, directory):
        mock_fetch.side_effect = lambda info, season, strict: "stats" if info.player_id == "100" else None
        assert load_trade_stats(["100", "200"], directory) == {"100": "stats"}
        assert load_trade_stats(["100", "200"], directory) == {"100": "stats"}
        assert mock_fetch.call_count == 2
        assert mock_fetch.call_args_list[0][0] == (directory.lookup_by_id("100"), 2024)

    @patch("fantasy_exchange.common.app_state.get_current_season", return_value=2024)
    @patch("fantasy_exchange.common.stats_api.requests.get")
    def test_network_failure_is_retried(self, mock_get, _season, mock_streamlit, directory,
                                        stats_players_list, qb_season_row):
        players_resp = MagicMock(**{"json.return_value": stats_players_list})
        stats_resp = MagicMock(**{"json.return_value": qb_season_row})
        mock_get.side_effect = [requests.ConnectionError("down"), players_resp, stats_resp]

        assert load_trade_stats(["100"], directory) == {}
        assert not get_stats_cache().has("100")

        stats = load_trade_stats(["100"], directory)
        assert stats["100"].passing.yards == 1000
        assert mock_get.call_count == 3

    @patch("fantasy_exchange.common.app_state.fetch_player_season_stats")
    def test_no_api_key(self, mock_fetch, mock_streamlit, directory):
        with patch("fantasy_exchange.common.app_state.config.STATS_API_KEY", ""):
            assert load_trade_stats(["100"], directory) == {}
        mock_fetch.assert_not_called()


class TestClearAppState:
    def test_only_app_keys_removed(self, mock_streamlit):
        get_stats_cache()
        st.session_state["fx_nfl_state"] = {"week": 1}
        st.session_state["other_widget"] = 1
        clear_app_state()
        assert list(st.session_state.keys()) == ["other_widget"]
