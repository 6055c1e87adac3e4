"""Tests for the league dashboard page.

Page tests call show_dashboard_page() with every upstream call mocked,
verifying no exception is raised and the expected messages are shown.
"""

from unittest.mock import patch

import streamlit as st

from fantasy_exchange.common.schemas import Matchup
from fantasy_exchange.league.dashboard import roster_table, show_dashboard_page


class TestRosterTable:
    def test_columns_and_rank(self, directory):
        df = roster_table(["200", "500", "ghost"], directory)
        assert list(df.columns) == ["Player", "Pos", "Team", "Rank", "Status"]
        assert df.iloc[0]["Player"] == "Christian McCaffrey"
        assert df.iloc[0]["Rank"] == 1
        # Unranked kicker and unknown id
        assert df["Rank"].isna().tolist() == [False, True, True]
        assert df.iloc[2]["Player"] == "ghost"
        assert df.iloc[2]["Team"] == "FA"

    def test_empty(self, directory):
        assert roster_table([], directory).empty


class TestDashboardPage:
    def test_smoke(self, mock_league_state):
        show_dashboard_page()
        st.header.assert_called_with("Dashboard")
        st.subheader.assert_any_call("Test League (2024)")

    def test_schedule_rendered(self, mock_league_state):
        mock_league_state["get_season_matchups"].return_value = {
            1: [Matchup(1, 1, 120.5), Matchup(2, 1, 99.25)],
        }
        show_dashboard_page()
        st.metric.assert_called_with("Record", "1-0-0")

    def test_no_league_id(self, mock_league_state, session_store):
        session_store.save_league_id("")
        show_dashboard_page()
        st.info.assert_called_with("Enter your Sleeper league ID to get started.")

    def test_league_form_submit(self, mock_league_state, session_store):
        st.form_submit_button.return_value = True
        st.text_input.return_value = "league-999"
        show_dashboard_page()
        assert session_store.session.league_id == "league-999"
        mock_league_state["load_league_bundle"].assert_called_once()

    def test_reload_button(self, mock_league_state):
        st.button.return_value = True
        show_dashboard_page()
        mock_league_state["load_league_bundle"].assert_called_once()

    def test_league_load_failure(self, mock_league_state):
        st.session_state.pop("fx_league_bundle")
        mock_league_state["load_league_bundle"].return_value = None
        with patch("fantasy_exchange.league.dashboard.show_api_error") as mock_error:
            show_dashboard_page()
        mock_error.assert_called_once()
        assert mock_error.call_args[1]["hint_key"] == "league_id"

    def test_league_without_rosters(self, mock_league_state, league_bundle):
        st.session_state["fx_league_bundle"] = ("league-123", league_bundle._replace(rosters=[]))
        with patch("fantasy_exchange.league.dashboard.show_api_error") as mock_error:
            show_dashboard_page()
        mock_error.assert_called_once()

    def test_team_picker_saves_choice(self, mock_league_state, session_store):
        session_store.save_my_roster_id(None)
        show_dashboard_page()
        # First roster is selected by default and remembered
        assert session_store.session.my_roster_id == 1
