# fantasy_exchange/league/dashboard.py
"""
League Dashboard.

League picker, team picker, my roster by section, league standings and my
weekly schedule.
"""

from typing import List, Optional

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

import config
from fantasy_exchange.common.app_state import (
    get_cached_nfl_state,
    get_cached_season_matchups,
    get_league_bundle,
    get_session_store,
)
from fantasy_exchange.common.error_helpers import get_logger, show_api_error
from fantasy_exchange.common.league_helpers import (
    build_owner_map,
    build_schedule,
    compute_standings,
    find_roster,
    record_summary,
    schedule_weeks,
    split_roster,
    team_label,
)
from fantasy_exchange.common.player_matching import UNRANKED, PlayerDirectory
from fantasy_exchange.common.styled_tables import render_styled_table

_logger = get_logger("fantasy_exchange.league.dashboard")

_CHART_LAYOUT = dict(
    paper_bgcolor="#ffffff",
    plot_bgcolor="#ffffff",
    font=dict(color="#0f2a4a", size=13),
    xaxis=dict(gridcolor="#e6ebf2"),
    yaxis=dict(gridcolor="#e6ebf2"),
)

_SECTION_LABELS = [
    ("starters", "Starting Lineup"),
    ("bench", "Bench"),
    ("reserve", "Injured Reserve"),
    ("taxi", "Taxi Squad"),
]


def roster_table(player_ids: List[str], directory: PlayerDirectory) -> pd.DataFrame:
    """One row per player id, in roster order. Ids missing from the directory still get a row."""
    rows = []
    for pid in player_ids:
        info = directory.lookup_by_id(pid)
        rank = directory.rank_of(pid)
        rows.append({
            "Player": directory.display_name(pid),
            "Pos": info.position if info and info.position else "-",
            "Team": info.team if info and info.team else "FA",
            "Rank": None if rank >= UNRANKED else rank,
            "Status": info.status if info else "",
        })
    return pd.DataFrame(rows, columns=["Player", "Pos", "Team", "Rank", "Status"])


def _points_chart(standings: pd.DataFrame, my_team: Optional[str]):
    colors = ["#2563eb" if team == my_team else "#94a3b8" for team in standings["Team"]]
    fig = go.Figure(go.Bar(
        x=standings["Team"], y=standings["PF"],
        marker_color=colors, text=standings["PF"].round(1), textposition="outside",
    ))
    fig.update_layout(
        title=dict(text="Points For", x=0.5, xanchor="center"),
        height=380,
        margin=dict(t=60, b=40, l=50, r=20),
        **_CHART_LAYOUT,
    )
    return fig


def _render_league_form(store) -> bool:
    """League id form. Returns True when a (new) league id was submitted."""
    with st.form("fx_league_form"):
        league_input = st.text_input(
            "Sleeper League ID",
            value=store.session.league_id or config.DEFAULT_LEAGUE_ID,
            help="Sleeper app → League → Settings → League ID",
        )
        submitted = st.form_submit_button("Load League")
    if submitted:
        store.save_league_id(league_input)
        return True
    return False


def _render_team_picker(store, rosters, owners) -> Optional[int]:
    roster_ids = [r.roster_id for r in rosters]
    if not roster_ids:
        return None
    current = store.session.my_roster_id
    index = roster_ids.index(current) if current in roster_ids else 0
    selected = st.selectbox(
        "My Team",
        options=roster_ids,
        index=index,
        format_func=lambda rid: team_label(owners.get(rid)),
    )
    if selected != current:
        store.save_my_roster_id(selected)
    return selected


def _render_my_team(roster, directory: PlayerDirectory):
    if roster is None:
        st.info("Pick your team above to see its roster.")
        return
    sections = split_roster(roster)
    st.caption(f"{len(roster.players)} players rostered")
    for field, label in _SECTION_LABELS:
        ids = getattr(sections, field)
        if not ids and field != "starters":
            continue
        render_styled_table(
            roster_table(ids, directory),
            title=f"{label} ({len(ids)})",
            col_formats={"Rank": "{:.0f}"},
            text_align={"Rank": "center"},
        )


def _render_standings(rosters, owners, my_roster_id):
    standings = compute_standings(rosters, owners)
    if standings.empty:
        st.info("No standings yet.")
        return
    my_team = team_label(owners.get(my_roster_id)) if my_roster_id is not None else None
    render_styled_table(
        standings.drop(columns=["roster_id"]),
        title="League Standings",
        col_formats={"PF": "{:,.2f}"},
        highlight_row=lambda row: row["Team"] == my_team,
        positive_color_cols=["PF"],
    )
    st.plotly_chart(_points_chart(standings, my_team), use_container_width=True)


def _render_schedule(league_id, my_roster_id, owners):
    if my_roster_id is None:
        st.info("Pick your team above to see its schedule.")
        return
    weeks = schedule_weeks(get_cached_nfl_state())
    with st.spinner("Loading matchups..."):
        matchups = get_cached_season_matchups(league_id, weeks)
    schedule = build_schedule(matchups, my_roster_id, owners)
    if not schedule:
        st.info("No schedule available yet.")
        return

    st.metric("Record", record_summary(schedule))
    df = pd.DataFrame(schedule).rename(columns={
        "week": "Week", "opponent": "Opponent", "my_points": "My Pts",
        "opp_points": "Opp Pts", "result": "Result",
    })
    render_styled_table(
        df,
        title="My Schedule",
        col_formats={"My Pts": "{:.2f}", "Opp Pts": "{:.2f}"},
        text_align={"Result": "center", "Week": "center"},
        highlight_row=lambda row: row["Result"] == "W",
    )


def show_dashboard_page():
    st.header("Dashboard")
    store = get_session_store()

    reload = _render_league_form(store)
    league_id = store.session.league_id
    if not league_id:
        st.info("Enter your Sleeper league ID to get started.")
        return

    if st.button("Reload league data"):
        reload = True

    with st.spinner("Loading league..."):
        bundle = get_league_bundle(league_id, reload=reload)
    if bundle is None:
        show_api_error(f"loading league {league_id}", hint_key="league_id")
        return
    if not bundle.rosters:
        show_api_error("loading league rosters", hint_key="api_down")
        return

    league_name = bundle.league.get("name") or "League"
    season = bundle.league.get("season")
    st.subheader(f"{league_name} ({season})" if season else league_name)

    owners = build_owner_map(bundle.users, bundle.rosters)
    my_roster_id = _render_team_picker(store, bundle.rosters, owners)
    my_roster = find_roster(bundle.rosters, my_roster_id)

    tab_team, tab_standings, tab_schedule = st.tabs(["My Team", "Standings", "Schedule"])
    with tab_team:
        _render_my_team(my_roster, bundle.directory)
    with tab_standings:
        _render_standings(bundle.rosters, owners, my_roster_id)
    with tab_schedule:
        _render_schedule(league_id, my_roster_id, owners)
