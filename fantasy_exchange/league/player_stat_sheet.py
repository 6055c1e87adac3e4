# fantasy_exchange/league/player_stat_sheet.py
"""
Player Stat Sheet.

Header card from the Sleeper directory, then overview / season stats / game
log from the statistics API for the chosen season.  When the statistics API
has nothing for the player the directory data is still shown.
"""

from typing import List, NamedTuple, Optional

import pandas as pd
import plotly.express as px
import streamlit as st

import config
from fantasy_exchange.common.app_state import get_league_bundle, get_session_store
from fantasy_exchange.common.error_helpers import get_logger, show_api_error
from fantasy_exchange.common.league_helpers import league_player_ids
from fantasy_exchange.common.player_matching import UNRANKED, PlayerDirectory
from fantasy_exchange.common.schemas import GameLogEntry, PlayerInfo, SeasonStats, normalize_game_log, normalize_season_stats
from fantasy_exchange.common.sleeper_api import player_image_url
from fantasy_exchange.common.stats_api import (
    StatsApiError,
    find_stats_player,
    get_current_season,
    get_player_game_logs,
    get_player_season_stats,
)
from fantasy_exchange.common.styled_tables import render_styled_table
from fantasy_exchange.common.text_helpers import format_stat, player_label, raw_stat_items, season_stat_items

_logger = get_logger("fantasy_exchange.league.player_stat_sheet")

_SHEETS_KEY = "fx_stat_sheets"
SELECTED_PLAYER_KEY = "fx_stat_sheet_player"

# Overview shows this many headline numbers
_OVERVIEW_ITEMS = 8


class StatSheet(NamedTuple):
    stats_player: Optional[dict]
    season_stats: Optional[SeasonStats]
    game_log: List[GameLogEntry]


def season_options(current: Optional[int] = None) -> List[int]:
    current = current or get_current_season()
    return [current - i for i in range(config.SEASON_CHOICES)]


def load_stat_sheet(info: PlayerInfo, season: int) -> StatSheet:
    """
    Match the player in the statistics API, then pull season totals and game log.

    Raises StatsApiError when the API cannot be reached.
    """
    stats_player = find_stats_player(info, strict=True)
    if not stats_player or stats_player.get("PlayerID") is None:
        return StatSheet(stats_player=None, season_stats=None, game_log=[])
    stats_id = stats_player["PlayerID"]
    return StatSheet(
        stats_player=stats_player,
        season_stats=normalize_season_stats(get_player_season_stats(stats_id, season, strict=True)),
        game_log=normalize_game_log(get_player_game_logs(stats_id, season, strict=True)),
    )


def _get_stat_sheet(info: PlayerInfo, season: int) -> StatSheet:
    sheets = st.session_state.get(_SHEETS_KEY)
    if sheets is None:
        sheets = {}
        st.session_state[_SHEETS_KEY] = sheets
    key = (info.player_id, season)
    if key not in sheets:
        # Nothing is stored when the load raises
        sheets[key] = load_stat_sheet(info, season)
    return sheets[key]


def game_log_table(entries: List[GameLogEntry]) -> pd.DataFrame:
    rows = []
    for e in entries:
        row = {
            "Week": e.week,
            "Opp": e.opponent or "-",
            "H/A": e.home_or_away or "-",
            "Fantasy Pts": e.fantasy_points,
        }
        row.update(e.stats)
        rows.append(row)
    return pd.DataFrame(rows)


def _sorted_player_ids(directory: PlayerDirectory, player_ids: List[str]) -> List[str]:
    return sorted(player_ids, key=lambda pid: (directory.rank_of(pid), directory.display_name(pid)))


def _render_header(info: PlayerInfo):
    col_img, col_info = st.columns([1, 4])
    with col_img:
        st.image(player_image_url(info.player_id), width=120)
    with col_info:
        st.subheader(info.display_name)
        details = [info.position or "-", info.team or "Free Agent"]
        if info.status:
            details.append(info.status)
        st.caption(" · ".join(details))
        c1, c2, c3 = st.columns(3)
        c1.metric("Age", format_stat(info.age))
        c2.metric("Experience", f"{format_stat(info.years_exp)} yrs" if info.years_exp is not None else "-")
        rank = info.rank_ecr or info.depth_chart_order
        c3.metric("Expert Rank", format_stat(rank) if rank and rank < UNRANKED else "-")


def _render_overview(sheet: StatSheet, info: PlayerInfo, season: int):
    if sheet.season_stats is None:
        st.info(
            "Stats not available for this player. The player may be inactive or the "
            "statistics API has no data for this season."
        )
        return
    st.markdown(f"**Key Statistics ({season})**")
    items = season_stat_items(sheet.season_stats)[:_OVERVIEW_ITEMS]
    cols = st.columns(4)
    for i, (label, value) in enumerate(items):
        cols[i % 4].metric(label, format_stat(value))
    if info.rank_ecr:
        st.caption(f"Expert Consensus Rank: {format_stat(info.rank_ecr)}")


def _render_season_stats(sheet: StatSheet, season: int):
    if sheet.season_stats is None:
        st.info("No statistics available for this season.")
        return
    items = raw_stat_items(sheet.season_stats.raw) or season_stat_items(sheet.season_stats)
    df = pd.DataFrame([{"Stat": label, "Value": format_stat(value)} for label, value in items])
    render_styled_table(df, title=f"Season Statistics ({season})", text_align={"Value": "right"}, max_height=520)


def _render_game_log(sheet: StatSheet, season: int):
    if not sheet.game_log:
        st.info("No game logs available for this season.")
        return
    df = game_log_table(sheet.game_log)
    fig = px.line(df, x="Week", y="Fantasy Pts", markers=True, title=f"Fantasy Points by Week ({season})")
    fig.update_layout(height=320, margin=dict(t=60, b=40, l=50, r=20))
    st.plotly_chart(fig, use_container_width=True)
    render_styled_table(
        df,
        title=f"Game Log ({season})",
        col_formats={"Fantasy Pts": "{:.1f}"},
        positive_color_cols=["Fantasy Pts"],
    )


def show_player_stat_sheet_page():
    st.header("Player Stats")
    store = get_session_store()
    league_id = store.session.league_id
    if not league_id:
        st.info("Load your league on the Dashboard first.")
        return

    bundle = get_league_bundle(league_id)
    if bundle is None:
        show_api_error(f"loading league {league_id}", hint_key="league_id")
        return

    directory = bundle.directory
    player_ids = _sorted_player_ids(directory, [pid for pid in league_player_ids(bundle.rosters) if pid in directory])
    if not player_ids:
        st.info("No rostered players found in this league.")
        return

    query = st.text_input("Search players", placeholder="Name, position or team")
    if query:
        player_ids = [p.player_id for p in directory.search(query, candidate_ids=player_ids, limit=50)]
        if not player_ids:
            st.warning(f"No rostered players match '{query}'.")
            return

    preselected = st.session_state.get(SELECTED_PLAYER_KEY)
    col_player, col_season = st.columns([3, 1])
    with col_player:
        player_id = st.selectbox(
            "Player",
            options=player_ids,
            index=player_ids.index(preselected) if preselected in player_ids else 0,
            format_func=lambda pid: player_label(directory.lookup_by_id(pid), pid),
        )
    with col_season:
        season = st.selectbox("Season", options=season_options())
    st.session_state[SELECTED_PLAYER_KEY] = player_id

    info = directory.lookup_by_id(player_id)
    if info is None:
        st.error("Player not found")
        return
    _render_header(info)

    if not config.STATS_API_KEY:
        st.warning("No statistics API key configured; showing directory data only. Set `STATS_API_KEY` in `.env`.")
        return

    try:
        with st.spinner("Loading player stats..."):
            sheet = _get_stat_sheet(info, season)
    except StatsApiError as e:
        show_api_error(f"loading stats for {info.display_name}", hint_key="stats_api", exception=e)
        return
    if sheet.stats_player is None:
        _logger.info("No statistics API match for %s", info.display_name)

    tab_overview, tab_stats, tab_log = st.tabs(["Overview", "Season Stats", "Game Log"])
    with tab_overview:
        _render_overview(sheet, info, season)
    with tab_stats:
        _render_season_stats(sheet, season)
    with tab_log:
        _render_game_log(sheet, season)
