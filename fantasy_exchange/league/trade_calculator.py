# fantasy_exchange/league/trade_calculator.py
"""
Trade Calculator.

Pick players to give from my roster and up to two players to receive from
anywhere in the league; the page scores both sides with the trade value
heuristic and shows what the trade does to my positional balance.
"""

from typing import List

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from fantasy_exchange.common.app_state import get_league_bundle, get_session_store, load_trade_stats
from fantasy_exchange.common.error_helpers import get_logger, show_api_error
from fantasy_exchange.common.league_helpers import find_roster, league_player_ids
from fantasy_exchange.common.player_matching import UNRANKED, PlayerDirectory
from fantasy_exchange.common.styled_tables import render_styled_table
from fantasy_exchange.common.text_helpers import player_label
from fantasy_exchange.trade.roster_needs import POSITION_TARGETS
from fantasy_exchange.trade.trade_value import (
    MAX_INCOMING,
    VERDICT_BENEFICIAL,
    VERDICT_HURTS,
    TradeAnalysis,
    TradeProposal,
    evaluate_trade,
)

_logger = get_logger("fantasy_exchange.league.trade_calculator")

PROPOSAL_KEY = "fx_trade_proposal"
_SEARCH_LIMIT = 10


def get_proposal() -> TradeProposal:
    if PROPOSAL_KEY not in st.session_state:
        st.session_state[PROPOSAL_KEY] = TradeProposal()
    return st.session_state[PROPOSAL_KEY]


def giving_options(player_ids: List[str], directory: PlayerDirectory) -> List[str]:
    """My roster ordered by expert consensus rank, unranked players last."""
    known = [pid for pid in player_ids if pid in directory]

    def _ecr(pid):
        info = directory.lookup_by_id(pid)
        return info.rank_ecr or UNRANKED

    return sorted(known, key=_ecr)


def sync_outgoing(proposal: TradeProposal, selected: List[str]) -> None:
    """Make the outgoing side match a multiselect value."""
    for pid in list(proposal.outgoing):
        if pid not in selected:
            proposal.remove_outgoing(pid)
    for pid in selected:
        if pid not in proposal.outgoing:
            if not proposal.add_outgoing(pid):
                st.warning("A player can't be on both sides of a trade.")


def value_breakdown(proposal: TradeProposal, analysis: TradeAnalysis, directory: PlayerDirectory) -> pd.DataFrame:
    rows = []
    for side, ids, positions in [
        ("Giving", proposal.outgoing, analysis.my_positions),
        ("Receiving", proposal.incoming, analysis.target_positions),
    ]:
        for pid, pos in zip(ids, positions):
            rows.append({
                "Side": side,
                "Player": directory.display_name(pid),
                "Pos": pos,
                "Value": round(analysis.player_values.get(pid, 0.0), 1),
            })
    return pd.DataFrame(rows, columns=["Side", "Player", "Pos", "Value"])


def position_impact_table(analysis: TradeAnalysis) -> pd.DataFrame:
    rows = []
    for pos, target in POSITION_TARGETS.items():
        have = analysis.position_counts.get(pos, 0)
        if pos in analysis.needs.deficit:
            status = "Short"
        elif pos in analysis.needs.surplus:
            status = "Surplus"
        else:
            status = "OK"
        rows.append({"Pos": pos, "After Trade": have, "Target": target, "Status": status})
    return pd.DataFrame(rows)


def _value_chart(analysis: TradeAnalysis):
    fig = go.Figure(go.Bar(
        x=["You Give", "You Get"],
        y=[analysis.my_value, analysis.target_value],
        marker_color=["#dc2626", "#16a34a"],
        text=[f"{analysis.my_value:.0f}", f"{analysis.target_value:.0f}"],
        textposition="outside",
    ))
    fig.update_layout(height=300, margin=dict(t=30, b=30, l=40, r=20), showlegend=False)
    return fig


def _render_receiving(proposal: TradeProposal, directory: PlayerDirectory, league_ids: List[str]):
    st.markdown(f"**Receiving** ({len(proposal.incoming)}/{MAX_INCOMING})")
    for pid in list(proposal.incoming):
        c1, c2 = st.columns([4, 1])
        c1.write(player_label(directory.lookup_by_id(pid), pid))
        with c2:
            if st.button("Remove", key=f"fx_remove_in_{pid}"):
                proposal.remove_incoming(pid)
                st.rerun()

    if not proposal.can_add_incoming:
        st.caption(f"You can receive at most {MAX_INCOMING} players.")
        return

    query = st.text_input("Search players", placeholder="Search by name, position, or team...",
                          key="fx_trade_search")
    if not query:
        return
    results = directory.search(query, candidate_ids=league_ids, limit=_SEARCH_LIMIT)
    if not results:
        st.caption(f"No players found matching '{query}'.")
        return
    for info in results:
        c1, c2 = st.columns([4, 1])
        c1.write(player_label(info))
        taken = info.player_id in proposal.all_player_ids()
        with c2:
            if st.button("Add", key=f"fx_add_in_{info.player_id}", disabled=taken):
                if proposal.add_incoming(info.player_id):
                    st.rerun()


def _render_analysis(proposal: TradeProposal, analysis: TradeAnalysis, directory: PlayerDirectory):
    verdict_msg = f"**{analysis.verdict_text}** · Net Value: {analysis.net_value:+.0f}"
    if analysis.verdict == VERDICT_BENEFICIAL:
        st.success(verdict_msg)
    elif analysis.verdict == VERDICT_HURTS:
        st.error(verdict_msg)
    else:
        st.info(verdict_msg)

    c1, c2, c3 = st.columns(3)
    c1.metric("Your Players Value", f"{analysis.my_value:.0f}")
    c2.metric("Receiving Players Value", f"{analysis.target_value:.0f}")
    c3.metric("Net Change", f"{analysis.net_value:+.0f}")

    st.plotly_chart(_value_chart(analysis), use_container_width=True)
    render_styled_table(
        value_breakdown(proposal, analysis, directory),
        title="Value Breakdown",
        col_formats={"Value": "{:.1f}"},
        positive_color_cols=["Value"],
    )

    if analysis.needs.deficit:
        st.warning(f"**Position Concerns:** after trade, you may be short on {', '.join(analysis.needs.deficit)}")
    if analysis.needs.surplus:
        st.info(f"**Position Surplus:** after trade, you'll have extra {', '.join(analysis.needs.surplus)}")
    render_styled_table(position_impact_table(analysis), title="Roster After Trade",
                        text_align={"Status": "center"})

    giving = ", ".join(directory.display_name(pid) for pid in proposal.outgoing)
    receiving = ", ".join(directory.display_name(pid) for pid in proposal.incoming)
    st.caption(f"**Giving:** {giving}  \n**Receiving:** {receiving}")


def show_trade_calculator_page():
    st.header("Trade Calculator")
    st.caption("Give one or more of your players, receive one or two, and see whether the trade helps.")

    store = get_session_store()
    league_id = store.session.league_id
    if not league_id:
        st.info("Load your league on the Dashboard first.")
        return

    bundle = get_league_bundle(league_id)
    if bundle is None:
        show_api_error(f"loading league {league_id}", hint_key="league_id")
        return

    my_roster = find_roster(bundle.rosters, store.session.my_roster_id)
    if my_roster is None:
        st.info("Pick your team on the Dashboard first.")
        return

    directory = bundle.directory
    proposal = get_proposal()

    col_give, col_get = st.columns(2)
    with col_give:
        options = giving_options(my_roster.players, directory)
        selected = st.multiselect(
            "Giving Away",
            options=options,
            default=[pid for pid in proposal.outgoing if pid in options],
            format_func=lambda pid: player_label(directory.lookup_by_id(pid), pid),
        )
        sync_outgoing(proposal, selected)
    with col_get:
        _render_receiving(proposal, directory, league_player_ids(bundle.rosters))

    if st.button("Clear Trade"):
        proposal.clear()
        st.rerun()

    st.divider()
    st.subheader("Trade Analysis")
    if not proposal.is_complete:
        st.info("Select players to analyze the trade: at least one you're giving away "
                "and one or two you're receiving.")
        return

    with st.spinner("Loading player stats..."):
        stats_by_id = load_trade_stats(proposal.all_player_ids(), directory)
    analysis = evaluate_trade(proposal.outgoing, proposal.incoming, directory, stats_by_id, my_roster.players)
    if analysis is None:
        return
    _logger.debug("Trade net value %.1f (%s)", analysis.net_value, analysis.verdict)
    _render_analysis(proposal, analysis, directory)
