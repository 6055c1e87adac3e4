# fantasy_exchange/league/trade_ideas.py
"""
Trade Ideas: league-wide surplus / deficit matches between teams.
"""

import pandas as pd
import streamlit as st

from fantasy_exchange.common.app_state import get_league_bundle, get_session_store
from fantasy_exchange.common.error_helpers import get_logger, show_api_error
from fantasy_exchange.common.league_helpers import build_owner_map, team_label
from fantasy_exchange.common.styled_tables import render_styled_table
from fantasy_exchange.trade.roster_needs import POSITION_TARGETS
from fantasy_exchange.trade.suggestions import MAX_SUGGESTIONS, build_suggestions, build_team_profiles

_logger = get_logger("fantasy_exchange.league.trade_ideas")


def needs_table(profiles) -> pd.DataFrame:
    rows = []
    for p in profiles:
        row = {"Team": p.name}
        for pos in POSITION_TARGETS:
            row[pos] = p.counts.get(pos, 0)
        row["Short"] = ", ".join(p.needs.deficit) or "-"
        row["Surplus"] = ", ".join(p.needs.surplus) or "-"
        rows.append(row)
    return pd.DataFrame(rows)


def suggestions_table(suggestions) -> pd.DataFrame:
    return pd.DataFrame(
        [{"From": s.from_team, "To": s.to_team, "Pos": s.position, "Idea": s.note} for s in suggestions],
        columns=["From", "To", "Pos", "Idea"],
    )


def show_trade_ideas_page():
    st.header("Trade Ideas")
    st.caption("Teams short at a position paired with teams carrying extra players there.")

    store = get_session_store()
    league_id = store.session.league_id
    if not league_id:
        st.info("Load your league on the Dashboard first.")
        return

    bundle = get_league_bundle(league_id)
    if bundle is None:
        show_api_error(f"loading league {league_id}", hint_key="league_id")
        return
    if not bundle.rosters:
        show_api_error("loading league rosters", hint_key="api_down")
        return

    owners = build_owner_map(bundle.users, bundle.rosters)
    my_roster_id = store.session.my_roster_id
    my_team = team_label(owners.get(my_roster_id)) if my_roster_id is not None else None
    only_mine = st.checkbox("Only ideas involving my team", value=False, disabled=my_team is None)

    suggestions = build_suggestions(
        bundle.users, bundle.rosters, bundle.directory,
        roster_id=my_roster_id if only_mine and my_team else None,
    )

    if suggestions:
        st.caption(f"Showing {len(suggestions)} idea(s), at most {MAX_SUGGESTIONS}.")
        render_styled_table(
            suggestions_table(suggestions),
            title="Suggested Trades",
            highlight_row=lambda row: my_team in (row["From"], row["To"]),
        )
    else:
        st.info("No complementary needs found between teams right now.")

    with st.expander("Positional needs by team"):
        profiles = build_team_profiles(bundle.users, bundle.rosters, bundle.directory)
        render_styled_table(needs_table(profiles), text_align={"Short": "center", "Surplus": "center"})
