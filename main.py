# main.py
import os

import streamlit as st

import config
from fantasy_exchange.common.app_state import clear_app_state, get_session_store
from fantasy_exchange.common.error_helpers import get_logger
from fantasy_exchange.league.dashboard import show_dashboard_page
from fantasy_exchange.league.player_stat_sheet import show_player_stat_sheet_page
from fantasy_exchange.league.trade_calculator import show_trade_calculator_page
from fantasy_exchange.league.trade_ideas import show_trade_ideas_page

_logger = get_logger("fantasy_exchange.main")

LOGO_PATH = "images/logo.png"

# ------------------------------------------------------------
# Page config (must be first Streamlit command in the script)
# ------------------------------------------------------------
st.set_page_config(
    page_title="Fantasy Exchange",
    page_icon="🏈",
    layout="wide",
)


def apply_custom_styles():
    st.markdown(
        """
        <style>
        [data-testid="stSidebar"] {
            background-color: #0f2a4a;
        }
        [data-testid="stSidebar"] * {
            color: #ffffff;
            font-size: 16px;
        }
        .main h1, .main h2, .main h3 {
            color: #0f2a4a;
        }
        </style>
        """,
        unsafe_allow_html=True
    )


# ------------------------------------------------------------
# Landing / login
# ------------------------------------------------------------
def render_app_home():
    st.title("Fantasy Exchange")
    st.markdown(
        """
        **Smarter fantasy trades for your Sleeper league.**

        Connect your league, see strengths and gaps, and get clean, actionable trade ideas.

        - **Dashboard**: your roster, league standings and weekly schedule
        - **Player Stats**: season totals and game logs for any rostered player
        - **Trade Calculator**: value both sides of a trade and its positional impact
        - **Trade Ideas**: teams whose needs line up with yours
        """
    )
    store = get_session_store()
    with st.expander("Current session"):
        st.write({
            "User": store.session.username,
            "League ID": store.session.league_id or "(not set)",
            "My Roster ID": store.session.my_roster_id,
            "Stats API key": "set" if config.STATS_API_KEY else "missing",
        })


def render_login():
    st.title("Fantasy Exchange")
    st.caption("Smarter fantasy trades for your Sleeper league")
    store = get_session_store()
    with st.form("fx_login_form"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in")
    if submitted:
        try:
            store.login(username, password)
        except ValueError as e:
            st.error(str(e))
            return
        st.rerun()


def logout():
    store = get_session_store()
    _logger.info("User %s logged out", store.session.username)
    store.logout()
    clear_app_state()


SECTIONS = {
    "Home": {
        "Home": render_app_home,
    },
    "League": {
        "Dashboard": show_dashboard_page,
        "Player Stats": show_player_stat_sheet_page,
        "Trade Calculator": show_trade_calculator_page,
        "Trade Ideas": show_trade_ideas_page,
    },
}


# ------------------------------------------------------------
# Main
# ------------------------------------------------------------
def main():
    apply_custom_styles()
    store = get_session_store()
    if not store.is_authenticated:
        render_login()
        return

    st.sidebar.title("Navigation")
    if os.path.exists(LOGO_PATH):
        st.sidebar.image(LOGO_PATH, use_container_width=True)

    section = st.sidebar.selectbox("Choose Section", list(SECTIONS.keys()), index=1)
    pages = SECTIONS[section]
    subpage = st.sidebar.radio(f"{section} Pages", list(pages.keys()))

    st.sidebar.caption(f"Signed in as **{store.session.username}**")
    if st.sidebar.button("Log out"):
        logout()
        st.rerun()

    pages[subpage]()


if __name__ == "__main__":
    main()
