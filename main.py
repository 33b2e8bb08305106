# main.py
import os

import streamlit as st

import config
from scripts.classic.fixture_planner import show_fixture_planner_page
from scripts.common.fpl_classic_api import get_classic_bootstrap_static, get_next_gameweek

# ------------------------------------------------------------
# Page config (must be first Streamlit command in the script)
# ------------------------------------------------------------
st.set_page_config(
    page_title="FPL Manager — Fixture Planner",
    page_icon="⚽",
    layout="wide",
)

LOGO_PATH = "images/fpl_logo1.jpeg"


def render_app_home():
    st.title("FPL Manager — App Home")
    st.markdown(
        """
        Plan your **Classic** starting 11 across the next few gameweeks.

        **How it works:**
        - Pick how many gameweeks to plan (2–5)
        - Choose a valid starting 11 for each gameweek, guided by fixture difficulty
        - Review formations and average difficulty across the whole run
        """
    )

    next_gw = get_next_gameweek(get_classic_bootstrap_static())
    col1, col2 = st.columns(2)
    with col1:
        st.metric("Next Gameweek", f"GW{next_gw}" if next_gw else "—")
    with col2:
        st.metric("Classic Team ID", config.FPL_CLASSIC_TEAM_ID or "Not set")


SECTIONS = {
    "FPL App Home": {
        "Home": render_app_home,
    },
    "Classic": {
        "Fixture Planner": show_fixture_planner_page,
    },
}


def main():
    st.sidebar.title("Navigation")
    if os.path.exists(LOGO_PATH):
        st.sidebar.image(LOGO_PATH, use_container_width=True)

    section = st.sidebar.radio("Choose Section", list(SECTIONS.keys()))
    pages = SECTIONS[section]
    subpage = st.sidebar.radio(f"{section} Pages", list(pages.keys()))
    pages[subpage]()


if __name__ == "__main__":
    main()
