import config
import plotly.graph_objects as go
import streamlit as st
from typing import Optional

from scripts.common.difficulty_summary import (
    formation_of,
    review_table,
    summarize_horizon,
    summary_frame,
)
from scripts.common.error_helpers import get_logger, hint_text, show_retryable_error
from scripts.common.fixture_helpers import BAND_TEXT_COLORS, avg_difficulty_html, player_chip_html
from scripts.common.fixture_index import FixtureIndex
from scripts.common.fpl_classic_api import (
    build_club_resolver,
    build_squad,
    get_classic_bootstrap_static,
    get_classic_team_picks,
    get_current_event,
    get_next_gameweek,
    get_player_fixtures,
    get_starting_eleven,
)
from scripts.common.lineup_rules import Position
from scripts.common.planner_wizard import HORIZON_CHOICES, HorizonUnavailableError, PlanningWizard, Step

_logger = get_logger("fpl_app.fixture_planner")

PLANNER_KEY = "fixture_planner"
PLANNER_TEAM_KEY = "fixture_planner_team_id"

ZONE_STARTING = "Starting XI"
ZONE_BENCH = "Bench"

# Pitch rows, top to bottom
_PITCH_ORDER = [Position.FWD, Position.MID, Position.DEF, Position.GK]

_BAND_BAR_COLORS = {
    "easy": "#22c55e",
    "medium": "#eab308",
    "hard": "#ef4444",
    "unknown": BAND_TEXT_COLORS["unknown"],
}


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------
def create_planner(team_id: int) -> Optional[PlanningWizard]:
    """
    Load everything the planner needs for ``team_id``.

    Returns None when the squad can't be loaded. Raises
    HorizonUnavailableError when the next gameweek can't be determined.
    """
    bootstrap = get_classic_bootstrap_static()
    next_gw = get_next_gameweek(bootstrap)
    if next_gw is None:
        raise HorizonUnavailableError("unable to determine current gameweek")

    picks = get_classic_team_picks(team_id, get_current_event(bootstrap))
    squad = build_squad(bootstrap, picks)
    if not squad:
        return None

    fixture_index = FixtureIndex.build(squad, get_player_fixtures, build_club_resolver(bootstrap))
    return PlanningWizard(
        squad,
        fixture_index,
        next_gw,
        starting_eleven=get_starting_eleven(picks),
        horizon_length=config.PLANNER_DEFAULT_HORIZON,
    )


def reset_planner() -> None:
    st.session_state.pop(PLANNER_KEY, None)
    st.session_state.pop(PLANNER_TEAM_KEY, None)


def _parse_team_id(raw) -> Optional[int]:
    try:
        team_id = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return team_id if team_id > 0 else None


# ---------------------------------------------------------------------------
# Button handlers (both input paths end in wizard.add / wizard.remove)
# ---------------------------------------------------------------------------
def handle_toggle(wizard: PlanningWizard, player_id: int) -> None:
    gw = wizard.active_gameweek
    if gw is None:
        return
    if wizard.store.contains(gw, player_id):
        wizard.remove(player_id)
    else:
        wizard.add(player_id)


def handle_drop(wizard: PlanningWizard, player_id: Optional[int], zone: str) -> None:
    if player_id is None:
        return
    if zone == ZONE_STARTING:
        wizard.add(player_id)
    elif zone == ZONE_BENCH:
        wizard.remove(player_id)


def handle_done(wizard: PlanningWizard) -> None:
    if wizard.done():
        reset_planner()


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------
def _difficulty_bar(summaries) -> go.Figure:
    """Average FDR per planned gameweek, coloured by band."""
    if not summaries:
        return go.Figure()
    x = [f"GW{s['gameweek']}" for s in summaries]
    # Empty selections have no average: no bar height, grey "unknown" label
    y = [s["avg_difficulty"] for s in summaries]
    colors = [_BAND_BAR_COLORS.get(s["band"], BAND_TEXT_COLORS["unknown"]) for s in summaries]
    text = [f"{v:.2f}" if v is not None else "—" for v in y]

    fig = go.Figure(go.Bar(x=x, y=y, marker_color=colors, text=text, textposition="outside"))
    fig.update_layout(
        title="Average Fixture Difficulty (Starting XI)",
        yaxis=dict(title="Avg FDR", range=[0, 5]),
        margin=dict(l=10, r=10, t=50, b=10),
        plot_bgcolor="white",
    )
    return fig


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------
def _render_setup(wizard: PlanningWizard) -> None:
    st.subheader("How many gameweeks to plan?")
    st.caption(f"Next upcoming gameweek: GW{wizard.next_gameweek}")

    choices = list(HORIZON_CHOICES)
    n = st.radio(
        "Gameweeks",
        choices,
        index=choices.index(wizard.horizon_length),
        format_func=lambda v: f"{v} GWs",
        horizontal=True,
        key="fixture_planner_horizon",
    )
    wizard.choose_horizon(n)
    horizon = wizard.preview_horizon()
    st.markdown(f"Planning: **GW{horizon[0]} → GW{horizon[-1]}**")

    st.button("Start Planning →", type="primary", on_click=wizard.start, key="fixture_planner_start")


def _render_player(wizard: PlanningWizard, player, gw: int, selected: bool) -> None:
    fixture = wizard.fixture_index.lookup(player.id, gw)
    st.markdown(player_chip_html(player, fixture, selected), unsafe_allow_html=True)
    st.button(
        "Bench" if selected else "Start",
        key=f"fp_toggle_{gw}_{player.id}",
        on_click=handle_toggle,
        args=(wizard, player.id),
        use_container_width=True,
    )


def _render_select(wizard: PlanningWizard) -> None:
    gw = wizard.active_gameweek
    idx = wizard.step_index()
    horizon = wizard.horizon
    selected = wizard.store.selected(gw)
    bench = wizard.store.bench(gw)

    back_label = "← Back to Setup" if idx == 0 else f"← GW{horizon[idx - 1]}"
    st.button(back_label, on_click=wizard.back, key="fixture_planner_back")
    st.subheader(f"GW{gw} Selection")
    st.caption(f"Step {idx + 1} of {len(horizon)} • Click a player to toggle, or use Move player below")

    # Progress bar: one button per gameweek
    for col, pgw in zip(st.columns(len(horizon)), horizon):
        with col:
            st.button(
                f"GW{pgw}" + (" ✓" if wizard.is_complete(pgw) else ""),
                key=f"fp_jump_{pgw}",
                type="primary" if pgw == gw else "secondary",
                disabled=not wizard.can_jump_to(pgw),
                on_click=wizard.jump_to,
                args=(pgw,),
                use_container_width=True,
            )

    pitch, bench_col = st.columns([4, 1])
    with pitch:
        formation = formation_of(wizard.store.selected_ids(gw), wizard.squad)
        count_color = "#34d399" if len(selected) == 11 else "#fb923c"
        st.markdown(
            f"**Starting 11** &nbsp; <span style='color:{count_color}'>{len(selected)}/11</span>"
            f" &nbsp; <span style='color:#a78bfa;font-weight:700'>{formation}</span>",
            unsafe_allow_html=True,
        )
        for pos in _PITCH_ORDER:
            row = [p for p in selected if p.position is pos]
            if not row:
                continue
            for col, player in zip(st.columns(len(row)), row):
                with col:
                    _render_player(wizard, player, gw, selected=True)

    with bench_col:
        st.markdown(f"**Bench ({len(bench)})**")
        for player in bench:
            _render_player(wizard, player, gw, selected=False)

    with st.expander("Move player"):
        names = {p.id: f"{p.web_name} ({p.position.label})" for p in wizard.squad}
        player_id = st.selectbox(
            "Player", list(names), format_func=lambda pid: names[pid], key=f"fp_move_player_{gw}"
        )
        zone = st.radio("Move to", [ZONE_STARTING, ZONE_BENCH], horizontal=True, key=f"fp_move_zone_{gw}")
        st.button("Move", key=f"fp_move_{gw}", on_click=handle_drop, args=(wizard, player_id, zone))

    next_label = "Review All →" if wizard.is_last_gameweek() else f"Next: GW{horizon[idx + 1]} →"
    st.button(
        next_label,
        type="primary",
        disabled=not wizard.can_next(),
        on_click=wizard.next,
        key="fixture_planner_next",
    )
    if not wizard.can_next():
        st.caption("Pick exactly 11 with 1 GK, at least 3 DEF and at least 1 FWD to continue.")


def _render_review(wizard: PlanningWizard) -> None:
    st.button("← Back to Selection", on_click=wizard.back, key="fixture_planner_review_back")
    st.subheader("Review All Selections")
    st.caption("Your planned starting 11 for each gameweek")

    summaries = summarize_horizon(wizard)
    st.plotly_chart(_difficulty_bar(summaries), use_container_width=True)

    cols = st.columns(min(3, len(summaries)))
    for i, summary in enumerate(summaries):
        gw = summary["gameweek"]
        with cols[i % len(cols)]:
            st.markdown(f"### GW{gw} &nbsp; <span style='color:#a78bfa'>{summary['formation']}</span>",
                        unsafe_allow_html=True)
            st.markdown(
                "Avg Difficulty: " + avg_difficulty_html(summary["avg_difficulty"], summary["band"]),
                unsafe_allow_html=True,
            )
            st.dataframe(review_table(wizard.fixture_index, gw, summary["players"]),
                         use_container_width=True, hide_index=True)
            st.button("Edit", key=f"fp_edit_{gw}", on_click=wizard.edit_gameweek, args=(gw,),
                      use_container_width=True)

    with st.expander("Show summary table"):
        st.dataframe(summary_frame(summaries), use_container_width=True, hide_index=True)

    st.button("Done", type="primary", on_click=handle_done, args=(wizard,), key="fixture_planner_done")


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
def show_fixture_planner_page():
    st.title("Fixture Planner")
    st.write("Plan your starting 11 for upcoming gameweeks based on fixtures.")

    raw_team_id = st.text_input(
        "Classic Team ID",
        value=str(config.FPL_CLASSIC_TEAM_ID or ""),
        key="fixture_planner_team_input",
    )
    team_id = _parse_team_id(raw_team_id)
    if team_id is None:
        st.info("Please set up your team first: enter your FPL Classic team ID above "
                "or set `FPL_CLASSIC_TEAM_ID` in `.env`.")
        st.stop()

    # A different team means a different squad: start over
    if st.session_state.get(PLANNER_TEAM_KEY) != team_id:
        reset_planner()

    wizard = st.session_state.get(PLANNER_KEY)
    if wizard is None:
        try:
            with st.spinner("Loading squad and fixtures..."):
                wizard = create_planner(team_id)
        except HorizonUnavailableError as e:
            _logger.warning("Planner unavailable for team %s: %s", team_id, e)
            if show_retryable_error("determining the planning horizon", hint_key="horizon",
                                    retry_key="fixture_planner_retry"):
                get_classic_bootstrap_static.clear()
                st.rerun()
            st.stop()
        if wizard is None:
            st.info(f"Couldn't load a squad for this team. {hint_text('squad')} {hint_text('preseason')}")
            st.stop()
        st.session_state[PLANNER_KEY] = wizard
        st.session_state[PLANNER_TEAM_KEY] = team_id

    if wizard.step is Step.SETUP:
        _render_setup(wizard)
    elif wizard.step is Step.SELECT:
        _render_select(wizard)
    elif wizard.step is Step.REVIEW:
        _render_review(wizard)

    st.divider()
    st.button("Reset planner", on_click=reset_planner, key="fixture_planner_reset")
