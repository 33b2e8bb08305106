"""
Shared test fixtures for the FPL Fixture Planner.

This module:
1. Neutralizes Streamlit caching decorators before any app code imports
2. Sets environment variables so config.py doesn't depend on a local .env
3. Provides a 15-player squad, fixture summaries and bootstrap/picks payloads
4. Provides a mock_streamlit fixture that patches all st.* display calls
"""

import os
from unittest.mock import MagicMock, patch

import pytest

# =====================================================================
# 1. Neutralize Streamlit caching BEFORE any app modules are imported
# =====================================================================
import streamlit as st


def _passthrough_decorator(*args, **kwargs):
    """Decorator that does nothing — returns the function unchanged."""
    if args and callable(args[0]):
        return args[0]
    def wrapper(fn):
        return fn
    return wrapper


st.cache_data = _passthrough_decorator
st.cache_resource = _passthrough_decorator

# =====================================================================
# 2. Environment
# =====================================================================
os.environ["FPL_CLASSIC_TEAM_ID"] = "11111"
os.environ["FPL_API_BASE"] = "https://fantasy.premierleague.com/api"
os.environ["FPL_PLANNER_DEFAULT_HORIZON"] = "3"
os.environ["FPL_LOG_LEVEL"] = "INFO"

from scripts.common.fixture_index import FixtureIndex, PlayerFixture  # noqa: E402
from scripts.common.lineup_rules import Player, Position  # noqa: E402


# =====================================================================
# 3. Squad / fixture data
# =====================================================================
# 2 GK, 5 DEF, 6 MID, 2 FWD = 15 (ids 1..15, clubs 1..5)
_SQUAD_LAYOUT = [
    (1, "Raya", Position.GK, 1),
    (2, "Pickford", Position.GK, 2),
    (3, "Saliba", Position.DEF, 1),
    (4, "Gabriel", Position.DEF, 1),
    (5, "Van Dijk", Position.DEF, 3),
    (6, "Gvardiol", Position.DEF, 4),
    (7, "Porro", Position.DEF, 5),
    (8, "Salah", Position.MID, 3),
    (9, "Saka", Position.MID, 1),
    (10, "Palmer", Position.MID, 2),
    (11, "Foden", Position.MID, 4),
    (12, "Maddison", Position.MID, 5),
    (13, "Mbeumo", Position.MID, 2),
    (14, "Haaland", Position.FWD, 4),
    (15, "Watkins", Position.FWD, 5),
]

# A complete 4-4-2 from the squad above
STARTING_XI = {1, 3, 4, 5, 6, 8, 9, 10, 11, 14, 15}


def make_squad():
    return [Player(id=i, web_name=n, position=pos, team=t) for i, n, pos, t in _SQUAD_LAYOUT]


def club_short_name(club_id):
    return {1: "ARS", 2: "CHE", 3: "LIV", 4: "MCI", 5: "TOT", 6: "EVE", 7: "NEW"}.get(club_id, f"T{club_id}")


def make_fixture_summary(player_id, club_id, start_gw=10, weeks=5):
    """Element-summary style fixtures: one finished GW9 row plus ``weeks`` upcoming ones."""
    rows = [{
        "event": start_gw - 1, "finished": True, "team_h": club_id, "team_a": 7,
        "is_home": True, "difficulty": 2,
    }]
    for i, gw in enumerate(range(start_gw, start_gw + weeks)):
        is_home = (player_id + i) % 2 == 0
        opponent = 6 if i % 2 == 0 else 7
        rows.append({
            "event": gw,
            "finished": False,
            "team_h": club_id if is_home else opponent,
            "team_a": opponent if is_home else club_id,
            "is_home": is_home,
            "difficulty": 1 + (player_id + i) % 5,
        })
    # Postponed fixture without a gameweek
    rows.append({"event": None, "finished": False, "team_h": club_id, "team_a": 6,
                 "is_home": True, "difficulty": 4})
    return rows


@pytest.fixture
def squad():
    return make_squad()


@pytest.fixture
def starting_xi():
    return set(STARTING_XI)


@pytest.fixture
def fixture_index():
    """Every player has an indexed fixture GW10-14."""
    by_player = {}
    for i, _, _, club in _SQUAD_LAYOUT:
        gw_map = {}
        for k, gw in enumerate(range(10, 15)):
            gw_map[gw] = PlayerFixture(gameweek=gw, opponent="EVE", venue="H" if k % 2 else "A",
                                       difficulty=1 + (i + k) % 5)
        by_player[i] = gw_map
    return FixtureIndex(by_player)


@pytest.fixture
def empty_fixture_index(squad):
    return FixtureIndex({p.id: {} for p in squad})


@pytest.fixture
def mock_bootstrap_data():
    """Bootstrap-static payload covering the 15-player squad."""
    return {
        "teams": [{"id": cid, "short_name": club_short_name(cid), "name": f"Club {cid}"}
                  for cid in range(1, 8)],
        "elements": [
            {"id": i, "web_name": n, "first_name": "First", "second_name": n,
             "element_type": pos.value, "team": t}
            for i, n, pos, t in _SQUAD_LAYOUT
        ],
        "events": [
            {"id": 8, "finished": True, "is_current": False},
            {"id": 9, "finished": True, "is_current": True},
            {"id": 10, "finished": False, "is_current": False, "is_next": True},
            {"id": 11, "finished": False, "is_current": False},
        ],
    }


@pytest.fixture
def mock_picks_data():
    """Picks for GW9: slots 1-11 are STARTING_XI, 12-15 the bench."""
    starters = sorted(STARTING_XI)
    bench = [i for i in range(1, 16) if i not in STARTING_XI]
    return {
        "active_chip": None,
        "picks": [{"element": el, "position": slot}
                  for slot, el in enumerate(starters + bench, start=1)],
    }


# =====================================================================
# 4. Streamlit no-op fixture
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


class StopPage(Exception):
    """Raised by the patched st.stop()."""


@pytest.fixture
def mock_streamlit():
    """
    Patches all st.* display functions as no-ops.
    st.button returns False (never clicked), st.columns()/st.expander()
    return context-manager mocks, st.session_state is a plain AttrDict.
    """
    patches = {}
    active_patches = []

    display_funcs = [
        "title", "header", "subheader", "markdown", "write", "text",
        "dataframe", "table", "metric", "caption",
        "info", "warning", "error", "success",
        "image", "plotly_chart", "set_page_config", "divider", "toast",
    ]
    for func_name in display_funcs:
        p = patch(f"streamlit.{func_name}", new_callable=MagicMock)
        active_patches.append(p)
        patches[func_name] = p.start()

    def mock_choice(label="", options=None, *args, **kwargs):
        opts = list(options or kwargs.get("options", []))
        idx = kwargs.get("index", 0)
        if opts and 0 <= idx < len(opts):
            return opts[idx]
        return opts[0] if opts else None

    for name in ("selectbox", "radio"):
        p = patch(f"streamlit.{name}", side_effect=mock_choice)
        active_patches.append(p)
        patches[name] = p.start()

    for name, ret in [("button", False), ("text_input", "")]:
        p = patch(f"streamlit.{name}", return_value=ret)
        active_patches.append(p)
        patches[name] = p.start()

    def _mock_stop():
        raise StopPage("st.stop()")

    p = patch("streamlit.stop", side_effect=_mock_stop)
    active_patches.append(p)
    patches["stop"] = p.start()
    patches["StopPage"] = StopPage

    p = patch("streamlit.rerun", new_callable=MagicMock)
    active_patches.append(p)
    patches["rerun"] = p.start()

    def mock_columns(spec=None, *args, **kwargs):
        n = spec if isinstance(spec, int) else len(spec) if isinstance(spec, (list, tuple)) else 2
        return [_MockColumn() for _ in range(n)]

    for name, side_eff in [
        ("columns", mock_columns),
        ("expander", lambda *a, **kw: _MockColumn()),
        ("spinner", lambda *a, **kw: _MockColumn()),
    ]:
        p = patch(f"streamlit.{name}", side_effect=side_eff)
        active_patches.append(p)
        patches[name] = p.start()

    sidebar_mock = MagicMock()
    p = patch("streamlit.sidebar", sidebar_mock)
    active_patches.append(p)
    patches["sidebar"] = p.start()

    p = patch("streamlit.session_state", _SessionState())
    active_patches.append(p)
    patches["session_state"] = p.start()

    yield patches

    for p in active_patches:
        p.stop()
