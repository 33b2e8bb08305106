"""
FPL Classic Mode API Functions.

Wrappers around the Classic FPL API endpoints (fantasy.premierleague.com/api/)
that feed the fixture planner: bootstrap data, a team's picks, and per-player
fixture summaries, plus the small lookups derived from them.
"""

import requests
import streamlit as st
from typing import Any, Callable, Dict, List, Optional, Set

import config
from scripts.common.error_helpers import get_logger
from scripts.common.lineup_rules import Player, Position

_logger = get_logger("fpl_app.fpl_classic_api")


# =============================================================================
# ENDPOINTS
# =============================================================================

@st.cache_data(show_spinner=False, ttl=300)
def get_classic_bootstrap_static() -> Optional[Dict[str, Any]]:
    """
    Fetch Classic FPL bootstrap data (players, teams, events).

    Endpoint: https://fantasy.premierleague.com/api/bootstrap-static/

    Returns:
    - Dictionary containing 'elements' (players), 'teams', 'events', etc.
    - None if the request fails.
    """
    try:
        url = f"{config.FPL_API_BASE}/bootstrap-static/"
        resp = requests.get(url, timeout=config.FPL_HTTP_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except Exception:
        _logger.warning("Failed to fetch classic bootstrap-static data", exc_info=True)
        return None


@st.cache_data(show_spinner=False, ttl=60)
def get_classic_team_picks(team_id: int, gw: int) -> Optional[Dict[str, Any]]:
    """
    Fetch a Classic FPL team's picks for a specific gameweek.

    Endpoint: https://fantasy.premierleague.com/api/entry/{team_id}/event/{gw}/picks/

    Parameters:
    - team_id: The FPL Classic team ID.
    - gw: The gameweek number.

    Returns:
    - Dictionary with 'picks', 'active_chip', 'entry_history', etc.
    - None if the request fails or team/gw not found.
    """
    if not team_id or not gw:
        return None
    try:
        url = f"{config.FPL_API_BASE}/entry/{team_id}/event/{gw}/picks/"
        resp = requests.get(url, timeout=config.FPL_HTTP_TIMEOUT)
        resp.raise_for_status()
        return resp.json()
    except Exception:
        _logger.warning("Failed to fetch classic team picks for team %s GW %s", team_id, gw, exc_info=True)
        return None


@st.cache_data(show_spinner=False, ttl=1800)
def get_player_fixtures(player_id: int) -> List[Dict[str, Any]]:
    """
    Fetch the upcoming-fixture list from a player's element summary.

    Endpoint: https://fantasy.premierleague.com/api/element-summary/{player_id}/

    Unlike the other wrappers this one raises on failure; the fixture index
    catches per player so one bad request doesn't sink the rest.
    """
    url = f"{config.FPL_API_BASE}/element-summary/{player_id}/"
    resp = requests.get(url, timeout=config.FPL_HTTP_TIMEOUT)
    resp.raise_for_status()
    return resp.json().get("fixtures", [])


# =============================================================================
# DERIVED LOOKUPS
# =============================================================================

def get_next_gameweek(bootstrap: Optional[Dict[str, Any]]) -> Optional[int]:
    """First unfinished event; else the current event; else None."""
    events = (bootstrap or {}).get("events", [])
    for event in events:
        if not event.get("finished"):
            return int(event["id"])
    for event in events:
        if event.get("is_current"):
            return int(event["id"])
    return None


def get_current_event(bootstrap: Optional[Dict[str, Any]]) -> Optional[int]:
    """The event flagged ``is_current``; else the latest finished one."""
    events = (bootstrap or {}).get("events", [])
    for event in events:
        if event.get("is_current"):
            return int(event["id"])
    finished = [int(e["id"]) for e in events if e.get("finished")]
    return max(finished) if finished else None


def build_club_resolver(bootstrap: Optional[Dict[str, Any]]) -> Callable[[int], str]:
    """Return ``club_id -> short_name`` (unknown ids render as 'T{id}')."""
    id_to_short = {
        int(t["id"]): str(t.get("short_name") or t.get("name") or t["id"])
        for t in (bootstrap or {}).get("teams", [])
    }

    def club_name(club_id: int) -> str:
        return id_to_short.get(int(club_id), f"T{club_id}")

    return club_name


def build_squad(bootstrap: Optional[Dict[str, Any]], picks: Optional[Dict[str, Any]]) -> List[Player]:
    """
    Turn a picks payload into Player objects, sorted GK -> DEF -> MID -> FWD.

    Picks whose element is missing from bootstrap are skipped with a warning.
    """
    if not bootstrap or not picks:
        return []
    elements = {int(e["id"]): e for e in bootstrap.get("elements", [])}
    squad = []
    for pick in picks.get("picks", []):
        el = elements.get(int(pick["element"]))
        if el is None:
            _logger.warning("Pick %s not found in bootstrap elements", pick.get("element"))
            continue
        try:
            position = Position.from_element_type(el["element_type"])
        except (KeyError, ValueError):
            _logger.warning("Unknown element_type for player %s", el.get("id"))
            continue
        squad.append(Player(
            id=int(el["id"]),
            web_name=el.get("web_name") or f"{el.get('first_name', '')} {el.get('second_name', '')}".strip(),
            position=position,
            team=int(el.get("team", 0)),
        ))
    squad.sort(key=lambda p: p.position.value)
    return squad


def get_starting_eleven(picks: Optional[Dict[str, Any]]) -> Optional[Set[int]]:
    """Element ids in pick slots 1-11, or None when picks are unavailable."""
    if not picks or not picks.get("picks"):
        return None
    return {int(p["element"]) for p in picks["picks"] if int(p.get("position", 99)) <= 11}
