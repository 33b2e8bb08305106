# scripts/common/difficulty_summary.py
"""
Review-stage aggregates for the fixture planner.

- Formation string (DEF-MID-FWD) for a complete XI, "-" otherwise
- Average fixture difficulty per gameweek (unknown fixture counts as 3)
- A per-gameweek player/fixture table for display
"""

from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from scripts.common.fixture_index import FixtureIndex
from scripts.common.lineup_rules import (
    DEFAULT_RULES,
    Player,
    Position,
    PositionRules,
    is_complete,
    position_counts,
)

NEUTRAL_DIFFICULTY = 3
FORMATION_PLACEHOLDER = "-"

# Review card colouring thresholds
EASY_MAX = 2.5
HARD_MIN = 3.5


def formation_of(selection: Iterable[int], squad: Iterable[Player], rules: PositionRules = DEFAULT_RULES) -> str:
    """
    Render a complete XI as "DEF-MID-FWD" (e.g. "3-4-3").

    Incomplete selections have no formation and return the placeholder.
    """
    selection = set(selection)
    squad = list(squad)
    if not is_complete(selection, squad, rules):
        return FORMATION_PLACEHOLDER
    counts = position_counts(selection, squad)
    return f"{counts[Position.DEF]}-{counts[Position.MID]}-{counts[Position.FWD]}"


def average_difficulty(fixture_index: FixtureIndex, gameweek: int, players: Iterable[Player]) -> Optional[float]:
    """Mean FDR of ``players`` in ``gameweek``; None for an empty selection."""
    scores = []
    for p in players:
        fx = fixture_index.lookup(p.id, gameweek)
        scores.append(fx.difficulty if fx is not None else NEUTRAL_DIFFICULTY)
    if not scores:
        return None
    return sum(scores) / len(scores)


def difficulty_band(avg: Optional[float]) -> str:
    if avg is None:
        return "unknown"
    if avg <= EASY_MAX:
        return "easy"
    if avg >= HARD_MIN:
        return "hard"
    return "medium"


def review_table(fixture_index: FixtureIndex, gameweek: int, players: Iterable[Player]) -> pd.DataFrame:
    """One row per player: Player, Pos, Fixture, FDR (blank fixture / NaN FDR when unknown)."""
    rows = []
    for p in players:
        fx = fixture_index.lookup(p.id, gameweek)
        rows.append({
            "Player": p.web_name,
            "Pos": p.position.label,
            "Fixture": fx.label if fx is not None else "",
            "FDR": fx.difficulty if fx is not None else float("nan"),
        })
    return pd.DataFrame(rows, columns=["Player", "Pos", "Fixture", "FDR"])


def summarize_gameweek(
    fixture_index: FixtureIndex,
    gameweek: int,
    selection: Iterable[int],
    squad: Iterable[Player],
    rules: PositionRules = DEFAULT_RULES,
) -> Dict[str, Any]:
    squad = list(squad)
    selection = set(selection)
    players = [p for p in squad if p.id in selection]
    avg = average_difficulty(fixture_index, gameweek, players)
    return {
        "gameweek": gameweek,
        "formation": formation_of(selection, squad, rules),
        "complete": is_complete(selection, squad, rules),
        "avg_difficulty": avg,
        "band": difficulty_band(avg),
        "players": players,
    }


def summarize_horizon(wizard) -> List[Dict[str, Any]]:
    """``summarize_gameweek`` for every gameweek of a started PlanningWizard."""
    return [
        summarize_gameweek(wizard.fixture_index, gw, wizard.store.selected_ids(gw), wizard.squad, wizard.store.rules)
        for gw in wizard.horizon
    ]


def summary_frame(summaries: List[Dict[str, Any]]) -> pd.DataFrame:
    """Compact GW / Formation / Avg FDR table across the horizon."""
    return pd.DataFrame(
        [{
            "GW": s["gameweek"],
            "Formation": s["formation"],
            "Avg FDR": round(s["avg_difficulty"], 2) if s["avg_difficulty"] is not None else float("nan"),
            "Players": len(s["players"]),
        } for s in summaries],
        columns=["GW", "Formation", "Avg FDR", "Players"],
    )
