"""
Fixture difficulty display helpers.

FDR colours, fixture badges and player chips as small HTML snippets to render
via ``st.markdown(..., unsafe_allow_html=True)``.
"""

from html import escape
from typing import Optional

import config
from scripts.common.fixture_index import PlayerFixture
from scripts.common.lineup_rules import Player

# Unknown fixture: slate grey
_UNKNOWN_COLORS = ("#475569", "#ffffff")

BAND_TEXT_COLORS = {
    "easy": "#34d399",
    "medium": "#facc15",
    "hard": "#f87171",
    "unknown": "#94a3b8",
}


def fdr_colors(difficulty: Optional[float]):
    """(bg, text) colours for an FDR value; None -> grey, floats are rounded and clamped to 1..5."""
    if difficulty is None:
        return _UNKNOWN_COLORS
    k = max(1, min(5, int(round(float(difficulty)))))
    return config.FDR_COLORS[k]


def fixture_badge_html(fixture: Optional[PlayerFixture]) -> str:
    if fixture is None:
        return ""
    bg, txt = fdr_colors(fixture.difficulty)
    return (
        f'<span style="background:{bg};color:{txt};border-radius:4px;'
        f'padding:1px 6px;font-size:11px;font-weight:600;white-space:nowrap;">'
        f'{escape(fixture.label)}</span>'
    )


def player_chip_html(player: Player, fixture: Optional[PlayerFixture], selected: bool) -> str:
    """Position dot + name + fixture badge; selected players get the purple outline."""
    pos_bg = config.POSITION_COLORS.get(player.position.label, "#64748b")
    border = "2px solid #8b5cf6" if selected else "2px solid transparent"
    bg = "rgba(139,92,246,0.2)" if selected else "#2a2a35"
    return (
        f'<div style="background:{bg};border:{border};border-radius:8px;padding:6px;'
        f'text-align:center;margin-bottom:4px;">'
        f'<span style="background:{pos_bg};color:#000;border-radius:999px;padding:2px 6px;'
        f'font-size:10px;font-weight:700;">{player.position.label}</span> '
        f'<span style="color:#fff;font-size:12px;font-weight:500;">{escape(player.web_name)}</span><br/>'
        f'{fixture_badge_html(fixture)}'
        f'</div>'
    )


def avg_difficulty_html(avg: Optional[float], band: str) -> str:
    color = BAND_TEXT_COLORS.get(band, BAND_TEXT_COLORS["unknown"])
    text = f"{avg:.2f}" if avg is not None else "—"
    return f'<span style="color:{color};font-weight:700;">{text}</span>'
