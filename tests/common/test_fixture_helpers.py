"""Tests for scripts/common/fixture_helpers.py (pure HTML helpers, no Streamlit)."""

import pytest

import config
from scripts.common.fixture_helpers import (
    BAND_TEXT_COLORS,
    avg_difficulty_html,
    fdr_colors,
    fixture_badge_html,
    player_chip_html,
)
from scripts.common.fixture_index import PlayerFixture
from scripts.common.lineup_rules import Player, Position


class TestFdrColors:
    @pytest.mark.parametrize("fdr", [1, 2, 3, 4, 5])
    def test_palette(self, fdr):
        assert fdr_colors(fdr) == config.FDR_COLORS[fdr]

    def test_rounds_and_clamps(self):
        assert fdr_colors(2.4) == config.FDR_COLORS[2]
        assert fdr_colors(0) == config.FDR_COLORS[1]
        assert fdr_colors(9) == config.FDR_COLORS[5]

    def test_unknown_is_grey(self):
        assert fdr_colors(None) not in config.FDR_COLORS.values()


class TestFixtureBadge:
    def test_label_and_colour(self):
        html = fixture_badge_html(PlayerFixture(10, "LIV", "A", 5))
        assert "LIV (A)" in html
        assert config.FDR_COLORS[5][0] in html

    def test_missing_fixture(self):
        assert fixture_badge_html(None) == ""

    def test_escapes_opponent(self):
        html = fixture_badge_html(PlayerFixture(10, "<b>X</b>", "H", 2))
        assert "<b>" not in html
        assert "&lt;b&gt;X&lt;/b&gt;" in html


class TestPlayerChip:
    def test_selected_outline(self):
        player = Player(8, "Saka", Position.MID, 1)
        fixture = PlayerFixture(10, "CHE", "H", 3)
        selected = player_chip_html(player, fixture, selected=True)
        benched = player_chip_html(player, fixture, selected=False)
        assert "Saka" in selected and "MID" in selected and "CHE (H)" in selected
        assert "#8b5cf6" in selected
        assert "#8b5cf6" not in benched

    def test_escapes_name(self):
        html = player_chip_html(Player(1, "O'Brien & Co", Position.DEF, 1), None, selected=False)
        assert "&amp; Co" in html


class TestAvgDifficulty:
    def test_formatted(self):
        html = avg_difficulty_html(2.3333, "easy")
        assert "2.33" in html
        assert BAND_TEXT_COLORS["easy"] in html

    def test_empty_selection(self):
        html = avg_difficulty_html(None, "unknown")
        assert "—" in html
        assert BAND_TEXT_COLORS["unknown"] in html
