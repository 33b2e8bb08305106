# scripts/common/fixture_index.py
"""
Per-player fixture lookup for the planning horizon.

``FixtureIndex.build`` asks for every squad player's element-summary fixtures
in parallel (one request per player) and indexes the unfinished ones by
gameweek. A player whose request fails simply has no fixtures; the rest of
the squad is unaffected.

Zero Streamlit imports.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from scripts.common.error_helpers import get_logger
from scripts.common.lineup_rules import Player

_logger = get_logger("fpl_app.fixture_index")

FixtureSummaryProvider = Callable[[int], Optional[List[Dict[str, Any]]]]
ClubNameResolver = Callable[[int], str]


@dataclass(frozen=True)
class PlayerFixture:
    gameweek: int
    opponent: str
    venue: str  # 'H' or 'A'
    difficulty: int  # 1 (easiest) .. 5 (hardest)

    @property
    def label(self) -> str:
        return f"{self.opponent} ({self.venue})"


def _to_player_fixture(raw: Dict[str, Any], club_name: ClubNameResolver) -> PlayerFixture:
    is_home = bool(raw.get("is_home"))
    opponent_id = raw.get("team_a") if is_home else raw.get("team_h")
    return PlayerFixture(
        gameweek=int(raw["event"]),
        opponent=club_name(int(opponent_id)) if opponent_id is not None else "?",
        venue="H" if is_home else "A",
        difficulty=int(raw.get("difficulty") or 3),
    )


def index_fixtures(fixtures: Iterable[Dict[str, Any]], club_name: ClubNameResolver) -> Dict[int, PlayerFixture]:
    """
    Keep unfinished fixtures with a known gameweek, keyed by gameweek.

    A second fixture in the same gameweek overwrites the first.
    """
    by_gw: Dict[int, PlayerFixture] = {}
    for raw in fixtures or []:
        if raw.get("finished") or not raw.get("event"):
            continue
        fx = _to_player_fixture(raw, club_name)
        by_gw[fx.gameweek] = fx
    return by_gw


class FixtureIndex:
    """Read-only map of player id -> gameweek -> PlayerFixture."""

    def __init__(self, fixtures_by_player: Mapping[int, Mapping[int, PlayerFixture]]):
        self._data = {
            int(pid): MappingProxyType(dict(gw_map))
            for pid, gw_map in fixtures_by_player.items()
        }

    @classmethod
    def build(
        cls,
        squad: Iterable[Player],
        fetch_summary: FixtureSummaryProvider,
        club_name: ClubNameResolver,
    ) -> "FixtureIndex":
        """
        Fetch and index fixtures for every squad player.

        Each player is fetched independently on its own worker; a failed or
        empty response records an empty map for that player.
        """
        players = list(squad)
        result: Dict[int, Dict[int, PlayerFixture]] = {p.id: {} for p in players}
        if not players:
            return cls(result)

        with ThreadPoolExecutor(max_workers=len(players)) as executor:
            future_to_player = {
                executor.submit(fetch_summary, p.id): p
                for p in players
            }
            for future in as_completed(future_to_player):
                player = future_to_player[future]
                try:
                    fixtures = future.result()
                    if fixtures is None:
                        _logger.warning("No fixture summary returned for player %s", player.id)
                        continue
                    result[player.id] = index_fixtures(fixtures, club_name)
                except Exception:
                    _logger.warning("Failed to load fixtures for player %s (%s)",
                                    player.id, player.web_name, exc_info=True)

        _logger.info("Indexed fixtures for %d players (%d without data)",
                     len(result), sum(1 for m in result.values() if not m))
        return cls(result)

    def lookup(self, player_id: int, gameweek: int) -> Optional[PlayerFixture]:
        gw_map = self._data.get(player_id)
        if gw_map is None:
            return None
        return gw_map.get(gameweek)

    def fixtures_for(self, player_id: int) -> Mapping[int, PlayerFixture]:
        return self._data.get(player_id, MappingProxyType({}))

    def __contains__(self, player_id) -> bool:
        return player_id in self._data

    def __len__(self) -> int:
        return len(self._data)
