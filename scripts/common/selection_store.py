# scripts/common/selection_store.py
"""
Per-gameweek starting XI state for one planning session.

Add/Remove are the only mutation paths; both the click-to-toggle and the
move-to-zone controls on the planner page end up here. An illegal add is a
silent no-op.

Zero Streamlit imports.
"""

from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from scripts.common.lineup_rules import DEFAULT_RULES, Player, PositionRules, can_add


class SelectionStore:
    def __init__(self, squad: Iterable[Player], rules: PositionRules = DEFAULT_RULES):
        self.squad: Tuple[Player, ...] = tuple(squad)
        self.rules = rules
        self._squad_ids = {p.id for p in self.squad}
        self._selections: Dict[int, Set[int]] = {}

    @property
    def gameweeks(self) -> Tuple[int, ...]:
        return tuple(self._selections)

    def seed(self, horizon: Iterable[int], starting_eleven: Optional[Iterable[int]] = None) -> None:
        """
        Reset the store to one selection per horizon gameweek.

        Each gameweek gets its own copy of ``starting_eleven`` (ids outside
        the squad are dropped); with no known eleven every gameweek is empty.
        """
        seed_ids = {pid for pid in (starting_eleven or ()) if pid in self._squad_ids}
        self._selections = {int(gw): set(seed_ids) for gw in horizon}

    def _selection(self, gameweek: int) -> Set[int]:
        try:
            return self._selections[gameweek]
        except KeyError:
            raise KeyError(f"GW{gameweek} is not in the planning horizon") from None

    def add(self, gameweek: int, player_id: int) -> bool:
        """Add ``player_id`` if the formation rules allow it. Returns True if changed."""
        selection = self._selections.get(gameweek)
        if selection is None or not can_add(selection, self.squad, player_id, self.rules):
            return False
        selection.add(player_id)
        return True

    def remove(self, gameweek: int, player_id: int) -> bool:
        selection = self._selections.get(gameweek)
        if selection is None or player_id not in selection:
            return False
        selection.discard(player_id)
        return True

    def contains(self, gameweek: int, player_id: int) -> bool:
        return player_id in self._selection(gameweek)

    def selected_ids(self, gameweek: int) -> FrozenSet[int]:
        return frozenset(self._selection(gameweek))

    def selected(self, gameweek: int) -> List[Player]:
        ids = self._selection(gameweek)
        return [p for p in self.squad if p.id in ids]

    def bench(self, gameweek: int) -> List[Player]:
        ids = self._selection(gameweek)
        return [p for p in self.squad if p.id not in ids]
