# scripts/common/lineup_rules.py
"""
Starting XI formation rules for the fixture planner.

Positions and per-position caps are kept as data (``DEFAULT_RULES``) so a
different formation policy only needs a new ``PositionRules`` instance.
Every check here is a pure function of (selection ids, squad).

Zero Streamlit imports.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Mapping, Optional, Tuple


class Position(Enum):
    """FPL playing position, keyed by the API's ``element_type``."""
    GK = 1
    DEF = 2
    MID = 3
    FWD = 4

    @classmethod
    def from_element_type(cls, element_type) -> "Position":
        return cls(int(element_type))

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class Player:
    id: int
    web_name: str
    position: Position
    team: int


def _default_max() -> Dict[Position, int]:
    return {Position.GK: 1, Position.DEF: 5, Position.MID: 5, Position.FWD: 3}


def _default_min() -> Dict[Position, int]:
    # MID has no minimum of its own
    return {Position.GK: 1, Position.DEF: 3, Position.FWD: 1}


@dataclass(frozen=True)
class PositionRules:
    xi_size: int = 11
    max_per_position: Mapping[Position, int] = field(default_factory=_default_max)
    min_per_position: Mapping[Position, int] = field(default_factory=_default_min)

    def max_for(self, position: Position) -> int:
        return self.max_per_position.get(position, 0)

    def min_for(self, position: Position) -> int:
        return self.min_per_position.get(position, 0)


DEFAULT_RULES = PositionRules()


def squad_by_id(squad: Iterable[Player]) -> Dict[int, Player]:
    return {p.id: p for p in squad}


def position_counts(selection: Iterable[int], squad: Iterable[Player]) -> Dict[Position, int]:
    """Count selected players per position. Ids not in the squad are ignored."""
    lookup = squad_by_id(squad)
    counts = {pos: 0 for pos in Position}
    for pid in selection:
        player = lookup.get(pid)
        if player is not None:
            counts[player.position] += 1
    return counts


def can_add(
    selection: Iterable[int],
    squad: Iterable[Player],
    candidate_id: int,
    rules: PositionRules = DEFAULT_RULES,
) -> bool:
    """
    Would adding ``candidate_id`` keep the selection legal?

    False when the candidate is already selected, is not a squad member, the
    XI is already full, or the candidate's position is at its cap.
    """
    selection = set(selection)
    lookup = squad_by_id(squad)
    candidate: Optional[Player] = lookup.get(candidate_id)
    if candidate is None or candidate_id in selection:
        return False
    if len(selection) >= rules.xi_size:
        return False
    counts = position_counts(selection, lookup.values())
    return counts[candidate.position] + 1 <= rules.max_for(candidate.position)


def is_complete_counts(counts: Mapping[Position, int], rules: PositionRules = DEFAULT_RULES) -> bool:
    """
    Completeness on raw position counts.

    Exactly ``xi_size`` players, exactly one GK, and each position at or
    above its minimum. Maxima are not re-checked here: the store never lets
    a selection exceed them.
    """
    total = sum(counts.get(pos, 0) for pos in Position)
    if total != rules.xi_size:
        return False
    if counts.get(Position.GK, 0) != rules.max_for(Position.GK):
        return False
    return all(counts.get(pos, 0) >= rules.min_for(pos) for pos in Position)


def is_complete(
    selection: Iterable[int],
    squad: Iterable[Player],
    rules: PositionRules = DEFAULT_RULES,
) -> bool:
    """True iff the selection is a playable XI (11, 1 GK, >=3 DEF, >=1 FWD)."""
    return is_complete_counts(position_counts(set(selection), squad), rules)


def counts_tuple(counts: Mapping[Position, int]) -> Tuple[int, int, int, int]:
    """(GK, DEF, MID, FWD) view of a counts mapping."""
    return tuple(counts.get(pos, 0) for pos in Position)
