# scripts/common/planner_wizard.py
"""
Fixture planner wizard: Setup -> Select(GW ...) -> Review -> Done.

The state is a small tagged value (``WizardState``); moves between states go
through ``transition()``, a table keyed on (step, event). A transition that
is not enabled returns ``None`` and the wizard stays where it is. NEXT out of
a Select step needs a complete XI; JUMP only reaches gameweeks already
passed with NEXT.

Zero Streamlit imports.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from scripts.common.fixture_index import FixtureIndex
from scripts.common.lineup_rules import Player, is_complete
from scripts.common.selection_store import SelectionStore

HORIZON_CHOICES = (2, 3, 4, 5)
DEFAULT_HORIZON = 3


class HorizonUnavailableError(RuntimeError):
    """The next gameweek is unknown, so there is nothing to plan against."""


class Step(Enum):
    SETUP = "setup"
    SELECT = "select"
    REVIEW = "review"
    DONE = "done"


class Event(Enum):
    START = "start"
    NEXT = "next"
    BACK = "back"
    JUMP = "jump"
    EDIT = "edit"
    DONE = "done"


@dataclass(frozen=True)
class WizardState:
    step: Step
    gameweek: Optional[int] = None

    def __str__(self) -> str:
        if self.step is Step.SELECT:
            return f"Select(GW{self.gameweek})"
        return self.step.value.capitalize()


SETUP = WizardState(Step.SETUP)
REVIEW = WizardState(Step.REVIEW)
DONE = WizardState(Step.DONE)


def build_horizon(next_gameweek: Optional[int], length: int) -> Tuple[int, ...]:
    """Contiguous run of ``length`` gameweeks starting at ``next_gameweek``."""
    if next_gameweek is None:
        raise HorizonUnavailableError("unable to determine current gameweek")
    if length not in HORIZON_CHOICES:
        raise ValueError(f"Horizon length must be one of {HORIZON_CHOICES}, got {length}")
    return tuple(range(int(next_gameweek), int(next_gameweek) + length))


def transition(
    state: WizardState,
    event: Event,
    horizon: Tuple[int, ...],
    target: Optional[int] = None,
    complete: bool = False,
    furthest: int = 0,
) -> Optional[WizardState]:
    """
    Next state for ``event``, or ``None`` when the move is not enabled.

    ``complete`` is the completeness of the selection at the current Select
    gameweek; only NEXT looks at it. ``target`` is the gameweek for JUMP/EDIT.
    ``furthest`` is the highest horizon index reached through NEXT; JUMP can
    not go past it, so Review is only reached by passing every gameweek with
    a complete XI.
    """
    if not horizon:
        return None
    step = state.step

    if step is Step.SETUP:
        if event is Event.START:
            return WizardState(Step.SELECT, horizon[0])
        return None

    if step is Step.SELECT:
        idx = horizon.index(state.gameweek)
        if event is Event.NEXT:
            if not complete:
                return None
            if idx == len(horizon) - 1:
                return REVIEW
            return WizardState(Step.SELECT, horizon[idx + 1])
        if event is Event.BACK:
            if idx == 0:
                return SETUP
            return WizardState(Step.SELECT, horizon[idx - 1])
        if event is Event.JUMP and target in horizon and horizon.index(target) <= max(furthest, idx):
            return WizardState(Step.SELECT, target)
        return None

    if step is Step.REVIEW:
        if event is Event.EDIT and target in horizon:
            return WizardState(Step.SELECT, target)
        if event is Event.BACK:
            return WizardState(Step.SELECT, horizon[-1])
        if event is Event.DONE:
            return DONE
        return None

    # DONE is terminal
    return None


class PlanningWizard:
    """
    One planning session: squad, fixtures, horizon, selections and wizard state.

    The horizon is fixed by ``start()``; going back to Setup and starting
    again rebuilds both the horizon and the selection store.
    """

    def __init__(
        self,
        squad: Iterable[Player],
        fixture_index: FixtureIndex,
        next_gameweek: Optional[int],
        starting_eleven: Optional[Iterable[int]] = None,
        horizon_length: int = DEFAULT_HORIZON,
    ):
        if next_gameweek is None:
            raise HorizonUnavailableError("unable to determine current gameweek")
        self.squad: Tuple[Player, ...] = tuple(squad)
        if not self.squad:
            raise ValueError("Cannot plan without a squad")
        self.fixture_index = fixture_index
        self.next_gameweek = int(next_gameweek)
        self.starting_eleven = frozenset(starting_eleven) if starting_eleven else None
        self.horizon_length = horizon_length if horizon_length in HORIZON_CHOICES else DEFAULT_HORIZON
        self.horizon: Tuple[int, ...] = ()
        self.furthest_index = 0
        self.store = SelectionStore(self.squad)
        self.state = SETUP

    # ------------------------------------------------------------------
    # Read-only helpers for the page
    # ------------------------------------------------------------------
    @property
    def step(self) -> Step:
        return self.state.step

    @property
    def active_gameweek(self) -> Optional[int]:
        return self.state.gameweek

    @property
    def finished(self) -> bool:
        return self.state.step is Step.DONE

    def preview_horizon(self, length: Optional[int] = None) -> Tuple[int, ...]:
        return build_horizon(self.next_gameweek, length or self.horizon_length)

    def step_index(self) -> Optional[int]:
        if self.state.step is not Step.SELECT:
            return None
        return self.horizon.index(self.state.gameweek)

    def is_last_gameweek(self) -> bool:
        idx = self.step_index()
        return idx is not None and idx == len(self.horizon) - 1

    def is_complete(self, gameweek: int) -> bool:
        return is_complete(self.store.selected_ids(gameweek), self.squad, self.store.rules)

    def completed_gameweeks(self) -> List[int]:
        return [gw for gw in self.horizon if self.is_complete(gw)]

    def can_next(self) -> bool:
        return self.state.step is Step.SELECT and self.is_complete(self.state.gameweek)

    def can_jump_to(self, gameweek: int) -> bool:
        """Gameweeks up to the furthest one reached with Next are open to the progress bar."""
        return gameweek in self.horizon and self.horizon.index(gameweek) <= self.furthest_index

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    def _fire(self, event: Event, target: Optional[int] = None) -> bool:
        complete = self.can_next() if event is Event.NEXT else False
        new_state = transition(self.state, event, self.horizon, target=target, complete=complete,
                               furthest=self.furthest_index)
        if new_state is None:
            return False
        self.state = new_state
        if new_state.step is Step.SELECT:
            self.furthest_index = max(self.furthest_index, self.horizon.index(new_state.gameweek))
        elif new_state.step is Step.REVIEW:
            self.furthest_index = len(self.horizon) - 1
        return True

    def choose_horizon(self, length: int) -> bool:
        if self.state.step is not Step.SETUP or length not in HORIZON_CHOICES:
            return False
        self.horizon_length = length
        return True

    def start(self) -> bool:
        """Fix the horizon, seed every gameweek with the current XI and enter GW1."""
        if self.state.step is not Step.SETUP:
            return False
        self.horizon = build_horizon(self.next_gameweek, self.horizon_length)
        self.furthest_index = 0
        self.store.seed(self.horizon, self.starting_eleven)
        return self._fire(Event.START)

    def next(self) -> bool:
        return self._fire(Event.NEXT)

    def back(self) -> bool:
        return self._fire(Event.BACK)

    def jump_to(self, gameweek: int) -> bool:
        return self._fire(Event.JUMP, target=gameweek)

    def edit_gameweek(self, gameweek: int) -> bool:
        return self._fire(Event.EDIT, target=gameweek)

    def done(self) -> bool:
        return self._fire(Event.DONE)

    # ------------------------------------------------------------------
    # Mutations on the active gameweek
    # ------------------------------------------------------------------
    def add(self, player_id: int) -> bool:
        if self.state.step is not Step.SELECT:
            return False
        return self.store.add(self.state.gameweek, player_id)

    def remove(self, player_id: int) -> bool:
        if self.state.step is not Step.SELECT:
            return False
        return self.store.remove(self.state.gameweek, player_id)
