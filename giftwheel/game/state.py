"""Immutable snapshot of a gift exchange game."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..eligibility.engine import remaining_spinners as _remaining_spinners
from ..eligibility.records import DrawRecord, Gift


class GamePhase(str, Enum):
    """Phases a game moves through."""

    SETUP = "setup"
    DASHBOARD = "dashboard"
    SPINNING = "spinning"
    RESULT_CONFIRM = "result_confirm"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GameState:
    """Snapshot of the whole game at one point in time.

    Transition functions in :mod:`giftwheel.game.transitions` never mutate a
    state; they return a new one.

    Attributes
    ----------
    phase : GamePhase
        Current phase.
    participants : tuple[str, ...]
        Roster in the order names were added.
    gifts : tuple[Gift, ...]
        Gift pool, one per participant once the game has started.
    history : tuple[DrawRecord, ...]
        Confirmed draws in the order they happened.
    current_spinner : Optional[str]
        Participant on the wheel during ``SPINNING`` and ``RESULT_CONFIRM``.
    eligible : tuple[Gift, ...]
        Wheel slices computed when the spinner was selected.
    pending : Optional[Gift]
        Gift the wheel landed on, awaiting confirmation.
    """

    phase: GamePhase = GamePhase.SETUP
    participants: tuple[str, ...] = ()
    gifts: tuple[Gift, ...] = ()
    history: tuple[DrawRecord, ...] = ()
    current_spinner: Optional[str] = None
    eligible: tuple[Gift, ...] = ()
    pending: Optional[Gift] = None

    def remaining_spinners(self) -> list[str]:
        """Participants who have not drawn yet, in roster order."""
        return _remaining_spinners(self.participants, self.history)

    @property
    def is_game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER


__all__ = ["GamePhase", "GameState"]
