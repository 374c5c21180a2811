"""Transition functions of the gift exchange state machine.

Every function takes a :class:`GameState` and returns a new one::

    SETUP -> DASHBOARD <-> SPINNING -> RESULT_CONFIRM -> DASHBOARD -> ... -> GAME_OVER

Calling a transition from the wrong phase raises
:class:`InvalidTransitionError`. Rendering, animation and input handling
live outside this module and only ever see the returned states.
"""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Optional, cast

from ..eligibility.engine import DEFAULT_ENGINE, EligibilityEngine
from ..eligibility.records import DrawRecord, Gift
from ..eligibility.selection import pick_gift
from .state import GamePhase, GameState

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 2


class InvalidTransitionError(RuntimeError):
    """Raised when a transition is not allowed from the current phase."""

    def __init__(self, action: str, phase: GamePhase) -> None:
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} while the game is in phase '{phase.value}'")


def _require_phase(state: GameState, action: str, *phases: GamePhase) -> None:
    if state.phase not in phases:
        raise InvalidTransitionError(action, state.phase)


def new_game() -> GameState:
    """Return an empty game in the setup phase."""
    return GameState()


def add_participant(state: GameState, name: str) -> GameState:
    """Add ``name`` to the roster.

    Surrounding whitespace is stripped. Empty and duplicate names raise
    :class:`ValueError`.
    """
    _require_phase(state, "add a participant", GamePhase.SETUP)
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValueError("Participant name must not be empty")
    if cleaned in state.participants:
        raise ValueError(f"Participant '{cleaned}' is already in the game")
    logger.debug(f"Added participant {cleaned}")
    return replace(state, participants=state.participants + (cleaned,))


def remove_participant(state: GameState, name: str) -> GameState:
    """Remove ``name`` from the roster."""
    _require_phase(state, "remove a participant", GamePhase.SETUP)
    if name not in state.participants:
        raise ValueError(f"Participant '{name}' is not in the game")
    logger.debug(f"Removed participant {name}")
    return replace(
        state, participants=tuple(p for p in state.participants if p != name)
    )


def start_game(state: GameState) -> GameState:
    """Create one untaken gift per participant and open the dashboard."""
    _require_phase(state, "start the game", GamePhase.SETUP)
    if len(state.participants) < MIN_PARTICIPANTS:
        raise ValueError(
            f"Need at least {MIN_PARTICIPANTS} participants to start the game"
        )
    logger.info(f"Starting game with {len(state.participants)} participants")
    return replace(
        state,
        phase=GamePhase.DASHBOARD,
        gifts=tuple(Gift(owner=name) for name in state.participants),
        history=(),
        current_spinner=None,
        eligible=(),
        pending=None,
    )


def select_spinner(
    state: GameState,
    name: str,
    *,
    engine: Optional[EligibilityEngine] = None,
) -> GameState:
    """Put ``name`` on the wheel and compute the slices they may land on.

    Raises
    ------
    InvalidSpinnerError
        If ``name`` is not a participant or has already drawn.
    EmptyEligibleSetError
        If no gift can legally be drawn; the game must be reset.
    """
    _require_phase(state, "select a spinner", GamePhase.DASHBOARD)
    engine = engine or DEFAULT_ENGINE
    eligible = engine.require_eligible(
        name, state.participants, state.gifts, state.history
    )
    logger.debug(f"{name} is spinning for {[g.owner for g in eligible]}")
    return replace(
        state,
        phase=GamePhase.SPINNING,
        current_spinner=name,
        eligible=eligible,
        pending=None,
    )


def back_to_dashboard(state: GameState) -> GameState:
    """Leave the wheel before spinning without changing the pool or history."""
    _require_phase(state, "leave the wheel", GamePhase.SPINNING)
    return replace(
        state,
        phase=GamePhase.DASHBOARD,
        current_spinner=None,
        eligible=(),
        pending=None,
    )


def spin(state: GameState, rng: Optional[random.Random] = None) -> GameState:
    """Spin the wheel and hold the chosen gift for confirmation.

    Parameters
    ----------
    state : GameState
        A state in the ``SPINNING`` phase.
    rng : random.Random, optional
        Random generator to use; useful for deterministic tests.
    """
    _require_phase(state, "spin", GamePhase.SPINNING)
    assert state.current_spinner is not None
    selection = pick_gift(state.eligible, rng, spinner=state.current_spinner)
    gift = cast(Gift, selection.gift)
    logger.info(f"{state.current_spinner} landed on {gift.owner}'s gift")
    return replace(state, phase=GamePhase.RESULT_CONFIRM, pending=gift)


def confirm_result(state: GameState) -> GameState:
    """Commit the pending draw.

    The gift is marked taken and a :class:`DrawRecord` appended. The game
    moves to ``GAME_OVER`` once every participant has drawn, otherwise back
    to ``DASHBOARD``.
    """
    _require_phase(state, "confirm a result", GamePhase.RESULT_CONFIRM)
    assert state.current_spinner is not None and state.pending is not None
    spinner, owner = state.current_spinner, state.pending.owner

    gifts = tuple(g.mark_taken() if g.owner == owner else g for g in state.gifts)
    history = state.history + (DrawRecord(spinner=spinner, receiver=owner),)
    confirmed = replace(
        state,
        phase=GamePhase.DASHBOARD,
        gifts=gifts,
        history=history,
        current_spinner=None,
        eligible=(),
        pending=None,
    )
    logger.info(f"{spinner} received {owner}'s gift")

    if not confirmed.remaining_spinners():
        logger.info("Every participant has drawn; game over")
        return replace(confirmed, phase=GamePhase.GAME_OVER)
    return confirmed


def reset_game(state: GameState, *, keep_participants: bool = True) -> GameState:
    """Discard the pool and history and return to setup."""
    participants = state.participants if keep_participants else ()
    logger.info("Resetting game")
    return GameState(participants=participants)


__all__ = [
    "InvalidTransitionError",
    "MIN_PARTICIPANTS",
    "add_participant",
    "back_to_dashboard",
    "confirm_result",
    "new_game",
    "remove_participant",
    "reset_game",
    "select_spinner",
    "spin",
    "start_game",
]
