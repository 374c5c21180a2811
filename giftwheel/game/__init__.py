"""State machine driving a gift exchange game."""

from .state import GamePhase, GameState
from .transitions import (
    InvalidTransitionError,
    MIN_PARTICIPANTS,
    add_participant,
    back_to_dashboard,
    confirm_result,
    new_game,
    remove_participant,
    reset_game,
    select_spinner,
    spin,
    start_game,
)

__all__ = [
    "GamePhase",
    "GameState",
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
