import logging
import random
from typing import Iterable, Optional, cast

from sqlalchemy.orm import Session

from .db.utils import utcnow
from .eligibility.engine import DEFAULT_ENGINE, EligibilityEngine
from .eligibility.errors import InvalidSpinnerError
from .eligibility.selection import pick_gift
from .game.transitions import MIN_PARTICIPANTS
from .models import Game, GameDraw, GameGift, GameParticipant

logger = logging.getLogger(__name__)


def _require_status(game: Game, *statuses: str) -> None:
    if game.status not in statuses:
        raise RuntimeError(
            f"Game {game.id} is {game.status}; expected one of {', '.join(statuses)}"
        )


def create_game(
    session: Session,
    names: Iterable[str],
    label: Optional[str] = None,
) -> Game:
    """Persist a new game in the ``setup`` status with the given roster.

    Parameters
    ----------
    session : Session
        Active SQLAlchemy session.
    names : Iterable[str]
        Participant names in roster order. Surrounding whitespace is stripped.
    label : Optional[str]
        Optional unique label used to look the game up later.

    Returns
    -------
    Game
        The flushed ``Game`` with its participants.

    Raises
    ------
    ValueError
        If a name is empty or duplicated, fewer than two participants are
        given, or ``label`` is already used by another game.
    """
    roster: list[str] = []
    for raw in names:
        name = (raw or "").strip()
        if not name:
            raise ValueError("Participant name must not be empty")
        if name in roster:
            raise ValueError(f"Participant '{name}' is listed more than once")
        roster.append(name)

    if len(roster) < MIN_PARTICIPANTS:
        raise ValueError(f"Need at least {MIN_PARTICIPANTS} participants for a game")
    if label is not None and Game.get_by_label(session, label) is not None:
        raise ValueError(f"A game labelled '{label}' already exists")

    game = Game(label=label)
    for position, name in enumerate(roster):
        game.participants.append(GameParticipant(name=name, position=position))

    session.add(game)
    session.flush()
    logger.info(f"Created game {game.id} with {len(roster)} participants")
    return game


def start_game(session: Session, game: Game) -> Game:
    """Create the gift pool and move the game to ``in_progress``.

    Each participant contributes exactly one untaken gift.
    """
    _require_status(game, "setup")
    if len(game.participants) < MIN_PARTICIPANTS:
        raise ValueError(f"Need at least {MIN_PARTICIPANTS} participants for a game")

    for participant in game.participants:
        session.add(GameGift(game=game, owner=participant))

    game.status = "in_progress"
    game.started_at = utcnow()
    session.flush()
    logger.info(f"Game {game.id} started")
    return game


def eligible_gifts(
    session: Session,
    game: Game,
    spinner_name: str,
    *,
    engine: Optional[EligibilityEngine] = None,
) -> list[GameGift]:
    """Return the gifts ``spinner_name`` may draw, in pool order.

    This function essentially wraps :meth:`EligibilityEngine.evaluate` and
    maps the returned records back onto the persisted gifts.

    Raises
    ------
    InvalidSpinnerError
        If the spinner is not in the game or has already drawn.
    """
    _require_status(game, "in_progress")
    engine = engine or DEFAULT_ENGINE
    state = game.to_state()
    evaluation = engine.evaluate(
        spinner_name, state.participants, state.gifts, state.history
    )
    owners = {gift.owner for gift in evaluation.eligible}
    return [gift for gift in game.gifts if gift.owner.name in owners]


def draw_gift(
    session: Session,
    game: Game,
    spinner_name: str,
    rng: Optional[random.Random] = None,
    *,
    engine: Optional[EligibilityEngine] = None,
) -> GameGift:
    """Spin the wheel for ``spinner_name`` without committing the result.

    Nothing is written; pass the returned gift to :func:`confirm_draw` to
    record it.

    Raises
    ------
    InvalidSpinnerError
        If the spinner is not in the game or has already drawn.
    EmptyEligibleSetError
        If the spinner has no legal gift; the game must be aborted.
    """
    candidates = eligible_gifts(session, game, spinner_name, engine=engine)
    selection = pick_gift(candidates, rng, spinner=spinner_name)
    gift = cast(GameGift, selection.gift)
    logger.debug(f"Game {game.id}: {spinner_name} landed on {gift.owner.name}'s gift")
    return gift


def confirm_draw(
    session: Session,
    game: Game,
    spinner_name: str,
    gift: GameGift,
    *,
    engine: Optional[EligibilityEngine] = None,
) -> GameDraw:
    """Record that ``spinner_name`` received ``gift``.

    The gift must still be eligible for the spinner. Completes the game when
    the last participant has drawn.

    Returns
    -------
    GameDraw
        The flushed draw record.

    Raises
    ------
    InvalidSpinnerError
        If the spinner is not in the game or has already drawn.
    ValueError
        If ``gift`` does not belong to the game or is not eligible.
    """
    if gift.game_id is not None and game.id is not None and gift.game_id != game.id:
        raise ValueError(f"Gift {gift.id} does not belong to game {game.id}")
    allowed = eligible_gifts(session, game, spinner_name, engine=engine)
    if gift not in allowed:
        raise ValueError(
            f"{gift.owner.name}'s gift is not eligible for {spinner_name}"
        )

    spinner = game.participant_by_name(spinner_name)
    if spinner is None:  # pragma: no cover - eligible_gifts already checked
        raise InvalidSpinnerError(spinner_name, "not a participant in this game")

    now = utcnow()
    gift.mark_taken(now)
    draw = GameDraw(
        game=game,
        sequence=len(game.draws) + 1,
        spinner=spinner,
        gift=gift,
        drawn_at=now,
    )
    session.add(draw)
    session.flush()
    logger.info(f"Game {game.id}: {spinner_name} received {gift.owner.name}'s gift")

    if not game.remaining_spinner_names():
        game.status = "completed"
        game.completed_at = now
        session.flush()
        logger.info(f"Game {game.id} completed after {len(game.draws)} draws")
    return draw


def play_out_game(
    session: Session,
    game: Game,
    rng: Optional[random.Random] = None,
    *,
    engine: Optional[EligibilityEngine] = None,
) -> list[GameDraw]:
    """Draw and confirm for every remaining spinner in roster order.

    Raises
    ------
    EmptyEligibleSetError
        If the persisted state was already inconsistent.
    """
    rng = rng or random.Random()
    draws: list[GameDraw] = []
    for name in game.remaining_spinner_names():
        gift = draw_gift(session, game, name, rng, engine=engine)
        draws.append(confirm_draw(session, game, name, gift, engine=engine))
    return draws


def abort_game(session: Session, game: Game) -> Game:
    """Mark a game as aborted.

    Used when the game hit an :class:`EmptyEligibleSetError` or was
    abandoned; aborted games cannot be resumed.
    """
    _require_status(game, "setup", "in_progress")
    game.status = "aborted"
    game.completed_at = utcnow()
    session.flush()
    logger.warning(f"Game {game.id} aborted with {len(game.draws)} draws recorded")
    return game


__all__ = [
    "abort_game",
    "confirm_draw",
    "create_game",
    "draw_gift",
    "eligible_gifts",
    "play_out_game",
    "start_game",
]
