"""Engine computing which gifts a spinner may legally draw."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .errors import EmptyEligibleSetError, InvalidSpinnerError
from .records import DrawRecord, Gift

logger = logging.getLogger(__name__)


def remaining_spinners(
    participants: Iterable[str], history: Iterable[DrawRecord]
) -> list[str]:
    """Return participants who have not drawn yet, in roster order."""

    spun = {record.spinner for record in history}
    return [name for name in participants if name not in spun]


@dataclass(frozen=True)
class EligibilityEvaluation:
    """Value object describing a single eligibility computation.

    Attributes
    ----------
    spinner : str
        Participant the evaluation was computed for.
    eligible : tuple[Gift, ...]
        Gifts the spinner may draw. Empty only when the game state was
        already inconsistent.
    candidates : tuple[Gift, ...]
        Untaken gifts not owned by the spinner, before the deadlock check.
    rejected : tuple[Gift, ...]
        Candidates removed because drawing them would strand the last
        remaining participant.
    remaining_spinners : tuple[str, ...]
        Participants who have not drawn yet, including ``spinner``.
    last_person : Optional[str]
        The only participant left after ``spinner`` when exactly two remain.
    """

    spinner: str
    eligible: tuple[Gift, ...]
    candidates: tuple[Gift, ...]
    rejected: tuple[Gift, ...]
    remaining_spinners: tuple[str, ...]
    last_person: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.eligible


class EligibilityEngine:
    """Stateless engine applying the draw rules to a snapshot of the game.

    A gift is eligible when it is untaken, not owned by the spinner and, when
    exactly one participant spins after the current one, drawing it still
    leaves that participant a gift that is not their own. With three or more
    spinners remaining no lookahead is performed.
    """

    def evaluate(
        self,
        spinner: str,
        participants: Sequence[str],
        gifts: Sequence[Gift],
        history: Sequence[DrawRecord],
    ) -> EligibilityEvaluation:
        """Compute the eligible gifts for ``spinner``.

        Parameters
        ----------
        spinner : str
            Participant about to draw. Must belong to ``participants`` and
            must not appear as a spinner in ``history``.
        participants : Sequence[str]
            Full roster fixed at game start.
        gifts : Sequence[Gift]
            Current gift pool with taken flags.
        history : Sequence[DrawRecord]
            All confirmed draws so far.

        Returns
        -------
        EligibilityEvaluation
            Evaluation holding the eligible gifts in pool order together with
            the intermediate candidate and rejection sets.

        Raises
        ------
        InvalidSpinnerError
            If ``spinner`` is not a participant or has already drawn.
        """
        if spinner not in participants:
            raise InvalidSpinnerError(spinner, "not a participant in this game")
        if any(record.spinner == spinner for record in history):
            raise InvalidSpinnerError(spinner, "has already drawn a gift")

        candidates = tuple(g for g in gifts if not g.taken and g.owner != spinner)
        remaining = tuple(remaining_spinners(participants, history))

        if len(remaining) != 2:
            # One spinner left means nobody can be stranded afterwards; three or
            # more are not simulated.
            return EligibilityEvaluation(
                spinner=spinner,
                eligible=candidates,
                candidates=candidates,
                rejected=(),
                remaining_spinners=remaining,
            )

        last_person = next(name for name in remaining if name != spinner)
        available = [g for g in gifts if not g.taken]

        eligible: list[Gift] = []
        rejected: list[Gift] = []
        for gift in candidates:
            remaining_for_last = [g for g in available if g.owner != gift.owner]
            valid_for_last = [g for g in remaining_for_last if g.owner != last_person]
            if not valid_for_last:
                logger.info(
                    f"[Anti-Deadlock] Preventing {spinner} from picking {gift.owner}'s gift."
                )
                rejected.append(gift)
                continue
            eligible.append(gift)

        return EligibilityEvaluation(
            spinner=spinner,
            eligible=tuple(eligible),
            candidates=candidates,
            rejected=tuple(rejected),
            remaining_spinners=remaining,
            last_person=last_person,
        )

    def require_eligible(
        self,
        spinner: str,
        participants: Sequence[str],
        gifts: Sequence[Gift],
        history: Sequence[DrawRecord],
    ) -> tuple[Gift, ...]:
        """Return the eligible gifts or raise when there are none.

        Raises
        ------
        InvalidSpinnerError
            If ``spinner`` is not a participant or has already drawn.
        EmptyEligibleSetError
            If no gift can legally be drawn.
        """
        evaluation = self.evaluate(spinner, participants, gifts, history)
        if evaluation.is_empty:
            logger.error(
                f"No eligible gifts for {spinner}; remaining spinners: "
                f"{list(evaluation.remaining_spinners)}"
            )
            raise EmptyEligibleSetError(spinner)
        return evaluation.eligible


DEFAULT_ENGINE = EligibilityEngine()


def compute_eligible(
    spinner: str,
    participants: Sequence[str],
    gifts: Sequence[Gift],
    history: Sequence[DrawRecord],
) -> list[Gift]:
    """Return the gifts ``spinner`` may draw, in pool order.

    An empty list means the state was already inconsistent; callers must
    treat it as fatal for the current game.
    """

    return list(DEFAULT_ENGINE.evaluate(spinner, participants, gifts, history).eligible)


__all__ = [
    "DEFAULT_ENGINE",
    "EligibilityEngine",
    "EligibilityEvaluation",
    "compute_eligible",
    "remaining_spinners",
]
