"""Random selection of a gift from an eligible set."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from .errors import EmptyEligibleSetError

T = TypeVar("T")


@dataclass(frozen=True)
class WheelSelection:
    """Outcome of a spin.

    Attributes
    ----------
    index : int
        Position of the chosen gift in the eligible sequence, i.e. the wheel
        slice the presentation layer lands on.
    gift : object
        The chosen gift.
    """

    index: int
    gift: object


def pick_gift(
    eligible: Sequence[T],
    rng: Optional[random.Random] = None,
    *,
    spinner: str = "",
) -> WheelSelection:
    """Pick one element of ``eligible`` uniformly at random.

    Parameters
    ----------
    eligible : Sequence
        Gifts the spinner may draw, in wheel order.
    rng : random.Random, optional
        Random generator to use; useful for deterministic tests. If not
        provided, a new non-deterministic generator is used.
    spinner : str, optional
        Name used in the error raised for an empty sequence.

    Raises
    ------
    EmptyEligibleSetError
        If ``eligible`` is empty.
    """

    if not eligible:
        raise EmptyEligibleSetError(spinner)
    rng = rng or random.Random()
    index = rng.randrange(len(eligible))
    return WheelSelection(index=index, gift=eligible[index])


__all__ = ["WheelSelection", "pick_gift"]
