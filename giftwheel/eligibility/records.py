"""Value objects shared by the eligibility engine and the game state machine."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Gift:
    """A gift contributed to the pool by ``owner``.

    Attributes
    ----------
    owner : str
        Name of the participant who brought the gift. Never changes.
    taken : bool
        ``True`` once a draw for this gift has been confirmed.
    """

    owner: str
    taken: bool = False

    def mark_taken(self) -> "Gift":
        """Return a copy of this gift flagged as taken."""
        if self.taken:
            raise ValueError(f"Gift owned by '{self.owner}' has already been taken")
        return replace(self, taken=True)


@dataclass(frozen=True)
class DrawRecord:
    """A confirmed draw: ``spinner`` received the gift owned by ``receiver``."""

    spinner: str
    receiver: str


__all__ = ["DrawRecord", "Gift"]
