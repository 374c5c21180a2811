"""Exceptions raised around eligibility computation."""

from __future__ import annotations


class InvalidSpinnerError(ValueError):
    """Raised when a spinner is unknown or has already drawn a gift."""

    def __init__(self, spinner: str, reason: str) -> None:
        self.spinner = spinner
        self.reason = reason
        super().__init__(f"Invalid spinner '{spinner}': {reason}")


class EmptyEligibleSetError(RuntimeError):
    """Raised when a spinner has no legal gift to draw.

    The condition is deterministic for a given game state, so retrying
    without changing the state reproduces it. Callers should surface it and
    require a full game reset.
    """

    def __init__(self, spinner: str) -> None:
        self.spinner = spinner
        super().__init__(
            f"No eligible gifts remain for '{spinner}'; the game state is "
            "inconsistent and must be reset"
        )


__all__ = ["EmptyEligibleSetError", "InvalidSpinnerError"]
