"""Draw rules for the gift exchange wheel."""

from .engine import (
    DEFAULT_ENGINE,
    EligibilityEngine,
    EligibilityEvaluation,
    compute_eligible,
    remaining_spinners,
)
from .errors import EmptyEligibleSetError, InvalidSpinnerError
from .records import DrawRecord, Gift
from .selection import WheelSelection, pick_gift

__all__ = [
    "DEFAULT_ENGINE",
    "DrawRecord",
    "EligibilityEngine",
    "EligibilityEvaluation",
    "EmptyEligibleSetError",
    "Gift",
    "InvalidSpinnerError",
    "WheelSelection",
    "compute_eligible",
    "pick_gift",
    "remaining_spinners",
]
