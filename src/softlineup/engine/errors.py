"""Domain errors raised by the lineup engine.

Both kinds are client-correctable: the caller fixes attendance or the roster
and asks again. They subclass ``ValueError`` so generic input handling treats
them as bad input rather than server faults.
"""

from __future__ import annotations

from typing import Optional


class LineupGenerationError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InsufficientPlayers(LineupGenerationError):
    def __init__(self, confirmed: int, required: int):
        super().__init__(
            f"insufficient players: need at least {required} confirmed, have {confirmed}"
        )
        self.confirmed = confirmed
        self.required = required


class CannotAchieveGenderSplit(LineupGenerationError):
    def __init__(
        self,
        males: int,
        females: int,
        *,
        majority: int = 5,
        minority: int = 4,
        inning: Optional[int] = None,
    ):
        where = f" for inning {inning}" if inning is not None else ""
        super().__init__(
            f"cannot achieve {majority}-{minority} gender split{where}: "
            f"{males} males, {females} females available"
        )
        self.males = males
        self.females = females
        self.inning = inning
