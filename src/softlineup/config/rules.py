"""Fielding rules for supported league formats."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple


logger = logging.getLogger(__name__)

_RULES_ENV = "SOFTLINEUP_RULES"
_SEED_ENV = "SOFTLINEUP_SEED"

DEFAULT_RULES = "coed"


@dataclass(frozen=True)
class FieldingRules:
    name: str
    positions: Tuple[str, ...]
    innings: int
    max_innings_per_player: int
    majority_count: int
    minority_count: int
    min_confirmed: int

    @property
    def lineup_size(self) -> int:
        return self.majority_count + self.minority_count

    def valid_inning(self, inning: int) -> bool:
        return 1 <= inning <= self.innings


_FIELDING_RULES: Dict[str, FieldingRules] = {
    "coed": FieldingRules(
        name="coed",
        positions=("C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "Rover"),
        innings=7,
        max_innings_per_player=6,
        majority_count=5,
        minority_count=4,
        min_confirmed=9,
    ),
}


def iter_rules() -> Iterable[FieldingRules]:
    """Return an iterator of all configured rule sets."""

    return _FIELDING_RULES.values()


def get_rules(name: Optional[str] = None) -> FieldingRules:
    """Fetch a rule set by name, raising KeyError if missing.

    When ``name`` is omitted the ``SOFTLINEUP_RULES`` environment variable is
    consulted before falling back to the default format.
    """

    key = (name or os.getenv(_RULES_ENV) or DEFAULT_RULES).lower()
    if key not in _FIELDING_RULES:
        raise KeyError(f"No fielding rules configured for {key!r}")
    return _FIELDING_RULES[key]


def env_seed() -> Optional[int]:
    """Seed for the engine's random source, or None for an unseeded run."""

    raw = os.getenv(_SEED_ENV)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; ignoring", _SEED_ENV, raw)
        return None
