"""Configuration helpers for fielding rules and engine settings."""

from .rules import DEFAULT_RULES, FieldingRules, env_seed, get_rules, iter_rules

__all__ = [
    "DEFAULT_RULES",
    "FieldingRules",
    "env_seed",
    "get_rules",
    "iter_rules",
]
