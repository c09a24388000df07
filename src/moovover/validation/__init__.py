"""Validation engine and the rules for each entity."""

from moovover.validation.engine import Rule, UniquenessRule, Validator
from moovover.validation.rules import (
    MOVIE_VALIDATOR,
    MOVIEGOER_VALIDATOR,
    REVIEW_VALIDATOR,
    validator_for,
)

__all__ = [
    "Rule",
    "UniquenessRule",
    "Validator",
    "MOVIE_VALIDATOR",
    "MOVIEGOER_VALIDATOR",
    "REVIEW_VALIDATOR",
    "validator_for",
]
