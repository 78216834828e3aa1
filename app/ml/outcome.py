"""
Outcome Space — valid roulette results and the physical wheel layout.

An Outcome is either a plain number 0-36 or the double-zero pocket.
Double zero is a distinct tagged value: it never compares equal to 0,
and it only belongs to the active space on the American (double-zero) table.
"""

from dataclasses import dataclass

import numpy as np

import sys
sys.path.insert(0, '.')
from config import DOUBLE_ZERO_LABEL, MAX_NUMBER, WHEEL_ORDER


@dataclass(frozen=True)
class Outcome:
    number: int
    double_zero: bool = False

    @property
    def index(self):
        """Stable array index: 0-36 for plain numbers, 37 for double zero."""
        return MAX_NUMBER + 1 if self.double_zero else self.number

    def to_json(self):
        return DOUBLE_ZERO_LABEL if self.double_zero else self.number

    def __str__(self):
        return str(self.to_json())

    def __repr__(self):
        return f"Outcome({self})"


ZERO = Outcome(0)
DOUBLE_ZERO = Outcome(0, double_zero=True)
ZERO_OUTCOMES = frozenset({ZERO, DOUBLE_ZERO})

_PLAIN = [Outcome(n) for n in range(MAX_NUMBER + 1)]


def to_outcome(value):
    """Coerce a raw history entry into an Outcome.

    Accepts Outcome instances, ints 0-36 and the strings '00' / '0'..'36'.
    Anything else returns None so callers can skip it.
    """
    if isinstance(value, Outcome):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        return _PLAIN[int(value)] if 0 <= value <= MAX_NUMBER else None
    if isinstance(value, str):
        value = value.strip()
        if value == DOUBLE_ZERO_LABEL:
            return DOUBLE_ZERO
        if value.isdecimal() and str(int(value)) == value and int(value) <= MAX_NUMBER:
            return _PLAIN[int(value)]
    return None


def to_outcomes(values):
    """Coerce a whole history, keeping positions (malformed entries → None)."""
    return [to_outcome(v) for v in values]


def outcome_space(american=True):
    """Active outcomes in canonical order: 0..36, then 00 when present."""
    space = list(_PLAIN)
    if american:
        space.append(DOUBLE_ZERO)
    return space


_WHEEL = [to_outcome(n) for n in WHEEL_ORDER]


def wheel_order(american=True):
    """Physical adjacency cycle for the active table."""
    if american:
        return list(_WHEEL)
    return [o for o in _WHEEL if o != DOUBLE_ZERO]


def space_index(space):
    """Map Outcome → position in the given space."""
    return {o: i for i, o in enumerate(space)}


def rank_outcomes(space, scores, count=None, positive_only=False):
    """Rank outcomes by score, highest first.

    Ties keep the order of `space`, so results are reproducible.
    """
    scores = np.asarray(scores, dtype=np.float64)
    order = np.argsort(-scores, kind='stable')
    ranked = [space[i] for i in order if not positive_only or scores[i] > 0]
    if count is not None:
        ranked = ranked[:max(count, 0)]
    return ranked
