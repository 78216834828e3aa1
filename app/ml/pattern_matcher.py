"""
Pattern Matcher — Repeated sub-sequence detection.

Takes the last 2, 3, 4 and 5 spins as a "tail" and looks for the same
run earlier in the history. Whatever followed an earlier occurrence is a
candidate for the next spin. When the history offers too few candidates,
the numerical neighbours of the last spin (±1, ±2, ±3) are added, and any
remaining slots are filled at random.
"""

import numpy as np

import sys
sys.path.insert(0, '.')
from config import PATTERN_MIN_SPINS, PATTERN_LENGTHS, NEIGHBOUR_OFFSETS, MAX_NUMBER

from app.ml.outcome import DOUBLE_ZERO, Outcome, outcome_space


class PatternMatcher:
    """Votes for outcomes that followed earlier copies of the latest spins."""

    MIN_HISTORY = PATTERN_MIN_SPINS

    def __init__(self, rng=None):
        # Only the fill step draws from this generator
        self.rng = rng if rng is not None else np.random.default_rng()

    def find_pattern_candidates(self, spin_history, american=True):
        """Outcomes that followed an earlier occurrence of a recent tail.

        For each pattern length L the earlier occurrence must end before the
        tail starts (start positions 0 .. len - 2L).

        Returns:
            list of distinct outcomes in discovery order
        """
        members = set(outcome_space(american))
        n = len(spin_history)
        candidates = {}

        for length in PATTERN_LENGTHS:
            tail = spin_history[-length:]
            for i in range(n - 2 * length + 1):
                if spin_history[i:i + length] != tail:
                    continue
                following = spin_history[i + length]
                if following in members:
                    candidates.setdefault(following, None)

        return list(candidates)

    def get_neighbours(self, outcome):
        """Numerical neighbours of a plain number that stay within 1-36."""
        if not isinstance(outcome, Outcome) or outcome == DOUBLE_ZERO:
            return []
        neighbours = []
        for offset in NEIGHBOUR_OFFSETS:
            num = outcome.number + offset
            if 1 <= num <= MAX_NUMBER:
                neighbours.append(Outcome(num))
        return neighbours

    def predict(self, spin_history, count=6, american=True):
        if len(spin_history) < self.MIN_HISTORY:
            return []

        predictions = dict.fromkeys(self.find_pattern_candidates(spin_history, american))

        if len(predictions) < count:
            for neighbour in self.get_neighbours(spin_history[-1]):
                predictions.setdefault(neighbour, None)

        predictions = list(predictions)
        if len(predictions) < count:
            remaining = [o for o in outcome_space(american) if o not in predictions]
            picks = self.rng.permutation(len(remaining))[:count - len(predictions)]
            predictions.extend(remaining[i] for i in picks)

        return predictions[:max(count, 0)]
