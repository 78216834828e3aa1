"""
Hot/Cold Analyzer — Blend recent frequency with a "due" expectation.

Hot side: every hit in the last 50 spins counts, later hits more
(weight 1 + i/window). Cold side: numbers that have been absent longer
get a larger expectation, ln(gap + 1), and numbers missing from the
window entirely get the maximum of 5.0.

Final score = 0.4 × frequency + 0.6 × expectation.
"""

import math

import numpy as np

import sys
sys.path.insert(0, '.')
from config import (
    HOT_COLD_MIN_SPINS, HOT_COLD_WINDOW,
    HOT_COLD_FREQUENCY_WEIGHT, HOT_COLD_DUE_WEIGHT, HOT_COLD_UNSEEN_EXPECTATION,
)

from app.ml.outcome import outcome_space, space_index, rank_outcomes


class HotColdAnalyzer:
    """Scores outcomes by recent heat and by how overdue they are."""

    MIN_HISTORY = HOT_COLD_MIN_SPINS

    def get_frequencies(self, spin_history, american=True):
        """Recency-weighted hit counts over the analysis window."""
        space = outcome_space(american)
        index = space_index(space)
        recent = spin_history[-HOT_COLD_WINDOW:]
        window = len(recent)

        frequency = np.zeros(len(space))
        for i, outcome in enumerate(recent):
            if outcome in index:
                frequency[index[outcome]] += 1 + i / window
        return frequency

    def get_expectations(self, spin_history, american=True):
        """Due expectation per outcome, larger the longer it has been absent."""
        space = outcome_space(american)
        index = space_index(space)
        recent = spin_history[-HOT_COLD_WINDOW:]
        window = len(recent)

        last_seen = {}
        for i, outcome in enumerate(recent):
            last_seen[outcome] = i

        expectation = np.full(len(space), HOT_COLD_UNSEEN_EXPECTATION)
        for outcome, i in last_seen.items():
            if outcome in index:
                gap = window - i
                expectation[index[outcome]] = math.log(gap + 1)
        return expectation

    def get_scores(self, spin_history, american=True):
        frequency = self.get_frequencies(spin_history, american)
        expectation = self.get_expectations(spin_history, american)
        return HOT_COLD_FREQUENCY_WEIGHT * frequency + HOT_COLD_DUE_WEIGHT * expectation

    def predict(self, spin_history, count=6, american=True):
        if len(spin_history) < self.MIN_HISTORY:
            return []

        scores = self.get_scores(spin_history, american)
        return rank_outcomes(outcome_space(american), scores, count)
