"""
Markov Chain Model - First order transition probability matrix.
Predicts the spins most likely to follow the last observed outcome.
"""

import numpy as np

import sys
sys.path.insert(0, '.')
from config import MARKOV_MIN_SPINS

from app.ml.outcome import outcome_space, space_index, rank_outcomes


class MarkovChain:
    MIN_HISTORY = MARKOV_MIN_SPINS

    def build_transition_matrix(self, spin_history, american=True):
        """Row-normalized transition frequencies, P(next | current).

        Rows for outcomes that were never followed by anything stay zero.
        Pairs touching an outcome outside the active space are skipped.
        """
        space = outcome_space(american)
        index = space_index(space)
        counts = np.zeros((len(space), len(space)))

        for prev, nxt in zip(spin_history, spin_history[1:]):
            if prev in index and nxt in index:
                counts[index[prev], index[nxt]] += 1

        totals = counts.sum(axis=1, keepdims=True)
        return np.divide(counts, totals, out=np.zeros_like(counts), where=totals > 0)

    def predict(self, spin_history, count=6, american=True):
        """Outcomes seen after the last spin, most frequent successor first."""
        if len(spin_history) < self.MIN_HISTORY:
            return []

        space = outcome_space(american)
        index = space_index(space)
        current = spin_history[-1]
        if current not in index:
            return []

        transitions = self.build_transition_matrix(spin_history, american)
        return rank_outcomes(space, transitions[index[current]], count, positive_only=True)

    def get_top_predictions(self, spin_history, top_n=5, american=True):
        """Top successors of the last spin with their probabilities."""
        predicted = self.predict(spin_history, top_n, american)
        if not predicted:
            return []

        space = outcome_space(american)
        index = space_index(space)
        row = self.build_transition_matrix(spin_history, american)[index[spin_history[-1]]]
        return [
            {'number': o.to_json(), 'probability': round(float(row[index[o]]), 4)}
            for o in predicted
        ]
